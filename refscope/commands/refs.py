"""
Ref commands: resolve, branches, tags and switch.

Each command works on a URL the way a browser tab would: the URL is the
location, and ``switch`` prints the location the tab would move to.
"""

import click

from ..cli_utils import standard_command, pretty_option
from ..domain import RepoLocation
from ..domain.location import DEFAULT_OWNER, DEFAULT_REPO
from ..infra import MemoryBrowser
from ..session import RefSession


def _session(config, url):
    browser = MemoryBrowser(url)
    return browser, RefSession.from_config(config, browser, browser)


def _location(config, url):
    defaults = config.get('defaults', {})
    return RepoLocation.parse(
        url,
        defaults.get('owner') or DEFAULT_OWNER,
        defaults.get('repo') or DEFAULT_REPO,
    )


@click.command(name='resolve')
@click.argument('url')
@standard_command
async def resolve_handler(url, config):
    """Print the ref (branch, tag, commit or HEAD) a URL points at.

    \b
    Examples:
        refscope resolve https://github.com/conwnet/github1s/tree/master/src
        refscope resolve https://github.com/owner/repo/blob/feature/login/app.py
    """
    _, session = _session(config, url)
    ref = await session.get_current_ref()
    result = _location(config, url).to_dict()
    result['ref'] = ref
    return result


@click.command(name='branches')
@click.argument('url')
@pretty_option
@standard_command
async def branches_handler(url, pretty, config):
    """List the branches of the repository a URL points at."""
    _, session = _session(config, url)
    return await session.get_repository_branches()


@click.command(name='tags')
@click.argument('url')
@pretty_option
@standard_command
async def tags_handler(url, pretty, config):
    """List the tags of the repository a URL points at."""
    _, session = _session(config, url)
    return await session.get_repository_tags()


@click.command(name='switch')
@click.argument('url')
@click.argument('ref')
@standard_command
async def switch_handler(url, ref, config):
    """Print the URL of the repository root under REF.

    The ref is not checked against the repository's branches or tags.
    """
    browser, session = _session(config, url)
    new_ref = await session.change_current_ref(ref)
    return {'url': browser.url, 'ref': new_ref}
