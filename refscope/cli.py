#!/usr/bin/env python3

import click

from refscope.commands.refs import resolve_handler, branches_handler, tags_handler, switch_handler
from refscope.commands.config import config_cmd


@click.group()
@click.version_option(package_name="refscope")
def cli():
    """refscope - Work out which branch, tag or commit a repository URL points at.

    URLs look like https://github.com/{owner}/{repo}/tree/{ref}/{path};
    refs may contain slashes, so branch and tag lists are fetched from
    GitHub to find where the ref ends.
    """
    pass


cli.add_command(resolve_handler)
cli.add_command(branches_handler)
cli.add_command(tags_handler)
cli.add_command(switch_handler)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
