"""
RefSession ties the ref caches to one browsing context.

Example:
    browser = MemoryBrowser("https://github.com/conwnet/github1s/tree/master/src")
    session = RefSession(browser, browser, GitHubRefLister())
    ref = await session.get_current_ref()          # 'master'
    await session.change_current_ref("v1.0.0")
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .domain import RepositoryBranch, RepositoryTag
from .domain.location import DEFAULT_OWNER, DEFAULT_REPO
from .infra.github_client import GitHubClient
from .infra.host import CommandExecutor, LocationProvider, RefLister, REPLACE_BROWSER_URL
from .infra.ref_lister import GitHubRefLister
from .metadata import RepositoryMetadataStore
from .mutator import RefMutator
from .resolver import RefResolver

logger = logging.getLogger(__name__)


class RefSession:
    """
    Branches, tags and current ref for the repository in one browser.

    All state lives on the session's store; two sessions never share
    caches or in-flight requests.
    """

    def __init__(
        self,
        location: LocationProvider,
        commands: CommandExecutor,
        lister: RefLister,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ):
        self.location = location
        self.commands = commands
        self.store = RepositoryMetadataStore(location, lister, default_owner, default_repo)
        self.resolver = RefResolver(location, self.store, default_owner, default_repo)
        self.mutator = RefMutator(location, commands, self.store, default_owner, default_repo)

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        location: LocationProvider,
        commands: CommandExecutor,
        client: Optional[GitHubClient] = None,
    ) -> 'RefSession':
        """Build a session using the ``github`` and ``defaults`` config sections."""
        defaults = config.get('defaults', {})
        lister = GitHubRefLister(client or GitHubClient.from_config(config))
        return cls(
            location,
            commands,
            lister,
            default_owner=defaults.get('owner') or DEFAULT_OWNER,
            default_repo=defaults.get('repo') or DEFAULT_REPO,
        )

    @property
    def current_ref(self) -> Optional[str]:
        """Last resolved or switched-to ref, without resolving."""
        return self.store.current_ref

    async def get_repository_branches(self, force_update: bool = False) -> List[RepositoryBranch]:
        return await self.store.branches.get(force_update)

    async def get_repository_tags(self, force_update: bool = False) -> List[RepositoryTag]:
        return await self.store.tags.get(force_update)

    async def get_current_ref(self, force_update: bool = False) -> str:
        return await self.resolver.get_current_ref(force_update)

    async def change_current_ref(self, new_ref: str) -> str:
        return await self.mutator.change_current_ref(new_ref)

    async def refresh(self) -> str:
        """Refetch branches and tags, then resolve the current ref again."""
        await asyncio.gather(
            self.store.branches.get(True),
            self.store.tags.get(True),
        )
        return await self.resolver.get_current_ref(True)

    async def switch_repository(self, url: str) -> str:
        """
        Navigate to ``url`` and rebuild every cache for its repository.

        Returns the ref resolved at the new location.
        """
        logger.info(f"Switching repository to {url}")
        self.store.invalidate()
        self.commands.execute(REPLACE_BROWSER_URL, url)
        return await self.refresh()
