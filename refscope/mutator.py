"""
Switching the current ref.
"""

import logging

from .domain import RepoLocation
from .domain.location import DEFAULT_OWNER, DEFAULT_REPO
from .infra.host import (
    CommandExecutor,
    LocationProvider,
    REPLACE_BROWSER_URL,
    CLOSE_ALL_VIEWS,
    REFRESH_FILE_TREE,
)
from .metadata import RepositoryMetadataStore

logger = logging.getLogger(__name__)


def update_ref_in_url(
    url: str,
    new_ref: str,
    default_owner: str = DEFAULT_OWNER,
    default_repo: str = DEFAULT_REPO,
) -> str:
    """Point ``url`` at the root of its repository under ``new_ref``."""
    return RepoLocation.parse(url, default_owner, default_repo).with_ref(new_ref)


class RefMutator:
    """
    Moves the browser to another ref.

    The new ref is trusted as given; it is not checked against the known
    branches or tags.
    """

    def __init__(
        self,
        location: LocationProvider,
        commands: CommandExecutor,
        store: RepositoryMetadataStore,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ):
        self._location = location
        self._commands = commands
        self.store = store
        self.default_owner = default_owner
        self.default_repo = default_repo

    async def change_current_ref(self, new_ref: str) -> str:
        url = await self._location.get_browser_url()
        new_url = update_ref_in_url(url, new_ref, self.default_owner, self.default_repo)

        self._commands.execute(REPLACE_BROWSER_URL, new_url)
        # Open files belong to the old ref
        self._commands.execute(CLOSE_ALL_VIEWS)
        self.store.current_ref = new_ref
        self._commands.execute(REFRESH_FILE_TREE)

        logger.info(f"Switched to {new_ref}")
        return new_ref
