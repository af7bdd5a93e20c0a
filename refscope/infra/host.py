"""
Host-side collaborators for refscope.

The resolver and mutator never talk to a browser or editor directly.
They read the current location through a LocationProvider and fire
commands (replace the URL, close views, refresh the file tree) through a
CommandExecutor. MemoryBrowser implements both in memory, which is what
the CLI and the tests use.
"""

import logging
from typing import Any, List, Protocol, Sequence, Tuple, runtime_checkable

from ..domain import RepositoryBranch, RepositoryTag

logger = logging.getLogger(__name__)

# Command identifiers understood by the host
REPLACE_BROWSER_URL = "refscope.replace-browser-url"
CLOSE_ALL_VIEWS = "workbench.action.closeAllGroups"
REFRESH_FILE_TREE = "workbench.files.action.refreshFilesExplorer"


@runtime_checkable
class LocationProvider(Protocol):
    async def get_browser_url(self) -> str:
        ...


@runtime_checkable
class CommandExecutor(Protocol):
    def execute(self, command: str, *args: Any) -> None:
        ...


@runtime_checkable
class RefLister(Protocol):
    async def list_branches(self, owner: str, repo: str) -> Sequence[RepositoryBranch]:
        ...

    async def list_tags(self, owner: str, repo: str) -> Sequence[RepositoryTag]:
        ...


class MemoryBrowser:
    """
    A browser location held in memory.

    ``replace-browser-url`` updates the location; every executed command,
    known or not, is recorded in ``executed`` in call order.
    """

    def __init__(self, url: str = ""):
        self.url = url
        self.executed: List[Tuple[str, Tuple[Any, ...]]] = []

    async def get_browser_url(self) -> str:
        return self.url

    def execute(self, command: str, *args: Any) -> None:
        self.executed.append((command, args))
        if command == REPLACE_BROWSER_URL:
            self.url = args[0]
            logger.debug(f"Browser location replaced with {self.url}")
        elif command not in (CLOSE_ALL_VIEWS, REFRESH_FILE_TREE):
            logger.debug(f"Ignoring unknown host command {command}")

    def count(self, command: str) -> int:
        """How many times ``command`` has been executed."""
        return sum(1 for name, _ in self.executed if name == command)
