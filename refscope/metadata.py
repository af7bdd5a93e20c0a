"""
Cached branch and tag lists for the repository being browsed.

A RepositoryMetadataStore covers exactly one repository at a time: the
branch list, the tag list and the current ref. Nothing is refreshed
behind the caller's back; lists are fetched on first use and again only
when asked with ``force_update=True``. Moving to another repository
means invalidating the store (see RefSession.switch_repository).
"""

import logging
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from .domain import RepoLocation, RepositoryBranch, RepositoryTag
from .domain.location import DEFAULT_OWNER, DEFAULT_REPO
from .infra.host import LocationProvider, RefLister
from .reuse import reusable

logger = logging.getLogger(__name__)

T = TypeVar('T', RepositoryBranch, RepositoryTag)

Fetch = Callable[[str, str], Awaitable[Sequence[T]]]


class RefListCache(Generic[T]):
    """
    One cached ref list (branches or tags).

    Concurrent ``get`` calls with the same ``force_update`` share one
    remote fetch, unless the cache was invalidated in between.
    """

    def __init__(
        self,
        kind: str,
        fetch: Fetch,
        location: LocationProvider,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ):
        self.kind = kind
        self._fetch = fetch
        self._location = location
        self.default_owner = default_owner
        self.default_repo = default_repo
        self._items: Optional[List[T]] = None
        # Bumped by every fetch and by invalidate; only the latest fetch may store
        self._generation = 0
        # Bumped by invalidate only; calls from different epochs never share a fetch
        self.epoch = 0

    @property
    def items(self) -> Optional[List[T]]:
        """The cached list, or None if nothing has been fetched yet."""
        return self._items

    @property
    def names(self) -> List[str]:
        return [item.name for item in self._items or ()]

    async def get(self, force_update: bool = False) -> List[T]:
        """
        Return the cached list, fetching it when empty or when forced.

        Remote errors propagate and leave the cache untouched, so the
        next call retries.
        """
        return await self._load(force_update, self.epoch)

    @reusable
    async def _load(self, force_update: bool, epoch: int) -> List[T]:
        if self._items and not force_update:
            logger.debug(f"Using {len(self._items)} cached {self.kind}")
            return self._items

        self._generation += 1
        generation = self._generation

        url = await self._location.get_browser_url()
        location = RepoLocation.parse(url, self.default_owner, self.default_repo)
        items = list(await self._fetch(location.owner, location.repo))
        logger.debug(f"Fetched {len(items)} {self.kind} for {location.owner}/{location.repo}")

        if generation == self._generation:
            self._items = items
        else:
            logger.debug(f"Not caching {self.kind} from a superseded fetch")
        return items

    def invalidate(self) -> None:
        self.epoch += 1
        self._generation += 1
        self._items = None


class RepositoryMetadataStore:
    """
    Per-repository cache of branches, tags and the current ref.

    ``current_ref`` is None until the first resolution or explicit ref
    change; after that it always holds the latest one. A resolution that
    was overtaken (by a later resolution, an explicit change or an
    invalidate) does not overwrite it when it finishes.
    """

    def __init__(
        self,
        location: LocationProvider,
        lister: RefLister,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ):
        self.branches: RefListCache[RepositoryBranch] = RefListCache(
            'branches', lister.list_branches, location, default_owner, default_repo)
        self.tags: RefListCache[RepositoryTag] = RefListCache(
            'tags', lister.list_tags, location, default_owner, default_repo)
        self._current_ref: Optional[str] = None
        self._ref_generation = 0
        self.epoch = 0

    @property
    def current_ref(self) -> Optional[str]:
        return self._current_ref

    @current_ref.setter
    def current_ref(self, ref: Optional[str]) -> None:
        self._ref_generation += 1
        self._current_ref = ref

    def begin_resolution(self) -> int:
        """Start a resolution; pass the returned token to commit_ref."""
        self._ref_generation += 1
        return self._ref_generation

    def commit_ref(self, ref: str, generation: int) -> bool:
        """Store a resolved ref unless something newer happened since it began."""
        if generation != self._ref_generation:
            logger.debug(f"Not caching superseded resolution {ref!r}")
            return False
        self._current_ref = ref
        return True

    def invalidate(self) -> None:
        """Forget branches, tags and the current ref."""
        self.epoch += 1
        self.branches.invalidate()
        self.tags.invalidate()
        self.current_ref = None
