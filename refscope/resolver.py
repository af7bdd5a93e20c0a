"""
Current ref resolution.

Browser URLs look like ``/{owner}/{repo}/tree/{ref}/{path}``, but a ref
may contain slashes (``feature/login``), so the URL alone does not say
where the ref ends and the file path begins. The resolver walks the path
segments against the known branch names, then the tag names, and when
neither matches assumes the first segment is a commit hash.
"""

import asyncio
import logging
from typing import Iterable, Optional, Sequence

from .domain import HEAD, RepoLocation
from .domain.location import DEFAULT_OWNER, DEFAULT_REPO
from .infra.host import LocationProvider
from .metadata import RepositoryMetadataStore
from .reuse import reusable

logger = logging.getLogger(__name__)

# Index of the first ref segment in /{owner}/{repo}/{tree|blob}/{ref}
REF_START = 3


def find_matched_ref(names: Iterable[str], parts: Sequence[str], start: int = REF_START) -> Optional[str]:
    """
    Greedily match path segments against ref names.

    Starting from ``parts[start]``, the candidate grows one segment at a
    time (``feature`` -> ``feature/a`` -> ``feature/a/b``) for as long as
    some name starts with it. Every candidate that is itself a name is
    remembered and the longest one wins. The walk stops when no name
    shares the candidate prefix or the path runs out.

    This is a prefix heuristic: a name that shares leading characters
    with the path but continues differently (``release/v1-rc`` for a
    ``release/v1/src`` path) keeps the walk going and can leave a
    shorter real name unmatched.

    Returns:
        The matched ref name, or None
    """
    names = list(names)
    if start >= len(parts) or not names:
        return None
    known = set(names)

    matched = None
    index = start
    candidate = parts[index]
    while any(name.startswith(candidate) for name in names):
        if candidate in known:
            matched = candidate
        index += 1
        if index >= len(parts):
            break
        candidate = f"{candidate}/{parts[index]}"
    return matched


def _discard_result(task: asyncio.Future) -> None:
    """Consume the outcome of a fetch nobody ended up waiting for."""
    def done(finished: asyncio.Future) -> None:
        if not finished.cancelled() and finished.exception() is not None:
            logger.debug(f"Unused tag fetch failed: {finished.exception()}")
    task.add_done_callback(done)


class RefResolver:
    """Works out which ref the current browser location points at."""

    def __init__(
        self,
        location: LocationProvider,
        store: RepositoryMetadataStore,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ):
        self._location = location
        self.store = store
        self.default_owner = default_owner
        self.default_repo = default_repo

    async def get_current_ref(self, force_update: bool = False) -> str:
        """
        Resolve the current ref: a branch name, a tag name, HEAD or a commit hash.

        The result is cached in the store until a forced resolution or an
        explicit ref change. Branch and tag lists are requested together,
        but the tag list is only waited for when no branch matches. A
        resolution started before the store was invalidated is never
        shared with one started after.
        """
        return await self._resolve(force_update, self.store.epoch)

    @reusable
    async def _resolve(self, force_update: bool, epoch: int) -> str:
        if self.store.current_ref and not force_update:
            return self.store.current_ref

        generation = self.store.begin_resolution()
        url = await self._location.get_browser_url()
        location = RepoLocation.parse(url, self.default_owner, self.default_repo)
        candidate = location.ref_segment

        # No ref in the URL means the default branch
        if not candidate or candidate.upper() == HEAD:
            self.store.commit_ref(HEAD, generation)
            return HEAD

        branches = asyncio.ensure_future(self.store.branches.get())
        tags = asyncio.ensure_future(self.store.tags.get())

        try:
            branch_names = [branch.name for branch in await branches]
        except Exception:
            _discard_result(tags)
            raise

        ref = find_matched_ref(branch_names, location.parts)
        if ref is not None:
            _discard_result(tags)
            logger.debug(f"Matched branch {ref!r} in {url}")
        else:
            tag_names = [tag.name for tag in await tags]
            ref = find_matched_ref(tag_names, location.parts)
            if ref is not None:
                logger.debug(f"Matched tag {ref!r} in {url}")
            else:
                # Neither a branch nor a tag; assume a commit hash
                ref = candidate
                logger.debug(f"No branch or tag matches {url}, using {ref!r} as a commit")

        self.store.commit_ref(ref, generation)
        return ref
