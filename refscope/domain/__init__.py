"""
Domain layer for refscope.

Contains pure domain objects with no I/O or side effects:
- RepositoryBranch: A named movable pointer into history
- RepositoryTag: A named (conventionally immutable) pointer into history
- RepoLocation: The owner/repo/ref pieces of a browser URL path

These objects are immutable and provide serialization methods for
JSONL output.
"""

from .ref import HEAD, RepositoryBranch, RepositoryTag
from .location import RepoLocation, path_parts

__all__ = [
    'HEAD',
    'RepositoryBranch',
    'RepositoryTag',
    'RepoLocation',
    'path_parts',
]
