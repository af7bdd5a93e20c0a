"""
refscope - Resolve the branch, tag or commit a repository URL is browsing.

A URL such as ``https://github.com/owner/repo/tree/feature/login/src/app.py``
does not say where the ref ends: ``feature``, ``feature/login`` and
``feature/login/src`` could all be refs. refscope fetches the branch and
tag lists once, caches them, and walks the path segments against them.

Quick Start:
    import asyncio
    from refscope import RefSession, MemoryBrowser, GitHubRefLister

    browser = MemoryBrowser("https://github.com/conwnet/github1s/tree/master/src")
    session = RefSession(browser, browser, GitHubRefLister())

    asyncio.run(session.get_current_ref())          # 'master'
    asyncio.run(session.change_current_ref("v1.0")) # browser.url now .../tree/v1.0

Domain Objects:
    RepositoryBranch - Branch as listed by GitHub
    RepositoryTag - Tag as listed by GitHub
    RepoLocation - owner/repo/path segments of a browser URL

Components:
    RepositoryMetadataStore - Cached branch/tag lists and current ref
    RefResolver - Greedy branch/tag/commit resolution
    RefMutator - Switching the current ref
    reusable - Sharing in-flight async calls
"""

__version__ = "0.3.0"

from .domain import HEAD, RepositoryBranch, RepositoryTag, RepoLocation

from .reuse import reusable, InflightMap
from .metadata import RefListCache, RepositoryMetadataStore
from .resolver import RefResolver, find_matched_ref
from .mutator import RefMutator, update_ref_in_url
from .session import RefSession

from .infra import GitHubClient, GitHubRefLister, MemoryBrowser

from .config import load_config, save_config

__all__ = [
    "__version__",
    "HEAD",
    "RepositoryBranch",
    "RepositoryTag",
    "RepoLocation",
    "reusable",
    "InflightMap",
    "RefListCache",
    "RepositoryMetadataStore",
    "RefResolver",
    "find_matched_ref",
    "RefMutator",
    "update_ref_in_url",
    "RefSession",
    "GitHubClient",
    "GitHubRefLister",
    "MemoryBrowser",
    "load_config",
    "save_config",
]
