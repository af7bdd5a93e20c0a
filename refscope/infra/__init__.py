"""
Infrastructure layer for refscope.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access (blocking, requests)
- GitHubRefLister: async branch/tag listing on top of GitHubClient
- MemoryBrowser: in-memory browser location and host command sink

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import GitHubClient, RateLimitStatus
from .ref_lister import GitHubRefLister
from .host import (
    LocationProvider,
    CommandExecutor,
    RefLister,
    MemoryBrowser,
    REPLACE_BROWSER_URL,
    CLOSE_ALL_VIEWS,
    REFRESH_FILE_TREE,
)

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
    'GitHubRefLister',
    'LocationProvider',
    'CommandExecutor',
    'RefLister',
    'MemoryBrowser',
    'REPLACE_BROWSER_URL',
    'CLOSE_ALL_VIEWS',
    'REFRESH_FILE_TREE',
]
