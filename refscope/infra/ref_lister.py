"""
Async ref listing backed by GitHubClient.

GitHubClient is blocking (requests); each listing runs in a worker
thread so the event loop keeps serving other callers meanwhile.
"""

import asyncio
from typing import List, Optional

from ..domain import RepositoryBranch, RepositoryTag
from .github_client import GitHubClient


class GitHubRefLister:
    """Lists branches and tags of a GitHub repository as domain objects."""

    def __init__(self, client: Optional[GitHubClient] = None):
        self.client = client or GitHubClient()

    async def list_branches(self, owner: str, repo: str) -> List[RepositoryBranch]:
        data = await asyncio.to_thread(self.client.list_branches, owner, repo)
        return [RepositoryBranch.from_api_response(item) for item in data]

    async def list_tags(self, owner: str, repo: str) -> List[RepositoryTag]:
        data = await asyncio.to_thread(self.client.list_tags, owner, repo)
        return [RepositoryTag.from_api_response(item) for item in data]
