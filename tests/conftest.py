"""Shared fixtures: an in-memory ref lister and sessions built on it."""

import asyncio
from typing import List, Optional

import pytest

from refscope.domain import RepositoryBranch, RepositoryTag
from refscope.infra import MemoryBrowser
from refscope.session import RefSession


class FakeLister:
    """
    Ref lister serving fixed branch/tag names.

    Every call is recorded in ``calls`` as (kind, owner, repo). Setting
    ``tags_gate`` or ``branches_gate`` to an asyncio.Event holds listings
    started while it is set until the event fires. A held branch listing
    returns the names it saw when it started.
    """

    def __init__(self, branches=(), tags=(), branch_error=None, tag_error=None):
        self.branches: List[RepositoryBranch] = [
            RepositoryBranch(name=name, commit_sha=f"sha-{name}") for name in branches]
        self.tags: List[RepositoryTag] = [
            RepositoryTag(name=name, commit_sha=f"sha-{name}") for name in tags]
        self.branch_error = branch_error
        self.tag_error = tag_error
        self.tags_gate: Optional[asyncio.Event] = None
        self.branches_gate: Optional[asyncio.Event] = None
        self.calls = []

    def count(self, kind):
        return sum(1 for call in self.calls if call[0] == kind)

    async def list_branches(self, owner, repo):
        self.calls.append(('branches', owner, repo))
        branches = list(self.branches)
        gate = self.branches_gate
        if gate is not None:
            await gate.wait()
        await asyncio.sleep(0)
        if self.branch_error is not None:
            raise self.branch_error
        return branches

    async def list_tags(self, owner, repo):
        self.calls.append(('tags', owner, repo))
        if self.tags_gate is not None:
            await self.tags_gate.wait()
        await asyncio.sleep(0)
        if self.tag_error is not None:
            raise self.tag_error
        return list(self.tags)


@pytest.fixture
def make_lister():
    return FakeLister


@pytest.fixture
def make_session():
    """Build (browser, lister, session) for a URL and branch/tag names."""
    def factory(url, branches=(), tags=(), **kwargs):
        browser = MemoryBrowser(url)
        lister = FakeLister(branches, tags, **kwargs)
        session = RefSession(browser, browser, lister)
        return browser, lister, session
    return factory
