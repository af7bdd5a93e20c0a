"""Tests for switching the current ref."""

import asyncio

from refscope.infra import CLOSE_ALL_VIEWS, REFRESH_FILE_TREE, REPLACE_BROWSER_URL
from refscope.mutator import update_ref_in_url


class TestUpdateRefInUrl:
    """Tests for URL rewriting."""

    def test_drops_file_path(self):
        assert update_ref_in_url("https://host/ownerX/repoY/tree/main/src/file.ts", "v2.0") == \
            "https://host/ownerX/repoY/tree/v2.0"

    def test_blob_becomes_tree(self):
        assert update_ref_in_url("https://github.com/a/b/blob/dev/README.md", "main") == \
            "https://github.com/a/b/tree/main"

    def test_repository_root(self):
        assert update_ref_in_url("https://github.com/a/b", "feature/x") == \
            "https://github.com/a/b/tree/feature/x"

    def test_landing_page_uses_defaults(self):
        assert update_ref_in_url("https://github1s.com/", "master") == \
            "https://github1s.com/conwnet/github1s/tree/master"


class TestChangeCurrentRef:
    """Tests for RefMutator.change_current_ref through a session."""

    def test_rewrites_location_and_updates_ref(self, make_session):
        browser, lister, session = make_session(
            "https://host/ownerX/repoY/tree/main/src/file.ts", branches=['main'])

        result = asyncio.run(session.change_current_ref("v2.0"))

        assert result == "v2.0"
        assert browser.url == "https://host/ownerX/repoY/tree/v2.0"
        assert session.current_ref == "v2.0"
        assert browser.count(CLOSE_ALL_VIEWS) == 1
        assert browser.count(REFRESH_FILE_TREE) == 1

    def test_commands_run_in_order(self, make_session):
        browser, _, session = make_session("https://github.com/a/b/tree/main")

        asyncio.run(session.change_current_ref("dev"))

        assert browser.executed == [
            (REPLACE_BROWSER_URL, ("https://github.com/a/b/tree/dev",)),
            (CLOSE_ALL_VIEWS, ()),
            (REFRESH_FILE_TREE, ()),
        ]

    def test_does_not_consult_ref_lists(self, make_session):
        _, lister, session = make_session("https://github.com/a/b/tree/main", branches=['main'])

        asyncio.run(session.change_current_ref("no-such-branch"))

        assert lister.calls == []
        assert session.current_ref == "no-such-branch"

    def test_changed_ref_is_served_from_cache(self, make_session):
        _, lister, session = make_session("https://github.com/a/b/tree/main", branches=['main'])

        async def run():
            await session.change_current_ref("v1.0")
            return await session.get_current_ref()

        assert asyncio.run(run()) == "v1.0"
        assert lister.calls == []

    def test_overrides_previous_resolution(self, make_session):
        _, _, session = make_session("https://github.com/a/b/tree/main/x", branches=['main'])

        async def run():
            await session.get_current_ref()
            await session.change_current_ref("dev")
            return await session.get_current_ref()

        assert asyncio.run(run()) == "dev"

    def test_change_during_resolution_is_not_overwritten(self, make_session):
        _, lister, session = make_session(
            "https://github.com/a/b/tree/v1/src", branches=['main'], tags=['v1'])

        async def run():
            lister.tags_gate = asyncio.Event()
            pending = asyncio.ensure_future(session.get_current_ref())
            await asyncio.sleep(0.01)
            await session.change_current_ref("dev")
            lister.tags_gate.set()
            resolved = await pending
            return resolved, session.current_ref

        resolved, current = asyncio.run(run())
        assert resolved == "v1"
        assert current == "dev"
