"""Tests for the domain layer."""

import pytest

from refscope.domain import HEAD, RepositoryBranch, RepositoryTag, RepoLocation, path_parts


BRANCH_RESPONSE = {
    "name": "feature/login",
    "commit": {
        "sha": "c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc",
        "url": "https://api.github.com/repos/octocat/Hello-World/commits/c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc",
    },
    "protected": True,
}

TAG_RESPONSE = {
    "name": "v0.1",
    "commit": {
        "sha": "c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc",
        "url": "https://api.github.com/repos/octocat/Hello-World/commits/c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc",
    },
    "zipball_url": "https://github.com/octocat/Hello-World/zipball/v0.1",
    "tarball_url": "https://github.com/octocat/Hello-World/tarball/v0.1",
    "node_id": "MDQ6VXNlcjE=",
}


class TestRepositoryBranch:
    """Tests for RepositoryBranch."""

    def test_from_api_response(self):
        branch = RepositoryBranch.from_api_response(BRANCH_RESPONSE)
        assert branch.name == "feature/login"
        assert branch.commit_sha == BRANCH_RESPONSE["commit"]["sha"]
        assert branch.commit_url == BRANCH_RESPONSE["commit"]["url"]
        assert branch.protected is True

    def test_missing_commit_defaults_to_empty(self):
        branch = RepositoryBranch.from_api_response({"name": "main"})
        assert branch.commit_sha == ""
        assert branch.protected is None

    def test_to_dict_matches_api_shape(self):
        branch = RepositoryBranch.from_api_response(BRANCH_RESPONSE)
        assert branch.to_dict() == BRANCH_RESPONSE

    def test_to_dict_omits_unknown_protection(self):
        assert 'protected' not in RepositoryBranch(name="main").to_dict()

    def test_str(self):
        assert str(RepositoryBranch(name="main")) == "main"


class TestRepositoryTag:
    """Tests for RepositoryTag."""

    def test_round_trip_api_shape(self):
        tag = RepositoryTag.from_api_response(TAG_RESPONSE)
        assert tag.name == "v0.1"
        assert tag.node_id == "MDQ6VXNlcjE="
        assert tag.to_dict() == TAG_RESPONSE

    def test_archive_urls(self):
        tag = RepositoryTag.from_api_response(TAG_RESPONSE)
        assert tag.archive_urls == {
            'zip': TAG_RESPONSE["zipball_url"],
            'tar': TAG_RESPONSE["tarball_url"],
        }

    def test_is_immutable(self):
        tag = RepositoryTag(name="v1")
        with pytest.raises(AttributeError):
            tag.name = "v2"


class TestPathParts:
    """Tests for URL path splitting."""

    def test_splits_non_empty_segments(self):
        assert path_parts("https://github.com/conwnet/github1s/tree/master/src") == [
            'conwnet', 'github1s', 'tree', 'master', 'src']

    def test_ignores_repeated_and_trailing_slashes(self):
        assert path_parts("https://github.com//a//b/") == ['a', 'b']

    def test_ignores_query_and_fragment(self):
        assert path_parts("https://github.com/a/b/tree/main?x=1#L3") == ['a', 'b', 'tree', 'main']

    def test_decodes_percent_escapes(self):
        assert path_parts("https://github.com/a/b/tree/fix%20it") == ['a', 'b', 'tree', 'fix it']

    def test_empty_url(self):
        assert path_parts("") == []


class TestRepoLocation:
    """Tests for RepoLocation."""

    def test_parse_full_location(self):
        location = RepoLocation.parse("https://github.com/ownerX/repoY/blob/main/src/file.ts")
        assert location.owner == "ownerX"
        assert location.repo == "repoY"
        assert location.kind == "blob"
        assert location.ref_segment == "main"

    def test_landing_page_uses_defaults(self):
        location = RepoLocation.parse("https://github1s.com/")
        assert (location.owner, location.repo) == ("conwnet", "github1s")
        assert location.ref_segment is None

    def test_owner_only_defaults_repo(self):
        location = RepoLocation.parse("https://github.com/someone", "o", "r")
        assert (location.owner, location.repo) == ("someone", "r")

    def test_kind_is_case_insensitive(self):
        location = RepoLocation.parse("https://github.com/a/b/TREE/dev")
        assert location.kind == "tree"
        assert location.ref_segment == "dev"

    def test_no_ref_for_other_kinds(self):
        assert RepoLocation.parse("https://github.com/a/b/commits/main").ref_segment is None

    def test_no_ref_when_segment_missing(self):
        assert RepoLocation.parse("https://github.com/a/b/tree").ref_segment is None

    def test_with_ref_drops_file_path(self):
        location = RepoLocation.parse("https://host/ownerX/repoY/tree/main/src/file.ts")
        assert location.with_ref("v2.0") == "https://host/ownerX/repoY/tree/v2.0"

    def test_with_ref_keeps_slashes_query_and_fragment(self):
        location = RepoLocation.parse("https://github.com/a/b/blob/main/x.py?plain=1#L2")
        assert location.with_ref("feature/a") == "https://github.com/a/b/tree/feature/a?plain=1#L2"

    def test_with_ref_head(self):
        location = RepoLocation.parse("https://github.com/a/b")
        assert location.with_ref(HEAD) == "https://github.com/a/b/tree/HEAD"

    def test_to_dict(self):
        location = RepoLocation.parse("https://github.com/a/b/tree/main")
        assert location.to_dict() == {
            'url': "https://github.com/a/b/tree/main",
            'owner': 'a',
            'repo': 'b',
            'kind': 'tree',
        }
