"""
Ref domain objects for refscope.

Branches and tags are what the GitHub API lists for a repository. Both
carry the commit they point at; tags also carry archive download URLs.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any

# Symbolic ref meaning "the repository's default branch, unresolved"
HEAD = "HEAD"


def _commit_fields(data: Dict[str, Any]) -> Dict[str, str]:
    commit = data.get('commit') or {}
    if not isinstance(commit, dict):
        commit = {}
    return {
        'commit_sha': commit.get('sha', ''),
        'commit_url': commit.get('url', ''),
    }


@dataclass(frozen=True)
class RepositoryBranch:
    """A branch as listed by GitHub."""
    name: str
    commit_sha: str = ""
    commit_url: str = ""
    protected: Optional[bool] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepositoryBranch':
        """Create from one item of GET /repos/{owner}/{repo}/branches."""
        return cls(
            name=data.get('name', ''),
            protected=data.get('protected'),
            **_commit_fields(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'name': self.name,
            'commit': {'sha': self.commit_sha, 'url': self.commit_url},
        }
        if self.protected is not None:
            result['protected'] = self.protected
        return result

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RepositoryTag:
    """A tag as listed by GitHub."""
    name: str
    commit_sha: str = ""
    commit_url: str = ""
    zipball_url: str = ""
    tarball_url: str = ""
    node_id: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepositoryTag':
        """Create from one item of GET /repos/{owner}/{repo}/tags."""
        return cls(
            name=data.get('name', ''),
            zipball_url=data.get('zipball_url', ''),
            tarball_url=data.get('tarball_url', ''),
            node_id=data.get('node_id', ''),
            **_commit_fields(data),
        )

    @property
    def archive_urls(self) -> Dict[str, str]:
        """Download URLs keyed by archive format."""
        return {'zip': self.zipball_url, 'tar': self.tarball_url}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'commit': {'sha': self.commit_sha, 'url': self.commit_url},
            'zipball_url': self.zipball_url,
            'tarball_url': self.tarball_url,
            'node_id': self.node_id,
        }

    def __str__(self) -> str:
        return self.name
