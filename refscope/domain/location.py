"""
Browser location parsing for refscope.

A location looks like ``https://github.com/{owner}/{repo}/{tree|blob}/{ref...}/{path...}``.
The ref fragment may itself contain slashes, so this module only splits
the path into segments; deciding where the ref ends is the resolver's job.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit, quote, unquote

DEFAULT_OWNER = "conwnet"
DEFAULT_REPO = "github1s"

# Path kinds whose third segment is followed by a ref
REF_PATH_KINDS = ('tree', 'blob')

# Characters left unescaped when writing a ref back into a URL path
_PATH_SAFE = "/@:+~!$&'()*,;="


def path_parts(url: str) -> List[str]:
    """
    Split the path of a URL into its non-empty, percent-decoded segments.

    Examples:
        path_parts("https://github.com/conwnet/github1s/tree/master/src")
            -> ['conwnet', 'github1s', 'tree', 'master', 'src']
        path_parts("https://github.com/") -> []
    """
    path = urlsplit(url or '').path or ''
    return [part for part in unquote(path).split('/') if part]


@dataclass(frozen=True)
class RepoLocation:
    """
    Owner, repository and raw path segments of a browser location.

    Attributes:
        url: The location as given
        owner: Repository owner (fallback owner when the path is too short)
        repo: Repository name (fallback repo when the path is too short)
        parts: Non-empty path segments, including owner and repo
    """

    url: str
    owner: str
    repo: str
    parts: Tuple[str, ...] = ()

    @classmethod
    def parse(
        cls,
        url: str,
        default_owner: str = DEFAULT_OWNER,
        default_repo: str = DEFAULT_REPO,
    ) -> 'RepoLocation':
        """Parse a URL, defaulting owner/repo for landing-page locations."""
        parts = path_parts(url)
        owner = parts[0] if len(parts) > 0 else default_owner
        repo = parts[1] if len(parts) > 1 else default_repo
        return cls(url=url, owner=owner, repo=repo, parts=tuple(parts))

    @property
    def kind(self) -> str:
        """Lower-cased third segment (``tree``, ``blob``, ``commits``...) or ''."""
        return self.parts[2].lower() if len(self.parts) > 2 else ''

    @property
    def ref_segment(self) -> Optional[str]:
        """
        First segment of the ref fragment, or None when the location has no ref.

        Only tree and blob locations carry a ref.
        """
        if self.kind not in REF_PATH_KINDS or len(self.parts) < 4:
            return None
        return self.parts[3]

    def with_ref(self, ref: str) -> str:
        """
        Return the URL pointing at the repository root under ``ref``.

        Any file path after the ref is dropped; scheme, host, query and
        fragment are kept.
        """
        split = urlsplit(self.url or '')
        path = quote(f"/{self.owner}/{self.repo}/tree/{ref}", safe=_PATH_SAFE)
        return urlunsplit((split.scheme, split.netloc, path, split.query, split.fragment))

    def to_dict(self):
        return {
            'url': self.url,
            'owner': self.owner,
            'repo': self.repo,
            'kind': self.kind,
        }
