"""Git domain types produced by the provider.

Commits are immutable once built; paged results (logs, graphs, searches)
carry a `more` continuation that fetches the next page and returns a new
object rather than mutating the current one.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------


@dataclass
class PagingInfo:
    """Cursor for the next page and whether one exists."""

    cursor: str | None
    more: bool


@dataclass
class PagedResult(Generic[T]):
    """One page of values from a cursor-paged API."""

    values: list[T] = field(default_factory=list)
    paging: PagingInfo | None = None


# ---------------------------------------------------------------------------
# Users, remotes, refs
# ---------------------------------------------------------------------------


@dataclass
class GitUser:
    name: str | None
    email: str | None
    username: str | None = None
    id: str | None = None


@dataclass
class GitRemote:
    """A remote repository; remote-backed repositories only ever have `origin`."""

    repo_path: str
    name: str
    domain: str
    path: str
    scheme: str = "https"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.domain}/{self.path}.git"

    @property
    def id(self) -> str:
        return f"{self.repo_path}|remotes/{self.name}"


@dataclass
class GitTrackingState:
    """Upstream of a local-looking branch."""

    name: str
    missing: bool = False
    ahead: int = 0
    behind: int = 0


@dataclass
class GitBranch:
    repo_path: str
    name: str
    sha: str | None
    remote: bool
    current: bool
    date: datetime | None
    upstream: GitTrackingState | None = None
    detached: bool = False

    @property
    def id(self) -> str:
        kind = "remotes" if self.remote else "heads"
        return f"{self.repo_path}|{kind}/{self.name}"

    @property
    def ref_name(self) -> str:
        return f"refs/remotes/{self.name}" if self.remote else f"refs/heads/{self.name}"

    def get_name_without_remote(self) -> str:
        if self.remote:
            return self.name.split("/", 1)[1] if "/" in self.name else self.name
        return self.name

    def get_remote_name(self) -> str | None:
        if self.remote:
            return self.name.split("/", 1)[0]
        if self.upstream is not None:
            return self.upstream.name.split("/", 1)[0]
        return None


@dataclass
class GitTag:
    repo_path: str
    name: str
    sha: str
    message: str | None
    commit_date: datetime | None
    date: datetime | None

    @property
    def id(self) -> str:
        return f"{self.repo_path}|tags/{self.name}"

    @property
    def ref_name(self) -> str:
        return f"refs/tags/{self.name}"


# ---------------------------------------------------------------------------
# Commits and file changes
# ---------------------------------------------------------------------------


class GitFileIndexStatus(str, Enum):
    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"


@dataclass(frozen=True)
class GitFileChangeStats:
    additions: int
    deletions: int
    changes: int = 0


@dataclass(frozen=True)
class GitFileChange:
    repo_path: str
    path: str
    status: GitFileIndexStatus
    original_path: str | None = None
    sha: str | None = None
    stats: GitFileChangeStats | None = None


@dataclass(frozen=True)
class GitCommitStats:
    files: int | None
    additions: int | None
    deletions: int | None


@dataclass(frozen=True)
class GitCommitIdentity:
    name: str
    email: str | None
    date: datetime
    avatar_url: str | None = None


@dataclass(frozen=True)
class GitCommitLine:
    """One blamed line; line numbers are 1-based."""

    sha: str
    previous_sha: str | None
    original_line: int
    line: int


@dataclass(frozen=True)
class GitCommit:
    repo_path: str
    sha: str
    author: GitCommitIdentity
    committer: GitCommitIdentity
    message: str
    parents: tuple[str, ...]
    files: tuple[GitFileChange, ...] | None = None
    file: GitFileChange | None = None
    stats: GitCommitStats | None = None
    lines: tuple[GitCommitLine, ...] = ()

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0]

    @property
    def date(self) -> datetime:
        return self.committer.date

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def with_lines(self, lines: tuple[GitCommitLine, ...]) -> "GitCommit":
        return replace(self, lines=lines)


@dataclass
class GitDiffShortStat:
    files_changed: int
    additions: int
    deletions: int


@dataclass
class LeftRightCommitCount:
    """Commits only reachable from the left (behind) and right (ahead) side of a range."""

    left: int
    right: int


# ---------------------------------------------------------------------------
# Log
# ---------------------------------------------------------------------------

LogMore = Callable[[int | None, str | None], Awaitable["GitLog"]]


@dataclass
class GitLog:
    """A page (or accumulated pages) of commit history in log order."""

    repo_path: str
    commits: dict[str, GitCommit]
    limit: int | None
    has_more: bool
    sha: str | None = None
    starting_cursor: str | None = None
    ending_cursor: str | None = None
    # Commits added by the page that produced this log (all commits for the first page)
    paged_commits: dict[str, GitCommit] | None = None
    _more: LogMore | None = field(default=None, repr=False, compare=False)

    @property
    def count(self) -> int:
        return len(self.commits)

    def new_commits(self) -> dict[str, GitCommit]:
        return self.paged_commits if self.paged_commits is not None else self.commits

    async def more(self, limit: int | None = None, until: str | None = None) -> "GitLog":
        """
        Fetch the next page and return a merged log.

        Calls on one log chain must be awaited one after another.
        """
        if self._more is None or not self.has_more:
            return self
        return await self._more(limit, until)


# ---------------------------------------------------------------------------
# Blame
# ---------------------------------------------------------------------------


@dataclass
class GitBlameAuthor:
    name: str
    line_count: int


@dataclass
class GitBlame:
    """Whole-file (or sliced) blame; `lines[i]` is the 0-based line `i`."""

    repo_path: str
    authors: dict[str, GitBlameAuthor]
    commits: dict[str, GitCommit]
    lines: list[GitCommitLine]


@dataclass
class GitBlameLine:
    author: GitBlameAuthor
    commit: GitCommit
    line: GitCommitLine


# ---------------------------------------------------------------------------
# Contributors
# ---------------------------------------------------------------------------


@dataclass
class GitContribution:
    sha: str
    date: datetime
    message: str
    files: int | None = None
    additions: int | None = None
    deletions: int | None = None


@dataclass
class GitContributorStats:
    files: int = 0
    additions: int = 0
    deletions: int = 0


@dataclass
class GitContributor:
    """
    Someone who authored commits in a repository.

    `current` marks the authenticated viewer. `contributions`, the commit
    dates and `stats` are only filled when contributors are aggregated from
    history.
    """

    repo_path: str
    name: str
    email: str | None
    current: bool
    contribution_count: int
    contributions: list[GitContribution] | None = None
    first_commit_date: datetime | None = None
    latest_commit_date: datetime | None = None
    stats: GitContributorStats | None = None
    username: str | None = None
    avatar_url: str | None = None
    id: str | None = None


@dataclass
class GitContributorsResult:
    contributors: list[GitContributor]
    # Aggregation stopped early; `contributors` holds what was gathered so far
    cancelled: bool = False


@dataclass
class GitContributorsStats:
    count: int
    # Per-contributor commit counts, largest first
    contributions: list[int]


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


@dataclass
class GitGraphRowHead:
    name: str
    id: str
    is_current_head: bool
    upstream: dict[str, Any] | None = None
    context: dict[str, Any] | None = None


@dataclass
class GitGraphRowRemoteHead:
    name: str
    owner: str
    url: str | None
    avatar_url: str | None = None
    current: bool = False
    context: dict[str, Any] | None = None


@dataclass
class GitGraphRowTag:
    name: str
    annotated: bool
    context: dict[str, Any] | None = None


@dataclass
class GitGraphRowStats:
    files: int
    additions: int
    deletions: int


@dataclass
class GitGraphRow:
    sha: str
    parents: list[str]
    author: str
    email: str
    date: float
    message: str
    type: Literal["commit-node", "merge-node"]
    heads: list[GitGraphRowHead] = field(default_factory=list)
    remotes: list[GitGraphRowRemoteHead] = field(default_factory=list)
    tags: list[GitGraphRowTag] = field(default_factory=list)
    contexts: dict[str, Any] | None = None


GraphMore = Callable[[int | None], Awaitable["GitGraph"]]


@dataclass
class GitGraph:
    repo_path: str
    rows: list[GitGraphRow]
    # Commit avatars keyed by author email
    avatars: dict[str, str]
    # Branch names tracking an upstream, keyed by upstream name
    downstreams: dict[str, list[str]]
    ids: set[str]
    row_stats: dict[str, GitGraphRowStats]
    branches: dict[str, GitBranch] = field(default_factory=dict)
    remotes: dict[str, GitRemote] = field(default_factory=dict)
    id: str | None = None
    paging: PagingInfo | None = None
    _more: GraphMore | None = field(default=None, repr=False, compare=False)

    @property
    def has_more(self) -> bool:
        return self.paging.more if self.paging is not None else False

    async def more(self, limit: int | None = None) -> "GitGraph":
        """Fetch the next page; the returned graph's rows are only the new rows."""
        if self._more is None or not self.has_more:
            return self
        return await self._more(limit)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@dataclass
class SearchQuery:
    query: str
    match_all: bool = False
    match_case: bool = False
    match_regex: bool = False


@dataclass
class GitSearchResultData:
    i: int
    date: float
    files: list[str] | None = None


SearchMore = Callable[[int | None], Awaitable["GitSearch"]]


@dataclass
class GitSearch:
    repo_path: str
    query: SearchQuery
    comparison_key: str
    results: dict[str, GitSearchResultData]
    paging: PagingInfo | None = None
    _more: SearchMore | None = field(default=None, repr=False, compare=False)

    @property
    def has_more(self) -> bool:
        return self.paging.more if self.paging is not None else False

    async def more(self, limit: int | None = None) -> "GitSearch":
        if self._more is None or not self.has_more:
            return self
        return await self._more(limit)
