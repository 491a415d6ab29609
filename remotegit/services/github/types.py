"""Data types for GitHub API responses."""

from dataclasses import dataclass, field

from remotegit.git.models import PagingInfo


@dataclass
class GitHubIdentity:
    """Author or committer of a commit, as reported by GitHub."""

    name: str
    email: str | None
    date: str | None  # ISO-8601
    avatar_url: str | None = None


@dataclass
class GitHubCommitFile:
    """A file touched by a commit (REST commit and compare endpoints only)."""

    filename: str
    status: str  # "added", "removed", "modified", "renamed", "copied", "changed", "unchanged"
    additions: int
    deletions: int
    changes: int
    previous_filename: str | None = None
    sha: str | None = None


@dataclass
class GitHubCommit:
    oid: str
    message: str
    parents: list[str]
    author: GitHubIdentity
    committer: GitHubIdentity
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None
    files: list[GitHubCommitFile] | None = None
    # Viewer display name, when the response that produced the commit reported it
    viewer: str | None = None


@dataclass
class GitHubCommitPage:
    """One page of commit history plus the viewer's display name."""

    values: list[GitHubCommit] = field(default_factory=list)
    paging: PagingInfo | None = None
    viewer: str | None = None


@dataclass
class GitHubBranch:
    name: str
    oid: str
    authored_date: str | None
    committed_date: str | None


@dataclass
class GitHubTag:
    """A tag ref; for annotated tags `oid` and dates are those of the peeled commit."""

    name: str
    oid: str
    message: str | None
    authored_date: str | None
    committed_date: str | None
    tagger_date: str | None = None
    annotated: bool = False


@dataclass
class GitHubBlameRange:
    """Lines `starting_line..ending_line` (1-based, inclusive) last changed by `commit`."""

    starting_line: int
    ending_line: int
    commit: GitHubCommit


@dataclass
class GitHubBlame:
    ranges: list[GitHubBlameRange] = field(default_factory=list)
    viewer: str | None = None


@dataclass
class GitHubComparison:
    """Result of comparing two refs with `base...head`."""

    status: str  # "ahead", "behind", "diverged", "identical"
    ahead_by: int
    behind_by: int
    total_commits: int
    commits: list[GitHubCommit] = field(default_factory=list)
    files: list[GitHubCommitFile] = field(default_factory=list)


@dataclass
class GitHubViewer:
    name: str | None
    email: str | None
    login: str | None
    id: str | None


@dataclass
class GitHubContributor:
    """An entry of the REST contributors list; anonymous entries have a name and email but no login."""

    login: str | None
    contributions: int
    type: str  # "User", "Bot" or "Anonymous"
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    node_id: str | None = None


@dataclass
class GitHubSearchCommitSha:
    sha: str
    author_date: str | None
    committer_date: str | None


@dataclass
class GitHubSearchShaPage:
    values: list[GitHubSearchCommitSha] = field(default_factory=list)
    paging: PagingInfo | None = None
    total_count: int = 0
