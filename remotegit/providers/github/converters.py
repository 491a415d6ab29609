"""Conversion of GitHub client types into git domain models."""

from datetime import datetime, timezone

from remotegit.git.models import (
    GitCommit,
    GitCommitIdentity,
    GitCommitLine,
    GitCommitStats,
    GitFileChange,
    GitFileChangeStats,
    GitFileIndexStatus,
)
from remotegit.services.github.helpers import parse_github_date
from remotegit.services.github.types import GitHubCommit, GitHubCommitFile, GitHubIdentity

YOU = "You"

_FILE_STATUS = {
    "added": GitFileIndexStatus.ADDED,
    "removed": GitFileIndexStatus.DELETED,
    "modified": GitFileIndexStatus.MODIFIED,
    "renamed": GitFileIndexStatus.RENAMED,
    "copied": GitFileIndexStatus.COPIED,
    "changed": GitFileIndexStatus.TYPE_CHANGED,
    "unchanged": GitFileIndexStatus.MODIFIED,
}


def from_commit_file_status(status: str | None) -> GitFileIndexStatus | None:
    if status is None:
        return None
    return _FILE_STATUS.get(status)


def display_name(name: str, viewer: str | None) -> str:
    """Replace the viewer's own name with "You" (exact, case-sensitive match)."""
    return YOU if viewer is not None and name == viewer else name


def to_identity(identity: GitHubIdentity, viewer: str | None) -> GitCommitIdentity:
    return GitCommitIdentity(
        name=display_name(identity.name, viewer),
        email=identity.email,
        date=parse_github_date(identity.date) or datetime.now(timezone.utc),
        avatar_url=identity.avatar_url,
    )


def file_change_from_github(repo_path: str, file: GitHubCommitFile) -> GitFileChange:
    return GitFileChange(
        repo_path=repo_path,
        path=file.filename,
        status=from_commit_file_status(file.status) or GitFileIndexStatus.MODIFIED,
        original_path=file.previous_filename,
        sha=file.sha,
        stats=GitFileChangeStats(
            additions=file.additions,
            deletions=file.deletions,
            changes=file.changes,
        ),
    )


def commit_from_github(
    repo_path: str,
    commit: GitHubCommit,
    viewer: str | None,
    path: str | None = None,
    lines: tuple[GitCommitLine, ...] = (),
) -> GitCommit:
    """
    Build a GitCommit, applying the "You" substitution once.

    With `path`, the commit's `file` is the matching changed file; when the
    payload carries no per-file data a MODIFIED change is synthesized, with the
    commit's stats only if it touched a single file.
    """
    files = (
        tuple(file_change_from_github(repo_path, f) for f in commit.files)
        if commit.files is not None
        else None
    )

    file = None
    if path:
        if files is not None:
            file = next((f for f in files if f.path == path), None)
        if file is None:
            file = GitFileChange(
                repo_path=repo_path,
                path=path,
                status=GitFileIndexStatus.MODIFIED,
                stats=GitFileChangeStats(
                    additions=commit.additions or 0,
                    deletions=commit.deletions or 0,
                )
                if commit.changed_files == 1
                else None,
            )

    return GitCommit(
        repo_path=repo_path,
        sha=commit.oid,
        author=to_identity(commit.author, viewer),
        committer=to_identity(commit.committer, viewer),
        message=commit.message,
        parents=tuple(commit.parents),
        files=files,
        file=file,
        stats=GitCommitStats(
            files=commit.changed_files,
            additions=commit.additions,
            deletions=commit.deletions,
        ),
        lines=lines,
    )
