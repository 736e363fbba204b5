"""Pydantic models for structured git results."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field


FileChangeType = Literal["added", "modified", "deleted", "renamed"]
FileStatusCode = Literal["added", "modified", "deleted", "renamed", "copied"]
DiffLineType = Literal["context", "add", "delete"]


class DiffLine(BaseModel):
    """A single line inside a hunk."""

    type: DiffLineType = Field(description="Line kind: context, add or delete")
    content: str = Field(description="Line text without its leading marker")
    old_line_number: int | None = Field(
        default=None, description="1-based line number in the old file (context/delete)"
    )
    new_line_number: int | None = Field(
        default=None, description="1-based line number in the new file (context/add)"
    )


class DiffHunk(BaseModel):
    """A contiguous change region of a file diff."""

    old_start: int = Field(ge=0, description="Starting line in the old file")
    old_lines: int = Field(default=1, ge=0, description="Number of lines in the old file")
    new_start: int = Field(ge=0, description="Starting line in the new file")
    new_lines: int = Field(default=1, ge=0, description="Number of lines in the new file")
    lines: list[DiffLine] = Field(default_factory=list, description="Lines in source order")


class FileDiff(BaseModel):
    """Diff for a single file."""

    path: str = Field(description="Current path of the file")
    old_path: str | None = Field(default=None, description="Previous path, renamed files only")
    type: FileChangeType = Field(description="Change type: added, modified, deleted, renamed")
    hunks: list[DiffHunk] = Field(default_factory=list, description="Diff hunks")
    raw: str = Field(description="Raw diff text of this file section")


class DiffOptions(BaseModel):
    """Options controlling which diff is requested from git."""

    staged: bool = Field(default=False, description="Compare the index instead of the worktree")
    commit: str | None = Field(default=None, description="Compare against a specific commit")
    context_lines: int | None = Field(default=None, ge=0, description="Number of context lines")
    files: list[str] = Field(default_factory=list, description="Restrict the diff to these paths")


class FileStatus(BaseModel):
    """Status of a single file in one dimension (index or worktree)."""

    path: str = Field(description="Path relative to the repository root")
    status: FileStatusCode = Field(description="added, modified, deleted, renamed or copied")
    old_path: str | None = Field(default=None, description="Original path for renamed/copied files")


class ParsedStatus(BaseModel):
    """File lists extracted from a porcelain v2 status report."""

    staged: list[FileStatus] = Field(default_factory=list)
    modified: list[FileStatus] = Field(default_factory=list)
    untracked: list[str] = Field(default_factory=list)


class RepositoryStatus(BaseModel):
    """Current status of the repository."""

    is_repo: bool = Field(description="Whether the working directory is inside a work tree")
    branch: str | None = Field(default=None, description="Current branch name, if known")
    staged: list[FileStatus] = Field(default_factory=list, description="Changes staged for commit")
    modified: list[FileStatus] = Field(
        default_factory=list, description="Worktree changes not yet staged"
    )
    untracked: list[str] = Field(default_factory=list, description="Untracked paths")

    @computed_field
    @property
    def is_dirty(self) -> bool:
        """Whether there are uncommitted changes of any kind."""
        return bool(self.staged or self.modified or self.untracked)

    @classmethod
    def not_a_repository(cls) -> "RepositoryStatus":
        return cls(is_repo=False)


class CommitInfo(BaseModel):
    """Information about a single commit."""

    hash: str = Field(description="Full commit SHA hash")
    short_hash: str = Field(description="Abbreviated commit SHA")
    message: str = Field(description="Commit subject line")
    author_name: str = Field(description="Author name")
    author_email: str = Field(description="Author email")
    timestamp: datetime = Field(description="Author timestamp")
