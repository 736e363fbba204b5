"""Exception types raised by the git integration engine."""

from enum import Enum
from typing import Sequence


SPAWN_FAILED_EXIT = -1


class GitErrorKind(str, Enum):
    """Classification of a failed git invocation."""

    SPAWN_FAILED = "spawn_failed"
    NOT_REPO = "not_repo"
    MERGE_CONFLICT = "merge_conflict"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    COMMAND_FAILED = "command_failed"


def classify_failure(exit_code: int, stderr: str, stdout: str = "") -> GitErrorKind:
    """Map an exit code and captured output onto a GitErrorKind."""
    if exit_code == SPAWN_FAILED_EXIT:
        return GitErrorKind.SPAWN_FAILED

    err = stderr.lower()
    out = stdout.lower()
    if "not a git repository" in err:
        return GitErrorKind.NOT_REPO
    if "conflict" in err or "conflict" in out or "unmerged" in err or "unmerged" in out:
        return GitErrorKind.MERGE_CONFLICT
    if "nothing to commit" in out or "no changes added to commit" in out or "nothing to commit" in err:
        return GitErrorKind.NOTHING_TO_COMMIT
    return GitErrorKind.COMMAND_FAILED


class GitServiceError(Exception):
    """Base class for all errors raised by this package."""


class ExecutionError(GitServiceError):
    """A git process exited non-zero or could not be spawned."""

    def __init__(
        self,
        args: Sequence[str],
        exit_code: int,
        stderr: str,
        stdout: str = "",
    ):
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        self.kind = classify_failure(exit_code, stderr, stdout)
        super().__init__(f"Git command failed: git {' '.join(self.args_list)}\n{stderr}")

    @property
    def spawn_failed(self) -> bool:
        return self.kind is GitErrorKind.SPAWN_FAILED


class RepositoryServiceError(GitServiceError):
    """Service-level failure that is not tied to a single git invocation."""


class DiffParseError(GitServiceError):
    """Raised by strict diff parsing when a file section cannot be identified."""
