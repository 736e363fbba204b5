import pytest

from spec_planner_git.errors import (
    SPAWN_FAILED_EXIT,
    ExecutionError,
    GitErrorKind,
    GitServiceError,
    classify_failure,
)


@pytest.mark.parametrize(
    "exit_code,stderr,stdout,kind",
    [
        (SPAWN_FAILED_EXIT, "No such file or directory", "", GitErrorKind.SPAWN_FAILED),
        (128, "fatal: not a git repository (or any of the parent directories): .git", "", GitErrorKind.NOT_REPO),
        (1, "", "CONFLICT (content): Merge conflict in spec.md", GitErrorKind.MERGE_CONFLICT),
        (128, "error: you need to resolve your current index first\nspec.md: needs merge\nunmerged", "", GitErrorKind.MERGE_CONFLICT),
        (1, "", "On branch main\nnothing to commit, working tree clean\n", GitErrorKind.NOTHING_TO_COMMIT),
        (1, "", 'no changes added to commit (use "git add")\n', GitErrorKind.NOTHING_TO_COMMIT),
        (128, "fatal: pathspec 'missing.md' did not match any files", "", GitErrorKind.COMMAND_FAILED),
    ],
)
def test_classify_failure(exit_code, stderr, stdout, kind):
    assert classify_failure(exit_code, stderr, stdout) is kind


def test_execution_error_carries_invocation_details():
    error = ExecutionError(["add", "--", "missing.md"], 128, "fatal: pathspec did not match")

    assert isinstance(error, GitServiceError)
    assert error.args_list == ["add", "--", "missing.md"]
    assert error.exit_code == 128
    assert error.stderr == "fatal: pathspec did not match"
    assert error.kind is GitErrorKind.COMMAND_FAILED
    assert not error.spawn_failed
    assert str(error) == "Git command failed: git add -- missing.md\nfatal: pathspec did not match"


def test_spawn_failure_flag():
    error = ExecutionError(["status"], SPAWN_FAILED_EXIT, "not found")

    assert error.spawn_failed
