"""Argument vectors for the git commands the service runs, and log parsing."""

from typing import Sequence

from pydantic import ValidationError

from .models import CommitInfo, DiffOptions

LOG_FIELD_SEPARATOR = "\x00"
# hash, short hash, subject, author name, author email, strict ISO author date
LOG_FORMAT = "%H%x00%h%x00%s%x00%an%x00%ae%x00%aI"
_LOG_FIELD_COUNT = 6


def init_args() -> list[str]:
    return ["init"]


def is_inside_work_tree_args() -> list[str]:
    return ["rev-parse", "--is-inside-work-tree"]


def current_branch_args() -> list[str]:
    return ["rev-parse", "--abbrev-ref", "HEAD"]


def head_args() -> list[str]:
    return ["rev-parse", "HEAD"]


def status_args() -> list[str]:
    return ["status", "--porcelain=v2", "--branch"]


def stage_args(paths: Sequence[str]) -> list[str]:
    return ["add", "--", *paths]


def stage_all_args() -> list[str]:
    return ["add", "-A"]


def unstage_args(paths: Sequence[str]) -> list[str]:
    return ["reset", "HEAD", "--", *paths]


def commit_args(message: str) -> list[str]:
    return ["commit", "-m", message]


def diff_args(options: DiffOptions | None = None) -> list[str]:
    """Build ``git diff`` arguments.

    Layout: ``diff [--cached] [<commit>] [-U<n>] [-- <paths>...]``
    """
    args = ["diff"]
    if options is None:
        return args

    if options.staged:
        args.append("--cached")
    if options.commit:
        args.append(options.commit)
    if options.context_lines is not None:
        args.append(f"-U{options.context_lines}")
    if options.files:
        args.extend(["--", *options.files])
    return args


def log_args(limit: int) -> list[str]:
    return ["log", f"--format={LOG_FORMAT}", f"-n{limit}"]


def parse_log(output: str) -> list[CommitInfo]:
    """Parse ``git log`` output produced with LOG_FORMAT.

    Records with missing or empty fields, or a timestamp that does not
    parse, are skipped.
    """
    if not output.strip():
        return []

    commits = []
    for record in output.strip().split("\n"):
        fields = record.split(LOG_FIELD_SEPARATOR)
        if len(fields) < _LOG_FIELD_COUNT or not all(fields[:_LOG_FIELD_COUNT]):
            continue

        try:
            commits.append(
                CommitInfo(
                    hash=fields[0],
                    short_hash=fields[1],
                    message=fields[2],
                    author_name=fields[3],
                    author_email=fields[4],
                    timestamp=fields[5],
                )
            )
        except ValidationError:
            continue
    return commits
