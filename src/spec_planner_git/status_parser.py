"""Parse ``git status --porcelain=v2`` output."""

from .models import FileStatus, FileStatusCode, ParsedStatus

PLACEHOLDER = "."

# Leading space-separated fields before the path:
#   1 XY sub mH mI mW hH hI <path>
#   2 XY sub mH mI mW hH hI Xscore <path>\t<origPath>
_ORDINARY_FIELDS = 8
_RENAME_FIELDS = 9

_STATUS_CODES: dict[str, FileStatusCode] = {
    "A": "added",
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
}


def map_status_code(code: str) -> FileStatusCode:
    """Translate a one-letter status code; unknown codes count as modified."""
    return _STATUS_CODES.get(code, "modified")


def parse_status(output: str) -> ParsedStatus:
    """Split a porcelain v2 report into staged, modified and untracked files.

    A file with both index and worktree changes shows up in ``staged`` and
    in ``modified``. Renames and copies are only reported on the staged side.
    """
    result = ParsedStatus()

    for line in output.split("\n"):
        if not line or line.startswith("#"):
            continue

        if line.startswith("1 "):
            _parse_ordinary(line, result)
        elif line.startswith("2 "):
            _parse_rename(line, result)
        elif line.startswith("? "):
            result.untracked.append(line[2:])

    return result


def _parse_ordinary(line: str, result: ParsedStatus) -> None:
    fields = line.split(" ", _ORDINARY_FIELDS)
    if len(fields) <= _ORDINARY_FIELDS or len(fields[1]) < 2:
        return

    xy, path = fields[1], fields[_ORDINARY_FIELDS]
    if xy[0] != PLACEHOLDER:
        result.staged.append(FileStatus(path=path, status=map_status_code(xy[0])))
    if xy[1] != PLACEHOLDER:
        result.modified.append(FileStatus(path=path, status=map_status_code(xy[1])))


def _parse_rename(line: str, result: ParsedStatus) -> None:
    head, _, old_path = line.partition("\t")
    fields = head.split(" ", _RENAME_FIELDS)
    if len(fields) <= _RENAME_FIELDS or not fields[1] or not old_path:
        return

    index_code = fields[1][0]
    if index_code in ("R", "C"):
        result.staged.append(
            FileStatus(
                path=fields[_RENAME_FIELDS],
                status=map_status_code(index_code),
                old_path=old_path,
            )
        )
