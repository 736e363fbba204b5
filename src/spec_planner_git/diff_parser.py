"""Parse unified diff output from git into structured file diffs.

Parsing is best-effort by default: a file section whose ``diff --git``
header cannot be read is dropped rather than reported, so callers always get
the records that could be fully identified. ``strict=True`` raises
``DiffParseError`` for such sections instead.
"""

import re

from .errors import DiffParseError
from .models import DiffHunk, DiffLine, FileChangeType, FileDiff

FILE_HEADER = "diff --git"

# Any single-character prefix is accepted: a/, b/, i/, w/, c/, o/ ...
_HEADER_RE = re.compile(r"^diff --git .\/(.+) .\/(.+)")
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def parse_diff(diff_output: str, strict: bool = False) -> list[FileDiff]:
    """Parse ``git diff`` output.

    Args:
        diff_output: Raw unified diff text
        strict: Raise on malformed file headers instead of skipping them

    Returns:
        One FileDiff per file section, in source order
    """
    if not diff_output.strip():
        return []

    diffs = []
    for section in split_sections(diff_output):
        diff = parse_file_section(section)
        if diff is not None:
            diffs.append(diff)
        elif strict:
            header = section[0] if section else ""
            raise DiffParseError(f"Malformed diff header: {header!r}")
    return diffs


def split_sections(diff_output: str) -> list[list[str]]:
    """Split diff text into per-file line groups, each starting at a header."""
    sections: list[list[str]] = []
    current: list[str] | None = None

    for line in diff_output.split("\n"):
        if line.startswith(FILE_HEADER):
            current = [line]
            sections.append(current)
        elif current is not None:
            current.append(line)

    return sections


def parse_file_section(lines: list[str]) -> FileDiff | None:
    """Build a FileDiff from one section, or None if its header is malformed."""
    match = _HEADER_RE.match(lines[0]) if lines else None
    if match is None:
        return None

    old_path, new_path = match.group(1), match.group(2)
    change_type = _detect_change_type(lines)

    return FileDiff(
        path=new_path,
        old_path=old_path if change_type == "renamed" else None,
        type=change_type,
        hunks=parse_hunks(lines),
        raw="\n".join(lines),
    )


def _detect_change_type(lines: list[str]) -> FileChangeType:
    if any(line.startswith("new file") for line in lines):
        return "added"
    if any(line.startswith("deleted file") for line in lines):
        return "deleted"
    if any(line.startswith("rename from") for line in lines):
        return "renamed"
    return "modified"


def parse_hunks(lines: list[str]) -> list[DiffHunk]:
    """Collect hunks and number their lines.

    Lines before the first hunk header (index, mode, ---/+++ lines) are
    metadata and never become hunk content.
    """
    hunks: list[DiffHunk] = []
    hunk: DiffHunk | None = None
    old_line = new_line = 0

    for line in lines:
        if line.startswith("@@"):
            match = _HUNK_RE.match(line)
            if match is None:
                continue
            old_count, new_count = match.group(2), match.group(4)
            hunk = DiffHunk(
                old_start=int(match.group(1)),
                old_lines=int(old_count) if old_count else 1,
                new_start=int(match.group(3)),
                new_lines=int(new_count) if new_count else 1,
            )
            hunks.append(hunk)
            old_line, new_line = hunk.old_start, hunk.new_start
            continue

        if hunk is None:
            continue

        marker, content = line[:1], line[1:]
        if marker == "+":
            hunk.lines.append(DiffLine(type="add", content=content, new_line_number=new_line))
            new_line += 1
        elif marker == "-":
            hunk.lines.append(DiffLine(type="delete", content=content, old_line_number=old_line))
            old_line += 1
        elif marker == " ":
            hunk.lines.append(
                DiffLine(
                    type="context",
                    content=content,
                    old_line_number=old_line,
                    new_line_number=new_line,
                )
            )
            old_line += 1
            new_line += 1
        # "\ No newline at end of file" and blank lines carry no content

    return hunks
