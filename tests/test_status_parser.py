import pytest

from spec_planner_git.status_parser import map_status_code, parse_status

HASH_A = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
HASH_0 = "0" * 40


def ordinary(xy: str, path: str) -> str:
    return f"1 {xy} N... 100644 100644 100644 {HASH_A} {HASH_A} {path}"


def test_staged_only_add():
    result = parse_status(ordinary("A.", "new.md"))

    assert [(f.path, f.status) for f in result.staged] == [("new.md", "added")]
    assert result.modified == []
    assert result.untracked == []


def test_worktree_only_modification():
    result = parse_status(ordinary(".M", "spec.md"))

    assert result.staged == []
    assert [(f.path, f.status) for f in result.modified] == [("spec.md", "modified")]


def test_partially_staged_file_appears_in_both():
    result = parse_status(ordinary("AM", "draft.md"))

    assert [(f.path, f.status) for f in result.staged] == [("draft.md", "added")]
    assert [(f.path, f.status) for f in result.modified] == [("draft.md", "modified")]


def test_untracked_line():
    result = parse_status("? notes/idea.md")

    assert result.untracked == ["notes/idea.md"]
    assert result.staged == []
    assert result.modified == []


def test_branch_headers_and_blank_lines_are_skipped():
    output = "\n".join(
        [
            f"# branch.oid {HASH_A}",
            "# branch.head main",
            "",
            ordinary(".D", "removed.md"),
            "",
        ]
    )
    result = parse_status(output)

    assert [(f.path, f.status) for f in result.modified] == [("removed.md", "deleted")]
    assert result.staged == []


def test_path_with_spaces_is_kept_whole():
    result = parse_status(ordinary("M.", "docs/my spec file.md"))

    assert result.staged[0].path == "docs/my spec file.md"


def test_staged_rename():
    line = f"2 R. N... 100644 100644 100644 {HASH_A} {HASH_A} R100 docs/new.md\tdocs/old.md"
    result = parse_status(line)

    assert len(result.staged) == 1
    entry = result.staged[0]
    assert (entry.path, entry.status, entry.old_path) == ("docs/new.md", "renamed", "docs/old.md")
    assert result.modified == []


def test_staged_copy():
    line = f"2 C. N... 100644 100644 100644 {HASH_A} {HASH_A} C75 copy.md\tsource.md"
    entry = parse_status(line).staged[0]

    assert (entry.path, entry.status, entry.old_path) == ("copy.md", "copied", "source.md")


def test_unmerged_and_ignored_lines_are_skipped():
    output = "\n".join(
        [
            f"u UU N... 100644 100644 100644 100644 {HASH_A} {HASH_A} {HASH_0} conflict.md",
            "! build/out.txt",
        ]
    )
    result = parse_status(output)

    assert result.staged == [] and result.modified == [] and result.untracked == []


def test_mixed_report():
    output = "\n".join(
        [
            "# branch.head main",
            ordinary("M.", "a.md"),
            ordinary(".M", "b.md"),
            "? c.md",
            "? d.md",
        ]
    )
    result = parse_status(output)

    assert [f.path for f in result.staged] == ["a.md"]
    assert [f.path for f in result.modified] == ["b.md"]
    assert result.untracked == ["c.md", "d.md"]


@pytest.mark.parametrize(
    "code,expected",
    [
        ("A", "added"),
        ("M", "modified"),
        ("D", "deleted"),
        ("R", "renamed"),
        ("C", "copied"),
        ("T", "modified"),
        ("?", "modified"),
    ],
)
def test_map_status_code(code, expected):
    assert map_status_code(code) == expected
