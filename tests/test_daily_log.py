from __future__ import annotations

import datetime as dt

import pytest

from git_to_daily.daily_log import (
    extract_commit_hashes,
    infer_focus_area,
    parse_existing_log,
    parse_file_changes,
    parse_focus_area,
    parse_work_completed,
    render_daily_log,
)
from git_to_daily.errors import LogParseError
from git_to_daily.models import Commit, FileChange

DAY = dt.date(2026, 1, 31)


def _commit(sha: str, message: str, hour: int, minute: int = 0, files: tuple[FileChange, ...] = (), author: str = "Test Developer") -> Commit:
    return Commit(
        hash=sha,
        message=message,
        author=author,
        timestamp=dt.datetime(DAY.year, DAY.month, DAY.day, hour, minute),
        files=files,
    )


def _sample() -> list[Commit]:
    return [
        _commit(
            "def456abc1230000000000000000000000000000",
            "fix: resolve login bug",
            11,
            30,
            files=(FileChange("src/auth.py", "modified"),),
        ),
        _commit(
            "abc123def4560000000000000000000000000000",
            "feat: add user authentication",
            9,
            0,
            files=(
                FileChange("src/auth.py", "added"),
                FileChange("src/utils.py", "modified"),
                FileChange("src/legacy.py", "deleted"),
            ),
        ),
    ]


def test_render_has_sections_in_order() -> None:
    md = render_daily_log(_sample(), day=DAY)
    assert md.startswith("# Daily Log - 2026-01-31")
    order = [md.index(h) for h in ("## Session Info", "## Work Completed", "## Code Changes", "## Commits")]
    assert order == sorted(order)
    assert "- ✅ feat: add user authentication" in md
    assert "- ➕ `src/auth.py` - feat: add user authentication" in md
    assert "- 🗑️ `src/legacy.py` - feat: add user authentication" in md
    assert "**09:00** - feat: add user authentication" in md
    assert "- Hash: `abc123d`" in md
    assert "- Files changed: 3" in md
    assert "\n---\n" in md


def test_render_duration() -> None:
    assert "Duration: 2h 30m" in render_daily_log(_sample(), day=DAY)
    two_hours = [_commit("a" * 40, "one", 9), _commit("b" * 40, "two", 11)]
    assert "Duration: 2h\n" in render_daily_log(two_hours, day=DAY)
    assert "Duration: 0m" in render_daily_log([_commit("c" * 40, "solo", 10)], day=DAY)


def test_render_empty_is_placeholder() -> None:
    md = render_daily_log([], day=DAY)
    assert "No activity" in md
    assert "Duration: N/A" in md
    assert "## Commits" not in md
    assert parse_existing_log(md, day=DAY) == []
    assert parse_work_completed(md) == []


def test_infer_focus_area() -> None:
    assert infer_focus_area(["test: add unit tests for auth", "test: add integration tests"]) == "Testing"
    assert infer_focus_area(["feat: a", "fix: b", "fix(api): c"]) == "Bug Fixes"
    assert infer_focus_area(["update stuff", "wip"]) == "Development"
    assert infer_focus_area([]) == "Development"


def test_infer_focus_area_tie_goes_to_first_seen() -> None:
    assert infer_focus_area(["fix: a", "feat: b"]) == "Bug Fixes"
    assert infer_focus_area(["feat: b", "fix: a"]) == "Feature Development"


def test_render_focus_area_line() -> None:
    commits = [_commit("1" * 40, "test: add unit tests", 9), _commit("2" * 40, "test: more tests", 10)]
    md = render_daily_log(commits, day=DAY)
    assert "Focus Area: Testing" in md
    assert parse_focus_area(md) == "Testing"


def test_round_trip_recovers_ledger_fields() -> None:
    commits = _sample()
    parsed = parse_existing_log(render_daily_log(commits, day=DAY), day=DAY)

    assert {c.short_hash for c in parsed} == {c.short_hash for c in commits}
    by_hash = {c.short_hash: c for c in parsed}
    for c in commits:
        p = by_hash[c.short_hash]
        assert p.message == c.message
        assert p.author == c.author
        assert p.file_count == c.file_count
        assert (p.timestamp.hour, p.timestamp.minute) == (c.timestamp.hour, c.timestamp.minute)
        assert p.timestamp.date() == DAY


def test_round_trip_recovers_files_by_message() -> None:
    parsed = parse_existing_log(render_daily_log(_sample(), day=DAY), day=DAY)
    feat = next(c for c in parsed if c.message.startswith("feat"))
    assert feat.files == (
        FileChange("src/auth.py", "added"),
        FileChange("src/utils.py", "modified"),
        FileChange("src/legacy.py", "deleted"),
    )


def test_parse_attaches_time_to_today_by_default() -> None:
    parsed = parse_existing_log(render_daily_log(_sample(), day=DAY))
    assert all(c.timestamp.date() == dt.date.today() for c in parsed)


def test_extract_commit_hashes_uses_short_prefix() -> None:
    md = render_daily_log(_sample(), day=DAY)
    assert extract_commit_hashes(md) == {"def456a", "abc123d"}
    assert extract_commit_hashes("- Hash: `0123456789abcdef`") == {"0123456"}
    assert extract_commit_hashes("nothing here") == set()


def test_parse_without_ledger_returns_empty() -> None:
    assert parse_existing_log("# Daily Log\n\nSome notes I wrote by hand.\n") == []


def test_parse_malformed_ledger_raises() -> None:
    text = "## Commits\n\n```\n**09:00** - feat: x\n- Hash: `abc1234`\n```\n"
    with pytest.raises(LogParseError):
        parse_existing_log(text, day=DAY)


def test_parse_ledger_without_fence_raises() -> None:
    with pytest.raises(LogParseError):
        parse_existing_log("## Commits\n\n**09:00** - feat: x\n", day=DAY)


def test_parse_invalid_time_raises() -> None:
    text = "## Commits\n\n```\n**25:00** - x\n- Hash: `abc1234`\n- Author: Dev\n- Files changed: 0\n```\n"
    with pytest.raises(LogParseError):
        parse_existing_log(text, day=DAY)


def test_parse_tolerates_crlf_line_endings() -> None:
    md = render_daily_log(_sample(), day=DAY).replace("\n", "\r\n")
    parsed = parse_existing_log(md, day=DAY)
    assert len(parsed) == 2
    assert len(parse_file_changes(md)) == 4


def test_recorded_file_count_survives_rerender() -> None:
    text = "\n".join(
        [
            "## Commits",
            "",
            "```",
            "**08:15** - chore: bump deps",
            "- Hash: `fedcba9`",
            "- Author: Other Machine",
            "- Files changed: 3",
            "```",
            "",
        ]
    )
    parsed = parse_existing_log(text, day=DAY)
    assert parsed[0].files == ()
    assert parsed[0].file_count == 3
    assert "- Files changed: 3" in render_daily_log(parsed, day=DAY)


def test_duplicate_messages_share_files() -> None:
    # Files are joined to commits by message text, so equal messages cannot be told apart.
    commits = [
        _commit("a" * 40, "wip", 10, files=(FileChange("a.py", "modified"),)),
        _commit("b" * 40, "wip", 9, files=(FileChange("b.py", "added"),)),
    ]
    parsed = parse_existing_log(render_daily_log(commits, day=DAY), day=DAY)
    assert [set(c.files) for c in parsed] == [
        {FileChange("a.py", "modified"), FileChange("b.py", "added")},
    ] * 2
    assert [c.file_count for c in parsed] == [1, 1]


def test_messages_are_flattened_to_one_line() -> None:
    c = _commit("9" * 40, "feat: implement **bold** feature\n\nbody text", 12)
    md = render_daily_log([c], day=DAY)
    parsed = parse_existing_log(md, day=DAY)
    assert parsed[0].message == "feat: implement **bold** feature body text"


def test_empty_message_round_trips() -> None:
    commits = [
        _commit("def5678", "fix: y", 8),
        _commit("aaa1111", "", 7, files=(FileChange("notes.txt", "added"),)),
    ]
    md = render_daily_log(commits, day=DAY)

    parsed = parse_existing_log(md, day=DAY)

    assert [(c.short_hash, c.message) for c in parsed] == [("def5678", "fix: y"), ("aaa1111", "")]
    assert parsed[1].files == (FileChange("notes.txt", "added"),)
    assert parse_work_completed(md) == ["fix: y", ""]
