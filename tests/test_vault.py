from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from git_to_daily.errors import VaultIOError, VaultPathInvalidError
from git_to_daily.vault import daily_log_path, ensure_vault, monthly_log_path, read_text, weekly_log_path, write_text


def test_log_paths(tmp_path: Path) -> None:
    assert daily_log_path(tmp_path, "proj", dt.date(2026, 1, 5)) == tmp_path / "proj" / "Daily" / "2026-01-05.md"
    assert weekly_log_path(tmp_path, "proj", "2026-W02") == tmp_path / "Weekly" / "proj" / "2026-W02.md"
    assert monthly_log_path(tmp_path, "proj", "2026-01") == tmp_path / "Monthly" / "proj" / "2026-01.md"


def test_ensure_vault(tmp_path: Path) -> None:
    ensure_vault(tmp_path)
    with pytest.raises(VaultPathInvalidError, match="Vault path does not exist"):
        ensure_vault(tmp_path / "missing")


def test_read_missing_file_is_none(tmp_path: Path) -> None:
    assert read_text(tmp_path / "nope.md") is None


def test_read_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(VaultIOError, match="Failed to read file"):
        read_text(tmp_path)


def test_write_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "proj" / "Daily" / "2026-01-05.md"
    assert write_text(path, "# hi\n") == path
    assert read_text(path) == "# hi\n"


def test_write_under_a_file_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "proj"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(VaultIOError) as exc:
        write_text(blocker / "Daily" / "x.md", "x")
    assert exc.value.path == blocker / "Daily"


def test_read_invalid_utf8_replaces_bytes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "log.md"
    path.write_bytes(b"# Daily Log\n\xff\xfe tail\n")

    assert read_text(path) == "# Daily Log\n\ufffd\ufffd tail\n"
    assert "not valid UTF-8" in capsys.readouterr().err
