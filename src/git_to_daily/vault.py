from __future__ import annotations

import datetime as dt
import sys
from pathlib import Path

from .errors import VaultIOError, VaultPathInvalidError
from .periods import format_date

DAILY_DIRNAME = "Daily"
WEEKLY_DIRNAME = "Weekly"
MONTHLY_DIRNAME = "Monthly"


def daily_log_path(vault: Path, project: str, day: dt.date) -> Path:
    return vault / project / DAILY_DIRNAME / f"{format_date(day)}.md"


def weekly_log_path(vault: Path, project: str, week_id: str) -> Path:
    return vault / WEEKLY_DIRNAME / project / f"{week_id}.md"


def monthly_log_path(vault: Path, project: str, month_id: str) -> Path:
    return vault / MONTHLY_DIRNAME / project / f"{month_id}.md"


def ensure_vault(vault: Path) -> None:
    if not vault.is_dir():
        raise VaultPathInvalidError(vault)


def read_text(path: Path) -> str | None:
    """File contents, or None if missing. Bytes that are not UTF-8 are replaced with U+FFFD."""
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise VaultIOError(f"Failed to read file ({e.strerror or e}):", path) from e
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        print(f"Warning: {path} is not valid UTF-8 (byte {e.start}: {e.reason}); reading it with replacements.", file=sys.stderr)
        return data.decode("utf-8", errors="replace")


def write_text(path: Path, text: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise VaultIOError(f"Failed to create directory ({e.strerror or e}):", path.parent) from e
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise VaultIOError(f"Failed to write file ({e.strerror or e}):", path) from e
    return path
