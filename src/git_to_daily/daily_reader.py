from __future__ import annotations

import datetime as dt
from pathlib import Path

from .daily_log import parse_existing_log, parse_file_changes, parse_focus_area, parse_work_completed
from .errors import LogParseError
from .models import DailySummary
from .periods import dates_in_range, format_date
from .vault import daily_log_path, read_text


def _files_changed(text: str) -> int:
    # Ledger counts are per commit; the file list repeats files for commits that share a message.
    try:
        commits = parse_existing_log(text)
    except LogParseError:
        commits = []
    if commits:
        return sum(c.file_count for c in commits)
    return len(parse_file_changes(text))


def summarize_daily_log(text: str, date: str) -> DailySummary:
    messages = parse_work_completed(text)
    return DailySummary(
        date=date,
        commit_count=len(messages),
        files_changed=_files_changed(text),
        focus_area=parse_focus_area(text),
        commit_messages=tuple(messages),
    )


def read_daily_logs_in_range(vault: Path, project: str, start: dt.date, end: dt.date) -> list[DailySummary]:
    """Summaries for days in [start, end] that have a log with at least one commit, oldest first."""
    out: list[DailySummary] = []
    for day in dates_in_range(start, end):
        text = read_text(daily_log_path(vault, project, day))
        if text is None:
            continue
        summary = summarize_daily_log(text, format_date(day))
        if summary.commit_count > 0:
            out.append(summary)
    return out


def aggregate_focus_areas(summaries: list[DailySummary]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for s in summaries:
        counts[s.focus_area] = counts.get(s.focus_area, 0) + s.commit_count
    return counts


def top_commit_messages(summaries: list[DailySummary], limit: int = 10) -> list[str]:
    out: list[str] = []
    for s in summaries:
        out.extend(s.commit_messages)
        if len(out) >= limit:
            break
    return out[: max(0, limit)]
