from __future__ import annotations

import datetime as dt
import functools
from pathlib import Path
from typing import Callable, Optional

from .daily_log import render_daily_log
from .daily_reader import read_daily_logs_in_range
from .git import commits_since, start_of_day
from .merge import extract_fingerprints, merge_commits, new_commits
from .models import Commit, DailyLogResult
from .periods import format_month_id, format_week_id, previous_month_range, previous_week_range
from .summaries import MIN_ACTIVE_DAYS, build_monthly, build_weekly, render_monthly_log, render_weekly_log
from .vault import daily_log_path, ensure_vault, monthly_log_path, read_text, weekly_log_path, write_text

CommitQuery = Callable[[dt.datetime], list[Commit]]


def generate_daily_log(
    *,
    vault: Path,
    project: str,
    repo: Path,
    today: dt.date | None = None,
    query: Optional[CommitQuery] = None,
) -> DailyLogResult:
    """
    Write (or refresh) today's daily log for `project`.

    Commits already recorded in an existing log, including ones made on other
    machines, are kept. When every local commit is already recorded the file
    is left untouched.
    """
    ensure_vault(vault)
    if today is None:
        today = dt.date.today()
    if query is None:
        query = functools.partial(commits_since, repo)

    local = [c for c in query(start_of_day(today)) if c.timestamp.astimezone().date() == today]
    path = daily_log_path(vault, project, today)
    if not local:
        return DailyLogResult(path=path, action="no_commits")

    existing = read_text(path)
    if existing is not None:
        fresh = new_commits(local, extract_fingerprints(existing))
        if not fresh:
            return DailyLogResult(path=path, action="unchanged", commit_count=len(local))
    else:
        fresh = local

    merged = merge_commits(local, existing, day=today)
    write_text(path, render_daily_log(merged, day=today))
    return DailyLogResult(
        path=path,
        action="created" if existing is None else "updated",
        commit_count=len(merged),
        new_commits=len(fresh),
    )


def generate_weekly_summary(*, vault: Path, project: str, reference_date: dt.date) -> Optional[Path]:
    week = previous_week_range(reference_date)
    path = weekly_log_path(vault, project, format_week_id(week.start))
    if path.exists():
        return None
    summaries = read_daily_logs_in_range(vault, project, week.start, week.end)
    if len(summaries) < MIN_ACTIVE_DAYS:
        return None
    return write_text(path, render_weekly_log(build_weekly(summaries, week.start, week.end)))


def generate_monthly_summary(*, vault: Path, project: str, reference_date: dt.date) -> Optional[Path]:
    month = previous_month_range(reference_date)
    path = monthly_log_path(vault, project, format_month_id(month.start))
    if path.exists():
        return None
    summaries = read_daily_logs_in_range(vault, project, month.start, month.end)
    if len(summaries) < MIN_ACTIVE_DAYS:
        return None
    return write_text(path, render_monthly_log(build_monthly(summaries, month.start)))


def generate_period_summaries(*, vault: Path, project: str, reference_date: dt.date | None = None) -> list[Path]:
    """Weekly and monthly rollups for the periods before `reference_date`; existing ones are never rewritten."""
    ensure_vault(vault)
    if reference_date is None:
        reference_date = dt.date.today()
    written: list[Path] = []
    weekly = generate_weekly_summary(vault=vault, project=project, reference_date=reference_date)
    if weekly is not None:
        written.append(weekly)
    monthly = generate_monthly_summary(vault=vault, project=project, reference_date=reference_date)
    if monthly is not None:
        written.append(monthly)
    return written
