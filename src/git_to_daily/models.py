from __future__ import annotations

import dataclasses
import datetime as dt
from pathlib import Path

SHORT_HASH_LEN = 7
FILE_STATUSES = ("added", "modified", "deleted")


def short_hash(fingerprint: str) -> str:
    return (fingerprint or "").strip()[:SHORT_HASH_LEN]


def local_timestamp(ts: dt.datetime) -> dt.datetime:
    # Naive timestamps are local wall-clock time.
    if ts.tzinfo is None:
        return ts.astimezone()
    return ts


@dataclasses.dataclass(frozen=True)
class FileChange:
    path: str
    status: str  # added | modified | deleted

    def __post_init__(self) -> None:
        if self.status not in FILE_STATUSES:
            raise ValueError(f"invalid file status: {self.status!r}")


@dataclasses.dataclass(frozen=True)
class Commit:
    hash: str
    message: str
    author: str
    timestamp: dt.datetime
    files: tuple[FileChange, ...] = ()
    recorded_file_count: int | None = None  # ledger count for commits recovered from text

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", local_timestamp(self.timestamp))
        object.__setattr__(self, "files", tuple(self.files))

    @property
    def short_hash(self) -> str:
        return short_hash(self.hash)

    @property
    def file_count(self) -> int:
        if self.recorded_file_count is not None:
            return self.recorded_file_count
        return len(self.files)


@dataclasses.dataclass(frozen=True)
class DailySummary:
    date: str  # YYYY-MM-DD
    commit_count: int
    files_changed: int
    focus_area: str
    commit_messages: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class WeekBreakdown:
    week_number: int
    commits: int


@dataclasses.dataclass(frozen=True)
class WeeklyAggregate:
    week_id: str
    start_date: str
    end_date: str
    daily_summaries: tuple[DailySummary, ...]
    total_commits: int
    total_files_changed: int
    active_days: int


@dataclasses.dataclass(frozen=True)
class MonthlyAggregate:
    month_id: str
    month_name: str
    days_in_month: int
    daily_summaries: tuple[DailySummary, ...]
    total_commits: int
    total_files_changed: int
    active_days: int
    weekly_breakdown: tuple[WeekBreakdown, ...]


@dataclasses.dataclass(frozen=True)
class DailyLogResult:
    path: Path
    action: str  # created | updated | unchanged | no_commits
    commit_count: int = 0
    new_commits: int = 0
