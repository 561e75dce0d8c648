from __future__ import annotations

import dataclasses
import datetime as dt
import re
from collections import Counter

from .errors import LogParseError
from .models import Commit, FileChange, short_hash
from .periods import format_date

DEFAULT_FOCUS_AREA = "Development"
NO_DURATION = "N/A"

# Ordered: on equal counts the category seen first in the day's commits wins.
FOCUS_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Testing", ("test", "tests", "testing", "spec")),
    ("Bug Fixes", ("fix", "fixes", "fixed", "bugfix", "hotfix", "bug")),
    ("Feature Development", ("feat", "feature", "features")),
    ("Refactoring", ("refactor", "refactoring", "cleanup", "perf")),
    ("Documentation", ("docs", "doc", "documentation", "readme")),
    ("Maintenance", ("chore", "build", "ci", "deps", "release", "style")),
)

STATUS_MARKERS = {
    "added": "➕",
    "modified": "✏️",
    "deleted": "🗑️",
}
MARKER_STATUSES = {
    "➕": "added",
    "✏️": "modified",
    "✏": "modified",
    "📝": "modified",
    "🗑️": "deleted",
    "🗑": "deleted",
}
DONE_MARKER = "✅"

_CONVENTIONAL_RE = re.compile(r"^\s*([a-z]+)(?:\([^)]*\))?!?:")
_WORD_RE = re.compile(r"[a-z]+")
_LEDGER_RE = re.compile(r"^##\s+Commits\s*$\s*^```[^\n]*\n(.*?)^```", re.MULTILINE | re.DOTALL)
_ENTRY_HEADER_RE = re.compile(r"^\*\*\d{1,2}:\d{2}\*\* - ", re.MULTILINE)
_ENTRY_RE = re.compile(
    r"^\*\*(\d{1,2}):(\d{2})\*\* - (.*?)[ \t]*\n"
    r"- Hash: `([0-9A-Za-z]+)`[ \t]*\n"
    r"- Author: (.*?)[ \t]*\n"
    r"- Files changed: (\d+)[ \t]*$",
    re.MULTILINE,
)
_HASH_RE = re.compile(r"Hash: `([0-9A-Za-z]+)`")
_FILE_LINE_RE = re.compile(r"^\s*-\s+(➕|✏️|✏|📝|🗑️|🗑)\s+`(.+?)`\s+-[ \t]*(.*?)\s*$")
_DONE_LINE_RE = re.compile(r"^\s*-\s+" + DONE_MARKER + r"[ \t]*(.*?)\s*$")
_FOCUS_RE = re.compile(r"^\s*-?\s*(?:\*\*)?Focus Area(?:\*\*)?:\s*(.+?)\s*$", re.MULTILINE)


def one_line(message: str) -> str:
    return " ".join((message or "").split())


def _category_for_message(message: str) -> str | None:
    msg = (message or "").lower()
    m = _CONVENTIONAL_RE.match(msg)
    if m:
        kind = m.group(1)
        for category, keywords in FOCUS_CATEGORIES:
            if kind in keywords:
                return category
    words = set(_WORD_RE.findall(msg))
    for category, keywords in FOCUS_CATEGORIES:
        if words.intersection(keywords):
            return category
    return None


def infer_focus_area(messages: list[str]) -> str:
    counts: Counter[str] = Counter()
    for msg in messages:
        category = _category_for_message(msg)
        if category is not None:
            counts[category] += 1
    if not counts:
        return DEFAULT_FOCUS_AREA
    # Counter keeps first-seen order, and max() returns the first maximal item.
    return max(counts.items(), key=lambda kv: kv[1])[0]


def format_duration(commits: list[Commit]) -> str:
    if not commits:
        return NO_DURATION
    stamps = [c.timestamp for c in commits]
    minutes = int((max(stamps) - min(stamps)).total_seconds() // 60)
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"


def _log_day(commits: list[Commit], day: dt.date | None) -> dt.date:
    if day is not None:
        return day
    if commits:
        return max(c.timestamp for c in commits).astimezone().date()
    return dt.date.today()


def render_daily_log(commits: list[Commit], day: dt.date | None = None) -> str:
    date_s = format_date(_log_day(commits, day))
    if not commits:
        return (
            "\n\n".join(
                [
                    f"# Daily Log - {date_s}",
                    "\n".join(
                        [
                            "## Session Info",
                            f"- Date: {date_s}",
                            f"- Duration: {NO_DURATION}",
                            f"- Focus Area: {DEFAULT_FOCUS_AREA}",
                        ]
                    ),
                    "No activity recorded for this day.",
                ]
            )
            + "\n"
        )

    messages = [one_line(c.message) for c in commits]
    sections = [
        f"# Daily Log - {date_s}",
        "\n".join(
            [
                "## Session Info",
                f"- Date: {date_s}",
                f"- Duration: {format_duration(commits)}",
                f"- Focus Area: {infer_focus_area(messages)}",
            ]
        ),
        "\n".join(["## Work Completed", *[f"- {DONE_MARKER} {m}" for m in messages]]),
        _render_code_changes(commits),
        "---",
        _render_ledger(commits),
    ]
    return "\n\n".join(sections) + "\n"


def _render_code_changes(commits: list[Commit]) -> str:
    lines = ["## Code Changes", "", "### Files Modified"]
    rows = 0
    for c in commits:
        msg = one_line(c.message)
        for f in c.files:
            lines.append(f"- {STATUS_MARKERS[f.status]} `{f.path}` - {msg}")
            rows += 1
    if rows == 0:
        lines.append("- No file changes recorded")
    return "\n".join(lines)


def _render_ledger(commits: list[Commit]) -> str:
    entries: list[str] = []
    for c in commits:
        local = c.timestamp.astimezone()
        entries.append(
            "\n".join(
                [
                    f"**{local.hour:02d}:{local.minute:02d}** - {one_line(c.message)}",
                    f"- Hash: `{c.short_hash}`",
                    f"- Author: {one_line(c.author)}",
                    f"- Files changed: {c.file_count}",
                ]
            )
        )
    return "## Commits\n\n```\n" + "\n\n".join(entries) + "\n```"


def _normalize(text: str) -> str:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


def _section_lines(text: str, heading: str) -> list[str]:
    out: list[str] = []
    inside = False
    for line in _normalize(text).split("\n"):
        s = line.strip()
        if inside:
            if s.startswith("#") or s == "---":
                break
            out.append(line)
        elif s == heading:
            inside = True
    return out


def extract_commit_hashes(text: str) -> set[str]:
    return {short_hash(h) for h in _HASH_RE.findall(_normalize(text))}


def parse_file_changes(text: str) -> list[tuple[FileChange, str]]:
    """File-change list entries as (change, commit message) pairs."""
    out: list[tuple[FileChange, str]] = []
    for line in _section_lines(text, "### Files Modified"):
        m = _FILE_LINE_RE.match(line)
        if not m:
            continue
        marker, path, message = m.groups()
        out.append((FileChange(path=path, status=MARKER_STATUSES[marker]), message))
    return out


def parse_work_completed(text: str) -> list[str]:
    out: list[str] = []
    for line in _section_lines(text, "## Work Completed"):
        m = _DONE_LINE_RE.match(line)
        if m:
            out.append(m.group(1))
    return out


def parse_focus_area(text: str) -> str:
    m = _FOCUS_RE.search(_normalize(text))
    return m.group(1) if m else DEFAULT_FOCUS_AREA


def parse_existing_log(text: str, day: dt.date | None = None) -> list[Commit]:
    """
    Recover commits from a rendered daily log.

    The ledger stores only HH:MM, so timestamps are attached to `day`
    (default: today). Files are re-joined from the "Files Modified" list by
    exact message match; commits sharing a message share those files.
    Raises LogParseError when a ledger exists but cannot be read.
    """
    content = _normalize(text)
    if not re.search(r"^##\s+Commits\s*$", content, re.MULTILINE):
        return []
    block = _LEDGER_RE.search(content)
    if not block:
        raise LogParseError("commit ledger has no fenced block")
    ledger = block.group(1)

    if day is None:
        day = dt.date.today()

    commits: list[Commit] = []
    for m in _ENTRY_RE.finditer(ledger):
        hh, mm, message, fingerprint, author, count = m.groups()
        hour, minute = int(hh), int(mm)
        if hour > 23 or minute > 59:
            raise LogParseError(f"invalid ledger time: {hh}:{mm}")
        commits.append(
            Commit(
                hash=fingerprint,
                message=message,
                author=author,
                timestamp=dt.datetime(day.year, day.month, day.day, hour, minute),
                recorded_file_count=int(count),
            )
        )
    headers = len(_ENTRY_HEADER_RE.findall(ledger))
    if headers != len(commits):
        raise LogParseError(f"malformed ledger: {headers} entries, {len(commits)} readable")

    files_by_message: dict[str, list[FileChange]] = {}
    for change, message in parse_file_changes(content):
        bucket = files_by_message.setdefault(message, [])
        if change not in bucket:
            bucket.append(change)

    out: list[Commit] = []
    for c in commits:
        files = files_by_message.get(c.message)
        if files:
            c = dataclasses.replace(c, files=tuple(files))
        out.append(c)
    return out
