from __future__ import annotations

import datetime as dt
import sys

from .daily_log import extract_commit_hashes, parse_existing_log
from .errors import LogParseError
from .models import Commit


def extract_fingerprints(text: str) -> set[str]:
    return extract_commit_hashes(text)


def new_commits(local: list[Commit], known: set[str]) -> list[Commit]:
    return [c for c in local if c.short_hash not in known]


def _recover_prior(existing_text: str, day: dt.date | None) -> list[Commit]:
    try:
        return parse_existing_log(existing_text, day=day)
    except LogParseError as e:
        print(f"Warning: could not recover commits from existing log ({e}); using local commits only.", file=sys.stderr)
        return []


def merge_commits(local: list[Commit], existing_text: str | None, day: dt.date | None = None) -> list[Commit]:
    """
    Combine freshly queried commits with commits recorded in an existing log.

    Another machine may have logged commits this clone has never fetched, so
    prior commits missing from `local` are kept. Result is unique by short
    hash and sorted newest first.
    """
    seen: set[str] = set()
    merged: list[Commit] = []
    for c in local:
        if c.short_hash in seen:
            continue
        seen.add(c.short_hash)
        merged.append(c)

    prior = _recover_prior(existing_text, day) if existing_text else []
    for c in prior:
        if c.short_hash in seen:
            continue
        seen.add(c.short_hash)
        merged.append(c)

    merged.sort(key=lambda c: c.timestamp, reverse=True)
    return merged
