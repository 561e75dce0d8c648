from __future__ import annotations

import datetime as dt
import subprocess
from pathlib import Path
from typing import Optional

from .errors import GitQueryError, NotARepositoryError
from .models import Commit, FileChange

COMMIT_MARKER = "@@@"
# Unit separator: never appears in names or subjects.
FIELD_SEP = "\x1f"


def run_git(args: list[str], cwd: Path, timeout_s: int = 60) -> tuple[int, str, str]:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout_s,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitQueryError(f"Failed to run git {' '.join(args[:1])}: {e}") from e
    return proc.returncode, proc.stdout, proc.stderr


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    if not candidate.is_dir():
        return None
    code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    if code != 0 or not out.strip():
        return None
    return Path(out.strip()).resolve()


def is_git_repo(candidate: Path) -> bool:
    return get_repo_toplevel(candidate) is not None


def start_of_day(day: dt.date) -> dt.datetime:
    return dt.datetime(day.year, day.month, day.day).astimezone()


def file_status(code: str) -> str:
    c = (code or "").strip()[:1].upper()
    if c == "A":
        return "added"
    if c == "D":
        return "deleted"
    return "modified"


def parse_name_status_line(line: str) -> Optional[FileChange]:
    parts = line.split("\t")
    if len(parts) < 2:
        return None
    code = parts[0].strip()
    # Renames and copies list old and new path; keep the new one.
    if code[:1] in ("R", "C") and len(parts) >= 3:
        path = parts[2].strip()
    else:
        path = parts[1].strip()
    if not path:
        return None
    return FileChange(path=path, status=file_status(code))


def parse_log_output(out: str) -> list[Commit]:
    commits: list[Commit] = []
    header: Optional[list[str]] = None
    files: list[FileChange] = []

    def flush() -> None:
        if header is None:
            return
        sha, author, iso, subject = header
        commits.append(
            Commit(
                hash=sha,
                message=subject,
                author=author,
                timestamp=dt.datetime.fromisoformat(iso.replace("Z", "+00:00")),
                files=tuple(files),
            )
        )

    for raw in out.splitlines():
        line = raw.rstrip("\n")
        if line.startswith(COMMIT_MARKER):
            flush()
            parts = line[len(COMMIT_MARKER) :].split(FIELD_SEP, 3)
            if len(parts) != 4:
                header = None
                files = []
                continue
            header = parts
            files = []
            continue
        if not line.strip() or header is None:
            continue
        change = parse_name_status_line(line)
        if change is not None:
            files.append(change)
    flush()
    return commits


def commits_since(repo: Path, since: dt.datetime) -> list[Commit]:
    """Commits reachable from HEAD authored at or after `since`, newest first."""
    top = get_repo_toplevel(repo)
    if top is None:
        raise NotARepositoryError(repo)

    code, out, _ = run_git(["rev-parse", "--verify", "-q", "HEAD"], cwd=top)
    if code != 0:
        # Fresh repository without commits.
        return []

    pretty = COMMIT_MARKER + FIELD_SEP.join(["%H", "%an", "%aI", "%s"])
    code, out, err = run_git(
        [
            "log",
            f"--since={since.isoformat()}",
            f"--format={pretty}",
            "--name-status",
        ],
        cwd=top,
    )
    if code != 0:
        raise GitQueryError(f"Failed to retrieve git commits: {err.strip() or f'git exited with {code}'}")
    return parse_log_output(out)
