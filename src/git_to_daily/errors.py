from __future__ import annotations

from pathlib import Path


class GitToDailyError(RuntimeError):
    """Base class for errors that abort a run with a user-facing message."""


class NotARepositoryError(GitToDailyError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Not a git repository: {path}\nRun this command from within a git repository.")
        self.path = path


class GitQueryError(GitToDailyError):
    pass


class VaultPathInvalidError(GitToDailyError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Vault path does not exist: {path}\nPlease check the --vault path and try again.")
        self.path = path


class VaultIOError(GitToDailyError):
    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message} {path}")
        self.path = path


class LogParseError(ValueError):
    """An existing log has a ledger that does not follow the expected grammar.

    Not fatal: callers recovering prior commits treat it as "nothing to recover".
    """
