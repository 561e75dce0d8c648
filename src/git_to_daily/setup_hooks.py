from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from .errors import GitQueryError, NotARepositoryError
from .git import get_repo_toplevel, run_git

HOOK_MARKER = "git-to-daily"
POST_COMMIT_HOOK = """#!/bin/sh
# git-to-daily: auto-generate daily log on commit
if command -v git-to-daily >/dev/null 2>&1; then
  git-to-daily generate >/dev/null 2>&1
fi
exit 0
"""


def is_valid_vault(path: Path) -> bool:
    return path.is_dir() and (path / ".obsidian").is_dir()


def default_vault_search_dirs(home: Path) -> list[Path]:
    return [
        home,
        home / "Documents",
        home / "Desktop",
        home / "Library" / "Mobile Documents" / "iCloud~md~obsidian" / "Documents",
    ]


def detect_vaults(search_dirs: list[Path]) -> list[Path]:
    found: list[Path] = []
    seen: set[Path] = set()

    for d in search_dirs:
        try:
            entries = sorted(d.iterdir())
        except OSError:
            continue
        for entry in entries:
            if entry.name.startswith(".") or not is_valid_vault(entry):
                continue
            key = entry.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(entry)
    return found


def _write_hook(hooks_dir: Path) -> Path:
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook = hooks_dir / "post-commit"
    hook.write_text(POST_COMMIT_HOOK, encoding="utf-8")
    hook.chmod(0o755)
    return hook


def install_local_hook(repo: Path) -> Path:
    top = get_repo_toplevel(repo)
    if top is None:
        raise NotARepositoryError(repo)
    code, out, err = run_git(["rev-parse", "--git-dir"], cwd=top)
    if code != 0:
        raise GitQueryError(f"Could not locate .git directory: {err.strip()}")
    git_dir = Path(out.strip())
    if not git_dir.is_absolute():
        git_dir = top / git_dir
    return _write_hook(git_dir / "hooks")


def global_hooks_path(cwd: Path) -> str:
    code, out, _ = run_git(["config", "--global", "--get", "core.hooksPath"], cwd=cwd)
    return out.strip() if code == 0 else ""


def install_global_hook(hooks_dir: Path) -> tuple[Path, str]:
    """Install the hook into `hooks_dir` and point core.hooksPath at it; returns (hook, previous hooksPath)."""
    hook = _write_hook(hooks_dir)
    previous = global_hooks_path(hooks_dir)
    code, _, err = run_git(["config", "--global", "core.hooksPath", str(hooks_dir)], cwd=hooks_dir)
    if code != 0:
        raise GitQueryError(f"Failed to set core.hooksPath: {err.strip()}")
    return hook, previous


def _hook_state(hook: Path) -> str:
    if not hook.exists():
        return "not found"
    try:
        content = hook.read_text(encoding="utf-8")
    except OSError:
        return "unreadable"
    return f"installed ({HOOK_MARKER})" if HOOK_MARKER in content else "exists (other)"


def format_status(*, config_path: Path, config: dict, hooks_path: str, cwd: Path, cli_path: Optional[str] = None) -> str:
    lines = ["git-to-daily status", ""]
    lines.append(f"Config: {config_path}")
    vault_s = str(config.get("vault_path", "") or "").strip()
    if vault_s:
        lines.append(f"  vault_path: {vault_s}")
    else:
        lines.append('  (not found -- run "git-to-daily init" to set up)')

    lines.append("")
    if vault_s:
        vault = Path(vault_s).expanduser()
        lines.append(f"Vault path exists: {'yes' if vault.is_dir() else 'NO'}")
        lines.append(f"Has .obsidian:     {'yes' if is_valid_vault(vault) else 'NO'}")
    else:
        lines.append("Vault: (no config)")

    lines.append("")
    if hooks_path:
        lines.append(f"Global core.hooksPath: {hooks_path}")
        lines.append(f"  post-commit hook:  {_hook_state(Path(hooks_path).expanduser() / 'post-commit')}")
    else:
        lines.append("Global core.hooksPath: (not set)")

    lines.append("")
    if cli_path is None:
        cli_path = shutil.which(HOOK_MARKER) or ""
    lines.append(f"CLI in PATH: yes ({cli_path})" if cli_path else "CLI in PATH: no")

    local_git = cwd / ".git"
    if local_git.is_dir():
        lines.append("")
        lines.append(f"Local .git/hooks/post-commit: {_hook_state(local_git / 'hooks' / 'post-commit')}")
    return "\n".join(lines) + "\n"


def default_global_hooks_dir(home: Path | None = None) -> Path:
    if home is None:
        home = Path.home()
    return home / ".config" / "git" / "hooks"
