from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping, Optional

APP_NAME = "git-to-daily"
VAULT_ENV_VAR = "GIT_TO_DAILY_VAULT"


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    if env is None:
        env = os.environ
    base = (env.get("XDG_CONFIG_HOME") or "").strip()
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME / "config.json"


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config_path: Path, config: dict) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def resolve_vault_path(
    explicit: str | Path | None,
    config: dict,
    env: Mapping[str, str] | None = None,
) -> Optional[Path]:
    """Flag, then saved config, then the environment. None if none is set."""
    if env is None:
        env = os.environ
    for candidate in (explicit, config.get("vault_path"), env.get(VAULT_ENV_VAR)):
        s = str(candidate or "").strip()
        if s:
            return Path(s).expanduser()
    return None


def resolve_project_name(explicit: str | None, config: dict, repo: Path) -> str:
    for candidate in (explicit, config.get("project_name")):
        s = str(candidate or "").strip()
        if s:
            return s
    return repo.resolve().name
