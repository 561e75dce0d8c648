from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from git_to_daily.errors import NotARepositoryError
from git_to_daily.setup_hooks import (
    HOOK_MARKER,
    detect_vaults,
    format_status,
    global_hooks_path,
    install_global_hook,
    install_local_hook,
    is_valid_vault,
)


def _run(cmd: list[str], *, cwd: Path) -> str:
    proc = subprocess.run(cmd, cwd=str(cwd), check=True, capture_output=True, text=True)
    return proc.stdout.strip()


def _vault(path: Path) -> Path:
    (path / ".obsidian").mkdir(parents=True)
    return path


def test_is_valid_vault(tmp_path: Path) -> None:
    assert is_valid_vault(_vault(tmp_path / "Notes"))
    (tmp_path / "Plain").mkdir()
    assert not is_valid_vault(tmp_path / "Plain")
    assert not is_valid_vault(tmp_path / "Missing")


def test_detect_vaults(tmp_path: Path) -> None:
    home = tmp_path / "home"
    docs = home / "Documents"
    _vault(home / "Work")
    _vault(docs / "Personal")
    _vault(home / ".hidden")
    (home / "NotAVault").mkdir()

    found = detect_vaults([home, docs, tmp_path / "nowhere"])

    assert found == [home / "Work", docs / "Personal"]


def test_detect_vaults_dedupes_symlinks(tmp_path: Path) -> None:
    real = _vault(tmp_path / "a" / "Notes")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "Notes").symlink_to(real, target_is_directory=True)

    assert detect_vaults([tmp_path / "a", tmp_path / "b"]) == [real]


def test_install_local_hook(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    _run(["git", "init"], cwd=repo)

    hook = install_local_hook(repo)

    assert hook.resolve() == (repo / ".git" / "hooks" / "post-commit").resolve()
    assert HOOK_MARKER in hook.read_text(encoding="utf-8")
    assert os.access(hook, os.X_OK)


def test_install_local_hook_outside_repo(tmp_path: Path) -> None:
    with pytest.raises(NotARepositoryError):
        install_local_hook(tmp_path)


def test_install_global_hook_reports_previous_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text("", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))

    first_dir = tmp_path / "hooks-a"
    hook, previous = install_global_hook(first_dir)
    assert previous == ""
    assert hook == first_dir / "post-commit"
    assert global_hooks_path(tmp_path) == str(first_dir)

    _, previous = install_global_hook(tmp_path / "hooks-b")
    assert previous == str(first_dir)


def test_format_status(tmp_path: Path) -> None:
    vault = _vault(tmp_path / "Notes")
    hooks = tmp_path / "hooks"
    hooks.mkdir()
    (hooks / "post-commit").write_text(f"#!/bin/sh\n# {HOOK_MARKER}\n", encoding="utf-8")
    cwd = tmp_path / "repo"
    (cwd / ".git" / "hooks").mkdir(parents=True)

    out = format_status(
        config_path=tmp_path / "config.json",
        config={"vault_path": str(vault)},
        hooks_path=str(hooks),
        cwd=cwd,
        cli_path="/usr/local/bin/git-to-daily",
    )

    assert out.startswith("git-to-daily status\n")
    assert f"  vault_path: {vault}" in out
    assert "Vault path exists: yes" in out
    assert "Has .obsidian:     yes" in out
    assert f"Global core.hooksPath: {hooks}" in out
    assert f"post-commit hook:  installed ({HOOK_MARKER})" in out
    assert "CLI in PATH: yes (/usr/local/bin/git-to-daily)" in out
    assert "Local .git/hooks/post-commit: not found" in out


def test_format_status_without_config(tmp_path: Path) -> None:
    out = format_status(config_path=tmp_path / "config.json", config={}, hooks_path="", cwd=tmp_path, cli_path="")
    assert "not found -- run \"git-to-daily init\"" in out
    assert "Vault: (no config)" in out
    assert "Global core.hooksPath: (not set)" in out
    assert "CLI in PATH: no" in out
    assert "Local .git" not in out
