from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import VAULT_ENV_VAR, default_config_path, load_config, resolve_project_name, resolve_vault_path, save_config
from .errors import GitToDailyError
from .generate import generate_daily_log, generate_period_summaries
from .git import get_repo_toplevel
from .periods import parse_date
from .setup_hooks import (
    default_global_hooks_dir,
    default_vault_search_dirs,
    detect_vaults,
    format_status,
    global_hooks_path,
    install_global_hook,
    install_local_hook,
    is_valid_vault,
)


def _prompt_str(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--vault", type=str, default="", help=f"Path to your notes vault (default: saved config, then ${VAULT_ENV_VAR}).")
    p.add_argument("--project", type=str, default="", help="Project name (default: repository directory name).")
    p.add_argument("--repo", type=Path, default=Path("."), help="Repository to read commits from.")
    p.add_argument("--config", type=Path, default=None, help="Path to config.json (default: ~/.config/git-to-daily/config.json).")


def _resolve_target(args: argparse.Namespace) -> tuple[Path, str, Path] | None:
    config = load_config(args.config or default_config_path())
    vault = resolve_vault_path(args.vault, config)
    if vault is None:
        print(f'Error: no vault configured. Pass --vault, set ${VAULT_ENV_VAR}, or run "git-to-daily init".', file=sys.stderr)
        return None
    repo = args.repo.resolve()
    top = get_repo_toplevel(repo) or repo
    return vault, resolve_project_name(args.project, config, top), top


def _print_summaries(written: list[Path]) -> None:
    for p in written:
        print(f"Summary created: {p}")


def cmd_generate(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-to-daily generate", description="Generate today's daily log from git commits.")
    _add_common(p)
    p.add_argument("--no-summaries", action="store_true", help="Skip weekly/monthly summary generation.")
    args = p.parse_args(argv)

    target = _resolve_target(args)
    if target is None:
        return 2
    vault, project, repo = target

    print("Fetching today's commits...")
    result = generate_daily_log(vault=vault, project=project, repo=repo)
    if result.action == "no_commits":
        print("No commits found for today.")
    elif result.action == "unchanged":
        print(f"Daily log already up to date: {result.path}")
    else:
        noun = "commit" if result.commit_count == 1 else "commits"
        print(f"Daily log {result.action}: {result.path} ({result.commit_count} {noun}, {result.new_commits} new)")

    if not args.no_summaries:
        _print_summaries(generate_period_summaries(vault=vault, project=project))
    return 0


def cmd_summary(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-to-daily summary", description="Generate weekly/monthly summaries from daily logs.")
    _add_common(p)
    p.add_argument("--date", type=parse_date, default=None, help="Reference date YYYY-MM-DD (default: today).")
    args = p.parse_args(argv)

    target = _resolve_target(args)
    if target is None:
        return 2
    vault, project, _ = target

    written = generate_period_summaries(vault=vault, project=project, reference_date=args.date)
    if not written:
        print("No summaries generated (need at least 2 active days in a period without an existing summary).")
    _print_summaries(written)
    return 0


def _choose_vault(explicit: str, interactive: bool) -> Path | None:
    if explicit:
        vault = Path(explicit).expanduser().resolve()
        if not is_valid_vault(vault):
            print(f'Error: "{vault}" is not a valid Obsidian vault (missing .obsidian directory).', file=sys.stderr)
            return None
        print(f"Using vault: {vault}")
        return vault

    detected = detect_vaults(default_vault_search_dirs(Path.home()))
    if len(detected) == 1:
        print(f"Found vault: {detected[0]}")
        return detected[0]
    if not interactive:
        print("Error: could not pick a vault automatically; pass --vault.", file=sys.stderr)
        return None
    if detected:
        print("Multiple vaults found:\n")
        for i, v in enumerate(detected, start=1):
            print(f"  {i}) {v}")
        ans = _prompt_str(f"\nSelect a vault (1-{len(detected)}): ")
        if not ans.isdigit() or not 1 <= int(ans) <= len(detected):
            print("Error: invalid selection.", file=sys.stderr)
            return None
        return detected[int(ans) - 1]

    print("No vaults detected.")
    vault = Path(_prompt_str("Enter the path to your vault: ")).expanduser().resolve()
    if not is_valid_vault(vault):
        print(f'Error: "{vault}" is not a valid Obsidian vault (missing .obsidian directory).', file=sys.stderr)
        return None
    return vault


def cmd_init(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-to-daily init", description="Save the vault path and install the post-commit hook.")
    p.add_argument("--vault", type=str, default="", help="Path to your vault (must contain .obsidian).")
    p.add_argument("--local", action="store_true", help="Install the hook in this repository only.")
    p.add_argument("--config", type=Path, default=None, help="Path to config.json.")
    args = p.parse_args(argv)

    print("git-to-daily init\n")
    vault = _choose_vault(args.vault, interactive=sys.stdin.isatty() and sys.stdout.isatty())
    if vault is None:
        return 1

    config_path = args.config or default_config_path()
    config = load_config(config_path)
    config["vault_path"] = str(vault)
    save_config(config_path, config)
    print(f"\nConfig saved: {config_path}")

    if args.local:
        hook = install_local_hook(Path.cwd())
        print(f"Local hook installed: {hook}")
    else:
        hooks_dir = default_global_hooks_dir()
        hook, previous = install_global_hook(hooks_dir)
        if previous and Path(previous).expanduser() != hooks_dir:
            print(f'Warning: core.hooksPath was "{previous}"; now "{hooks_dir}". Move any hooks you still need.')
        print(f"Global hook installed: {hook}")

    print('\nRun "git-to-daily status" to verify your setup.')
    return 0


def cmd_status(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-to-daily status", description="Show configuration and hook status.")
    p.add_argument("--config", type=Path, default=None, help="Path to config.json.")
    args = p.parse_args(argv)

    config_path = args.config or default_config_path()
    cwd = Path.cwd()
    print(format_status(config_path=config_path, config=load_config(config_path), hooks_path=global_hooks_path(cwd), cwd=cwd), end="")
    return 0


COMMANDS = {
    "generate": (cmd_generate, "Generate today's daily log (and due weekly/monthly summaries)."),
    "summary": (cmd_summary, "Generate weekly/monthly summaries for the previous week/month."),
    "init": (cmd_init, "Save the vault path and install the post-commit hook."),
    "status": (cmd_status, "Show configuration and hook status."),
}


def print_help() -> None:
    print("usage: git-to-daily <command> [options]")
    print("")
    print("Turn git activity into daily, weekly and monthly markdown logs.")
    print("")
    print("commands:")
    for name, (_, help_s) in COMMANDS.items():
        print(f"  {name:<10} {help_s}")
    print("")
    print("Run `git-to-daily <command> --help` for command-specific options.")


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        print_help()
        return 0
    entry = COMMANDS.get(argv[0])
    if entry is None:
        print(f"Unknown command: {argv[0]!r}", file=sys.stderr)
        print_help()
        return 2
    try:
        return entry[0](argv[1:])
    except GitToDailyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
