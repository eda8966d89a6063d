from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .commits import classify_commit
from .config import Config, KNOWN_KEYS, ScopeConfig
from .errors import ScopeTagError
from .paths import ensure_in_repo, get_repo_config_path
from .resolver import ResolutionResult, resolve
from .vcs.git import GitRepository
from .version import bump_level


app = typer.Typer(
    name="scopetag",
    help="scopetag: plan the next version tag of a monorepo scope from conventional commits.",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    log_level = os.getenv("SCOPETAG_LOG_LEVEL", "WARNING" if not verbose else "DEBUG")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
    )


def _print_error(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")


def _print_result(result: ResolutionResult, verbose: bool) -> None:
    head = result.head_commit.short_sha if result.head_commit else "?"
    if not result.changed:
        console.print(f"[yellow]No scope in latest commit {head} of {result.branch}; no tag planned[/yellow]")
        return

    table = Table(title=f"scope {result.scope}", show_header=False)
    table.add_column("field", style="dim")
    table.add_column("value")
    table.add_row("branch", f"{result.branch} ({head})")
    table.add_row("bump", bump_level(result.classification).value)
    table.add_row("current", f"{result.current_version} ({result.current_commit.short_sha})")
    table.add_row("next", str(result.new_version))
    table.add_row("tag", result.tag_name or "")
    console.print(table)

    if verbose and result.skipped:
        console.print("\n[dim]Skipped:[/dim]")
        for event in result.skipped:
            console.print(f"  [dim]•[/dim] {escape(event.subject)}: {event.reason.value} {escape(event.detail)}")


def cmd_resolve(
    repo: Optional[Path] = None,
    branch: Optional[str] = None,
    pre_release_name: Optional[str] = None,
    pre_release_timestamp: Optional[str] = None,
    build_metadata: Optional[str] = None,
    as_json: bool = False,
    verbose: bool = False,
) -> int:
    """Resolve the next version for the latest commit and print it"""
    try:
        root = ensure_in_repo(repo)
        config = Config.load_with_repo_context(root)
        scope_config = config.to_scope_config(
            branch=branch,
            pre_release_name=pre_release_name,
            pre_release_timestamp_layout=pre_release_timestamp,
            build_metadata=build_metadata,
        )
        result = resolve(scope_config, GitRepository(root))
    except ScopeTagError as e:
        _print_error(e)
        return 1
    except Exception as e:  # noqa: BLE001
        _print_error(e)
        return 2

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result, verbose)
    return 0


def cmd_classify(message: str, as_json: bool = False) -> int:
    """Print the classification of a commit message"""
    classification = classify_commit(message)
    level = bump_level(classification).value if classification.scope else None
    if as_json:
        typer.echo(json.dumps({**classification.to_dict(), "bump": level}, indent=2))
        return 0
    console.print(f"type: {escape(classification.type) or '(none)'}")
    console.print(f"scope: {escape(classification.scope) or '(none)'}")
    console.print(f"breaking: {classification.is_breaking}")
    console.print(f"subject: {escape(classification.subject) or '(none)'}")
    console.print(f"bump: {level or 'none (no scope)'}")
    return 0


def _config_for(global_: bool, start_path: Optional[Path] = None) -> Config:
    if global_:
        return Config(enable_hierarchy=False)
    repo_config = get_repo_config_path(start_path)
    if repo_config is None:
        return Config(enable_hierarchy=False)
    return Config(config_path=repo_config, enable_hierarchy=True)


def cmd_config_set(key: str, value: str, global_: bool = False) -> int:
    """Set a configuration value"""
    if key not in KNOWN_KEYS:
        typer.echo(f"Error: Unknown key '{key}'. Must be one of: {', '.join(KNOWN_KEYS)}", err=True)
        return 2
    try:
        if key == "pre_release_name":
            ScopeConfig(pre_release_name=value).validate()
        config = _config_for(global_)
        config.set(key, value)
        config.save()
    except ScopeTagError as e:
        typer.echo(f"Error: {e}", err=True)
        return 2
    typer.echo(f"✓ Set {key} = {value} ({config.config_path})")
    return 0


def cmd_config_get(key: Optional[str], global_: bool = False) -> int:
    """Get configuration value(s)"""
    try:
        config = _config_for(global_)
    except ScopeTagError as e:
        typer.echo(f"Error: {e}", err=True)
        return 2
    keys = [key] if key else list(KNOWN_KEYS)
    if not key:
        typer.echo("Configuration:")
    for name in keys:
        value = config.get(name)
        prefix = "" if key else "  "
        typer.echo(f"{prefix}{name} = {'(not set)' if value is None else value}")
    return 0


@app.command("resolve", help="Compute the next tag for the scope of the latest commit (read-only)")
def resolve_command(
    repo: Optional[Path] = typer.Option(None, "--repo", "-C", help="Repository path (default: current directory)"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to read the latest commit from"),
    pre_release_name: Optional[str] = typer.Option(None, "--pre-release-name", "-p", help="Pre-release label, e.g. rc"),
    pre_release_timestamp: Optional[str] = typer.Option(
        None, "--pre-release-timestamp", "-T", help="Pre-release timestamp: epoch, datetime or a strftime format"
    ),
    build_metadata: Optional[str] = typer.Option(None, "--build-metadata", "-m", help="Build metadata appended after '+'"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show skipped tags and debug logs"),
):
    _configure_logging(verbose)
    code = cmd_resolve(
        repo=repo,
        branch=branch,
        pre_release_name=pre_release_name,
        pre_release_timestamp=pre_release_timestamp,
        build_metadata=build_metadata,
        as_json=as_json,
        verbose=verbose,
    )
    raise typer.Exit(code)


@app.command("classify", help="Show how a commit message is classified")
def classify_command(
    message: str = typer.Argument(..., help="Commit message"),
    as_json: bool = typer.Option(False, "--json", help="Print the classification as JSON"),
):
    code = cmd_classify(message, as_json=as_json)
    raise typer.Exit(code)


@app.command("config", help="Get or set configuration values")
def config_command(
    key: Optional[str] = typer.Argument(None, help="Configuration key"),
    value: Optional[str] = typer.Argument(None, help="Value to set (omit to get current value)"),
    global_: bool = typer.Option(False, "--global", help="Use ~/.scopetag.yaml instead of the repository config"),
):
    if value is not None:
        code = cmd_config_set(key, value, global_=global_)
    else:
        code = cmd_config_get(key, global_=global_)
    raise typer.Exit(code)


def main(argv: list[str] | None = None) -> int:
    try:
        code = app(args=argv, prog_name="scopetag", standalone_mode=False)
        return int(code or 0)
    except typer.Exit as e:
        return int(e.exit_code or 0)
    except SystemExit as e:
        return int(e.code or 0)
    except Exception as e:  # noqa: BLE001
        if str(e):
            typer.echo(f"Unexpected error: {e}", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
