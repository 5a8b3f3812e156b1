from __future__ import annotations

from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core import __version__
from core.config import Config
from core.config_file import (
    create_default_config,
    default_config_path,
    find_config_file,
    load_config,
    validate_config,
)
from core.exceptions import ConfigurationError, TmuxstarError
from core.logging_setup import configure_logging
from segments.formatter import render_git, render_time
from tools.git_backends import create_git_backend
from tools.repo_inspector import RepoInspector

app = typer.Typer(
    add_completion=False,
    help="Status-bar segments for tmux: a git badge and a clock.",
)
config_app = typer.Typer(add_completion=False, help="Inspect or create the configuration file.")
app.add_typer(config_app, name="config")

console = Console(markup=False, emoji=False, highlight=False, soft_wrap=True)
err_console = Console(stderr=True)


def _fail(message: str, code: int = 1) -> NoReturn:
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=code)


def _settings(ctx: typer.Context) -> Config:
    profile = (ctx.obj or {}).get("profile")
    try:
        settings = Config.load(profile=profile)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
    configure_logging(settings.log_file, settings.log_level)
    return settings


def _emit(text: str, newline: bool = True) -> None:
    # Segment text goes out byte-for-byte: no tab expansion, no ANSI stripping
    typer.echo(text, nl=newline, color=True)


def _pick(flag: Optional[str], configured: str) -> str:
    # An explicit empty string is a value, not "unset"
    return configured if flag is None else flag


def _print_git(settings: Config, path: str, label_fg: str, icon: str) -> None:
    try:
        backend = create_git_backend(settings.git_backend, timeout=settings.git_timeout)
    except TmuxstarError as e:
        _fail(str(e))
    line = render_git(RepoInspector(backend), path, label_fg, icon)
    if line is not None:
        _emit(line)


def _print_time(fmt: str, icon: str) -> None:
    _emit(render_time(fmt, icon), newline=False)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
    profile: Optional[str] = typer.Option(
        None, "--profile", help="Config file profile to apply (env: TMUXSTAR_PROFILE)"
    ),
):
    """tmuxstar renders one segment per invocation."""
    if version:
        console.print(f"tmuxstar {__version__}")
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=2)
    ctx.obj = {"profile": profile}


@app.command(name="git")
def git_command(
    ctx: typer.Context,
    path: str = typer.Option(".", "--path", help="Directory to describe"),
    label_fg: Optional[str] = typer.Option(None, "--label-fg", help="Label color (default: white)"),
    icon: Optional[str] = typer.Option(None, "--icon", help="Glyph drawn in the state color (default: a space)"),
):
    """Print the git badge for PATH, or nothing outside a repository."""
    settings = _settings(ctx)
    _print_git(settings, path, _pick(label_fg, settings.git_label_fg), _pick(icon, settings.git_icon))


@app.command(name="time")
def time_command(
    ctx: typer.Context,
    fmt: Optional[str] = typer.Option(
        None, "--format", help="strftime pattern (default: %Y-%m-%d %I:%M%p)"
    ),
    icon: Optional[str] = typer.Option(None, "--icon", help="Glyph before the time; empty for none"),
):
    """Print the current local time."""
    settings = _settings(ctx)
    _print_time(_pick(fmt, settings.time_format), _pick(icon, settings.time_icon))


@app.command(name="left")
def left_command(
    ctx: typer.Context,
    path: str = typer.Option(".", "--path", help="Directory to describe"),
    label_fg: Optional[str] = typer.Option(None, "--label-fg", help="Label color (default: white)"),
    icon: Optional[str] = typer.Option(None, "--icon", help="Glyph drawn in the state color"),
):
    """Git badge under the left/right vocabulary."""
    settings = _settings(ctx)
    _print_git(settings, path, _pick(label_fg, settings.left_label_fg), _pick(icon, settings.left_icon))


@app.command(name="right")
def right_command(ctx: typer.Context):
    """Current time with seconds, under the left/right vocabulary."""
    settings = _settings(ctx)
    _print_time(settings.right_format, settings.right_icon)


@config_app.command(name="show")
def config_show(ctx: typer.Context):
    """Show the effective configuration."""
    settings = _settings(ctx)
    table = Table(title="tmuxstar configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in settings.as_rows():
        table.add_row(name, value)
    console.print(table)
    if settings.source is None:
        console.print(f"No config file at {default_config_path()}; using defaults.")


@config_app.command(name="init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
):
    """Write a commented default config file."""
    try:
        path = create_default_config(force=force)
    except ConfigurationError as e:
        _fail(f"{e} (use --force to overwrite)")
    except OSError as e:
        _fail(f"Cannot write config file: {e}")
    console.print(f"Wrote {path}")


@config_app.command(name="check")
def config_check(ctx: typer.Context):
    """Validate the config file."""
    path = find_config_file()
    if path is None:
        console.print(f"No config file at {default_config_path()}; nothing to check.")
        return
    profile = (ctx.obj or {}).get("profile")
    try:
        data = load_config(path, profile=profile)
    except ConfigurationError as e:
        _fail(str(e))
    is_valid, errors = validate_config(data)
    if not is_valid:
        for error in errors:
            err_console.print(f"[red]✗[/red] {escape(error)}")
        raise typer.Exit(code=1)
    console.print(f"{path}: OK")
