"""CLI commands using Typer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from recfs.context import AppContext

import typer

from recfs import __version__
from recfs.console import TUI
from recfs.context import create_context
from recfs.testing import RecordingFileSystem
from recfs.users import UserNotFoundError, get_user_or_404

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="recfs",
    help="Filesystem operations with a recording dry-run mode",
    no_args_is_help=True,
)

user_app = typer.Typer(help="Manage users")

app.add_typer(user_app, name="user")

tui = TUI()

# Commands accept an AppContext here for dependency injection; never set from the command line.
ContextOption = Annotated[str | None, typer.Option("--context", hidden=True)]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        tui.console.print(f"recfs v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every filesystem call")
    ] = False,
) -> None:
    """Filesystem operations with a recording dry-run mode."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# ============================================================================
# Filesystem Commands
# ============================================================================


def _parse_mode(mode: str) -> int:
    """Parse an octal permission string such as 0755."""
    try:
        return int(mode, 8)
    except ValueError as e:
        tui.show_error(f"Invalid mode '{mode}': expected an octal number")
        raise typer.Exit(1) from e


def _report_dry_run(ctx: AppContext) -> None:
    """Print the recorded actions when running against a recording filesystem."""
    if isinstance(ctx.filesystem, RecordingFileSystem):
        tui.show_actions(ctx.filesystem.actions)


def _fail(message: str, error: OSError) -> typer.Exit:
    logger.debug("%s: %s", message, error)
    tui.show_error(f"{message}: {error.strerror or error}")
    return typer.Exit(1)


@app.command()
def mkdir(
    path: Annotated[str, typer.Argument(help="Directory to create")],
    mode: Annotated[str, typer.Option("--mode", "-m", help="Octal permission bits")] = "0755",
    parents: Annotated[
        bool, typer.Option("--parents", "-p", help="Create missing parent directories")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Record actions without touching disk")
    ] = False,
    _context: ContextOption = None,
) -> None:
    """Create a directory."""
    ctx = _context or create_context(dry_run=dry_run)
    perm = _parse_mode(mode)

    try:
        if parents:
            ctx.filesystem.mkdir_all(path, perm)
        else:
            ctx.filesystem.mkdir(path, perm)
    except OSError as e:
        raise _fail(f"Cannot create directory '{path}'", e) from e

    _report_dry_run(ctx)
    if not dry_run:
        tui.show_success(f"Created directory '{path}'")


@app.command()
def touch(
    path: Annotated[str, typer.Argument(help="File to create or truncate")],
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Record actions without touching disk")
    ] = False,
    _context: ContextOption = None,
) -> None:
    """Create an empty file."""
    ctx = _context or create_context(dry_run=dry_run)

    try:
        ctx.filesystem.create(path).close()
    except OSError as e:
        raise _fail(f"Cannot create '{path}'", e) from e

    _report_dry_run(ctx)
    if not dry_run:
        tui.show_success(f"Created '{path}'")


@app.command()
def rm(
    path: Annotated[str, typer.Argument(help="Path to remove")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Remove directories and their contents")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Record actions without touching disk")
    ] = False,
    _context: ContextOption = None,
) -> None:
    """Remove a file or directory."""
    ctx = _context or create_context(dry_run=dry_run)

    try:
        if recursive:
            ctx.filesystem.remove_all(path)
        else:
            ctx.filesystem.remove(path)
    except OSError as e:
        raise _fail(f"Cannot remove '{path}'", e) from e

    _report_dry_run(ctx)
    if not dry_run:
        tui.show_success(f"Removed '{path}'")


@app.command()
def stat(
    path: Annotated[str, typer.Argument(help="Path to inspect")],
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Record actions without touching disk")
    ] = False,
    _context: ContextOption = None,
) -> None:
    """Show information about a path."""
    ctx = _context or create_context(dry_run=dry_run)

    try:
        info = ctx.filesystem.stat(path)
    except OSError as e:
        raise _fail(f"Cannot stat '{path}'", e) from e

    _report_dry_run(ctx)
    tui.show_stat(path, info)


# ============================================================================
# User Commands
# ============================================================================


def _parse_keys(keys: list[str] | None) -> dict[str, str]:
    """Parse name=value key options into a mapping."""
    parsed: dict[str, str] = {}
    for item in keys or []:
        key_name, sep, value = item.partition("=")
        if not sep or not key_name:
            tui.show_error(f"Invalid key '{item}': expected name=value")
            raise typer.Exit(1)
        parsed[key_name.strip()] = value.strip()
    return parsed


@user_app.command("show")
def user_show(
    name: Annotated[str, typer.Argument(help="User name")],
    _context: ContextOption = None,
) -> None:
    """Show a user."""
    ctx = _context or create_context()

    try:
        user = get_user_or_404(name, ctx.users)
    except UserNotFoundError as e:
        tui.show_error(str(e))
        raise typer.Exit(1) from e

    tui.show_user(user)


@user_app.command("add")
def user_add(
    name: Annotated[str, typer.Argument(help="User name")],
    key: Annotated[
        list[str] | None, typer.Option("--key", "-k", help="Public key as name=value")
    ] = None,
    _context: ContextOption = None,
) -> None:
    """Add a user."""
    ctx = _context or create_context()
    keys = _parse_keys(key)

    try:
        ctx.users.add_user(name, keys)
    except ValueError as e:
        tui.show_error(str(e))
        raise typer.Exit(1) from e

    tui.show_success(f"Added user '{name}'")


@user_app.command("remove")
def user_remove(
    name: Annotated[str, typer.Argument(help="User name")],
    _context: ContextOption = None,
) -> None:
    """Remove a user."""
    ctx = _context or create_context()

    if ctx.users.remove_user(name):
        tui.show_success(f"Removed user '{name}'")
    else:
        tui.show_error(f"User '{name}' not found")
        raise typer.Exit(1)


@user_app.command("list")
def user_list(
    _context: ContextOption = None,
) -> None:
    """List users."""
    ctx = _context or create_context()
    tui.show_users(ctx.users.list_users())


if __name__ == "__main__":
    app()
