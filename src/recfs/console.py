"""Console output for the recfs CLI."""

from __future__ import annotations

import os
import stat
from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from recfs.users import User


class TUI:
    """Text output for recfs commands (non-interactive)."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize TUI.

        Args:
            console: Console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Show success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_actions(self, actions: list[str]) -> None:
        """Show actions recorded during a dry run.

        Args:
            actions: Recorded action strings, in order.
        """
        if not actions:
            self.console.print("[dim]No actions recorded.[/dim]")
            return

        self.console.print("[bold]Dry run, nothing was changed:[/bold]")
        for action in actions:
            self.console.print(f"  {action}", markup=False)

    def show_stat(self, path: str, info: os.stat_result | None) -> None:
        """Show stat information for a path.

        Args:
            path: The path that was inspected.
            info: Stat result, or None when the filesystem has none.
        """
        if info is None:
            self.console.print(f"[dim]No information for {path}[/dim]")
            return

        table = Table(title=path, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Type", "directory" if stat.S_ISDIR(info.st_mode) else "file")
        table.add_row("Mode", stat.filemode(info.st_mode))
        table.add_row("Size", str(info.st_size))
        table.add_row(
            "Modified", datetime.fromtimestamp(info.st_mtime).strftime("%Y-%m-%d %H:%M")
        )
        self.console.print(table)

    def show_user(self, user: User) -> None:
        """Show a single user and their keys."""
        self.console.print(f"[bold cyan]{user.name}[/bold cyan]")
        if not user.keys:
            self.console.print("  [dim]No keys[/dim]")
        for key_name, key in user.keys.items():
            self.console.print(f"  {key_name}: {key}", markup=False)

    def show_users(self, users: list[User]) -> None:
        """Show all users."""
        if not users:
            self.console.print("[yellow]No users registered.[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("Name", style="cyan")
        table.add_column("Keys")
        for user in users:
            table.add_row(user.name, ", ".join(sorted(user.keys)) or "-")
        self.console.print(table)
