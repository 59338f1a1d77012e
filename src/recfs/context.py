"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so a RecordingFileSystem or any other test double
can be injected without inheritance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from recfs.protocols import FileSystem, UserStore

# Default data location
DATA_DIR = Path.home() / ".recfs"

USERS_FILE = "users.json"


def _default_filesystem() -> FileSystem:
    """Create the default filesystem implementation."""
    from recfs.filesystem import OsFileSystem

    return OsFileSystem()


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    """

    users: UserStore
    filesystem: FileSystem = field(default_factory=_default_filesystem)


def create_context(
    data_dir: Path | None = None,
    filesystem: FileSystem | None = None,
    dry_run: bool = False,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        data_dir: Override data directory (for testing).
        filesystem: Override filesystem implementation.
        dry_run: Use a RecordingFileSystem so nothing touches disk.

    Returns:
        Configured AppContext with all dependencies.
    """
    from recfs.users import JsonUserStore

    if filesystem is None:
        if dry_run:
            from recfs.testing import RecordingFileSystem

            filesystem = RecordingFileSystem()
        else:
            filesystem = _default_filesystem()

    users = JsonUserStore((data_dir or DATA_DIR) / USERS_FILE, filesystem)
    return AppContext(users=users, filesystem=filesystem)
