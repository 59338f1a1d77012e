"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the filesystem and
the user store. Designing to interfaces enables:
- Swapping the operating system for an in-memory double in tests
- Recording what a component did to the filesystem without touching disk
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from recfs.users import User

StrPath = Union[str, os.PathLike]


@runtime_checkable
class File(Protocol):
    """Protocol for an open file handle.

    Mirrors the subset of a binary file object the project relies on, plus
    positional reads and whole-string writes.
    """

    def close(self) -> None:
        """Close the handle."""
        ...

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes from the current position.

        Args:
            size: Maximum number of bytes to read. Negative reads to the end.

        Returns:
            The bytes read; empty at end of file.
        """
        ...

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to size bytes starting at offset.

        Args:
            size: Maximum number of bytes to read.
            offset: Absolute position to read from.

        Returns:
            The bytes read; empty when offset is past the end.
        """
        ...

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the read/write position.

        Args:
            offset: Offset relative to whence.
            whence: os.SEEK_SET, os.SEEK_CUR or os.SEEK_END.

        Returns:
            The new absolute position.
        """
        ...

    def write(self, data: bytes) -> int:
        """Write bytes at the current position.

        Args:
            data: Bytes to write.

        Returns:
            Number of bytes written.
        """
        ...

    def write_string(self, s: str) -> int:
        """Write a string to the file.

        Args:
            s: Text to write.

        Returns:
            Number of bytes written (UTF-8).
        """
        ...

    def stat(self) -> os.stat_result | None:
        """Describe the open file.

        Returns:
            Stat result, or None when the implementation has none.
        """
        ...

    def __enter__(self) -> File: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Any simulated or real filesystem implements this protocol. Failures are
    reported by raising OSError subclasses, the same way the os module does.
    """

    def create(self, name: StrPath) -> File:
        """Create or truncate a file and open it for reading and writing.

        Args:
            name: Path of the file.

        Returns:
            The open file.
        """
        ...

    def mkdir(self, name: StrPath, mode: int = 0o777) -> None:
        """Create a directory.

        Args:
            name: Path of the directory.
            mode: Permission bits.

        Raises:
            FileExistsError: If the path already exists.
        """
        ...

    def mkdir_all(self, path: StrPath, mode: int = 0o777) -> None:
        """Create a directory and every missing parent.

        Args:
            path: Path of the directory.
            mode: Permission bits for the created directories.
        """
        ...

    def open(self, name: StrPath) -> File:
        """Open a file for reading.

        Args:
            name: Path of the file.

        Returns:
            The open file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        ...

    def open_file(self, name: StrPath, flags: int, mode: int = 0o666) -> File:
        """Open a file with explicit os.O_* flags and permission bits.

        Args:
            name: Path of the file.
            flags: Bitwise OR of os.O_* flags.
            mode: Permission bits used when the file is created.

        Returns:
            The open file.
        """
        ...

    def remove(self, name: StrPath) -> None:
        """Remove a file or an empty directory.

        Args:
            name: Path to remove.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        ...

    def remove_all(self, path: StrPath) -> None:
        """Remove a path and everything below it.

        Succeeds when the path does not exist.

        Args:
            path: Path to remove.
        """
        ...

    def stat(self, name: StrPath) -> os.stat_result | None:
        """Describe the named file.

        Args:
            name: Path of the file.

        Returns:
            Stat result, or None when the implementation has none.
        """
        ...


@runtime_checkable
class UserStore(Protocol):
    """Protocol for user record lookup."""

    def find(self, name: str) -> User:
        """Find the user record with the given name.

        Args:
            name: User name.

        Returns:
            The matching User.

        Raises:
            RecordNotFoundError: If no record matches.
        """
        ...

    def list_users(self) -> list[User]:
        """List all users.

        Returns:
            List of User objects.
        """
        ...

    def add_user(self, name: str, keys: dict[str, str] | None = None) -> User:
        """Add a user.

        Args:
            name: User name.
            keys: Named public keys.

        Returns:
            The created User.

        Raises:
            ValueError: If a user with the same name already exists.
        """
        ...

    def remove_user(self, name: str) -> bool:
        """Remove a user.

        Args:
            name: User name.

        Returns:
            True if removed, False if not found.
        """
        ...
