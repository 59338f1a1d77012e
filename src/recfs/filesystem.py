"""Filesystem abstraction backed by the operating system.

This module provides the production implementation of the FileSystem
protocol. Every call is forwarded to the os and shutil modules and any
OSError they raise reaches the caller unmodified.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

    from recfs.protocols import StrPath

logger = logging.getLogger(__name__)

_ACCESS_MASK = os.O_RDONLY | os.O_WRONLY | os.O_RDWR


def _file_mode(flags: int) -> str:
    """Translate os.O_* flags into a mode string for os.fdopen."""
    access = flags & _ACCESS_MASK
    append = bool(flags & os.O_APPEND)
    if access == os.O_RDWR:
        return "a+b" if append else "r+b"
    if access == os.O_WRONLY:
        return "ab" if append else "wb"
    return "rb"


class OsFile:
    """File handle over a native binary file object.

    Satisfies the File protocol structurally.
    """

    def __init__(self, raw: IO[bytes]) -> None:
        self._raw = raw

    def close(self) -> None:
        """Close the underlying file."""
        self._raw.close()

    def read(self, size: int = -1) -> bytes:
        """Read from the current offset."""
        return self._raw.read(size)

    def read_at(self, size: int, offset: int) -> bytes:
        """Read at an absolute offset without moving the file offset."""
        self._raw.flush()
        if hasattr(os, "pread"):
            return os.pread(self._raw.fileno(), size, offset)
        position = self._raw.tell()
        try:
            self._raw.seek(offset)
            return self._raw.read(size)
        finally:
            self._raw.seek(position)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the file offset."""
        return self._raw.seek(offset, whence)

    def write(self, data: bytes) -> int:
        """Write bytes at the current offset."""
        return self._raw.write(data)

    def write_string(self, s: str) -> int:
        """Write text encoded as UTF-8, returning the number of bytes written."""
        return self._raw.write(s.encode("utf-8"))

    def stat(self) -> os.stat_result:
        """Stat the open descriptor."""
        self._raw.flush()
        return os.fstat(self._raw.fileno())

    def __enter__(self) -> OsFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class OsFileSystem:
    """Production filesystem implementation.

    Wraps os and shutil operations with the semantics of their POSIX
    counterparts. Satisfies the FileSystem protocol structurally.
    """

    def create(self, name: StrPath) -> OsFile:
        """Create or truncate a file, opened for reading and writing."""
        logger.debug("create %s", name)
        return OsFile(open(name, "w+b"))

    def mkdir(self, name: StrPath, mode: int = 0o777) -> None:
        """Create a single directory."""
        logger.debug("mkdir %s (mode %o)", name, mode)
        os.mkdir(name, mode)

    def mkdir_all(self, path: StrPath, mode: int = 0o777) -> None:
        """Create a directory along with any missing parents."""
        logger.debug("mkdir_all %s (mode %o)", path, mode)
        os.makedirs(path, mode, exist_ok=True)

    def open(self, name: StrPath) -> OsFile:
        """Open a file read-only."""
        logger.debug("open %s", name)
        return OsFile(open(name, "rb"))

    def open_file(self, name: StrPath, flags: int, mode: int = 0o666) -> OsFile:
        """Open a file with raw os.O_* flags."""
        logger.debug("open_file %s (flags %#x, mode %o)", name, flags, mode)
        fd = os.open(name, flags, mode)
        try:
            raw = os.fdopen(fd, _file_mode(flags))
        except Exception:
            os.close(fd)
            raise
        return OsFile(raw)

    def remove(self, name: StrPath) -> None:
        """Remove a file or an empty directory."""
        logger.debug("remove %s", name)
        if os.path.isdir(name) and not os.path.islink(name):
            os.rmdir(name)
        else:
            os.remove(name)

    def remove_all(self, path: StrPath) -> None:
        """Remove a path and any children. Missing paths are not an error."""
        logger.debug("remove_all %s", path)
        if not os.path.lexists(path):
            return
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)

    def stat(self, name: StrPath) -> os.stat_result:
        """Stat a path, following symlinks."""
        logger.debug("stat %s", name)
        return os.stat(name)
