"""Fake implementations of the filesystem protocols.

These implementations can be used to replace the operating system in tests.
RecordingFileSystem performs no I/O at all: it records every call as an
action string and hands out in-memory FakeFile instances, so a test can
assert on what the code under test tried to do::

    fs = RecordingFileSystem()
    fs.create("/tmp/file.txt")
    fs.has_action("create /tmp/file.txt")  # True

FailureFileSystem behaves the same, except that open, open_file and remove
record the call and then raise FileNotFoundError.
"""

from __future__ import annotations

import errno
import io
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

    from recfs.protocols import StrPath

__all__ = ["FailureFileSystem", "FakeFile", "RecordingFileSystem", "format_mode"]


def format_mode(mode: int) -> str:
    """Render permission bits in octal with a leading zero.

    Example:
        >>> format_mode(0o755)
        '0755'
        >>> format_mode(0)
        '0'
    """
    return f"0{mode:o}" if mode else "0"


class FakeFile:
    """In-memory stand-in for an open file.

    Methods act like the ones on a real file handle, but work on an internal
    byte buffer instead of a file on disk.

    Attributes:
        content: The whole file content.
        current: Cursor used by write; updated by read, read_at, seek and close.

    Note:
        write replaces everything after the cursor with the written data. The
        reader view is a snapshot of the content taken on first read and is
        only refreshed when the file is opened again through the filesystem.
    """

    def __init__(self, content: bytes = b"") -> None:
        self.content = content
        self.current = 0
        self._reader: io.BytesIO | None = None

    def reader(self) -> io.BytesIO:
        """Return the reader view, creating it on first use."""
        if self._reader is None:
            self._reader = io.BytesIO(self.content)
        return self._reader

    def reset_reader(self) -> None:
        """Drop the reader view so the next read sees the current content."""
        self._reader = None

    def close(self) -> None:
        self.current = 0

    def read(self, size: int = -1) -> bytes:
        data = self.reader().read(size)
        self.current += len(data)
        return data

    def read_at(self, size: int, offset: int) -> bytes:
        if offset < 0:
            raise ValueError(f"negative offset {offset}")
        data = self.reader().getvalue()[offset : offset + max(size, 0)]
        self.current += offset + len(data)
        return data

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self.current = self.reader().seek(offset, whence)
        return self.current

    def write(self, data: bytes) -> int:
        self.content = self.content[: self.current] + bytes(data)
        return len(data)

    def write_string(self, s: str) -> int:
        self.content = s.encode("utf-8")
        return len(self.content)

    def stat(self) -> None:
        return None

    def __enter__(self) -> FakeFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class RecordingFileSystem:
    """A filesystem that does not execute any action, just records them.

    Every method appends a description of the call to an ordered log and
    never raises. Files handed out are FakeFile instances cached by path:
    opening the same path twice returns the same buffer.

    Args:
        file_content: Initial content of every file created on first access.
    """

    def __init__(self, file_content: bytes | str = b"") -> None:
        if isinstance(file_content, str):
            file_content = file_content.encode("utf-8")
        self.file_content = file_content
        self._actions: list[str] = []
        self._files: dict[str, FakeFile] = {}

    @property
    def actions(self) -> list[str]:
        """Recorded actions, in invocation order."""
        return list(self._actions)

    def has_action(self, action: str) -> bool:
        """Check if a given action was executed in the filesystem.

        For example, calling ``open("/tmp/file.txt")`` records the action
        ``"open /tmp/file.txt"``.

        Args:
            action: The exact action string.

        Returns:
            True if the action was recorded at least once.
        """
        return action in self._actions

    def _record(self, action: str) -> None:
        self._actions.append(action)

    def _open(self, name: StrPath) -> FakeFile:
        key = os.fspath(name)
        fake = self._files.get(key)
        if fake is not None:
            fake.reset_reader()
            return fake
        fake = FakeFile(self.file_content)
        self._files[key] = fake
        return fake

    def _delete_file(self, name: StrPath) -> None:
        self._files.pop(os.fspath(name), None)

    def create(self, name: StrPath) -> FakeFile:
        """Record ``create <name>`` and return a FakeFile."""
        self._record(f"create {os.fspath(name)}")
        return self._open(name)

    def mkdir(self, name: StrPath, mode: int = 0o777) -> None:
        """Record ``mkdir <name> with mode <mode>``."""
        self._record(f"mkdir {os.fspath(name)} with mode {format_mode(mode)}")

    def mkdir_all(self, path: StrPath, mode: int = 0o777) -> None:
        """Record ``mkdirall <path> with mode <mode>``."""
        self._record(f"mkdirall {os.fspath(path)} with mode {format_mode(mode)}")

    def open(self, name: StrPath) -> FakeFile:
        """Record ``open <name>`` and return a FakeFile."""
        self._record(f"open {os.fspath(name)}")
        return self._open(name)

    def open_file(self, name: StrPath, flags: int, mode: int = 0o666) -> FakeFile:
        """Record ``openfile <name> with mode <mode>`` and return a FakeFile."""
        self._record(f"openfile {os.fspath(name)} with mode {format_mode(mode)}")
        return self._open(name)

    def remove(self, name: StrPath) -> None:
        """Record ``remove <name>`` and forget the cached file."""
        self._record(f"remove {os.fspath(name)}")
        self._delete_file(name)

    def remove_all(self, path: StrPath) -> None:
        """Record ``removeall <path>`` and forget the cached file."""
        self._record(f"removeall {os.fspath(path)}")
        self._delete_file(path)

    def stat(self, name: StrPath) -> None:
        """Record ``stat <name>`` and return None."""
        self._record(f"stat {os.fspath(name)}")
        return None


def _no_such_entry(name: StrPath) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), os.fspath(name))


class FailureFileSystem(RecordingFileSystem):
    """Like RecordingFileSystem, but open, open_file and remove raise ENOENT.

    The call is always recorded before the error is raised, so tests can
    assert both that the action was attempted and that it failed.
    """

    def open(self, name: StrPath) -> FakeFile:
        super().open(name)
        raise _no_such_entry(name)

    def open_file(self, name: StrPath, flags: int, mode: int = 0o666) -> FakeFile:
        super().open_file(name, flags, mode)
        return self.open(name)

    def remove(self, name: StrPath) -> None:
        super().remove(name)
        raise _no_such_entry(name)
