"""Tests for CLI commands using context injection.

Commands accept a _context parameter for dependency injection, so they run
against a RecordingFileSystem or FailureFileSystem without touching disk.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from recfs import cli
from recfs.context import AppContext
from recfs.testing import FailureFileSystem, RecordingFileSystem
from recfs.users import JsonUserStore, RecordNotFoundError, User


@pytest.fixture
def recording_fs() -> RecordingFileSystem:
    """Create a RecordingFileSystem."""
    return RecordingFileSystem()


@pytest.fixture
def recording_context(recording_fs: RecordingFileSystem) -> AppContext:
    """Create an AppContext over a RecordingFileSystem."""
    users = JsonUserStore(Path("/data/users.json"), recording_fs)
    return AppContext(users=users, filesystem=recording_fs)


@pytest.fixture
def failure_context() -> AppContext:
    """Create an AppContext over a FailureFileSystem."""
    return AppContext(users=MagicMock(), filesystem=FailureFileSystem())


class TestFilesystemCommands:
    """Tests for mkdir, touch, rm and stat."""

    def test_mkdir(self, recording_context: AppContext, recording_fs: RecordingFileSystem) -> None:
        """Test mkdir creates a single directory with the given mode."""
        # Act
        cli.mkdir(path="/srv/repos", mode="0700", _context=recording_context)

        # Assert
        assert recording_fs.actions == ["mkdir /srv/repos with mode 0700"]

    def test_mkdir_parents(
        self, recording_context: AppContext, recording_fs: RecordingFileSystem
    ) -> None:
        """Test mkdir --parents uses mkdir_all."""
        cli.mkdir(path="/srv/a/b", parents=True, _context=recording_context)

        assert recording_fs.actions == ["mkdirall /srv/a/b with mode 0755"]

    def test_mkdir_invalid_mode(self, recording_context: AppContext) -> None:
        """Test a non-octal mode exits with an error."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.mkdir(path="/srv/repos", mode="rwx", _context=recording_context)
        assert exc_info.value.exit_code == 1

    def test_mkdir_os_error(self) -> None:
        """Test an OSError from the filesystem exits with an error."""
        # Arrange
        fs = MagicMock()
        fs.mkdir.side_effect = FileExistsError(17, "File exists", "/srv/repos")
        ctx = AppContext(users=MagicMock(), filesystem=fs)

        # Act & Assert
        with pytest.raises(typer.Exit) as exc_info:
            cli.mkdir(path="/srv/repos", _context=ctx)
        assert exc_info.value.exit_code == 1

    def test_touch(self, recording_context: AppContext, recording_fs: RecordingFileSystem) -> None:
        """Test touch creates the file."""
        cli.touch(path="/srv/file.txt", _context=recording_context)

        assert recording_fs.has_action("create /srv/file.txt")

    def test_rm(self, recording_context: AppContext, recording_fs: RecordingFileSystem) -> None:
        """Test rm removes a single path."""
        cli.rm(path="/srv/file.txt", _context=recording_context)

        assert recording_fs.actions == ["remove /srv/file.txt"]

    def test_rm_recursive(
        self, recording_context: AppContext, recording_fs: RecordingFileSystem
    ) -> None:
        """Test rm --recursive uses remove_all."""
        cli.rm(path="/srv/tree", recursive=True, _context=recording_context)

        assert recording_fs.actions == ["removeall /srv/tree"]

    def test_rm_missing(self, failure_context: AppContext) -> None:
        """Test rm reports ENOENT and exits with an error."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.rm(path="/srv/file.txt", _context=failure_context)

        assert exc_info.value.exit_code == 1
        assert failure_context.filesystem.has_action("remove /srv/file.txt")

    def test_stat_dry_run(
        self,
        recording_context: AppContext,
        recording_fs: RecordingFileSystem,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test stat against a recording filesystem prints the actions."""
        cli.stat(path="/srv/file.txt", dry_run=True, _context=recording_context)

        out = capsys.readouterr().out
        assert "stat /srv/file.txt" in out
        assert recording_fs.actions == ["stat /srv/file.txt"]

    def test_stat_real_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test stat shows the size of a file on disk."""
        target = tmp_path / "f.txt"
        target.write_bytes(b"12345")
        ctx = AppContext(users=MagicMock())

        cli.stat(path=str(target), _context=ctx)

        out = capsys.readouterr().out
        assert "Size" in out
        assert "5" in out

    def test_dry_run_prints_actions(
        self, recording_context: AppContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test --dry-run lists recorded actions."""
        cli.mkdir(path="/srv/x", parents=True, dry_run=True, _context=recording_context)

        out = capsys.readouterr().out
        assert "Dry run" in out
        assert "mkdirall /srv/x with mode 0755" in out

    def test_dry_run_without_context(self, tmp_path: Path) -> None:
        """Test --dry-run leaves the disk alone."""
        target = tmp_path / "should-not-exist"

        cli.mkdir(path=str(target), dry_run=True)

        assert not target.exists()


class TestUserCommands:
    """Tests for user management commands."""

    def test_user_add_and_show(
        self, recording_context: AppContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test adding a user then showing it."""
        cli.user_add(name="alice", key=["laptop=ssh-rsa AAAA"], _context=recording_context)
        cli.user_show(name="alice", _context=recording_context)

        out = capsys.readouterr().out
        assert "Added user 'alice'" in out
        assert "laptop: ssh-rsa AAAA" in out

    def test_user_add_invalid_key(self, recording_context: AppContext) -> None:
        """Test a key without name=value exits with an error."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.user_add(name="alice", key=["no-separator"], _context=recording_context)
        assert exc_info.value.exit_code == 1

    def test_user_add_duplicate(self, recording_context: AppContext) -> None:
        """Test adding the same user twice exits with an error."""
        cli.user_add(name="alice", _context=recording_context)

        with pytest.raises(typer.Exit) as exc_info:
            cli.user_add(name="alice", _context=recording_context)
        assert exc_info.value.exit_code == 1

    def test_user_show_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test showing an unknown user exits with an error."""
        # Arrange
        users = MagicMock()
        users.find.side_effect = RecordNotFoundError("not found")
        ctx = AppContext(users=users, filesystem=RecordingFileSystem())

        # Act & Assert
        with pytest.raises(typer.Exit) as exc_info:
            cli.user_show(name="bob", _context=ctx)
        assert exc_info.value.exit_code == 1
        assert "User bob not found" in capsys.readouterr().out

    def test_user_remove(self, recording_context: AppContext) -> None:
        """Test removing an existing user."""
        cli.user_add(name="alice", _context=recording_context)

        cli.user_remove(name="alice", _context=recording_context)

        assert recording_context.users.list_users() == []

    def test_user_remove_not_found(self, recording_context: AppContext) -> None:
        """Test removing an unknown user exits with an error."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.user_remove(name="nobody", _context=recording_context)
        assert exc_info.value.exit_code == 1

    def test_user_list(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test listing users."""
        users = MagicMock()
        users.list_users.return_value = [User(name="alice"), User(name="bob")]
        ctx = AppContext(users=users, filesystem=RecordingFileSystem())

        cli.user_list(_context=ctx)

        out = capsys.readouterr().out
        assert "alice" in out
        assert "bob" in out


class TestVersion:
    """Tests for the version callback."""

    def test_version_callback(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the version and exits."""
        with pytest.raises(typer.Exit):
            cli.version_callback(True)

        assert "recfs v" in capsys.readouterr().out


class TestHelp:
    """Tests for generated help text."""

    @pytest.mark.parametrize(
        "args",
        [["mkdir", "--help"], ["rm", "--help"], ["stat", "--help"], ["user", "show", "--help"]],
    )
    def test_context_option_hidden(self, args: list[str]) -> None:
        """Test the injected context parameter is not listed in --help."""
        result = CliRunner().invoke(cli.app, args)

        assert result.exit_code == 0
        assert "--context" not in result.output
