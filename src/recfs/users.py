"""User records and lookup.

Users are kept in a JSON registry that is read and written through the
FileSystem protocol, so the same store works against the operating system
and against a RecordingFileSystem in tests.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from recfs.protocols import FileSystem, UserStore

logger = logging.getLogger(__name__)


class RecordNotFoundError(Exception):
    """The backing store holds no matching record."""

    pass


class UserNotFoundError(LookupError):
    """A user lookup by name found nothing."""

    def __init__(self, name: str) -> None:
        super().__init__(f"User {name} not found")
        self.name = name


class User(BaseModel):
    """A user and their named public keys."""

    name: str
    keys: dict[str, str] = Field(default_factory=dict)


class UserRegistry(BaseModel):
    """Registry of users."""

    version: str = "1.0"
    users: list[User] = Field(default_factory=list)


def get_user_or_404(name: str, store: UserStore) -> User:
    """Look up a user by name.

    Args:
        name: User name.
        store: Backing store to query.

    Returns:
        The matching User.

    Raises:
        UserNotFoundError: If the store has no record for name.
    """
    try:
        return store.find(name)
    except RecordNotFoundError as e:
        raise UserNotFoundError(name) from e


class JsonUserStore:
    """User store persisted as a JSON document.

    Satisfies the UserStore protocol structurally.
    """

    def __init__(self, path: Path, filesystem: FileSystem) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document.
            filesystem: Filesystem used for every read and write.
        """
        self.path = path
        self.fs = filesystem

    def load(self) -> UserRegistry:
        """Load the registry.

        A missing or empty document is an empty registry.

        Returns:
            UserRegistry with all users.
        """
        try:
            with self.fs.open(self.path) as f:
                raw = f.read()
        except FileNotFoundError:
            logger.debug("User registry %s not found, starting empty", self.path)
            return UserRegistry()

        if not raw.strip():
            return UserRegistry()
        return UserRegistry.model_validate(json.loads(raw))

    def save(self, registry: UserRegistry) -> None:
        """Write the registry, creating its directory if needed.

        Args:
            registry: UserRegistry to save.
        """
        parent = os.path.dirname(os.fspath(self.path))
        if parent:
            self.fs.mkdir_all(parent, 0o755)
        data = registry.model_dump()
        with self.fs.create(self.path) as f:
            f.write_string(json.dumps(data, indent=2))
        logger.debug("Saved %d users to %s", len(registry.users), self.path)

    def find(self, name: str) -> User:
        """Find a user by name.

        Raises:
            RecordNotFoundError: If no user has that name.
        """
        for user in self.load().users:
            if user.name == name:
                return user
        raise RecordNotFoundError("not found")

    def list_users(self) -> list[User]:
        return self.load().users

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
        registry = self.load()
        if any(u.name == name for u in registry.users):
            raise ValueError(f"User '{name}' already exists")

        user = User(name=name, keys=keys or {})
        registry.users.append(user)
        self.save(registry)
        return user

    def remove_user(self, name: str) -> bool:
        """Remove a user.

        Returns:
            True if removed, False if not found.
        """
        registry = self.load()
        original_count = len(registry.users)
        registry.users = [u for u in registry.users if u.name != name]

        if len(registry.users) < original_count:
            self.save(registry)
            return True
        return False
