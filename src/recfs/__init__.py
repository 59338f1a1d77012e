"""Filesystem abstraction with recording test doubles."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from recfs.protocols import File, FileSystem, UserStore

__all__ = [
    "__version__",
    "File",
    "FileSystem",
    "UserStore",
]
