"""Advisory file locks shared by the marker writer and the file handler."""

from typing import IO

try:
    import fcntl
except ImportError:  # Windows: no advisory locks, writes go unlocked
    fcntl = None


def lock(handle: IO) -> None:
    """Take an exclusive advisory lock on an open file (blocking)."""
    if fcntl is not None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)


def unlock(handle: IO) -> None:
    if fcntl is not None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
