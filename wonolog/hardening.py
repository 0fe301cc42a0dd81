"""
Security Hardener for Wonolog log folders.

When the log folder sits inside the host's publicly served content root,
log files could be downloaded by anyone. We try to drop an .htaccess file
denying access. This guarantees nothing (the web server may ignore
.htaccess entirely) and configuring a folder outside the content root
remains the recommended setup.

Everything here is best-effort: filesystem errors are captured and
discarded locally, never raised to the caller.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .locking import lock, unlock

logger = logging.getLogger("wonolog.hardening")

MARKER_FILENAME = ".htaccess"
REDIRECT_SUBDIR = "wonolog"
MARKER_MODE = 0o444

HTACCESS = """<IfModule mod_authz_core.c>
\tRequire all denied
</IfModule>
<IfModule !mod_authz_core.c>
\tDeny from all
</IfModule>
"""


@contextmanager
def _quietly(action: str) -> Iterator[None]:
    """Run a block of filesystem operations, discarding any OSError."""
    try:
        yield
    except OSError as e:
        logger.debug(f"Skipped {action}: {e}")


def is_inside(path: str, root: str) -> bool:
    """True when path is root itself or nested below it, compared per segment."""
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # Mixed absolute/relative paths or different drives
        return False


class SecurityHardener:
    """Writes an access-denial marker into log folders under the content root."""

    def __init__(self, content_root: Optional[str] = None):
        self.content_root = content_root

    def harden(self, folder: str) -> str:
        """Harden folder if needed, returning the folder logs should go to."""
        return self.harden_folder(folder)[0]

    def harden_folder(self, folder: str) -> Tuple[str, bool]:
        """
        Harden folder if it is inside the content root.

        Args:
            folder: Existing log folder

        Returns:
            (folder to log into, whether a marker file was written)
        """
        if (
            not folder
            or not os.path.isdir(folder)
            or not os.access(folder, os.W_OK)
            or os.path.exists(os.path.join(folder, MARKER_FILENAME))
            or not self.content_root
        ):
            return folder, False

        target_dir = os.path.realpath(folder)
        content_dir = os.path.realpath(self.content_root)

        # Logs straight in the content root are too exposed: use a subfolder
        if target_dir == content_dir:
            target_dir = os.path.join(content_dir, REDIRECT_SUBDIR)
            with _quietly(f"creating {target_dir}"):
                os.makedirs(target_dir, exist_ok=True)
            # Never fall back to logging in the content root itself
            if not os.path.isdir(target_dir):
                logger.warning(f"Cannot create {target_dir}, default handler disabled")
                return "", False
            if os.path.exists(os.path.join(target_dir, MARKER_FILENAME)):
                return target_dir, False
            return target_dir, self._write_marker(target_dir)

        # Outside the content root, security is up to the operator
        if not is_inside(target_dir, content_dir):
            return folder, False

        return folder, self._write_marker(target_dir)

    def _write_marker(self, directory: str) -> bool:
        marker = Path(directory) / MARKER_FILENAME
        written = False

        with _quietly(f"writing {marker}"):
            with open(marker, "w", encoding="utf-8") as handle:
                lock(handle)
                handle.write(HTACCESS)
                handle.flush()
                unlock(handle)
            os.chmod(marker, MARKER_MODE)
            written = True

        return written
