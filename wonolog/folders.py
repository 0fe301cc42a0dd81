"""Log folder resolution: normalise, create and harden the target directory."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .hardening import SecurityHardener

logger = logging.getLogger("wonolog.folders")

_DUPLICATE_SLASHES = re.compile(r"(?<=.)/{2,}")
_DRIVE_LETTER = re.compile(r"^([a-z]):")


def normalize_path(path: str) -> str:
    """
    Normalise separators the same way on every platform.

    Backslashes become forward slashes, duplicate slashes are collapsed
    (a leading // network-share prefix is kept) and Windows drive letters
    are upper-cased.
    """
    path = path.replace("\\", "/")
    path = _DUPLICATE_SLASHES.sub("/", path)
    return _DRIVE_LETTER.sub(lambda m: m.group(1).upper() + ":", path)


@dataclass(frozen=True)
class ResolvedFolder:
    path: str = ""
    hardened: bool = False

    @property
    def enabled(self) -> bool:
        return bool(self.path)


class FolderResolver:
    """Turns a raw folder setting into a usable directory, or disables logging."""

    def __init__(self, hardener: Optional[SecurityHardener] = None):
        self.hardener = hardener if hardener is not None else SecurityHardener()

    def resolve(self, raw_folder: str) -> ResolvedFolder:
        """
        Resolve raw_folder into a ResolvedFolder. Never raises.

        An empty path in the result means the default handler is disabled.
        """
        if not raw_folder or not isinstance(raw_folder, str):
            return ResolvedFolder()

        folder = normalize_path(raw_folder).rstrip("/")
        if not folder:
            return ResolvedFolder()

        try:
            Path(folder).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create log folder {folder}, default handler disabled: {e}")
            return ResolvedFolder()

        path, hardened = self.hardener.harden_folder(folder)
        return ResolvedFolder(path=path, hardened=hardened)

    def resolve_folder(self, raw_folder: str) -> str:
        return self.resolve(raw_folder).path
