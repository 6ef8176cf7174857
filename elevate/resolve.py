"""Resolution of user and group specifiers and of executables on a search path."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

_ID_TEXT = re.compile(r"\+?[0-9]+")
_ID_MAX = 2**32 - 1

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class NameOrId:
    """A user or group given either by name or as ``#<numeric id>``."""

    name: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> Optional["NameOrId"]:
        """Parse ``text``; return None when it is empty or an invalid ``#id``."""
        if not text:
            return None
        if text.startswith("#"):
            digits = text[1:]
            if not _ID_TEXT.fullmatch(digits):
                return None
            number = int(digits)
            if number > _ID_MAX:
                return None
            return cls(id=number)
        return cls(name=text)

    @property
    def is_id(self) -> bool:
        return self.id is not None


def is_valid_executable(path: PathLike) -> bool:
    """Return whether ``path`` is a regular file with any executable bit set."""
    try:
        mode = os.stat(path).st_mode
    except (OSError, ValueError):
        return False
    return stat.S_ISREG(mode) and mode & 0o111 != 0


def resolve_path(command: PathLike, path: str) -> Optional[Path]:
    """Find ``command`` in the colon-separated search ``path``.

    Empty entries and ``.`` denote the current directory; it is searched
    only after every other entry, to prevent command spoofing.
    """
    search_current = False

    for segment in path.split(":"):
        if segment in ("", "."):
            search_current = True
            continue
        candidate = Path(segment) / command
        if is_valid_executable(candidate):
            return candidate

    if search_current:
        try:
            candidate = Path.cwd() / command
        except OSError:
            return None
        if is_valid_executable(candidate):
            return candidate

    return None