"""The command to run together with its arguments."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from .errors import InvalidCommandError
from .resolve import resolve_path

PathLike = Union[str, "os.PathLike[str]"]


def escaped(arguments: Iterable[str]) -> str:
    """Join arguments with spaces, backslash-escaping every character except
    alphanumerics, underscores, hyphens and dollar signs."""
    return " ".join(
        "".join(c if c.isalnum() or c in "_-$" else "\\" + c for c in arg)
        for arg in arguments
    )


def is_qualified(path: PathLike) -> bool:
    """Return whether ``path`` names a location rather than a bare file name.

    A bare name is resolved through the search path; the empty path counts
    as qualified so that it is never resolved.
    """
    text = os.fspath(path)
    stripped = text.rstrip("/")
    if not stripped:
        return True
    return "/" in stripped


@dataclass
class CommandAndArguments:
    command: Path = field(default_factory=Path)
    arguments: list[str] = field(default_factory=list)

    @classmethod
    def try_from_args(
        cls,
        shell: Optional[PathLike],
        arguments: Iterable[str],
        path: str,
    ) -> "CommandAndArguments":
        """Build the command to execute.

        With a shell, the arguments are passed escaped to ``shell -c``.
        Otherwise the first argument is the command, resolved through
        ``path`` unless it is qualified. Raises InvalidCommandError when
        there is no command or it cannot be found.
        """
        args = list(arguments)

        if shell is not None:
            if args:
                args = ["-c", escaped(args)]
            return cls(Path(shell), args)

        if not args:
            raise InvalidCommandError("")

        name, *rest = args
        if is_qualified(name):
            return cls(Path(name), rest)

        resolved = resolve_path(name, path)
        if resolved is None:
            raise InvalidCommandError(name)
        return cls(resolved, rest)