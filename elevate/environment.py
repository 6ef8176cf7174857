"""Construction of the environment in which the target command runs."""

from __future__ import annotations

import os
import string
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union

from .command import CommandAndArguments
from .wildcard import wildcard_match

PATH_DEFAULT = "/usr/bin:/bin:/usr/sbin:/sbin"
PATH_MAX = 4096

_SUDO_COMMAND_LIMIT = 4096
_PRINTABLE = frozenset(
    (string.ascii_letters + string.digits + string.punctuation).encode("ascii")
)


def first_existing_path(paths: Iterable[str]) -> Optional[str]:
    """Return the first of ``paths`` that exists, or None."""
    return next((p for p in paths if os.path.exists(p)), None)


PATH_ZONEINFO: str = (
    first_existing_path(
        (
            "/usr/share/zoneinfo",
            "/usr/share/lib/zoneinfo",
            "/usr/lib/zoneinfo",
        )
    )
    or ""
)

PATH_MAILDIR: str = (
    first_existing_path(("/var/mail", "/var/spool/mail", "/usr/spool/mail"))
    or "/var/mail"
)


@dataclass(frozen=True)
class Policy:
    """The settings that decide which variables survive into the target."""

    env_keep: frozenset[str] = frozenset()
    env_check: frozenset[str] = frozenset()
    secure_path: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "env_keep", frozenset(self.env_keep))
        object.__setattr__(self, "env_check", frozenset(self.env_check))


@dataclass(frozen=True)
class Account:
    """The parts of a user account that the environment is built from."""

    name: str
    uid: int
    gid: int
    home: Union[str, "os.PathLike[str]"]
    shell: Union[str, "os.PathLike[str]"]


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return os.fsencode(value)
    return bytes(value)


def format_command(command: CommandAndArguments) -> str:
    """Format the command line for SUDO_COMMAND.

    Arguments that would push the result to 4096 bytes or more are left
    out, so that very long argument vectors cannot make exec fail.
    """
    formatted = os.fspath(command.command)
    length = len(os.fsencode(formatted))

    for arg in command.arguments:
        arg_length = len(os.fsencode(arg))
        if length + arg_length < _SUDO_COMMAND_LIMIT:
            formatted = f"{formatted} {arg}"
            length += 1 + arg_length

    return formatted


def is_safe_tz(value: Union[str, bytes]) -> bool:
    """Return whether a TZ value is safe to pass on.

    A value is unsafe when it is an absolute path (optionally after a
    colon) outside the zoneinfo directory, contains a ``..`` element,
    contains white space or non-printable characters, or is not shorter
    than PATH_MAX.
    """
    data = _as_bytes(value)
    if data.startswith(b":"):
        data = data[1:]

    if data.startswith(b"/"):
        zoneinfo = os.fsencode(PATH_ZONEINFO)
        if not zoneinfo:
            return False
        if not data.startswith(zoneinfo) or data[len(zoneinfo):len(zoneinfo) + 1] != b"/":
            return False

    return (
        b".." not in data
        and all(byte in _PRINTABLE for byte in data)
        and len(data) < PATH_MAX
    )


def in_table(needle: Union[str, bytes], haystack: Iterable[str]) -> bool:
    """Return whether ``needle`` matches any of the wildcard patterns."""
    return any(wildcard_match(needle, pattern) for pattern in haystack)


def should_keep(key: str, value: str, policy: Policy) -> bool:
    """Decide whether the variable ``key=value`` is kept."""
    if value.startswith("()"):
        return False

    if key == "TZ":
        return in_table(key, policy.env_keep) or (
            in_table(key, policy.env_check) and is_safe_tz(value)
        )

    if in_table(key, policy.env_check):
        return "%" not in value and "/" not in value

    return in_table(key, policy.env_keep)


def get_target_environment(
    current_env: Mapping[str, str],
    command: CommandAndArguments,
    current_user: Account,
    target_user: Account,
    policy: Policy,
) -> dict[str, str]:
    """Build the environment for the target command.

    Variables of the current environment are kept as the policy allows;
    HOME, MAIL, SHELL, LOGNAME and USER are set from the target user and
    the SUDO_* variables from the invoking user. PATH and TERM get default
    values when they were not kept, and PS1 takes the value of SUDO_PS1.
    """
    sudo_ps1 = current_env.get("SUDO_PS1")

    environment = {
        key: value
        for key, value in current_env.items()
        if should_keep(key, value, policy)
    }

    environment["SUDO_COMMAND"] = format_command(command)
    environment["SUDO_UID"] = str(current_user.uid)
    environment["SUDO_GID"] = str(current_user.gid)
    environment["SUDO_USER"] = current_user.name

    environment.setdefault("MAIL", f"{PATH_MAILDIR}/{target_user.name}")
    environment["SHELL"] = os.fspath(target_user.shell)
    environment.setdefault("HOME", os.fspath(target_user.home))

    logname = environment.get("LOGNAME")
    user = environment.get("USER")
    if logname is None and user is None:
        environment["LOGNAME"] = target_user.name
        environment["USER"] = target_user.name
    elif logname is None:
        environment["LOGNAME"] = user
    elif user is None:
        environment["USER"] = logname

    if policy.secure_path is not None:
        environment["PATH"] = policy.secure_path
    environment.setdefault("PATH", PATH_DEFAULT)
    environment.setdefault("TERM", "unknown")

    if sudo_ps1 is not None:
        environment["PS1"] = sudo_ps1

    return environment