"""Command-line parsing for the sudo front end."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, Optional, Union

HELP_MSG = """sudo - execute a command as another user

usage: sudo -h | -K | -k | -V
usage: sudo -v [-knS] [-g group] [-h host] [-u user]
usage: sudo -l [-knS] [-g group] [-h host] [-U user] [-u user] [command]
usage: sudo [-bEHknPS] [-D directory] [-g group] [-h host] [-R
            directory] [-u user] [VAR=value] [-i|-s] [<command>]
usage: sudo -e [-knS] [-D directory] [-g group] [-h host] [-R
            directory] [-u user] file ...

Options:
  -b, --background              run command in the background
  -D, --chdir=directory         change the working directory before running command
  -E, --preserve-env=list       preserve specific environment variables
  -e, --edit                    edit files instead of running a command
  -g, --group=group             run command as the specified group name or ID
  -H, --set-home                set HOME variable to target user's home dir
  -h, --help                    display help message and exit
  -h, --host=host               run command on host (if supported by plugin)
  -i, --login                   run login shell as the target user; a command may also be
                                specified
  -K, --remove-timestamp        remove timestamp file completely
  -k, --reset-timestamp         invalidate timestamp file
  -l, --list                    list user's privileges or check a specific command; use twice
                                for longer format
  -n, --non-interactive         non-interactive mode, no prompts are used
  -P, --preserve-groups         preserve group vector instead of setting to target's
  -R, --chroot=directory        change the root directory before running command
  -S, --stdin                   read password from standard input
  -s, --shell                   run shell as the target user; a command may also be specified
  -U, --other-user=user         in list mode, display privileges for user
  -u, --user=user               run command (or edit file) as specified user name or ID
  -V, --version                 display version information and exit
  -v, --validate                update user's timestamp without running a command
  --                            stop processing command line arguments"""

USAGE_MSG = """usage: sudo -h | -K | -k | -V
usage: sudo -v [-knS] [-g group] [-h host] [-u user]
usage: sudo -l [-knS] [-g group] [-h host] [-U user] [-u user] [command]
usage: sudo [-bEHknPS] [-D directory] [-g group] [-h host] [-R directory] [-u user] [VAR=value] [-i|-s] [<command>]
usage: sudo -e [-knS] [-D directory] [-g group] [-h host] [-R directory] [-u user] file ..."""

_TAKES_ARGUMENT_SHORT = frozenset("DEghRUu")
_TAKES_ARGUMENT = frozenset(
    {"chdir", "preserve-env", "group", "host", "chroot", "other-user", "user"}
)


class CliError(ValueError):
    """Raised when the command line cannot be parsed or is inconsistent."""


class ActionKind(Enum):
    HELP = auto()
    VERSION = auto()
    VALIDATE = auto()
    REMOVE_TIMESTAMP = auto()
    RESET_TIMESTAMP = auto()
    RUN = auto()
    LIST = auto()
    EDIT = auto()


@dataclass(frozen=True)
class SudoAction:
    """What sudo was asked to do, with the arguments that belong to it."""

    kind: ActionKind = ActionKind.HELP
    arguments: tuple[Union[str, Path], ...] = ()


@dataclass(frozen=True)
class _Flag:
    name: str


@dataclass(frozen=True)
class _Argument:
    name: str
    value: str


@dataclass(frozen=True)
class _Environment:
    key: str
    value: str


@dataclass(frozen=True)
class _Rest:
    arguments: tuple[str, ...]


_Token = Union[_Flag, _Argument, _Environment, _Rest]

_FLAG_ACTIONS = {
    "-e": "edit", "--edit": "edit",
    "-h": "help", "--help": "help",
    "-K": "remove_timestamp", "--remove-timestamp": "remove_timestamp",
    "-l": "list", "--list": "list",
    "-V": "version", "--version": "version",
    "-v": "validate", "--validate": "validate",
}

_FLAG_FIELDS = {
    "-b": "background", "--background": "background",
    "-H": "set_home", "--set-home": "set_home",
    "-i": "login", "--login": "login",
    "-k": "reset_timestamp", "--reset-timestamp": "reset_timestamp",
    "-n": "non_interactive", "--non-interactive": "non_interactive",
    "-P": "preserve_groups", "--preserve-groups": "preserve_groups",
    "-S": "stdin", "--stdin": "stdin",
    "-s": "shell", "--shell": "shell",
}


def _try_env_var(arg: str) -> Optional[tuple[str, str]]:
    name, sep, value = arg.partition("=")
    if not sep:
        return None
    if all(c.isalnum() or c == "_" for c in name):
        return name, value
    return None


def _normalize(arguments: Iterable[str]) -> list[_Token]:
    """Split the raw arguments (program name first) into tokens."""
    it = iter(arguments)
    next(it, None)
    tokens: list[_Token] = []

    for arg in it:
        if arg == "--":
            tokens.append(_Rest(tuple(it)))
            break
        if arg.startswith("--"):
            if "=" in arg:
                key, value = arg.split("=", 1)
                if key[2:] not in _TAKES_ARGUMENT:
                    raise CliError(f"'{key}' does not take any arguments")
                tokens.append(_Argument(key, value))
            elif arg[2:] in _TAKES_ARGUMENT:
                value = next(it, None)
                if value is None:
                    raise CliError(f"'{arg}' expects an argument")
                tokens.append(_Argument(arg, value))
            else:
                tokens.append(_Flag(arg))
        elif arg.startswith("-"):
            for n, char in enumerate(arg.lstrip("-")):
                flag = f"-{char}"
                if char not in _TAKES_ARGUMENT_SHORT:
                    tokens.append(_Flag(flag))
                    continue
                rest = arg[n + 2:].strip()
                if rest.startswith("="):
                    raise CliError("invalid option '='")
                if rest:
                    tokens.append(_Argument(flag, rest))
                else:
                    value = next(it, None)
                    if value is not None:
                        tokens.append(_Argument(flag, value))
                    elif char == "h":
                        tokens.append(_Flag(flag))
                    else:
                        raise CliError(f"'-{char}' expects an argument")
                break
        elif (pair := _try_env_var(arg)) is not None:
            tokens.append(_Environment(*pair))
        else:
            tokens.append(_Rest((arg, *it)))
            break

    return tokens


@dataclass
class SudoOptions:
    """The parsed sudo command line."""

    background: bool = False
    chroot: Optional[Path] = None
    directory: Optional[Path] = None
    group: Optional[str] = None
    host: Optional[str] = None
    login: bool = False
    non_interactive: bool = False
    other_user: Optional[str] = None
    preserve_env: list[str] = field(default_factory=list)
    preserve_groups: bool = False
    set_home: bool = False
    shell: bool = False
    stdin: bool = False
    user: Optional[str] = None
    env_var_list: list[tuple[str, str]] = field(default_factory=list)
    action: SudoAction = field(default_factory=SudoAction)
    reset_timestamp: bool = False

    @classmethod
    def try_parse_from(cls, arguments: Iterable[str]) -> "SudoOptions":
        """Parse ``arguments``, whose first item is the program name."""
        options = cls()
        requested: set[str] = set()
        external: list[str] = []

        for token in _normalize(str(a) for a in arguments):
            if isinstance(token, _Flag):
                if token.name in _FLAG_ACTIONS:
                    requested.add(_FLAG_ACTIONS[token.name])
                elif token.name in _FLAG_FIELDS:
                    setattr(options, _FLAG_FIELDS[token.name], True)
                else:
                    raise CliError("invalid option provided")
            elif isinstance(token, _Argument):
                options._apply_argument(token.name, token.value)
            elif isinstance(token, _Environment):
                options.env_var_list.append((token.key, token.value))
            else:
                external = list(token.arguments)

        options.action = options._resolve_action(requested, external)
        options._validate(requested)
        return options

    @classmethod
    def from_env(cls) -> "SudoOptions":
        """Parse the arguments this process was started with."""
        return cls.try_parse_from(sys.argv)

    def args(self) -> list[str]:
        """Return the command arguments for the run and list actions."""
        if self.action.kind in (ActionKind.RUN, ActionKind.LIST):
            return [str(a) for a in self.action.arguments]
        return []

    def _apply_argument(self, name: str, value: str) -> None:
        if name in ("-D", "--chdir"):
            self.directory = Path(value)
        elif name in ("-E", "--preserve-env"):
            self.preserve_env = value.split(",")
        elif name in ("-g", "--group"):
            self.group = value
        elif name in ("-h", "--host"):
            self.host = value
        elif name in ("-R", "--chroot"):
            self.chroot = Path(value)
        elif name in ("-U", "--other-user"):
            self.other_user = value
        elif name in ("-u", "--user"):
            self.user = value
        else:
            raise CliError("invalid option provided")

    def _resolve_action(self, requested: set[str], external: list[str]) -> SudoAction:
        if "help" in requested:
            return SudoAction(ActionKind.HELP)
        if "version" in requested:
            return SudoAction(ActionKind.VERSION)
        if "remove_timestamp" in requested:
            return SudoAction(ActionKind.REMOVE_TIMESTAMP)
        if self.reset_timestamp and not external:
            return SudoAction(ActionKind.RESET_TIMESTAMP)
        if "validate" in requested:
            return SudoAction(ActionKind.VALIDATE)
        if "list" in requested:
            return SudoAction(ActionKind.LIST, tuple(external))
        if "edit" in requested:
            return SudoAction(ActionKind.EDIT, tuple(Path(a) for a in external))
        return SudoAction(ActionKind.RUN, tuple(external))

    def _validate(self, requested: set[str]) -> None:
        if "remove_timestamp" in requested and self.reset_timestamp:
            raise CliError(
                "conflicting arguments '--remove-timestamp' and '--reset-timestamp'"
            )

        common = (
            self.background
            or self.set_home
            or self.preserve_groups
            or self.login
            or self.shell
            or bool(self.preserve_env)
        )
        kind = self.action.kind

        if kind is ActionKind.VALIDATE and (
            common
            or self.other_user is not None
            or self.directory is not None
            or self.chroot is not None
        ):
            raise CliError("invalid argument found for '--validate'")

        if kind is ActionKind.LIST and (
            common or self.directory is not None or self.chroot is not None
        ):
            raise CliError("invalid argument found for '--list'")

        if kind is ActionKind.EDIT and (common or self.other_user is not None):
            raise CliError("invalid argument found for '--edit'")