"""Command-line parsing for the su front end."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .sudo_cli import CliError


@dataclass(frozen=True)
class _SuOption:
    short: str
    long: str
    attribute: str
    missing: Optional[str] = None

    @property
    def takes_argument(self) -> bool:
        return self.missing is not None

    def apply(self, options: "SuOptions", value: Optional[str]) -> None:
        if not self.takes_argument:
            setattr(options, self.attribute, True)
            return
        if value is None:
            raise CliError(self.missing)
        if self.attribute == "whitelist_environment":
            options.whitelist_environment = value.split(",")
        else:
            setattr(options, self.attribute, value)


_SU_OPTIONS = (
    _SuOption("c", "command", "command", "no command provided"),
    _SuOption("g", "group", "group", "no group provided"),
    _SuOption("G", "supp-group", "supp_group", "no supplementary group provided"),
    _SuOption("l", "login", "login"),
    _SuOption("P", "pty", "pty"),
    _SuOption("s", "shell", "shell", "no shell provided"),
    _SuOption(
        "w",
        "whitelist-environment",
        "whitelist_environment",
        "no enivronment whitelist provided",
    ),
    _SuOption("V", "version", "version"),
    _SuOption("h", "help", "help"),
)

_BY_SHORT = {option.short: option for option in _SU_OPTIONS}
_BY_LONG = {option.long: option for option in _SU_OPTIONS}


@dataclass
class SuOptions:
    """The parsed su command line."""

    user: Optional[str] = None
    command: Optional[str] = None
    group: Optional[str] = None
    supp_group: Optional[str] = None
    pty: bool = False
    login: bool = False
    shell: Optional[str] = None
    whitelist_environment: list[str] = field(default_factory=list)
    help: bool = False
    version: bool = False
    arguments: list[str] = field(default_factory=list)

    @classmethod
    def parse_arguments(cls, arguments: Iterable[str]) -> "SuOptions":
        """Parse su arguments; raises CliError on invalid input."""
        options = cls()
        it = iter(arguments)

        for arg in it:
            if arg == "-":
                options.login = True
            elif arg.startswith("--"):
                if "=" in arg:
                    key, value = arg.split("=", 1)
                    option = _BY_LONG.get(key[2:])
                    if option is None:
                        raise CliError(f"unrecognized option '{arg}'")
                    if not option.takes_argument:
                        raise CliError(f"'--{option.long}' does not take any arguments")
                    option.apply(options, value)
                else:
                    option = _BY_LONG.get(arg[2:])
                    if option is None:
                        raise CliError(f"unrecognized option '{arg}'")
                    option.apply(options, next(it, None) if option.takes_argument else None)
            elif arg.startswith("-"):
                for n, char in enumerate(arg.lstrip("-")):
                    option = _BY_SHORT.get(char)
                    if option is None:
                        raise CliError(f"unrecognized option '{char}'")
                    if not option.takes_argument:
                        option.apply(options, None)
                        continue
                    rest = arg[n + 2:].strip()
                    option.apply(options, rest if rest else next(it, None))
                    break
            else:
                options.user = arg
                options.arguments = list(it)
                break

        return options

    @classmethod
    def from_env(cls) -> "SuOptions":
        """Parse the arguments this process was started with."""
        return cls.parse_arguments(sys.argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the command line and print the resulting options."""
    try:
        if argv is None:
            options = SuOptions.from_env()
        else:
            options = SuOptions.parse_arguments(argv)
    except CliError as err:
        print(f"su: {err}", file=sys.stderr)
        return 1
    print(repr(options), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())