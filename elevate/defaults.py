"""Built-in default values for sudoers settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Generic, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

_I128_MIN = -(2**127)
_I128_MAX = 2**127 - 1
_INTEGER_TEXT = re.compile(r"[+-]?[0-9A-Za-z]+")


class StrEnum(str):
    """A string restricted to a fixed set of possible values."""

    possible_values: tuple[str, ...]

    def __new__(cls, choice: str, possible_values: Sequence[str]) -> "StrEnum":
        values = tuple(possible_values)
        if choice not in values:
            raise ValueError(f"{choice!r} is not one of {', '.join(values)}")
        obj = super().__new__(cls, choice)
        obj.possible_values = values
        return obj

    @classmethod
    def from_index(cls, choice: int, possible_values: Sequence[str]) -> "StrEnum":
        """Create the value found at position ``choice`` of ``possible_values``."""
        values = tuple(possible_values)
        if choice < 0:
            raise IndexError(f"index {choice} out of range")
        return cls(values[choice], values)

    @property
    def value(self) -> str:
        return str.__str__(self)

    def alt(self, choice: str) -> "StrEnum":
        """Return another value from the same set of possible values."""
        return type(self)(choice, self.possible_values)

    def alt_by_index(self, choice: int) -> "StrEnum":
        """Return the value at position ``choice`` in the same set."""
        return type(self).from_index(choice, self.possible_values)

    def __repr__(self) -> str:
        return f"StrEnum({self.value!r}, {list(self.possible_values)!r})"


@dataclass(frozen=True)
class OptTuple(Generic[T]):
    """A default value together with the value it takes when negated."""

    default: T
    negated: Optional[T] = None
    negatable: bool = False

    def __post_init__(self) -> None:
        if self.negated is not None and not self.negatable:
            object.__setattr__(self, "negatable", True)


@dataclass(frozen=True)
class FlagDefault:
    value: bool


@dataclass(frozen=True)
class IntegerDefault:
    option: OptTuple[int]
    radix: int = 10
    bounds: Optional[tuple[int, int]] = None

    def parse(self, text: str) -> Optional[int]:
        """Parse ``text`` as a value for this setting, or return None."""
        if not _INTEGER_TEXT.fullmatch(text):
            return None
        try:
            number = int(text, self.radix)
        except ValueError:
            return None
        if not _I128_MIN <= number <= _I128_MAX:
            return None
        if self.bounds is not None:
            low, high = self.bounds
            if not low <= number <= high:
                return None
        return number


@dataclass(frozen=True)
class TextDefault:
    option: OptTuple[Optional[str]]


@dataclass(frozen=True)
class ListDefault:
    values: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EnumDefault:
    option: OptTuple[StrEnum]


SudoDefault = Union[FlagDefault, IntegerDefault, TextDefault, ListDefault, EnumDefault]

_LECTURE_VALUES = ("once", "always", "never")
_VERIFYPW_VALUES = ("all", "always", "any", "never")

_DEFAULTS: dict[str, SudoDefault] = {
    "always_query_group_plugin": FlagDefault(False),
    "always_set_home": FlagDefault(False),
    "env_reset": FlagDefault(True),
    "mail_badpass": FlagDefault(True),
    "match_group_by_gid": FlagDefault(False),
    "use_pty": FlagDefault(False),
    "visiblepw": FlagDefault(False),
    "passwd_tries": IntegerDefault(OptTuple(3)),
    "umask": IntegerDefault(
        OptTuple(0o22, 0o777, negatable=True), radix=8, bounds=(0, 0o777)
    ),
    "editor": TextDefault(OptTuple("/usr/bin/editor")),
    "lecture_file": TextDefault(OptTuple(None)),
    "lecture": EnumDefault(
        OptTuple(
            StrEnum("once", _LECTURE_VALUES),
            StrEnum("never", _LECTURE_VALUES),
            negatable=True,
        )
    ),
    "secure_path": TextDefault(OptTuple(None, None, negatable=True)),
    "verifypw": EnumDefault(
        OptTuple(
            StrEnum("all", _VERIFYPW_VALUES),
            StrEnum("never", _VERIFYPW_VALUES),
            negatable=True,
        )
    ),
    "env_keep": ListDefault(
        (
            "COLORS", "DISPLAY", "HOSTNAME", "KRB5CCNAME", "LS_COLORS", "PATH",
            "PS1", "PS2", "XAUTHORITY", "XAUTHORIZATION", "XDG_CURRENT_DESKTOP",
        )
    ),
    "env_check": ListDefault(
        ("COLORTERM", "LANG", "LANGUAGE", "LC_*", "LINGUAS", "TERM", "TZ")
    ),
    "env_delete": ListDefault(
        (
            "IFS", "CDPATH", "LOCALDOMAIN", "RES_OPTIONS", "HOSTALIASES",
            "NLSPATH", "PATH_LOCALE", "LD_*", "_RLD*", "TERMINFO", "TERMINFO_DIRS",
            "TERMPATH", "TERMCAP", "ENV", "BASH_ENV", "PS4", "GLOBIGNORE",
            "BASHOPTS", "SHELLOPTS", "JAVA_TOOL_OPTIONS", "PERLIO_DEBUG",
            "PERLLIB", "PERL5LIB", "PERL5OPT", "PERL5DB", "FPATH", "NULLCMD",
            "READNULLCMD", "ZDOTDIR", "TMPPREFIX", "PYTHONHOME", "PYTHONPATH",
            "PYTHONINSPECT", "PYTHONUSERBASE", "RUBYLIB", "RUBYOPT", "*=()*",
        )
    ),
}

ALL_PARAMS: tuple[str, ...] = tuple(_DEFAULTS)


def sudo_default(name: str) -> Optional[SudoDefault]:
    """Return the built-in default for setting ``name``, or None if unknown."""
    return _DEFAULTS.get(name)