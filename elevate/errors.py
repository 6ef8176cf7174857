"""Exceptions raised while preparing and running a command."""

from __future__ import annotations

import os
from typing import Union


class SudoError(Exception):
    """Base class of all errors reported to the user."""


class InvalidCommandError(SudoError):
    def __init__(self, path: Union[str, os.PathLike] = "") -> None:
        self.path = os.fspath(path)
        super().__init__(f"`\"{self.path}\"': command not found")


class UserNotFoundError(SudoError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"user `{name}' not found")


class GroupNotFoundError(SudoError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"group `{name}' not found")


class ExecError(SudoError):
    def __init__(self) -> None:
        super().__init__("could not spawn child process")


class AuthenticationError(SudoError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"authentication failed: {message}")


class ConfigurationError(SudoError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"invalid configuration: {message}")


class MaxAuthAttemptsError(SudoError):
    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Maximum {attempts} incorrect authentication attempts")