from pathlib import Path

import pytest

from elevate.errors import (
    AuthenticationError,
    ConfigurationError,
    ExecError,
    GroupNotFoundError,
    InvalidCommandError,
    MaxAuthAttemptsError,
    SudoError,
    UserNotFoundError,
)


def test_user_not_found_message():
    err = UserNotFoundError("ghost")
    assert err.name == "ghost"
    assert str(err) == "user `ghost' not found"


def test_group_not_found_message():
    err = GroupNotFoundError("ghosts")
    assert err.name == "ghosts"
    assert str(err).startswith("group `ghosts'")
    assert str(err).endswith("not found")


def test_invalid_command_keeps_path():
    err = InvalidCommandError(Path("/bin/nothing"))
    assert err.path == "/bin/nothing"
    assert "/bin/nothing" in str(err)
    assert str(err).endswith("command not found")


def test_exec_message():
    assert str(ExecError()) == "could not spawn child process"


def test_authentication_message():
    err = AuthenticationError("wrong answer")
    assert err.message == "wrong answer"
    assert str(err).startswith("authentication failed: ")
    assert str(err).endswith("wrong answer")


def test_configuration_message():
    err = ConfigurationError("broken rule")
    assert err.message == "broken rule"
    assert str(err).startswith("invalid configuration: ")
    assert "broken rule" in str(err)


def test_max_auth_attempts_message():
    err = MaxAuthAttemptsError(3)
    assert err.attempts == 3
    assert "3 incorrect authentication attempts" in str(err)


@pytest.mark.parametrize(
    "error",
    [
        InvalidCommandError("x"),
        UserNotFoundError("x"),
        GroupNotFoundError("x"),
        ExecError(),
        AuthenticationError("x"),
        ConfigurationError("x"),
        MaxAuthAttemptsError(1),
    ],
)
def test_all_errors_caught_as_sudo_error(error):
    with pytest.raises(SudoError) as info:
        raise error
    assert info.value is error