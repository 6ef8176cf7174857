from pathlib import Path

import pytest

from elevate import environment
from elevate.command import CommandAndArguments
from elevate.environment import (
    PATH_DEFAULT,
    Account,
    Policy,
    first_existing_path,
    format_command,
    get_target_environment,
    in_table,
    is_safe_tz,
    should_keep,
)

ZONEINFO = "/usr/share/zoneinfo"


@pytest.fixture
def zoneinfo(monkeypatch):
    monkeypatch.setattr(environment, "PATH_ZONEINFO", ZONEINFO)
    return ZONEINFO


@pytest.fixture
def maildir(monkeypatch):
    monkeypatch.setattr(environment, "PATH_MAILDIR", "/var/mail")
    return "/var/mail"


@pytest.fixture
def config():
    return Policy(env_keep={"AAP", "NOOT"}, env_check={"MIES", "TZ"})


@pytest.mark.parametrize(
    "key, value, expected",
    [
        ("AAP", "FOO", True),
        ("MIES", "BAR", True),
        ("AAP", "()=foo", False),
        ("TZ", "Europe/Amsterdam", True),
        ("TZ", "../Europe/Berlin", False),
        ("MIES", "FOO/BAR", False),
        ("MIES", "FOO%", False),
    ],
)
def test_filtering(config, key, value, expected):
    assert should_keep(key, value, config) is expected


def test_unlisted_variable_is_dropped(config):
    assert should_keep("OTHER", "value", config) is False


def test_tz_in_keep_is_kept_unchecked():
    policy = Policy(env_keep={"TZ"})
    assert should_keep("TZ", "../Europe/Berlin", policy) is True


def test_tzinfo(zoneinfo):
    assert is_safe_tz("Europe/Amsterdam") is True
    assert is_safe_tz(f"{zoneinfo}/Europe/London") is True
    assert is_safe_tz(f":{zoneinfo}/Europe/Amsterdam") is True
    assert is_safe_tz("/schaap/Europe/Amsterdam") is False
    assert is_safe_tz(f"{zoneinfo}/../Europe/London") is False


def test_tz_prefix_must_be_a_directory(zoneinfo):
    assert is_safe_tz(f"{zoneinfo}x/Europe/London") is False


def test_tz_absolute_rejected_without_zoneinfo(monkeypatch):
    monkeypatch.setattr(environment, "PATH_ZONEINFO", "")
    assert is_safe_tz("/usr/share/zoneinfo/Europe/London") is False


def test_tz_whitespace_and_length():
    assert is_safe_tz("Europe/New York") is False
    assert is_safe_tz(b"Europe/Amsterdam") is True
    assert is_safe_tz("A" * 4096) is False


def test_in_table_uses_wildcards():
    assert in_table("LC_ALL", {"LC_*"}) is True
    assert in_table("LANG", {"LC_*", "TERM"}) is False


def test_first_existing_path(tmp_path):
    present = tmp_path / "present"
    present.mkdir()
    missing = tmp_path / "missing"
    assert first_existing_path([str(missing), str(present)]) == str(present)
    assert first_existing_path([str(missing)]) is None


def test_format_command_joins_arguments():
    command = CommandAndArguments(Path("/usr/bin/echo"), ["hello", "world"])
    assert format_command(command) == "/usr/bin/echo hello world"


def test_format_command_skips_too_long_arguments():
    command = CommandAndArguments(Path("/bin/echo"), ["a" * 5000, "b"])
    assert format_command(command) == "/bin/echo b"


CURRENT = Account("alice", 1000, 1000, "/home/alice", "/bin/sh")
TARGET = Account("root", 0, 0, "/root", "/bin/bash")
COMMAND = CommandAndArguments(Path("/usr/bin/echo"), ["hello"])


def test_target_environment_defaults(maildir):
    env = get_target_environment(
        {"DISPLAY": ":0", "SECRET_VAR": "x"}, COMMAND, CURRENT, TARGET,
        Policy(env_keep={"DISPLAY"}),
    )
    assert env == {
        "DISPLAY": ":0",
        "SUDO_COMMAND": "/usr/bin/echo hello",
        "SUDO_UID": "1000",
        "SUDO_GID": "1000",
        "SUDO_USER": "alice",
        "MAIL": "/var/mail/root",
        "SHELL": "/bin/bash",
        "HOME": "/root",
        "LOGNAME": "root",
        "USER": "root",
        "PATH": PATH_DEFAULT,
        "TERM": "unknown",
    }


def test_function_values_are_removed():
    env = get_target_environment(
        {"DISPLAY": "() { :; }"}, COMMAND, CURRENT, TARGET, Policy(env_keep={"DISPLAY"})
    )
    assert "DISPLAY" not in env


def test_preserved_user_sets_logname():
    env = get_target_environment(
        {"USER": "bob"}, COMMAND, CURRENT, TARGET, Policy(env_keep={"USER"})
    )
    assert env["USER"] == "bob"
    assert env["LOGNAME"] == "bob"


def test_preserved_logname_sets_user():
    env = get_target_environment(
        {"LOGNAME": "bob"}, COMMAND, CURRENT, TARGET, Policy(env_keep={"LOGNAME"})
    )
    assert env["USER"] == "bob"
    assert env["LOGNAME"] == "bob"


def test_secure_path_overrides_kept_path():
    env = get_target_environment(
        {"PATH": "/home/alice/bin"}, COMMAND, CURRENT, TARGET,
        Policy(env_keep={"PATH"}, secure_path="/sbin:/bin"),
    )
    assert env["PATH"] == "/sbin:/bin"


def test_kept_path_and_term_are_preserved():
    env = get_target_environment(
        {"PATH": "/opt/bin", "TERM": "xterm"}, COMMAND, CURRENT, TARGET,
        Policy(env_keep={"PATH"}, env_check={"TERM"}),
    )
    assert env["PATH"] == "/opt/bin"
    assert env["TERM"] == "xterm"


def test_sudo_ps1_sets_ps1():
    env = get_target_environment(
        {"SUDO_PS1": "# "}, COMMAND, CURRENT, TARGET, Policy()
    )
    assert env["PS1"] == "# "
    assert "SUDO_PS1" not in env


def test_kept_home_and_mail_are_not_replaced():
    env = get_target_environment(
        {"HOME": "/home/alice", "MAIL": "/tmp/box"}, COMMAND, CURRENT, TARGET,
        Policy(env_keep={"HOME", "MAIL"}),
    )
    assert env["HOME"] == "/home/alice"
    assert env["MAIL"] == "/tmp/box"