# elevate

Building blocks for a privilege-elevation tool in the style of `sudo` and `su`.
The package has no dependencies beyond the standard library and targets POSIX
systems.

## Modules

- `elevate.sudo_cli` parses sudo-style command lines into `SudoOptions`. The
  requested action is stored as a `SudoAction` (an `ActionKind` plus its
  arguments): help, version, validate, remove or reset timestamp, run, list or
  edit. Unknown, malformed, conflicting or misplaced options raise `CliError`.
  `HELP_MSG` and `USAGE_MSG` hold the help and usage texts.
- `elevate.su_cli` parses su-style command lines into `SuOptions`, raising
  `CliError` on unrecognised options or missing option values.
- `elevate.defaults` describes the built-in sudoers settings.
  `sudo_default(name)` returns a `FlagDefault`, `IntegerDefault`, `TextDefault`,
  `ListDefault` or `EnumDefault`, or `None` for an unknown name; `ALL_PARAMS`
  lists the known names. `IntegerDefault.parse` checks a text value against the
  setting's radix and bounds. `StrEnum` is a string restricted to a fixed set of
  values.
- `elevate.wildcard.wildcard_match` matches text against a pattern in which only
  `*` is special.
- `elevate.environment` builds the environment for the target command.
  `get_target_environment(current_env, command, current_user, target_user, policy)`
  keeps the variables a `Policy` (`env_keep`, `env_check`, `secure_path`) allows,
  sets `HOME`, `MAIL`, `SHELL`, `LOGNAME`, `USER` and the `SUDO_*` variables from
  two `Account` values, gives `PATH` and `TERM` defaults, and copies `SUDO_PS1`
  into `PS1`. `should_keep`, `is_safe_tz`, `in_table` and `format_command` are
  available on their own.
- `elevate.resolve` parses user and group specifiers (`NameOrId.parse`, accepting
  a name or `#<id>`) and finds executables on a colon-separated search path with
  `resolve_path`, searching the current directory (`""` or `.`) last.
- `elevate.command` builds a `CommandAndArguments` with
  `CommandAndArguments.try_from_args`: with a shell the arguments are escaped and
  passed to `shell -c`; otherwise a bare command name is resolved on the search
  path. A missing command raises `InvalidCommandError`.
- `elevate.errors` holds the exception hierarchy under `SudoError`.
- `elevate.backchannel` exchanges fixed-size messages (`ParentMessage`,
  `MonitorMessage`) between a parent and a monitor process over a non-blocking
  Unix socket pair made by `BackchannelPair.create()`.
- `elevate.io_util` retries calls interrupted by `EINTR` or `EAGAIN`.
- `elevate.log` provides `SudoLogger`, a logging handler that sends records of
  `auth_logger()` (`sudo.auth`) to syslog and records of `user_logger()`
  (`sudo.user`) to standard error prefixed with `sudo: `. `SudoLogger().install()`
  attaches it to the root logger.

## Installing

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Usage

Parse a sudo command line (the first item is the program name):

```python
from elevate.sudo_cli import SudoOptions

options = SudoOptions.try_parse_from(["sudo", "-u", "ferris", "FOO=1", "ls", "-l"])
options.user           # "ferris"
options.env_var_list   # [("FOO", "1")]
options.args()         # ["ls", "-l"]
```

Parse an su command line (no program name here):

```python
from elevate.su_cli import SuOptions

options = SuOptions.parse_arguments(["-l", "-s", "/bin/bash", "ferris"])
options.login   # True
options.shell   # "/bin/bash"
options.user    # "ferris"
```

Resolve a command against a search path:

```python
from elevate.command import CommandAndArguments

cmd = CommandAndArguments.try_from_args(None, ["ls", "hello"], "/usr/bin:/bin")
cmd.command    # path of the first executable "ls" found
cmd.arguments  # ["hello"]
```

Match environment variable names against patterns:

```python
from elevate.wildcard import wildcard_match

wildcard_match("LC_ALL", "LC_*")  # True
```

## Command

The `elevate-su` command parses su-style options and prints the resulting
`SuOptions` to standard error, or an `su:` error message with exit status 1:

```
elevate-su -l -s /bin/bash
```

When started as a command, the whole argument vector is parsed, program name
included; as the program name does not start with `-`, it is taken as the user
and every word after it becomes an argument. Calling `elevate.su_cli.main` with
an explicit list parses only that list.

## What this package does not do

It does not authenticate anyone, read a sudoers file, look up accounts, switch
user or group, or run the target command. There is no `sudo` command: the pieces
above parse options, describe defaults, filter the environment, resolve the
command and carry messages between processes, and a caller has to put them
together.