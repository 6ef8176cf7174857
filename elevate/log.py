"""Routing of log records to syslog and standard error."""

from __future__ import annotations

import logging
import sys
import syslog

AUTH_TARGET = "sudo.auth"
USER_TARGET = "sudo.user"


class SyslogHandler(logging.Handler):
    """Send log records to the system log under the authorization facility."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.ERROR:
            priority = syslog.LOG_ERR
        elif record.levelno >= logging.WARNING:
            priority = syslog.LOG_WARNING
        elif record.levelno >= logging.INFO:
            priority = syslog.LOG_INFO
        else:
            priority = syslog.LOG_DEBUG
        try:
            message = self.format(record)
            syslog.syslog(priority | syslog.LOG_AUTH, message)
        except Exception:
            self.handleError(record)


class _StderrHandler(logging.StreamHandler):
    """A stream handler that always writes to the current standard error."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


class SudoLogger(logging.Handler):
    """Dispatch records to the handlers registered for their logger name."""

    def __init__(self) -> None:
        super().__init__(level=1)
        self.loggers: list[tuple[str, logging.Handler]] = []

        self.add_logger(AUTH_TARGET, SyslogHandler())

        stderr_handler = _StderrHandler()
        stderr_handler.setLevel(1)
        stderr_handler.setFormatter(logging.Formatter("sudo: %(message)s"))
        self.add_logger(USER_TARGET, stderr_handler)

    def add_logger(self, prefix: str, handler: logging.Handler) -> None:
        """Register ``handler`` for records named ``prefix`` or below it."""
        if not prefix.endswith("."):
            prefix = f"{prefix}."
        self.loggers.append((prefix, handler))

    def emit(self, record: logging.LogRecord) -> None:
        for prefix, handler in self.loggers:
            if record.name == prefix[:-1] or record.name.startswith(prefix):
                if record.levelno >= handler.level:
                    handler.handle(record)

    def flush(self) -> None:
        for _, handler in self.loggers:
            handler.flush()

    def install(self) -> None:
        """Make this the handler of the root logger, accepting every level."""
        root = logging.getLogger()
        if any(isinstance(h, SudoLogger) for h in root.handlers):
            raise RuntimeError("Could not set previously set logger")
        root.addHandler(self)
        root.setLevel(1)


def auth_logger() -> logging.Logger:
    """The logger for authentication events, sent to syslog."""
    return logging.getLogger(AUTH_TARGET)


def user_logger() -> logging.Logger:
    """The logger for messages shown to the user on standard error."""
    return logging.getLogger(USER_TARGET)