"""Socket messages exchanged between the parent and the monitor process."""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

# One prefix byte followed by a native-endian C int, without padding.
_WIRE = struct.Struct("=Bi")
MESSAGE_LEN = _WIRE.size

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _check_int(value: int) -> None:
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"{value} does not fit in a C int")


class ParentMessageKind(IntEnum):
    IO_ERROR = 0
    COMMAND_EXIT = 1
    COMMAND_SIGNAL = 2
    COMMAND_PID = 3


@dataclass(frozen=True)
class ParentMessage:
    """A message sent from the monitor to the parent."""

    kind: ParentMessageKind
    data: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ParentMessageKind(self.kind))
        _check_int(self.data)

    @classmethod
    def from_returncode(cls, returncode: int) -> "ParentMessage":
        """Describe how a child ended, from a subprocess return code."""
        if returncode < 0:
            return cls(ParentMessageKind.COMMAND_SIGNAL, -returncode)
        return cls(ParentMessageKind.COMMAND_EXIT, returncode)

    @classmethod
    def from_os_error(cls, err: OSError) -> "ParentMessage":
        """Report an operating-system error; it must carry an errno."""
        if err.errno is None:
            raise ValueError("error has no errno")
        return cls(ParentMessageKind.IO_ERROR, err.errno)

    def to_bytes(self) -> bytes:
        return _WIRE.pack(int(self.kind), self.data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ParentMessage":
        prefix, value = _WIRE.unpack(data)
        try:
            kind = ParentMessageKind(prefix)
        except ValueError:
            raise ValueError(f"unknown parent message prefix {prefix}") from None
        return cls(kind, value)


class MonitorMessageKind(IntEnum):
    EXEC_COMMAND = 0
    SIGNAL = 1


@dataclass(frozen=True)
class MonitorMessage:
    """A message sent from the parent to the monitor."""

    kind: MonitorMessageKind
    data: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MonitorMessageKind(self.kind))
        _check_int(self.data)
        if self.kind is MonitorMessageKind.EXEC_COMMAND and self.data != 0:
            raise ValueError("the exec command message carries no data")

    def to_bytes(self) -> bytes:
        return _WIRE.pack(int(self.kind), self.data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "MonitorMessage":
        prefix, value = _WIRE.unpack(data)
        try:
            kind = MonitorMessageKind(prefix)
        except ValueError:
            raise ValueError(f"unknown monitor message prefix {prefix}") from None
        if kind is MonitorMessageKind.EXEC_COMMAND:
            value = 0
        return cls(kind, value)


def _read_exact(sock: socket.socket, size: int) -> bytes:
    buf = bytearray()
    while len(buf) < size:
        chunk = sock.recv(size - len(buf))
        if not chunk:
            raise EOFError("backchannel closed")
        buf += chunk
    return bytes(buf)


class _Channel:
    def __init__(self, sock: socket.socket) -> None:
        self.socket = sock

    def close(self) -> None:
        self.socket.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ParentBackchannel(_Channel):
    """The parent's end: sends monitor messages, receives parent messages."""

    def send(self, message: MonitorMessage) -> None:
        """Send ``message``; on a non-blocking socket this may raise BlockingIOError."""
        self.socket.sendall(message.to_bytes())

    def recv(self) -> ParentMessage:
        """Receive one message; raises EOFError when the other end is gone."""
        return ParentMessage.from_bytes(_read_exact(self.socket, MESSAGE_LEN))

    def fileno(self) -> int:
        """The file descriptor of the underlying socket."""
        return self.socket.fileno()


class MonitorBackchannel(_Channel):
    """The monitor's end: sends parent messages, receives monitor messages."""

    def send(self, message: ParentMessage) -> None:
        """Send ``message``; on a non-blocking socket this may raise BlockingIOError."""
        self.socket.sendall(message.to_bytes())

    def recv(self) -> MonitorMessage:
        """Receive one message; raises EOFError when the other end is gone."""
        return MonitorMessage.from_bytes(_read_exact(self.socket, MESSAGE_LEN))

    def fileno(self) -> int:
        """The file descriptor of the underlying socket."""
        return self.socket.fileno()


@dataclass
class BackchannelPair:
    """Both connected ends of a backchannel."""

    parent: ParentBackchannel
    monitor: MonitorBackchannel

    @classmethod
    def create(cls) -> "BackchannelPair":
        """Create a connected pair of non-blocking Unix sockets."""
        sock1, sock2 = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
        sock1.setblocking(False)
        sock2.setblocking(False)
        return cls(ParentBackchannel(sock1), MonitorBackchannel(sock2))

    def close(self, which: Optional[str] = None) -> None:
        """Close both ends, or only ``"parent"`` or ``"monitor"``."""
        if which in (None, "parent"):
            self.parent.close()
        if which in (None, "monitor"):
            self.monitor.close()

    def __enter__(self) -> "BackchannelPair":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()