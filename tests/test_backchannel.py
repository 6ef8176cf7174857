import errno
import socket
import struct

import pytest

from elevate.backchannel import (
    MESSAGE_LEN,
    BackchannelPair,
    MonitorBackchannel,
    MonitorMessage,
    MonitorMessageKind,
    ParentBackchannel,
    ParentMessage,
    ParentMessageKind,
)


@pytest.fixture
def pair():
    with BackchannelPair.create() as channels:
        yield channels


def test_exec_command_round_trip(pair):
    message = MonitorMessage(MonitorMessageKind.EXEC_COMMAND)
    pair.parent.send(message)
    assert pair.monitor.recv() == message


def test_signal_round_trip(pair):
    message = MonitorMessage(MonitorMessageKind.SIGNAL, 15)
    pair.parent.send(message)
    assert pair.monitor.recv() == message


@pytest.mark.parametrize("kind", list(ParentMessageKind))
@pytest.mark.parametrize("data", [0, 42, -(2**31), 2**31 - 1])
def test_parent_message_round_trip(pair, kind, data):
    message = ParentMessage(kind, data)
    pair.monitor.send(message)
    assert pair.parent.recv() == message


def test_messages_arrive_in_order(pair):
    sent = [
        ParentMessage(ParentMessageKind.COMMAND_PID, 1234),
        ParentMessage(ParentMessageKind.COMMAND_EXIT, 0),
    ]
    for message in sent:
        pair.monitor.send(message)
    assert [pair.parent.recv(), pair.parent.recv()] == sent


def test_wire_format():
    ours, theirs = socket.socketpair()
    with ParentBackchannel(ours), theirs:
        channel = MonitorBackchannel(theirs)
        channel.send(ParentMessage(ParentMessageKind.COMMAND_EXIT, 7))
        raw = ours.recv(64)
    assert MESSAGE_LEN == 5
    assert raw == struct.pack("=Bi", 1, 7)


def test_unknown_prefix_is_rejected():
    ours, theirs = socket.socketpair()
    with ParentBackchannel(ours) as channel, theirs:
        theirs.sendall(struct.pack("=Bi", 9, 0))
        with pytest.raises(ValueError):
            channel.recv()


def test_recv_without_data_would_block(pair):
    with pytest.raises(BlockingIOError):
        pair.parent.recv()


def test_recv_after_close_raises_eof(pair):
    pair.close("monitor")
    with pytest.raises(EOFError):
        pair.parent.recv()


def test_fileno_belongs_to_socket(pair):
    assert pair.parent.fileno() == pair.parent.socket.fileno()
    assert pair.parent.fileno() != pair.monitor.fileno()


def test_from_returncode():
    assert ParentMessage.from_returncode(0) == ParentMessage(
        ParentMessageKind.COMMAND_EXIT, 0
    )
    assert ParentMessage.from_returncode(-9) == ParentMessage(
        ParentMessageKind.COMMAND_SIGNAL, 9
    )


def test_from_os_error():
    err = OSError(errno.EPIPE, "broken pipe")
    assert ParentMessage.from_os_error(err) == ParentMessage(
        ParentMessageKind.IO_ERROR, errno.EPIPE
    )


def test_from_os_error_without_errno():
    with pytest.raises(ValueError):
        ParentMessage.from_os_error(OSError("no code"))


def test_data_must_fit_in_int():
    with pytest.raises(ValueError):
        ParentMessage(ParentMessageKind.COMMAND_EXIT, 2**31)


def test_exec_command_carries_no_data():
    with pytest.raises(ValueError):
        MonitorMessage(MonitorMessageKind.EXEC_COMMAND, 3)