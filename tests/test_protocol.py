"""
Tests for the POP3 command channel

Tests cover:
- Command normalization and rejection
- Single-line and multi-line reads
- Error replies
- One outstanding command at a time
"""
import socket
from unittest.mock import MagicMock, patch

import pytest

from smallpop3.core.pop3.connection import POP3Connection
from smallpop3.core.pop3.protocol import POP3Protocol
from smallpop3.utils.errors import (
    ChannelBusyError,
    ErrorCategory,
    InvalidCommandError,
    NetworkError,
    NetworkTimeoutError,
    ProtocolError,
    ServerConnectionError,
)

from .test_helpers import CONNECT_TARGET, FakeSocket, POP3TestHelper


def open_protocol(*replies):
    """Open a plaintext connection that greets, then replays replies"""
    fake = FakeSocket(POP3TestHelper.script("+OK ready\r\n", *replies))
    connection = POP3Connection("pop.example.com", 110, secure=False, timeout=1.0)

    with patch(CONNECT_TARGET, return_value=fake):
        connection.open()

    return POP3Protocol(connection), fake


class TestCommandNormalization:
    """Tests for POP3Protocol.normalize_command"""

    def test_trims_whitespace(self):
        assert POP3Protocol.normalize_command("  NOOP \r\n") == "NOOP"

    @pytest.mark.parametrize("command", [None, 42, b"NOOP", ["NOOP"]])
    def test_rejects_non_text(self, command):
        with pytest.raises(InvalidCommandError) as exc_info:
            POP3Protocol.normalize_command(command)

        assert exc_info.value.category is ErrorCategory.VALIDATION

    @pytest.mark.parametrize("command", ["", "   ", "DELE 1\r\nDELE 2", "NOOP\nQUIT", "RETR 1\rX"])
    def test_rejects_empty_and_multiline(self, command):
        with pytest.raises(InvalidCommandError):
            POP3Protocol.normalize_command(command)

    def test_rejects_non_ascii(self):
        with pytest.raises(InvalidCommandError):
            POP3Protocol.normalize_command("USER jürgen")

    @pytest.mark.parametrize("command, expected", [
        ("LIST", True),
        ("list", True),
        ("LIST 2", False),
        ("UIDL", True),
        ("UIDL 1", False),
        ("RETR 1", True),
        ("TOP 1 0", True),
        ("CAPA", True),
        ("STAT", False),
        ("NOOP", False),
        ("DELE 1", False),
    ])
    def test_expects_multiline(self, command, expected):
        assert POP3Protocol.expects_multiline(command) is expected


class TestExecute:
    """Tests for POP3Protocol.execute"""

    def test_single_line_command(self):
        protocol, fake = open_protocol("+OK 3 4500\r\n")

        response = protocol.execute("STAT")

        assert response == "+OK 3 4500\r\n"
        assert fake.sent == [b"STAT\r\n"]

    def test_command_written_once_with_crlf(self):
        protocol, fake = open_protocol("+OK\r\n")

        protocol.execute("  NOOP  ")

        assert fake.sent == [b"NOOP\r\n"]

    def test_multiline_raw(self):
        """Test the raw reply keeps the status line and terminator"""
        protocol, _ = open_protocol("+OK 2 messages\r\n1 100\r\n2 200\r\n.\r\n")

        response = protocol.execute("LIST")

        assert response == "+OK 2 messages\r\n1 100\r\n2 200\r\n.\r\n"

    def test_multiline_stripped(self):
        protocol, _ = open_protocol("+OK\r\n1 100\r\n2 200\r\n.\r\n")

        assert protocol.execute("LIST", True) == "1 100\r\n2 200"

    def test_strip_single_line_is_noop(self):
        protocol, _ = open_protocol("+OK 3 4500\r\n")

        assert protocol.execute("STAT", True) == "+OK 3 4500"

    def test_multiline_unstuffs_dots(self):
        """Test byte-stuffed content lines lose their extra dot when stripped"""
        protocol, _ = open_protocol("+OK\r\nSubject: x\r\n\r\n..signature\r\n.\r\n")

        assert protocol.execute("RETR 1", True) == "Subject: x\r\n\r\n.signature"

    def test_replies_consumed_in_order(self):
        """Test a multi-line reply is read completely before the next command"""
        protocol, fake = open_protocol(
            "+OK\r\n1 100\r\n.\r\n",
            "+OK 1 100\r\n",
        )

        assert protocol.execute("LIST", True) == "1 100"
        assert protocol.execute("STAT") == "+OK 1 100\r\n"
        assert fake.commands == ["LIST", "STAT"]

    def test_error_reply_raises_protocol_error(self):
        protocol, _ = open_protocol("-ERR no such message\r\n")

        with pytest.raises(ProtocolError) as exc_info:
            protocol.execute("RETR 9")

        assert exc_info.value.response == "-ERR no such message"
        assert "-ERR no such message" in exc_info.value.message
        assert exc_info.value.category is ErrorCategory.PROTOCOL

    def test_error_reply_to_multiline_command_reads_one_line(self):
        """Test an error reply to RETR is not followed by a body read"""
        protocol, _ = open_protocol("-ERR no such message\r\n", "+OK\r\n")

        with pytest.raises(ProtocolError):
            protocol.execute("RETR 9")

        assert protocol.execute("NOOP") == "+OK\r\n"

    def test_invalid_command_not_sent(self):
        protocol, fake = open_protocol()

        with pytest.raises(InvalidCommandError):
            protocol.execute("DELE 1\r\nDELE 2")

        assert fake.sent == []

    def test_connection_closed_mid_reply(self):
        protocol, _ = open_protocol("+OK\r\n1 100\r\n")

        with pytest.raises(ServerConnectionError):
            protocol.execute("LIST")

    def test_records_stats(self):
        protocol, _ = open_protocol("+OK\r\n")

        protocol.execute("NOOP")

        stats = protocol.connection.get_stats()
        assert stats.commands_sent == 1
        assert stats.bytes_sent == len(b"NOOP\r\n")
        assert stats.last_command_duration is not None


class TestChannelNotReentrant:
    """Tests for the one-outstanding-command rule"""

    def test_second_command_while_busy(self):
        protocol, fake = open_protocol("+OK\r\n")

        protocol._in_flight.acquire()
        try:
            with pytest.raises(ChannelBusyError):
                protocol.execute("NOOP")
        finally:
            protocol._in_flight.release()

        assert fake.sent == []

    def test_lock_released_after_error(self):
        protocol, _ = open_protocol("-ERR nope\r\n", "+OK\r\n")

        with pytest.raises(ProtocolError):
            protocol.execute("DELE 1")

        assert protocol.execute("NOOP") == "+OK\r\n"


class TestIncompleteReply:
    """Tests for replies that cannot be read to their end"""

    def test_overlong_line_closes_connection(self):
        """Test leftover reply bytes are never read as the next reply"""
        fake = FakeSocket(POP3TestHelper.script(
            "+OK ready\r\n",
            "+OK message follows\r\n" + "x" * 600 + "\r\n.\r\n",
            "+OK 1 10\r\n",
        ))
        connection = POP3Connection("pop.example.com", 110, secure=False, max_line_length=512)
        with patch(CONNECT_TARGET, return_value=fake):
            connection.open()
        protocol = POP3Protocol(connection)

        with pytest.raises(ProtocolError):
            protocol.execute("RETR 1")

        assert not connection.is_open
        assert fake.closed
        with pytest.raises(NetworkError):
            protocol.execute("STAT")
        assert fake.commands == ["RETR 1"]

    def test_timeout_mid_reply_closes_connection(self):
        protocol, fake = open_protocol("+OK\r\n1 100\r\n")
        connection = protocol.connection
        reader = connection._file

        def readline(limit=-1):
            line = reader.readline(limit)
            if not line:
                raise socket.timeout("timed out")
            return line

        connection._file = MagicMock(readline=readline)

        with pytest.raises(NetworkTimeoutError):
            protocol.execute("LIST")

        assert not connection.is_open
        assert fake.closed

    def test_eof_mid_reply_closes_connection(self):
        protocol, fake = open_protocol("+OK\r\n1 100\r\n")

        with pytest.raises(ServerConnectionError):
            protocol.execute("LIST")

        assert fake.closed

    def test_error_reply_keeps_connection(self):
        """Test a complete -ERR reply leaves the session usable"""
        protocol, _ = open_protocol("-ERR no such message\r\n")

        with pytest.raises(ProtocolError):
            protocol.execute("RETR 4")

        assert protocol.connection.is_open


class TestLoggableCommand:
    """Tests for POP3Protocol.loggable_command"""

    @pytest.mark.parametrize("command, expected", [
        ("PASS secret", "PASS [REDACTED]"),
        ("pass correct horse battery", "pass [REDACTED]"),
        ("USER alice", "USER alice"),
        ("RETR 1", "RETR 1"),
    ])
    def test_password_removed(self, command, expected):
        assert POP3Protocol.loggable_command(command) == expected
