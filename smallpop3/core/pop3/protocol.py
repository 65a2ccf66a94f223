"""POP3 protocol operations - one command, one complete reply."""

import threading
import time
from typing import Any, List

from smallpop3.utils.errors import (
    ChannelBusyError,
    InvalidCommandError,
    ProtocolError,
)
from smallpop3.utils.logging import get_logger

from . import framing
from .connection import POP3Connection
from .constants import (
    CRLF,
    MULTILINE_COMMANDS,
    MULTILINE_WITHOUT_ARGS,
    TERMINATOR,
    POP3Commands,
)

logger = get_logger(__name__)


class POP3Protocol:
    """Strict request/response exchange over a POP3Connection.

    Exactly one command may be outstanding; the reply is read completely
    before ``execute`` returns.
    """

    def __init__(self, connection: POP3Connection):
        """Initialise POP3 protocol handler.

        Args:
            connection: POP3Connection the commands are written to
        """
        self.connection = connection
        self._in_flight = threading.Lock()

    @staticmethod
    def normalize_command(command: Any) -> str:
        """Trim a command and check it is a single ASCII line.

        Raises:
            InvalidCommandError: If the command is not a str, empty, spans
                several lines or is not ASCII
        """
        if not isinstance(command, str):
            raise InvalidCommandError(
                "The command provided is not a string!",
                details={"type": type(command).__name__},
            )

        command = command.strip()
        if not command:
            raise InvalidCommandError("The command provided is empty!")

        if "\r" in command or "\n" in command:
            raise InvalidCommandError(
                "The command provided contains a line break!",
                details={"command": command.split(" ", 1)[0]},
            )

        if not command.isascii():
            raise InvalidCommandError(
                "The command provided contains non-ASCII characters!",
                details={"command": command.split(" ", 1)[0]},
            )

        return command

    @staticmethod
    def expects_multiline(command: str) -> bool:
        """Whether a success reply to this command is multi-line."""
        verb, _, args = command.partition(" ")
        verb = verb.upper()

        if verb in MULTILINE_COMMANDS:
            return True

        return verb in MULTILINE_WITHOUT_ARGS and not args.strip()

    @staticmethod
    def loggable_command(command: str) -> str:
        """The command as it may appear in logs, with any password removed."""
        verb, _, args = command.partition(" ")

        if verb.upper() == POP3Commands.PASS and args:
            return f"{verb} [REDACTED]"

        return command

    def execute(self, command: Any, strip_control_lines: bool = False) -> str:
        """Send one command and return its complete reply.

        Args:
            command: A single command line, without line ending
            strip_control_lines: Remove the status line and dot terminator
                of a multi-line reply

        Returns:
            The reply text, lines joined by CRLF

        Raises:
            InvalidCommandError: If the command cannot be sent as one line
            ChannelBusyError: If another command is still waiting for its reply
            ProtocolError: If the server replies with an error
        """
        command = self.normalize_command(command)
        multiline = self.expects_multiline(command)

        if not self._in_flight.acquire(blocking=False):
            raise ChannelBusyError(
                "A command is already waiting for its reply",
                details={"command": command.split(" ", 1)[0]},
            )

        try:
            start_time = time.time()
            logger.debug(f"C: {self.loggable_command(command)}")
            lines = self._exchange(command, multiline)
            self.connection.get_stats().record_command(time.time() - start_time)

        finally:
            self._in_flight.release()

        status = lines[0]
        if framing.is_error_response(status):
            raise ProtocolError(
                f"The server responded with an error to your command: {status}",
                details={"command": command.split(" ", 1)[0]},
                response=status,
            )

        response = CRLF.join(lines) + CRLF

        if strip_control_lines:
            stripped = framing.strip_control_lines(response)
            return framing.unstuff_lines(stripped) if multiline else stripped

        return response

    def _exchange(self, command: str, multiline: bool) -> List[str]:
        """Write the command and read every line of its reply.

        A reply that cannot be read to its end leaves unread bytes on the
        stream, so the connection is closed rather than reused.
        """
        try:
            self.connection.write_line(command)

            status = self.connection.read_line()
            logger.debug(f"S: {status}")

            lines = [status]
            if multiline and not framing.is_error_response(status):
                lines.extend(self._read_multiline_body())

        except BaseException:
            logger.warning(
                f"Reply to {command.split(' ', 1)[0]} was not read completely, "
                "closing the connection"
            )
            self.connection.close()
            raise

        return lines

    def _read_multiline_body(self) -> List[str]:
        """Read lines up to and including the lone dot terminator."""
        lines = []

        while True:
            line = self.connection.read_line()
            lines.append(line)
            if line == TERMINATOR:
                return lines
