"""POP3 client for reading and managing a remote mailbox."""

from enum import IntEnum
from typing import Any, Dict, Optional, Union

from smallpop3.core.email.parser import EmailStructureParser
from smallpop3.core.validation import SessionValidator, SizeValidator
from smallpop3.utils.config import ClientOptions
from smallpop3.utils.errors import (
    AuthenticationError,
    InvalidModeError,
    ProtocolError,
    SmallPOP3Error,
)
from smallpop3.utils.logging import get_logger, log_call

from .connection import ConnectionStats, POP3Connection
from .constants import POP3Commands, POP3Ports
from .contract import MailboxContract, MessageValue, SizeValue
from .framing import split_lines
from .protocol import POP3Protocol

logger = get_logger(__name__)


class CountMode(IntEnum):
    """What message_count() returns."""

    COUNT = 0
    SIZE = 1
    BOTH = 2

    @classmethod
    def from_value(cls, value: Any) -> "CountMode":
        """Accept a CountMode, its int value or its name.

        Raises:
            InvalidModeError: If the value names no mode
        """
        if isinstance(value, cls):
            return value

        try:
            if isinstance(value, str):
                return cls[value.strip().upper()]
            if isinstance(value, int) and not isinstance(value, bool):
                return cls(value)
        except (KeyError, ValueError):
            pass

        raise InvalidModeError(
            "The returnmode specified is invalid.", details={"mode": repr(value)}
        )


class POP3Client(MailboxContract):
    """Authenticated POP3 session.

    Constructing the client connects and logs in; a client that exists is
    always authenticated. Release it with close(), or use it as a context
    manager.

    Example:
        >>> with POP3Client("pop.example.com", "user", "secret") as client:
        ...     client.message_count(CountMode.BOTH, formatted=True)
        {'count': 3, 'size': '4.5 kB'}
    """

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        secure: bool = True,
        ignore_cert: bool = False,
        timeout: Optional[float] = None,
        port: Optional[int] = None,
        options: Optional[ClientOptions] = None,
    ):
        """Validate the arguments, connect and authenticate.

        Args:
            host: Host name or IP address of the server
            user: Mailbox user name
            password: Mailbox password
            secure: Use TLS (port 995 by default) instead of plaintext (port 110)
            ignore_cert: Skip certificate and host name verification
            timeout: Seconds for connect, reads and writes; defaults to
                options.default_timeout
            port: Explicit port, used when it is an int in 0..65535
            options: Client options; defaults to ClientOptions()

        Raises:
            ValidationError: If an argument is invalid (before connecting)
            ServerConnectionError: If the connection fails or the server greets with an error
            NetworkTimeoutError: If the server does not answer in time
            AuthenticationError: If USER or PASS is rejected
        """
        self.options = options or ClientOptions()

        self.host = SessionValidator.validate_host(host)
        SessionValidator.validate_credentials(
            user, password, self.options.credentials_allow_special_chars
        )
        self.timeout = SessionValidator.validate_timeout(
            self.options.default_timeout if timeout is None else timeout
        )

        self.secure = bool(secure)
        self.verify_certificate = not ignore_cert
        self.port = SessionValidator.resolve_port(
            port, POP3Ports.SSL if self.secure else POP3Ports.PLAIN
        )

        self._connection = POP3Connection(
            self.host,
            self.port,
            secure=self.secure,
            verify_certificate=self.verify_certificate,
            timeout=self.timeout,
            max_line_length=self.options.max_line_length,
        )
        self._protocol = POP3Protocol(self._connection)
        self._closed = False

        self.greeting = self._connection.open()

        try:
            self._login(user, password)
        except BaseException:
            self._closed = True
            self._connection.close()
            raise

    def _login(self, user: str, password: str) -> None:
        """Send USER then PASS.

        Raises:
            AuthenticationError: If either command is rejected
        """
        for verb, value in ((POP3Commands.USER, user), (POP3Commands.PASS, password)):
            try:
                self._protocol.execute(f"{verb} {value}")
            except ProtocolError as e:
                logger.warning(
                    "POP3 authentication failed",
                    extra={"server": self.host, "step": verb},
                )
                raise AuthenticationError(
                    f"The server rejected the {verb} command.",
                    details={"server": self.host, "step": verb},
                    response=e.response,
                ) from e

        logger.info(f"Authenticated to POP3 server {self.host} as {user}")

    @property
    def closed(self) -> bool:
        return self._closed

    def get_stats(self) -> ConnectionStats:
        """Get connection statistics for this session."""
        return self._connection.get_stats()

    def command(self, command: str, strip_control_lines: bool = False) -> str:
        """Send a raw command and return the server's reply.

        Args:
            command: Single command line, e.g. "UIDL" or "LIST 2"
            strip_control_lines: Drop the status line and dot terminator of a
                multi-line reply

        Raises:
            InvalidCommandError: If the command is not a single line of text
            ProtocolError: If the server replies with an error
        """
        return self._protocol.execute(command, strip_control_lines)

    def message_count(
        self, mode: Union[CountMode, int, str] = CountMode.COUNT, formatted: bool = False
    ) -> Union[int, SizeValue, Dict[str, Any]]:
        """Return the message count, the total size, or both from STAT.

        Args:
            mode: CountMode.COUNT, CountMode.SIZE or CountMode.BOTH
            formatted: Render the size as a human-readable string

        Returns:
            The count, the size, or {"count": ..., "size": ...}

        Raises:
            InvalidModeError: If the mode is unknown (before any command is sent)
            ProtocolError: If the STAT reply is malformed
            SizeError: If the reported size is invalid
        """
        mode = CountMode.from_value(mode)

        response = self.command(POP3Commands.STAT)
        parts = response.split()
        if len(parts) < 3 or not SizeValidator.is_digit_literal(parts[1]):
            raise ProtocolError(
                "The server sent a malformed STAT reply.", response=response.strip()
            )

        count = int(parts[1])
        size = self._size(parts[2], formatted)

        if mode is CountMode.COUNT:
            return count
        if mode is CountMode.SIZE:
            return size
        return {"count": count, "size": size}

    def message_sizes(self, formatted: bool = False) -> Dict[int, SizeValue]:
        """Return the size of every message, keyed by message number in server order.

        Raises:
            ProtocolError: If a LIST line is malformed
            SizeError: If a reported size is invalid
        """
        sizes: Dict[int, SizeValue] = {}

        response = self.command(POP3Commands.LIST, True)

        for line in split_lines(response):
            parts = line.split()
            if len(parts) < 2 or not SizeValidator.is_digit_literal(parts[0]):
                raise ProtocolError(
                    "The server sent a malformed LIST line.", response=line
                )
            sizes[int(parts[0])] = self._size(parts[1], formatted)

        return sizes

    def retrieve(self, number: int, raw: bool = False) -> MessageValue:
        """Retrieve one message.

        Args:
            number: Message number, 1 or bigger
            raw: Return the message text instead of a ParsedMessage

        Raises:
            InvalidMessageIdError: If number is below 1 (before any command is sent)
            ProtocolError: If the server rejects the number
        """
        number = SessionValidator.validate_message_id(number)

        response = self.command(f"{POP3Commands.RETR} {number}", True)

        return response if raw else EmailStructureParser.parse(response, True)

    def retrieve_all(self, raw: bool = False) -> Dict[int, MessageValue]:
        """Retrieve every message, keyed by message number."""
        count = self.message_count()

        return {number: self.retrieve(number, raw) for number in range(1, count + 1)}

    def delete(self, number: int) -> None:
        """Mark one message for deletion when the session ends.

        Raises:
            InvalidMessageIdError: If number is below 1 (before any command is sent)
            ProtocolError: If the server rejects the number
        """
        number = SessionValidator.validate_message_id(number)

        self.command(f"{POP3Commands.DELE} {number}")

    def delete_all(self) -> None:
        count = self.message_count()

        for number in range(1, count + 1):
            self.delete(number)

        logger.info(f"Marked {count} messages for deletion on {self.host}")

    def headers(self, number: int, raw: bool = False) -> MessageValue:
        """Retrieve the headers of one message with TOP, without body lines.

        Raises:
            InvalidMessageIdError: If number is below 1 (before any command is sent)
            ProtocolError: If the server rejects the number
        """
        number = SessionValidator.validate_message_id(number)

        response = self.command(f"{POP3Commands.TOP} {number} 0", True)

        return response if raw else EmailStructureParser.parse(response, False)

    def headers_all(self, raw: bool = False) -> Dict[int, MessageValue]:
        """Retrieve the headers of every message, keyed by message number."""
        count = self.message_count()

        return {number: self.headers(number, raw) for number in range(1, count + 1)}

    def revert_deletes(self) -> None:
        """Unmark every message deleted in this session (RSET)."""
        self.command(POP3Commands.RSET)

    def keep_alive(self) -> None:
        self.command(POP3Commands.NOOP)

    @log_call
    def close(self) -> None:
        """Send QUIT if possible, then release the connection.

        Safe to call more than once and on a broken connection.
        """
        if self._closed:
            return
        self._closed = True

        try:
            if self._connection.is_open:
                self._protocol.execute(POP3Commands.QUIT)

        except SmallPOP3Error as e:
            logger.debug(f"Error sending QUIT to {self.host}: {e.message}")

        finally:
            self._connection.close()

    def _size(self, value: str, formatted: bool) -> SizeValue:
        if formatted:
            return SizeValidator.format(value, self.options.formatted_size_precision)
        return SizeValidator.validate(value)

    ## Context Manager Helpers

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        self.close()
