"""POP3 connection management - handles transport setup and cleanup."""

import socket
import ssl
import time
from dataclasses import dataclass
from typing import BinaryIO, Optional

from smallpop3.utils.errors import (
    NetworkError,
    NetworkTimeoutError,
    ProtocolError,
    ServerConnectionError,
)
from smallpop3.utils.logging import get_logger, log_call

from .constants import CRLF, ENCODING
from .framing import is_error_response

logger = get_logger(__name__)

READ_ENCODING = "utf-8"


@dataclass
class ConnectionStats:
    """Tracks POP3 connection metrics."""

    commands_sent: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0
    connected_at: Optional[float] = None
    last_command_duration: Optional[float] = None
    total_command_time: float = 0.0

    def record_command(self, duration: float) -> None:
        """Record a completed command's round trip.

        Args:
            duration: Time between writing the command and reading the last reply line
        """
        self.commands_sent += 1
        self.last_command_duration = duration
        self.total_command_time += duration


class POP3Connection:
    """Owns the socket of one POP3 session.

    The timeout is applied to connection setup and then kept on the socket,
    so every later read and write is bounded by it too.
    """

    def __init__(
        self,
        host: str,
        port: int,
        secure: bool = True,
        verify_certificate: bool = True,
        timeout: float = 1.5,
        max_line_length: int = 2048,
    ):
        """Initialise the connection without touching the network.

        Args:
            host: Validated host name or IP literal
            port: Port to connect to
            secure: Negotiate TLS right after connecting
            verify_certificate: Verify the peer certificate and host name
            timeout: Seconds allowed for connect, each read and each write
            max_line_length: Longest reply line accepted, in bytes
        """
        self.host = host
        self.port = port
        self.secure = secure
        self.verify_certificate = verify_certificate
        self.timeout = timeout
        self.max_line_length = max_line_length
        self._sock: Optional[socket.socket] = None
        self._file: Optional[BinaryIO] = None
        self._stats = ConnectionStats()

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def get_stats(self) -> ConnectionStats:
        """Get current connection statistics."""
        return self._stats

    def _create_ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.verify_certificate:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _address(self) -> str:
        if self.host.startswith("[") and self.host.endswith("]"):
            return self.host[1:-1]
        return self.host

    def open(self) -> str:
        """Connect, negotiate TLS if requested, and read the server greeting.

        Returns:
            The greeting line

        Raises:
            NetworkTimeoutError: If connecting or the handshake times out
            ServerConnectionError: If the connection fails or the greeting is an error
        """
        if self.is_open:
            raise ServerConnectionError(
                "The connection is already open",
                details={"server": self.host, "port": self.port},
            )

        logger.info(
            f"Connecting to POP3 server {self.host}:{self.port}",
            extra={"secure": self.secure, "verify_certificate": self.verify_certificate},
        )

        sock = None
        try:
            sock = socket.create_connection((self._address(), self.port), self.timeout)
            if self.secure:
                sock = self._create_ssl_context().wrap_socket(
                    sock, server_hostname=self._address()
                )
            sock.settimeout(self.timeout)

        except TimeoutError as e:
            if sock is not None:
                sock.close()
            raise NetworkTimeoutError(
                f"Connecting to {self.host} on port {self.port} timed out",
                details={"server": self.host, "port": self.port, "timeout": self.timeout},
            ) from e

        except OSError as e:
            if sock is not None:
                sock.close()
            raise ServerConnectionError(
                f"The connection to the server {self.host} on port {self.port} "
                f"cannot be made. Error details: {e}",
                details={"server": self.host, "port": self.port},
            ) from e

        self._sock = sock
        self._file = sock.makefile("rb")
        self._stats.connected_at = time.time()

        try:
            greeting = self.read_line()
        except Exception:
            self.close()
            raise

        if is_error_response(greeting):
            self.close()
            raise ServerConnectionError(
                f"The server {self.host} has replied with an error after "
                "establishing the connection.",
                details={"server": self.host, "response": greeting},
            )

        logger.debug(f"Greeting from {self.host}: {greeting}")
        return greeting

    def write_line(self, line: str) -> None:
        """Send one command line, terminated by CRLF, in a single write.

        Raises:
            NetworkTimeoutError: If the write times out
            NetworkError: If the connection is closed or broken
        """
        sock = self._require_open()
        data = (line + CRLF).encode(ENCODING)

        try:
            sock.sendall(data)
        except TimeoutError as e:
            raise NetworkTimeoutError(
                "Sending the command timed out", details={"server": self.host}
            ) from e
        except OSError as e:
            raise NetworkError(
                f"Sending the command failed: {e}", details={"server": self.host}
            ) from e

        self._stats.bytes_sent += len(data)

    def read_line(self) -> str:
        """Read one reply line without its line ending.

        Raises:
            NetworkTimeoutError: If no complete line arrives in time
            ServerConnectionError: If the server closed the connection
            ProtocolError: If the line exceeds the maximum length
        """
        self._require_open()

        try:
            raw = self._file.readline(self.max_line_length + 1)
        except TimeoutError as e:
            raise NetworkTimeoutError(
                "Reading the reply timed out",
                details={"server": self.host, "timeout": self.timeout},
            ) from e
        except OSError as e:
            raise NetworkError(
                f"Reading the reply failed: {e}", details={"server": self.host}
            ) from e

        if len(raw) > self.max_line_length:
            raise ProtocolError(
                "The server sent a line that is too long",
                details={"server": self.host, "max_line_length": self.max_line_length},
            )

        if not raw:
            raise ServerConnectionError(
                "The server closed the connection", details={"server": self.host}
            )

        self._stats.bytes_received += len(raw)

        if raw.endswith(b"\r\n"):
            raw = raw[:-2]
        elif raw.endswith(b"\n"):
            raw = raw[:-1]

        return raw.decode(READ_ENCODING, errors="replace")

    def _require_open(self) -> socket.socket:
        if self._sock is None:
            raise NetworkError(
                "The connection is not open", details={"server": self.host}
            )
        return self._sock

    @log_call
    def close(self) -> None:
        """Release the socket. Safe to call on a broken or closed connection."""
        file, self._file = self._file, None
        sock, self._sock = self._sock, None

        try:
            if file is not None:
                file.close()
        except OSError as e:
            logger.debug(f"Error closing POP3 reader: {str(e)}")

        if sock is None:
            return

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Error shutting down POP3 socket: {str(e)}")
        finally:
            sock.close()
            logger.debug("POP3 connection closed")

    ## Context Manager Helpers

    def __enter__(self):
        """Enter context manager."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        self.close()
