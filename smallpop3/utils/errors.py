"""Centralized error definitions for smallpop3."""

from enum import Enum
from typing import Any, Dict, Optional

## Error Categories


class ErrorCategory(Enum):
    """Closed set of error kinds raised by the client."""

    VALIDATION = "validation"
    NETWORK = "network"
    PROTOCOL = "protocol"
    AUTHENTICATION = "authentication"
    SIZE = "size"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


## Custom Exceptions


class SmallPOP3Error(Exception):
    """Base exception for all smallpop3 errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise SmallPOP3Error with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Validation Errors


class ValidationError(SmallPOP3Error):
    """Base exception for input rejected before any network activity."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class InvalidHostError(ValidationError):
    """Exception for a host that is neither a hostname nor an IP address."""

    user_message = "The host has to be a hostname or IP address"


class InvalidTimeoutError(ValidationError):
    """Exception for a non-positive, non-finite or overflowing timeout."""

    user_message = "The timeout has to be a number bigger than 0"


class InvalidCredentialsFormatError(ValidationError):
    """Exception for credentials containing control characters."""

    user_message = "The user and password must not contain control characters"


class InvalidCommandError(ValidationError):
    """Exception for a command that cannot be sent as a single line."""

    user_message = "The command has to be a single line of text"


class InvalidMessageIdError(ValidationError):
    """Exception for a message number below 1."""

    user_message = "The message identification number is invalid"


class InvalidModeError(ValidationError):
    """Exception for an unknown message count mode."""

    user_message = "The count mode specified is invalid"


## Network Errors


class NetworkError(SmallPOP3Error):
    """Base exception for transport errors."""

    category = ErrorCategory.NETWORK
    user_message = "A network error occurred"


class ServerConnectionError(NetworkError):
    """Exception for a connection that cannot be made or is refused by the server."""

    user_message = "Failed to connect to the POP3 server"


class NetworkTimeoutError(NetworkError):
    """Exception for a connect, read or write that exceeded the timeout."""

    user_message = "The connection timed out"


## Protocol Errors


class ProtocolError(SmallPOP3Error):
    """Exception for a reply classified as failure by the server."""

    category = ErrorCategory.PROTOCOL
    user_message = "The server responded with an error"

    def __init__(
        self,
        message: str | None = None,
        details: Dict[str, Any] | None = None,
        response: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.response = response
        if response is not None:
            self.details.setdefault("response", response)


class ChannelBusyError(ProtocolError):
    """Exception for a command issued while another one is still outstanding."""

    user_message = "Another command is still waiting for its reply"


class AuthenticationError(ProtocolError):
    """Exception for a rejected USER or PASS command."""

    category = ErrorCategory.AUTHENTICATION
    user_message = "Invalid user name or password"


## Size Errors


class SizeError(SmallPOP3Error):
    """Exception for a message size that is not a representable byte count."""

    category = ErrorCategory.SIZE
    user_message = "The size of an e-mail is invalid"


## Configuration Errors


class ConfigurationError(SmallPOP3Error):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Utility Functions


def format_error_message(error: Exception) -> str:
    """Format an error message for display."""
    if isinstance(error, SmallPOP3Error):
        return error.message
    else:
        return "An unexpected error occurred - check logs for details."
