"""Validation of session arguments, checked before any network activity."""

import math
from typing import Any, Optional

from smallpop3.utils.errors import (
    InvalidCredentialsFormatError,
    InvalidHostError,
    InvalidMessageIdError,
    InvalidTimeoutError,
)
from smallpop3.utils.logging import get_logger

from .host import HostValidator

logger = get_logger(__name__)

MAX_TIMEOUT = 2_147_483_647
MAX_PORT = 65535


class SessionValidator:
    """Validate the arguments of a POP3 session"""

    @staticmethod
    def validate_host(host: Any) -> str:
        if not HostValidator.is_valid_host(host):
            raise InvalidHostError(
                "The host parameter has to be a hostname or IP address!",
                details={"host": repr(host)},
            )
        return host

    @staticmethod
    def validate_credentials(user: Any, password: Any, allow_special_chars: bool) -> None:
        """Reject credentials that would not survive as a single command line.

        Line breaks are always rejected. Other control characters are only
        rejected when special characters are not allowed.
        """
        for name, value in (("user", user), ("password", password)):
            if not isinstance(value, str):
                raise InvalidCredentialsFormatError(
                    f"The {name} parameter has to be a string!",
                    details={"field": name},
                )

            if "\r" in value or "\n" in value:
                raise InvalidCredentialsFormatError(
                    f"The {name} parameter must not contain line breaks!",
                    details={"field": name},
                )

            if not allow_special_chars and not value.isprintable():
                raise InvalidCredentialsFormatError(
                    f"The {name} parameter must not contain control characters!",
                    details={"field": name},
                )

    @staticmethod
    def validate_timeout(timeout: Any) -> float:
        """Return the timeout as a float in the open interval (0, 2**31 - 1)."""
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise InvalidTimeoutError(
                "The timeout value has to be a number bigger than 0!",
                details={"timeout": repr(timeout)},
            )

        timeout = float(timeout)
        if not math.isfinite(timeout) or timeout <= 0 or timeout >= MAX_TIMEOUT:
            raise InvalidTimeoutError(
                "The timeout value has to be a number bigger than 0!",
                details={"timeout": timeout},
            )

        return timeout

    @staticmethod
    def resolve_port(port: Optional[int], default: int) -> int:
        """Return the explicit port when it is a valid int, the default otherwise."""
        if port is None:
            return default

        if isinstance(port, int) and not isinstance(port, bool) and 0 <= port <= MAX_PORT:
            return port

        logger.warning(f"Ignoring invalid port {port!r}, using {default}")
        return default

    @staticmethod
    def validate_message_id(number: Any) -> int:
        if isinstance(number, bool) or not isinstance(number, int) or number < 1:
            raise InvalidMessageIdError(
                "The message identification number is invalid.",
                details={"number": repr(number)},
            )
        return number
