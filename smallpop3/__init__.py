"""A small synchronous POP3 client.

Connects over TLS (default) or plaintext, authenticates with USER/PASS, and
exposes the mailbox operations of RFC 1939: status, listing, retrieval,
header-only retrieval, deletion, reset and keepalive.

Usage Examples
----------------

Read the mailbox:
    >>> from smallpop3 import POP3Client, CountMode
    >>>
    >>> with POP3Client("pop.example.com", "user", "secret", timeout=5) as pop:
    ...     print(pop.message_count(CountMode.BOTH, formatted=True))
    ...     for number, message in pop.headers_all().items():
    ...         print(number, message.subject)

Load options from ~/.smallpop3/config.json:
    >>> from smallpop3 import ConfigManager
    >>>
    >>> manager = ConfigManager()
    >>> manager.apply_logging()
    >>> pop = POP3Client("pop.example.com", "user", "secret", options=manager.client_options)

Notes
-----
- Every call blocks until the server has answered
- A constructed client is always authenticated
- Nothing is retried; errors are raised to the caller
- Certificates are verified unless ignore_cert=True
"""

from smallpop3.core.email import EmailStructureParser
from smallpop3.core.models import ParsedMessage
from smallpop3.core.pop3 import CountMode, MailboxContract, POP3Client
from smallpop3.core.validation import SizeValidator
from smallpop3.utils.config import ClientOptions, ConfigManager
from smallpop3.utils.errors import (
    AuthenticationError,
    ErrorCategory,
    NetworkError,
    NetworkTimeoutError,
    ProtocolError,
    ServerConnectionError,
    SizeError,
    SmallPOP3Error,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "POP3Client",
    "CountMode",
    "MailboxContract",
    "ParsedMessage",
    "EmailStructureParser",
    "SizeValidator",
    # Configuration
    "ClientOptions",
    "ConfigManager",
    # Errors
    "SmallPOP3Error",
    "ErrorCategory",
    "ValidationError",
    "NetworkError",
    "ServerConnectionError",
    "NetworkTimeoutError",
    "ProtocolError",
    "AuthenticationError",
    "SizeError",
]
