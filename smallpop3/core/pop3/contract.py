"""Operations every mailbox session offers."""

from abc import ABC, abstractmethod
from typing import Dict, Union

from smallpop3.core.models.message import ParsedMessage

SizeValue = Union[int, str]
MessageValue = Union[str, ParsedMessage]


class MailboxContract(ABC):
    """Documented contract of an authenticated mailbox session."""

    @abstractmethod
    def command(self, command: str, strip_control_lines: bool = False) -> str:
        """Send a raw command and return the reply text."""

    @abstractmethod
    def message_count(self, mode=0, formatted: bool = False):
        """Return the message count, the mailbox size, or both."""

    @abstractmethod
    def message_sizes(self, formatted: bool = False) -> Dict[int, SizeValue]:
        """Return the size of every message keyed by message number."""

    @abstractmethod
    def retrieve(self, number: int, raw: bool = False) -> MessageValue:
        """Return one message."""

    @abstractmethod
    def retrieve_all(self, raw: bool = False) -> Dict[int, MessageValue]:
        """Return every message keyed by message number."""

    @abstractmethod
    def delete(self, number: int) -> None:
        """Mark one message as deleted."""

    @abstractmethod
    def delete_all(self) -> None:
        """Mark every message as deleted."""

    @abstractmethod
    def headers(self, number: int, raw: bool = False) -> MessageValue:
        """Return the headers of one message."""

    @abstractmethod
    def headers_all(self, raw: bool = False) -> Dict[int, MessageValue]:
        """Return the headers of every message keyed by message number."""

    @abstractmethod
    def revert_deletes(self) -> None:
        """Unmark the messages deleted in this session."""

    @abstractmethod
    def keep_alive(self) -> None:
        """Keep the session from timing out."""

    @abstractmethod
    def close(self) -> None:
        """End the session and release the connection."""
