"""Parsed message model"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Canonical spelling of the headers extracted from every message.
KNOWN_HEADERS = (
    "From",
    "To",
    "Subject",
    "Date",
    "Content-Type",
    "Content-Transfer-Encoding",
)

_FIELD_NAMES = {
    "From": "sender",
    "To": "recipient",
    "Subject": "subject",
    "Date": "date",
    "Content-Type": "content_type",
    "Content-Transfer-Encoding": "content_transfer_encoding",
}

_LOOKUP = {name.lower(): field for name, field in _FIELD_NAMES.items()}


@dataclass(frozen=True)
class ParsedMessage:
    """Headers of interest plus the raw headers and body text of one message.

    A header that was not present is ``None``. ``body`` is ``None`` when only
    the headers were retrieved.
    """

    headers: str
    body: Optional[str] = None
    sender: Optional[str] = None
    recipient: Optional[str] = None
    subject: Optional[str] = None
    date: Optional[str] = None
    content_type: Optional[str] = None
    content_transfer_encoding: Optional[str] = None

    @classmethod
    def from_header_values(
        cls, values: Dict[str, str], headers: str, body: Optional[str] = None
    ) -> "ParsedMessage":
        """Build from a mapping keyed by canonical header names."""
        fields = {_FIELD_NAMES[name]: value for name, value in values.items()}
        return cls(headers=headers, body=body, **fields)

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a known header by name, case-insensitively."""
        field = _LOOKUP.get(name.lower())
        value = getattr(self, field) if field else None
        return default if value is None else value

    def __getitem__(self, name: str) -> Optional[str]:
        try:
            return getattr(self, _LOOKUP[name.lower()])
        except KeyError:
            raise KeyError(name) from None

    def to_dict(self) -> Dict[str, Any]:
        """Header values keyed by canonical name, plus HEADERS and BODY."""
        result: Dict[str, Any] = {
            name: getattr(self, field) for name, field in _FIELD_NAMES.items()
        }
        result["HEADERS"] = self.headers
        if self.has_body:
            result["BODY"] = self.body
        return result
