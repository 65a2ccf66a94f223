"""Split retrieved messages into headers and body."""

from typing import Dict, List, Optional

from smallpop3.core.models.message import KNOWN_HEADERS, ParsedMessage
from smallpop3.utils.logging import get_logger

logger = get_logger(__name__)

CRLF = "\r\n"
BLANK_LINE = CRLF + CRLF

_CANONICAL = {name.lower(): name for name in KNOWN_HEADERS}


class EmailStructureParser:
    """Parse framed RETR/TOP text into a ParsedMessage.

    This is not a MIME parser: values are kept as sent, including encoded
    words, and multipart bodies are returned as raw text.
    """

    @staticmethod
    def parse(text: str, include_body: bool) -> ParsedMessage:
        """Parse message text.

        Args:
            text: Message text with the POP3 control lines already stripped
            include_body: Whether ``text`` holds a body after the first blank line

        Returns:
            ParsedMessage with headers, and the body when requested
        """
        body: Optional[str] = None
        if include_body:
            headers, _, body = text.partition(BLANK_LINE)
        else:
            headers = text

        values = EmailStructureParser.extract_headers(headers.split(CRLF))
        return ParsedMessage.from_header_values(values, headers=headers, body=body)

    @staticmethod
    def extract_headers(lines: List[str]) -> Dict[str, str]:
        """Collect the known headers, unfolding continuation lines.

        A continuation line starts with a space or tab and is appended
        verbatim to the header it follows.
        """
        values: Dict[str, str] = {}

        for index, line in enumerate(lines):
            name, separator, value = line.partition(": ")
            if not separator:
                continue

            canonical = _CANONICAL.get(name.lower())
            if canonical is None:
                continue

            following = index + 1
            while following < len(lines) and lines[following][:1] in (" ", "\t"):
                value += lines[following]
                following += 1

            if canonical in values:
                logger.debug(f"Header {canonical} repeated, keeping the last value")
            values[canonical] = value

        return values
