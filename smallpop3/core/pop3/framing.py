"""Classification and framing of POP3 replies."""

from typing import List

from .constants import CRLF, TERMINATOR, POP3Response


def is_error_response(response: str) -> bool:
    """True unless the reply opens with the +OK marker."""
    return response[:3] != POP3Response.OK


def strip_control_lines(response: str) -> str:
    """Remove the status line and the dot terminator of a multi-line reply.

    Single-line replies come back trimmed but otherwise unchanged, so
    stripping twice gives the same result as stripping once.
    """
    lines = response.strip().split(CRLF)

    if len(lines) != 1:
        if lines[-1] == TERMINATOR:
            lines.pop()
        if lines and lines[0].startswith(POP3Response.OK):
            lines.pop(0)

    return CRLF.join(lines)


def unstuff_lines(text: str) -> str:
    """Undo dot-stuffing: a content line starting with '..' loses one dot."""
    return CRLF.join(
        line[1:] if line.startswith(TERMINATOR * 2) else line
        for line in text.split(CRLF)
    )


def split_lines(text: str) -> List[str]:
    """Split stripped reply text into its lines; no text means no lines."""
    if not text:
        return []
    return text.split(CRLF)
