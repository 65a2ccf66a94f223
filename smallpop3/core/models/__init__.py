from .message import KNOWN_HEADERS, ParsedMessage

__all__ = ['KNOWN_HEADERS', 'ParsedMessage']
