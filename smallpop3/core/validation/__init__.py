"""Domain validation utilities."""

from .host import HostValidator
from .session import SessionValidator
from .size import SizeValidator

__all__ = ['HostValidator', 'SessionValidator', 'SizeValidator']
