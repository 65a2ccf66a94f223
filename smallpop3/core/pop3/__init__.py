from .client import CountMode, POP3Client
from .connection import ConnectionStats, POP3Connection
from .contract import MailboxContract
from .protocol import POP3Protocol

__all__ = [
    'CountMode',
    'POP3Client',
    'ConnectionStats',
    'POP3Connection',
    'MailboxContract',
    'POP3Protocol',
]
