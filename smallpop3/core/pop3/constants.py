"""POP3 constants and protocol values."""


class POP3Response:
    """Status markers that open every POP3 reply."""

    OK = "+OK"
    ERR = "-ERR"


class POP3Ports:
    """Default ports."""

    PLAIN = 110
    SSL = 995


class POP3Commands:
    """Command verbs issued by the client."""

    USER = "USER"
    PASS = "PASS"
    STAT = "STAT"
    LIST = "LIST"
    RETR = "RETR"
    TOP = "TOP"
    DELE = "DELE"
    RSET = "RSET"
    NOOP = "NOOP"
    QUIT = "QUIT"
    UIDL = "UIDL"
    CAPA = "CAPA"


# Verbs whose success reply is multi-line whatever their arguments are
MULTILINE_COMMANDS = frozenset({POP3Commands.RETR, POP3Commands.TOP, POP3Commands.CAPA})

# Verbs whose success reply is multi-line only when called without arguments
MULTILINE_WITHOUT_ARGS = frozenset({POP3Commands.LIST, POP3Commands.UIDL})

CRLF = "\r\n"
TERMINATOR = "."
ENCODING = "ascii"
