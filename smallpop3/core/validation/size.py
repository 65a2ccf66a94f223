"""Message size validation and formatting."""

import re
from typing import Union

from smallpop3.utils.errors import SizeError

# Sizes at or above this bound are not representable as 32-bit signed ints.
MAX_SIZE = 2_147_483_647

SIZE_UNITS = ("B", "kB", "MB", "GB", "TB")

_DIGITS = re.compile(r"[0-9]+")


class SizeValidator:
    """Validate byte counts reported by the server and render them for humans.

    Accepted input is an ``int`` or a string of ASCII decimal digits, with
    optional surrounding whitespace. Leading zeros are allowed. Signs, decimal
    points, exponents and digit separators are rejected.
    """

    @staticmethod
    def is_digit_literal(text: str) -> bool:
        """True for one or more ASCII decimal digits, surrounding whitespace ignored."""
        return _DIGITS.fullmatch(text.strip()) is not None

    @staticmethod
    def validate(value: Union[int, str]) -> int:
        """Return the byte count as an int.

        Raises:
            SizeError: If the value is not numeric, negative, or too large
        """
        if isinstance(value, bool):
            raise SizeError(
                f"The size of an e-mail is invalid ({value!r}).",
                details={"size": repr(value)},
            )

        if isinstance(value, int):
            number = value
        elif isinstance(value, str) and SizeValidator.is_digit_literal(value):
            number = int(value.strip())
        else:
            raise SizeError(
                f"The size of an e-mail is invalid ({value!r}).",
                details={"size": repr(value)},
            )

        if number < 0 or number >= MAX_SIZE:
            raise SizeError(
                f"The size of an e-mail is invalid ({number}).",
                details={"size": number},
            )

        return number

    @staticmethod
    def format(value: Union[int, str], precision: int = 2) -> str:
        """Render a byte count as ``"<value> <unit>"`` using powers of 1000.

        >>> SizeValidator.format(4500)
        '4.5 kB'
        """
        number = SizeValidator.validate(value)

        factor = min((len(str(number)) - 1) // 3, len(SIZE_UNITS) - 1)
        rounded = round(number / 1000**factor, precision)

        text = f"{rounded:.{precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")

        return f"{text} {SIZE_UNITS[factor]}"
