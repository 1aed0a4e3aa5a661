"""
Block-count notation: "500000", "100K", "0.5M", "5M" -> exact block number.
"""
import re

THOUSAND = 1_000
MILLION = 1_000_000
# M-suffixed decimals count in tenths of a million ("0.5M" -> 500000).
TENTH_OF_MILLION = 100_000

_DIGITS = re.compile(r"[0-9]*")


class InvalidNotation(ValueError):
    """Raised when a block notation is not a non-negative number with optional K/M suffix."""


def _split_decimal(num: str, raw: str):
    """Split "2.5" into ("2", "5"); either side may be empty, not both."""
    integer_part, _, decimal_part = num.partition(".")
    if not _DIGITS.fullmatch(integer_part) or not _DIGITS.fullmatch(decimal_part):
        raise InvalidNotation(f"Invalid block number notation: {raw!r}")
    if not integer_part and not decimal_part:
        raise InvalidNotation(f"Invalid block number notation: {raw!r}")
    return integer_part, decimal_part


def parse_block_number(notation: str) -> int:
    """
    Convert block notation to a block number.

    - K/k: integer part x 1,000 (any fraction is dropped: "2.5K" -> 2000).
    - M/m: integer part x 1,000,000 + decimal part x 100,000. Correct for one
      decimal digit ("2.5M" -> 2500000); "0.25M" gives 2500000, not 250000.
    - no suffix: plain integer.
    """
    raw = notation
    s = (notation or "").strip()
    if not s:
        raise InvalidNotation("Empty block number notation")

    suffix = s[-1]
    if suffix in "Kk":
        integer_part, _ = _split_decimal(s[:-1], raw)
        return int(integer_part or 0) * THOUSAND
    if suffix in "Mm":
        num = s[:-1]
        if "." in num:
            integer_part, decimal_part = _split_decimal(num, raw)
            return int(integer_part or 0) * MILLION + int(decimal_part or 0) * TENTH_OF_MILLION
        if not num or not _DIGITS.fullmatch(num):
            raise InvalidNotation(f"Invalid block number notation: {raw!r}")
        return int(num) * MILLION

    if not _DIGITS.fullmatch(s):
        raise InvalidNotation(f"Invalid block number notation: {raw!r}")
    return int(s)
