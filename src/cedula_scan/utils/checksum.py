"""
ICAO Doc 9303 check digit computation.

Character values: ``0-9`` map to 0-9, ``A-Z`` map to 10-35, every other
character (notably the ``<`` filler) maps to 0. Values are multiplied by the
repeating weights 7, 3, 1 and the sum is taken modulo 10.
"""

from __future__ import annotations

CHECK_DIGIT_WEIGHTS = (7, 3, 1)


def character_value(char: str) -> int:
    """Numeric value of a single MRZ character."""
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "Z":
        # A=10, B=11, ..., Z=35
        return ord(char) - 55
    return 0


def check_digit(data: str) -> str:
    """
    Calculate the check digit for an MRZ field.

    Args:
        data: Field contents, fillers included

    Returns:
        Single character check digit ("0"-"9")
    """
    total = 0
    for i, char in enumerate(data):
        total += character_value(char) * CHECK_DIGIT_WEIGHTS[i % 3]
    return str(total % 10)


def validate_check_digit(data: str, digit: str) -> bool:
    """Whether ``digit`` is the check digit of ``data``."""
    return check_digit(data) == digit
