"""The modhex alphabet and its lookup tables.

Modhex is hexadecimal with the digits replaced by keyboard letters that sit
in the same place on most Latin layouts, which is why YubiKey one-time
passwords are written in it::

    hex     0123456789abcdef
    modhex  cbdefghijklnrtuv
"""

from typing import List, Optional, Union

ALPHABET = "cbdefghijklnrtuv"


def _build_reverse_table() -> List[Optional[int]]:
    table: List[Optional[int]] = [None] * 256
    for value, char in enumerate(ALPHABET):
        table[ord(char)] = value
        table[ord(char.upper())] = value
    return table


# Indexed by raw byte value.
REVERSE_TABLE = _build_reverse_table()
PAIR_TABLE = [
    (ALPHABET[b >> 4] + ALPHABET[b & 0x0F]).encode("ascii") for b in range(256)
]


def value_to_char(value: int) -> str:
    if not 0 <= value <= 0x0F:
        raise ValueError(f"nibble {value} out of range for modhex")
    return ALPHABET[value]


def char_to_value(char: Union[str, int]) -> Optional[int]:
    """Return the 4-bit value of a modhex character, or None if it is not one.

    ``char`` is either a one-character string or a raw byte value. Both
    cases of the alphabet letters are accepted.
    """
    if isinstance(char, str):
        if len(char) != 1:
            raise ValueError("char_to_value expects a single character")
        char = ord(char)
    if not 0 <= char <= 0xFF:
        return None
    return REVERSE_TABLE[char]


__all__ = [
    "ALPHABET",
    "PAIR_TABLE",
    "REVERSE_TABLE",
    "char_to_value",
    "value_to_char",
]
