"""
The Z85 alphabet and its inverse lookup table. The order of the letters in `ALPHABET` is part of
the wire format: the letter at index `k` encodes the base 85 digit `k`.
"""
from __future__ import annotations

ALPHABET = (
    B'0123456789'
    B'abcdefghijklmnopqrstuvwxyz'
    B'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    B'.-:+=^!/*?&<>()[]{}@%$#')

BASE = len(ALPHABET)

INVALID = 0xFF
"""
The value of `INVERSE` at the position of any byte that is not a Z85 letter.
"""

SENTINEL = 0x23
"""
The letter `#`, which marks synthetic zero padding when it occurs as a prefix of the last group
of padded Z85 data.
"""

ZERO = ALPHABET[0]

U32_MAX = 0xFFFFFFFF


def _invert(alphabet: bytes) -> bytes:
    table = bytearray([INVALID]) * 0x100
    for value, letter in enumerate(alphabet):
        table[letter] = value
    return bytes(table)


INVERSE = _invert(ALPHABET)
"""
Maps each of the 256 byte values to its digit value, or to `INVALID`.
"""

DIGITS = INVERSE.replace(bytes((INVALID,)), bytes(1))
"""
A translation table that maps every byte to a digit value, where bytes that are not part of the
alphabet are treated as the digit zero. Only used by the unchecked decoders.
"""

assert BASE == 85
assert len(set(ALPHABET)) == BASE
assert INVERSE[SENTINEL] == BASE - 1
