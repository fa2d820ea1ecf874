"""
Conversion of single chunks: Exactly four raw bytes are converted to exactly five Z85 letters and
back. A chunk is the big-endian 32-bit number formed by the four bytes, written as five base 85
digits with the most significant digit first.

This module also implements the tail convention of the padded Z85 variant. A tail is a chunk of
one to three bytes; it is encoded as the chunk of the same numeric value, with its leading zero
digits replaced by `#` characters. The number of `#` characters is the number of bytes that were
missing from the tail, which is how the decoder recovers the original length.

All positions reported by this module are offsets within the chunk. Callers that process longer
buffers are responsible for rebasing them.
"""
from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from z85kit.lib.alphabet import ALPHABET, BASE, INVALID, INVERSE, SENTINEL, U32_MAX, ZERO
from z85kit.lib.exceptions import InvalidByte, InvalidChunk, InvalidTail
from z85kit.lib.types import buf

__all__ = [
    'Verdict',
    'ChunkCheck',
    'encode_value',
    'encode_chunk',
    'decode_chunk',
    'validate_chunk',
    'inspect_chunk',
    'encode_tail',
    'decode_tail',
    'validate_tail',
    'inspect_tail',
]


class Verdict(IntEnum):
    """
    The classification of a five letter group.
    """
    FINE = 0
    BAD_BYTE = 1
    TOO_LARGE = 2
    BAD_TAIL = 3


class ChunkCheck(NamedTuple):
    """
    The result of validating a five letter group. For `Verdict.BAD_BYTE`, the `offset` and `byte`
    fields contain the position within the group and the value of the first invalid byte.
    """
    verdict: Verdict
    offset: int = 0
    byte: int = 0

    @property
    def ok(self) -> bool:
        return self.verdict is Verdict.FINE

    def error(self, position: int):
        """
        Convert this check result to the corresponding exception, assuming that the group starts
        at the given absolute position.
        """
        verdict = self.verdict
        if verdict is Verdict.BAD_BYTE:
            return InvalidByte(position + self.offset, self.byte)
        if verdict is Verdict.TOO_LARGE:
            return InvalidChunk(position)
        if verdict is Verdict.BAD_TAIL:
            return InvalidTail(position)
        raise ValueError('cannot convert a successful check to an error')


_FINE = ChunkCheck(Verdict.FINE)
_TOO_LARGE = ChunkCheck(Verdict.TOO_LARGE)
_BAD_TAIL = ChunkCheck(Verdict.BAD_TAIL)


def encode_value(value: int) -> bytearray:
    """
    Encode a number in the range of an unsigned 32-bit integer as five Z85 letters.
    """
    out = bytearray(5)
    for k in range(4, -1, -1):
        value, digit = divmod(value, BASE)
        out[k] = ALPHABET[digit]
    return out


def encode_chunk(chunk: buf) -> bytes:
    """
    Encode exactly four bytes as five Z85 letters. This cannot fail for valid input since every
    32-bit number has a unique representation with five base 85 digits.
    """
    if len(chunk) != 4:
        raise ValueError(F'a chunk must have exactly 4 bytes, got {len(chunk)}')
    return bytes(encode_value(int.from_bytes(chunk, 'big')))


def inspect_chunk(chunk: buf) -> tuple[ChunkCheck, int]:
    """
    Walk the five letters of a chunk from left to right and fold them into a number. Returns the
    check result and the accumulated value; the value is meaningless unless the check succeeded.
    Each letter is checked against the inverse table before it is used. After all digits have
    been accumulated, the value is checked to fit into 32 bits: Five valid letters can encode
    numbers up to `85**5 - 1`, which is larger than `2**32 - 1`.
    """
    if len(chunk) != 5:
        raise ValueError(F'a Z85 chunk must have exactly 5 letters, got {len(chunk)}')
    value = 0
    for k, letter in enumerate(chunk):
        digit = INVERSE[letter]
        if digit == INVALID:
            return ChunkCheck(Verdict.BAD_BYTE, k, letter), value
        value = value * BASE + digit
    if value > U32_MAX:
        return _TOO_LARGE, value
    return _FINE, value


def validate_chunk(chunk: buf) -> ChunkCheck:
    """
    Classify five Z85 letters without decoding them.
    """
    check, _ = inspect_chunk(chunk)
    return check


def decode_chunk(chunk: buf) -> bytes:
    """
    Decode five Z85 letters to four bytes. Raises `z85kit.lib.exceptions.InvalidByte` or
    `z85kit.lib.exceptions.InvalidChunk` with positions relative to the chunk.
    """
    check, value = inspect_chunk(chunk)
    if not check.ok:
        raise check.error(0)
    return value.to_bytes(4, 'big')


def encode_tail(tail: buf) -> bytes:
    """
    Encode between one and three trailing bytes as a padded tail group.
    """
    size = len(tail)
    if not 0 < size < 4:
        raise ValueError(F'a tail must have between 1 and 3 bytes, got {size}')
    out = encode_value(int.from_bytes(tail, 'big'))
    diff = 4 - size
    out[:diff] = bytes((SENTINEL,)) * diff
    return bytes(out)


def inspect_tail(group: buf) -> tuple[ChunkCheck, int, int]:
    """
    Check a padded tail group. Returns the check result, the decoded value, and the number of
    leading sentinels. The group is only a valid tail when it starts with one to three sentinels
    and the value of the remaining digits fits into the number of bytes that they represent.
    """
    if len(group) != 5:
        raise ValueError(F'a Z85 tail must have exactly 5 letters, got {len(group)}')
    diff = 0
    for letter in group:
        if letter != SENTINEL:
            break
        diff += 1
    if not 0 < diff < 4:
        return _BAD_TAIL, 0, diff
    rewritten = bytearray(group)
    rewritten[:diff] = bytes((ZERO,)) * diff
    check, value = inspect_chunk(rewritten)
    if check.verdict is Verdict.TOO_LARGE:
        return _BAD_TAIL, value, diff
    if check.ok and value >= 0x100 ** (4 - diff):
        return _BAD_TAIL, value, diff
    return check, value, diff


def validate_tail(group: buf) -> ChunkCheck:
    """
    Classify a padded tail group without decoding it.
    """
    check, _, _ = inspect_tail(group)
    return check


def decode_tail(group: buf) -> bytes:
    """
    Decode a padded tail group to the one to three bytes it represents. Raises
    `z85kit.lib.exceptions.InvalidByte` or `z85kit.lib.exceptions.InvalidTail` with positions
    relative to the group.
    """
    check, value, diff = inspect_tail(group)
    if not check.ok:
        raise check.error(0)
    return value.to_bytes(4 - diff, 'big')
