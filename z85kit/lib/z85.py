"""
Encoding and decoding of complete buffers in Z85 format. Two variants are implemented:

- The strict variant follows the ZeroMQ RFC 32: Raw data must have a length that is a multiple of
  four, encoded data a length that is a multiple of five.
- The padded variant accepts raw data of any length. When the length is not a multiple of four,
  the remaining one to three bytes are encoded as a tail group, see `z85kit.lib.chunk`. The tail
  group is always the last group, and it is the only group that can start with a `#` character:
  A group that starts with `#` or `$` encodes a number of at least `83 * 85**4`, which exceeds
  the 32-bit range. Strictly encoded data therefore never contains such a group.

The two variants agree on aligned input, but they are different formats: The strict decoder
rejects a padded tail group as an invalid chunk.

The decoders come in two tiers. The default decoders validate every letter and every group and
raise a `z85kit.lib.exceptions.DecodeError` with the absolute offset of the first problem. The
functions with the suffix `_unchecked` are meant for data that has previously passed validation:
They do not raise for malformed content, but the output for such data is meaningless.
"""
from __future__ import annotations

import functools

from z85kit.lib.alphabet import BASE, DIGITS, SENTINEL, U32_MAX
from z85kit.lib.chunk import encode_chunk, encode_tail, inspect_chunk, inspect_tail, validate_chunk, validate_tail
from z85kit.lib.exceptions import InvalidByte, InvalidEncoderInputSize, InvalidInputSize, Z85Error
from z85kit.lib.types import buf

__all__ = [
    'encode',
    'decode',
    'encode_padded',
    'decode_padded',
    'validate',
    'validate_padded',
    'is_valid',
    'decode_unchecked',
    'decode_padded_unchecked',
    'encode_strict',
    'decode_strict',
]


def _octets(data: buf) -> memoryview:
    view = memoryview(data)
    if view.ndim != 1 or view.format != 'B':
        view = view.cast('B')
    return view


def _letters(data: buf | str) -> memoryview:
    if isinstance(data, str):
        if data.isascii():
            data = data.encode('ascii')
        else:
            data = bytes(min(ord(c), 0xFF) for c in data)
    return _octets(data)


def _textual(method):
    """
    Text input is checked like its Latin-1 encoding; characters beyond that range become a byte
    that is not a letter of the alphabet. An `InvalidByte` error for text input reports the code
    point of the offending character.
    """
    @functools.wraps(method)
    def wrapped(data):
        try:
            return method(data)
        except InvalidByte as error:
            if not isinstance(data, str):
                raise
            raise InvalidByte(error.position, ord(data[error.position])) from None
    return wrapped


def _split_tail(view: memoryview) -> tuple[memoryview, memoryview | None]:
    size = len(view)
    if size >= 5 and view[size - 5] == SENTINEL:
        return view[:-5], view[-5:]
    return view, None


def _encode_aligned(view: memoryview) -> bytearray:
    out = bytearray()
    for k in range(0, len(view), 4):
        out.extend(encode_chunk(view[k:k + 4]))
    return out


def _decode_aligned(view: memoryview) -> bytearray:
    out = bytearray()
    for index, k in enumerate(range(0, len(view), 5)):
        check, value = inspect_chunk(view[k:k + 5])
        if not check.ok:
            raise check.error(index * 5)
        out.extend(value.to_bytes(4, 'big'))
    return out


def _validate_aligned(view: memoryview):
    for index, k in enumerate(range(0, len(view), 5)):
        check = validate_chunk(view[k:k + 5])
        if not check.ok:
            raise check.error(index * 5)


def encode(data: buf) -> bytes:
    """
    Encode data whose length is a multiple of four. Raises
    `z85kit.lib.exceptions.InvalidEncoderInputSize` for any other length.
    """
    view = _octets(data)
    size = len(view)
    if size % 4:
        raise InvalidEncoderInputSize(size)
    return bytes(_encode_aligned(view))


@_textual
def decode(data: buf | str) -> bytes:
    """
    Decode strictly encoded Z85 data. The input length has to be a multiple of five.
    """
    view = _letters(data)
    size = len(view)
    if size % 5:
        raise InvalidInputSize(size)
    return bytes(_decode_aligned(view))


def encode_padded(data: buf) -> bytes:
    """
    Encode data of any length. The output length is the input length divided by four, rounded up
    and multiplied by five.
    """
    view = _octets(data)
    size = len(view)
    rest = size % 4
    out = _encode_aligned(view[:size - rest])
    if rest:
        out.extend(encode_tail(view[size - rest:]))
    return bytes(out)


@_textual
def decode_padded(data: buf | str) -> bytes:
    """
    Decode Z85 data that was produced by `z85kit.lib.z85.encode_padded`.
    """
    view = _letters(data)
    size = len(view)
    if size % 5:
        raise InvalidInputSize(size)
    body, tail = _split_tail(view)
    out = _decode_aligned(body)
    if tail is not None:
        check, value, diff = inspect_tail(tail)
        if not check.ok:
            raise check.error(len(body))
        out.extend(value.to_bytes(4 - diff, 'big'))
    return bytes(out)


@_textual
def validate(data: buf | str) -> None:
    """
    Check that the input is valid strict Z85 data without decoding it. Raises the same error that
    `z85kit.lib.z85.decode` would raise for this input.
    """
    view = _letters(data)
    size = len(view)
    if size % 5:
        raise InvalidInputSize(size)
    _validate_aligned(view)


@_textual
def validate_padded(data: buf | str) -> None:
    """
    Check that the input is valid padded Z85 data without decoding it. Raises the same error that
    `z85kit.lib.z85.decode_padded` would raise for this input.
    """
    view = _letters(data)
    size = len(view)
    if size % 5:
        raise InvalidInputSize(size)
    body, tail = _split_tail(view)
    _validate_aligned(body)
    if tail is not None:
        check = validate_tail(tail)
        if not check.ok:
            raise check.error(len(body))


def is_valid(data: buf | str, padded: bool = False) -> bool:
    """
    Return whether the input would decode without error.
    """
    try:
        if padded:
            validate_padded(data)
        else:
            validate(data)
    except Z85Error:
        return False
    else:
        return True


def _digits(data: buf | str) -> bytes:
    if isinstance(data, str):
        data = data.encode('latin1', 'replace')
    view = _octets(data)
    view = view[:len(view) - len(view) % 5]
    return bytes(view).translate(DIGITS)


def _fold(digits: bytes | memoryview) -> int:
    value = 0
    for digit in digits:
        value = value * BASE + digit
    return value & U32_MAX


def _decode_digits(digits: bytes) -> bytearray:
    out = bytearray()
    for k in range(0, len(digits), 5):
        out.extend(_fold(digits[k:k + 5]).to_bytes(4, 'big'))
    return out


def decode_unchecked(data: buf | str) -> bytes:
    """
    Decode strict Z85 data without any validation. The caller must ensure that the input has
    passed `z85kit.lib.z85.validate`; for such input, the result is equal to the output of
    `z85kit.lib.z85.decode`. For other input, the function does not fail but the output is
    meaningless: Invalid letters count as zero digits, values are truncated to 32 bits, and an
    incomplete last group is ignored.
    """
    return bytes(_decode_digits(_digits(data)))


def decode_padded_unchecked(data: buf | str) -> bytes:
    """
    Decode padded Z85 data without any validation. The caller must ensure that the input has
    passed `z85kit.lib.z85.validate_padded`, see also `z85kit.lib.z85.decode_unchecked`.
    """
    if isinstance(data, str):
        data = data.encode('latin1', 'replace')
    view = _octets(data)
    view = view[:len(view) - len(view) % 5]
    body, tail = _split_tail(view)
    out = _decode_digits(bytes(body).translate(DIGITS))
    if tail is not None:
        diff = 0
        for letter in tail[:3]:
            if letter != SENTINEL:
                break
            diff += 1
        digits = bytearray(bytes(tail).translate(DIGITS))
        digits[:diff] = bytes(diff)
        out.extend(_fold(digits).to_bytes(4, 'big')[diff:])
    return bytes(out)


encode_strict = encode
decode_strict = decode
