"""
Exceptions raised by the Z85 codec and by the unit framework. All codec errors are subclasses of
`z85kit.lib.exceptions.Z85Error`, which is itself a `ValueError`. Errors are terminal: the codec
never returns a partial result.
"""
from __future__ import annotations


class Z85Error(ValueError):
    """
    Base class of all codec errors. Two errors compare equal when they have the same type and the
    same fields, which makes them convenient to use in assertions.
    """
    __fields__: tuple[str, ...] = ()

    def _fields(self):
        return tuple(getattr(self, name) for name in self.__fields__)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash((type(self), self._fields()))

    def __repr__(self):
        fields = ', '.join(repr(f) for f in self._fields())
        return F'{self.__class__.__name__}({fields})'


class EncodeError(Z85Error):
    """
    Raised by an encoder. Only the strict encoder can fail.
    """


class DecodeError(Z85Error):
    """
    Raised by decoders and validators.
    """

    def relocate(self, position: int) -> DecodeError:
        """
        Return an error of the same kind that reports the given offset. Errors without a position
        are returned unchanged.
        """
        fields = dict(zip(self.__fields__, self._fields()))
        if 'position' not in fields:
            return self
        fields['position'] = position
        return self.__class__(**fields)


class InvalidLength(Z85Error):
    """
    The length of the input is not a multiple of the required group width.
    """
    __fields__ = 'size',
    width: int = 0
    action: str = 'input'

    def __init__(self, size: int):
        self.size = size
        super().__init__(F'Z85 {self.action} size ({size}) is not a multiple of {self.width}.')


class InvalidEncoderInputSize(InvalidLength, EncodeError):
    width = 4
    action = 'encoder input'


class InvalidInputSize(InvalidLength, DecodeError):
    width = 5
    action = 'decoder input'


class InvalidByte(DecodeError):
    """
    The byte at the given absolute position is not a letter of the Z85 alphabet.
    """
    __fields__ = 'position', 'byte'

    def __init__(self, position: int, byte: int):
        self.position = position
        self.byte = byte
        super().__init__(F'Z85 data has an invalid byte (0x{byte:02X}) at offset {position}.')


class InvalidChunk(DecodeError):
    """
    The five letters of the group starting at the given position are all valid, but they encode
    a number that does not fit into 32 bits.
    """
    __fields__ = 'position',

    def __init__(self, position: int):
        self.position = position
        super().__init__(F'Z85 data has an invalid 5 byte chunk at offset {position}.')


class InvalidTail(DecodeError):
    """
    The group starting at the given position begins with the padding sentinel, but the number of
    sentinels or the value of the remaining digits cannot have been produced by a padded encoder.
    """
    __fields__ = 'position',

    def __init__(self, position: int):
        self.position = position
        super().__init__(F'Z85 data has a malformed padded tail at offset {position}.')


class UnitException(Exception):
    """
    Base class for exceptions raised by the unit framework rather than the codec.
    """


class UnitCriticalException(UnitException):
    """
    A problem with the unit itself, which is never suppressed by leniency.
    """
