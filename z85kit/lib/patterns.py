"""
Library of regular expression patterns for Z85 encoded data.
"""
from __future__ import annotations

import enum
import functools
import re

_z85_letter = R'[-0-9a-zA-Z.:+=^!/*?&<>()\[\]{}@%$#]'
_z85_group = F'{_z85_letter}{{5}}'
_z85_tail = F'(?:#{_z85_letter}{{4}}|##{_z85_letter}{{3}}|###{_z85_letter}{{2}})'


class pattern:
    """
    A wrapper for regular expression pattern objects created from re.compile,
    which provides both a binary and a string version of the expression.
    """
    str_pattern: str
    bin_pattern: bytes

    def __init__(self, pattern: str, flags: int = 0):
        self.str_pattern = pattern
        self.bin_pattern = pattern.encode('ascii')
        self.flags = flags

    def __bytes__(self):
        return self.bin_pattern

    @functools.cached_property
    def bin(self):
        return re.compile(B'(?:%s)' % self.bin_pattern, flags=self.flags)

    @functools.cached_property
    def str(self):
        return re.compile(self.str_pattern, flags=self.flags)

    def __hash__(self):
        return hash((self.str_pattern, self.flags))

    def __eq__(self, other):
        if isinstance(other, str):
            return self.str_pattern == other and self.flags == 0
        if isinstance(other, pattern):
            return self.str_pattern == other.str_pattern and self.flags == other.flags
        return False

    def __str__(self):
        return self.str_pattern

    def __getattr__(self, verb):
        if not hasattr(re.Pattern, verb):
            raise AttributeError(verb)
        bin_attr = getattr(self.bin, verb)
        if not callable(bin_attr):
            return bin_attr
        str_attr = getattr(self.str, verb)

        def wrapper(*args, **kwargs):
            for argument in args:
                if isinstance(argument, str):
                    return str_attr(*args, **kwargs)
            else:
                return bin_attr(*args, **kwargs)

        functools.update_wrapper(wrapper, bin_attr)
        return wrapper


class alphabet(pattern):
    """
    A pattern object representing strings of tokens from a given alphabet, with an optional suffix.
    """
    def __init__(self, repeat: str, suffix: str = '', lower: int = 1, flags: int = 0):
        self.repeat = repeat
        self.suffix = suffix
        count = '+' if lower == 1 else F'{{{lower},}}'
        if lower <= 0:
            count = '*'
        super().__init__(F'(?:{repeat}){count}{suffix}', flags)


class formats(enum.Enum):
    """
    An enumeration of patterns for Z85 data.
    """
    z85 = alphabet(_z85_group)
    "Strict Z85 encoded strings"
    z85s = alphabet(F'(?:\\s*{_z85_letter}){{5}}', suffix=R'\s*')
    "Strict Z85 encoded strings, possibly interspersed with whitespace"
    z85p = alphabet(_z85_group, lower=0, suffix=F'{_z85_tail}?')
    "Padded Z85 encoded strings"

    def __str__(self):
        return str(self.value)

    def __bytes__(self):
        return bytes(self.value)

    def __repr__(self):
        return F'<pattern {self.name}: {self.value}>'
