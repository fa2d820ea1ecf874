"""
This module is used as a unified resource for various types that are primarily used for type hints.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import Annotated, Union

    Param = Annotated
    buf = Union[bytes, bytearray, memoryview]

else:
    class __P:
        def __getitem__(self, annotation):
            return annotation[1]

    Param = __P()
    buf = Any


__all__ = [
    'buf',
    'isbuffer',
    'isstream',
    'Param',
]


def isbuffer(obj) -> bool:
    """
    Test whether `obj` is an object that supports the buffer API, like a bytes or bytearray object.
    """
    try:
        with memoryview(obj):
            return True
    except TypeError:
        return False


def isstream(obj) -> bool:
    """
    Test whether `obj` is a binary stream that can be read from.
    """
    return callable(getattr(obj, 'read', None))
