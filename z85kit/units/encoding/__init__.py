"""
Units that encode and decode binary data in the Z85 format.
"""
from __future__ import annotations

import re

from typing import Callable, TypeVar

from z85kit.lib.exceptions import DecodeError
from z85kit.units import Unit

_T = TypeVar('_T')


class Z85Unit(Unit, abstract=True):
    """
    Base class for units that read Z85 encoded input. Whitespace in the input is ignored, and
    error offsets refer to the input as it was received.
    """

    def _ignore_whitespace(self, method: Callable[[bytearray], _T], data: bytearray) -> _T:
        if re.search(BR'\s', data) is None:
            return method(data)
        self.log_info('removing whitespace from input')
        offsets = [match.start() for match in re.finditer(BR'\S', data)]
        try:
            return method(re.sub(BR'\s+', B'', data))
        except DecodeError as error:
            position = getattr(error, 'position', None)
            if position is None:
                raise
            raise error.relocate(offsets[position]) from None
