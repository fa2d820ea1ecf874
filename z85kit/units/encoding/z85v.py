from __future__ import annotations

from z85kit.lib import z85 as codec
from z85kit.lib.environment import environment
from z85kit.lib.types import Param
from z85kit.units import Arg
from z85kit.units.encoding import Z85Unit


class z85v(Z85Unit):
    """
    Validates Z85 encoded data without decoding it. Valid input is forwarded unchanged, and
    whitespace is ignored. For invalid input, the unit reports the offset of the first problem and
    produces no output.
    """
    def __init__(
        self,
        padded: Param[bool, Arg.Switch('-p', help='Validate the padded variant of the format.')] = False,
    ):
        super().__init__(padded=padded or environment.padded.value)

    def process(self, data: bytearray):
        validate = codec.validate_padded if self.args.padded else codec.validate
        self._ignore_whitespace(validate, data)
        self.log_debug(F'input of length {len(data)} is valid')
        return data
