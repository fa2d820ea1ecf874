from __future__ import annotations

from z85kit.lib import z85 as codec
from z85kit.lib.environment import environment
from z85kit.lib.types import Param
from z85kit.units import Arg
from z85kit.units.encoding import Z85Unit


class z85(Z85Unit):
    """
    Z85 encoding and decoding, a variant of Base85 with an alphabet that is safe to embed in
    source code and XML. The format was specified by ZeroMQ as RFC 32. The strict format only
    accepts raw data whose length is a multiple of four. With the padded option, any length is
    accepted and the remaining bytes are encoded as a final group that starts with one to three
    `#` characters. The padded format is also selected when the environment variable
    `Z85KIT_PADDED` is set.
    """
    def __init__(
        self,
        padded: Param[bool, Arg.Switch('-p', help='Use the padded variant that accepts input of any length.')] = False,
        trust: Param[bool, Arg.Switch('-t', help='Skip validation when decoding; garbage input yields garbage.')] = False,
    ):
        super().__init__(padded=padded or environment.padded.value, trust=trust)

    def reverse(self, data):
        if self.args.padded:
            return codec.encode_padded(data)
        return codec.encode(data)

    def process(self, data: bytearray):
        if self.args.trust:
            decode = codec.decode_padded_unchecked if self.args.padded else codec.decode_unchecked
        else:
            decode = codec.decode_padded if self.args.padded else codec.decode
        return self._ignore_whitespace(decode, data)

    @classmethod
    def handles(cls, data):
        from z85kit.lib.patterns import formats
        if not data:
            return None
        return formats.z85s.value.bin.fullmatch(data) is not None
