from __future__ import annotations

import random

from z85kit.lib import z85
from z85kit.lib.alphabet import ALPHABET
from z85kit.lib.exceptions import (
    DecodeError,
    EncodeError,
    InvalidByte,
    InvalidChunk,
    InvalidEncoderInputSize,
    InvalidInputSize,
    InvalidTail,
)

from .. import TestBase

HELLO_RAW = bytes.fromhex('864FD26FB559F75B')
HELLO_Z85 = B'HelloWorld'


class TestStrictCodec(TestBase):

    def test_reference_vector(self):
        self.assertEqual(z85.encode(HELLO_RAW), HELLO_Z85)
        self.assertEqual(z85.decode(HELLO_Z85), HELLO_RAW)

    def test_empty_input(self):
        self.assertEqual(z85.encode(B''), B'')
        self.assertEqual(z85.decode(B''), B'')
        z85.validate(B'')

    def test_round_trip(self):
        for size in range(0, 200, 4):
            data = self.generate_random_buffer(size)
            encoded = z85.encode(data)
            self.assertEqual(len(encoded), size // 4 * 5)
            self.assertEqual(z85.decode(encoded), data)

    def test_output_types(self):
        self.assertIsInstance(z85.encode(bytearray(HELLO_RAW)), bytes)
        self.assertIsInstance(z85.decode(bytearray(HELLO_Z85)), bytes)
        self.assertIsInstance(z85.decode_unchecked(HELLO_Z85), bytes)

    def test_encoder_rejects_unaligned_input(self):
        for size in (1, 2, 3, 5, 7):
            with self.assertRaises(InvalidEncoderInputSize) as context:
                z85.encode(bytes(size))
            self.assertEqual(context.exception.size, size)
            self.assertIsInstance(context.exception, EncodeError)

    def test_truncation_yields_size_error(self):
        encoded = z85.encode(self.generate_random_buffer(40))
        for cut in range(1, 5):
            truncated = encoded[:-cut]
            with self.assertRaises(InvalidInputSize) as context:
                z85.decode(truncated)
            self.assertEqual(context.exception, InvalidInputSize(len(truncated)))
            self.assertFalse(z85.is_valid(truncated))

    def test_invalid_byte_position(self):
        data = bytearray(HELLO_Z85)
        data[7] = 0
        with self.assertRaises(InvalidByte) as context:
            z85.decode(data)
        self.assertEqual(context.exception, InvalidByte(7, 0))
        self.assertEqual(context.exception.position, 7)
        self.assertEqual(context.exception.byte, 0)

    def test_first_error_wins(self):
        with self.assertRaises(InvalidChunk) as context:
            z85.decode(B'Hello#####~~~~~')
        self.assertEqual(context.exception, InvalidChunk(5))

    def test_sentinel_group_is_an_invalid_chunk(self):
        with self.assertRaises(InvalidChunk) as context:
            z85.decode(B'#####')
        self.assertEqual(context.exception, InvalidChunk(0))
        with self.assertRaises(InvalidChunk):
            z85.decode(B'$0000')

    def test_strict_decoder_rejects_padded_tail(self):
        with self.assertRaises(DecodeError):
            z85.decode(z85.encode_padded(B'\x86\x4F'))

    def test_string_input(self):
        self.assertEqual(z85.decode('HelloWorld'), HELLO_RAW)
        with self.assertRaises(InvalidByte) as context:
            z85.decode('Hello€orld')
        self.assertEqual(context.exception, InvalidByte(5, 0x20AC))
        with self.assertRaises(InvalidByte) as context:
            z85.decode('Hello\xE4orld')
        self.assertEqual(context.exception, InvalidByte(5, 0xE4))

    def test_text_is_checked_in_input_order(self):
        with self.assertRaises(InvalidChunk) as context:
            z85.decode('#####ab€cd')
        self.assertEqual(context.exception, InvalidChunk(0))
        with self.assertRaises(InvalidInputSize) as context:
            z85.decode('abc€')
        self.assertEqual(context.exception, InvalidInputSize(4))
        self.assertFalse(z85.is_valid('abc€'))
        with self.assertRaises(InvalidByte) as context:
            z85.validate_padded('HelloWorld##a€b')
        self.assertEqual(context.exception, InvalidByte(13, 0x20AC))

    def test_memoryview_of_wider_items(self):
        view = memoryview(HELLO_RAW).cast('I')
        self.assertEqual(z85.encode(view), HELLO_Z85)

    def test_memoryview_of_signed_bytes(self):
        view = memoryview(bytearray(B'HelloWor\xFFd')).cast('b')
        with self.assertRaises(InvalidByte) as context:
            z85.decode(view)
        self.assertEqual(context.exception, InvalidByte(8, 0xFF))
        self.assertIn('0xFF', str(context.exception))
        self.assertEqual(z85.decode(memoryview(bytearray(HELLO_Z85)).cast('b')), HELLO_RAW)
        self.assertEqual(z85.encode(memoryview(bytearray(HELLO_RAW)).cast('b')), HELLO_Z85)

    def test_output_is_printable_ascii(self):
        encoded = z85.encode(self.generate_random_buffer(4000))
        self.assertTrue(encoded.isascii())
        self.assertTrue(encoded.decode('ascii').isprintable())
        self.assertLessEqual(set(encoded), set(ALPHABET))


class TestPaddedCodec(TestBase):

    def test_tail_vector(self):
        encoded = z85.encode_padded(bytes.fromhex('864F'))
        self.assertTrue(encoded.startswith(B'##'))
        self.assertEqual(encoded, B'##4:H')
        self.assertEqual(z85.decode_padded(encoded), bytes.fromhex('864F'))

    def test_round_trip_any_length(self):
        for size in range(0, 70):
            data = self.generate_random_buffer(size)
            encoded = z85.encode_padded(data)
            self.assertEqual(len(encoded), (size + 3) // 4 * 5)
            self.assertEqual(z85.decode_padded(encoded), data)
            self.assertTrue(z85.is_valid(encoded, padded=True))

    def test_agrees_with_strict_on_aligned_input(self):
        for size in range(0, 64, 4):
            data = self.generate_random_buffer(size)
            encoded = z85.encode(data)
            self.assertEqual(z85.encode_padded(data), encoded)
            self.assertEqual(z85.decode_padded(encoded), data)

    def test_body_with_tail(self):
        self.assertEqual(
            z85.decode_padded(B'HelloWorld##4:H'),
            HELLO_RAW + bytes.fromhex('864F'))

    def test_malformed_tail(self):
        with self.assertRaises(InvalidTail) as context:
            z85.decode_padded(B'HelloWorld#####')
        self.assertEqual(context.exception, InvalidTail(10))
        with self.assertRaises(InvalidTail) as context:
            z85.validate_padded(B'###31')
        self.assertEqual(context.exception, InvalidTail(0))

    def test_invalid_byte_in_tail_is_rebased(self):
        with self.assertRaises(InvalidByte) as context:
            z85.decode_padded(B'HelloWorld##4:\x00')
        self.assertEqual(context.exception, InvalidByte(14, 0))

    def test_sentinel_group_before_the_end(self):
        with self.assertRaises(InvalidChunk) as context:
            z85.decode_padded(B'##4:HHello')
        self.assertEqual(context.exception, InvalidChunk(0))

    def test_size_error(self):
        with self.assertRaises(InvalidInputSize):
            z85.decode_padded(B'##4:')

    def test_output_is_printable_ascii(self):
        encoded = z85.encode_padded(self.generate_random_buffer(4003))
        self.assertTrue(encoded.decode('ascii').isprintable())


class TestValidation(TestBase):

    def _mutations(self, count: int):
        pool = bytes(ALPHABET) + B' \0~"\\\xFF'
        for _ in range(count):
            data = bytearray(z85.encode_padded(self.generate_random_buffer(random.randrange(0, 20))))
            for _ in range(random.randrange(0, 3)):
                if not data:
                    break
                data[random.randrange(len(data))] = random.choice(pool)
            if random.random() < 0.2:
                del data[random.randrange(len(data) + 1):]
            yield bytes(data)

    def _error_of(self, function, data):
        try:
            function(data)
        except DecodeError as error:
            return error
        return None

    def test_validators_agree_with_decoders(self):
        for data in self._mutations(500):
            self.assertEqual(self._error_of(z85.validate, data), self._error_of(z85.decode, data))
            self.assertEqual(
                self._error_of(z85.validate_padded, data),
                self._error_of(z85.decode_padded, data))
            self.assertEqual(z85.is_valid(data), self._error_of(z85.decode, data) is None)

    def test_unchecked_decoders_agree_on_valid_input(self):
        for data in self._mutations(500):
            if z85.is_valid(data):
                self.assertEqual(z85.decode_unchecked(data), z85.decode(data))
            if z85.is_valid(data, padded=True):
                self.assertEqual(z85.decode_padded_unchecked(data), z85.decode_padded(data))

    def test_unchecked_decoders_never_raise(self):
        for data in self._mutations(300):
            z85.decode_unchecked(data)
            z85.decode_padded_unchecked(data)
        self.assertEqual(len(z85.decode_unchecked(B'#####')), 4)
        self.assertEqual(len(z85.decode_padded_unchecked(B'#####')), 1)
        self.assertEqual(z85.decode_padded_unchecked(B'HelloWorld####'), HELLO_RAW)

    def test_unchecked_decoder_ignores_incomplete_group(self):
        self.assertEqual(z85.decode_unchecked(B'HelloWor'), HELLO_RAW[:4])
        self.assertEqual(z85.decode_unchecked('HelloWorld'), HELLO_RAW)

    def test_strict_aliases(self):
        self.assertIs(z85.encode_strict, z85.encode)
        self.assertIs(z85.decode_strict, z85.decode)
