#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from z85kit.lib.exceptions import InvalidByte, InvalidChunk, InvalidInputSize, InvalidTail

from .. import TestUnitBase


class TestZ85Validator(TestUnitBase):

    def test_valid_input_is_forwarded(self):
        unit = self.load()
        self.assertEqual(B'HelloWorld' | unit | bytes, B'HelloWorld')
        self.assertEqual(B'' | unit | bytes, B'')

    def test_errors_are_raised(self):
        unit = self.load()
        with self.assertRaises(InvalidByte) as context:
            B'HelloWo\0ld' | unit | bytes
        self.assertEqual(context.exception, InvalidByte(7, 0))
        with self.assertRaises(InvalidChunk):
            B'#####' | unit | bytes
        with self.assertRaises(InvalidInputSize):
            B'HelloWorl' | unit | bytes

    def test_padded_validation(self):
        unit = self.load('-p')
        self.assertEqual(B'HelloWorld##4:H' | unit | bytes, B'HelloWorld##4:H')
        with self.assertRaises(InvalidTail) as context:
            B'HelloWorld#####' | unit | bytes
        self.assertEqual(context.exception, InvalidTail(10))
        with self.assertRaises(InvalidChunk):
            B'HelloWorld##4:H' | self.load() | bytes

    def test_lenient_validation(self):
        unit = self.load(lenient=1)
        self.assertEqual(B'HelloWo\0ld' | unit | bytes, B'HelloWo\0ld')

    def test_not_reversible(self):
        self.assertFalse(self.unit().is_reversible)
        self.assertTrue(self.ldu('z85').is_reversible)

    def test_whitespace_is_ignored(self):
        unit = self.load()
        self.assertEqual(B'Hello World' | unit | bytes, B'Hello World')
        self.assertEqual(B'Hello\r\nWorld\n' | unit | bytes, B'Hello\r\nWorld\n')
        with self.assertRaises(InvalidByte) as context:
            B'Hello\n  Wor~d' | unit | bytes
        self.assertEqual(context.exception, InvalidByte(11, ord('~')))
        with self.assertRaises(InvalidTail) as context:
            B'Hello World\t#####' | self.load('-p') | bytes
        self.assertEqual(context.exception, InvalidTail(12))
        with self.assertRaises(InvalidInputSize) as context:
            B'Hello Worl' | unit | bytes
        self.assertEqual(context.exception, InvalidInputSize(9))
