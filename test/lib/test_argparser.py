import contextlib
import io

from z85kit.lib.argparser import ArgparseError, ArgumentParserWithKeywordHooks

from .. import TestBase


class TestArgumentParser(TestBase):

    def _parser(self, **keywords):
        argp = ArgumentParserWithKeywordHooks(keywords, prog='test', description='A parser for tests.')
        argp.add_argument('size', type=int)
        argp.add_argument('-p', '--padded', action='store_true', dest='padded')
        return argp

    def test_errors_raise(self):
        argp = self._parser()
        with self.assertRaises(ArgparseError) as context:
            argp.parse_args_with_keywords([])
        self.assertIs(context.exception.parser, argp)
        with self.assertRaises(ArgparseError):
            argp.parse_args_with_keywords(['5', '--bogus'])

    def test_keywords_are_defaults(self):
        args = self._parser(size=5).parse_args_with_keywords([])
        self.assertEqual(args.size, 5)
        self.assertFalse(args.padded)
        self.assertTrue(self._parser(size=5, padded=True).parse_args_with_keywords(['-p']).padded)

    def test_conflicting_keywords(self):
        with self.assertRaises(ArgparseError):
            self._parser(padded=False).parse_args_with_keywords(['3', '-p'])

    def test_command_line_error_exits(self):
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as context:
                self._parser().error_commandline('bad input')
        self.assertEqual(context.exception.code, 2)
        self.assertIn('bad input', stderr.getvalue())

    def test_help_contains_description(self):
        self.assertIn('A parser for tests.', self._parser().format_help())
