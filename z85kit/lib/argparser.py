"""
The argument parser behind the command line interface of every `z85kit.units.Unit`.
"""
from __future__ import annotations

import sys

from argparse import ArgumentError, ArgumentParser, RawDescriptionHelpFormatter
from typing import Any, Sequence

from z85kit.lib.tools import get_terminal_size, terminalfit


class ArgparseError(ValueError):
    """
    Raised by `z85kit.lib.argparser.ArgumentParserWithKeywordHooks` instead of terminating the
    process. The `parser` attribute is the parser that failed.
    """
    def __init__(self, parser: ArgumentParserWithKeywordHooks, message: str):
        self.parser = parser
        super().__init__(message)


class TerminalHelpFormatter(RawDescriptionHelpFormatter):
    """
    Uses the full width of the terminal and fits each paragraph of the unit documentation to it.
    """
    def __init__(self, prog):
        super().__init__(prog, max_help_position=30, width=get_terminal_size() or None)

    def add_text(self, text):
        if isinstance(text, str):
            text = terminalfit(text, width=get_terminal_size())
        return super().add_text(text)


class ArgumentParserWithKeywordHooks(ArgumentParser):
    """
    The parser is initialized with the keyword arguments that were given to a unit in code. They
    become defaults, an argument that has one is no longer required, and a command line that
    contradicts them is an error.
    """
    keywords: dict[str, Any]

    def __init__(self, keywords: dict[str, Any], prog=None, description=None, add_help=True):
        super().__init__(
            prog=prog,
            description=description,
            add_help=add_help,
            formatter_class=TerminalHelpFormatter,
        )
        if sys.version_info >= (3, 14):
            self.color = False
        self.keywords = keywords

    def _add_action(self, action):
        if action.dest in self.keywords:
            action.required = False
        return super()._add_action(action)

    def error_commandline(self, message: str):
        """
        Print the usage and the message, then exit; this is the stock behavior of `error`.
        """
        super().error(message)

    def error(self, message: str):
        raise ArgparseError(self, message)

    def parse_args_with_keywords(self, args: Sequence[str]):
        keywords = self.keywords
        self.set_defaults(**keywords)
        try:
            parsed = self.parse_args(list(args))
        except ArgumentError as error:
            self.error(str(error))
        for name, value in keywords.items():
            given = getattr(parsed, name, None)
            if given != value:
                self.error(F'parameter "{name}" duplicated with conflicting values {given} and {value}')
        return parsed
