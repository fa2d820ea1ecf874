"""
This package contains all z85kit units. A unit is a class inheriting from `z85kit.units.Unit` that
implements `z85kit.units.Unit.process`. If the operation implemented by the unit is reversible,
the class implements a method called `reverse` with the same signature. For example, the
following would be a minimalistic unit for hex encoding:

    from z85kit.units import Unit

    class hex(Unit):
        def process(self, data): return bytes.fromhex(data.decode('ascii'))
        def reverse(self, data): return data.hex().encode(self.codec)

### Command Line Parameters

Parameters of the `__init__` method of a unit become command line options. The annotation
`Param[type, Arg(...)]` can be used to control the argument parser, for example:

    from z85kit.lib.types import Param
    from z85kit.units import Arg, Unit

    class strip(Unit):
        def __init__(self, tabs: Param[bool, Arg.Switch('-t', help='Strip tabs, too.')] = False):
            super().__init__(tabs=tabs)

        def process(self, data):
            return data.strip(B' \\t' if self.args.tabs else B' ')

The values of all parameters are available in the `args` member of the unit.

### Units in Code

Units can be used in Python code with a syntax that resembles the command line:

- The binary or operator `|` combines units into pipelines.
- Combining a pipeline from the left with a byte string, a string, or a binary stream feeds this
  data into the pipeline.
- Unary negation of a reversible unit selects the reverse operation, like `-R` on the command line.
- Connecting a pipeline from the right to `bytes`, `bytearray`, `str` or a literal ellipsis (`...`)
  returns the output. Connecting it to a binary stream writes the output to that stream, to a
  callable applies the callable to the output, and to `None` discards the output.

Example:

    >>> from z85kit import z85
    >>> bytes.fromhex('864FD26FB559F75B') | -z85 | str
    'HelloWorld'

When used in code, a unit is detached from its logger: Errors are raised as exceptions instead
of being logged.
"""
from __future__ import annotations

import abc
import copy
import inspect
import io
import os
import sys

from abc import ABCMeta
from argparse import OPTIONAL, Namespace
from collections import OrderedDict
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Iterable, Iterator, Optional, Type, cast

from z85kit.lib.argparser import ArgparseError, ArgumentParserWithKeywordHooks
from z85kit.lib.environment import Logger, LogLevel, environment, logger
from z85kit.lib.exceptions import UnitCriticalException, UnitException, Z85Error
from z85kit.lib.tools import (
    autoinvoke,
    documentation,
    exception_to_string,
    normalize_to_display,
    normalize_to_identifier,
    skipfirst,
)
from z85kit.lib.types import buf, isbuffer, isstream

if TYPE_CHECKING:
    from typing import Self

__all__ = [
    'Arg',
    'Entry',
    'Executable',
    'LogLevel',
    'Unit',
    'UnitCriticalException',
    'UnitException',
]


class Entry:
    """
    An empty class marker. Any entry point unit (i.e. any unit that can be executed
    via the command line) is an instance of this class.
    """


class Argument:
    """
    This class implements an abstract argument to a Python function, including positional
    and keyword arguments. Passing an `Argument` to a Python function can be done via the
    matrix multiplication operator: The syntax `function @ Argument(a, b, kwd=c)` is
    equivalent to the call `function(a, b, kwd=c)`.
    """
    __slots__ = 'args', 'kwargs'

    args: list[Any]
    kwargs: dict[str, Any]

    def __init__(self, *args, **kwargs):
        self.args = list(args)
        self.kwargs = kwargs

    def __rmatmul__(self, method):
        return method(*self.args, **self.kwargs)

    def __repr__(self):
        arglist = [repr(a) for a in self.args]
        arglist.extend(F'{key!s}={value!r}' for key, value in self.kwargs.items())
        return ', '.join(arglist)


class Arg(Argument):
    """
    This class is specifically an argument for the `add_argument` method of an `ArgumentParser` from
    the `argparse` module. It is used as the second component of a `z85kit.lib.types.Param`
    annotation on the constructor of a unit to control the command line interface of that unit.
    """

    class omit:
        """
        A sentinel class to mark arguments as omitted for the argument parser.
        """

    __slots__ = 'group',

    def __init__(
        self, *args: str,
        action   : type[omit] | str                = omit,  # noqa
        choices  : type[omit] | Iterable[Any]      = omit,  # noqa
        default  : type[omit] | Any                = omit,  # noqa
        dest     : type[omit] | str                = omit,  # noqa
        help     : type[omit] | str                = omit,  # noqa
        metavar  : type[omit] | str                = omit,  # noqa
        nargs    : type[omit] | int | str          = omit,  # noqa
        type     : type[omit] | type | Callable    = omit,  # noqa
        group    : str | None                      = None,  # noqa
    ) -> None:
        kwargs = dict(action=action, choices=choices, default=default, dest=dest,
            help=help, metavar=metavar, nargs=nargs, type=type)
        kwargs = {key: value for key, value in kwargs.items() if value is not self.omit}
        self.group = group
        super().__init__(*args, **kwargs)

    def update_help(self):
        """
        Fill in the `{default}` formatting symbol of the help text, which is only known after
        the default of the `__init__` parameter has been merged into the argument.
        """
        try:
            help_string: str = self.kwargs['help']
            default = self.kwargs.get('default')
            self.kwargs.update(help=help_string.replace('{default}', str(default)))
        except KeyError:
            pass

    def __rmatmul__(self, method):
        self.update_help()
        return super().__rmatmul__(method)

    def __copy__(self):
        return self.__class__(*self.args, group=self.group, **self.kwargs)

    @classmethod
    def Switch(
        cls,
        *args   : str, off=False,
        help    : type[omit] | str = omit,
        dest    : type[omit] | str = omit,
        group   : str | None = None,
    ):
        """
        A convenience method to add argparse arguments that change a boolean value from True to False or
        vice versa. By default, a switch will have a False default and change it to True when specified.
        """
        return cls(*args, group=group, help=help, dest=dest, action='store_false' if off else 'store_true')

    @property
    def positional(self) -> bool:
        """
        Indicates whether the argument is positional. This is crudely determined by whether it has
        a specifier that does not start with a dash.
        """
        return any(a[0] != '-' for a in self.args)

    @property
    def destination(self) -> str:
        """
        The name of the variable where the contents of this parsed argument will be stored.
        """
        for a in self.args:
            if a[0] != '-':
                return a
        try:
            return self.kwargs['dest']
        except KeyError:
            for a in self.args:
                if a.startswith('--'):
                    dest = normalize_to_identifier(a)
                    if dest.isidentifier():
                        return dest
            raise AttributeError(F'The argument with these values has no destination: {self!r}')

    @classmethod
    def Infer(cls, pt: inspect.Parameter) -> Arg:
        """
        Infer the argparse argument for a parameter of the `__init__` method of a unit, based on
        its annotation, name, and default value.
        """
        annotation = pt.annotation
        argument = annotation.__copy__() if isinstance(annotation, Arg) else cls()
        kwargs = argument.kwargs
        default = pt.default

        if default is not pt.empty:
            if isinstance(default, bool) and 'action' not in kwargs:
                kwargs['action'] = 'store_false' if default else 'store_true'
            kwargs.setdefault('default', default)

        if not argument.args:
            if default is pt.empty:
                argument.args.append(pt.name)
            else:
                argument.args.append(F'--{normalize_to_display(pt.name, False)}')

        if argument.positional:
            kwargs.pop('dest', None)
            if 'default' in kwargs and kwargs.get('action', 'store') == 'store':
                kwargs.setdefault('nargs', OPTIONAL)
        else:
            kwargs.setdefault('dest', pt.name)
            if not any(a.startswith('--') for a in argument.args):
                argument.args.append(F'--{normalize_to_display(pt.name, False)}')

        return argument


class ArgumentSpecification(OrderedDict):
    """
    A container object that stores `z85kit.units.Arg` specifications.
    """


class MissingFunction:
    """
    A dummy function class that represents a missing function. Used to represent the `reverse`
    method of units that do not implement it.
    """
    def __init__(self, *_):
        pass

    def __call__(*_, **__):
        raise NotImplementedError


class Executable(ABCMeta):
    """
    This is the metaclass for z85kit units. A class which is of this type is
    required to implement a method `run()`. If the class is created in the
    currently executing module, then an instance of the class is automatically
    created after it is defined and its `run()` method is invoked.
    """

    Entry = None
    """
    This variable stores the executable entry point. If more than one entry point
    are present, only the first one is executed.
    """

    _argument_specification: ArgumentSpecification

    def __new__(mcs, name: str, bases: tuple[type, ...], nmspc: dict[str, Any], abstract=False):
        if not abstract and Entry not in bases:
            for b in bases:
                try:
                    if b.is_reversible:
                        break
                except AttributeError:
                    pass
            else:
                nmspc.setdefault('reverse', MissingFunction())
            bases = bases + (Entry,)
        nmspc.setdefault('__doc__', '')
        return super().__new__(mcs, name, bases, nmspc)

    def __init__(cls, name: str, bases: tuple[type, ...], nmspc: dict[str, Any], abstract=False):
        super().__init__(name, bases, nmspc)
        cls._argument_specification = args = ArgumentSpecification()
        parameters = inspect.signature(cls.__init__, eval_str=True).parameters

        for pt in skipfirst(parameters.values()):
            if pt.kind in (pt.VAR_KEYWORD, pt.VAR_POSITIONAL):
                continue
            args[pt.name] = Arg.Infer(pt)

        if not abstract and sys.modules[cls.__module__].__name__ == '__main__':
            if not Executable.Entry:
                Executable.Entry = cls.name
                cast(Type[Unit], cls).run()

    def __or__(cls, other):
        return cls().__or__(other)

    def __pos__(cls):
        return cls()

    def __neg__(cls):
        unit: Unit = cls()
        unit.args.reverse = True
        return unit

    def __ror__(cls, other) -> Unit:
        return cls().__ror__(other)

    @property
    def is_reversible(cls) -> bool:
        """
        This property is `True` if and only if the unit has a member function named `reverse`. By convention,
        this member function implements the inverse of `z85kit.units.Unit.process`.
        """
        r = cast(Type[Unit], cls).reverse
        if isinstance(r, MissingFunction):
            return False
        return not getattr(r, '__isabstractmethod__', False)

    @property
    def codec(cls) -> str:
        """
        The default codec for encoding textual information between units. The value of this property is
        hardcoded to `UTF8`.
        """
        return 'UTF8'

    @property
    def name(cls) -> str:
        """
        The name of the unit as it would be used on the command line.
        """
        return normalize_to_display(cls.__name__)

    @property
    def logger(cls) -> Logger:
        """
        The debug logger instance for the unit.
        """
        try:
            return cls._logger
        except AttributeError:
            pass
        cls._logger = _logger = logger(cls.name)
        return _logger


class Unit(metaclass=Executable, abstract=True):
    """
    The base class for all z85kit units. It implements a small set of globally
    available options and the handling for multiple inputs and outputs.
    """

    @property
    def is_reversible(self) -> bool:
        """
        Proxy to `z85kit.units.Executable.is_reversible`.
        """
        return self.__class__.is_reversible

    @property
    def codec(self) -> str:
        """
        Proxy to `z85kit.units.Executable.codec`.
        """
        return self.__class__.codec

    @property
    def logger(self) -> Logger:
        """
        Proxy to `z85kit.units.Executable.logger`.
        """
        return self.__class__.logger

    @property
    def name(self) -> str:
        """
        Proxy to `z85kit.units.Executable.name`.
        """
        return self.__class__.name

    @property
    def is_quiet(self) -> bool:
        """
        Returns whether the global `--quiet` flag is set, indicating that the unit should not
        generate any log output.
        """
        return getattr(self.args, 'quiet', False)

    @property
    def log_level(self) -> LogLevel:
        """
        Returns the current log level as an element of `z85kit.lib.environment.LogLevel`.
        """
        if self.is_quiet:
            return LogLevel.NONE
        return LogLevel(self.logger.getEffectiveLevel())

    @log_level.setter
    def log_level(self, value: int | LogLevel) -> None:
        if not isinstance(value, LogLevel):
            value = LogLevel.FromVerbosity(value)
        self.logger.setLevel(value)

    def log_detach(self) -> Self:
        """
        When a unit is created using the `z85kit.units.Unit.assemble` method, it is attached to a
        logger by default. This method detaches the unit from its logger, which also means that
        any exceptions that occur during runtime will be raised to the caller.
        """
        self.log_level = LogLevel.DETACHED
        return self

    @property
    def leniency(self) -> int:
        """
        Returns the value of the global `--lenient` flag.
        """
        return getattr(self.args, 'lenient', 0)

    def process(self, data: bytearray) -> buf | Iterable[buf] | None:
        return data

    @abc.abstractmethod
    def reverse(self, data: bytearray) -> buf | Iterable[buf] | None:
        """
        If this method is implemented, it reverses the operation of `z85kit.units.Unit.process`.
        """

    @classmethod
    def handles(cls, data: buf) -> bool | None:
        """
        Return whether the unit can handle the given input; `None` means that it cannot tell.
        """
        return None

    def act(self, data: bytearray) -> Iterator[buf]:
        """
        Apply the operation of the unit to one chunk of input and iterate the output chunks.
        """
        operation = self.reverse if self.args.reverse else self.process
        result = operation(data)
        if result is None:
            return
        if isbuffer(result):
            yield result
            return
        yield from result

    def _exception_handler(self, exception: Exception, data: buf | None):
        self.failed = True
        if self.leniency >= 1 and data is not None:
            self.log_info(F'forwarding input after error: {exception_to_string(exception)}')
            return data
        if self.log_level >= LogLevel.DETACHED:
            raise exception
        if isinstance(exception, UnitCriticalException):
            self.log_warn(F'critical error, terminating: {exception}')
            raise exception
        if isinstance(exception, (Z85Error, UnitException)):
            self.log_fail(str(exception))
        else:
            explanation = exception_to_string(exception, '')
            message = F'exception of type {exception.__class__.__name__}'
            if explanation:
                message = F'{message}; {explanation!s}'
            self.log_fail(message)
        if self.log_debug():
            import traceback
            traceback.print_exc(file=sys.stderr)
        return None

    def _inputs(self) -> Iterator[bytearray]:
        source = self._source
        if source is None:
            return
        if isinstance(source, Unit):
            for chunk in source:
                yield bytearray(chunk)
        else:
            yield bytearray(source.read())

    def __iter__(self) -> Iterator[buf]:
        for data in self._inputs():
            try:
                yield from self.act(data)
            except Exception as E:
                result = self._exception_handler(E, data)
                if result is not None:
                    yield result

    @property
    def source(self):
        """
        Represents a unit or binary IO stream which has been attached to this unit as its
        source of input data.
        """
        return self._source

    @source.setter
    def source(self, stream):
        if isinstance(stream, Executable):
            stream = stream()
        if not isinstance(stream, Unit) and not isstream(stream):
            raise TypeError(F'Cannot connect object of type {type(stream).__name__} to unit.')
        if isinstance(stream, Unit) and any(unit is self for unit in stream.pipeline()):
            raise ValueError(F'Cannot connect {self.name} to a pipeline that already contains it.')
        self._source = cast(BinaryIO, stream)

    def pipeline(self) -> Iterator[Unit]:
        """
        Iterates the units of the pipeline that ends in this unit, starting with this unit and
        ending with its `z85kit.units.Unit.nozzle`.
        """
        cursor = self
        while isinstance(cursor, Unit):
            yield cursor
            cursor = cursor.source

    def reset(self):
        """
        Clears the state of a previous run in this unit and all units that feed into it.
        """
        if isinstance(source := self._source, Unit):
            source.reset()
        self.failed = False

    @property
    def nozzle(self) -> Unit:
        """
        The nozzle is defined recursively as the nozzle of `z85kit.units.Unit.source`
        and `self` if no such thing exists. In other words, it is the leftmost unit in
        a pipeline, where data should be inserted for processing.
        """
        if not isinstance(source := self.source, Unit):
            return self
        return source.nozzle

    def __pos__(self):
        return self

    def __neg__(self) -> Unit:
        pipeline = []
        for unit in self.pipeline():
            reversed = copy.copy(unit)
            reversed.args.reverse = not unit.args.reverse
            pipeline.append(reversed)
        reversed = None
        for unit in pipeline:
            reversed = reversed | unit
        assert isinstance(reversed, Unit)
        return reversed

    def __ror__(self, stream: Unit | BinaryIO | str | buf | None):
        if stream is None:
            return self
        if isinstance(stream, Executable):
            stream = stream()
        if not isinstance(stream, Unit) and not isstream(stream):
            if isinstance(stream, str):
                stream = stream.encode(self.codec)
            stream = io.BytesIO(stream)
        self.reset()
        if any(unit.source is stream for unit in self.pipeline()):
            return self
        self.nozzle.source = stream
        return self

    def _collect(self) -> bytearray:
        return bytearray().join(self)

    def __str__(self):
        return self | str

    def __bytes__(self):
        return self | bytes

    def __or__(self, stream):
        if isinstance(stream, Executable):
            stream = stream()
        if isinstance(stream, Unit):
            return stream.__ror__(self)
        if stream is None:
            for _ in self:
                pass
            return None
        if stream is ...:
            return self._collect()
        if isinstance(stream, type):
            if issubclass(stream, str):
                return self._collect().decode(self.codec)
            if issubclass(stream, (bytes, bytearray)):
                return stream(self._collect())
        if isinstance(stream, (list, set)) and len(stream) == 1:
            convert, = stream
            if convert is ...:
                return type(stream)(bytes(chunk) for chunk in self)
            return type(stream)(convert(chunk) for chunk in self)
        if isinstance(stream, bytearray):
            stream.extend(self._collect())
            return stream
        if callable(getattr(stream, 'write', None)):
            for chunk in self:
                stream.write(chunk)
            return stream
        if callable(stream):
            return stream(self._collect())
        raise TypeError(F'Cannot connect unit to object of type {type(stream).__name__}.')

    def __call__(self, data: buf | str = B'') -> bytearray:
        if isinstance(data, str):
            data = data.encode(self.codec)
        return bytearray().join(self.act(bytearray(data)))

    @classmethod
    def log_fail(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `z85kit.lib.environment.LogLevel.ERROR`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.ERROR)
        if rv and messages:
            cls.logger.error(cls._output(*messages))
        return rv

    @classmethod
    def log_warn(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `z85kit.lib.environment.LogLevel.WARN`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.WARNING)
        if rv and messages:
            cls.logger.warning(cls._output(*messages))
        return rv

    @classmethod
    def log_info(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `z85kit.lib.environment.LogLevel.INFO`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.INFO)
        if rv and messages:
            cls.logger.info(cls._output(*messages))
        return rv

    @classmethod
    def log_debug(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `z85kit.lib.environment.LogLevel.DEBUG`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.DEBUG)
        if rv and messages:
            cls.logger.debug(cls._output(*messages))
        return rv

    @classmethod
    def _output(cls, *messages) -> str:
        def transform(message):
            if callable(message):
                message = message()
            if isinstance(message, Exception):
                message = exception_to_string(message)
            if isinstance(message, str):
                return message
            if isbuffer(message):
                import codecs
                pmsg: str = codecs.decode(bytes(message), cls.codec, 'surrogateescape')
                if not pmsg.isprintable():
                    pmsg = bytes(message).hex().upper()
                return pmsg
            return repr(message)
        return ' '.join(transform(msg) for msg in messages)

    @classmethod
    def _interface(cls, argp: ArgumentParserWithKeywordHooks) -> ArgumentParserWithKeywordHooks:
        """
        Receives a reference to an argument parser. This parser will be used to parse
        the command line for this unit into the member variable called `args`.
        """
        base = argp.add_argument_group('generic options')

        base.set_defaults(reverse=False)
        base.add_argument('-h', '--help', action='help', help='Show this help message and exit.')
        base.add_argument('-L', '--lenient', action='count', default=0,
            help='Forward the input unchanged when the unit fails instead of dropping it.')
        base.add_argument('-Q', '--quiet', action='store_true', help='Disables all log output.')
        base.add_argument('-0', '--devnull', action='store_true', help='Do not produce any output.')
        base.add_argument('-v', '--verbose', action='count', default=0,
            help='Specify up to two times to increase log level.')

        if cls.is_reversible:
            base.add_argument('-R', '--reverse', action='store_true',
                help='Use the reverse operation.')

        groups: dict[Optional[str], Any] = {None: argp}

        for argument in cls._argument_specification.values():
            gp = argument.group
            if gp not in groups:
                groups[gp] = argp.add_mutually_exclusive_group()
            try:
                _ = groups[gp].add_argument @ argument
            except Exception as E:
                raise UnitCriticalException(F'Failed to queue argument: {argument!s}; {E!s}')

        return argp

    @classmethod
    def argparser(cls, **keywords):
        argp = ArgumentParserWithKeywordHooks(
            keywords, prog=cls.name, description=documentation(cls), add_help=False)
        return cls._interface(argp)

    @classmethod
    def assemble(cls, *_args: str, **keywords):
        """
        Creates a unit from the given arguments and keywords. The given keywords are used to overwrite any
        previously specified defaults for the argument parser of the unit, then this modified parser is
        used to parse the given list of arguments as though they were given on the command line. The parser
        results are used to construct an instance of the unit, this object is consequently returned.
        """
        argp = cls.argparser(**keywords)
        args = argp.parse_args_with_keywords(_args)

        try:
            unit = autoinvoke(cls, args.__dict__)
        except ValueError as E:
            argp.error(str(E))
        else:
            unit.args.quiet = args.quiet
            unit.args.lenient = args.lenient
            unit.args.reverse = args.reverse
            unit.args.devnull = args.devnull
            unit.args.verbose = args.verbose

            if args.quiet:
                unit.log_level = LogLevel.NONE
            else:
                unit.log_level = args.verbose

            return unit

    def __copy__(self):
        cls = self.__class__
        clone: Unit = cls.__new__(cls)
        clone.__dict__.update(self.__dict__)
        clone._source = None
        clone.args = copy.copy(self.args)
        return clone

    def __init__(self, **keywords):
        self._source = None
        self.console = False
        self.failed = False

        for key, value in dict(
            reverse=False,
            devnull=False,
            verbose=0,
            lenient=0,
            quiet=False,
        ).items():
            keywords.setdefault(key, value)

        self.args = Namespace(**keywords)
        self.log_detach()

    @classmethod
    def run(cls, argv=None, stream=None) -> None:
        """
        Implements command line execution. As `z85kit.units.Unit` is an `z85kit.units.Executable`,
        this method will be executed when a class inheriting from `z85kit.units.Unit` is defined in
        the current `__main__` module. The process exits with a nonzero code when the unit failed.
        """
        argv = argv if argv is not None else sys.argv[1:]

        if stream is None:
            stream = open(os.devnull, 'rb') if sys.stdin.isatty() else sys.stdin.buffer

        with stream as source:
            try:
                unit = cls.assemble(*argv)
            except ArgparseError as ap:
                ap.parser.error_commandline(str(ap))
                return
            except Exception as msg:
                cls.logger.critical(cls._output('initialization failed:', msg))
                sys.exit(1)

            loglevel = environment.verbosity.value
            if loglevel:
                unit.log_level = loglevel

            unit.console = True

            try:
                stream = open(os.devnull, 'wb') if unit.args.devnull else sys.stdout.buffer
                with stream as output:
                    _ = source | unit | output
            except KeyboardInterrupt:
                unit.logger.warning('aborting due to keyboard interrupt')
            except OSError:
                pass

            if unit.failed and not unit.leniency:
                sys.exit(1)


