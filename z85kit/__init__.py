"""
This is the z85kit package, an implementation of the Z85 binary-to-text encoding. It covers the
strict format of ZeroMQ RFC 32 and a padded variant for data of arbitrary length, see
`z85kit.lib.z85` for the codec itself.

The package `z85kit` exports all `z85kit.units.Unit`s which are of type `z85kit.units.Entry`;
this marker implies that the unit exposes a shell command. For convenience, the module also
exports the classes `z85kit.units.Unit` and `z85kit.units.Arg`. Units can be used in Python
code like on the command line:

    >>> from z85kit import z85
    >>> B'HelloWorld' | z85 | bytes
    b'\\x86O\\xd2o\\xb5Y\\xf7['
"""
from __future__ import annotations

__version__ = '1.0.0'
__distribution__ = 'z85kit'

from threading import RLock
from typing import TypeVar

from z85kit.units import Arg, Unit

_T = TypeVar('_T')


def _singleton(cls: type[_T]) -> _T:
    return cls()


@_singleton
class __unit_loader__:
    """
    Every unit can be imported from the z85kit base module. The import is performed on demand; the
    map from unit names to module paths is computed on first access by walking the units package.
    """
    units: dict[str, str]
    cache: dict[str, type[Unit]]
    _lock: RLock = RLock()

    def __init__(self):
        self.loaded = False
        self.units = {}
        self.cache = {}

    def __enter__(self):
        self._lock.__enter__()
        return self

    def __exit__(self, et, ev, tb):
        return self._lock.__exit__(et, ev, tb)

    def clear(self):
        self.loaded = False
        self.units.clear()
        self.cache.clear()

    def reload(self):
        from z85kit.lib.loader import get_all_entry_points
        self.clear()
        for executable in get_all_entry_points():
            name = executable.__name__
            self.units[name] = executable.__module__
            self.cache[name] = executable
        self.loaded = True

    def resolve(self, name) -> type[Unit] | None:
        if not self.loaded:
            self.reload()
        try:
            return self.cache[name]
        except KeyError:
            pass
        try:
            module_path = self.units[name]
            module = __import__(module_path, None, None, [name])
            entry = getattr(module, name)
            self.cache[name] = entry
            return entry
        except (KeyError, ModuleNotFoundError):
            return None


def load(name) -> type[Unit] | None:
    with __unit_loader__ as ul:
        return ul.resolve(name)


def __getattr__(name):
    if name.startswith('__'):
        raise AttributeError(name)
    with __unit_loader__ as ul:
        unit = ul.resolve(name)
    if unit is None:
        raise AttributeError(name)
    return unit


def __dir__():
    with __unit_loader__ as ul:
        if not ul.loaded:
            ul.reload()
        units = list(ul.units)
    return sorted(units, key=lambda x: x.lower()) + [Unit.__name__, Arg.__name__]
