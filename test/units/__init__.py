from __future__ import annotations

from typing import Type

import importlib

from .. import z85kit, TestBase, NameUnknownException
from z85kit.units import Entry, LogLevel

__all__ = ['z85kit', 'TestUnitBase', 'NameUnknownException']


class TestUnitBase(TestBase):

    @staticmethod
    def _relative_module_path(path: str, strip_test=True):
        path = path.split('.')
        path = path[1:]
        if strip_test:
            path = [x[4:].lstrip('_-.') if x.startswith('test') else x for x in path]
        return '.'.join(path)

    @classmethod
    def unit(cls) -> Type[z85kit.Unit]:
        name = cls._relative_module_path(cls.__module__)
        module_name = F'z85kit.{name}'
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            pass
        else:
            for object in vars(module).values():
                if isinstance(object, type) and issubclass(object, Entry) and object.__module__ == module_name:
                    return object
        basename = name.rsplit('.', 1)[-1]
        entry = z85kit.load(basename)
        if entry is None:
            raise NameUnknownException(name)
        return entry

    @classmethod
    def load(cls, *args, **kwargs) -> z85kit.Unit:
        unit = cls.unit().assemble(*args, **kwargs)
        unit.log_level = LogLevel.DETACHED
        return unit
