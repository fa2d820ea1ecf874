"""
Functions to help dynamically load z85kit units.
"""
from __future__ import annotations

import functools
import importlib
import logging
import pkgutil
import shlex

from typing import TYPE_CHECKING, Generator

if TYPE_CHECKING:
    from types import ModuleType

    from z85kit.units import Unit


class EntryNotFound(NameError):
    pass


def get_all_entry_points() -> Generator[type[Unit]]:
    """
    The function returns an iterator over all entry points, i.e.
    all subclasses of the `z85kit.units.Entry` class.
    """
    path = 'z85kit.units'
    root = importlib.import_module(path)
    mark = root.Entry

    def iterate(parent: ModuleType, path: str, is_package: bool = True) -> Generator[type[Unit]]:
        for attr in dir(parent):
            item = getattr(parent, attr)
            if getattr(item, '__module__', None) != path:
                continue
            if getattr(item, '__name__', '_').startswith('_'):
                continue
            if isinstance(item, type) and issubclass(item, mark) and item is not mark:
                yield item
        if not is_package:
            return
        for _, name, is_package in pkgutil.iter_modules(parent.__path__):
            mp = F'{path}.{name}'
            try:
                module = importlib.import_module(mp)
            except ModuleNotFoundError as error:
                logging.error(F'could not load {mp} because {error.name} is missing.')
            except Exception as error:
                logging.error(F'could not load {mp} due to unknown error: {error!s}')
            else:
                yield from iterate(module, mp, is_package)

    yield from iterate(root, path)


@functools.lru_cache(maxsize=1, typed=True)
def get_entry_point_map() -> dict[str, type[Unit]]:
    """
    Returns a dictionary of all available unit names, mapping to the class that implements it.
    The dictionary is cached.
    """
    return {exe.name: exe for exe in get_all_entry_points()}


def get_entry_point(name: str) -> type[Unit]:
    """
    Retrieve a z85kit entry point by name.
    """
    try:
        return get_entry_point_map()[name]
    except KeyError:
        raise EntryNotFound(F'no entry point named "{name}" was found.')


def load(name: str, *args, **kwargs) -> Unit:
    """
    Loads the unit specified by `name`, initialized with the given arguments
    and keyword arguments.
    """
    entry = get_entry_point(name)
    return entry.assemble(*args, **kwargs)


def load_commandline(command: str) -> Unit:
    """
    Returns a unit as it would be loaded from a given command line string.
    """
    module, *arguments = shlex.split(command)
    return load(module, *arguments)


def load_detached(command: str) -> Unit:
    """
    Returns a unit as it would be loaded from a given command line string,
    except that the unit has been detached from the default log level.
    """
    return load_commandline(command).log_detach()


def load_pipeline(commandline: str, pipe='|') -> Unit:
    """
    Parses a complete pipeline as given on the command line. Every unit of the pipeline is
    detached from its logger.
    """
    pipeline = None
    command: list[str] = []
    for parsed, token in zip(
        shlex.split(commandline, posix=True),
        shlex.split(commandline, posix=False)
    ):
        if token == parsed and pipe in token:
            head, *rest = token.split(pipe)
            *rest, parsed = rest
            if head:
                command.append(head)
            if command:
                pipeline |= load(*command).log_detach()
            command.clear()
            for name in rest:
                pipeline |= load(name).log_detach()
            if not parsed:
                continue
        command.append(parsed)
    if command:
        pipeline |= load(*command).log_detach()
    if pipeline is None:
        raise EntryNotFound('the pipeline is empty.')
    return pipeline
