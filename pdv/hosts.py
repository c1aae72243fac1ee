"""
Command-introspection hosts.

A host answers one question: given a command name, what is it? Either a
real command with its parameters (and their aliases), or an alias pointing
at another command. Two hosts ship with PDV:

* ``ClickCommandHost`` introspects a ``click.Group``.
* ``StaticCommandHost`` is built from plain mappings or a YAML/JSON file.
"""
from __future__ import annotations

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, Union

import click

from .errors import CommandNotFound
from .persistence import load_mapping


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandDefinition:
    name: str
    parameters: Tuple[ParameterInfo, ...] = ()
    alias_target: Optional[str] = None

    @property
    def is_alias(self) -> bool:
        return self.alias_target is not None


class CommandHost(Protocol):
    def lookup_command(self, name: str) -> CommandDefinition:
        """Return the definition for ``name`` or raise ``CommandNotFound``."""
        ...


def _name_tuple(names) -> Tuple[str, ...]:
    # A lone YAML scalar is one name, not a sequence of characters.
    if not names:
        return ()
    if isinstance(names, str):
        return (names,)
    return tuple(str(n) for n in names)


def _find(names: Iterable[str], wanted: str) -> Optional[str]:
    """Case-insensitive lookup of ``wanted``; an exact-case hit wins."""
    lowered = wanted.lower()
    found = None
    for name in names:
        if name == wanted:
            return name
        if found is None and name.lower() == lowered:
            found = name
    return found


class StaticCommandHost:
    """
    Host backed by plain data.

    ``commands`` maps a command name to either a list of parameter names or
    a mapping of parameter name to its aliases. ``aliases`` maps an alias
    name to the command (or further alias) it stands for.
    """

    def __init__(
        self,
        commands: Mapping[str, Union[Mapping[str, Iterable[str]], Iterable[str]]],
        aliases: Optional[Mapping[str, str]] = None,
    ):
        self._commands: Dict[str, Tuple[ParameterInfo, ...]] = {}
        for command, params in commands.items():
            if isinstance(params, Mapping):
                infos = tuple(
                    ParameterInfo(str(name), _name_tuple(param_aliases))
                    for name, param_aliases in params.items()
                )
            else:
                infos = tuple(ParameterInfo(name) for name in _name_tuple(params))
            self._commands[str(command)] = infos
        self._aliases: Dict[str, str] = {str(k): str(v) for k, v in (aliases or {}).items()}

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StaticCommandHost":
        """Read ``{commands: {...}, aliases: {...}}`` from a YAML or JSON file."""
        data = load_mapping(path)
        return cls(data.get("commands") or {}, data.get("aliases") or {})

    def lookup_command(self, name: str) -> CommandDefinition:
        command = _find(self._commands, name)
        if command is not None:
            return CommandDefinition(command, self._commands[command])
        alias = _find(self._aliases, name)
        if alias is not None:
            return CommandDefinition(alias, alias_target=self._aliases[alias])
        raise CommandNotFound(name)


def _click_parameter(param: click.Parameter) -> ParameterInfo:
    # Option strings minus dashes; the primary name is click's python name.
    names: List[str] = []
    for opt in list(param.opts) + list(param.secondary_opts):
        stripped = opt.lstrip("-")
        if stripped and stripped != param.name and stripped not in names:
            names.append(stripped)
    return ParameterInfo(param.name or "", tuple(names))


class ClickCommandHost:
    """Host that introspects the sub-commands of a Click group."""

    def __init__(self, group: click.Group, aliases: Optional[Mapping[str, str]] = None):
        self.group = group
        self._aliases: Dict[str, str] = dict(aliases or {})

    def lookup_command(self, name: str) -> CommandDefinition:
        command_name = _find(self.group.commands, name)
        if command_name is not None:
            command = self.group.commands[command_name]
            params = tuple(_click_parameter(p) for p in command.params if p.name)
            return CommandDefinition(command_name, params)
        alias = _find(self._aliases, name)
        if alias is not None:
            return CommandDefinition(alias, alias_target=self._aliases[alias])
        raise CommandNotFound(name, f"not a sub-command of '{self.group.name}'")


def load_click_group(reference: str) -> click.Group:
    """Import a Click group from a ``package.module:attribute`` reference."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {reference!r}")
    module = importlib.import_module(module_name)
    try:
        group = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"{module_name} has no attribute {attr!r}") from e
    if not isinstance(group, click.Group):
        raise ValueError(f"{reference} is not a click.Group")
    return group
