"""
Resolve a user-typed parameter name to the canonical parameter of a command.

Users abbreviate (``Enc`` for ``Encoding``), use an alias, or type the flag
form (``-Encoding``). Resolution widens in three passes and stops at the
first one that finds anything:

1. name or alias matches the glob ``*fragment*`` (case-insensitive);
2. the first parameter whose name starts with the literal fragment;
3. the first parameter with an alias starting with the literal fragment.

The fragment may therefore carry wildcards (``Enc*Format``). The literal
prefix passes catch names that themselves contain glob characters.

When pass 1 finds several parameters and one of them is named exactly
like the fragment, that one wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from .errors import CommandNotFound
from .hosts import CommandDefinition, CommandHost, ParameterInfo
from .keys import OverrideKey, glob_match, strip_flag

logger = logging.getLogger(__name__)

# Alias chains are cycle-free by contract; this only guards broken hosts.
MAX_ALIAS_DEPTH = 32


@dataclass(frozen=True)
class Resolved:
    command: str
    parameter: str

    @property
    def key(self) -> OverrideKey:
        return OverrideKey(self.command, self.parameter)


@dataclass(frozen=True)
class Ambiguous:
    command: str
    fragment: str
    candidates: Tuple[str, ...]


@dataclass(frozen=True)
class NotFound:
    command: str
    fragment: str


Resolution = Union[Resolved, Ambiguous, NotFound]


def resolve_command(host: CommandHost, command_ref: str) -> CommandDefinition:
    """Follow aliases until a real command is reached."""
    definition = host.lookup_command(command_ref)
    seen = [definition.name]
    while definition.is_alias:
        if len(seen) > MAX_ALIAS_DEPTH:
            raise CommandNotFound(command_ref, f"alias chain too long: {' -> '.join(seen)}")
        definition = host.lookup_command(definition.alias_target)
        seen.append(definition.name)
    if len(seen) > 1:
        logger.debug(f"Resolved alias chain {' -> '.join(seen)}")
    return definition


def _contains_pass(params: Tuple[ParameterInfo, ...], fragment: str) -> List[str]:
    pattern = f"*{fragment}*"
    found: List[str] = []
    for param in params:
        names = (param.name,) + tuple(param.aliases)
        if any(glob_match(name, pattern) for name in names) and param.name not in found:
            found.append(param.name)
    return found


def _first_prefix(params: Tuple[ParameterInfo, ...], fragment: str, use_aliases: bool) -> List[str]:
    needle = fragment.lower()
    for param in params:
        names = param.aliases if use_aliases else (param.name,)
        if any(name.lower().startswith(needle) for name in names):
            return [param.name]
    return []


def find_candidates(params: Tuple[ParameterInfo, ...], fragment: str) -> List[str]:
    candidates = _contains_pass(params, fragment)
    if len(candidates) > 1:
        exact = [name for name in candidates if name.lower() == fragment.lower()]
        if exact:
            return exact[:1]
    if not candidates:
        candidates = _first_prefix(params, fragment, use_aliases=False)
    if not candidates:
        candidates = _first_prefix(params, fragment, use_aliases=True)
    return candidates


def resolve(host: CommandHost, command_ref: str, fragment: str) -> Resolution:
    """
    Resolve ``fragment`` against the parameters of ``command_ref``.

    Raises:
        CommandNotFound: ``command_ref`` (or a link of its alias chain) is
            unknown to the host.
    """
    fragment = strip_flag(fragment)
    definition = resolve_command(host, command_ref)
    candidates = find_candidates(definition.parameters, fragment)

    if not candidates:
        return NotFound(definition.name, fragment)
    if len(candidates) > 1:
        return Ambiguous(definition.name, fragment, tuple(candidates))
    return Resolved(definition.name, candidates[0])


def resolve_key(
    host: CommandHost,
    command_ref: str,
    fragment: str,
    warn: Callable[[str], None],
) -> Optional[OverrideKey]:
    """Resolve to an ``OverrideKey``, warning and returning ``None`` when it cannot."""
    result = resolve(host, command_ref, fragment)
    if isinstance(result, Resolved):
        return result.key
    if isinstance(result, Ambiguous):
        warn(
            f"Parameter '{result.fragment}' is ambiguous on command '{result.command}'. "
            f"Possible matches: {', '.join(result.candidates)}. Use a more specific name."
        )
    else:
        warn(f"Parameter '{result.fragment}' was not found on command '{result.command}'.")
    return None
