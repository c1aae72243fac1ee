"""
Inject stored defaults into Click command invocations.

Override commands may be glob patterns (``*:verbose`` applies to every
command). For a concrete command, pattern keys are applied first and keys
naming the command literally are applied last, so they win.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import click

from .keys import glob_match
from .store import OverrideStore

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


def _is_pattern(command: str) -> bool:
    return any(ch in _GLOB_CHARS for ch in command)


def defaults_for(store: OverrideStore, command_name: str) -> Dict[str, Any]:
    """Parameter defaults that apply to ``command_name``; empty while disabled."""
    if not store.enabled:
        return {}

    patterned: Dict[str, Any] = {}
    literal: Dict[str, Any] = {}
    for key, value in sorted(store.overrides.items()):
        if _is_pattern(key.command):
            if glob_match(command_name, key.command):
                patterned[key.parameter] = value
        elif key.command.lower() == command_name.lower():
            literal[key.parameter] = value

    patterned.update(literal)
    return patterned


def build_default_map(store: OverrideStore, group: click.Group) -> Dict[str, Dict[str, Any]]:
    """
    Build a Click ``default_map`` for every sub-command of ``group``.

    Pass the result as ``group.main(default_map=...)`` or through
    ``context_settings`` to make the stored defaults take effect.
    """
    default_map: Dict[str, Dict[str, Any]] = {}
    for name in group.commands:
        defaults = defaults_for(store, name)
        if defaults:
            default_map[name] = defaults
    logger.debug(f"Default map covers {len(default_map)} command(s)")
    return default_map


def apply_defaults(group: click.Group, store: OverrideStore, context_settings: Optional[dict] = None) -> dict:
    """Merge the store's default map into ``group.context_settings`` and return them."""
    settings = dict(group.context_settings if context_settings is None else context_settings)
    default_map = dict(settings.get("default_map") or {})
    for command, defaults in build_default_map(store, group).items():
        merged = dict(default_map.get(command) or {})
        merged.update(defaults)
        default_map[command] = merged
    settings["default_map"] = default_map
    group.context_settings = settings
    return settings
