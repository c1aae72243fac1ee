"""
Reconcile persisted overrides into a live store.

``merge`` walks the incoming mapping key by key. New keys are inserted;
keys already present are either overwritten (``force_overwrite``) or left
alone, and in both cases a ``ConflictRecord`` is produced. Importing always
re-enables the store, and the incoming ``disabled`` entry is never read.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from . import DISABLED_KEY
from .errors import StoreLoadMissing
from .keys import OverrideKey
from .persistence import CONFIG_SECTION, load_config_overrides, load_overrides
from .store import OverrideStore

logger = logging.getLogger(__name__)

OVERWRITTEN = "overwritten"
SKIPPED = "skipped"


@dataclass(frozen=True)
class ConflictRecord:
    """A key found both in the incoming set and in the live store."""
    command: str
    parameter: str
    kind: str
    existing_value: Any
    incoming_value: Any

    @property
    def overwritten(self) -> bool:
        return self.kind == OVERWRITTEN

    # Overwritten conflicts speak of new/old defaults ...
    @property
    def new_default(self) -> Any:
        return self.incoming_value

    @property
    def old_default(self) -> Any:
        return self.existing_value

    # ... skipped ones of the current default and the value that was skipped.
    @property
    def current_default(self) -> Any:
        return self.existing_value

    @property
    def skipped_value(self) -> Any:
        return self.incoming_value

    def as_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"Command": self.command, "Parameter": self.parameter}
        if self.overwritten:
            row["NewDefault"] = self.new_default
            row["OldDefault"] = self.old_default
        else:
            row["CurrentDefault"] = self.current_default
            row["SkippedValue"] = self.skipped_value
        return row


def _incoming_items(incoming: Mapping[Any, Any]):
    for raw_key, value in incoming.items():
        if isinstance(raw_key, OverrideKey):
            yield raw_key, value
            continue
        if raw_key == DISABLED_KEY:
            continue
        try:
            key = OverrideKey.parse(str(raw_key))
        except ValueError as e:
            logger.warning(f"Skipping malformed imported key {raw_key!r}: {e}")
            continue
        yield key, value


def merge(
    incoming: Mapping[Any, Any],
    existing: OverrideStore,
    force_overwrite: bool = False,
) -> List[ConflictRecord]:
    """
    Merge ``incoming`` into ``existing`` in place.

    Args:
        incoming: Storage-form mapping (``"Command:Parameter"`` keys, may
            contain ``disabled``) or a mapping keyed by ``OverrideKey``.
        existing: The live store. Its ``overrides`` dict is updated key by
            key, never replaced.
        force_overwrite: Replace values of keys that already exist.

    Returns:
        One ``ConflictRecord`` per key present on both sides, overwritten
        and skipped alike.
    """
    conflicts: List[ConflictRecord] = []
    live = existing.overrides

    for key, value in _incoming_items(incoming):
        if key not in live:
            live[key] = value
            logger.debug(f"Imported default {key}")
            continue

        current = live[key]
        if force_overwrite:
            live[key] = value
            conflicts.append(ConflictRecord(key.command, key.parameter, OVERWRITTEN, current, value))
        else:
            conflicts.append(ConflictRecord(key.command, key.parameter, SKIPPED, current, value))

    existing.enable()
    logger.debug(f"Merge finished with {len(conflicts)} conflict(s)")
    return conflicts


def import_sources(
    store: OverrideStore,
    paths: Iterable[Union[str, Path]] = (),
    config_paths: Iterable[Union[str, Path]] = (),
    force_overwrite: bool = False,
    config_section: str = CONFIG_SECTION,
) -> List[ConflictRecord]:
    """
    Merge override files, then structured config files, into ``store``.

    Later sources follow the same per-key policy as earlier ones, so with
    ``force_overwrite`` the last source wins. A missing source is reported
    through the store's warning sink and imports as an empty set.
    """
    conflicts: List[ConflictRecord] = []

    load_config = functools.partial(load_config_overrides, section=config_section)
    sources = [(path, load_overrides) for path in paths]
    sources += [(path, load_config) for path in config_paths]

    for locator, loader in sources:
        try:
            incoming = loader(locator)
        except StoreLoadMissing as e:
            store.warn(f"{e}; nothing to import.")
            incoming = {}
        conflicts.extend(merge(incoming, store, force_overwrite=force_overwrite))

    return conflicts
