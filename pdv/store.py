"""
The live set of parameter default overrides.

An ``OverrideStore`` holds the overrides of one session and a single
``enabled`` switch. Callers construct one store and pass it around; the
``overrides`` dict is mutated in place and never rebound, so references
taken to it keep seeing the current state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import DISABLED_KEY
from .console import warn as console_warn
from .keys import OverrideKey, key_matches

logger = logging.getLogger(__name__)

WarningSink = Callable[[str], None]

INACTIVE_WARNING = (
    "Parameter default overrides are disabled; the listed defaults are not applied. "
    "Run 'pdv enable' to activate them."
)


@dataclass(frozen=True)
class OverrideEntry:
    """One row of ``OverrideStore.get`` output."""
    command: str
    parameter: str
    current_default: Any


_FLAG_WORDS = {"true": True, "yes": True, "on": True, "1": True, "false": False, "no": False, "off": False, "0": False}


def _as_flag(value: Any) -> bool:
    """Read the stored ``disabled`` entry; hand-edited files may hold it as text."""
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _FLAG_WORDS:
        return _FLAG_WORDS[word]
    logger.warning(f"Ignoring unreadable '{DISABLED_KEY}' value {value!r}; defaults stay enabled")
    return False


class OverrideStore:
    """In-memory overrides plus the enabled flag."""

    def __init__(
        self,
        overrides: Optional[Dict[OverrideKey, Any]] = None,
        enabled: bool = True,
        warn: Optional[WarningSink] = None,
    ):
        self.overrides: Dict[OverrideKey, Any] = overrides if overrides is not None else {}
        self.enabled = enabled
        self.warn: WarningSink = warn or console_warn

    def __len__(self) -> int:
        return len(self.overrides)

    def __contains__(self, key: object) -> bool:
        return key in self.overrides

    def __repr__(self) -> str:
        return f"OverrideStore(enabled={self.enabled}, overrides={len(self.overrides)})"

    def set(self, key: OverrideKey, value: Any) -> None:
        self.overrides[key] = value
        logger.debug(f"Set default {key} = {value!r}")

    def get_value(self, key: OverrideKey, default: Any = None) -> Any:
        return self.overrides.get(key, default)

    def get(self, command_pattern: str = "*", parameter_pattern: str = "*") -> List[OverrideEntry]:
        """
        Return the overrides matching ``command_pattern:parameter_pattern*``.

        Inspection still works while the store is disabled, but a warning is
        sent to the sink first.
        """
        if not self.enabled:
            self.warn(INACTIVE_WARNING)
        return [
            OverrideEntry(key.command, key.parameter, value)
            for key, value in sorted(self.overrides.items())
            if key_matches(key, command_pattern, parameter_pattern)
        ]

    def remove(self, command_pattern: str, parameter: str) -> List[OverrideKey]:
        """
        Remove every override matching ``command_pattern:parameter*``.

        The parameter still gets a trailing wildcard, so removing
        ``Encoding`` also removes ``EncodingFormat``.
        """
        doomed = [key for key in self.overrides if key_matches(key, command_pattern, parameter)]
        for key in doomed:
            del self.overrides[key]
            logger.debug(f"Removed default {key}")
        return doomed

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    # --- storage boundary ---

    def to_mapping(self) -> Dict[str, Any]:
        """Storage form: serialized keys plus the reserved ``disabled`` entry."""
        data: Dict[str, Any] = {key.serialize(): value for key, value in sorted(self.overrides.items())}
        data[DISABLED_KEY] = not self.enabled
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], warn: Optional[WarningSink] = None) -> "OverrideStore":
        """Rebuild a store from its storage form, dropping malformed keys."""
        store = cls(warn=warn)
        for text, value in data.items():
            if text == DISABLED_KEY:
                store.enabled = not _as_flag(value)
                continue
            try:
                key = OverrideKey.parse(str(text))
            except ValueError as e:
                logger.warning(f"Ignoring stored entry {text!r}: {e}")
                continue
            store.overrides[key] = value
        return store
