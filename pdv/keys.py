"""
Override keys and wildcard matching.

Keys are structured ``(command, parameter)`` pairs. The colon-joined form
``"Command:Parameter"`` only exists at the storage boundary and as the text
that wildcard patterns are matched against.
"""
from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase

from . import DISABLED_KEY, KEY_SEPARATOR


@dataclass(frozen=True, order=True)
class OverrideKey:
    command: str
    parameter: str

    def __post_init__(self):
        if not self.command or not self.parameter:
            raise ValueError(
                f"Override key needs a command and a parameter, got {self.command!r}, {self.parameter!r}"
            )

    def serialize(self) -> str:
        return f"{self.command}{KEY_SEPARATOR}{self.parameter}"

    @classmethod
    def parse(cls, text: str) -> "OverrideKey":
        """Parse ``"Command:Parameter"``; the first colon separates the parts."""
        if text == DISABLED_KEY:
            raise ValueError(f"'{DISABLED_KEY}' is reserved and is not an override key")
        command, sep, parameter = text.partition(KEY_SEPARATOR)
        if not sep:
            raise ValueError(f"Override key {text!r} is missing '{KEY_SEPARATOR}'")
        return cls(command.strip(), parameter.strip())

    def __str__(self) -> str:
        return self.serialize()


def key_pattern(command_pattern: str, parameter_pattern: str) -> str:
    """Build the glob used by get/remove; the parameter always gets a trailing ``*``."""
    return f"{command_pattern}{KEY_SEPARATOR}{parameter_pattern}*"


def glob_match(text: str, pattern: str) -> bool:
    """Case-insensitive shell-style match (``*``, ``?`` and ``[...]``)."""
    return fnmatchcase(text.lower(), pattern.lower())


def key_matches(key: OverrideKey, command_pattern: str = "*", parameter_pattern: str = "*") -> bool:
    return glob_match(key.serialize(), key_pattern(command_pattern, parameter_pattern))


def strip_flag(parameter: str) -> str:
    """Drop one leading ``-`` so ``-Encoding`` names the ``Encoding`` parameter."""
    return parameter[1:] if parameter.startswith("-") else parameter
