"""
Load and save override files.

Files hold the storage form of a store: a flat mapping of
``"Command:Parameter"`` to value plus the reserved ``disabled`` entry.
``.json`` files are read and written as JSON, everything else as YAML.
Structured config files are read through ``load_config_overrides``, which
flattens a nested ``defaults`` section into the same form.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from . import KEY_SEPARATOR
from .errors import StoreFormatError, StoreLoadMissing, StoreWriteError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "defaults"

JSON_SUFFIXES = (".json",)


def _expand(locator: Union[str, Path]) -> Path:
    return Path(locator).expanduser()


def _is_json(path: Path) -> bool:
    return path.suffix.lower() in JSON_SUFFIXES


def _read_mapping(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise StoreLoadMissing(str(path))
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if _is_json(path):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise StoreFormatError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StoreFormatError(f"{path} must contain a mapping, found {type(data).__name__}")
    return data


def load_mapping(locator: Union[str, Path]) -> Dict[str, Any]:
    """Read any YAML or JSON mapping file."""
    return _read_mapping(_expand(locator))


def load_overrides(locator: Union[str, Path]) -> Dict[str, Any]:
    """
    Read an override file in storage form.

    Raises:
        StoreLoadMissing: The file does not exist.
        StoreFormatError: The file is not a YAML/JSON mapping.
    """
    path = _expand(locator)
    data = _read_mapping(path)
    logger.debug(f"Loaded {len(data)} stored entries from {path}")
    return {str(key): value for key, value in data.items()}


def save_overrides(locator: Union[str, Path], mapping: Mapping[str, Any]) -> Path:
    """Write ``mapping`` to ``locator``, creating parent directories."""
    path = _expand(locator)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            if _is_json(path):
                json.dump(dict(mapping), fh, indent=2, sort_keys=True)
                fh.write("\n")
            else:
                yaml.safe_dump(dict(mapping), fh, sort_keys=True, default_flow_style=False)
    except OSError as e:
        raise StoreWriteError(f"Failed to write {path}: {e}") from e
    logger.debug(f"Saved {len(mapping)} entries to {path}")
    return path


def load_config_overrides(locator: Union[str, Path], section: str = CONFIG_SECTION) -> Dict[str, Any]:
    """
    Read overrides from the ``section`` of a structured config file.

    The section may be nested (``{command: {parameter: value}}``) or already
    flat (``{"command:parameter": value}``); both come back flat. A config
    without the section imports nothing.
    """
    path = _expand(locator)
    data = _read_mapping(path)
    block = data.get(section)
    if block is None:
        logger.info(f"No '{section}' section in {path}")
        return {}
    if not isinstance(block, dict):
        raise StoreFormatError(f"'{section}' in {path} must be a mapping")

    flat: Dict[str, Any] = {}
    for command, params in block.items():
        if isinstance(params, dict):
            for parameter, value in params.items():
                flat[f"{command}{KEY_SEPARATOR}{parameter}"] = value
        else:
            flat[str(command)] = params
    return flat
