"""Environment-driven settings. CLI options override these, these override built-ins."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import DEFAULT_STORE_PATH

logger = logging.getLogger(__name__)

STORE_PATH_ENV = "PDV_STORE_PATH"
COMMANDS_FILE_ENV = "PDV_COMMANDS_FILE"
TARGET_ENV = "PDV_TARGET"


@dataclass
class Settings:
    store_path: Path
    commands_file: Optional[Path] = None
    target: Optional[str] = None


def load_settings(
    store_path: Optional[str] = None,
    commands_file: Optional[str] = None,
    target: Optional[str] = None,
) -> Settings:
    """Resolve settings with precedence: explicit argument > environment > default."""
    store = store_path or os.environ.get(STORE_PATH_ENV) or DEFAULT_STORE_PATH
    commands = commands_file or os.environ.get(COMMANDS_FILE_ENV)
    target = target or os.environ.get(TARGET_ENV)

    settings = Settings(
        store_path=Path(store).expanduser(),
        commands_file=Path(commands).expanduser() if commands else None,
        target=target or None,
    )
    logger.debug(f"Settings: {settings}")
    return settings
