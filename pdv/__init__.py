"""PDV (Parameter Default Values): persistent default arguments for CLI commands."""
import logging

__version__ = "0.1.0"

# Storage-form key holding the inactive flag next to the serialized overrides.
DISABLED_KEY = "disabled"

KEY_SEPARATOR = ":"

DEFAULT_STORE_PATH = "~/.pdv/defaults.yaml"

logging.getLogger(__name__).addHandler(logging.NullHandler())
