"""Configuration file loading for the pkgmatch command-line tool.

Settings are layered: built-in defaults, then the environment, then an
optional YAML file, then CLI flags.  The file is validated against a Draft-07
JSON Schema before use.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft7Validator

from .constants import Constants
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "log_level": {"type": "string", "enum": Constants.LOG_LEVELS},
        "tiebreak": {"type": "string", "enum": Constants.TIEBREAKS},
        "error_on_unresolved": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass
class Settings:
    """Effective runtime settings."""

    log_level: str = Constants.DEFAULT_LOG_LEVEL
    tiebreak: str = Constants.DEFAULT_TIEBREAK
    error_on_unresolved: bool = False


def validate_config(data: Dict[str, Any]) -> None:
    """Validate a config mapping strictly and raise on the first error."""
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigError(f"Invalid config at '{path}': {first.message}")


def load_config(config_path: str) -> Dict[str, Any]:
    """Load and validate a YAML config file.

    Args:
        config_path: Path to a YAML (or JSON) file.

    Returns:
        The validated mapping; an empty file yields an empty mapping.

    Raises:
        ConfigError: The file is missing, unparseable or fails validation.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")
    validate_config(data)
    logger.debug("Loaded config from: %s", config_path)
    return data


def resolve_settings(args: Any, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Merge defaults, environment, config file and CLI arguments.

    CLI arguments left at None do not override lower layers.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    env_level = env.get(Constants.ENV_LOG_LEVEL)
    if env_level and env_level.upper() in Constants.LOG_LEVELS:
        settings.log_level = env_level.upper()

    config_path = getattr(args, "CONFIG", None)
    if config_path:
        data = load_config(config_path)
        settings.log_level = data.get("log_level", settings.log_level)
        settings.tiebreak = data.get("tiebreak", settings.tiebreak)
        settings.error_on_unresolved = data.get(
            "error_on_unresolved", settings.error_on_unresolved
        )

    if getattr(args, "LOG_LEVEL", None):
        settings.log_level = str(args.LOG_LEVEL).upper()
    if getattr(args, "TIEBREAK", None):
        settings.tiebreak = args.TIEBREAK
    if getattr(args, "ERROR_ON_UNRESOLVED", False):
        settings.error_on_unresolved = True
    return settings
