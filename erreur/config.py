# erreur/config.py
"""
Encoder configuration

Names the entry-level keys a JSON line carries (level, time, logger name,
caller, message, stacktrace) and the line ending. An empty key name drops
that key from the output.

Design principle:
- Code = truth (presets carry every default)
- YAML = optional overrides, merged over a preset
- Configs are frozen; presets are built once at import and never mutated
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ERREUR_CONFIG"
TIME_FORMATS = ("epoch", "iso8601")


@dataclass(frozen=True)
class EncoderConfig:
    """Keys and formatting for encoded entries"""
    message_key: str = "msg"
    level_key: str = "level"
    time_key: str = "ts"
    name_key: str = "logger"
    caller_key: str = "caller"
    stacktrace_key: str = "stacktrace"
    line_ending: str = "\n"
    time_format: str = "epoch"  # epoch | iso8601

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def production_encoder_config() -> EncoderConfig:
    """All entry keys, epoch timestamps, newline-terminated"""
    return EncoderConfig()


def example_encoder_config() -> EncoderConfig:
    """Level and message only; deterministic output for docs and tests"""
    return EncoderConfig(
        time_key="",
        name_key="",
        caller_key="",
        stacktrace_key="",
    )


# A bare object: "msg" plus context fields, nothing ambient
JSON_DOCUMENT_CONFIG = EncoderConfig(
    level_key="",
    time_key="",
    name_key="",
    caller_key="",
    stacktrace_key="",
    line_ending="",
)


def _default_paths() -> list[Path]:
    env = os.environ.get(CONFIG_ENV_VAR, "")
    if env:
        return [Path(env)]
    return [Path.home() / ".erreur" / "config.yml"]


def _load_yaml(config_path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Load YAML; a missing default file is not an error, a missing explicit one is"""
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError("config file does not exist", str(path))
        paths = [path]
    else:
        paths = [p for p in _default_paths() if p.exists()]

    for path in paths:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot load YAML: {e}", str(path)) from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise ConfigError("top level must be a mapping", str(path))
        logger.debug(f"Loaded encoder config from {path}")
        return data

    return None


def _merge_config(base: EncoderConfig, data: Dict[str, Any]) -> EncoderConfig:
    """Merge YAML values over base; unknown keys are ignored with a warning"""
    known = {f.name for f in fields(EncoderConfig)}
    updates: Dict[str, str] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown encoder config key: {key}")
            continue
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigError(f"encoder.{key} must be a string, got {type(value).__name__}")
        updates[key] = value

    time_format = updates.get("time_format", base.time_format)
    if time_format not in TIME_FORMATS:
        raise ConfigError(f"encoder.time_format must be one of {', '.join(TIME_FORMATS)}, got {time_format!r}")

    return replace(base, **updates)


def load_encoder_config(
    config_path: Optional[Path] = None,
    base: Optional[EncoderConfig] = None,
) -> EncoderConfig:
    """
    Load encoder configuration.

    Args:
        config_path: YAML file. If None, tries $ERREUR_CONFIG, then
            ~/.erreur/config.yml
        base: preset the YAML is merged over (production by default)

    Returns:
        EncoderConfig (frozen)

    Raises:
        ConfigError: explicit file missing, invalid YAML, or bad values

    YAML layout:
        encoder:
          message_key: message
          time_format: iso8601
    """
    config = base or production_encoder_config()

    data = _load_yaml(config_path)
    if not data:
        return config

    encoder = data.get("encoder")
    if encoder is None:
        return config
    if not isinstance(encoder, dict):
        raise ConfigError("'encoder' must be a mapping", str(config_path or ""))

    return _merge_config(config, encoder)


__all__ = [
    "EncoderConfig",
    "JSON_DOCUMENT_CONFIG",
    "production_encoder_config",
    "example_encoder_config",
    "load_encoder_config",
]
