"""Converter configuration: YAML file, then environment, then CLI flags."""

import codecs
import logging
import os
from dataclasses import dataclass, fields

import yaml

from slowlog_converter.reader import DEFAULT_FIELD_SIZE_LIMIT
from slowlog_converter.validator import MIN_FIELDS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SLOWLOG_CONFIG"

# environment variable -> config field
ENV_OVERRIDES = {
    "SLOWLOG_IN": "input_path",
    "SLOWLOG_OUT": "output_path",
    "SLOWLOG_LOG_LEVEL": "log_level",
}

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ConverterConfig:
    input_path: str | None = None
    output_path: str | None = None
    encoding: str = "utf-8"
    delimiter: str = ","
    min_fields: int = MIN_FIELDS
    field_size_limit: int = DEFAULT_FIELD_SIZE_LIMIT
    stats_file: str | None = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.min_fields < MIN_FIELDS:
            raise ValueError(
                f"min_fields must be at least {MIN_FIELDS}, got {self.min_fields}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {self.encoding!r}") from exc
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.field_size_limit < 1:
            raise ValueError(f"field_size_limit must be positive, got {self.field_size_limit}")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_dict(cls, d: dict) -> "ConverterConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        values = {k: v for k, v in d.items() if k in known and v is not None}
        for key in ("min_fields", "field_size_limit"):
            if key in values:
                values[key] = int(values[key])
        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()
        return cls(**values)


def load_yaml(path: str) -> dict:
    """Load the converter section of a YAML config file.

    The file may hold the settings at top level or under a ``converter:``
    key. An empty file yields an empty dict.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    section = data.get("converter", data)
    if not isinstance(section, dict):
        raise ValueError(f"'converter' section in {path} must be a mapping")
    return section


def load_config(config_path: str | None = None,
                overrides: dict | None = None) -> ConverterConfig:
    """Merge defaults, the YAML file, environment variables and *overrides*.

    *config_path* falls back to the SLOWLOG_CONFIG environment variable.
    Entries of *overrides* that are None are ignored, so an argparse
    namespace can be passed through as a dict.
    """
    merged: dict = {}

    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        merged.update(load_yaml(path))

    for env_var, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            merged[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    return ConverterConfig.from_dict(merged)
