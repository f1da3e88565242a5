from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config/ledger.yml
- Validate it against config_schema.json (unknown keys are rejected)
- Apply defaults (sheet names, 10-row header scan, timezone=UTC)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_CONFIG_PATH = Path("config/ledger.yml")
DEFAULT_SHEET_NAME = "Form_Responses"
DEFAULT_ARCHIVE_SHEET_NAME = "Archive"
DEFAULT_HEADER_SCAN_ROWS = 10
DEFAULT_TIMEZONE = "UTC"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class LedgerConfig:
    source_directory: str
    sheet_name: str = DEFAULT_SHEET_NAME
    archive_sheet_name: str = DEFAULT_ARCHIVE_SHEET_NAME
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
    timezone: str = DEFAULT_TIMEZONE

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (missing required keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> LedgerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    tz = data.get("timezone", DEFAULT_TIMEZONE)
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    return LedgerConfig(
        source_directory=data["source_directory"],
        sheet_name=data.get("sheet_name", DEFAULT_SHEET_NAME),
        archive_sheet_name=data.get("archive_sheet_name", DEFAULT_ARCHIVE_SHEET_NAME),
        header_scan_rows=data.get("header_scan_rows", DEFAULT_HEADER_SCAN_ROWS),
        timezone=tz,
    )
