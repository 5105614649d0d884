"""
Ingestion settings.

Precedence, lowest first: built-in defaults, the YAML file (INGEST_CONFIG
or an explicit path), then INGEST_* environment variables.

Expected YAML format:
```yaml
ingest:
  batch_size: 100
  max_file_bytes: 52428800
  max_rows: 500000
  strict_identifiers: false
  read_chunk_size: 1048576
  encodings: [utf-8-sig, cp1252]
  delimiter: null

fields:
  unit_id: [TRGID, TRG ID]
```
"""

import codecs
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from liquidation_pipeline.core.schema import FieldCatalog, parse_field_overrides

DEFAULT_BATCH_SIZE = 100
DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024
DEFAULT_MAX_ROWS = 500_000
DEFAULT_READ_CHUNK_SIZE = 1024 * 1024
DEFAULT_ENCODINGS = ("utf-8-sig", "cp1252")

CONFIG_ENV_VAR = "INGEST_CONFIG"

# Environment variable -> settings attribute
ENV_OVERRIDES = {
    "INGEST_BATCH_SIZE": "batch_size",
    "INGEST_MAX_FILE_BYTES": "max_file_bytes",
    "INGEST_MAX_ROWS": "max_rows",
    "INGEST_STRICT_IDS": "strict_identifiers",
}

_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}


class IngestSettings(BaseModel):
    """
    Attributes:
        batch_size: Records per upload batch
        max_file_bytes: Input size ceiling
        max_rows: Data row ceiling
        strict_identifiers: Require purely numeric unit identifiers
        read_chunk_size: Bytes decoded per reading step
        encodings: Encodings tried in order when decoding input
        delimiter: Fixed delimiter; auto-detected when None
        field_overrides: Candidate header lists replacing the defaults
    """

    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1)
    max_file_bytes: int = Field(DEFAULT_MAX_FILE_BYTES, ge=1)
    max_rows: int = Field(DEFAULT_MAX_ROWS, ge=1)
    strict_identifiers: bool = False
    read_chunk_size: int = Field(DEFAULT_READ_CHUNK_SIZE, ge=1024)
    encodings: list[str] = Field(default_factory=lambda: list(DEFAULT_ENCODINGS), min_length=1)
    delimiter: str | None = None
    field_overrides: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("encodings")
    @classmethod
    def check_encodings(cls, value: list[str]) -> list[str]:
        for name in value:
            try:
                codecs.lookup(name)
            except LookupError:
                raise ValueError(f"Unknown encoding '{name}'")
        return value

    @field_validator("delimiter")
    @classmethod
    def check_delimiter(cls, value: str | None) -> str | None:
        if value is not None and len(value) != 1:
            raise ValueError("delimiter must be a single character")
        return value

    def field_catalog(self) -> FieldCatalog:
        return FieldCatalog().with_overrides(self.field_overrides)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Ingest configuration file not found: {path}")
    with open(path) as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Ingest configuration must be a mapping: {path}")
    return config


def _env_value(name: str) -> Any:
    raw = os.environ[name].strip()
    if name == "INGEST_STRICT_IDS":
        return raw.lower() in _TRUE_STRINGS
    return int(raw)


def load_settings(path: str | Path | None = None, **overrides: Any) -> IngestSettings:
    """
    Load settings from defaults, YAML and environment.

    Args:
        path: YAML file; defaults to the INGEST_CONFIG env var, if set
        **overrides: Explicit values (e.g. from the CLI) applied last

    Returns:
        Validated IngestSettings

    Raises:
        FileNotFoundError: If a configured YAML file does not exist
        ValueError: If a value is malformed
    """
    values: dict[str, Any] = {}

    config_path = path or os.getenv(CONFIG_ENV_VAR)
    if config_path:
        config = _read_yaml(Path(config_path))
        section = config.get("ingest") or {}
        if not isinstance(section, dict):
            raise ValueError("'ingest' section must be a mapping")
        values.update(section)
        values["field_overrides"] = parse_field_overrides(config.get("fields"))

    for env_name, attribute in ENV_OVERRIDES.items():
        if os.getenv(env_name):
            try:
                values[attribute] = _env_value(env_name)
            except ValueError:
                raise ValueError(f"{env_name} must be an integer, got '{os.environ[env_name]}'")

    values.update({key: value for key, value in overrides.items() if value is not None})
    return IngestSettings(**values)
