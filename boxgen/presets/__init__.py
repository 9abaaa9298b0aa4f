"""Named presets — schema migration and the JSON-file store."""

from .schema import (
    SCHEMA_VERSION, REQUIRED_FIELDS, DEPRECATED_FIELDS,
    PresetError, is_compatible, migrate_preset,
)
from .store import PresetStore, store_path_from_env

__all__ = [
    "SCHEMA_VERSION", "REQUIRED_FIELDS", "DEPRECATED_FIELDS",
    "PresetError", "is_compatible", "migrate_preset",
    "PresetStore", "store_path_from_env",
]
