"""
Preset store — named parameter presets persisted in one JSON file.

File layout::

  {
    "<name>": {"schemaVersion": 3, "name": "<name>", "params": {...}},
    ...
  }

The built-in "ESP32 Base" preset is not stored in the file: it is always
listed first, loads from ``boxgen.config``, and can be neither saved over
nor deleted.  Every load goes through ``migrate_preset`` so that a record
written by an older version is upgraded (or rejected) before parsing.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from boxgen.config.defaults import DEFAULT_PRESET_NAME, default_preset_record
from boxgen.pipeline.params import ParameterSet, parse_params, params_to_dict
from .schema import SCHEMA_VERSION, PresetError, migrate_preset

log = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path("outputs") / "presets.json"


def store_path_from_env() -> Path:
    """Preset file location: ``$BOXGEN_PRESET_FILE``, else outputs/presets.json
    under the current working directory (never inside the installed package)."""
    env = os.environ.get("BOXGEN_PRESET_FILE")
    return Path(env) if env else Path.cwd() / DEFAULT_STORE_PATH


class PresetStore:
    """Read/write access to the user preset file at *path*."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    # ── file I/O ───────────────────────────────────────────────────

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            log.warning("Preset file %s is not valid JSON (%s); ignoring it", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Preset file %s does not hold a mapping; ignoring it", self.path)
            return {}
        return data

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    # ── public API ─────────────────────────────────────────────────

    def list_presets(self) -> list[str]:
        """Preset names: the built-in default first, then the rest sorted."""
        names = sorted(n for n in self._read() if n != DEFAULT_PRESET_NAME)
        return [DEFAULT_PRESET_NAME, *names]

    def get_record(self, name: str) -> dict:
        """The migrated, gated record for *name*.

        Raises ``KeyError`` if no such preset exists and ``PresetError``
        if the stored record cannot be brought to the current schema.
        """
        if name == DEFAULT_PRESET_NAME:
            return default_preset_record()
        data = self._read()
        if name not in data:
            raise KeyError(name)
        raw = data[name]
        if not isinstance(raw, dict):
            raise PresetError(name, "record is not a mapping")
        record = migrate_preset({**raw, "name": name})
        if raw.get("schemaVersion", 1) != SCHEMA_VERSION:
            log.info("Migrated preset '%s' from schema v%s", name, raw.get("schemaVersion", 1))
        return record

    def load_preset(self, name: str) -> ParameterSet:
        """Parse preset *name* into a ParameterSet (see ``get_record``)."""
        return parse_params(self.get_record(name)["params"])

    def save_preset(self, name: str, params: ParameterSet) -> bool:
        """Store *params* under *name*.  Returns False for the built-in name."""
        name = name.strip()
        if not name or name == DEFAULT_PRESET_NAME:
            return False
        data = self._read()
        data[name] = {
            "schemaVersion": SCHEMA_VERSION,
            "name": name,
            "params": params_to_dict(params),
        }
        self._write(data)
        log.info("Saved preset '%s'", name)
        return True

    def delete_preset(self, name: str) -> bool:
        """Delete preset *name*.  Returns True if it existed."""
        if name == DEFAULT_PRESET_NAME:
            return False
        data = self._read()
        if name not in data:
            return False
        del data[name]
        self._write(data)
        log.info("Deleted preset '%s'", name)
        return True
