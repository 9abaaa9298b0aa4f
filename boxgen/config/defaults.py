"""
Default configuration — the built-in "ESP32 Base" preset.

Loads presets/esp32_base.json once and exposes it both as the raw preset
record and as an immutable ParameterSet.  Callers derive variations with
``ParameterSet.replace`` / ``with_face``; the default itself is never
mutated.
"""

from __future__ import annotations

import copy
import json
import math
from functools import lru_cache
from pathlib import Path

from boxgen.pipeline.params.models import ParameterSet
from boxgen.pipeline.params.parsing import BOX_FIELDS, parse_params


_PRESET_PATH = Path(__file__).resolve().parent / "presets" / "esp32_base.json"

DEFAULT_PRESET_NAME = "ESP32 Base"


@lru_cache(maxsize=1)
def _load() -> dict:
    return json.loads(_PRESET_PATH.read_text(encoding="utf-8"))


def default_preset_record() -> dict:
    """Return a fresh copy of the built-in preset record."""
    return copy.deepcopy(_load())


@lru_cache(maxsize=1)
def default_params() -> ParameterSet:
    """The ESP32 base parameter set (shared, immutable)."""
    # The preset file carries every key, so the NaN base is never visible.
    blank = ParameterSet(**{attr: math.nan for attr in BOX_FIELDS.values()})
    return parse_params(_load()["params"], base=blank)
