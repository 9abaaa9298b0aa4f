"""Preset schema versions, compatibility gate, and migration.

Preset records look like ``{"schemaVersion": 3, "name": ..., "params":
{flat keys}}``.  Older records are upgraded one version at a time:

  v1  single vent face (enableVents + ventFace + shared count/width/
      spacing), lipClearance, postOffset.  Records without a
      schemaVersion tag are v1.
  v2  fitTolerance, centred standoffs, per-face vent flags
      (ventFront/ventBack/ventLeft/ventRight) sharing one vent setting.
  v3  per-face feature sets: faceEdit<Face>, vent<Face>Enabled/Count/
      Width/Spacing, wire<Face> and its profile/size/offset fields.

After migration the record must pass ``is_compatible``: every required
field present, no deprecated field left.
"""

from __future__ import annotations

import copy

from boxgen.pipeline.params.models import FACES
from boxgen.pipeline.params.parsing import face_keys, flat_keys

SCHEMA_VERSION = 3

REQUIRED_FIELDS: tuple[str, ...] = tuple(flat_keys())

DEPRECATED_FIELDS: tuple[str, ...] = (
    "lipClearance",
    "postOffset",
    "enableVents",
    "ventFace",
    "ventCount",
    "ventWidth",
    "ventSpacing",
    "ventFront",
    "ventBack",
    "ventLeft",
    "ventRight",
)


class PresetError(Exception):
    """Raised when a preset record cannot be used with the current schema."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Preset '{name}': {reason}")


def missing_fields(params: dict) -> list[str]:
    return [k for k in REQUIRED_FIELDS if k not in params]


def deprecated_fields(params: dict) -> list[str]:
    return [k for k in DEPRECATED_FIELDS if k in params]


def is_compatible(params: dict) -> bool:
    """True iff *params* holds every required field and no deprecated one."""
    return not missing_fields(params) and not deprecated_fields(params)


# ── migration steps ────────────────────────────────────────────────


def _v1_to_v2(params: dict, defaults: dict) -> dict:
    p = dict(params)
    clearance = p.pop("lipClearance", None)
    if "fitTolerance" not in p:
        p["fitTolerance"] = clearance if clearance is not None else defaults["fitTolerance"]
    p.pop("postOffset", None)

    vent_face = str(p.pop("ventFace", "front") or "front")
    for face in FACES:
        p[f"vent{face.label}"] = face.value == vent_face

    for key in (
        "enableCenteredStandoffs", "standoffHeight", "standoffDiameter",
        "standoffHoleDiameter", "standoffSpacingX", "standoffSpacingY",
    ):
        p.setdefault(key, defaults[key])
    return p


def _v2_to_v3(params: dict, defaults: dict) -> dict:
    p = dict(params)
    vents_on = bool(p.pop("enableVents", False))
    shared = {
        "vent_count": p.pop("ventCount", None),
        "vent_width": p.pop("ventWidth", None),
        "vent_spacing": p.pop("ventSpacing", None),
    }
    for face in FACES:
        k = face_keys(face)
        active = vents_on and bool(p.pop(f"vent{face.label}", False))
        p.setdefault(k["edit"], active)
        p.setdefault(k["vent_enabled"], active)
        for role, value in shared.items():
            p.setdefault(k[role], defaults[k[role]] if value is None else value)
        # v2 had no wire cutouts.
        p.setdefault(k["wire_enabled"], False)
        for role in (
            "wire_profile", "wire_round_diameter", "wire_rect_width",
            "wire_rect_height", "wire_offset_h", "wire_offset_v",
        ):
            p.setdefault(k[role], defaults[k[role]])
    return p


_STEPS = {
    1: _v1_to_v2,
    2: _v2_to_v3,
}


def migrate_preset(record: dict, defaults: dict | None = None) -> dict:
    """Upgrade a preset record to the current schema and gate it.

    Returns a new record; *record* is not modified.  Raises
    ``PresetError`` for records from a newer or unknown schema, or that
    still miss required fields (or keep deprecated ones) afterwards.
    """
    if defaults is None:
        from boxgen.config.defaults import default_preset_record
        defaults = default_preset_record()["params"]

    name = str(record.get("name", ""))
    version = record.get("schemaVersion", 1)
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise PresetError(name, f"unknown schema version {version!r}")
    if version > SCHEMA_VERSION:
        raise PresetError(name, f"schema version {version} is newer than supported ({SCHEMA_VERSION})")
    params = record.get("params")
    if not isinstance(params, dict):
        raise PresetError(name, "record has no params mapping")

    params = copy.deepcopy(params)
    while version < SCHEMA_VERSION:
        params = _STEPS[version](params, defaults)
        version += 1

    missing = missing_fields(params)
    if missing:
        raise PresetError(name, f"missing required field(s): {', '.join(missing[:5])}"
                          + (" ..." if len(missing) > 5 else ""))
    stale = deprecated_fields(params)
    if stale:
        raise PresetError(name, f"contains deprecated field(s): {', '.join(stale)}")

    return {"schemaVersion": SCHEMA_VERSION, "name": name, "params": params}
