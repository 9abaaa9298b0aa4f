"""Parameter parsing — convert flat key/value dicts (form, preset, JSON)
into a ParameterSet.

The flat format names per-face fields by concatenation
(``ventFrontCount``, ``wireBackRectWidth``); that naming lives only here
and in ``serialization``.  Everything past this boundary works with the
``Face``-keyed ``FaceFeatureSet`` records.
"""

from __future__ import annotations

import math
from typing import Any

from .models import (
    FACES, Face, FaceFeatureSet, ParameterSet, StandoffSettings,
    VentSettings, WireCutoutSettings, WireProfile,
)


# Flat key -> ParameterSet attribute for the scalar box fields.
BOX_FIELDS: dict[str, str] = {
    "length": "length",
    "width": "width",
    "height": "height",
    "wallThickness": "wall_thickness",
    "floorThickness": "floor_thickness",
    "lidThickness": "lid_thickness",
    "cornerRadius": "corner_radius",
    "lipHeight": "lip_height",
    "fitTolerance": "fit_tolerance",
    "postDiameter": "post_diameter",
    "screwHoleDiameter": "screw_hole_diameter",
}

STANDOFF_FIELDS: dict[str, str] = {
    "standoffHeight": "height",
    "standoffDiameter": "diameter",
    "standoffHoleDiameter": "hole_diameter",
    "standoffSpacingX": "spacing_x",
    "standoffSpacingY": "spacing_y",
}


def face_keys(face: Face) -> dict[str, str]:
    """Flat keys for one face, keyed by a short role name."""
    s = face.label
    return {
        "edit": f"faceEdit{s}",
        "vent_enabled": f"vent{s}Enabled",
        "vent_count": f"vent{s}Count",
        "vent_width": f"vent{s}Width",
        "vent_spacing": f"vent{s}Spacing",
        "wire_enabled": f"wire{s}",
        "wire_profile": f"wire{s}Profile",
        "wire_round_diameter": f"wire{s}RoundDiameter",
        "wire_rect_width": f"wire{s}RectWidth",
        "wire_rect_height": f"wire{s}RectHeight",
        "wire_offset_h": f"wire{s}OffsetH",
        "wire_offset_v": f"wire{s}OffsetV",
    }


def flat_keys() -> list[str]:
    """Every flat key of the current schema, in a stable order."""
    keys = list(BOX_FIELDS)
    keys += ["countersink", "enableCenteredStandoffs"]
    keys += list(STANDOFF_FIELDS)
    for face in FACES:
        keys += list(face_keys(face).values())
    return keys


# ── coercion helpers ───────────────────────────────────────────────


def to_number(value: Any) -> float:
    """Best-effort float conversion; anything unparseable becomes NaN.

    Derivations never raise on bad input; the validator reports
    non-finite values instead.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if value is None:
        return math.nan
    if isinstance(value, str) and not value.strip():
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def to_bool(value: Any) -> bool:
    """Checkbox-style truthiness ("on", "true", 1, True)."""
    if isinstance(value, str):
        return value.strip().lower() in ("on", "true", "1", "yes")
    return bool(value)


def round_half_up(value: float) -> float:
    """Round to the nearest integer; halves round toward +inf."""
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def to_count(value: Any) -> int:
    """Vent counts are whole numbers; non-finite input counts as 0."""
    n = round_half_up(to_number(value))
    if not math.isfinite(n):
        return 0
    return int(n)


def to_profile(value: Any) -> WireProfile:
    try:
        return WireProfile(str(value or ""))
    except ValueError:
        return WireProfile.RECT


# ── public API ─────────────────────────────────────────────────────


def parse_params(data: dict, base: ParameterSet | None = None) -> ParameterSet:
    """Parse a flat dict into a ParameterSet.

    Keys missing from *data* take their value from *base* (the ESP32
    default preset when omitted).  Unknown keys are ignored.
    """
    if base is None:
        from boxgen.config.defaults import default_params
        base = default_params()

    box = {
        attr: to_number(data[key]) if key in data else getattr(base, attr)
        for key, attr in BOX_FIELDS.items()
    }

    countersink = to_bool(data["countersink"]) if "countersink" in data else base.countersink

    so = base.standoffs
    standoffs = StandoffSettings(
        enabled=(
            to_bool(data["enableCenteredStandoffs"])
            if "enableCenteredStandoffs" in data else so.enabled
        ),
        **{
            attr: to_number(data[key]) if key in data else getattr(so, attr)
            for key, attr in STANDOFF_FIELDS.items()
        },
    )

    faces = {face: _parse_face(data, face, base.face(face)) for face in FACES}

    return ParameterSet(
        countersink=countersink,
        standoffs=standoffs,
        faces=faces,
        **box,
    )


def _parse_face(data: dict, face: Face, base: FaceFeatureSet) -> FaceFeatureSet:
    k = face_keys(face)

    def num(role: str, fallback: float) -> float:
        return to_number(data[k[role]]) if k[role] in data else fallback

    def flag(role: str, fallback: bool) -> bool:
        return to_bool(data[k[role]]) if k[role] in data else fallback

    vents = VentSettings(
        enabled=flag("vent_enabled", base.vents.enabled),
        count=to_count(data[k["vent_count"]]) if k["vent_count"] in data else base.vents.count,
        slot_width=num("vent_width", base.vents.slot_width),
        slot_spacing=num("vent_spacing", base.vents.slot_spacing),
    )
    wire = WireCutoutSettings(
        enabled=flag("wire_enabled", base.wire.enabled),
        profile=(
            to_profile(data[k["wire_profile"]])
            if k["wire_profile"] in data else base.wire.profile
        ),
        round_diameter=num("wire_round_diameter", base.wire.round_diameter),
        rect_width=num("wire_rect_width", base.wire.rect_width),
        rect_height=num("wire_rect_height", base.wire.rect_height),
        offset_h=num("wire_offset_h", base.wire.offset_h),
        offset_v=num("wire_offset_v", base.wire.offset_v),
    )
    return FaceFeatureSet(
        edit_enabled=flag("edit", base.edit_enabled),
        vents=vents,
        wire=wire,
    )
