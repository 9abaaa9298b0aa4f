"""Parameter serialization — convert a ParameterSet to a flat JSON-safe dict."""

from __future__ import annotations

from .models import FACES, ParameterSet
from .parsing import BOX_FIELDS, STANDOFF_FIELDS, face_keys


def params_to_dict(params: ParameterSet) -> dict:
    """Convert a ParameterSet to the flat key/value form used by presets."""
    out: dict = {key: getattr(params, attr) for key, attr in BOX_FIELDS.items()}
    out["countersink"] = params.countersink
    out["enableCenteredStandoffs"] = params.standoffs.enabled
    out.update({
        key: getattr(params.standoffs, attr)
        for key, attr in STANDOFF_FIELDS.items()
    })
    for face in FACES:
        fs = params.face(face)
        k = face_keys(face)
        out.update({
            k["edit"]: fs.edit_enabled,
            k["vent_enabled"]: fs.vents.enabled,
            k["vent_count"]: fs.vents.count,
            k["vent_width"]: fs.vents.slot_width,
            k["vent_spacing"]: fs.vents.slot_spacing,
            k["wire_enabled"]: fs.wire.enabled,
            k["wire_profile"]: fs.wire.profile.value,
            k["wire_round_diameter"]: fs.wire.round_diameter,
            k["wire_rect_width"]: fs.wire.rect_width,
            k["wire_rect_height"]: fs.wire.rect_height,
            k["wire_offset_h"]: fs.wire.offset_h,
            k["wire_offset_v"]: fs.wire.offset_v,
        })
    return out
