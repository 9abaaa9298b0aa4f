"""Layout report — every derivation for one snapshot as a JSON-safe dict.

Non-finite numbers (from unparseable input) are reported as ``None`` so
the result can always be serialized.
"""

from __future__ import annotations

import math

from boxgen.pipeline.config import PRINT_RULES, PrintRules
from boxgen.pipeline.params.models import FACES, ParameterSet
from .features import (
    derive_centered_standoff_centers,
    derive_vent_slot_centers_z,
    derive_wire_cutout_spec,
    vent_stack_bounds,
    vent_stack_fits,
)
from .fit import derive_fit, lip_dimensions
from .trim import trim_vent_slots


def _n(v: float) -> float | None:
    return round(v, 4) if math.isfinite(v) else None


def _pt(p) -> list[float | None]:
    coords = (p.x, p.y, p.z) if hasattr(p, "z") else (p.x, p.y)
    return [_n(v) for v in coords]


def derive_report(params: ParameterSet, rules: PrintRules = PRINT_RULES) -> dict:
    fit = derive_fit(params, rules)
    lip_l, lip_w = lip_dimensions(params, fit)
    # Slots are only listed for stacks that fit the wall; an oversized
    # count is reported by its bounds alone.
    listed = [face for face in FACES if vent_stack_fits(params, face, rules)]
    kept = trim_vent_slots(params, rules.min_web_mm, listed)

    faces = {}
    for face in FACES:
        fs = params.face(face)
        entry: dict = {"edit_enabled": fs.edit_enabled}
        if fs.vents_active:
            bounds = vent_stack_bounds(params, face, rules)
            entry["vent_stack"] = [_n(v) for v in bounds] if bounds else None
            entry["vent_centers_z"] = (
                [_n(z) for z in derive_vent_slot_centers_z(params, face, rules)]
                if face in listed else []
            )
            entry["vent_kept"] = kept[face]
        if fs.wire_active:
            spec = derive_wire_cutout_spec(params, face, rules)
            entry["wire"] = {
                "profile": spec.profile.value,
                "width": _n(spec.width),
                "height": _n(spec.height),
                "center": _pt(spec.center),
                "cut_bottom": _n(spec.cut_bottom),
                "cut_top": _n(spec.cut_top),
            }
        faces[face.value] = entry

    report = {
        "fit": {
            "fit_tolerance": _n(fit.fit_tolerance),
            "lip_clearance": _n(fit.lip_clearance),
            "post_inset": _n(fit.post_inset),
            "feasible": fit.feasible,
            "post_centers": [_pt(p) for p in fit.post_centers],
            "lip_size": [_n(lip_l), _n(lip_w)],
        },
        "faces": faces,
    }
    if params.standoffs.enabled:
        report["standoff_centers"] = [_pt(p) for p in derive_centered_standoff_centers(params)]
    return report
