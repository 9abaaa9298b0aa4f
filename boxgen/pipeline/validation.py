"""Parameter validation — the single gate in front of geometry construction.

``validate_params`` runs every check on one ParameterSet snapshot and
sorts each violation into a hard error (blocks generation) or a soft
warning (generation proceeds).  It never raises: the derivations it calls
return best-effort numbers for any input, and all judgment lives here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from shapely.geometry import Point, box as shapely_box

from boxgen.pipeline.config import PRINT_RULES, PrintRules
from boxgen.pipeline.layout import (
    derive_centered_standoff_centers,
    derive_fit,
    derive_wire_cutout_spec,
    dropped_slot_faces,
    lip_dimensions,
    vent_stack_bounds,
)
from boxgen.pipeline.params.models import FACES, Face, ParameterSet, WireProfile
from boxgen.pipeline.params.parsing import BOX_FIELDS, STANDOFF_FIELDS


@dataclass
class ValidationResult:
    """Outcome of one validation run.  *valid* holds iff *errors* is empty."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def validate_params(params: ParameterSet, rules: PrintRules = PRINT_RULES) -> ValidationResult:
    """Validate *params*.  Check order only affects message order."""
    result = ValidationResult()
    errors, warnings = result.errors, result.warnings

    # ── Numeric sanity ──
    for key, attr in BOX_FIELDS.items():
        if not math.isfinite(getattr(params, attr)):
            errors.append(f"{key} must be a finite number.")
    if errors:
        # Every later check would only repeat the same problem.
        return result
    if params.lid_thickness <= 0:
        errors.append("Lid thickness must be greater than 0 mm.")
    if params.post_diameter <= 0:
        errors.append("Post diameter must be greater than 0 mm.")
    if params.screw_hole_diameter <= 0:
        errors.append("Screw hole diameter must be greater than 0 mm.")
    if params.lip_height <= 0:
        errors.append("Lip height must be greater than 0 mm.")
    if params.wall_thickness <= 0:
        errors.append("Wall thickness must be greater than 0 mm.")
    if params.floor_thickness <= 0:
        errors.append("Floor thickness must be greater than 0 mm.")

    # ── 1. Interior cavity ──
    if params.inner_length <= 1 or params.inner_width <= 1 or params.inner_height <= 2:
        errors.append(
            "Interior cavity is too small. Increase dimensions or reduce wall/floor thickness."
        )

    # ── 2. Corner radius ──
    max_corner = min(params.length, params.width) / 2 - 0.5
    if params.corner_radius > max_corner:
        errors.append(
            f"Corner radius is too large. Maximum is {max_corner:.2f} mm for this footprint."
        )

    # ── 3. Lip height ──
    if params.lip_height >= params.inner_height - 0.6:
        errors.append("Lip height is too tall for the current interior height.")

    # ── 4. Screw hole vs post ──
    if params.screw_hole_diameter >= params.post_diameter:
        errors.append("Screw hole diameter must be smaller than post diameter.")

    # ── 5. Fit tolerance ──
    _check_fit_tolerance(params.fit_tolerance, rules, errors, warnings)

    # ── 6. Post fit and lid lip ──
    fit = derive_fit(params, rules)
    if not fit.feasible:
        errors.append(
            "Corner posts do not fit this footprint. Reduce post diameter, "
            "screw hole diameter or corner radius, or enlarge the box."
        )
    if fit.lip_clearance >= params.wall_thickness - 0.2:
        errors.append("Lip clearance is too large compared with wall thickness.")
    lip_length, lip_width = lip_dimensions(params, fit)
    if lip_length <= 2 or lip_width <= 2:
        errors.append("Lid lip ring collapsed. Reduce wall thickness or fit tolerance.")

    # ── 7. Post height ──
    if params.height - params.floor_thickness < rules.min_post_height_mm:
        errors.append(
            f"Posts would be shorter than {rules.min_post_height_mm:.0f} mm. "
            "Increase height or reduce floor thickness."
        )

    # ── 8. Centred standoffs ──
    if params.standoffs.enabled:
        _check_standoffs(params, fit.post_centers, rules, errors, warnings)

    # ── 9. Printability advisories ──
    if params.wall_thickness < rules.min_wall_mm:
        warnings.append(
            f"Wall thickness below {rules.min_wall_mm:.1f} mm may be fragile on FDM prints."
        )
    if params.floor_thickness < rules.min_floor_mm:
        warnings.append(
            f"Floor thickness below {rules.min_floor_mm:.1f} mm may flex under mounted components."
        )

    # ── 10. Per-face features ──
    vent_faces = []
    vents_ok = True
    for face in FACES:
        fs = params.face(face)
        if not fs.edit_enabled:
            continue
        if fs.vents.enabled:
            vent_faces.append(face)
            vents_ok = _check_vents(params, face, rules, errors, warnings) and vents_ok
        if fs.wire.enabled:
            _check_wire(params, face, rules, errors)

    # ── 11. Auto-trimmed vent slots ──
    # Only once every vent block is sound: the trimmer lists each slot.
    trimmed = dropped_slot_faces(params, rules.min_web_mm, vent_faces) if vents_ok else []
    if trimmed:
        names = ", ".join(face.label for face in trimmed)
        warnings.append(
            f"Vent slots overlapping wire cutouts were removed automatically on: {names}."
        )

    return result


# ── individual checks ──────────────────────────────────────────────


def _check_fit_tolerance(
    tol: float,
    rules: PrintRules,
    errors: list[str],
    warnings: list[str],
) -> None:
    hard_lo, hard_hi = rules.fit_tolerance_hard_mm
    soft_lo, soft_hi = rules.fit_tolerance_soft_mm
    if not math.isfinite(tol) or tol <= 0:
        errors.append("Fit tolerance must be a positive number.")
    elif tol < hard_lo or tol > hard_hi:
        errors.append(
            f"Fit tolerance must be between {hard_lo:.2f} and {hard_hi:.2f} mm."
        )
    elif tol < soft_lo or tol > soft_hi:
        warnings.append(
            f"Fit tolerance outside {soft_lo:.2f}–{soft_hi:.2f} mm may give a "
            "loose or binding lid."
        )


def _check_standoffs(
    params: ParameterSet,
    post_centers,
    rules: PrintRules,
    errors: list[str],
    warnings: list[str],
) -> None:
    so = params.standoffs
    for key, attr in STANDOFF_FIELDS.items():
        if not math.isfinite(getattr(so, attr)):
            errors.append(f"{key} must be a finite number.")
            return

    if so.height <= 0 or so.diameter <= 0:
        errors.append("Standoff height and diameter must be greater than 0 mm.")
        return
    if so.hole_diameter < 0 or so.hole_diameter >= so.diameter:
        errors.append("Standoff hole diameter must be at least 0 and smaller than the standoff diameter.")
    if so.height < 2 or so.height >= params.inner_height - 1:
        errors.append("Standoff height must be at least 2 mm and below the interior height minus 1 mm.")

    radius = so.diameter / 2
    cavity = _inner_footprint(params).buffer(-rules.standoff_margin_mm)
    centers = derive_centered_standoff_centers(params)
    outside = cavity.is_empty or any(
        not cavity.contains(Point(c.x, c.y).buffer(radius)) for c in centers
    )
    if outside:
        errors.append("Centered standoffs do not fit inside the interior. Reduce standoff spacing or diameter.")
    else:
        post_radius = params.post_diameter / 2
        if any(
            math.hypot(c.x - p.x, c.y - p.y) < radius + post_radius
            for c in centers for p in post_centers
        ):
            warnings.append("Centered standoffs overlap the corner posts.")

    if 0 <= so.hole_diameter < so.diameter and (so.diameter - so.hole_diameter) / 2 < rules.min_standoff_wall_mm:
        warnings.append(
            f"Standoff wall below {rules.min_standoff_wall_mm:.1f} mm may crack when tightening screws."
        )


def _inner_footprint(params: ParameterSet):
    """Inner cavity footprint as a rounded rectangle (shapely polygon)."""
    hl, hw = params.inner_length / 2, params.inner_width / 2
    if hl <= 0 or hw <= 0:
        return shapely_box(0, 0, 0, 0)
    r = max(0.0, min(min(hl, hw) - 0.01, params.corner_radius - params.wall_thickness))
    if r <= 0:
        return shapely_box(-hl, -hw, hl, hw)
    return shapely_box(-hl + r, -hw + r, hl - r, hw - r).buffer(r)


def _check_vents(
    params: ParameterSet,
    face: Face,
    rules: PrintRules,
    errors: list[str],
    warnings: list[str],
) -> bool:
    """Check one face's vent block.  Returns False if it added an error."""
    vents = params.face(face).vents
    name = face.label
    n_errors = len(errors)
    min_width = rules.min_vent_slot_width_mm
    min_spacing = rules.min_vent_slot_spacing_mm

    if vents.count < 1:
        errors.append(f"{name} vents: count must be at least 1.")
    if not math.isfinite(vents.slot_width) or vents.slot_width < min_width:
        errors.append(f"{name} vents: slot width must be at least {min_width:.1f} mm.")
    if not math.isfinite(vents.slot_spacing) or vents.slot_spacing < min_spacing:
        errors.append(f"{name} vents: slot spacing must be at least {min_spacing:.1f} mm.")
    if math.isfinite(vents.slot_spacing) and vents.slot_spacing < 1:
        warnings.append(f"{name} vents: spacing below 1.0 mm can weaken the side wall.")

    # Closed form: the slots themselves are never listed here.
    bounds = vent_stack_bounds(params, face, rules)
    if bounds is not None:
        stack_bottom, stack_top = bounds
        margin = rules.vent_stack_margin_mm
        if not (stack_bottom > params.floor_top_z + margin and stack_top < params.height / 2 - margin):
            errors.append(f"{name} vents: slot stack is too tall for this side wall.")
    return len(errors) == n_errors


def _check_wire(
    params: ParameterSet,
    face: Face,
    rules: PrintRules,
    errors: list[str],
) -> None:
    wire = params.face(face).wire
    spec = derive_wire_cutout_spec(params, face, rules)
    name = face.label
    min_web = rules.min_web_mm

    if not (math.isfinite(spec.width) and math.isfinite(spec.height)) or spec.width <= 0 or spec.height <= 0:
        errors.append(f"{name} wire cutout: width and height must be greater than 0 mm.")
        return
    if wire.profile is WireProfile.ROUND:
        if spec.width < 2:
            errors.append(f"{name} wire cutout: round diameter must be at least 2.0 mm.")
    else:
        if spec.width < 3:
            errors.append(f"{name} wire cutout: rectangle width must be at least 3.0 mm.")
        if spec.height < 1.5:
            errors.append(f"{name} wire cutout: rectangle height must be at least 1.5 mm.")

    if not (math.isfinite(spec.offset_h) and math.isfinite(spec.offset_v)):
        errors.append(f"{name} wire cutout: offsets must be finite numbers.")
        return

    max_offset = spec.horizontal_span / 2 - spec.width / 2 - min_web
    if abs(spec.offset_h) > max_offset:
        errors.append(
            f"{name} wire cutout: horizontal offset must stay within "
            f"±{max(0.0, max_offset):.2f} mm of center."
        )
    if spec.cut_bottom < params.floor_top_z + min_web or spec.cut_top > params.height / 2 - min_web:
        errors.append(f"{name} wire cutout: vertical position runs into the floor or top edge.")
