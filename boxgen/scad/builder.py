"""
Geometry builder — body and lid solids from a validated ParameterSet.

Every position and size comes verbatim from the layout derivations
(``boxgen.pipeline.layout``); this module only turns them into CSG calls.
Callers must validate first (``validate_params``).  Any failure while
assembling the tree surfaces as a single ``GenerationError`` and no
partial assembly is returned.

Body cross-section (box centred on the origin):
  −h/2 .. −h/2 + floor     solid floor
  floor .. h/2             side walls, corner posts, standoffs, cuts
Lid: plate of lid_thickness centred on z = 0 with the lip ring hanging
below it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from boxgen.pipeline.config import PRINT_RULES
from boxgen.pipeline.layout import (
    FitResult,
    derive_centered_standoff_centers,
    derive_fit,
    derive_vent_slot_centers_z,
    derive_wire_cutout_spec,
    lip_dimensions,
    trim_vent_slots,
)
from boxgen.pipeline.params.models import FACES, Face, ParameterSet, WireProfile
from .csg import (
    Solid, check_finite, cone, cuboid, cylinder, rotate, rounded_prism,
    safe_radius, subtract, translate, union,
)

log = logging.getLogger(__name__)

# Cut solids overshoot the wall by this much on each side.
_CUT_OVERSHOOT_MM = 1.0


class GenerationError(Exception):
    """Raised when solid construction fails for a parameter set that
    passed validation (i.e. a validator gap, not bad user input)."""

    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"Geometry generation failed in {stage}: {reason}")


@dataclass(frozen=True)
class Assembly:
    """Body + lid, plus translated/rotated copies for side-by-side preview."""

    body: Solid
    lid: Solid
    preview_body: Solid
    preview_lid: Solid


# ── body ────────────────────────────────────────────────────────────


def make_rounded_shell(params: ParameterSet) -> Solid:
    """Outer rounded prism minus the inner cavity prism (open top)."""
    outer = rounded_prism(params.length, params.width, params.height, params.corner_radius, label="outer shell")
    inner_l, inner_w = params.inner_length, params.inner_width
    inner_h = params.inner_height
    inner_r = safe_radius(inner_l, inner_w, params.corner_radius - params.wall_thickness)
    # Overshoot the top so the cavity opens cleanly.
    inner = translate(
        (0, 0, params.floor_thickness / 2 + _CUT_OVERSHOOT_MM / 2),
        rounded_prism(inner_l, inner_w, inner_h + _CUT_OVERSHOOT_MM, inner_r, label="cavity"),
    )
    return subtract(outer, inner)


def make_posts(params: ParameterSet, fit: FitResult) -> Solid:
    """Four corner posts braced into both adjacent walls, with screw bores."""
    post_radius = params.post_diameter / 2
    post_height = max(4.0, params.height - params.floor_thickness - 2)
    bottom_z = params.floor_top_z
    post_center_z = bottom_z + post_height / 2
    hole_height = max(2.0, post_height - 1)
    hole_center_z = bottom_z + 1 + hole_height / 2
    brace_w = post_radius

    posts: list[Solid] = []
    bores: list[Solid] = []
    for c in fit.post_centers:
        sx = math.copysign(1.0, c.x)
        sy = math.copysign(1.0, c.y)
        posts.append(translate(
            (c.x, c.y, post_center_z),
            cylinder(post_radius, post_height, segments=36, label="corner post"),
        ))
        # Brace from the post centre into the nearest X and Y walls.
        reach_x = params.length / 2 - params.wall_thickness / 2 - abs(c.x)
        reach_y = params.width / 2 - params.wall_thickness / 2 - abs(c.y)
        if reach_x > 0:
            posts.append(translate(
                (c.x + sx * reach_x / 2, c.y, post_center_z),
                cuboid((reach_x, brace_w, post_height), label="post brace"),
            ))
        if reach_y > 0:
            posts.append(translate(
                (c.x, c.y + sy * reach_y / 2, post_center_z),
                cuboid((brace_w, reach_y, post_height), label="post brace"),
            ))
        bores.append(translate(
            (c.x, c.y, hole_center_z),
            cylinder(params.screw_hole_diameter / 2, hole_height + 0.2, label="screw bore"),
        ))

    return subtract(union(*posts), *bores)


def make_centered_standoffs(params: ParameterSet) -> Solid:
    """Four centred PCB standoffs standing on the floor, optionally bored."""
    so = params.standoffs
    center_z = params.floor_top_z + so.height / 2
    parts: list[Solid] = []
    bores: list[Solid] = []
    for c in derive_centered_standoff_centers(params):
        parts.append(translate(
            (c.x, c.y, center_z),
            cylinder(so.diameter / 2, so.height, label="standoff"),
        ))
        if so.hole_diameter > 0:
            bores.append(translate(
                (c.x, c.y, center_z + 0.1),
                cylinder(so.hole_diameter / 2, so.height + 0.2, label="standoff bore"),
            ))
    return subtract(union(*parts), *bores)


def _wall_position(params: ParameterSet, face: Face) -> float:
    """Coordinate of the wall centreline across the face normal."""
    half_wall = params.wall_thickness / 2
    return {
        Face.FRONT: params.width / 2 - half_wall,
        Face.BACK: -params.width / 2 + half_wall,
        Face.RIGHT: params.length / 2 - half_wall,
        Face.LEFT: -params.length / 2 + half_wall,
    }[face]


def make_vent_cuts(params: ParameterSet, face: Face, kept: list[int]) -> list[Solid]:
    """Slot cuboids for the surviving vent indices on *face*."""
    centers = derive_vent_slot_centers_z(params, face)
    vents = params.face(face).vents
    depth = params.wall_thickness + 2 * _CUT_OVERSHOOT_MM
    wall = _wall_position(params, face)
    span = params.length if face.is_front_back else params.width
    slot_length = max(10.0, span - 20)

    cuts = []
    for i in kept:
        z = centers[i]
        if face.is_front_back:
            cuts.append(translate((0, wall, z), cuboid((slot_length, depth, vents.slot_width), label=f"vent {face.value} {i}")))
        else:
            cuts.append(translate((wall, 0, z), cuboid((depth, slot_length, vents.slot_width), label=f"vent {face.value} {i}")))
    return cuts


def make_wire_cut(params: ParameterSet, face: Face) -> Solid:
    """Through-wall cut for the wire cutout on *face*."""
    spec = derive_wire_cutout_spec(params, face)
    depth = params.wall_thickness + 2 * _CUT_OVERSHOOT_MM
    c = spec.center
    label = f"wire {face.value}"
    if spec.profile is WireProfile.ROUND:
        bore = cylinder(spec.width / 2, depth, label=label)
        # Turn the Z-axis bore to run across the wall.
        axis = (90, 0, 0) if spec.is_front_back else (0, 90, 0)
        return translate((c.x, c.y, c.z), rotate(axis, bore))
    if spec.is_front_back:
        return translate((c.x, c.y, c.z), cuboid((spec.width, depth, spec.height), label=label))
    return translate((c.x, c.y, c.z), cuboid((depth, spec.width, spec.height), label=label))


def build_body(params: ParameterSet) -> Solid:
    fit = derive_fit(params)
    body = union(make_rounded_shell(params), make_posts(params, fit))
    if params.standoffs.enabled:
        body = union(body, make_centered_standoffs(params))

    kept = trim_vent_slots(params)
    cuts: list[Solid] = []
    for face in FACES:
        fs = params.face(face)
        if fs.vents_active:
            cuts += make_vent_cuts(params, face, kept[face])
        if fs.wire_active:
            cuts.append(make_wire_cut(params, face))
    log.debug("Body: %d wall cut(s)", len(cuts))
    return subtract(body, *cuts)


# ── lid ─────────────────────────────────────────────────────────────


def make_lid_plate(params: ParameterSet) -> Solid:
    return rounded_prism(params.length, params.width, params.lid_thickness, params.corner_radius, label="lid plate")


def make_lid_lip(params: ParameterSet, fit: FitResult) -> Solid:
    """Perimeter lip ring hanging below the plate, notched at the posts."""
    lip_l, lip_w = lip_dimensions(params, fit)
    lip_h = params.lip_height
    lip_r = params.corner_radius - params.wall_thickness - fit.lip_clearance
    ring = rounded_prism(lip_l, lip_w, lip_h, lip_r, label="lip ring")

    ring_wall = params.wall_thickness
    hollow_l, hollow_w = lip_l - 2 * ring_wall, lip_w - 2 * ring_wall
    if hollow_l > 0 and hollow_w > 0:
        hollow = rounded_prism(hollow_l, hollow_w, lip_h + 2 * _CUT_OVERSHOOT_MM, lip_r - ring_wall)
        ring = subtract(ring, hollow)

    notch_r = params.post_diameter / 2 + fit.fit_tolerance
    notches = [
        translate((c.x, c.y, 0), cylinder(notch_r, lip_h + 2 * _CUT_OVERSHOOT_MM, label="post notch"))
        for c in fit.post_centers
    ]
    ring = subtract(ring, *notches)
    return translate((0, 0, -(params.lid_thickness / 2 + lip_h / 2)), ring)


def make_lid_holes(params: ParameterSet, fit: FitResult) -> list[Solid]:
    """Through-holes at the post centres, plus countersink cones."""
    hole_r = params.screw_hole_diameter / 2
    through_h = params.lid_thickness + params.lip_height + 2
    sink_depth = PRINT_RULES.countersink_depth_mm
    head_r = PRINT_RULES.countersink_head_radius(params.screw_hole_diameter)

    cuts = []
    for c in fit.post_centers:
        cuts.append(translate(
            (c.x, c.y, -params.lip_height / 2),
            cylinder(hole_r, through_h, label="lid screw hole"),
        ))
        if params.countersink:
            cuts.append(translate(
                (c.x, c.y, params.lid_thickness / 2 - sink_depth / 2),
                cone(hole_r, head_r, sink_depth, label="countersink"),
            ))
    return cuts


def build_lid(params: ParameterSet) -> Solid:
    fit = derive_fit(params)
    raw = union(make_lid_plate(params), make_lid_lip(params, fit))
    return subtract(raw, *make_lid_holes(params, fit))


# ── assembly ────────────────────────────────────────────────────────


def build_assembly(params: ParameterSet) -> Assembly:
    """Build body + lid and their preview placements.

    Raises ``GenerationError`` if anything goes wrong; the caller either
    gets a complete pair or nothing.
    """
    try:
        body = check_finite(build_body(params))
    except Exception as exc:
        raise GenerationError("body", str(exc)) from exc
    try:
        lid = check_finite(build_lid(params))
    except Exception as exc:
        raise GenerationError("lid", str(exc)) from exc

    preview_body = translate((0, 0, params.height / 2), body)
    side_offset = params.length / 2 + params.length * 0.55
    preview_lid = translate(
        (side_offset, 0, params.lid_thickness / 2),
        rotate((180, 0, 0), lid),
    )
    log.info("Built assembly %.1f x %.1f x %.1f mm", params.length, params.width, params.height)
    return Assembly(body=body, lid=lid, preview_body=preview_body, preview_lid=preview_lid)
