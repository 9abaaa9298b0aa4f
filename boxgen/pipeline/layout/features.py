"""Feature layout — vent slot heights, wire cutout placement, standoffs.

Coordinates: the box is centred on the origin.  X runs along the length
(right face at +X), Y along the width (front face at +Y), Z up with the
body spanning ``-height/2 .. height/2``.
"""

from __future__ import annotations

import math

from boxgen.pipeline.config import PRINT_RULES, PrintRules
from boxgen.pipeline.params.models import Face, ParameterSet, WireProfile
from .fit import mirror_points
from .models import Point2, Point3, WireCutoutSpec


def vent_stack_bounds(
    params: ParameterSet,
    face: Face | str,
    rules: PrintRules = PRINT_RULES,
) -> tuple[float, float] | None:
    """Bottom and top Z of the vent slot stack on *face*.

    The stack (``count·width + (count−1)·spacing``) is centred inside the
    usable wall band, which starts ``vent_band_floor_gap_mm`` above the
    floor and is ``height − floor − vent_band_reserve_mm`` tall.  Computed
    in closed form, so any slot count is cheap.  ``None`` when there are
    no slots or width/spacing are not finite.
    """
    vents = params.face(face).vents
    count = max(0, vents.count)
    width = vents.slot_width
    spacing = vents.slot_spacing
    if count == 0 or not math.isfinite(width) or not math.isfinite(spacing):
        return None

    usable_height = params.height - params.floor_thickness - rules.vent_band_reserve_mm
    stack_height = count * width + (count - 1) * spacing
    start_z = (
        params.floor_top_z
        + rules.vent_band_floor_gap_mm
        + (usable_height - stack_height) / 2
    )
    return start_z, start_z + stack_height


def vent_stack_fits(
    params: ParameterSet,
    face: Face | str,
    rules: PrintRules = PRINT_RULES,
) -> bool:
    """True when the vent stack on *face* is made of printable slots and
    stays strictly between the floor top and the rim, ``vent_stack_margin_mm``
    clear of both."""
    vents = params.face(face).vents
    bounds = vent_stack_bounds(params, face, rules)
    if bounds is None:
        return False
    if vents.slot_width < rules.min_vent_slot_width_mm or vents.slot_spacing < rules.min_vent_slot_spacing_mm:
        return False
    bottom, top = bounds
    margin = rules.vent_stack_margin_mm
    return bottom > params.floor_top_z + margin and top < params.height / 2 - margin


def derive_vent_slot_centers_z(
    params: ParameterSet,
    face: Face | str,
    rules: PrintRules = PRINT_RULES,
) -> list[float]:
    """Z centres of the vent slots on *face*, bottom to top.

    Slots are ``width + spacing`` apart, starting at the bottom of
    :func:`vent_stack_bounds`.  Returns an empty list when there are no
    slots or width/spacing are not finite.
    """
    bounds = vent_stack_bounds(params, face, rules)
    if bounds is None:
        return []
    vents = params.face(face).vents
    pitch = vents.slot_width + vents.slot_spacing
    half = vents.slot_width / 2
    return [bounds[0] + i * pitch + half for i in range(vents.count)]


def derive_wire_cutout_spec(
    params: ParameterSet,
    face: Face | str,
    rules: PrintRules = PRINT_RULES,
) -> WireCutoutSpec:
    """Bounding box and position of the wire cutout on *face*.

    Front/back cutouts sit on the wall centreline at ``y = ±(width/2 −
    wall/2)`` (front positive) and take *offset_h* as X.  Left/right
    cutouts sit at ``x = ±(length/2 − wall/2)`` (right positive) and take
    *offset_h* as Y.
    """
    face = Face(face)
    fs = params.face(face)
    wire = fs.wire

    if wire.profile is WireProfile.ROUND:
        width = height = wire.round_diameter
    else:
        width, height = wire.rect_width, wire.rect_height

    bottom_z = params.floor_top_z
    base_z = max(
        bottom_z + rules.wire_min_floor_gap_mm,
        bottom_z + params.wall_thickness + height / 2 + rules.wire_center_lift_mm,
    )
    z = base_z + wire.offset_v

    half_wall = params.wall_thickness / 2
    if face is Face.FRONT:
        y = params.width / 2 - half_wall
    elif face is Face.BACK:
        y = -params.width / 2 + half_wall
    else:
        y = wire.offset_h
    if face is Face.RIGHT:
        x = params.length / 2 - half_wall
    elif face is Face.LEFT:
        x = -params.length / 2 + half_wall
    else:
        x = wire.offset_h

    return WireCutoutSpec(
        face=face,
        enabled=fs.wire_active,
        profile=wire.profile,
        width=width,
        height=height,
        offset_h=wire.offset_h,
        offset_v=wire.offset_v,
        center=Point3(x, y, z),
        is_front_back=face.is_front_back,
        horizontal_span=params.length if face.is_front_back else params.width,
        cut_bottom=z - height / 2,
        cut_top=z + height / 2,
    )


def derive_centered_standoff_centers(
    params: ParameterSet,
) -> tuple[Point2, Point2, Point2, Point2]:
    """Centres of the four centred standoffs (±spacing/2), independent of
    the corner-post fit."""
    so = params.standoffs
    return mirror_points(so.spacing_x / 2, so.spacing_y / 2)
