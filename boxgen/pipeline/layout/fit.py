"""Fit resolver — corner-post placement, lip clearance, and feasibility.

The posts sit in the four corners of the cavity.  Each may sink partly
into the side walls; the rounded inner corner and the countersink head
on the lid both push it further inward.  If the required inset does not
fit the footprint it is clamped and the result is marked infeasible.
"""

from __future__ import annotations

import math

from boxgen.pipeline.config import PRINT_RULES, PrintRules
from boxgen.pipeline.params.models import ParameterSet
from .models import FitResult, Point2


def _chord_inset(corner_radius: float, clear_radius: float) -> float:
    """Inset (from both edges) that keeps a circle of *clear_radius*
    inside a rounded corner of *corner_radius*."""
    return corner_radius - (corner_radius - clear_radius) / math.sqrt(2)


def mirror_points(x: float, y: float) -> tuple[Point2, Point2, Point2, Point2]:
    """The four points (±x, ±y)."""
    return (
        Point2(-x, -y),
        Point2(-x, y),
        Point2(x, -y),
        Point2(x, y),
    )


def derive_fit(params: ParameterSet, rules: PrintRules = PRINT_RULES) -> FitResult:
    """Derive corner-post placement and lid clearance from *params*.

    Never raises: nonsensical inputs give a best-effort (possibly
    infeasible) result for the validator to judge.
    """
    fit_tolerance = params.fit_tolerance
    wall = params.wall_thickness
    post_radius = params.post_diameter / 2

    inner_radius = max(
        0.0,
        min(
            min(params.inner_length, params.inner_width) / 2 - rules.corner_radius_epsilon_mm,
            params.corner_radius - wall,
        ),
    )

    wall_embed = min(wall * rules.post_wall_embed_ratio, post_radius * rules.post_radius_embed_ratio)
    inset_min = wall + post_radius - wall_embed

    # Rounded inner corner: the post must stay clear of the arc.
    if inner_radius > post_radius:
        inset_min = max(inset_min, wall + _chord_inset(inner_radius, post_radius))

    # Countersink head on the lid must clear the outer rounded corner.
    head_clear = rules.countersink_head_radius(params.screw_hole_diameter) + rules.countersink_safety_mm
    sink_floor = head_clear
    outer_radius = max(0.0, params.corner_radius)
    if outer_radius > head_clear:
        sink_floor = max(sink_floor, _chord_inset(outer_radius, head_clear))
    inset_min = max(inset_min, sink_floor)

    max_inset = min(params.length, params.width) / 2 - post_radius
    feasible = max_inset >= inset_min
    post_inset = inset_min if feasible else max_inset

    x = params.length / 2 - post_inset
    y = params.width / 2 - post_inset

    return FitResult(
        fit_tolerance=fit_tolerance,
        lip_clearance=fit_tolerance,
        post_inset=post_inset,
        feasible=feasible,
        post_centers=mirror_points(x, y),
    )


def lip_dimensions(params: ParameterSet, fit: FitResult) -> tuple[float, float]:
    """Outer length/width of the lid lip ring."""
    return (
        params.length - 2 * params.wall_thickness - 2 * fit.lip_clearance,
        params.width - 2 * params.wall_thickness - 2 * fit.lip_clearance,
    )
