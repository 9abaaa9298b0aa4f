"""Shared manufacturability constants for the enclosure pipeline.

These values describe what an FDM printer can reliably produce: minimum
material webs between cuts, clearance bands on the side walls, and the
accepted range for the lid fit tolerance.  The layout derivations, the
validator and the geometry builder all read from this single source of
truth, so a change here keeps every stage in sync.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PrintRules:
    """Physical design rules for printed enclosures.

    All distances are in millimetres.
    """

    min_web_mm: float = 1.2
    """Minimum solid wall left between two adjacent cut features."""

    vent_band_reserve_mm: float = 8.0
    """Wall height kept free of vent slots (split top/bottom)."""

    vent_band_floor_gap_mm: float = 4.0
    """Gap between the floor and the first vent slot band."""

    vent_stack_margin_mm: float = 0.2
    """Clearance a vent slot stack keeps from the floor top and the rim."""

    min_vent_slot_width_mm: float = 1.0
    """Narrowest vent slot that prints as an opening."""

    min_vent_slot_spacing_mm: float = 0.8
    """Thinnest bar left between two vent slots."""

    wire_min_floor_gap_mm: float = 5.0
    """Lowest wire-cutout centre, measured from the top of the floor."""

    wire_center_lift_mm: float = 1.0
    """Extra lift applied on top of wall thickness + half cutout height."""

    countersink_head_factor: float = 1.9
    """Countersink head diameter as a multiple of the screw hole diameter."""

    countersink_safety_mm: float = 0.2
    """Clearance kept between a countersink head and the outer corner."""

    countersink_depth_mm: float = 1.6
    """Depth of the countersink cone cut into the lid plate."""

    post_wall_embed_ratio: float = 0.8
    """Maximum share of the wall a corner post may sink into."""

    post_radius_embed_ratio: float = 0.6
    """Maximum share of the post radius that may sink into the wall."""

    corner_radius_epsilon_mm: float = 0.01
    """Keeps a rounded corner strictly smaller than half the footprint."""

    fit_tolerance_hard_mm: tuple[float, float] = (0.10, 0.60)
    """Fit tolerance outside this range is rejected."""

    fit_tolerance_soft_mm: tuple[float, float] = (0.15, 0.40)
    """Fit tolerance outside this range (but inside the hard one) warns."""

    min_wall_mm: float = 1.6
    """Walls thinner than this print, but are fragile."""

    min_floor_mm: float = 2.0
    """Floors thinner than this flex under mounted boards."""

    min_post_height_mm: float = 4.0
    """Shortest corner post that still holds a screw."""

    min_standoff_wall_mm: float = 0.8
    """Radial wall left around a standoff bore."""

    standoff_margin_mm: float = 0.2
    """Gap kept between a standoff and the inner wall."""

    # ── Derived helpers ────────────────────────────────────────────

    def countersink_head_radius(self, screw_hole_diameter: float) -> float:
        """Radius of a countersink head for *screw_hole_diameter*."""
        return screw_hole_diameter * self.countersink_head_factor / 2


# Module-level singleton, importable everywhere.
PRINT_RULES = PrintRules()
