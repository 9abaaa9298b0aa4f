"""Layout — pure derivations from one ParameterSet snapshot.

Submodules:
  models    Result dataclasses (FitResult, WireCutoutSpec, points).
  fit       Corner-post placement, lip clearance, feasibility.
  features  Vent slot heights, wire cutouts, centred standoffs.
  trim      Vent slots removed where they crowd a wire cutout.
  report    All of the above as one JSON-safe dict.
"""

from .models import Point2, Point3, FitResult, WireCutoutSpec
from .fit import derive_fit, lip_dimensions
from .features import (
    derive_vent_slot_centers_z,
    derive_wire_cutout_spec,
    derive_centered_standoff_centers,
    vent_stack_bounds,
    vent_stack_fits,
)
from .trim import trim_vent_slots, dropped_slot_faces
from .report import derive_report

__all__ = [
    # Models
    "Point2", "Point3", "FitResult", "WireCutoutSpec",
    # Derivations
    "derive_fit", "lip_dimensions",
    "derive_vent_slot_centers_z", "derive_wire_cutout_spec",
    "derive_centered_standoff_centers", "vent_stack_bounds", "vent_stack_fits",
    "trim_vent_slots", "dropped_slot_faces",
    "derive_report",
]
