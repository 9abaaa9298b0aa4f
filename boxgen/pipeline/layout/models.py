"""Layout result dataclasses — derived, never stored."""

from __future__ import annotations

from dataclasses import dataclass

from boxgen.pipeline.params.models import Face, WireProfile


@dataclass(frozen=True)
class Point2:
    x: float
    y: float


@dataclass(frozen=True)
class Point3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class FitResult:
    """Corner-post placement and lid fit for one parameter snapshot.

    *post_centers* are the four mirror-symmetric points (±x, ±y) in the
    order (−,−), (−,+), (+,−), (+,+).  When *feasible* is false the inset
    has been clamped to the largest value the footprint allows.
    """

    fit_tolerance: float
    lip_clearance: float
    post_inset: float
    feasible: bool
    post_centers: tuple[Point2, Point2, Point2, Point2]


@dataclass(frozen=True)
class WireCutoutSpec:
    """Placement of the wire cutout on one face.

    *cut_bottom* / *cut_top* are the Z extent of the cutout; the trimmer
    and the validator both read them.  *horizontal_span* is the outer
    length of the face the cutout sits on.
    """

    face: Face
    enabled: bool
    profile: WireProfile
    width: float
    height: float
    offset_h: float
    offset_v: float
    center: Point3
    is_front_back: bool
    horizontal_span: float
    cut_bottom: float
    cut_top: float
