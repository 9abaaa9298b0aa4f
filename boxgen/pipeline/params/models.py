"""Parameter set dataclasses — the single input of every derivation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Face(str, Enum):
    """One of the four vertical sides of the box footprint."""

    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"

    @property
    def label(self) -> str:
        """Display name used in messages and flat keys ("Front", ...)."""
        return self.value.capitalize()

    @property
    def is_front_back(self) -> bool:
        return self in (Face.FRONT, Face.BACK)


FACES: tuple[Face, ...] = (Face.FRONT, Face.BACK, Face.LEFT, Face.RIGHT)


class WireProfile(str, Enum):
    ROUND = "round"
    RECT = "rect"


@dataclass(frozen=True)
class VentSettings:
    enabled: bool = False
    count: int = 6
    slot_width: float = 1.6
    slot_spacing: float = 1.2


@dataclass(frozen=True)
class WireCutoutSettings:
    """Wire pass-through on one face.

    ``round`` uses *round_diameter* for both extents of the bounding box;
    ``rect`` uses *rect_width* × *rect_height*.  *offset_h* shifts the
    cutout along the face, *offset_v* lifts it above its base height.
    """
    enabled: bool = False
    profile: WireProfile = WireProfile.RECT
    round_diameter: float = 6.0
    rect_width: float = 10.0
    rect_height: float = 4.0
    offset_h: float = 0.0
    offset_v: float = 0.0


@dataclass(frozen=True)
class FaceFeatureSet:
    """Vents and wire cutout for one face.

    A face only contributes features while *edit_enabled* is on; with it
    off the sub-blocks are kept as-is but ignored (neither validated,
    trimmed nor built).
    """
    edit_enabled: bool = False
    vents: VentSettings = field(default_factory=VentSettings)
    wire: WireCutoutSettings = field(default_factory=WireCutoutSettings)

    @property
    def vents_active(self) -> bool:
        return self.edit_enabled and self.vents.enabled

    @property
    def wire_active(self) -> bool:
        return self.edit_enabled and self.wire.enabled


@dataclass(frozen=True)
class StandoffSettings:
    """Four centred PCB standoffs, independent of the corner posts."""
    enabled: bool = False
    height: float = 6.0
    diameter: float = 5.0
    hole_diameter: float = 2.2
    spacing_x: float = 58.0
    spacing_y: float = 23.0


@dataclass(frozen=True)
class ParameterSet:
    """Immutable snapshot of all enclosure parameters.

    All dimensions are in millimetres.  The box is centred on the origin
    in X, Y and Z: the body spans ``-height/2 .. height/2``.
    """
    length: float
    width: float
    height: float
    wall_thickness: float
    floor_thickness: float
    lid_thickness: float
    corner_radius: float
    lip_height: float
    fit_tolerance: float
    post_diameter: float
    screw_hole_diameter: float
    countersink: bool = False
    standoffs: StandoffSettings = field(default_factory=StandoffSettings)
    faces: Mapping[Face, FaceFeatureSet] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Every face is always present; the mapping is read-only.
        given = dict(self.faces)
        unknown = [k for k in given if not isinstance(k, Face)]
        if unknown:
            raise TypeError(f"faces keys must be Face members, got {unknown!r}")
        filled = {f: given.get(f, FaceFeatureSet()) for f in FACES}
        object.__setattr__(self, "faces", MappingProxyType(filled))

    # ── derived dimensions ─────────────────────────────────────────

    @property
    def inner_length(self) -> float:
        return self.length - 2 * self.wall_thickness

    @property
    def inner_width(self) -> float:
        return self.width - 2 * self.wall_thickness

    @property
    def inner_height(self) -> float:
        return self.height - self.floor_thickness

    @property
    def floor_top_z(self) -> float:
        """Z of the top surface of the floor (box centred on origin)."""
        return -self.height / 2 + self.floor_thickness

    # ── copy helpers ───────────────────────────────────────────────

    def face(self, face: Face | str) -> FaceFeatureSet:
        return self.faces[Face(face)]

    def replace(self, **changes) -> ParameterSet:
        """Return a copy with *changes* applied (the original is untouched)."""
        return replace(self, **changes)

    def with_face(self, face: Face | str, **changes) -> ParameterSet:
        """Return a copy with the given face's feature set updated.

        *changes* may hold ``edit_enabled`` and/or whole ``vents`` /
        ``wire`` records, or ``vents=dict(...)`` / ``wire=dict(...)``
        partial updates.
        """
        face = Face(face)
        current = self.faces[face]
        vents = changes.pop("vents", current.vents)
        wire = changes.pop("wire", current.wire)
        if isinstance(vents, dict):
            vents = replace(current.vents, **vents)
        if isinstance(wire, dict):
            wire = replace(current.wire, **wire)
        updated = replace(current, vents=vents, wire=wire, **changes)
        faces = dict(self.faces)
        faces[face] = updated
        return replace(self, faces=faces)
