"""Conflict trimmer — drop vent slots that crowd a wire cutout."""

from __future__ import annotations

from typing import Iterable

from boxgen.pipeline.config import PRINT_RULES
from boxgen.pipeline.params.models import FACES, Face, ParameterSet
from .features import derive_vent_slot_centers_z, derive_wire_cutout_spec


def trim_vent_slots(
    params: ParameterSet,
    min_web: float = PRINT_RULES.min_web_mm,
    faces: Iterable[Face] = FACES,
) -> dict[Face, list[int]]:
    """Indices of the vent slots kept on each face.

    A slot is dropped when its Z span touches the wire cutout's band
    widened by *min_web* on both sides.  Faces with inactive vents, and
    faces not listed in *faces*, map to an empty list; faces without an
    active wire cutout keep every slot.
    """
    result: dict[Face, list[int]] = {face: [] for face in FACES}

    for face in faces:
        fs = params.face(face)
        if not fs.vents_active:
            continue

        centers = derive_vent_slot_centers_z(params, face)
        all_indices = list(range(len(centers)))
        if not centers:
            continue

        wire = derive_wire_cutout_spec(params, face)
        if not wire.enabled:
            result[face] = all_indices
            continue

        slot_half = fs.vents.slot_width / 2
        forbidden_bottom = wire.cut_bottom - min_web
        forbidden_top = wire.cut_top + min_web

        result[face] = [
            i for i, z in enumerate(centers)
            if z + slot_half < forbidden_bottom or z - slot_half > forbidden_top
        ]

    return result


def dropped_slot_faces(
    params: ParameterSet,
    min_web: float = PRINT_RULES.min_web_mm,
    faces: Iterable[Face] = FACES,
) -> list[Face]:
    """Faces (among *faces*) on which the trimmer removed at least one
    active vent slot."""
    faces = list(faces)
    kept = trim_vent_slots(params, min_web, faces)
    return [
        face for face in faces
        if params.face(face).vents_active
        and len(kept[face]) < len(derive_vent_slot_centers_z(params, face))
    ]
