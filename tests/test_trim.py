"""Tests for the conflict trimmer (vent slots vs wire cutouts)."""

from __future__ import annotations

import unittest

from boxgen.pipeline.config import PRINT_RULES
from boxgen.pipeline.layout import (
    derive_vent_slot_centers_z,
    derive_wire_cutout_spec,
    dropped_slot_faces,
    trim_vent_slots,
)
from boxgen.pipeline.params import FACES, Face
from tests.esp32_fixture import make_default, make_front_vents_and_wire


class TestTrimVentSlots(unittest.TestCase):

    def test_overlapping_slots_are_dropped(self):
        kept = trim_vent_slots(make_front_vents_and_wire())
        self.assertEqual(kept[Face.FRONT], [0, 4, 5])
        self.assertEqual(dropped_slot_faces(make_front_vents_and_wire()), [Face.FRONT])

    def test_every_face_has_an_entry(self):
        kept = trim_vent_slots(make_default())
        self.assertEqual(set(kept), set(FACES))
        self.assertTrue(all(v == [] for v in kept.values()))

    def test_no_wire_keeps_all(self):
        params = make_front_vents_and_wire().with_face(Face.FRONT, wire=dict(enabled=False))
        self.assertEqual(trim_vent_slots(params)[Face.FRONT], list(range(6)))
        self.assertEqual(dropped_slot_faces(params), [])

    def test_low_wire_leaves_vents_alone(self):
        # Cut spans z = −12.6 .. −8.6, more than a web below the lowest slot.
        params = make_front_vents_and_wire(offset_v=-2.0)
        spec = derive_wire_cutout_spec(params, Face.FRONT)
        centers = derive_vent_slot_centers_z(params, Face.FRONT)
        self.assertLess(spec.cut_top + PRINT_RULES.min_web_mm, centers[0] - 0.8)
        self.assertEqual(trim_vent_slots(params)[Face.FRONT], list(range(6)))

    def test_frozen_face_is_not_trimmed(self):
        params = make_front_vents_and_wire().with_face(Face.FRONT, edit_enabled=False)
        self.assertEqual(trim_vent_slots(params)[Face.FRONT], [])
        self.assertEqual(dropped_slot_faces(params), [])

    def test_kept_slots_clear_the_web(self):
        for offset_v in (2.0, 5.0, 8.4, 12.0, 16.0):
            params = make_front_vents_and_wire(offset_v=offset_v)
            spec = derive_wire_cutout_spec(params, Face.FRONT)
            centers = derive_vent_slot_centers_z(params, Face.FRONT)
            kept = trim_vent_slots(params)[Face.FRONT]
            self.assertTrue(set(kept) <= set(range(len(centers))))
            for i in kept:
                top, bottom = centers[i] + 0.8, centers[i] - 0.8
                self.assertTrue(
                    top < spec.cut_bottom - 1.2 or bottom > spec.cut_top + 1.2,
                    f"slot {i} too close to wire at offset_v={offset_v}",
                )

    def test_larger_web_never_keeps_more(self):
        params = make_front_vents_and_wire()
        narrow = trim_vent_slots(params, min_web=0.5)[Face.FRONT]
        wide = trim_vent_slots(params, min_web=3.0)[Face.FRONT]
        self.assertTrue(set(wide) <= set(narrow))


if __name__ == "__main__":
    unittest.main()
