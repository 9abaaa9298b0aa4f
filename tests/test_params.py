"""Tests for the parameter model, flat-key parsing and serialization."""

from __future__ import annotations

import math
import unittest

from boxgen.config import default_params, default_preset_record
from boxgen.pipeline.params import (
    FACES, Face, FaceFeatureSet, ParameterSet, WireProfile,
    face_keys, flat_keys, params_to_dict, parse_params,
)
from boxgen.pipeline.params.parsing import round_half_up, to_bool, to_number
from tests.esp32_fixture import make_default


class TestParameterSet(unittest.TestCase):

    def test_default_values(self):
        p = make_default()
        self.assertEqual((p.length, p.width, p.height), (95.0, 65.0, 32.0))
        self.assertAlmostEqual(p.floor_top_z, -13.6)
        self.assertFalse(p.countersink)
        self.assertFalse(p.standoffs.enabled)
        self.assertTrue(p.face(Face.BACK).edit_enabled)
        self.assertTrue(p.face(Face.BACK).wire_active)
        for face in (Face.FRONT, Face.LEFT, Face.RIGHT):
            self.assertFalse(p.face(face).edit_enabled)

    def test_missing_faces_are_filled(self):
        p = make_default().replace(faces={})
        self.assertEqual(set(p.faces), set(FACES))
        self.assertEqual(p.face(Face.BACK), FaceFeatureSet())

    def test_faces_are_read_only(self):
        with self.assertRaises(TypeError):
            make_default().faces[Face.FRONT] = FaceFeatureSet()

    def test_face_keys_must_be_enum(self):
        with self.assertRaises(TypeError):
            make_default().replace(faces={"front": FaceFeatureSet()})

    def test_with_face_leaves_original(self):
        base = make_default()
        changed = base.with_face("front", edit_enabled=True, vents=dict(count=3))
        self.assertFalse(base.face(Face.FRONT).edit_enabled)
        self.assertEqual(changed.face(Face.FRONT).vents.count, 3)
        self.assertEqual(changed.face(Face.FRONT).vents.slot_width, base.face(Face.FRONT).vents.slot_width)
        self.assertEqual(changed.face(Face.BACK), base.face(Face.BACK))

    def test_unknown_face_name(self):
        with self.assertRaises(ValueError):
            make_default().face("top")

    def test_active_flags_need_face_edit(self):
        fs = make_default().with_face(Face.LEFT, vents=dict(enabled=True)).face(Face.LEFT)
        self.assertTrue(fs.vents.enabled)
        self.assertFalse(fs.vents_active)


class TestParsing(unittest.TestCase):

    def test_empty_dict_gives_default(self):
        self.assertEqual(parse_params({}), default_params())

    def test_serialized_default_parses_back(self):
        p = make_default()
        self.assertEqual(parse_params(params_to_dict(p)), p)

    def test_flat_keys_match_preset_file(self):
        self.assertEqual(set(flat_keys()), set(default_preset_record()["params"]))

    def test_face_keys(self):
        k = face_keys(Face.FRONT)
        self.assertEqual(k["vent_count"], "ventFrontCount")
        self.assertEqual(k["wire_enabled"], "wireFront")
        self.assertEqual(k["wire_offset_h"], "wireFrontOffsetH")
        self.assertEqual(face_keys(Face.BACK)["edit"], "faceEditBack")

    def test_bad_number_becomes_nan(self):
        p = parse_params({"length": "abc", "width": None})
        self.assertTrue(math.isnan(p.length))
        self.assertTrue(math.isnan(p.width))

    def test_form_values(self):
        p = parse_params({
            "height": "40",
            "countersink": "on",
            "faceEditLeft": "true",
            "ventLeftEnabled": 1,
            "ventLeftCount": "2.5",
            "wireLeftProfile": "round",
        })
        self.assertEqual(p.height, 40.0)
        self.assertTrue(p.countersink)
        left = p.face(Face.LEFT)
        self.assertTrue(left.vents_active)
        self.assertEqual(left.vents.count, 3)
        self.assertIs(left.wire.profile, WireProfile.ROUND)

    def test_unknown_profile_falls_back_to_rect(self):
        p = parse_params({"wireBackProfile": "hexagon"})
        self.assertIs(p.face(Face.BACK).wire.profile, WireProfile.RECT)

    def test_base_supplies_missing_keys(self):
        base = make_default().replace(length=120.0)
        p = parse_params({"width": 70}, base=base)
        self.assertEqual((p.length, p.width), (120.0, 70.0))

    def test_unknown_keys_ignored(self):
        self.assertEqual(parse_params({"ventFace": "front", "colour": "red"}), default_params())

    def test_serialized_profile_is_plain_string(self):
        d = params_to_dict(make_default())
        self.assertEqual(d["wireBackProfile"], "rect")
        self.assertIs(d["faceEditBack"], True)


class TestCoercion(unittest.TestCase):

    def test_to_number(self):
        self.assertEqual(to_number(True), 1.0)
        self.assertEqual(to_number(""), 0.0)
        self.assertEqual(to_number("2.5"), 2.5)
        self.assertTrue(math.isnan(to_number("x")))
        self.assertTrue(math.isnan(to_number([1])))

    def test_to_bool(self):
        for v in ("on", "TRUE", "1", "yes", True, 1):
            self.assertTrue(to_bool(v), v)
        for v in ("off", "", "0", False, 0, None):
            self.assertFalse(to_bool(v), v)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3.0)
        self.assertEqual(round_half_up(-2.5), -2.0)
        self.assertTrue(math.isnan(round_half_up(math.nan)))


if __name__ == "__main__":
    unittest.main()
