"""Tests for the geometry builder and SCAD export.

The builder only assembles a CSG tree, so these tests inspect the tree
(labelled nodes, transforms) and the rendered OpenSCAD text.  Nothing
here needs the openscad binary.
"""

from __future__ import annotations

import math
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from boxgen.pipeline.params import Face, StandoffSettings, WireProfile
from boxgen.scad import (
    GenerationError, assembly_sources, build_assembly, build_body, build_lid,
    compile_assembly, to_scad, write_assembly,
)
from boxgen.scad.csg import (
    check_finite, cuboid, rounded_rectangle, safe_radius, subtract, translate, union,
)
from tests.esp32_fixture import make_default, make_front_vents_and_wire


def _labels(solid, prefix: str) -> list[str]:
    return [n.label for n in solid.walk() if n.label.startswith(prefix)]


class TestCsg(unittest.TestCase):

    def test_rounded_rectangle_bounds(self):
        pts = rounded_rectangle(20.0, 10.0, 3.0)
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        self.assertAlmostEqual(max(xs), 10.0)
        self.assertAlmostEqual(min(ys), -5.0)
        self.assertGreater(len(pts), 4)

    def test_square_corners_without_radius(self):
        self.assertEqual(len(rounded_rectangle(20.0, 10.0, 0.0)), 4)

    def test_rounded_rectangle_rejects_empty(self):
        with self.assertRaises(ValueError):
            rounded_rectangle(0.0, 10.0, 1.0)

    def test_safe_radius(self):
        self.assertAlmostEqual(safe_radius(10.0, 30.0, 50.0), 4.99)
        self.assertEqual(safe_radius(10.0, 30.0, -1.0), 0.0)

    def test_union_of_one(self):
        c = cuboid((1, 1, 1))
        self.assertIs(union(c), c)

    def test_subtract_nothing(self):
        c = cuboid((1, 1, 1))
        self.assertIs(subtract(c), c)

    def test_check_finite(self):
        with self.assertRaises(ValueError):
            check_finite(translate((0, math.nan, 0), cuboid((1, 1, 1))))

    def test_to_scad(self):
        src = to_scad(subtract(cuboid((4, 4, 4)), translate((1, 0, 0), cuboid((1, 1, 1), label="hole"))), "Demo")
        self.assertTrue(src.startswith("// Demo\n// Auto-generated by boxgen"))
        self.assertIn("difference() {", src)
        self.assertIn("translate([1.000, 0.000, 0.000])", src)
        self.assertIn("// hole", src)
        self.assertIn("cube([4.000, 4.000, 4.000], center = true);", src)


class TestBody(unittest.TestCase):

    def test_default_body(self):
        body = build_body(make_default())
        self.assertEqual(body.count(label="corner post"), 4)
        self.assertEqual(body.count(label="post brace"), 8)
        self.assertEqual(body.count(label="screw bore"), 4)
        self.assertEqual(body.count(label="wire back"), 1)
        self.assertEqual(_labels(body, "vent"), [])
        self.assertEqual(body.count(label="standoff"), 0)

    def test_trimmed_vents_are_not_cut(self):
        body = build_body(make_front_vents_and_wire())
        self.assertEqual(
            _labels(body, "vent front"),
            ["vent front 0", "vent front 4", "vent front 5"],
        )
        self.assertEqual(body.count(label="wire front"), 1)

    def test_frozen_face_is_not_cut(self):
        params = make_front_vents_and_wire().with_face(Face.FRONT, edit_enabled=False)
        body = build_body(params)
        self.assertEqual(_labels(body, "vent front"), [])
        self.assertEqual(body.count(label="wire front"), 0)

    def test_round_wire_is_rotated_cylinder(self):
        params = make_default().with_face(Face.BACK, wire=dict(profile=WireProfile.ROUND))
        body = build_body(params)
        rotations = [n for n in body.walk() if n.kind == "rotate"]
        self.assertEqual(len(rotations), 1)
        self.assertEqual(rotations[0].args["a"], (90, 0, 0))
        self.assertEqual(rotations[0].children[0].kind, "cylinder")

    def test_standoffs(self):
        params = make_default().replace(standoffs=StandoffSettings(enabled=True))
        body = build_body(params)
        self.assertEqual(body.count(label="standoff"), 4)
        self.assertEqual(body.count(label="standoff bore"), 4)

    def test_standoffs_without_bore(self):
        params = make_default().replace(standoffs=StandoffSettings(enabled=True, hole_diameter=0.0))
        self.assertEqual(build_body(params).count(label="standoff bore"), 0)


class TestLid(unittest.TestCase):

    def test_default_lid(self):
        lid = build_lid(make_default())
        self.assertEqual(lid.count(label="lid plate"), 1)
        self.assertEqual(lid.count(label="lip ring"), 1)
        self.assertEqual(lid.count(label="post notch"), 4)
        self.assertEqual(lid.count(label="lid screw hole"), 4)
        self.assertEqual(lid.count(label="countersink"), 0)

    def test_countersink(self):
        lid = build_lid(make_default().replace(countersink=True))
        cones = [n for n in lid.walk() if n.label == "countersink"]
        self.assertEqual(len(cones), 4)
        self.assertAlmostEqual(cones[0].args["r2"], 2.6 * 1.9 / 2)
        self.assertAlmostEqual(cones[0].args["r1"], 1.3)

    def test_notch_radius_includes_tolerance(self):
        lid = build_lid(make_default())
        notch = next(n for n in lid.walk() if n.label == "post notch")
        self.assertAlmostEqual(notch.args["r1"], 4.25)


class TestAssembly(unittest.TestCase):

    def test_preview_copies(self):
        params = make_default()
        asm = build_assembly(params)
        self.assertEqual(asm.preview_body.kind, "translate")
        self.assertAlmostEqual(asm.preview_body.args["v"][2], 16.0)
        self.assertIs(asm.preview_body.children[0], asm.body)
        self.assertAlmostEqual(asm.preview_lid.args["v"][0], 99.75)
        rotated = asm.preview_lid.children[0]
        self.assertEqual(rotated.args["a"], (180, 0, 0))
        self.assertIs(rotated.children[0], asm.lid)

    def test_nan_geometry_raises_generation_error(self):
        with self.assertRaises(GenerationError) as ctx:
            build_assembly(make_default().replace(length=math.nan))
        self.assertEqual(ctx.exception.stage, "body")

    def test_sources_and_files(self):
        asm = build_assembly(make_front_vents_and_wire())
        sources = assembly_sources(asm)
        self.assertEqual(set(sources), {"body", "lid", "preview"})
        self.assertIn("// vent front 4", sources["body"])
        with tempfile.TemporaryDirectory() as tmp:
            paths = write_assembly(asm, Path(tmp) / "out")
            self.assertEqual(set(paths), {"body", "lid", "preview"})
            for p in paths.values():
                self.assertTrue(p.exists())
            self.assertEqual(paths["lid"].read_text(encoding="utf-8"), sources["lid"])

    def test_compile_without_openscad(self):
        asm = build_assembly(make_default())
        with tempfile.TemporaryDirectory() as tmp, \
                mock.patch("boxgen.scad.compiler._find_openscad", return_value=None):
            results = compile_assembly(write_assembly(asm, Path(tmp)))
        self.assertEqual(set(results), {"body", "lid"})
        for ok, msg, path in results.values():
            self.assertFalse(ok)
            self.assertIn("not found", msg)
            self.assertIsNone(path)


if __name__ == "__main__":
    unittest.main()
