"""Tests for the regeneration cycle (validate, build, keep last good model)."""

from __future__ import annotations

import threading
import unittest
from unittest import mock

from boxgen.core import GENERATION_FAILED_MESSAGE, RegenStatus, Regenerator
from boxgen.pipeline.params import Face
from boxgen.scad import GenerationError
from tests.esp32_fixture import make_default, make_front_vents_and_wire, make_small_box


class TestRegenerator(unittest.TestCase):

    def test_first_valid_cycle_updates(self):
        regen = Regenerator()
        outcome = regen.regenerate(make_default())
        self.assertIs(outcome.status, RegenStatus.UPDATED)
        self.assertTrue(outcome.updated)
        self.assertIs(regen.assembly, outcome.assembly)
        self.assertEqual(regen.params, make_default())

    def test_invalid_keeps_previous_model(self):
        regen = Regenerator()
        first = regen.regenerate(make_default())
        outcome = regen.regenerate(make_small_box())
        self.assertIs(outcome.status, RegenStatus.INVALID)
        self.assertIs(outcome.assembly, first.assembly)
        self.assertIs(regen.assembly, first.assembly)
        self.assertEqual(regen.params, make_default())
        self.assertTrue(any("14.50" in e for e in outcome.errors))

    def test_invalid_without_previous_model(self):
        outcome = Regenerator().regenerate(make_small_box())
        self.assertIs(outcome.status, RegenStatus.INVALID)
        self.assertIsNone(outcome.assembly)
        self.assertFalse(outcome.to_dict()["has_model"])

    def test_generation_failure_is_distinct(self):
        regen = Regenerator()
        first = regen.regenerate(make_default())
        with mock.patch(
            "boxgen.core.regenerate.build_assembly",
            side_effect=GenerationError("lid", "degenerate lip"),
        ):
            outcome = regen.regenerate(make_front_vents_and_wire())
        self.assertIs(outcome.status, RegenStatus.FAILED)
        self.assertEqual(outcome.message, GENERATION_FAILED_MESSAGE)
        self.assertEqual(outcome.errors, [GENERATION_FAILED_MESSAGE])
        self.assertTrue(outcome.validation.valid)
        self.assertIs(regen.assembly, first.assembly)

    def test_warnings_are_reported(self):
        outcome = Regenerator().regenerate(make_front_vents_and_wire())
        self.assertIs(outcome.status, RegenStatus.UPDATED)
        self.assertIn("warning", outcome.message)
        self.assertTrue(any("Front" in w for w in outcome.to_dict()["warnings"]))

    def test_reenabling_face_revalidates(self):
        regen = Regenerator()
        frozen = make_default().with_face(
            Face.LEFT, edit_enabled=False, vents=dict(enabled=True, count=0),
        )
        self.assertIs(regen.regenerate(frozen).status, RegenStatus.UPDATED)
        outcome = regen.regenerate(frozen.with_face(Face.LEFT, edit_enabled=True))
        self.assertIs(outcome.status, RegenStatus.INVALID)
        self.assertIn("Left vents: count must be at least 1.", outcome.errors)

    def test_non_positive_sizes_never_reach_the_builder(self):
        regen = Regenerator()
        with mock.patch("boxgen.core.regenerate.build_assembly") as build:
            lip = regen.regenerate(make_default().replace(lip_height=0.0))
            screw = regen.regenerate(make_default().replace(screw_hole_diameter=-1.0))
        build.assert_not_called()
        self.assertIs(lip.status, RegenStatus.INVALID)
        self.assertIn("Lip height must be greater than 0 mm.", lip.errors)
        self.assertIs(screw.status, RegenStatus.INVALID)
        self.assertIn("Screw hole diameter must be greater than 0 mm.", screw.errors)

    def test_concurrent_cycles_keep_params_and_model_paired(self):
        regen = Regenerator()
        variants = [make_default().replace(length=float(90 + i)) for i in range(4)]
        mismatches = []

        def worker(params):
            for _ in range(10):
                regen.regenerate(params)
                kept_params, kept_model = regen.snapshot()
                if kept_model != ("model", kept_params):
                    mismatches.append((kept_params, kept_model))

        with mock.patch(
            "boxgen.core.regenerate.build_assembly",
            side_effect=lambda p: ("model", p),
        ):
            threads = [threading.Thread(target=worker, args=(p,)) for p in variants]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        self.assertEqual(mismatches, [])
        self.assertIn(regen.params, variants)

    def test_to_dict(self):
        d = Regenerator().regenerate(make_default()).to_dict()
        self.assertEqual(d["status"], "updated")
        self.assertTrue(d["has_model"])
        self.assertEqual(d["errors"], [])


if __name__ == "__main__":
    unittest.main()
