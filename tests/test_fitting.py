import unittest
import warnings

import numpy as np

from pwlnn.activations import Activation
from pwlnn.errors import DataInsufficiencyWarning
from pwlnn.fitting import fit_half_curve


def half_data(activation, n=200, upper=8.0):
    x = np.concatenate([[0.0], np.linspace(0.01, upper, n)])
    return x, activation(x) - activation.offset


class HalfCurveFitterTests(unittest.TestCase):
    def test_family_length_and_counts(self):
        x, y = half_data(Activation.SIGMOID)
        family = fit_half_curve(x, y, l=1, no_bp=4)
        self.assertEqual([c.n_breakpoints for c in family], [1, 2, 3, 4])
        for curve in family:
            self.assertEqual(len(curve.segments), curve.n_breakpoints + 1)
            self.assertTrue(np.all(np.diff(curve.breakpoints) > 0))
            self.assertEqual(curve.segments[-1].upper, np.inf)

    def test_refinement_is_monotone(self):
        for activation in Activation:
            x, y = half_data(activation)
            family = fit_half_curve(x, y, l=1, no_bp=5)
            sse = [c.sse for c in family]
            for a, b in zip(sse[:-1], sse[1:]):
                self.assertLessEqual(b, a + 1e-12)

    def test_min_spacing_respected(self):
        x, y = half_data(Activation.HYPERBOLIC, n=100)
        for l in (1, 5, 12):
            family = fit_half_curve(x, y, l=l, no_bp=3)
            for curve in family:
                gaps = np.diff(curve.knot_indices)
                self.assertTrue(np.all(gaps >= l), f"l={l}: {curve.knot_indices}")

    def test_curve_passes_through_origin(self):
        x, y = half_data(Activation.SIGMOID)
        for curve in fit_half_curve(x, y, no_bp=3):
            self.assertAlmostEqual(float(curve(0.0)), 0.0, places=12)

    def test_deterministic(self):
        x, y = half_data(Activation.SIGMOID)
        self.assertEqual(fit_half_curve(x, y, l=2, no_bp=3), fit_half_curve(x, y, l=2, no_bp=3))

    def test_ties_break_left(self):
        x = np.arange(5, dtype=float)
        family = fit_half_curve(x, 2.0 * x, l=1, no_bp=2)
        self.assertEqual(family[0].knot_indices, (0, 1, 4))
        self.assertEqual(family[1].knot_indices, (0, 1, 2, 4))

    def test_duplicates_collapsed(self):
        x = np.array([0.0, 0.0, 1.0, 1.0, 2.0, 3.0, 3.0])
        family = fit_half_curve(x, np.tanh(x), l=1, no_bp=2)
        self.assertEqual(len(family), 2)
        self.assertTrue(np.all(np.diff(family[-1].breakpoints) > 0))

    def test_spacing_cuts_family_short(self):
        x = np.linspace(0.0, 5.0, 6)
        with self.assertWarns(DataInsufficiencyWarning):
            family = fit_half_curve(x, np.tanh(x), l=2, no_bp=5)
        self.assertEqual(len(family), 1)
        self.assertEqual(family[0].n_breakpoints, 1)

    def test_no_room_keeps_starting_chord(self):
        x = np.array([0.0, 1.0])
        with self.assertWarns(DataInsufficiencyWarning):
            family = fit_half_curve(x, np.tanh(x), l=1, no_bp=2)
        self.assertEqual(len(family), 1)
        self.assertEqual(family[0].n_breakpoints, 0)
        self.assertAlmostEqual(family[0].segments[0].slope, np.tanh(1.0))

    def test_single_distinct_value_is_flat(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DataInsufficiencyWarning)
            family = fit_half_curve(np.zeros(4), np.zeros(4), no_bp=3)
        self.assertEqual(len(family), 1)
        self.assertEqual(family[0].n_breakpoints, 0)
        self.assertEqual(family[0].segments[0].slope, 0.0)

    def test_shape_mismatch_rejected(self):
        with self.assertRaises(ValueError):
            fit_half_curve(np.arange(3.0), np.arange(4.0))


if __name__ == "__main__":
    unittest.main()
