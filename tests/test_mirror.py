import unittest
import warnings

import numpy as np

from pwlnn.activations import Activation
from pwlnn.core import PwlCurve, Segment
from pwlnn.errors import DataInsufficiencyWarning
from pwlnn.fitting import fit_half_curve
from pwlnn.mirror import build_full_family, mirror_curve


def half_family(activation, no_bp=3):
    x = np.linspace(0.0, 6.0, 120)
    return fit_half_curve(x, activation(x) - activation.offset, l=1, no_bp=no_bp)


class MirrorTests(unittest.TestCase):
    def test_point_symmetry(self):
        grid = np.linspace(-12.0, 12.0, 481)
        for activation in Activation:
            for half in half_family(activation):
                full = mirror_curve(half, activation)
                np.testing.assert_allclose(full(grid) + full(-grid), 2 * activation.offset, atol=1e-12)

    def test_breakpoint_count_doubles(self):
        for half in half_family(Activation.SIGMOID):
            full = mirror_curve(half, Activation.SIGMOID)
            self.assertEqual(full.n_breakpoints, 2 * half.n_breakpoints)
            self.assertEqual(len(full.breakpoints), 2 * half.n_breakpoints)
            np.testing.assert_allclose(full.breakpoints, -full.breakpoints[::-1])
            self.assertEqual(full.domain, (-np.inf, np.inf))

    def test_matches_half_curve_on_positive_side(self):
        x = np.linspace(0.0, 6.0, 50)
        for half in half_family(Activation.HYPERBOLIC):
            full = mirror_curve(half, "hyperbolic")
            np.testing.assert_allclose(full(x), half(x), atol=1e-12)

    def test_sse_on_full_data(self):
        z = np.linspace(-6.0, 6.0, 241)
        fulls = [mirror_curve(h, Activation.SIGMOID, x=z) for h in half_family(Activation.SIGMOID, no_bp=4)]
        sse = [f.sse for f in fulls]
        for a, b in zip(sse[:-1], sse[1:]):
            self.assertLessEqual(b, a + 1e-12)
        self.assertAlmostEqual(sse[0], float(np.sum((Activation.SIGMOID(z) - fulls[0](z)) ** 2)))

    def test_offset_centre_is_split_at_zero(self):
        half = PwlCurve((Segment(0.0, np.inf, 0.0, 0.25),), n_breakpoints=0)
        full = mirror_curve(half, Activation.SIGMOID)
        self.assertEqual(len(full.segments), 2)
        self.assertAlmostEqual(float(full(3.0)), 0.75)
        self.assertAlmostEqual(float(full(-3.0)), 0.25)

    def test_build_full_family_keys(self):
        z = np.linspace(-3.0, 3.0, 61)
        family = build_full_family(4, half_family(Activation.SIGMOID), Activation.SIGMOID, z=z)
        self.assertEqual(family.node, 4)
        self.assertEqual(family.counts, [2, 4, 6])
        self.assertIs(family.at_level(2), family.curves[4])
        self.assertIs(family.at_level(9), family.curves[6])

    def test_degenerate_family_spans_real_line(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DataInsufficiencyWarning)
            halves = fit_half_curve(np.zeros(3), np.zeros(3), no_bp=2)
        family = build_full_family(0, halves, Activation.HYPERBOLIC)
        self.assertEqual(family.counts, [0])
        curve = family.at_level(1)
        self.assertEqual(len(curve.segments), 1)
        self.assertAlmostEqual(float(curve(5.0)), 0.0)


if __name__ == "__main__":
    unittest.main()
