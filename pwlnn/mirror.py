"""Reconstruct full-domain PWL curves from half-curve fits by point symmetry."""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from pwlnn.activations import Activation
from pwlnn.core import PwlCurve, PwlFamily, Segment


def mirror_curve(half: PwlCurve, activation, x=None, y=None) -> PwlCurve:
    """Mirror a half curve fitted on x >= 0 into a curve over the whole real line.

    The half curve is in shifted coordinates (activation minus offset). Both
    activations satisfy f(-x) = 2 * offset - f(x), so a shifted piece
    m * x + c on [a, b) maps to m * x + c + offset there and to
    m * x - c + offset on (-b, -a]. The two pieces meeting at 0 merge into
    one segment when c == 0, which holds for every zero-anchored fit.

    If ``x`` is given, the returned curve carries its squared error against
    ``y`` (default ``activation(x)``) over those points.
    """
    activation = Activation.parse(activation)
    offset = activation.offset

    positive = [
        Segment(0.0 if i == 0 else s.lower, s.upper, s.slope, s.intercept + offset)
        for i, s in enumerate(half.segments)
    ]
    negative = [Segment(-s.upper, -s.lower, s.slope, 2.0 * offset - s.intercept) for s in reversed(positive)]

    centre_shift = half.segments[0].intercept
    if np.isclose(centre_shift, 0.0, atol=1e-12):
        left, right = negative[-1], positive[0]
        centre = Segment(left.lower, right.upper, right.slope, offset)
        segments = negative[:-1] + [centre] + positive[1:]
    else:
        segments = negative + positive

    curve = PwlCurve(tuple(segments), n_breakpoints=2 * half.n_breakpoints)
    if x is None:
        return curve

    x = np.asarray(x, dtype=float)
    y = activation(x) if y is None else np.asarray(y, dtype=float)
    sse = float(np.sum((y - curve(x)) ** 2))
    return PwlCurve(curve.segments, curve.n_breakpoints, sse=sse)


def build_full_family(node: int, halves: Iterable[PwlCurve], activation, z: Optional[np.ndarray] = None) -> PwlFamily:
    """Mirror every half curve of one node; k half breakpoints become key 2k."""
    family = PwlFamily(node=node)
    for half in halves:
        full = mirror_curve(half, activation, x=z)
        family.curves[full.n_breakpoints] = full
    return family
