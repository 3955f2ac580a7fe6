"""Greedy breakpoint placement on the non-negative half of an activation curve."""

from __future__ import annotations

import bisect
import logging
import warnings
from typing import List, Sequence

import numpy as np

from pwlnn.core import PwlCurve, Segment
from pwlnn.errors import DataInsufficiencyWarning

log = logging.getLogger(__name__)


def _curve_from_knots(x: np.ndarray, y: np.ndarray, knots: Sequence[int]) -> PwlCurve:
    """Interpolate between consecutive knots; the last segment runs to +inf."""
    segments = []
    for i, (a, b) in enumerate(zip(knots[:-1], knots[1:])):
        slope = float((y[b] - y[a]) / (x[b] - x[a]))
        intercept = float(y[a] - slope * x[a])
        upper = float(x[b]) if i < len(knots) - 2 else np.inf
        segments.append(Segment(float(x[a]), upper, slope, intercept))
    curve = PwlCurve(tuple(segments), n_breakpoints=len(knots) - 2, knot_indices=tuple(int(k) for k in knots))
    sse = float(np.sum((y - curve(x)) ** 2))
    return PwlCurve(curve.segments, curve.n_breakpoints, curve.knot_indices, sse)


def fit_half_curve(x, y, l: int = 1, no_bp: int = 3) -> List[PwlCurve]:
    """Build a ladder of PWL approximations with 1..no_bp interior breakpoints.

    Each step adds one knot at the sample point with the largest absolute
    deviation from the current approximation, among points at least ``l``
    positions away from every existing knot (end knots included). Ties go
    to the leftmost point. Segments interpolate between knots, so every
    curve passes through its knots and each entry refines the previous one.

    Repeated x values are collapsed first; ``l`` and ``knot_indices`` refer
    to positions in the collapsed sample.

    Args:
        x: non-negative pre-activations (sorting is not required)
        y: activation(x) minus the constraint offset
        l: minimum knot spacing in data points
        no_bp: maximum number of interior breakpoints

    Returns:
        Curves with increasing breakpoint count. The list is shorter than
        ``no_bp`` if the spacing constraint runs out of candidates; if no
        breakpoint fits at all it holds the single-chord starting curve.
    """
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same length, got {x.shape} and {y.shape}")
    if x.size == 0:
        raise ValueError("Cannot fit a curve to an empty sample")

    order = np.argsort(x, kind="stable")
    x, first = np.unique(x[order], return_index=True)
    y = y[order][first]
    n = len(x)

    if n < 2:
        seg = Segment(float(x[0]), np.inf, 0.0, float(y[0]))
        return [PwlCurve((seg,), n_breakpoints=0, knot_indices=(0,), sse=0.0)]

    positions = np.arange(n)
    knots = [0, n - 1]
    family: List[PwlCurve] = []
    for _ in range(no_bp):
        approx = np.interp(x, x[knots], y[knots])
        deviation = np.abs(y - approx)

        gap = np.min(np.abs(positions[:, None] - np.asarray(knots)[None, :]), axis=1)
        allowed = gap >= l
        if not allowed.any():
            break

        candidate = int(np.argmax(np.where(allowed, deviation, -np.inf)))
        bisect.insort(knots, candidate)
        family.append(_curve_from_knots(x, y, knots))

    if len(family) < no_bp:
        warnings.warn(
            f"Only {len(family)} of {no_bp} breakpoints could be placed with minimum spacing l={l} "
            f"on {n} distinct points.",
            DataInsufficiencyWarning,
            stacklevel=2,
        )
    if not family:
        family.append(_curve_from_knots(x, y, knots))

    log.debug(f"Fitted half curve: {len(family)} levels, sse={family[-1].sse:.3e}")
    return family
