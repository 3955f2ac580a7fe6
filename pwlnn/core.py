"""Dataclasses for piecewise-linear curves, families and selection results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


# ============================================================
# Curves
# ============================================================


@dataclass(frozen=True)
class Segment:
    """One linear piece y = slope * x + intercept on [lower, upper)."""

    lower: float
    upper: float
    slope: float
    intercept: float

    def __call__(self, x):
        return self.slope * np.asarray(x, dtype=float) + self.intercept

    def to_dict(self) -> Dict[str, float]:
        return {
            "lower": self.lower,
            "upper": self.upper,
            "slope": self.slope,
            "intercept": self.intercept,
        }


@dataclass(frozen=True)
class PwlCurve:
    """Contiguous sequence of segments.

    Half curves (from the fitter) start at the first sample point and run to
    +inf. Full curves (from mirroring) cover the whole real line. Values
    outside the covered domain extrapolate the nearest end segment.
    """

    segments: Tuple[Segment, ...]
    n_breakpoints: int
    knot_indices: Optional[Tuple[int, ...]] = None
    sse: Optional[float] = None

    def __post_init__(self):
        if not self.segments:
            raise ValueError("PwlCurve needs at least one segment")
        for left, right in zip(self.segments[:-1], self.segments[1:]):
            if left.upper != right.lower:
                raise ValueError(
                    f"Segments are not contiguous: {left.upper} != {right.lower}"
                )

    @property
    def breakpoints(self) -> np.ndarray:
        """Coordinates where the slope may change, strictly increasing."""
        return np.array([s.upper for s in self.segments[:-1]], dtype=float)

    @property
    def slopes(self) -> np.ndarray:
        return np.array([s.slope for s in self.segments], dtype=float)

    @property
    def intercepts(self) -> np.ndarray:
        return np.array([s.intercept for s in self.segments], dtype=float)

    @property
    def domain(self) -> Tuple[float, float]:
        return self.segments[0].lower, self.segments[-1].upper

    def segment_index(self, x) -> np.ndarray:
        return np.searchsorted(self.breakpoints, np.asarray(x, dtype=float), side="right")

    def __call__(self, x):
        x = np.asarray(x, dtype=float)
        idx = self.segment_index(x)
        return self.slopes[idx] * x + self.intercepts[idx]

    def equations(self, var: str = "x") -> List[str]:
        """Human-readable linear equation per segment."""
        out = []
        for s in self.segments:
            out.append(f"{s.slope:.6g}*{var} + {s.intercept:.6g}  for {var} in [{s.lower:.6g}, {s.upper:.6g})")
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_breakpoints": self.n_breakpoints,
            "breakpoints": self.breakpoints.tolist(),
            "segments": [s.to_dict() for s in self.segments],
            "sse": self.sse,
        }


@dataclass
class PwlFamily:
    """Full curves of one node keyed by breakpoint count."""

    node: int
    curves: Dict[int, PwlCurve] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.curves)

    @property
    def counts(self) -> List[int]:
        return sorted(self.curves)

    def richest(self) -> PwlCurve:
        return self.curves[self.counts[-1]]

    def at_level(self, level: int) -> PwlCurve:
        """Curve for half level ``level`` (1-based), clamped to the family length."""
        counts = self.counts
        return self.curves[counts[min(max(level, 1), len(counts)) - 1]]


# ============================================================
# Selection
# ============================================================


@dataclass
class LevelEvaluation:
    """Surrogate error at one selection level."""

    level: int
    total_breakpoints: int
    surrogate_mse: float
    deviation_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "total_breakpoints": self.total_breakpoints,
            "surrogate_mse": self.surrogate_mse,
            "deviation_pct": self.deviation_pct,
        }


@dataclass
class SelectionResult:
    """Chosen curve per node and how well the composed surrogate does."""

    curves: Dict[int, PwlCurve]
    level: int
    reference_mse: float
    surrogate_mse: float
    deviation_pct: float
    tolerance_met: bool
    searched: bool
    history: List[LevelEvaluation] = field(default_factory=list)

    @property
    def total_breakpoints(self) -> int:
        return int(sum(c.n_breakpoints for c in self.curves.values()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "total_breakpoints": self.total_breakpoints,
            "reference_mse": self.reference_mse,
            "surrogate_mse": self.surrogate_mse,
            "deviation_pct": self.deviation_pct,
            "tolerance_met": self.tolerance_met,
            "searched": self.searched,
            "history": [h.to_dict() for h in self.history],
            "curves": {str(k): c.to_dict() for k, c in self.curves.items()},
        }
