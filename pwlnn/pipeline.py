"""Top-level entry: approximate every hidden node and select a PWL configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from pwlnn.activations import weighted_inputs
from pwlnn.config import PwlnnConfig, resolve_config, validate_inputs
from pwlnn.core import PwlCurve, PwlFamily, SelectionResult
from pwlnn.fitting import fit_half_curve
from pwlnn.mirror import build_full_family
from pwlnn.sampling import sorted_absolute_samples
from pwlnn.selection import find_best_pwl, surrogate_forward

log = logging.getLogger(__name__)


@dataclass
class PwlnnModel:
    """Selected PWL equations of each node plus the surrogate's fit."""

    config: PwlnnConfig
    hidden_w: np.ndarray
    output_w: np.ndarray
    families: Dict[int, PwlFamily]
    selection: SelectionResult
    fitted: np.ndarray
    residuals: np.ndarray

    @property
    def curves(self) -> Dict[int, PwlCurve]:
        return self.selection.curves

    def predict(self, inputs) -> np.ndarray:
        return surrogate_forward(inputs, self.hidden_w, self.output_w, self.curves)

    def equations(self) -> Dict[int, List[str]]:
        return {node: curve.equations(var=f"z{node}") for node, curve in self.curves.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "selection": self.selection.to_dict(),
            "families": {
                str(node): {str(k): c.to_dict() for k, c in fam.curves.items()}
                for node, fam in self.families.items()
            },
            "mse": float(np.mean(self.residuals ** 2)),
        }


def fit_families(weighted: np.ndarray, config: PwlnnConfig) -> Dict[int, PwlFamily]:
    """Half-curve fit and mirror for every node; nodes are independent."""
    activation = config.activation
    samples = sorted_absolute_samples(weighted, config.sampling, config.sample_size)

    families = {}
    for node in range(weighted.shape[1]):
        x = samples[:, node]
        halves = fit_half_curve(x, activation(x) - activation.offset, l=config.l, no_bp=config.no_bp)
        families[node] = build_full_family(node, halves, activation, z=weighted[:, node])
        log.debug(f"Node {node}: breakpoint counts {families[node].counts}")
    return families


def pwlnn(
    inputs,
    ann_output,
    actual_output,
    hidden_w,
    output_w,
    actfun="sigmoid",
    l=None,
    max_bp=None,
    error=None,
    sampling=False,
    sample_size=None,
    notify: Optional[Callable[[str], Any]] = None,
) -> PwlnnModel:
    """Replace each hidden activation of a trained network with a PWL curve.

    Args:
        inputs: (n_rows, n_features) data the network was trained on
        ann_output: network predictions, (n_rows,) or (n_rows, n_outputs)
        actual_output: targets, same shape as ann_output
        hidden_w: (n_features + 1, n_nodes), bias in the last row
        output_w: (n_nodes + 1, n_outputs), bias in the last row; the output
            layer is linear
        actfun: "sigmoid" or "hyperbolic"
        l: minimum distance between breakpoints in data points (default 1)
        max_bp: maximum breakpoints per node, even (default 6)
        error: accepted MSE difference to the network in percent (default 20)
        sampling: subsample the sorted data before fitting
        sample_size: subsample size (default 300)
        notify: receives messages about applied defaults (default log.info)

    Returns:
        PwlnnModel with the selected curve per node and the surrogate's
        fitted values and residuals
    """
    inputs, ann_output, actual_output, hidden_w, output_w = validate_inputs(
        inputs, ann_output, actual_output, hidden_w, output_w
    )
    config = resolve_config(actfun, l, max_bp, error, sampling, sample_size, notify=notify)
    log.info(f"Value of l is {config.l}, maxBP is {config.max_bp}, error is {config.error:g}%")

    weighted = weighted_inputs(inputs, hidden_w)
    families = fit_families(weighted, config)

    selection = find_best_pwl(
        inputs,
        actual_output,
        hidden_w,
        output_w,
        config.activation,
        families,
        error=config.error,
        ann_output=ann_output,
        search=config.no_bp > 1,
    )

    fitted = surrogate_forward(inputs, hidden_w, output_w, selection.curves)
    return PwlnnModel(
        config=config,
        hidden_w=hidden_w,
        output_w=output_w,
        families=families,
        selection=selection,
        fitted=fitted,
        residuals=actual_output - fitted,
    )
