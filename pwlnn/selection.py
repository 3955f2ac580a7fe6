"""Pick the smallest breakpoint level whose surrogate stays within the error budget."""

from __future__ import annotations

import logging
import warnings
from typing import Dict, Mapping

import numpy as np

from pwlnn.activations import Activation, linear_output, network_forward, weighted_inputs
from pwlnn.core import LevelEvaluation, PwlCurve, PwlFamily, SelectionResult
from pwlnn.errors import SelectionInadequacyWarning

log = logging.getLogger(__name__)


def mse(prediction, target) -> float:
    prediction = np.asarray(prediction, dtype=float)
    target = np.asarray(target, dtype=float).reshape(prediction.shape)
    return float(np.mean((prediction - target) ** 2))


def percent_deviation(surrogate_mse: float, reference_mse: float) -> float:
    """|surrogate - reference| as a percentage of the reference MSE."""
    if reference_mse == 0.0:
        return 0.0 if surrogate_mse == 0.0 else float("inf")
    return float(abs(surrogate_mse - reference_mse) / reference_mse * 100.0)


def surrogate_forward(inputs, hidden_w, output_w, curves: Mapping[int, PwlCurve]) -> np.ndarray:
    """Forward pass with each node's activation replaced by its PWL curve."""
    z = weighted_inputs(inputs, hidden_w)
    hidden = np.empty_like(z)
    for node in range(z.shape[1]):
        hidden[:, node] = curves[node](z[:, node])
    return linear_output(hidden, output_w)


def _configuration(families: Mapping[int, PwlFamily], level: int) -> Dict[int, PwlCurve]:
    return {node: fam.at_level(level) for node, fam in families.items()}


def find_best_pwl(
    inputs,
    actual_output,
    hidden_w,
    output_w,
    activation,
    families: Mapping[int, PwlFamily],
    error: float = 20.0,
    ann_output=None,
    search: bool = True,
) -> SelectionResult:
    """Evaluate cross-node configurations from coarsest to richest level.

    At level j every node uses ``families[node].at_level(j)``. The first
    level whose surrogate MSE is within ``error`` percent of the reference
    MSE is accepted. If none is, the richest level is returned with
    ``tolerance_met=False``.

    With ``search=False`` only level 1 is evaluated and returned as is.

    Args:
        inputs: (n_rows, n_features) data the network was trained on
        actual_output: target values
        hidden_w: (n_features + 1, n_nodes)
        output_w: (n_nodes + 1, n_outputs)
        activation: Activation or its name
        families: node id -> PwlFamily of full curves
        error: tolerance in percent of the reference MSE
        ann_output: network predictions; recomputed from the weights if None
        search: whether to search beyond level 1
    """
    activation = Activation.parse(activation)
    if ann_output is None:
        ann_output = network_forward(inputs, hidden_w, output_w, activation)
    reference = mse(ann_output, actual_output)

    depth = max(len(f) for f in families.values())
    levels = range(1, depth + 1) if search else range(1, 2)

    history = []
    chosen = None
    for level in levels:
        curves = _configuration(families, level)
        surrogate = mse(surrogate_forward(inputs, hidden_w, output_w, curves), actual_output)
        evaluation = LevelEvaluation(
            level=level,
            total_breakpoints=int(sum(c.n_breakpoints for c in curves.values())),
            surrogate_mse=surrogate,
            deviation_pct=percent_deviation(surrogate, reference),
        )
        history.append(evaluation)
        log.debug(
            f"Level {level}: {evaluation.total_breakpoints} breakpoints, "
            f"mse={surrogate:.4e}, deviation={evaluation.deviation_pct:.2f}%"
        )
        if evaluation.deviation_pct <= error:
            chosen = (curves, evaluation)
            break

    tolerance_met = chosen is not None
    if chosen is None:
        last = history[-1]
        chosen = (_configuration(families, last.level), last)
        if search:
            warnings.warn(
                f"No breakpoint level met the {error}% tolerance; using level {last.level} "
                f"with {last.deviation_pct:.2f}% deviation.",
                SelectionInadequacyWarning,
                stacklevel=2,
            )

    curves, evaluation = chosen
    log.info(
        f"Selected level {evaluation.level} ({evaluation.total_breakpoints} breakpoints), "
        f"deviation {evaluation.deviation_pct:.2f}% vs tolerance {error}%"
    )
    return SelectionResult(
        curves=curves,
        level=evaluation.level,
        reference_mse=reference,
        surrogate_mse=evaluation.surrogate_mse,
        deviation_pct=evaluation.deviation_pct,
        tolerance_met=tolerance_met,
        searched=search,
        history=history,
    )
