"""Activation functions and the forward pass of a single-hidden-layer network."""

from __future__ import annotations

from enum import Enum

import numpy as np
from scipy.special import expit

from pwlnn.errors import ConfigurationError


class Activation(str, Enum):
    """Hidden-layer activation, point-symmetric about (0, offset)."""

    SIGMOID = "sigmoid"
    HYPERBOLIC = "hyperbolic"

    @classmethod
    def parse(cls, name) -> "Activation":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ConfigurationError(
                f"Activation function can be either sigmoid or hyperbolic, got {name!r}"
            ) from None

    @property
    def offset(self) -> float:
        """Constraint offset: the activation value at 0."""
        return _OFFSETS[self]

    def __call__(self, z):
        return _FORWARD[self](np.asarray(z, dtype=float))


_FORWARD = {
    Activation.SIGMOID: expit,
    Activation.HYPERBOLIC: np.tanh,
}

_OFFSETS = {
    Activation.SIGMOID: 0.5,
    Activation.HYPERBOLIC: 0.0,
}


def weighted_inputs(inputs: np.ndarray, hidden_w: np.ndarray) -> np.ndarray:
    """Pre-activations of every hidden node.

    Args:
        inputs: (n_rows, n_features)
        hidden_w: (n_features + 1, n_nodes), bias in the last row

    Returns:
        (n_rows, n_nodes) weighted inputs
    """
    inputs = np.asarray(inputs, dtype=float)
    hidden_w = np.asarray(hidden_w, dtype=float)
    return inputs @ hidden_w[:-1] + hidden_w[-1]


def linear_output(hidden: np.ndarray, output_w: np.ndarray) -> np.ndarray:
    """Linear output layer; output_w is (n_nodes + 1, n_outputs), bias last."""
    output_w = np.asarray(output_w, dtype=float)
    if output_w.ndim == 1:
        output_w = output_w.reshape(-1, 1)
    return hidden @ output_w[:-1] + output_w[-1]


def network_forward(inputs, hidden_w, output_w, activation) -> np.ndarray:
    """Reference forward pass with the true activation."""
    activation = Activation.parse(activation)
    return linear_output(activation(weighted_inputs(inputs, hidden_w)), output_w)
