"""
pwlnn: piecewise-linear approximation of single-hidden-layer networks.
"""

# Submodules
from pwlnn import activations, config, core, fitting, mirror, models, sampling, selection, visualization

# Torch interop
from pwlnn.models import PWLActivation, PWLSurrogate, SingleHiddenLayerMLP

# Plotting
from pwlnn.visualization import plot_node_fit, plot_selection_history

# Entry point
from pwlnn.pipeline import PwlnnModel, fit_families, pwlnn

# Primitives
from pwlnn.activations import Activation, network_forward, weighted_inputs

# Data model
from pwlnn.core import LevelEvaluation, PwlCurve, PwlFamily, Segment, SelectionResult

# Configuration and errors
from pwlnn.config import PwlnnConfig, resolve_config, validate_inputs
from pwlnn.errors import ConfigurationError, DataInsufficiencyWarning, SelectionInadequacyWarning

# Algorithm
from pwlnn.sampling import sorted_absolute_samples, take_sample
from pwlnn.fitting import fit_half_curve
from pwlnn.mirror import build_full_family, mirror_curve
from pwlnn.selection import find_best_pwl, percent_deviation, surrogate_forward

__all__ = [
    # Submodules
    "activations",
    "config",
    "core",
    "fitting",
    "mirror",
    "models",
    "sampling",
    "selection",
    "visualization",
    # Torch interop
    "SingleHiddenLayerMLP",
    "PWLActivation",
    "PWLSurrogate",
    # Plotting
    "plot_node_fit",
    "plot_selection_history",
    # Entry point
    "pwlnn",
    "fit_families",
    "PwlnnModel",
    # Primitives
    "Activation",
    "weighted_inputs",
    "network_forward",
    # Data model
    "Segment",
    "PwlCurve",
    "PwlFamily",
    "LevelEvaluation",
    "SelectionResult",
    # Configuration and errors
    "PwlnnConfig",
    "resolve_config",
    "validate_inputs",
    "ConfigurationError",
    "DataInsufficiencyWarning",
    "SelectionInadequacyWarning",
    # Algorithm
    "take_sample",
    "sorted_absolute_samples",
    "fit_half_curve",
    "mirror_curve",
    "build_full_family",
    "find_best_pwl",
    "percent_deviation",
    "surrogate_forward",
]
