"""Subsampling of sorted per-node data before breakpoint search."""

from __future__ import annotations

import logging
import warnings

import numpy as np

from pwlnn.errors import DataInsufficiencyWarning

log = logging.getLogger(__name__)


def take_sample(values: np.ndarray, size: int) -> np.ndarray:
    """Evenly spaced subsequence of a sorted array, endpoints included.

    Works along axis 0, so a (n_rows, n_nodes) matrix of column-wise sorted
    values is sampled row-wise. If there are fewer than ``size`` rows the
    input is returned unchanged.
    """
    values = np.asarray(values, dtype=float)
    n = values.shape[0]
    if n < size:
        warnings.warn(
            f"Data size ({n}) is smaller than sample size ({size}). Cannot generate sample data.",
            DataInsufficiencyWarning,
            stacklevel=2,
        )
        return values
    # Spacing (n - 1) / (size - 1) >= 1, so the rounded positions are distinct.
    idx = np.round(np.linspace(0, n - 1, size)).astype(int)
    return values[idx]


def sorted_absolute_samples(weighted: np.ndarray, sampling: bool = False, sample_size: int = 300) -> np.ndarray:
    """Absolute weighted inputs, sorted per column, optionally sampled, zero-anchored.

    Returns:
        (n_kept + 1, n_nodes) array whose first row is 0
    """
    data = np.sort(np.abs(np.asarray(weighted, dtype=float)), axis=0)
    if not sampling:
        if data.shape[0] > 800:
            log.info("Sampling data is advised for data size greater than 800.")
    else:
        data = take_sample(data, sample_size)
    return np.vstack([np.zeros((1, data.shape[1])), data])
