import numpy as np
import matplotlib.pyplot as plt

from pwlnn.activations import Activation


def plot_node_fit(curve, activation, z, ax=None, title=None):
    """Plot a node's activation, its PWL approximation and the breakpoints."""
    activation = Activation.parse(activation)
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    z = np.asarray(z, dtype=float)
    lim = max(float(np.abs(z).max()), 1.0)
    grid = np.linspace(-lim, lim, 400)

    ax.plot(grid, activation(grid), color="black", lw=1.5, label=activation.value)
    ax.plot(grid, curve(grid), color="tab:red", lw=1.2, ls="--", label=f"PWL ({curve.n_breakpoints} BP)")
    bp = curve.breakpoints
    ax.scatter(bp, curve(bp), color="tab:red", s=18, zorder=3)
    ax.scatter(z, activation(z), color="tab:blue", s=4, alpha=0.3, label="data")
    ax.set_xlabel("weighted input")
    ax.set_ylabel("activation")
    ax.set_title(title or f"{activation.value} vs PWL")
    ax.legend(loc="best", fontsize=8)
    return ax


def plot_selection_history(selection, error, ax=None):
    """Deviation from the reference MSE per level, with the tolerance line."""
    if ax is None:
        _, ax = plt.subplots(figsize=(5, 3.5))

    levels = [h.level for h in selection.history]
    deviation = [h.deviation_pct for h in selection.history]
    ax.plot(levels, deviation, marker="o")
    ax.axhline(error, color="gray", ls=":", label=f"tolerance {error}%")
    ax.axvline(selection.level, color="tab:green", alpha=0.4, label="selected")
    ax.set_xlabel("level (half-curve breakpoints)")
    ax.set_ylabel("MSE deviation (%)")
    ax.legend(loc="best", fontsize=8)
    return ax
