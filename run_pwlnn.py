"""
Approximate a trained single-hidden-layer network with piecewise-linear nodes.

Usage:
    # Defaults (l=1, max_bp=6, error=20)
    python run_pwlnn.py data_path=/path/to/network.npz

    # Hyperbolic activation, up to 8 breakpoints per node, sampled fitting
    python run_pwlnn.py data_path=net.npz activation=hyperbolic max_bp=8 sampling=true

    # Sweep the error tolerance
    python run_pwlnn.py -m data_path=net.npz error=5,10,20
"""

import json
import logging

import hydra
import numpy as np
from omegaconf import DictConfig, OmegaConf

from pwlnn.config import config_from_omegaconf
from pwlnn.pipeline import pwlnn

log = logging.getLogger(__name__)

REQUIRED_ARRAYS = ("inputs", "ann_output", "actual_output", "hidden_w", "output_w")


def load_bundle(path):
    """Load the network arrays from an .npz file."""
    with np.load(hydra.utils.to_absolute_path(path)) as data:
        missing = [k for k in REQUIRED_ARRAYS if k not in data.files]
        if missing:
            raise KeyError(f"{path} is missing arrays: {missing}")
        return {k: data[k] for k in REQUIRED_ARRAYS}


@hydra.main(version_base=None, config_path="configs", config_name="config")
def main(cfg: DictConfig):
    log.info(f"Config:\n{OmegaConf.to_yaml(cfg)}")

    config = config_from_omegaconf(cfg)
    arrays = load_bundle(cfg.data_path)
    model = pwlnn(
        **arrays,
        actfun=config.activation,
        l=config.l,
        max_bp=config.max_bp,
        error=config.error,
        sampling=config.sampling,
        sample_size=config.sample_size,
    )

    selection = model.selection
    log.info(f"Reference MSE: {selection.reference_mse:.6e}")
    log.info(f"Surrogate MSE: {selection.surrogate_mse:.6e} ({selection.deviation_pct:.2f}% deviation)")
    for node, lines in model.equations().items():
        log.info(f"Node {node}:\n  " + "\n  ".join(lines))

    with open(cfg.output, "w") as f:
        json.dump({
            "config": OmegaConf.to_container(cfg, resolve=True),
            "results": model.to_dict(),
        }, f, indent=2)

    return selection.deviation_pct


if __name__ == "__main__":
    main()
