"""Parameter defaulting and boundary validation."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from pwlnn.activations import Activation
from pwlnn.errors import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_L = 1
DEFAULT_MAX_BP = 6
DEFAULT_ERROR = 20.0
DEFAULT_SAMPLE_SIZE = 300


@dataclass(frozen=True)
class PwlnnConfig:
    """Fully resolved parameters of one approximation run."""

    activation: Activation = Activation.SIGMOID
    l: int = DEFAULT_L
    max_bp: int = DEFAULT_MAX_BP
    error: float = DEFAULT_ERROR
    sampling: bool = False
    sample_size: int = DEFAULT_SAMPLE_SIZE

    @property
    def no_bp(self) -> int:
        """Breakpoints per half curve."""
        return self.max_bp // 2

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["activation"] = self.activation.value
        return d


def _resolve(
    actfun="sigmoid",
    l=None,
    max_bp=None,
    error=None,
    sampling=False,
    sample_size=None,
) -> Tuple[PwlnnConfig, List[str]]:
    notices: List[str] = []
    activation = Activation.parse(actfun)

    if l is None:
        l = DEFAULT_L
        notices.append(f"Default value of l is used, l = {DEFAULT_L}.")
    if isinstance(l, bool) or int(l) != l or l < 1:
        raise ConfigurationError(f"l must be an integer >= 1, got {l!r}")

    if max_bp is None:
        max_bp = DEFAULT_MAX_BP
        notices.append(f"Default value of maxBP is used, maxBP = {DEFAULT_MAX_BP}.")
    if isinstance(max_bp, bool) or int(max_bp) != max_bp or max_bp < 2 or max_bp % 2 != 0:
        raise ConfigurationError(f"Max number BP has to be a positive even number, got {max_bp!r}")

    if error is None:
        error = DEFAULT_ERROR
        notices.append(f"Default value of error is used, error = {DEFAULT_ERROR:g}%.")
    if error < 0:
        raise ConfigurationError(f"error must be >= 0, got {error!r}")

    if sample_size is None:
        sample_size = DEFAULT_SAMPLE_SIZE
        if sampling:
            notices.append(f"Default value of sample size is used, sample size = {DEFAULT_SAMPLE_SIZE}.")
    if int(sample_size) != sample_size or sample_size < 2:
        raise ConfigurationError(f"sample_size must be an integer >= 2, got {sample_size!r}")

    config = PwlnnConfig(
        activation=activation,
        l=int(l),
        max_bp=int(max_bp),
        error=float(error),
        sampling=bool(sampling),
        sample_size=int(sample_size),
    )
    return config, notices


def resolve_config(
    actfun="sigmoid",
    l=None,
    max_bp=None,
    error=None,
    sampling=False,
    sample_size=None,
    notify: Optional[Callable[[str], Any]] = None,
) -> PwlnnConfig:
    """Fill in defaults and validate parameters.

    Each applied default is reported through ``notify`` (``log.info`` if
    None). Raises ConfigurationError on invalid values.
    """
    config, notices = _resolve(actfun, l, max_bp, error, sampling, sample_size)
    notify = log.info if notify is None else notify
    for notice in notices:
        notify(notice)
    return config


def config_from_omegaconf(cfg, notify: Optional[Callable[[str], Any]] = None) -> PwlnnConfig:
    """Resolve a PwlnnConfig from a Hydra/OmegaConf node; missing keys use defaults."""
    get = cfg.get
    return resolve_config(
        actfun=get("activation", "sigmoid"),
        l=get("l", None),
        max_bp=get("max_bp", None),
        error=get("error", None),
        sampling=bool(get("sampling", False)),
        sample_size=get("sample_size", None),
        notify=notify,
    )


def _as_matrix(name: str, value) -> np.ndarray:
    if value is None:
        raise ConfigurationError("Must provide Input data, output data, hidden weights and output weights.")
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ConfigurationError(f"{name} must be 1-D or 2-D, got shape {arr.shape}")
    return arr


def validate_inputs(inputs, ann_output, actual_output, hidden_w, output_w):
    """Check presence and shape consistency; return the arrays as 2-D floats."""
    inputs = _as_matrix("inputs", inputs)
    ann_output = _as_matrix("ann_output", ann_output)
    actual_output = _as_matrix("actual_output", actual_output)
    hidden_w = _as_matrix("hidden_w", hidden_w)
    output_w = _as_matrix("output_w", output_w)

    n_rows = inputs.shape[0]
    if ann_output.shape[0] != n_rows:
        raise ConfigurationError("Length of Input and output data do not match.")
    if actual_output.shape[0] != n_rows:
        raise ConfigurationError("Length of Input and actual output data do not match.")
    if hidden_w.shape[0] != inputs.shape[1] + 1:
        raise ConfigurationError("Weights per hidden neuron does not match the number of input.")
    if output_w.shape[0] != hidden_w.shape[1] + 1:
        raise ConfigurationError("Weights per output neuron does not match the number of hidden nodes.")
    if output_w.shape[1] != ann_output.shape[1]:
        raise ConfigurationError(
            f"Output weights have {output_w.shape[1]} columns but the output data has {ann_output.shape[1]}."
        )
    if actual_output.shape[1] != ann_output.shape[1]:
        raise ConfigurationError("Actual output and network output widths do not match.")
    return inputs, ann_output, actual_output, hidden_w, output_w
