import numpy as np
import torch
import torch.nn as nn

from pwlnn.activations import Activation

_TORCH_ACTIVATIONS = {
    Activation.SIGMOID: nn.Sigmoid,
    Activation.HYPERBOLIC: nn.Tanh,
}


def _affine_to_matrix(layer: nn.Linear) -> np.ndarray:
    """nn.Linear -> (in_features + 1, out_features) array, bias in the last row."""
    with torch.no_grad():
        w = torch.cat([layer.weight.T, layer.bias.unsqueeze(0)], dim=0)
    return w.detach().cpu().double().numpy()


def _load_affine(layer: nn.Linear, matrix) -> None:
    matrix = torch.as_tensor(np.asarray(matrix, dtype=float), dtype=layer.weight.dtype)
    if matrix.ndim == 1:
        matrix = matrix.unsqueeze(1)
    with torch.no_grad():
        layer.weight.copy_(matrix[:-1].T)
        layer.bias.copy_(matrix[-1])


class SingleHiddenLayerMLP(nn.Module):
    """One hidden layer with sigmoid or tanh, linear output."""

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int = 1,
        activation="sigmoid",
    ):
        super().__init__()
        self.activation = Activation.parse(activation)
        self.layers = nn.Sequential(
            nn.Linear(input_size, hidden_size),
            _TORCH_ACTIVATIONS[self.activation](),
            nn.Linear(hidden_size, output_size),
        )

    def forward(self, x):
        return self.layers(x)

    def export_weights(self):
        """Return (hidden_w, output_w) in the layout pwlnn() expects."""
        return _affine_to_matrix(self.layers[0]), _affine_to_matrix(self.layers[2])

    @classmethod
    def from_weights(cls, hidden_w, output_w, activation="sigmoid"):
        hidden_w = np.asarray(hidden_w, dtype=float)
        output_w = np.asarray(output_w, dtype=float)
        if output_w.ndim == 1:
            output_w = output_w.reshape(-1, 1)
        model = cls(hidden_w.shape[0] - 1, hidden_w.shape[1], output_w.shape[1], activation)
        _load_affine(model.layers[0], hidden_w)
        _load_affine(model.layers[2], output_w)
        return model


class PWLActivation(nn.Module):
    """Applies a separate piecewise-linear curve to every hidden unit.

    Curves are stored as buffers (breakpoints, slopes, intercepts) per node,
    so nodes may have different breakpoint counts.
    """

    def __init__(self, curves):
        super().__init__()
        self.n_nodes = len(curves)
        for node in range(self.n_nodes):
            curve = curves[node]
            self.register_buffer(f"breakpoints_{node}", torch.as_tensor(curve.breakpoints, dtype=torch.float64))
            self.register_buffer(f"slopes_{node}", torch.as_tensor(curve.slopes, dtype=torch.float64))
            self.register_buffer(f"intercepts_{node}", torch.as_tensor(curve.intercepts, dtype=torch.float64))

    def forward(self, z):
        columns = []
        for node in range(self.n_nodes):
            bp = getattr(self, f"breakpoints_{node}")
            slopes = getattr(self, f"slopes_{node}").to(z.dtype)
            intercepts = getattr(self, f"intercepts_{node}").to(z.dtype)
            col = z[:, node].contiguous()
            if bp.numel() == 0:
                idx = torch.zeros_like(col, dtype=torch.long)
            else:
                # right=True matches numpy searchsorted(side="right")
                idx = torch.bucketize(col, bp.to(z.dtype), right=True)
            columns.append(slopes[idx] * col + intercepts[idx])
        return torch.stack(columns, dim=1)


class PWLSurrogate(nn.Module):
    """Linear -> per-node PWL -> linear; the network with its activations replaced."""

    def __init__(self, hidden_w, output_w, curves):
        super().__init__()
        hidden_w = np.asarray(hidden_w, dtype=float)
        output_w = np.asarray(output_w, dtype=float)
        if output_w.ndim == 1:
            output_w = output_w.reshape(-1, 1)
        self.hidden = nn.Linear(hidden_w.shape[0] - 1, hidden_w.shape[1]).double()
        self.pwl = PWLActivation(curves)
        self.output = nn.Linear(output_w.shape[0] - 1, output_w.shape[1]).double()
        _load_affine(self.hidden, hidden_w)
        _load_affine(self.output, output_w)

    @classmethod
    def from_model(cls, model):
        """Build from a PwlnnModel."""
        return cls(model.hidden_w, model.output_w, model.curves)

    def forward(self, x):
        x = x.to(self.hidden.weight.dtype)
        return self.output(self.pwl(self.hidden(x)))
