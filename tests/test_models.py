"""Tests for the torch network export and the PWL surrogate module."""

import numpy as np
import torch

from pwlnn.activations import network_forward
from pwlnn.models import PWLActivation, PWLSurrogate, SingleHiddenLayerMLP
from pwlnn.pipeline import pwlnn


def _random_mlp(activation="sigmoid", seed=0):
    torch.manual_seed(seed)
    return SingleHiddenLayerMLP(input_size=3, hidden_size=5, output_size=1, activation=activation)


class TestSingleHiddenLayerMLP:
    def test_export_matches_numpy_forward(self):
        for activation in ("sigmoid", "hyperbolic"):
            model = _random_mlp(activation)
            x = torch.randn(16, 3)
            hidden_w, output_w = model.export_weights()
            assert hidden_w.shape == (4, 5)
            assert output_w.shape == (6, 1)

            with torch.no_grad():
                expected = model(x).numpy()
            actual = network_forward(x.numpy(), hidden_w, output_w, activation)
            np.testing.assert_allclose(actual, expected, atol=1e-5)

    def test_from_weights_roundtrip(self):
        model = _random_mlp("hyperbolic")
        hidden_w, output_w = model.export_weights()
        rebuilt = SingleHiddenLayerMLP.from_weights(hidden_w, output_w, "hyperbolic")
        x = torch.randn(8, 3)
        with torch.no_grad():
            assert torch.allclose(model(x), rebuilt(x), atol=1e-6)


class TestPWLSurrogate:
    def _fit(self):
        model = _random_mlp("sigmoid", seed=1)
        hidden_w, output_w = model.export_weights()
        rng = np.random.default_rng(0)
        X = rng.normal(size=(200, 3))
        with torch.no_grad():
            ann = model(torch.as_tensor(X, dtype=torch.float32)).double().numpy()
        actual = ann + rng.normal(scale=0.05, size=ann.shape)
        return X, pwlnn(X, ann, actual, hidden_w, output_w, error=50)

    def test_matches_numpy_prediction(self):
        X, result = self._fit()
        surrogate = PWLSurrogate.from_model(result)
        with torch.no_grad():
            out = surrogate(torch.as_tensor(X)).numpy()
        np.testing.assert_allclose(out, result.predict(X), atol=1e-10)

    def test_activation_per_node(self):
        X, result = self._fit()
        layer = PWLActivation(result.curves)
        z = torch.linspace(-6, 6, 101, dtype=torch.float64).unsqueeze(1).repeat(1, len(result.curves))
        out = layer(z)
        assert out.shape == z.shape
        for node, curve in result.curves.items():
            np.testing.assert_allclose(out[:, node].numpy(), curve(z[:, node].numpy()), atol=1e-12)

    def test_single_segment_curve(self):
        from pwlnn.core import PwlCurve, Segment

        curve = PwlCurve((Segment(-np.inf, np.inf, 0.25, 0.5),), n_breakpoints=0)
        layer = PWLActivation({0: curve})
        out = layer(torch.tensor([[-2.0], [0.0], [2.0]], dtype=torch.float64))
        assert torch.allclose(out.squeeze(1), torch.tensor([0.0, 0.5, 1.0], dtype=torch.float64))
