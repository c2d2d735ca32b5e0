"""
Cross-check the hand-derived gradients against PyTorch autograd.

Skipped when torch is not installed (pip install -e ".[test]").
"""

import pytest
import numpy as np

from reinforce_nn.ai.network import PolicyNetwork, ValueNetwork
from reinforce_nn.ai.ops import cross_entropy_grad, mse_grad

torch = pytest.importorskip("torch")


def torch_forward(W1, W2, x, head, slope=0.01):
    h = W1 @ x
    out = W2 @ torch.nn.functional.leaky_relu(h, negative_slope=slope)
    return torch.softmax(out, dim=0) if head == 'softmax' else out


class TestAutogradCrossCheck:
    """Compare network.grad() with autograd in float64."""

    def test_policy_gradients(self):
        net = PolicyNetwork(5, 8, 3, rng=np.random.default_rng(21))
        x = np.array([0.2, -1.0, 0.5, 1.5, -0.3])
        target = np.array([0.0, 0.7, 0.0])

        result = net.forward(x)
        dW1, dW2 = net.grad(result, cross_entropy_grad(result.output, target))

        W1 = torch.tensor(net.W1, dtype=torch.float64, requires_grad=True)
        W2 = torch.tensor(net.W2, dtype=torch.float64, requires_grad=True)
        probs = torch_forward(W1, W2, torch.tensor(x, dtype=torch.float64), 'softmax')
        loss = -(torch.tensor(target, dtype=torch.float64) * torch.log(probs + 1e-15)).sum()
        loss.backward()

        assert np.allclose(dW1, W1.grad.numpy(), atol=1e-8)
        assert np.allclose(dW2, W2.grad.numpy(), atol=1e-8)

    def test_value_gradients(self):
        net = ValueNetwork(5, 8, 1, rng=np.random.default_rng(22))
        x = np.array([1.0, 0.0, -0.5, 0.25, 2.0])
        y = np.array([0.4])

        result = net.forward(x)
        dW1, dW2 = net.grad(result, mse_grad(y, result.output))

        W1 = torch.tensor(net.W1, dtype=torch.float64, requires_grad=True)
        W2 = torch.tensor(net.W2, dtype=torch.float64, requires_grad=True)
        out = torch_forward(W1, W2, torch.tensor(x, dtype=torch.float64), 'linear')
        loss = ((out - torch.tensor(y, dtype=torch.float64)) ** 2).sum()
        loss.backward()

        assert np.allclose(dW1, W1.grad.numpy(), atol=1e-8)
        assert np.allclose(dW2, W2.grad.numpy(), atol=1e-8)
