"""
Feed-Forward Network
====================

A two-layer network with hand-derived backpropagation.

Architecture:
    x -> W1 -> leaky ReLU -> W2 -> output head

    Policy head: softmax, output is a probability distribution over actions
    Value head:  identity, output is a raw baseline estimate

Forward returns every intermediate in a ForwardResult instead of caching
them on the network; the caller hands the same ForwardResult back to grad().
This keeps the network's only state its two weight matrices.

Backward (policy head):
    d_out    = softmax_grad(probs, d_probs)
    d_h_relu, dW2 = multiply_grad(W2, h_relu, d_out)
    d_h      = leaky_relu_grad(h, d_h_relu)
    _, dW1   = multiply_grad(W1, x, d_h)
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .errors import ShapeError
from .ops import (
    LEAKY_SLOPE,
    leaky_relu,
    leaky_relu_grad,
    multiply,
    multiply_grad,
    sgd_update,
    softmax,
    softmax_grad,
)


WeightPair = Tuple[np.ndarray, np.ndarray]


@dataclass(frozen=True)
class ForwardResult:
    """
    Intermediates of one forward pass.

    Attributes:
        x: Input vector
        h: Hidden pre-activation (W1 x)
        h_relu: Hidden activation
        out: Output pre-activation (W2 h_relu)
        output: Head output (softmax(out) or out itself)
    """
    x: np.ndarray
    h: np.ndarray
    h_relu: np.ndarray
    out: np.ndarray
    output: np.ndarray


def _identity(out: np.ndarray) -> np.ndarray:
    return out


def _identity_grad(output: np.ndarray, grad_output: np.ndarray) -> np.ndarray:
    return np.asarray(grad_output, dtype=np.float64)


class FeedForwardNetwork:
    """
    Two weight matrices with a leaky-ReLU hidden layer and a pluggable head.

    Attributes:
        W1 (np.ndarray): Shape (hidden_size, input_size)
        W2 (np.ndarray): Shape (output_size, hidden_size)

    Example:
        >>> net = FeedForwardNetwork(3, 4, 3, output_activation='softmax')
        >>> result = net.forward([1.0, 2.0, 3.0])
        >>> dW1, dW2 = net.grad(result, d_probs)
        >>> net.backward(dW1, dW2, lr=0.01)
    """

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        output_activation: str = 'softmax',
        rng: Optional[np.random.Generator] = None,
        slope: float = LEAKY_SLOPE,
        init_scale: float = 0.5
    ):
        """
        Initialize the network.

        Args:
            input_size: Dimension of input vectors
            hidden_size: Width of the hidden layer
            output_size: Dimension of the output
            output_activation: 'softmax' (policy) or 'linear' (value)
            rng: Random source for weight initialization
            slope: Leaky ReLU negative slope
            init_scale: Weights start as Uniform(-init_scale, init_scale)
        """
        if min(input_size, hidden_size, output_size) <= 0:
            raise ShapeError(
                f"layer sizes must be positive, got "
                f"({input_size}, {hidden_size}, {output_size})"
            )

        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = output_size
        self.output_activation = output_activation
        self.slope = slope

        self._output_fn, self._output_grad_fn = self._get_output_fns()

        rng = rng if rng is not None else np.random.default_rng()
        self.W1 = self._init_weights(rng, hidden_size, input_size, init_scale)
        self.W2 = self._init_weights(rng, output_size, hidden_size, init_scale)

    @staticmethod
    def _init_weights(
        rng: np.random.Generator,
        rows: int,
        cols: int,
        scale: float
    ) -> np.ndarray:
        """Independent uniform noise centered at zero."""
        return rng.uniform(-scale, scale, size=(rows, cols))

    def _get_output_fns(self) -> Tuple[Callable, Callable]:
        """Get the output head and its backward rule based on output_activation."""
        head_map: Dict[str, Tuple[Callable, Callable]] = {
            'softmax': (softmax, softmax_grad),
            'linear': (_identity, _identity_grad),
        }
        if self.output_activation not in head_map:
            raise ValueError(
                f"Unknown output activation '{self.output_activation}' "
                f"(expected one of {sorted(head_map)})"
            )
        return head_map[self.output_activation]

    def forward(self, x) -> ForwardResult:
        """
        Forward pass.

        Args:
            x: Input vector of length input_size

        Returns:
            ForwardResult holding (x, h, h_relu, out, output)

        Raises:
            ShapeError: if len(x) != input_size
        """
        x = np.asarray(x, dtype=np.float64)
        h = multiply(self.W1, x)
        h_relu = leaky_relu(h, self.slope)
        out = multiply(self.W2, h_relu)
        output = self._output_fn(out)
        return ForwardResult(x=x, h=h, h_relu=h_relu, out=out, output=output)

    def grad(self, result: ForwardResult, grad_output) -> WeightPair:
        """
        Backpropagate a gradient on the head output to both weight matrices.

        Does not modify the weights.

        Args:
            result: ForwardResult from the matching forward() call
            grad_output: Gradient of the loss with respect to result.output

        Returns:
            (grad_W1, grad_W2)
        """
        grad_out = self._output_grad_fn(result.output, grad_output)
        grad_h_relu, grad_W2 = multiply_grad(self.W2, result.h_relu, grad_out)
        grad_h = leaky_relu_grad(result.h, grad_h_relu, self.slope)
        _, grad_W1 = multiply_grad(self.W1, result.x, grad_h)
        return grad_W1, grad_W2

    def backward(self, grad_W1: np.ndarray, grad_W2: np.ndarray, lr: float) -> None:
        """Apply one SGD step to both weight matrices in place."""
        sgd_update(self.W1, grad_W1, lr)
        sgd_update(self.W2, grad_W2, lr)

    def export_weights(self) -> WeightPair:
        """Return copies of (W1, W2)."""
        return self.W1.copy(), self.W2.copy()

    def import_weights(self, weights: WeightPair) -> None:
        """
        Replace both weight matrices verbatim.

        Raises:
            ShapeError: if either matrix does not match this network's shape
        """
        W1, W2 = (np.array(w, dtype=np.float64) for w in weights)
        if W1.shape != self.W1.shape:
            raise ShapeError(f"W1 shape mismatch: expected {self.W1.shape}, got {W1.shape}")
        if W2.shape != self.W2.shape:
            raise ShapeError(f"W2 shape mismatch: expected {self.W2.shape}, got {W2.shape}")
        self.W1 = W1
        self.W2 = W2

    def get_layer_info(self) -> List[Dict]:
        """
        Get information about each layer.

        Returns:
            List of dicts with layer metadata
        """
        return [
            {'name': 'Input', 'neurons': self.input_size, 'type': 'input'},
            {'name': 'Hidden', 'neurons': self.hidden_size, 'type': 'hidden'},
            {'name': f'Output ({self.output_activation})',
             'neurons': self.output_size, 'type': 'output'},
        ]

    def count_parameters(self) -> int:
        """Return total number of weights."""
        return int(self.W1.size + self.W2.size)


def PolicyNetwork(
    input_size: int,
    hidden_size: int,
    output_size: int,
    **kwargs
) -> FeedForwardNetwork:
    """Network ending in softmax: state -> action distribution."""
    return FeedForwardNetwork(input_size, hidden_size, output_size,
                              output_activation='softmax', **kwargs)


def ValueNetwork(
    input_size: int,
    hidden_size: int,
    output_size: int = 1,
    **kwargs
) -> FeedForwardNetwork:
    """Network with a raw linear output: state -> baseline estimate."""
    return FeedForwardNetwork(input_size, hidden_size, output_size,
                              output_activation='linear', **kwargs)


# Testing
if __name__ == "__main__":
    net = PolicyNetwork(3, 4, 3, rng=np.random.default_rng(0))

    print("=" * 60)
    print("Policy Network Architecture")
    print("=" * 60)

    for i, info in enumerate(net.get_layer_info()):
        print(f"Layer {i}: {info['name']} - {info['neurons']} neurons ({info['type']})")

    print(f"\nTotal parameters: {net.count_parameters():,}")

    result = net.forward([1.0, 2.0, 3.0])
    print(f"\nTest forward pass:")
    print(f"  Probabilities: {result.output}")
    print(f"  Sum: {result.output.sum():.6f}")
    print("=" * 60)
