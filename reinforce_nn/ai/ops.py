"""
Linear Algebra Primitives
=========================

Single-vector operations with hand-derived gradients.

Forward ops and their backward rules:
    multiply(W, x)            y = W x
    multiply_grad(W, x, dy)   dx = W^T dy,  dW = dy x^T
    leaky_relu(x)             y = x if x > 0 else slope * x
    leaky_relu_grad(x, dy)    gated by the sign of the pre-activation x
    softmax(x)                p = exp(x - max x) / sum
    softmax_grad(p, dp)       Jacobian-vector product using the output p

Losses:
    mse / mse_grad                     mean squared error, grad = 2 (y_hat - y)
    cross_entropy / cross_entropy_grad -sum t log p, grad = -t / (p + eps)

All vectors are 1-D numpy arrays; weight matrices are [out_dim, in_dim].
"""

import math
import warnings
from typing import Tuple

import numpy as np

from .errors import ShapeError, NumericGuardTriggered


# Guard against log(0) and division by zero
EPSILON = 1e-15

# Default negative-side slope of leaky ReLU
LEAKY_SLOPE = 0.01

# exp() overflows float64 above this
_EXP_LIMIT = math.log(np.finfo(np.float64).max)


def _as_vector(x, name: str) -> np.ndarray:
    arr = np.asarray(x, dtype=np.float64)
    if arr.ndim != 1:
        raise ShapeError(f"{name} must be a vector, got shape {arr.shape}")
    return arr


def _as_matrix(W, name: str) -> np.ndarray:
    arr = np.asarray(W, dtype=np.float64)
    if arr.ndim != 2:
        raise ShapeError(f"{name} must be a matrix, got shape {arr.shape}")
    return arr


def multiply(W, x) -> np.ndarray:
    """
    Matrix-vector product.

    Args:
        W: Weight matrix of shape (m, n)
        x: Input vector of length n

    Returns:
        Output vector of length m

    Raises:
        ShapeError: if len(x) != n
    """
    W = _as_matrix(W, "W")
    x = _as_vector(x, "x")
    if x.shape[0] != W.shape[1]:
        raise ShapeError(
            f"input length mismatch: W is {W.shape[0]}x{W.shape[1]}, x has {x.shape[0]}"
        )
    return W @ x


def multiply_grad(W, x, grad_y) -> Tuple[np.ndarray, np.ndarray]:
    """
    Adjoint of multiply().

    Returns:
        (grad_x, grad_W) with grad_x[j] = sum_i W[i][j] grad_y[i]
        and grad_W[i][j] = x[j] grad_y[i]
    """
    W = _as_matrix(W, "W")
    x = _as_vector(x, "x")
    grad_y = _as_vector(grad_y, "grad_y")
    if x.shape[0] != W.shape[1]:
        raise ShapeError(
            f"input length mismatch: W is {W.shape[0]}x{W.shape[1]}, x has {x.shape[0]}"
        )
    if grad_y.shape[0] != W.shape[0]:
        raise ShapeError(
            f"output gradient mismatch: W is {W.shape[0]}x{W.shape[1]}, "
            f"grad_y has {grad_y.shape[0]}"
        )
    grad_x = W.T @ grad_y
    grad_W = np.outer(grad_y, x)
    return grad_x, grad_W


def leaky_relu(x, slope: float = LEAKY_SLOPE) -> np.ndarray:
    x = _as_vector(x, "x")
    return np.where(x > 0, x, slope * x)


def leaky_relu_grad(x, grad_y, slope: float = LEAKY_SLOPE) -> np.ndarray:
    """Backward rule for leaky_relu; x is the cached pre-activation."""
    x = _as_vector(x, "x")
    grad_y = _as_vector(grad_y, "grad_y")
    if x.shape != grad_y.shape:
        raise ShapeError(f"leaky_relu_grad: x has {x.shape[0]}, grad_y has {grad_y.shape[0]}")
    return np.where(x > 0, grad_y, slope * grad_y)


def softmax(x) -> np.ndarray:
    """Numerically stable softmax (max is subtracted before exponentiating)."""
    x = _as_vector(x, "x")
    if x.shape[0] == 0:
        raise ShapeError("softmax of an empty vector")
    shift = np.max(x)
    if shift > _EXP_LIMIT:
        warnings.warn(
            f"softmax input max {shift:.3g} would overflow without shifting",
            NumericGuardTriggered,
            stacklevel=2,
        )
    exps = np.exp(x - shift)
    return exps / np.sum(exps)


def softmax_grad(out, grad_out) -> np.ndarray:
    """
    Jacobian-vector product of softmax.

    grad_x[i] = sum_j grad_out[j] * out[i] * (1[i == j] - out[j])

    Args:
        out: softmax OUTPUT (not its input)
        grad_out: gradient with respect to the output
    """
    out = _as_vector(out, "out")
    grad_out = _as_vector(grad_out, "grad_out")
    if out.shape != grad_out.shape:
        raise ShapeError(f"softmax_grad: out has {out.shape[0]}, grad_out has {grad_out.shape[0]}")
    # J = diag(p) - p p^T is symmetric, so J^T g = p * (g - p.g)
    return out * (grad_out - np.dot(out, grad_out))


def mse(y, y_hat) -> float:
    """Mean squared error, mean((y_hat - y)^2)."""
    y = _as_vector(y, "y")
    y_hat = _as_vector(y_hat, "y_hat")
    if y.shape != y_hat.shape:
        raise ShapeError(f"mse: y has {y.shape[0]}, y_hat has {y_hat.shape[0]}")
    return float(np.mean((y_hat - y) ** 2))


def mse_grad(y, y_hat) -> np.ndarray:
    """Gradient of the squared error, 2 (y_hat - y). Not divided by length."""
    y = _as_vector(y, "y")
    y_hat = _as_vector(y_hat, "y_hat")
    if y.shape != y_hat.shape:
        raise ShapeError(f"mse_grad: y has {y.shape[0]}, y_hat has {y_hat.shape[0]}")
    return 2.0 * (y_hat - y)


def cross_entropy(p, target) -> float:
    """-sum(target * log(max(p, EPSILON)))"""
    p = _as_vector(p, "p")
    target = _as_vector(target, "target")
    if p.shape != target.shape:
        raise ShapeError(f"cross_entropy: p has {p.shape[0]}, target has {target.shape[0]}")
    clamped = (p < EPSILON) & (target != 0)
    if np.any(clamped):
        warnings.warn(
            f"cross_entropy clamped {int(np.sum(clamped))} probabilities to {EPSILON}",
            NumericGuardTriggered,
            stacklevel=2,
        )
    return float(-np.sum(target * np.log(np.maximum(p, EPSILON))))


def cross_entropy_grad(p, target) -> np.ndarray:
    """-target / (p + EPSILON)"""
    p = _as_vector(p, "p")
    target = _as_vector(target, "target")
    if p.shape != target.shape:
        raise ShapeError(f"cross_entropy_grad: p has {p.shape[0]}, target has {target.shape[0]}")
    return -target / (p + EPSILON)


def sgd_update(W: np.ndarray, grad_W, lr: float) -> np.ndarray:
    """In-place W -= lr * grad_W. Returns W for chaining."""
    grad_W = np.asarray(grad_W, dtype=np.float64)
    if W.shape != grad_W.shape:
        raise ShapeError(f"sgd_update: W is {W.shape}, grad_W is {grad_W.shape}")
    W -= lr * grad_W
    return W
