"""Core utility functions with no internal dependencies.

This module provides fundamental utility functions that are used throughout
the codebase but have no dependencies on other irtlink modules, avoiding
circular import issues.
"""

import numpy as np
from numpy.typing import NDArray


def sigmoid(x: NDArray[np.floating] | float) -> NDArray[np.floating] | float:
    """Compute sigmoid function with numerical stability.

    Uses the identity sigmoid(-x) = 1 - sigmoid(x) to avoid overflow
    for large negative values.

    Parameters
    ----------
    x : array_like or float
        Input values.

    Returns
    -------
    array_like or float
        Sigmoid of input, same shape as input.
    """
    x = np.asarray(x, dtype=np.float64)
    with np.errstate(over="ignore"):
        ex = np.exp(-np.abs(x))
    result = np.where(x >= 0, 1.0 / (1.0 + ex), ex / (1.0 + ex))
    return float(result) if result.ndim == 0 else result


def softmax_rows(z: NDArray[np.float64]) -> NDArray[np.float64]:
    """Row-wise softmax of a (n, k) array of category log-numerators.

    The row maximum is subtracted before exponentiating so that very large
    cumulative sums (extreme theta) do not overflow.
    """
    z = z - np.max(z, axis=1, keepdims=True)
    ez = np.exp(z)
    return ez / np.sum(ez, axis=1, keepdims=True)


def as_theta_array(theta: NDArray[np.floating] | float) -> NDArray[np.float64]:
    """Return theta as a 1-D float array."""
    return np.atleast_1d(np.asarray(theta, dtype=np.float64)).ravel()


def match_theta_shape(
    values: NDArray[np.float64], theta: NDArray[np.floating] | float
) -> NDArray[np.float64] | float:
    """Return a float when theta was scalar, otherwise reshape to theta."""
    if np.ndim(theta) == 0:
        return float(values.ravel()[0])
    return values.reshape(np.shape(theta))
