"""Dichotomous IRT models: 1PL, 2PL, 3PL, 4PL."""

from typing import Self

import numpy as np
from numpy.typing import NDArray

from irtlink._core import as_theta_array, match_theta_shape, sigmoid
from irtlink.constants import PROB_EPSILON
from irtlink.models.base import DichotomousItemModel


class FourParameterLogistic(DichotomousItemModel):
    """Four-Parameter Logistic (4PL) IRT Model.

    P(X=1|θ) = c + (u - c) / (1 + exp(-D * a * (θ - b)))

    The 3PL, 2PL and 1PL models are the same curve with some parameters held
    constant, so they are implemented as subclasses that only change which
    entries make up the free parameter vector.

    A negative guessing parameter marks an inactive item: every category
    probability, derivative and information value is 0, so the item drops out
    of linking criteria and test characteristic curves without being removed.

    Parameters
    ----------
    discrimination : float
        Slope ``a``.
    difficulty : float
        Location ``b``.
    guessing : float, default=0.0
        Lower asymptote ``c``. Negative values deactivate the item.
    slipping : float, default=1.0
        Upper asymptote ``u``.
    D : float, default=1.7
        Scaling constant.
    score_weights : ndarray of shape (2,), optional
        Scores assigned to categories 0 and 1.
    fixed : bool, default=False
        If True, :meth:`scale` leaves the parameters untouched.
    name : str, optional
        Item identifier.

    Examples
    --------
    >>> item = FourParameterLogistic(1.2, 0.5, 0.2, 0.95, D=1.7)
    >>> round(item.probability(0.5, 1), 3)
    0.575
    """

    model_name = "4PL"
    _free_indices: tuple[int, ...] = (0, 1, 2, 3)

    def __init__(
        self,
        discrimination: float,
        difficulty: float,
        guessing: float = 0.0,
        slipping: float = 1.0,
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(D=D, score_weights=score_weights, fixed=fixed, name=name)
        self._full = np.array(
            [discrimination, difficulty, guessing, slipping], dtype=np.float64
        )

    @property
    def parameter_names(self) -> tuple[str, ...]:
        names = ("a", "b", "c", "u")
        return tuple(names[j] for j in self._free_indices)

    def parameter_vector(self) -> NDArray[np.float64]:
        return self._full[list(self._free_indices)].copy()

    def set_parameter_vector(self, params: NDArray[np.float64]) -> Self:
        params, _ = self._resolve(params, None)
        self._full[list(self._free_indices)] = params
        return self

    def _unpack(self, params: NDArray[np.float64]) -> NDArray[np.float64]:
        full = self._full.copy()
        full[list(self._free_indices)] = params
        return full

    @property
    def discrimination(self) -> float:
        return float(self._full[0])

    @property
    def difficulty(self) -> float:
        return float(self._full[1])

    @property
    def guessing(self) -> float:
        return float(self._full[2])

    @property
    def slipping(self) -> float:
        return float(self._full[3])

    @property
    def is_rasch_family(self) -> bool:
        a, _, c, u = self._full
        return bool(a == 1.0 and c == 0.0 and u == 1.0)

    def _category_probabilities(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, b, c, u = self._unpack(params)
        if c < 0.0:
            return np.zeros((theta.size, 2))
        p1 = c + (u - c) * sigmoid(D * a * (theta - b))
        p1 = np.clip(p1, 0.0, 1.0)
        return np.column_stack([1.0 - p1, p1])

    def _category_gradients(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, b, c, u = self._unpack(params)
        idx = list(self._free_indices)
        grads = np.zeros((theta.size, 2, len(idx)))
        if c < 0.0:
            return grads

        s = sigmoid(D * a * (theta - b))
        g = s * (1.0 - s)
        xmc = u - c
        full = np.column_stack(
            [
                xmc * g * D * (theta - b),
                -xmc * g * D * a,
                1.0 - s,
                s,
            ]
        )
        grads[:, 1, :] = full[:, idx]
        grads[:, 0, :] = -full[:, idx]
        return grads

    def hessian(
        self,
        theta: float,
        category: int,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64]:
        """Second derivatives of the category probability, in closed form."""
        params, D = self._resolve(params, D)
        idx = list(self._free_indices)
        a, b, c, u = self._unpack(params)
        if not self._valid_category(category) or c < 0.0:
            return np.zeros((len(idx), len(idx)))

        theta = float(theta)
        s = float(sigmoid(D * a * (theta - b)))
        g = s * (1.0 - s)
        g1 = g * (1.0 - 2.0 * s)
        xmc = u - c
        dx_da = D * (theta - b)
        dx_db = -D * a

        h = np.zeros((4, 4))
        h[0, 0] = xmc * g1 * dx_da**2
        h[0, 1] = xmc * (g1 * dx_db * dx_da - g * D)
        h[1, 1] = xmc * g1 * dx_db**2
        h[0, 2] = -g * dx_da
        h[1, 2] = -g * dx_db
        h[0, 3] = g * dx_da
        h[1, 3] = g * dx_db
        h = h + np.triu(h, 1).T

        h = h[np.ix_(idx, idx)]
        return h if category == 1 else -h

    def _category_theta_derivatives(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, b, c, u = self._unpack(params)
        if c < 0.0:
            return np.zeros((theta.size, 2))
        s = sigmoid(D * a * (theta - b))
        dp = (u - c) * D * a * s * (1.0 - s)
        return np.column_stack([-dp, dp])

    def deriv2_theta(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Second derivative of the expected score with respect to theta."""
        theta_arr = as_theta_array(theta)
        a, b, c, u = self._full
        if c < 0.0:
            return match_theta_shape(np.zeros_like(theta_arr), theta)
        s = sigmoid(self.D * a * (theta_arr - b))
        d2 = (u - c) * (self.D * a) ** 2 * s * (1.0 - s) * (1.0 - 2.0 * s)
        w = self._score_weights
        return match_theta_shape((w[1] - w[0]) * d2, theta)

    def information(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Fisher information at theta.

        I(θ) = D²a²(P - c)²(u - P)² / ((u - c)² P (1 - P))
        """
        theta_arr = as_theta_array(theta)
        a, b, c, u = self._full
        if c < 0.0 or u <= c:
            return match_theta_shape(np.zeros_like(theta_arr), theta)
        p = self._category_probabilities(theta_arr, self.parameter_vector(), self.D)[:, 1]
        numer = (self.D * a) ** 2 * (p - c) ** 2 * (u - p) ** 2
        denom = (u - c) ** 2 * p * (1.0 - p) + PROB_EPSILON
        return match_theta_shape(numer / denom, theta)

    def _transform(self, values: NDArray[np.float64]) -> NDArray[np.float64]:
        return values[list(self._free_indices)]

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        full = self._full.copy()
        full[0] = full[0] / slope
        full[1] = full[1] * slope + intercept
        return self._transform(full)

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        full = self._full.copy()
        full[0] = full[0] * slope
        full[1] = (full[1] - intercept) / slope
        return self._transform(full)

    def location_parameters(self) -> NDArray[np.float64]:
        return np.array([self._full[1]])


class ThreeParameterLogistic(FourParameterLogistic):
    """Three-Parameter Logistic (3PL) IRT Model.

    P(X=1|θ) = c + (1 - c) / (1 + exp(-D * a * (θ - b)))

    Parameter vector is ``[a, b, c]``.
    """

    model_name = "3PL"
    _free_indices = (0, 1, 2)

    def __init__(
        self,
        discrimination: float,
        difficulty: float,
        guessing: float = 0.0,
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(
            discrimination,
            difficulty,
            guessing,
            1.0,
            D=D,
            score_weights=score_weights,
            fixed=fixed,
            name=name,
        )


class TwoParameterLogistic(FourParameterLogistic):
    """Two-Parameter Logistic (2PL) IRT Model.

    P(X=1|θ) = 1 / (1 + exp(-D * a * (θ - b)))
    """

    model_name = "2PL"
    _free_indices = (0, 1)

    def __init__(
        self,
        discrimination: float,
        difficulty: float,
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(
            discrimination,
            difficulty,
            0.0,
            1.0,
            D=D,
            score_weights=score_weights,
            fixed=fixed,
            name=name,
        )


class OneParameterLogistic(FourParameterLogistic):
    """One-Parameter Logistic (1PL) / Rasch Model.

    P(X=1|θ) = 1 / (1 + exp(-D * a * (θ - b)))

    Only the difficulty is a free parameter. The common discrimination is
    held constant and is not affected by linear rescaling, which moves the
    difficulty only: ``b* = A * b + B``.

    Parameters
    ----------
    difficulty : float
        Item difficulty.
    D : float, default=1.0
        Scaling constant.
    discrimination : float, default=1.0
        Common slope.
    """

    model_name = "1PL"
    _free_indices = (1,)

    def __init__(
        self,
        difficulty: float,
        D: float = 1.0,
        discrimination: float = 1.0,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(
            discrimination,
            difficulty,
            0.0,
            1.0,
            D=D,
            score_weights=score_weights,
            fixed=fixed,
            name=name,
        )

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.array([self._full[1] * slope + intercept])

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.array([(self._full[1] - intercept) / slope])


Rasch = OneParameterLogistic
