"""Polytomous IRT models: PCM, PCM2, GPCM, GPCM2, GRM."""

from abc import abstractmethod
from typing import Self

import numpy as np
from numpy.typing import NDArray

from irtlink._core import as_theta_array, match_theta_shape, sigmoid, softmax_rows
from irtlink.constants import PROB_EPSILON
from irtlink.models.base import PolytomousItemModel


class _PartialCreditFamily(PolytomousItemModel):
    """Adjacent-category logit models.

    Every member reduces to a slope ``a`` and ``m = ncat - 1`` effective step
    locations ``delta``:

    P(X = k|θ) ∝ exp(Σ_{j<=k} D * a * (θ - delta_j))

    with an empty sum for k = 0. Subclasses map their parameter vector to
    ``(a, delta)`` and give the (constant) Jacobian of ``delta`` with respect
    to that vector.
    """

    _has_slope: bool = False

    def __init__(
        self,
        params: NDArray[np.float64],
        n_steps: int,
        D: float,
        score_weights: NDArray[np.float64] | None,
        fixed: bool,
        name: str | None,
    ) -> None:
        super().__init__(
            n_steps + 1, D=D, score_weights=score_weights, fixed=fixed, name=name
        )
        self._params = np.asarray(params, dtype=np.float64)

    @abstractmethod
    def _split(self, params: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]: ...

    @abstractmethod
    def _delta_jacobian(self) -> NDArray[np.float64]:
        """Return the (m, n_parameters) matrix d delta / d params."""

    def parameter_vector(self) -> NDArray[np.float64]:
        return self._params.copy()

    def set_parameter_vector(self, params: NDArray[np.float64]) -> Self:
        params, _ = self._resolve(params, None)
        self._params = params.copy()
        return self

    @property
    def steps(self) -> NDArray[np.float64]:
        """Effective step locations on the theta scale."""
        return self._split(self._params)[1]

    def _log_numerators(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, delta = self._split(params)
        increments = D * a * (theta[:, None] - delta[None, :])
        z = np.zeros((theta.size, self.n_categories))
        z[:, 1:] = np.cumsum(increments, axis=1)
        return z

    def _category_probabilities(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        return softmax_rows(self._log_numerators(theta, params, D))

    def _category_gradients(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, delta = self._split(params)
        probs = self._category_probabilities(theta, params, D)
        n_cat = self.n_categories
        m = n_cat - 1

        # dZ_k/dparams; Z_k accumulates steps 1..k
        cumulative = np.tril(np.ones((n_cat, m)), -1)
        dz = np.broadcast_to(
            -D * a * (cumulative @ self._delta_jacobian()),
            (theta.size, n_cat, self.n_parameters),
        ).copy()
        if self._has_slope:
            dz[:, 1:, 0] = D * np.cumsum(theta[:, None] - delta[None, :], axis=1)

        mean_dz = np.einsum("nk,nkp->np", probs, dz)
        return probs[:, :, None] * (dz - mean_dz[:, None, :])

    def _category_theta_derivatives(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a, _ = self._split(params)
        probs = self._category_probabilities(theta, params, D)
        slopes = D * a * np.arange(self.n_categories)
        return probs * (slopes[None, :] - (probs @ slopes)[:, None])

    def information(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Fisher information, D²a²(E[W²] - E[W]²) with W the score weights."""
        theta_arr = as_theta_array(theta)
        probs = self.category_probabilities(theta_arr)
        w = self._score_weights
        mean = probs @ w
        var = probs @ (w**2) - mean**2
        return match_theta_shape((self.D * self.discrimination) ** 2 * var, theta)

    def location_parameters(self) -> NDArray[np.float64]:
        return self.steps


class PartialCreditModel(_PartialCreditFamily):
    """Partial Credit Model (PCM) - Masters (1982).

    Difficulty plus threshold parameterization with unit slope:

    P(X = k|θ) ∝ exp(Σ_{v<=k} D * (θ - b - t_v))

    Parameters
    ----------
    difficulty : float
        Overall item location ``b``.
    thresholds : array_like of shape (m,)
        Category thresholds ``t_1..t_m``; the item has ``m + 1`` categories.
    D : float, default=1.0
        Scaling constant.

    Examples
    --------
    >>> item = PartialCreditModel(0.0, [-1.0, 0.0, 1.0])
    >>> item.category_probabilities(0.0).shape
    (1, 4)
    """

    model_name = "PCM"

    def __init__(
        self,
        difficulty: float,
        thresholds: NDArray[np.float64],
        D: float = 1.0,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        thresholds = np.atleast_1d(np.asarray(thresholds, dtype=np.float64))
        super().__init__(
            np.concatenate([[difficulty], thresholds]),
            thresholds.size,
            D,
            score_weights,
            fixed,
            name,
        )

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("b",) + tuple(f"t{j + 1}" for j in range(self.n_categories - 1))

    @property
    def difficulty(self) -> float:
        return float(self._params[0])

    @property
    def thresholds(self) -> NDArray[np.float64]:
        return self._params[1:].copy()

    @property
    def is_rasch_family(self) -> bool:
        return True

    def _split(self, params: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        return 1.0, params[0] + params[1:]

    def _delta_jacobian(self) -> NDArray[np.float64]:
        m = self.n_categories - 1
        return np.column_stack([np.ones(m), np.eye(m)])

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        b = self._params[0] * slope + intercept
        return np.concatenate([[b], self._params[1:] * slope])

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        b = (self._params[0] - intercept) / slope
        return np.concatenate([[b], self._params[1:] / slope])


class PartialCreditModel2(_PartialCreditFamily):
    """Partial Credit Model with step parameters only.

    P(X = k|θ) ∝ exp(Σ_{v<=k} D * (θ - s_v))

    The step of category 0 is fixed at zero and is not part of the parameter
    vector, so ``steps`` holds ``ncat - 1`` values.
    """

    model_name = "PCM2"

    def __init__(
        self,
        steps: NDArray[np.float64],
        D: float = 1.0,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        steps = np.atleast_1d(np.asarray(steps, dtype=np.float64))
        super().__init__(steps, steps.size, D, score_weights, fixed, name)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(f"s{j + 1}" for j in range(self.n_categories - 1))

    def _split(self, params: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        return 1.0, params

    def _delta_jacobian(self) -> NDArray[np.float64]:
        return np.eye(self.n_categories - 1)

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return self._params * slope + intercept

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return (self._params - intercept) / slope


class GeneralizedPartialCredit(_PartialCreditFamily):
    """Generalized Partial Credit Model (GPCM) - Muraki (1992).

    P(X = k|θ) ∝ exp(Σ_{v<=k} D * a * (θ - s_v))

    Each step ``s_v`` plays the role of ``b + t_v``. Compare
    :class:`GeneralizedPartialCredit2`, where the threshold is subtracted.

    Parameters
    ----------
    discrimination : float
        Item slope ``a``.
    steps : array_like of shape (m,)
        Step parameters for categories 1..m.
    D : float, default=1.7
        Scaling constant.
    """

    model_name = "GPCM"
    _has_slope = True

    def __init__(
        self,
        discrimination: float,
        steps: NDArray[np.float64],
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        steps = np.atleast_1d(np.asarray(steps, dtype=np.float64))
        super().__init__(
            np.concatenate([[discrimination], steps]),
            steps.size,
            D,
            score_weights,
            fixed,
            name,
        )

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("a",) + tuple(f"s{j + 1}" for j in range(self.n_categories - 1))

    @property
    def discrimination(self) -> float:
        return float(self._params[0])

    def _split(self, params: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        return params[0], params[1:]

    def _delta_jacobian(self) -> NDArray[np.float64]:
        m = self.n_categories - 1
        return np.column_stack([np.zeros(m), np.eye(m)])

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.concatenate(
            [[self._params[0] / slope], self._params[1:] * slope + intercept]
        )

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.concatenate(
            [[self._params[0] * slope], (self._params[1:] - intercept) / slope]
        )


class GeneralizedPartialCredit2(_PartialCreditFamily):
    """Generalized Partial Credit Model, difficulty minus threshold form.

    P(X = k|θ) ∝ exp(Σ_{v<=k} D * a * (θ - b + t_v))

    This is the parameterization used by PARSCALE-style output. The step for
    category ``v`` is ``b - t_v``, the opposite sign of the threshold in
    :class:`PartialCreditModel`.
    """

    model_name = "GPCM2"
    _has_slope = True

    def __init__(
        self,
        discrimination: float,
        difficulty: float,
        thresholds: NDArray[np.float64],
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        thresholds = np.atleast_1d(np.asarray(thresholds, dtype=np.float64))
        super().__init__(
            np.concatenate([[discrimination, difficulty], thresholds]),
            thresholds.size,
            D,
            score_weights,
            fixed,
            name,
        )

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("a", "b") + tuple(f"t{j + 1}" for j in range(self.n_categories - 1))

    @property
    def discrimination(self) -> float:
        return float(self._params[0])

    @property
    def difficulty(self) -> float:
        return float(self._params[1])

    @property
    def thresholds(self) -> NDArray[np.float64]:
        return self._params[2:].copy()

    def _split(self, params: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        return params[0], params[1] - params[2:]

    def _delta_jacobian(self) -> NDArray[np.float64]:
        m = self.n_categories - 1
        return np.column_stack([np.zeros(m), np.ones(m), -np.eye(m)])

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        a, b = self._params[:2]
        return np.concatenate(
            [[a / slope, b * slope + intercept], self._params[2:] * slope]
        )

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        a, b = self._params[:2]
        return np.concatenate(
            [[a * slope, (b - intercept) / slope], self._params[2:] / slope]
        )


class GradedResponseModel(PolytomousItemModel):
    """Graded Response Model (GRM) - Samejima (1969).

    The GRM is a cumulative logit model for ordered polytomous responses.
    It models the probability of responding in category k or higher:

    P*(X >= k|θ) = 1 / (1 + exp(-D * a * (θ - b_k)))

    The probability of responding in exactly category k is:

    P(X = k|θ) = P*(X >= k|θ) - P*(X >= k+1|θ)

    with P*(X >= 0) = 1 and P*(X >= ncat) = 0.

    Parameters
    ----------
    discrimination : float
        Item slope ``a``.
    thresholds : array_like of shape (m,)
        Ordered category boundaries ``b_1..b_m``.
    D : float, default=1.7
        Scaling constant.

    Examples
    --------
    >>> item = GradedResponseModel(1.0, [-1.0, 0.0, 1.0])
    >>> round(item.cumulative_probability(0.0, 2), 2)
    0.5
    """

    model_name = "GRM"

    def __init__(
        self,
        discrimination: float,
        thresholds: NDArray[np.float64],
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        thresholds = np.atleast_1d(np.asarray(thresholds, dtype=np.float64))
        super().__init__(
            thresholds.size + 1,
            D=D,
            score_weights=score_weights,
            fixed=fixed,
            name=name,
        )
        self._params = np.concatenate([[discrimination], thresholds])

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("a",) + tuple(f"b{j + 1}" for j in range(self.n_categories - 1))

    def parameter_vector(self) -> NDArray[np.float64]:
        return self._params.copy()

    def set_parameter_vector(self, params: NDArray[np.float64]) -> Self:
        params, _ = self._resolve(params, None)
        self._params = params.copy()
        return self

    @property
    def discrimination(self) -> float:
        return float(self._params[0])

    @property
    def thresholds(self) -> NDArray[np.float64]:
        return self._params[1:].copy()

    def _cumulative(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        """Return (n_theta, ncat + 1) boundary curves including the fixed 1 and 0."""
        a = params[0]
        b = params[1:]
        star = np.ones((theta.size, self.n_categories + 1))
        star[:, 1:-1] = sigmoid(D * a * (theta[:, None] - b[None, :]))
        star[:, -1] = 0.0
        return star

    def _category_probabilities(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        star = self._cumulative(theta, params, D)
        return np.clip(star[:, :-1] - star[:, 1:], 0.0, 1.0)

    def _category_gradients(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        a = params[0]
        b = params[1:]
        m = b.size
        star = self._cumulative(theta, params, D)[:, 1:-1]
        g = star * (1.0 - star)

        # derivatives of the boundary curves, padded with the constant ends
        dstar = np.zeros((theta.size, m + 2, self.n_parameters))
        dstar[:, 1:-1, 0] = D * (theta[:, None] - b[None, :]) * g
        dstar[:, 1 + np.arange(m), 1 + np.arange(m)] = -D * a * g
        return dstar[:, :-1, :] - dstar[:, 1:, :]

    def _category_theta_derivatives(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        star = self._cumulative(theta, params, D)
        dstar = D * params[0] * star * (1.0 - star)
        return dstar[:, :-1] - dstar[:, 1:]

    def cumulative_probability(
        self, theta: NDArray[np.float64] | float, category: int
    ) -> NDArray[np.float64] | float:
        """Boundary curve P*(X >= category|θ)."""
        theta_arr = as_theta_array(theta)
        if not self._valid_category(category):
            return match_theta_shape(np.zeros_like(theta_arr), theta)
        star = self._cumulative(theta_arr, self._params, self.D)
        return match_theta_shape(star[:, category], theta)

    def information(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Samejima's item information, Σ_k P'_k² / P_k."""
        theta_arr = as_theta_array(theta)
        probs = self._category_probabilities(theta_arr, self._params, self.D)
        dp = self._category_theta_derivatives(theta_arr, self._params, self.D)
        info = np.sum(dp**2 / (probs + PROB_EPSILON), axis=1)
        return match_theta_shape(info, theta)

    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.concatenate(
            [[self._params[0] / slope], self._params[1:] * slope + intercept]
        )

    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        return np.concatenate(
            [[self._params[0] * slope], (self._params[1:] - intercept) / slope]
        )

    def location_parameters(self) -> NDArray[np.float64]:
        return self.thresholds
