import copy
from abc import ABC, abstractmethod
from typing import Any, Self

import numpy as np
from numpy.typing import NDArray

from irtlink._core import as_theta_array, match_theta_shape
from irtlink.constants import FINITE_DIFFERENCE_STEP
from irtlink.models.priors import ItemParamPrior


class BaseItemModel(ABC):
    """Shared numeric contract for a single calibrated item.

    Every model stores its own scaling constant ``D``, a score-weight vector
    (``0, 1, ..., ncat-1`` unless overridden) and a ``fixed`` flag that makes
    :meth:`scale` a no-op. Subclasses supply category probabilities and their
    derivatives; everything else (expected score, linear rescaling, prior
    hooks) is shared.

    Parameter vectors passed to ``probability``/``gradient`` follow the order
    of :attr:`parameter_names`, which is model specific.
    """

    model_name: str = "BaseModel"

    def __init__(
        self,
        n_categories: int,
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        if n_categories < 2:
            raise ValueError(f"Item has {n_categories} categories; minimum is 2")

        self._n_categories = int(n_categories)
        self.D = float(D)
        self.fixed = fixed
        self.name = name
        self._score_weights = np.arange(self._n_categories, dtype=np.float64)
        self._priors: dict[str, ItemParamPrior] = {}

        if score_weights is not None:
            self.score_weights = score_weights

    @property
    @abstractmethod
    def parameter_names(self) -> tuple[str, ...]: ...

    @abstractmethod
    def parameter_vector(self) -> NDArray[np.float64]: ...

    @abstractmethod
    def set_parameter_vector(self, params: NDArray[np.float64]) -> Self: ...

    @abstractmethod
    def _category_probabilities(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        """Return an (n_theta, ncat) array of category probabilities."""

    @abstractmethod
    def _category_gradients(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        """Return an (n_theta, ncat, n_parameters) array of dP_k/dparam."""

    @abstractmethod
    def _category_theta_derivatives(
        self, theta: NDArray[np.float64], params: NDArray[np.float64], D: float
    ) -> NDArray[np.float64]:
        """Return an (n_theta, ncat) array of dP_k/dtheta."""

    @abstractmethod
    def information(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float: ...

    @abstractmethod
    def t_star_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        """Parameters placed on the Form Y scale (new-to-old transformation)."""

    @abstractmethod
    def t_sharp_parameters(self, intercept: float, slope: float) -> NDArray[np.float64]:
        """Parameters placed on the Form X scale (old-to-new transformation)."""

    @abstractmethod
    def location_parameters(self) -> NDArray[np.float64]:
        """Difficulty-type values contributed to mean/mean and mean/sigma linking."""

    @property
    def discrimination(self) -> float:
        """Item discrimination used by mean/mean linking."""
        return 1.0

    @property
    def guessing(self) -> float:
        """Lower asymptote; 0 for models without one."""
        return 0.0

    @property
    def slipping(self) -> float:
        """Upper asymptote; 1 for models without one."""
        return 1.0

    @property
    def is_rasch_family(self) -> bool:
        """Whether the item leaves the linking slope fixed at 1."""
        return False

    @property
    def n_categories(self) -> int:
        return self._n_categories

    @property
    def min_category(self) -> int:
        return 0

    @property
    def max_category(self) -> int:
        return self._n_categories - 1

    @property
    def n_parameters(self) -> int:
        return len(self.parameter_names)

    @property
    def n_estimated_parameters(self) -> int:
        return 0 if self.fixed else self.n_parameters

    @property
    def score_weights(self) -> NDArray[np.float64]:
        return self._score_weights.copy()

    @score_weights.setter
    def score_weights(self, weights: NDArray[np.float64]) -> None:
        weights = np.asarray(weights, dtype=np.float64)
        if weights.shape != (self._n_categories,):
            raise ValueError(
                f"Shape mismatch for score_weights: expected ({self._n_categories},), "
                f"got {weights.shape}"
            )
        if np.any(np.diff(weights) < 0):
            raise ValueError("score_weights must be non-decreasing")
        self._score_weights = weights

    @property
    def min_score_weight(self) -> float:
        return float(self._score_weights[0])

    @property
    def max_score_weight(self) -> float:
        return float(self._score_weights[-1])

    def _resolve(
        self, params: NDArray[np.float64] | None, D: float | None
    ) -> tuple[NDArray[np.float64], float]:
        if params is None:
            params = self.parameter_vector()
        else:
            params = np.asarray(params, dtype=np.float64)
            if params.shape != (self.n_parameters,):
                raise ValueError(
                    f"Parameter vector for {self.model_name} must have length "
                    f"{self.n_parameters} {self.parameter_names}, got {params.size}"
                )
        return params, self.D if D is None else float(D)

    def _valid_category(self, category: int) -> bool:
        return self.min_category <= category <= self.max_category

    def category_probabilities(
        self,
        theta: NDArray[np.float64] | float,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64]:
        """Compute all category probabilities.

        Parameters
        ----------
        theta : float or ndarray
            Ability values.
        params : ndarray, optional
            Parameter vector to evaluate instead of the stored parameters.
        D : float, optional
            Scaling constant. Defaults to the stored ``D``.

        Returns
        -------
        ndarray of shape (n_theta, n_categories)
        """
        params, D = self._resolve(params, D)
        return self._category_probabilities(as_theta_array(theta), params, D)

    def probability(
        self,
        theta: NDArray[np.float64] | float,
        category: int,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64] | float:
        """Probability of responding in ``category`` at ``theta``.

        Categories outside ``[min_category, max_category]`` have probability 0.
        The result is a float for scalar ``theta`` and an array otherwise.
        """
        theta_arr = as_theta_array(theta)
        if not self._valid_category(category):
            return match_theta_shape(np.zeros_like(theta_arr), theta)
        probs = self.category_probabilities(theta_arr, params, D)
        return match_theta_shape(probs[:, category], theta)

    def expected_value(
        self,
        theta: NDArray[np.float64] | float,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64] | float:
        """Score-weighted sum of the category probabilities."""
        probs = self.category_probabilities(theta, params, D)
        return match_theta_shape(probs @ self._score_weights, theta)

    def cumulative_probability(
        self, theta: NDArray[np.float64] | float, category: int
    ) -> NDArray[np.float64] | float:
        """Probability of responding in ``category`` or higher."""
        theta_arr = as_theta_array(theta)
        if not self._valid_category(category):
            return match_theta_shape(np.zeros_like(theta_arr), theta)
        probs = self.category_probabilities(theta_arr)
        return match_theta_shape(np.sum(probs[:, category:], axis=1), theta)

    def gradient(
        self,
        theta: float,
        category: int,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64]:
        """First derivatives of the category probability with respect to each parameter."""
        params, D = self._resolve(params, D)
        if not self._valid_category(category):
            return np.zeros(self.n_parameters)
        grads = self._category_gradients(as_theta_array(theta)[:1], params, D)
        return grads[0, category, :]

    def hessian(
        self,
        theta: float,
        category: int,
        params: NDArray[np.float64] | None = None,
        D: float | None = None,
    ) -> NDArray[np.float64]:
        """Second derivatives of the category probability (central differences of the gradient)."""
        params, D = self._resolve(params, D)
        k = self.n_parameters
        hess = np.zeros((k, k))
        if not self._valid_category(category):
            return hess

        h = FINITE_DIFFERENCE_STEP
        for j in range(k):
            step = np.zeros(k)
            step[j] = h
            g_plus = self.gradient(theta, category, params + step, D)
            g_minus = self.gradient(theta, category, params - step, D)
            hess[:, j] = (g_plus - g_minus) / (2 * h)

        return 0.5 * (hess + hess.T)

    def deriv_theta(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """First derivative of the expected score with respect to theta."""
        params, D = self._resolve(None, None)
        dp = self._category_theta_derivatives(as_theta_array(theta), params, D)
        return match_theta_shape(dp @ self._score_weights, theta)

    def deriv2_theta(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Second derivative of the expected score with respect to theta."""
        theta_arr = as_theta_array(theta)
        h = FINITE_DIFFERENCE_STEP
        upper = np.asarray(self.deriv_theta(theta_arr + h))
        lower = np.asarray(self.deriv_theta(theta_arr - h))
        return match_theta_shape((upper - lower) / (2 * h), theta)

    def t_star_probability(
        self,
        theta: NDArray[np.float64] | float,
        category: int,
        intercept: float,
        slope: float,
    ) -> NDArray[np.float64] | float:
        """Probability after moving the item parameters onto the Form Y scale.

        The stored parameters are not modified: ``a / slope`` and
        ``b * slope + intercept`` (model-specific analogues for steps and
        thresholds) are evaluated directly.
        """
        return self.probability(
            theta, category, self.t_star_parameters(intercept, slope)
        )

    def t_sharp_probability(
        self,
        theta: NDArray[np.float64] | float,
        category: int,
        intercept: float,
        slope: float,
    ) -> NDArray[np.float64] | float:
        """Probability after moving the item parameters onto the Form X scale."""
        return self.probability(
            theta, category, self.t_sharp_parameters(intercept, slope)
        )

    def t_star_expected_value(
        self, theta: NDArray[np.float64] | float, intercept: float, slope: float
    ) -> NDArray[np.float64] | float:
        return self.expected_value(theta, self.t_star_parameters(intercept, slope))

    def t_sharp_expected_value(
        self, theta: NDArray[np.float64] | float, intercept: float, slope: float
    ) -> NDArray[np.float64] | float:
        return self.expected_value(theta, self.t_sharp_parameters(intercept, slope))

    def scale(self, intercept: float, slope: float) -> Self:
        """Rescale the stored parameters in place; no-op when the item is fixed."""
        if self.fixed:
            return self
        return self.set_parameter_vector(self.t_star_parameters(intercept, slope))

    def set_prior(self, parameter: str, prior: ItemParamPrior | None) -> Self:
        """Attach (or with ``None``, remove) a prior on a named parameter."""
        if parameter not in self.parameter_names:
            valid = ", ".join(self.parameter_names)
            raise ValueError(
                f"Unknown parameter: {parameter}. Valid parameters: {valid}"
            )
        if prior is None:
            self._priors.pop(parameter, None)
        else:
            self._priors[parameter] = prior
        return self

    @property
    def priors(self) -> dict[str, ItemParamPrior]:
        return dict(self._priors)

    def _prior_items(self):
        for j, name in enumerate(self.parameter_names):
            prior = self._priors.get(name)
            if prior is not None:
                yield j, prior

    def non_zero_prior(self, params: NDArray[np.float64]) -> NDArray[np.float64]:
        """Move each parameter with a prior to the nearest point of positive density."""
        params, _ = self._resolve(params, None)
        out = params.copy()
        for j, prior in self._prior_items():
            out[j] = prior.nearest_non_zero(out[j])
        return out

    def add_priors_to_log_likelihood(
        self, log_likelihood: float, params: NDArray[np.float64]
    ) -> float:
        """Add the log prior densities of ``params`` to a log-likelihood value."""
        params, _ = self._resolve(params, None)
        for j, prior in self._prior_items():
            log_likelihood += prior.log_density(params[j])
        return log_likelihood

    def add_priors_to_log_likelihood_gradient(
        self, gradient: NDArray[np.float64], params: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Add the log prior density derivatives to a log-likelihood gradient.

        ``gradient`` is the gradient of the log-likelihood itself, so the
        prior derivatives are added. Callers minimizing the negative
        log-likelihood must negate the result.

        Parameters
        ----------
        gradient : ndarray of shape (n_parameters,)
            Log-likelihood gradient. Not modified.
        params : ndarray of shape (n_parameters,)
            Parameter values at which the priors are evaluated.

        Returns
        -------
        ndarray of shape (n_parameters,)
            ``gradient`` plus ``d log prior / d param`` for each parameter
            with a prior attached.
        """
        params, _ = self._resolve(params, None)
        out = np.asarray(gradient, dtype=np.float64).copy()
        for j, prior in self._prior_items():
            out[j] += prior.log_density_deriv1(params[j])
        return out

    def copy(self) -> Self:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Model type, parameters, scaling constant and score weights."""
        values = self.parameter_vector()
        out: dict[str, Any] = {"model": self.model_name}
        out.update({n: float(v) for n, v in zip(self.parameter_names, values)})
        out["D"] = self.D
        out["score_weights"] = self._score_weights.tolist()
        return out

    def __repr__(self) -> str:
        values = ", ".join(
            f"{n}={v:.6g}" for n, v in zip(self.parameter_names, self.parameter_vector())
        )
        fixed = ", fixed" if self.fixed else ""
        return f"{self.__class__.__name__}({values}, D={self.D:g}{fixed})"


class DichotomousItemModel(BaseItemModel):
    """Base for binary items (categories 0 and 1)."""

    def __init__(
        self,
        D: float = 1.7,
        score_weights: NDArray[np.float64] | None = None,
        fixed: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(2, D=D, score_weights=score_weights, fixed=fixed, name=name)


class PolytomousItemModel(BaseItemModel):
    """Base for ordered polytomous items with ``ncat - 1`` step parameters."""
