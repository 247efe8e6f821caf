"""Prior distributions for individual item parameters.

Priors are attached to a model parameter by name and are consulted by the
penalized log-likelihood hooks on :class:`~irtlink.models.base.BaseItemModel`.
Log densities come from :mod:`scipy.stats`; first and second derivatives of
the log density are closed form.
"""

from abc import ABC, abstractmethod

import numpy as np
from scipy import stats

from irtlink.constants import PRIOR_BOUNDARY_OFFSET


class ItemParamPrior(ABC):
    """Base class for a univariate prior on one item parameter."""

    distribution_name: str = "Prior"

    @abstractmethod
    def log_density(self, x: float) -> float: ...

    @abstractmethod
    def log_density_deriv1(self, x: float) -> float: ...

    @abstractmethod
    def log_density_deriv2(self, x: float) -> float: ...

    def zero_density(self, x: float) -> bool:
        """Whether ``x`` lies outside the support of the prior."""
        return False

    def nearest_non_zero(self, x: float) -> float:
        """Closest value to ``x`` with positive prior density."""
        return x

    @property
    @abstractmethod
    def parameters(self) -> tuple[float, ...]: ...

    def __repr__(self) -> str:
        args = ", ".join(f"{p:g}" for p in self.parameters)
        return f"{self.distribution_name}({args})"


class NormalPrior(ItemParamPrior):
    """Normal prior, typically used for difficulty and threshold parameters.

    Parameters
    ----------
    mean : float, default=0.0
        Prior mean.
    sd : float, default=1.0
        Prior standard deviation. Must be positive.
    """

    distribution_name = "Normal"

    def __init__(self, mean: float = 0.0, sd: float = 1.0) -> None:
        if sd <= 0.0:
            raise ValueError(f"sd must be positive, got {sd}")
        self.mean = float(mean)
        self.sd = float(sd)

    @property
    def parameters(self) -> tuple[float, ...]:
        return (self.mean, self.sd)

    def log_density(self, x: float) -> float:
        return float(stats.norm.logpdf(x, loc=self.mean, scale=self.sd))

    def log_density_deriv1(self, x: float) -> float:
        return -(x - self.mean) / self.sd**2

    def log_density_deriv2(self, x: float) -> float:
        return -1.0 / self.sd**2


class LogNormalPrior(ItemParamPrior):
    """Log-normal prior for strictly positive parameters such as discrimination.

    ``mean`` and ``sd`` are the mean and standard deviation of ``log(x)``.
    """

    distribution_name = "LogNormal"

    def __init__(self, mean: float = 0.0, sd: float = 1.0) -> None:
        if sd <= 0.0:
            raise ValueError(f"sd must be positive, got {sd}")
        self.mean = float(mean)
        self.sd = float(sd)

    @property
    def parameters(self) -> tuple[float, ...]:
        return (self.mean, self.sd)

    def zero_density(self, x: float) -> bool:
        return x <= 0.0

    def nearest_non_zero(self, x: float) -> float:
        return float(np.finfo(np.float64).eps) if x <= 0.0 else x

    def log_density(self, x: float) -> float:
        if self.zero_density(x):
            return -np.inf
        return float(stats.lognorm.logpdf(x, s=self.sd, scale=np.exp(self.mean)))

    def log_density_deriv1(self, x: float) -> float:
        if self.zero_density(x):
            return 0.0
        var = self.sd**2
        return -(np.log(x) - self.mean + var) / (var * x)

    def log_density_deriv2(self, x: float) -> float:
        if self.zero_density(x):
            return 0.0
        var = self.sd**2
        return (np.log(x) - self.mean + var - 1.0) / (x * x * var)


class Beta4Prior(ItemParamPrior):
    """Four-parameter beta prior on ``[lower, upper]``.

    The usual choice for the pseudo-guessing asymptote, e.g.
    ``Beta4Prior(5, 17, 0, 1)``.

    Parameters
    ----------
    alpha, beta : float
        Shape parameters. Must be positive.
    lower, upper : float
        Support limits, ``lower < upper``.
    """

    distribution_name = "Beta4"

    def __init__(
        self,
        alpha: float = 1.0,
        beta: float = 1.0,
        lower: float = 0.0,
        upper: float = 1.0,
    ) -> None:
        if alpha <= 0.0 or beta <= 0.0:
            raise ValueError(
                f"Shape parameters must be positive, got alpha={alpha}, beta={beta}"
            )
        if lower >= upper:
            raise ValueError(f"lower ({lower}) must be less than upper ({upper})")
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.lower = float(lower)
        self.upper = float(upper)

    @property
    def parameters(self) -> tuple[float, ...]:
        return (self.alpha, self.beta, self.lower, self.upper)

    def zero_density(self, x: float) -> bool:
        return x <= self.lower or x >= self.upper

    def nearest_non_zero(self, x: float) -> float:
        if x <= self.lower:
            return self.lower + PRIOR_BOUNDARY_OFFSET
        if x >= self.upper:
            return self.upper - PRIOR_BOUNDARY_OFFSET
        return x

    def log_density(self, x: float) -> float:
        if self.zero_density(x):
            return -np.inf
        return float(
            stats.beta.logpdf(
                x, self.alpha, self.beta, loc=self.lower, scale=self.upper - self.lower
            )
        )

    def log_density_deriv1(self, x: float) -> float:
        if self.zero_density(x):
            return 0.0
        return (self.alpha - 1.0) / (x - self.lower) - (self.beta - 1.0) / (
            self.upper - x
        )

    def log_density_deriv2(self, x: float) -> float:
        if self.zero_density(x):
            return 0.0
        return (1.0 - self.alpha) / (x - self.lower) ** 2 - (self.beta - 1.0) / (
            self.upper - x
        ) ** 2
