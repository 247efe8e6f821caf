"""Discrete ability distributions used by the characteristic-curve linking criteria."""

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray
from scipy import stats


class QuadratureRule:
    """Discrete approximation of a latent ability density.

    Holds evaluation points and non-negative weights. Weights need not sum
    to one; moments are computed from the normalized weights.

    Parameters
    ----------
    points : array_like of shape (n_points,)
        Evaluation points on the theta scale.
    weights : array_like of shape (n_points,)
        Density values at the points.

    Examples
    --------
    >>> rule = QuadratureRule([-1.0, 0.0, 1.0], [0.25, 0.5, 0.25])
    >>> rule.mean
    0.0
    >>> round(rule.variance, 2)
    0.5
    """

    def __init__(
        self,
        points: NDArray[np.float64],
        weights: NDArray[np.float64],
    ) -> None:
        points = np.atleast_1d(np.asarray(points, dtype=np.float64)).copy()
        weights = np.atleast_1d(np.asarray(weights, dtype=np.float64)).copy()

        if points.ndim != 1 or points.size < 1:
            raise ValueError("points must be a non-empty 1-D array")
        if weights.shape != points.shape:
            raise ValueError(
                f"points and weights must have the same length, "
                f"got {points.size} and {weights.size}"
            )
        if not np.all(np.isfinite(points)):
            raise ValueError("points must be finite")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise ValueError("weights must be finite and non-negative")

        points.flags.writeable = False
        weights.flags.writeable = False
        self._points = points
        self._weights = weights

    @property
    def points(self) -> NDArray[np.float64]:
        """Quadrature points (read-only)."""
        return self._points

    @property
    def weights(self) -> NDArray[np.float64]:
        """Quadrature weights (read-only)."""
        return self._weights

    @property
    def n_points(self) -> int:
        return self._points.size

    @property
    def total_weight(self) -> float:
        return float(np.sum(self._weights))

    def _normalized_weights(self) -> NDArray[np.float64]:
        total = self.total_weight
        if total <= 0.0:
            return np.full(self.n_points, np.nan)
        return self._weights / total

    @property
    def mean(self) -> float:
        return float(np.sum(self._points * self._normalized_weights()))

    @property
    def variance(self) -> float:
        w = self._normalized_weights()
        m = np.sum(self._points * w)
        return float(np.sum(self._points**2 * w) - m**2)

    @property
    def standard_deviation(self) -> float:
        return float(np.sqrt(max(self.variance, 0.0)))

    @property
    def minimum(self) -> float:
        return float(self._points.min())

    @property
    def maximum(self) -> float:
        return float(self._points.max())

    def __len__(self) -> int:
        return self.n_points

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for point, weight in zip(self._points, self._weights):
            yield float(point), float(weight)

    def standardize(self, keep_points: bool = False) -> "QuadratureRule":
        """Return a rule rescaled to mean 0 and standard deviation 1.

        Parameters
        ----------
        keep_points : bool, default=False
            If False, the weights are kept and the points are moved by
            ``(x - mean) / sd``. If True, the points are kept and new weights
            are read off a linear interpolation of the transformed cumulative
            weights, padded by 0.05 beyond the grid with cumulative
            probabilities 0 and 1.

        Returns
        -------
        QuadratureRule
            New rule; this one is unchanged.
        """
        sd = self.standard_deviation
        if not sd > 0.0:
            raise ValueError("Cannot standardize a quadrature rule with zero variance")

        slope = 1.0 / sd
        intercept = -slope * self.mean
        moved = self._points * slope + intercept

        if not keep_points:
            return QuadratureRule(moved, self._weights)

        order = np.argsort(moved)
        x = moved[order]
        cumulative = np.cumsum(self._normalized_weights()[order])
        lower = min(self.minimum, x[0]) - 0.05
        upper = max(self.maximum, x[-1]) + 0.05
        x = np.concatenate([[lower], x, [upper]])
        cumulative = np.concatenate([[0.0], cumulative, [1.0]])

        cdf = np.interp(self._points, x, cumulative)
        new_weights = np.diff(cdf, prepend=0.0)
        return QuadratureRule(self._points, np.clip(new_weights, 0.0, None))

    def summary(self) -> str:
        lines = [
            f"{self.__class__.__name__}: {self.n_points} points "
            f"on [{self.minimum:.4f}, {self.maximum:.4f}]",
            f"  Mean: {self.mean:.4f}  SD: {self.standard_deviation:.4f}",
            "",
            f"{'Point':>10} {'Weight':>12}",
        ]
        for point, weight in self:
            lines.append(f"{point:>10.4f} {weight:>12.6f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n_points={self.n_points}, "
            f"mean={self.mean:.4f}, sd={self.standard_deviation:.4f})"
        )


class UniformQuadrature(QuadratureRule):
    """Evenly spaced points with equal weights ``1 / n_points``.

    ``minimum`` and ``maximum`` are swapped if given in reverse order.
    """

    def __init__(
        self,
        minimum: float = -4.0,
        maximum: float = 4.0,
        n_points: int = 41,
    ) -> None:
        if n_points < 1:
            raise ValueError("n_points must be at least 1")
        if minimum > maximum:
            minimum, maximum = maximum, minimum
        points = np.linspace(minimum, maximum, n_points)
        super().__init__(points, np.full(n_points, 1.0 / n_points))


class NormalQuadrature(QuadratureRule):
    """Normal density evaluated at evenly spaced points.

    The density values are normalized to sum to one.

    Parameters
    ----------
    minimum, maximum : float
        Range of the grid.
    n_points : int, default=41
        Number of grid points.
    mean : float, default=0.0
        Mean of the normal density; must lie strictly inside the range.
    sd : float, default=1.0
        Standard deviation of the normal density.
    """

    def __init__(
        self,
        minimum: float = -4.0,
        maximum: float = 4.0,
        n_points: int = 41,
        mean: float = 0.0,
        sd: float = 1.0,
    ) -> None:
        if n_points < 1:
            raise ValueError("n_points must be at least 1")
        if sd <= 0.0:
            raise ValueError(f"sd must be positive, got {sd}")
        if minimum > maximum:
            minimum, maximum = maximum, minimum
        if not minimum < mean < maximum:
            raise ValueError(
                f"mean ({mean}) must lie between minimum ({minimum}) and maximum ({maximum})"
            )
        points = np.linspace(minimum, maximum, n_points)
        density = stats.norm.pdf(points, loc=mean, scale=sd)
        super().__init__(points, density / density.sum())
