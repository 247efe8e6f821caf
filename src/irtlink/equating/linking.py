"""IRT scale linking for test equating.

This module places the item parameters of a new form (Form X) on the scale
of an old form (Form Y) through a linear transformation of the ability scale

    theta_Y = A * theta_X + B
    a_Y = a_X / A
    b_Y = A * b_X + B

using the common items of the two forms. Four methods are provided:
mean/mean, mean/sigma, Haebara item characteristic curve matching and
Stocking-Lord test characteristic curve matching.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import optimize

from irtlink._config import get_default_optimizer, get_default_precision
from irtlink.constants import RASCH_SEARCH_BOUNDS
from irtlink.quadrature import NormalQuadrature, QuadratureRule
from irtlink.typing import (
    CriterionType,
    ItemCollection,
    LinkingMethod,
    Minimizer,
    Objective,
    OptimizerMethod,
)

logger = logging.getLogger(__name__)

_VALID_CRITERIA = ("Q1", "Q2", "Q1Q2")


@dataclass
class LinkingConstants:
    """Linear transformation constants for IRT linking.

    Attributes
    ----------
    A : float
        Slope of linear transformation.
    B : float
        Intercept of linear transformation.
    method : str
        Linking method used.
    objective : float | None
        Criterion value at the solution (characteristic curve methods).
    converged : bool | None
        Whether the optimizer reported success.
    """

    A: float
    B: float
    method: str = ""
    objective: float | None = None
    converged: bool | None = None

    def rounded(self, precision: int) -> "LinkingConstants":
        """Copy with A and B rounded to ``precision`` decimals."""
        return LinkingConstants(
            A=round(float(self.A), precision),
            B=round(float(self.B), precision),
            method=self.method,
            objective=self.objective,
            converged=self.converged,
        )

    def transform(self, theta: NDArray[np.float64] | float) -> NDArray[np.float64] | float:
        """Map Form X abilities to the Form Y scale."""
        return self.A * np.asarray(theta) + self.B


@dataclass
class LinkingResult:
    """Result of linking by all four methods.

    Attributes
    ----------
    mean_mean, mean_sigma, haebara, stocking_lord : LinkingConstants
        Reported (rounded) constants from each method.
    common_items : list[str]
        Identifiers of the items used for linking, in Form Y order.
    rasch_family : bool
        True when only the intercept was estimated.
    precision : int
        Decimals used for the reported constants.
    """

    mean_mean: LinkingConstants
    mean_sigma: LinkingConstants
    haebara: LinkingConstants
    stocking_lord: LinkingConstants
    common_items: list[str] = field(default_factory=list)
    rasch_family: bool = False
    precision: int = 4

    def get(self, method: LinkingMethod) -> LinkingConstants:
        if method not in ("mean_mean", "mean_sigma", "haebara", "stocking_lord"):
            raise ValueError(f"Unknown linking method: {method}")
        return getattr(self, method)

    def summary(self) -> str:
        return linking_summary(self)


def common_items(form_x: ItemCollection, form_y: ItemCollection) -> list[str]:
    """Identifiers present in both forms, in Form Y order."""
    return [name for name in form_y if name in form_x]


def is_rasch_family(form: ItemCollection, items: list[str] | None = None) -> bool:
    """Whether every listed item fixes the linking slope at 1.

    These are logistic items with ``a == 1``, ``c == 0`` and ``u == 1`` and
    partial credit items. An empty item list is not Rasch family.
    """
    names = list(form) if items is None else items
    if not names:
        return False
    return all(form[name].is_rasch_family for name in names)


def _pooled_parameters(
    form: ItemCollection, items: list[str]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    disc = np.array([form[name].discrimination for name in items], dtype=np.float64)
    locs = [form[name].location_parameters() for name in items]
    return disc, np.concatenate(locs) if locs else np.array([])


def mean_mean(form_x: ItemCollection, form_y: ItemCollection) -> LinkingConstants:
    """Mean/mean method.

    A = mean(a_X) / mean(a_Y)
    B = mean(b_Y) - A * mean(b_X)

    Every location parameter of a common item (difficulty, step or
    threshold) contributes to the b means; each item contributes one
    discrimination.
    """
    items = common_items(form_x, form_y)
    if not items:
        logger.warning("No common items between forms; mean/mean is undefined")
        return LinkingConstants(np.nan, np.nan, method="mean_mean")

    a_x, b_x = _pooled_parameters(form_x, items)
    a_y, b_y = _pooled_parameters(form_y, items)

    A = float(np.mean(a_x) / np.mean(a_y))
    B = float(np.mean(b_y) - A * np.mean(b_x))
    return LinkingConstants(A, B, method="mean_mean")


def mean_sigma(
    form_x: ItemCollection,
    form_y: ItemCollection,
    population_sd: bool = True,
    rasch_family: bool | None = None,
) -> LinkingConstants:
    """Mean/sigma method.

    A = sd(b_Y) / sd(b_X)
    B = mean(b_Y) - A * mean(b_X)

    Parameters
    ----------
    form_x, form_y : Mapping[str, BaseItemModel]
        New and old forms.
    population_sd : bool, default=True
        Use the population (n) rather than the sample (n - 1) standard
        deviation.
    rasch_family : bool, optional
        Force A = 1. Detected from the Form Y common items when omitted.
    """
    items = common_items(form_x, form_y)
    if not items:
        logger.warning("No common items between forms; mean/sigma is undefined")
        return LinkingConstants(np.nan, np.nan, method="mean_sigma")

    if rasch_family is None:
        rasch_family = is_rasch_family(form_y, items)

    _, b_x = _pooled_parameters(form_x, items)
    _, b_y = _pooled_parameters(form_y, items)

    if rasch_family:
        A = 1.0
    else:
        ddof = 0 if population_sd else 1
        with np.errstate(divide="ignore", invalid="ignore"):
            A = float(np.std(b_y, ddof=ddof) / np.std(b_x, ddof=ddof))
    B = float(np.mean(b_y) - A * np.mean(b_x))
    return LinkingConstants(A, B, method="mean_sigma")


def _split_coefficients(coefficients: NDArray[np.float64]) -> tuple[float, float]:
    coefficients = np.atleast_1d(np.asarray(coefficients, dtype=np.float64))
    intercept = float(coefficients[0])
    slope = float(coefficients[1]) if coefficients.size > 1 else 1.0
    return intercept, slope


class _CharacteristicCurveCriterion:
    """Shared setup for the Haebara and Stocking-Lord criteria.

    Form Y curves on the Form Y distribution and Form X curves on the Form X
    distribution do not depend on the coefficients and are computed once.
    Instances are pure functions of the coefficient vector ``[B]`` or
    ``[B, A]``.
    """

    def __init__(
        self,
        form_x: ItemCollection,
        form_y: ItemCollection,
        dist_x: QuadratureRule,
        dist_y: QuadratureRule,
        criterion: CriterionType = "Q1Q2",
        standardized: bool = True,
    ) -> None:
        if criterion not in _VALID_CRITERIA:
            raise ValueError(
                f"Unknown criterion: {criterion}. Must be one of {_VALID_CRITERIA}"
            )
        self.form_x = form_x
        self.form_y = form_y
        self.dist_x = dist_x
        self.dist_y = dist_y
        self.criterion = criterion
        self.standardized = standardized
        self.items = common_items(form_x, form_y)

    @property
    def has_weight(self) -> bool:
        """Whether each distribution the criterion sums over has positive weight."""
        used = {
            "Q1": (self.dist_y,),
            "Q2": (self.dist_x,),
            "Q1Q2": (self.dist_y, self.dist_x),
        }[self.criterion]
        return all(dist.total_weight > 0 for dist in used)

    def __call__(self, coefficients: NDArray[np.float64]) -> float:
        intercept, slope = _split_coefficients(coefficients)
        with np.errstate(all="ignore"):
            if self.criterion == "Q1":
                value = self._first(intercept, slope)
            elif self.criterion == "Q2":
                value = self._second(intercept, slope)
            else:
                value = self._first(intercept, slope) + self._second(intercept, slope)
        return float(value) if np.isfinite(value) else np.inf

    def _first(self, intercept: float, slope: float) -> float:
        raise NotImplementedError

    def _second(self, intercept: float, slope: float) -> float:
        raise NotImplementedError


class HaebaraCriterion(_CharacteristicCurveCriterion):
    """Haebara item characteristic curve criterion.

    Q1 compares Form Y category curves with transformed Form X curves over
    the Form Y distribution:

        Q1 = Σ_θ w(θ) Σ_i Σ_k (P_Yik(θ) - P*_Xik(θ; B, A))²

    Q2 compares Form X curves with back-transformed Form Y curves over the
    Form X distribution. When ``standardized`` each part is divided by the
    total number of categories times the total weight.

    Examples
    --------
    >>> crit = HaebaraCriterion(form_x, form_y, dist_x, dist_y)  # doctest: +SKIP
    >>> crit([0.0, 1.0])  # doctest: +SKIP
    """

    def __init__(
        self,
        form_x: ItemCollection,
        form_y: ItemCollection,
        dist_x: QuadratureRule,
        dist_y: QuadratureRule,
        criterion: CriterionType = "Q1Q2",
        standardized: bool = True,
    ) -> None:
        super().__init__(form_x, form_y, dist_x, dist_y, criterion, standardized)
        self._y_on_y = [
            form_y[name].category_probabilities(dist_y.points) for name in self.items
        ]
        self._x_on_x = [
            form_x[name].category_probabilities(dist_x.points) for name in self.items
        ]
        self._n_categories = sum(form_y[name].n_categories for name in self.items)

    def _scaled(self, total: float, dist: QuadratureRule) -> float:
        if self.standardized:
            return total / (self._n_categories * dist.total_weight)
        return total

    def q1(self, intercept: float, slope: float = 1.0) -> float:
        """Form Y based criterion."""
        w = self.dist_y.weights
        total = 0.0
        for name, p_y in zip(self.items, self._y_on_y):
            item = self.form_x[name]
            p_star = item.category_probabilities(
                self.dist_y.points, item.t_star_parameters(intercept, slope)
            )
            total += np.sum(w[:, None] * (p_y - p_star) ** 2)
        return self._scaled(total, self.dist_y)

    def q2(self, intercept: float, slope: float = 1.0) -> float:
        """Form X based criterion."""
        w = self.dist_x.weights
        total = 0.0
        for name, p_x in zip(self.items, self._x_on_x):
            item = self.form_y[name]
            p_sharp = item.category_probabilities(
                self.dist_x.points, item.t_sharp_parameters(intercept, slope)
            )
            total += np.sum(w[:, None] * (p_x - p_sharp) ** 2)
        return self._scaled(total, self.dist_x)

    _first = q1
    _second = q2


class StockingLordCriterion(_CharacteristicCurveCriterion):
    """Stocking-Lord test characteristic curve criterion.

    F1 compares the Form Y common-item true score with the transformed Form
    X true score over the Form Y distribution:

        F1 = Σ_θ w(θ) (T_Y(θ) - T*_X(θ; B, A))²

    F2 is the Form X counterpart. When ``standardized`` each part is divided
    by the total weight of its distribution.
    """

    def __init__(
        self,
        form_x: ItemCollection,
        form_y: ItemCollection,
        dist_x: QuadratureRule,
        dist_y: QuadratureRule,
        criterion: CriterionType = "Q1Q2",
        standardized: bool = True,
    ) -> None:
        super().__init__(form_x, form_y, dist_x, dist_y, criterion, standardized)
        self._tcc_y = self._true_score(form_y, dist_y.points)
        self._tcc_x = self._true_score(form_x, dist_x.points)

    def _true_score(
        self, form: ItemCollection, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        total = np.zeros(theta.size)
        for name in self.items:
            total += form[name].expected_value(theta)
        return total

    def _scaled(self, total: float, dist: QuadratureRule) -> float:
        if self.standardized:
            return total / dist.total_weight
        return total

    def f1(self, intercept: float, slope: float = 1.0) -> float:
        """Form Y based criterion."""
        theta = self.dist_y.points
        t_star = np.zeros(theta.size)
        for name in self.items:
            t_star += self.form_x[name].t_star_expected_value(theta, intercept, slope)
        total = np.sum(self.dist_y.weights * (self._tcc_y - t_star) ** 2)
        return self._scaled(total, self.dist_y)

    def f2(self, intercept: float, slope: float = 1.0) -> float:
        """Form X based criterion."""
        theta = self.dist_x.points
        t_sharp = np.zeros(theta.size)
        for name in self.items:
            t_sharp += self.form_y[name].t_sharp_expected_value(theta, intercept, slope)
        total = np.sum(self.dist_x.weights * (self._tcc_x - t_sharp) ** 2)
        return self._scaled(total, self.dist_x)

    _first = f1
    _second = f2


def scipy_minimizer(
    method: OptimizerMethod | None = None,
    options: dict[str, Any] | None = None,
) -> Minimizer:
    """Build a minimizer backed by :func:`scipy.optimize.minimize`.

    Parameters
    ----------
    method : {"Nelder-Mead", "BFGS", "Powell"}, optional
        Defaults to the configured default optimizer.
    options : dict, optional
        Passed to ``scipy.optimize.minimize``. Nelder-Mead defaults to tight
        simplex tolerances.

    Returns
    -------
    callable
        ``minimizer(objective, x0) -> (x, fun)``.
    """
    if method is None:
        method = get_default_optimizer()

    if options is None:
        if method == "Nelder-Mead":
            options = {"maxiter": 4000, "xatol": 1e-10, "fatol": 1e-12}
        else:
            options = {"maxiter": 4000}

    def minimizer(
        objective: Objective, x0: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], float]:
        result = optimize.minimize(objective, x0, method=method, options=options)
        if not result.success:
            logger.debug("%s did not converge: %s", method, result.message)
        return np.asarray(result.x, dtype=np.float64), float(result.fun)

    return minimizer


def _rasch_search(objective: Objective, n_starts: int) -> tuple[float, float]:
    """Bounded scalar search for the intercept over the Rasch search interval."""
    lower, upper = RASCH_SEARCH_BOUNDS
    edges = np.linspace(lower, upper, max(n_starts, 1) + 1)
    best_x, best_f = np.nan, np.inf
    for lo, hi in zip(edges[:-1], edges[1:]):
        result = optimize.minimize_scalar(
            lambda b: objective(np.array([b])),
            bounds=(lo, hi),
            method="bounded",
            options={"xatol": 1e-10, "maxiter": 500},
        )
        if result.fun < best_f:
            best_x, best_f = float(result.x), float(result.fun)
    return best_x, best_f


def _start_values(form_x: ItemCollection, form_y: ItemCollection) -> NDArray[np.float64]:
    mm = mean_mean(form_x, form_y)
    if np.isfinite(mm.A) and mm.A > 0 and np.isfinite(mm.B):
        return np.array([mm.B, mm.A])
    return np.array([0.0, 1.0])


def _minimize_criterion(
    objective: _CharacteristicCurveCriterion,
    method: str,
    start: NDArray[np.float64] | None,
    minimizer: Minimizer | None,
    n_starts: int,
    seed: int | None,
    rasch_family: bool | None,
) -> LinkingConstants:
    form_x, form_y = objective.form_x, objective.form_y
    if not objective.items:
        logger.warning("No common items between forms; %s is undefined", method)
        return LinkingConstants(np.nan, np.nan, method=method, converged=False)
    if not objective.has_weight:
        logger.warning("Ability distribution has zero total weight; %s is undefined", method)
        return LinkingConstants(np.nan, np.nan, method=method, converged=False)

    if rasch_family is None:
        rasch_family = is_rasch_family(form_y, objective.items)

    if rasch_family:
        B, fmin = _rasch_search(objective, n_starts)
        logger.debug("%s intercept search: B=%.6f f=%.6g", method, B, fmin)
        return LinkingConstants(
            1.0, B, method=method, objective=fmin, converged=bool(np.isfinite(fmin))
        )

    if minimizer is None:
        minimizer = scipy_minimizer()
    x0 = _start_values(form_x, form_y) if start is None else np.asarray(start, float)
    logger.debug("%s start: B=%.6f A=%.6f", method, x0[0], x0[1])

    best_x, best_f = minimizer(objective, x0)
    rng = np.random.default_rng(seed)
    for restart in range(1, n_starts):
        trial = x0 + rng.normal(scale=0.5, size=x0.size)
        x, fun = minimizer(objective, trial)
        logger.debug("%s restart %d: f=%.6g", method, restart, fun)
        if fun < best_f:
            best_x, best_f = x, fun

    logger.debug("%s solution: B=%.6f A=%.6f f=%.6g", method, best_x[0], best_x[1], best_f)
    return LinkingConstants(
        float(best_x[1]),
        float(best_x[0]),
        method=method,
        objective=float(best_f),
        converged=bool(np.isfinite(best_f)),
    )


def haebara(
    form_x: ItemCollection,
    form_y: ItemCollection,
    dist_x: QuadratureRule,
    dist_y: QuadratureRule,
    criterion: CriterionType = "Q1Q2",
    standardized: bool = True,
    start: NDArray[np.float64] | None = None,
    minimizer: Minimizer | None = None,
    n_starts: int = 1,
    seed: int | None = None,
    rasch_family: bool | None = None,
    precision: int | None = None,
) -> LinkingConstants:
    """Haebara characteristic curve linking.

    Parameters
    ----------
    form_x, form_y : Mapping[str, BaseItemModel]
        New and old forms.
    dist_x, dist_y : QuadratureRule
        Ability distributions of the two forms.
    criterion : {"Q1", "Q2", "Q1Q2"}, default="Q1Q2"
        Which side(s) of the symmetric criterion to minimize.
    standardized : bool, default=True
        Divide by the number of categories and total weight.
    start : array_like of shape (2,), optional
        Starting ``[B, A]``. Defaults to the mean/mean coefficients.
    minimizer : callable, optional
        ``(objective, x0) -> (x, fun)``. Defaults to :func:`scipy_minimizer`.
    n_starts : int, default=1
        Number of optimizer runs; extra runs start from random perturbations
        of ``start``. For Rasch-family forms the search interval is split
        into ``n_starts`` pieces instead.
    seed : int, optional
        Seed for the restart perturbations.
    rasch_family : bool, optional
        Estimate the intercept only. Detected from Form Y when omitted.
    precision : int, optional
        Decimals for the reported constants. The search is not rounded.

    Returns
    -------
    LinkingConstants
    """
    objective = HaebaraCriterion(
        form_x, form_y, dist_x, dist_y, criterion=criterion, standardized=standardized
    )
    result = _minimize_criterion(
        objective, "haebara", start, minimizer, n_starts, seed, rasch_family
    )
    return result if precision is None else result.rounded(precision)


def stocking_lord(
    form_x: ItemCollection,
    form_y: ItemCollection,
    dist_x: QuadratureRule,
    dist_y: QuadratureRule,
    criterion: CriterionType = "Q1Q2",
    standardized: bool = True,
    start: NDArray[np.float64] | None = None,
    minimizer: Minimizer | None = None,
    n_starts: int = 1,
    seed: int | None = None,
    rasch_family: bool | None = None,
    precision: int | None = None,
) -> LinkingConstants:
    """Stocking-Lord characteristic curve linking.

    Same arguments as :func:`haebara`; the criterion compares test
    characteristic curves of the common items.
    """
    objective = StockingLordCriterion(
        form_x, form_y, dist_x, dist_y, criterion=criterion, standardized=standardized
    )
    result = _minimize_criterion(
        objective, "stocking_lord", start, minimizer, n_starts, seed, rasch_family
    )
    return result if precision is None else result.rounded(precision)


def scale_linking(
    form_x: ItemCollection,
    form_y: ItemCollection,
    dist_x: QuadratureRule,
    dist_y: QuadratureRule,
    precision: int | None = None,
    criterion: CriterionType = "Q1Q2",
    standardized: bool = True,
    population_sd: bool = True,
    minimizer: Minimizer | None = None,
    n_starts: int = 1,
    seed: int | None = None,
) -> LinkingResult:
    """Compute linking constants by all four methods.

    Parameters
    ----------
    form_x : Mapping[str, BaseItemModel]
        New form, to be placed on the Form Y scale.
    form_y : Mapping[str, BaseItemModel]
        Old form, defining the target scale.
    dist_x, dist_y : QuadratureRule
        Ability distributions used by the characteristic curve criteria.
    precision : int, optional
        Decimals for the reported constants. Defaults to the configured
        precision. Optimization itself is not rounded.

    Returns
    -------
    LinkingResult
    """
    if precision is None:
        precision = get_default_precision()

    items = common_items(form_x, form_y)
    rasch = is_rasch_family(form_y, items)
    logger.debug(
        "Linking %d common items (rasch_family=%s)", len(items), rasch
    )

    mm = mean_mean(form_x, form_y)
    ms = mean_sigma(form_x, form_y, population_sd=population_sd, rasch_family=rasch)
    hb = haebara(
        form_x,
        form_y,
        dist_x,
        dist_y,
        criterion=criterion,
        standardized=standardized,
        minimizer=minimizer,
        n_starts=n_starts,
        seed=seed,
        rasch_family=rasch,
    )
    sl = stocking_lord(
        form_x,
        form_y,
        dist_x,
        dist_y,
        criterion=criterion,
        standardized=standardized,
        minimizer=minimizer,
        n_starts=n_starts,
        seed=seed,
        rasch_family=rasch,
    )

    return LinkingResult(
        mean_mean=mm.rounded(precision),
        mean_sigma=ms.rounded(precision),
        haebara=hb.rounded(precision),
        stocking_lord=sl.rounded(precision),
        common_items=items,
        rasch_family=rasch,
        precision=precision,
    )


def link(
    form_x: ItemCollection,
    form_y: ItemCollection,
    dist_x: QuadratureRule | None = None,
    dist_y: QuadratureRule | None = None,
    method: LinkingMethod = "stocking_lord",
    **kwargs: Any,
) -> LinkingConstants:
    """Link Form X to Form Y with a single method.

    Parameters
    ----------
    form_x, form_y : Mapping[str, BaseItemModel]
        New and old forms.
    dist_x, dist_y : QuadratureRule, optional
        Ability distributions for the characteristic curve methods. Default
        to a 41-point normal grid on [-4, 4].
    method : str
        Linking method:
        - "mean_mean": Mean/mean method
        - "mean_sigma": Mean/sigma method
        - "haebara": Haebara item characteristic curve method
        - "stocking_lord": Stocking-Lord test characteristic curve method
    **kwargs
        Passed to the method function.

    Returns
    -------
    LinkingConstants
    """
    if method == "mean_mean":
        return mean_mean(form_x, form_y)
    if method == "mean_sigma":
        return mean_sigma(form_x, form_y, **kwargs)

    if method not in ("haebara", "stocking_lord"):
        raise ValueError(f"Unknown linking method: {method}")

    if dist_x is None:
        dist_x = NormalQuadrature(-4.0, 4.0, 41)
    if dist_y is None:
        dist_y = NormalQuadrature(-4.0, 4.0, 41)

    if method == "haebara":
        return haebara(form_x, form_y, dist_x, dist_y, **kwargs)
    return stocking_lord(form_x, form_y, dist_x, dist_y, **kwargs)


def transform_parameters(
    form: ItemCollection,
    A: float,
    B: float,
    in_place: bool = False,
) -> dict[str, Any]:
    """Place every item of a form on the target scale.

    Applies ``scale(B, A)`` to each item; fixed items are unchanged.

    Parameters
    ----------
    form : Mapping[str, BaseItemModel]
        Items to transform.
    A, B : float
        Slope and intercept.
    in_place : bool, default=False
        Modify the given items instead of copies.

    Returns
    -------
    dict
        Item identifier to transformed item.
    """
    items = dict(form) if in_place else {name: item.copy() for name, item in form.items()}
    for item in items.values():
        item.scale(B, A)
    return items


def linking_summary(result: LinkingResult) -> str:
    """Generate a text table of linking constants."""
    precision = result.precision
    scl_width = max(9, precision + 4)
    int_width = max(13, precision + 4)
    rule = "=" * 63

    lines = [
        "",
        f"{'TRANSFORMATION COEFFICIENTS':^63}",
        f"{'Form X (New Form) to Form Y (Old Form)':^63}",
        rule,
        f"{' Method':<18}{'Slope (A)':<{max(9, precision + 9)}}{'':5}"
        f"{'Intercept (B)':<{max(13, precision + 9)}}{'':5}{'fmin':<13}",
        "-" * 63,
    ]

    rows = [
        (" Mean/Mean", result.mean_mean),
        (" Mean/Sigma", result.mean_sigma),
        (" Haebara", result.haebara),
        (" Stocking-Lord", result.stocking_lord),
    ]
    for label, constants in rows:
        line = (
            f"{label:<17}{constants.A:>{scl_width}.{precision}f}{'':5}"
            f"{constants.B:>{int_width}.{precision}f}"
        )
        if constants.objective is not None:
            line += f"{'':5}{constants.objective:>13.6f}"
        lines.append(line)

    lines.append(rule)
    return "\n".join(lines)
