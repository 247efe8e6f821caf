"""IRT true score equating.

A Form X raw score is matched to the ability at which the Form X test
characteristic curve equals that score, and the Form Y true score at that
ability is its equivalent. Both forms must already be on a common scale.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from irtlink.constants import (
    NEWTON_MAX_ITER,
    NEWTON_MAX_STEP,
    NEWTON_TOLERANCE,
    THETA_SENTINEL,
    TRUE_SCORE_TOLERANCE,
)
from irtlink.equating.linking import LinkingConstants, transform_parameters
from irtlink.typing import ItemCollection

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class ScoreEquatingResult:
    """Result of score equating procedure.

    Attributes
    ----------
    raw_scores : NDArray[np.float64]
        Form X raw scores 0, 1, ..., floor(max score).
    theta : NDArray[np.float64]
        Form X ability for each raw score; ±99 for unreachable scores.
    y_equivalent : NDArray[np.float64]
        Form Y true score equivalents.
    status : list[str]
        "Y" converged, "N" not converged, "-" boundary score (no solve).
    iterations : NDArray[np.int_]
        Root-finding iterations per score.
    method : str
        Equating method used.
    """

    raw_scores: NDArray[np.float64]
    theta: NDArray[np.float64]
    y_equivalent: NDArray[np.float64]
    status: list[str]
    iterations: NDArray[np.int_]
    method: str = "true_score"

    @property
    def rounded(self) -> NDArray[np.int_]:
        """Y equivalents rounded half up to integers."""
        return np.floor(self.y_equivalent + 0.5).astype(int)

    def to_dataframe(self) -> "pd.DataFrame":
        """Convert the conversion table to a pandas DataFrame.

        Returns
        -------
        pandas.DataFrame
            One row per raw score.
        """
        import pandas as pd

        return pd.DataFrame(
            {
                "score": self.raw_scores.astype(int),
                "theta": self.theta,
                "y_equivalent": self.y_equivalent,
                "rounded": self.rounded,
                "status": self.status,
                "iterations": self.iterations,
            }
        )

    def summary(self) -> str:
        return score_equating_summary(self)


def score_bounds(form: ItemCollection) -> tuple[float, float]:
    """Lowest and highest attainable true scores of a form.

    The lower bound counts the guessing asymptote of each item:
    ``Σ(min_w * (1 - c) + max_w * c)``. The upper bound is ``Σ max_w``.
    Inactive items (negative guessing) contribute to neither.
    """
    low = 0.0
    high = 0.0
    for item in form.values():
        c = item.guessing
        if c < 0.0:
            continue
        low += item.min_score_weight * (1.0 - c) + item.max_score_weight * c
        high += item.max_score_weight
    return low, high


def test_characteristic_curve(
    form: ItemCollection, theta: NDArray[np.float64] | float
) -> NDArray[np.float64] | float:
    """Sum of the item expected scores at theta."""
    total = np.zeros(np.shape(theta))
    for item in form.values():
        total = total + item.expected_value(theta)
    return float(total) if np.ndim(theta) == 0 else total


def tcc_derivative(
    form: ItemCollection, theta: NDArray[np.float64] | float
) -> NDArray[np.float64] | float:
    """First derivative of the test characteristic curve at theta."""
    total = np.zeros(np.shape(theta))
    for item in form.values():
        total = total + item.deriv_theta(theta)
    return float(total) if np.ndim(theta) == 0 else total


def true_score_to_theta(
    form: ItemCollection,
    score: float,
    tol: float = NEWTON_TOLERANCE,
    max_iter: int = NEWTON_MAX_ITER,
    max_step: float = NEWTON_MAX_STEP,
) -> tuple[float, int, bool]:
    """Find the ability at which the test characteristic curve equals ``score``.

    Newton-Raphson from theta = 0 with each step limited to ``max_step``
    logits. The test characteristic curve is increasing, so a bracket is
    kept and the update falls back to bisection whenever the Newton step
    leaves it or the derivative vanishes. Theta is clamped to ±99.

    Parameters
    ----------
    form : Mapping[str, BaseItemModel]
        Items defining the test characteristic curve.
    score : float
        Target true score.
    tol : float, default=1e-6
        Convergence criterion on the absolute change in theta.
    max_iter : int, default=150
        Maximum number of iterations.
    max_step : float, default=1.0
        Largest permitted change in theta per iteration.

    Returns
    -------
    tuple of (float, int, bool)
        Theta, number of iterations, and whether the change in theta fell
        below ``tol`` with the curve within ``TRUE_SCORE_TOLERANCE`` of
        ``score``. A score outside the range of the curve ends at the ±99
        clamp and is not converged.
    """
    lower, upper = -THETA_SENTINEL, THETA_SENTINEL
    theta = 0.0
    change = np.inf
    n_iter = 0

    while change > tol and n_iter < max_iter:
        residual = test_characteristic_curve(form, theta) - score
        slope = tcc_derivative(form, theta)

        if residual < 0:
            lower = theta
        else:
            upper = theta

        if np.isfinite(slope) and slope > 0:
            step = float(np.clip(-residual / slope, -max_step, max_step))
            candidate = theta + step
            if not lower <= candidate <= upper:
                candidate = 0.5 * (lower + upper)
        else:
            candidate = 0.5 * (lower + upper)

        candidate = float(np.clip(candidate, -THETA_SENTINEL, THETA_SENTINEL))
        change = abs(candidate - theta)
        theta = candidate
        n_iter += 1

    residual = test_characteristic_curve(form, theta) - score
    converged = bool(change < tol and abs(residual) < TRUE_SCORE_TOLERANCE)
    if not converged:
        logger.debug(
            "True score %.4f did not converge after %d iterations (theta=%.6f)",
            score,
            n_iter,
            theta,
        )
    return theta, n_iter, converged


def true_score_equating(
    form_x: ItemCollection,
    form_y: ItemCollection,
    linking: LinkingConstants | None = None,
    tol: float = NEWTON_TOLERANCE,
    max_iter: int = NEWTON_MAX_ITER,
    max_step: float = NEWTON_MAX_STEP,
) -> ScoreEquatingResult:
    """Perform IRT true score equating.

    Maps Form X raw scores to Form Y true scores through the ability at
    which each raw score is the Form X true score.

    Parameters
    ----------
    form_x : Mapping[str, BaseItemModel]
        New form, on the Form Y scale unless ``linking`` is given.
    form_y : Mapping[str, BaseItemModel]
        Old form.
    linking : LinkingConstants, optional
        If given, copies of the Form X items are transformed with these
        constants before equating.
    tol, max_iter, max_step
        Passed to :func:`true_score_to_theta`.

    Returns
    -------
    ScoreEquatingResult
        Score conversion table.

    Notes
    -----
    Raw scores at or below the Form X lower bound (the sum of the guessing
    asymptotes) have no ability solution. They receive theta = -99 and a
    linear Y equivalent ``s * min_Y / min_X`` (``s`` when ``min_Y`` is 0).
    The maximum score, and any score at or above the Form X curve at
    theta = +99 (upper asymptotes below 1), receives theta = +99 and the
    Form Y true score there. All of these are flagged ``"-"``.
    """
    if linking is not None:
        form_x = transform_parameters(form_x, linking.A, linking.B)

    min_x, max_score = score_bounds(form_x)
    min_y, _ = score_bounds(form_y)
    low_scale = min_y / min_x if min_y > 0 and min_x > 0 else 1.0
    # below max_x when an upper asymptote is less than 1
    ceiling_x = test_characteristic_curve(form_x, THETA_SENTINEL)

    n_scores = int(max_score) + 1
    raw_scores = np.arange(n_scores, dtype=np.float64)
    theta = np.zeros(n_scores)
    y_equivalent = np.zeros(n_scores)
    iterations = np.zeros(n_scores, dtype=int)
    status: list[str] = []

    for i, score in enumerate(raw_scores):
        if score <= min_x:
            theta[i] = -THETA_SENTINEL
            y_equivalent[i] = low_scale * score
            status.append("-")
        elif score == max_score or score >= ceiling_x:
            theta[i] = THETA_SENTINEL
            y_equivalent[i] = test_characteristic_curve(form_y, THETA_SENTINEL)
            status.append("-")
        else:
            theta[i], iterations[i], converged = true_score_to_theta(
                form_x, score, tol=tol, max_iter=max_iter, max_step=max_step
            )
            y_equivalent[i] = test_characteristic_curve(form_y, theta[i])
            status.append("Y" if converged else "N")

    n_failed = status.count("N")
    if n_failed:
        logger.warning("%d raw scores did not converge to a theta value", n_failed)

    return ScoreEquatingResult(
        raw_scores=raw_scores,
        theta=theta,
        y_equivalent=y_equivalent,
        status=status,
        iterations=iterations,
        method="true_score",
    )


def score_equating_summary(result: ScoreEquatingResult) -> str:
    """Generate summary table of score equating.

    Parameters
    ----------
    result : ScoreEquatingResult
        Score equating result.

    Returns
    -------
    str
        Formatted score conversion table.
    """
    width = 38
    lines = []
    lines.append(f"{'SCORE TABLE':^{width}}")
    lines.append("=" * width)
    lines.append(f"{'Score':>8}{'Theta':>9}{'Y-Equiv':>9}{'Round':>7}{'Conv':>5}")
    lines.append("-" * width)

    for score, theta, y, rounded, status in zip(
        result.raw_scores, result.theta, result.y_equivalent, result.rounded, result.status
    ):
        lines.append(
            f"{int(score):>8d}{theta:>9.4f}{y:>9.4f}{rounded:>7d}{status:>5}"
        )

    lines.append("=" * width)

    return "\n".join(lines)
