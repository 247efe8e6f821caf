"""Constants for numerical stability, sentinels and default tolerances.

These are true constants that should not be user-configurable.
For configurable values, use function arguments with defaults.
"""

PROB_EPSILON: float = 1e-10
"""Small value to prevent division by zero in information calculations."""

THETA_SENTINEL: float = 99.0
"""Ability reported for raw scores at or beyond the reachable true-score range."""

RASCH_SEARCH_BOUNDS: tuple[float, float] = (-4.0, 4.0)
"""Search interval for the intercept-only characteristic curve methods."""

NEWTON_TOLERANCE: float = 1e-6
"""Convergence criterion on the ability update in true-score root finding."""

TRUE_SCORE_TOLERANCE: float = 1e-4
"""Largest test characteristic curve residual accepted as a solved raw score."""

NEWTON_MAX_ITER: int = 150
"""Maximum number of root-finding iterations per raw score."""

NEWTON_MAX_STEP: float = 1.0
"""Largest ability change (in logits) permitted per root-finding iteration."""

FINITE_DIFFERENCE_STEP: float = 1e-5
"""Step size for central-difference Hessians and second derivatives."""

PRIOR_BOUNDARY_OFFSET: float = 0.001
"""Offset from a bounded prior's support limits used by nearest_non_zero."""
