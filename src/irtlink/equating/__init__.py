"""Scale linking and true score equating for calibrated test forms.

A test form is any mapping from item identifier to a calibrated item model.
Form X (the new form) is placed on the scale of Form Y (the old form) using
the items the two forms share.

Examples
--------
Linking two forms:

>>> from irtlink.equating import scale_linking
>>> result = scale_linking(form_x, form_y, dist_x, dist_y)  # doctest: +SKIP
>>> print(result.summary())  # doctest: +SKIP

True score equating after linking:

>>> from irtlink.equating import true_score_equating
>>> table = true_score_equating(form_x, form_y, linking=result.stocking_lord)  # doctest: +SKIP
>>> print(table.summary())  # doctest: +SKIP
"""

from irtlink.equating.linking import (
    HaebaraCriterion,
    LinkingConstants,
    LinkingResult,
    StockingLordCriterion,
    common_items,
    haebara,
    is_rasch_family,
    link,
    linking_summary,
    mean_mean,
    mean_sigma,
    scale_linking,
    scipy_minimizer,
    stocking_lord,
    transform_parameters,
)
from irtlink.equating.score_equating import (
    ScoreEquatingResult,
    score_bounds,
    score_equating_summary,
    tcc_derivative,
    test_characteristic_curve,
    true_score_equating,
    true_score_to_theta,
)

__all__ = [
    # Linking
    "LinkingConstants",
    "LinkingResult",
    "HaebaraCriterion",
    "StockingLordCriterion",
    "common_items",
    "is_rasch_family",
    "mean_mean",
    "mean_sigma",
    "haebara",
    "stocking_lord",
    "scipy_minimizer",
    "scale_linking",
    "link",
    "linking_summary",
    "transform_parameters",
    # Score equating
    "ScoreEquatingResult",
    "score_bounds",
    "test_characteristic_curve",
    "tcc_derivative",
    "true_score_to_theta",
    "true_score_equating",
    "score_equating_summary",
]
