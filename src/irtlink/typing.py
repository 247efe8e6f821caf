"""Type definitions for the irtlink package."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Literal

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from irtlink.models.base import BaseItemModel

# A test form: item identifier -> calibrated item model, in insertion order
ItemCollection = Mapping[str, "BaseItemModel"]

# Linking literals
LinkingMethod = Literal["mean_mean", "mean_sigma", "haebara", "stocking_lord"]
CriterionType = Literal["Q1", "Q2", "Q1Q2"]
OptimizerMethod = Literal["Nelder-Mead", "BFGS", "Powell"]

# Objective over linking coefficients [B] or [B, A]
Objective = Callable[[NDArray[np.float64]], float]

# External minimizer collaborator: (objective, start) -> (argmin, minimum)
Minimizer = Callable[
    [Objective, NDArray[np.float64]], tuple[NDArray[np.float64], float]
]
