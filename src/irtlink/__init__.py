"""Linking and true score equating of calibrated IRT test forms."""

import logging

from irtlink._config import (
    get_config,
    set_default_optimizer,
    set_default_precision,
    set_log_level,
)
from irtlink._version import __version__
from irtlink.equating import (
    LinkingConstants,
    LinkingResult,
    ScoreEquatingResult,
    haebara,
    link,
    mean_mean,
    mean_sigma,
    scale_linking,
    stocking_lord,
    transform_parameters,
    true_score_equating,
)
from irtlink.models import (
    Beta4Prior,
    FourParameterLogistic,
    GeneralizedPartialCredit,
    GeneralizedPartialCredit2,
    GradedResponseModel,
    LogNormalPrior,
    NormalPrior,
    OneParameterLogistic,
    PartialCreditModel,
    PartialCreditModel2,
    Rasch,
    ThreeParameterLogistic,
    TwoParameterLogistic,
)
from irtlink.quadrature import NormalQuadrature, QuadratureRule, UniformQuadrature

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Models
    "OneParameterLogistic",
    "TwoParameterLogistic",
    "ThreeParameterLogistic",
    "FourParameterLogistic",
    "Rasch",
    "PartialCreditModel",
    "PartialCreditModel2",
    "GeneralizedPartialCredit",
    "GeneralizedPartialCredit2",
    "GradedResponseModel",
    "NormalPrior",
    "LogNormalPrior",
    "Beta4Prior",
    # Quadrature
    "QuadratureRule",
    "UniformQuadrature",
    "NormalQuadrature",
    # Linking and equating
    "LinkingConstants",
    "LinkingResult",
    "ScoreEquatingResult",
    "mean_mean",
    "mean_sigma",
    "haebara",
    "stocking_lord",
    "scale_linking",
    "link",
    "transform_parameters",
    "true_score_equating",
    # Configuration
    "set_default_optimizer",
    "set_default_precision",
    "set_log_level",
    "get_config",
]
