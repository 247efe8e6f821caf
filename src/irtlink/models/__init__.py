from irtlink.models.base import (
    BaseItemModel,
    DichotomousItemModel,
    PolytomousItemModel,
)
from irtlink.models.dichotomous import (
    FourParameterLogistic,
    OneParameterLogistic,
    Rasch,
    ThreeParameterLogistic,
    TwoParameterLogistic,
)
from irtlink.models.polytomous import (
    GeneralizedPartialCredit,
    GeneralizedPartialCredit2,
    GradedResponseModel,
    PartialCreditModel,
    PartialCreditModel2,
)
from irtlink.models.priors import (
    Beta4Prior,
    ItemParamPrior,
    LogNormalPrior,
    NormalPrior,
)

__all__ = [
    "BaseItemModel",
    "DichotomousItemModel",
    "PolytomousItemModel",
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
    "ItemParamPrior",
    "NormalPrior",
    "LogNormalPrior",
    "Beta4Prior",
]
