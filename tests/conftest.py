"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from irtlink.models import (
    GeneralizedPartialCredit2,
    GradedResponseModel,
    OneParameterLogistic,
    PartialCreditModel,
    ThreeParameterLogistic,
)
from irtlink.quadrature import QuadratureRule, UniformQuadrature


def three_pl_form(rows, prefix="i", start=1, D=1.7):
    """Build an item collection of 3PL items from (a, b, c) rows."""
    return {
        f"{prefix}{j + start}": ThreeParameterLogistic(a, b, c, D=D)
        for j, (a, b, c) in enumerate(rows)
    }


def gpcm2_form(rows, prefix="i", start=1, D=1.7):
    """Build an item collection of GPCM2 items from (a, b, thresholds) rows."""
    return {
        f"{prefix}{j + start}": GeneralizedPartialCredit2(a, b, t, D=D)
        for j, (a, b, t) in enumerate(rows)
    }


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(42)


RASCH_X = [
    -3.188047976, 1.031760328, 0.819040914, -2.706947360,
    -0.094527077, 0.689697135, -0.551837153, -0.359559276,
]
RASCH_Y = [
    -3.074599226, 1.012824350, 0.868538408, -2.404483603,
    0.037402866, 0.700747420, -0.602555046, -0.350426446,
]


@pytest.fixture
def rasch_forms():
    """Eight Rasch items (D = 1) on two forms."""
    form_x = {f"Item{j + 1}": OneParameterLogistic(b, D=1.0) for j, b in enumerate(RASCH_X)}
    form_y = {f"Item{j + 1}": OneParameterLogistic(b, D=1.0) for j, b in enumerate(RASCH_Y)}
    return form_x, form_y


@pytest.fixture
def rasch_distribution():
    return UniformQuadrature(-4.0, 4.0, 161)


STUIRT_X = [
    (0.4551, -0.7101, 0.2087), (0.5839, -0.8567, 0.2038), (0.7544, 0.0212, 0.1600),
    (0.6633, 0.0506, 0.1240), (1.0690, 0.9610, 0.2986), (0.9672, 0.1950, 0.0535),
    (0.3479, 2.2768, 0.1489), (1.4579, 1.0241, 0.2453), (1.8811, 1.4062, 0.1992),
    (0.7020, 2.2401, 0.0853), (1.4080, 1.5556, 0.0789), (1.2993, 2.1589, 0.1075),
]
STUIRT_Y = [
    (0.4416, -1.3349, 0.1559), (0.5730, -1.3210, 0.1913), (0.5987, -0.7098, 0.1177),
    (0.6041, -0.3539, 0.0818), (0.9902, 0.5320, 0.3024), (0.8081, -0.1156, 0.0648),
    (0.4140, 2.5538, 0.2410), (1.3554, 0.5811, 0.2243), (1.0417, 0.9392, 0.1651),
    (0.6336, 1.8960, 0.0794), (1.1347, 1.0790, 0.0630), (0.9255, 2.1337, 0.1259),
]
STUIRT_POINTS = [
    -4.0000, -3.1110, -2.2220, -1.3330, -0.4444, 0.4444, 1.3330, 2.2220, 3.1110, 4.0000,
]
STUIRT_X_DENSITY = [
    0.0001008, 0.002760, 0.03021, 0.1420, 0.3149,
    0.3158, 0.1542, 0.03596, 0.003925, 0.0001862,
]
STUIRT_Y_DENSITY = [
    0.0001173, 0.003242, 0.03449, 0.1471, 0.3148,
    0.3110, 0.1526, 0.03406, 0.002510, 0.0001116,
]


@pytest.fixture
def stuirt_forms():
    """Twelve 3PL items from the STUIRT example."""
    return three_pl_form(STUIRT_X), three_pl_form(STUIRT_Y)


@pytest.fixture
def stuirt_distributions():
    return (
        QuadratureRule(STUIRT_POINTS, STUIRT_X_DENSITY),
        QuadratureRule(STUIRT_POINTS, STUIRT_Y_DENSITY),
    )


UNIT_SCALE_X = [
    (0.455118, -0.710086, 0.208748), (0.583871, -0.856669, 0.203834),
    (0.754398, 0.021221, 0.159961), (0.663274, 0.050618, 0.123961),
    (1.068977, 0.961047, 0.298628), (0.967194, 0.194976, 0.053538),
    (0.347868, 2.276794, 0.148927), (1.457918, 1.024128, 0.24527),
    (0.701952, 2.240131, 0.08529), (1.407967, 1.555634, 0.078897),
    (1.299285, 2.158933, 0.10753),
]
UNIT_SCALE_Y = [
    (0.441595, -1.334933, 0.155883), (0.572995, -1.321004, 0.191298),
    (0.598719, -0.709831, 0.117663), (0.604125, -0.353942, 0.081759),
    (0.990164, 0.531956, 0.302443), (0.808079, -0.115649, 0.064791),
    (0.413973, 2.553812, 0.240967), (1.355437, 0.581109, 0.224322),
    (0.633562, 1.896027, 0.079396), (1.134661, 1.079013, 0.063009),
    (0.925521, 2.133706, 0.125873),
]


@pytest.fixture
def unit_scale_forms():
    """Eleven STUIRT 3PL items with D = 1."""
    return (
        three_pl_form(UNIT_SCALE_X, prefix="V", start=0, D=1.0),
        three_pl_form(UNIT_SCALE_Y, prefix="V", start=0, D=1.0),
    )


MIXED_X_3PL = [
    (0.751335, -0.897391, 0.244001), (0.955947, -0.811477, 0.242883),
    (0.497206, -0.858681, 0.260893), (0.724000, -0.123911, 0.243497),
    (0.865200, 0.205889, 0.319135), (0.658129, 0.555228, 0.277826),
    (1.082118, 0.950549, 0.157979), (0.988294, 1.377501, 0.084828),
    (1.248923, 1.614355, 0.181874), (1.116682, 2.353932, 0.246856),
    (0.438171, 3.217965, 0.309243), (1.082206, 4.441864, 0.192339),
]
MIXED_X_GPCM2 = [
    (0.269994, 0.003998, [1.097268, -1.097268]),
    (0.972506, 1.632662, [0.106514, -0.106514]),
    (0.378812, 3.464657, [2.102301, -2.102301]),
    (0.537706, 1.010053, [-0.476513, 1.081282, -0.604770]),
    (0.554506, 2.432938, [1.007525, -0.197767, -0.809758]),
]
MIXED_Y_3PL = [
    (0.887276, -1.334798, 0.134406), (1.184412, -1.129004, 0.237765),
    (0.609412, -1.464546, 0.151393), (0.923812, -0.576435, 0.240097),
    (0.822776, -0.476357, 0.192369), (0.707818, -0.235189, 0.189557),
    (1.306976, 0.242986, 0.165553), (1.295471, 0.598029, 0.090557),
    (1.366841, 0.923206, 0.172993), (1.389624, 1.380666, 0.238008),
    (0.293806, 2.028070, 0.203448), (0.885347, 3.152928, 0.195473),
]
MIXED_Y_GPCM2 = [
    (0.346324, -0.494115, [0.893232, -0.893232]),
    (1.252012, 0.856264, [0.099750, -0.099750]),
    (0.392282, 2.825801, [1.850498, -1.850498]),
    (0.660841, 0.342977, [-0.300428, 0.761846, -0.461417]),
    (0.669612, 1.643267, [1.001974, -0.107221, -0.894753]),
]


@pytest.fixture
def mixed_forms():
    """Twelve 3PL and five GPCM2 items per form, not yet linked."""
    form_x = three_pl_form(MIXED_X_3PL, prefix="v")
    form_x.update(gpcm2_form(MIXED_X_GPCM2, prefix="v", start=13))
    form_y = three_pl_form(MIXED_Y_3PL, prefix="v")
    form_y.update(gpcm2_form(MIXED_Y_GPCM2, prefix="v", start=13))
    return form_x, form_y


# Form X below has already been placed on the Form Y scale.
LINKED_X_3PL = [
    (0.920353277679441, -1.181970629805, 0.244001),
    (1.170994236576, -1.111834306335, 0.242883),
    (0.609056109168193, -1.150369527755, 0.260893),
    (0.886869070441168, -0.550536364405, 0.243497),
    (1.05983303832279, -0.281302485405, 0.319135),
    (0.806179909475657, 0.00388215394000008, 0.277826),
    (1.32554832150229, 0.326604428895, 0.157979),
    (1.2106179296997, 0.675148828855, 0.084828),
    (1.52987732052845, 0.868505776025, 0.181874),
    (1.3678877449149, 1.47226315786, 0.246856),
    (0.536740756166129, 2.177620817575, 0.309243),
    (1.32565611774289, 3.17675688572, 0.192339),
]
LINKED_X_GPCM2 = [
    (0.330731115752338, -0.44611721271, [0.89576021814, -0.89576021814]),
    (1.19127830416914, 0.88345078701, [0.0869532364700001, -0.0869532364700001]),
    (0.464028517005469, 2.379009065235, [1.716223932855, -1.716223932855]),
    (
        0.658666878992595,
        0.375180544696667,
        [-0.389003497996667, 0.882710239228333, -0.493706741231667],
    ),
    (0.679246161290125, 1.53676010099, [0.822498071375, -0.161448079285, -0.66104999209]),
]
LINKED_Y_3PL = [
    (0.887276, -1.334798, 0.134406), (1.184412, -1.129004, 0.237765),
    (0.609412, -1.464546, 0.151393), (0.923812, -0.576435, 0.240097),
    (0.822776, -0.476357, 0.192369), (0.707818, -0.235189, 0.189557),
    (1.306976, 0.242986, 0.165553), (1.295471, 0.598029, 0.090557),
    (1.366841, 0.923206, 0.172993), (1.389624, 1.380666, 0.238008),
    (0.293806, 2.02807, 0.203448), (0.885347, 3.152928, 0.195473),
]
LINKED_Y_GPCM2 = [
    (0.346324, -0.494115, [0.893232, -0.893232]),
    (1.252012, 0.856264, [0.09975, -0.09975]),
    (0.392282, 2.825801, [1.850498, -1.850498]),
    (
        0.660841,
        0.342977333333333,
        [-0.300428333333333, 0.761845666666667, -0.461417333333333],
    ),
    (0.669612, 1.643267, [1.001974, -0.107221, -0.894753]),
]


@pytest.fixture
def linked_3pl_items():
    """Linked 3PL items shared by the mixed-format equating forms."""
    return (
        three_pl_form(LINKED_X_3PL, prefix="item"),
        three_pl_form(LINKED_Y_3PL, prefix="item"),
    )


@pytest.fixture
def linked_gpcm2_forms(linked_3pl_items):
    """Twelve 3PL and five GPCM2 items on a common scale."""
    form_x, form_y = (dict(form) for form in linked_3pl_items)
    form_x.update(gpcm2_form(LINKED_X_GPCM2, prefix="item", start=13))
    form_y.update(gpcm2_form(LINKED_Y_GPCM2, prefix="item", start=13))
    return form_x, form_y


LINKED_X_GRM = [
    (1.1196, [-2.1415, 0.0382]),
    (1.2290, [-1.7523, -1.0660]),
    (0.6405, [-2.3126, -1.8816]),
    (1.1622, [-1.9728, -0.2810]),
    (1.2249, [-2.2207, -0.8252]),
]
LINKED_Y_GRM = [
    (0.9171, [-1.7786, 0.7177]),
    (0.9751, [-1.4115, -0.4946]),
    (0.5890, [-1.8478, -1.4078]),
    (0.9804, [-1.6151, 0.3002]),
    (1.0117, [-1.9355, -0.2267]),
]


@pytest.fixture
def linked_grm_forms(linked_3pl_items):
    """Twelve 3PL and five graded response items on a common scale."""
    form_x, form_y = (dict(form) for form in linked_3pl_items)
    for j, (a, b) in enumerate(LINKED_X_GRM):
        form_x[f"item{j + 13}"] = GradedResponseModel(a, b, D=1.7)
    for j, (a, b) in enumerate(LINKED_Y_GRM):
        form_y[f"item{j + 13}"] = GradedResponseModel(a, b, D=1.7)
    return form_x, form_y


@pytest.fixture
def linked_pcm_forms(linked_3pl_items):
    """Twelve 3PL and five partial credit items with the GPCM2 step locations."""
    form_x, form_y = (dict(form) for form in linked_3pl_items)
    for j, (_, b, t) in enumerate(LINKED_X_GPCM2):
        form_x[f"item{j + 13}"] = PartialCreditModel(b, -np.asarray(t), D=1.7)
    for j, (_, b, t) in enumerate(LINKED_Y_GPCM2):
        form_y[f"item{j + 13}"] = PartialCreditModel(b, -np.asarray(t), D=1.7)
    return form_x, form_y


# Kolen & Brennan (2004) 36-item forms, already on a common scale.
KOLEN_BRENNAN_X = [
    (0.467344, -2.616539, 0.175056),
    (0.670924, -1.068342, 0.116490),
    (0.386976, -1.339358, 0.208748),
    (1.228024, 0.064115, 0.282599),
    (0.828161, -0.701780, 0.262510),
    (0.496452, -1.511753, 0.203834),
    (0.731571, 0.030429, 0.322391),
    (0.973113, -0.657195, 0.220907),
    (0.641447, -0.479277, 0.159961),
    (0.779740, 0.688159, 0.364807),
    (0.815589, 0.344648, 0.239862),
    (0.563967, -0.444704, 0.123961),
    (1.047915, -0.014127, 0.253470),
    (0.892128, 0.422782, 0.156932),
    (0.908926, 0.626040, 0.298628),
    (0.781655, 0.213016, 0.252099),
    (0.759750, 0.098919, 0.227257),
    (0.822383, -0.274926, 0.053538),
    (0.557961, -0.051057, 0.120098),
    (0.897580, 0.610857, 0.203621),
    (0.295784, 2.173474, 0.148927),
    (0.716916, 0.742542, 0.233231),
    (0.947343, 0.180908, 0.064409),
    (1.239634, 0.700229, 0.245270),
    (0.436801, 1.117559, 0.142681),
    (0.781728, 0.763879, 0.087920),
    (1.599493, 1.149537, 0.199245),
    (1.279241, 1.270811, 0.164220),
    (0.821706, 1.311960, 0.143102),
    (0.596854, 2.130355, 0.085290),
    (1.075705, 1.701967, 0.244298),
    (0.728471, 1.511532, 0.086474),
    (1.197162, 1.325326, 0.078897),
    (0.493857, 3.580113, 0.139884),
    (0.787070, 3.165387, 0.108961),
    (1.104752, 2.034859, 0.107530),
]
KOLEN_BRENNAN_Y = [
    (0.870350, -1.450715, 0.157647),
    (0.462772, -0.406996, 0.109378),
    (0.441595, -1.334933, 0.155883),
    (0.544796, -0.901734, 0.138071),
    (0.619973, -1.486483, 0.211368),
    (0.572995, -1.321004, 0.191298),
    (1.175228, 0.069050, 0.294746),
    (0.445023, 0.232402, 0.272323),
    (0.598719, -0.709831, 0.117663),
    (0.847924, -0.425342, 0.144462),
    (1.031996, -0.818383, 0.093584),
    (0.604125, -0.353942, 0.081759),
    (0.829722, -0.019137, 0.128310),
    (0.725171, -0.315511, 0.085425),
    (0.990164, 0.531956, 0.302443),
    (0.774935, 0.539442, 0.217930),
    (0.594230, 0.898656, 0.229885),
    (0.808079, -0.115649, 0.064791),
    (0.964044, -0.194763, 0.163258),
    (0.783557, 0.350592, 0.129939),
    (0.413973, 2.553812, 0.240967),
    (0.761758, -0.158110, 0.113708),
    (1.195895, 0.505649, 0.239728),
    (1.355437, 0.581109, 0.224322),
    (1.186899, 0.622889, 0.257697),
    (1.029556, 0.389830, 0.185611),
    (1.041731, 0.939158, 0.165121),
    (1.205473, 1.135046, 0.232287),
    (0.969740, 0.697642, 0.107035),
    (0.633562, 1.896027, 0.079396),
    (1.082216, 1.386423, 0.185511),
    (1.019458, 0.919670, 0.102719),
    (1.134661, 1.079013, 0.063009),
    (1.194845, 1.841148, 0.099913),
    (1.196146, 2.029683, 0.083187),
    (0.925521, 2.133706, 0.125873),
]


@pytest.fixture
def kolen_brennan_forms():
    return (
        three_pl_form(KOLEN_BRENNAN_X, prefix="item"),
        three_pl_form(KOLEN_BRENNAN_Y, prefix="item"),
    )
