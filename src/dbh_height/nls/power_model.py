import logging
import numpy as np
from .nls_model import NLSModel, BREAST_HEIGHT

logger = logging.getLogger(__name__)


class CurtisModel(NLSModel):
    """
    Curtis model: exponential of a power of DBH

    Model form:
    height = 1.3 + a * exp(b * DBH^c)
    """

    PARAM_NAMES = ('a', 'b', 'c')
    DEFAULT_START = (0.05653, 4.10361, 0.09888)
    REFERENCE = "Curtis (1967)"
    EQUATION = "Height ~ 1.3 + a * exp(b * DBH^c)"

    def __init__(self, start=None):
        super().__init__("Curtis Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b, c = params
        return BREAST_HEIGHT + a * np.exp(b * dbh**c)


class PowerModel(NLSModel):
    """
    Power model (allometric)

    Model form:
    height = 1.3 + a * DBH^b

    Where:
    - a: scale
    - b: allometric exponent, b < 1 gives a concave curve
    """

    PARAM_NAMES = ('a', 'b')
    DEFAULT_START = (2.40698, 0.58876)
    REFERENCE = "Arabatzis & Burkhart (1992)"
    EQUATION = "Height ~ 1.3 + a * DBH^b"

    def __init__(self, start=None):
        super().__init__("Power Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b = params
        return BREAST_HEIGHT + a * dbh**b


class NaslundModel(NLSModel):
    """
    Näslund model

    Model form:
    height = 1.3 + (DBH / (a + b * DBH))^3

    The asymptote is 1.3 + 1 / b^3.
    """

    PARAM_NAMES = ('a', 'b')
    DEFAULT_START = (2.554273, 0.289243)
    REFERENCE = "Näslund (1936)"
    EQUATION = "Height ~ 1.3 + (DBH / (a + b * DBH))^3"

    def __init__(self, start=None):
        super().__init__("Naslund Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b = params
        return BREAST_HEIGHT + (dbh / (a + b * dbh))**3
