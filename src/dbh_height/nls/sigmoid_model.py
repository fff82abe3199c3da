import logging
import numpy as np
from .nls_model import NLSModel, BREAST_HEIGHT

logger = logging.getLogger(__name__)


class GompertzModel(NLSModel):
    """
    Gompertz model: asymmetric sigmoid

    Model form:
    height = 1.3 + a * exp(-b * exp(-c * DBH))
    """

    PARAM_NAMES = ('a', 'b', 'c')
    DEFAULT_START = (35.77751, 1.96648, 0.033792)
    REFERENCE = "Gompertz, after Winsor (1932)"
    EQUATION = "Height ~ 1.3 + a * exp(-b * exp(-c * DBH))"

    def __init__(self, start=None):
        super().__init__("Gompertz Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b, c = params
        return BREAST_HEIGHT + a * np.exp(-b * np.exp(-c * dbh))


class LogisticModel(NLSModel):
    """
    Logistic model: symmetric sigmoid

    Model form:
    height = 1.3 + a / (1 + b * exp(-c * DBH))

    Where:
    - a: asymptotic height above breast height
    - b: location of the inflection point
    - c: growth rate
    """

    PARAM_NAMES = ('a', 'b', 'c')
    DEFAULT_START = (34.056388, 4.315559, 0.050469)
    REFERENCE = "Zeide (1993)"
    EQUATION = "Height ~ 1.3 + a / (1 + b * exp(-c * DBH))"

    def __init__(self, start=None):
        super().__init__("Logistic Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b, c = params
        return BREAST_HEIGHT + a / (1 + b * np.exp(-c * dbh))
