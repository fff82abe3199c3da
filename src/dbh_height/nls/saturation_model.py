import logging
import numpy as np
from .nls_model import NLSModel, BREAST_HEIGHT

logger = logging.getLogger(__name__)


class WeibullModel(NLSModel):
    """
    Weibull model: height rises to the asymptote a with a stretched exponential

    Model form:
    height = 1.3 + a * (1 - exp(-b * DBH^c))

    Where:
    - a: asymptotic height above breast height
    - b: scale of the approach to the asymptote
    - c: shape, c = 1 reduces to the Meyer model
    """

    PARAM_NAMES = ('a', 'b', 'c')
    DEFAULT_START = (45.0, 0.01, 1.0)
    REFERENCE = "Weibull (1951); Yang et al. (1978)"
    EQUATION = "Height ~ 1.3 + a * (1 - exp(-b * DBH^c))"

    def __init__(self, start=None):
        super().__init__("Weibull Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b, c = params
        return BREAST_HEIGHT + a * (1 - np.exp(-b * dbh**c))


class ChapmanRichardsModel(NLSModel):
    """
    Chapman-Richards model: monomolecular growth raised to a shape power

    Model form:
    height = 1.3 + a * (1 - exp(-b * DBH))^c
    """

    PARAM_NAMES = ('a', 'b', 'c')
    DEFAULT_START = (43.365968, 0.013972, 0.812427)
    REFERENCE = "Chapman-Richards, cited in Sharma (2009)"
    EQUATION = "Height ~ 1.3 + a * (1 - exp(-b * DBH))^c"

    def __init__(self, start=None):
        super().__init__("Chapman-Richards Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b, c = params
        return BREAST_HEIGHT + a * (1 - np.exp(-b * dbh))**c


class MeyerModel(NLSModel):
    """
    Meyer (monomolecular) model

    Model form:
    height = 1.3 + a * (1 - exp(-b * DBH))
    """

    PARAM_NAMES = ('a', 'b')
    DEFAULT_START = (37.662306, 0.022056)
    REFERENCE = "Meyer (1940)"
    EQUATION = "Height ~ 1.3 + a * (1 - exp(-b * DBH))"

    def __init__(self, start=None):
        super().__init__("Meyer Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b = params
        return BREAST_HEIGHT + a * (1 - np.exp(-b * dbh))
