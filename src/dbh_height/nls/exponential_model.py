import logging
import numpy as np
from .nls_model import NLSModel, BREAST_HEIGHT

logger = logging.getLogger(__name__)


class WykoffModel(NLSModel):
    """
    Wykoff model: exponential of an inverse DBH term

    Model form:
    height = 1.3 + exp(a + b / DBH)

    Where:
    - a: log of the asymptotic height above breast height
    - b: negative, controls how fast the asymptote is approached
    """

    PARAM_NAMES = ('a', 'b')
    DEFAULT_START = (3.62474, -19.53154)
    REFERENCE = "Wykoff et al. (1982)"
    EQUATION = "Height ~ 1.3 + exp(a + b / DBH)"

    def __init__(self, start=None):
        super().__init__("Wykoff Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b = params
        return BREAST_HEIGHT + np.exp(a + b / dbh)


class ElMamounModel(NLSModel):
    """
    Wykoff form with DBH shifted by one, defined down to DBH = 0

    Model form:
    height = 1.3 + exp(a + b / (DBH + 1))
    """

    PARAM_NAMES = ('a', 'b')
    DEFAULT_START = (3.64434, -21.05658)
    REFERENCE = "El Mamoun et al. (2013)"
    EQUATION = "Height ~ 1.3 + exp(a + b / (DBH + 1))"

    def __init__(self, start=None):
        super().__init__("El Mamoun Model", start)

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        a, b = params
        return BREAST_HEIGHT + np.exp(a + b / (dbh + 1))
