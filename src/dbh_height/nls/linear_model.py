import logging
import numpy as np

from .nls_model import NLSModel

logger = logging.getLogger(__name__)


class LinearModel(NLSModel):
    """
    Linear model (OLS): simple linear regression as baseline reference

    Model form:
    height = b0 + b1 * DBH

    Unlike the height equations it is not forced through breast height, so it
    is reported next to them but kept out of the model comparison table.
    """

    PARAM_NAMES = ('b0', 'b1')
    DEFAULT_START = (0.0, 0.0)
    REFERENCE = "Ordinary least squares"
    EQUATION = "Height ~ b0 + b1 * DBH"

    def __init__(self):
        super().__init__("Linear Model (OLS)")

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        b0, b1 = params
        return b0 + b1 * dbh

    def get_initial_params(self, dbh: np.ndarray, height: np.ndarray) -> np.ndarray:
        """Use mean height as intercept and a flat slope"""
        p0 = np.zeros(len(self.PARAM_NAMES))
        p0[0] = np.mean(height)
        p0[1] = 0.0
        return p0
