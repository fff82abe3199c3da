"""
Goodness-of-fit measures shared by the fitter and the metric evaluator
"""
import numpy as np
from sklearn.metrics import mean_squared_error, mean_absolute_error

# Floor for the residual sum of squares before taking its log
RSS_EPSILON = 1e-10


def calculate_rmse(observed: np.ndarray, predicted: np.ndarray) -> float:
    """sqrt(mean((observed - predicted)^2))"""
    return float(np.sqrt(mean_squared_error(observed, predicted)))


def calculate_bias(observed: np.ndarray, predicted: np.ndarray) -> float:
    """mean(predicted - observed); positive means over-prediction"""
    return float(np.mean(np.asarray(predicted) - np.asarray(observed)))


def calculate_mae(observed: np.ndarray, predicted: np.ndarray) -> float:
    """mean(|predicted - observed|)"""
    return float(mean_absolute_error(observed, predicted))


def gaussian_log_likelihood(rss: float, n: int) -> float:
    """
    Maximized log-likelihood of a least squares fit with normal errors

    logLik = -n/2 * (log(2*pi) + 1 - log(n) + log(RSS))
    """
    rss = max(rss, RSS_EPSILON)
    return float(-0.5 * n * (np.log(2 * np.pi) + 1 - np.log(n) + np.log(rss)))


def calculate_aic(rss: float, n: int, n_params: int) -> float:
    """
    Akaike information criterion, the residual variance counted as a parameter

    Args:
        rss: residual sum of squares
        n: number of observations
        n_params: number of model coefficients
    """
    return -2 * gaussian_log_likelihood(rss, n) + 2 * (n_params + 1)


def calculate_bic(rss: float, n: int, n_params: int) -> float:
    """Bayesian information criterion, same parameter count as calculate_aic"""
    return -2 * gaussian_log_likelihood(rss, n) + np.log(n) * (n_params + 1)
