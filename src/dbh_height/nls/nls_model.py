"""
Non-linear least squares base model for height-diameter equations

Model assumption: height = f(DBH; θ), errors independent and normal
"""

import logging
from typing import List, Optional, Sequence
import numpy as np
from scipy import stats
from scipy.optimize import curve_fit
from sklearn.metrics import r2_score
from dataclasses import dataclass
import warnings

from .metrics import (
    RSS_EPSILON,
    calculate_rmse,
    calculate_mae,
    calculate_bias,
    gaussian_log_likelihood,
    calculate_aic,
    calculate_bic,
)

logger = logging.getLogger(__name__)

# Height (m) at which DBH is measured; every height model passes through it at DBH = 0
BREAST_HEIGHT = 1.3


@dataclass
class ModelFitResult:
    """NLS model fitting result, converged or failed"""
    params: np.ndarray  # parameter estimates (starting values when failed)
    params_std: np.ndarray  # parameter standard error
    t_values: np.ndarray  # estimate / standard error
    p_values: np.ndarray  # two-sided p values of the t statistics
    sigma: float  # residual standard error
    df_residual: int  # residual degrees of freedom
    r2: float  # R² coefficient of determination
    rmse: float  # root mean squared error
    mae: float  # mean absolute error
    bias: float  # mean(predicted - observed)
    log_likelihood: float  # Gaussian log-likelihood
    aic: float  # Akaike information criterion
    bic: float  # Bayesian information criterion
    residuals: np.ndarray  # observed - predicted
    predictions: np.ndarray  # predictions on the fitting data
    n_obs: int  # number of observations
    nfev: int  # number of function evaluations
    convergence: bool  # convergence
    message: str  # fitting information
    param_names: List[str]  # parameter names

    @classmethod
    def failed(cls, p0: np.ndarray, param_names: List[str], n_obs: int, message: str) -> 'ModelFitResult':
        """Build the result of a fit that did not produce a usable estimate"""
        nan_params = np.full(len(p0), np.nan)
        return cls(
            params=np.asarray(p0, dtype=float),
            params_std=nan_params,
            t_values=nan_params.copy(),
            p_values=nan_params.copy(),
            sigma=np.nan,
            df_residual=n_obs - len(p0),
            r2=np.nan,
            rmse=np.nan,
            mae=np.nan,
            bias=np.nan,
            log_likelihood=np.nan,
            aic=np.inf,
            bic=np.inf,
            residuals=np.full(n_obs, np.nan),
            predictions=np.full(n_obs, np.nan),
            n_obs=n_obs,
            nfev=0,
            convergence=False,
            message=message,
            param_names=list(param_names)
        )


class FitFailure(Exception):
    """Raised inside NLSModel.fit when the solver output is unusable"""


class NLSModel:
    """
    Base class for non-linear least squares height-diameter models

    Subclasses set PARAM_NAMES, DEFAULT_START and REFERENCE and implement model_func.
    """

    PARAM_NAMES: Sequence[str] = ()
    DEFAULT_START: Sequence[float] = ()
    REFERENCE: str = ""
    EQUATION: str = ""

    def __init__(self, name: str = "NLS Model", start: Optional[Sequence[float]] = None):
        """
        Initialize NLS model

        Args:
            name: model name
            start: starting parameter values, defaults to DEFAULT_START
        """
        self.name = name
        if start is not None and len(start) != len(self.PARAM_NAMES):
            raise ValueError(
                f"{name}: expected {len(self.PARAM_NAMES)} starting values, got {len(start)}"
            )
        self.start = np.asarray(start if start is not None else self.DEFAULT_START, dtype=float)
        self.params = None
        self.params_std = None
        self.fit_result = None

    def model_func(self, dbh: np.ndarray, *params) -> np.ndarray:
        """
        Model function - subclasses must implement this method

        Args:
            dbh: diameter at breast height
            *params: model parameters

        Returns:
            predicted heights
        """
        raise NotImplementedError("Subclasses must implement the model_func method")

    def get_param_names(self) -> List[str]:
        return list(self.PARAM_NAMES)

    def get_initial_params(self, dbh: np.ndarray, height: np.ndarray) -> np.ndarray:
        """
        Get initial parameter estimates

        The height equations start from fixed, hand-tuned values; subclasses
        can derive them from the data instead.
        """
        _ = dbh, height
        return self.start.copy()

    def _jacobian(self, dbh: np.ndarray, params: np.ndarray) -> np.ndarray:
        """Forward-difference gradient of model_func, shape (n_samples, n_params)"""
        base = self.model_func(dbh, *params)
        jac = np.empty((len(dbh), len(params)))
        for j in range(len(params)):
            step = np.sqrt(np.finfo(float).eps) * max(abs(params[j]), 1.0)
            shifted = np.array(params, dtype=float)
            shifted[j] += step
            jac[:, j] = (self.model_func(dbh, *shifted) - base) / step
        return jac

    def fit(self,
            dbh: np.ndarray,
            height: np.ndarray,
            method: str = 'lm',
            max_nfev: int = 10000) -> ModelFitResult:
        """
        Fit model

        Args:
            dbh: diameter at breast height, shape (n_samples,)
            height: tree height, shape (n_samples,)
            method: optimization method ('lm', 'trf', 'dogbox')
            max_nfev: maximum number of function evaluations

        Returns:
            ModelFitResult object; convergence is False when the fit failed

        Raises:
            ValueError: if the inputs are inconsistent or too short for the model
        """
        dbh = np.asarray(dbh, dtype=float)
        height = np.asarray(height, dtype=float)
        if dbh.shape != height.shape:
            raise ValueError(f"DBH and height lengths differ: {dbh.shape} vs {height.shape}")

        n = len(height)
        p0 = self.get_initial_params(dbh, height)
        k = len(p0)
        if n <= k:
            raise ValueError(f"{self.name}: {n} observations are not enough for {k} parameters")

        logger.info(f"Starting model fitting: {self.name}")
        logger.info(f"  Sample size: {n}, Parameters: {k}")
        logger.info(f"  Initial parameters: {p0}")

        try:
            with warnings.catch_warnings(), np.errstate(all='ignore'):
                warnings.simplefilter("ignore")

                jac = self._jacobian(dbh, p0)
                if not np.all(np.isfinite(jac)) or np.linalg.matrix_rank(jac) < k:
                    raise FitFailure("singular gradient matrix at initial parameter estimates")

                def model_wrapper(x, *p):
                    return self.model_func(x, *p)

                popt, pcov, infodict, mesg, _ = curve_fit(
                    f=model_wrapper,
                    xdata=dbh,
                    ydata=height,
                    p0=p0,
                    method=method,
                    maxfev=max_nfev,
                    full_output=True
                )
                y_pred = self.model_func(dbh, *popt)

            if not np.all(np.isfinite(popt)):
                raise FitFailure("non-finite parameter estimates")
            if not np.all(np.isfinite(y_pred)):
                raise FitFailure("non-finite predictions at the parameter estimates")
            if not np.all(np.isfinite(pcov)):
                raise FitFailure("singular gradient matrix at parameter estimates")

        except (RuntimeError, ValueError, FitFailure) as e:
            logger.error(f"Model fitting failed: {self.name} - {str(e)}")
            self.params = None
            self.params_std = None
            self.fit_result = ModelFitResult.failed(
                p0, self.get_param_names(), n, f"Fitting failed: {str(e)}"
            )
            return self.fit_result

        self.params = popt

        # Calculate parameter standard errors and t statistics
        self.params_std = np.sqrt(np.diag(pcov))
        df_residual = n - k
        with np.errstate(divide='ignore', invalid='ignore'):
            t_values = popt / self.params_std
        p_values = 2 * stats.t.sf(np.abs(t_values), df_residual)

        residuals = height - y_pred
        rss = float(np.sum(residuals**2))

        if rss <= RSS_EPSILON:
            logger.warning(f"RSS ({rss:.2e}) is zero or very small, possibly indicating perfect fit or numerical issues")
            logger.warning("Using adjusted RSS for AIC/BIC calculation to avoid log(0)")

        self.fit_result = ModelFitResult(
            params=popt,
            params_std=self.params_std,
            t_values=t_values,
            p_values=p_values,
            sigma=float(np.sqrt(rss / df_residual)),
            df_residual=df_residual,
            r2=float(r2_score(height, y_pred)),
            rmse=calculate_rmse(height, y_pred),
            mae=calculate_mae(height, y_pred),
            bias=calculate_bias(height, y_pred),
            log_likelihood=gaussian_log_likelihood(rss, n),
            aic=calculate_aic(rss, n, k),
            bic=calculate_bic(rss, n, k),
            residuals=residuals,
            predictions=y_pred,
            n_obs=n,
            nfev=int(infodict.get('nfev', 0)),
            convergence=True,
            message=mesg,
            param_names=self.get_param_names()
        )

        logger.info(f"Model fitting completed: {self.name}")
        logger.info(f"  R² = {self.fit_result.r2:.4f}")
        logger.info(f"  RMSE = {self.fit_result.rmse:.4f}")
        logger.info(f"  AIC = {self.fit_result.aic:.2f}")

        return self.fit_result

    def predict(self, dbh: np.ndarray) -> np.ndarray:
        """
        Predict heights

        Args:
            dbh: diameter at breast height

        Returns:
            predicted heights
        """
        if self.params is None:
            raise ValueError("Model not fitted yet, please call fit method first")

        with np.errstate(all='ignore'):
            return self.model_func(np.asarray(dbh, dtype=float), *self.params)

    def summary(self) -> str:
        """Generate model summary report"""
        if self.fit_result is None:
            return f"Model {self.name} not fitted yet"

        result = self.fit_result
        lines = []
        lines.append("=" * 70)
        lines.append(f"Model: {self.name}")
        if self.EQUATION:
            lines.append(f"Formula: {self.EQUATION}")
        if self.REFERENCE:
            lines.append(f"Reference: {self.REFERENCE}")
        lines.append("=" * 70)
        lines.append("")

        if not result.convergence:
            lines.append(f"Convergence: Failed ({result.message})")
            lines.append("=" * 70)
            return "\n".join(lines)

        # Parameter estimates
        lines.append("Parameters:")
        lines.append(f"{'':<10} {'Estimate':>14} {'Std. Error':>14} {'t value':>10} {'Pr(>|t|)':>12}")
        lines.append("-" * 64)
        for name, val, std, t_val, p_val in zip(result.param_names,
                                                result.params,
                                                result.params_std,
                                                result.t_values,
                                                result.p_values):
            lines.append(f"{name:<10} {val:>14.6f} {std:>14.6f} {t_val:>10.3f} {p_val:>12.4g}")
        lines.append("")

        lines.append(f"Residual standard error: {result.sigma:.4f} on {result.df_residual} degrees of freedom")
        lines.append(f"Number of function evaluations: {result.nfev}")
        lines.append(f"Convergence: Success ({result.message.strip()})")
        lines.append("")

        # Fitting statistics
        lines.append("Fitting Statistics:")
        lines.append(f"  R² = {result.r2:.4f}")
        lines.append(f"  RMSE = {result.rmse:.4f}")
        lines.append(f"  MAE = {result.mae:.4f}")
        lines.append(f"  Mean bias = {result.bias:.4f}")
        lines.append(f"  logLik = {result.log_likelihood:.2f}")
        lines.append(f"  AIC = {result.aic:.2f}")
        lines.append(f"  BIC = {result.bic:.2f}")
        lines.append("=" * 70)

        return "\n".join(lines)
