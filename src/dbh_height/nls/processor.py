import logging
import os
from typing import Dict, List, Mapping, Optional, Sequence
import numpy as np
import pandas as pd
from .nls_model import NLSModel, ModelFitResult
from .saturation_model import WeibullModel, ChapmanRichardsModel, MeyerModel
from .power_model import CurtisModel, PowerModel, NaslundModel
from .exponential_model import WykoffModel, ElMamounModel
from .sigmoid_model import GompertzModel, LogisticModel
from .metrics import calculate_rmse, calculate_bias, calculate_mae, calculate_aic

logger = logging.getLogger(__name__)

# Slot order of the comparison table
MODEL_CLASSES = {
    'model1': WeibullModel,
    'model2': CurtisModel,
    'model3': WykoffModel,
    'model4': PowerModel,
    'model5': ChapmanRichardsModel,
    'model6': NaslundModel,
    'model7': GompertzModel,
    'model8': LogisticModel,
    'model9': MeyerModel,
    'model10': ElMamounModel,
}
MODEL_IDS = list(MODEL_CLASSES)

METRIC_COLUMNS = ['Model', 'AIC', 'RMSE', 'Mean_Bias', 'MAE']


def default_models(starts: Optional[Mapping[str, Sequence[float]]] = None) -> Dict[str, NLSModel]:
    """
    Build the ten height-diameter models in slot order

    Args:
        starts: optional model id -> starting parameters overriding the built-in starts

    Returns:
        ordered dictionary, key is model id, value is an unfitted model
    """
    starts = starts or {}
    unknown = set(starts) - set(MODEL_CLASSES)
    for model_id in sorted(unknown):
        logger.warning(f"Unknown model id in starting values: {model_id}, ignored")

    return {
        model_id: model_cls(start=starts.get(model_id))
        for model_id, model_cls in MODEL_CLASSES.items()
    }


def fit_nls_models(dbh: np.ndarray,
                   height: np.ndarray,
                   models: Optional[Dict[str, NLSModel]] = None,
                   method: str = 'lm',
                   max_nfev: int = 10000) -> Dict[str, ModelFitResult]:
    """
    Fit multiple NLS models

    Args:
        dbh: diameter at breast height, shape (n_samples,)
        height: tree height, shape (n_samples,)
        models: ordered mapping of model id to model, if None, use default_models()
        method: optimization method passed to each fit
        max_nfev: maximum number of function evaluations per fit

    Returns:
        dictionary, key is model id, value is ModelFitResult, in fitting order
    """
    logger.info("=" * 70)
    logger.info("Starting to fit multiple NLS models")
    logger.info("=" * 70)
    logger.info(f"Sample size: {len(height)}")
    logger.info(f"DBH range: [{np.min(dbh):.2f}, {np.max(dbh):.2f}]")
    logger.info(f"Height range: [{np.min(height):.2f}, {np.max(height):.2f}]")

    if models is None:
        models = default_models()

    results = {}

    for model_id, model in models.items():
        logger.info(f"\nFitting model: {model_id} ({model.name})")
        result = model.fit(dbh, height, method=method, max_nfev=max_nfev)
        results[model_id] = result

        if result.convergence:
            logger.info(f"✓ {model_id} fitting successful")
            logger.info(f"  R² = {result.r2:.4f}, RMSE = {result.rmse:.4f}")
        else:
            logger.warning(f"✗ {model_id} fitting failed: {result.message}")

    n_converged = sum(result.convergence for result in results.values())
    logger.info("\n" + "=" * 70)
    logger.info(f"Total {len(results)} models fitted, {n_converged} converged")
    logger.info("=" * 70)

    return results


def evaluate_models(models: Mapping[str, NLSModel],
                    dbh: np.ndarray,
                    height: np.ndarray,
                    model_ids: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    Compute AIC, RMSE, mean bias and MAE for every converged model

    Slots missing from models, never fitted, or failed are skipped with a warning.

    Args:
        models: fitted models keyed by model id
        dbh: observed diameters
        height: observed heights
        model_ids: slots to evaluate, in table order; defaults to MODEL_IDS

    Returns:
        DataFrame with columns Model, AIC, RMSE, Mean_Bias, MAE, one row per converged model
    """
    if model_ids is None:
        model_ids = MODEL_IDS

    observed = np.asarray(height, dtype=float)
    rows: List[dict] = []

    for model_id in model_ids:
        model = models.get(model_id)
        if model is None or model.fit_result is None:
            logger.warning(f"Model {model_id} does not exist, skipped")
            continue
        if not model.fit_result.convergence:
            logger.warning(f"Model {model_id} did not converge, skipped: {model.fit_result.message}")
            continue

        predicted = model.predict(dbh)
        rss = float(np.sum((observed - predicted)**2))
        rows.append({
            'Model': model_id,
            'AIC': calculate_aic(rss, len(observed), len(model.params)),
            'RMSE': calculate_rmse(observed, predicted),
            'Mean_Bias': calculate_bias(observed, predicted),
            'MAE': calculate_mae(observed, predicted),
        })

    metrics = pd.DataFrame(rows, columns=METRIC_COLUMNS)

    logger.info("\nModel comparison results:")
    logger.info("\n" + metrics.to_string(index=False))

    return metrics


def export_metrics(metrics: pd.DataFrame, path: str) -> str:
    """
    Write the metrics table to CSV, replacing any existing file

    Args:
        metrics: table from evaluate_models
        path: destination CSV path

    Returns:
        the path written
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    metrics.to_csv(path, columns=METRIC_COLUMNS, index=False, encoding='utf-8')
    logger.info(f"Metrics table saved: {path} ({len(metrics)} rows)")
    return path
