"""
Coefficient and comparison tables for fitted height models
"""

import logging
from typing import Mapping
import numpy as np
import pandas as pd
from scipy import stats
from .nls_model import NLSModel

logger = logging.getLogger(__name__)


def regression_table(model: NLSModel, level: float = 0.95) -> pd.DataFrame:
    """
    Parameter table with t-based confidence intervals

    Args:
        model: fitted model
        level: confidence level of the intervals

    Returns:
        DataFrame with columns Parameter, Estimate, Std_Error, CI_Lower, CI_Upper, p_value
    """
    result = model.fit_result
    if result is None or not result.convergence:
        raise ValueError(f"Model {model.name} has no converged fit")

    t_crit = stats.t.ppf(0.5 + level / 2, result.df_residual)
    return pd.DataFrame({
        'Parameter': result.param_names,
        'Estimate': result.params,
        'Std_Error': result.params_std,
        'CI_Lower': result.params - t_crit * result.params_std,
        'CI_Upper': result.params + t_crit * result.params_std,
        'p_value': result.p_values,
    })


def format_regression_table(model: NLSModel, level: float = 0.95) -> str:
    """Render regression_table as text"""
    table = regression_table(model, level)
    ci_label = f"{int(round(level * 100))}% CI"

    lines = [f"{model.name}", "-" * 60]
    lines.append(f"{'Characteristic':<16} {'Beta':>12} {ci_label:>24} {'p-value':>8}")
    for row in table.itertuples(index=False):
        ci = f"{row.CI_Lower:.3f}, {row.CI_Upper:.3f}"
        p_text = "<0.001" if row.p_value < 0.001 else f"{row.p_value:.3f}"
        lines.append(f"{row.Parameter:<16} {row.Estimate:>12.4f} {ci:>24} {p_text:>8}")
    return "\n".join(lines)


def generate_summary_table(models: Mapping[str, NLSModel]) -> pd.DataFrame:
    """
    Side-by-side summary of several models

    One column per model; parameter cells read "estimate (std. error)".
    Failed or unfitted models get an empty column marked as not converged.

    Args:
        models: models keyed by model id, in display order

    Returns:
        DataFrame indexed by row label
    """
    param_rows = []
    for model in models.values():
        for name in model.get_param_names():
            if name not in param_rows:
                param_rows.append(name)
    stat_rows = ['Observations', 'Residual std. error', 'R²', 'AIC', 'Converged']

    columns = {}
    for model_id, model in models.items():
        cells = dict.fromkeys(param_rows + stat_rows, '')
        result = model.fit_result
        if result is not None and result.convergence:
            for name, val, std in zip(result.param_names, result.params, result.params_std):
                cells[name] = f"{val:.4f} ({std:.4f})"
            cells['Observations'] = f"{result.n_obs}"
            cells['Residual std. error'] = f"{result.sigma:.4f}"
            cells['R²'] = f"{result.r2:.4f}"
            cells['AIC'] = f"{result.aic:.2f}"
            cells['Converged'] = 'Yes'
        else:
            cells['Converged'] = 'No'
        columns[model_id] = cells

    table = pd.DataFrame(columns, index=param_rows + stat_rows)
    table.index.name = 'Term'
    return table


def best_model_id(models: Mapping[str, NLSModel]) -> str:
    """
    Model id with the lowest AIC among converged fits, '' if none converged
    """
    best_id, best_aic = '', np.inf
    for model_id, model in models.items():
        result = model.fit_result
        if result is not None and result.convergence and result.aic < best_aic:
            best_id, best_aic = model_id, result.aic
    return best_id
