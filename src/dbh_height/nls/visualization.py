"""
Height-diameter model visualization tools
"""

import logging
from typing import Dict, Optional, Tuple
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from scipy import stats
from .nls_model import ModelFitResult

logger = logging.getLogger(__name__)


def plot_observations(dbh: np.ndarray,
                      height: np.ndarray,
                      save_path: Optional[str] = None,
                      figsize: Tuple[int, int] = (8, 6)) -> plt.Figure:
    """
    Scatter plot of the observed trees

    Args:
        dbh: diameter at breast height
        height: tree height
        save_path: save path
        figsize: figure size

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(dbh, height, s=30, alpha=0.7, color='black')
    ax.set_xlabel('DBH (cm)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title('DBH vs Height', fontsize=14, fontweight='bold')
    ax.grid(alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Observation plot saved to: {save_path}")

    return fig


def plot_model_comparison(metrics: pd.DataFrame,
                          save_path: Optional[str] = None,
                          figsize: Tuple[int, int] = (15, 10)) -> plt.Figure:
    """
    Bar charts of AIC, RMSE, mean bias and MAE per model

    Args:
        metrics: table from evaluate_models
        save_path: save path
        figsize: figure size

    Returns:
        matplotlib Figure object
    """
    fig, axes = plt.subplots(2, 2, figsize=figsize)
    fig.suptitle('Height-diameter model comparison', fontsize=16, fontweight='bold')

    model_names = list(metrics['Model'])
    x_pos = np.arange(len(model_names))

    panels = [
        (axes[0, 0], 'AIC', 'Akaike information criterion (lower is better)', 'lightgreen'),
        (axes[0, 1], 'RMSE', 'Root mean squared error', 'coral'),
        (axes[1, 0], 'Mean_Bias', 'Mean bias (predicted - observed)', 'plum'),
        (axes[1, 1], 'MAE', 'Mean absolute error', 'steelblue'),
    ]
    for ax, column, title, color in panels:
        ax.bar(x_pos, metrics[column], alpha=0.7, color=color)
        ax.set_ylabel(column, fontsize=12)
        ax.set_title(title, fontsize=12)
        ax.set_xticks(x_pos)
        ax.set_xticklabels(model_names, rotation=45, ha='right')
        ax.grid(axis='y', alpha=0.3)

    axes[1, 0].axhline(y=0, color='r', linestyle='--', alpha=0.5)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Model comparison plot saved to: {save_path}")

    return fig


def diameter_class_bias(dbh: np.ndarray,
                        residuals: np.ndarray,
                        class_width: float = 10.0) -> pd.DataFrame:
    """
    Mean bias (predicted - observed) per DBH class

    Args:
        dbh: diameter at breast height
        residuals: observed - predicted heights
        class_width: width of the diameter classes (cm)

    Returns:
        DataFrame with columns DBH_Class (class midpoint), Mean_Bias and Trees
    """
    classes = np.floor(np.asarray(dbh) / class_width) * class_width + class_width / 2
    frame = pd.DataFrame({'DBH_Class': classes, 'Bias': -np.asarray(residuals)})
    grouped = frame.groupby('DBH_Class')['Bias'].agg(['mean', 'size']).reset_index()
    return grouped.rename(columns={'mean': 'Mean_Bias', 'size': 'Trees'})


def plot_residuals(result: ModelFitResult,
                   dbh: np.ndarray,
                   model_name: str,
                   save_path: Optional[str] = None,
                   figsize: Tuple[int, int] = (12, 10)) -> plt.Figure:
    """
    Residual diagnostic plots

    Args:
        result: model fitting result
        dbh: diameters the model was fitted to
        model_name: model name
        save_path: save path
        figsize: figure size

    Returns:
        matplotlib Figure object
    """
    fig, axes = plt.subplots(2, 2, figsize=figsize)
    fig.suptitle(f'{model_name} - residual diagnostics', fontsize=16, fontweight='bold')

    predictions = result.predictions
    residuals = result.residuals

    # 1. Residuals vs DBH
    axes[0, 0].scatter(dbh, residuals, alpha=0.6, s=50)
    axes[0, 0].axhline(y=0, color='r', linestyle='--', linewidth=2)
    axes[0, 0].set_xlabel('DBH (cm)', fontsize=12)
    axes[0, 0].set_ylabel('Residual (m)', fontsize=12)
    axes[0, 0].set_title('Residuals vs DBH', fontsize=12)
    axes[0, 0].grid(alpha=0.3)

    # 2. Q-Q plot
    stats.probplot(residuals, dist="norm", plot=axes[0, 1])
    axes[0, 1].set_title('Normal Q-Q', fontsize=12)
    axes[0, 1].grid(alpha=0.3)

    # 3. Bias by diameter class
    class_bias = diameter_class_bias(dbh, residuals)
    axes[1, 0].bar(class_bias['DBH_Class'], class_bias['Mean_Bias'], width=8,
                   alpha=0.7, color='plum', edgecolor='black')
    axes[1, 0].axhline(y=0, color='r', linestyle='--', linewidth=2)
    axes[1, 0].set_xlabel('DBH class midpoint (cm)', fontsize=12)
    axes[1, 0].set_ylabel('Mean bias (m)', fontsize=12)
    axes[1, 0].set_title('Bias by diameter class', fontsize=12)
    axes[1, 0].grid(axis='y', alpha=0.3)

    # 4. Observed vs fitted
    actual = predictions + residuals
    axes[1, 1].scatter(actual, predictions, alpha=0.6, s=50)
    min_val = min(actual.min(), predictions.min())
    max_val = max(actual.max(), predictions.max())
    axes[1, 1].plot([min_val, max_val], [min_val, max_val], 'r--', linewidth=2, label='1:1 line')
    axes[1, 1].set_xlabel('Observed height', fontsize=12)
    axes[1, 1].set_ylabel('Fitted height', fontsize=12)
    axes[1, 1].set_title(f'Observed vs fitted (R²={result.r2:.4f})', fontsize=12)
    axes[1, 1].legend()
    axes[1, 1].grid(alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Residual plot saved to: {save_path}")

    return fig


def plot_height_curves(dbh_range: np.ndarray,
                       height_predictions: Dict[str, np.ndarray],
                       actual_dbh: Optional[np.ndarray] = None,
                       actual_height: Optional[np.ndarray] = None,
                       save_path: Optional[str] = None,
                       figsize: Tuple[int, int] = (12, 8)) -> plt.Figure:
    """
    Fitted height curves over the observed trees

    Args:
        dbh_range: DBH grid the curves are evaluated on
        height_predictions: predictions per model, {model_id: heights}
        actual_dbh: observed DBH (optional)
        actual_height: observed height (optional)
        save_path: save path
        figsize: figure size

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)

    if actual_dbh is not None and actual_height is not None:
        ax.scatter(actual_dbh, actual_height, s=30, alpha=0.6,
                   color='black', label='Observed', zorder=5)

    cmap = plt.get_cmap('tab10')
    colors = [cmap(i % 10) for i in range(len(height_predictions))]

    for (model_id, predictions), color in zip(height_predictions.items(), colors):
        ax.plot(dbh_range, predictions, linewidth=2,
                label=model_id, color=color, alpha=0.8)

    ax.set_xlabel('DBH (cm)', fontsize=13)
    ax.set_ylabel('Height (m)', fontsize=13)
    ax.set_title('Fitted height-diameter curves', fontsize=15, fontweight='bold')
    ax.legend(loc='best', fontsize=10)
    ax.grid(alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Height curves saved to: {save_path}")

    return fig
