"""
Height-diameter analysis interface
High-level workflow called from dbh_height.processor
"""

import logging
import os
from typing import Dict, Optional
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from ..config import AnalysisConfig
from ..sample import unpack_sample
from .nls_model import NLSModel, ModelFitResult
from .linear_model import LinearModel
from .processor import (
    default_models,
    fit_nls_models,
    evaluate_models,
    export_metrics,
)
from .report import generate_summary_table, format_regression_table, best_model_id
from .visualization import (
    plot_observations,
    plot_model_comparison,
    plot_residuals,
    plot_height_curves,
)

logger = logging.getLogger(__name__)


class HeightDiameterAnalyzer:
    """
    Fits the height-diameter models to one sample and compares them
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the analyzer

        Args:
            config: analysis configuration, defaults to AnalysisConfig()
        """
        self.config = config or AnalysisConfig()
        self.output_dir = self.config.output_dir
        self.models: Dict[str, NLSModel] = {}
        self.results: Dict[str, ModelFitResult] = {}
        self.reference: Optional[LinearModel] = None
        self.metrics: Optional[pd.DataFrame] = None
        self.best_model = None

        os.makedirs(self.output_dir, exist_ok=True)
        logger.info(f"Initialized height-diameter analyzer, output directory: {self.output_dir}")

    @property
    def metrics_path(self) -> str:
        return os.path.join(self.output_dir, self.config.metrics_file)

    def analyze(self,
                sample: pd.DataFrame,
                models: Optional[Dict[str, NLSModel]] = None) -> pd.DataFrame:
        """
        Fit the reference and height models, then evaluate them

        Args:
            sample: observations with columns DBH and Height
            models: ordered mapping of model id to model; defaults to the
                    ten built-in models with configured starting values

        Returns:
            metrics table, one row per converged model
        """
        logger.info("=" * 70)
        logger.info("Starting height-diameter analysis")
        logger.info("=" * 70)

        dbh, height = unpack_sample(sample)

        if len(height) < 10:
            logger.warning(f"Small sample size (n={len(height)}), results may be unreliable")

        fit_config = self.config.fit

        self.reference = LinearModel()
        self.reference.fit(dbh, height, method=fit_config.method, max_nfev=fit_config.max_nfev)

        self.models = models if models is not None else default_models(self.config.starts)
        self.results = fit_nls_models(
            dbh=dbh,
            height=height,
            models=self.models,
            method=fit_config.method,
            max_nfev=fit_config.max_nfev
        )

        self.metrics = evaluate_models(self.models, dbh, height)

        self.best_model = best_model_id(self.models) or None
        if self.best_model:
            result = self.results[self.best_model]
            logger.info(f"\nBest model (by AIC): {self.best_model}")
            logger.info(f"  AIC = {result.aic:.2f}")
            logger.info(f"  R² = {result.r2:.4f}")
        else:
            logger.warning("No model converged")

        return self.metrics

    def save_results(self) -> None:
        """Save analysis results"""
        if self.metrics is None:
            logger.warning("No results to save")
            return

        logger.info("Saving analysis results...")

        # 1. Metrics table
        export_metrics(self.metrics, self.metrics_path)

        # 2. Side-by-side coefficient table
        summary_path = os.path.join(self.output_dir, 'model_summary.csv')
        generate_summary_table(self.models).to_csv(summary_path, encoding='utf-8')
        logger.info(f"  Summary table saved: {summary_path}")

        # 3. Parameter estimates of each converged model
        for model_id, result in self.results.items():
            if not result.convergence:
                continue
            param_df = pd.DataFrame({
                'Parameter': result.param_names,
                'Estimate': result.params,
                'Std_Error': result.params_std,
                't_value': result.t_values,
                'p_value': result.p_values
            })
            param_path = os.path.join(self.output_dir, f'parameters_{model_id}.csv')
            param_df.to_csv(param_path, index=False, encoding='utf-8')

        logger.info("All results saved")

    def create_visualizations(self, sample: pd.DataFrame) -> None:
        """
        Create figures

        Args:
            sample: the observations the models were fitted to
        """
        if self.metrics is None:
            logger.warning("No results to visualize")
            return

        logger.info("Creating figures...")
        dbh, height = unpack_sample(sample)
        figures_dir = os.path.join(self.output_dir, 'figures')
        os.makedirs(figures_dir, exist_ok=True)

        # 1. Raw observations and model comparison
        try:
            fig = plot_observations(dbh, height, save_path=os.path.join(figures_dir, 'observations.png'))
            plt.close(fig)
            if not self.metrics.empty:
                fig = plot_model_comparison(
                    self.metrics, save_path=os.path.join(figures_dir, 'model_comparison.png')
                )
                plt.close(fig)
        except (IOError, RuntimeError, ValueError) as e:
            logger.error(f"  Failed to create comparison figures: {e}")

        # 2. Residual diagnostics for each converged model
        for model_id, result in self.results.items():
            if not result.convergence:
                continue
            try:
                fig = plot_residuals(
                    result,
                    dbh,
                    f"{model_id} ({self.models[model_id].name})",
                    save_path=os.path.join(figures_dir, f'residuals_{model_id}.png')
                )
                plt.close(fig)
            except (IOError, RuntimeError, ValueError) as e:
                logger.error(f"  Failed to create residual plot for {model_id}: {e}")

        # 3. Fitted curves over the DBH range
        dbh_range = np.linspace(dbh.min(), dbh.max(), 200)
        predictions = {
            model_id: model.predict(dbh_range)
            for model_id, model in self.models.items()
            if model.fit_result is not None and model.fit_result.convergence
        }
        if predictions:
            try:
                fig = plot_height_curves(
                    dbh_range=dbh_range,
                    height_predictions=predictions,
                    actual_dbh=dbh,
                    actual_height=height,
                    save_path=os.path.join(figures_dir, 'height_curves.png')
                )
                plt.close(fig)
            except (IOError, RuntimeError, ValueError) as e:
                logger.error(f"  Failed to create height curves: {e}")

        logger.info("All figures created")

    def get_summary(self) -> str:
        """
        Generate text summary

        Returns:
            summary text
        """
        if self.metrics is None:
            return "Analysis not run yet"

        lines = []
        lines.append("=" * 70)
        lines.append("Height-diameter model comparison")
        lines.append("=" * 70)
        lines.append("")

        lines.append(f"{'Model':<10} {'Name':<24} {'AIC':>10} {'RMSE':>8} {'Converged':>10}")
        lines.append("-" * 70)
        for model_id, model in self.models.items():
            result = model.fit_result
            if result is not None and result.convergence:
                lines.append(
                    f"{model_id:<10} {model.name:<24} "
                    f"{result.aic:>10.2f} {result.rmse:>8.4f} {'Yes':>10}"
                )
            else:
                lines.append(f"{model_id:<10} {model.name:<24} {'N/A':>10} {'N/A':>8} {'No':>10}")
        lines.append("")

        if self.best_model:
            model = self.models[self.best_model]
            result = model.fit_result
            lines.append(f"Best model: {self.best_model} ({model.name})")
            lines.append("-" * 70)
            lines.append(f"R² = {result.r2:.4f}")
            lines.append(f"RMSE = {result.rmse:.4f}")
            lines.append(f"AIC = {result.aic:.2f}")
            lines.append("")
            lines.append("Parameter estimates:")
            for name, val, std in zip(result.param_names, result.params, result.params_std):
                lines.append(f"  {name}: {val:.6f} (± {std:.6f})")

        lines.append("=" * 70)

        summary = "\n".join(lines)

        summary_path = os.path.join(self.output_dir, 'analysis_summary.txt')
        with open(summary_path, 'w', encoding='utf-8') as f:
            f.write(summary)
        logger.info(f"Text summary saved: {summary_path}")

        return summary

    def print_report(self) -> None:
        """Print per-model summaries and the comparison tables"""
        if self.reference is not None:
            print(self.reference.summary())
        for model_id, model in self.models.items():
            print(f"\n[{model_id}]")
            print(model.summary())
            if model.fit_result is not None and model.fit_result.convergence:
                print(format_regression_table(model))

        print("\n" + generate_summary_table(self.models).to_string())
        print("\n" + self.metrics.to_string(index=False))

    def run_complete_analysis(self,
                              sample: pd.DataFrame,
                              models: Optional[Dict[str, NLSModel]] = None,
                              create_plots: Optional[bool] = None) -> pd.DataFrame:
        """
        Run the complete analysis

        Args:
            sample: observations with columns DBH and Height
            models: models to fit (optional)
            create_plots: whether to create figures, defaults to the configuration

        Returns:
            metrics table
        """
        metrics = self.analyze(sample, models)
        self.print_report()
        self.save_results()

        if create_plots is None:
            create_plots = self.config.create_plots
        if create_plots:
            self.create_visualizations(sample)

        summary = self.get_summary()
        logger.info("\n" + summary)

        return metrics
