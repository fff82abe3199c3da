"""
Diameter-height processor - runs the whole workflow

1. Generate the synthetic sample
2. Fit the ten height models with non-linear least squares
3. Print coefficient summaries
4. Evaluate AIC, RMSE, mean bias and MAE for the converged models
5. Export the metrics table
"""
import logging
from typing import Optional
import pandas as pd
from .config import AnalysisConfig
from .sample import generate_sample
from .nls import HeightDiameterAnalyzer

logger = logging.getLogger(__name__)


def run(config: Optional[AnalysisConfig] = None) -> pd.DataFrame:
    """
    Main entry point for the diameter-height analysis

    Returns:
        the exported metrics table
    """
    config = config or AnalysisConfig()

    sample = generate_sample(config.sample)
    print(sample.head().to_string())

    analyzer = HeightDiameterAnalyzer(config)
    metrics = analyzer.run_complete_analysis(sample)

    logger.info(f"Analysis finished, metrics written to {analyzer.metrics_path}")
    return metrics
