"""
Configuration models for the diameter-height analysis
"""
import json
import logging
from typing import Dict, List, Literal
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_METRICS_FILE = 'model_metrics.csv'


class SampleConfig(BaseModel):
    """
    Synthetic sample definition

    Height is an affine rescaling of DBH into [height_min, height_max]
    """
    seed: int = Field(123, description="Random seed for the DBH draw")
    n_samples: int = Field(120, gt=0, description="Number of trees")
    dbh_min: float = Field(0.0, ge=0.0, description="Lower bound of DBH (cm)")
    dbh_max: float = Field(120.0, gt=0.0, description="Upper bound of DBH (cm)")
    height_min: float = Field(10.0, gt=0.0, description="Height of the smallest tree (m)")
    height_max: float = Field(25.0, gt=0.0, description="Height of the largest tree (m)")

    @model_validator(mode='after')
    def check_ranges(self) -> 'SampleConfig':
        if self.dbh_max <= self.dbh_min:
            raise ValueError("dbh_max must be greater than dbh_min")
        if self.height_max <= self.height_min:
            raise ValueError("height_max must be greater than height_min")
        return self


class FitConfig(BaseModel):
    """Non-linear least squares solver settings"""
    method: Literal['lm', 'trf', 'dogbox'] = Field('lm', description="scipy curve_fit method")
    max_nfev: int = Field(10000, gt=0, description="Maximum number of function evaluations")


class AnalysisConfig(BaseModel):
    """Top-level configuration of one analysis run"""
    output_dir: str = Field('.', description="Directory receiving the metrics table and reports")
    metrics_file: str = Field(DEFAULT_METRICS_FILE, description="File name of the metrics CSV")
    create_plots: bool = Field(False, description="Also write figures")
    sample: SampleConfig = Field(default_factory=SampleConfig)
    fit: FitConfig = Field(default_factory=FitConfig)
    # model id -> starting parameters, replaces the built-in starts
    starts: Dict[str, List[float]] = Field(default_factory=dict)


def load_config(config_file: str) -> AnalysisConfig:
    """
    Load an analysis configuration from a JSON file

    Args:
        config_file: path to the JSON file

    Returns:
        validated AnalysisConfig
    """
    with open(config_file, 'r', encoding='utf-8') as f:
        data = json.load(f)
    config = AnalysisConfig.model_validate(data)
    logger.info(f"Loaded configuration from {config_file}")
    return config
