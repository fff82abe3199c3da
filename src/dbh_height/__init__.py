"""
Diameter-height modelling
Compares non-linear height-on-DBH equations fitted to a synthetic stand
"""
from .config import AnalysisConfig, SampleConfig, FitConfig, load_config
from .sample import generate_sample
from .processor import run

__all__ = [
    'AnalysisConfig',
    'SampleConfig',
    'FitConfig',
    'load_config',
    'generate_sample',
    'run'
]
