"""
NLS module
Fits non-linear height-diameter equations and compares them by AIC, RMSE, bias and MAE
"""

from .nls_model import NLSModel, ModelFitResult, BREAST_HEIGHT
from .linear_model import LinearModel
from .saturation_model import WeibullModel, ChapmanRichardsModel, MeyerModel
from .power_model import CurtisModel, PowerModel, NaslundModel
from .exponential_model import WykoffModel, ElMamounModel
from .sigmoid_model import GompertzModel, LogisticModel
from .processor import (
    MODEL_IDS,
    METRIC_COLUMNS,
    default_models,
    fit_nls_models,
    evaluate_models,
    export_metrics,
)
from .analyzer import HeightDiameterAnalyzer

__all__ = [
    'NLSModel',
    'ModelFitResult',
    'BREAST_HEIGHT',
    'LinearModel',
    'WeibullModel',
    'ChapmanRichardsModel',
    'MeyerModel',
    'CurtisModel',
    'PowerModel',
    'NaslundModel',
    'WykoffModel',
    'ElMamounModel',
    'GompertzModel',
    'LogisticModel',
    'MODEL_IDS',
    'METRIC_COLUMNS',
    'default_models',
    'fit_nls_models',
    'evaluate_models',
    'export_metrics',
    'HeightDiameterAnalyzer'
]
