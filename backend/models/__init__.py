"""
MODELS PACKAGE
==============
Data classes and type definitions for the Pine Script designer.
"""
from .indicator_config import (
    FeatureId,
    ModelType,
    MarkerSize,
    IndicatorConfig,
    FEATURE_ORDER,
    DEFAULT_INDICATOR_CONFIG,
)

__all__ = [
    'FeatureId',
    'ModelType',
    'MarkerSize',
    'IndicatorConfig',
    'FEATURE_ORDER',
    'DEFAULT_INDICATOR_CONFIG',
]
