"""
Pytest Configuration and Shared Fixtures
=========================================
Common fixtures for testing the Pine Script designer.
"""
import pytest
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from models.indicator_config import (
    IndicatorConfig,
    FeatureId,
    MarkerSize,
    ModelType,
)
from pinescript_generator import PineScriptGenerator


@pytest.fixture
def generator():
    return PineScriptGenerator()


@pytest.fixture
def default_config():
    """Out-of-the-box settings: volume off, logistic model, medium markers."""
    return IndicatorConfig()


@pytest.fixture
def svm_config():
    """Default settings with the SVM model selected."""
    return IndicatorConfig(model=ModelType.SVM_LINEAR_KERNEL)


@pytest.fixture
def equal_threshold_config():
    """Buy and sell thresholds both at 0.5 - signals must never fire."""
    return IndicatorConfig(buy_threshold=0.5, sell_threshold=0.5)


@pytest.fixture
def custom_config():
    """Non-default value in every field."""
    return IndicatorConfig(
        lookback=150,
        buy_threshold=0.8,
        sell_threshold=0.2,
        features={"rsi": False, "macd": True, "volume": True, "price": False},
        weights={"rsi": -1.5, "macd": 2, "volume": 0.123456, "price": -4.999},
        bias=-3.25,
        model=ModelType.SVM_LINEAR_KERNEL,
        marker_size=MarkerSize.LARGE,
    )


@pytest.fixture
def sample_request_body():
    """JSON body as the UI would post it."""
    return {
        "lookback": 120,
        "buy_threshold": 0.75,
        "sell_threshold": 0.25,
        "features": {"rsi": True, "macd": False, "volume": True, "price": True},
        "weights": {"rsi": 1.0, "macd": 0.5, "volume": -0.75, "price": 0.35},
        "bias": -0.5,
        "model": "SVM (Linear Kernel)",
        "marker_size": "Small",
    }
