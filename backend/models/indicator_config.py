"""
INDICATOR CONFIG MODELS
=======================
Enumerations and the immutable configuration consumed by the Pine Script
generator.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from config import DEFAULT_INDICATOR_SETTINGS


class FeatureId(str, Enum):
    """Engineered signals. Declaration order is the emission order."""
    RSI = "rsi"
    MACD = "macd"
    VOLUME = "volume"
    PRICE = "price"


class ModelType(str, Enum):
    """Nonlinearity applied to the linear score. Values are the Pine option strings."""
    LOGISTIC_REGRESSION = "Logistic Regression"
    SVM_LINEAR_KERNEL = "SVM (Linear Kernel)"


class MarkerSize(str, Enum):
    """Cosmetic marker size, as shown in the indicator settings."""
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


FEATURE_ORDER: Tuple[FeatureId, ...] = tuple(FeatureId)


def _normalize_feature_map(name: str, values: Mapping) -> Mapping[FeatureId, Any]:
    normalized = {FeatureId(key): value for key, value in values.items()}
    if set(normalized) != set(FeatureId):
        missing = sorted(f.value for f in set(FeatureId) - set(normalized))
        raise ValueError(f"{name} must define every feature (missing: {missing})")
    # Canonical order, read-only: the config is hashed and used as a cache key
    return MappingProxyType({feature: normalized[feature] for feature in FEATURE_ORDER})


@dataclass(frozen=True)
class IndicatorConfig:
    """
    Settings for one generated indicator.

    The generator embeds these values as-is. Range checks belong to the
    caller (API request model, CLI argument parser).

    features/weights must cover every FeatureId; string keys are accepted
    and converted.
    """
    lookback: int = DEFAULT_INDICATOR_SETTINGS["lookback"]
    buy_threshold: float = DEFAULT_INDICATOR_SETTINGS["buy_threshold"]
    sell_threshold: float = DEFAULT_INDICATOR_SETTINGS["sell_threshold"]
    features: Mapping[FeatureId, bool] = field(
        default_factory=lambda: dict(DEFAULT_INDICATOR_SETTINGS["features"])
    )
    weights: Mapping[FeatureId, float] = field(
        default_factory=lambda: dict(DEFAULT_INDICATOR_SETTINGS["weights"])
    )
    bias: float = DEFAULT_INDICATOR_SETTINGS["bias"]
    model: ModelType = ModelType(DEFAULT_INDICATOR_SETTINGS["model"])
    marker_size: MarkerSize = MarkerSize(DEFAULT_INDICATOR_SETTINGS["marker_size"])

    def __post_init__(self):
        object.__setattr__(self, "features", _normalize_feature_map("features", self.features))
        object.__setattr__(self, "weights", _normalize_feature_map("weights", self.weights))
        object.__setattr__(self, "model", ModelType(self.model))
        object.__setattr__(self, "marker_size", MarkerSize(self.marker_size))

    def cache_key(self) -> Tuple:
        """Hashable identity; equal configs produce equal keys."""
        return (
            self.lookback,
            self.buy_threshold,
            self.sell_threshold,
            tuple(bool(self.features[f]) for f in FEATURE_ORDER),
            tuple(self.weights[f] for f in FEATURE_ORDER),
            self.bias,
            self.model.value,
            self.marker_size.value,
        )

    def __hash__(self):
        return hash(self.cache_key())

    def to_dict(self) -> Dict:
        return {
            "lookback": self.lookback,
            "buy_threshold": self.buy_threshold,
            "sell_threshold": self.sell_threshold,
            "features": {f.value: bool(self.features[f]) for f in FEATURE_ORDER},
            "weights": {f.value: self.weights[f] for f in FEATURE_ORDER},
            "bias": self.bias,
            "model": self.model.value,
            "marker_size": self.marker_size.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> 'IndicatorConfig':
        """
        Build a config from a plain dict (JSON payload, saved settings).

        Missing top-level fields and missing feature/weight entries fall
        back to DEFAULT_INDICATOR_SETTINGS.
        """
        defaults = DEFAULT_INDICATOR_SETTINGS
        features = dict(defaults["features"])
        features.update(data.get("features") or {})
        weights = dict(defaults["weights"])
        weights.update(data.get("weights") or {})

        return cls(
            lookback=data.get("lookback", defaults["lookback"]),
            buy_threshold=data.get("buy_threshold", defaults["buy_threshold"]),
            sell_threshold=data.get("sell_threshold", defaults["sell_threshold"]),
            features=features,
            weights=weights,
            bias=data.get("bias", defaults["bias"]),
            model=data.get("model", defaults["model"]),
            marker_size=data.get("marker_size", defaults["marker_size"]),
        )


DEFAULT_INDICATOR_CONFIG = IndicatorConfig()
