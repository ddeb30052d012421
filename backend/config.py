"""
CONFIGURATION MODULE
====================
All configuration constants for the Agentic ML Pine Script Designer.
Parameter bounds, feature catalog and defaults live here so the API,
CLI and generator agree on the same numbers.
"""
import os
from pathlib import Path

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

BACKEND_DIR = Path(__file__).parent
PROJECT_DIR = BACKEND_DIR.parent

# Created on demand by the CLI (--save), never at import time
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(PROJECT_DIR / "output")))

# =============================================================================
# SERVER
# =============================================================================

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8080"))

# Max generated scripts kept in the LRU cache
SCRIPT_CACHE_SIZE = int(os.getenv("SCRIPT_CACHE_SIZE", "256"))

# =============================================================================
# PINE SCRIPT HEADER
# =============================================================================

PINE_VERSION = 5
INDICATOR_TITLE = "Agentic ML Signal Suite"
MAX_LABELS_COUNT = 500
MAX_LINES_COUNT = 500
DOWNLOAD_FILENAME = "agentic_ml_signal_suite.pine"

# =============================================================================
# PARAMETER BOUNDS
# =============================================================================
# Mirrored into the input.*() declarations of the generated script.

PARAMETER_BOUNDS = {
    "lookback": {"min": 50, "max": 200, "step": 1},
    "buy_threshold": {"min": 0.5, "max": 0.9, "step": 0.01},
    "sell_threshold": {"min": 0.1, "max": 0.5, "step": 0.01},
    "weight": {"min": -5.0, "max": 5.0, "step": 0.05},
    "bias": {"min": -10.0, "max": 10.0, "step": 0.05},
}

# =============================================================================
# FEATURE CATALOG
# =============================================================================
# Order is significant: declarations, formulas and the score are emitted
# in this order.

FEATURE_CATALOG = [
    {
        "id": "rsi",
        "label": "RSI Oscillator",
        "weight_label": "RSI Weight",
        "default_enabled": True,
        "default_weight": 0.65,
    },
    {
        "id": "macd",
        "label": "MACD Momentum",
        "weight_label": "MACD Weight",
        "default_enabled": True,
        "default_weight": 0.45,
    },
    {
        "id": "volume",
        "label": "Volume Profile",
        "weight_label": "Volume Weight",
        "default_enabled": False,
        "default_weight": 0.30,
    },
    {
        "id": "price",
        "label": "Price Action",
        "weight_label": "Price Action Weight",
        "default_enabled": True,
        "default_weight": 0.35,
    },
]

# =============================================================================
# MODEL / VISUAL OPTIONS
# =============================================================================

MODEL_OPTIONS = ["Logistic Regression", "SVM (Linear Kernel)"]

# Medium maps to size.large, not size.normal. Saved scripts rely on it.
MARKER_SIZE_OPTIONS = [
    {"id": "small", "label": "Small", "pine": "size.small"},
    {"id": "medium", "label": "Medium", "pine": "size.large"},
    {"id": "large", "label": "Large", "pine": "size.huge"},
]

# =============================================================================
# DEFAULT INDICATOR SETTINGS
# =============================================================================

DEFAULT_INDICATOR_SETTINGS = {
    "lookback": 100,
    "buy_threshold": 0.70,
    "sell_threshold": 0.30,
    "features": {f["id"]: f["default_enabled"] for f in FEATURE_CATALOG},
    "weights": {f["id"]: f["default_weight"] for f in FEATURE_CATALOG},
    "bias": 0.10,
    "model": "Logistic Regression",
    "marker_size": "Medium",
}

# =============================================================================
# WEBSOCKET CONFIGURATION
# =============================================================================

WEBSOCKET_CONFIG = {
    "keepalive_timeout": 30.0,   # Seconds of silence before a keepalive ping
}
