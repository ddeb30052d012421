"""
Pine Script v5 Generator - Agentic ML Signal Suite indicator

Turns an IndicatorConfig into indicator source. Every block is a pure
function of the config; the blocks are joined in a fixed order, so the
same settings always produce the same bytes.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional, Tuple

from config import (
    FEATURE_CATALOG,
    INDICATOR_TITLE,
    MARKER_SIZE_OPTIONS,
    MAX_LABELS_COUNT,
    MAX_LINES_COUNT,
    MODEL_OPTIONS,
    PARAMETER_BOUNDS,
    PINE_VERSION,
)
from models.indicator_config import (
    DEFAULT_INDICATOR_CONFIG,
    FEATURE_ORDER,
    FeatureId,
    IndicatorConfig,
    MarkerSize,
    ModelType,
)

# =============================================================================
# LOOKUP TABLES
# =============================================================================

# Formula fragment per feature and the normalized series it produces (~[-1, 1])
FEATURE_SPECS: Dict[FeatureId, Dict[str, str]] = {
    FeatureId.RSI: {
        "formula": (
            "rsiSource = ta.rsi(close, 14)\n"
            "normalizedRsi = math.max(math.min((rsiSource - 50) / 50, 1), -1)"
        ),
        "normalized": "normalizedRsi",
    },
    FeatureId.MACD: {
        "formula": (
            "macdFast, macdSlow, macdHist = ta.macd(close, 12, 26, 9)\n"
            "normalizedMacd = math.tanh(macdHist / ta.stdev(macdHist, math.max(5, math.round(lookback * 0.2))))"
        ),
        "normalized": "normalizedMacd",
    },
    FeatureId.VOLUME: {
        "formula": (
            "volumeMean = ta.sma(volume, lookback)\n"
            "normalizedVolume = math.tanh(volume / volumeMean - 1)"
        ),
        "normalized": "normalizedVolume",
    },
    FeatureId.PRICE: {
        "formula": (
            "priceMomentum = ta.roc(close, math.max(2, math.round(lookback * 0.25)))\n"
            "rangeNormalizedMomentum = math.tanh(priceMomentum / 100)"
        ),
        "normalized": "rangeNormalizedMomentum",
    },
}

FEATURE_LABELS: Dict[FeatureId, Dict[str, str]] = {
    FeatureId(entry["id"]): {"label": entry["label"], "weight_label": entry["weight_label"]}
    for entry in FEATURE_CATALOG
}

# Not lexical: Medium -> size.large, Large -> size.huge
MARKER_SIZE_TOKENS: Dict[MarkerSize, str] = {
    MarkerSize(option["label"]): option["pine"] for option in MARKER_SIZE_OPTIONS
}

# Link function applied to linearComponent, in option order
MODEL_LINK_FUNCTIONS: Dict[ModelType, str] = {
    ModelType.LOGISTIC_REGRESSION: "1.0 / (1.0 + math.exp(-linearComponent))",
    ModelType.SVM_LINEAR_KERNEL: "0.5 + 0.5 * math.tanh(linearComponent)",
}

# Both signals are forced false when thresholds are inverted or equal
THRESHOLD_GUARD = "buyThreshold > sellThreshold"

ALERTS: List[Tuple[str, str, str]] = [
    ("buySignal", "Agentic ML Buy", "Agentic ML Buy Signal Triggered"),
    ("sellSignal", "Agentic ML Sell", "Agentic ML Sell Signal Triggered"),
]

STATUS_ROWS: List[Tuple[str, str]] = [
    ("ML Probability: ", "str.tostring(probability, '#.##')"),
    ("Buy Threshold: ", "str.tostring(buyThreshold, '#.##')"),
    ("Sell Threshold: ", "str.tostring(sellThreshold, '#.##')"),
    ("Selected Model: ", "modelType"),
]


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

TWO_PLACES = Decimal("0.01")


def format_float(value: float) -> str:
    """
    Two decimals, always. Ties on the exact binary value round away from
    zero (2.675 is stored below the tie and stays 2.67). Only an exact
    zero drops its sign; -0.001 renders as -0.00.
    """
    if value == 0:
        return "0.00"
    return str(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def pine_bool(value: bool) -> str:
    return "true" if value else "false"


def pine_string_list(values: List[str]) -> str:
    return "[" + ", ".join(f"'{v}'" for v in values) + "]"


def feature_suffix(feature: FeatureId) -> str:
    """Identifier suffix used by useXXX / weightXXX inputs."""
    return feature.value.upper()


def marker_size_token(size: MarkerSize) -> str:
    return MARKER_SIZE_TOKENS[MarkerSize(size)]


def _bounds(name: str, with_step: bool = True) -> str:
    bounds = PARAMETER_BOUNDS[name]
    text = f"minval={bounds['min']}, maxval={bounds['max']}"
    if with_step:
        text += f", step={bounds['step']}"
    return text


# =============================================================================
# BLOCK RENDERERS
# =============================================================================

def render_header(config: IndicatorConfig) -> str:
    return (
        f"//@version={PINE_VERSION}\n"
        f"indicator('{INDICATOR_TITLE}', overlay=true, "
        f"max_labels_count={MAX_LABELS_COUNT}, max_lines_count={MAX_LINES_COUNT})"
    )


def render_model_controls(config: IndicatorConfig) -> str:
    bias = PARAMETER_BOUNDS["bias"]
    return "\n".join([
        "// === Hyperparameters ===",
        f"lookback = input.int({config.lookback}, 'Lookback Period', "
        f"{_bounds('lookback')}, group='Model Controls')",
        f"modelType = input.string('{config.model.value}', 'Model Type', "
        f"options={pine_string_list(MODEL_OPTIONS)}, group='Model Controls')",
        f"biasInput = input.float({format_float(config.bias)}, 'Model Bias', "
        f"step={bias['step']}, minval={bias['min']}, maxval={bias['max']}, group='Model Weights')",
    ])


def render_thresholds(config: IndicatorConfig) -> str:
    return "\n".join([
        f"buyThreshold = input.float({format_float(config.buy_threshold)}, 'Buy Threshold', "
        f"{_bounds('buy_threshold')}, group='Signal Thresholds')",
        f"sellThreshold = input.float({format_float(config.sell_threshold)}, 'Sell Threshold', "
        f"{_bounds('sell_threshold')}, group='Signal Thresholds')",
    ])


def render_marker_size(config: IndicatorConfig) -> str:
    labels = [size.value for size in MARKER_SIZE_TOKENS]
    # Chained ternary built from the table; the last entry is the fallback
    selector = "".join(
        f"markerSize == '{size.value}' ? {token} : "
        for size, token in list(MARKER_SIZE_TOKENS.items())[:-1]
    ) + list(MARKER_SIZE_TOKENS.values())[-1]
    return "\n".join([
        f"markerSize = input.string('{config.marker_size.value}', 'Marker Size', "
        f"options={pine_string_list(labels)}, group='Visuals')",
        f"markerSizePine = {selector}",
    ])


def render_feature_toggles(config: IndicatorConfig) -> str:
    return "\n".join(
        f"use{feature_suffix(feature)} = input.bool({pine_bool(config.features[feature])}, "
        f"'{FEATURE_LABELS[feature]['label']}', group='Feature Selection')"
        for feature in FEATURE_ORDER
    )


def render_feature_weights(config: IndicatorConfig) -> str:
    return "\n".join(
        f"weight{feature_suffix(feature)} = input.float({format_float(config.weights[feature])}, "
        f"'{FEATURE_LABELS[feature]['weight_label']}', {_bounds('weight')}, group='Model Weights')"
        for feature in FEATURE_ORDER
    )


def render_feature_engineering(config: IndicatorConfig) -> str:
    # Disabled features are still computed; only their score term is gated
    formulas = "\n\n".join(FEATURE_SPECS[feature]["formula"] for feature in FEATURE_ORDER)
    return "// === Feature Engineering ===\n" + formulas


def render_score_accumulation(config: IndicatorConfig) -> str:
    lines = ["modelSum = 0.0"]
    for feature in FEATURE_ORDER:
        suffix = feature_suffix(feature)
        lines.append(
            f"modelSum += use{suffix} ? weight{suffix} * {FEATURE_SPECS[feature]['normalized']} : 0.0"
        )
    return "\n".join(lines)


def render_nonlinearity(config: IndicatorConfig) -> str:
    # Selected at runtime from modelType so the setting stays editable in TradingView
    lines = ["linearComponent = modelSum + biasInput"]
    models = list(MODEL_LINK_FUNCTIONS.items())
    for index, (model, expression) in enumerate(models):
        if index == 0:
            lines.append(f"probability = if modelType == '{model.value}'")
        elif index < len(models) - 1:
            lines.append(f"else if modelType == '{model.value}'")
        else:
            lines.append("else")
        lines.append(f"    {expression}")
    return "\n".join(lines)


def render_clamp(config: IndicatorConfig) -> str:
    return "probability := math.clamp(probability, 0.0, 1.0)"


def render_signals(config: IndicatorConfig) -> str:
    return "\n".join([
        f"buySignal = probability >= buyThreshold and {THRESHOLD_GUARD}",
        f"sellSignal = probability <= sellThreshold and {THRESHOLD_GUARD}",
    ])


def render_plots(config: IndicatorConfig) -> str:
    return "\n".join([
        "plot(probability, 'ML Probability', color=color.new(color.cyan, 0), linewidth=2)",
        "plot(buyThreshold, 'Buy Threshold', color=color.new(color.green, 60), linewidth=1, style=plot.style_dashed)",
        "plot(sellThreshold, 'Sell Threshold', color=color.new(color.red, 60), linewidth=1, style=plot.style_dashed)",
    ])


def render_markers(config: IndicatorConfig) -> str:
    return "\n".join([
        "plotshape(buySignal, title='Buy Signal', location=location.belowbar, style=shape.triangleup, "
        "color=color.new(color.lime, 0), size=markerSizePine, offset=0)",
        "plotshape(sellSignal, title='Sell Signal', location=location.abovebar, style=shape.triangledown, "
        "color=color.new(color.red, 0), size=markerSizePine, offset=0)",
    ])


def render_alerts(config: IndicatorConfig) -> str:
    return "\n".join(
        f"alertcondition({signal}, title='{title}', message='{message}')"
        for signal, title, message in ALERTS
    )


def render_status_table(config: IndicatorConfig) -> str:
    lines = [
        "// Debug table for transparency",
        f"var table debugTable = table.new(position.top_right, 1, {len(STATUS_ROWS)}, border_width=1)",
        "if barstate.islast",
    ]
    for row, (caption, expression) in enumerate(STATUS_ROWS):
        lines.append(f"    table.cell(debugTable, 0, {row}, '{caption}' + {expression})")
    return "\n".join(lines)


# Emission order of the script
SCRIPT_BLOCKS: List[Tuple[str, Callable[[IndicatorConfig], str]]] = [
    ("header", render_header),
    ("model_controls", render_model_controls),
    ("thresholds", render_thresholds),
    ("marker_size", render_marker_size),
    ("feature_toggles", render_feature_toggles),
    ("feature_weights", render_feature_weights),
    ("feature_engineering", render_feature_engineering),
    ("score_accumulation", render_score_accumulation),
    ("nonlinearity", render_nonlinearity),
    ("clamp", render_clamp),
    ("signals", render_signals),
    ("plots", render_plots),
    ("markers", render_markers),
    ("alerts", render_alerts),
    ("status_table", render_status_table),
]


class PineScriptGenerator:
    """Generates the Agentic ML Signal Suite Pine Script v5 indicator"""

    def render_blocks(self, config: IndicatorConfig) -> Dict[str, str]:
        """Render every block, keyed by block name, in emission order."""
        return {name: render(config) for name, render in SCRIPT_BLOCKS}

    def generate(self, config: IndicatorConfig) -> str:
        """
        Generate the indicator source for a configuration.

        Args:
            config: Indicator settings. Values are embedded without range
                    checks; validate before calling.

        Returns:
            Complete Pine Script v5 code, newline-terminated
        """
        return "\n\n".join(self.render_blocks(config).values()) + "\n"


def generate_pinescript(config: Optional[IndicatorConfig] = None) -> str:
    """Generate the indicator for `config` (defaults when omitted)."""
    return PineScriptGenerator().generate(config or DEFAULT_INDICATOR_CONFIG)
