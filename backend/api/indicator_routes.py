"""
INDICATOR ROUTES
================
API endpoints for configuring the Agentic ML indicator and exporting its
Pine Script. Request bodies are range-checked here; the generator itself
embeds whatever it is given.
"""
from typing import Dict, List

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import (
    DEFAULT_INDICATOR_SETTINGS,
    DOWNLOAD_FILENAME,
    FEATURE_CATALOG,
    MARKER_SIZE_OPTIONS,
    MODEL_OPTIONS,
    PARAMETER_BOUNDS,
)
from logging_config import log
from models.indicator_config import (
    DEFAULT_INDICATOR_CONFIG,
    FeatureId,
    IndicatorConfig,
    MarkerSize,
    ModelType,
)
from services.script_cache import script_cache

router = APIRouter(prefix="/api/indicator", tags=["indicator"])

_bounds = PARAMETER_BOUNDS


# =============================================================================
# REQUEST MODELS
# =============================================================================

class IndicatorConfigRequest(BaseModel):
    """Indicator settings as sent by the UI. Omitted fields use defaults."""
    model_config = ConfigDict(extra="forbid")

    lookback: int = Field(
        DEFAULT_INDICATOR_SETTINGS["lookback"],
        ge=_bounds["lookback"]["min"], le=_bounds["lookback"]["max"],
    )
    buy_threshold: float = Field(
        DEFAULT_INDICATOR_SETTINGS["buy_threshold"],
        ge=_bounds["buy_threshold"]["min"], le=_bounds["buy_threshold"]["max"],
    )
    sell_threshold: float = Field(
        DEFAULT_INDICATOR_SETTINGS["sell_threshold"],
        ge=_bounds["sell_threshold"]["min"], le=_bounds["sell_threshold"]["max"],
    )
    features: Dict[FeatureId, bool] = Field(default_factory=dict)
    weights: Dict[FeatureId, float] = Field(default_factory=dict)
    bias: float = Field(
        DEFAULT_INDICATOR_SETTINGS["bias"],
        ge=_bounds["bias"]["min"], le=_bounds["bias"]["max"],
    )
    model: ModelType = ModelType(DEFAULT_INDICATOR_SETTINGS["model"])
    marker_size: MarkerSize = MarkerSize(DEFAULT_INDICATOR_SETTINGS["marker_size"])

    @field_validator("weights")
    @classmethod
    def check_weight_bounds(cls, weights: Dict[FeatureId, float]) -> Dict[FeatureId, float]:
        low, high = _bounds["weight"]["min"], _bounds["weight"]["max"]
        for feature, weight in weights.items():
            if not low <= weight <= high:
                raise ValueError(f"weight for {feature.value} must be between {low} and {high}")
        return weights

    def to_config(self) -> IndicatorConfig:
        return IndicatorConfig.from_dict({
            "lookback": self.lookback,
            "buy_threshold": self.buy_threshold,
            "sell_threshold": self.sell_threshold,
            "features": {k.value: v for k, v in self.features.items()},
            "weights": {k.value: v for k, v in self.weights.items()},
            "bias": self.bias,
            "model": self.model,
            "marker_size": self.marker_size,
        })


def build_pinescript_payload(config: IndicatorConfig) -> Dict:
    """Generate (or fetch cached) script and wrap it for the UI."""
    pinescript = script_cache.get_or_generate(config)
    line_count = pinescript.count("\n")
    log(f"[Generator] Script ready: {line_count} lines, model={config.model.value}", level='DEBUG')
    return {
        "pinescript": pinescript,
        "config": config.to_dict(),
        "line_count": line_count,
    }


def format_validation_errors(error: ValidationError) -> List[Dict]:
    """JSON-safe subset of pydantic's error list."""
    return [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
        for err in error.errors()
    ]


def handle_indicator_message(message: Dict) -> Dict:
    """
    Answer one live-preview WebSocket message.

    {"type": "generate", "id": ..., "config": {...}} -> "pinescript" reply,
    or an "error" reply when the config is rejected or the type is unknown.
    """
    request_id = message.get("id")
    msg_type = message.get("type")

    if msg_type == "generate":
        try:
            request = IndicatorConfigRequest.model_validate(message.get("config") or {})
        except ValidationError as e:
            return {"type": "error", "id": request_id, "errors": format_validation_errors(e)}
        return {
            "type": "pinescript",
            "id": request_id,
            "data": build_pinescript_payload(request.to_config()),
        }

    if msg_type == "get_defaults":
        return {"type": "defaults", "id": request_id, "data": DEFAULT_INDICATOR_CONFIG.to_dict()}

    return {
        "type": "error",
        "id": request_id,
        "errors": [{"loc": ["type"], "msg": f"Unknown message type: {msg_type!r}"}],
    }


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/defaults")
async def get_defaults():
    """Default indicator settings."""
    return DEFAULT_INDICATOR_CONFIG.to_dict()


@router.get("/options")
async def get_options():
    """Everything the UI needs to build its form: features, models, marker sizes, bounds."""
    return {
        "features": FEATURE_CATALOG,
        "models": MODEL_OPTIONS,
        "marker_sizes": MARKER_SIZE_OPTIONS,
        "bounds": PARAMETER_BOUNDS,
    }


@router.post("/pinescript")
async def generate_indicator_pinescript(request: IndicatorConfigRequest):
    """Generate Pine Script for the submitted settings."""
    try:
        return build_pinescript_payload(request.to_config())
    except Exception as e:
        log(f"[API] Pine Script generation failed: {e}", level='ERROR')
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pinescript/download")
async def download_indicator_pinescript(request: IndicatorConfigRequest):
    """Download the generated Pine Script as a .pine file."""
    try:
        pinescript = script_cache.get_or_generate(request.to_config())
    except Exception as e:
        log(f"[API] Pine Script download failed: {e}", level='ERROR')
        raise HTTPException(status_code=500, detail=str(e))

    return PlainTextResponse(
        content=pinescript,
        media_type="text/plain",
        headers={
            "Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'
        }
    )


@router.get("/cache")
async def get_cache_stats():
    """Script cache statistics."""
    return script_cache.stats()
