"""
Agentic ML Pine Script Designer - Main FastAPI Application
==========================================================
Entry point for the designer backend.

- config.py: Configuration constants
- pinescript_generator.py: Settings -> Pine Script
- api/: API route handlers
- services/: Script cache, clipboard, WebSocket connections
- models/: Data classes

This file is only responsible for:
1. Initializing the FastAPI app
2. Registering routes
3. Setting up the live-preview WebSocket endpoint
4. Managing application lifecycle
"""
import asyncio
import json
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from config import API_HOST, API_PORT, SCRIPT_CACHE_SIZE, WEBSOCKET_CONFIG
from logging_config import log, UVICORN_LOG_CONFIG
from api import register_routes
from api.indicator_routes import handle_indicator_message
from services.script_cache import script_cache
from services.websocket_manager import ws_manager


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    log("[Startup] Agentic ML Pine Script Designer starting...")
    log(f"[Startup] Script cache size: {SCRIPT_CACHE_SIZE}")

    yield

    log("[Shutdown] Application shutting down...")
    log(f"[Shutdown] Script cache stats: {script_cache.stats()}")


# =============================================================================
# FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="Agentic ML Pine Script Designer",
    version="1.0.0",
    description="Generates non-repainting ML signal indicators for TradingView",
    lifespan=lifespan
)

register_routes(app)


# =============================================================================
# WEBSOCKET ENDPOINT
# =============================================================================

@app.websocket("/ws/indicator")
async def websocket_indicator(websocket: WebSocket):
    """
    WebSocket endpoint for live script preview.

    Client messages:
    - {"type": "generate", "id": ..., "config": {...}} -> pinescript
    - {"type": "get_defaults", "id": ...} -> defaults
    - "ping" -> "pong"
    """
    await ws_manager.connect(websocket)

    try:
        while True:
            try:
                message = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=WEBSOCKET_CONFIG["keepalive_timeout"]
                )

                if message == "ping":
                    await websocket.send_text("pong")
                    continue

                try:
                    request = json.loads(message)
                except json.JSONDecodeError:
                    await ws_manager.send_to_client(websocket, {
                        "type": "error",
                        "id": None,
                        "errors": [{"loc": [], "msg": "Message is not valid JSON"}],
                    })
                    continue

                if not isinstance(request, dict):
                    request = {}

                await ws_manager.send_to_client(websocket, handle_indicator_message(request))

            except asyncio.TimeoutError:
                # Send keepalive ping
                try:
                    await websocket.send_text("ping")
                except Exception:
                    break

    except WebSocketDisconnect:
        pass
    except Exception as e:
        log(f"[WebSocket] Error: {e}", level='WARNING')
    finally:
        await ws_manager.disconnect(websocket)


# =============================================================================
# UTILITY ENDPOINTS
# =============================================================================

@app.get("/api/ping")
async def ping():
    """Simple ping endpoint for health checks."""
    return {"pong": True, "timestamp": datetime.now().isoformat()}


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=API_HOST,
        port=API_PORT,
        log_config=UVICORN_LOG_CONFIG
    )
