"""
WEBSOCKET MANAGER
=================
Tracks live-preview WebSocket connections for the indicator designer.
"""
import asyncio
from typing import Dict, Set

from fastapi import WebSocket

from logging_config import log


class WebSocketManager:
    """
    Manages WebSocket connections for live script regeneration.
    Each client sends its own settings and gets its own script back, so
    there is no broadcasting; the manager only keeps the connection set.
    """

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self.active_connections.add(websocket)
        log(f"[WebSocket] Client connected. Total: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a disconnected WebSocket."""
        async with self._lock:
            self.active_connections.discard(websocket)
        log(f"[WebSocket] Client disconnected. Total: {len(self.active_connections)}")

    async def send_to_client(self, websocket: WebSocket, message: Dict) -> bool:
        """
        Send a message to a specific client.
        Returns True if successful, False otherwise.
        """
        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            log(f"[WebSocket] Error sending to client: {e}", level='WARNING')
            return False

    def get_connection_count(self) -> int:
        return len(self.active_connections)


# Global WebSocket manager instance
ws_manager = WebSocketManager()
