"""
SERVICES PACKAGE
================
Supporting services for the Pine Script designer.
"""
from .script_cache import script_cache, ScriptCache
from .clipboard import copy_to_clipboard, ClipboardError
from .websocket_manager import ws_manager, WebSocketManager

__all__ = [
    'script_cache',
    'ScriptCache',
    'copy_to_clipboard',
    'ClipboardError',
    'ws_manager',
    'WebSocketManager',
]
