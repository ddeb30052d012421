"""
Script Cache
============
LRU cache of generated scripts keyed by configuration.
Generation is pure, so entries never go stale and need no TTL; the cache
only saves re-rendering while a user nudges the same settings back and forth.
"""
import threading
from collections import OrderedDict
from typing import Dict, Hashable, Optional

from config import SCRIPT_CACHE_SIZE
from models.indicator_config import IndicatorConfig
from pinescript_generator import PineScriptGenerator


class ScriptCache:
    """
    Thread-safe LRU cache of generated Pine Script.

    Usage:
        cache = ScriptCache(maxsize=256)
        script = cache.get_or_generate(config)

    When maxsize is reached, the least recently used entry is evicted.
    """

    def __init__(self, maxsize: int = SCRIPT_CACHE_SIZE, generator: Optional[PineScriptGenerator] = None):
        self._cache: OrderedDict[Hashable, str] = OrderedDict()
        self._lock = threading.RLock()
        self._maxsize = max(1, maxsize)
        self._generator = generator or PineScriptGenerator()
        self._hits = 0
        self._misses = 0

    def get(self, config: IndicatorConfig) -> Optional[str]:
        """Get cached script. Moves key to end for LRU tracking."""
        key = config.cache_key()
        with self._lock:
            script = self._cache.get(key)
            if script is None:
                return None
            self._cache.move_to_end(key)
            return script

    def set(self, config: IndicatorConfig, script: str) -> None:
        """Store script, evicting LRU entries if at capacity."""
        key = config.cache_key()
        with self._lock:
            if key in self._cache:
                self._cache[key] = script
                self._cache.move_to_end(key)
                return

            while len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)

            self._cache[key] = script

    def get_or_generate(self, config: IndicatorConfig) -> str:
        """Return the cached script, generating and storing it on a miss."""
        script = self.get(config)
        if script is not None:
            with self._lock:
                self._hits += 1
            return script

        # Generate outside the lock
        script = self._generator.generate(config)
        self.set(config, script)
        with self._lock:
            self._misses += 1
        return script

    def clear(self) -> int:
        """Clear all entries. Returns count cleared."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            return count

    def stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        with self._lock:
            return {
                "entries": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
            }


# =============================================================================
# GLOBAL CACHE INSTANCE
# =============================================================================

script_cache = ScriptCache()
