"""
Tests for ScriptCache
=====================
"""
import threading
import sys
import os
from unittest.mock import MagicMock

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from models.indicator_config import IndicatorConfig, ModelType
from pinescript_generator import PineScriptGenerator, generate_pinescript
from services.script_cache import ScriptCache


class TestScriptCache:

    def test_miss_then_hit(self):
        cache = ScriptCache(maxsize=4)
        config = IndicatorConfig()

        first = cache.get_or_generate(config)
        second = cache.get_or_generate(IndicatorConfig())

        assert first == second == generate_pinescript(config)
        assert cache.stats() == {"entries": 1, "maxsize": 4, "hits": 1, "misses": 1}

    def test_generator_called_once_per_config(self):
        generator = MagicMock(spec=PineScriptGenerator)
        generator.generate.return_value = "//@version=5\n"
        cache = ScriptCache(maxsize=4, generator=generator)

        for _ in range(3):
            cache.get_or_generate(IndicatorConfig())
        cache.get_or_generate(IndicatorConfig(model=ModelType.SVM_LINEAR_KERNEL))

        assert generator.generate.call_count == 2

    def test_lru_eviction(self):
        cache = ScriptCache(maxsize=2)
        a = IndicatorConfig(lookback=60)
        b = IndicatorConfig(lookback=70)
        c = IndicatorConfig(lookback=80)

        cache.get_or_generate(a)
        cache.get_or_generate(b)
        cache.get(a)  # a becomes most recently used
        cache.get_or_generate(c)

        assert cache.get(a) is not None
        assert cache.get(b) is None
        assert cache.get(c) is not None

    def test_clear(self):
        cache = ScriptCache(maxsize=4)
        cache.get_or_generate(IndicatorConfig())
        assert cache.clear() == 1
        assert cache.get(IndicatorConfig()) is None

    def test_concurrent_access(self):
        cache = ScriptCache(maxsize=8)
        configs = [IndicatorConfig(lookback=50 + i) for i in range(4)]
        results = []

        def worker():
            for config in configs:
                results.append((config.lookback, cache.get_or_generate(config)))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 16
        for lookback, script in results:
            assert f"lookback = input.int({lookback}," in script
        assert cache.stats()["entries"] == 4
