"""
Tests for the indicator API
==========================
HTTP endpoints and the live-preview WebSocket.
"""
import pytest
import sys
import os
from fastapi.testclient import TestClient

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from main import app
from api.indicator_routes import IndicatorConfigRequest, handle_indicator_message
from models.indicator_config import IndicatorConfig, FeatureId, ModelType, MarkerSize
from pinescript_generator import generate_pinescript


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestIndicatorConfigRequest:

    def test_empty_request_is_default_config(self):
        assert IndicatorConfigRequest().to_config() == IndicatorConfig()

    def test_partial_feature_map_is_completed(self):
        config = IndicatorConfigRequest(features={"volume": True}, weights={"macd": -2.5}).to_config()

        assert config.features[FeatureId.VOLUME] is True
        assert config.features[FeatureId.RSI] is True
        assert config.weights[FeatureId.MACD] == -2.5
        assert config.weights[FeatureId.PRICE] == 0.35

    def test_full_request(self, sample_request_body):
        config = IndicatorConfigRequest(**sample_request_body).to_config()

        assert config.lookback == 120
        assert config.model is ModelType.SVM_LINEAR_KERNEL
        assert config.marker_size is MarkerSize.SMALL
        assert config.features[FeatureId.MACD] is False


class TestHttpEndpoints:

    def test_ping(self, client):
        response = client.get("/api/ping")
        assert response.status_code == 200
        assert response.json()["pong"] is True

    def test_defaults(self, client):
        response = client.get("/api/indicator/defaults")

        assert response.status_code == 200
        data = response.json()
        assert data["lookback"] == 100
        assert data["features"] == {"rsi": True, "macd": True, "volume": False, "price": True}
        assert data["model"] == "Logistic Regression"
        assert data["marker_size"] == "Medium"

    def test_options(self, client):
        data = client.get("/api/indicator/options").json()

        assert [f["id"] for f in data["features"]] == ["rsi", "macd", "volume", "price"]
        assert data["models"] == ["Logistic Regression", "SVM (Linear Kernel)"]
        assert {m["label"]: m["pine"] for m in data["marker_sizes"]} == {
            "Small": "size.small",
            "Medium": "size.large",
            "Large": "size.huge",
        }
        assert data["bounds"]["lookback"] == {"min": 50, "max": 200, "step": 1}

    def test_generate_with_defaults(self, client):
        response = client.post("/api/indicator/pinescript", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["pinescript"] == generate_pinescript()
        assert data["line_count"] == data["pinescript"].count("\n")
        assert data["config"]["bias"] == 0.10

    def test_generate_with_settings(self, client, sample_request_body):
        response = client.post("/api/indicator/pinescript", json=sample_request_body)

        assert response.status_code == 200
        script = response.json()["pinescript"]
        assert script == generate_pinescript(IndicatorConfig.from_dict(sample_request_body))
        assert "lookback = input.int(120," in script
        assert "modelType = input.string('SVM (Linear Kernel)'" in script
        assert "weightVOLUME = input.float(-0.75," in script
        assert "useMACD = input.bool(false," in script

    @pytest.mark.parametrize("body", [
        {"lookback": 10},
        {"lookback": 201},
        {"buy_threshold": 0.95},
        {"sell_threshold": 0.05},
        {"bias": -10.5},
        {"weights": {"rsi": 5.01}},
        {"features": {"obv": True}},
        {"model": "Random Forest"},
        {"marker_size": "Tiny"},
        {"unexpected": 1},
    ])
    def test_out_of_range_rejected(self, client, body):
        response = client.post("/api/indicator/pinescript", json=body)
        assert response.status_code == 422

    def test_equal_thresholds_accepted(self, client):
        response = client.post("/api/indicator/pinescript", json={"buy_threshold": 0.5, "sell_threshold": 0.5})

        assert response.status_code == 200
        assert "buyThreshold > sellThreshold" in response.json()["pinescript"]

    def test_download(self, client):
        response = client.post("/api/indicator/pinescript/download", json={"marker_size": "Large"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'filename="agentic_ml_signal_suite.pine"' in response.headers["content-disposition"]
        assert "markerSize = input.string('Large'" in response.text

    def test_cache_stats(self, client):
        client.post("/api/indicator/pinescript", json={})
        stats = client.get("/api/indicator/cache").json()
        assert stats["entries"] >= 1
        assert set(stats) == {"entries", "maxsize", "hits", "misses"}


class TestWebSocketMessages:

    def test_generate_message(self):
        reply = handle_indicator_message({"type": "generate", "id": 7, "config": {"lookback": 60}})

        assert reply["type"] == "pinescript"
        assert reply["id"] == 7
        assert "lookback = input.int(60," in reply["data"]["pinescript"]

    def test_invalid_config_message(self):
        reply = handle_indicator_message({"type": "generate", "id": "a", "config": {"lookback": 5}})

        assert reply["type"] == "error"
        assert reply["id"] == "a"
        assert reply["errors"][0]["loc"] == ["lookback"]

    def test_unknown_message_type(self):
        reply = handle_indicator_message({"type": "explode", "id": 1})
        assert reply["type"] == "error"

    def test_live_preview_session(self, client):
        with client.websocket_connect("/ws/indicator") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"

            ws.send_json({"type": "generate", "id": 1, "config": {"bias": 99}})
            error = ws.receive_json()
            assert error["type"] == "error"

            # Connection survives a rejected config
            ws.send_json({"type": "generate", "id": 2, "config": {"model": "SVM (Linear Kernel)"}})
            reply = ws.receive_json()
            assert reply["type"] == "pinescript"
            assert reply["id"] == 2
            assert reply["data"]["config"]["model"] == "SVM (Linear Kernel)"

            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

            ws.send_json({"type": "get_defaults", "id": 3})
            assert ws.receive_json()["data"]["lookback"] == 100
