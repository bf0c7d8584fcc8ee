from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from indicator_engine.main import app
from indicator_engine.schemas.market import Timeframe
from indicator_engine.services.prices.mock_data import generate_mock_bars


def bars_payload(n, timeframe=Timeframe.DAILY, seed=1):
    bars = generate_mock_bars("AAPL", timeframe, n, end_time=datetime(2024, 6, 28), seed=seed)
    return {"bars": [bar.model_dump(mode="json") for bar in bars], "name": "Apple"}


@pytest.fixture
def client():
    with TestClient(app) as client:
        client.post("/api/v1/prices/aapl/1d", json=bars_payload(40))
        yield client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestPrices:
    def test_read_back_in_order(self, client):
        response = client.get("/api/v1/prices/AAPL/1d")
        assert response.status_code == 200
        points = response.json()["points"]
        assert [p["index"] for p in points] == list(range(40))

    def test_unknown_symbol_is_empty(self, client):
        assert client.get("/api/v1/prices/NOPE/1d").json()["points"] == []

    def test_ingest_drops_cached_series(self, client):
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]})
        response = client.post("/api/v1/prices/AAPL/1d", json=bars_payload(5, seed=2))
        assert response.status_code == 201
        assert response.json()["invalidated"] == 36


class TestChartIndicators:
    def test_create_and_read_chart(self, client):
        response = client.post(
            "/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["indicator_id"] == "1"
        assert body["drawn"] and not body["cache_hit"]
        assert body["points"] == 36

        chart = client.get("/api/v1/charts/AAPL").json()
        assert chart["timeframe"] == "1d"
        assert chart["indicators"][0]["params"] == "-256:5:1.0"
        assert [s["id"] for s in chart["series"]] == ["1"]

    def test_defaults_and_cache_reuse(self, client):
        first = client.post("/api/v1/charts/AAPL/indicators", json={"kind": "BOLLINGER_BANDS"})
        second = client.post("/api/v1/charts/AAPL/indicators", json={"kind": "BOLLINGER_BANDS"})
        assert first.json()["points"] == 21
        assert second.json()["cache_hit"]

        series = [s["id"] for s in client.get("/api/v1/charts/AAPL").json()["series"]]
        assert "2_upper" in series and "1_lower" in series

    def test_sessions_are_per_user(self, client):
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "EMA", "params": [-256, 5, 1.0]})
        other = client.get("/api/v1/charts/AAPL", params={"user_id": "bob"}).json()
        assert other["indicators"] == []

    def test_bad_params_are_rejected(self, client):
        response = client.post(
            "/api/v1/charts/AAPL/indicators", json={"kind": "EMA", "params": [-256, 5]}
        )
        assert response.status_code == 400
        assert client.post("/api/v1/charts/AAPL/indicators", json={"kind": "RSI"}).status_code == 422

    def test_update_settings(self, client):
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "EMA", "params": [-256, 5, 1.0]})
        response = client.patch(
            "/api/v1/charts/AAPL/indicators/1", json={"params": [-256, 10, 2.0]}
        )
        assert response.status_code == 200
        assert response.json()["points"] == 31
        assert client.get("/api/v1/charts/AAPL").json()["indicators"][0]["params"] == "-256:10:2.0"

        missing = client.patch("/api/v1/charts/AAPL/indicators/9", json={"params": [-256, 10, 2.0]})
        assert missing.status_code == 404

    def test_delete(self, client):
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]})
        assert client.delete("/api/v1/charts/AAPL/indicators/1").status_code == 200
        assert client.delete("/api/v1/charts/AAPL/indicators/1").status_code == 404
        assert client.get("/api/v1/charts/AAPL").json()["series"] == []

    def test_timeframe_switch(self, client):
        client.post("/api/v1/prices/AAPL/1h", json=bars_payload(8, Timeframe.HOURLY))
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]})
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 10, 1.0]})

        response = client.put("/api/v1/charts/AAPL/timeframe", json={"timeframe": "1h"})
        assert response.status_code == 200
        results = response.json()
        assert results[0]["drawn"] and results[0]["points"] == 4
        assert not results[1]["drawn"]

        chart = client.get("/api/v1/charts/AAPL").json()
        assert chart["timeframe"] == "1h"
        assert [s["id"] for s in chart["series"]] == ["1"]


class TestPresets:
    def test_save_apply_and_clear(self, client):
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]})
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "EMA", "params": [-256, 8, 1.0]})

        saved = client.put("/api/v1/presets/AAPL/2", json={"indicator_ids": ["2"]})
        assert saved.status_code == 200
        assert saved.json()["entries"] == [{"local_id": "0", "kind": "EMA", "params": "-256:8:1.0"}]

        applied = client.post("/api/v1/presets/AAPL/2/apply")
        assert applied.status_code == 200
        assert [r["indicator_id"] for r in applied.json()] == ["3"]
        indicators = client.get("/api/v1/charts/AAPL").json()["indicators"]
        assert [i["id"] for i in indicators] == ["3"]

        cleared = client.delete("/api/v1/presets/AAPL/2")
        assert cleared.json()["entries"] == []

    def test_out_of_range_slot(self, client):
        assert client.get("/api/v1/presets/AAPL/6").status_code == 404
        assert client.put("/api/v1/presets/AAPL/0", json={}).status_code == 404

    def test_unknown_indicator_in_save(self, client):
        response = client.put("/api/v1/presets/AAPL/1", json={"indicator_ids": ["42"]})
        assert response.status_code == 404


def test_presets_survive_restart():
    with TestClient(app) as client:
        client.post("/api/v1/prices/AAPL/1d", json=bars_payload(40))
        client.post("/api/v1/charts/AAPL/indicators", json={"kind": "SMA", "params": [-256, 5, 1.0]})
        client.put("/api/v1/presets/AAPL/1", json={})

        # A new session registry reloads presets from the database
        client.app.state.registry.close("default", "AAPL")
        slot = client.get("/api/v1/presets/AAPL/1").json()
        assert slot["entries"][0]["params"] == "-256:5:1.0"
