# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from app import main
from estimator.fusion.client import NullEnrichment


@pytest.fixture(scope="module")
def client():
    return TestClient(main.app)


def test_meta_endpoints(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/healthz").json() == {"status": "healthy"}
    locs = client.get("/meta/locations").json()["locations"]
    assert locs == {"Urban": 1.0, "Suburban": 0.85, "Rural": 0.7, "Metro": 1.25}
    presets = client.get("/meta/presets").json()
    assert presets["default"] == "standard"
    assert presets["presets"] == {"standard": "sq_yard", "thumb_rule": "sq_ft"}


def test_estimate(client):
    r = client.post("/estimate", json={"area": 1000, "floors": 3, "location": "urban"})
    assert r.status_code == 200
    body = r.json()
    assert body["timeline"]["total_days"] == 30
    assert body["workforce"]["masons"] == 15
    assert body["currency"] == "INR"
    assert body["display"].startswith("₹")
    assert len(body["insights"]) == 12


def test_estimate_with_preset_and_label(client):
    r = client.post("/estimate", json={"area": 1200, "floors": "G+1", "preset": "thumb_rule"})
    assert r.status_code == 200
    body = r.json()
    assert body["area_unit"] == "sq_ft"
    assert body["config"]["floors"] == 2


def test_blank_duration_is_unconstrained(client):
    r = client.post("/estimate", json={"area": 500, "duration_constraint": ""})
    assert r.status_code == 200
    assert r.json()["config"]["duration_constraint"] is None


@pytest.mark.parametrize("payload", [
    {"area": -5},
    {"area": 100, "location": "Atlantis"},
    {"area": 100, "preset": "imperial"},
    {"area": 100, "wage_overrides": {"plumber": 700}},
])
def test_invalid_configuration_is_400(client, payload):
    assert client.post("/estimate", json=payload).status_code == 400


def test_enriched_without_provider(client, monkeypatch):
    monkeypatch.setattr(main, "provider_from_env", lambda: NullEnrichment())
    r = client.post("/estimate/enriched", json={"area": 500, "floors": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["sources"] == {"layout": "engine", "insights": "engine"}
    assert body["notice"] is None


def test_enriched_with_failing_provider(client, monkeypatch):
    class Broken:
        def enrich_layout(self, result): raise RuntimeError("offline")
        def enrich_insights(self, result): raise RuntimeError("offline")

    monkeypatch.setattr(main, "provider_from_env", lambda: Broken())
    r = client.post("/estimate/enriched", json={"area": 500, "floors": 2})
    assert r.status_code == 200
    assert r.json()["notice"] == "AI enrichment partially failed. Using deterministic estimates."
