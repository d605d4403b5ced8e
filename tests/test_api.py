"""Integration tests for the FastAPI endpoints."""

import pytest

from nrfa.geodesy import bng_to_wgs84
from nrfa.routers import gridref


class TestRootEndpoint:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert "message" in data
        assert data["docs"] == "/docs"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["engine"] == "ok"


class TestGridRefEndpoints:
    def test_bng(self, client):
        resp = client.get("/api/v1/gridref/SN853872")
        assert resp.status_code == 200
        data = resp.json()
        assert data["easting"] == 285300
        assert data["northing"] == 287200
        assert data["resolution"] == 100
        assert data["projection"] == "BNG"

    def test_bng_invalid(self, client):
        resp = client.get("/api/v1/gridref/SI123456")
        assert resp.status_code == 422
        assert "SI123456" in resp.json()["detail"]

    def test_wgs84(self, client):
        resp = client.get("/api/v1/gridref/SN853872/wgs84")
        assert resp.status_code == 200
        data = resp.json()
        assert data["lat"] == pytest.approx(52.47064671, abs=1e-4)
        assert data["lon"] == pytest.approx(-3.68998735, abs=1e-4)
        assert data["datum"] == "WGS84"
        assert data["resolution"] == 100

    def test_wgs84_odd_digits(self, client):
        resp = client.get("/api/v1/gridref/SN85387/wgs84")
        assert resp.status_code == 422
        assert "odd number of digits" in resp.json()["detail"]


class TestConvertEndpoint:
    def test_partial_failure(self, client):
        refs = ["SN853872", "TQ3080", "SI123456", "NT2573", "HP", "SV"]
        resp = client.post("/api/v1/gridref/convert", json={"references": refs, "coord_system": "wgs84"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["coord_system"] == "WGS84"
        assert data["total"] == 6
        assert data["failed"] == 1
        assert [r["reference"] for r in data["results"]] == refs
        bad = data["results"][2]
        assert bad["lat"] is None
        assert "invalid grid letter" in bad["error"]
        assert data["results"][0]["lat"] == pytest.approx(52.4706, abs=1e-4)

    def test_default_bng(self, client):
        resp = client.post("/api/v1/gridref/convert", json={"references": ["TQ3080"]})
        assert resp.status_code == 200
        row = resp.json()["results"][0]
        assert (row["easting"], row["northing"], row["resolution"]) == (530000, 180000, 1000)
        assert row["lat"] is None

    def test_unknown_coord_system(self, client):
        resp = client.post("/api/v1/gridref/convert", json={"references": ["TQ3080"], "coord_system": "UTM"})
        assert resp.status_code == 422

    def test_batch_limit(self, client, monkeypatch):
        monkeypatch.setattr(gridref, "CONVERT_MAX_BATCH", 2)
        resp = client.post("/api/v1/gridref/convert", json={"references": ["SN", "SO", "SP"]})
        assert resp.status_code == 413


class TestReverseEndpoint:
    def test_gridref_from_wgs84(self, client):
        resp = client.get("/api/v1/wgs84/gridref", params={"lat": 52.47110652, "lon": -3.68926883, "resolution": 100})
        assert resp.status_code == 200
        data = resp.json()
        assert data["grid_reference"] == "SN853872"
        assert data["resolution"] == 100
        assert data["easting"] == pytest.approx(285350, abs=1)

    def test_cell_corner_from_bng(self, client):
        geo = bng_to_wgs84(285300, 287200)
        resp = client.get("/api/v1/wgs84/gridref", params={"lat": geo.lat, "lon": geo.lon, "resolution": 100})
        assert resp.status_code == 200
        assert resp.json()["grid_reference"] == "SN853872"

    def test_bad_resolution(self, client):
        resp = client.get("/api/v1/wgs84/gridref", params={"lat": 52.47, "lon": -3.69, "resolution": 50})
        assert resp.status_code == 422

    def test_outside_grid(self, client):
        resp = client.get("/api/v1/wgs84/gridref", params={"lat": 40.0, "lon": -3.69})
        assert resp.status_code == 422
