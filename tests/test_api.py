from fastapi.testclient import TestClient

from dashfleet import settings

from api.api import app


def test_dataset_served_as_csv(monkeypatch, sample_csv):
    monkeypatch.setattr(settings, "DATASET_PATH", str(sample_csv))
    with TestClient(app) as client:
        resp = client.get("/dataset")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.text.startswith("brand,model,range_km")


def test_dataset_summary(monkeypatch, sample_csv):
    monkeypatch.setattr(settings, "DATASET_PATH", str(sample_csv))
    with TestClient(app) as client:
        resp = client.get("/dataset/summary")
        assert resp.status_code == 200
        body = resp.json()
        assert body["rows"] == 4
        assert body["admitted"] == 3
        assert body["columns"] == ["brand", "model", "range_km", "battery_capacity_kWh"]


def test_missing_dataset_is_404(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "DATASET_PATH", str(tmp_path / "nope.csv"))
    with TestClient(app) as client:
        assert client.get("/dataset").status_code == 404
        assert client.get("/dataset/summary").status_code == 404


def test_bundled_dataset_loads():
    with TestClient(app) as client:
        body = client.get("/dataset/summary").json()
        assert body["rows"] == 30
        assert body["admitted"] == 28


def test_undecodable_dataset_is_422(monkeypatch, tmp_path):
    path = tmp_path / "latin1.csv"
    path.write_bytes(b"brand,model,range_km\nCaf\xe9,X,300\n")
    monkeypatch.setattr(settings, "DATASET_PATH", str(path))
    with TestClient(app) as client:
        assert client.get("/dataset").status_code == 422
        assert client.get("/dataset/summary").status_code == 422
