from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from dashfleet import settings

APP_PATH = str(Path(__file__).resolve().parents[1] / "dashboard" / "app.py")

VIEWS = [
    "Dashboard",
    "All Vehicles",
    "Active Maintenance",
    "Predicted Failures",
    "Maintenance Scheduling",
    "Vehicle History",
]


@pytest.mark.parametrize("view", VIEWS)
def test_views_render_with_empty_fleet(monkeypatch, tmp_path, view):
    monkeypatch.setattr(settings, "DATASET_SOURCE", str(tmp_path / "missing.csv"))
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["view"] = view
    at.run()
    assert not at.exception
    assert at.warning


@pytest.mark.parametrize("view", VIEWS)
def test_views_render_with_bundled_dataset(monkeypatch, view):
    monkeypatch.setattr(settings, "DATASET_SOURCE", settings.DATASET_PATH)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["view"] = view
    at.run()
    assert not at.exception
    assert len(at.session_state["vehicles"]) == 28


def test_vehicle_not_found_state(monkeypatch):
    monkeypatch.setattr(settings, "DATASET_SOURCE", settings.DATASET_PATH)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["view"] = "Vehicle History"
    at.session_state["history_vehicle_id"] = 999
    at.run()
    assert not at.exception
    assert any(t.value == "Vehicle not found" for t in at.title)
