import re

import pytest

from dashfleet.catalogs import IssueType
from dashfleet.errors import UnknownCatalogKeyError
from dashfleet.vehicle_model import WHEEL_NAMES, create_vehicle_model


def test_handles_do_not_share_state():
    a = create_vehicle_model(seed=1)
    b = create_vehicle_model(seed=1)
    a.set_component_health("Body", 10)
    assert a.component_health("Body") == 10
    assert b.component_health("Body") == 86


def test_wheel_health_seeded():
    a = create_vehicle_model(seed=99)
    b = create_vehicle_model(seed=99)
    for name in WHEEL_NAMES:
        assert a.component_health(name) == b.component_health(name)
        assert 70 <= a.component_health(name) <= 94


def test_set_highlighted_areas_replaces_previous():
    model = create_vehicle_model()
    model.set_highlighted_areas(["tires", IssueType.COOLING])
    assert model.highlighted_areas == {IssueType.TIRES, IssueType.COOLING}
    assert set(model.highlighted_components()) == set(WHEEL_NAMES) | {"Radiator"}

    model.set_highlighted_areas([IssueType.BRAKES])
    assert model.highlighted_components() == ["Brake Assembly"]

    model.set_highlighted_areas([])
    assert model.highlighted_components() == []


def test_unknown_area_is_rejected():
    model = create_vehicle_model()
    with pytest.raises(UnknownCatalogKeyError):
        model.set_highlighted_areas(["engine"])


def test_set_component_health_by_name_and_pattern():
    model = create_vehicle_model()
    assert model.set_component_health(re.compile(r"^Wheel"), 42) == 4
    assert all(model.component_health(n) == 42 for n in WHEEL_NAMES)
    assert model.set_component_health("Roof", 150) == 1
    assert model.component_health("Roof") == 100
    assert model.set_component_health("Spoiler", 50) == 0


def test_health_frame_lists_every_component():
    model = create_vehicle_model(seed=5)
    model.set_highlighted_areas(["battery"])
    df = model.health_frame()
    assert list(df.columns) == ["component", "health", "highlighted"]
    assert df.loc[df["component"] == "Battery Pack", "highlighted"].item()
