import random
from datetime import date

import pytest

from dashfleet.synthesis import Vehicle, synthesize_vehicles

TODAY = date(2026, 10, 17)


def make_vehicle(vid: int = 1, name: str = "Acme X", issues: int = 0, health: int = 80,
                 next_service: date = date(2026, 10, 30), in_maintenance: bool = False) -> Vehicle:
    return Vehicle(
        id=vid,
        name=name,
        health=health,
        next_service=next_service,
        issues=issues,
        in_maintenance=in_maintenance,
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def raw_rows():
    return [
        {"brand": "Acme", "model": "X", "range_km": "250"},
        {"brand": "", "model": "Y"},
        {"brand": "Zeta", "model": "Z", "battery_capacity_kWh": "50"},
    ]


@pytest.fixture
def fleet(today):
    rows = [
        {"brand": f"Brand{i}", "model": f"M{i}", "range_km": str(100 + 20 * i)}
        for i in range(40)
    ]
    return synthesize_vehicles(rows, today=today, rand=random.Random(42).random)


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "vehicles.csv"
    path.write_text(
        "brand,model,range_km,battery_capacity_kWh\n"
        "Acme,X,250,\n"
        ",Y,300,60\n"
        "Zeta,Z,,50\n"
        "Nova,Q,abc,xyz\n",
        encoding="utf-8",
    )
    return path
