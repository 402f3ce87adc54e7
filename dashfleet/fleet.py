# dashfleet/fleet.py
#
# Fleet-wide summaries, vehicle-list queries and the maintenance report.

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from dashfleet.metrics import last_service_date, priority_for, repair_info
from dashfleet.synthesis import Vehicle

UPCOMING_SERVICE_DAYS = 14
PLACEHOLDER = "—"

SORT_KEYS = {
    "id": lambda v: v.id,
    "name": lambda v: v.name.lower(),
    "health": lambda v: v.health,
    "next_service": lambda v: v.next_service,
    "issues": lambda v: v.issues,
}

REPORT_COLUMNS = [
    "id",
    "name",
    "health",
    "issues",
    "priority",
    "in_maintenance",
    "est_cost_usd",
    "eta_date",
    "next_service",
    "last_service",
]


@dataclass(frozen=True)
class FleetSummary:
    total_vehicles: int
    active_maintenance: int
    predicted_failures: int
    upcoming_services: int
    avg_health: Optional[float]


def summarize_fleet(vehicles: Iterable[Vehicle], today: Optional[date] = None) -> FleetSummary:
    today = today or date.today()
    vehicles = list(vehicles)
    horizon = today + timedelta(days=UPCOMING_SERVICE_DAYS)

    avg_health = float(np.mean([v.health for v in vehicles])) if vehicles else None
    return FleetSummary(
        total_vehicles=len(vehicles),
        active_maintenance=sum(1 for v in vehicles if v.in_maintenance),
        predicted_failures=sum(1 for v in vehicles if v.issues > 0),
        upcoming_services=sum(1 for v in vehicles if today <= v.next_service <= horizon),
        avg_health=avg_health,
    )


def display_value(value) -> str:
    """Card text: a dash stands in for a missing or zero figure."""
    if value is None or value == 0:
        return PLACEHOLDER
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def filter_vehicles(
    vehicles: Iterable[Vehicle],
    search: str = "",
    sort_key: str = "id",
    descending: bool = False,
) -> List[Vehicle]:
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key!r}")
    needle = search.strip().lower()
    matched = [v for v in vehicles if needle in v.name.lower()]
    return sorted(matched, key=SORT_KEYS[sort_key], reverse=descending)


def find_vehicle(vehicles: Iterable[Vehicle], vehicle_id) -> Optional[Vehicle]:
    """Lookup by id; stale or malformed ids give None."""
    try:
        wanted = int(vehicle_id)
    except (TypeError, ValueError):
        return None
    for v in vehicles:
        if v.id == wanted:
            return v
    return None


def maintenance_report(vehicles: Iterable[Vehicle], today: Optional[date] = None) -> pd.DataFrame:
    """One row per vehicle that has issues or is in the shop, worst first."""
    today = today or date.today()
    rows = []
    for v in vehicles:
        if v.issues == 0 and not v.in_maintenance:
            continue
        info = repair_info(v, today=today)
        last = last_service_date(v, today=today)
        rows.append(
            {
                "id": v.id,
                "name": v.name,
                "health": v.health,
                "issues": v.issues,
                "priority": priority_for(v.issues) or "none",
                "in_maintenance": v.in_maintenance,
                "est_cost_usd": info.cost,
                "eta_date": info.eta_date.isoformat(),
                "next_service": v.next_service_label,
                "last_service": last.isoformat() if last else "",
            }
        )

    df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    if df.empty:
        return df
    return df.sort_values(["issues", "health", "id"], ascending=[False, True, True]).reset_index(drop=True)
