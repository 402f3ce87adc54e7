"""
Derived per-vehicle metrics.

Nothing here is stored on the Vehicle; every value is recomputed on demand.
Random-looking values are drawn from streams seeded by the vehicle's identity
(id + name), so the same vehicle shows the same numbers on every rerun and on
every view that derives them.
"""

import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from dashfleet.catalogs import IssueType, ServiceType, service_meta
from dashfleet.prng import (
    hash_to_seed,
    identity_seed,
    prng,
    rand_between,
    round_half_up,
    shuffle_deterministic,
)
from dashfleet.synthesis import Vehicle

MAX_ISSUE_TYPES = 3
MIN_COMPLETED_EVENTS = 2

PENDING = "Pending"
COMPLETED = "Completed"


# -------------------------------------------------
# Repair info (active maintenance)
# -------------------------------------------------


@dataclass(frozen=True)
class RepairOverrides:
    """Caller-supplied values; a None field means "compute the default"."""

    cost: Optional[int] = None
    eta_days: Optional[int] = None
    unresolved: Optional[int] = None


@dataclass(frozen=True)
class RepairInfo:
    cost: int
    eta_days: int
    eta_date: date
    unresolved: int

    @property
    def unresolved_label(self) -> str:
        if self.unresolved <= 0:
            return "None"
        return f"{self.unresolved} issue{'s' if self.unresolved > 1 else ''}"


def repair_info(
    vehicle: Vehicle,
    today: Optional[date] = None,
    overrides: Optional[RepairOverrides] = None,
) -> RepairInfo:
    today = today or date.today()
    overrides = overrides or RepairOverrides()

    # both draws always happen so overriding one field never shifts the other
    rand = prng(identity_seed(vehicle.id, vehicle.name, "repair"))
    default_cost = round_half_up(50 + rand() * 950)
    default_eta = max(1, round_half_up(rand() * 10))

    cost = overrides.cost if overrides.cost is not None else default_cost
    eta_days = overrides.eta_days if overrides.eta_days is not None else default_eta
    if overrides.unresolved is not None:
        unresolved = overrides.unresolved
    else:
        unresolved = max(0, vehicle.issues - 1)

    return RepairInfo(
        cost=cost,
        eta_days=eta_days,
        eta_date=today + timedelta(days=eta_days),
        unresolved=unresolved,
    )


def active_maintenance(vehicles: Iterable[Vehicle]) -> List[Vehicle]:
    return [v for v in vehicles if v.in_maintenance]


# -------------------------------------------------
# Priority & severity
# -------------------------------------------------


def priority_for(issues: int) -> Optional[str]:
    if issues >= 3:
        return "high"
    if issues == 2:
        return "medium"
    if issues == 1:
        return "low"
    return None


def severity_badge(issues: int) -> str:
    if issues == 1:
        return "medium"
    if issues == 2:
        return "high"
    return "critical"


# -------------------------------------------------
# Predicted failures
# -------------------------------------------------


@dataclass(frozen=True)
class FailurePrediction:
    vehicle: Vehicle
    issue_types: Tuple[IssueType, ...]

    @property
    def severity(self) -> str:
        return severity_badge(self.vehicle.issues)


def assign_issue_types(vehicle: Vehicle) -> Tuple[IssueType, ...]:
    count = min(max(vehicle.issues, 0), MAX_ISSUE_TYPES)
    if count == 0:
        return ()
    shuffled = shuffle_deterministic(list(IssueType), identity_seed(vehicle.id, vehicle.name, "issues"))
    return tuple(shuffled[:count])


def predict_failures(vehicles: Iterable[Vehicle]) -> List[FailurePrediction]:
    return [
        FailurePrediction(vehicle=v, issue_types=assign_issue_types(v))
        for v in vehicles
        if v.issues > 0
    ]


def failure_counts_by_type(predictions: Iterable[FailurePrediction]) -> Dict[IssueType, int]:
    """How many vehicles are predicted to fail in each area (catalog order)."""
    counts = Counter(t for p in predictions for t in p.issue_types)
    return {t: counts.get(t, 0) for t in IssueType}


# -------------------------------------------------
# Maintenance history
# -------------------------------------------------


@dataclass(frozen=True)
class HistoryEvent:
    date: date
    service_type: ServiceType
    status: str
    cost: Optional[int]
    notes: str

    @property
    def cost_label(self) -> str:
        return f"${self.cost}" if self.cost is not None else "—"


def _history_event(rand, service_type: ServiceType, status: str, when: date) -> HistoryEvent:
    meta = service_meta(service_type)
    note = meta.notes[math.floor(rand() * len(meta.notes))]
    lo, hi = meta.cost_range
    cost = rand_between(rand, lo, hi)
    return HistoryEvent(date=when, service_type=service_type, status=status, cost=cost, notes=note)


def build_history(
    vehicle_id: int,
    vehicle_name: str,
    pending_issues: int,
    today: Optional[date] = None,
) -> List[HistoryEvent]:
    """
    Maintenance log for one vehicle, newest first.

    Exactly min(pending_issues, 10) Pending rows with distinct service types,
    one week apart, followed by max(2, 3 - pending_issues) older Completed
    rows drawn from the unused types. The output depends only on the inputs:
    the same (id, name, pending_issues) always yields the same rows.
    """
    today = today or date.today()
    pending_issues = max(0, int(pending_issues))

    seed = (hash_to_seed(f"{vehicle_id}|{vehicle_name}") ^ pending_issues) & 0xFFFFFFFF
    rand = prng(seed)
    shuffled = shuffle_deterministic(list(ServiceType), seed)

    pending_types = shuffled[: min(pending_issues, len(shuffled))]
    rows = [
        _history_event(rand, t, PENDING, today - timedelta(days=7 * (i + 1)))
        for i, t in enumerate(pending_types)
    ]

    remaining = [t for t in shuffled if t not in pending_types]
    older_count = max(MIN_COMPLETED_EVENTS, 3 - pending_issues)
    for i, t in enumerate(remaining[:older_count]):
        rows.append(_history_event(rand, t, COMPLETED, today - timedelta(days=30 * (i + 2) + 5)))

    rows.sort(key=lambda e: e.date, reverse=True)
    return rows


def last_service_date(vehicle: Vehicle, today: Optional[date] = None) -> Optional[date]:
    completed = [e.date for e in build_history(vehicle.id, vehicle.name, vehicle.issues, today) if e.status == COMPLETED]
    return max(completed) if completed else None


# -------------------------------------------------
# Cross-view navigation
# -------------------------------------------------


@dataclass(frozen=True)
class NavigationPayload:
    source_view: str
    issues: int
    vehicle_name: str


def maintenance_payload(vehicle: Vehicle, info: RepairInfo) -> NavigationPayload:
    """Carry the unresolved count exactly as the maintenance view shows it."""
    return NavigationPayload(source_view="maintenance", issues=info.unresolved, vehicle_name=vehicle.name)


def resolve_pending_issues(vehicle: Vehicle, payload: Optional[NavigationPayload] = None) -> int:
    if payload is not None:
        return int(payload.issues)
    return vehicle.issues
