from datetime import timedelta

import pytest

from dashfleet.catalogs import IssueType, ServiceType, service_meta
from dashfleet.metrics import (
    COMPLETED,
    PENDING,
    NavigationPayload,
    RepairOverrides,
    active_maintenance,
    assign_issue_types,
    build_history,
    failure_counts_by_type,
    last_service_date,
    maintenance_payload,
    predict_failures,
    priority_for,
    repair_info,
    resolve_pending_issues,
    severity_badge,
)

from conftest import make_vehicle


# -------------------------------------------------
# Repair info
# -------------------------------------------------


def test_repair_info_defaults_are_stable_per_vehicle(today):
    v = make_vehicle(7, "Acme X", issues=3, in_maintenance=True)
    first = repair_info(v, today=today)
    assert first == repair_info(v, today=today)
    assert 50 <= first.cost <= 1000
    assert 1 <= first.eta_days <= 10
    assert first.eta_date == today + timedelta(days=first.eta_days)
    assert first.unresolved == 2


def test_repair_overrides_take_precedence_field_by_field(today):
    v = make_vehicle(7, "Acme X", issues=3, in_maintenance=True)
    base = repair_info(v, today=today)

    info = repair_info(v, today=today, overrides=RepairOverrides(cost=999))
    assert info.cost == 999
    assert info.eta_days == base.eta_days

    info = repair_info(v, today=today, overrides=RepairOverrides(eta_days=4, unresolved=0))
    assert info.cost == base.cost
    assert info.eta_date == today + timedelta(days=4)
    assert info.unresolved == 0
    assert info.unresolved_label == "None"


def test_unresolved_never_negative(today):
    assert repair_info(make_vehicle(issues=0), today=today).unresolved == 0
    assert repair_info(make_vehicle(issues=1), today=today).unresolved == 0
    assert repair_info(make_vehicle(issues=2), today=today).unresolved_label == "1 issue"
    assert repair_info(make_vehicle(issues=3), today=today).unresolved_label == "2 issues"


def test_active_maintenance_filters_flag():
    vehicles = [make_vehicle(1, issues=1, in_maintenance=True), make_vehicle(2, issues=2)]
    assert [v.id for v in active_maintenance(vehicles)] == [1]


# -------------------------------------------------
# Priority & predicted failures
# -------------------------------------------------


@pytest.mark.parametrize("issues,priority,badge", [(1, "low", "medium"), (2, "medium", "high"), (3, "high", "critical")])
def test_priority_and_severity_bands(issues, priority, badge):
    assert priority_for(issues) == priority
    assert severity_badge(issues) == badge


def test_zero_issues_has_no_priority():
    assert priority_for(0) is None


def test_assign_issue_types_distinct_and_stable():
    for issues in range(4):
        v = make_vehicle(5, "Zeta Z", issues=issues)
        types = assign_issue_types(v)
        assert len(types) == min(issues, 3)
        assert len(set(types)) == len(types)
        assert all(isinstance(t, IssueType) for t in types)
        assert types == assign_issue_types(v)


def test_predict_failures_skips_healthy_vehicles():
    vehicles = [make_vehicle(1, issues=0), make_vehicle(2, "B", issues=2), make_vehicle(3, "C", issues=3)]
    predictions = predict_failures(vehicles)
    assert [p.vehicle.id for p in predictions] == [2, 3]
    assert [p.severity for p in predictions] == ["high", "critical"]

    counts = failure_counts_by_type(predictions)
    assert list(counts) == list(IssueType)
    assert sum(counts.values()) == 5


def test_predict_failures_empty_fleet():
    assert predict_failures([]) == []
    assert sum(failure_counts_by_type([]).values()) == 0


# -------------------------------------------------
# History
# -------------------------------------------------


def test_history_is_reproducible(today):
    first = build_history(7, "Acme X", 2, today=today)
    second = build_history(7, "Acme X", 2, today=today)
    assert first == second
    assert [e.status for e in first] == [PENDING, PENDING, COMPLETED, COMPLETED]


@pytest.mark.parametrize("pending", [0, 1, 2, 3, 5, 8, 9, 10, 12])
def test_history_row_counts_and_disjoint_types(pending, today):
    rows = build_history(42, "Nova Q", pending, today=today)
    pending_rows = [e for e in rows if e.status == PENDING]
    completed_rows = [e for e in rows if e.status == COMPLETED]

    expected_pending = min(pending, 10)
    expected_completed = min(max(2, 3 - pending), 10 - expected_pending)
    assert len(pending_rows) == expected_pending
    assert len(completed_rows) == expected_completed

    pending_types = {e.service_type for e in pending_rows}
    assert len(pending_types) == expected_pending
    assert pending_types.isdisjoint({e.service_type for e in completed_rows})


def test_history_dates_costs_and_order(today):
    rows = build_history(3, "Volt V", 3, today=today)
    dates = [e.date for e in rows]
    assert dates == sorted(dates, reverse=True)

    pending_dates = sorted((e.date for e in rows if e.status == PENDING), reverse=True)
    assert pending_dates == [today - timedelta(days=7 * (i + 1)) for i in range(3)]
    completed_dates = sorted((e.date for e in rows if e.status == COMPLETED), reverse=True)
    assert completed_dates == [today - timedelta(days=30 * (i + 2) + 5) for i in range(2)]

    for e in rows:
        meta = service_meta(e.service_type)
        lo, hi = meta.cost_range
        assert lo <= e.cost <= hi
        assert e.notes in meta.notes
        assert isinstance(e.service_type, ServiceType)


def test_history_matches_reference_rows(today):
    rows = build_history(7, "Acme X", 2, today=today)
    assert [(e.date, e.service_type, e.status, e.cost, e.notes) for e in rows] == [
        (today - timedelta(days=7), ServiceType.CHARGING_PORT, PENDING, 129, "Connector clean & reseat"),
        (today - timedelta(days=14), ServiceType.SUSPENSION_INSPECTION, PENDING, 125, "Bushing check"),
        (today - timedelta(days=65), ServiceType.HVAC_SERVICE, COMPLETED, 200, "Heat pump efficiency test"),
        (today - timedelta(days=95), ServiceType.HV_POWER_ELECTRONICS, COMPLETED, 512, "IGBT check"),
    ]


def test_history_depends_on_pending_count(today):
    a = build_history(7, "Acme X", 1, today=today)
    b = build_history(7, "Acme X", 2, today=today)
    assert len([e for e in a if e.status == PENDING]) == 1
    assert len([e for e in b if e.status == PENDING]) == 2


def test_history_negative_pending_treated_as_zero(today):
    assert build_history(1, "A", -3, today=today) == build_history(1, "A", 0, today=today)


def test_last_service_date_is_latest_completed(today):
    v = make_vehicle(7, "Acme X", issues=2)
    assert last_service_date(v, today=today) == today - timedelta(days=65)


# -------------------------------------------------
# Navigation payload
# -------------------------------------------------


def test_payload_count_is_used_verbatim(today):
    v = make_vehicle(7, "Acme X", issues=3, in_maintenance=True)
    info = repair_info(v, today=today)
    payload = maintenance_payload(v, info)
    assert payload == NavigationPayload("maintenance", 2, "Acme X")
    assert resolve_pending_issues(v, payload) == 2

    history = build_history(v.id, v.name, resolve_pending_issues(v, payload), today=today)
    assert len([e for e in history if e.status == PENDING]) == info.unresolved


def test_missing_payload_falls_back_to_vehicle():
    v = make_vehicle(issues=3)
    assert resolve_pending_issues(v) == 3
    assert resolve_pending_issues(v, NavigationPayload("maintenance", 0, v.name)) == 0
