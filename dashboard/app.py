# dashboard/app.py
#
# DashFleet – Fleet Manager Dashboard
#
# Streamlit UI that:
#   - Pulls the EV spec dataset from the dataset API (or a local CSV)
#   - Synthesizes the fleet once per load and keeps it in session state
#   - Shows the dashboard cards plus weekly health / failure trends, each
#     with its own month cursor
#   - Lists vehicles, active maintenance, predicted failures and the
#     scheduling calendar
#   - Opens a per-vehicle maintenance history, carrying the exact issue
#     count shown on the view it was opened from

import re
from datetime import date
from typing import Optional

import pandas as pd
import streamlit as st

from dashfleet import settings
from dashfleet.catalogs import ISSUE_CATALOG
from dashfleet.fleet import (
    SORT_KEYS,
    display_value,
    filter_vehicles,
    find_vehicle,
    maintenance_report,
    summarize_fleet,
)
from dashfleet.logging_config import configure_logging
from dashfleet.metrics import (
    NavigationPayload,
    active_maintenance,
    build_history,
    failure_counts_by_type,
    last_service_date,
    maintenance_payload,
    predict_failures,
    repair_info,
    resolve_pending_issues,
)
from dashfleet.prng import identity_seed
from dashfleet.scheduling import (
    WEEKDAY_LABELS,
    month_grid,
    pending_services,
    scheduled_vehicles,
    select_day,
)
from dashfleet.synthesis import load_vehicles, vehicles_frame
from dashfleet.trends import (
    MonthCursor,
    failure_trend,
    fleet_failure_total,
    health_trend,
    month_rand,
    trend_frame,
)
from dashfleet.vehicle_model import create_vehicle_model

# -------------------------------------------------
# Config
# -------------------------------------------------

PAGE_TITLE = "DashFleet – Fleet Manager"

VIEW_DASHBOARD = "Dashboard"
VIEW_VEHICLES = "All Vehicles"
VIEW_MAINTENANCE = "Active Maintenance"
VIEW_FAILURES = "Predicted Failures"
VIEW_SCHEDULING = "Maintenance Scheduling"
VIEW_HISTORY = "Vehicle History"

VIEWS = [VIEW_DASHBOARD, VIEW_VEHICLES, VIEW_MAINTENANCE, VIEW_FAILURES, VIEW_SCHEDULING, VIEW_HISTORY]

# navigation payload source tag -> view the "Back" button returns to
BACK_TARGETS = {"maintenance": VIEW_MAINTENANCE, "scheduling": VIEW_SCHEDULING, "failures": VIEW_FAILURES}

OVERVIEW_CARDS = 6
PRIORITY_ICONS = {"high": "🔴", "medium": "🟠", "low": "🟡"}

# -------------------------------------------------
# Session state
# -------------------------------------------------

_today = date.today()

SESSION_DEFAULTS = {
    "view": VIEW_DASHBOARD,
    "health_month": MonthCursor.containing(_today),
    "failure_month": MonthCursor.containing(_today),
    "calendar_month": MonthCursor.containing(_today),
    "selected_date": None,
    "history_vehicle_id": None,
    "nav_payload": None,
    "vehicle_models": {},
}

for key, value in SESSION_DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value


# -------------------------------------------------
# Data access
# -------------------------------------------------


def get_vehicles() -> list:
    """Synthesize once per load; every view reads the same list."""
    if "vehicles" not in st.session_state:
        st.session_state["vehicles"] = load_vehicles(settings.DATASET_SOURCE)
    return st.session_state["vehicles"]


def _reload_dataset() -> None:
    st.session_state.pop("vehicles", None)
    st.session_state["vehicle_models"] = {}
    st.session_state["selected_date"] = None


def get_vehicle_model(vehicle):
    """One model handle per vehicle, kept across reruns."""
    models = st.session_state["vehicle_models"]
    if vehicle.id not in models:
        models[vehicle.id] = create_vehicle_model(identity_seed(vehicle.id, vehicle.name, "model"))
    return models[vehicle.id]


# -------------------------------------------------
# Navigation callbacks
# -------------------------------------------------


def _go_to(view: str) -> None:
    st.session_state["view"] = view


def _open_history(vehicle_id: int, payload: Optional[NavigationPayload]) -> None:
    st.session_state["history_vehicle_id"] = vehicle_id
    st.session_state["nav_payload"] = payload
    st.session_state["view"] = VIEW_HISTORY


def _pick_history_vehicle() -> None:
    # picked directly, so there is no displayed count to honour
    st.session_state["history_vehicle_id"] = st.session_state["history_pick"]
    st.session_state["nav_payload"] = None


def _shift_month(key: str, step: int) -> None:
    cursor = st.session_state[key]
    st.session_state[key] = cursor.next() if step > 0 else cursor.previous()
    if key == "calendar_month":
        st.session_state["selected_date"] = None


def _select_date(day: date, has_vehicles: bool) -> None:
    st.session_state["selected_date"] = day if has_vehicles else None


# -------------------------------------------------
# UI helpers
# -------------------------------------------------


def render_sidebar() -> str:
    st.sidebar.title("DashFleet")
    st.sidebar.caption("Predict. Maintain. Deliver.")
    view = st.sidebar.radio("Navigate", VIEWS, key="view")
    st.sidebar.button("Reload dataset", on_click=_reload_dataset)
    st.sidebar.caption(f"Data source: `{settings.DATASET_SOURCE}`")
    return view


def render_month_nav(key: str, prefix: str) -> MonthCursor:
    cursor = st.session_state[key]
    c1, c2, c3 = st.columns([1, 4, 1])
    with c1:
        st.button("←", key=f"{prefix}-prev", on_click=_shift_month, args=(key, -1))
    with c2:
        st.markdown(f"**{cursor.label}**")
    with c3:
        st.button("→", key=f"{prefix}-next", on_click=_shift_month, args=(key, 1))
    return cursor


def render_dashboard(vehicles: list) -> None:
    st.title("Fleet Manager Dashboard")
    summary = summarize_fleet(vehicles)

    c1, c2, c3, c4, c5 = st.columns(5)
    with c1:
        st.metric("Total Vehicles", display_value(summary.total_vehicles))
    with c2:
        st.metric("Active Maintenance", display_value(summary.active_maintenance))
    with c3:
        st.metric("Predicted Failures", display_value(summary.predicted_failures))
    with c4:
        st.metric("Upcoming Services", display_value(summary.upcoming_services))
    with c5:
        st.metric("Avg. Health", display_value(summary.avg_health))

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        st.markdown("### Average Fleet Health")
        cursor = render_month_nav("health_month", "health")
        points = health_trend(summary.avg_health, rand=month_rand(cursor, "health"))
        st.line_chart(trend_frame(points, "health"), height=240)
    with chart_col2:
        st.markdown("### Predicted Failures")
        cursor = render_month_nav("failure_month", "failures")
        points = failure_trend(fleet_failure_total(vehicles), cursor)
        st.bar_chart(trend_frame(points, "failures"), height=240)

    st.markdown("### Failures by area")
    by_type = failure_counts_by_type(predict_failures(vehicles))
    st.bar_chart(
        pd.DataFrame(
            {"area": [ISSUE_CATALOG[t].label for t in by_type], "vehicles": list(by_type.values())}
        ).set_index("area"),
        height=220,
    )

    st.markdown("### Vehicle Status Overview")
    if not vehicles:
        st.info("No vehicles loaded yet.")
    cols = st.columns(3)
    for i, v in enumerate(vehicles[:OVERVIEW_CARDS]):
        with cols[i % 3]:
            with st.container(border=True):
                st.markdown(f"**{v.name}**")
                st.caption(f"Next Service: {v.next_service_label}")
                st.progress(v.health / 100.0, text=f"Health {v.health}%")
                st.caption(f"Issues: {v.issues}")

    report = maintenance_report(vehicles)
    st.download_button(
        "Generate Maintenance Report",
        data=report.to_csv(index=False),
        file_name=f"maintenance_report_{date.today().isoformat()}.csv",
        mime="text/csv",
        disabled=report.empty,
    )


def render_vehicles_list(vehicles: list) -> None:
    st.title("All Vehicles")

    c1, c2, c3 = st.columns([3, 2, 1])
    with c1:
        search = st.text_input("Search by name", key="vl_search")
    with c2:
        sort_key = st.selectbox("Sort by", list(SORT_KEYS), key="vl_sort")
    with c3:
        descending = st.checkbox("Descending", key="vl_desc")

    listed = filter_vehicles(vehicles, search=search, sort_key=sort_key, descending=descending)
    if not listed:
        st.info("No vehicles loaded yet." if not vehicles else "No vehicles match the search.")
        return

    st.dataframe(vehicles_frame(listed), hide_index=True)

    picked = st.selectbox(
        "Open maintenance history",
        [v.id for v in listed],
        format_func=lambda vid: next(v.name for v in listed if v.id == vid) + f" (#{vid})",
        key="vl_pick",
    )
    st.button("View history", on_click=_open_history, args=(picked, None))


def render_active_maintenance(vehicles: list) -> None:
    st.title("Active Maintenance")
    st.caption("Vehicles currently being repaired")

    in_shop = active_maintenance(vehicles)
    st.metric("In maintenance", len(in_shop))
    if not in_shop:
        st.info("No vehicles are currently in maintenance.")
        return

    for v in in_shop:
        info = repair_info(v)
        with st.container(border=True):
            c1, c2, c3, c4, c5 = st.columns([3, 1, 2, 2, 1])
            with c1:
                st.markdown(f"**{v.name}**")
                st.caption(f"ID {v.id} • Next: {v.next_service_label}")
            with c2:
                st.metric("Est. cost", f"${info.cost}")
            with c3:
                st.metric("ETA", info.eta_date.isoformat(), f"{info.eta_days}d", delta_color="off")
            with c4:
                st.metric("Unresolved", info.unresolved_label)
            with c5:
                st.button(
                    "View",
                    key=f"am-view-{v.id}",
                    on_click=_open_history,
                    args=(v.id, maintenance_payload(v, info)),
                )


def render_issue_cards(prediction) -> None:
    for issue_type in prediction.issue_types:
        issue = ISSUE_CATALOG[issue_type]
        with st.container(border=True):
            st.markdown(f"⚠ **{issue.label}** · severity `{issue.severity}`")
            st.caption(issue.description)
            st.markdown(f"**Actionable Insight:** {issue.insight}")


def render_vehicle_model(vehicle, prediction) -> None:
    model = get_vehicle_model(vehicle)
    model.set_highlighted_areas(prediction.issue_types)

    st.markdown("#### Problem visualization")
    highlighted = model.highlighted_components()
    st.caption("Highlighted: " + (", ".join(highlighted) if highlighted else "none"))
    st.bar_chart(model.health_frame().set_index("component")[["health"]], height=260)

    with st.form(key=f"health-{vehicle.id}"):
        c1, c2 = st.columns([3, 2])
        with c1:
            target = st.text_input("Component (exact name, or regex with 're:' prefix)", value="re:^Wheel")
        with c2:
            value = st.slider("Health %", 0, 100, 80)
        if st.form_submit_button("Update component health"):
            pattern = re.compile(target[3:]) if target.startswith("re:") else target
            updated = model.set_component_health(pattern, value)
            if updated:
                st.success(f"Updated {updated} component(s) to {value}%.")
            else:
                st.warning(f"No component matches {target!r}.")


def render_predicted_failures(vehicles: list) -> None:
    st.title("Predicted Failures")
    st.caption("Vehicles requiring attention")

    predictions = predict_failures(vehicles)
    st.metric("Predicted failures", len(predictions))
    if not predictions:
        st.info("No predicted failures at this time.")
        return

    st.dataframe(
        pd.DataFrame(
            [
                {
                    "id": p.vehicle.id,
                    "name": p.vehicle.name,
                    "health": p.vehicle.health,
                    "next_service": p.vehicle.next_service_label,
                    "issues": p.vehicle.issues,
                    "severity": p.severity,
                    "areas": ", ".join(ISSUE_CATALOG[t].label for t in p.issue_types),
                }
                for p in predictions
            ]
        ),
        hide_index=True,
    )

    by_id = {p.vehicle.id: p for p in predictions}
    picked = st.selectbox(
        "Inspect vehicle",
        [None] + list(by_id),
        format_func=lambda vid: "—" if vid is None else f"{by_id[vid].vehicle.name} (#{vid})",
        key="pf_pick",
    )
    if picked is None:
        return

    prediction = by_id[picked]
    st.markdown(f"### {prediction.vehicle.name}")
    render_issue_cards(prediction)
    render_vehicle_model(prediction.vehicle, prediction)
    st.button(
        "View maintenance history",
        on_click=_open_history,
        args=(
            picked,
            NavigationPayload("failures", prediction.vehicle.issues, prediction.vehicle.name),
        ),
    )


def render_calendar(vehicles: list) -> None:
    cursor = render_month_nav("calendar_month", "calendar")
    grid = month_grid(cursor.year, cursor.month, vehicles)

    header = st.columns(7)
    for col, label in zip(header, WEEKDAY_LABELS):
        col.markdown(f"**{label}**")

    for week in grid.weeks():
        cols = st.columns(7)
        for col, cell in zip(cols, week):
            if cell is None:
                continue
            label = f"{cell.day}" + (f" • {len(cell.vehicles)}" if cell.has_vehicles else "")
            col.button(
                label,
                key=f"cal-{cell.date.isoformat()}",
                type="primary" if cell.is_today else "secondary",
                on_click=_select_date,
                args=(cell.date, cell.has_vehicles),
            )

    selected = st.session_state["selected_date"]
    if selected is None or (selected.year, selected.month) != (grid.year, grid.month):
        return
    due = select_day(grid, selected.day)
    if not due:
        return
    st.markdown(f"#### Scheduled for {selected.strftime('%B')} {selected.day}, {selected.year}")
    for v in due:
        st.markdown(f"🚛 **{v.name}** — ID: {v.id} • Health: {v.health}%")


def render_scheduling(vehicles: list) -> None:
    st.title("Maintenance Scheduling")
    st.caption("Schedule and manage vehicle maintenance")

    pending = pending_services(vehicles)
    c1, c2 = st.columns(2)
    with c1:
        st.metric("Scheduled", len(scheduled_vehicles(vehicles)))
    with c2:
        st.metric("Pending", len(pending))

    cal_col, pending_col = st.columns([3, 2])
    with cal_col:
        render_calendar(vehicles)

    with pending_col:
        st.markdown("### Pending Maintenance")
        st.caption("Vehicles requiring scheduling (sorted by priority)")
        if not pending:
            st.info("No pending maintenance at this time.")
            return
        for item in pending:
            v = item.vehicle
            last = last_service_date(v)
            with st.container(border=True):
                st.markdown(f"{PRIORITY_ICONS[item.priority]} **{item.priority.upper()}** · {v.name}")
                st.caption(f"ID: {v.id} • Health: {v.health}%")
                st.caption(
                    f"{v.issues} issue{'s' if v.issues != 1 else ''} detected • "
                    f"Last service: {last.isoformat() if last else '—'}"
                )
                st.button(
                    "Schedule Maintenance",
                    key=f"ms-open-{v.id}",
                    on_click=_open_history,
                    args=(v.id, NavigationPayload("scheduling", v.issues, v.name)),
                )


def render_vehicle_history(vehicles: list) -> None:
    payload = st.session_state["nav_payload"]
    back_view = BACK_TARGETS.get(payload.source_view, VIEW_VEHICLES) if payload else VIEW_VEHICLES

    if vehicles:
        names = {v.id: v.name for v in vehicles}
        if st.session_state["history_vehicle_id"] is None:
            st.session_state["history_vehicle_id"] = vehicles[0].id
        current = st.session_state["history_vehicle_id"]
        # a stale id keeps the picker on the first vehicle and shows "not found"
        st.session_state["history_pick"] = current if current in names else vehicles[0].id
        st.sidebar.selectbox(
            "Vehicle",
            list(names),
            format_func=lambda vid: f"#{vid} {names[vid]}",
            key="history_pick",
            on_change=_pick_history_vehicle,
        )

    vehicle = find_vehicle(vehicles, st.session_state["history_vehicle_id"])
    if vehicle is None:
        st.title("Vehicle not found")
        st.button("← Back", on_click=_go_to, args=(back_view,))
        return

    pending_count = resolve_pending_issues(vehicle, payload)
    history = build_history(vehicle.id, vehicle.name, pending_count)

    st.title(f"{vehicle.name} — Maintenance History")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("ID", vehicle.id)
    with c2:
        st.metric("Health", f"{vehicle.health}%")
    with c3:
        st.metric("Unresolved issues", pending_count)
    with c4:
        st.metric("Next Service", vehicle.next_service_label)

    if not history:
        st.info("No maintenance history recorded for this vehicle yet.")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "date": e.date.isoformat(),
                        "service": e.service_type.value,
                        "status": e.status,
                        "cost": e.cost_label,
                        "notes": e.notes,
                    }
                    for e in history
                ]
            ),
            hide_index=True,
        )

    st.button("← Back", on_click=_go_to, args=(back_view,))


# -------------------------------------------------
# Main layout
# -------------------------------------------------

RENDERERS = {
    VIEW_DASHBOARD: render_dashboard,
    VIEW_VEHICLES: render_vehicles_list,
    VIEW_MAINTENANCE: render_active_maintenance,
    VIEW_FAILURES: render_predicted_failures,
    VIEW_SCHEDULING: render_scheduling,
    VIEW_HISTORY: render_vehicle_history,
}


def main() -> None:
    st.set_page_config(page_title=PAGE_TITLE, page_icon="🚛", layout="wide")
    configure_logging(settings.LOG_LEVEL)

    vehicles = get_vehicles()
    view = render_sidebar()

    if not vehicles:
        st.warning(
            "No vehicles loaded. Check that the dataset API is running "
            f"and `{settings.DATASET_SOURCE}` is reachable, then reload."
        )

    RENDERERS[view](vehicles)


if __name__ == "__main__":
    main()
