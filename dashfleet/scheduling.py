# dashfleet/scheduling.py
#
# Month-grid projection of next-service dates plus the pending (unscheduled)
# maintenance queue.

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from dashfleet.metrics import priority_for
from dashfleet.synthesis import Vehicle

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class DayCell:
    day: int
    date: date
    vehicles: Tuple[Vehicle, ...]
    is_today: bool

    @property
    def has_vehicles(self) -> bool:
        return bool(self.vehicles)


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    days_in_month: int
    first_weekday_offset: int  # leading blank cells, Sunday-first
    days: Tuple[DayCell, ...]

    def weeks(self) -> List[List[Optional[DayCell]]]:
        """Rows of seven cells; None pads before day 1 and after the last day."""
        cells: List[Optional[DayCell]] = [None] * self.first_weekday_offset + list(self.days)
        while len(cells) % 7:
            cells.append(None)
        return [cells[i : i + 7] for i in range(0, len(cells), 7)]


@dataclass(frozen=True)
class PendingService:
    vehicle: Vehicle
    priority: str


def scheduled_vehicles(vehicles: Iterable[Vehicle]) -> List[Vehicle]:
    return [v for v in vehicles if v.next_service is not None]


def vehicles_by_service_date(vehicles: Iterable[Vehicle]) -> Dict[date, List[Vehicle]]:
    grouped: Dict[date, List[Vehicle]] = defaultdict(list)
    for v in scheduled_vehicles(vehicles):
        grouped[v.next_service].append(v)
    return grouped


def month_grid(year: int, month: int, vehicles: Iterable[Vehicle], today: Optional[date] = None) -> MonthGrid:
    today = today or date.today()
    monday_first, days_in_month = calendar.monthrange(year, month)
    grouped = vehicles_by_service_date(vehicles)

    days = []
    for day in range(1, days_in_month + 1):
        d = date(year, month, day)
        days.append(
            DayCell(
                day=day,
                date=d,
                vehicles=tuple(grouped.get(d, ())),
                is_today=(d == today),
            )
        )

    return MonthGrid(
        year=year,
        month=month,
        days_in_month=days_in_month,
        first_weekday_offset=(monday_first + 1) % 7,
        days=tuple(days),
    )


def select_day(grid: MonthGrid, day: int) -> Optional[Tuple[Vehicle, ...]]:
    """Vehicles due on ``day``, or None to clear the selection."""
    if not 1 <= day <= grid.days_in_month:
        return None
    cell = grid.days[day - 1]
    return cell.vehicles if cell.has_vehicles else None


def pending_services(vehicles: Iterable[Vehicle]) -> List[PendingService]:
    pending = [PendingService(v, priority_for(v.issues)) for v in vehicles if v.issues > 0]
    return sorted(pending, key=lambda p: p.vehicle.issues, reverse=True)
