# dashfleet/synthesis.py
#
# Turns raw dataset rows into Vehicle records.
#
# Health is derived from the spec sheet (range, else battery capacity). The
# next-service date, issue count and maintenance flag are synthetic draws that
# change on every load unless the caller injects a seeded generator.

import io
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, Optional

import pandas as pd
import requests

from dashfleet import settings
from dashfleet.errors import DatasetUnavailableError
from dashfleet.prng import round_half_up

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Optional[str]]

FULL_HEALTH_RANGE_KM = 500.0
FULL_HEALTH_CAPACITY_KWH = 100.0

SERVICE_MIN_DAYS = 7
SERVICE_SPREAD_DAYS = 30
MAX_ISSUES = 3
MAINTENANCE_PROBABILITY = 0.25

VEHICLE_COLUMNS = ["id", "name", "health", "next_service", "issues", "in_maintenance"]


@dataclass(frozen=True)
class Vehicle:
    id: int
    name: str
    health: int
    next_service: date
    issues: int
    in_maintenance: bool = False
    raw: Dict[str, Optional[str]] = field(default_factory=dict, compare=False, repr=False)

    @property
    def next_service_label(self) -> str:
        return self.next_service.isoformat()


# -------------------------------------------------
# Field derivation
# -------------------------------------------------


def parse_number(value: Optional[str]) -> float:
    """Lenient numeric parse: anything missing or non-numeric counts as 0."""
    if value is None:
        return 0.0
    try:
        num = float(str(value).strip())
    except ValueError:
        return 0.0
    if not math.isfinite(num):
        return 0.0
    return num


def compute_health(record: RawRecord) -> int:
    range_km = parse_number(record.get("range_km"))
    if range_km > 0:
        score = round_half_up(min(100.0, range_km / FULL_HEALTH_RANGE_KM * 100.0))
    else:
        cap = parse_number(record.get("battery_capacity_kWh"))
        score = round_half_up(min(100.0, cap / FULL_HEALTH_CAPACITY_KWH * 100.0))
    return max(0, min(100, score))


def _has_text(record: RawRecord, key: str) -> bool:
    value = record.get(key)
    return value is not None and str(value).strip() != ""


def admitted_records(records: Iterable[RawRecord]) -> List[RawRecord]:
    """Rows that become vehicles: brand and model present, first MAX_VEHICLES only."""
    admitted = [r for r in records if _has_text(r, "brand") and _has_text(r, "model")]
    if len(admitted) > settings.MAX_VEHICLES:
        logger.debug("Truncating %d admitted rows to %d", len(admitted), settings.MAX_VEHICLES)
    return admitted[: settings.MAX_VEHICLES]


def synthesize_vehicles(
    records: Iterable[RawRecord],
    today: Optional[date] = None,
    rand: Optional[Callable[[], float]] = None,
) -> List[Vehicle]:
    """
    Build the fleet from dataset rows.

    Rows without a brand or model are dropped; the first MAX_VEHICLES
    admitted rows get ids 1..k in order. ``rand`` defaults to the process
    RNG, so next_service/issues/in_maintenance differ between loads.
    """
    today = today or date.today()
    rand = rand or random.random

    vehicles: List[Vehicle] = []
    for idx, record in enumerate(admitted_records(records)):
        offset = SERVICE_MIN_DAYS + math.floor(rand() * SERVICE_SPREAD_DAYS)
        issues = math.floor(rand() * (MAX_ISSUES + 1))
        in_maintenance = issues > 0 and rand() < MAINTENANCE_PROBABILITY
        vehicles.append(
            Vehicle(
                id=idx + 1,
                name=f"{str(record['brand']).strip()} {str(record['model']).strip()}",
                health=compute_health(record),
                next_service=today + timedelta(days=offset),
                issues=issues,
                in_maintenance=in_maintenance,
                raw=dict(record),
            )
        )
    return vehicles


# -------------------------------------------------
# Data access
# -------------------------------------------------


def fetch_dataset(source: str = settings.DATASET_SOURCE) -> str:
    """
    Pull the raw CSV text from an http(s) URL or a local file path.

    Any failure is re-raised as DatasetUnavailableError so the caller can
    degrade to an empty fleet.
    """
    if source.startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=settings.FETCH_TIMEOUT_SECONDS)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DatasetUnavailableError(f"Error calling dataset source: {exc}") from exc
        return resp.text

    try:
        with open(source, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetUnavailableError(f"Error reading dataset file: {exc}") from exc


def parse_dataset(text: str) -> List[Dict[str, Optional[str]]]:
    """Header-row CSV into one dict per row; blank cells become None."""
    if not text.strip():
        return []
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise DatasetUnavailableError(f"Dataset is not valid CSV: {exc}") from exc

    records = []
    for row in df.to_dict(orient="records"):
        records.append({k: (v.strip() or None) if isinstance(v, str) else None for k, v in row.items()})
    return records


def load_vehicles(
    source: str = settings.DATASET_SOURCE,
    today: Optional[date] = None,
    rand: Optional[Callable[[], float]] = None,
) -> List[Vehicle]:
    """End-to-end loader. Dataset failures are logged and yield no vehicles."""
    try:
        records = parse_dataset(fetch_dataset(source))
    except DatasetUnavailableError:
        logger.exception("Failed to load dataset from %s", source)
        return []

    vehicles = synthesize_vehicles(records, today=today, rand=rand)
    dropped = len(records) - len(vehicles)
    logger.info("Synthesized %d vehicles from %d rows (%d not admitted)", len(vehicles), len(records), dropped)
    return vehicles


def vehicles_frame(vehicles: List[Vehicle]) -> pd.DataFrame:
    if not vehicles:
        return pd.DataFrame(columns=VEHICLE_COLUMNS)
    return pd.DataFrame(
        [
            {
                "id": v.id,
                "name": v.name,
                "health": v.health,
                "next_service": v.next_service_label,
                "issues": v.issues,
                "in_maintenance": v.in_maintenance,
            }
            for v in vehicles
        ],
        columns=VEHICLE_COLUMNS,
    )
