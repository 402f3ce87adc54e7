"""
DashFleet - Dataset API

FastAPI service that:
- Serves the EV specification dataset as CSV at GET /dataset
- Summarizes it (row count, admitted rows, columns) at GET /dataset/summary

The dashboard fetches /dataset once per load and derives everything else
client-side, so this service stays a thin static-file host.
"""

import logging
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from dashfleet import settings
from dashfleet.errors import DatasetUnavailableError
from dashfleet.logging_config import configure_logging
from dashfleet.synthesis import admitted_records, fetch_dataset, parse_dataset

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="DashFleet Dataset API")

# -------------------------------------------------------------------
# Data models
# -------------------------------------------------------------------


class DatasetSummary(BaseModel):
    rows: int = Field(..., description="Data rows in the file (header excluded)")
    admitted: int = Field(..., description="Rows that become vehicles (brand + model, capped)")
    columns: List[str]


# -------------------------------------------------------------------
# Helper functions
# -------------------------------------------------------------------


def _dataset_path() -> Path:
    return Path(settings.DATASET_PATH)


def _read_dataset() -> str:
    path = _dataset_path()
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Dataset not found at {path}")
    try:
        return fetch_dataset(str(path))
    except DatasetUnavailableError as exc:
        logger.error("Dataset read failed: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# -------------------------------------------------------------------
# Dataset endpoints
# -------------------------------------------------------------------


@app.get("/dataset", response_class=PlainTextResponse)
def get_dataset():
    return PlainTextResponse(_read_dataset(), media_type="text/csv")


@app.get("/dataset/summary", response_model=DatasetSummary)
def get_dataset_summary():
    """
    Row counts as the dashboard will see them. ``admitted`` applies the
    same brand/model filter and cap as vehicle synthesis, without drawing
    any of the random vehicle fields.
    """
    try:
        records = parse_dataset(_read_dataset())
    except DatasetUnavailableError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    columns = list(records[0].keys()) if records else []
    admitted = len(admitted_records(records))
    return DatasetSummary(rows=len(records), admitted=admitted, columns=columns)
