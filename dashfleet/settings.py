# dashfleet/settings.py
#
# Environment-driven configuration shared by the dashboard and the dataset API.

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Where the dashboard pulls the dataset from: an http(s) URL or a local path.
DATASET_SOURCE = os.getenv("DATASET_SOURCE", "http://127.0.0.1:8000/dataset")

# File the dataset API serves.
DATASET_PATH = os.getenv(
    "DATASET_PATH",
    str(PROJECT_ROOT / "data" / "electric_vehicles_spec_2025.csv"),
)

FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "5"))
MAX_VEHICLES = int(os.getenv("MAX_VEHICLES", "200"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
