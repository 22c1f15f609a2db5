from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Ensure project root on sys.path for module imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Header text differs from the canonical names on purpose: columns bind by position.
CSV_HEADER = [
    "Season",
    "Month",
    "Hour",
    "Holiday",
    "Weekday",
    "WorkingDay",
    "WeatherCondition",
    "Temperature",
    "Humidity",
    "Windspeed",
    "RentalType",
]


def make_rides(n: int = 240, seed: int = 0) -> pd.DataFrame:
    """Reproducible rides where long-term rentals follow days off and warm midday hours."""
    rng = np.random.default_rng(seed)
    month = rng.integers(1, 13, size=n)
    weekday = rng.integers(0, 7, size=n)
    holiday = (rng.random(n) < 0.05).astype(int)
    working_day = ((weekday >= 1) & (weekday <= 5) & (holiday == 0)).astype(int)
    hour = rng.integers(0, 24, size=n)
    temperature = rng.uniform(0.0, 35.0, size=n).round(1)

    long_term = (working_day == 0) | ((hour >= 10) & (hour <= 16) & (temperature > 20.0))

    return pd.DataFrame(
        {
            "Season": (month - 1) // 3 + 1,
            "Month": month,
            "Hour": hour,
            "Holiday": holiday,
            "Weekday": weekday,
            "WorkingDay": working_day,
            "WeatherCondition": rng.integers(1, 4, size=n),
            "Temperature": temperature,
            "Humidity": rng.uniform(20.0, 100.0, size=n).round(1),
            "Windspeed": rng.uniform(0.0, 30.0, size=n).round(1),
            "RentalType": long_term.astype(int),
        },
        columns=CSV_HEADER,
    )


@pytest.fixture(autouse=True)
def _clear_dataset_cache():
    import bike_rental.data.rental_dataset as rental_dataset

    rental_dataset._read_rental_csv.cache_clear()
    yield
    rental_dataset._read_rental_csv.cache_clear()


@pytest.fixture()
def rides_df() -> pd.DataFrame:
    return make_rides()


@pytest.fixture()
def rides_csv(tmp_path: Path, rides_df: pd.DataFrame) -> Path:
    path = tmp_path / "bike_sharing.csv"
    rides_df.to_csv(path, index=False)
    return path


@pytest.fixture()
def artifacts_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirects default artifact locations into tmp_path."""
    import bike_rental.model.history as history
    import bike_rental.model.store as store

    target = tmp_path / "artifacts" / "models"
    monkeypatch.setattr(store, "ARTIFACTS_DIR", target, raising=True)
    monkeypatch.setattr(history, "HISTORY_PATH", target / "history.json", raising=True)
    return target
