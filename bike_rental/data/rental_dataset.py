from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import pandas as pd

from bike_rental.features.schema import (
    CATEGORICAL_COLUMNS,
    CSV_COLUMNS,
    FEATURE_COLUMNS,
    NUMERIC_COLUMNS,
    TARGET_COLUMN,
)
from bike_rental.schemas.rental import DEFAULT_DATA_PATH, BikeRentalRow

logger = logging.getLogger(__name__)

_TRUE_LABELS = {"1", "1.0", "true"}
_FALSE_LABELS = {"0", "0.0", "false"}


def _default_dataset_path() -> Path:
    return DEFAULT_DATA_PATH


def _coerce_label(values: pd.Series) -> pd.Series:
    if pd.api.types.is_bool_dtype(values):
        return values.astype(bool)

    normalized = values.astype(str).str.strip().str.lower()
    invalid = ~normalized.isin(_TRUE_LABELS | _FALSE_LABELS)
    if invalid.any():
        bad = sorted(set(values[invalid].astype(str)))[:5]
        raise ValueError(f"Column '{TARGET_COLUMN}' holds non-boolean values: {bad}")
    return normalized.isin(_TRUE_LABELS)


@lru_cache(maxsize=4)
def _read_rental_csv(dataset_path: Path, mtime_ns: int, size: int) -> pd.DataFrame:
    df = pd.read_csv(dataset_path, sep=",", header=0)

    if df.shape[1] != len(CSV_COLUMNS):
        raise ValueError(
            f"Expected {len(CSV_COLUMNS)} columns in {dataset_path}, found {df.shape[1]}"
        )

    # Columns are positional; the header text is not trusted.
    df.columns = CSV_COLUMNS
    df[FEATURE_COLUMNS] = df[FEATURE_COLUMNS].apply(pd.to_numeric, errors="raise").astype(float)
    if not df.empty:
        df[TARGET_COLUMN] = _coerce_label(df[TARGET_COLUMN])

    logger.info("Loaded %d rows from %s", len(df), dataset_path)
    return df


def load_rental_dataframe(path: str | Path | None = None) -> pd.DataFrame:
    """Load the rides CSV, binding its 11 columns by position.

    Parsed frames are cached per file and invalidated when the file's
    modification time or size changes. The cached frame is shared, so
    callers copy before mutating.
    """
    dataset_path = Path(path) if path is not None else _default_dataset_path()
    stat = dataset_path.stat()
    return _read_rental_csv(dataset_path.resolve(), stat.st_mtime_ns, stat.st_size)


def fill_missing_values(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()

    for col in NUMERIC_COLUMNS:
        if col in out.columns and out[col].isna().any():
            out[col] = out[col].fillna(out[col].median())

    # Categories are numeric codes, so the most frequent code stands in.
    for col in CATEGORICAL_COLUMNS:
        if col in out.columns and out[col].isna().any():
            mode = out[col].mode(dropna=True)
            if not mode.empty:
                out[col] = out[col].fillna(mode.iloc[0])

    return out


def preview_rows(n: int, *, path: str | Path | None = None) -> list[BikeRentalRow]:
    df = fill_missing_values(load_rental_dataframe(path))
    records: list[dict[str, Any]] = df.head(n).to_dict(orient="records")
    return [BikeRentalRow(**row) for row in records]


def dataset_info(*, path: str | Path | None = None) -> dict[str, Any]:
    df = load_rental_dataframe(path)
    n_rows, n_cols = df.shape

    columns = list(df.columns)
    feature_names = [c for c in columns if c != TARGET_COLUMN]

    label_counts: dict[int, int] = {}
    if TARGET_COLUMN in df.columns:
        vc = df[TARGET_COLUMN].value_counts(dropna=False).sort_index()
        label_counts = {int(k): int(v) for k, v in vc.to_dict().items()}

    return {
        "rows": int(n_rows),
        "columns": int(n_cols),
        "feature_names": feature_names,
        "rental_type_distribution": label_counts,
    }
