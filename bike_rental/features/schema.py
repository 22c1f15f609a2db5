from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FeatureSpec:
    name: str
    dtype: str  # "float" | "bool"
    kind: str  # "numeric" | "categorical"


# Order matches the CSV columns; the file is bound by position.
FEATURE_SPECS: list[FeatureSpec] = [
    FeatureSpec(name="season", dtype="float", kind="categorical"),
    FeatureSpec(name="month", dtype="float", kind="numeric"),
    FeatureSpec(name="hour", dtype="float", kind="numeric"),
    FeatureSpec(name="holiday", dtype="float", kind="numeric"),
    FeatureSpec(name="weekday", dtype="float", kind="numeric"),
    FeatureSpec(name="working_day", dtype="float", kind="numeric"),
    FeatureSpec(name="weather_condition", dtype="float", kind="categorical"),
    FeatureSpec(name="temperature", dtype="float", kind="numeric"),
    FeatureSpec(name="humidity", dtype="float", kind="numeric"),
    FeatureSpec(name="windspeed", dtype="float", kind="numeric"),
]

TARGET_COLUMN = "rental_type"

FEATURE_COLUMNS: list[str] = [s.name for s in FEATURE_SPECS]
NUMERIC_COLUMNS: list[str] = [s.name for s in FEATURE_SPECS if s.kind == "numeric"]
CATEGORICAL_COLUMNS: list[str] = [s.name for s in FEATURE_SPECS if s.kind == "categorical"]
CSV_COLUMNS: list[str] = FEATURE_COLUMNS + [TARGET_COLUMN]


def feature_schema() -> list[dict[str, str]]:
    return [{"name": s.name, "type": s.dtype, "kind": s.kind} for s in FEATURE_SPECS]
