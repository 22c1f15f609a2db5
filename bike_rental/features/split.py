from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from sklearn.model_selection import train_test_split

from bike_rental.data.rental_dataset import fill_missing_values, load_rental_dataframe
from bike_rental.features.schema import CATEGORICAL_COLUMNS, NUMERIC_COLUMNS, TARGET_COLUMN


@dataclass(frozen=True)
class SplitResult:
    x_train: pd.DataFrame
    x_test: pd.DataFrame
    y_train: pd.Series
    y_test: pd.Series

    numeric_columns: list[str]
    categorical_columns: list[str]


def validate_dataset(df: pd.DataFrame) -> None:
    if df.empty:
        raise ValueError("Dataset is empty")

    if TARGET_COLUMN not in df.columns:
        raise ValueError(f"Target column '{TARGET_COLUMN}' not found in dataset")

    if df[TARGET_COLUMN].nunique(dropna=False) < 2:
        raise ValueError(f"Target column '{TARGET_COLUMN}' must contain at least two classes")


def prepare_xy(
    *,
    path: str | Path | None = None,
) -> tuple[pd.DataFrame, pd.Series, list[str], list[str]]:
    df = load_rental_dataframe(path)
    validate_dataset(df)
    df = fill_missing_values(df)

    x = df.drop(columns=[TARGET_COLUMN])
    y = df[TARGET_COLUMN].astype(bool)

    return x, y, list(NUMERIC_COLUMNS), list(CATEGORICAL_COLUMNS)


def make_train_test_split(
    *,
    test_size: float = 0.2,
    random_state: int = 42,
    path: str | Path | None = None,
) -> SplitResult:
    x, y, numeric_cols, categorical_cols = prepare_xy(path=path)

    x_train, x_test, y_train, y_test = train_test_split(
        x,
        y,
        test_size=test_size,
        random_state=random_state,
        stratify=y,
    )

    return SplitResult(
        x_train=x_train,
        x_test=x_test,
        y_train=y_train,
        y_test=y_test,
        numeric_columns=numeric_cols,
        categorical_columns=categorical_cols,
    )


def class_distribution(y: pd.Series) -> dict[int, int]:
    vc = y.value_counts(dropna=False).sort_index()
    return {int(k): int(v) for k, v in vc.to_dict().items()}


def summarize_split(split: SplitResult, *, test_size: float, random_state: int) -> dict[str, Any]:
    return {
        "train_size": int(len(split.x_train)),
        "test_size": int(len(split.x_test)),
        "train_rental_type_distribution": class_distribution(split.y_train),
        "test_rental_type_distribution": class_distribution(split.y_test),
        "numeric_columns": split.numeric_columns,
        "categorical_columns": split.categorical_columns,
        "target_column": TARGET_COLUMN,
        "test_size_fraction": float(test_size),
        "random_state": int(random_state),
    }


def split_info(
    *,
    test_size: float = 0.2,
    random_state: int = 42,
    path: str | Path | None = None,
) -> dict[str, Any]:
    split = make_train_test_split(
        test_size=test_size,
        random_state=random_state,
        path=path,
    )
    return summarize_split(split, test_size=test_size, random_state=random_state)
