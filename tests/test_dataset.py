from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from bike_rental.data.rental_dataset import dataset_info, load_rental_dataframe, preview_rows
from bike_rental.features.schema import CSV_COLUMNS, TARGET_COLUMN
from bike_rental.schemas.rental import BikeRentalRow


def test_columns_bound_by_position(rides_csv: Path, rides_df: pd.DataFrame) -> None:
    df = load_rental_dataframe(rides_csv)

    assert list(df.columns) == CSV_COLUMNS
    assert len(df) == len(rides_df)
    assert df[TARGET_COLUMN].dtype == bool
    assert df["temperature"].tolist() == pytest.approx(rides_df["Temperature"].tolist())


def test_textual_labels_are_parsed(tmp_path: Path, rides_df: pd.DataFrame) -> None:
    df = rides_df.copy()
    df["RentalType"] = df["RentalType"].map({0: "False", 1: "TRUE"})
    path = tmp_path / "text_labels.csv"
    df.to_csv(path, index=False)

    loaded = load_rental_dataframe(path)

    assert loaded[TARGET_COLUMN].tolist() == rides_df["RentalType"].astype(bool).tolist()


def test_invalid_labels_rejected(tmp_path: Path, rides_df: pd.DataFrame) -> None:
    df = rides_df.copy()
    df["RentalType"] = df["RentalType"].astype(object)
    df.loc[0, "RentalType"] = "maybe"
    path = tmp_path / "bad_labels.csv"
    df.to_csv(path, index=False)

    with pytest.raises(ValueError, match="non-boolean"):
        load_rental_dataframe(path)


def test_wrong_column_count_rejected(tmp_path: Path, rides_df: pd.DataFrame) -> None:
    path = tmp_path / "short.csv"
    rides_df.drop(columns=["Windspeed"]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Expected 11 columns"):
        load_rental_dataframe(path)


def test_missing_file_propagates(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rental_dataframe(tmp_path / "does_not_exist.csv")


def test_dataset_info_and_preview(rides_csv: Path, rides_df: pd.DataFrame) -> None:
    info = dataset_info(path=rides_csv)
    assert info["rows"] == len(rides_df)
    assert info["columns"] == 11
    assert TARGET_COLUMN not in info["feature_names"]
    assert sum(info["rental_type_distribution"].values()) == len(rides_df)
    assert set(info["rental_type_distribution"]) == {0, 1}

    rows = preview_rows(3, path=rides_csv)
    assert len(rows) == 3
    assert all(isinstance(r, BikeRentalRow) for r in rows)


def test_preview_fills_missing_values(tmp_path: Path, rides_df: pd.DataFrame) -> None:
    df = rides_df.copy()
    df["Hour"] = df["Hour"].astype(float)
    df.loc[0, "Hour"] = float("nan")
    path = tmp_path / "missing_hour.csv"
    df.to_csv(path, index=False)

    rows = preview_rows(3, path=path)

    assert len(rows) == 3
    assert 0 <= rows[0].hour <= 23
    assert rows[1].hour == pytest.approx(float(rides_df.loc[1, "Hour"]))


def test_rewritten_file_is_reloaded(tmp_path: Path, rides_df: pd.DataFrame) -> None:
    path = tmp_path / "rides.csv"
    rides_df.to_csv(path, index=False)
    assert len(load_rental_dataframe(path)) == len(rides_df)

    rides_df.head(100).to_csv(path, index=False)
    assert len(load_rental_dataframe(path)) == 100
