from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from bike_rental.features.schema import FEATURE_COLUMNS
from bike_rental.schemas.rental import BikeRentalRecord, RentalTypePrediction

# Summer weekday morning ride used to demonstrate the trained model.
SAMPLE_RECORD = BikeRentalRecord(
    season=3,
    month=7,
    hour=9,
    holiday=0,
    weekday=4,
    working_day=1,
    weather_condition=1,
    temperature=25,
    humidity=60,
    windspeed=15,
)

_PROBA_EPS = 1e-15


def records_to_frame(records: Sequence[BikeRentalRecord]) -> pd.DataFrame:
    rows = [record.model_dump() for record in records]
    return pd.DataFrame.from_records(rows, columns=FEATURE_COLUMNS)


def _raw_scores(pipeline: Pipeline, x: pd.DataFrame, proba_positive: np.ndarray) -> np.ndarray:
    if hasattr(pipeline, "decision_function"):
        return np.asarray(pipeline.decision_function(x), dtype=float).reshape(-1)
    clipped = np.clip(proba_positive, _PROBA_EPS, 1.0 - _PROBA_EPS)
    return np.log(clipped / (1.0 - clipped))


def predict_records(pipeline: Pipeline, records: Sequence[BikeRentalRecord]) -> list[RentalTypePrediction]:
    if not records:
        return []

    x = records_to_frame(records)
    proba = pipeline.predict_proba(x)
    pred = pipeline.predict(x)

    classes = list(pipeline.classes_)
    positive_idx = classes.index(True)
    proba_positive = proba[:, positive_idx]
    scores = _raw_scores(pipeline, x, proba_positive)

    return [
        RentalTypePrediction(
            predicted_label=bool(pred[i]),
            probability=float(proba_positive[i]),
            score=float(scores[i]),
        )
        for i in range(len(records))
    ]


def predict_one(pipeline: Pipeline, record: BikeRentalRecord) -> RentalTypePrediction:
    return predict_records(pipeline, [record])[0]
