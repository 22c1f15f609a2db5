from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sklearn.pipeline import Pipeline

from bike_rental.features.split import SplitResult
from bike_rental.model.training import TrainingMetrics, evaluate_rental_model, train_rental_model
from bike_rental.schemas.rental import TrainerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateResult:
    name: str
    pipeline: Pipeline
    metrics: TrainingMetrics
    hyperparameters: dict[str, Any] = field(default_factory=dict)


def format_percent(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2%}"


def train_candidates(
    split: SplitResult,
    trainers: Sequence[TrainerConfig],
    *,
    random_state: int = 42,
) -> list[CandidateResult]:
    if not trainers:
        raise ValueError("At least one trainer must be configured")

    results: list[CandidateResult] = []
    for trainer in trainers:
        logger.info("Training %s ...", trainer.name)
        try:
            pipeline = train_rental_model(
                split.x_train,
                split.y_train,
                numeric_columns=split.numeric_columns,
                categorical_columns=split.categorical_columns,
                trainer_name=trainer.name,
                hyperparameters=trainer.hyperparameters,
                random_state=random_state,
            )
            metrics = evaluate_rental_model(pipeline, split.x_test, split.y_test)
        except ValueError:
            logger.exception("Training error: trainer=%s", trainer.name)
            raise

        logger.info(
            "%s:\tAccuracy = %s\tAUC = %s\tF1 = %s",
            trainer.name,
            format_percent(metrics.accuracy),
            format_percent(metrics.roc_auc),
            format_percent(metrics.f1),
        )
        results.append(
            CandidateResult(
                name=trainer.name,
                pipeline=pipeline,
                metrics=metrics,
                hyperparameters=dict(trainer.hyperparameters),
            )
        )

    return results


def select_best(candidates: Iterable[CandidateResult]) -> CandidateResult:
    best: CandidateResult | None = None
    for candidate in candidates:
        # Strictly greater: ties keep the earlier trainer.
        if best is None or candidate.metrics.f1 > best.metrics.f1:
            best = candidate

    if best is None:
        raise ValueError("No candidate models to select from")
    return best
