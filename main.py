from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from bike_rental.data.rental_dataset import dataset_info, preview_rows
from bike_rental.features.schema import feature_schema
from bike_rental.features.split import make_train_test_split, summarize_split
from bike_rental.model.history import append_record
from bike_rental.model.prediction import SAMPLE_RECORD, predict_one
from bike_rental.model.selection import CandidateResult, format_percent, select_best, train_candidates
from bike_rental.model.store import MODEL_FILENAME, ModelMeta, save_rental_model
from bike_rental.schemas.rental import (
    DEFAULT_ARTIFACTS_DIR,
    DEFAULT_DATA_PATH,
    DEFAULT_TRAINERS,
    RentalTypePrediction,
    RunConfig,
    TrainerConfig,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class RunSummary:
    best: CandidateResult
    candidates: list[CandidateResult]
    meta: ModelMeta
    sample_prediction: RentalTypePrediction


def run(config: RunConfig) -> RunSummary:
    logger.info("Bike rental type prediction: data=%s", config.data_path)
    info = dataset_info(path=config.data_path)
    logger.info("Dataset: rows=%d rental_type=%s", info["rows"], info["rental_type_distribution"])
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("First rows: %s", [row.model_dump() for row in preview_rows(3, path=config.data_path)])

    split = make_train_test_split(
        test_size=config.test_size,
        random_state=config.random_state,
        path=config.data_path,
    )
    summary = summarize_split(split, test_size=config.test_size, random_state=config.random_state)
    logger.info(
        "Split: train=%d %s test=%d %s",
        summary["train_size"],
        summary["train_rental_type_distribution"],
        summary["test_size"],
        summary["test_rental_type_distribution"],
    )

    candidates = train_candidates(split, config.trainers, random_state=config.random_state)
    best = select_best(candidates)
    logger.info(
        "Best model: %s (AUC = %s, F1 = %s)",
        best.name,
        format_percent(best.metrics.roc_auc),
        format_percent(best.metrics.f1),
    )

    sample = predict_one(best.pipeline, SAMPLE_RECORD)
    logger.info("Sample prediction -> %s (probability %.1f%%)", sample.label_text, sample.probability * 100)

    meta = save_rental_model(
        best.pipeline,
        metrics=best.metrics.as_dict(),
        trainer_name=best.name,
        hyperparameters=best.hyperparameters,
        feature_schema=feature_schema(),
        artifacts_dir=config.artifacts_dir,
    )
    logger.info("Model saved to %s", Path(config.artifacts_dir) / MODEL_FILENAME)

    append_record(
        {
            "timestamp": meta.trained_at,
            "trainer_name": meta.trainer_name,
            "hyperparameters": meta.hyperparameters,
            "metrics": best.metrics.as_dict(),
            "candidates": [
                {"name": c.name, "hyperparameters": c.hyperparameters, "metrics": c.metrics.as_dict()}
                for c in candidates
            ],
            "version": meta.version,
            "test_size": config.test_size,
            "random_state": config.random_state,
        },
        artifacts_dir=config.artifacts_dir,
    )

    return RunSummary(best=best, candidates=candidates, meta=meta, sample_prediction=sample)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Train and select a bike rental type classifier")
    p.add_argument("--data", type=Path, default=DEFAULT_DATA_PATH, help="Path to the bike sharing CSV")
    p.add_argument("--artifacts-dir", type=Path, default=DEFAULT_ARTIFACTS_DIR, help="Where models are saved")
    p.add_argument("--test-size", type=float, default=0.2, help="Fraction of rows held out for evaluation")
    p.add_argument("--random-state", type=int, default=42)
    p.add_argument(
        "--trainers",
        default=",".join(DEFAULT_TRAINERS),
        help="Comma separated trainers: fast_tree, lightgbm, logreg, sdca_logreg",
    )
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def config_from_args(args: argparse.Namespace) -> RunConfig:
    names = [name.strip() for name in args.trainers.split(",") if name.strip()]
    return RunConfig(
        data_path=args.data,
        artifacts_dir=args.artifacts_dir,
        test_size=args.test_size,
        random_state=args.random_state,
        trainers=[TrainerConfig(name=name) for name in names],
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    run(config_from_args(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
