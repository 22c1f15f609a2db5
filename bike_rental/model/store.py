from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import joblib
from sklearn.pipeline import Pipeline

from bike_rental.schemas.rental import DEFAULT_ARTIFACTS_DIR

logger = logging.getLogger(__name__)

MODEL_FILENAME = "bike_sharing_model.joblib"

ACTIVE_META_FILENAME = "active.json"

ARTIFACTS_DIR = DEFAULT_ARTIFACTS_DIR


@dataclass(frozen=True)
class ModelMeta:
    version: str
    trained_at: str
    metrics: dict[str, float | None]
    model_path: str
    trainer_name: str
    hyperparameters: dict[str, Any]
    feature_schema: list[dict[str, str]]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _new_version() -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    suffix = uuid4().hex[:8]
    return f"{ts}_{suffix}"


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def _meta_from_raw(meta_raw: dict[str, Any]) -> ModelMeta:
    return ModelMeta(
        version=str(meta_raw["version"]),
        trained_at=str(meta_raw["trained_at"]),
        metrics={
            k: (None if v is None else float(v)) for k, v in dict(meta_raw.get("metrics", {})).items()
        },
        model_path=str(meta_raw["model_path"]),
        trainer_name=str(meta_raw.get("trainer_name", "unknown")),
        hyperparameters=dict(meta_raw.get("hyperparameters", {}) or {}),
        feature_schema=list(meta_raw.get("feature_schema", []) or []),
    )


def save_rental_model(
    pipeline: Pipeline,
    *,
    metrics: dict[str, float | None],
    trainer_name: str,
    hyperparameters: dict[str, Any] | None = None,
    feature_schema: list[dict[str, str]] | None = None,
    artifacts_dir: Path | None = None,
) -> ModelMeta:
    artifacts_dir = Path(artifacts_dir) if artifacts_dir is not None else ARTIFACTS_DIR
    artifacts_dir.mkdir(parents=True, exist_ok=True)

    version = _new_version()
    version_dir = artifacts_dir / version
    version_dir.mkdir(parents=True, exist_ok=True)

    model_file = version_dir / "model.joblib"
    meta_file = version_dir / "meta.json"

    joblib.dump(pipeline, model_file)

    meta = ModelMeta(
        version=version,
        trained_at=_utc_now_iso(),
        metrics={k: (None if v is None else float(v)) for k, v in metrics.items()},
        model_path=str(model_file),
        trainer_name=str(trainer_name),
        hyperparameters=dict(hyperparameters or {}),
        feature_schema=list(feature_schema or []),
    )

    _write_json(meta_file, asdict(meta))
    _write_json(artifacts_dir / ACTIVE_META_FILENAME, asdict(meta))

    # Fixed-name copy of the winning model for consumers that don't read metadata.
    latest = artifacts_dir / MODEL_FILENAME
    joblib.dump(pipeline, latest)

    logger.info("Model saved: version=%s path=%s", version, latest)
    return meta


def load_rental_model(
    *,
    artifacts_dir: Path | None = None,
) -> tuple[Pipeline | None, ModelMeta | None]:
    artifacts_dir = Path(artifacts_dir) if artifacts_dir is not None else ARTIFACTS_DIR
    active_meta_file = artifacts_dir / ACTIVE_META_FILENAME
    latest = artifacts_dir / MODEL_FILENAME

    if active_meta_file.exists():
        meta = _meta_from_raw(json.loads(active_meta_file.read_text(encoding="utf-8")))
        model_path = Path(meta.model_path)
        if model_path.exists():
            return joblib.load(model_path), meta
        # Fall back to the fixed file if the versioned one moved or was deleted.
        if latest.exists():
            return joblib.load(latest), meta
        return None, meta

    if latest.exists():
        pipeline = joblib.load(latest)
        meta = ModelMeta(
            version="unknown",
            trained_at="unknown",
            metrics={},
            model_path=str(latest),
            trainer_name="unknown",
            hyperparameters={},
            feature_schema=[],
        )
        return pipeline, meta

    return None, None
