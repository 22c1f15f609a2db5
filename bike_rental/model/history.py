from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from bike_rental.schemas.rental import DEFAULT_ARTIFACTS_DIR

logger = logging.getLogger(__name__)

HISTORY_PATH = DEFAULT_ARTIFACTS_DIR / "history.json"


def _history_path(artifacts_dir: Path | None) -> Path:
    return Path(artifacts_dir) / "history.json" if artifacts_dir is not None else HISTORY_PATH


def _load_history(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Training history at %s is corrupt; starting a new one", path)
        return []
    if isinstance(data, list):
        return data
    return []


def _save_history(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")


def append_record(record: dict[str, Any], *, artifacts_dir: Path | None = None) -> None:
    path = _history_path(artifacts_dir)
    history = _load_history(path)
    history.append(record)
    _save_history(path, history)


def get_history(
    trainer_name: str | None = None,
    limit: int | None = None,
    *,
    artifacts_dir: Path | None = None,
) -> list[dict[str, Any]]:
    history = _load_history(_history_path(artifacts_dir))
    if trainer_name:
        history = [r for r in history if r.get("trainer_name") == trainer_name]

    # newest first; records without a parseable timestamp sink to the end
    def _key(r: dict[str, Any]) -> datetime:
        ts = r.get("timestamp")
        try:
            parsed = datetime.fromisoformat(str(ts))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        # Naive timestamps are taken as UTC.
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    history.sort(key=_key, reverse=True)
    if limit and limit > 0:
        history = history[:limit]
    return history
