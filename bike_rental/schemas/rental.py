from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _project_root() -> Path:
    # bike_rental/schemas/rental.py -> bike_rental/schemas -> bike_rental -> project root
    return Path(__file__).resolve().parents[2]


DEFAULT_DATA_PATH = Path("bike_sharing.csv")
DEFAULT_ARTIFACTS_DIR = _project_root() / "artifacts" / "models"
DEFAULT_TRAINERS = ("fast_tree", "lightgbm", "logreg")


class BikeRentalRecord(BaseModel):
    season: float
    month: float = Field(..., ge=1, le=12)
    hour: float = Field(..., ge=0, le=23)
    holiday: float = Field(..., ge=0, le=1)
    weekday: float = Field(..., ge=0, le=6)
    working_day: float = Field(..., ge=0, le=1)
    weather_condition: float
    temperature: float
    humidity: float
    windspeed: float


class BikeRentalRow(BikeRentalRecord):
    rental_type: bool


class RentalTypePrediction(BaseModel):
    predicted_label: bool
    probability: float = Field(..., ge=0.0, le=1.0)
    score: float

    @property
    def label_text(self) -> str:
        return "Long-term" if self.predicted_label else "Short-term"


class TrainerConfig(BaseModel):
    name: str
    hyperparameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("trainer name must not be empty")
        return value.strip()


class RunConfig(BaseModel):
    data_path: Path = DEFAULT_DATA_PATH
    artifacts_dir: Path = DEFAULT_ARTIFACTS_DIR
    test_size: float = Field(0.2, gt=0.0, lt=1.0)
    random_state: int = Field(42, ge=0)
    trainers: list[TrainerConfig] = Field(
        default_factory=lambda: [TrainerConfig(name=name) for name in DEFAULT_TRAINERS],
        min_length=1,
    )
