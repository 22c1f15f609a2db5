from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

import pandas as pd
from lightgbm import LGBMClassifier
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import GradientBoostingClassifier
from sklearn.linear_model import LogisticRegression, SGDClassifier
from sklearn.metrics import accuracy_score, f1_score, precision_score, recall_score, roc_auc_score
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import MinMaxScaler, OneHotEncoder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingMetrics:
    accuracy: float
    precision: float
    recall: float
    f1: float
    roc_auc: float | None = None

    def as_dict(self) -> dict[str, float | None]:
        return asdict(self)


TRAINER_ALIASES: dict[str, str] = {
    "fast_tree": "fast_tree",
    "fasttree": "fast_tree",
    "gradient_boosting": "fast_tree",
    "gbdt": "fast_tree",
    "lightgbm": "lightgbm",
    "lgbm": "lightgbm",
    "light_gbm": "lightgbm",
    "logreg": "logreg",
    "logistic_regression": "logreg",
    "lbfgs_logreg": "logreg",
    "sdca_logreg": "sdca_logreg",
    "sgd_logreg": "sdca_logreg",
    "sdca": "sdca_logreg",
}


def normalize_trainer_name(trainer_name: str) -> str:
    key = (trainer_name or "").strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return TRAINER_ALIASES[key]
    except KeyError:
        supported = ", ".join(sorted(set(TRAINER_ALIASES.values())))
        raise ValueError(f"Unsupported trainer '{trainer_name}'. Use one of: {supported}.") from None


def create_estimator(trainer_name: str, hyperparameters: dict | None = None, random_state: int = 42) -> object:
    canonical = normalize_trainer_name(trainer_name)
    hyperparameters = dict(hyperparameters or {})

    if canonical == "fast_tree":
        params = {
            "n_estimators": 100,
            "max_leaf_nodes": 20,
            "max_depth": None,
            "min_samples_leaf": 10,
            "learning_rate": 0.2,
            "random_state": random_state,
        }
        params.update(hyperparameters)
        return GradientBoostingClassifier(**params)

    if canonical == "lightgbm":
        # n_jobs=1: identical trees across runs.
        params = {
            "num_leaves": 31,
            "min_child_samples": 10,
            "random_state": random_state,
            "n_jobs": 1,
            "verbose": -1,
        }
        params.update(hyperparameters)
        return LGBMClassifier(**params)

    if canonical == "logreg":
        params = {"max_iter": 1000}
        params.update(hyperparameters)
        return LogisticRegression(**params)

    params = {"loss": "log_loss", "max_iter": 1000, "random_state": random_state}
    params.update(hyperparameters)
    return SGDClassifier(**params)


def build_preprocessor(numeric_columns: list[str], categorical_columns: list[str]) -> ColumnTransformer:
    return ColumnTransformer(
        transformers=[
            ("cat", OneHotEncoder(handle_unknown="ignore"), categorical_columns),
            ("num", MinMaxScaler(), numeric_columns),
        ],
        remainder="drop",
    )


def train_rental_model(
    x_train: pd.DataFrame,
    y_train: pd.Series,
    *,
    numeric_columns: list[str],
    categorical_columns: list[str],
    trainer_name: str = "fast_tree",
    hyperparameters: dict | None = None,
    random_state: int = 42,
) -> Pipeline:
    preprocessor = build_preprocessor(numeric_columns, categorical_columns)
    model = create_estimator(trainer_name, hyperparameters or {}, random_state=random_state)

    pipeline = Pipeline(
        steps=[
            ("preprocess", preprocessor),
            ("model", model),
        ]
    )

    pipeline.fit(x_train, y_train)
    return pipeline


def evaluate_rental_model(
    pipeline: Pipeline,
    x_test: pd.DataFrame,
    y_test: pd.Series,
) -> TrainingMetrics:
    y_pred = pipeline.predict(x_test)

    roc_auc = None
    if pd.Series(y_test).nunique() < 2:
        logger.warning("ROC AUC is undefined: test labels hold a single class")
    elif hasattr(pipeline, "predict_proba"):
        proba = pipeline.predict_proba(x_test)
        if proba.shape[1] >= 2:
            roc_auc = float(roc_auc_score(y_test, proba[:, 1]))

    return TrainingMetrics(
        accuracy=float(accuracy_score(y_test, y_pred)),
        precision=float(precision_score(y_test, y_pred, pos_label=True, zero_division=0)),
        recall=float(recall_score(y_test, y_pred, pos_label=True, zero_division=0)),
        f1=float(f1_score(y_test, y_pred, pos_label=True, zero_division=0)),
        roc_auc=roc_auc,
    )
