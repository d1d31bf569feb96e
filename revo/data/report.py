from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Sequence

from loguru import logger
import pandas as pd

if TYPE_CHECKING:
    from revo.evolution.model import EvolvedModel

__all__ = ["build_prediction_report", "write_prediction_report"]


def build_prediction_report(model: EvolvedModel, rows: Sequence[Mapping[str, float]]) -> pd.DataFrame:
    """Tabulate actual target, prediction and absolute error for raw *rows*."""
    records = []
    for row in rows:
        prediction = model.predict(row)
        actual = row.get(model.target)
        records.append(
            {
                **row,
                "prediction": prediction,
                "abs_error": abs(prediction - actual) if actual is not None else float("nan"),
            }
        )
    return pd.DataFrame.from_records(records)


def write_prediction_report(frame: pd.DataFrame, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    logger.info("[report] Wrote {} prediction(s) to {}", len(frame), path)
    return path
