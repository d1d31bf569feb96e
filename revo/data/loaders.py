from __future__ import annotations

from pathlib import Path

from loguru import logger
import pandas as pd

__all__ = ["load_rows", "rows_from_frame"]


def rows_from_frame(frame: pd.DataFrame) -> list[dict[str, float]]:
    """Convert numeric columns of *frame* into ``{name: value}`` rows, dropping empty cells."""
    numeric = frame.select_dtypes(include="number")
    dropped = [column for column in frame.columns if column not in numeric.columns]
    if dropped:
        logger.warning("[loaders] Ignoring non-numeric column(s): {}", dropped)

    rows = []
    for record in numeric.to_dict(orient="records"):
        rows.append({str(name): float(value) for name, value in record.items() if pd.notna(value)})
    return rows


def load_rows(path: str | Path) -> list[dict[str, float]]:
    """Load a CSV file of labeled examples."""
    frame = pd.read_csv(path)
    logger.info("[loaders] Loaded {} row(s) x {} column(s) from {}", len(frame), len(frame.columns), path)
    return rows_from_frame(frame)
