import math

import pandas as pd
import pytest

from revo.creatures import Coefficients, Creature, LayerModifiers
from revo.data import build_prediction_report, load_rows, rows_from_frame, write_prediction_report
from revo.data.standardizer import Standardizer
from revo.evolution import EvolvedModel


def test_load_rows_keeps_numeric_columns(tmp_path):
    path = tmp_path / "points.csv"
    pd.DataFrame(
        {"y": [1.0, 2.0, 3.0], "x": [0.5, None, 1.5], "label": ["a", "b", "c"]}
    ).to_csv(path, index=False)

    rows = load_rows(path)

    assert rows == [{"y": 1.0, "x": 0.5}, {"y": 2.0}, {"y": 3.0, "x": 1.5}]


def test_rows_from_frame_casts_to_float():
    rows = rows_from_frame(pd.DataFrame({"a": [1, 2]}))
    assert rows == [{"a": 1.0}, {"a": 2.0}]
    assert all(isinstance(value, float) for row in rows for value in row.values())


def test_prediction_report_round_trip(tmp_path):
    rows = [{"y": 1.0, "x": 1.0}, {"y": 3.0, "x": 2.0}, {"y": 5.0, "x": 3.0}]
    standardizer = Standardizer.fit(rows)
    identity = LayerModifiers(modifiers={"x": Coefficients(c=1.0, b=1.0, z=0.0, x=1)})
    model = EvolvedModel(creature=Creature(equation=(identity,)), standardizer=standardizer, target="y")

    frame = build_prediction_report(model, rows)

    assert list(frame.columns) == ["y", "x", "prediction", "abs_error"]
    # x and y are both linear in the row index, so standardized x equals standardized y
    assert frame["abs_error"].max() == pytest.approx(0.0, abs=1e-9)

    path = write_prediction_report(frame, tmp_path / "out" / "predictions.csv")
    assert pd.read_csv(path).shape == (3, 4)


def test_prediction_report_without_target_column():
    rows = [{"y": 0.0, "x": 0.0}, {"y": 2.0, "x": 2.0}]
    model = EvolvedModel(
        creature=Creature(equation=(LayerModifiers(),)),
        standardizer=Standardizer.fit(rows),
        target="y",
    )
    frame = build_prediction_report(model, [{"x": 1.0}])
    assert math.isnan(frame.loc[0, "abs_error"])
    assert frame.loc[0, "prediction"] == pytest.approx(1.0)
