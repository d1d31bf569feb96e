import math

import pytest

from revo.creatures import Coefficients, Creature, LayerModifiers
from revo.data.dataset import TrainingSet
from revo.exceptions import DataContractViolation


def _linear(name: str, slope: float) -> Creature:
    layer = LayerModifiers(modifiers={name: Coefficients(c=slope, b=1.0, z=0.0, x=1)})
    return Creature(equation=(layer,))


def test_missing_target_is_fatal():
    rows = [{"y": 1.0, "x": 2.0}, {"x": 3.0}]
    with pytest.raises(DataContractViolation, match="Row 1"):
        TrainingSet.from_rows(rows, "y")


def test_no_rows_is_fatal():
    with pytest.raises(DataContractViolation):
        TrainingSet.from_rows([], "y")


def test_parameter_names_exclude_target_in_first_seen_order():
    data = TrainingSet.from_rows([{"b": 1.0, "y": 0.0, "a": 2.0}, {"y": 1.0, "c": 3.0}], "y")
    assert data.parameter_names == ["b", "a", "c"]
    assert data.num_rows == 2
    assert len(data.blocks) == 2


def test_mean_squared_error_matches_rows():
    rows = [{"y": 2.0, "x": 1.0}, {"y": 3.0, "x": 2.0}, {"y": 10.0}]
    creature = _linear("x", 2.0)
    data = TrainingSet.from_rows(rows, "y")
    expected = sum((creature.evaluate(row) - row["y"]) ** 2 for row in rows) / len(rows)
    assert data.mean_squared_error(creature) == pytest.approx(expected)


def test_constant_creature_broadcasts():
    creature = Creature(equation=(LayerModifiers(layer_bias=1.0),))
    data = TrainingSet.from_rows([{"y": 1.0, "x": 5.0}, {"y": 3.0, "x": 6.0}], "y")
    assert data.mean_squared_error(creature) == pytest.approx(2.0)


def test_overflow_scores_infinite_not_nan():
    huge = LayerModifiers(modifiers={"x": Coefficients(c=1.0, b=1e200, z=0.0, x=3)})
    negative = LayerModifiers(
        modifiers={"x": Coefficients(c=-1.0, b=1e200, z=0.0, x=3)},
    )
    creature = Creature(equation=(huge,))
    data = TrainingSet.from_rows([{"y": 0.0, "x": 1e5}], "y")
    assert math.isinf(data.mean_squared_error(creature))

    both = Creature(equation=(LayerModifiers(modifiers={**huge.modifiers, "z": negative.modifiers["x"]}),))
    data = TrainingSet.from_rows([{"y": 0.0, "x": 1e5, "z": 1e5}], "y")
    assert data.mean_squared_error(both) == math.inf
