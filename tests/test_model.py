import math

import pytest

from revo.creatures import Coefficients, Creature, LayerModifiers
from revo.data.standardizer import ParameterStats, Standardizer
from revo.evolution import EvolvedModel
from revo.exceptions import DataContractViolation


def _model() -> EvolvedModel:
    layer = LayerModifiers(modifiers={"x": Coefficients(c=2.0, b=1.0, z=0.0, x=1)}, layer_bias=0.5)
    standardizer = Standardizer(
        stats={
            "x": ParameterStats(mean=10.0, std=2.0),
            "y": ParameterStats(mean=100.0, std=5.0),
        }
    )
    return EvolvedModel(creature=Creature(equation=(layer,), cached_error_sum=0.1), standardizer=standardizer, target="y")


def test_predict_standardizes_and_destandardizes():
    model = _model()
    # x=14 -> 2.0 standardized -> 2*2 + 0.5 = 4.5 -> 4.5*5 + 100
    assert model.predict({"x": 14.0}) == pytest.approx(122.5)
    assert model.predict_point({"x": 14.0}) == pytest.approx(122.5)


def test_predict_ignores_target_in_point():
    model = _model()
    assert model.predict({"x": 14.0, "y": 1e9}) == pytest.approx(122.5)


def test_predict_many_and_describe():
    model = _model()
    predictions = model.predict_many([{"x": 10.0}, {"x": 8.0}])
    assert predictions == pytest.approx([102.5, 92.5])
    assert all(math.isfinite(value) for value in predictions)
    description = model.describe()
    assert "Target: y" in description
    assert 'Param "x"' in description
    assert model.error == 0.1


def test_predict_requires_target_statistics():
    model = _model()
    model.target = "unknown"
    with pytest.raises(DataContractViolation):
        model.predict({"x": 1.0})
