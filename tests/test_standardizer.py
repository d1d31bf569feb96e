import numpy as np
import pytest

from revo.data.standardizer import Standardizer
from revo.exceptions import ConfigurationError, DataContractViolation

ROWS = [
    {"target_param": 5.2, "p2": 7.8, "p3": 8.3},
    {"target_param": 6.1, "p2": 3.2, "p3": 1.4},
    {"target_param": 1.9, "p2": 4.4, "p3": 2.2},
    {"target_param": 3.7, "p2": 9.1, "p3": 5.5},
]


def test_standardized_columns_have_zero_mean_unit_std():
    standardizer = Standardizer.fit(ROWS)
    rows = standardizer.standardize_rows(ROWS)
    for name in ROWS[0]:
        column = np.array([row[name] for row in rows])
        assert column.mean() == pytest.approx(0.0, abs=1e-12)
        assert column.std() == pytest.approx(1.0)


def test_round_trip_recovers_values():
    standardizer = Standardizer.fit(ROWS)
    for original, standardized in zip(ROWS, standardizer.standardize_rows(ROWS)):
        for name, value in original.items():
            assert standardizer.destandardize(name, standardized[name]) == pytest.approx(value)


def test_constant_column_uses_unit_std():
    standardizer = Standardizer.fit([{"a": 2.0}, {"a": 2.0}])
    assert standardizer.stats["a"].std == 1.0
    assert standardizer.standardize_point({"a": 2.0}) == {"a": 0.0}


def test_unknown_parameters_pass_through_point():
    standardizer = Standardizer.fit(ROWS)
    assert standardizer.standardize_point({"other": 4.0}) == {"other": 4.0}


def test_destandardize_unknown_parameter():
    with pytest.raises(DataContractViolation):
        Standardizer.fit(ROWS).destandardize("missing", 0.0)


def test_fit_requires_rows():
    with pytest.raises(ConfigurationError):
        Standardizer.fit([])


def test_describe_lists_parameters():
    report = Standardizer.fit(ROWS).describe()
    for name in ("target_param", "p2", "p3", "mean", "std"):
        assert name in report
