import math

import numpy as np
import pytest

from revo.creatures.coefficients import Coefficients, MutateSpeed, TriangularRange
from revo.exceptions import ConfigurationError


def test_calculate_matches_power_term():
    coefficients = Coefficients(c=2.0, b=3.0, z=1.0, x=2)
    assert coefficients.calculate(1.0) == pytest.approx(32.0)
    assert coefficients.calculate(-1.0) == pytest.approx(8.0)


def test_calculate_zero_base_is_zero_not_nan():
    for x in (1, 2, 3):
        result = Coefficients(c=1.5, b=1.0, z=0.0, x=x).calculate(0.0)
        assert result == 0.0
        assert not math.isnan(result)


def test_calculate_on_columns_matches_scalars():
    coefficients = Coefficients(c=-0.7, b=1.3, z=0.2, x=3)
    values = np.array([-2.0, -0.5, 0.0, 1.5, 4.0])
    expected = [coefficients.calculate(float(v)) for v in values]
    np.testing.assert_allclose(coefficients.calculate(values), expected)


def test_new_exponent_domain(rng):
    exponents = [Coefficients.new(rng).x for _ in range(2000)]
    assert set(exponents) == {1, 2, 3}
    # 0.4 / 0.35 / 0.25
    assert exponents.count(1) > exponents.count(3)


def test_new_uses_fixed_values_and_both_signs(rng):
    terms = [Coefficients.new(rng) for _ in range(2000)]
    assert any(abs(term.c) == 1.0 for term in terms)
    assert any(abs(term.b) == 1.0 for term in terms)
    assert any(term.z == 0.0 for term in terms)
    assert any(term.c < 0 for term in terms) and any(term.c > 0 for term in terms)
    assert all(abs(term.c) <= 2.0 and abs(term.b) <= 2.0 and abs(term.z) <= 2.0 for term in terms)


def test_invalid_triangular_range_rejected():
    with pytest.raises(ConfigurationError):
        TriangularRange(2.0, 1.0, 0.0)
    with pytest.raises(ConfigurationError):
        TriangularRange(1.0, 1.0, 1.0)


def test_exponent_below_one_rejected():
    with pytest.raises(ConfigurationError):
        Coefficients(c=1.0, b=1.0, z=0.0, x=0)


def test_mutate_moves_every_numeric_field(rng):
    parent = Coefficients(c=1.0, b=1.0, z=0.0, x=2)
    child = parent.mutate(rng, MutateSpeed.FAST.sigma)
    assert child is not parent
    assert child.c != parent.c and child.b != parent.b and child.z != parent.z
    assert child.x in (1, 2, 3)
    assert parent == Coefficients(c=1.0, b=1.0, z=0.0, x=2)


def test_mutate_never_drops_exponent_below_one(rng):
    term = Coefficients(c=1.0, b=1.0, z=0.0, x=1)
    for _ in range(500):
        term = term.mutate(rng, MutateSpeed.FINE.sigma)
        assert term.x >= 1


def test_mutate_speed_scales_noise(rng):
    parent = Coefficients(c=1.0, b=1.0, z=0.0, x=1)
    fine = [abs(parent.mutate(rng, MutateSpeed.FINE.sigma).c - 1.0) for _ in range(500)]
    fast = [abs(parent.mutate(rng, MutateSpeed.FAST.sigma).c - 1.0) for _ in range(500)]
    assert np.mean(fast) > 5 * np.mean(fine)


def test_str_format():
    assert str(Coefficients(c=1.0, b=-2.0, z=0.5, x=3)) == "1.0000 * (-2.0000 * param + 0.5000) ^ 3"
