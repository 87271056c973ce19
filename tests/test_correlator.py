"""Tests for the Pearson correlation query."""
from datetime import date

import pytest

from covid_query.correlator import correlate, pearson
from covid_query.records import CorrelationResult

D = [date(2021, 1, d) for d in range(1, 6)]


def test_perfect_negative(make_combined):
    """(10, 90) and (90, 10) correlate at exactly -1."""
    rows = [
        make_combined("A", D[0], death_percentage=10.0, full_vaccination_rate=90.0),
        make_combined("B", D[0], death_percentage=90.0, full_vaccination_rate=10.0),
    ]
    result = correlate(rows, 1000)
    assert result.is_defined
    assert result.value == pytest.approx(-1.0, abs=1e-9)
    assert result.pairs == 2


def test_perfect_positive():
    """A scaled copy correlates at 1."""
    result = pearson([(1.0, 2.0), (2.0, 4.0), (3.0, 6.0)])
    assert result.value == pytest.approx(1.0, abs=1e-9)


def test_known_value():
    """Matches a hand-computed coefficient."""
    # x mean 3, y mean 4; sxy 7, sxx 10, syy 10
    result = pearson([(1, 2), (2, 5), (3, 3), (4, 4), (5, 6)])
    assert result.value == pytest.approx(0.7)


def test_zero_coefficient_is_defined():
    """A real 0.0 is distinct from undefined."""
    result = pearson([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)])
    assert result.is_defined
    assert result.value == 0.0
    assert float(result) == 0.0


def test_fewer_than_two_pairs_is_undefined(make_combined):
    """One pair is not enough."""
    result = correlate([make_combined("A", D[0], death_percentage=1.0, full_vaccination_rate=2.0)], 1000)
    assert result.value is None
    assert result.reason == CorrelationResult.INSUFFICIENT_PAIRS
    with pytest.raises(ValueError):
        float(result)


def test_constant_variable_is_undefined(make_combined):
    """Zero variance in either column gives no coefficient."""
    rows = [make_combined("A", d, death_percentage=3.0, full_vaccination_rate=float(i))
            for i, d in enumerate(D)]
    result = correlate(rows, 1000)
    assert result.value is None
    assert result.reason == CorrelationResult.ZERO_VARIANCE
    assert result.pairs == 5


def test_only_complete_pairs_above_min_cases_count(make_combined):
    """Rows with an absent value or too few cases are left out."""
    rows = [
        make_combined("A", D[0], death_percentage=10.0, full_vaccination_rate=90.0),
        make_combined("A", D[1], death_percentage=90.0, full_vaccination_rate=10.0),
        make_combined("A", D[2], death_percentage=None, full_vaccination_rate=50.0),
        make_combined("A", D[3], death_percentage=50.0, full_vaccination_rate=None),
        make_combined("A", D[4], total_cases=1000, death_percentage=50.0, full_vaccination_rate=95.0),
    ]
    result = correlate(rows, 1000)
    assert result.pairs == 2
    assert result.value == pytest.approx(-1.0)


def test_empty_input_is_undefined():
    """No rows at all is insufficient data."""
    result = correlate([], 1000)
    assert result.pairs == 0
    assert result.reason == CorrelationResult.INSUFFICIENT_PAIRS


def test_fractional_constant_is_undefined(make_combined):
    """A constant like 0.1 is zero variance even though its float mean is inexact."""
    rows = [make_combined("A", d, death_percentage=0.1, full_vaccination_rate=float(i))
            for i, d in enumerate(D[:3])]
    result = correlate(rows, 1000)
    assert result.value is None
    assert result.reason == CorrelationResult.ZERO_VARIANCE


@pytest.mark.parametrize("n", [5, 7, 10])
def test_constant_column_never_yields_a_coefficient(n):
    """Constant 3.33 on either side gives no coefficient."""
    xs = [3.33] * n
    ys = [float(i) for i in range(n)]
    assert pearson(list(zip(xs, ys))).reason == CorrelationResult.ZERO_VARIANCE
    assert pearson(list(zip(ys, xs))).reason == CorrelationResult.ZERO_VARIANCE
