"""Тесты оконных статистик.

Coverage:
- log_returns / ols_slope / sample_stddev
- percentile (type 7, линейная интерполяция)
- Вырожденные окна
"""

import math

import pytest

from src.core.math.statistics import (
    log_prices,
    log_returns,
    ols_slope,
    percentile,
    sample_stddev,
)


class TestOlsSlope:
    """Тесты ols_slope."""

    def test_linear_values(self):
        assert ols_slope([1.0, 2.0, 3.0]) == pytest.approx(1.0)
        assert ols_slope([10.0, 8.0, 6.0, 4.0]) == pytest.approx(-2.0)

    def test_constant_values_zero_slope(self):
        assert ols_slope([5.0, 5.0, 5.0, 5.0]) == pytest.approx(0.0)

    def test_fewer_than_two_points(self):
        assert ols_slope([]) == 0.0
        assert ols_slope([3.0]) == 0.0

    def test_log_price_slope_is_log_ratio(self):
        """Наклон ln(price) при геометрическом росте = ln(ratio)."""
        logs = log_prices([100.0 * 1.05 ** i for i in range(10)])
        assert ols_slope(logs) == pytest.approx(math.log(1.05))


class TestSampleStddev:
    """Тесты sample_stddev."""

    def test_known_value(self):
        # mean = 2, Σ(x-mean)² = 2, n-1 = 2 → std = 1
        assert sample_stddev([1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_constant_values(self):
        assert sample_stddev([0.1, 0.1, 0.1]) == pytest.approx(0.0)

    def test_fewer_than_two_values(self):
        assert sample_stddev([]) == 0.0
        assert sample_stddev([0.3]) == 0.0

    def test_two_values_uses_n_minus_one(self):
        assert sample_stddev([0.0, 2.0]) == pytest.approx(math.sqrt(2.0))


class TestLogReturns:
    """Тесты log_returns."""

    def test_differences(self):
        assert log_returns([0.0, 0.5, 1.5]) == pytest.approx([0.5, 1.0])

    def test_short_input(self):
        assert log_returns([1.0]) == []
        assert log_returns([]) == []


class TestPercentile:
    """Тесты percentile."""

    def test_median_interpolated(self):
        assert percentile([1.0, 2.0, 3.0, 4.0], 0.5) == pytest.approx(2.5)

    def test_extremes(self):
        values = [3.0, 1.0, 2.0]
        assert percentile(values, 0.0) == 1.0
        assert percentile(values, 1.0) == 3.0

    def test_type7_p95(self):
        # h = (11 - 1) * 0.95 = 9.5 → 9 + 0.5 * (10 - 9)
        values = [float(i) for i in range(11)]
        assert percentile(values, 0.95) == pytest.approx(9.5)

    def test_single_value(self):
        assert percentile([7.0], 0.05) == 7.0
        assert percentile([7.0], 0.95) == 7.0

    def test_input_not_mutated(self):
        values = [3.0, 1.0, 2.0]
        percentile(values, 0.5)
        assert values == [3.0, 1.0, 2.0]

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            percentile([], 0.5)

    def test_invalid_quantile_raises(self):
        with pytest.raises(ValueError, match="q must be in"):
            percentile([1.0], 1.5)
