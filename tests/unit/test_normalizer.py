"""Тесты Normalizer.

Coverage:
- Диапазоны после нормализации
- Вырожденные границы
- Относительный порядок сущностей
- Барьер "ровно один раз"
"""

import math

import pytest

from src.metrics.engine import MetricEngine, MetricConfig
from src.metrics.normalizer import (
    Normalizer,
    apply_bounds,
    compute_bounds,
    normalize_all_series,
)
from tests.factories import geometric_prices, make_derived, make_raw_series, noisy_prices


def _derived(raw_prices: dict, window: int = 6) -> dict:
    engine = MetricEngine(MetricConfig(window_size=window))
    return engine.compute_all(
        {entity_id: make_raw_series(entity_id, prices) for entity_id, prices in raw_prices.items()}
    )


class TestComputeBounds:
    """Тесты compute_bounds."""

    def test_empty_returns_none(self):
        assert compute_bounds({}) is None
        assert compute_bounds({"a": []}) is None

    def test_pooled_percentiles(self):
        series = {
            "a": make_derived([(i, float(i), float(i) / 10, 1.0) for i in range(6)]),
            "b": make_derived([(i, float(i + 6), float(i + 6) / 10, 1.0) for i in range(5)]),
        }
        bounds = compute_bounds(series)
        # 11 значений 0..10: P5 = 0.5, P95 = 9.5
        assert bounds.trend_low == pytest.approx(0.5)
        assert bounds.trend_high == pytest.approx(9.5)
        assert bounds.vol_high == pytest.approx(0.95)
        assert bounds.sample_count == 11

    def test_nan_values_sanitized(self):
        series = {"a": make_derived([(0, float("nan"), float("inf"), 1.0), (1, 0.0, 0.0, 1.0)])}
        bounds = compute_bounds(series)
        assert bounds.trend_low == 0.0
        assert bounds.vol_high == 0.0


class TestNormalize:
    """Тесты нормализации на месте."""

    def test_ranges(self):
        series = _derived({
            "a": noisy_prices(seed=1, count=50),
            "b": noisy_prices(seed=2, count=50),
            "c": noisy_prices(seed=3, count=50),
        })
        normalize_all_series(series)
        for samples in series.values():
            for sample in samples:
                assert -1.0 <= sample.trend <= 1.0
                assert 0.0 <= sample.volatility <= 1.0

    def test_constant_prices_all_zero(self):
        """Все тренды одинаковы → вырожденный диапазон → 0."""
        series = _derived({"a": [10.0] * 8, "b": [3.0] * 8})
        bounds = normalize_all_series(series)
        assert bounds.trend_low == bounds.trend_high
        for samples in series.values():
            assert all(s.trend == 0.0 for s in samples)
            assert all(s.volatility == 0.0 for s in samples)

    def test_flat_versus_rising(self):
        series = _derived({
            "flat": [100.0] * 20,
            "rising": geometric_prices(100.0, 1.01, 20),
        })
        normalize_all_series(series)
        assert all(s.trend <= 0.0 for s in series["flat"])
        assert all(s.trend > 0.0 for s in series["rising"][1:])

    def test_outliers_clamped(self):
        values = [(i, i * 0.01, i * 0.01, 1.0) for i in range(40)] + [(40, 1000.0, 50.0, 1.0)]
        series = {"a": make_derived(values)}
        normalize_all_series(series)
        assert series["a"][-1].trend == 1.0
        assert series["a"][-1].volatility == 1.0

    def test_timestamps_and_prices_untouched(self):
        series = {"a": make_derived([(0, 0.1, 0.2, 5.0), (10, 0.3, 0.4, 6.0)])}
        normalize_all_series(series)
        assert [(s.ts_ms, s.price) for s in series["a"]] == [(0, 5.0), (10, 6.0)]

    def test_apply_bounds_zero_vol_high(self):
        series = {"a": make_derived([(0, 0.0, 0.3, 1.0)])}
        bounds = compute_bounds({"a": make_derived([(0, 0.0, 0.0, 1.0)])})
        apply_bounds(series, bounds)
        assert series["a"][0].volatility == 0.0

    def test_nan_sample_normalized_to_finite(self):
        series = {"a": make_derived([(0, float("nan"), float("nan"), 1.0), (1, 1.0, 1.0, 1.0)])}
        normalize_all_series(series)
        assert all(math.isfinite(s.trend) and math.isfinite(s.volatility) for s in series["a"])


class TestNormalizer:
    """Тесты одноразового Normalizer."""

    def test_runs_once(self):
        series = _derived({"a": noisy_prices(seed=4, count=10)})
        normalizer = Normalizer()
        assert not normalizer.applied
        bounds = normalizer.normalize(series)
        assert normalizer.applied
        assert normalizer.bounds == bounds

        with pytest.raises(RuntimeError, match="exactly once"):
            normalizer.normalize(series)

    def test_empty_input(self):
        normalizer = Normalizer()
        assert normalizer.normalize({}) is None
        assert normalizer.applied
