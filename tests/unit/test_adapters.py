"""Тесты адаптеров входа/экспорта.

Coverage:
- load_market_chart / load_market_chart_file
- export_derived_series и его контракт
"""

import json

import pytest
from jsonschema import ValidationError

from src.core.domain.series import DataError
from src.metrics.adapters import (
    EXPORT_SCHEMA_VERSION,
    export_derived_series,
    load_market_chart,
    load_market_chart_file,
)
from src.metrics.normalizer import Normalizer
from src.metrics.engine import MetricEngine, MetricConfig
from tests.factories import make_derived, make_raw_series, noisy_prices


class TestLoadMarketChart:
    """Тесты load_market_chart."""

    def test_valid_payload(self):
        series = load_market_chart("bitcoin", {"prices": [[0, 100.0], [3600000, 101]]})
        assert series.entity_id == "bitcoin"
        assert series.timestamps == [0, 3600000]
        assert series.prices == [100.0, 101.0]

    def test_contract_violation(self):
        with pytest.raises(DataError, match="payload rejected"):
            load_market_chart("bitcoin", {"prices": []})

    def test_non_monotonic(self):
        with pytest.raises(DataError, match="strictly increasing"):
            load_market_chart("bitcoin", {"prices": [[10, 1.0], [5, 1.0]]})

    def test_file(self, tmp_path):
        path = tmp_path / "eth.json"
        path.write_text(json.dumps({"prices": [[0, 2000.0], [1000, 2001.0]]}), encoding="utf-8")
        series = load_market_chart_file("ethereum", path)
        assert len(series) == 2

    def test_file_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataError, match="not valid JSON"):
            load_market_chart_file("ethereum", path)

    def test_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_market_chart_file("ethereum", tmp_path / "missing.json")


class TestExportDerivedSeries:
    """Тесты export_derived_series."""

    def test_export_normalized(self):
        raw = {
            "a": make_raw_series("a", noisy_prices(seed=1, count=20)),
            "b": make_raw_series("b", noisy_prices(seed=2, count=20)),
        }
        series = MetricEngine(MetricConfig(window_size=5)).compute_all(raw)
        bounds = Normalizer().normalize(series)

        data = export_derived_series(series, bounds)
        assert data["schema_version"] == EXPORT_SCHEMA_VERSION
        assert data["bounds"]["sample_count"] == 40
        assert len(data["series"]["a"]) == 20
        assert set(data["series"]["a"][0]) == {"ts_ms", "trend", "volatility", "price"}
        json.dumps(data)

    def test_export_without_bounds(self):
        data = export_derived_series({"a": make_derived([(0, 0.0, 0.0, 1.0)])})
        assert data["bounds"] is None

    def test_unnormalized_rejected(self):
        with pytest.raises(ValidationError):
            export_derived_series({"a": make_derived([(0, 5.0, 0.0, 1.0)])})
