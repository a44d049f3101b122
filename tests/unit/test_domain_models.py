"""
Тесты для доменных моделей: RawSeries, PricePoint, DerivedSample, состояния тел

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Инвариант монотонности сырого ряда (DataError)
3. Immutability (frozen=True)
4. Сериализацию/десериализацию JSON
5. Tagged state поведения тела
"""

import dataclasses
import json

import pytest
from pydantic import ValidationError

from src.core.domain import (
    BodySnapshot,
    Collision,
    DataError,
    DerivedSample,
    Hopping,
    HopPhase,
    Idle,
    PricePoint,
    RawSeries,
    Stunned,
    WallClamped,
    validate_raw_series,
)


# =============================================================================
# PRICE POINT TESTS
# =============================================================================


class TestPricePoint:
    """Тесты для модели PricePoint"""

    def test_valid_point(self) -> None:
        point = PricePoint(ts_ms=1700000000000, price=42000.5)
        assert point.ts_ms == 1700000000000
        assert point.price == 42000.5

    def test_price_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PricePoint(ts_ms=0, price=0.0)
        with pytest.raises(ValidationError):
            PricePoint(ts_ms=0, price=-1.0)

    def test_negative_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PricePoint(ts_ms=-1, price=1.0)

    def test_immutable(self) -> None:
        point = PricePoint(ts_ms=0, price=1.0)
        with pytest.raises(ValidationError):
            point.price = 2.0  # type: ignore[misc]


# =============================================================================
# RAW SERIES TESTS
# =============================================================================


class TestValidateRawSeries:
    """Тесты для validate_raw_series"""

    def test_accepts_pairs(self) -> None:
        points = validate_raw_series([(0, 100.0), (1000, 101.0)])
        assert [p.ts_ms for p in points] == [0, 1000]
        assert all(isinstance(p, PricePoint) for p in points)

    def test_accepts_price_points(self) -> None:
        points = validate_raw_series([PricePoint(ts_ms=5, price=1.0)])
        assert points[0].ts_ms == 5

    def test_empty_raises(self) -> None:
        with pytest.raises(DataError, match="empty"):
            validate_raw_series([])

    def test_duplicate_timestamp_raises(self) -> None:
        with pytest.raises(DataError, match="strictly increasing"):
            validate_raw_series([(0, 1.0), (0, 2.0)])

    def test_decreasing_timestamp_raises(self) -> None:
        with pytest.raises(DataError, match="strictly increasing"):
            validate_raw_series([(10, 1.0), (5, 2.0)])

    def test_non_positive_price_raises(self) -> None:
        with pytest.raises(DataError, match="non-positive price"):
            validate_raw_series([(0, 1.0), (1, 0.0)])

    def test_nan_price_raises(self) -> None:
        with pytest.raises(DataError, match="non-positive price"):
            validate_raw_series([(0, float("nan"))])

    def test_malformed_point_raises(self) -> None:
        with pytest.raises(DataError, match="not a \\(ts_ms, price\\) pair"):
            validate_raw_series([(0, 1.0, 2.0)])

    def test_non_numeric_timestamp_raises(self) -> None:
        with pytest.raises(DataError, match="non-numeric timestamp"):
            validate_raw_series([("noon", 1.0)])

    def test_fractional_timestamp_raises(self) -> None:
        """Дробные timestamp'ы не усекаются молча до одинаковых ts_ms"""
        with pytest.raises(DataError, match="non-integral timestamp"):
            validate_raw_series([(0.2, 1.0), (0.7, 2.0)])
        with pytest.raises(DataError, match="non-integral timestamp"):
            RawSeries.from_pairs("x", [(0.2, 1.0), (0.7, 2.0)])

    def test_integral_float_timestamp_accepted(self) -> None:
        points = validate_raw_series([(0.0, 1.0), (1000.0, 2.0)])
        assert [p.ts_ms for p in points] == [0, 1000]

    def test_data_error_is_value_error(self) -> None:
        """Вызывающий код может ловить DataError как ValueError"""
        assert issubclass(DataError, ValueError)


class TestRawSeries:
    """Тесты для модели RawSeries"""

    def test_from_pairs(self) -> None:
        series = RawSeries.from_pairs("bitcoin", [(0, 100.0), (1000, 110.0), (2000, 121.0)])
        assert series.entity_id == "bitcoin"
        assert len(series) == 3
        assert series.timestamps == [0, 1000, 2000]
        assert series.prices == [100.0, 110.0, 121.0]

    def test_from_pairs_rejects_unsorted(self) -> None:
        with pytest.raises(DataError):
            RawSeries.from_pairs("eth", [(1000, 1.0), (0, 1.0)])

    def test_direct_construction_checks_monotonic(self) -> None:
        """Прямое создание тоже проверяет инвариант (через model_validator)"""
        with pytest.raises(ValueError):
            RawSeries(
                entity_id="eth",
                points=(PricePoint(ts_ms=10, price=1.0), PricePoint(ts_ms=10, price=2.0)),
            )

    def test_empty_entity_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RawSeries(entity_id="", points=(PricePoint(ts_ms=0, price=1.0),))

    def test_immutable(self) -> None:
        series = RawSeries.from_pairs("sol", [(0, 1.0)])
        with pytest.raises(ValidationError):
            series.entity_id = "other"  # type: ignore[misc]

    def test_json_roundtrip(self) -> None:
        series = RawSeries.from_pairs("doge", [(0, 0.1), (60000, 0.11)])
        restored = RawSeries.model_validate(json.loads(series.model_dump_json()))
        assert restored == series


# =============================================================================
# DERIVED SAMPLE TESTS
# =============================================================================


class TestDerivedSample:
    """Тесты для DerivedSample"""

    def test_mutable_for_normalization(self) -> None:
        sample = DerivedSample(ts_ms=0, trend=0.003, volatility=0.01, price=100.0)
        sample.trend = 0.5
        assert sample.trend == 0.5

    def test_to_dict(self) -> None:
        sample = DerivedSample(ts_ms=7, trend=-0.2, volatility=0.4, price=3.5)
        assert sample.to_dict() == {"ts_ms": 7, "trend": -0.2, "volatility": 0.4, "price": 3.5}


# =============================================================================
# BODY STATE TESTS
# =============================================================================


class TestBehaviorStates:
    """Тесты для tagged state Idle / Hopping / Stunned"""

    def test_phases(self) -> None:
        assert Idle(timer_ms=100.0).phase == HopPhase.IDLE
        assert Hopping(frames_remaining=5, force_magnitude=1.0, angle=0.0).phase == HopPhase.HOPPING
        assert Stunned().phase == HopPhase.STUNNED

    def test_states_frozen(self) -> None:
        state = Idle(timer_ms=100.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.timer_ms = 0.0  # type: ignore[misc]

    def test_phase_not_a_field(self) -> None:
        """phase — ClassVar, а не поле состояния"""
        assert [f.name for f in dataclasses.fields(Stunned)] == []

    def test_phase_is_str_enum(self) -> None:
        assert HopPhase.STUNNED == "STUNNED"


class TestBodySnapshot:
    """Тесты для BodySnapshot"""

    def test_speed(self) -> None:
        snap = BodySnapshot(entity_id="btc", x=10.0, y=20.0, radius=42.0, vx=3.0, vy=4.0, phase=HopPhase.IDLE)
        assert snap.speed == pytest.approx(5.0)

    def test_radius_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BodySnapshot(entity_id="btc", x=0.0, y=0.0, radius=0.0, vx=0.0, vy=0.0, phase=HopPhase.IDLE)

    def test_json_serialization(self) -> None:
        snap = BodySnapshot(entity_id="btc", x=1.0, y=2.0, radius=42.0, vx=0.0, vy=0.0, phase=HopPhase.HOPPING)
        data = json.loads(snap.model_dump_json())
        assert data["phase"] == "HOPPING"
        assert BodySnapshot.model_validate(data) == snap


class TestEvents:
    """Тесты для событий симуляции"""

    def test_wall_collision(self) -> None:
        assert Collision(entity_id="a", other_id=None, impulse=1.0).is_wall
        assert not Collision(entity_id="a", other_id="b", impulse=1.0).is_wall

    def test_events_frozen(self) -> None:
        event = WallClamped(entity_id="a", impact_speed=10.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.impact_speed = 0.0  # type: ignore[misc]
