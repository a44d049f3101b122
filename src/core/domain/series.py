"""
Series — модели временных рядов цен и производных метрик

Жизненный цикл:
    RawSeries (immutable, от data-fetch коллаборатора)
      → DerivedSeries (MetricEngine, по одному на сущность)
      → нормализация trend/volatility in-place (Normalizer, ровно один раз)
      → только чтение (TemporalSampler, экспорт для оверлеев)

RawSeries — frozen Pydantic модель, инвариант монотонности проверяется при
создании. DerivedSample — mutable dataclass: Normalizer переписывает
trend/volatility на месте, после чего ряд больше не меняется.
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Sequence, Union

from pydantic import BaseModel, Field, model_validator

from src.core.math.numerical_safeguards import is_valid_float


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DataError(ValueError):
    """
    Невалидный сырой ряд: пустой, немонотонные timestamp'ы или цена <= 0.

    Вызывающий код должен отбраковать такой ряд до MetricEngine.
    """
    pass


# =============================================================================
# RAW SERIES
# =============================================================================


class PricePoint(BaseModel):
    """Наблюдение цены: (timestamp UTC ms, price)."""

    ts_ms: int = Field(..., ge=0, description="Timestamp наблюдения (UTC, миллисекунды)")
    price: float = Field(..., gt=0, description="Цена (строго положительная)")

    model_config = {"frozen": True}


PricePair = tuple[int, float]
RawPoints = Sequence[Union[PricePoint, PricePair]]


def validate_raw_series(points: RawPoints) -> list[PricePoint]:
    """
    Валидация сырого ряда и приведение к списку PricePoint.

    Args:
        points: PricePoint или пары (ts_ms, price) по возрастанию времени

    Returns:
        Список PricePoint

    Raises:
        DataError: Если ряд пуст, timestamp'ы не целые или не строго
            возрастают, или цена не положительна / не конечна
    """
    if len(points) == 0:
        raise DataError("raw series is empty")

    result: list[PricePoint] = []
    prev_ts: int | None = None

    for index, point in enumerate(points):
        if isinstance(point, PricePoint):
            ts_ms, price = point.ts_ms, point.price
        else:
            try:
                ts_ms, price = point
            except (TypeError, ValueError) as e:
                raise DataError(f"point #{index} is not a (ts_ms, price) pair: {point!r}") from e

        if not (is_valid_float(price) and price > 0):
            raise DataError(f"point #{index} has non-positive price {price!r}")

        if not isinstance(ts_ms, (int, float)) or isinstance(ts_ms, bool):
            raise DataError(f"point #{index} has non-numeric timestamp {ts_ms!r}")

        if isinstance(ts_ms, float):
            if not (is_valid_float(ts_ms) and ts_ms.is_integer()):
                raise DataError(f"point #{index} has non-integral timestamp {ts_ms!r}")
            ts_ms = int(ts_ms)

        if prev_ts is not None and ts_ms <= prev_ts:
            raise DataError(
                f"timestamps must be strictly increasing: #{index} ts={ts_ms} <= prev ts={prev_ts}"
            )
        prev_ts = ts_ms

        if isinstance(point, PricePoint):
            result.append(point)
        else:
            result.append(PricePoint(ts_ms=int(ts_ms), price=float(price)))

    return result


class RawSeries(BaseModel):
    """
    Сырой ряд цен одной сущности (монеты).

    Immutable модель (frozen=True). Инвариант: >= 1 точка, timestamp'ы
    строго возрастают.
    """

    entity_id: str = Field(..., min_length=1, description="Идентификатор сущности (например, 'bitcoin')")
    points: tuple[PricePoint, ...] = Field(..., description="Наблюдения по возрастанию времени")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_monotonic(self) -> "RawSeries":
        validate_raw_series(self.points)
        return self

    @classmethod
    def from_pairs(cls, entity_id: str, pairs: Iterable[PricePair]) -> "RawSeries":
        """
        Создание ряда из пар (ts_ms, price).

        Raises:
            DataError: Если пары не проходят validate_raw_series
        """
        points = validate_raw_series(list(pairs))
        return cls(entity_id=entity_id, points=tuple(points))

    @property
    def timestamps(self) -> list[int]:
        return [p.ts_ms for p in self.points]

    @property
    def prices(self) -> list[float]:
        return [p.price for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


# =============================================================================
# DERIVED SERIES
# =============================================================================


@dataclass(slots=True)
class DerivedSample:
    """
    Производный сэмпл: trend/volatility на момент ts_ms.

    До нормализации — сырые значения (наклон лог-цены, std лог-доходностей),
    после — trend ∈ [-1, 1], volatility ∈ [0, 1].
    """

    ts_ms: int
    trend: float
    volatility: float
    price: float

    def to_dict(self) -> dict:
        return asdict(self)


DerivedSeries = list[DerivedSample]


@dataclass(frozen=True)
class MetricSample:
    """Интерполированные метрики на произвольный момент времени."""

    trend: float
    volatility: float
    price: float


@dataclass(frozen=True)
class NormalizationBounds:
    """
    Глобальные границы нормализации по всем сущностям.

    trend_low / trend_high — P5 / P95 трендов, vol_high — P95 волатильностей
    (нижняя граница волатильности всегда 0).
    """

    trend_low: float
    trend_high: float
    vol_high: float
    sample_count: int
