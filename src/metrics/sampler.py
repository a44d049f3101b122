"""
TemporalSampler — непрерывное время поверх дискретных метрик

Линейная интерполяция trend/volatility/price между соседними сэмплами:
симуляция может идти в своём темпе (например, 30 дней истории за 35 секунд
видео) и получать плотные оценки без ступенек.

Граничные случаи:
- t раньше первого сэмпла  → первый сэмпл без изменений (clamp-left)
- t позже последнего       → последний сэмпл без изменений (clamp-right)
- t ровно на timestamp'е   → этот сэмпл без интерполяционной ошибки
- нулевой шаг времени      → левый сэмпл
- пустой ряд               → PreconditionError (ошибка вызывающего кода)

Поиск пары через bisect, O(log n).
"""

from bisect import bisect_right
from typing import Mapping, Optional

from src.core.domain.series import DerivedSample, DerivedSeries, MetricSample


class PreconditionError(RuntimeError):
    """Запрос к пустому ряду: вызывающий код обязан гарантировать >= 1 сэмпл."""
    pass


def _as_metric_sample(sample: DerivedSample) -> MetricSample:
    return MetricSample(trend=sample.trend, volatility=sample.volatility, price=sample.price)


def sample_at(series: DerivedSeries, t_ms: float) -> MetricSample:
    """
    Метрики ряда в момент t_ms.

    Args:
        series: DerivedSeries, отсортированный по ts_ms
        t_ms: Момент запроса (UTC, миллисекунды)

    Returns:
        MetricSample

    Raises:
        PreconditionError: Если ряд пуст
    """
    if not series:
        raise PreconditionError("cannot sample an empty derived series")

    first = series[0]
    last = series[-1]

    if t_ms <= first.ts_ms:
        return _as_metric_sample(first)
    if t_ms >= last.ts_ms:
        return _as_metric_sample(last)

    # Индекс первого сэмпла с ts > t_ms; слева от него сэмпл с ts <= t_ms
    right = bisect_right(series, t_ms, key=lambda s: s.ts_ms)
    left_sample = series[right - 1]
    right_sample = series[right]

    if left_sample.ts_ms == t_ms:
        return _as_metric_sample(left_sample)

    span = right_sample.ts_ms - left_sample.ts_ms
    if span <= 0:
        return _as_metric_sample(left_sample)

    ratio = (t_ms - left_sample.ts_ms) / span
    return MetricSample(
        trend=left_sample.trend + (right_sample.trend - left_sample.trend) * ratio,
        volatility=left_sample.volatility + (right_sample.volatility - left_sample.volatility) * ratio,
        price=left_sample.price + (right_sample.price - left_sample.price) * ratio,
    )


class TemporalSampler:
    """
    Сэмплер по набору сущностей.

    Не хранит состояния между запросами, кроме ссылок на ряды.
    """

    def __init__(self, series_by_entity: Mapping[str, DerivedSeries]):
        self._series = series_by_entity

    @property
    def entity_ids(self) -> list[str]:
        return list(self._series.keys())

    def sample(self, entity_id: str, t_ms: float) -> Optional[MetricSample]:
        """
        Метрики сущности в момент t_ms.

        Returns:
            MetricSample или None, если сущность неизвестна

        Raises:
            PreconditionError: Если ряд сущности пуст
        """
        series = self._series.get(entity_id)
        if series is None:
            return None
        return sample_at(series, t_ms)

    def sample_all(self, t_ms: float) -> dict[str, MetricSample]:
        """Метрики всех непустых рядов в момент t_ms."""
        return {
            entity_id: sample_at(series, t_ms)
            for entity_id, series in self._series.items()
            if series
        }
