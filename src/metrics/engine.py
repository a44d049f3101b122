"""
MetricEngine — оконные метрики настроения по сырому ряду цен

Для каждого индекса i окно = точки max(0, i-W+1) .. i включительно.
В начале истории окно короче W (ramp-up), и метрики считаются по тому, что
есть, вместо пропусков. Первые W сэмплов поэтому менее надёжны статистически:
это известное приближение, не баг.

Метрики окна:
- trend      = наклон МНК-прямой ln(price) по индексу (< 2 точек → 0)
- volatility = выборочное std лог-доходностей окна (< 2 доходностей → 0)
- price      = без изменений

Чистая функция над историей: без общего состояния, сущности независимы.
"""

from dataclasses import dataclass
from typing import Mapping, Union

from loguru import logger

from src.core.domain.series import (
    DerivedSample,
    DerivedSeries,
    RawPoints,
    RawSeries,
    validate_raw_series,
)
from src.core.math.statistics import log_prices, log_returns, ols_slope, sample_stddev


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class MetricConfig:
    """
    Конфигурация MetricEngine.

    window_size — размер окна в сэмплах (не во времени). Для часовых данных
    48 = двое суток.
    """

    window_size: int = 48

    def __post_init__(self) -> None:
        if isinstance(self.window_size, bool) or not isinstance(self.window_size, int):
            raise ValueError(f"window_size must be int, got {self.window_size!r}")
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")


# =============================================================================
# WINDOW METRICS
# =============================================================================


@dataclass(frozen=True)
class WindowMetrics:
    """Метрики одного окна."""

    trend: float
    volatility: float


def compute_window_metrics(window_log_prices: list[float]) -> WindowMetrics:
    """
    Trend и volatility по окну лог-цен.

    Args:
        window_log_prices: ln(price) точек окна в хронологическом порядке

    Returns:
        WindowMetrics (нули для вырожденных окон)
    """
    trend = ols_slope(window_log_prices)
    volatility = sample_stddev(log_returns(window_log_prices))
    return WindowMetrics(trend=trend, volatility=volatility)


def compute_metric_series(
    series: Union[RawSeries, RawPoints],
    window_size: int,
) -> DerivedSeries:
    """
    Производный ряд (ts, trend, volatility, price) той же длины, что и вход.

    Args:
        series: RawSeries или пары (ts_ms, price) по возрастанию времени
        window_size: Размер окна W в сэмплах (>= 1)

    Returns:
        DerivedSeries, по сэмплу на каждую входную точку

    Raises:
        DataError: Если ряд пуст или немонотонен
        ValueError: Если window_size < 1

    Examples:
        >>> derived = compute_metric_series([(0, 100.0), (1, 110.0), (2, 121.0)], 2)
        >>> round(derived[2].trend, 4)
        0.0953
    """
    config = MetricConfig(window_size=window_size)

    points = series.points if isinstance(series, RawSeries) else validate_raw_series(series)
    logs_all = log_prices([p.price for p in points])

    derived: DerivedSeries = []
    for i, point in enumerate(points):
        start = max(0, i - config.window_size + 1)
        metrics = compute_window_metrics(logs_all[start:i + 1])
        derived.append(
            DerivedSample(
                ts_ms=point.ts_ms,
                trend=metrics.trend,
                volatility=metrics.volatility,
                price=point.price,
            )
        )

    return derived


# =============================================================================
# ENGINE
# =============================================================================


class MetricEngine:
    """
    Расчёт производных рядов для набора сущностей.

    Каждая сущность обрабатывается независимо; нормализация — отдельный шаг
    (Normalizer), который должен увидеть все ряды целиком.
    """

    def __init__(self, config: MetricConfig | None = None):
        self.config = config or MetricConfig()

    def compute(self, series: Union[RawSeries, RawPoints]) -> DerivedSeries:
        """Производный ряд одной сущности."""
        return compute_metric_series(series, self.config.window_size)

    def compute_all(self, raw_by_entity: Mapping[str, RawSeries]) -> dict[str, DerivedSeries]:
        """
        Производные ряды для всех сущностей (порядок ключей сохраняется).

        Args:
            raw_by_entity: entity_id → RawSeries

        Returns:
            entity_id → DerivedSeries
        """
        result: dict[str, DerivedSeries] = {}
        for entity_id, raw in raw_by_entity.items():
            result[entity_id] = self.compute(raw)
            logger.debug(
                f"[Metrics] {entity_id}: {len(raw)} samples, window={self.config.window_size}"
            )
        return result
