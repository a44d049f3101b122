"""
Normalizer — глобальная перцентильная нормализация метрик

Все trend и volatility всех сущностей собираются в две плоские выборки:
- trend_low / trend_high = P5 / P95 трендов → trend ∈ [-1, 1]
- vol_high = P95 волатильностей, нижняя граница 0 → volatility ∈ [0, 1]

Перцентили вместо min/max: значения за границами клампятся к -1 / 1 (или 1
для волатильности).

Вырожденные диапазоны не бросают исключений:
- trend_low == trend_high → все тренды 0
- vol_high == 0           → все волатильности 0

Барьер: нормализация выполняется ровно один раз, после того как все ряды
посчитаны, и до первого запроса TemporalSampler.
"""

from typing import Final, Mapping

from loguru import logger

from src.core.domain.series import DerivedSeries, NormalizationBounds
from src.core.math.numerical_safeguards import rescale_clamped, sanitize_float
from src.core.math.statistics import percentile

# =============================================================================
# CONSTANTS
# =============================================================================

TREND_LOW_QUANTILE: Final[float] = 0.05
TREND_HIGH_QUANTILE: Final[float] = 0.95
VOL_HIGH_QUANTILE: Final[float] = 0.95


def compute_bounds(series_by_entity: Mapping[str, DerivedSeries]) -> NormalizationBounds | None:
    """
    Глобальные границы нормализации.

    NaN/Inf значения (битые сэмплы) заменяются на 0 до подсчёта перцентилей.

    Returns:
        NormalizationBounds или None, если сэмплов нет
    """
    trends: list[float] = []
    vols: list[float] = []

    for series in series_by_entity.values():
        for sample in series:
            trends.append(sanitize_float(sample.trend))
            vols.append(sanitize_float(sample.volatility))

    if not trends:
        return None

    return NormalizationBounds(
        trend_low=percentile(trends, TREND_LOW_QUANTILE),
        trend_high=percentile(trends, TREND_HIGH_QUANTILE),
        vol_high=percentile(vols, VOL_HIGH_QUANTILE),
        sample_count=len(trends),
    )


def apply_bounds(
    series_by_entity: Mapping[str, DerivedSeries],
    bounds: NormalizationBounds,
) -> None:
    """Перемасштабирование trend/volatility на месте по готовым границам."""
    for series in series_by_entity.values():
        for sample in series:
            sample.trend = rescale_clamped(
                sanitize_float(sample.trend),
                bounds.trend_low,
                bounds.trend_high,
                -1.0,
                1.0,
                degenerate=0.0,
            )
            sample.volatility = rescale_clamped(
                sanitize_float(sample.volatility),
                0.0,
                bounds.vol_high,
                0.0,
                1.0,
                degenerate=0.0,
            )


def normalize_all_series(
    series_by_entity: Mapping[str, DerivedSeries],
) -> NormalizationBounds | None:
    """
    Глобальная нормализация всех рядов на месте.

    Args:
        series_by_entity: entity_id → DerivedSeries (полностью посчитанные)

    Returns:
        Использованные границы или None, если нормализовать нечего
    """
    bounds = compute_bounds(series_by_entity)
    if bounds is None:
        logger.warning("[Metrics] Normalization skipped: no samples")
        return None

    logger.info(
        f"[Metrics] Global normalization bounds: "
        f"trend=[{bounds.trend_low:.6f}, {bounds.trend_high:.6f}], "
        f"vol_max={bounds.vol_high:.6f}, samples={bounds.sample_count}"
    )

    apply_bounds(series_by_entity, bounds)
    return bounds


class Normalizer:
    """
    Одноразовый нормализатор.

    Повторный вызов — ошибка вызывающего кода: уже нормализованные значения
    были бы нормализованы второй раз.
    """

    def __init__(self) -> None:
        self._bounds: NormalizationBounds | None = None
        self._applied = False

    @property
    def applied(self) -> bool:
        return self._applied

    @property
    def bounds(self) -> NormalizationBounds | None:
        return self._bounds

    def normalize(self, series_by_entity: Mapping[str, DerivedSeries]) -> NormalizationBounds | None:
        """
        Нормализация на месте.

        Raises:
            RuntimeError: Если нормализация уже выполнялась
        """
        if self._applied:
            raise RuntimeError("Normalizer must run exactly once per generation run")

        self._bounds = normalize_all_series(series_by_entity)
        self._applied = True
        return self._bounds
