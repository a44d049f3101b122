"""Metrics — конвейер сырые цены → trend/volatility → нормализация → сэмплинг.

- MetricEngine: оконные метрики по ряду одной сущности
- Normalizer: глобальные перцентильные границы, один раз на запуск
- TemporalSampler: линейная интерполяция с clamp по краям
- adapters: вход market chart payload, экспорт нормализованных рядов
"""

from .adapters import (
    export_derived_series,
    load_market_chart,
    load_market_chart_file,
)
from .engine import (
    MetricConfig,
    MetricEngine,
    WindowMetrics,
    compute_metric_series,
    compute_window_metrics,
)
from .normalizer import (
    Normalizer,
    apply_bounds,
    compute_bounds,
    normalize_all_series,
)
from .sampler import (
    PreconditionError,
    TemporalSampler,
    sample_at,
)

__all__ = [
    "export_derived_series",
    "load_market_chart",
    "load_market_chart_file",
    "MetricConfig",
    "MetricEngine",
    "WindowMetrics",
    "compute_metric_series",
    "compute_window_metrics",
    "Normalizer",
    "apply_bounds",
    "compute_bounds",
    "normalize_all_series",
    "PreconditionError",
    "TemporalSampler",
    "sample_at",
]
