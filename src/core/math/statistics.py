"""
Statistics — оконные статистики для метрик настроения

Функции над короткими окнами цен (десятки точек), поэтому реализованы
в чистом Python без векторизации:
- log_prices / log_returns: переход в лог-пространство (масштабная инвариантность)
- ols_slope: наклон МНК-прямой по индексу
- sample_stddev: выборочное стандартное отклонение (n-1, fallback 1)
- percentile: перцентиль с линейной интерполяцией («type 7»)

ФОРМУЛЫ:
    slope = Σ(x − x̄)(y − ȳ) / Σ(x − x̄)²,  x = 0..n-1
    std   = sqrt(Σ(r − mean)² / max(n − 1, 1))
    P(q)  = s[⌊h⌋] + (h − ⌊h⌋)·(s[⌊h⌋+1] − s[⌊h⌋]),  h = (N − 1)·q
"""

import math
from typing import Sequence

from src.core.math.numerical_safeguards import EPS_CALC, safe_divide


def log_prices(prices: Sequence[float]) -> list[float]:
    """
    Натуральный логарифм цен.

    Args:
        prices: Положительные цены (валидируются на входе в MetricEngine)

    Returns:
        Список ln(price)
    """
    return [math.log(p) for p in prices]


def log_returns(log_values: Sequence[float]) -> list[float]:
    """
    Первые разности лог-цен (log returns).

    Examples:
        >>> log_returns([0.0, 0.5, 1.5])
        [0.5, 1.0]
    """
    return [log_values[i] - log_values[i - 1] for i in range(1, len(log_values))]


def ols_slope(values: Sequence[float]) -> float:
    """
    Наклон МНК-прямой values против индекса 0..n-1.

    Returns:
        Наклон; 0.0 если точек меньше двух

    Examples:
        >>> ols_slope([1.0, 2.0, 3.0])
        1.0
        >>> ols_slope([5.0])
        0.0
    """
    n = len(values)
    if n < 2:
        return 0.0

    mean_x = (n - 1) / 2.0
    mean_y = sum(values) / n

    # Центрированная форма: для постоянного ряда числитель ровно 0
    numerator = 0.0
    denominator = 0.0
    for i, y in enumerate(values):
        dx = i - mean_x
        numerator += dx * (y - mean_y)
        denominator += dx * dx

    return safe_divide(numerator, denominator, eps=EPS_CALC, fallback=0.0)


def sample_stddev(values: Sequence[float]) -> float:
    """
    Выборочное стандартное отклонение.

    Знаменатель count-1, либо 1 если count-1 == 0.

    Returns:
        Стандартное отклонение; 0.0 если значений меньше двух

    Examples:
        >>> sample_stddev([0.1, 0.1, 0.1])
        0.0
        >>> sample_stddev([0.3])
        0.0
    """
    n = len(values)
    if n < 2:
        return 0.0

    mean = sum(values) / n
    sum_sq_diff = sum((v - mean) ** 2 for v in values)
    return math.sqrt(sum_sq_diff / ((n - 1) or 1))


def percentile(values: Sequence[float], q: float) -> float:
    """
    Перцентиль с линейной интерполяцией между порядковыми статистиками.

    Args:
        values: Непустая выборка (сортируется копия)
        q: Квантиль в [0, 1]

    Raises:
        ValueError: Если выборка пуста или q вне [0, 1]

    Examples:
        >>> percentile([1.0, 2.0, 3.0, 4.0], 0.5)
        2.5
        >>> percentile([7.0], 0.95)
        7.0
    """
    if not values:
        raise ValueError("percentile of empty sequence")
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"q must be in [0, 1], got {q}")

    ordered = sorted(values)
    position = (len(ordered) - 1) * q
    base = math.floor(position)
    rest = position - base

    if base + 1 < len(ordered):
        return ordered[base] + rest * (ordered[base + 1] - ordered[base])
    return ordered[base]
