"""
Numerical Safeguards — безопасные математические примитивы

Модуль обеспечивает численную устойчивость метрик и поведения тел:
- Безопасное деление с fallback вместо ZeroDivisionError
- NaN/Inf санитизация входов метрик и поведения
- Clamp / lerp для всех интерполяций (размер, сила хопа, интервалы)
- Валидация параметров конфигураций

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не происходит (возвращается fallback)
2. NaN/Inf никогда не попадают в силы и радиусы (заменяются на fallback)
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений (OLS знаменатель, сравнения timestamp'ов)
EPS_CALC: Final[float] = 1e-12

# Epsilon для стабильности поведения: trend / (smoothed_vol + EPS_STABILITY).
# Волатильность нормирована в [0, 1], поэтому 0.1 ограничивает ratio на ±10.
EPS_STABILITY: Final[float] = 0.1


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли значение конечным float (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение finite
    """
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    Замена NaN/Inf (и нечисловых значений) на fallback.

    Examples:
        >>> sanitize_float(0.25)
        0.25
        >>> sanitize_float(float('nan'))
        0.0
        >>> sanitize_float(float('-inf'), fallback=-1.0)
        -1.0
    """
    if is_valid_float(value):
        return float(value)
    return fallback


def sanitize_non_negative(value: float, fallback: float = 0.0) -> float:
    """
    Санитизация величины, которая по построению не может быть отрицательной
    (волатильность, скорость). NaN/Inf и отрицательные значения → fallback.
    """
    clean = sanitize_float(value, fallback=fallback)
    if clean < 0.0:
        return fallback
    return clean


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: float,
    denominator: float,
    eps: float = EPS_CALC,
    fallback: float = 0.0,
) -> float:
    """
    Деление с защитой от нулевого знаменателя и NaN/Inf.

    Если abs(denominator) < eps, возвращается fallback (в отличие от
    epsilon-подстановки: вырожденный диапазон означает «нет информации»,
    а не «бесконечно крутой наклон»).

    Args:
        numerator: Числитель
        denominator: Знаменатель
        eps: Порог вырожденности знаменателя
        fallback: Значение при вырожденном знаменателе или невалидном результате

    Examples:
        >>> safe_divide(1.0, 4.0)
        0.25
        >>> safe_divide(1.0, 0.0)
        0.0
        >>> safe_divide(1.0, 1e-20, fallback=-1.0)
        -1.0
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")

    num_clean = sanitize_float(numerator, fallback=0.0)
    denom_clean = sanitize_float(denominator, fallback=0.0)

    if abs(denom_clean) < eps:
        return fallback

    return sanitize_float(num_clean / denom_clean, fallback=fallback)


# =============================================================================
# ОГРАНИЧЕНИЕ И ИНТЕРПОЛЯЦИЯ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, max_value=10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def lerp(start: float, end: float, fraction: float) -> float:
    """
    Линейная интерполяция start → end.

    fraction не ограничивается: вызывающий код сам решает, нужен ли clamp.

    Examples:
        >>> lerp(150.0, 4000.0, 0.0)
        150.0
        >>> lerp(0.05, 3.0, 1.0)
        3.0
    """
    return start + (end - start) * fraction


def rescale_clamped(
    value: float,
    old_min: float,
    old_max: float,
    new_min: float,
    new_max: float,
    degenerate: float = 0.0,
) -> float:
    """
    Clamp value в [old_min, old_max] и линейное отображение в [new_min, new_max].

    При вырожденном исходном диапазоне (|old_max - old_min| < EPS_CALC) возвращает
    degenerate без исключения.

    Examples:
        >>> rescale_clamped(0.5, 0.0, 1.0, -1.0, 1.0)
        0.0
        >>> rescale_clamped(7.0, 0.0, 1.0, 0.0, 1.0)
        1.0
        >>> rescale_clamped(3.0, 2.0, 2.0, -1.0, 1.0)
        0.0
    """
    if abs(old_max - old_min) < EPS_CALC:
        return degenerate

    clamped = clamp(sanitize_float(value, fallback=old_min), old_min, old_max)
    fraction = (clamped - old_min) / (old_max - old_min)
    return new_min + fraction * (new_max - new_min)


# =============================================================================
# ВАЛИДАЦИЯ ПАРАМЕТРОВ
# =============================================================================


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение строго положительное.

    Raises:
        ValueError: Если value <= 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (границы включительно).

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
