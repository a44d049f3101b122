"""
Constraints — страховочные ограничения поверх решателя движка

Движок сам разрешает столкновения, но при больших импульсах тело может
разогнаться или «протуннелировать» сквозь стену. После каждого шага:
- скорость ограничивается v_max (направление сохраняется)
- позиция возвращается внутрь арены с учётом радиуса; вызывающий код
  гасит скорость вдвое, если clamp сработал
"""

import math
from dataclasses import dataclass

from src.core.math.numerical_safeguards import clamp, sanitize_float
from src.physics.arena import ArenaBounds


@dataclass(frozen=True)
class VelocityCap:
    """Результат ограничения скорости."""

    vx: float
    vy: float
    capped: bool


@dataclass(frozen=True)
class PositionClamp:
    """Результат clamp'а позиции."""

    x: float
    y: float
    clamped: bool


def cap_velocity(vx: float, vy: float, v_max: float) -> VelocityCap:
    """
    Ограничение модуля скорости.

    NaN/Inf компоненты обнуляются (и считаются ограничением).

    Examples:
        >>> cap_velocity(30.0, 40.0, 10.0)
        VelocityCap(vx=6.0, vy=8.0, capped=True)
        >>> cap_velocity(3.0, 4.0, 10.0).capped
        False
    """
    if not (math.isfinite(vx) and math.isfinite(vy)):
        return VelocityCap(vx=sanitize_float(vx), vy=sanitize_float(vy), capped=True)

    speed = math.hypot(vx, vy)
    if speed <= v_max or speed == 0.0:
        return VelocityCap(vx=vx, vy=vy, capped=False)

    scale = v_max / speed
    return VelocityCap(vx=vx * scale, vy=vy * scale, capped=True)


def clamp_to_arena(
    x: float,
    y: float,
    radius: float,
    bounds: ArenaBounds,
    padding: float = 0.0,
) -> PositionClamp:
    """
    Возврат центра тела в допустимую область [min + r + pad, max - r - pad].

    Если тело шире арены, центр ставится в середину соответствующей оси.
    """
    buffer = radius + padding

    def axis(value: float, low: float, high: float) -> float:
        lo = low + buffer
        hi = high - buffer
        if lo > hi:
            return (low + high) / 2.0
        return clamp(sanitize_float(value, fallback=(low + high) / 2.0), lo, hi)

    new_x = axis(x, bounds.min_x, bounds.max_x)
    new_y = axis(y, bounds.min_y, bounds.max_y)
    return PositionClamp(x=new_x, y=new_y, clamped=(new_x != x or new_y != y))
