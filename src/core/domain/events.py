"""
Events — дискретные события симуляции для аудио-слоя

- HopStarted: тело начало хоп (звук прыжка)
- WallClamped: страховочный clamp вытолкнул тело обратно в арену
- Collision: первый контакт тело-тело или тело-стена от физического движка
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class HopStarted:
    """Старт хопа."""

    entity_id: str
    force_magnitude: float
    angle: float


@dataclass(frozen=True)
class WallClamped:
    """Clamp позиции на границе арены; impact_speed: скорость до гашения."""

    entity_id: str
    impact_speed: float


@dataclass(frozen=True)
class Collision:
    """
    Первый контакт пары шейпов.

    other_id is None означает контакт со стеной.
    """

    entity_id: str
    other_id: Optional[str]
    impulse: float

    @property
    def is_wall(self) -> bool:
        return self.other_id is None


SimulationEvent = Union[HopStarted, WallClamped, Collision]
