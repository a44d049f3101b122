"""
Body — состояние поведения тела и экспортируемый снапшот

Поведение тела — явный tagged state вместо набора независимых флагов:
    Idle(timer_ms)                           — ждёт следующего хопа
    Hopping(frames_remaining, force, angle)  — прикладывает импульс N шагов
    Stunned()                                — оглушён после сильного удара

Комбинация «прыгает и оглушён одновременно» непредставима по построению.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from pydantic import BaseModel, Field


class HopPhase(str, Enum):
    """Фаза поведения тела."""

    IDLE = "IDLE"
    HOPPING = "HOPPING"
    STUNNED = "STUNNED"


@dataclass(frozen=True)
class Idle:
    """Ожидание хопа: обратный отсчёт в миллисекундах."""

    timer_ms: float
    phase: ClassVar[HopPhase] = HopPhase.IDLE


@dataclass(frozen=True)
class Hopping:
    """Активный хоп: сила фиксирована на весь хоп."""

    frames_remaining: int
    force_magnitude: float
    angle: float  # радианы
    phase: ClassVar[HopPhase] = HopPhase.HOPPING


@dataclass(frozen=True)
class Stunned:
    """Оглушение: хопы подавлены, пока скорость не упадёт ниже recovery порога."""

    phase: ClassVar[HopPhase] = HopPhase.STUNNED


BehaviorState = Union[Idle, Hopping, Stunned]


class BodySnapshot(BaseModel):
    """
    Снапшот тела для рендерера.

    Immutable модель (frozen=True), создаётся после каждого шага мира.
    """

    entity_id: str = Field(..., min_length=1, description="Идентификатор сущности")
    x: float = Field(..., description="Позиция X (пиксели)")
    y: float = Field(..., description="Позиция Y (пиксели)")
    radius: float = Field(..., gt=0, description="Текущий радиус (пиксели)")
    vx: float = Field(..., description="Скорость X (пиксели/сек)")
    vy: float = Field(..., description="Скорость Y (пиксели/сек)")
    phase: HopPhase = Field(..., description="Фаза поведения")

    model_config = {"frozen": True}

    @property
    def speed(self) -> float:
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5
