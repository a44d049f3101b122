"""Behavior — state machine поведения тел (IDLE / HOPPING / STUNNED).

- Размер тела следует за трендом
- Ритм и сила хопов следуют за стабильностью (trend / volatility)
- Оглушение после сильных ударов подавляет хопы
"""

from .controller import (
    BehaviorConfig,
    BehaviorController,
    BehaviorOutput,
)

__all__ = [
    "BehaviorConfig",
    "BehaviorController",
    "BehaviorOutput",
]
