"""Physics — арена и тела сущностей поверх pymunk.

- ArenaConfig: геометрия квадратной арены и стен
- constraints: cap скорости и clamp позиции (страховка поверх решателя)
- PhysicsWorld: тела, применение поведения, события
"""

from .arena import ArenaBounds, ArenaConfig
from .constraints import PositionClamp, VelocityCap, cap_velocity, clamp_to_arena
from .world import BodyMaterialConfig, BodyState, PhysicsWorld, StepReport

__all__ = [
    "ArenaBounds",
    "ArenaConfig",
    "PositionClamp",
    "VelocityCap",
    "cap_velocity",
    "clamp_to_arena",
    "BodyMaterialConfig",
    "BodyState",
    "PhysicsWorld",
    "StepReport",
]
