"""
PhysicsWorld — тела сущностей в арене поверх pymunk

Интеграция и разрешение столкновений выполняет pymunk. Мир только:
- создаёт арену (статические стены) и тела-круги
- на каждом шаге передаёт метрики контроллерам поведения и применяет
  их выход: изменение радиуса (и массы), силу хопа
- держит страховочные инварианты: |v| <= v_max, тело внутри арены
- собирает события для аудио-слоя (хоп, clamp о стену, контакты)

Масса ~ r³: плотность пропорциональна радиусу (density = k·r), площадь ~ r².
Сила хопа ~ r², поэтому крупные тела ускоряются слабее (a ~ 1/r).

Порядок шага update(dt_ms, samples):
1. space.step(dt)
2. первые контакты → Collision
3. поведение (радиус, сила) для тел, у которых есть сэмпл
4. cap скорости и clamp позиции для всех тел
"""

import math
import random
from dataclasses import dataclass, field
from typing import Mapping, Optional

import pymunk
from loguru import logger

from src.behavior.controller import BehaviorConfig, BehaviorController
from src.core.domain.body import BodySnapshot
from src.core.domain.events import Collision, HopStarted, SimulationEvent, WallClamped
from src.core.domain.series import MetricSample
from src.core.math.numerical_safeguards import validate_non_negative, validate_positive
from src.physics.arena import ArenaBounds, ArenaConfig
from src.physics.constraints import cap_velocity, clamp_to_arena


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class BodyMaterialConfig:
    """
    Материал тел и среды.

    elasticity > 1 даёт «взрывные» отскоки (pymunk перемножает elasticity
    пары шейпов). damping — доля скорости, сохраняемая за секунду
    (аналог сопротивления воздуха).
    """

    density_per_radius: float = 0.001
    elasticity: float = 1.05
    friction: float = 0.0
    wall_elasticity: float = 1.0
    wall_friction: float = 0.0
    damping: float = 0.55
    v_max: float = 360.0

    # Спавн: rejection sampling без перекрытий
    spawn_padding: float = 10.0
    spawn_attempts: int = 100

    def __post_init__(self) -> None:
        validate_positive(self.density_per_radius, "density_per_radius")
        validate_non_negative(self.elasticity, "elasticity")
        validate_non_negative(self.friction, "friction")
        validate_non_negative(self.wall_elasticity, "wall_elasticity")
        validate_non_negative(self.wall_friction, "wall_friction")
        validate_positive(self.damping, "damping")
        if self.damping > 1.0:
            raise ValueError(f"damping must be <= 1, got {self.damping}")
        validate_positive(self.v_max, "v_max")
        validate_non_negative(self.spawn_padding, "spawn_padding")
        if self.spawn_attempts < 1:
            raise ValueError(f"spawn_attempts must be >= 1, got {self.spawn_attempts}")


# =============================================================================
# STATE
# =============================================================================


@dataclass
class BodyState:
    """Тело сущности: pymunk body/shape + контроллер поведения."""

    entity_id: str
    body: pymunk.Body
    shape: pymunk.Circle
    controller: BehaviorController

    @property
    def radius(self) -> float:
        return self.shape.radius

    @property
    def speed(self) -> float:
        return self.body.velocity.length

    def snapshot(self) -> BodySnapshot:
        position = self.body.position
        velocity = self.body.velocity
        return BodySnapshot(
            entity_id=self.entity_id,
            x=position.x,
            y=position.y,
            radius=self.shape.radius,
            vx=velocity.x,
            vy=velocity.y,
            phase=self.controller.phase,
        )


@dataclass(frozen=True)
class StepReport:
    """Результат шага мира."""

    events: list[SimulationEvent] = field(default_factory=list)

    def of_type(self, event_type: type) -> list[SimulationEvent]:
        return [e for e in self.events if isinstance(e, event_type)]


# =============================================================================
# WORLD
# =============================================================================


class PhysicsWorld:
    """
    Арена с телами сущностей.

    Один seedable генератор используется и для спавна, и для контроллеров:
    при одинаковом seed прогон воспроизводим.
    """

    def __init__(
        self,
        arena: Optional[ArenaConfig] = None,
        material: Optional[BodyMaterialConfig] = None,
        behavior: Optional[BehaviorConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.arena = arena or ArenaConfig()
        self.material = material or BodyMaterialConfig()
        self.behavior = behavior or BehaviorConfig()
        self._rng = rng if rng is not None else random.Random()

        self.space = pymunk.Space()
        self.space.gravity = (0.0, 0.0)
        self.space.damping = self.material.damping

        self.bodies: dict[str, BodyState] = {}
        # id(shape) → entity_id; стены в словарь не попадают
        self._shape_owner: dict[int, str] = {}

        self._add_walls()

    @property
    def arena_bounds(self) -> ArenaBounds:
        return self.arena.bounds

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _add_walls(self) -> None:
        for vertices in self.arena.wall_polygons():
            wall = pymunk.Poly(self.space.static_body, vertices)
            wall.elasticity = self.material.wall_elasticity
            wall.friction = self.material.wall_friction
            self.space.add(wall)

    def mass_for_radius(self, radius: float) -> float:
        """Масса круга с плотностью density_per_radius·r: k·r·πr²."""
        return self.material.density_per_radius * radius * math.pi * radius * radius

    def _spawn_position(self, radius: float) -> tuple[float, float]:
        """
        Случайная позиция без перекрытия с уже созданными телами.

        После spawn_attempts неудачных попыток возвращается последняя
        выбранная позиция (решатель движка растолкает тела).
        """
        b = self.arena_bounds
        buffer = radius + self.material.spawn_padding
        x, y = b.center

        for _ in range(self.material.spawn_attempts):
            x = b.min_x + buffer + self._rng.random() * max(b.width - 2 * buffer, 0.0)
            y = b.min_y + buffer + self._rng.random() * max(b.height - 2 * buffer, 0.0)

            overlaps = False
            for state in self.bodies.values():
                position = state.body.position
                if math.hypot(x - position.x, y - position.y) < radius + state.radius:
                    overlaps = True
                    break
            if not overlaps:
                return x, y

        logger.warning(
            f"[Physics] No free spawn position after {self.material.spawn_attempts} attempts"
        )
        return x, y

    def setup_bodies(self, entity_ids: list[str]) -> None:
        """
        Создание тел для сущностей.

        Raises:
            ValueError: Если id повторяется или тело уже существует
        """
        radius = self.behavior.base_radius

        for entity_id in entity_ids:
            if entity_id in self.bodies:
                raise ValueError(f"body for {entity_id!r} already exists")

            x, y = self._spawn_position(radius)

            mass = self.mass_for_radius(radius)
            body = pymunk.Body(mass, pymunk.moment_for_circle(mass, 0, radius))
            body.position = (x, y)

            shape = pymunk.Circle(body, radius)
            shape.elasticity = self.material.elasticity
            shape.friction = self.material.friction

            self.space.add(body, shape)
            self._shape_owner[id(shape)] = entity_id

            self.bodies[entity_id] = BodyState(
                entity_id=entity_id,
                body=body,
                shape=shape,
                controller=BehaviorController(entity_id, self.behavior, self._rng),
            )

        logger.info(
            f"[Physics] Spawned {len(entity_ids)} bodies in arena "
            f"{self.arena.inner_size:.0f}x{self.arena.inner_size:.0f}"
        )

    # -------------------------------------------------------------------------
    # Step
    # -------------------------------------------------------------------------

    def _resize(self, state: BodyState, radius: float) -> None:
        mass = self.mass_for_radius(radius)
        state.shape.unsafe_set_radius(radius)
        state.body.mass = mass
        state.body.moment = pymunk.moment_for_circle(mass, 0, radius)

    def _collect_collisions(self) -> list[SimulationEvent]:
        events: list[SimulationEvent] = []
        seen: set[frozenset] = set()

        def on_arbiter(arbiter: pymunk.Arbiter) -> None:
            if not arbiter.is_first_contact:
                return
            shape_a, shape_b = arbiter.shapes
            owner_a = self._shape_owner.get(id(shape_a))
            owner_b = self._shape_owner.get(id(shape_b))
            if owner_a is None and owner_b is None:
                return

            key = frozenset((id(shape_a), id(shape_b)))
            if key in seen:
                return
            seen.add(key)

            entity_id, other_id = (owner_a, owner_b) if owner_a is not None else (owner_b, owner_a)
            events.append(
                Collision(
                    entity_id=entity_id,
                    other_id=other_id,
                    impulse=arbiter.total_impulse.length,
                )
            )

        for state in self.bodies.values():
            state.body.each_arbiter(on_arbiter)

        return events

    def update(self, dt_ms: float, samples: Mapping[str, MetricSample]) -> StepReport:
        """
        Шаг мира.

        Args:
            dt_ms: длительность шага (миллисекунды)
            samples: entity_id → метрики на текущий момент; тела без сэмпла
                не меняют поведение, но страховочные ограничения к ним
                применяются

        Returns:
            StepReport с событиями шага
        """
        validate_non_negative(dt_ms, "dt_ms")

        # 1. Интеграция движком
        if dt_ms > 0:
            self.space.step(dt_ms / 1000.0)

        # 2. Контакты
        events = self._collect_collisions()

        bounds = self.arena_bounds
        for entity_id, state in self.bodies.items():
            # 3. Поведение
            sample = samples.get(entity_id)
            if sample is not None:
                output = state.controller.step(
                    trend=sample.trend,
                    volatility=sample.volatility,
                    dt_ms=dt_ms,
                    speed=state.speed,
                )
                if output.radius_changed:
                    self._resize(state, output.radius)
                if output.force is not None:
                    state.body.apply_force_at_world_point(output.force, state.body.position)
                if output.started_hop is not None:
                    events.append(
                        HopStarted(
                            entity_id=entity_id,
                            force_magnitude=output.started_hop.force_magnitude,
                            angle=output.started_hop.angle,
                        )
                    )

            # 4. Страховочные ограничения
            velocity = state.body.velocity
            capped = cap_velocity(velocity.x, velocity.y, self.material.v_max)
            if capped.capped:
                state.body.velocity = (capped.vx, capped.vy)

            position = state.body.position
            placed = clamp_to_arena(
                position.x, position.y, state.radius, bounds, self.arena.clamp_padding
            )
            if placed.clamped:
                impact_speed = state.speed
                state.body.position = (placed.x, placed.y)
                velocity = state.body.velocity
                state.body.velocity = (velocity.x * 0.5, velocity.y * 0.5)
                events.append(WallClamped(entity_id=entity_id, impact_speed=impact_speed))

        return StepReport(events=events)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def snapshots(self) -> list[BodySnapshot]:
        """Снапшоты всех тел (порядок создания)."""
        return [state.snapshot() for state in self.bodies.values()]
