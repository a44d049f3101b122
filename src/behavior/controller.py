"""Behavior Controller — поведение одного тела по текущим метрикам.

Каждый шаг контроллер получает сэмплированные (trend, volatility), длительность
шага и текущую скорость тела и обновляет:
- сглаженный целевой радиус (размер ~ тренд)
- сглаженную волатильность (ритм хопов ~ нестабильность)
- state machine хопов IDLE / HOPPING / STUNNED
- силу, которую мир должен приложить к телу на этом шаге

Стабильность:
    ratio = trend / (smoothed_vol + eps), clamp в [-c, c], затем в [0, 1]
    1 — устойчивый рост при низкой волатильности, 0 — падение и хаос.
    Высокая стабильность → сильные редкие хопы, низкая → слабые нервные.

Переходы:
- STUNNED проверяется первым: speed > stun_speed → STUNNED (хоп отменяется),
  выход в IDLE только когда speed < recovery_speed
- IDLE → HOPPING когда таймер <= 0; сила ~ r² (площадь сечения), направление
  случайное
- HOPPING → IDLE когда кадры импульса закончились; следующий интервал
  интерполируется между коротким (нестабильно) и длинным (стабильно)

Битые входы (NaN trend, отрицательная/NaN волатильность) трактуются как 0 без
исключений.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.domain.body import BehaviorState, HopPhase, Hopping, Idle, Stunned
from src.core.math.numerical_safeguards import (
    EPS_STABILITY,
    clamp,
    lerp,
    sanitize_float,
    sanitize_non_negative,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)


@dataclass(frozen=True)
class BehaviorConfig:
    """Конфигурация поведения тел.

    Единицы: пиксели, миллисекунды, пиксели/сек, сила — в единицах движка
    (масса × пиксели/сек²).
    """

    # Размер
    base_radius: float = 42.0
    radius_min: float = 20.0
    radius_max: float = 130.0
    k_trend: float = 2.5
    radius_alpha: float = 0.05  # доля пути к целевому радиусу за шаг
    resize_threshold: float = 0.1  # меньшие изменения радиуса игнорируются

    # Волатильность
    volatility_alpha: float = 0.02  # медленнее радиуса: управляет ритмом

    # Стабильность
    stability_eps: float = EPS_STABILITY
    stability_clamp: float = 5.0

    # Оглушение
    stun_speed: float = 450.0
    recovery_speed: float = 30.0

    # Хопы
    hop_frames: int = 5
    hop_interval_min_ms: float = 150.0  # нервные подёргивания
    hop_interval_max_ms: float = 4000.0  # спокойное тело
    force_per_area: float = 120.0
    hop_force_weak: float = 0.05
    hop_force_strong: float = 3.0

    def __post_init__(self) -> None:
        validate_positive(self.radius_min, "radius_min")
        validate_positive(self.radius_max, "radius_max")
        if self.radius_min >= self.radius_max:
            raise ValueError(
                f"radius_min ({self.radius_min}) must be < radius_max ({self.radius_max})"
            )
        validate_in_range(self.base_radius, "base_radius", self.radius_min, self.radius_max)
        validate_in_range(self.radius_alpha, "radius_alpha", 0.0, 1.0)
        validate_in_range(self.volatility_alpha, "volatility_alpha", 0.0, 1.0)
        validate_non_negative(self.resize_threshold, "resize_threshold")
        validate_positive(self.stability_eps, "stability_eps")
        validate_positive(self.stability_clamp, "stability_clamp")
        validate_positive(self.stun_speed, "stun_speed")
        validate_non_negative(self.recovery_speed, "recovery_speed")
        if self.recovery_speed >= self.stun_speed:
            raise ValueError(
                f"recovery_speed ({self.recovery_speed}) must be < stun_speed ({self.stun_speed})"
            )
        if self.hop_frames < 1:
            raise ValueError(f"hop_frames must be >= 1, got {self.hop_frames}")
        validate_non_negative(self.hop_interval_min_ms, "hop_interval_min_ms")
        if self.hop_interval_max_ms < self.hop_interval_min_ms:
            raise ValueError("hop_interval_max_ms must be >= hop_interval_min_ms")
        validate_non_negative(self.force_per_area, "force_per_area")
        validate_non_negative(self.hop_force_weak, "hop_force_weak")
        if self.hop_force_strong < self.hop_force_weak:
            raise ValueError("hop_force_strong must be >= hop_force_weak")


@dataclass(frozen=True)
class BehaviorOutput:
    """Результат шага контроллера для PhysicsWorld."""

    radius: float
    radius_changed: bool
    force: Optional[tuple[float, float]]  # None: сила на этом шаге не прикладывается
    started_hop: Optional[Hopping]  # параметры хопа, начатого на этом шаге
    stability: float
    state: BehaviorState
    previous_phase: HopPhase

    @property
    def hop_started(self) -> bool:
        return self.started_hop is not None

    @property
    def transition_occurred(self) -> bool:
        return self.state.phase != self.previous_phase


class BehaviorController:
    """State machine поведения одного тела.

    Генератор случайных чисел передаётся явно: при одинаковом seed прогон
    воспроизводим.
    """

    def __init__(
        self,
        entity_id: str,
        config: Optional[BehaviorConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            entity_id: идентификатор тела
            config: конфигурация поведения
            rng: seedable генератор (фаза первого хопа, направления хопов)
        """
        self.entity_id = entity_id
        self.config = config or BehaviorConfig()
        self._rng = rng if rng is not None else random.Random()

        self.radius: float = self.config.base_radius
        self.smoothed_volatility: float = 0.0

        # Случайная начальная фаза хопов
        self.state: BehaviorState = Idle(
            timer_ms=self._rng.uniform(0.0, self.config.hop_interval_max_ms)
        )

    @property
    def phase(self) -> HopPhase:
        return self.state.phase

    def target_radius(self, trend: float) -> float:
        """Целевой радиус: base × (1 + k·trend), clamp в [r_min, r_max]."""
        cfg = self.config
        return clamp(
            cfg.base_radius * (1.0 + cfg.k_trend * sanitize_float(trend)),
            cfg.radius_min,
            cfg.radius_max,
        )

    def normalized_stability(self, trend: float) -> float:
        """Стабильность в [0, 1] по тренду и текущей сглаженной волатильности."""
        cfg = self.config
        ratio = sanitize_float(trend) / (self.smoothed_volatility + cfg.stability_eps)
        ratio = clamp(ratio, -cfg.stability_clamp, cfg.stability_clamp)
        return (ratio + cfg.stability_clamp) / (2.0 * cfg.stability_clamp)

    def next_interval_ms(self, stability: float) -> float:
        return lerp(self.config.hop_interval_min_ms, self.config.hop_interval_max_ms, stability)

    def hop_force_magnitude(self, stability: float) -> float:
        """Сила хопа ~ площадь сечения; ускорение при массе ~ r³ падает как 1/r."""
        cfg = self.config
        factor = lerp(cfg.hop_force_weak, cfg.hop_force_strong, stability)
        return self.radius * self.radius * cfg.force_per_area * factor

    def step(
        self,
        trend: float,
        volatility: float,
        dt_ms: float,
        speed: float,
    ) -> BehaviorOutput:
        """Один шаг поведения.

        Args:
            trend: нормализованный тренд [-1, 1] на текущий момент
            volatility: нормализованная волатильность [0, 1]
            dt_ms: длительность шага (миллисекунды)
            speed: модуль скорости тела после шага движка

        Returns:
            BehaviorOutput
        """
        cfg = self.config
        trend = sanitize_float(trend)
        volatility = sanitize_non_negative(volatility)
        dt_ms = sanitize_non_negative(dt_ms)
        speed = sanitize_non_negative(speed)

        previous_phase = self.state.phase

        # 1. Размер
        new_radius = self.radius + (self.target_radius(trend) - self.radius) * cfg.radius_alpha
        radius_changed = abs(new_radius - self.radius) > cfg.resize_threshold
        if radius_changed:
            self.radius = new_radius

        # 2. Сглаженная волатильность
        self.smoothed_volatility += (volatility - self.smoothed_volatility) * cfg.volatility_alpha

        # 3. Стабильность
        stability = self.normalized_stability(trend)

        force: Optional[tuple[float, float]] = None
        started_hop: Optional[Hopping] = None

        # 4. Оглушение (приоритет над хопами)
        if isinstance(self.state, Stunned):
            if speed < cfg.recovery_speed:
                self.state = Idle(timer_ms=self.next_interval_ms(stability))
            # Ещё оглушён: сила не прикладывается
        elif speed > cfg.stun_speed:
            self.state = Stunned()
        # 5. Ожидание хопа
        elif isinstance(self.state, Idle):
            timer_ms = self.state.timer_ms - dt_ms
            if timer_ms <= 0:
                started_hop = Hopping(
                    frames_remaining=cfg.hop_frames,
                    force_magnitude=self.hop_force_magnitude(stability),
                    angle=self._rng.uniform(0.0, 2.0 * math.pi),
                )
                self.state = started_hop
            else:
                self.state = Idle(timer_ms=timer_ms)

        # 6. Активный хоп (включая только что начатый)
        if isinstance(self.state, Hopping):
            hop = self.state
            force = (
                math.cos(hop.angle) * hop.force_magnitude,
                math.sin(hop.angle) * hop.force_magnitude,
            )
            frames_remaining = hop.frames_remaining - 1
            if frames_remaining > 0:
                self.state = Hopping(
                    frames_remaining=frames_remaining,
                    force_magnitude=hop.force_magnitude,
                    angle=hop.angle,
                )
            else:
                self.state = Idle(timer_ms=self.next_interval_ms(stability))

        if self.state.phase != previous_phase:
            logger.debug(
                f"[Behavior] {self.entity_id}: {previous_phase.value} → {self.state.phase.value} "
                f"(speed={speed:.1f}, stability={stability:.3f})"
            )

        return BehaviorOutput(
            radius=self.radius,
            radius_changed=radius_changed,
            force=force,
            started_hop=started_hop,
            stability=stability,
            state=self.state,
            previous_phase=previous_phase,
        )
