"""
MoodSimulation — от сырых рядов до покадрового состояния тел

Подготовка (prepare_series):
    MetricEngine для каждой сущности → Normalizer (барьер: видит все ряды)

Прогон (MoodSimulation.frames):
    кадр f → время данных t = start + (f / total_frames) · span
    TemporalSampler(t) → PhysicsWorld.update(dt) → FrameState

Физика идёт в реальном темпе (dt = 1000 / fps мс на кадр), а данные —
в сжатом: вся история укладывается в duration_sec. Между кадрами
состояние согласовано, поэтому генератор кадров можно остановить в любой
момент.
"""

import random
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from loguru import logger

from src.behavior.controller import BehaviorConfig
from src.config.settings import SimulationSettings
from src.core.domain.body import BodySnapshot
from src.core.domain.events import SimulationEvent
from src.core.domain.series import DerivedSeries, NormalizationBounds, RawSeries
from src.metrics.engine import MetricEngine, MetricConfig
from src.metrics.normalizer import Normalizer
from src.metrics.sampler import TemporalSampler
from src.physics.arena import ArenaConfig
from src.physics.world import BodyMaterialConfig, PhysicsWorld


def prepare_series(
    raw_by_entity: Mapping[str, RawSeries],
    window_size: int,
) -> tuple[dict[str, DerivedSeries], Optional[NormalizationBounds]]:
    """
    Производные ряды всех сущностей, нормализованные глобально.

    Args:
        raw_by_entity: entity_id → RawSeries
        window_size: Окно метрик в сэмплах

    Returns:
        (entity_id → нормализованный DerivedSeries, границы нормализации)
    """
    engine = MetricEngine(MetricConfig(window_size=window_size))
    series_by_entity = engine.compute_all(raw_by_entity)

    # Барьер: нормализация только после того, как посчитаны все ряды
    bounds = Normalizer().normalize(series_by_entity)

    logger.info(f"[Simulation] Prepared {len(series_by_entity)} series (window={window_size})")
    return series_by_entity, bounds


@dataclass(frozen=True)
class FrameState:
    """Состояние кадра для рендера и аудио."""

    index: int
    data_time_ms: float
    bodies: list[BodySnapshot]
    events: list[SimulationEvent] = field(default_factory=list)


class MoodSimulation:
    """
    Покадровый прогон физики по нормализованным рядам.

    Временной диапазон — от самого раннего первого сэмпла до самого позднего
    последнего среди всех сущностей.
    """

    def __init__(
        self,
        series_by_entity: Mapping[str, DerivedSeries],
        settings: Optional[SimulationSettings] = None,
        behavior: Optional[BehaviorConfig] = None,
        material: Optional[BodyMaterialConfig] = None,
        arena: Optional[ArenaConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            series_by_entity: entity_id → нормализованный DerivedSeries
            settings: параметры прогона (fps, длительность, холст, seed)
            behavior: конфигурация поведения тел
            material: материал тел и среды
            arena: геометрия арены (по умолчанию из размеров холста settings)
            rng: генератор; по умолчанию random.Random(settings.run.seed)

        Raises:
            ValueError: Если нет ни одного непустого ряда
        """
        self.settings = settings or SimulationSettings()
        run = self.settings.run

        self.series_by_entity = {k: v for k, v in series_by_entity.items() if v}
        if not self.series_by_entity:
            raise ValueError("no non-empty derived series to simulate")

        skipped = set(series_by_entity) - set(self.series_by_entity)
        if skipped:
            logger.warning(f"[Simulation] Skipping entities with empty series: {sorted(skipped)}")

        self.start_ms = min(s[0].ts_ms for s in self.series_by_entity.values())
        self.end_ms = max(s[-1].ts_ms for s in self.series_by_entity.values())

        self.total_frames = run.total_frames
        self.dt_ms = run.dt_ms

        self.sampler = TemporalSampler(self.series_by_entity)
        self.world = PhysicsWorld(
            arena=arena or ArenaConfig(width=run.width, height=run.height),
            material=material,
            behavior=behavior,
            rng=rng if rng is not None else random.Random(run.seed),
        )
        self.world.setup_bodies(list(self.series_by_entity.keys()))

    @property
    def span_ms(self) -> float:
        return float(self.end_ms - self.start_ms)

    def data_time_at(self, frame_index: int) -> float:
        """Время данных для кадра: линейное отображение [0, total) → [start, end)."""
        if self.total_frames <= 0:
            return float(self.start_ms)
        progress = frame_index / self.total_frames
        return self.start_ms + progress * self.span_ms

    def frames(self) -> Iterator[FrameState]:
        """
        Генератор кадров.

        Yields:
            FrameState после шага физики
        """
        logger.info(
            f"[Simulation] Generating {self.total_frames} frames "
            f"({len(self.series_by_entity)} bodies, dt={self.dt_ms:.2f}ms)"
        )
        progress_every = max(self.settings.run.fps, 1)

        for index in range(self.total_frames):
            data_time_ms = self.data_time_at(index)
            samples = self.sampler.sample_all(data_time_ms)
            report = self.world.update(self.dt_ms, samples)

            yield FrameState(
                index=index,
                data_time_ms=data_time_ms,
                bodies=self.world.snapshots(),
                events=report.events,
            )

            if index % progress_every == 0:
                logger.info(
                    f"[Simulation] Frame {index}/{self.total_frames} "
                    f"({round(100 * index / self.total_frames)}%)"
                )

        logger.info("[Simulation] Done")

    def run(self) -> list[FrameState]:
        """Все кадры списком."""
        return list(self.frames())
