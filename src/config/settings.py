"""
Settings — параметры запуска генерации

Pydantic модель с секциями log / run, загружается из YAML.
Неизвестные ключи отклоняются (extra="forbid").

Пример config.yml:

    log:
      level: DEBUG
      dir: logs
    run:
      window_size: 48
      duration_sec: 35
      fps: 30
      seed: 7
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Параметры логирования (loguru)."""

    level: str = Field("INFO", description="Минимальный уровень stderr/файла")
    dir: Optional[str] = Field(None, description="Каталог файлового лога (None: только stderr)")
    rotation: str = Field("1 day", description="Ротация файлового лога")
    retention: str = Field("30 days", description="Срок хранения файлов лога")

    model_config = {"frozen": True, "extra": "forbid"}


class RunConfig(BaseModel):
    """Параметры прогона симуляции."""

    window_size: int = Field(48, ge=1, description="Окно метрик в сэмплах (часовые данные → 48ч)")
    duration_sec: float = Field(35.0, gt=0, description="Длительность ролика (секунды)")
    fps: int = Field(30, gt=0, description="Кадров в секунду")
    width: float = Field(1080.0, gt=0, description="Ширина холста (пиксели)")
    height: float = Field(1920.0, gt=0, description="Высота холста (пиксели)")
    seed: Optional[int] = Field(None, description="Seed генератора (None: недетерминированно)")

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def total_frames(self) -> int:
        return int(round(self.duration_sec * self.fps))

    @property
    def dt_ms(self) -> float:
        return 1000.0 / self.fps


class SimulationSettings(BaseModel):
    """Полная конфигурация запуска."""

    log: LogConfig = Field(default_factory=LogConfig)
    run: RunConfig = Field(default_factory=RunConfig)

    model_config = {"frozen": True, "extra": "forbid"}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "SimulationSettings":
        """
        Загрузка настроек из YAML.

        Пустой файл → настройки по умолчанию.

        Raises:
            FileNotFoundError: Если файл не найден
            pydantic.ValidationError: Если значения невалидны
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        return cls(**raw)
