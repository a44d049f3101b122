"""Config — параметры запуска (YAML → pydantic)."""

from .settings import LogConfig, RunConfig, SimulationSettings

__all__ = [
    "LogConfig",
    "RunConfig",
    "SimulationSettings",
]
