"""Simulation — подготовка рядов и покадровый прогон мира."""

from .runner import FrameState, MoodSimulation, prepare_series

__all__ = [
    "FrameState",
    "MoodSimulation",
    "prepare_series",
]
