"""
Domain models and value objects.

Contains price series, derived metric samples, body behavior states and
simulation events.
"""

from src.core.domain.body import (
    BehaviorState,
    BodySnapshot,
    HopPhase,
    Hopping,
    Idle,
    Stunned,
)
from src.core.domain.events import (
    Collision,
    HopStarted,
    SimulationEvent,
    WallClamped,
)
from src.core.domain.series import (
    DataError,
    DerivedSample,
    DerivedSeries,
    MetricSample,
    NormalizationBounds,
    PricePoint,
    RawSeries,
    validate_raw_series,
)

__all__ = [
    # Series
    "DataError",
    "PricePoint",
    "RawSeries",
    "validate_raw_series",
    "DerivedSample",
    "DerivedSeries",
    "MetricSample",
    "NormalizationBounds",
    # Body
    "HopPhase",
    "Idle",
    "Hopping",
    "Stunned",
    "BehaviorState",
    "BodySnapshot",
    # Events
    "HopStarted",
    "WallClamped",
    "Collision",
    "SimulationEvent",
]
