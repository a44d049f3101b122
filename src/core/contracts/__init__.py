"""
Contract Validation Module

Валидация JSON контрактов на границах ядра (вход истории цен, экспорт рядов).
"""

from .validators import (
    ContractValidator,
    DerivedSeriesValidator,
    MarketChartValidator,
    SchemaLoader,
    validate_derived_series,
    validate_market_chart,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "MarketChartValidator",
    "DerivedSeriesValidator",
    # Functions
    "validate_market_chart",
    "validate_derived_series",
]
