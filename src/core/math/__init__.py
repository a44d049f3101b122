"""
Core math modules для Mood Physics

Численные примитивы с гарантией стабильности и оконные статистики.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    EPS_CALC,
    EPS_STABILITY,
    clamp,
    is_valid_float,
    lerp,
    rescale_clamped,
    safe_divide,
    sanitize_float,
    sanitize_non_negative,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# Statistics
from src.core.math.statistics import (
    log_prices,
    log_returns,
    ols_slope,
    percentile,
    sample_stddev,
)

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "EPS_CALC",
    "EPS_STABILITY",
    # Numerical Safeguards: Sanitization / division
    "is_valid_float",
    "sanitize_float",
    "sanitize_non_negative",
    "safe_divide",
    # Numerical Safeguards: Utilities
    "clamp",
    "lerp",
    "rescale_clamped",
    # Numerical Safeguards: Validation
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    # Statistics
    "log_prices",
    "log_returns",
    "ols_slope",
    "percentile",
    "sample_stddev",
]
