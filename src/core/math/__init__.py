"""
Core math modules для фонда

Целочисленные примитивы и пропорциональный расчёт выплат с гарантией детерминированности.
"""

# Integer Safeguards
from src.core.math.integer_safeguards import (
    PERCENT_DENOMINATOR,
    UINT256_MAX,
    floor_div,
    mul_div_floor,
    percent_of,
    split_in_half,
    validate_percent,
    validate_uint,
)

# Proration Engine
from src.core.math.proration import (
    PROTOCOL_FEE_PERCENT,
    Entitlement,
    compute_entitlement,
    position_percent,
)

__all__ = [
    # Integer Safeguards — Constants
    "PERCENT_DENOMINATOR",
    "UINT256_MAX",
    # Integer Safeguards — Validation
    "validate_percent",
    "validate_uint",
    # Integer Safeguards — Arithmetic
    "floor_div",
    "mul_div_floor",
    "percent_of",
    "split_in_half",
    # Proration — Constants
    "PROTOCOL_FEE_PERCENT",
    # Proration — Types
    "Entitlement",
    # Proration — Functions
    "compute_entitlement",
    "position_percent",
]
