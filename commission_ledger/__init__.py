"""
Commission Ledger - affiliate commission computation and history.

    from commission_ledger import CommissionEngine, CommissionSettings
"""

from commission_ledger.config import CommissionSettings, get_settings
from commission_ledger.errors import (
    CommissionError,
    InvalidInputError,
    InvariantViolation,
    NotFoundError,
    ValidationError,
)
from commission_ledger.services.engine import CommissionEngine, EngineState

__version__ = "1.0.1"

__all__ = [
    "CommissionEngine",
    "CommissionSettings",
    "EngineState",
    "get_settings",
    # Errors
    "CommissionError",
    "InvalidInputError",
    "InvariantViolation",
    "NotFoundError",
    "ValidationError",
]
