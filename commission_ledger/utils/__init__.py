"""Utility functions."""

from commission_ledger.utils.dates import day_bucket, ensure_utc, month_key, utcnow
from commission_ledger.utils.validation import to_validation_error, validate_input, validate_list

__all__ = [
    "day_bucket",
    "ensure_utc",
    "month_key",
    "utcnow",
    "to_validation_error",
    "validate_input",
    "validate_list",
]
