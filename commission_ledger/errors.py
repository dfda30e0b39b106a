"""
Error taxonomy for the commission engine.

- ValidationError: malformed input, raised before any mutation
- NotFoundError: an external collaborator does not know the referenced entity
- InvariantViolation: internal consistency failure (e.g. duplicate record id)
"""

from typing import Any, Optional


class CommissionError(Exception):
    """Base class for all commission engine errors."""


class ValidationError(CommissionError, ValueError):
    """Input rejected by schema or business validation."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidInputError(ValidationError):
    """Input rejected by the calculator itself."""

    def __init__(self, message: str, stage: Any = None):
        super().__init__(message)
        self.stage = stage


class NotFoundError(CommissionError, LookupError):
    """Referenced affiliate or record does not exist."""


class InvariantViolation(CommissionError, RuntimeError):
    """Internal consistency failure. The offending write is rejected."""
