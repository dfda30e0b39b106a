"""Database session helpers."""

from commission_ledger.db.session import create_engine, create_session_factory, session_scope

__all__ = [
    "create_engine",
    "create_session_factory",
    "session_scope",
]
