"""Error taxonomy for ledger operations."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for errors raised by ledger operations."""


class ValidationError(LedgerError):
    """A request was rejected before touching the database."""


class NotFoundError(LedgerError):
    """The referenced match record does not exist."""


class PersistenceError(LedgerError):
    """A database operation failed and its transaction was rolled back."""


__all__ = ["LedgerError", "NotFoundError", "PersistenceError", "ValidationError"]
