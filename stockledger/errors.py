"""Exceptions raised by the catalog, the ledger and the repositories."""

from __future__ import annotations


class StockLedgerError(Exception):
    """Base class for domain errors."""


class ValidationError(StockLedgerError):
    """Malformed input for a mutation. Nothing is written."""


class NotFoundError(StockLedgerError):
    """The targeted record does not exist. Nothing is written."""


class StorageError(StockLedgerError):
    """The backing store could not be read or written."""
