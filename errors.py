"""
errors.py
Ledger error taxonomy.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error the ledger raises on purpose."""


class ValidationError(LedgerError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid customer input: {fields}")


class NotFoundError(LedgerError):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class StorageDecodeError(LedgerError):
    """Stored slot content could not be decoded into customer records."""
