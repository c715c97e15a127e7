"""Core interfaces (ports) for dependency injection."""

from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.interfaces.reference_store import IReferenceStore

__all__ = [
    "ILedgerStore",
    "IReferenceStore",
]
