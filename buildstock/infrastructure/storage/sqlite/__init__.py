"""SQLite storage implementations."""

from buildstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from buildstock.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from buildstock.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore

# Singleton instances
_ledger_store: SQLiteLedgerStore | None = None
_reference_store: SQLiteReferenceStore | None = None


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_reference_store() -> SQLiteReferenceStore:
    """Get singleton reference data store instance."""
    global _reference_store
    if _reference_store is None:
        _reference_store = SQLiteReferenceStore()
    return _reference_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteLedgerStore",
    "SQLiteReferenceStore",
    # Factory functions
    "get_ledger_store",
    "get_reference_store",
]
