"""Storage infrastructure implementations."""

from buildstock.infrastructure.storage.sqlite import (
    SQLiteLedgerStore,
    SQLiteReferenceStore,
    close_pool,
    get_connection,
    get_ledger_store,
    get_pool,
    get_reference_store,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteLedgerStore",
    "SQLiteReferenceStore",
    "get_ledger_store",
    "get_reference_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
