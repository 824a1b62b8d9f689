"""Audit logging package."""

from ledger_history.audit.logger import AuditLogger, configure_logging
from ledger_history.audit.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)

__all__ = [
    "AuditLogger",
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "StorageError",
    "configure_logging",
]
