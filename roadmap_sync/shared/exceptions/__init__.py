"""
Excepciones del job de sincronizacion.
"""
from roadmap_sync.shared.exceptions.base import SyncException
from roadmap_sync.shared.exceptions.domain import (
    ConfigurationError,
    RecordRejectedError,
    RemoteStoreError,
    RowSourceError,
)

__all__ = [
    "SyncException",
    "ConfigurationError",
    "RecordRejectedError",
    "RemoteStoreError",
    "RowSourceError",
]
