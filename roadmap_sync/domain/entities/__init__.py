from roadmap_sync.domain.entities.records import (
    LocalRow,
    RemoteRecord,
    SyncRecord,
)

__all__ = ["LocalRow", "RemoteRecord", "SyncRecord"]
