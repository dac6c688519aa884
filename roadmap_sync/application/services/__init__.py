"""
Servicios de aplicacion.

Reconciliacion CSV <-> Airtable y resumen de la corrida.
"""
from roadmap_sync.application.services.reconciler import (
    build_remote_index,
    match_to_remote,
    partition_rows,
    project_records,
    resolve_foreign_key,
)
from roadmap_sync.application.services.sync_report import (
    RejectedRecord,
    SyncReport,
    UnresolvedParent,
)

__all__ = [
    # Reconciliacion
    "build_remote_index",
    "match_to_remote",
    "partition_rows",
    "project_records",
    "resolve_foreign_key",
    # Resumen
    "RejectedRecord",
    "SyncReport",
    "UnresolvedParent",
]
