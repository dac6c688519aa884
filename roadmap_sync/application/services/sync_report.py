"""
Resumen de una corrida de sincronizacion.

Acumula conteos por fase, registros rechazados por Airtable y Tasks cuyo
Parent no coincide con ningun Epic conocido.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class RejectedRecord:
    """Registro que Airtable rechazo (422) y se salto."""

    table: str
    issue: Optional[str]
    record_id: Optional[str]


@dataclass(frozen=True)
class UnresolvedParent:
    """Task cuyo Parent no se pudo resolver a un Epic."""

    issue: Optional[str]
    parent: str


@dataclass
class SyncReport:
    epics_fetched: int = 0
    tasks_fetched: int = 0
    rows_read: int = 0
    epic_rows: int = 0
    task_rows: int = 0
    inserted: int = 0
    updated: int = 0
    rejected: list[RejectedRecord] = field(default_factory=list)
    unresolved_parents: list[UnresolvedParent] = field(default_factory=list)

    @property
    def upserted(self) -> int:
        return self.inserted + self.updated

    def record_upsert(self, is_insert: bool) -> None:
        if is_insert:
            self.inserted += 1
        else:
            self.updated += 1

    def record_rejected(self, table: str, issue: Optional[str], record_id: Optional[str]) -> None:
        self.rejected.append(RejectedRecord(table=table, issue=issue, record_id=record_id))

    def record_unresolved_parent(self, issue: Optional[str], parent: str) -> None:
        self.unresolved_parents.append(UnresolvedParent(issue=issue, parent=parent))

    def summary(self) -> str:
        return (
            f"filas={self.rows_read} (epics={self.epic_rows}, tasks={self.task_rows}), "
            f"insertados={self.inserted}, actualizados={self.updated}, "
            f"rechazados={len(self.rejected)}, parents_sin_epic={len(self.unresolved_parents)}"
        )
