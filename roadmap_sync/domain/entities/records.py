"""
Tipos puros del pipeline CSV -> Airtable.

Se mantienen libres de I/O para poder testearlos facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

# Fila del CSV ya normalizada: Issue, Title, Duration, Status, Engineer,
# Hierarchy, Parent, Batch Update.
LocalRow = dict[str, Any]


@dataclass(frozen=True)
class RemoteRecord:
    """Registro Airtable minimo: id opaco + fields."""

    record_id: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def issue(self) -> Optional[str]:
        return self.fields.get("Issue")


@dataclass(frozen=True)
class SyncRecord:
    """
    Unidad de trabajo de un upsert.

    - record_id presente: update (PATCH) del registro existente
    - record_id ausente: insert (POST), Airtable asigna el id
    """

    record_id: Optional[str]
    fields: dict[str, Any]

    @property
    def is_insert(self) -> bool:
        return self.record_id is None

    @property
    def issue(self) -> Optional[str]:
        return self.fields.get("Issue")
