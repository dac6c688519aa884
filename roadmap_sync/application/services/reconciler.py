"""
Reconciliacion entre filas del CSV y registros Airtable.

Funciones puras: no hacen I/O, solo arman los SyncRecord que despues
se envian a Airtable.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence

from loguru import logger

from roadmap_sync.domain.entities import LocalRow, RemoteRecord, SyncRecord
from roadmap_sync.domain.table_schema import TableSchema

EPIC_HIERARCHY = "Epic"

UnresolvedCallback = Callable[[SyncRecord, str], None]

_log = logger.bind(component="reconciler")


def partition_rows(rows: Iterable[LocalRow]) -> tuple[list[LocalRow], list[LocalRow]]:
    """Separa filas en (epics, tasks) segun Hierarchy, manteniendo el orden."""
    epics: list[LocalRow] = []
    tasks: list[LocalRow] = []
    for row in rows:
        (epics if row.get("Hierarchy") == EPIC_HIERARCHY else tasks).append(row)
    return epics, tasks


def build_remote_index(records: Iterable[RemoteRecord]) -> dict[str, str]:
    """
    Indexa registros Airtable por Issue -> record id.

    Registros sin Issue no se pueden matchear y se omiten. Si hay Issues
    duplicados en Airtable gana el ultimo.
    """
    index: dict[str, str] = {}
    for record in records:
        issue = record.issue
        if not issue:
            _log.debug(f"Registro {record.record_id} sin Issue; se omite del indice")
            continue
        index[issue] = record.record_id
    return index


def match_to_remote(rows: Sequence[LocalRow], remote_index: dict[str, str]) -> list[SyncRecord]:
    """
    Asocia cada fila con el id Airtable de su Issue.

    Sin match el record_id queda en None (insert). Los fields son una copia
    de la fila: la fila original no se modifica.
    """
    records = []
    for row in rows:
        record_id = remote_index.get(row.get("Issue"))
        _log.debug(f"record id: {record_id} y fields {row}")
        records.append(SyncRecord(record_id=record_id, fields=dict(row)))
    return records


def resolve_foreign_key(
    task_records: Sequence[SyncRecord],
    epic_records: Sequence[SyncRecord],
    *,
    on_unresolved: Optional[UnresolvedCallback] = None,
) -> list[SyncRecord]:
    """
    Agrega el link Project = [epic id] a las Tasks con Parent.

    El Parent de una Task se compara contra el Title de los Epics. Si no hay
    Epic con ese Title se envia [None] igual (dato inconsistente en el CSV):
    se loguea como warning y se notifica via on_unresolved.
    """
    epic_ids = {epic.fields.get("Title"): epic.record_id for epic in epic_records}

    resolved = []
    for task in task_records:
        parent = task.fields.get("Parent") or ""
        if not parent:
            resolved.append(task)
            continue

        epic_id = epic_ids.get(parent)
        if epic_id is None:
            _log.warning(f"Task {task.issue}: Parent '{parent}' no coincide con ningun Epic")
            if on_unresolved is not None:
                on_unresolved(task, parent)

        resolved.append(replace(task, fields={**task.fields, "Project": [epic_id]}))
    return resolved


def project_records(records: Iterable[SyncRecord], schema: TableSchema) -> list[SyncRecord]:
    """Reduce los fields de cada record a los de la tabla destino."""
    return [replace(record, fields=schema.project_fields(record.fields)) for record in records]
