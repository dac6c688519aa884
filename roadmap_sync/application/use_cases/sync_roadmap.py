"""
Caso de uso: sincronizar el roadmap CSV con Airtable.

Orden de la corrida (cada paso depende del anterior):
1. Traer Epics de Airtable -> indice Issue -> id
2. Traer Tasks de Airtable -> indice Issue -> id
3. Leer el CSV y separar Epics / Tasks
4. Upsert de Epics
5. Volver a traer Epics para conocer los ids de los recien insertados
6. Matchear Tasks contra su indice
7. Resolver el link Project (Task -> Epic) con los Epics del paso 5
8. Upsert de Tasks
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from loguru import logger

from roadmap_sync.application.services.reconciler import (
    build_remote_index,
    match_to_remote,
    partition_rows,
    project_records,
    resolve_foreign_key,
)
from roadmap_sync.application.services.sync_report import SyncReport
from roadmap_sync.core.config import Settings
from roadmap_sync.domain.entities import LocalRow, SyncRecord
from roadmap_sync.domain.table_schema import TableSchema, epic_table_schema, task_table_schema
from roadmap_sync.infrastructure.csv_source.roadmap_csv import read_roadmap_csv
from roadmap_sync.infrastructure.external.airtable import AirtableRecordStore

RowSource = Callable[[Union[str, Path]], Sequence[LocalRow]]


class RoadmapSyncUseCase:
    """
    Orquestador de una corrida completa CSV -> Airtable.
    
    Las dependencias se inyectan para poder testear la secuencia sin red:
    store (Airtable), row_source (lector del CSV) y los schemas de tabla.
    """

    def __init__(
        self,
        *,
        store: AirtableRecordStore,
        epic_schema: TableSchema,
        task_schema: TableSchema,
        row_source: Optional[RowSource] = None,
        log=None,
    ) -> None:
        self._store = store
        self._epic_schema = epic_schema
        self._task_schema = task_schema
        self._row_source = row_source or read_roadmap_csv
        self._log = (log or logger).bind(component="sync")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: Optional[AirtableRecordStore] = None,
        batch_date: Optional[date] = None,
        log=None,
    ) -> "RoadmapSyncUseCase":
        """Arma el caso de uso con las tablas y credenciales de Settings."""
        return cls(
            store=store or AirtableRecordStore.from_settings(settings, log=log),
            epic_schema=epic_table_schema(settings.AIRTABLE_EPIC_API_URL),
            task_schema=task_table_schema(settings.AIRTABLE_TASK_API_URL),
            row_source=lambda path: read_roadmap_csv(path, batch_date=batch_date, log=log),
            log=log,
        )

    def run(self, csv_path: Union[str, Path]) -> SyncReport:
        """
        Ejecuta la corrida completa.
        
        Raises:
            RemoteStoreError: error fatal de Airtable (la corrida se corta)
            RowSourceError: no se pudo leer el CSV
        """
        report = SyncReport()

        epic_index = self._fetch_index(self._epic_schema)
        report.epics_fetched = len(epic_index)
        self._log.info(f"Epics en Airtable: {report.epics_fetched}")

        task_index = self._fetch_index(self._task_schema)
        report.tasks_fetched = len(task_index)
        self._log.info(f"Tasks en Airtable: {report.tasks_fetched}")

        rows = self._row_source(csv_path)
        report.rows_read = len(rows)
        self._log.info(f"Filas en CSV: {report.rows_read}")

        epic_rows, task_rows = partition_rows(rows)
        report.epic_rows = len(epic_rows)
        report.task_rows = len(task_rows)
        self._log.info(f"Epics: {report.epic_rows}, Tasks: {report.task_rows}")

        epic_records = match_to_remote(epic_rows, epic_index)
        self._log.info(f"Epics a procesar: {len(epic_records)}")
        self._upsert_all(epic_records, self._epic_schema, report)
        self._log.info("Epics procesados")

        # Los Epics insertados recien tienen id despues del upsert
        epic_index = self._fetch_index(self._epic_schema)
        self._log.info(f"Epics en Airtable tras upsert: {len(epic_index)}")
        epic_records = match_to_remote(epic_rows, epic_index)

        task_records = match_to_remote(task_rows, task_index)
        task_records = resolve_foreign_key(
            task_records,
            epic_records,
            on_unresolved=lambda task, parent: report.record_unresolved_parent(task.issue, parent),
        )
        self._log.info(f"Tasks a procesar: {len(task_records)}")
        self._upsert_all(task_records, self._task_schema, report)
        self._log.info("Tasks procesadas")

        if report.unresolved_parents:
            self._log.warning(
                f"{len(report.unresolved_parents)} Tasks con Parent sin Epic; "
                f"se enviaron con Project = [None]"
            )
        if report.rejected:
            self._log.warning(f"{len(report.rejected)} registros rechazados por Airtable")
        self._log.info(f"Sync completado. {report.summary()}")
        return report

    def _fetch_index(self, schema: TableSchema) -> dict[str, str]:
        return build_remote_index(self._store.list_all(schema))

    def _upsert_all(
        self,
        records: Sequence[SyncRecord],
        schema: TableSchema,
        report: SyncReport,
    ) -> None:
        for record in project_records(records, schema):
            if self._store.upsert(record, schema):
                report.record_upsert(record.is_insert)
            else:
                report.record_rejected(schema.name, record.issue, record.record_id)
