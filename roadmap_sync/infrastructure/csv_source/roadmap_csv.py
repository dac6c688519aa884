"""
Lectura del CSV exportado del roadmap.

Cada fila se normaliza a una LocalRow con los nombres de fields que usan
las tablas Airtable.
"""

from __future__ import annotations

import csv
import re
from datetime import date
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from roadmap_sync.domain.entities import LocalRow
from roadmap_sync.shared.exceptions import RowSourceError

# Columna CSV -> field Airtable
COLUMN_MAPPING: dict[str, str] = {
    "Title": "Title",
    "Issue key": "Issue",
    "Issue status": "Status",
    "Assignee": "Engineer",
    "Hierarchy": "Hierarchy",
    "Parent": "Parent",
}
DURATION_COLUMN = "Estimates (d)"
EXPECTED_COLUMNS = (DURATION_COLUMN, *COLUMN_MAPPING)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_duration(raw: Optional[str]) -> Optional[int]:
    """
    Convierte la estimacion en dias a entero.

    Se toma el prefijo entero ("3.5" -> 3). Vacio, no numerico o < 1
    se devuelve como None para no enviar duraciones en 0.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    duration = int(match.group(1))
    return duration if duration >= 1 else None


def read_roadmap_csv(
    path: Union[str, Path],
    *,
    batch_date: Optional[date] = None,
    log=None,
) -> list[LocalRow]:
    """
    Lee el CSV completo y retorna las filas en el orden del archivo.

    Args:
        path: Ruta al CSV
        batch_date: Fecha de la corrida (Batch Update); por defecto hoy
        log: logger a usar (loguru por defecto)

    Raises:
        RowSourceError: si el archivo no existe o no se puede leer
    """
    log = (log or logger).bind(component="csv")
    csv_path = Path(path)
    batch_update = (batch_date or date.today()).strftime("%Y-%m-%d")

    rows: list[LocalRow] = []
    try:
        with csv_path.open(encoding="utf-8-sig", newline="") as fh:
            reader = csv.DictReader(fh)
            missing = [c for c in EXPECTED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                log.warning(f"{csv_path.name}: faltan columnas {missing}; quedaran vacias")

            for raw in reader:
                row: LocalRow = {
                    field: raw.get(column) for column, field in COLUMN_MAPPING.items()
                }
                row["Duration"] = parse_duration(raw.get(DURATION_COLUMN))
                row["Batch Update"] = batch_update
                log.debug(f"ID: {row['Issue']}: Fields: {row}")
                rows.append(row)
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise RowSourceError(str(csv_path), str(e)) from e

    return rows
