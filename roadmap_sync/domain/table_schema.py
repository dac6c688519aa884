"""
Descriptores de las tablas Airtable destino.

Cada tabla define su endpoint, los fields que se proyectan desde una fila
del CSV y, opcionalmente, una derivacion que se aplica despues de la
proyeccion (p.ej. el campo Name de Epics).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

Derivation = Callable[[dict[str, Any]], dict[str, Any]]

EPIC_FIELDS: tuple[str, ...] = (
    "Name",
    "Engineer",
    "Status",
    "Issue",
    "Title",
    "Batch Update",
)

TASK_FIELDS: tuple[str, ...] = (
    "Title",
    "Duration",
    "Issue",
    "Status",
    "Engineer",
    "Batch Update",
    "Project",
)


@dataclass(frozen=True)
class TableSchema:
    """
    Config de una tabla Airtable.

    - name: nombre legible (para logs)
    - endpoint: URL REST de la tabla
    - fields: fields que se envian a Airtable; el resto se descarta
    - derive: funcion opcional que completa fields calculados
    """

    name: str
    endpoint: str
    fields: tuple[str, ...]
    derive: Optional[Derivation] = None

    def project_fields(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """
        Copia exactamente los fields configurados desde la fila.

        Los fields que faltan en la fila quedan en None; las columnas
        extra se ignoran.
        """
        projected = {name: row.get(name) for name in self.fields}
        if self.derive is not None:
            projected = self.derive(projected)
        return projected


def derive_epic_name(fields: dict[str, Any]) -> dict[str, Any]:
    """Name = "{Issue} - {Title}" sobre los valores ya proyectados (None -> "")."""
    fields["Name"] = f"{fields.get('Issue') or ''} - {fields.get('Title') or ''}"
    return fields


def epic_table_schema(endpoint: str) -> TableSchema:
    return TableSchema(
        name="Epics",
        endpoint=endpoint,
        fields=EPIC_FIELDS,
        derive=derive_epic_name,
    )


def task_table_schema(endpoint: str) -> TableSchema:
    return TableSchema(name="Tasks", endpoint=endpoint, fields=TASK_FIELDS)
