"""
Acceso a Airtable via REST (requests).

Las tablas del roadmap (Epics y Tasks) se leen completas con paginacion
por offset y se escriben registro por registro, respetando el limite de
requests por segundo de la API.
"""
from roadmap_sync.infrastructure.external.airtable.airtable_client import AirtableRecordStore

__all__ = ["AirtableRecordStore"]
