"""
Excepciones del pipeline CSV -> Airtable.

Solo RecordRejectedError es recuperable: el resto termina la corrida.
"""
from typing import Any, Optional

from roadmap_sync.shared.exceptions.base import SyncException


class ConfigurationError(SyncException):
    """Falta o es invalida la configuracion del job."""
    
    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class RowSourceError(SyncException):
    """No se pudo leer el CSV de entrada."""
    
    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"No se pudo leer el CSV '{path}': {reason}",
            error_code="ROW_SOURCE_ERROR",
            details={"path": path}
        )


class RemoteStoreError(SyncException):
    """
    Error de transporte o de protocolo con Airtable.
    
    Es fatal: la corrida no continua despues de este error.
    """
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        table: Optional[str] = None,
        response_text: Optional[str] = None,
    ):
        self.status_code = status_code
        super().__init__(
            message=message,
            error_code="REMOTE_STORE_ERROR",
            details={
                "status_code": status_code,
                "table": table,
                "response": response_text,
            }
        )


class RecordRejectedError(SyncException):
    """Airtable rechazo un registro puntual por invalido (422)."""
    
    def __init__(
        self,
        table: str,
        record_id: Optional[str],
        fields: dict[str, Any],
        response_text: str,
    ):
        self.table = table
        self.record_id = record_id
        self.fields = fields
        self.response_text = response_text
        super().__init__(
            message=f"Airtable rechazo el registro {record_id or '(nuevo)'} en '{table}'",
            error_code="RECORD_REJECTED",
            details={
                "table": table,
                "record_id": record_id,
                "fields": fields,
                "response": response_text,
            }
        )
