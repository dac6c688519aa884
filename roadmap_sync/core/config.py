"""
Configuracion del job de sincronizacion.
Lee variables de entorno (y .env si existe) y expone un objeto Settings
que se construye una vez en el punto de entrada y se pasa explicitamente
a cada componente.
"""
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from roadmap_sync.shared.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Clase de configuracion del job.
    
    Variables obligatorias:
    - AIRTABLE_EPIC_API_URL: endpoint REST de la tabla de Epics
    - AIRTABLE_TASK_API_URL: endpoint REST de la tabla de Tasks
    - PERSONAL_ACCESS_TOKEN: token de Airtable (Bearer)
    """
    
    # Airtable
    AIRTABLE_EPIC_API_URL: str
    AIRTABLE_TASK_API_URL: str
    PERSONAL_ACCESS_TOKEN: str
    
    # Limite de Airtable: 5 requests por segundo por base
    MAX_REQUESTS_PER_SECOND: int = Field(default=5, ge=1)
    REQUEST_TIMEOUT_S: float = Field(default=30.0, gt=0)
    # 0 = sin reintentos: cualquier error de transporte es fatal
    AIRTABLE_MAX_RETRIES: int = Field(default=0, ge=0)
    
    # Entrada
    DEFAULT_CSV_PATH: str = Field(default="roadmap.csv")
    
    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")
    
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


def load_settings(**overrides) -> Settings:
    """
    Construye Settings desde el entorno.
    
    Traduce los errores de validacion de pydantic a ConfigurationError
    para que el CLI los reporte como cualquier otro error del job.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Configuracion invalida o incompleta: {', '.join(missing)}",
            field=missing[0] if missing else None,
        ) from e
