"""
Configuracion de loguru para el job.
"""
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "{extra[component]} - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Reemplaza los sinks por defecto de loguru.
    
    Args:
        level: Nivel minimo (DEBUG muestra el detalle por registro)
        log_file: Archivo opcional con rotacion; vacio = solo consola
    """
    logger.remove()
    logger.configure(extra={"component": "roadmap_sync"})
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    
    if log_file:
        logger.add(
            log_file,
            rotation="50 MB",
            retention="10 days",
            level=level.upper(),
            format=LOG_FORMAT,
        )
