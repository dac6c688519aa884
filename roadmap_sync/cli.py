"""
CLI: roadmap CSV -> Airtable (Epics y Tasks).

Uso:
  roadmap-sync                      # usa DEFAULT_CSV_PATH (roadmap.csv)
  roadmap-sync export.csv
  roadmap-sync export.csv --log-level DEBUG

Variables de entorno requeridas (o en .env):
  - AIRTABLE_EPIC_API_URL
  - AIRTABLE_TASK_API_URL
  - PERSONAL_ACCESS_TOKEN

Codigo de salida: 0 si la corrida termina (aunque Airtable haya rechazado
registros puntuales), 1 ante cualquier error fatal.
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from roadmap_sync.application.use_cases import RoadmapSyncUseCase
from roadmap_sync.core.config import load_settings
from roadmap_sync.core.logging_config import configure_logging
from roadmap_sync.shared.exceptions import SyncException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roadmap-sync",
        description="Sincroniza un CSV del roadmap con las tablas Airtable de Epics y Tasks.",
    )
    parser.add_argument(
        "csv_path",
        nargs="?",
        default=None,
        help="Ruta al CSV exportado (por defecto DEFAULT_CSV_PATH).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Nivel de log (DEBUG muestra cada registro). Por defecto LOG_LEVEL.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Variables desde .env si existe; el entorno real tiene prioridad.
    load_dotenv(find_dotenv(usecwd=True), override=False)

    try:
        settings = load_settings()
    except SyncException as e:
        configure_logging(args.log_level or "INFO")
        logger.error(e.message)
        return 1

    configure_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_FILE)
    csv_path = args.csv_path or settings.DEFAULT_CSV_PATH

    logger.info(f"Iniciando sync del roadmap desde '{csv_path}'...")
    try:
        use_case = RoadmapSyncUseCase.from_settings(settings)
        report = use_case.run(csv_path)
    except SyncException as e:
        logger.error(f"Error fatal [{e.error_code}]: {e.message}")
        if e.details:
            logger.debug(f"Detalle: {e.details}")
        return 1
    except Exception:
        logger.exception("Error fatal inesperado")
        return 1

    logger.info(f"Sync OK: {report.summary()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
