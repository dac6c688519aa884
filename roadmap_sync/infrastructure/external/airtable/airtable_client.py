"""
Cliente minimo de Airtable REST API (sin SDKs externos).

Requisitos cubiertos:
- requests
- paginacion por offset
- insert (POST) / update (PATCH) de un registro
- rate-limit de N requests por segundo
- backoff opcional para 429/5xx
"""

from __future__ import annotations

import time
from typing import Any, Optional

import requests
from loguru import logger

from roadmap_sync.core.config import Settings
from roadmap_sync.domain.entities import RemoteRecord, SyncRecord
from roadmap_sync.domain.table_schema import TableSchema
from roadmap_sync.shared.exceptions import RecordRejectedError, RemoteStoreError
from roadmap_sync.shared.utils.rate_limiter import RateLimiter


class AirtableRecordStore:
    """
    Acceso a las tablas Airtable del roadmap.

    Importante:
    - No hace cast de tipos de campos: eso se decide al armar las filas.
    - Un 422 es un registro rechazado (recuperable); cualquier otro error
      se levanta como RemoteStoreError y corta la corrida.
    """

    def __init__(
        self,
        token: str,
        rate_limiter: RateLimiter,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: float = 30,
        max_retries: int = 0,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        log=None,
    ) -> None:
        self._token = token
        self._limiter = rate_limiter
        self._session = session or requests.Session()
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._log = (log or logger).bind(component="airtable")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        session: Optional[requests.Session] = None,
        log=None,
    ) -> "AirtableRecordStore":
        return cls(
            settings.PERSONAL_ACCESS_TOKEN,
            RateLimiter(settings.MAX_REQUESTS_PER_SECOND),
            session=session,
            timeout_s=settings.REQUEST_TIMEOUT_S,
            max_retries=settings.AIRTABLE_MAX_RETRIES,
            log=log,
        )

    def list_all(self, schema: TableSchema) -> list[RemoteRecord]:
        """
        Trae todos los registros de la tabla, pagina por pagina.

        Airtable devuelve 'offset' mientras queden paginas; se corta cuando
        no viene. Se llama al rate limiter una vez por pagina.
        """
        records: list[RemoteRecord] = []
        offset: Optional[str] = None
        pages = 0

        while True:
            params = {"offset": offset} if offset else None
            payload = self._request_json("GET", schema.endpoint, schema=schema, params=params)
            self._limiter.throttle()
            pages += 1

            page = payload.get("records")
            if not isinstance(page, list):
                raise RemoteStoreError(
                    f"Respuesta inesperada de Airtable en '{schema.name}': falta 'records'",
                    table=schema.name,
                )

            for rec in page:
                rec_id = rec.get("id")
                if not rec_id:
                    # Caso raro; preferimos fallar temprano y visible.
                    raise RemoteStoreError(
                        f"Airtable devolvio un record sin 'id' en '{schema.name}'",
                        table=schema.name,
                    )
                fields = rec.get("fields") or {}
                self._log.debug(f"ID: {rec_id}: Fields: {fields}")
                records.append(RemoteRecord(record_id=rec_id, fields=fields))

            offset = payload.get("offset")
            if not offset:
                break

        self._log.debug(f"{schema.name}: {len(records)} registros en {pages} paginas")
        return records

    def upsert(self, record: SyncRecord, schema: TableSchema) -> bool:
        """
        Inserta (sin id) o actualiza (con id) un registro.

        Returns:
            True si Airtable acepto el registro, False si lo rechazo (422).

        Raises:
            RemoteStoreError: error de red, status inesperado o respuesta invalida.
        """
        self._log.debug(f"Procesando registro: {record.record_id} => {record.fields}")
        body = {"fields": record.fields}

        try:
            if record.record_id:
                url = f"{schema.endpoint.rstrip('/')}/{record.record_id}"
                self._request_json("PATCH", url, schema=schema, body=body, record=record)
            else:
                self._request_json("POST", schema.endpoint, schema=schema, body=body, record=record)
        except RecordRejectedError as e:
            self._log.error(
                f"Error procesando registro en '{schema.name}' ({schema.endpoint}): "
                f"{record.record_id} => {record.fields}"
            )
            self._log.error(f"Respuesta de error: {e.response_text}")
            return False
        finally:
            self._limiter.throttle()

        self._log.debug(f"Registro procesado: {record.issue}")
        return True

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        schema: TableSchema,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        record: Optional[SyncRecord] = None,
    ) -> dict[str, Any]:
        """
        Request HTTP con backoff opcional para 429/5xx.

        Estrategia:
        - 2xx: retorna el JSON
        - 422 en upsert: RecordRejectedError (el caller decide si continua)
        - 429/5xx: reintenta hasta max_retries (Retry-After o exponencial)
        - resto / errores de red: RemoteStoreError
        """
        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=body,
                    headers=self._headers(),
                    timeout=self._timeout_s,
                )
            except requests.RequestException as e:
                raise RemoteStoreError(
                    f"Fallo de red con Airtable ({method} {url}): {e}",
                    table=schema.name,
                ) from e

            if 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as e:
                    raise RemoteStoreError(
                        f"Airtable devolvio JSON invalido ({method} {url})",
                        status_code=resp.status_code,
                        table=schema.name,
                        response_text=resp.text,
                    ) from e

            if resp.status_code == 422 and record is not None:
                raise RecordRejectedError(
                    table=schema.name,
                    record_id=record.record_id,
                    fields=record.fields,
                    response_text=resp.text,
                )

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise RemoteStoreError(
                        f"Airtable error {resp.status_code} tras {attempt} reintentos: {resp.text}",
                        status_code=resp.status_code,
                        table=schema.name,
                        response_text=resp.text,
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    # Exponencial simple + jitter proporcional
                    base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
                    sleep_s = base + (0.15 * base)

                self._log.warning(
                    f"Airtable {resp.status_code} en {method} {url}; reintento "
                    f"{attempt + 1}/{self._max_retries} en {sleep_s:.1f}s"
                )
                time.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise RemoteStoreError(
                f"Airtable request fallo {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                table=schema.name,
                response_text=resp.text,
            )

        # Inalcanzable: el loop siempre retorna o levanta
        raise RemoteStoreError(f"Airtable request sin respuesta ({method} {url})", table=schema.name)
