# apps/tracking/repositories/sheety.py
import logging
from typing import Any, List, Optional

import requests

from .base import Row, StoreError, TabularStore

logger = logging.getLogger(__name__)


class SheetyStore(TabularStore):
    """
    Google Sheet exposed through the Sheety REST API.

    ``GET {base}/{table}`` answers ``{table: [rows]}``; ``PUT {base}/{table}/{id}``
    and ``POST {base}/{table}`` take ``{table: fields}`` and echo the row back.
    Sheety has no filters and no server-side increment, so every lookup reads
    the whole sheet.
    """

    def __init__(self, base_url: str, token: str = "", timeout: int = 10,
                 session: Optional[requests.Session] = None):
        if not base_url:
            raise StoreError("Sheety base URL is not configured")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
        except requests.HTTPError as e:
            body = e.response.text[:200] if e.response is not None else ""
            raise StoreError(f"Sheety {method} {path} failed: {e} {body}".strip()) from e
        except (requests.RequestException, ValueError) as e:
            raise StoreError(f"Sheety {method} {path} failed: {e}") from e

    def list_all(self, table: str) -> List[Row]:
        payload = self._request("GET", table)
        return payload.get(table) or []

    def update_fields(self, table: str, row_id: Any, fields: Row) -> Row:
        payload = self._request("PUT", f"{table}/{row_id}", json={table: fields})
        logger.debug(f"Sheety updated {table}/{row_id}: {fields}")
        return payload.get(table) or {"id": row_id, **fields}

    def create(self, table: str, fields: Row) -> Row:
        payload = self._request("POST", table, json={table: fields})
        logger.debug(f"Sheety created row in {table}: {fields}")
        return payload.get(table) or dict(fields)
