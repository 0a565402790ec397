"""Adaptador CouchDB/Cloudant sobre la API HTTP.

Implementa `core.interfaces.store.SpecStore` y `DatabaseHandle` con un
`httpx.AsyncClient`.

Reglas:
- 404 -> NotFoundError; 409/412 -> ConflictError; cualquier otro -> StoreError.
- Los fallos de transporte también se envuelven en StoreError.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.interfaces.store import ConflictError, NotFoundError, StoreError, ViewResult

logger = structlog.get_logger(__name__)

_DESIGN_PREFIX = "_design/"


def database_path(name: str) -> str:
    return "/" + quote(name, safe="")


def document_path(database: str, doc_id: str) -> str:
    # Design document ids keep their slash; CouchDB does not accept it escaped everywhere.
    if doc_id.startswith(_DESIGN_PREFIX):
        encoded = _DESIGN_PREFIX + quote(doc_id[len(_DESIGN_PREFIX):], safe="")
    else:
        encoded = quote(doc_id, safe="")
    return f"{database_path(database)}/{encoded}"


def _error_for(response: httpx.Response, what: str) -> StoreError:
    try:
        body = response.json()
    except ValueError:
        body = None
    reason = ""
    if isinstance(body, dict):
        reason = ": ".join(str(body[k]) for k in ("error", "reason") if body.get(k))
    message = f"{what} failed with HTTP {response.status_code}"
    if reason:
        message = f"{message} ({reason})"

    if response.status_code == 404:
        return NotFoundError(message, status_code=404)
    if response.status_code in (409, 412):
        return ConflictError(message, status_code=response.status_code)
    return StoreError(message, status_code=response.status_code)


class CouchDBClient:
    """Operaciones a nivel de servidor; `use()` devuelve un handle por base."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "CouchDBClient":
        return cls(build_async_client(settings, transport=transport))

    async def request(self, method: str, path: str, what: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"{what} failed: {exc}") from exc
        if response.status_code >= 400:
            raise _error_for(response, what)
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreError(f"{what} returned invalid JSON", status_code=response.status_code) from exc
        return payload if isinstance(payload, dict) else {"result": payload}

    async def get_database_info(self, name: str) -> dict[str, Any]:
        return await self.request("GET", database_path(name), f'GET database "{name}"')

    async def create_database(self, name: str) -> None:
        await self.request("PUT", database_path(name), f'Create database "{name}"')

    def use(self, name: str) -> "CouchDatabase":
        return CouchDatabase(self, name)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CouchDBClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class CouchDatabase:
    """Handle bound to one database."""

    def __init__(self, client: CouchDBClient, name: str) -> None:
        self._client = client
        self.name = name

    async def get(self, doc_id: str) -> dict[str, Any]:
        return await self._client.request(
            "GET",
            document_path(self.name, doc_id),
            f'GET document "{doc_id}" from "{self.name}"',
        )

    async def insert(self, document: dict[str, Any], doc_id: str | None = None) -> dict[str, Any]:
        doc_id = doc_id or document.get("_id")
        if doc_id:
            body = {**document, "_id": doc_id}
            return await self._client.request(
                "PUT",
                document_path(self.name, doc_id),
                f'Insert document "{doc_id}" into "{self.name}"',
                json=body,
            )
        return await self._client.request(
            "POST",
            database_path(self.name),
            f'Insert document into "{self.name}"',
            json=document,
        )

    async def view(
        self,
        design: str,
        view: str,
        *,
        reduce: bool = True,
        include_docs: bool = False,
    ) -> ViewResult:
        path = f"{database_path(self.name)}/_design/{quote(design, safe='')}/_view/{quote(view, safe='')}"
        params = {
            "reduce": "true" if reduce else "false",
            "include_docs": "true" if include_docs else "false",
        }
        payload = await self._client.request(
            "GET",
            path,
            f'Query view "{design}/{view}" in "{self.name}"',
            params=params,
        )
        logger.debug("view_queried", database=self.name, view=f"{design}/{view}", rows=len(payload.get("rows", [])))
        try:
            return ViewResult.model_validate(payload)
        except ValidationError as exc:
            raise StoreError(f'View "{design}/{view}" returned unexpected rows: {exc}') from exc

    def __repr__(self) -> str:
        return f"CouchDatabase(name={self.name!r})"
