"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y credenciales de cada llamada al store.
- Facilita testeo: se puede inyectar un `transport` (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

from urllib.parse import unquote, urlsplit, urlunsplit

import httpx

from core.config import AppSettings


def split_credentials(url: str) -> tuple[str, httpx.BasicAuth | None]:
    """Quita `user:password@` de `url` y lo devuelve como basic auth."""

    parts = urlsplit(url)
    if not parts.username:
        return url.rstrip("/"), None

    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    clean = urlunsplit((parts.scheme, host, parts.path, parts.query, parts.fragment)).rstrip("/")
    auth = httpx.BasicAuth(unquote(parts.username), unquote(parts.password or ""))
    return clean, auth


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` para el store de documentos.

    Credenciales: `couchdb_username`/`couchdb_password` si están definidos;
    si no, las que vienen embebidas en la URL.
    """

    settings = settings or AppSettings()
    url = base_url or settings.resolve_store_url() or ""
    url, auth = split_credentials(url)
    if settings.couchdb_username:
        auth = httpx.BasicAuth(settings.couchdb_username, settings.couchdb_password or "")

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=url,
        auth=auth,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
