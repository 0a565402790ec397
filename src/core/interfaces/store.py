"""Contratos del store de documentos que consume el bootstrap.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el adaptador CouchDB y el doble en memoria de los tests sean
  intercambiables; todas las llamadas son async porque todas son I/O.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class StoreError(Exception):
    """Falló una llamada al store (con el status HTTP si hubo respuesta)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(StoreError):
    """The database or document does not exist."""


class ConflictError(StoreError):
    """The database or document already exists."""


class ViewRow(BaseModel):
    """One row of a view response."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    key: Any = None
    value: Any = None
    doc: dict[str, Any] | None = None


class ViewResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rows: list[ViewRow] = Field(default_factory=list)
    total_rows: int | None = None
    offset: int | None = None


@runtime_checkable
class DatabaseHandle(Protocol):
    """Handle ligado a una base de datos lógica."""

    name: str

    async def get(self, doc_id: str) -> dict[str, Any]:
        """Obtiene un documento; lanza `NotFoundError` si no existe."""

        ...

    async def insert(self, document: dict[str, Any], doc_id: str | None = None) -> dict[str, Any]:
        """Crea un documento; lanza `ConflictError` si el id ya existe."""

        ...

    async def view(
        self,
        design: str,
        view: str,
        *,
        reduce: bool = True,
        include_docs: bool = False,
    ) -> ViewResult:
        """Query a view of a design document."""

        ...


@runtime_checkable
class SpecStore(Protocol):
    """Capacidades del store a nivel de base de datos."""

    async def get_database_info(self, name: str) -> dict[str, Any]:
        """Raises `NotFoundError` when the database does not exist."""

        ...

    async def create_database(self, name: str) -> None:
        """Raises `ConflictError` when the database already exists."""

        ...

    def use(self, name: str) -> DatabaseHandle:
        ...
