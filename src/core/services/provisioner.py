"""Idempotent provisioning of a logical database and its design document."""

from __future__ import annotations

from typing import Any

import structlog

from core.errors import ProvisionError
from core.interfaces.store import ConflictError, DatabaseHandle, SpecStore, StoreError

logger = structlog.get_logger(__name__)


class SchemaProvisioner:
    """Makes sure `database` exists and carries `design_document`.

    Calling `ensure` on an already provisioned database only reads: no create
    or insert call is issued. Conflicts raised because a concurrent bootstrap
    got there first count as success.
    """

    def __init__(self, store: SpecStore, database: str, design_document: dict[str, Any]) -> None:
        self.store = store
        self.database = database
        self.design_document = design_document

    @property
    def design_id(self) -> str:
        return self.design_document["_id"]

    async def ensure(self) -> DatabaseHandle:
        log = logger.bind(database=self.database)
        try:
            info = await self.store.get_database_info(self.database)
        except StoreError as exc:
            log.info("database_info_unavailable", error=str(exc))
            await self._create_database()
            handle = self.store.use(self.database)
            await self._insert_design_document(handle)
            return handle

        log.debug("database_info", info=info)
        handle = self.store.use(self.database)
        try:
            await handle.get(self.design_id)
        except StoreError as exc:
            log.debug("design_document_not_found", design=self.design_id, error=str(exc))
            await self._insert_design_document(handle)
        else:
            log.debug("design_document_found", design=self.design_id)
        return handle

    async def _create_database(self) -> None:
        try:
            await self.store.create_database(self.database)
        except ConflictError:
            logger.info("database_created_concurrently", database=self.database)
            return
        except StoreError as exc:
            raise ProvisionError(
                f'Cannot create database "{self.database}": {exc}',
                database=self.database,
            ) from exc
        logger.info("database_created", database=self.database)

    async def _insert_design_document(self, handle: DatabaseHandle) -> None:
        try:
            await handle.insert(dict(self.design_document), self.design_id)
        except ConflictError:
            logger.info("design_document_created_concurrently", database=self.database, design=self.design_id)
            return
        except StoreError as exc:
            logger.error("design_document_create_failed", database=self.database, error=str(exc))
            raise ProvisionError(
                f'Could not create design document in database "{self.database}": {exc}',
                database=self.database,
            ) from exc
        logger.info("design_document_created", database=self.database, design=self.design_id)
