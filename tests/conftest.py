"""Shared fixtures: an in-memory document store that records every call."""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections import Counter
from typing import Any

import pytest

from core.config import AppSettings
from core.domain.documents import SpecKind
from core.interfaces.store import ConflictError, NotFoundError, StoreError, ViewResult, ViewRow
from core.resources_loader import InMemoryDefaultSpecSource

_VIEW_FILTERS = {
    ("metadata", "domains_spec"): lambda doc_id, doc: doc.get("type") == "domain",
    ("metadata", "tag_spec"): lambda doc_id, doc: doc.get("type") == "tags",
    ("metadata", "score_spec"): lambda doc_id, doc: doc_id == "score_spec",
}


class InMemoryDatabase:
    def __init__(self, store: "InMemoryStore", name: str) -> None:
        self.store = store
        self.name = name

    def _docs(self) -> dict[str, dict[str, Any]]:
        if self.name not in self.store.databases:
            raise NotFoundError(f"database {self.name} does not exist", status_code=404)
        return self.store.databases[self.name]

    async def get(self, doc_id: str) -> dict[str, Any]:
        await self.store.record("get", self.name)
        docs = self._docs()
        if doc_id not in docs:
            raise NotFoundError(f"{doc_id} not found", status_code=404)
        return copy.deepcopy(docs[doc_id])

    async def insert(self, document: dict[str, Any], doc_id: str | None = None) -> dict[str, Any]:
        await self.store.record("insert", self.name)
        docs = self._docs()
        doc_id = doc_id or document.get("_id") or uuid.uuid4().hex
        if doc_id in docs:
            raise ConflictError(f"{doc_id} already exists", status_code=409)
        docs[doc_id] = {**copy.deepcopy(document), "_id": doc_id}
        return {"ok": True, "id": doc_id}

    async def view(
        self,
        design: str,
        view: str,
        *,
        reduce: bool = True,
        include_docs: bool = False,
    ) -> ViewResult:
        await self.store.record("view", self.name)
        docs = self._docs()
        if f"_design/{design}" not in docs:
            raise NotFoundError(f"design document {design} missing", status_code=404)
        matches = _VIEW_FILTERS[(design, view)]
        rows = [
            ViewRow(id=doc_id, key=doc_id, value=None, doc=copy.deepcopy(doc) if include_docs else None)
            for doc_id, doc in sorted(docs.items())
            if matches(doc_id, doc)
        ]
        return ViewResult(rows=rows, total_rows=len(rows), offset=0)


class InMemoryStore:
    """Store double.

    `failures` maps an operation name ("get_database_info", "create_database",
    "get", "insert", "view") to the database names for which it must fail.
    """

    def __init__(self) -> None:
        self.databases: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: Counter[tuple[str, str]] = Counter()
        self.failures: dict[str, set[str]] = {}

    async def record(self, operation: str, database: str) -> None:
        self.calls[(operation, database)] += 1
        # Yield so concurrent branches interleave.
        await asyncio.sleep(0)
        if database in self.failures.get(operation, set()):
            raise StoreError(f"{operation} on {database} failed", status_code=500)

    def count(self, operation: str, database: str | None = None) -> int:
        return sum(
            n for (op, db), n in self.calls.items() if op == operation and (database is None or db == database)
        )

    def fail(self, operation: str, database: str) -> None:
        self.failures.setdefault(operation, set()).add(database)

    async def get_database_info(self, name: str) -> dict[str, Any]:
        await self.record("get_database_info", name)
        if name not in self.databases:
            raise NotFoundError(f"database {name} does not exist", status_code=404)
        return {"db_name": name, "doc_count": len(self.databases[name])}

    async def create_database(self, name: str) -> None:
        await self.record("create_database", name)
        if name in self.databases:
            raise ConflictError(f"database {name} exists", status_code=412)
        self.databases[name] = {}

    def use(self, name: str) -> InMemoryDatabase:
        return InMemoryDatabase(self, name)


DOMAIN_DOC = {
    "_id": "default_domain_spec",
    "type": "domain",
    "domain_id": "cloud",
    "entities": [
        {"id": "o3", "name": "storage"},
        {"id": "o1", "name": "Analytics"},
        {"id": "o2", "name": "compute"},
    ],
}

TAGS_DOC = {
    "_id": "default_tag_spec",
    "type": "tags",
    "set_name": "default",
    "tags": [
        {"id": "t2", "name": "Support"},
        {"id": "t1", "name": "Documentation"},
    ],
}

SCORES_DOC = {
    "_id": "score_spec",
    "scores": [
        {"name": str(value), "value": value, "sentiment": "negative" if value < 4 else "neutral" if value < 8 else "positive"}
        for value in range(10, -1, -1)
    ],
}


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def default_documents() -> dict[SpecKind, dict[str, Any] | None]:
    return {
        SpecKind.DOMAIN: copy.deepcopy(DOMAIN_DOC),
        SpecKind.TAGS: copy.deepcopy(TAGS_DOC),
        SpecKind.SCORES: copy.deepcopy(SCORES_DOC),
    }


@pytest.fixture
def defaults(default_documents) -> InMemoryDefaultSpecSource:
    return InMemoryDefaultSpecSource(default_documents)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        slack_token="xoxb-test",
        slack_url="https://example.slack.com",
        couchdb_url="http://couch.test:5984",
    )
