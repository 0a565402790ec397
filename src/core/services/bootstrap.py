"""Process-start orchestration: provision the databases, then load the specs.

Flow:
- validate the required configuration (no I/O before that);
- provision the data and metadata databases concurrently;
- only when both are ready, load domains, tags and scores concurrently
  from the metadata database.

The first fatal error of a join wins and is raised to the caller. Sibling
calls already in flight are awaited, not cancelled, before it is raised
(the CLI closes the HTTP client right after); their outcome is discarded.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable

import structlog

from core.config import AppSettings
from core.design_documents import DATA_DESIGN_DOCUMENT, META_DESIGN_DOCUMENT
from core.domain.models import DomainSpec, ScoreSpec, TagSet
from core.errors import ConfigError
from core.interfaces.defaults import DefaultSpecSource
from core.interfaces.store import DatabaseHandle, SpecStore
from core.resources_loader import FileDefaultSpecSource, default_specs_dir
from core.services.provisioner import SchemaProvisioner
from core.services.spec_loader import domain_loader, score_loader, tag_loader

logger = structlog.get_logger(__name__)


@dataclass
class BootstrapResult:
    """Everything the request handlers need, owned for the process lifetime."""

    data: DatabaseHandle
    meta: DatabaseHandle
    domains: DomainSpec
    tag_sets: list[TagSet]
    scores: ScoreSpec


def check_config(settings: AppSettings) -> None:
    """Raise `ConfigError` for the first missing required setting."""

    missing = settings.missing_bootstrap_settings()
    if missing:
        raise ConfigError(f"Configuration error. {missing[0]} is not set.")


async def join_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """Run `aws` concurrently and return their results in order.

    On the first exception the unfinished siblings are awaited (not cancelled)
    with their outcome discarded, then that exception is raised.
    """

    tasks = [asyncio.ensure_future(aw) for aw in aws]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

    failures = [t.exception() for t in tasks if t in done and t.exception() is not None]
    if not failures:
        return [t.result() for t in tasks]

    if pending:
        logger.info("draining_in_flight_calls", pending=len(pending))
        await asyncio.gather(*pending, return_exceptions=True)
    raise failures[0]


async def provision(
    store: SpecStore,
    *,
    data_database: str,
    meta_database: str,
) -> tuple[DatabaseHandle, DatabaseHandle]:
    data = SchemaProvisioner(store, data_database, DATA_DESIGN_DOCUMENT)
    meta = SchemaProvisioner(store, meta_database, META_DESIGN_DOCUMENT)
    data_handle, meta_handle = await join_fail_fast(data.ensure(), meta.ensure())
    return data_handle, meta_handle


async def load_specs(
    meta: DatabaseHandle,
    defaults: DefaultSpecSource,
) -> tuple[DomainSpec, list[TagSet], ScoreSpec]:
    domains, tag_sets, scores = await join_fail_fast(
        domain_loader(defaults).load(meta),
        tag_loader(defaults).load(meta),
        score_loader(defaults).load(meta),
    )
    return domains, tag_sets, scores


async def bootstrap(
    *,
    settings: AppSettings,
    store: SpecStore,
    defaults: DefaultSpecSource | None = None,
) -> BootstrapResult:
    check_config(settings)
    defaults = defaults or FileDefaultSpecSource(default_specs_dir(settings))

    data, meta = await provision(
        store,
        data_database=settings.data_database,
        meta_database=settings.meta_database,
    )
    logger.info("databases_ready", data=data.name, meta=meta.name)

    domains, tag_sets, scores = await load_specs(meta, defaults)
    logger.info(
        "bootstrap_complete",
        domains=len(domains),
        tag_sets=len(tag_sets),
        scores=len(scores),
    )
    return BootstrapResult(
        data=data,
        meta=meta,
        domains=domains,
        tag_sets=tag_sets,
        scores=scores,
    )
