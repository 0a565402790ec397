"""Three-tier loading of the domain, tag and score specs.

Tiers:
1. custom documents found through the metadata database's view;
2. the bundled default document, written back to the store (best effort);
3. the terminal policy of the kind: fail (domains), no tags, built-in scores.

One engine (`FallbackSpecLoader`) runs the tiers; a `SpecPolicy` supplies what
differs per kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

import structlog

from core.design_documents import META_DESIGN
from core.domain.documents import (
    DomainDocument,
    ScoreDocument,
    SpecDocument,
    SpecKind,
    TagsDocument,
    parse_document,
)
from core.domain.models import DomainSpec, ScoreSpec, TagSet, builtin_score_spec
from core.errors import LoadError, PersistWarning, RecordValidationWarning
from core.interfaces.defaults import DefaultSpecSource
from core.interfaces.store import DatabaseHandle, StoreError

logger = structlog.get_logger(__name__)

SpecT = TypeVar("SpecT")


@dataclass(frozen=True)
class SpecPolicy(Generic[SpecT]):
    """What the loader needs to know about one spec kind."""

    kind: SpecKind
    view: str
    build: Callable[[Sequence[SpecDocument]], SpecT]
    is_usable: Callable[[SpecT], bool]
    # Called when neither custom nor default documents are usable.
    # May raise `LoadError`.
    unavailable: Callable[[], SpecT]


class FallbackSpecLoader(Generic[SpecT]):
    def __init__(self, policy: SpecPolicy[SpecT], defaults: DefaultSpecSource) -> None:
        self.policy = policy
        self.defaults = defaults

    @property
    def kind(self) -> SpecKind:
        return self.policy.kind

    async def load(self, handle: DatabaseHandle) -> SpecT:
        log = logger.bind(kind=self.kind.value, database=handle.name)

        custom = await self._load_custom(handle)
        if custom is not None:
            log.info("spec_loaded", tier="custom")
            return custom

        log.info("custom_spec_unavailable", view=self.policy.view)
        raw_default = self.defaults.load(self.kind)
        default = self._build_default(raw_default)
        if default is None:
            log.warning("default_spec_unavailable")
            return self.policy.unavailable()

        await self._persist_default(handle, raw_default)
        log.info("spec_loaded", tier="default")
        return default

    async def _load_custom(self, handle: DatabaseHandle) -> SpecT | None:
        try:
            result = await handle.view(META_DESIGN, self.policy.view, reduce=False, include_docs=True)
        except StoreError as exc:
            message = f'Fetch for "{self.policy.view}" view failed: {exc}'
            logger.error("spec_view_failed", kind=self.kind.value, view=self.policy.view, error=str(exc))
            raise LoadError(message, kind=self.kind.value) from exc

        logger.debug("spec_view_rows", kind=self.kind.value, rows=len(result.rows))
        documents: list[SpecDocument] = []
        for row in result.rows:
            try:
                if row.doc is None:
                    raise RecordValidationWarning(self.kind.value, "row carries no document", row.id)
                documents.append(parse_document(self.kind, row.doc, row.id))
            except RecordValidationWarning as warning:
                logger.warning("record_validation_warning", kind=self.kind.value, detail=str(warning))

        if not documents:
            return None
        spec = self.policy.build(documents)
        return spec if self.policy.is_usable(spec) else None

    def _build_default(self, raw: dict[str, Any] | None) -> SpecT | None:
        if raw is None:
            return None
        try:
            document = parse_document(self.kind, raw)
        except RecordValidationWarning as warning:
            logger.warning("default_spec_invalid", kind=self.kind.value, detail=str(warning))
            return None
        spec = self.policy.build([document])
        return spec if self.policy.is_usable(spec) else None

    async def _persist_default(self, handle: DatabaseHandle, raw: dict[str, Any]) -> None:
        doc_id = raw.get("_id") if isinstance(raw.get("_id"), str) else None
        try:
            await handle.insert(dict(raw), doc_id)
        except StoreError as exc:
            warning = PersistWarning(self.kind.value, str(exc))
            logger.warning("persist_warning", kind=self.kind.value, detail=str(warning))
            return
        logger.info("default_spec_persisted", kind=self.kind.value, doc_id=doc_id)


def _build_domain_spec(documents: Sequence[SpecDocument]) -> DomainSpec:
    spec = DomainSpec()
    for document in documents:
        if isinstance(document, DomainDocument):
            spec.add_domain(document.to_domain())
    return spec


def _build_tag_sets(documents: Sequence[SpecDocument]) -> list[TagSet]:
    return [document.to_tag_set() for document in documents if isinstance(document, TagsDocument)]


def _build_score_spec(documents: Sequence[SpecDocument]) -> ScoreSpec:
    spec = ScoreSpec()
    for document in documents:
        if isinstance(document, ScoreDocument):
            for score in document.to_score_spec().get_scores():
                spec.add_score(score)
    return spec


def _no_domains() -> DomainSpec:
    raise LoadError(
        "No valid domain specification was found in the metadata database "
        "or in the default domain specification.",
        kind=SpecKind.DOMAIN.value,
    )


def _no_tags() -> list[TagSet]:
    logger.warning("tags_disabled", reason="no tag specification available")
    return []


def _builtin_scores() -> ScoreSpec:
    logger.warning("builtin_scores_used", reason="no score specification available")
    return builtin_score_spec()


DOMAIN_POLICY: SpecPolicy[DomainSpec] = SpecPolicy(
    kind=SpecKind.DOMAIN,
    view="domains_spec",
    build=_build_domain_spec,
    is_usable=lambda spec: not spec.is_empty() and spec.has_offerings(),
    unavailable=_no_domains,
)

TAG_POLICY: SpecPolicy[list[TagSet]] = SpecPolicy(
    kind=SpecKind.TAGS,
    view="tag_spec",
    build=_build_tag_sets,
    is_usable=lambda tag_sets: len(tag_sets) > 0,
    unavailable=_no_tags,
)

SCORE_POLICY: SpecPolicy[ScoreSpec] = SpecPolicy(
    kind=SpecKind.SCORES,
    view="score_spec",
    build=_build_score_spec,
    is_usable=lambda spec: not spec.is_empty(),
    unavailable=_builtin_scores,
)


def domain_loader(defaults: DefaultSpecSource) -> FallbackSpecLoader[DomainSpec]:
    return FallbackSpecLoader(DOMAIN_POLICY, defaults)


def tag_loader(defaults: DefaultSpecSource) -> FallbackSpecLoader[list[TagSet]]:
    return FallbackSpecLoader(TAG_POLICY, defaults)


def score_loader(defaults: DefaultSpecSource) -> FallbackSpecLoader[ScoreSpec]:
    return FallbackSpecLoader(SCORE_POLICY, defaults)
