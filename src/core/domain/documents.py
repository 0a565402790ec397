"""Raw spec documents as stored in the metadata database.

The store hands back untyped JSON. Each document is parsed on its own into one
of a closed set of variants (domain, tags, scores); a document that does not
fit its variant is rejected with a `RecordValidationWarning` and the caller
skips it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.domain.models import Domain, Offering, Score, ScoreSpec, Tag, TagSet
from core.errors import RecordValidationWarning


class SpecKind(str, Enum):
    DOMAIN = "domain"
    TAGS = "tags"
    SCORES = "scores"


class DomainDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["domain"]
    domain_id: str = Field(..., min_length=1)
    entities: list[Offering] = Field(..., min_length=1)

    def to_domain(self) -> Domain:
        return Domain(self.domain_id, self.entities)


class TagsDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["tags"]
    set_name: str | None = None
    tags: list[Tag] = Field(..., min_length=1)

    def to_tag_set(self) -> TagSet:
        return TagSet(self.set_name, self.tags)


class ScoreDocument(BaseModel):
    """Score scale document; identified by its id, it carries no type field."""

    model_config = ConfigDict(extra="allow")

    scores: list[Score] = Field(..., min_length=1)

    def to_score_spec(self) -> ScoreSpec:
        spec = ScoreSpec()
        for score in self.scores:
            spec.add_score(score)
        return spec


SpecDocument = DomainDocument | TagsDocument | ScoreDocument

DOCUMENT_MODELS: dict[SpecKind, type[BaseModel]] = {
    SpecKind.DOMAIN: DomainDocument,
    SpecKind.TAGS: TagsDocument,
    SpecKind.SCORES: ScoreDocument,
}


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def parse_document(kind: SpecKind, raw: Any, row_id: str | None = None) -> SpecDocument:
    """Validate one raw document against the variant of `kind`.

    `row_id` names the document in the warning when it carries no `_id`.
    Raises `RecordValidationWarning` when the document does not fit.
    """

    if not isinstance(raw, dict):
        raise RecordValidationWarning(kind.value, f"expected an object, got {type(raw).__name__}", row_id)

    document_id = raw.get("_id") or row_id
    try:
        return DOCUMENT_MODELS[kind].model_validate(raw)  # type: ignore[return-value]
    except ValidationError as exc:
        raise RecordValidationWarning(
            kind.value,
            _describe(exc),
            document_id=document_id if isinstance(document_id, str) else None,
        ) from exc
