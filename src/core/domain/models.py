"""Modelos del dominio (Pydantic v2) y las colecciones de specs.

Por qué Pydantic en el dominio:
- Offerings, tags y scores llegan como documentos sin tipo desde el store; los
  modelos estrictos validan y normalizan en el borde.
- Las entidades son inmutables (frozen): una vez construidas nadie las modifica.

Nota:
- Las colecciones (`DomainSpec`, `TagSet`, `ScoreSpec`) son clases simples con
  las búsquedas que usan los handlers de Slack.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.sentiment import Sentiment


class Offering(BaseModel):
    """Un offering (entidad) que los usuarios valoran dentro de un dominio."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(
        default="",
        description="Identificador del offering, único entre todos los dominios de la spec.",
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Nombre visible del offering.",
    )


class Tag(BaseModel):
    """Etiqueta que se adjunta a una valoración (p.ej. {id: 'performance_1', name: 'Scalability'})."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default="", description="Identificador de la etiqueta.")
    name: str = Field(..., min_length=1, description="Nombre visible de la etiqueta.")


class Score(BaseModel):
    """Un punto de la escala de valoración.

    Reglas:
    - nombre ausente -> '0';
    - valor no numérico -> 0;
    - sentiment vacío -> None.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="0", description="Nombre visible del score.")
    value: float = Field(default=0, description="Valor numérico, usado para ordenar.")
    sentiment: Sentiment | None = Field(
        default=None,
        description="Banda de sentimiento del score, si existe.",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        if value is None or value == "":
            return "0"
        return str(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> float:
        if isinstance(value, bool):
            return float(value)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(number):
            return 0.0
        return number

    @field_validator("sentiment", mode="before")
    @classmethod
    def _coerce_sentiment(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Domain:
    """A named set of offerings, kept in case-insensitive name order."""

    def __init__(self, name: str | None, offerings: Iterable[Offering] | None = None) -> None:
        self.name = name or "default"
        self.offerings: tuple[Offering, ...] = tuple(
            sorted(offerings or (), key=lambda offering: offering.name.lower())
        )

    def get_name(self) -> str:
        return self.name

    def get_offerings(self) -> tuple[Offering, ...]:
        return self.offerings

    def get_offering_by_id(self, offering_id: str) -> Offering | None:
        return next((o for o in self.offerings if o.id == offering_id), None)

    def get_offering_by_name(self, offering_name: str) -> Offering | None:
        return next((o for o in self.offerings if o.name == offering_name), None)

    def __repr__(self) -> str:
        return f"Domain(name={self.name!r}, offerings={len(self.offerings)})"


class DomainSpec:
    """Domains keyed by name."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name or "default"
        self._domains: dict[str, Domain] = {}

    def get_name(self) -> str:
        return self.name

    def is_empty(self) -> bool:
        return not self._domains

    def add_domain(self, domain: Domain | None) -> None:
        if domain is not None and domain.get_name():
            self._domains[domain.get_name()] = domain

    def remove_domain(self, domain_name: str) -> None:
        if domain_name:
            self._domains.pop(domain_name, None)

    def get_domains(self) -> dict[str, Domain]:
        return dict(self._domains)

    def get_domains_as_list(self) -> list[Domain]:
        return list(self._domains.values())

    def get_domain(self, domain_name: str) -> Domain | None:
        return self._domains.get(domain_name)

    def get_offering_by_id(self, offering_id: str) -> Offering | None:
        """Look an offering up across every domain of this spec."""

        if not offering_id:
            return None
        for domain in self._domains.values():
            offering = domain.get_offering_by_id(offering_id)
            if offering is not None:
                return offering
        return None

    def has_offerings(self) -> bool:
        return any(domain.get_offerings() for domain in self._domains.values())

    def __len__(self) -> int:
        return len(self._domains)


class TagSet:
    """A named set of tags, kept in name order."""

    def __init__(self, name: str | None, tags: Iterable[Tag] | None = None) -> None:
        self.name = name or "default"
        self.tags: tuple[Tag, ...] = tuple(sorted(tags or (), key=lambda tag: tag.name))

    def get_name(self) -> str:
        return self.name

    def get_tags(self) -> tuple[Tag, ...]:
        return self.tags

    def get_tag_by_id(self, tag_id: str) -> Tag | None:
        return next((t for t in self.tags if t.id == tag_id), None)

    def get_tag_by_name(self, tag_name: str) -> Tag | None:
        return next((t for t in self.tags if t.name == tag_name), None)

    def __repr__(self) -> str:
        return f"TagSet(name={self.name!r}, tags={len(self.tags)})"


class ScoreSpec:
    """Escala de valoración, ordenada por valor y con un único score por valor.

    Añadir un score con un valor ya presente reemplaza al existente.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name or "default"
        self._scores: list[Score] = []

    def get_name(self) -> str:
        return self.name

    def is_empty(self) -> bool:
        return not self._scores

    def add_score(self, score: Score) -> None:
        if not isinstance(score, Score):
            return
        kept = [s for s in self._scores if s.value != score.value]
        kept.append(score)
        self._scores = sorted(kept, key=lambda s: s.value)

    def remove_score_by_name(self, name: str) -> None:
        if name:
            self._scores = [s for s in self._scores if s.name != name]

    def remove_score_by_value(self, value: float) -> None:
        if value is not None:
            self._scores = [s for s in self._scores if s.value != value]

    def get_score_by_value(self, value: float) -> Score | None:
        if value is None:
            return None
        return next((s for s in self._scores if s.value == value), None)

    def get_scores(self) -> list[Score]:
        return list(self._scores)

    def get_lowest_score(self) -> Score | None:
        return self._scores[0] if self._scores else None

    def get_highest_score(self) -> Score | None:
        return self._scores[-1] if self._scores else None

    def get_sentiment_by_value(self, value: Any) -> Sentiment | None:
        try:
            numeric_value = float(value)
        except (TypeError, ValueError):
            return None
        score = self.get_score_by_value(numeric_value)
        return score.sentiment if score is not None else None

    def __len__(self) -> int:
        return len(self._scores)


BUILTIN_SCORE_NAMES: dict[int, str] = {0: "0 (worst)", 10: "10 (best)"}


def builtin_score_spec() -> ScoreSpec:
    """Escala de once puntos usada cuando no hay documento de scores."""

    spec = ScoreSpec()
    for value in range(11):
        spec.add_score(
            Score(
                name=BUILTIN_SCORE_NAMES.get(value, str(value)),
                value=value,
                sentiment=Sentiment.for_builtin_value(value),
            )
        )
    return spec
