"""Cargador de las specs por defecto incluidas en la aplicación.

Este módulo vive en `core/` porque:
- centraliza el *qué* documentos por defecto existen sin acoplarse a la CLI
- los loaders reciben una fuente en vez de leer ficheros, y los tests pueden
  pasar fixtures.

Un fichero ausente o ilegible se reporta como None; el loader decide si es fatal.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Mapping

import structlog

from core.config import AppSettings
from core.domain.documents import SpecKind

logger = structlog.get_logger(__name__)

DEFAULT_SPEC_FILES: dict[SpecKind, str] = {
    SpecKind.DOMAIN: "default_domain_spec.json",
    SpecKind.TAGS: "default_tag_spec.json",
    SpecKind.SCORES: "default_score_spec.json",
}


def bundled_specs_dir() -> Path:
    # core/resources_loader.py -> core/default_specs
    return Path(__file__).resolve().parent / "default_specs"


def default_specs_dir(settings: AppSettings | None = None) -> Path:
    """Directorio con los documentos por defecto.

    Reglas:
    - Si NPS_DEFAULT_SPECS_DIR está definido, se usa tal cual.
    - Si no, los documentos empaquetados junto al código.
    """

    settings = settings or AppSettings()
    if settings.default_specs_dir:
        return Path(settings.default_specs_dir)
    return bundled_specs_dir()


class FileDefaultSpecSource:
    """Lee ficheros `default_<kind>_spec.json` de un directorio."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = Path(directory) if directory else bundled_specs_dir()

    def path_for(self, kind: SpecKind) -> Path:
        return self.directory / DEFAULT_SPEC_FILES[kind]

    def load(self, kind: SpecKind) -> dict[str, Any] | None:
        path = self.path_for(kind)
        if not path.is_file():
            logger.warning("default_spec_missing", kind=kind.value, path=str(path))
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("default_spec_unreadable", kind=kind.value, path=str(path), error=str(exc))
            return None
        if not isinstance(data, dict):
            logger.warning("default_spec_not_an_object", kind=kind.value, path=str(path))
            return None
        logger.debug("default_spec_read", kind=kind.value, path=str(path), document=data)
        return data


class InMemoryDefaultSpecSource:
    """Default documents supplied in code (tests, embedded deployments)."""

    def __init__(self, documents: Mapping[SpecKind, dict[str, Any] | None] | None = None) -> None:
        self._documents = dict(documents or {})

    def load(self, kind: SpecKind) -> dict[str, Any] | None:
        document = self._documents.get(kind)
        # El llamador puede persistir el documento: nunca entregar nuestra copia.
        return copy.deepcopy(document) if document is not None else None
