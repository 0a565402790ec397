"""Contract of the bundled default spec documents."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.documents import SpecKind


@runtime_checkable
class DefaultSpecSource(Protocol):
    """Read-only access to the default document of each spec kind.

    `load` returns None when the document is absent or unreadable; that is a
    recoverable condition for the loaders, not an error.
    """

    def load(self, kind: SpecKind) -> dict[str, Any] | None:
        ...
