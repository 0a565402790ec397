"""Error taxonomy for the bootstrap path.

Fatal errors derive from `BootstrapError` and stop the process from serving
requests. Warnings are logged by the component that observes them and never
raised past it.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for errors that abort the bootstrap."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(BootstrapError):
    """Required external configuration is missing."""


class ProvisionError(BootstrapError):
    """A database or its design document could not be created."""

    def __init__(self, message: str, *, database: str) -> None:
        super().__init__(message)
        self.database = database


class LoadError(BootstrapError):
    """A spec could not be loaded from any tier (or its view query failed)."""

    def __init__(self, message: str, *, kind: str) -> None:
        super().__init__(message)
        self.kind = kind


class RecordValidationWarning(UserWarning):
    """A single store document or row was rejected and skipped."""

    def __init__(self, kind: str, reason: str, document_id: str | None = None) -> None:
        super().__init__(f"Ignoring invalid {kind} document {document_id or '<no id>'}: {reason}")
        self.kind = kind
        self.reason = reason
        self.document_id = document_id


class PersistWarning(UserWarning):
    """A default document could not be written back to the store."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(
            f"Default {kind} specification could not be saved in the metadata database: {reason}"
        )
        self.kind = kind
        self.reason = reason
