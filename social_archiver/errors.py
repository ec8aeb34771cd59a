from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration or a required credential is missing or invalid."""


class RetrievalError(RuntimeError):
    """Raised when the search-backed model call fails or returns nothing usable."""


class SchemaValidationError(RetrievalError):
    """Raised when the model payload does not match the declared finding schema."""


class SinkError(RuntimeError):
    """Raised when a record could not be dispatched to the archival endpoint."""
