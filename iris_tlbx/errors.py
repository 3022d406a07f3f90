"""Error taxonomy shared by all workflow stages.

All errors are raised at the point where a precondition is violated and are
never caught inside the library. Each carries the ``stage`` that raised it and,
where applicable, the offending column or parameter in ``field``.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for all errors raised by the workflow stages."""

    def __init__(self, message: str, *, stage: str | None = None, field: str | None = None) -> None:
        self.message = message
        self.stage = stage
        self.field = field
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = f"[{self.stage}] " if self.stage else ""
        return f"{prefix}{self.message}"

    def __str__(self) -> str:
        return self._format()


class ConfigurationError(WorkflowError, ValueError):
    """Invalid parameter (split proportion, fold count, ...) or an unmet run precondition."""


class SchemaError(WorkflowError, KeyError):
    """Referenced column is absent or has the wrong type for the requested operation."""

    # KeyError quotes its argument in str(); keep the plain diagnostic instead.
    __str__ = WorkflowError.__str__


class DataError(WorkflowError, ValueError):
    """Data content violates a stage contract (non-binary target, empty frame, zero variance)."""


__all__ = ["ConfigurationError", "DataError", "SchemaError", "WorkflowError"]
