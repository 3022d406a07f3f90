"""Logistic-regression modelling workflow over the Iris dataset."""

from .errors import ConfigurationError, DataError, SchemaError, WorkflowError
from .workflow import WorkflowConfig, WorkflowResult, run_workflow


__all__ = [
    "ConfigurationError",
    "DataError",
    "SchemaError",
    "WorkflowConfig",
    "WorkflowError",
    "WorkflowResult",
    "run_workflow",
]
