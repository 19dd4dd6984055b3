"""
Operation model, batch loading and result aggregation.

The orchestrator itself lives in ``orchestration.orchestrator`` and is
re-exported from the top-level package.
"""

from .batch_loader import load_batch, parse_batch, parse_operation
from .operations import (
    ActivityCapture,
    ConfigurationBatch,
    FlowActivation,
    OmniChannel,
    OperationKind,
    OrgWideEmail,
    SessionSettings,
    SharingSettings,
)
from .result_aggregator import BatchResult, OperationResult, ResultAggregator, render_summary

__all__ = [
    "ActivityCapture",
    "BatchResult",
    "ConfigurationBatch",
    "FlowActivation",
    "OmniChannel",
    "OperationKind",
    "OperationResult",
    "OrgWideEmail",
    "ResultAggregator",
    "SessionSettings",
    "SharingSettings",
    "load_batch",
    "parse_batch",
    "parse_operation",
    "render_summary",
]
