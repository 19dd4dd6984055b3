"""
================================================================================
Result Aggregator
================================================================================

Reduces the ordered stream of operation outcomes into a BatchResult and
renders a human-readable summary. The structured result is the contract;
the text is for people.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one dispatched operation."""
    label: str
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, label: str) -> "OperationResult":
        return cls(label=label)

    @classmethod
    def failure(cls, label: str, message: str) -> "OperationResult":
        return cls(label=label, error=message)


@dataclass
class BatchResult:
    """
    Structured outcome of a batch run.

    Attributes:
        applied: Labels of applied operations, in execution order
        failed: "label: message" entries, in execution order
    """
    applied: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        """'success', 'partial' (some applied, some failed) or 'failed'."""
        if not self.failed:
            return "success"
        return "partial" if self.applied else "failed"

    @property
    def message(self) -> str:
        return f"Applied {len(self.applied)} settings, {len(self.failed)} failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "status": self.status,
            "message": self.message,
            "applied": list(self.applied),
            "failed": list(self.failed),
        }


class ResultAggregator:
    """
    Collects operation results in execution order.

    Usage:
        aggregator = ResultAggregator()
        aggregator.record(OperationResult.success("Session Settings"))
        aggregator.record(OperationResult.failure("Flow B", "Element not found"))
        aggregator.result().failed   # ['Flow B: Element not found']
    """

    SEPARATOR = "=" * 60

    def __init__(self):
        self._results: List[OperationResult] = []

    def record(self, result: OperationResult) -> None:
        self._results.append(result)

    @property
    def results(self) -> List[OperationResult]:
        return list(self._results)

    @property
    def attempted(self) -> int:
        return len(self._results)

    def result(self) -> BatchResult:
        batch = BatchResult()
        for r in self._results:
            if r.succeeded:
                batch.applied.append(r.label)
            else:
                batch.failed.append(f"{r.label}: {r.error}")
        return batch

    def render_summary(self) -> str:
        return render_summary(self.result())


def render_summary(result: BatchResult) -> str:
    """Render the configuration summary block."""
    lines = [
        "",
        ResultAggregator.SEPARATOR,
        "CONFIGURATION SUMMARY",
        ResultAggregator.SEPARATOR,
        f"Applied: {len(result.applied)}",
    ]
    lines.extend(f"  ✓ {item}" for item in result.applied)
    if result.failed:
        lines.append(f"Failed: {len(result.failed)}")
        lines.extend(f"  ✗ {item}" for item in result.failed)
    lines.append(ResultAggregator.SEPARATOR)
    return "\n".join(lines)


__all__ = [
    "BatchResult",
    "OperationResult",
    "ResultAggregator",
    "render_summary",
]
