"""
================================================================================
Allure Report Utilities
================================================================================

Attaches configuration run outcomes to the Allure report. Outside a pytest
run with the allure plugin these calls are no-ops.

================================================================================
"""

import json
from typing import Any

import allure

from ..orchestration.result_aggregator import BatchResult, render_summary


def attach_json(payload: Any, name: str = "Data") -> None:
    """Serialize payload (non-JSON values via str) and attach it."""
    allure.attach(
        json.dumps(payload, indent=2, ensure_ascii=False, default=str),
        name=name,
        attachment_type=allure.attachment_type.JSON,
    )


def attach_text(text: str, name: str = "Text") -> None:
    allure.attach(text, name=name, attachment_type=allure.attachment_type.TEXT)


def attach_batch_result(result: BatchResult, name: str = "Configuration Result") -> None:
    """
    Record a batch outcome as a report step.

    The step title carries the headline ("Applied N settings, M failed");
    the structured result and the rendered summary hang off it.
    """
    marker = "✅" if result.success else "❌"
    with allure.step(f"{marker} {result.message}"):
        attach_json(result.to_dict(), name=name)
        attach_text(render_summary(result), name=f"{name} Summary")
