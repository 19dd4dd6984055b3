from sf_ui_automation.orchestration.result_aggregator import (
    BatchResult,
    OperationResult,
    ResultAggregator,
    render_summary,
)
from sf_ui_automation.report_tools import attach_batch_result


def test_results_are_reduced_in_execution_order():
    aggregator = ResultAggregator()
    aggregator.record(OperationResult.success("Session Settings"))
    aggregator.record(OperationResult.failure("Flow B", "Element not found: tr 'B'"))
    aggregator.record(OperationResult.success("Flow: C"))

    result = aggregator.result()
    assert result.applied == ["Session Settings", "Flow: C"]
    assert result.failed == ["Flow B: Element not found: tr 'B'"]
    assert result.success is False
    assert aggregator.attempted == 3


def test_status_distinguishes_partial_from_total_failure():
    assert BatchResult().status == "success"
    assert BatchResult(applied=["Omni-Channel"]).status == "success"
    assert BatchResult(applied=["Omni-Channel"], failed=["Flow A: x"]).status == "partial"
    assert BatchResult(failed=["Flow A: x"]).status == "failed"


def test_result_message_and_dict():
    result = BatchResult(applied=["Session Settings"], failed=["Flow B: boom"])
    assert result.message == "Applied 1 settings, 1 failed"
    assert result.to_dict() == {
        "success": False,
        "status": "partial",
        "message": "Applied 1 settings, 1 failed",
        "applied": ["Session Settings"],
        "failed": ["Flow B: boom"],
    }


def test_summary_lists_applied_and_failed():
    summary = render_summary(BatchResult(applied=["Session Settings"], failed=["Flow B: boom"]))
    lines = summary.splitlines()

    assert "CONFIGURATION SUMMARY" in lines
    assert "Applied: 1" in lines
    assert "  ✓ Session Settings" in lines
    assert "Failed: 1" in lines
    assert "  ✗ Flow B: boom" in lines


def test_summary_omits_failed_block_on_success():
    summary = render_summary(BatchResult(applied=["Omni-Channel"]))
    assert "Failed" not in summary


def test_attach_batch_result_outside_a_report_is_harmless():
    attach_batch_result(BatchResult(applied=["Omni-Channel"]))
