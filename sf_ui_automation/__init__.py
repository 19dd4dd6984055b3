"""
================================================================================
Salesforce Setup UI Automation
================================================================================

Applies Salesforce Setup configuration that has no API by driving the Setup
UI with Playwright.

Quick start:
    from sf_ui_automation import OrgTarget, apply_batch

    result = await apply_batch(OrgTarget.from_env(), "setup.yaml", continue_on_error=True)
    print(result.message)

Author: Automation Team
License: MIT
================================================================================
"""

__version__ = "0.1.0"

from .errors import (
    AuthenticationError,
    ConfigurationFileInvalidError,
    ElementNotFoundError,
    InteractionTimeoutError,
    NavigationTimeoutError,
    SetupAutomationError,
    UnexpectedToastMessageError,
)
from .orchestration.orchestrator import (
    ConfigurationOrchestrator,
    apply_batch,
    apply_single_operation,
)
from .framework.browser_manager import BrowserOptions, OrgTarget
from .orchestration import (
    BatchResult,
    ConfigurationBatch,
    OperationKind,
    load_batch,
    render_summary,
)

__all__ = [
    "AuthenticationError",
    "BatchResult",
    "BrowserOptions",
    "ConfigurationBatch",
    "ConfigurationFileInvalidError",
    "ConfigurationOrchestrator",
    "ElementNotFoundError",
    "InteractionTimeoutError",
    "NavigationTimeoutError",
    "OperationKind",
    "OrgTarget",
    "SetupAutomationError",
    "UnexpectedToastMessageError",
    "apply_batch",
    "apply_single_operation",
    "load_batch",
    "render_summary",
]
