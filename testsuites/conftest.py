"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and provides shared fixtures.

================================================================================
"""

import pytest

from sf_ui_automation.common import reset_config
from sf_ui_automation.framework.element_actions import Timeouts
from testsuites.helpers import FakePage


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for release"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "unit: Isolated tests against in-memory browser doubles"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "orchestration: Batch sequencing and failure policy"
    )
    config.addinivalue_line(
        "markers", "pages: Setup page object protocols"
    )
    config.addinivalue_line(
        "markers", "auth: Front-door session injection"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-add the 'unit' marker to tests in the unit directory."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Salesforce Setup UI Automation",
        "=" * 60,
        "",
    ]


@pytest.fixture(autouse=True)
def _fresh_config():
    """Every test starts from freshly loaded configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def timeouts() -> Timeouts:
    """Production timeouts with short network-idle bounds; the fakes respond instantly."""
    return Timeouts(network_idle_ms=300, network_quiet_ms=20)


@pytest.fixture
def page() -> FakePage:
    return FakePage()
