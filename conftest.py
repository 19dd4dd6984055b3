"""
Repository-level pytest configuration.

Keeps local runs predictable: the org identity is a placeholder, so nothing
in the suite can reach a real org, and the browser never opens a window.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """Set placeholder environment defaults if not already provided."""
    defaults = {
        "SF_INSTANCE_URL": "https://example.my.salesforce.com",
        "SF_ACCESS_TOKEN": "00D000000000000!placeholder",
        "BROWSER__HEADLESS": "true",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
