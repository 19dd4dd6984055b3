"""Test doubles shared by the unit suites."""

from .fake_browser import (
    FakeAutomations,
    FakeElement,
    FakePage,
    FakePlaywright,
    FakeSessionManager,
)

__all__ = [
    "FakeAutomations",
    "FakeElement",
    "FakePage",
    "FakePlaywright",
    "FakeSessionManager",
]
