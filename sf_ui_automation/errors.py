"""
================================================================================
Setup Automation Errors
================================================================================

Exception taxonomy shared by the framework, the setup page objects and the
orchestrator.

    SetupAutomationError
        AuthenticationError            fatal, raised before any operation
        ConfigurationFileInvalidError  fatal, raised before any operation
        NavigationTimeoutError         soft, tolerated by the load heuristic
        ElementNotFoundError           hard, fails the current operation
        InteractionTimeoutError        hard, fails the current operation
        UnexpectedToastMessageError    hard, fails the current operation

================================================================================
"""

from __future__ import annotations

from typing import Optional


class SetupAutomationError(Exception):
    """Base class for all setup automation failures."""
    pass


class AuthenticationError(SetupAutomationError):
    """Raised when no usable session exists or the login marker is absent."""
    pass


class ConfigurationFileInvalidError(SetupAutomationError):
    """Raised when a batch document fails structural validation."""
    pass


class NavigationTimeoutError(SetupAutomationError):
    """A page-load heuristic wait exceeded its bound."""

    def __init__(self, stage: str, timeout_ms: int):
        self.stage = stage
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {stage}")


class ElementNotFoundError(SetupAutomationError):
    """Raised when a required control does not appear within its hard timeout."""

    def __init__(self, description: str, timeout_ms: Optional[int] = None):
        self.description = description
        self.timeout_ms = timeout_ms
        suffix = f" within {timeout_ms}ms" if timeout_ms is not None else ""
        super().__init__(f"Element not found: {description}{suffix}")


class InteractionTimeoutError(SetupAutomationError):
    """Raised when a located control does not accept an interaction in time."""

    def __init__(self, action: str, description: str, timeout_ms: Optional[int] = None):
        self.action = action
        self.description = description
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out trying to {action} {description}")


class UnexpectedToastMessageError(SetupAutomationError):
    """Raised when the confirmation toast text does not match expectations."""

    def __init__(self, actual: str, expected: Optional[str] = None):
        self.actual = actual
        self.expected = expected
        if expected is None:
            message = "Toast appeared without any text"
        else:
            message = f'Expected toast "{expected}" but got "{actual}"'
        super().__init__(message)


__all__ = [
    "SetupAutomationError",
    "AuthenticationError",
    "ConfigurationFileInvalidError",
    "NavigationTimeoutError",
    "ElementNotFoundError",
    "InteractionTimeoutError",
    "UnexpectedToastMessageError",
]
