"""
================================================================================
Setup UI Automation Framework
================================================================================

Playwright-based building blocks for driving Salesforce Setup surfaces.

Components:
    - smart_locator: Role-based element location with fallback strategies
    - element_actions: Primitive, idempotent UI interactions
    - page_base: Setup navigation, load heuristics and frame resolution
    - browser_manager: Browser lifecycle and front-door session injection

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import (
    BrowserManager,
    BrowserOptions,
    OrgTarget,
    SessionManager,
    SetupSession,
)
from .element_actions import ElementActions, Timeouts, UIActionAdapter
from .page_base import SetupNavigator, build_setup_url
from .smart_locator import RoleLocator

__all__ = [
    "BrowserManager",
    "BrowserOptions",
    "ElementActions",
    "OrgTarget",
    "RoleLocator",
    "SessionManager",
    "SetupNavigator",
    "SetupSession",
    "Timeouts",
    "UIActionAdapter",
    "build_setup_url",
]
