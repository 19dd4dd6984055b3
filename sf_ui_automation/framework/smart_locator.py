"""
================================================================================
Role-Based Smart Locator
================================================================================

Capability-based element location for Salesforce Setup surfaces.

Callers ask for a control by *role* and visible *name*
(``find_by_role("button", "Save")``) instead of writing query syntax. Each role
maps to a set of strategies (primary + fallbacks) covering both Lightning and
Classic markup; all strategies are combined into one selector so a single
bounded wait covers every rendering.

Selectors are a replaceable table: update ROLE_SELECTORS when the target
application's markup changes.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import Locator, TimeoutError as PlaywrightTimeoutError

from ..errors import ElementNotFoundError


class RoleLocator:
    """
    Resolves controls by role and visible name on a page or frame.

    Strategy templates containing ``{name}`` are formatted with the escaped
    name (used for controls labelled by an attribute, e.g. ``input[value]``).
    Other templates get a text filter appended: ``:has-text()`` for substring
    matches or ``:text-is()`` for exact matches. Templates containing ``{name}``
    are skipped when no name is given.

    Usage:
        >>> roles = RoleLocator(frame)
        >>> save = await roles.locate("button", "Save", timeout=30000)
        >>> await save.click()
    """

    # Format: role -> {strategy_name: selector template}
    ROLE_SELECTORS: Dict[str, Dict[str, str]] = {
        "button": {
            "primary": "button",
            "fallback_1": "lightning-button",
            "fallback_2": "a.slds-button",
            "fallback_3": 'input[type="submit"][value="{name}"]',
            "fallback_4": 'input[type="button"][value="{name}"]',
        },
        "link": {
            "primary": "a",
        },
        "menuitem": {
            "primary": "a[role='menuitem']",
            "fallback_1": "lightning-menu-item a",
            "fallback_2": "a",
        },
        "row": {
            "primary": "tr",
        },
        "row_actions": {
            "primary": "button[class*='rowActions']",
            "fallback_1": "lightning-button-menu button",
        },
        "search": {
            "primary": "input[placeholder*='Search']",
            "fallback_1": "input[type='search']",
        },
        "toast": {
            "primary": ".toastMessage",
            "fallback_1": ".slds-notify__content",
        },
        "dialog": {
            "primary": ".slds-modal__container",
            "fallback_1": ".modal-container",
        },
        "confirm": {
            "primary": "button:text-is('Confirm')",
            "fallback_1": "button:text-is('OK')",
        },
    }

    def __init__(self, context: Any):
        """
        Args:
            context: Playwright Page or Frame to search in
        """
        self.context = context

    @staticmethod
    def _escape(name: str) -> str:
        return name.replace("\\", "\\\\").replace('"', '\\"')

    def selectors_for(self, kind: str, name: Optional[str] = None, exact: bool = False) -> List[str]:
        """
        Build the concrete selectors for a role.

        Raises:
            KeyError: If the role is unknown
        """
        strategies = self.ROLE_SELECTORS[kind]
        selectors: List[str] = []
        for template in strategies.values():
            if "{name}" in template:
                if name is None:
                    continue
                selectors.append(template.format(name=self._escape(name)))
            elif name is None:
                selectors.append(template)
            else:
                pseudo = "text-is" if exact else "has-text"
                selectors.append(f'{template}:{pseudo}("{self._escape(name)}")')
        return selectors

    def find_by_role(
        self,
        kind: str,
        name: Optional[str] = None,
        exact: bool = False,
        within: Optional[Locator] = None,
    ) -> Locator:
        """
        Return a lazy locator for the first control matching role + name.

        Args:
            kind: Role key from ROLE_SELECTORS
            name: Visible text (or value) of the control
            exact: Match the full text instead of a substring
            within: Restrict the search to this locator's subtree
        """
        root = within if within is not None else self.context
        selector = ", ".join(self.selectors_for(kind, name, exact))
        return root.locator(selector).first

    async def locate(
        self,
        kind: str,
        name: Optional[str] = None,
        timeout: int = 30000,
        exact: bool = False,
        within: Optional[Locator] = None,
        state: str = "visible",
    ) -> Locator:
        """
        Wait for a control by role and return its locator.

        Raises:
            ElementNotFoundError: When no strategy matches within ``timeout``
        """
        locator = self.find_by_role(kind, name, exact=exact, within=within)
        description = self.describe(kind, name)
        try:
            await locator.wait_for(state=state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            logger.error(f"❌ {description} not found within {timeout}ms")
            raise ElementNotFoundError(description, timeout) from e
        logger.debug(f"✅ Found {description}")
        return locator

    async def is_present(
        self,
        kind: str,
        name: Optional[str] = None,
        timeout: int = 2000,
        exact: bool = False,
    ) -> bool:
        """Probe for a control without failing when it is absent."""
        try:
            await self.find_by_role(kind, name, exact=exact).wait_for(state="visible", timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            return False

    @staticmethod
    def describe(kind: str, name: Optional[str] = None) -> str:
        return f"{kind} '{name}'" if name else kind


__all__ = [
    "RoleLocator",
]
