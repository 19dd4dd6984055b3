"""
================================================================================
Setup Page Base
================================================================================

Base class for the Setup page objects. Each subclass knows one Setup surface
and how to apply one operation kind to it.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Optional, Tuple

from loguru import logger

from ..framework.element_actions import ElementActions, Timeouts
from ..framework.page_base import SetupNavigator


class SetupPage:
    """
    Setup surface page object.

    Subclasses set SETUP_PATH and OPERATION_TYPE and implement apply().

    Usage:
        page = SessionSettingsPage(navigator)
        await page.apply(SessionSettings(lock_sessions_to_ip=True))
    """

    SETUP_PATH: ClassVar[str] = ""
    OPERATION_TYPE: ClassVar[type] = type(None)

    # Most Setup surfaces render inside the embedded setup frame
    USE_SETUP_FRAME: ClassVar[bool] = True

    def __init__(self, navigator: SetupNavigator, timeouts: Optional[Timeouts] = None):
        self.navigator = navigator
        self.timeouts = timeouts or navigator.timeouts

    async def open(self) -> ElementActions:
        """Navigate to the surface and return actions bound to its content."""
        await self.navigator.navigate_to_setup(self.SETUP_PATH)
        if self.USE_SETUP_FRAME:
            context = await self.navigator.get_setup_iframe()
        else:
            context = self.navigator.page
        return ElementActions(context, self.timeouts)

    async def apply(self, operation: Any) -> None:
        raise NotImplementedError

    async def save(self, actions: ElementActions) -> str:
        """Click Save and wait for the confirmation toast."""
        await actions.click_button_by_label("Save")
        return await actions.wait_for_toast()

    def _check_operation(self, operation: Any) -> None:
        if not isinstance(operation, self.OPERATION_TYPE):
            raise TypeError(
                f"{type(self).__name__} cannot apply {type(operation).__name__}"
            )

    @staticmethod
    async def _set_checkbox_if(actions: ElementActions, selector: str, desired: Optional[bool]) -> None:
        """Set a checkbox only when a value was provided."""
        if desired is None:
            return
        await actions.set_checkbox_state(selector, desired)

    async def _apply_feature_toggles(
        self,
        actions: ElementActions,
        main_selector: str,
        enabled: Optional[bool],
        sub_toggles: Iterable[Tuple[str, Optional[bool]]],
    ) -> None:
        """
        Set a feature's main switch, then its sub-options.

        Sub-options are skipped when the feature is being disabled; they are
        applied when it is enabled or when the main switch is left unchanged.
        """
        await self._set_checkbox_if(actions, main_selector, enabled)
        if enabled is False:
            logger.debug("Feature disabled; sub-options left unchanged")
            return
        for selector, desired in sub_toggles:
            await self._set_checkbox_if(actions, selector, desired)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.SETUP_PATH!r})"


def checkbox(fragment: str) -> str:
    """Checkbox selector matching an id fragment."""
    return f'input[type="checkbox"][id*="{fragment}"]'


def log_applied(label: str) -> None:
    logger.info(f"✅ {label} configured successfully")
