# ================================================================================
# Element Actions Module
# ================================================================================
#
# Primitive, reusable UI interactions over a Playwright page or frame context,
# used by the Setup page objects.
#
# Key Features:
#   - Click controls by visible label (role-based locator)
#   - Idempotent checkbox handling (toggle only when the state differs)
#   - Text input, dropdown and confirmation dialog helpers
#   - Toast capture with optional text verification
#   - Bounded wait primitives used by the page-load heuristic
#   - Allure step integration
#
# Interactions are never retried: a control that does not appear within the
# hard timeout fails the current operation.
#
# ================================================================================

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import allure
from loguru import logger
from playwright.async_api import Frame, Locator, TimeoutError as PlaywrightTimeoutError

from ..common import get_section
from ..errors import (
    ElementNotFoundError,
    InteractionTimeoutError,
    UnexpectedToastMessageError,
)
from .smart_locator import RoleLocator


@dataclass(frozen=True)
class Timeouts:
    """
    Timeouts in milliseconds.

    Hard timeouts (element_ms, toast_ms, login_marker_ms) fail the current
    operation. Soft timeouts (spinner_ms, content_ms, network_idle_ms,
    confirm_probe_ms) bound best-effort waits and are tolerated on expiry.
    network_quiet_ms is the request-free window that counts as idle.
    """
    element_ms: int = 30000
    toast_ms: int = 30000
    login_marker_ms: int = 15000
    spinner_ms: int = 30000
    content_ms: int = 30000
    network_idle_ms: int = 10000
    network_quiet_ms: int = 500
    confirm_probe_ms: int = 3000

    @classmethod
    def from_config(cls, **overrides: int) -> "Timeouts":
        """Build from the ``timeouts`` config section, then apply overrides."""
        values = {k: int(v) for k, v in get_section("timeouts").items() if k in cls.__dataclass_fields__}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class ElementActions:
    """
    UI action adapter bound to one page or frame context.

    Example:
        actions = ElementActions(frame)
        await actions.click_button_by_label("Edit")
        await actions.set_checkbox_state("input[id*='lockIp']", True)
        await actions.click_button_by_label("Save")
        await actions.wait_for_toast()
    """

    def __init__(self, context: Any, timeouts: Optional[Timeouts] = None):
        """
        Args:
            context: Playwright Page or Frame
            timeouts: Timeout settings (defaults from configuration)
        """
        self.context = context
        self.timeouts = timeouts or Timeouts.from_config()
        self.roles = RoleLocator(context)

    # =========================================================================
    # Interactions
    # =========================================================================

    @allure.step("Click button: {label}")
    async def click_button_by_label(self, label: str, timeout: Optional[int] = None) -> None:
        """
        Click any clickable control whose visible text (or value) matches label.

        Raises:
            ElementNotFoundError: No such control within the hard timeout
            InteractionTimeoutError: The control did not accept the click
        """
        if timeout is None:
            timeout = self.timeouts.element_ms
        logger.info(f"Clicking button: {label}")
        button = await self.roles.locate("button", label, timeout=timeout)
        await self._click(button, f"button '{label}'", timeout)

    @allure.step("Set input: {selector}")
    async def set_input_value(self, selector: str, value: str, timeout: Optional[int] = None) -> None:
        """Wait for an input, clear its content and write the new value."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        locator = await self.wait_for_element(selector, timeout=timeout)

        logger.info(f"Filling input: {selector} with '{value[:50]}'")
        try:
            await locator.clear(timeout=timeout)
            await locator.fill(value, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError("fill", selector, timeout) from e

    @allure.step("Set checkbox {selector} to {desired}")
    async def set_checkbox_state(self, selector: str, desired: bool, timeout: Optional[int] = None) -> bool:
        """
        Bring a checkbox to the desired state.

        Reads the current state and clicks only when it differs, so repeated
        calls with the same value interact at most once.

        Returns:
            True if the checkbox was toggled
        """
        if timeout is None:
            timeout = self.timeouts.element_ms
        locator = await self.wait_for_element(selector, timeout=timeout)

        current = await locator.is_checked()
        if current == desired:
            logger.debug(f"Checkbox {selector} already {'checked' if desired else 'unchecked'}")
            return False

        logger.info(f"{'Checking' if desired else 'Unchecking'} checkbox: {selector}")
        await self._click(locator, f"checkbox {selector}", timeout)
        return True

    @allure.step("Select option {value} in {selector}")
    async def select_dropdown_option(self, selector: str, value: str, timeout: Optional[int] = None) -> None:
        """Select a dropdown option by value or visible label."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        locator = await self.wait_for_element(selector, timeout=timeout)

        logger.info(f"Selecting option: {value} in {selector}")
        try:
            await locator.select_option(value, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError(f"select '{value}' in", selector, timeout) from e

    @allure.step("Wait for toast")
    async def wait_for_toast(self, expected: Optional[str] = None, timeout: Optional[int] = None) -> str:
        """
        Wait for a notification toast and return its text.

        Args:
            expected: Substring the toast must contain. Any non-empty text
                is accepted when omitted.

        Raises:
            ElementNotFoundError: No toast appeared
            UnexpectedToastMessageError: Empty text, or text without expected
        """
        if timeout is None:
            timeout = self.timeouts.toast_ms
        toast = await self.roles.locate("toast", timeout=timeout)
        message = ((await toast.text_content()) or "").strip()

        if not message or (expected is not None and expected not in message):
            logger.error(f"Unexpected toast: '{message}' (expected: {expected!r})")
            raise UnexpectedToastMessageError(message, expected if message else None)

        logger.info(f"Toast: {message}")
        return message

    @allure.step("Confirm dialog (confirm={confirm})")
    async def confirm_dialog(self, confirm: bool = True, timeout: Optional[int] = None) -> None:
        """Wait for a modal and click its Confirm or Cancel control."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        label = "Confirm" if confirm else "Cancel"
        dialog = await self.roles.locate("dialog", timeout=timeout)
        button = await self.roles.locate("button", label, timeout=timeout, within=dialog)
        await self._click(button, f"dialog button '{label}'", timeout)

    @allure.step("Click {kind}: {name}")
    async def click_role(
        self,
        kind: str,
        name: Optional[str] = None,
        exact: bool = False,
        within: Optional[Locator] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """Click a control resolved by role, e.g. a row's Edit link."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        locator = await self.roles.locate(kind, name, timeout=timeout, exact=exact, within=within)
        await self._click(locator, RoleLocator.describe(kind, name), timeout)

    async def find_row(self, text: str, timeout: Optional[int] = None) -> Locator:
        """Wait for the table row containing text."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        return await self.roles.locate("row", text, timeout=timeout)

    @allure.step("Search: {text}")
    async def submit_search(self, text: str, timeout: Optional[int] = None) -> None:
        """Type into the list view search box and press Enter."""
        if timeout is None:
            timeout = self.timeouts.element_ms
        search = await self.roles.locate("search", timeout=timeout)
        logger.info(f"Searching for: {text}")
        try:
            await search.fill(text, timeout=timeout)
            await search.press("Enter", timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError("search in", "search box", timeout) from e

    # =========================================================================
    # Wait Primitives
    # =========================================================================

    async def wait_for_element(
        self,
        selector: str,
        state: str = "visible",
        timeout: Optional[int] = None,
    ) -> Locator:
        """
        Wait for an element to reach a state.

        Raises:
            ElementNotFoundError: The state was not reached within timeout
        """
        if timeout is None:
            timeout = self.timeouts.element_ms
        locator = self.context.locator(selector).first
        try:
            await locator.wait_for(state=state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(f"{selector} ({state})", timeout) from e
        return locator

    async def wait_for_network_idle(
        self,
        timeout: Optional[int] = None,
        quiet_ms: Optional[int] = None,
    ) -> None:
        """
        Wait for a fresh quiet window: no request in flight for quiet_ms.

        Traffic is observed from the moment of the call, so requests started
        by a preceding click keep the wait open even when the document already
        reached its load state. Any request event restarts the window.

        Raises:
            PlaywrightTimeoutError: No quiet window within timeout
        """
        if timeout is None:
            timeout = self.timeouts.network_idle_ms
        if quiet_ms is None:
            quiet_ms = self.timeouts.network_quiet_ms
        page = self.context.page if isinstance(self.context, Frame) else self.context

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout / 1000
        quiet = quiet_ms / 1000
        in_flight = set()
        activity = asyncio.Event()

        def started(request: Any) -> None:
            in_flight.add(request)
            activity.set()

        def settled(request: Any) -> None:
            in_flight.discard(request)
            activity.set()

        listeners = (("requestfinished", settled), ("requestfailed", settled), ("request", started))
        for event, handler in listeners:
            page.on(event, handler)
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise PlaywrightTimeoutError(
                        f"Timeout {timeout}ms exceeded waiting for network idle "
                        f"({len(in_flight)} requests in flight)"
                    )
                activity.clear()
                full_window = not in_flight and quiet <= remaining
                try:
                    await asyncio.wait_for(activity.wait(), timeout=quiet if full_window else remaining)
                except asyncio.TimeoutError:
                    if full_window:
                        return
        finally:
            for event, handler in listeners:
                page.remove_listener(event, handler)

    async def is_present(self, kind: str, name: Optional[str] = None, timeout: int = 2000, exact: bool = False) -> bool:
        """Check if a control appears within timeout."""
        return await self.roles.is_present(kind, name, timeout=timeout, exact=exact)

    async def _click(self, locator: Locator, description: str, timeout: int) -> None:
        try:
            await locator.click(timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError("click", description, timeout) from e
        logger.debug(f"Clicked: {description}")


# The adapter is exposed under its role name as well
UIActionAdapter = ElementActions


__all__ = [
    "ElementActions",
    "UIActionAdapter",
    "Timeouts",
]
