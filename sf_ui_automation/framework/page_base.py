"""
================================================================================
Setup Navigator
================================================================================

Navigation to Salesforce Setup surfaces.

Provides:
    - Setup URL synthesis (Lightning paths used verbatim)
    - Heuristic load-completion wait (spinner, content marker, network idle)
    - Resolution of the embedded setup frame used by Classic setup pages
    - Screenshot and failure capture utilities

Load completion is advisory: each heuristic wait is bounded and its timeout
is logged and tolerated, never raised.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit

import allure
from loguru import logger
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from ..errors import NavigationTimeoutError, SetupAutomationError
from .element_actions import ElementActions, Timeouts


# Paths with this prefix are already complete Lightning URLs
LIGHTNING_PREFIX = "/lightning/"
SETUP_URL_TEMPLATE = "{origin}/lightning/setup/{path}/home"

SPINNER_SELECTOR = ".slds-spinner"
CONTENT_SELECTOR = ".setupcontent, .setup-content, [class*='setup']"
SETUP_FRAME_SELECTOR = "iframe[name='setupFrame'], iframe.setupFrame"

SCREENSHOT_DIR = Path("screenshots")


def build_setup_url(origin: str, path: str) -> str:
    """
    Build the full URL of a Setup page.

    >>> build_setup_url("https://acme.my.salesforce.com", "SecuritySession")
    'https://acme.my.salesforce.com/lightning/setup/SecuritySession/home'
    >>> build_setup_url("https://acme.my.salesforce.com", "/lightning/setup/Flows/home")
    'https://acme.my.salesforce.com/lightning/setup/Flows/home'
    """
    origin = origin.rstrip("/")
    if path.startswith(LIGHTNING_PREFIX):
        return f"{origin}{path}"
    return SETUP_URL_TEMPLATE.format(origin=origin, path=path.strip("/"))


class SetupNavigator:
    """
    Navigates the authenticated page between Setup surfaces.

    Usage:
        navigator = SetupNavigator(session.page)
        await navigator.navigate_to_setup("SecuritySession")
        context = await navigator.get_setup_iframe()
        actions = ElementActions(context)
    """

    def __init__(
        self,
        page: Page,
        timeouts: Optional[Timeouts] = None,
        screenshot_dir: Optional[Union[str, Path]] = None,
    ):
        self.page = page
        self.timeouts = timeouts or Timeouts.from_config()
        self.screenshot_dir = Path(screenshot_dir) if screenshot_dir else SCREENSHOT_DIR
        self.actions = ElementActions(page, self.timeouts)

    @property
    def origin(self) -> str:
        """Scheme and host of the current page."""
        parts = urlsplit(self.page.url)
        if not parts.scheme or not parts.netloc:
            raise SetupAutomationError(f"Cannot derive origin from page URL: {self.page.url!r}")
        return f"{parts.scheme}://{parts.netloc}"

    async def navigate_to_setup(self, path: str) -> List[NavigationTimeoutError]:
        """
        Navigate to a Setup page and wait heuristically for it to load.

        Args:
            path: Setup node name (e.g. "SecuritySession") or a full
                Lightning path starting with /lightning/

        Returns:
            Heuristic waits that timed out (tolerated)
        """
        url = build_setup_url(self.origin, path)
        with allure.step(f"Navigate to setup: {path}"):
            await self.page.goto(url, wait_until="domcontentloaded")
            logger.debug(f"Navigated to: {url}")
            return await self.wait_for_setup_page_load()

    async def wait_for_setup_page_load(self) -> List[NavigationTimeoutError]:
        """
        Best-effort wait for a Setup page to settle.

        Runs three independent bounded waits: spinner hidden, content marker
        visible, network idle.

        Returns:
            Heuristic waits that timed out (tolerated)
        """
        tolerated: List[NavigationTimeoutError] = []

        stages = (
            ("spinner hidden", self.timeouts.spinner_ms,
             lambda t: self.actions.wait_for_element(SPINNER_SELECTOR, state="hidden", timeout=t)),
            ("setup content", self.timeouts.content_ms,
             lambda t: self.actions.wait_for_element(CONTENT_SELECTOR, state="visible", timeout=t)),
            ("network idle", self.timeouts.network_idle_ms,
             lambda t: self.actions.wait_for_network_idle(timeout=t)),
        )

        for stage, timeout, wait in stages:
            try:
                await wait(timeout)
            except (SetupAutomationError, PlaywrightTimeoutError):
                soft = NavigationTimeoutError(stage, timeout)
                logger.debug(f"Tolerated load timeout: {soft}")
                tolerated.append(soft)

        return tolerated

    async def settle(self) -> None:
        """Short tolerant network-idle wait after an in-page action."""
        try:
            await self.actions.wait_for_network_idle()
        except PlaywrightTimeoutError:
            logger.debug("Network did not settle; continuing")

    async def get_setup_iframe(self) -> Any:
        """
        Return the setup frame's context if the page embeds one, else the page.

        Many Setup surfaces still render inside an embedded frame rather than
        the top-level document.
        """
        handle = await self.page.query_selector(SETUP_FRAME_SELECTOR)
        if handle:
            frame = await handle.content_frame()
            if frame:
                logger.debug("Using embedded setup frame")
                return frame
        return self.page

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(self, name: str, full_page: bool = True, attach_to_allure: bool = True) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_name = re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "screenshot"
        filepath = self.screenshot_dir / f"{safe_name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, label: str) -> Optional[Path]:
        """
        Capture debugging information after a failed operation.

        Best effort: capture problems are logged and never raised.
        """
        try:
            with allure.step(f"Capture failure details: {label}"):
                path = await self.screenshot(f"failure_{label}")
                allure.attach(
                    self.page.url,
                    name="Current URL",
                    attachment_type=allure.attachment_type.TEXT,
                )
                return path
        except Exception as e:
            logger.warning(f"Failed to capture failure screenshot for {label}: {e}")
            return None


__all__ = [
    "SetupNavigator",
    "build_setup_url",
    "LIGHTNING_PREFIX",
]
