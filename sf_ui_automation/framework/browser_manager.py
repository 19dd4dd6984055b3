"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management and session injection for Setup automation.

Features:
    - Isolated browser per run (never shared between runs)
    - Front-door login with a pre-obtained access token
    - Login verification via known post-login markers
    - Idempotent, non-raising disconnect

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
)

from ..common import get_section
from ..errors import AuthenticationError
from .element_actions import Timeouts


FRONT_DOOR_PATH = "/secur/frontdoor.jsp"

# Lightning global header, Classic header logo
LOGIN_MARKERS = (".slds-global-header", "#phHeaderLogoImage")


@dataclass(frozen=True)
class OrgTarget:
    """
    Pre-authenticated org identity supplied by an external auth provider.
    """
    instance_url: Optional[str]
    access_token: Optional[str]

    @classmethod
    def from_env(cls) -> "OrgTarget":
        """Read SF_INSTANCE_URL and SF_ACCESS_TOKEN."""
        return cls(
            instance_url=os.getenv("SF_INSTANCE_URL"),
            access_token=os.getenv("SF_ACCESS_TOKEN"),
        )

    def __repr__(self) -> str:
        masked = "***MASKED***" if self.access_token else None
        return f"OrgTarget(instance_url={self.instance_url!r}, access_token={masked!r})"


@dataclass(frozen=True)
class BrowserOptions:
    """
    Browser launch configuration.

    Attributes:
        headless: Run without a visible window
        slow_mo: Delay in milliseconds inserted between browser operations
        timeout_ms: Default timeout for page operations
        viewport: Window size as (width, height)
        browser_type: 'chromium', 'firefox' or 'webkit'
    """
    headless: bool = True
    slow_mo: int = 50
    timeout_ms: int = 60000
    viewport: Tuple[int, int] = (1920, 1080)
    browser_type: str = "chromium"

    @classmethod
    def from_config(cls, **overrides: Any) -> "BrowserOptions":
        """
        Merge the ``browser`` config section with explicit overrides.

        Overrides set to None are ignored, so CLI flags that were not given
        keep the configured value.
        """
        section = get_section("browser")
        values: Dict[str, Any] = {}
        if "headless" in section:
            values["headless"] = bool(section["headless"])
        if "slow_mo" in section:
            values["slow_mo"] = int(section["slow_mo"])
        if "timeout_ms" in section:
            values["timeout_ms"] = int(section["timeout_ms"])
        if "type" in section:
            values["browser_type"] = str(section["type"])
        viewport = section.get("viewport")
        if isinstance(viewport, dict):
            values["viewport"] = (int(viewport.get("width", 1920)), int(viewport.get("height", 1080)))

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class SetupSession:
    """Live authenticated browser session."""
    browser: Browser
    context: BrowserContext
    page: Page
    instance_url: str
    access_token: str

    def __repr__(self) -> str:
        return f"SetupSession(instance_url={self.instance_url!r})"


def front_door_url(instance_url: str, access_token: str) -> str:
    """Login URL that injects the session token."""
    return f"{instance_url.rstrip('/')}{FRONT_DOOR_PATH}?sid={access_token}"


class BrowserManager:
    """
    Owns one browser for one automation run.

    Usage:
        async with BrowserManager(BrowserOptions(headless=False)) as manager:
            session = await manager.connect(OrgTarget.from_env())
            await session.page.goto(...)
        # browser released here, even on errors
    """

    # Default browser launch arguments
    LAUNCH_ARGS = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ]

    def __init__(
        self,
        options: Optional[BrowserOptions] = None,
        timeouts: Optional[Timeouts] = None,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        """
        Initialize browser manager.

        Args:
            options: Launch options (defaults from configuration)
            timeouts: Timeout settings (defaults from configuration)
            playwright_factory: Returns a Playwright context manager
        """
        self.options = options or BrowserOptions.from_config()
        self.timeouts = timeouts or Timeouts.from_config()
        self._playwright_factory = playwright_factory

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._session: Optional[SetupSession] = None

    async def __aenter__(self) -> "BrowserManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    @property
    def session(self) -> Optional[SetupSession]:
        """Current live session, if any."""
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._browser is not None

    async def connect(self, target: OrgTarget) -> SetupSession:
        """
        Launch a browser and authenticate through the front door.

        Args:
            target: Pre-authenticated org identity

        Returns:
            Live SetupSession

        Raises:
            AuthenticationError: Missing credentials or no login marker
        """
        instance_url = getattr(target, "instance_url", None)
        access_token = getattr(target, "access_token", None)
        if not instance_url or not access_token:
            raise AuthenticationError(
                "Unable to get Salesforce session. Please authenticate first."
            )
        if self._session is not None:
            raise RuntimeError("Browser already connected. Call disconnect() first.")

        await self._launch()
        page = await self._context.new_page()
        page.set_default_timeout(self.options.timeout_ms)

        logger.info(f"Authenticating to {instance_url} via front door")
        await page.goto(front_door_url(instance_url, access_token), wait_until="domcontentloaded")

        try:
            await page.wait_for_selector(
                ", ".join(LOGIN_MARKERS),
                state="attached",
                timeout=self.timeouts.login_marker_ms,
            )
        except PlaywrightTimeoutError as e:
            raise AuthenticationError("Failed to authenticate to Salesforce") from e

        self._session = SetupSession(
            browser=self._browser,
            context=self._context,
            page=page,
            instance_url=instance_url,
            access_token=access_token,
        )
        logger.info(f"Connected to: {instance_url}")
        return self._session

    async def _launch(self) -> None:
        """Start Playwright and launch an isolated browser + context."""
        self._playwright = await self._playwright_factory().start()

        if self.options.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.options.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        width, height = self.options.viewport
        args = list(self.LAUNCH_ARGS) if self.options.browser_type == "chromium" else []
        self._browser = await browser_launcher.launch(
            headless=self.options.headless,
            slow_mo=self.options.slow_mo,
            args=args,
        )
        self._context = await self._browser.new_context(
            viewport={"width": width, "height": height},
        )
        logger.debug(
            f"Browser started: {self.options.browser_type} "
            f"(headless={self.options.headless}, slow_mo={self.options.slow_mo})"
        )

    async def screenshot(self, path: Union[str, Path], full_page: bool = True) -> None:
        """Take a screenshot of the session page for debugging."""
        if self._session is None:
            raise RuntimeError("No live session to screenshot.")
        await self._session.page.screenshot(path=str(path), full_page=full_page)

    async def disconnect(self) -> None:
        """
        Release the browser.

        Safe to call repeatedly or without a prior connect. Close failures are
        logged and never raised.
        """
        if self._playwright is None and self._browser is None and self._context is None:
            return

        for name, closer in (
            ("context", self._context.close if self._context else None),
            ("browser", self._browser.close if self._browser else None),
            ("playwright", self._playwright.stop if self._playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.warning(f"Failed to close {name}: {e}")

        self._session = None
        self._context = None
        self._browser = None
        self._playwright = None
        logger.debug("Browser closed")


# The manager is the session owner for a run
SessionManager = BrowserManager


__all__ = [
    "BrowserManager",
    "BrowserOptions",
    "OrgTarget",
    "SessionManager",
    "SetupSession",
    "front_door_url",
    "LOGIN_MARKERS",
]
