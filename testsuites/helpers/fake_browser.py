"""
In-memory stand-ins for the Playwright objects the framework drives.

FakePage resolves a selector to a registered FakeElement when the element's
key occurs in the selector (longest key wins), so tests register short,
readable keys such as ``'button:has-text("Save")'`` or ``'id*="lockIp"'``.
Missing elements raise Playwright's TimeoutError immediately.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from playwright.async_api import TimeoutError as PlaywrightTimeoutError


@dataclass
class FakeElement:
    key: str
    text: str = ""
    visible: bool = True
    checkable: bool = False
    checked: bool = False
    value: str = ""
    fail_click: bool = False
    clicks: int = 0
    # (url, seconds until it finishes) started by a click or key press
    starts_request: Optional[Tuple[str, Optional[float]]] = None


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, selector)

    def _require(self) -> FakeElement:
        element = self.page.find(self.selector)
        if element is None or not element.visible:
            raise PlaywrightTimeoutError(f"Timeout exceeded: {self.selector}")
        return element

    async def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        element = self.page.find(self.selector)
        present = element is not None and element.visible
        if state in ("visible", "attached") and not present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: {self.selector}")
        if state in ("hidden", "detached") and present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: {self.selector}")

    async def click(self, timeout: Optional[int] = None) -> None:
        element = self._require()
        if element.fail_click:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded clicking {element.key}")
        element.clicks += 1
        if element.checkable:
            element.checked = not element.checked
        self.page.record("click", element.key)
        self._start_request(element)

    def _start_request(self, element: FakeElement) -> None:
        if element.starts_request is not None:
            self.page.pending_requests.append(element.starts_request)

    async def is_checked(self) -> bool:
        return self._require().checked

    async def clear(self, timeout: Optional[int] = None) -> None:
        self._require().value = ""

    async def fill(self, value: str, timeout: Optional[int] = None) -> None:
        element = self._require()
        element.value = value
        self.page.record("fill", element.key, value)

    async def press(self, key: str, timeout: Optional[int] = None) -> None:
        element = self._require()
        self.page.record("press", element.key, key)
        self._start_request(element)

    async def select_option(self, value: str, timeout: Optional[int] = None) -> None:
        element = self._require()
        element.value = value
        self.page.record("select", element.key, value)

    async def text_content(self) -> str:
        return self._require().text


class FakeFrameHandle:
    def __init__(self, frame: "FakePage"):
        self.frame = frame

    async def content_frame(self) -> "FakePage":
        return self.frame


class FakePage:
    """Page or frame double that records every interaction in ``events``."""

    def __init__(self, url: str = "https://acme.my.salesforce.com/lightning/page/home"):
        self.url = url
        self.elements: Dict[str, FakeElement] = {}
        self.events: List[Tuple[Any, ...]] = []
        self.frame: Optional["FakePage"] = None
        self.listeners: Dict[str, List[Callable[[Any], None]]] = {}
        # (url, seconds until it finishes or None for never); started once a request listener attaches
        self.pending_requests: List[Tuple[str, Optional[float]]] = []
        self.default_timeout: Optional[int] = None
        self.goto_error: Optional[Exception] = None

    # -- test setup ---------------------------------------------------------

    def add(self, key: str, **attrs: Any) -> FakeElement:
        element = FakeElement(key=key, **attrs)
        self.elements[key] = element
        return element

    def add_checkbox(self, fragment: str, checked: bool = False) -> FakeElement:
        return self.add(f'id*="{fragment}"', checkable=True, checked=checked)

    def add_button(self, label: str) -> FakeElement:
        return self.add(f'button:has-text("{label}")')

    def add_toast(self, text: str = "Your changes have been saved.") -> FakeElement:
        return self.add(".toastMessage", text=text)

    def find(self, selector: str) -> Optional[FakeElement]:
        matches = [key for key in self.elements if key in selector]
        if not matches:
            return None
        return self.elements[max(matches, key=len)]

    def record(self, *event: Any) -> None:
        self.events.append(event)

    def clicked(self) -> List[str]:
        return [e[1] for e in self.events if e[0] == "click"]

    # -- Playwright surface -------------------------------------------------

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def set_default_timeout(self, timeout: int) -> None:
        self.default_timeout = timeout

    async def goto(self, url: str, wait_until: Optional[str] = None) -> None:
        self.record("goto", url)
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.listeners.setdefault(event, []).append(handler)
        if event == "request":
            self._start_pending_requests()

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        self.listeners[event].remove(handler)

    def emit(self, event: str, request: Any) -> None:
        self.record(event, request)
        for handler in list(self.listeners.get(event, [])):
            handler(request)

    def _start_pending_requests(self) -> None:
        pending, self.pending_requests = self.pending_requests, []
        loop = asyncio.get_running_loop()
        for url, finish_after in pending:
            self.emit("request", url)
            if finish_after is not None:
                loop.call_later(finish_after, self.emit, "requestfinished", url)

    async def wait_for_selector(self, selector: str, state: str = "visible", timeout: Optional[int] = None):
        await self.locator(selector).wait_for(state=state, timeout=timeout)
        return self.find(selector)

    async def query_selector(self, selector: str):
        if self.frame is not None and "setupFrame" in selector:
            return FakeFrameHandle(self.frame)
        return None

    async def screenshot(self, path: str, full_page: bool = True) -> None:
        Path(path).write_bytes(b"\x89PNG\r\n")
        self.record("screenshot", path)


# =============================================================================
# Browser lifecycle doubles
# =============================================================================

class FakeBrowserContext:
    def __init__(self, page: FakePage, calls: Dict[str, int], viewport: Dict[str, int]):
        self.page = page
        self.calls = calls
        self.viewport = viewport

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.calls["context.close"] += 1


class FakeBrowser:
    def __init__(self, page: FakePage, calls: Dict[str, int], launch_kwargs: Dict[str, Any]):
        self.page = page
        self.calls = calls
        self.launch_kwargs = launch_kwargs
        self.context: Optional[FakeBrowserContext] = None

    async def new_context(self, viewport: Dict[str, int]) -> FakeBrowserContext:
        self.context = FakeBrowserContext(self.page, self.calls, viewport)
        return self.context

    async def close(self) -> None:
        self.calls["browser.close"] += 1


class FakeBrowserType:
    def __init__(self, playwright: "FakePlaywright"):
        self.playwright = playwright

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self.playwright.calls["launch"] += 1
        self.playwright.browser = FakeBrowser(self.playwright.page, self.playwright.calls, kwargs)
        return self.playwright.browser


class FakePlaywright:
    """Replaces ``async_playwright()``: call the instance to get a starter."""

    def __init__(self, page: Optional[FakePage] = None):
        self.page = page or FakePage()
        self.calls: Dict[str, int] = {
            "launch": 0,
            "context.close": 0,
            "browser.close": 0,
            "stop": 0,
        }
        self.browser: Optional[FakeBrowser] = None
        self.chromium = FakeBrowserType(self)
        self.firefox = FakeBrowserType(self)
        self.webkit = FakeBrowserType(self)

    def __call__(self) -> "FakePlaywright":
        return self

    async def start(self) -> "FakePlaywright":
        return self

    async def stop(self) -> None:
        self.calls["stop"] += 1


# =============================================================================
# Orchestration doubles
# =============================================================================

class FakeSessionManager:
    """Counts connect/disconnect calls; optionally fails to connect or release."""

    def __init__(
        self,
        connect_error: Optional[Exception] = None,
        disconnect_error: Optional[Exception] = None,
    ):
        self.connect_error = connect_error
        self.disconnect_error = disconnect_error
        self.connects = 0
        self.disconnects = 0
        self.page = FakePage()

    async def connect(self, target: Any):
        self.connects += 1
        if self.connect_error is not None:
            raise self.connect_error
        return _Session(self.page)

    async def disconnect(self) -> None:
        self.disconnects += 1
        if self.disconnect_error is not None:
            raise self.disconnect_error


@dataclass
class _Session:
    page: FakePage


class FakeAutomations:
    """Records applied operations by label; fails those listed in ``failures``."""

    def __init__(self, failures: Optional[Dict[str, Exception]] = None):
        self.failures = failures or {}
        self.attempted: List[str] = []

    async def apply(self, operation: Any) -> None:
        self.attempted.append(operation.label)
        error = self.failures.get(operation.label)
        if error is not None:
            raise error
