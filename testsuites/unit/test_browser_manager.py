import pytest

from sf_ui_automation.errors import AuthenticationError
from sf_ui_automation.framework.browser_manager import (
    BrowserManager,
    BrowserOptions,
    OrgTarget,
    front_door_url,
)
from testsuites.helpers import FakePage, FakePlaywright


TARGET = OrgTarget("https://acme.my.salesforce.com", "00Dxx!secret-token")


def _manager(playwright, timeouts, **options):
    return BrowserManager(
        BrowserOptions(**options),
        timeouts,
        playwright_factory=playwright,
    )


def test_front_door_url():
    assert front_door_url("https://acme.my.salesforce.com/", "abc") == (
        "https://acme.my.salesforce.com/secur/frontdoor.jsp?sid=abc"
    )


def test_target_repr_masks_token():
    assert "secret-token" not in repr(TARGET)


@pytest.mark.asyncio
@pytest.mark.auth
async def test_connect_injects_session_and_verifies_login(timeouts):
    page = FakePage()
    page.add(".slds-global-header")
    playwright = FakePlaywright(page)

    async with _manager(playwright, timeouts, headless=False, slow_mo=0, timeout_ms=5000) as manager:
        session = await manager.connect(TARGET)

        assert session.page is page
        assert page.events[0] == ("goto", front_door_url(TARGET.instance_url, TARGET.access_token))
        assert page.default_timeout == 5000
        assert playwright.browser.launch_kwargs["headless"] is False
        assert playwright.browser.launch_kwargs["slow_mo"] == 0
        assert playwright.browser.context.viewport == {"width": 1920, "height": 1080}

    assert playwright.calls["browser.close"] == 1
    assert playwright.calls["stop"] == 1
    assert manager.session is None


@pytest.mark.asyncio
@pytest.mark.auth
async def test_classic_login_marker_is_accepted(timeouts):
    page = FakePage()
    page.add("#phHeaderLogoImage")
    manager = _manager(FakePlaywright(page), timeouts)

    await manager.connect(TARGET)
    assert manager.is_connected
    await manager.disconnect()


@pytest.mark.asyncio
@pytest.mark.auth
async def test_missing_login_marker_fails_authentication(timeouts):
    playwright = FakePlaywright(FakePage())
    manager = _manager(playwright, timeouts)

    with pytest.raises(AuthenticationError):
        await manager.connect(TARGET)

    await manager.disconnect()
    assert playwright.calls["context.close"] == 1
    assert playwright.calls["browser.close"] == 1


@pytest.mark.asyncio
@pytest.mark.auth
@pytest.mark.parametrize("target", [
    OrgTarget(None, "token"),
    OrgTarget("https://acme.my.salesforce.com", ""),
])
async def test_missing_credentials_fail_before_launch(timeouts, target):
    playwright = FakePlaywright()
    manager = _manager(playwright, timeouts)

    with pytest.raises(AuthenticationError):
        await manager.connect(target)
    assert playwright.calls["launch"] == 0


@pytest.mark.asyncio
async def test_disconnect_is_idempotent_and_swallows_close_errors(timeouts):
    page = FakePage()
    page.add(".slds-global-header")
    playwright = FakePlaywright(page)
    manager = _manager(playwright, timeouts)

    await manager.disconnect()  # never connected
    await manager.connect(TARGET)

    async def broken_close():
        raise RuntimeError("browser already gone")

    playwright.browser.close = broken_close

    await manager.disconnect()
    await manager.disconnect()
    assert playwright.calls["context.close"] == 1
    assert playwright.calls["stop"] == 1
    assert not manager.is_connected


@pytest.mark.asyncio
async def test_screenshot_of_live_session(timeouts, tmp_path):
    page = FakePage()
    page.add(".slds-global-header")
    manager = _manager(FakePlaywright(page), timeouts)

    with pytest.raises(RuntimeError):
        await manager.screenshot(tmp_path / "before.png")

    async with manager:
        await manager.connect(TARGET)
        await manager.screenshot(tmp_path / "session.png")

    assert (tmp_path / "session.png").exists()
    assert ("screenshot", str(tmp_path / "session.png")) in page.events
