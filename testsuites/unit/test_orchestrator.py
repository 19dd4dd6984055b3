import pytest

from sf_ui_automation.errors import (
    AuthenticationError,
    ConfigurationFileInvalidError,
    ElementNotFoundError,
)
from sf_ui_automation.framework.browser_manager import OrgTarget
from sf_ui_automation.orchestration.batch_loader import parse_batch
from sf_ui_automation.orchestration.orchestrator import (
    ConfigurationOrchestrator,
    apply_batch,
    apply_single_operation,
)
from testsuites.helpers import FakeAutomations, FakeSessionManager


TARGET = OrgTarget("https://acme.my.salesforce.com", "token")

DOCUMENT = {
    "sessionSettings": {"sessionTimeout": 60},
    "flows": [
        {"flowApiName": "A", "activate": True},
        {"flowApiName": "B", "activate": False},
    ],
}


def _orchestrator(session_manager, automations, timeouts):
    return ConfigurationOrchestrator(
        TARGET,
        session_manager=session_manager,
        automations_factory=lambda session: automations,
        timeouts=timeouts,
        screenshot_on_failure=False,
    )


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_continue_on_error_collects_failures(timeouts):
    error = ElementNotFoundError("tr 'B'", 30000)
    sessions = FakeSessionManager()
    automations = FakeAutomations({"Flow: B": error})

    result = await _orchestrator(sessions, automations, timeouts).run(
        parse_batch(DOCUMENT), continue_on_error=True
    )

    assert result.applied == ["Session Settings", "Flow: A"]
    assert result.failed == [f"Flow B: {error}"]
    assert result.success is False
    assert result.status == "partial"
    assert sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_abort_mode_stops_at_first_failure(timeouts):
    error = ElementNotFoundError("tr 'A'", 30000)
    sessions = FakeSessionManager()
    automations = FakeAutomations({"Flow: A": error})
    orchestrator = _orchestrator(sessions, automations, timeouts)

    with pytest.raises(ElementNotFoundError):
        await orchestrator.run(parse_batch(DOCUMENT), continue_on_error=False)

    assert automations.attempted == ["Session Settings", "Flow: A"]
    assert orchestrator.attempted == 2
    assert orchestrator.result.applied == ["Session Settings"]
    assert orchestrator.result.failed == [f"Flow A: {error}"]
    assert sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
@pytest.mark.parametrize("continue_on_error", [False, True])
async def test_every_operation_attempted_once_when_nothing_fails(timeouts, continue_on_error):
    automations = FakeAutomations()
    batch = parse_batch({
        "flows": [{"flowApiName": "F", "activate": True}],
        "omniChannel": {"enabled": True},
        "sessionSettings": {"requireHttpOnly": True},
        "sharingSettings": [{"objectName": "Case"}],
    })

    result = await _orchestrator(FakeSessionManager(), automations, timeouts).run(batch, continue_on_error)

    assert automations.attempted == ["Session Settings", "Sharing: Case", "Omni-Channel", "Flow: F"]
    assert result.success is True


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_continue_mode_attempts_every_operation_when_all_fail(timeouts):
    batch = parse_batch(DOCUMENT)
    failures = {op.label: RuntimeError(f"{op.label} broke") for op in batch.ordered_operations()}
    sessions = FakeSessionManager()
    automations = FakeAutomations(failures)

    result = await _orchestrator(sessions, automations, timeouts).run(batch, continue_on_error=True)

    assert automations.attempted == ["Session Settings", "Flow: A", "Flow: B"]
    assert result.applied == []
    assert result.status == "failed"
    assert len(result.failed) == 3
    assert sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_document_flag_enables_continue_on_error(timeouts):
    automations = FakeAutomations({"Flow: A": RuntimeError("boom")})
    batch = parse_batch(dict(DOCUMENT, continueOnError=True))

    result = await _orchestrator(FakeSessionManager(), automations, timeouts).run(batch)

    assert result.applied == ["Session Settings", "Flow: B"]
    assert result.failed == ["Flow A: boom"]


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_authentication_failure_runs_nothing_and_disconnects_once(timeouts):
    sessions = FakeSessionManager(connect_error=AuthenticationError("no login marker"))
    automations = FakeAutomations()

    with pytest.raises(AuthenticationError):
        await _orchestrator(sessions, automations, timeouts).run(parse_batch(DOCUMENT), True)

    assert automations.attempted == []
    assert sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_concurrent_run_is_rejected(timeouts):
    orchestrator = _orchestrator(FakeSessionManager(), FakeAutomations(), timeouts)
    orchestrator._running = True

    with pytest.raises(RuntimeError):
        await orchestrator.run(parse_batch(DOCUMENT))


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_failure_screenshot_when_enabled(timeouts):
    class Navigator:
        def __init__(self):
            self.captured = []

        async def capture_failure(self, label):
            self.captured.append(label)

    automations = FakeAutomations({"Flow: B": RuntimeError("boom")})
    automations.navigator = Navigator()
    orchestrator = _orchestrator(FakeSessionManager(), automations, timeouts)
    orchestrator.screenshot_on_failure = True

    await orchestrator.run(parse_batch(DOCUMENT), continue_on_error=True)
    assert automations.navigator.captured == ["Flow B"]


@pytest.mark.asyncio
async def test_apply_batch_validates_before_browser_work(timeouts):
    sessions = FakeSessionManager()

    with pytest.raises(ConfigurationFileInvalidError):
        await apply_batch(
            TARGET,
            {"flows": [{"flowApiName": "A"}]},
            session_manager=sessions,
            automations_factory=lambda session: FakeAutomations(),
            timeouts=timeouts,
        )
    assert sessions.connects == 0


@pytest.mark.asyncio
async def test_apply_batch_accepts_a_file(timeouts, tmp_path):
    path = tmp_path / "setup.yaml"
    path.write_text("omniChannel:\n  enabled: true\n", encoding="utf-8")
    automations = FakeAutomations()

    result = await apply_batch(
        TARGET,
        path,
        session_manager=FakeSessionManager(),
        automations_factory=lambda session: automations,
        timeouts=timeouts,
    )
    assert result.applied == ["Omni-Channel"]


@pytest.mark.asyncio
async def test_apply_single_operation(timeouts):
    automations = FakeAutomations()
    sessions = FakeSessionManager()

    result = await apply_single_operation(
        TARGET,
        "sharingSettings",
        {"objectName": "Account", "internalAccess": "Private"},
        session_manager=sessions,
        automations_factory=lambda session: automations,
        timeouts=timeouts,
    )

    assert result.applied == ["Sharing: Account"]
    assert sessions.connects == sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_release_failure_never_replaces_the_outcome(timeouts):
    sessions = FakeSessionManager(disconnect_error=RuntimeError("browser already gone"))
    automations = FakeAutomations({"Flow: B": ElementNotFoundError("tr 'B'", 30000)})

    result = await _orchestrator(sessions, automations, timeouts).run(
        parse_batch(DOCUMENT), continue_on_error=True
    )

    assert result.applied == ["Session Settings", "Flow: A"]
    assert result.status == "partial"
    assert sessions.disconnects == 1


@pytest.mark.asyncio
@pytest.mark.orchestration
async def test_release_failure_keeps_the_operation_error_in_abort_mode(timeouts):
    sessions = FakeSessionManager(disconnect_error=RuntimeError("browser already gone"))
    automations = FakeAutomations({"Flow: A": ElementNotFoundError("tr 'A'", 30000)})
    orchestrator = _orchestrator(sessions, automations, timeouts)

    with pytest.raises(ElementNotFoundError):
        await orchestrator.run(parse_batch(DOCUMENT))

    assert orchestrator.attempted == 2
    assert sessions.disconnects == 1
