"""
================================================================================
Configuration Orchestrator
================================================================================

Runs a ConfigurationBatch against one org:

    connect -> apply operations in category order -> disconnect

Failure policy:
    - continue_on_error=False: the first failure is recorded and its error
      propagates; nothing later is attempted. Applied operations stay applied.
    - continue_on_error=True: every operation is attempted exactly once and
      failures are only reported in the returned BatchResult.

The session is released exactly once per run, whatever the outcome.

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from loguru import logger

from ..common import get_section
from ..errors import ConfigurationFileInvalidError
from ..framework.browser_manager import BrowserManager, BrowserOptions, OrgTarget, SetupSession
from ..framework.element_actions import Timeouts
from ..framework.page_base import SetupNavigator
from ..pages.setup_automations import SetupAutomations
from ..report_tools.allure_utils import attach_batch_result
from .batch_loader import load_batch, parse_batch, parse_operation
from .operations import ConfigurationBatch, OperationKind
from .result_aggregator import BatchResult, OperationResult, ResultAggregator


BatchDocument = Union[ConfigurationBatch, Mapping[str, Any], str, Path]


class ConfigurationOrchestrator:
    """
    Sequences configuration operations over one browser session.

    Usage:
        orchestrator = ConfigurationOrchestrator(OrgTarget.from_env())
        result = await orchestrator.run(load_batch("setup.yaml"), continue_on_error=True)
        print(result.message)
    """

    def __init__(
        self,
        target: OrgTarget,
        session_manager: Optional[BrowserManager] = None,
        automations_factory: Optional[Callable[[SetupSession], SetupAutomations]] = None,
        options: Optional[BrowserOptions] = None,
        timeouts: Optional[Timeouts] = None,
        screenshot_on_failure: Optional[bool] = None,
    ):
        """
        Args:
            target: Pre-authenticated org identity
            session_manager: Browser owner (defaults to a BrowserManager)
            automations_factory: Builds the dispatcher for a live session
            options: Browser options for the default session manager
            timeouts: Timeout settings (defaults from configuration)
            screenshot_on_failure: Capture a screenshot when an operation
                fails (defaults to reporting.screenshot_on_failure)
        """
        reporting = get_section("reporting")

        self.target = target
        self.timeouts = timeouts or Timeouts.from_config()
        self.session_manager = session_manager or BrowserManager(options, self.timeouts)
        self._automations_factory = automations_factory or self._default_automations

        if screenshot_on_failure is None:
            screenshot_on_failure = bool(reporting.get("screenshot_on_failure", False))
        self.screenshot_on_failure = screenshot_on_failure
        self.screenshot_dir = reporting.get("screenshot_dir") or "screenshots"

        self._aggregator = ResultAggregator()
        self._running = False

    def _default_automations(self, session: SetupSession) -> SetupAutomations:
        navigator = SetupNavigator(session.page, self.timeouts, self.screenshot_dir)
        return SetupAutomations(navigator, self.timeouts)

    @property
    def result(self) -> BatchResult:
        """Outcome of the current or last run (partial while running or after an abort)."""
        return self._aggregator.result()

    @property
    def attempted(self) -> int:
        return self._aggregator.attempted

    async def run(self, batch: ConfigurationBatch, continue_on_error: bool = False) -> BatchResult:
        """
        Apply every operation of a batch.

        Args:
            batch: Validated batch
            continue_on_error: Keep going after a failed operation. The batch's
                own continue_on_error flag also enables this.

        Returns:
            BatchResult with applied and failed operations in execution order

        Raises:
            RuntimeError: A run is already in progress on this orchestrator
            AuthenticationError: The session could not be established
            Exception: The first operation error, when not continuing on error
        """
        if self._running:
            raise RuntimeError("A configuration run is already in progress")

        self._running = True
        self._aggregator = ResultAggregator()
        continue_on_error = continue_on_error or batch.continue_on_error

        logger.info(
            f"Applying {len(batch)} configuration operations "
            f"(continue_on_error={continue_on_error})"
        )

        try:
            session = await self.session_manager.connect(self.target)
            automations = self._automations_factory(session)
            for operation in batch.ordered_operations():
                await self._execute(automations, operation, continue_on_error)
        finally:
            try:
                await self.session_manager.disconnect()
            except Exception as e:
                logger.warning(f"Session release failed: {e}")
            self._running = False
            attach_batch_result(self._aggregator.result())

        result = self._aggregator.result()
        logger.info(result.message)
        return result

    async def _execute(self, automations: SetupAutomations, operation: Any, continue_on_error: bool) -> None:
        try:
            await automations.apply(operation)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"❌ Failed to apply {operation.failure_label}: {message}")
            self._aggregator.record(OperationResult.failure(operation.failure_label, message))
            await self._capture_failure(automations, operation.failure_label)
            if not continue_on_error:
                raise
            return

        self._aggregator.record(OperationResult.success(operation.label))
        logger.info(f"✓ {operation.label}")

    async def _capture_failure(self, automations: SetupAutomations, label: str) -> None:
        if not self.screenshot_on_failure:
            return
        navigator = getattr(automations, "navigator", None)
        if navigator is not None:
            await navigator.capture_failure(label)


# =============================================================================
# Entry Points
# =============================================================================

def resolve_batch(document: BatchDocument) -> ConfigurationBatch:
    """
    Turn a batch document into a validated ConfigurationBatch.

    Accepts an already built batch, a parsed mapping or a path to a JSON/YAML
    file.

    Raises:
        ConfigurationFileInvalidError: The document is invalid
    """
    if isinstance(document, ConfigurationBatch):
        return document
    if isinstance(document, (str, Path)):
        return load_batch(document)
    return parse_batch(document)


async def apply_batch(
    target: OrgTarget,
    batch_document: BatchDocument,
    continue_on_error: bool = False,
    **orchestrator_kwargs: Any,
) -> BatchResult:
    """
    Validate a batch document, then apply it.

    The effective failure policy is continue_on_error OR the document's
    continueOnError. The document is validated before any browser work.
    """
    batch = resolve_batch(batch_document)
    orchestrator = ConfigurationOrchestrator(target, **orchestrator_kwargs)
    return await orchestrator.run(batch, continue_on_error=continue_on_error)


async def apply_single_operation(
    target: OrgTarget,
    kind: Union[OperationKind, str],
    options: Any,
    **orchestrator_kwargs: Any,
) -> BatchResult:
    """
    Apply one operation in its own session.

    Args:
        target: Pre-authenticated org identity
        kind: Operation kind
        options: Operation instance, or mapping of camelCase option keys

    Raises:
        ConfigurationFileInvalidError: Unknown kind or invalid options (before
            any browser work)
        TypeError: Options are neither a mapping nor an operation of kind
        Exception: The operation error
    """
    try:
        kind = OperationKind(kind)
    except ValueError as e:
        raise ConfigurationFileInvalidError(f"Unknown operation kind: {kind!r}") from e

    if isinstance(options, Mapping):
        operation = parse_operation(kind, options)
    elif getattr(options, "KIND", None) is kind:
        operation = options
    else:
        raise TypeError(f"Options for {kind.value} must be a mapping or a {kind.name} operation")

    orchestrator = ConfigurationOrchestrator(target, **orchestrator_kwargs)
    return await orchestrator.run(ConfigurationBatch.of(operation))


__all__ = [
    "ConfigurationOrchestrator",
    "apply_batch",
    "apply_single_operation",
    "resolve_batch",
]
