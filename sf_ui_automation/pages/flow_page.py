"""
================================================================================
Flows Page Object
================================================================================

Activates or deactivates a Flow from the Lightning Flows list view.

The list view renders in the top-level document, not the setup frame. Some
org configurations ask for confirmation after Activate/Deactivate; the
confirmation control is probed briefly and clicked only when it appears.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import FlowActivation
from .setup_page import SetupPage, log_applied


class FlowPage(SetupPage):

    SETUP_PATH = "Flows"
    OPERATION_TYPE = FlowActivation
    USE_SETUP_FRAME = False

    @allure.step("Activate/deactivate flow")
    async def apply(self, operation: FlowActivation) -> None:
        self._check_operation(operation)
        action_label = "Activate" if operation.activate else "Deactivate"
        logger.info(f"{'Activating' if operation.activate else 'Deactivating'} Flow: {operation.flow_api_name}...")

        actions = await self.open()
        await self.navigator.settle()

        await actions.submit_search(operation.flow_api_name)
        await self.navigator.settle()

        row = await actions.find_row(operation.flow_api_name)
        await actions.click_role("row_actions", within=row)
        # Exact match so "Activate" never hits "Deactivate"
        await actions.click_role("menuitem", action_label, exact=True)

        if await actions.is_present("confirm", timeout=self.timeouts.confirm_probe_ms):
            await actions.click_role("confirm")
        else:
            logger.debug("No confirmation requested")

        await actions.wait_for_toast()
        log_applied(operation.label)
