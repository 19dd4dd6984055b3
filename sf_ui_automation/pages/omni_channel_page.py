"""
Omni-Channel settings page object.
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import OmniChannel
from .setup_page import SetupPage, checkbox, log_applied


class OmniChannelPage(SetupPage):

    SETUP_PATH = "OmniChannelSettings"
    OPERATION_TYPE = OmniChannel

    MAIN_TOGGLE = checkbox("enableOmni")
    SKILL_BASED_CHECKBOX = checkbox("skillBased")
    EXTERNAL_ROUTING_CHECKBOX = checkbox("externalRouting")

    @allure.step("Configure Omni-Channel")
    async def apply(self, operation: OmniChannel) -> None:
        self._check_operation(operation)
        logger.info("Configuring Omni-Channel...")

        actions = await self.open()
        await self._apply_feature_toggles(
            actions,
            self.MAIN_TOGGLE,
            operation.enabled,
            (
                (self.SKILL_BASED_CHECKBOX, operation.enable_skill_based_routing),
                (self.EXTERNAL_ROUTING_CHECKBOX, operation.enable_external_routing),
            ),
        )

        await self.save(actions)
        log_applied(operation.label)
