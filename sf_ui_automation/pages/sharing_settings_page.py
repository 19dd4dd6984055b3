"""
Sharing Settings page object (organization-wide defaults per object).
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import SharingSettings
from .setup_page import SetupPage, checkbox, log_applied


class SharingSettingsPage(SetupPage):

    SETUP_PATH = "SecuritySharing"
    OPERATION_TYPE = SharingSettings

    INTERNAL_ACCESS_SELECT = 'select[id*="internalAccess"]'
    EXTERNAL_ACCESS_SELECT = 'select[id*="externalAccess"]'
    HIERARCHY_CHECKBOX = checkbox("hierarchy")

    @allure.step("Configure sharing settings")
    async def apply(self, operation: SharingSettings) -> None:
        self._check_operation(operation)
        logger.info(f"Configuring OWD for {operation.object_name}...")

        actions = await self.open()

        # The object's row carries its own Edit link
        row = await actions.find_row(operation.object_name)
        await actions.click_role("link", "Edit", exact=True, within=row)
        await self.navigator.settle()

        if operation.internal_access is not None:
            await actions.select_dropdown_option(self.INTERNAL_ACCESS_SELECT, operation.internal_access)
        if operation.external_access is not None:
            await actions.select_dropdown_option(self.EXTERNAL_ACCESS_SELECT, operation.external_access)
        await self._set_checkbox_if(actions, self.HIERARCHY_CHECKBOX, operation.grant_access_using_hierarchies)

        await self.save(actions)
        log_applied(operation.label)
