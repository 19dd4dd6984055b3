"""
Organization-Wide Email Addresses page object.
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import OrgWideEmail
from .setup_page import SetupPage, checkbox, log_applied


class OrgWideEmailPage(SetupPage):
    """Adds a new organization-wide email address."""

    SETUP_PATH = "OrgWideEmailAddresses"
    OPERATION_TYPE = OrgWideEmail

    DISPLAY_NAME_INPUT = 'input[id*="displayName"]'
    EMAIL_ADDRESS_INPUT = 'input[id*="emailAddress"]'
    ALLOW_ALL_CHECKBOX = checkbox("allowAll")

    @allure.step("Add org-wide email address")
    async def apply(self, operation: OrgWideEmail) -> None:
        self._check_operation(operation)
        logger.info(f"Configuring Org-Wide Email Address: {operation.email_address}...")

        actions = await self.open()
        await actions.click_button_by_label("Add")
        await self.navigator.settle()

        await actions.set_input_value(self.DISPLAY_NAME_INPUT, operation.display_name)
        await actions.set_input_value(self.EMAIL_ADDRESS_INPUT, operation.email_address)
        await self._set_checkbox_if(actions, self.ALLOW_ALL_CHECKBOX, operation.allow_all_profiles)

        await self.save(actions)
        log_applied(operation.label)
