"""
Session Settings page object (Setup > Security > Session Settings).
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import SessionSettings
from .setup_page import SetupPage, checkbox, log_applied


class SessionSettingsPage(SetupPage):
    """Edits session security settings. Only provided fields are touched."""

    SETUP_PATH = "SecuritySession"
    OPERATION_TYPE = SessionSettings

    TIMEOUT_SELECT = 'select[id*="timeout"]'
    FORCE_LOGOUT_CHECKBOX = checkbox("forceLogout")
    LOCK_IP_CHECKBOX = checkbox("lockIp")
    HTTP_ONLY_CHECKBOX = checkbox("httpOnly")
    SECURE_CONNECTIONS_CHECKBOX = checkbox("secureConnections")
    CSP_ON_EMAIL_CHECKBOX = checkbox("cspOnEmail")

    @allure.step("Configure session settings")
    async def apply(self, operation: SessionSettings) -> None:
        self._check_operation(operation)
        logger.info("Configuring Session Settings...")

        actions = await self.open()
        await actions.click_button_by_label("Edit")
        await self.navigator.settle()

        if operation.session_timeout is not None:
            await actions.select_dropdown_option(self.TIMEOUT_SELECT, str(operation.session_timeout))

        await self._set_checkbox_if(actions, self.FORCE_LOGOUT_CHECKBOX, operation.force_logout_on_session_timeout)
        await self._set_checkbox_if(actions, self.LOCK_IP_CHECKBOX, operation.lock_sessions_to_ip)
        await self._set_checkbox_if(actions, self.HTTP_ONLY_CHECKBOX, operation.require_http_only)
        await self._set_checkbox_if(actions, self.SECURE_CONNECTIONS_CHECKBOX, operation.require_secure_connections)
        await self._set_checkbox_if(actions, self.CSP_ON_EMAIL_CHECKBOX, operation.enable_csp_on_email)

        await self.save(actions)
        log_applied(operation.label)
