"""
Einstein Activity Capture page object.
"""

from __future__ import annotations

import allure
from loguru import logger

from ..orchestration.operations import ActivityCapture
from .setup_page import SetupPage, checkbox, log_applied


class ActivityCapturePage(SetupPage):

    SETUP_PATH = "ActivitySyncEngineSettings"
    OPERATION_TYPE = ActivityCapture

    MAIN_TOGGLE = checkbox("activityCapture")
    EMAIL_CAPTURE_CHECKBOX = checkbox("emailCapture")
    EVENT_CAPTURE_CHECKBOX = checkbox("eventCapture")

    @allure.step("Configure Einstein Activity Capture")
    async def apply(self, operation: ActivityCapture) -> None:
        self._check_operation(operation)
        logger.info("Configuring Einstein Activity Capture...")

        actions = await self.open()
        await self._apply_feature_toggles(
            actions,
            self.MAIN_TOGGLE,
            operation.enabled,
            (
                (self.EMAIL_CAPTURE_CHECKBOX, operation.capture_emails),
                (self.EVENT_CAPTURE_CHECKBOX, operation.capture_events),
            ),
        )

        await self.save(actions)
        log_applied(operation.label)
