"""
================================================================================
Setup Automations
================================================================================

Dispatches each configuration operation to the page object for its kind.

PAGE_TYPES is the single mapping from OperationKind to page object. It is
checked for completeness when this module is imported, so adding a kind
without a page fails fast.

================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

from ..framework.element_actions import Timeouts
from ..framework.page_base import SetupNavigator
from ..orchestration.operations import OPERATION_TYPES, OperationKind
from .activity_capture_page import ActivityCapturePage
from .flow_page import FlowPage
from .omni_channel_page import OmniChannelPage
from .org_wide_email_page import OrgWideEmailPage
from .session_settings_page import SessionSettingsPage
from .setup_page import SetupPage
from .sharing_settings_page import SharingSettingsPage


PAGE_TYPES: Dict[OperationKind, Type[SetupPage]] = {
    OperationKind.SESSION_SETTINGS: SessionSettingsPage,
    OperationKind.SHARING_SETTINGS: SharingSettingsPage,
    OperationKind.ACTIVITY_CAPTURE: ActivityCapturePage,
    OperationKind.OMNI_CHANNEL: OmniChannelPage,
    OperationKind.FLOW_ACTIVATION: FlowPage,
    OperationKind.ORG_WIDE_EMAIL: OrgWideEmailPage,
}


def _verify_page_types() -> None:
    missing = [kind.value for kind in OperationKind if kind not in PAGE_TYPES]
    if missing:
        raise RuntimeError(f"No page object for operation kinds: {', '.join(missing)}")
    for kind, page_type in PAGE_TYPES.items():
        if page_type.OPERATION_TYPE is not OPERATION_TYPES[kind]:
            raise RuntimeError(
                f"{page_type.__name__} handles {page_type.OPERATION_TYPE.__name__}, "
                f"not {OPERATION_TYPES[kind].__name__}"
            )


_verify_page_types()


class SetupAutomations:
    """
    Applies operations on an authenticated page.

    Usage:
        automations = SetupAutomations(SetupNavigator(session.page))
        await automations.apply(FlowActivation("Case_Assignment", activate=True))
    """

    def __init__(self, navigator: SetupNavigator, timeouts: Optional[Timeouts] = None):
        self.navigator = navigator
        self._pages: Dict[OperationKind, SetupPage] = {
            kind: page_type(navigator, timeouts) for kind, page_type in PAGE_TYPES.items()
        }

    def page_for(self, kind: OperationKind) -> SetupPage:
        return self._pages[OperationKind(kind)]

    async def apply(self, operation: Any) -> None:
        """
        Apply one operation.

        Raises:
            TypeError: The object is not a configuration operation
            SetupAutomationError: The UI protocol failed
        """
        kind = getattr(operation, "KIND", None)
        if kind is None:
            raise TypeError(f"Not a configuration operation: {operation!r}")
        await self.page_for(kind).apply(operation)


__all__ = [
    "PAGE_TYPES",
    "SetupAutomations",
]
