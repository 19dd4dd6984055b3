"""
================================================================================
Setup Page Objects
================================================================================

Page Object Model implementations for Salesforce Setup surfaces.

Each page class encapsulates:
    - The Setup path and element selectors of one surface
    - The UI protocol applying one operation kind

Author: Automation Team
License: MIT
================================================================================
"""

from .activity_capture_page import ActivityCapturePage
from .flow_page import FlowPage
from .omni_channel_page import OmniChannelPage
from .org_wide_email_page import OrgWideEmailPage
from .session_settings_page import SessionSettingsPage
from .setup_automations import PAGE_TYPES, SetupAutomations
from .setup_page import SetupPage
from .sharing_settings_page import SharingSettingsPage

__all__ = [
    "ActivityCapturePage",
    "FlowPage",
    "OmniChannelPage",
    "OrgWideEmailPage",
    "PAGE_TYPES",
    "SessionSettingsPage",
    "SetupAutomations",
    "SetupPage",
    "SharingSettingsPage",
]
