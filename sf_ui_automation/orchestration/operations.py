"""
================================================================================
Configuration Operations
================================================================================

The closed set of Setup mutations the engine can apply, and the batch that
groups them.

Every option that is not part of an operation's identity is Optional:
``None`` means "leave the current value unchanged", never "reset to a
default". Field metadata carries the camelCase key used in batch documents.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, List, Optional, Tuple


class OperationKind(str, Enum):
    """Operation kinds, in the order a batch executes them."""
    SESSION_SETTINGS = "sessionSettings"
    SHARING_SETTINGS = "sharingSettings"
    ACTIVITY_CAPTURE = "einsteinActivityCapture"
    OMNI_CHANNEL = "omniChannel"
    FLOW_ACTIVATION = "flows"
    ORG_WIDE_EMAIL = "orgWideEmails"


INTERNAL_ACCESS_LEVELS = ("Private", "Public Read Only", "Public Read/Write", "Controlled by Parent")
EXTERNAL_ACCESS_LEVELS = ("Private", "Public Read Only", "Public Read/Write")


def _opt(key: str, **extra):
    return field(default=None, metadata={"key": key, **extra})


def _req(key: str, **extra):
    return field(metadata={"key": key, **extra})


# =============================================================================
# Operation Variants
# =============================================================================

@dataclass(frozen=True)
class SessionSettings:
    """Session security settings (Setup > Session Settings)."""
    KIND: ClassVar[OperationKind] = OperationKind.SESSION_SETTINGS

    session_timeout: Optional[int] = _opt("sessionTimeout", type=int)
    force_logout_on_session_timeout: Optional[bool] = _opt("forceLogoutOnSessionTimeout", type=bool)
    lock_sessions_to_ip: Optional[bool] = _opt("lockSessionsToIp", type=bool)
    require_http_only: Optional[bool] = _opt("requireHttpOnly", type=bool)
    require_secure_connections: Optional[bool] = _opt("requireSecureConnections", type=bool)
    enable_csp_on_email: Optional[bool] = _opt("enableCspOnEmail", type=bool)

    @property
    def label(self) -> str:
        return "Session Settings"

    @property
    def failure_label(self) -> str:
        return "Session Settings"


@dataclass(frozen=True)
class SharingSettings:
    """Organization-wide default for one object (Setup > Sharing Settings)."""
    KIND: ClassVar[OperationKind] = OperationKind.SHARING_SETTINGS

    object_name: str = _req("objectName", type=str)
    internal_access: Optional[str] = _opt("internalAccess", type=str, choices=INTERNAL_ACCESS_LEVELS)
    external_access: Optional[str] = _opt("externalAccess", type=str, choices=EXTERNAL_ACCESS_LEVELS)
    grant_access_using_hierarchies: Optional[bool] = _opt("grantAccessUsingHierarchies", type=bool)

    @property
    def label(self) -> str:
        return f"Sharing: {self.object_name}"

    @property
    def failure_label(self) -> str:
        return f"Sharing {self.object_name}"


@dataclass(frozen=True)
class ActivityCapture:
    """Einstein Activity Capture toggles."""
    KIND: ClassVar[OperationKind] = OperationKind.ACTIVITY_CAPTURE

    enabled: Optional[bool] = _opt("enabled", type=bool)
    capture_emails: Optional[bool] = _opt("captureEmails", type=bool)
    capture_events: Optional[bool] = _opt("captureEvents", type=bool)

    @property
    def label(self) -> str:
        return "Einstein Activity Capture"

    @property
    def failure_label(self) -> str:
        return "Einstein Activity Capture"


@dataclass(frozen=True)
class OmniChannel:
    """Omni-Channel routing toggles."""
    KIND: ClassVar[OperationKind] = OperationKind.OMNI_CHANNEL

    enabled: Optional[bool] = _opt("enabled", type=bool)
    enable_skill_based_routing: Optional[bool] = _opt("enableSkillBasedRouting", type=bool)
    enable_external_routing: Optional[bool] = _opt("enableExternalRouting", type=bool)

    @property
    def label(self) -> str:
        return "Omni-Channel"

    @property
    def failure_label(self) -> str:
        return "Omni-Channel"


@dataclass(frozen=True)
class FlowActivation:
    """Activate or deactivate one Flow by API name."""
    KIND: ClassVar[OperationKind] = OperationKind.FLOW_ACTIVATION

    flow_api_name: str = _req("flowApiName", type=str)
    activate: bool = _req("activate", type=bool)

    @property
    def label(self) -> str:
        return f"Flow: {self.flow_api_name}"

    @property
    def failure_label(self) -> str:
        return f"Flow {self.flow_api_name}"


@dataclass(frozen=True)
class OrgWideEmail:
    """A new organization-wide email address."""
    KIND: ClassVar[OperationKind] = OperationKind.ORG_WIDE_EMAIL

    display_name: str = _req("displayName", type=str)
    email_address: str = _req("emailAddress", type=str)
    allow_all_profiles: Optional[bool] = _opt("allowAllProfiles", type=bool)

    @property
    def label(self) -> str:
        return f"Org-Wide Email: {self.display_name}"

    @property
    def failure_label(self) -> str:
        return f"Org-Wide Email {self.display_name}"


OPERATION_TYPES = {
    OperationKind.SESSION_SETTINGS: SessionSettings,
    OperationKind.SHARING_SETTINGS: SharingSettings,
    OperationKind.ACTIVITY_CAPTURE: ActivityCapture,
    OperationKind.OMNI_CHANNEL: OmniChannel,
    OperationKind.FLOW_ACTIVATION: FlowActivation,
    OperationKind.ORG_WIDE_EMAIL: OrgWideEmail,
}

# Sections holding a list of entries rather than a single object
LIST_SECTIONS = frozenset({
    OperationKind.SHARING_SETTINGS,
    OperationKind.FLOW_ACTIVATION,
    OperationKind.ORG_WIDE_EMAIL,
})


# =============================================================================
# Batch
# =============================================================================

@dataclass(frozen=True)
class ConfigurationBatch:
    """
    Ordered group of operations plus the failure policy flag.

    Execution order is fixed by category, whatever the document layout:
    session settings, sharing settings, activity capture, omni-channel,
    flows, org-wide emails. List sections keep document order.
    """
    session_settings: Optional[SessionSettings] = None
    sharing_settings: Tuple[SharingSettings, ...] = ()
    activity_capture: Optional[ActivityCapture] = None
    omni_channel: Optional[OmniChannel] = None
    flows: Tuple[FlowActivation, ...] = ()
    org_wide_emails: Tuple[OrgWideEmail, ...] = ()
    continue_on_error: bool = False

    def ordered_operations(self) -> Iterator:
        if self.session_settings is not None:
            yield self.session_settings
        yield from self.sharing_settings
        if self.activity_capture is not None:
            yield self.activity_capture
        if self.omni_channel is not None:
            yield self.omni_channel
        yield from self.flows
        yield from self.org_wide_emails

    def __len__(self) -> int:
        return sum(1 for _ in self.ordered_operations())

    @classmethod
    def of(cls, operation, continue_on_error: bool = False) -> "ConfigurationBatch":
        """Batch holding a single operation."""
        return cls.from_operations([operation], continue_on_error=continue_on_error)

    @classmethod
    def from_operations(cls, operations: List, continue_on_error: bool = False) -> "ConfigurationBatch":
        """Group loose operations into their categories (order within a kind kept)."""
        singles = {}
        lists = {kind: [] for kind in LIST_SECTIONS}
        for op in operations:
            kind = op.KIND
            if kind in LIST_SECTIONS:
                lists[kind].append(op)
            else:
                singles[kind] = op
        return cls(
            session_settings=singles.get(OperationKind.SESSION_SETTINGS),
            sharing_settings=tuple(lists[OperationKind.SHARING_SETTINGS]),
            activity_capture=singles.get(OperationKind.ACTIVITY_CAPTURE),
            omni_channel=singles.get(OperationKind.OMNI_CHANNEL),
            flows=tuple(lists[OperationKind.FLOW_ACTIVATION]),
            org_wide_emails=tuple(lists[OperationKind.ORG_WIDE_EMAIL]),
            continue_on_error=continue_on_error,
        )


__all__ = [
    "OperationKind",
    "SessionSettings",
    "SharingSettings",
    "ActivityCapture",
    "OmniChannel",
    "FlowActivation",
    "OrgWideEmail",
    "OPERATION_TYPES",
    "LIST_SECTIONS",
    "ConfigurationBatch",
    "INTERNAL_ACCESS_LEVELS",
    "EXTERNAL_ACCESS_LEVELS",
]
