"""
================================================================================
Batch Document Loader
================================================================================

Loads configuration batches from JSON or YAML files and validates their
structure before any browser work starts.

Document layout (every section optional):

    sessionSettings:            # object
      sessionTimeout: 60
      lockSessionsToIp: true
    sharingSettings:            # list
      - objectName: Account
        internalAccess: Private
    einsteinActivityCapture:    # object
      enabled: true
    omniChannel:                # object
      enabled: false
    flows:                      # list
      - flowApiName: Case_Assignment
        activate: true
    orgWideEmails:              # list
      - displayName: Support
        emailAddress: support@example.com
    continueOnError: false

JSON is a subset of YAML, so both formats go through yaml.safe_load.

================================================================================
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml
from loguru import logger

from ..errors import ConfigurationFileInvalidError
from .operations import (
    LIST_SECTIONS,
    OPERATION_TYPES,
    ConfigurationBatch,
    OperationKind,
)

CONTINUE_ON_ERROR_KEY = "continueOnError"

_TYPE_NAMES = {bool: "a boolean", int: "an integer", str: "a string"}


def _check_type(value: Any, expected: type, path: str) -> Any:
    # bool is a subclass of int; never accept it where a number is expected
    if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise ConfigurationFileInvalidError(f"{path} must be {_TYPE_NAMES[int]}, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigurationFileInvalidError(f"{path} must be {_TYPE_NAMES[expected]}, got {value!r}")
    return value


def _check_string_keys(data: Mapping, path: str) -> None:
    for key in data:
        if not isinstance(key, str):
            raise ConfigurationFileInvalidError(f"{path} keys must be strings, got {key!r}")


def parse_operation(kind: Union[OperationKind, str], data: Any, path: str = None):
    """
    Build one operation from its document mapping.

    Args:
        kind: Operation kind (enum or its document section name)
        data: Mapping with camelCase option keys
        path: Location used in error messages

    Raises:
        ConfigurationFileInvalidError: Unknown keys, missing required keys,
            wrong types or values outside the allowed choices
    """
    try:
        kind = OperationKind(kind)
    except ValueError as e:
        raise ConfigurationFileInvalidError(f"Unknown operation kind: {kind!r}") from e

    path = path or kind.value
    if not isinstance(data, Mapping):
        raise ConfigurationFileInvalidError(f"{path} must be an object, got {type(data).__name__}")

    cls = OPERATION_TYPES[kind]
    fields = dataclasses.fields(cls)
    known = {f.metadata["key"] for f in fields}
    _check_string_keys(data, path)
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationFileInvalidError(
            f"{path} has unknown keys: {', '.join(map(str, unknown))} "
            f"(allowed: {', '.join(sorted(known))})"
        )

    kwargs: Dict[str, Any] = {}
    for f in fields:
        key = f.metadata["key"]
        field_path = f"{path}.{key}"
        required = f.default is dataclasses.MISSING
        value = data.get(key)

        if value is None:
            if required:
                raise ConfigurationFileInvalidError(f"{field_path} is required")
            continue

        _check_type(value, f.metadata["type"], field_path)
        if f.metadata["type"] is str and not value.strip():
            raise ConfigurationFileInvalidError(f"{field_path} must not be empty")

        choices = f.metadata.get("choices")
        if choices and value not in choices:
            raise ConfigurationFileInvalidError(
                f"{field_path} must be one of {', '.join(choices)}; got {value!r}"
            )
        kwargs[f.name] = value

    return cls(**kwargs)


def parse_batch(document: Any) -> ConfigurationBatch:
    """
    Validate a batch document and build the ConfigurationBatch.

    Raises:
        ConfigurationFileInvalidError: The document is structurally invalid
    """
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigurationFileInvalidError(
            f"Configuration must be an object, got {type(document).__name__}"
        )

    allowed = {kind.value for kind in OperationKind} | {CONTINUE_ON_ERROR_KEY}
    _check_string_keys(document, "Configuration")
    unknown = sorted(set(document) - allowed)
    if unknown:
        raise ConfigurationFileInvalidError(
            f"Unknown configuration sections: {', '.join(unknown)} "
            f"(allowed: {', '.join(sorted(allowed))})"
        )

    continue_on_error = document.get(CONTINUE_ON_ERROR_KEY, False)
    if continue_on_error is None:
        continue_on_error = False
    _check_type(continue_on_error, bool, CONTINUE_ON_ERROR_KEY)

    sections: Dict[OperationKind, Any] = {}
    for kind in OperationKind:
        raw = document.get(kind.value)
        if raw is None:
            continue
        if kind in LIST_SECTIONS:
            if not isinstance(raw, list):
                raise ConfigurationFileInvalidError(
                    f"{kind.value} must be a list, got {type(raw).__name__}"
                )
            sections[kind] = tuple(
                parse_operation(kind, entry, f"{kind.value}[{i}]")
                for i, entry in enumerate(raw)
            )
        else:
            sections[kind] = parse_operation(kind, raw)

    _warn_duplicates(sections)

    return ConfigurationBatch(
        session_settings=sections.get(OperationKind.SESSION_SETTINGS),
        sharing_settings=sections.get(OperationKind.SHARING_SETTINGS, ()),
        activity_capture=sections.get(OperationKind.ACTIVITY_CAPTURE),
        omni_channel=sections.get(OperationKind.OMNI_CHANNEL),
        flows=sections.get(OperationKind.FLOW_ACTIVATION, ()),
        org_wide_emails=sections.get(OperationKind.ORG_WIDE_EMAIL, ()),
        continue_on_error=continue_on_error,
    )


def _warn_duplicates(sections: Dict[OperationKind, Any]) -> None:
    """Duplicate entries are applied in document order; the later one wins."""
    identities = {
        OperationKind.SHARING_SETTINGS: lambda op: op.object_name,
        OperationKind.FLOW_ACTIVATION: lambda op: op.flow_api_name,
        OperationKind.ORG_WIDE_EMAIL: lambda op: op.email_address,
    }
    for kind, identity in identities.items():
        seen: List[str] = []
        for op in sections.get(kind, ()):
            key = identity(op)
            if key in seen:
                logger.warning(f"{kind.value}: '{key}' appears more than once; the later entry wins")
            seen.append(key)


def load_batch(file_path: Union[str, Path]) -> ConfigurationBatch:
    """
    Load and validate a batch file (JSON or YAML).

    Raises:
        ConfigurationFileInvalidError: Missing/unreadable file, parse error or
            invalid structure
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ConfigurationFileInvalidError(f"Configuration file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationFileInvalidError(f"Invalid configuration file {file_path}: {e}") from e
    except OSError as e:
        raise ConfigurationFileInvalidError(f"Cannot read configuration file {file_path}: {e}") from e

    batch = parse_batch(document)
    logger.info(f"Loaded configuration from: {file_path} ({len(batch)} operations)")
    return batch


__all__ = [
    "load_batch",
    "parse_batch",
    "parse_operation",
]
