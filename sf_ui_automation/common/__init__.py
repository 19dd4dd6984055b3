"""
================================================================================
Setup Automation Common Utilities
================================================================================

Shared configuration management and logging setup.

Usage:
    from sf_ui_automation.common import get_config, init_logger

    init_logger()
    toast_timeout = get_config("timeouts.toast_ms", 30000)

================================================================================
"""

from .global_config import (
    get_config,
    get_logger,
    get_section,
    init_logger,
    reload_config,
    reset_config,
    set_config,
)

__all__ = [
    "get_config",
    "get_logger",
    "get_section",
    "init_logger",
    "reload_config",
    "reset_config",
    "set_config",
]
