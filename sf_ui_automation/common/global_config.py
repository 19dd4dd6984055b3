"""
================================================================================
Global Configuration for Setup Automation
================================================================================

Settings and logging bootstrap shared by every layer of the engine.

Settings are built from layers, later layers winning key by key:

    1. built-in defaults (DEFAULTS)
    2. <config dir>/config.yaml
    3. <config dir>/<ENV>.yaml           (ENV / ENVIRONMENT, default "dev")
    4. SECTION__KEY environment variables, e.g. TIMEOUTS__TOAST_MS=45000

The config dir is $SF_UI_CONFIG_DIR, else ./config, else the config/ folder
next to the package.

Author: Automation Team
License: MIT
================================================================================
"""

import copy
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml
from loguru import logger

CONFIG_FILE = "config.yaml"
CONFIG_DIR_ENV = "SF_UI_CONFIG_DIR"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Sections that SECTION__KEY environment variables may touch
OVERRIDABLE_SECTIONS = ("logging", "browser", "timeouts", "reporting")

DEFAULTS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": LOG_FORMAT,
        "file": None,
        "rotation": "10 MB",
        "retention": "7 days",
    },
    "browser": {
        "type": "chromium",
        "headless": True,
        "slow_mo": 50,
        "timeout_ms": 60000,
        "viewport": {"width": 1920, "height": 1080},
    },
    "timeouts": {
        "element_ms": 30000,
        "toast_ms": 30000,
        "login_marker_ms": 15000,
        "spinner_ms": 30000,
        "content_ms": 30000,
        "network_idle_ms": 10000,
        "network_quiet_ms": 500,
        "confirm_probe_ms": 3000,
    },
    "reporting": {
        "screenshot_on_failure": False,
        "screenshot_dir": "screenshots",
    },
}

_settings: Dict[str, Any] = {}
_explicit_dir: Optional[Path] = None
_sinks_ready = False


# ================================================================================
# Logging
# ================================================================================

def init_logger(level: str = None, format_str: str = None, log_file: str = None) -> None:
    """
    Route loguru output to stderr (and optionally a rotating file).

    Only the first call configures sinks; ``reload_config()`` and
    ``reset_config()`` allow it to run again.

    Args:
        level: Minimum level; ``logging.level`` when omitted
        format_str: loguru format; ``logging.format`` when omitted
        log_file: Extra file sink; ``logging.file`` when omitted
    """
    global _sinks_ready
    if _sinks_ready:
        return

    level = str(level or get_config("logging.level")).upper()
    fmt = format_str or get_config("logging.format")
    log_file = log_file or get_config("logging.file")

    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt, colorize=True, backtrace=True, diagnose=False)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=fmt,
            colorize=False,
            rotation=get_config("logging.rotation"),
            retention=get_config("logging.retention"),
            compression="zip",
        )

    _sinks_ready = True
    logger.debug(f"Logging at {level}" + (f", file sink {log_file}" if log_file else ""))


def get_logger():
    """The shared loguru logger, with sinks configured on first use."""
    init_logger()
    return logger


# ================================================================================
# Settings Layers
# ================================================================================

def _config_dir() -> Optional[Path]:
    if _explicit_dir is not None:
        return _explicit_dir
    candidates = [Path("config"), Path(__file__).resolve().parents[2] / "config"]
    if os.getenv(CONFIG_DIR_ENV):
        candidates.insert(0, Path(os.environ[CONFIG_DIR_ENV]))
    return next((c for c in candidates if c.is_dir()), None)


def _yaml_layer(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    logger.debug(f"Config layer: {path}")
    return data


def _env_layer() -> Dict[str, Any]:
    """SECTION__KEY[__SUBKEY] variables, values parsed as YAML scalars."""
    layer: Dict[str, Any] = {}
    for name, raw in os.environ.items():
        path = name.lower().split("__")
        if len(path) < 2 or path[0] not in OVERRIDABLE_SECTIONS or "" in path:
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        _assign(layer, path, value)
    return layer


def _layers() -> Iterator[Tuple[str, Dict[str, Any]]]:
    yield "defaults", copy.deepcopy(DEFAULTS)
    directory = _config_dir()
    if directory is None:
        logger.debug("No config directory; using built-in defaults")
    else:
        env_name = os.getenv("ENVIRONMENT") or os.getenv("ENV") or "dev"
        yield CONFIG_FILE, _yaml_layer(directory / CONFIG_FILE)
        yield f"{env_name}.yaml", _yaml_layer(directory / f"{env_name}.yaml")
    yield "environment", _env_layer()


def _overlay(target: Dict[str, Any], layer: Dict[str, Any]) -> None:
    """Merge layer into target in place; nested mappings merge, the rest replaces."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            target[key] = copy.deepcopy(value)


def _assign(tree: Dict[str, Any], path: List[str], value: Any) -> None:
    *parents, leaf = path
    for key in parents:
        tree = tree.setdefault(key, {})
    tree[leaf] = value


def _settings_tree() -> Dict[str, Any]:
    global _settings
    if not _settings:
        merged: Dict[str, Any] = {}
        for _, layer in _layers():
            _overlay(merged, layer)
        _settings = merged
    return _settings


# ================================================================================
# Public Accessors
# ================================================================================

def get_config(key: str, default: Any = None) -> Any:
    """
    Look up a setting by dotted path.

    >>> get_config("timeouts.toast_ms")
    30000
    >>> get_config("timeouts.nope", 5)
    5
    """
    node: Any = _settings_tree()
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def get_section(section: str) -> Dict[str, Any]:
    """Shallow copy of one top-level section (empty when absent)."""
    return dict(_settings_tree().get(section) or {})


def set_config(key: str, value: Any) -> None:
    """Override one setting for the rest of the process (tests, CLI flags)."""
    _assign(_settings_tree(), key.split("."), value)


def reload_config(config_dir: Optional[Union[str, Path]] = None) -> None:
    """
    Rebuild settings from their layers.

    Args:
        config_dir: Use this directory from now on instead of discovery
    """
    global _settings, _explicit_dir, _sinks_ready
    if config_dir is not None:
        _explicit_dir = Path(config_dir)
    _settings = {}
    _sinks_ready = False
    _settings_tree()


def reset_config() -> None:
    """Drop loaded settings and any explicit config directory."""
    global _settings, _explicit_dir, _sinks_ready
    _settings = {}
    _explicit_dir = None
    _sinks_ready = False
