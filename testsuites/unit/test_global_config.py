import yaml

from sf_ui_automation.common import get_config, get_section, reload_config, set_config
from sf_ui_automation.framework.browser_manager import BrowserOptions
from sf_ui_automation.framework.element_actions import Timeouts


def _write_config(directory, data, name="config.yaml"):
    path = directory / name
    path.write_text(yaml.dump(data), encoding="utf-8")
    return path


def test_file_values_merge_over_defaults(tmp_path):
    _write_config(tmp_path, {"timeouts": {"toast_ms": 45000}})

    reload_config(tmp_path)
    assert get_config("timeouts.toast_ms") == 45000
    # untouched keys keep their built-in default
    assert get_config("timeouts.network_idle_ms") == 10000
    assert get_config("timeouts.missing", 7) == 7


def test_environment_overlay_file(monkeypatch, tmp_path):
    _write_config(tmp_path, {"browser": {"slow_mo": 10}})
    _write_config(tmp_path, {"browser": {"slow_mo": 0}}, name="ci.yaml")
    monkeypatch.setenv("ENV", "ci")

    reload_config(tmp_path)
    assert get_config("browser.slow_mo") == 0


def test_double_underscore_env_overrides_keep_types(monkeypatch, tmp_path):
    _write_config(tmp_path, {"browser": {"headless": True}})
    monkeypatch.setenv("BROWSER__HEADLESS", "false")
    monkeypatch.setenv("TIMEOUTS__ELEMENT_MS", "5000")
    monkeypatch.setenv("UNRELATED__KEY", "ignored")

    reload_config(tmp_path)
    assert get_config("browser.headless") is False
    assert get_config("timeouts.element_ms") == 5000
    assert get_config("unrelated.key") is None


def test_timeouts_and_browser_options_from_config(monkeypatch, tmp_path):
    monkeypatch.delenv("BROWSER__HEADLESS", raising=False)
    _write_config(tmp_path, {
        "browser": {"headless": False, "viewport": {"width": 1280, "height": 720}},
        "timeouts": {"confirm_probe_ms": 1000},
    })
    reload_config(tmp_path)

    options = BrowserOptions.from_config(slow_mo=0, headless=None)
    assert options.headless is False
    assert options.slow_mo == 0
    assert options.viewport == (1280, 720)

    timeouts = Timeouts.from_config(toast_ms=5)
    assert timeouts.confirm_probe_ms == 1000
    assert timeouts.toast_ms == 5


def test_set_config_and_section_copy(tmp_path):
    reload_config(tmp_path)
    set_config("reporting.screenshot_on_failure", True)
    section = get_section("reporting")
    assert section["screenshot_on_failure"] is True

    section["screenshot_on_failure"] = False
    assert get_config("reporting.screenshot_on_failure") is True
