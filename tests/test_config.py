"""
Tests for configuration defaults and environment overrides.
"""

from pathlib import Path

from site_catalog.config import CaptureConfig, SettleConfig


def test_defaults_match_capture_protocol():
    config = CaptureConfig()

    assert (config.viewport_width, config.viewport_height) == (1920, 1080)
    assert config.navigation_timeout == 30.0
    assert config.jpeg_quality == 80
    assert config.settle == SettleConfig(
        post_navigation_delay=0.5,
        scroll_step=100,
        scroll_interval=0.05,
        post_scroll_delay=1.0,
    )


def test_from_env_overrides():
    config = CaptureConfig.from_env({
        "SITE_CATALOG_SCREENSHOT_DIR": "/tmp/shots",
        "SITE_CATALOG_DATABASE": "/tmp/catalog.db",
        "SITE_CATALOG_NAV_TIMEOUT": "12.5",
        "SITE_CATALOG_JPEG_QUALITY": "70",
        "SITE_CATALOG_HEADLESS": "false",
        "PYPPETEER_CHROMIUM_EXECUTABLE": "/usr/bin/chromium",
    })

    assert config.screenshot_dir == Path("/tmp/shots")
    assert config.database_path == Path("/tmp/catalog.db")
    assert config.navigation_timeout == 12.5
    assert config.jpeg_quality == 70
    assert config.headless is False
    assert config.executable_path == "/usr/bin/chromium"


def test_from_env_empty_keeps_defaults():
    assert CaptureConfig.from_env({}) == CaptureConfig()
