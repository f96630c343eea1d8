"""
Runtime configuration for Site Catalog.

Defaults reproduce the capture protocol exactly; every value can be
overridden with a ``SITE_CATALOG_*`` environment variable.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass(frozen=True)
class SettleConfig:
    """Stage durations for the settle protocol (seconds / pixels)."""

    post_navigation_delay: float = 0.5
    scroll_step: int = 100
    scroll_interval: float = 0.05
    post_scroll_delay: float = 1.0
    max_scroll_steps: int = 2000


@dataclass(frozen=True)
class CaptureConfig:
    """Settings for the capture pipeline and the surrounding catalog."""

    screenshot_dir: Path = Path("public") / "screenshots"
    database_path: Path = Path("data") / "websites.db"
    viewport_width: int = 1920
    viewport_height: int = 1080
    navigation_timeout: float = 30.0
    jpeg_quality: int = 80
    headless: bool = True
    executable_path: str | None = None
    settle: SettleConfig = field(default_factory=SettleConfig)

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "CaptureConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("SITE_CATALOG_SCREENSHOT_DIR"):
            config = replace(config, screenshot_dir=Path(env["SITE_CATALOG_SCREENSHOT_DIR"]))
        if env.get("SITE_CATALOG_DATABASE"):
            config = replace(config, database_path=Path(env["SITE_CATALOG_DATABASE"]))
        if env.get("SITE_CATALOG_NAV_TIMEOUT"):
            config = replace(config, navigation_timeout=float(env["SITE_CATALOG_NAV_TIMEOUT"]))
        if env.get("SITE_CATALOG_JPEG_QUALITY"):
            config = replace(config, jpeg_quality=int(env["SITE_CATALOG_JPEG_QUALITY"]))
        if env.get("SITE_CATALOG_HEADLESS"):
            config = replace(config, headless=env["SITE_CATALOG_HEADLESS"].lower() not in ("0", "false", "no"))
        if env.get("PYPPETEER_CHROMIUM_EXECUTABLE"):
            config = replace(config, executable_path=env["PYPPETEER_CHROMIUM_EXECUTABLE"])

        return config
