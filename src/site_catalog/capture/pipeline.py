"""
The capture pipeline: URL in, stored screenshot plus metadata out.

Example usage:
    from site_catalog.capture import capture_website

    result = await capture_website("https://example.com")
    print(result.screenshot_url, result.metadata.title)
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

from pyppeteer.errors import TimeoutError as BrowserTimeoutError

from ..config import CaptureConfig
from .browser_capture import (
    SettleProtocol,
    browser_session,
    install_animation_override,
    navigate,
    take_screenshot,
)
from .errors import CaptureError, CaptureTimeoutError
from .metadata import WebsiteMetadata, extract_metadata
from .palette import extract_palette_safe
from .storage import public_path, write_screenshot


@dataclass(frozen=True)
class CaptureResult:
    """Complete capture result."""
    screenshot_path: Path
    metadata: WebsiteMetadata

    @property
    def screenshot_url(self) -> str:
        """Public path the screenshot is served under."""
        return public_path(self.screenshot_path)


async def _render(url: str, config: CaptureConfig, launcher) -> tuple[str, bytes]:
    """Run the browser part of the pipeline; returns (markup, jpeg bytes)."""
    async with browser_session(config, launcher) as page:
        await install_animation_override(page)

        print(f"[Capture] Navigating to {url}...", flush=True)
        strategy = await navigate(page, url, config.navigation_timeout)
        print(f"[Capture] Page loaded ({strategy})", flush=True)

        await SettleProtocol(config.settle).run(page)

        html = await page.content()
        screenshot = await take_screenshot(page, config.jpeg_quality)

    return html, screenshot


async def capture_website(
    url: str,
    config: Optional[CaptureConfig] = None,
    *,
    launcher: Optional[Callable[..., Awaitable]] = None,
) -> CaptureResult:
    """
    Capture a website screenshot and extract its metadata.

    Args:
        url: Absolute URL to capture (validated by the caller)
        config: Capture settings (defaults to CaptureConfig())
        launcher: Browser launcher, defaults to pyppeteer.launch

    Returns:
        CaptureResult with the stored screenshot path and metadata

    Raises:
        CaptureTimeoutError: If navigation failed with every wait strategy
            or the browser timed out
        CaptureError: For any other failure
    """
    config = config or CaptureConfig()

    try:
        html, screenshot = await _render(url, config, launcher)

        screenshot_path = await asyncio.to_thread(
            write_screenshot, config.screenshot_dir, url, screenshot
        )
        print(f"[Capture] Screenshot saved: {screenshot_path}", flush=True)

        metadata = await asyncio.to_thread(extract_metadata, html, url)

    except CaptureError:
        raise
    except (BrowserTimeoutError, asyncio.TimeoutError) as e:
        print(f"[Capture] Timed out capturing {url}: {e}", flush=True)
        raise CaptureTimeoutError(
            f"The website took too long to load. Please try again. ({e})"
        ) from e
    except Exception as e:
        print(f"[Capture] Error capturing {url}: {e}", flush=True)
        raise CaptureError(f"Error during capture: {e}") from e

    palette = await asyncio.to_thread(extract_palette_safe, screenshot_path)
    print(f"[Capture] Title: {metadata.title!r}, category: {metadata.category}, "
          f"colors: {len(palette)}", flush=True)

    return CaptureResult(
        screenshot_path=screenshot_path,
        metadata=metadata.with_palette(palette),
    )
