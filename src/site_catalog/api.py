"""
Public API for Site Catalog.

This is the primary interface for programmatic use. The HTTP server, the CLI
and other tools should use these functions rather than combining the capture
pipeline and the store themselves.

Example usage:
    from site_catalog.api import add_website
    from site_catalog.store import WebsiteStore

    store = WebsiteStore("data/websites.db")
    website = await add_website(store, "https://example.com")
    print(f"Added {website.title} ({website.category})")
"""

from pathlib import Path
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

from .capture.errors import (
    DuplicateWebsiteError,
    InvalidURLError,
    WebsiteNotFoundError,
)
from .capture.pipeline import capture_website
from .capture.storage import resolve_public_path
from .config import CaptureConfig
from .store import Website, WebsiteStore


def validate_url(url: Optional[str]) -> str:
    """
    Check that ``url`` is an absolute URL.

    Raises:
        InvalidURLError: If the URL is missing or not absolute
    """
    if not url or not url.strip():
        raise InvalidURLError("URL is required")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL: {url}") from e

    if not parsed.scheme or not parsed.netloc:
        raise InvalidURLError(f"Invalid URL: {url}")

    return url


def normalize_tags(tags: Optional[str]) -> Optional[str]:
    """Trim each comma-separated tag and drop empties; ``None`` if nothing is left."""
    if not tags:
        return None
    cleaned = [t.strip() for t in tags.split(',') if t.strip()]
    return ', '.join(cleaned) if cleaned else None


def resolve_screenshot_file(config: CaptureConfig, screenshot_path: str) -> Optional[Path]:
    return resolve_public_path(config.screenshot_dir, screenshot_path)


def remove_screenshot(config: CaptureConfig, screenshot_path: str) -> bool:
    """Best-effort removal of a stored screenshot. Never raises."""
    path = resolve_screenshot_file(config, screenshot_path)
    if path is None:
        return False

    try:
        path.unlink()
        return True
    except OSError as e:
        print(f"[API] Could not delete old screenshot {path}: {e}", flush=True)
        return False


def _require(store: WebsiteStore, website_id: int) -> Website:
    website = store.get(website_id)
    if website is None:
        raise WebsiteNotFoundError(f"Website not found: {website_id}")
    return website


async def add_website(
    store: WebsiteStore,
    url: str,
    config: Optional[CaptureConfig] = None,
    *,
    launcher: Optional[Callable[..., Awaitable]] = None,
) -> Website:
    """
    Capture a new website and add it to the catalog.

    Raises:
        InvalidURLError: If the URL is not absolute
        DuplicateWebsiteError: If the URL is already catalogued
        CaptureTimeoutError: If the page could not be loaded in time
        CaptureError: For any other capture failure
    """
    config = config or CaptureConfig()
    url = validate_url(url)

    if store.get_by_url(url) is not None:
        raise DuplicateWebsiteError(f"This website is already in your collection: {url}")

    result = await capture_website(url, config, launcher=launcher)
    metadata = result.metadata

    try:
        return store.add(
            url=url,
            title=metadata.title,
            description=metadata.description,
            category=metadata.category,
            screenshot_path=result.screenshot_url,
            color_palette=metadata.color_palette,
        )
    except DuplicateWebsiteError:
        # Another add for the same URL won the race while we were capturing
        remove_screenshot(config, result.screenshot_url)
        raise


async def rescan_website(
    store: WebsiteStore,
    website_id: int,
    config: Optional[CaptureConfig] = None,
    *,
    launcher: Optional[Callable[..., Awaitable]] = None,
) -> Website:
    """
    Capture an existing entry again and replace its screenshot and metadata.

    The previous screenshot file is removed first; failing to remove it does
    not stop the rescan.
    """
    config = config or CaptureConfig()
    website = _require(store, website_id)

    remove_screenshot(config, website.screenshot_path)

    result = await capture_website(website.url, config, launcher=launcher)
    metadata = result.metadata

    return store.update_capture(
        website_id,
        title=metadata.title,
        description=metadata.description,
        category=metadata.category,
        screenshot_path=result.screenshot_url,
        color_palette=metadata.color_palette,
    )


def update_tags(store: WebsiteStore, website_id: int, tags: Optional[str]) -> Website:
    _require(store, website_id)
    return store.update_tags(website_id, normalize_tags(tags))


def delete_website(
    store: WebsiteStore,
    website_id: int,
    config: Optional[CaptureConfig] = None,
) -> None:
    """Remove an entry and, best-effort, its screenshot file."""
    config = config or CaptureConfig()
    website = _require(store, website_id)

    store.delete(website_id)
    remove_screenshot(config, website.screenshot_path)
