"""
Screenshot file naming and persistence.

Screenshots are plain JPEG files named ``{millis}-{hostname}.jpg`` inside the
configured screenshot directory. The public path under which the HTTP layer
serves them is ``/screenshots/{filename}``.
"""

import re
import time
from pathlib import Path
from urllib.parse import urlparse

FALLBACK_NAME = "website"
MAX_NAME_LENGTH = 50
PUBLIC_PREFIX = "/screenshots/"

_NON_ALNUM = re.compile(r'[^a-z0-9]', re.IGNORECASE)


def _now_ms() -> int:
    return int(time.time() * 1000)


def sanitize_filename(url: str) -> str:
    """Turn the URL's hostname into a filesystem-safe token."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return FALLBACK_NAME

    if not hostname:
        return FALLBACK_NAME

    return _NON_ALNUM.sub('-', hostname.lower())[:MAX_NAME_LENGTH]


def screenshot_filename(url: str, timestamp_ms: int | None = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = _now_ms()
    return f"{timestamp_ms}-{sanitize_filename(url)}.jpg"


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_screenshot(directory: Path, url: str, data: bytes) -> Path:
    """
    Write screenshot bytes to a new file and return its path.

    Never overwrites: if a file for the same millisecond already exists the
    timestamp is bumped until the name is free.
    """
    ensure_directory(directory)

    timestamp_ms = _now_ms()
    path = directory / screenshot_filename(url, timestamp_ms)
    while path.exists():
        timestamp_ms += 1
        path = directory / screenshot_filename(url, timestamp_ms)

    path.write_bytes(data)
    return path


def read_screenshot(path: Path) -> bytes:
    return Path(path).read_bytes()


def public_path(path: Path) -> str:
    return f"{PUBLIC_PREFIX}{Path(path).name}"


def resolve_public_path(directory: Path, public: str) -> Path | None:
    """Map ``/screenshots/<name>`` back to a file inside ``directory``."""
    if not public or not public.startswith(PUBLIC_PREFIX):
        return None

    name = public[len(PUBLIC_PREFIX):]
    # Reject anything that is not a bare filename
    if not name or name != Path(name).name or name in ('.', '..'):
        return None

    return Path(directory) / name
