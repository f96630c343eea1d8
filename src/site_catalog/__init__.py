"""
Site Catalog - Capture websites as screenshots with extracted metadata.

Usage:
    from site_catalog import capture_website, CaptureResult

    result = await capture_website("https://example.com")
"""

__version__ = "0.1.0"

# Public API exports
from .capture import (
    capture_website,
    extract_metadata,
    extract_palette,
    infer_category,
    sanitize_filename,
    CaptureResult,
    WebsiteMetadata,
    SiteCatalogError,
    CaptureError,
    CaptureTimeoutError,
    InvalidURLError,
    WebsiteNotFoundError,
    DuplicateWebsiteError,
)
from .config import CaptureConfig, SettleConfig

__all__ = [
    # Version
    "__version__",
    # Main functions
    "capture_website",
    "extract_metadata",
    "extract_palette",
    "infer_category",
    "sanitize_filename",
    # Result types
    "CaptureResult",
    "WebsiteMetadata",
    # Configuration
    "CaptureConfig",
    "SettleConfig",
    # Exceptions
    "SiteCatalogError",
    "CaptureError",
    "CaptureTimeoutError",
    "InvalidURLError",
    "WebsiteNotFoundError",
    "DuplicateWebsiteError",
]
