"""
Capture module for Site Catalog.

Provides browser-based website capture using Pyppeteer.
"""

from .errors import (
    SiteCatalogError,
    CaptureError,
    CaptureTimeoutError,
    InvalidURLError,
    WebsiteNotFoundError,
    DuplicateWebsiteError,
)
from .metadata import WebsiteMetadata, extract_metadata, infer_category
from .palette import extract_palette
from .pipeline import CaptureResult, capture_website
from .storage import sanitize_filename

__all__ = [
    'SiteCatalogError',
    'CaptureError',
    'CaptureTimeoutError',
    'InvalidURLError',
    'WebsiteNotFoundError',
    'DuplicateWebsiteError',
    'WebsiteMetadata',
    'extract_metadata',
    'infer_category',
    'extract_palette',
    'CaptureResult',
    'capture_website',
    'sanitize_filename',
]
