"""Exceptions raised by the capture pipeline and the catalog around it."""


class SiteCatalogError(Exception):
    """Base class for all Site Catalog errors."""
    pass


class CaptureError(SiteCatalogError):
    """Raised when a capture fails for a non-retryable reason."""

    retryable = False


class CaptureTimeoutError(CaptureError):
    """Raised when the page could not be loaded in time with any wait strategy."""

    retryable = True


class InvalidURLError(SiteCatalogError, ValueError):
    """Raised when a submitted URL is not an absolute URL."""
    pass


class WebsiteNotFoundError(SiteCatalogError, LookupError):
    """Raised when a catalog entry does not exist."""
    pass


class DuplicateWebsiteError(SiteCatalogError):
    """Raised when a URL is already in the catalog."""
    pass
