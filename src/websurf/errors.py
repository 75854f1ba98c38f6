"""
websurf - Error Taxonomy

Every failure raised by the browser derives from WebSurfError, so callers
can catch the base class to handle any browser error.

Navigation errors (InvalidURL, RequestFailed, RedirectBlocked,
UnsupportedEncoding, DocumentParseError, NoPreviousRequest) abort the
operation and leave the current page untouched. Download errors on the
async path are delivered on the result, never raised.

Usage:
    from websurf.errors import RequestFailed, WebSurfError

    try:
        await bow.open("http://example.com/")
    except RequestFailed as e:
        logger.warning(f"Fetch failed: {e.cause}")
"""

from __future__ import annotations

from typing import Optional


class WebSurfError(Exception):
    """Base exception for all websurf errors."""

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


# ── Navigation Errors ─────────────────────────────────────────────


class InvalidURL(WebSurfError):
    """Raised when a target URL cannot be parsed or is not absolute http(s)."""

    def __init__(self, url: str, reason: str = "", *, details: Optional[dict] = None):
        message = f"Invalid URL '{url}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details=details)
        self.url = url


class RequestFailed(WebSurfError):
    """
    Raised when the transport could not complete a request.

    Wraps connection errors, timeouts, protocol errors and corrupt
    compressed bodies. The original exception is kept on ``cause``.
    """

    def __init__(self, cause: BaseException, *, details: Optional[dict] = None):
        super().__init__(f"Request failed: {cause}", details=details)
        self.cause = cause


class RedirectBlocked(WebSurfError):
    """Raised when a redirect is received while FOLLOW_REDIRECTS is off."""

    def __init__(self, url: str, *, details: Optional[dict] = None):
        super().__init__(
            f"Redirects are disabled. Cannot follow '{url}'.", details=details
        )
        self.url = url


class UnsupportedEncoding(WebSurfError):
    """Raised for a Content-Encoding the decoder does not handle."""

    def __init__(self, encoding: str, *, details: Optional[dict] = None):
        super().__init__(f"Unsupported Content-Encoding '{encoding}'", details=details)
        self.encoding = encoding


class DocumentParseError(WebSurfError):
    """Raised when a response body cannot be parsed into a document."""


class NoPreviousRequest(WebSurfError):
    """Raised by reload() when the current state never issued a request."""

    def __init__(self, message: str = "Cannot reload, no previous request.", **kwargs):
        super().__init__(message, **kwargs)


# ── Page Query Errors ─────────────────────────────────────────────


class ElementNotFound(WebSurfError):
    """Raised when a selector matches no suitable element."""

    def __init__(self, selector: str, reason: str = "", *, details: Optional[dict] = None):
        message = reason or f"Element not found matching expr '{selector}'."
        super().__init__(message, details=details)
        self.selector = selector


class AttributeNotFound(WebSurfError):
    """Raised when an element lacks a required attribute."""

    def __init__(self, name: str, *, details: Optional[dict] = None):
        super().__init__(f"Attribute '{name}' not found.", details=details)
        self.name = name


class BookmarkNotFound(WebSurfError):
    """Raised when reading a bookmark name that was never saved."""

    def __init__(self, name: str, *, details: Optional[dict] = None):
        super().__init__(f"No bookmark exists with name '{name}'.", details=details)
        self.name = name
