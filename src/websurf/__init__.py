"""websurf — a programmable, headless web browser session for Python."""

__version__ = "1.0.0"
__description__ = "Stateful scripted browsing: cookies, history, redirects, forms and assets."

# Export key components
from websurf.browser import Attribute, Browser, FormFile, new_browser
from websurf.config import BrowserSettings, Config, load_config, load_settings
from websurf.errors import (
    AttributeNotFound,
    BookmarkNotFound,
    DocumentParseError,
    ElementNotFound,
    InvalidURL,
    NoPreviousRequest,
    RedirectBlocked,
    RequestFailed,
    UnsupportedEncoding,
    WebSurfError,
)
from websurf.jar import FileBookmarks, MemoryBookmarks, MemoryHistory, State

__all__ = [
    "Attribute",
    "Browser",
    "FormFile",
    "new_browser",
    "BrowserSettings",
    "Config",
    "load_config",
    "load_settings",
    "State",
    "MemoryHistory",
    "MemoryBookmarks",
    "FileBookmarks",
    "WebSurfError",
    "InvalidURL",
    "RequestFailed",
    "RedirectBlocked",
    "UnsupportedEncoding",
    "DocumentParseError",
    "NoPreviousRequest",
    "ElementNotFound",
    "AttributeNotFound",
    "BookmarkNotFound",
]
