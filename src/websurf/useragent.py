"""
websurf - User-Agent strings

Builds the User-Agent header value the browser sends. The default
identifies websurf itself; chrome() and firefox() build desktop browser
strings for sites that refuse unknown agents.
"""

from __future__ import annotations

import platform
import sys

CHROME_VERSION = "131.0.0.0"
FIREFOX_VERSION = "134.0"

# platform.system() -> token used inside browser UA strings
_OS_TOKENS = {
    "Linux": "X11; Linux x86_64",
    "Darwin": "Macintosh; Intel Mac OS X 10_15_7",
    "Windows": "Windows NT 10.0; Win64; x64",
}


def _os_token() -> str:
    return _OS_TOKENS.get(platform.system(), _OS_TOKENS["Linux"])


def create(name: str = "websurf", version: str | None = None) -> str:
    """Return "<name>/<version> (<OS>; Python <x.y>)"."""
    if version is None:
        from websurf import __version__
        version = __version__
    os_name = platform.system() or "Unknown"
    py = f"{sys.version_info.major}.{sys.version_info.minor}"
    return f"{name}/{version} ({os_name}; Python {py})"


def chrome(version: str = CHROME_VERSION) -> str:
    return (
        f"Mozilla/5.0 ({_os_token()}) AppleWebKit/537.36 "
        f"(KHTML, like Gecko) Chrome/{version} Safari/537.36"
    )


def firefox(version: str = FIREFOX_VERSION) -> str:
    token = _os_token()
    if platform.system() == "Darwin":
        token = "Macintosh; Intel Mac OS X 10.15"
    return f"Mozilla/5.0 ({token}; rv:{version}) Gecko/20100101 Firefox/{version}"
