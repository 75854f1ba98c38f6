"""
websurf - Test Configuration

Shared fixtures for all tests. Network traffic never leaves the process:
every browser is wired to a FakeSite through httpx.MockTransport.
"""

import gzip
import zlib

import httpx
import pytest

BASE = "http://example.com"


# ═══════════════════════════════════════════════════════════════════════════
# Fake site
# ═══════════════════════════════════════════════════════════════════════════


class FakeSite:
    """Path -> handler table served through httpx.MockTransport.

    Every request is recorded on `requests` before it is handled.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def route(self, path, handler=None, *, html=None, status=200, headers=None):
        if handler is None:
            body = html or ""

            def handler(request):
                return httpx.Response(status, html=body, headers=headers)

        self.routes[path] = handler
        return handler

    def redirect(self, path, location, status=302):
        self.routes[path] = lambda request: httpx.Response(status, headers={"Location": location})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, html="<html><title>Not Found</title></html>")
        return handler(request)

    def hits(self, path) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    def last(self, path=None) -> httpx.Request:
        matching = [r for r in self.requests if path is None or r.url.path == path]
        return matching[-1]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def encoded_response(body: bytes, encoding: str, content_type="text/html") -> httpx.Response:
    """Response whose body is left for the client to decode."""
    return httpx.Response(
        200,
        headers={"Content-Type": content_type, "Content-Encoding": encoding},
        stream=httpx.ByteStream(body),
    )


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


HOME_HTML = """<html>
<head>
  <title>Home</title>
  <link rel="stylesheet" href="/css/site.css">
  <link rel="alternate stylesheet" href="/css/alt.css" media="print" type="text/css">
  <link rel="icon" href="/favicon.ico">
  <script src="/js/app.js"></script>
  <script>var inline = 1;</script>
</head>
<body>
  <h1>Welcome</h1>
  <a id="about" href="/about">About us</a>
  <a href="http://other.example.org/page">Elsewhere</a>
  <a name="anchor-without-href">Nothing</a>
  <img src="/img/logo.png" alt="Logo" title="Our logo">
  <img alt="no source">
  <p class="note">Some text</p>
</body>
</html>"""

ABOUT_HTML = """<html><head><title>About</title></head>
<body><a id="home" href="/">Home</a></body></html>"""

LOGIN_HTML = """<html><head><title>Login</title></head>
<body>
<form id="login" method="post" action="/session">
  <input type="text" name="user" value="">
  <input type="password" name="pass">
  <input type="hidden" name="csrf" value="tok123">
  <input type="checkbox" name="remember" value="yes" checked>
  <input type="checkbox" name="newsletter" value="yes">
  <input type="radio" name="plan" value="free">
  <input type="radio" name="plan" value="pro" checked>
  <select name="lang">
    <option value="en">English</option>
    <option value="it" selected>Italiano</option>
  </select>
  <textarea name="bio">hello</textarea>
  <input type="submit" name="go" value="Sign in">
  <button type="submit" name="alt" value="other">Other</button>
  <input type="text" name="locked" value="x" disabled>
</form>
<form id="search" action="/search">
  <input type="text" name="q" value="default">
</form>
<form id="upload" method="POST" action="/upload" enctype="multipart/form-data">
  <input type="text" name="title" value="doc">
  <input type="file" name="attachment">
</form>
</body></html>"""


# ═══════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def site():
    """FakeSite with the standard pages mounted."""
    s = FakeSite()
    s.route("/", html=HOME_HTML)
    s.route("/about", html=ABOUT_HTML)
    s.route("/login", html=LOGIN_HTML)
    return s


@pytest.fixture
def make_browser(site):
    """Factory: Browser bound to the fake site, settings as keyword overrides."""
    from websurf.browser import Browser
    from websurf.config import BrowserSettings

    def _make(**settings):
        kwargs = {k: settings.pop(k) for k in ("cookie_jar", "history", "bookmarks", "script_host") if k in settings}
        settings.setdefault("user_agent", "websurf-test/1.0")
        return Browser(BrowserSettings(**settings), transport=site.transport, **kwargs)

    return _make


@pytest.fixture
def browser(make_browser):
    """Browser with default settings bound to the fake site."""
    return make_browser()


@pytest.fixture
def gzip_body():
    return gzip.compress(b"<html><head><title>Zipped</title></head><body>gz</body></html>")


@pytest.fixture
def deflate_body():
    return zlib.compress(b"<html><head><title>Deflated</title></head><body>df</body></html>")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove WEBSURF_* variables so config tests see only their own inputs."""
    from websurf.config import ENV_KEYS

    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
