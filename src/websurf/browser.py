"""
websurf — Browser

The stateful browsing session. A Browser issues requests through httpx,
parses each response into a Document, keeps a history of previous
states, and enforces the browser-like policies the transport does not
provide on its own:

- Referer suppression (SEND_REFERER)
- Redirect policy (FOLLOW_REDIRECTS), User-Agent re-applied on every hop
- Content-Encoding policy (identity, gzip, deflate)
- Meta refresh auto-reload (META_REFRESH_HANDLING)

Navigation is all-or-nothing: any failure before the new state is
installed leaves the previous page current.

A Browser is single-owner. Concurrent navigate / reload / back calls on
one instance need external locking. The meta refresh timer is the only
internal background work; every navigation cancels it synchronously
before dispatching, and a generation counter discards a timer-triggered
reload that was already in flight.

Usage:
    async with Browser() as bow:
        await bow.open("http://example.com/")
        print(bow.title, bow.status_code)
        for link in bow.links():
            print(link.url, link.text)
"""

from __future__ import annotations

import asyncio
import enum
import logging
import math
import os
import time
from dataclasses import dataclass
from http.cookiejar import Cookie, CookieJar
from typing import IO, Any, Mapping, Sequence
from urllib.parse import urlencode

import httpx
from rich.console import Console

from websurf import assets
from websurf.assets import Image, Link, Script, Stylesheet
from websurf.config import BrowserSettings, check_proxy_url, env_flag, load_settings
from websurf.document import Document, Element, parse
from websurf.downloads import Downloader, Sink
from websurf.errors import (
    ElementNotFound,
    AttributeNotFound,
    InvalidURL,
    NoPreviousRequest,
    RedirectBlocked,
    RequestFailed,
    UnsupportedEncoding,
    WebSurfError,
)
from websurf.forms import Form
from websurf.jar import (
    BookmarksJar,
    History,
    MemoryBookmarks,
    MemoryHistory,
    State,
    memory_cookies,
    memory_headers,
)
from websurf.scripting import QueryBridge, ScriptHost

logger = logging.getLogger("websurf.browser")

DEBUG_HEADERS_ENV = "WEBSURF_DEBUG_HEADERS"

# Encodings the response decoder accepts; anything else is refused
SUPPORTED_ENCODINGS = frozenset({"identity", "gzip", "deflate"})
ACCEPT_ENCODING = "gzip, deflate"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Attribute(enum.Enum):
    """Browser capability flags."""
    SEND_REFERER = "send_referer"
    META_REFRESH_HANDLING = "meta_refresh"
    FOLLOW_REDIRECTS = "follow_redirects"


@dataclass
class FormFile:
    """A file field for multipart posts."""
    filename: str
    data: bytes | IO[bytes] | None = None


Body = bytes | str | IO[bytes] | IO[str] | None


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════


def is_content_type_html(response: httpx.Response | None) -> bool:
    """True when the response is HTML. A missing Content-Type counts as HTML."""
    if response is None:
        return False
    content_type = response.headers.get("Content-Type", "")
    return content_type == "" or "text/html" in content_type.lower()


def meta_refresh_delay(document: Document | None) -> float | None:
    """Seconds requested by <meta http-equiv="refresh">, or None.

    Only a bare delay ("5", "0.5") is a reload directive. Content that
    also names a target ("5; url=/next") is not.
    """
    if document is None:
        return None
    for meta in document.query("meta[http-equiv]"):
        if (meta.attr("http-equiv") or "").strip().lower() != "refresh":
            continue
        content = meta.attr("content")
        if content is None:
            return None
        try:
            delay = float(content.strip())
        except ValueError:
            return None
        if not math.isfinite(delay) or delay < 0:
            return None
        return delay
    return None


def _content_encodings(response: httpx.Response) -> list[str]:
    raw = response.headers.get("Content-Encoding", "")
    return [token.strip().lower() for token in raw.split(",") if token.strip()]


def _read_body(body: Body) -> bytes | None:
    if body is None:
        return None
    if hasattr(body, "read"):
        body = body.read()
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    raise TypeError(f"Unsupported request body type: {type(body).__name__}")


def _quote_param(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\r", "%0D").replace("\n", "%0A")


def encode_multipart(
    fields: Mapping[str, str | Sequence[str]],
    files: Mapping[str, FormFile],
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """Encode a multipart/form-data body. Returns (body, content type)."""
    boundary = boundary or os.urandom(16).hex()
    delimiter = f"--{boundary}\r\n".encode("ascii")
    parts: list[bytes] = []

    for name, values in fields.items():
        if isinstance(values, str):
            values = [values]
        for value in values:
            parts.append(delimiter)
            parts.append(f'Content-Disposition: form-data; name="{_quote_param(name)}"\r\n\r\n'.encode("utf-8"))
            parts.append(value.encode("utf-8") + b"\r\n")

    for name, upload in files.items():
        data = _read_body(upload.data) or b""
        parts.append(delimiter)
        parts.append(
            f'Content-Disposition: form-data; name="{_quote_param(name)}"; '
            f'filename="{_quote_param(upload.filename)}"\r\n'.encode("utf-8")
        )
        parts.append(b"Content-Type: application/octet-stream\r\n\r\n")
        parts.append(data + b"\r\n")

    parts.append(f"--{boundary}--\r\n".encode("ascii"))
    return b"".join(parts), f"multipart/form-data; boundary={boundary}"


def _cookie_matches(cookie: Cookie, target: httpx.URL) -> bool:
    """Domain, path and secure checks for sending cookie to target."""
    if cookie.secure and target.scheme != "https":
        return False
    host = target.host.lower()
    if "." not in host:
        host += ".local"
    domain = cookie.domain.lower()
    if cookie.domain_specified or domain.startswith("."):
        bare = domain.lstrip(".")
        if host != bare and not host.endswith("." + bare):
            return False
    elif host != domain:
        return False
    path = target.path or "/"
    prefix = cookie.path or "/"
    if path == prefix:
        return True
    return path.startswith(prefix if prefix.endswith("/") else prefix + "/")


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


# ═══════════════════════════════════════════════════════════════════════════
# Browser
# ═══════════════════════════════════════════════════════════════════════════


class Browser:
    """A programmable web browser session."""

    def __init__(
        self,
        settings: BrowserSettings | None = None,
        *,
        cookie_jar: CookieJar | None = None,
        history: History | None = None,
        bookmarks: BookmarksJar | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        script_host: ScriptHost | None = None,
    ):
        self.settings = settings or BrowserSettings()
        self.user_agent = self.settings.user_agent
        self.attributes: dict[Attribute, bool] = {
            Attribute.SEND_REFERER: self.settings.send_referer,
            Attribute.META_REFRESH_HANDLING: self.settings.meta_refresh,
            Attribute.FOLLOW_REDIRECTS: self.settings.follow_redirects,
        }
        self.headers = memory_headers(self.settings.headers)
        self.history: History = history if history is not None else MemoryHistory(self.settings.max_history)
        self.bookmarks: BookmarksJar = bookmarks if bookmarks is not None else MemoryBookmarks()
        self.script_host = script_host
        self.max_redirects = self.settings.max_redirects
        self.debug_headers = self.settings.debug_headers
        self.debug_console: Console | None = None

        self._cookies = cookie_jar if cookie_jar is not None else memory_cookies()
        self._transport = transport
        self._timeout = self.settings.timeout
        self._proxy = self.settings.proxy
        self._client: httpx.AsyncClient | None = None
        self._retired_clients: list[httpx.AsyncClient] = []

        self.downloader = Downloader(
            transport=transport,
            timeout=self._timeout,
            proxy=self._proxy,
            user_agent=self.user_agent,
        )

        # Current page
        self.state = State()
        self.raw_body = b""

        # Meta refresh timer
        self._refresh_handle: asyncio.TimerHandle | None = None
        self._refresh_task: asyncio.Task | None = None
        self._refresh_generation = 0

    async def __aenter__(self) -> Browser:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ──────────────────────────────────────────────────────────
    # Configuration
    # ──────────────────────────────────────────────────────────

    def set_user_agent(self, user_agent: str) -> None:
        self.user_agent = user_agent
        self.downloader.configure(user_agent=user_agent)

    def set_attribute(self, attribute: Attribute, value: bool) -> None:
        self.attributes[attribute] = value

    def set_attributes(self, attributes: Mapping[Attribute, bool]) -> None:
        """Replace every attribute. Missing ones are off."""
        self.attributes = {a: bool(attributes.get(a, False)) for a in Attribute}

    def attribute(self, attribute: Attribute) -> bool:
        return self.attributes.get(attribute, False)

    def set_state(self, state: State) -> None:
        """Install a state directly, without touching history."""
        self._cancel_refresh()
        self.state = state
        self.raw_body = self._body_of(state)

    def set_history_jar(self, history: History) -> None:
        self.history = history

    def set_bookmarks_jar(self, bookmarks: BookmarksJar) -> None:
        self.bookmarks = bookmarks

    @property
    def cookie_jar(self) -> CookieJar:
        return self._cookies

    def set_cookie_jar(self, cookie_jar: CookieJar) -> None:
        self._cookies = cookie_jar
        self._retire_client()

    def set_headers(self, headers: Mapping[str, str] | httpx.Headers) -> None:
        self.headers = httpx.Headers(headers)

    def add_request_header(self, name: str, value: str) -> None:
        """Set a header sent with every request (replaces an existing value)."""
        self.headers[name] = value

    def del_request_header(self, name: str) -> None:
        if name in self.headers:
            del self.headers[name]

    def set_timeout(self, seconds: float | None) -> None:
        self._timeout = seconds
        self.downloader.configure(timeout=seconds)
        self._retire_client()

    def set_transport(self, transport: httpx.AsyncBaseTransport | None) -> None:
        self._transport = transport
        self.downloader.configure(transport=transport)
        self._retire_client()

    def set_proxy(self, url: str) -> None:
        """Route requests through a proxy (http, https, socks5, socks5h)."""
        try:
            check_proxy_url(url)
        except ValueError as e:
            raise InvalidURL(url, str(e)) from e
        self._proxy = url
        self.downloader.configure(proxy=url)
        self._retire_client()

    # ──────────────────────────────────────────────────────────
    # HTTP client
    # ──────────────────────────────────────────────────────────

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "cookies": self._cookies,
                "timeout": httpx.Timeout(self._timeout),
                "follow_redirects": False,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            elif self._proxy:
                kwargs["proxy"] = self._proxy
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    def _retire_client(self) -> None:
        if self._client is not None:
            self._retired_clients.append(self._client)
            self._client = None

    async def _close_retired_clients(self) -> None:
        while self._retired_clients:
            client = self._retired_clients.pop()
            if not client.is_closed:
                await client.aclose()

    # ──────────────────────────────────────────────────────────
    # Request building
    # ──────────────────────────────────────────────────────────

    def _parse_target(self, url: str | httpx.URL) -> httpx.URL:
        try:
            target = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidURL(str(url), str(e)) from e
        if target.scheme not in ("http", "https") or not target.host:
            raise InvalidURL(str(url), "expected an absolute http(s) URL")
        return target

    def build_request(
        self,
        method: str,
        url: str | httpx.URL,
        referer: str | httpx.URL | None = None,
        body: Body = None,
        content_type: str | None = None,
    ) -> httpx.Request:
        """Assemble an outgoing request from the session configuration.

        The default headers are copied, never shared. No network I/O.

        Raises:
            InvalidURL: url is not an absolute http(s) URL.
        """
        target = self._parse_target(url)
        headers = httpx.Headers(self.headers)
        headers["User-Agent"] = self.user_agent
        if "Accept-Encoding" not in headers:
            headers["Accept-Encoding"] = ACCEPT_ENCODING
        if self.attribute(Attribute.SEND_REFERER) and referer is not None:
            headers["Referer"] = str(referer)
        if content_type:
            headers["Content-Type"] = content_type
        return self._ensure_client().build_request(
            method.upper(), target, headers=headers, content=_read_body(body)
        )

    def _rebuild_request(self, previous: httpx.Request) -> httpx.Request:
        """Copy of previous with fresh cookies and the current User-Agent."""
        headers = httpx.Headers(previous.headers)
        if "Cookie" in headers:
            del headers["Cookie"]
        headers["User-Agent"] = self.user_agent
        return self._ensure_client().build_request(
            previous.method, previous.url, headers=headers, content=previous.content or None
        )

    def _debug_enabled(self) -> bool:
        return self.debug_headers or env_flag(DEBUG_HEADERS_ENV)

    def _dump_request(self, request: httpx.Request) -> None:
        console = self.debug_console or Console(stderr=True)
        console.print("===== [DUMP] =====", markup=False, highlight=False)
        console.print(f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1", markup=False, highlight=False)
        console.print(f"Host: {request.url.netloc.decode('ascii')}", markup=False, highlight=False)
        for name, value in request.headers.raw:
            if name.lower() == b"host":
                continue
            console.print(f"{name.decode('latin-1')}: {value.decode('latin-1')}", markup=False, highlight=False)

    # ──────────────────────────────────────────────────────────
    # Dispatch
    # ──────────────────────────────────────────────────────────

    def _check_redirect(self, target: httpx.Request) -> None:
        """Redirect policy, consulted for every hop."""
        if not self.attribute(Attribute.FOLLOW_REDIRECTS):
            raise RedirectBlocked(str(target.url))

    async def _dispatch(self, request: httpx.Request) -> httpx.Response:
        """Send request, following redirects under the redirect policy.

        Returns the final response with its body still unread.
        """
        client = self._ensure_client()
        hops = 0
        while True:
            if self._debug_enabled():
                self._dump_request(request)
            try:
                response = await client.send(request, stream=True)
            except httpx.HTTPError as e:
                raise RequestFailed(e, details={"url": str(request.url)}) from e

            next_request = response.next_request
            if next_request is None:
                return response

            await response.aclose()
            self._check_redirect(next_request)
            hops += 1
            if hops > self.max_redirects:
                error = httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)
                raise RequestFailed(error, details={"url": str(request.url), "hops": hops}) from error
            logger.debug(f"Redirect {response.status_code} {request.url} -> {next_request.url}")
            next_request.headers["User-Agent"] = self.user_agent
            request = next_request

    async def _receive(self, response: httpx.Response) -> bytes:
        """Read and decode the response body."""
        try:
            for encoding in _content_encodings(response):
                if encoding not in SUPPORTED_ENCODINGS:
                    raise UnsupportedEncoding(encoding, details={"url": str(response.url)})
            return await response.aread()
        except httpx.HTTPError as e:
            raise RequestFailed(e, details={"url": str(response.url)}) from e
        finally:
            await response.aclose()

    async def _request(self, request: httpx.Request, *, generation: int | None = None) -> None:
        """Run one navigation cycle for request.

        generation is set for reloads triggered by the meta refresh timer;
        their result is dropped when a newer navigation superseded them.
        """
        await self._close_retired_clients()
        response = await self._dispatch(request)
        body = await self._receive(response)
        document = parse(body, url=str(response.url))

        if generation is not None and generation != self._refresh_generation:
            logger.debug(f"Discarding superseded meta refresh reload of {response.url}")
            return

        self.history.push(self.state)
        self.state = State(request=request, response=response, document=document)
        self.raw_body = body
        logger.info(f"{request.method} {response.url} -> {response.status_code} ({len(body)} bytes)")
        self._post_load()

    # ──────────────────────────────────────────────────────────
    # Post-load hooks
    # ──────────────────────────────────────────────────────────

    def _post_load(self) -> None:
        if self.script_host is not None:
            QueryBridge(self.state.document).install(self.script_host)

        if not self.attribute(Attribute.META_REFRESH_HANDLING):
            return
        if not is_content_type_html(self.state.response):
            return
        delay = meta_refresh_delay(self.state.document)
        if delay is not None:
            self._arm_refresh(delay)

    def _arm_refresh(self, delay: float) -> None:
        self._cancel_refresh()
        generation = self._refresh_generation
        loop = asyncio.get_running_loop()
        self._refresh_handle = loop.call_later(delay, self._fire_refresh, generation)
        logger.debug(f"Meta refresh armed: reload {self.url} in {delay}s")

    def _fire_refresh(self, generation: int) -> None:
        self._refresh_handle = None
        if generation != self._refresh_generation:
            return
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_reload(generation))

    async def _refresh_reload(self, generation: int) -> None:
        try:
            await self._reload(generation=generation)
        except WebSurfError as e:
            logger.warning(f"Meta refresh reload of {self.url} failed: {e}")

    def _cancel_refresh(self) -> None:
        """Invalidate any pending or in-flight meta refresh."""
        self._refresh_generation += 1
        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None
        task = self._refresh_task
        if task is not None and task is not _current_task():
            if not task.done():
                task.cancel()
            self._refresh_task = None

    @property
    def refresh_pending(self) -> bool:
        """True while a meta refresh timer is armed."""
        return self._refresh_handle is not None

    # ──────────────────────────────────────────────────────────
    # Navigation
    # ──────────────────────────────────────────────────────────

    async def navigate(
        self,
        method: str,
        url: str | httpx.URL,
        referer: str | httpx.URL | None = None,
        body: Body = None,
        content_type: str | None = None,
    ) -> None:
        """Request url and make the response the current page.

        Raises:
            InvalidURL, RequestFailed, RedirectBlocked, UnsupportedEncoding,
            DocumentParseError. The current page is unchanged on error.
        """
        self._cancel_refresh()
        request = self.build_request(method, url, referer=referer, body=body, content_type=content_type)
        await self._request(request)

    async def open(self, url: str | httpx.URL) -> None:
        """GET url."""
        await self.navigate("GET", url)

    async def head(self, url: str | httpx.URL) -> None:
        await self.navigate("HEAD", url)

    async def open_form(self, url: str | httpx.URL, data: Mapping[str, str | Sequence[str]]) -> None:
        """GET url with its query string replaced by data."""
        target = self._parse_target(url).copy_with(params=data)
        await self.navigate("GET", target)

    async def open_bookmark(self, name: str) -> None:
        await self.open(self.bookmarks.read(name))

    async def post(self, url: str | httpx.URL, content_type: str, body: Body) -> None:
        await self.navigate("POST", url, referer=self.url, body=body, content_type=content_type)

    async def post_form(self, url: str | httpx.URL, data: Mapping[str, str | Sequence[str]]) -> None:
        await self.post(url, FORM_CONTENT_TYPE, urlencode(data, doseq=True))

    async def post_multipart(
        self,
        url: str | httpx.URL,
        fields: Mapping[str, str | Sequence[str]],
        files: Mapping[str, FormFile] | None = None,
    ) -> None:
        """POST fields and files as multipart/form-data."""
        body, content_type = encode_multipart(fields, files or {})
        await self.post(url, content_type, body)

    async def put(self, url: str | httpx.URL, content_type: str, body: Body) -> None:
        await self.navigate("PUT", url, referer=self.url, body=body, content_type=content_type)

    async def delete(self, url: str | httpx.URL) -> None:
        await self.navigate("DELETE", url)

    async def click(self, selector: str) -> None:
        """Follow the anchor matched by selector.

        Raises:
            ElementNotFound: nothing matches, or the match is not an <a>.
            AttributeNotFound: the anchor has no href.
        """
        matches = self.find(selector)
        if not matches:
            raise ElementNotFound(selector)
        anchor = matches[0]
        if not anchor.is_("a"):
            raise ElementNotFound(selector, f"Expr '{selector}' must match an anchor tag.")
        href = anchor.attr("href")
        if href is None:
            raise AttributeNotFound("href")
        await self.navigate("GET", self.resolve_url(href), referer=self.url)

    async def reload(self) -> None:
        """Re-issue the current page's request.

        Raises:
            NoPreviousRequest: the current state never issued a request.
        """
        self._cancel_refresh()
        await self._reload()

    async def _reload(self, generation: int | None = None) -> None:
        previous = self.state.request
        if previous is None:
            raise NoPreviousRequest()
        await self._request(self._rebuild_request(previous), generation=generation)

    def back(self) -> bool:
        """Return to the previous page without any network request.

        Returns False when there is no previous page.
        """
        if len(self.history) <= 1:
            return False
        self._cancel_refresh()
        self.state = self.history.pop()
        self.raw_body = self._body_of(self.state)
        if self.script_host is not None:
            QueryBridge(self.state.document).install(self.script_host)
        logger.debug(f"Back to {self.url}")
        return True

    def bookmark(self, name: str) -> None:
        """Save the current URL under name."""
        url = self.url
        if url is None:
            raise NoPreviousRequest("Cannot bookmark, no page loaded.")
        self.bookmarks.save(name, url)

    # ──────────────────────────────────────────────────────────
    # Current page
    # ──────────────────────────────────────────────────────────

    @staticmethod
    def _body_of(state: State) -> bytes:
        if state.response is None:
            return b""
        try:
            return state.response.content
        except httpx.ResponseNotRead:
            return b""

    @property
    def url(self) -> str | None:
        """Final URL of the current page (after redirects), None when idle."""
        if self.state.response is not None:
            return str(self.state.response.url)
        if self.state.request is not None:
            return str(self.state.request.url)
        return None

    @property
    def status_code(self) -> int:
        return self.state.response.status_code if self.state.response is not None else 0

    @property
    def response_headers(self) -> httpx.Headers:
        return self.state.response.headers if self.state.response is not None else httpx.Headers()

    @property
    def document(self) -> Document | None:
        return self.state.document

    @property
    def title(self) -> str:
        return self.document.title if self.document is not None else ""

    @property
    def body(self) -> str:
        """Inner HTML of <body>."""
        return self.document.body_html() if self.document is not None else ""

    def find(self, selector: str) -> list[Element]:
        if self.document is None:
            return []
        return self.document.query(selector)

    def resolve_url(self, url: str) -> str:
        """Absolute form of a possibly relative URL against the current page."""
        resolved = assets.resolve_url(self.url, url)
        if resolved is None:
            raise InvalidURL(url, "cannot be resolved against the current page")
        return resolved

    def site_cookies(self) -> list[Cookie]:
        """Cookies the jar would send to the current page."""
        if self.url is None:
            return []
        target = httpx.URL(self.url)
        now = int(time.time())
        return [c for c in self._cookies if not c.is_expired(now) and _cookie_matches(c, target)]

    def write_to(self, sink: Sink) -> int:
        """Write the current raw body to sink, return bytes written."""
        sink.write(self.raw_body)
        return len(self.raw_body)

    # ──────────────────────────────────────────────────────────
    # Forms & assets
    # ──────────────────────────────────────────────────────────

    def form(self, selector: str) -> Form:
        matches = self.find(selector)
        if not matches:
            raise ElementNotFound(selector, f"Form not found matching expr '{selector}'.")
        if not matches[0].is_("form"):
            raise ElementNotFound(selector, f"Expr '{selector}' does not match a form tag.")
        return Form(self, matches[0])

    def forms(self) -> list[Form]:
        return [Form(self, el) for el in self.find("form")]

    def links(self) -> list[Link]:
        return assets.links(self.document, self.url)

    def images(self) -> list[Image]:
        return assets.images(self.document, self.url, self.downloader)

    def stylesheets(self) -> list[Stylesheet]:
        return assets.stylesheets(self.document, self.url, self.downloader)

    def scripts(self) -> list[Script]:
        return assets.scripts(self.document, self.url, self.downloader)

    # ──────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Cancel the refresh timer, finish downloads, close HTTP clients."""
        self._cancel_refresh()
        await self.downloader.aclose()
        self._retire_client()
        await self._close_retired_clients()


def new_browser(settings: BrowserSettings | None = None, **kwargs: Any) -> Browser:
    """Browser configured from ~/.websurf/config.yaml, .env and WEBSURF_* env vars.

    Keyword arguments are passed to the Browser constructor.
    """
    return Browser(settings or load_settings(), **kwargs)
