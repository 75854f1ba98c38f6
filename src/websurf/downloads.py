"""
websurf - Async Download Engine

Fetch-and-copy of asset payloads. A Downloader owns its own HTTP client
(connection pooling + keepalive, its own cookie store) and never touches
browser state: every download is keyed only by the asset URL.

    n = await downloader.download(image, open("logo.png", "wb"))

    results: asyncio.Queue[AsyncDownloadResult] = asyncio.Queue()
    downloader.download_async(image, buf, results)
    result = await results.get()

download_async delivers exactly one AsyncDownloadResult per call. Errors
are delivered on the result, never raised. Concurrent downloads sharing
one sink must be serialized by the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from websurf.errors import RequestFailed

if TYPE_CHECKING:
    from websurf.assets import Asset

logger = logging.getLogger("websurf.downloads")


class Sink(Protocol):
    """Destination of downloaded bytes (file, BytesIO, socket wrapper...)."""

    def write(self, data: bytes) -> Any: ...


@dataclass
class AsyncDownloadResult:
    """Outcome of one background download."""
    asset: Asset
    sink: Sink
    size: int = 0  # bytes written, partial when error is set
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Downloader:
    """Downloads asset payloads with a persistent HTTP client."""

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        proxy: str | None = None,
        user_agent: str | None = None,
        chunk_size: int = 64 * 1024,
    ):
        self.transport = transport
        self.timeout = timeout
        self.proxy = proxy
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self._client: httpx.AsyncClient | None = None
        self._client_loop: asyncio.AbstractEventLoop | None = None
        self._retired: list[httpx.AsyncClient] = []
        self._tasks: set[asyncio.Task] = set()

    def configure(self, **options: Any) -> None:
        """Change transport options. In-flight downloads keep the old client."""
        for name, value in options.items():
            if name.startswith("_") or not hasattr(self, name):
                raise AttributeError(f"Unknown downloader option '{name}'")
            setattr(self, name, value)
        if self._client is not None:
            self._retired.append(self._client)
            self._client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the persistent HTTP client."""
        loop = asyncio.get_running_loop()
        if self._client is not None and not self._client.is_closed and self._client_loop is not loop:
            # Pooled connections are bound to the loop that opened them
            self._retired.append(self._client)
            self._client = None
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "timeout": httpx.Timeout(self.timeout),
                "follow_redirects": True,
                "limits": httpx.Limits(
                    max_connections=20,
                    max_keepalive_connections=10,
                    keepalive_expiry=30,
                ),
            }
            if self.transport is not None:
                kwargs["transport"] = self.transport
            elif self.proxy:
                kwargs["proxy"] = self.proxy
            if self.user_agent:
                kwargs["headers"] = {"User-Agent": self.user_agent}
            self._client = httpx.AsyncClient(**kwargs)
            self._client_loop = loop
        return self._client

    async def _copy(self, url: str, sink: Sink) -> tuple[int, Exception | None]:
        """Stream url into sink. Returns (bytes written, error or None)."""
        written = 0
        try:
            client = await self._get_client()
            async with client.stream("GET", url) as response:
                logger.debug(f"Download {url} -> HTTP {response.status_code}")
                async for chunk in response.aiter_bytes(self.chunk_size):
                    sink.write(chunk)
                    written += len(chunk)
        except httpx.HTTPError as e:
            failure = RequestFailed(e, details={"url": url, "bytes_written": written})
            failure.__cause__ = e
            return written, failure
        except Exception as e:
            return written, e
        return written, None

    async def download(self, asset: Asset, sink: Sink) -> int:
        """Copy the asset body into sink and return the number of bytes written.

        A non-2xx status is not an error here: the body is copied anyway.

        Raises:
            RequestFailed: transport failure; details["bytes_written"] holds
                the partial count.
        """
        size, error = await self._copy(asset.url, sink)
        if error is not None:
            raise error
        return size

    def download_async(self, asset: Asset, sink: Sink, results: asyncio.Queue) -> asyncio.Task:
        """Download in the background and put one AsyncDownloadResult on results.

        Must be called from a running event loop. The returned task cannot
        be used to cancel the copy meaningfully; callers that lose interest
        simply stop reading results.
        """
        task = asyncio.get_running_loop().create_task(self._run(asset, sink, results))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, asset: Asset, sink: Sink, results: asyncio.Queue) -> None:
        result = AsyncDownloadResult(asset=asset, sink=sink)
        result.size, result.error = await self._copy(asset.url, sink)
        if result.error is not None:
            logger.warning(f"Background download of {asset.url} failed: {result.error}")
        else:
            logger.debug(f"Background download of {asset.url} finished ({result.size} bytes)")
        await results.put(result)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def wait(self) -> None:
        """Wait for every in-flight background download."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.wait()
        clients = self._retired + ([self._client] if self._client is not None else [])
        for client in clients:
            if not client.is_closed:
                await client.aclose()
        self._retired = []
        self._client = None


# ── Module-level helpers ─────────────────────────────────────────

_default_downloader: Downloader | None = None


def default_downloader() -> Downloader:
    """Shared downloader for assets not bound to a browser."""
    global _default_downloader
    if _default_downloader is None:
        _default_downloader = Downloader()
    return _default_downloader


async def download_asset(asset: Asset, sink: Sink) -> int:
    downloader = getattr(asset, "downloader", None) or default_downloader()
    return await downloader.download(asset, sink)


def download_asset_async(asset: Asset, sink: Sink, results: asyncio.Queue) -> asyncio.Task:
    downloader = getattr(asset, "downloader", None) or default_downloader()
    return downloader.download_async(asset, sink, results)
