"""
websurf - Page Assets

Typed descriptors for the resources a page references (links, images,
stylesheets, scripts) and the extractors that walk a parsed document to
produce them.

Extraction rules:
  - Document order is preserved
  - Relative URLs are resolved against the page URL
  - Elements whose URL attribute is missing or unparsable are skipped
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field

import httpx

from websurf.document import Document, Element
from websurf.downloads import Downloader, Sink, download_asset, download_asset_async

logger = logging.getLogger("websurf.assets")


class AssetType(str, enum.Enum):
    """Kind of page asset."""
    LINK = "link"
    IMAGE = "image"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"


# ═══════════════════════════════════════════════════════════════════════════
# Asset descriptors
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Asset:
    """A resource referenced by the page."""
    url: str
    id: str = ""
    asset_type: AssetType = field(default=AssetType.LINK, init=False)


@dataclass(frozen=True)
class Link(Asset):
    """An <a href> on the page."""
    text: str = ""
    asset_type: AssetType = field(default=AssetType.LINK, init=False)


@dataclass(frozen=True)
class DownloadableAsset(Asset):
    """An asset whose payload can be fetched.

    downloader is the engine the asset was discovered with; None falls
    back to the module-level default downloader.
    """
    downloader: Downloader | None = field(default=None, repr=False, compare=False)

    async def download(self, sink: Sink) -> int:
        """Copy the asset body into sink, return bytes written."""
        return await download_asset(self, sink)

    def download_async(self, sink: Sink, results: asyncio.Queue) -> asyncio.Task:
        """Copy in the background; one AsyncDownloadResult lands on results."""
        return download_asset_async(self, sink, results)


@dataclass(frozen=True)
class Image(DownloadableAsset):
    alt: str = ""
    title: str = ""
    asset_type: AssetType = field(default=AssetType.IMAGE, init=False)


@dataclass(frozen=True)
class Stylesheet(DownloadableAsset):
    media: str = "all"
    type: str = "text/css"
    asset_type: AssetType = field(default=AssetType.STYLESHEET, init=False)


@dataclass(frozen=True)
class Script(DownloadableAsset):
    type: str = "text/javascript"
    asset_type: AssetType = field(default=AssetType.SCRIPT, init=False)


# ═══════════════════════════════════════════════════════════════════════════
# URL resolution
# ═══════════════════════════════════════════════════════════════════════════


def resolve_url(base: str | httpx.URL | None, ref: str) -> str | None:
    """Absolute form of ref relative to base, or None when it cannot be built.

    Resolving an already absolute URL returns it unchanged, so resolution
    is idempotent.
    """
    ref = ref.strip()
    try:
        if base is None:
            url = httpx.URL(ref)
        else:
            url = httpx.URL(base).join(ref)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        logger.debug(f"Unparsable URL {ref!r}: {e}")
        return None
    if url.is_relative_url:
        return None
    return str(url)


def _resolved_attr(element: Element, name: str, base: str | httpx.URL | None) -> str | None:
    value = element.attr(name)
    if value is None:
        return None
    return resolve_url(base, value)


# ═══════════════════════════════════════════════════════════════════════════
# Extractors
# ═══════════════════════════════════════════════════════════════════════════


def links(document: Document | None, base: str | httpx.URL | None = None) -> list[Link]:
    """Every <a href> in the document."""
    if document is None:
        return []
    found = []
    for el in document.query("a"):
        href = _resolved_attr(el, "href", base)
        if href is None:
            continue
        found.append(Link(url=href, id=el.attr_or("id", ""), text=el.text()))
    return found


def images(
    document: Document | None,
    base: str | httpx.URL | None = None,
    downloader: Downloader | None = None,
) -> list[Image]:
    """Every <img src> in the document."""
    if document is None:
        return []
    found = []
    for el in document.query("img"):
        src = _resolved_attr(el, "src", base)
        if src is None:
            continue
        found.append(Image(
            url=src,
            id=el.attr_or("id", ""),
            downloader=downloader,
            alt=el.attr_or("alt", ""),
            title=el.attr_or("title", ""),
        ))
    return found


def stylesheets(
    document: Document | None,
    base: str | httpx.URL | None = None,
    downloader: Downloader | None = None,
) -> list[Stylesheet]:
    """Every <link rel="stylesheet" href> in the document."""
    if document is None:
        return []
    found = []
    for el in document.query("link"):
        rel = (el.attr("rel") or "").lower().split()
        if "stylesheet" not in rel:
            continue
        href = _resolved_attr(el, "href", base)
        if href is None:
            continue
        found.append(Stylesheet(
            url=href,
            id=el.attr_or("id", ""),
            downloader=downloader,
            media=el.attr_or("media", "all"),
            type=el.attr_or("type", "text/css"),
        ))
    return found


def scripts(
    document: Document | None,
    base: str | httpx.URL | None = None,
    downloader: Downloader | None = None,
) -> list[Script]:
    """Every <script src> in the document. Inline scripts are skipped."""
    if document is None:
        return []
    found = []
    for el in document.query("script"):
        src = _resolved_attr(el, "src", base)
        if src is None:
            continue
        found.append(Script(
            url=src,
            id=el.attr_or("id", ""),
            downloader=downloader,
            type=el.attr_or("type", "text/javascript"),
        ))
    return found
