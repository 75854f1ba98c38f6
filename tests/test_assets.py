"""
Tests for asset extraction and URL resolution.
"""

import pytest

from websurf import assets
from websurf.assets import AssetType, Image, Link, Script, Stylesheet, resolve_url
from websurf.document import parse

BASE = "http://example.com"


class TestResolveUrl:
    def test_relative(self):
        assert resolve_url("http://example.com/a/b.html", "c.png") == "http://example.com/a/c.png"
        assert resolve_url("http://example.com/a/b.html", "/root.css") == "http://example.com/root.css"
        assert resolve_url("http://example.com/a/", "../up") == "http://example.com/up"

    def test_absolute_unchanged(self):
        assert resolve_url("http://example.com/", "https://cdn.example.net/x.js") == "https://cdn.example.net/x.js"

    def test_idempotent(self):
        once = resolve_url("http://example.com/dir/page", "sub/img.png")
        assert resolve_url("http://example.com/dir/page", once) == once
        assert resolve_url("http://other.example.org/", once) == once

    def test_relative_without_base(self):
        assert resolve_url(None, "/about") is None
        assert resolve_url(None, "http://example.com/about") == "http://example.com/about"

    def test_strips_whitespace(self):
        assert resolve_url("http://example.com/", "  /a  ") == "http://example.com/a"


class TestExtractors:
    @pytest.mark.asyncio
    async def test_links(self, browser):
        await browser.open(f"{BASE}/")
        links = browser.links()

        assert [link.url for link in links] == [f"{BASE}/about", "http://other.example.org/page"]
        assert links[0].id == "about"
        assert links[0].text == "About us"
        assert links[1].id == ""
        assert all(link.asset_type == AssetType.LINK for link in links)

    @pytest.mark.asyncio
    async def test_images(self, browser):
        await browser.open(f"{BASE}/")
        images = browser.images()

        assert len(images) == 1
        assert images[0].url == f"{BASE}/img/logo.png"
        assert images[0].alt == "Logo"
        assert images[0].title == "Our logo"
        assert images[0].asset_type == AssetType.IMAGE
        assert images[0].downloader is browser.downloader

    @pytest.mark.asyncio
    async def test_stylesheets(self, browser):
        await browser.open(f"{BASE}/")
        sheets = browser.stylesheets()

        assert [s.url for s in sheets] == [f"{BASE}/css/site.css", f"{BASE}/css/alt.css"]
        assert sheets[0].media == "all"
        assert sheets[0].type == "text/css"
        assert sheets[1].media == "print"

    @pytest.mark.asyncio
    async def test_scripts_skip_inline(self, browser):
        await browser.open(f"{BASE}/")
        scripts = browser.scripts()

        assert [s.url for s in scripts] == [f"{BASE}/js/app.js"]
        assert scripts[0].type == "text/javascript"
        assert scripts[0].asset_type == AssetType.SCRIPT

    def test_no_document(self):
        assert assets.links(None) == []
        assert assets.images(None) == []
        assert assets.stylesheets(None) == []
        assert assets.scripts(None) == []

    def test_document_order_and_defaults(self):
        doc = parse(
            '<img src="b.png"><img src="a.png" id="second">'
            '<script src="s.js" type="module"></script>'
        )
        images = assets.images(doc, "http://example.com/x/")
        assert [i.url for i in images] == ["http://example.com/x/b.png", "http://example.com/x/a.png"]
        assert images[0].alt == ""
        assert images[1].id == "second"
        assert assets.scripts(doc, "http://example.com/")[0].type == "module"

    def test_relative_urls_skipped_without_base(self):
        doc = parse('<a href="/rel">r</a><a href="http://example.com/abs">a</a>')
        assert [link.url for link in assets.links(doc)] == ["http://example.com/abs"]


class TestDescriptors:
    def test_kinds(self):
        assert Link(url="u").asset_type == AssetType.LINK
        assert Image(url="u").asset_type == AssetType.IMAGE
        assert Stylesheet(url="u").asset_type == AssetType.STYLESHEET
        assert Script(url="u").asset_type == AssetType.SCRIPT

    def test_equality_ignores_downloader(self):
        from websurf.downloads import Downloader

        assert Image(url="u", downloader=Downloader()) == Image(url="u")
