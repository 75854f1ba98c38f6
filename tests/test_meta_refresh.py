"""
Tests for meta refresh scheduling.

Delays are kept in the tens of milliseconds; each test closes its browser
so no timer outlives the event loop.
"""

import asyncio

import httpx
import pytest

from websurf.browser import Attribute, meta_refresh_delay
from websurf.document import parse

BASE = "http://example.com"


def refresh_page(delay: str, title: str = "Refreshing") -> str:
    return f'<html><head><title>{title}</title><meta http-equiv="refresh" content="{delay}"></head></html>'


class TestMetaRefreshDelay:
    @pytest.mark.parametrize("content,expected", [
        ("0", 0.0),
        ("5", 5.0),
        ("0.25", 0.25),
        (" 2 ", 2.0),
    ])
    def test_valid_delays(self, content, expected):
        assert meta_refresh_delay(parse(refresh_page(content))) == expected

    @pytest.mark.parametrize("content", ["5; url=/next", "-1", "soon", "", "nan", "inf"])
    def test_invalid_delays(self, content):
        assert meta_refresh_delay(parse(refresh_page(content))) is None

    def test_http_equiv_case_insensitive(self):
        doc = parse('<meta http-equiv="REFRESH" content="3">')
        assert meta_refresh_delay(doc) == 3.0

    def test_no_directive(self):
        assert meta_refresh_delay(parse("<title>x</title>")) is None
        assert meta_refresh_delay(None) is None


class TestRefreshScheduling:
    @pytest.mark.asyncio
    async def test_reload_fires(self, browser, site):
        served = []

        def handler(request):
            served.append(request)
            if len(served) == 1:
                return httpx.Response(200, html=refresh_page("0.05", "First"))
            return httpx.Response(200, html="<title>Second</title>")

        site.route("/refresh", handler)
        try:
            await browser.open(f"{BASE}/refresh")
            assert browser.refresh_pending
            await asyncio.sleep(0.3)

            assert len(served) == 2
            assert browser.title == "Second"
            assert len(browser.history) == 2
            assert not browser.refresh_pending
        finally:
            await browser.aclose()

    @pytest.mark.asyncio
    async def test_reload_rearms(self, browser, site):
        site.route("/refresh", html=refresh_page("0.05"))
        try:
            await browser.open(f"{BASE}/refresh")
            await asyncio.sleep(0.35)
            assert site.hits("/refresh") >= 3
        finally:
            await browser.aclose()
        hits = site.hits("/refresh")
        await asyncio.sleep(0.15)
        assert site.hits("/refresh") == hits

    @pytest.mark.asyncio
    async def test_navigate_cancels_stale_timer(self, browser, site):
        site.route("/refresh", html=refresh_page("0.1"))
        try:
            await browser.open(f"{BASE}/refresh")
            assert browser.refresh_pending
            await browser.open(f"{BASE}/about")
            assert not browser.refresh_pending

            await asyncio.sleep(0.3)
            assert site.hits("/refresh") == 1
            assert browser.url == f"{BASE}/about"
            assert browser.title == "About"
        finally:
            await browser.aclose()

    @pytest.mark.asyncio
    async def test_back_cancels_timer(self, browser, site):
        site.route("/refresh", html=refresh_page("0.1"))
        try:
            await browser.open(f"{BASE}/")
            await browser.open(f"{BASE}/refresh")
            assert browser.back() is True
            assert not browser.refresh_pending
            await asyncio.sleep(0.25)
            assert site.hits("/refresh") == 1
            assert browser.url == f"{BASE}/"
        finally:
            await browser.aclose()

    @pytest.mark.asyncio
    async def test_in_flight_reload_discarded(self, browser, site):
        release = asyncio.Event()
        calls = []

        async def slow_handler(request):
            calls.append(request)
            if len(calls) > 1:
                await release.wait()
            return httpx.Response(200, html=refresh_page("0.02", f"Load {len(calls)}"))

        site.route("/refresh", slow_handler)
        try:
            await browser.open(f"{BASE}/refresh")
            # Timer fires and its reload blocks inside the transport
            await asyncio.sleep(0.1)
            assert len(calls) == 2

            await browser.open(f"{BASE}/about")
            release.set()
            await asyncio.sleep(0.1)

            assert browser.url == f"{BASE}/about"
            assert browser.title == "About"
        finally:
            await browser.aclose()

    @pytest.mark.asyncio
    async def test_disabled_attribute(self, browser, site):
        site.route("/refresh", html=refresh_page("0.01"))
        browser.set_attribute(Attribute.META_REFRESH_HANDLING, False)
        await browser.open(f"{BASE}/refresh")
        assert not browser.refresh_pending
        await asyncio.sleep(0.05)
        assert site.hits("/refresh") == 1

    @pytest.mark.asyncio
    async def test_non_html_ignored(self, browser, site):
        site.route(
            "/data",
            lambda r: httpx.Response(200, text=refresh_page("0.01"), headers={"Content-Type": "text/plain"}),
        )
        await browser.open(f"{BASE}/data")
        assert not browser.refresh_pending

    @pytest.mark.asyncio
    async def test_missing_content_type_counts_as_html(self, browser, site):
        site.route("/bare", lambda r: httpx.Response(200, content=refresh_page("5").encode()))
        try:
            await browser.open(f"{BASE}/bare")
            assert "Content-Type" not in browser.response_headers
            assert browser.refresh_pending
        finally:
            await browser.aclose()

    @pytest.mark.asyncio
    async def test_target_url_does_not_arm(self, browser, site):
        site.route("/go", html=refresh_page("0; url=/about"))
        await browser.open(f"{BASE}/go")
        assert not browser.refresh_pending

    @pytest.mark.asyncio
    async def test_failed_background_reload_is_logged(self, browser, site, caplog):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) > 1:
                raise httpx.ConnectError("gone", request=request)
            return httpx.Response(200, html=refresh_page("0.02", "Once"))

        site.route("/refresh", handler)
        try:
            with caplog.at_level("WARNING", logger="websurf.browser"):
                await browser.open(f"{BASE}/refresh")
                await asyncio.sleep(0.15)
            assert browser.title == "Once"
            assert any("Meta refresh reload" in r.getMessage() for r in caplog.records)
        finally:
            await browser.aclose()
