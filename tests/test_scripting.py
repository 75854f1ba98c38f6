"""
Tests for the scripting hook and query bridge.
"""

import pytest

from websurf.document import Document, parse
from websurf.scripting import CallableRegistry, QueryBridge, ScriptHost

BASE = "http://example.com"


class TestQueryBridge:
    def test_find_collects_attributes(self):
        bridge = QueryBridge(parse('<a href="/a">A</a><a href="/b">B</a><a>no href</a>'))
        assert bridge.find("a", "href", "links") is True
        assert bridge.results() == {"links": ["/a", "/b"]}

    def test_find_appends_across_calls(self):
        bridge = QueryBridge(parse('<img src="x.png"><a href="/a"></a>'))
        bridge.find("img", "src", "urls")
        bridge.find("a", "href", "urls")
        assert bridge.results()["urls"] == ["x.png", "/a"]

    def test_find_rejects_non_strings(self):
        bridge = QueryBridge(parse("<a href='/a'></a>"))
        assert bridge.find("a", 1, "k") is False
        assert bridge.results() == {}

    def test_find_invalid_selector(self):
        bridge = QueryBridge(parse("<a href='/a'></a>"))
        assert bridge.find("a[", "href", "k") is False
        assert bridge.results() == {}

    def test_find_without_document(self):
        assert QueryBridge(None).find("a", "href", "k") is False

    def test_new_document(self):
        doc = QueryBridge(None).new_document("<title>Fresh</title>")
        assert isinstance(doc, Document)
        assert doc.title == "Fresh"


class TestCallableRegistry:
    def test_register_and_call(self):
        host = CallableRegistry()
        host.register("double", lambda x: x * 2)
        assert "double" in host
        assert host.call("double", 4) == 8

    def test_missing(self):
        with pytest.raises(KeyError):
            CallableRegistry().call("nope")

    def test_protocol(self):
        assert isinstance(CallableRegistry(), ScriptHost)


class TestBrowserIntegration:
    @pytest.mark.asyncio
    async def test_bridge_installed_on_load(self, make_browser):
        host = CallableRegistry()
        bow = make_browser(script_host=host)
        await bow.open(f"{BASE}/")

        assert {"find", "results", "newDocument"} <= set(host.functions)
        assert host.call("find", "img", "src", "images") is True
        assert host.call("results") == {"images": ["/img/logo.png"]}

    @pytest.mark.asyncio
    async def test_bridge_follows_navigation(self, make_browser):
        host = CallableRegistry()
        bow = make_browser(script_host=host)
        await bow.open(f"{BASE}/")
        await bow.open(f"{BASE}/about")

        host.call("find", "a", "href", "links")
        assert host.call("results") == {"links": ["/"]}

        bow.back()
        host.call("find", "a#about", "href", "links")
        assert host.call("results") == {"links": ["/about"]}
