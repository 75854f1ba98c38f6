"""
Tests for the document store and user agent helpers.
"""

import platform

import pytest

from websurf import useragent
from websurf.document import Element, parse
from websurf.errors import DocumentParseError, ElementNotFound


class TestDocument:
    def test_query_and_attr(self):
        doc = parse('<div class="a b"><a href="/x" id="l">link</a></div>')
        div = doc.first("div")
        assert div.attr("class") == "a b"
        assert div.attr("missing") is None
        assert div.attr_or("missing", "d") == "d"
        anchors = doc.query("a")
        assert len(anchors) == 1
        assert anchors[0].is_("A")
        assert anchors[0].text() == "link"

    def test_nested_query(self):
        doc = parse("<ul><li>1</li><li>2</li></ul><li>3</li>")
        ul = doc.first("ul")
        assert [li.text() for li in ul.query("li")] == ["1", "2"]

    def test_html(self):
        doc = parse("<p><b>bold</b></p>")
        p = doc.first("p")
        assert p.html() == "<b>bold</b>"
        assert p.outer_html() == "<p><b>bold</b></p>"

    def test_title_and_body(self):
        doc = parse("<html><head><title>T</title></head><body><p>x</p></body></html>", url="http://e/")
        assert doc.title == "T"
        assert doc.body_html() == "<p>x</p>"
        assert doc.url == "http://e/"

    def test_missing_parts(self):
        doc = parse("")
        assert doc.title == ""
        assert doc.body_html() == ""
        assert doc.first("p") is None
        assert doc.query("p") == []

    def test_element_identity(self):
        doc = parse("<p>a</p>")
        assert doc.first("p") == doc.query("p")[0]
        assert len({doc.first("p"), doc.query("p")[0]}) == 1
        assert isinstance(doc.first("p"), Element)

    def test_invalid_selector(self):
        doc = parse("<div><p>x</p></div>")
        with pytest.raises(ElementNotFound) as excinfo:
            doc.query("p[")
        assert excinfo.value.selector == "p["
        with pytest.raises(ElementNotFound):
            doc.first(":not(")
        with pytest.raises(ElementNotFound):
            doc.first("div").query("p[")

    def test_parse_failure(self):
        with pytest.raises(DocumentParseError):
            parse(b"<p>x</p>", parser="no-such-parser")


class TestUserAgent:
    def test_create(self):
        ua = useragent.create("bot", "2.0")
        assert ua.startswith("bot/2.0 (")
        assert f"{platform.system() or 'Unknown'}; Python " in ua

    def test_create_default_version(self):
        from websurf import __version__
        assert useragent.create().startswith(f"websurf/{__version__} (")

    def test_chrome(self):
        ua = useragent.chrome("120.0.0.0")
        assert ua.startswith("Mozilla/5.0 (")
        assert "Chrome/120.0.0.0 Safari/537.36" in ua

    def test_firefox(self):
        ua = useragent.firefox("125.0")
        assert "rv:125.0) Gecko/20100101 Firefox/125.0" in ua
