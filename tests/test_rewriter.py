"""Tests for pagespeed.html.rewriter — lazy-load and WebP rewriting."""

import pytest

from pagespeed.config import PageSpeedConfig
from pagespeed.html.document import Document
from pagespeed.html.rewriter import HtmlRewriter, append_query, rewrite

WEBP = "format=webp&quality=70"


def _parse(html: str) -> Document:
    return Document.parse(html)


class TestAppendQuery:
    def test_no_existing_query(self) -> None:
        assert append_query("/media/a.png", WEBP) == f"/media/a.png?{WEBP}"

    def test_existing_query(self) -> None:
        assert append_query("/media/c.png?x=1", WEBP) == f"/media/c.png?x=1&{WEBP}"


class TestInPlace:
    def test_non_media_img(self) -> None:
        out = rewrite('<img src="/static/b.png">')
        assert out == '<img data-src="/static/b.png" class="lazyload">'

    def test_moves_srcset_and_sizes(self) -> None:
        out = rewrite('<img src="/static/a.png" srcset="/static/a2.png 2x" sizes="50vw" alt="A">')
        [img] = _parse(out).select("img")
        assert img.get("src") is None
        assert img.get("srcset") is None
        assert img.get("sizes") is None
        assert img.get("data-src") == "/static/a.png"
        assert img.get("data-srcset") == "/static/a2.png 2x"
        assert img.get("data-sizes") == "50vw"
        assert img.get("alt") == "A"
        assert img.has_class("lazyload")

    def test_source_elements_always_in_place(self) -> None:
        out = rewrite('<video><source src="/media/clip.mp4" type="video/mp4"></video>')
        assert "<picture" not in out
        [source] = _parse(out).select("source")
        assert source.get("data-src") == "/media/clip.mp4"
        assert source.get("src") is None
        assert source.has_class("lazyload")

    def test_keeps_existing_classes(self) -> None:
        out = rewrite('<img class="hero wide" src="/static/a.png">')
        [img] = _parse(out).select("img")
        assert img.classes == ["hero", "wide", "lazyload"]

    def test_img_inside_existing_picture(self) -> None:
        html = (
            '<picture><source srcset="/media/a.webp" type="image/webp">'
            '<img src="/media/a.png"></picture>'
        )
        out = rewrite(html)
        doc = _parse(out)
        assert len(doc.select("picture")) == 1
        source, img = doc.select("source", "img")
        assert source.get("data-srcset") == "/media/a.webp"
        assert img.get("data-src") == "/media/a.png"
        assert img.parent is not None and img.parent.tag == "picture"


class TestResponsiveWrap:
    def test_media_img(self) -> None:
        out = rewrite('<img src="/media/a.png">')
        [picture] = _parse(out).select("picture")
        webp, fallback = picture.children
        assert webp.tag == "source"
        assert webp.get("type") == "image/webp"
        assert webp.get("data-srcset") == f"/media/a.png?{WEBP}"
        assert webp.has_class("lazyload")
        assert fallback.tag == "img"
        assert fallback.get("data-srcset") == "/media/a.png"
        assert fallback.has_class("lazyload")
        assert webp.get("src") is None
        assert fallback.get("src") is None

    def test_serialized_form(self) -> None:
        out = rewrite('<p><img src="/media/a.png"></p>')
        assert out == (
            '<p><picture><source type="image/webp" class="lazyload" '
            'data-srcset="/media/a.png?format=webp&amp;quality=70">'
            '<img class="lazyload" data-srcset="/media/a.png"></picture></p>'
        )

    def test_query_append_rule(self) -> None:
        out = rewrite('<img src="/media/c.png?x=1">')
        webp, fallback = _parse(out).select("picture")[0].children
        assert webp.get("data-srcset") == f"/media/c.png?x=1&{WEBP}"
        assert fallback.get("data-srcset") == "/media/c.png?x=1"

    def test_prefix_is_case_insensitive(self) -> None:
        out = rewrite('<img src="/MEDIA/a.png">')
        assert len(_parse(out).select("picture")) == 1

    def test_copies_other_attributes_to_container(self) -> None:
        html = (
            '<img src="/media/a.png" alt="Alt" class="hero" width="640" '
            'ratio="1.5" data-ratio="1.5" data-src="/x.png" srcset="/media/a.png 1x">'
        )
        [picture] = _parse(rewrite(html)).select("picture")
        assert list(picture.attributes) == [("alt", "Alt"), ("class", "hero"), ("width", "640")]

    def test_srcset_overrides_src(self) -> None:
        html = '<img src="/media/a.png" srcset="/media/a-1x.png 1x, /media/a-2x.png 2x" sizes="100vw">'
        webp, fallback = _parse(rewrite(html)).select("picture")[0].children
        for child in (webp, fallback):
            assert child.get("data-srcset") == "/media/a-1x.png 1x, /media/a-2x.png 2x"
            assert child.get("data-sizes") == "100vw"

    def test_falls_back_to_data_attributes(self) -> None:
        html = '<img data-src="/media/d.png" data-sizes="auto">'
        webp, fallback = _parse(rewrite(html)).select("picture")[0].children
        assert webp.get("data-srcset") == f"/media/d.png?{WEBP}"
        assert fallback.get("data-srcset") == "/media/d.png"
        assert fallback.get("data-sizes") == "auto"

    def test_empty_src_sets_no_srcset(self) -> None:
        rewriter = HtmlRewriter()
        doc = _parse('<img src="" data-srcset="/media/e.png 1x">')
        [img] = doc.select("img")
        picture = rewriter.build_responsive(doc, img)
        webp, fallback = picture.children
        assert webp.get("data-srcset") == "/media/e.png 1x"
        assert fallback.get("data-srcset") == "/media/e.png 1x"

    def test_no_sources_at_all(self) -> None:
        rewriter = HtmlRewriter()
        doc = _parse("<img>")
        [img] = doc.select("img")
        webp, fallback = rewriter.build_responsive(doc, img).children
        assert not webp.has("data-srcset")
        assert not fallback.has("data-srcset")

    def test_keeps_position(self) -> None:
        out = rewrite('<div><span>a</span><img src="/media/a.png"><span>b</span></div>')
        [div] = _parse(out).select("div")
        assert [c.tag for c in div.children] == ["span", "picture", "span"]

    def test_custom_config(self) -> None:
        config = PageSpeedConfig(media_prefix="/assets/", webp_query="fmt=webp")
        out = HtmlRewriter(config).rewrite('<img src="/assets/a.png"><img src="/media/b.png">')
        doc = _parse(out)
        [picture] = doc.select("picture")
        assert picture.children[0].get("data-srcset") == "/assets/a.png?fmt=webp"
        assert doc.select("img")[-1].get("data-src") == "/media/b.png"

    def test_textarea_content_untouched(self) -> None:
        out = rewrite('<textarea name="body"><img src="/media/a.png"></textarea>')
        assert "<picture>" not in out
        assert "lazyload" not in out
        assert "data-src" not in out

    def test_title_content_untouched(self) -> None:
        out = rewrite('<title><img src="/static/a.png"></title><img src="/static/b.png">')
        assert out.count("lazyload") == 1
        assert 'data-src="/static/b.png"' in out
        assert 'data-src="/static/a.png"' not in out


class TestIdempotence:
    @pytest.mark.parametrize(
        "html",
        [
            '<img src="/media/a.png">',
            '<img src="/static/b.png" srcset="/static/b2.png 2x">',
            "<!DOCTYPE html><html><head><title>T</title></head>"
            '<body><p>Hi &amp; bye</p><img src="/media/a.png?x=1" alt="a">'
            '<picture><source srcset="/media/s.webp"><img src="/media/s.png"></picture>'
            "</body></html>",
            '<div><p>unclosed <img src="/media/a.png"><span>',
            "<p>no images at all</p>",
        ],
    )
    def test_fixed_point(self, html: str) -> None:
        once = rewrite(html)
        assert rewrite(once) == once

    def test_already_lazy_untouched(self) -> None:
        html = '<img class="lazyload" src="/media/a.png">'
        assert rewrite(html) == html


class TestNeverRaises:
    def test_empty(self) -> None:
        assert rewrite("") == ""

    def test_plain_text(self) -> None:
        assert rewrite("just text") == "just text"

    def test_malformed(self) -> None:
        out = rewrite('<div <img src="/static/a.png"><<>></p></table>')
        assert isinstance(out, str)

    def test_internal_failure_returns_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(markup: str) -> Document:
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(Document, "parse", staticmethod(boom))
        html = '<img src="/media/a.png">'
        assert HtmlRewriter().rewrite(html) == html
