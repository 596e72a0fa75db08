"""Lazy-load and WebP rewriting of buffered HTML.

Every ``img`` and ``source`` element without the lazyload class gets
exactly one treatment. Elements inside ``textarea`` or ``title`` are
text to a browser and are left alone.

- an ``img`` whose source lives under the media prefix (and is not
  already inside a responsive container) is replaced by::

      <picture>
        <source type="image/webp" class="lazyload" data-srcset="a.png?format=webp&quality=70">
        <img class="lazyload" data-srcset="a.png">
      </picture>

- anything else has ``src``/``srcset``/``sizes`` moved to their
  ``data-`` counterparts and gains the lazyload class.

Output elements all carry the lazyload class, so rewriting a rewritten
document changes nothing.
"""

import logging
import time

from pagespeed.config import PageSpeedConfig
from pagespeed.html.document import Document, Element

logger = logging.getLogger("pagespeed.rewriter")

WEBP_MIME = "image/webp"

# (attribute, lazy counterpart), in the order they are moved
LAZY_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("src", "data-src"),
    ("srcset", "data-srcset"),
    ("sizes", "data-sizes"),
)

# Content of these elements is text to a browser, never markup
_RAW_TEXT_PARENTS = ("textarea", "title")

# Never copied from the img onto its responsive container
_SOURCE_ATTRIBUTES = frozenset(
    {"src", "srcset", "sizes", "ratio", "data-src", "data-srcset", "data-sizes", "data-ratio"}
)


def append_query(url: str, query: str) -> str:
    """Append *query* to *url* with ``&`` if it already has a query, else ``?``."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


class HtmlRewriter:
    """Rewrites image markup for lazy loading and WebP negotiation.

    Usage::

        rewriter = HtmlRewriter(PageSpeedConfig(media_prefix="/media/"))
        html = rewriter.rewrite(buffered_markup)

    ``rewrite`` never raises. If the tree cannot be processed the
    markup is returned as given.
    """

    __slots__ = ("config",)

    def __init__(self, config: PageSpeedConfig | None = None) -> None:
        self.config = config or PageSpeedConfig()

    def rewrite(self, markup: str) -> str:
        if not markup:
            return markup
        start = time.perf_counter()
        try:
            result = self._rewrite(markup)
        except Exception:
            logger.exception("Image rewrite failed; passing markup through unchanged")
            return markup
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("Rewrote images in %.2fms (%d chars)", elapsed, len(markup))
        return result

    def _rewrite(self, markup: str) -> str:
        document = Document.parse(markup)
        lazyload = self.config.lazyload_class

        for element in document.select("img", "source"):
            if element.has_class(lazyload) or element.has_ancestor(*_RAW_TEXT_PARENTS):
                continue
            if self._wants_responsive(element):
                element.replace_with(self.build_responsive(document, element))
            else:
                self.make_lazy(element)

        return document.serialize()

    def _wants_responsive(self, element: Element) -> bool:
        if element.tag != "img":
            return False
        source = _first(element, "src", "data-src") or ""
        if not source.lower().startswith(self.config.media_prefix.lower()):
            return False
        parent = element.parent
        return parent is None or parent.tag != self.config.container_tag.lower()

    def make_lazy(self, element: Element) -> None:
        """Move ``src``/``srcset``/``sizes`` to ``data-*`` and mark the element."""
        for name, lazy_name in LAZY_ATTRIBUTES:
            value = element.get(name)
            if value is not None:
                element.set(lazy_name, value)
                element.remove(name)
        element.add_class(self.config.lazyload_class)

    def build_responsive(self, document: Document, img: Element) -> Element:
        """Build the WebP + fallback container replacing *img*."""
        src = _first(img, "src", "data-src")
        srcset = _first(img, "srcset", "data-srcset")
        sizes = _first(img, "sizes", "data-sizes")

        container = document.create_element(self.config.container_tag)
        for name, value in img.attributes:
            if name.lower() not in _SOURCE_ATTRIBUTES:
                container.set(name, value)

        webp = document.create_element("source")
        webp.set("type", WEBP_MIME)
        self._fill_variant(
            webp,
            append_query(src, self.config.webp_query) if src else None,
            srcset,
            sizes,
        )

        fallback = document.create_element("img")
        self._fill_variant(fallback, src, srcset, sizes)

        container.append(webp)
        container.append(fallback)
        return container

    def _fill_variant(
        self,
        element: Element,
        src: str | None,
        srcset: str | None,
        sizes: str | None,
    ) -> None:
        element.add_class(self.config.lazyload_class)
        # An explicit srcset wins over the single-source candidate.
        candidate = srcset or src
        if candidate:
            element.set("data-srcset", candidate)
        if sizes:
            element.set("data-sizes", sizes)


def _first(element: Element, *names: str) -> str | None:
    """The first present attribute value among *names*."""
    for name in names:
        value = element.get(name)
        if value is not None:
            return value
    return None


def rewrite(markup: str, config: PageSpeedConfig | None = None) -> str:
    """Rewrite *markup* with a one-off ``HtmlRewriter``."""
    return HtmlRewriter(config).rewrite(markup)
