"""HTML tree and image rewriting."""

from pagespeed.html.document import Document, Element
from pagespeed.html.rewriter import HtmlRewriter, append_query, rewrite

__all__ = ["Document", "Element", "HtmlRewriter", "append_query", "rewrite"]
