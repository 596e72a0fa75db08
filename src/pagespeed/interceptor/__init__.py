"""Response interception: buffer the page, rewrite it on completion."""

from pagespeed.interceptor.lazyload import LazyLoadInterceptor
from pagespeed.interceptor.pending import PendingFinalize
from pagespeed.interceptor.protocol import ActionContext, TextSink

__all__ = ["ActionContext", "LazyLoadInterceptor", "PendingFinalize", "TextSink"]
