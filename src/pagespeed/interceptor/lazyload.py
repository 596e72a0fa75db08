"""Two-phase response interception.

``before`` swaps the host's output sink for an in-memory buffer and
parks a ``PendingFinalize`` record in the request items under the
route's key. ``after`` recomputes the key, takes the record back out
and finalizes it: the original sink is restored and, unless the
pipeline failed, the buffered markup is rewritten into it.

Per request::

    Idle -> Buffering -> (Rewriting | Discarding) -> Idle
"""

import logging
from io import StringIO

from pagespeed.config import PageSpeedConfig
from pagespeed.html.rewriter import HtmlRewriter
from pagespeed.interceptor.pending import PendingFinalize
from pagespeed.interceptor.protocol import ActionContext
from pagespeed.keys.builder import RouteKeyBuilder
from pagespeed.keys.generator import RouteKeyGenerator
from pagespeed.keys.protocol import KeyGenerator

logger = logging.getLogger("pagespeed.interceptor")


class LazyLoadInterceptor:
    """Buffers full-page output and rewrites its images on completion.

    Partial sub-renders are never intercepted; the full page that
    contains them is rewritten as a whole. Crawlers listed in the
    config always receive the markup untouched.

    Usage::

        interceptor = LazyLoadInterceptor(PageSpeedConfig())

        interceptor.before(context)   # before the body is produced
        ...                           # host renders into context.output
        interceptor.after(context)    # after, even on failure
    """

    __slots__ = ("config", "key_generator", "rewriter")

    def __init__(
        self,
        config: PageSpeedConfig | None = None,
        *,
        key_generator: KeyGenerator | None = None,
        rewriter: HtmlRewriter | None = None,
    ) -> None:
        self.config = config or PageSpeedConfig()
        self.key_generator: KeyGenerator = key_generator or RouteKeyGenerator(
            RouteKeyBuilder(self.config.key_prefix)
        )
        self.rewriter = rewriter or HtmlRewriter(self.config)

    def before(self, context: ActionContext) -> str | None:
        """Start buffering. Returns the registered key, or ``None`` if skipped."""
        if context.is_child_action:
            return None

        if self.config.is_crawler(context.user_agent):
            logger.debug("Crawler user agent %r; leaving markup untouched", context.user_agent)
            return None

        key = self.key_generator.generate_key(context)
        if key is None:
            logger.debug("Request has no controller/action; not intercepting")
            return None

        if key in context.items:
            logger.warning("Output for %s is already being buffered", key)
            return None

        original = context.output
        buffer = StringIO()
        context.output = buffer
        context.items[key] = PendingFinalize(key=key, original=original, buffer=buffer)
        return key

    def after(self, context: ActionContext) -> None:
        """Finish the request started by ``before``. A no-op if nothing is pending."""
        if context.is_child_action:
            return

        key = self.key_generator.generate_key(context)
        if key is None:
            return

        pending = context.items.get(key)
        if not isinstance(pending, PendingFinalize):
            return

        self.finalize(context, pending, has_errors=context.exception is not None)

    def finalize(self, context: ActionContext, pending: PendingFinalize, *, has_errors: bool) -> None:
        """Restore the original sink and write the rewritten capture to it.

        On failure the capture is discarded; whatever the unwinding
        pipeline writes next goes straight to the restored sink.
        """
        context.items.pop(pending.key, None)
        context.output = pending.original

        if has_errors:
            logger.debug("Pipeline failed; discarding buffered output for %s", pending.key)
            return

        captured = pending.captured
        if not captured:
            return

        logger.debug("Replacing images - %s", pending.key)
        pending.original.write(self.rewriter.rewrite(captured))
