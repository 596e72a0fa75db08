"""PageSpeed configuration.

PageSpeedConfig is a frozen dataclass — immutable after creation and
passed explicitly into the interceptor and the rewriter. There is no
process-wide mutable state.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from pagespeed.errors import ConfigurationError

DEFAULT_CRAWLER_BOTS: tuple[str, ...] = ("Googlebot", "Screaming Frog")

# Environment variable names read by PageSpeedConfig.from_env()
ENV_MEDIA_PREFIX = "PAGESPEED_MEDIA_PREFIX"
ENV_CRAWLER_BOTS = "PAGESPEED_CRAWLER_BOTS"
ENV_WEBP_QUERY = "PAGESPEED_WEBP_QUERY"


def parse_crawler_bots(value: str, separator: str = ";") -> tuple[str, ...]:
    """Split a delimiter-separated crawler list.

    Entries are stripped; blank entries are dropped::

        parse_crawler_bots("Googlebot; Bingbot;;")  # ("Googlebot", "Bingbot")
    """
    return tuple(part.strip() for part in value.split(separator) if part.strip())


@dataclass(frozen=True, slots=True)
class PageSpeedConfig:
    """Rewrite configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = PageSpeedConfig(media_prefix="/assets/", crawler_bots=("Bingbot",))
    """

    # Assets under this path get the WebP/fallback construct
    media_prefix: str = "/media/"

    # User agents containing any of these substrings see unmodified markup
    crawler_bots: tuple[str, ...] = DEFAULT_CRAWLER_BOTS

    # Query string appended to the WebP variant's URL
    webp_query: str = "format=webp&quality=70"

    # Key Builder prefix
    key_prefix: str = "_l4zyl04der."

    # Marker class for client-side lazy loading (also the idempotence guard)
    lazyload_class: str = "lazyload"

    # Responsive construct container
    container_tag: str = "picture"

    def __post_init__(self) -> None:
        if not self.media_prefix:
            msg = "media_prefix must not be empty."
            raise ConfigurationError(msg)
        if not self.lazyload_class or any(c.isspace() for c in self.lazyload_class):
            msg = f"lazyload_class must be a single class name, got {self.lazyload_class!r}."
            raise ConfigurationError(msg)
        if not self.container_tag:
            msg = "container_tag must not be empty."
            raise ConfigurationError(msg)

    def is_crawler(self, user_agent: str | None) -> bool:
        """True if *user_agent* contains any configured crawler substring."""
        if not user_agent:
            return False
        return any(bot in user_agent for bot in self.crawler_bots)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PageSpeedConfig":
        """Build a config from environment variables.

        ``PAGESPEED_CRAWLER_BOTS`` is a ``;``-separated list. Unset or
        empty variables keep the defaults.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        media_prefix = env.get(ENV_MEDIA_PREFIX, "")
        if media_prefix:
            overrides["media_prefix"] = media_prefix

        bots = env.get(ENV_CRAWLER_BOTS, "")
        if bots:
            overrides["crawler_bots"] = parse_crawler_bots(bots)

        webp_query = env.get(ENV_WEBP_QUERY, "")
        if webp_query:
            overrides["webp_query"] = webp_query

        return cls(**overrides)  # type: ignore[arg-type]
