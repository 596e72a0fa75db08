"""``pagespeed rewrite`` — rewrite an HTML file to stdout."""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from pagespeed.config import PageSpeedConfig
from pagespeed.errors import ConfigurationError
from pagespeed.html.rewriter import HtmlRewriter


def run_rewrite(args: argparse.Namespace) -> None:
    """Rewrite ``args.file`` (or stdin) and print the result."""
    overrides: dict[str, str] = {}
    if args.media_prefix is not None:
        overrides["media_prefix"] = args.media_prefix
    if args.webp_query is not None:
        overrides["webp_query"] = args.webp_query

    try:
        config = replace(PageSpeedConfig.from_env(), **overrides)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.file == "-":
        markup = sys.stdin.read()
    else:
        path = Path(args.file)
        if not path.is_file():
            print(f"Error: {args.file} is not a file", file=sys.stderr)
            sys.exit(1)
        markup = path.read_text(encoding="utf-8")

    sys.stdout.write(HtmlRewriter(config).rewrite(markup))
