"""PageSpeed CLI — rewrite HTML files and inspect cache keys.

Entry point registered as ``pagespeed`` in ``pyproject.toml``::

    [project.scripts]
    pagespeed = "pagespeed.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``pagespeed`` command."""
    parser = argparse.ArgumentParser(
        prog="pagespeed",
        description="PageSpeed — lazy-load and WebP rewriting for server-rendered HTML.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- pagespeed rewrite ------------------------------------------------
    rewrite_parser = subparsers.add_parser("rewrite", help="Rewrite images in an HTML file")
    rewrite_parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="HTML file to rewrite (default: stdin)",
    )
    rewrite_parser.add_argument("--media-prefix", default=None, help="Media path prefix")
    rewrite_parser.add_argument("--webp-query", default=None, help="Query appended to WebP URLs")

    # -- pagespeed key ----------------------------------------------------
    key_parser = subparsers.add_parser("key", help="Print the cache key for a route")
    key_parser.add_argument("controller", help="Controller name")
    key_parser.add_argument("action", help="Action name")
    key_parser.add_argument(
        "params",
        nargs="*",
        metavar="NAME=VALUE",
        help="Extra route values, in order",
    )
    key_parser.add_argument("--area", default=None, help="Area data token")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "rewrite":
        from pagespeed.cli._rewrite import run_rewrite

        run_rewrite(args)
    elif args.command == "key":
        from pagespeed.cli._key import run_key

        run_key(args)
