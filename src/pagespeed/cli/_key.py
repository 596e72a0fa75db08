"""``pagespeed key`` — print the key a route resolves to."""

import argparse
import sys

from pagespeed.config import PageSpeedConfig
from pagespeed.keys.builder import RouteKeyBuilder
from pagespeed.keys.generator import RouteKeyGenerator
from pagespeed.routing.route import ACTION, AREA, CONTROLLER, RouteData


class _Route:
    """Minimal holder satisfying ``HasRouteData``."""

    __slots__ = ("route_data",)

    def __init__(self, route_data: RouteData) -> None:
        self.route_data = route_data


def run_key(args: argparse.Namespace) -> None:
    values: dict[str, str] = {CONTROLLER: args.controller, ACTION: args.action}
    for param in args.params:
        name, sep, value = param.partition("=")
        if not sep or not name:
            print(f"Error: expected NAME=VALUE, got {param!r}", file=sys.stderr)
            sys.exit(2)
        values[name] = value

    data_tokens = {AREA: args.area} if args.area else {}
    generator = RouteKeyGenerator(RouteKeyBuilder(PageSpeedConfig.from_env().key_prefix))
    key = generator.generate_key(_Route(RouteData(values=values, data_tokens=data_tokens)))

    if key is None:
        print("Error: controller and action must not be empty", file=sys.stderr)
        sys.exit(1)
    print(key)
