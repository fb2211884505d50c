"""
Command line interface.

Roots, targets and ignored types are given as `package.module:attr.path`,
a plain `package.module` refers to the module object itself.
"""

import argparse
import importlib
import logging
import operator
import sys
from typing import Any

from ._config import WalkConfig
from ._walker import find_all, find_by_origin

logger = logging.getLogger("refwalker")


def resolve(name: str) -> Any:
    """
    Import the object described by `module:attr.path`.
    """
    module_name, _, attr_path = name.partition(":")

    if not module_name:
        raise ValueError(f"No module in {name!r}")

    obj = importlib.import_module(module_name)

    if attr_path:
        obj = operator.attrgetter(attr_path)(obj)

    return obj


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        prog="refwalker",
        description="Find the paths through which objects are reachable.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  refwalker myapp.state:registry --target myapp.plugins:current
  refwalker myapp.state:registry --origin myapp.plugins.old
  refwalker myapp.state:registry --origin myapp.plugins --stale
  refwalker sys:modules --origin myapp.plugins --no-class-members
        """,
    )

    parser.add_argument(
        "roots",
        nargs="+",
        help="Objects to start the search from",
    )

    goal = parser.add_mutually_exclusive_group(required=True)
    goal.add_argument(
        "--target",
        help="Object to find the paths to",
    )
    goal.add_argument(
        "--origin",
        help="Name of the module whose objects should be found",
    )

    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="TYPE",
        help="Do not look into objects of this type (repeatable)",
    )

    parser.add_argument(
        "--stale",
        action="store_true",
        help="With --origin, only report objects of classes that were replaced "
        "by reloading their module",
    )

    parser.add_argument(
        "--no-class-members",
        action="store_true",
        help="Do not follow class level attributes",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress, twice for every skipped member",
    )

    return parser, parser.parse_args(args)


def main(args=None) -> int:
    parser, parsed = parse_args(args)

    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(parsed.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        roots = [resolve(name) for name in parsed.roots]
        ignored = [resolve(name) for name in parsed.ignore]
        target = resolve(parsed.target) if parsed.target is not None else None
    except (ImportError, AttributeError, ValueError) as error:
        parser.error(str(error))

    if parsed.stale and parsed.origin is None:
        parser.error("--stale requires --origin")

    for cls in ignored:
        if not isinstance(cls, type):
            parser.error(f"--ignore expects a class, got {cls!r}")

    config = WalkConfig(scan_class_members=not parsed.no_class_members)
    config = config.with_ignored(*ignored)

    if parsed.origin is not None:
        logger.info("Searching for objects from %s", parsed.origin)
        paths = find_by_origin(roots, parsed.origin, config, stale=parsed.stale)
    else:
        logger.info("Searching for %r", target)
        paths = find_all(roots, target, config)

    for path in paths:
        print(path)

    logger.info("Found %d paths", len(paths))
    return 0 if paths else 1


if __name__ == "__main__":
    sys.exit(main())
