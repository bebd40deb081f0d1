"""Argument parsing functionality for pkgmatch."""

import argparse
from typing import List, Optional

from .constants import Constants


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("patterns",
                        help="File containing one dependency pattern per line",
                        type=str)
    parser.add_argument("pkgnames",
                        help="File containing one package name per line",
                        type=str)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the pkgmatch CLI."""
    parser = argparse.ArgumentParser(
        prog="pkgmatch",
        description="Match pkgsrc dependency patterns against package names",
        add_help=True,
    )

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    sub = parser.add_subparsers(dest="command", required=True)

    match_p = sub.add_parser("match", help="Print every matching pattern/package pair")
    _add_input_args(match_p)

    resolve_p = sub.add_parser("resolve", help="Print the best package for each pattern")
    _add_input_args(resolve_p)
    resolve_p.add_argument("-t", "--tiebreak",
                           dest="TIEBREAK",
                           help="Which name wins when versions are equal (default: pkg_install)",
                           action="store",
                           type=str.lower,
                           choices=Constants.TIEBREAKS,
                           default=None)
    resolve_p.add_argument("--error-on-unresolved",
                           dest="ERROR_ON_UNRESOLVED",
                           help="Exit with a non-zero status code if any pattern is unresolved.",
                           action="store_true")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
