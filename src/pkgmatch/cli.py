"""pkgmatch - match pkgsrc dependency patterns against package names.

    Returns:
        int: Exit code
"""
import logging
import sys
from typing import List, Optional

from .args import parse_args
from .config import resolve_settings
from .constants import ExitCodes
from .errors import ConfigError, PatternError
from .pattern import Pattern
from .resolve import CandidateIndex, TieBreak, resolve
from .common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


def load_lines(file_name: str) -> List[str]:
    """Loads non-empty lines from a file.

    Args:
        file_name (str): File path containing one entry per line.

    Returns:
        list: Stripped lines, blank lines removed.
    """
    try:
        with open(file_name, encoding="utf-8") as file:
            return [line.strip() for line in file if line.strip()]
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except (IOError, UnicodeDecodeError) as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def compile_patterns(lines: List[str]) -> List[Pattern]:
    """Compile every pattern, exiting on the first invalid one."""
    patterns = []
    for line in lines:
        try:
            patterns.append(Pattern.compile(line))
        except PatternError as e:
            logging.error("Invalid pattern %r: %s", line, e)
            sys.exit(ExitCodes.PATTERN_ERROR.value)
    return patterns


def run_match(patterns: List[Pattern], pkgnames: List[str]) -> int:
    """Print ``PATTERN PKGNAME`` for every matching pair."""
    count = 0
    for pattern in patterns:
        for pkg in pkgnames:
            if pattern.matches(pkg):
                print(f"{pattern} {pkg}")
                count += 1
    logger.info("%d matches across %d patterns", count, len(patterns))
    return ExitCodes.SUCCESS.value


def run_resolve(
    patterns: List[Pattern],
    pkgnames: List[str],
    tiebreak: TieBreak,
    error_on_unresolved: bool,
) -> int:
    """Print ``PATTERN WINNER`` for every pattern that resolves."""
    index = CandidateIndex(pkgnames)
    unresolved = 0
    for pattern in patterns:
        try:
            result = resolve(pattern, index, tiebreak)
        except PatternError as e:
            logging.error("Cannot resolve %s: %s", pattern, e)
            return ExitCodes.PATTERN_ERROR.value
        if result.resolved is None:
            unresolved += 1
            logger.warning("Unresolved pattern: %s", pattern)
            continue
        print(f"{pattern} {result.resolved}")

    if unresolved:
        logger.info("%d of %d patterns unresolved", unresolved, len(patterns))
        if error_on_unresolved:
            return ExitCodes.EXIT_UNRESOLVED.value
    return ExitCodes.SUCCESS.value


def main(argv: Optional[List[str]] = None) -> int:
    """Main function of the program."""
    args = parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        configure_logging()
        logging.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    configure_logging(settings.log_level)
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)
        logger.info("Logging to file: %s", args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.command,
                tiebreak=settings.tiebreak,
            ),
        )

    patterns = compile_patterns(load_lines(args.patterns))
    pkgnames = load_lines(args.pkgnames)

    if args.command == "match":
        return run_match(patterns, pkgnames)
    return run_resolve(
        patterns,
        pkgnames,
        TieBreak(settings.tiebreak),
        settings.error_on_unresolved,
    )


if __name__ == "__main__":
    sys.exit(main())
