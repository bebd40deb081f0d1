"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    PATTERN_ERROR = 2
    EXIT_UNRESOLVED = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Version modifiers in the order they are tried, with their weights.
    VERSION_MODIFIERS = (
        ("alpha", -3),
        ("beta", -2),
        ("pre", -1),
        ("rc", -1),
        ("pl", 0),
    )
    VERSION_SEPARATORS = "._"
    REVISION_MARKER = "nb"

    INT64_MAX = 2**63 - 1

    # Characters that select a pattern kind at compile time.
    ALTERNATE_CHARS = "{}"
    DEWEY_CHARS = "<>"
    GLOB_CHARS = "*?[]"

    # Number of leading pattern characters inspected by the fast reject.
    QUICK_MATCH_CHARS = 2

    MAX_ALTERNATE_DEPTH = 64
    SUBPATTERN_CACHE_SIZE = 4096

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "PKGMATCH_LOG_LEVEL"
    DEFAULT_LOG_LEVEL = "INFO"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    TIEBREAKS = ["pkg_install", "pbulk"]
    DEFAULT_TIEBREAK = "pkg_install"
