"""Exception types raised while compiling patterns and package metadata."""

from __future__ import annotations


class PatternError(ValueError):
    """Base class for pattern compilation errors.

    Attributes:
        pos: Approximate byte offset into the pattern where the error occurred.
        msg: Short description of the problem.
    """

    def __init__(self, msg: str, pos: int = 0):
        super().__init__(msg)
        self.pos = pos
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


class AlternateError(PatternError):
    """An alternate pattern was supplied with unbalanced braces."""

    def __init__(self, msg: str = "Unbalanced braces in pattern", pos: int = 0):
        super().__init__(msg, pos)


class DeweyError(PatternError):
    """A dewey pattern has missing, surplus or misordered operators."""

    def __str__(self) -> str:
        return f"Pattern syntax error near position {self.pos}: {self.msg}"


class VersionOverflowError(DeweyError):
    """A numeric version component does not fit in a signed 64-bit integer."""

    def __init__(self, pos: int, msg: str = "Version component overflow"):
        super().__init__(msg, pos)

    def shifted(self, offset: int) -> "VersionOverflowError":
        """Return a copy with the position moved by ``offset`` bytes."""
        return VersionOverflowError(self.pos + offset, self.msg)


class GlobError(PatternError):
    """A glob pattern could not be compiled."""

    def __str__(self) -> str:
        return f"Pattern syntax error near position {self.pos}: {self.msg}"


class PkgPathError(ValueError):
    """Raised when a string is not a valid PKGPATH."""

    def __init__(self, msg: str = "String contains an invalid path"):
        super().__init__(msg)


class DependError(ValueError):
    """Raised when a DEPENDS entry cannot be parsed."""


class ConfigError(ValueError):
    """Raised when a configuration file fails to load or validate."""
