"""Package pattern matching.

Patterns specify package requirements for every dependency type in pkgsrc.
Four kinds are supported, chosen by the characters present in the pattern:

* Alternate: csh-style ``{mysql,mariadb,percona}-[0-9]*``.
* Dewey: version ranges such as ``librsvg>=2.12<2.41``.
* Glob: shell wildcards such as ``mutt-[0-9]*``.
* Simple: an exact package name such as ``foobar-1.0``.

Example:
    >>> m = Pattern.compile("librsvg>=2.12<2.41")
    >>> m.matches("librsvg-2.13"), m.matches("librsvg-2.41")
    (True, False)
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Optional, Set, Union

from .constants import Constants
from .dewey import DeweyOp, DeweyPattern, _byte_offset, decompose, dewey_cmp
from .errors import AlternateError, PatternError
from .globmatch import GlobPattern
from .pkgname import PkgName
from .common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


class PatternKind(Enum):
    """The kind of a compiled pattern."""

    ALTERNATE = "alternate"
    DEWEY = "dewey"
    GLOB = "glob"
    SIMPLE = "simple"


def _is_simple_char(c: str) -> bool:
    return c == "-" or (c.isascii() and c.isalnum())


def quick_pkg_match(pattern: str, pkg: str) -> bool:
    """Cheaply decide whether ``pkg`` could possibly match ``pattern``.

    The first few pattern characters are compared against the candidate as
    long as they are plain name characters.  Returns False only when a match
    is impossible; True means "cannot reject".
    """
    for i in range(Constants.QUICK_MATCH_CHARS):
        if i >= len(pattern) or not _is_simple_char(pattern[i]):
            return True
        if i >= len(pkg) or pattern[i] != pkg[i]:
            return False
    return True


class _ExpansionTooDeep(Exception):
    """Alternate expansion went deeper than ``MAX_ALTERNATE_DEPTH``."""


def _check_braces(pattern: str) -> None:
    depth = 0
    for i, c in enumerate(pattern):
        if c == "{":
            depth += 1
        elif c == "}":
            if depth == 0:
                raise AlternateError(pos=_byte_offset(pattern, i))
            depth -= 1
    if depth:
        raise AlternateError(pos=_byte_offset(pattern, pattern.rfind("{")))


class Pattern:
    """A compiled package pattern.

    Compile once with :meth:`compile`, then call :meth:`matches` for as many
    candidates as needed.  Instances are immutable and safe to share.
    """

    __slots__ = ("_kind", "_text", "_compiled")

    def __init__(
        self,
        kind: PatternKind,
        text: str,
        compiled: Union[DeweyPattern, GlobPattern, None] = None,
    ):
        self._kind = kind
        self._text = text
        self._compiled = compiled

    @classmethod
    def compile(cls, text: str) -> "Pattern":
        """Compile a pattern string.

        Args:
            text: Raw pattern text.

        Returns:
            The compiled pattern.

        Raises:
            AlternateError: Braces are unbalanced.
            DeweyError: Dewey operators are missing, surplus or misordered.
            VersionOverflowError: A dewey bound contains an out of range number.
            GlobError: Glob syntax is malformed.
        """
        if any(c in text for c in Constants.ALTERNATE_CHARS):
            # Expanded alternatives are only validated when matched.
            _check_braces(text)
            pattern = cls(PatternKind.ALTERNATE, text)
        elif any(c in text for c in Constants.DEWEY_CHARS):
            pattern = cls(PatternKind.DEWEY, text, DeweyPattern.compile(text))
        elif any(c in text for c in Constants.GLOB_CHARS):
            pattern = cls(PatternKind.GLOB, text, GlobPattern.compile(text))
        else:
            pattern = cls(PatternKind.SIMPLE, text)

        if is_debug_enabled(logger):
            logger.debug(
                "Compiled pattern",
                extra=extra_context(
                    event="compile",
                    component="pattern",
                    action="compile",
                    pattern=text,
                    kind=pattern.kind.value,
                ),
            )
        return pattern

    @property
    def kind(self) -> PatternKind:
        return self._kind

    def raw_text(self) -> str:
        """Return the original pattern text, unchanged."""
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Pattern({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self._text == other._text

    def __hash__(self) -> int:
        return hash(self._text)

    def matches(self, pkg: str) -> bool:
        """Return whether ``pkg``, a full PKGNAME, matches this pattern.

        Alternate patterns that need more than ``MAX_ALTERNATE_DEPTH``
        nested expansions never match.
        """
        try:
            return self._matches(pkg, 0, set())
        except _ExpansionTooDeep:
            logger.warning(
                "Alternate pattern nesting exceeds %d levels: %s",
                Constants.MAX_ALTERNATE_DEPTH,
                self._text,
            )
            return False

    def _matches(self, pkg: str, depth: int, seen: Set[str]) -> bool:
        if not quick_pkg_match(self._text, pkg):
            return False

        if self._kind is PatternKind.ALTERNATE:
            return self._alternate_match(pkg, depth, seen)
        if self._kind is PatternKind.SIMPLE:
            return self._text == pkg
        return self._compiled.matches(pkg)  # type: ignore[union-attr]

    def _alternate_match(self, pkg: str, depth: int, seen: Set[str]) -> bool:
        """Expand csh-style alternates and match each expansion.

        Starting from the right-most ``{``, each alternative is substituted
        into the pattern and the result recompiled and matched.  Expansions
        that fail to compile are skipped.  ``seen`` holds every expansion
        already tried for ``pkg``; none of them matched, so they are not
        tried again.
        """
        if depth >= Constants.MAX_ALTERNATE_DEPTH:
            raise _ExpansionTooDeep()

        text = self._text
        i = text.rfind("{")
        while i >= 0:
            n = text.find("}", i)
            if n < 0:
                return False
            prefix, suffix = text[:i], text[n + 1:]
            for alternative in text[i + 1:n].split(","):
                expanded = prefix + alternative + suffix
                if expanded in seen:
                    continue
                seen.add(expanded)
                sub = _compile_subpattern(expanded)
                if sub is not None and sub._matches(pkg, depth + 1, seen):
                    return True
            i = text.rfind("{", 0, i)
        return False

    def pkgbase(self) -> Optional[str]:
        """Return the package base this pattern can match, if it is unambiguous.

        Useful for narrowing candidates before calling :meth:`matches`.
        Alternate patterns always return None.  Glob patterns return the
        literal prefix before the first wildcard, provided it ends in ``-``.
        """
        if self._kind is PatternKind.DEWEY:
            return self._compiled.pkgbase()  # type: ignore[union-attr]
        if self._kind is PatternKind.SIMPLE:
            base, sep, _ = self._text.rpartition("-")
            return base if sep else None
        if self._kind is PatternKind.GLOB:
            for i, c in enumerate(self._text):
                if c in Constants.GLOB_CHARS:
                    prefix = self._text[:i]
                    if prefix.endswith("-"):
                        return prefix[:-1]
                    return None
        return None

    def best_match(self, pkg1: str, pkg2: str) -> Optional[str]:
        """Return the better of two candidates, preferring the smaller name on a tie.

        This is the selection rule used by pkg_install.

        Raises:
            VersionOverflowError: A matching candidate's version overflows.
        """
        return self._best_match(pkg1, pkg2, prefer_larger=False)

    def best_match_alt_tiebreak(self, pkg1: str, pkg2: str) -> Optional[str]:
        """Return the better of two candidates, preferring the larger name on a tie.

        This is the selection rule used by pbulk.

        Raises:
            VersionOverflowError: A matching candidate's version overflows.
        """
        return self._best_match(pkg1, pkg2, prefer_larger=True)

    def _best_match(self, pkg1: str, pkg2: str, prefer_larger: bool) -> Optional[str]:
        match1 = self.matches(pkg1)
        match2 = self.matches(pkg2)
        if not match1:
            return pkg2 if match2 else None
        if not match2:
            return pkg1

        # Unlike matches(), an overflow here is an error for the caller.
        v1 = decompose(PkgName(pkg1).pkgversion)
        v2 = decompose(PkgName(pkg2).pkgversion)
        if dewey_cmp(v1, DeweyOp.GT, v2):
            return pkg1
        if dewey_cmp(v1, DeweyOp.LT, v2):
            return pkg2
        if prefer_larger:
            return max(pkg1, pkg2)
        return min(pkg1, pkg2)


@functools.lru_cache(maxsize=Constants.SUBPATTERN_CACHE_SIZE)
def _compile_subpattern(text: str) -> Optional[Pattern]:
    """Compile an expanded alternative, returning None if it is malformed."""
    try:
        return Pattern.compile(text)
    except PatternError as e:
        if is_debug_enabled(logger):
            logger.debug(
                "Skipping malformed alternate expansion",
                extra=extra_context(
                    event="decision",
                    component="pattern",
                    action="alternate_expand",
                    pattern=text,
                    outcome="invalid",
                    error=str(e),
                ),
            )
        return None
