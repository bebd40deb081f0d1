"""Shell-style glob patterns such as ``mutt-[0-9]*``.

Matching is delegated to :mod:`fnmatch`; this module only adds the stricter
compile-time validation package patterns have always had, so that typos like
``foo-[0-9`` are reported instead of silently matched literally.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field

from .errors import GlobError


def _check_class(pattern: str, start: int) -> int:
    """Return the index just past the ``]`` closing the class at ``start``."""
    j = start + 1
    n = len(pattern)
    if j < n and pattern[j] == "!":
        j += 1
    # A leading "]" is a literal member of the class.
    if j < n and pattern[j] == "]":
        j += 1
    while j < n and pattern[j] != "]":
        j += 1
    if j >= n:
        raise GlobError("invalid range pattern", start)
    return j + 1


def _check_wildcards(pattern: str, start: int) -> int:
    """Validate a run of ``*`` beginning at ``start``; return the index past it."""
    j = start
    n = len(pattern)
    while j < n and pattern[j] == "*":
        j += 1
    run = j - start
    if run > 2:
        raise GlobError("wildcards are either regular `*` or recursive `**`", start + 2)
    if run == 2:
        before_ok = start == 0 or pattern[start - 1] == "/"
        after_ok = j == n or pattern[j] == "/"
        if not (before_ok and after_ok):
            raise GlobError("recursive wildcards must form a single path component", start)
    return j


def validate(pattern: str) -> None:
    """Raise :class:`GlobError` if ``pattern`` is not a well formed glob."""
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "[":
            i = _check_class(pattern, i)
        elif c == "*":
            i = _check_wildcards(pattern, i)
        else:
            i += 1


@dataclass(frozen=True)
class GlobPattern:
    """A compiled, case-sensitive glob matched against the whole name."""

    pattern: str
    regex: "re.Pattern[str]" = field(repr=False, compare=False)

    @classmethod
    def compile(cls, pattern: str) -> "GlobPattern":
        validate(pattern)
        return cls(pattern, re.compile(fnmatch.translate(pattern)))

    def matches(self, pkg: str) -> bool:
        return self.regex.match(pkg) is not None
