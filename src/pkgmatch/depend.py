"""Parsing for ``DEPENDS``-style entries of the form ``PATTERN:PKGPATH``."""

from __future__ import annotations

from enum import Enum

from .errors import DependError, PatternError, PkgPathError
from .pattern import Pattern
from .pkgpath import PkgPath


class DependType(Enum):
    """How a dependency is used by the package that declares it."""

    FULL = "full"  # DEPENDS, the default
    BUILD = "build"  # BUILD_DEPENDS
    BOOTSTRAP = "bootstrap"  # needed by the pkgsrc infrastructure itself
    TOOL = "tool"  # USE_TOOLS / TOOL_DEPENDS
    TEST = "test"  # TEST_DEPENDS


class Depend:
    """A single dependency: a package pattern and the directory providing it.

    Note that when several packages satisfy the pattern, the package that is
    eventually chosen may come from a different ``PKGPATH``.

    Example:
        >>> dep = Depend("mktools-[0-9]*:../../pkgtools/mktools")
        >>> dep.pattern.raw_text(), str(dep.pkgpath)
        ('mktools-[0-9]*', 'pkgtools/mktools')
    """

    __slots__ = ("_pattern", "_pkgpath", "_type")

    def __init__(self, text: str, dep_type: DependType = DependType.FULL):
        parts = text.split(":")
        if len(parts) != 2:
            raise DependError(f"Invalid dependency: {text!r}")
        try:
            self._pkgpath = PkgPath(parts[1])
        except PkgPathError as e:
            raise DependError(f"Invalid dependency path: {parts[1]!r}") from e
        try:
            self._pattern = Pattern.compile(parts[0])
        except PatternError as e:
            raise DependError(f"Invalid dependency pattern: {parts[0]!r}: {e}") from e
        self._type = dep_type

    @property
    def pattern(self) -> Pattern:
        return self._pattern

    @property
    def pkgpath(self) -> PkgPath:
        return self._pkgpath

    @property
    def dep_type(self) -> DependType:
        return self._type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Depend):
            return NotImplemented
        return (self._pattern, self._pkgpath, self._type) == (
            other._pattern,
            other._pkgpath,
            other._type,
        )

    def __hash__(self) -> int:
        return hash((self._pattern, self._pkgpath, self._type))

    def __str__(self) -> str:
        return f"{self._pattern}:{self._pkgpath.as_full_path()}"

    def __repr__(self) -> str:
        return f"Depend({str(self)!r})"
