"""Handling for ``PKGPATH`` metadata and relative package directory locations.

Binary packages record ``PKGPATH`` as ``pkgtools/pkg_install``, while
dependencies inside pkgsrc refer to the same directory relatively as
``../../pkgtools/pkg_install``.  :class:`PkgPath` accepts either form and
exposes both.

Example:
    >>> p = PkgPath("../../pkgtools/pkg_install")
    >>> str(p.as_path()), str(p.as_full_path())
    ('pkgtools/pkg_install', '../../pkgtools/pkg_install')
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List

from .errors import PkgPathError


def _components(path: str) -> List[str]:
    """Split ``path`` the way a path library would.

    Empty and interior ``.`` components are dropped; a leading ``.`` and a
    leading root are kept so they can be rejected.
    """
    parts = path.split("/")
    result = []
    if path.startswith("/"):
        result.append("/")
    for i, part in enumerate(parts):
        if part == "":
            continue
        if part == "." and (i > 0 or result):
            continue
        result.append(part)
    return result


def _is_normal(part: str) -> bool:
    return part not in ("/", ".", "..")


class PkgPath:
    """A validated package directory path."""

    __slots__ = ("_short", "_full")

    def __init__(self, path: str):
        parts = _components(path)
        if len(parts) == 2 and all(_is_normal(p) for p in parts):
            short = PurePosixPath(*parts)
        elif (
            len(parts) == 4
            and parts[0] == ".."
            and parts[1] == ".."
            and _is_normal(parts[2])
            and _is_normal(parts[3])
        ):
            short = PurePosixPath(parts[2], parts[3])
        else:
            raise PkgPathError()
        self._short = short
        self._full = PurePosixPath("..", "..", short)

    def as_path(self) -> PurePosixPath:
        """Return the short form, for example ``pkgtools/pkg_install``."""
        return self._short

    def as_full_path(self) -> PurePosixPath:
        """Return the relative form, for example ``../../pkgtools/pkg_install``."""
        return self._full

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PkgPath):
            return NotImplemented
        return self._short == other._short

    def __hash__(self) -> int:
        return hash(self._short)

    def __str__(self) -> str:
        return str(self._short)

    def __repr__(self) -> str:
        return f"PkgPath({str(self._short)!r})"
