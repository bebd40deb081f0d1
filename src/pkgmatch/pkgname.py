"""Split a PKGNAME into its base, version and revision."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from .constants import Constants

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")


def _parse_revision(text: str) -> int:
    """Parse a PKGREVISION suffix; anything that is not an i64 counts as 0."""
    if not _SIGNED_INT.fullmatch(text):
        return 0
    value = int(text)
    if not -Constants.INT64_MAX - 1 <= value <= Constants.INT64_MAX:
        return 0
    return value


@dataclass(frozen=True, order=True)
class PkgName:
    """A package name of the form ``BASE-VERSION``.

    The name is split on the final hyphen, so a hyphen inside the version
    produces an unexpected split; this matches how pkgsrc itself behaves.

    Example:
        >>> pkg = PkgName("mktool-1.3.2nb2")
        >>> pkg.pkgbase, pkg.pkgversion, pkg.pkgrevision
        ('mktool', '1.3.2nb2', 2)
        >>> PkgName("mktool").pkgversion
        ''
    """

    pkgname: str
    pkgbase: str = field(init=False, compare=False)
    pkgversion: str = field(init=False, compare=False)
    pkgrevision: Optional[int] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        base, sep, version = self.pkgname.rpartition("-")
        if not sep:
            base, version = self.pkgname, ""
        _, marker, rev = version.rpartition(Constants.REVISION_MARKER)
        revision = _parse_revision(rev) if marker else None
        # frozen dataclass: derived fields are set once here.
        object.__setattr__(self, "pkgbase", base)
        object.__setattr__(self, "pkgversion", version)
        object.__setattr__(self, "pkgrevision", revision)

    def __str__(self) -> str:
        return self.pkgname
