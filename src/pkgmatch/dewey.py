"""Package pattern matching for so-called "dewey" patterns.

A dewey pattern is a package base name followed by one or two range
operators, for example ``librsvg>=2.12<2.41``.  Versions are decomposed into
vectors of signed integers following the rules of pkg_install's dewey.c:

    Modifier(s)     Value
    alpha           -3
    beta            -2
    pre, rc         -1
    pl, _, .         0
    nb<N>           PKGREVISION, compared after everything else

Any other ASCII letter is encoded as a 0 followed by its character code, and
everything else (including non-ASCII characters) is ignored.
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .constants import Constants
from .errors import DeweyError, VersionOverflowError
from .common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")
_OPERATORS = re.compile(r"[<>]=?")


def _byte_offset(text: str, index: int) -> int:
    """Translate a character index into a UTF-8 byte offset."""
    return len(text[:index].encode("utf-8"))


def _parse_i64(digits: str) -> Optional[int]:
    """Parse a run of ASCII digits, returning None if it overflows an i64."""
    significant = digits.lstrip("0")
    # Avoid int() on absurdly long runs; nothing over 19 digits fits anyway.
    if len(significant) > 19:
        return None
    value = int(digits)
    if value > Constants.INT64_MAX:
        return None
    return value


class DeweyOp(Enum):
    """Range operators supported in dewey patterns.

    pkg_install also defines "==" and "!=" but neither documents nor
    supports them, so they are not recognised here.
    """

    GE = ">="
    GT = ">"
    LE = "<="
    LT = "<"

    def test(self, lhs: int, rhs: int) -> bool:
        """Apply the operator to two integers."""
        if self is DeweyOp.GE:
            return lhs >= rhs
        if self is DeweyOp.GT:
            return lhs > rhs
        if self is DeweyOp.LE:
            return lhs <= rhs
        return lhs < rhs

    @property
    def is_lower_bound(self) -> bool:
        return self in (DeweyOp.GT, DeweyOp.GE)


@dataclass(frozen=True)
class VersionVector:
    """A decomposed version: integer components plus a PKGREVISION.

    Only ever produced by :func:`decompose`.
    """

    components: Tuple[int, ...]
    revision: int = 0


def decompose(version: str) -> VersionVector:
    """Split a version string into a :class:`VersionVector`.

    Args:
        version: Version portion of a package name, e.g. ``1.3.2nb2``.

    Returns:
        The decomposed version.

    Raises:
        VersionOverflowError: A digit run does not fit in a signed 64-bit
            integer.  ``pos`` is the byte offset of the start of the run.
    """
    components: List[int] = []
    revision = 0
    idx = 0
    end = len(version)

    while idx < end:
        m = _DIGITS.match(version, idx)
        if m:
            value = _parse_i64(m.group())
            if value is None:
                raise VersionOverflowError(_byte_offset(version, idx))
            components.append(value)
            idx = m.end()
            continue

        c = version[idx]
        if c in Constants.VERSION_SEPARATORS:
            components.append(0)
            idx += 1
            continue

        # PKGREVISION, nb<x>.  A missing or unparseable <x> means 0.
        if version.startswith(Constants.REVISION_MARKER, idx):
            idx += len(Constants.REVISION_MARKER)
            revision = 0
            m = _DIGITS.match(version, idx)
            if m:
                revision = _parse_i64(m.group()) or 0
                idx = m.end()
            continue

        for modifier, weight in Constants.VERSION_MODIFIERS:
            if version.startswith(modifier, idx):
                components.append(weight)
                idx += len(modifier)
                break
        else:
            if c in string.ascii_letters:
                components.append(0)
                components.append(ord(c))
            idx += 1

    return VersionVector(tuple(components), revision)


def dewey_cmp(lhs: VersionVector, op: DeweyOp, rhs: VersionVector) -> bool:
    """Compare two versions using ``op``.

    Components are compared pairwise and the first difference decides.  If
    one vector is longer, its first non-zero trailing component is compared
    against 0.  Otherwise the PKGREVISIONs decide.
    """
    left = lhs.components
    right = rhs.components
    llen = len(left)
    rlen = len(right)

    for i in range(min(llen, rlen)):
        if left[i] != right[i]:
            return op.test(left[i], right[i])

    if llen < rlen:
        for value in right[llen:]:
            if value != 0:
                return op.test(0, value)
    elif llen > rlen:
        for value in left[rlen:]:
            if value != 0:
                return op.test(value, 0)

    return op.test(lhs.revision, rhs.revision)


@dataclass(frozen=True)
class RangeConstraint:
    """A single ``(operator, version)`` bound."""

    op: DeweyOp
    version: VersionVector

    def holds(self, version: VersionVector) -> bool:
        return dewey_cmp(version, self.op, self.version)


@dataclass(frozen=True)
class DeweyPattern:
    """A compiled dewey pattern.

    Example:
        >>> m = DeweyPattern.compile("pkg>=1.0<2")
        >>> m.matches("pkg-1.0rc1"), m.matches("pkg-1.0"), m.matches("pkg-2.0")
        (False, True, False)
    """

    name: str
    constraints: Tuple[RangeConstraint, ...]

    @classmethod
    def compile(cls, pattern: str) -> "DeweyPattern":
        """Compile a dewey pattern.

        Args:
            pattern: Pattern text such as ``librsvg>=2.12<2.41``.

        Returns:
            The compiled pattern.

        Raises:
            DeweyError: Zero or more than two operators, or two operators
                that are not a lower bound followed by an upper bound.
            VersionOverflowError: A bound contains an out of range number.
        """
        # (operator start, version start, operator)
        ops: List[Tuple[int, int, DeweyOp]] = [
            (m.start(), m.end(), DeweyOp(m.group()))
            for m in _OPERATORS.finditer(pattern)
        ]

        if not ops:
            raise DeweyError("No dewey operators found", 0)
        if len(ops) > 2:
            raise DeweyError(
                "Too many dewey operators found", _byte_offset(pattern, ops[2][0])
            )
        if len(ops) == 2 and not (
            ops[0][2].is_lower_bound and not ops[1][2].is_lower_bound
        ):
            raise DeweyError(
                "Unsupported operator order", _byte_offset(pattern, ops[0][0])
            )

        constraints = []
        for i, (_, vstart, op) in enumerate(ops):
            vend = ops[i + 1][0] if i + 1 < len(ops) else len(pattern)
            try:
                version = decompose(pattern[vstart:vend])
            except VersionOverflowError as e:
                raise e.shifted(_byte_offset(pattern, vstart)) from e
            constraints.append(RangeConstraint(op, version))

        compiled = cls(pattern[:ops[0][0]], tuple(constraints))
        if is_debug_enabled(logger):
            logger.debug(
                "Compiled dewey pattern",
                extra=extra_context(
                    event="compile",
                    component="dewey",
                    action="compile",
                    pattern=pattern,
                    pkgbase=compiled.name,
                    count=len(constraints),
                ),
            )
        return compiled

    def pkgbase(self) -> str:
        """Return the package base name, everything before the first operator."""
        return self.name

    def matches(self, pkg: str) -> bool:
        """Return whether ``pkg``, a full PKGNAME, satisfies every bound.

        Names without a hyphen, with a different base, or whose version
        overflows simply do not match.
        """
        base, sep, version = pkg.rpartition("-")
        if not sep or base != self.name:
            return False
        try:
            pkgver = decompose(version)
        except VersionOverflowError:
            return False
        for constraint in self.constraints:
            if not constraint.holds(pkgver):
                return False
        return True
