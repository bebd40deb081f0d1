"""Version comparison and dependency pattern matching for pkgsrc packages."""

from .depend import Depend, DependType
from .dewey import DeweyOp, DeweyPattern, RangeConstraint, VersionVector, decompose, dewey_cmp
from .errors import (
    AlternateError,
    ConfigError,
    DependError,
    DeweyError,
    GlobError,
    PatternError,
    PkgPathError,
    VersionOverflowError,
)
from .pattern import Pattern, PatternKind
from .pkgname import PkgName
from .pkgpath import PkgPath
from .resolve import CandidateIndex, ResolutionResult, TieBreak, resolve, resolve_all

__all__ = [
    "AlternateError",
    "CandidateIndex",
    "ConfigError",
    "Depend",
    "DependError",
    "DependType",
    "DeweyError",
    "DeweyOp",
    "DeweyPattern",
    "GlobError",
    "Pattern",
    "PatternError",
    "PatternKind",
    "PkgName",
    "PkgPath",
    "PkgPathError",
    "RangeConstraint",
    "ResolutionResult",
    "TieBreak",
    "VersionOverflowError",
    "VersionVector",
    "decompose",
    "dewey_cmp",
    "resolve",
    "resolve_all",
]
