"""Resolve dependency patterns against a set of available package names.

Candidates are indexed by PKGBASE so that each pattern only has to be matched
against the packages that could possibly satisfy it.  Matching candidates are
folded pairwise through :meth:`Pattern.best_match` (or its pbulk variant) to
pick a single winner.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .pattern import Pattern
from .pkgname import PkgName
from .common.logging_utils import Timer, extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


class TieBreak(Enum):
    """Which name wins when two candidates have equal versions."""

    PKG_INSTALL = "pkg_install"  # lexicographically smaller
    PBULK = "pbulk"  # lexicographically larger


@dataclass
class ResolutionResult:
    """Resolution outcome for a single pattern."""

    pattern: str
    resolved: Optional[str]
    candidate_count: int
    match_count: int


class CandidateIndex:
    """Available package names grouped by PKGBASE."""

    def __init__(self, pkgnames: Iterable[str]):
        self._all: List[str] = []
        self._by_base: Dict[str, List[str]] = defaultdict(list)
        for name in pkgnames:
            self._all.append(name)
            self._by_base[PkgName(name).pkgbase].append(name)

    def __len__(self) -> int:
        return len(self._all)

    def candidates(self, pattern: Pattern) -> Sequence[str]:
        """Return the names worth matching against ``pattern``."""
        base = pattern.pkgbase()
        if base is None:
            return self._all
        return self._by_base.get(base, ())


def resolve(
    pattern: Pattern,
    index: CandidateIndex,
    tiebreak: TieBreak = TieBreak.PKG_INSTALL,
) -> ResolutionResult:
    """Pick the best package in ``index`` satisfying ``pattern``.

    Raises:
        VersionOverflowError: Two matching candidates could not be compared.
    """
    pick = (
        pattern.best_match_alt_tiebreak
        if tiebreak is TieBreak.PBULK
        else pattern.best_match
    )
    candidates = index.candidates(pattern)
    best: Optional[str] = None
    matched = 0
    for candidate in candidates:
        if not pattern.matches(candidate):
            continue
        matched += 1
        best = candidate if best is None else pick(best, candidate)

    return ResolutionResult(
        pattern=pattern.raw_text(),
        resolved=best,
        candidate_count=len(candidates),
        match_count=matched,
    )


def resolve_all(
    patterns: Iterable[Union[str, Pattern]],
    pkgnames: Iterable[str],
    tiebreak: TieBreak = TieBreak.PKG_INSTALL,
) -> List[ResolutionResult]:
    """Resolve every pattern against the same set of package names.

    Args:
        patterns: Pattern strings or compiled patterns.
        pkgnames: Available package names.
        tiebreak: Selection rule for equal versions.

    Returns:
        One result per pattern, in input order.

    Raises:
        PatternError: A pattern string fails to compile.
        VersionOverflowError: Two matching candidates could not be compared.
    """
    index = pkgnames if isinstance(pkgnames, CandidateIndex) else CandidateIndex(pkgnames)
    results: List[ResolutionResult] = []
    with Timer() as t:
        for item in patterns:
            pattern = item if isinstance(item, Pattern) else Pattern.compile(item)
            results.append(resolve(pattern, index, tiebreak))

    if is_debug_enabled(logger):
        logger.debug(
            "Resolved patterns",
            extra=extra_context(
                event="resolve",
                component="resolve",
                action="resolve_all",
                count=len(results),
                unresolved=sum(1 for r in results if r.resolved is None),
                candidates=len(index),
                tiebreak=tiebreak.value,
                duration_ms=t.duration_ms(),
            ),
        )
    return results
