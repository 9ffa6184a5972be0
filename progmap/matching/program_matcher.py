"""Best-match selection of canonical programs.

This module provides the ProgramMatcher class which scores one input value
against an ordered list of canonical program names and keeps the best one.

Example:
    >>> from progmap.matching import ProgramMatcher
    >>> matcher = ProgramMatcher()
    >>> result = matcher.find_best_match(
    ...     "business administration",
    ...     ["Business Administration", "Computer Science"],
    ... )
    >>> result.best_candidate, result.score
    ('Business Administration', 100)
"""

from typing import Dict, Sequence, Tuple

from progmap.models import Mapping, MatchResult

from .classifier import classify
from .scoring import similarity


class ProgramMatcher:
    """Finds the highest-scoring canonical program for an input value.

    Candidates are scored in list order and a candidate only replaces the
    current best when its score is strictly greater, so on a tie the first
    candidate in the list wins. Results are memoized per instance.

    Example:
        >>> matcher = ProgramMatcher()
        >>> matcher.match("Nursin", ["Nursing"]).status
        <MappingStatus.UNCERTAIN: 'uncertain'>
    """

    def __init__(self) -> None:
        self._cache: Dict[Tuple[str, Tuple[str, ...]], MatchResult] = {}

    def find_best_match(self, value: str, candidates: Sequence[str]) -> MatchResult:
        """Find the best candidate for ``value``.

        Args:
            value: Trimmed input value.
            candidates: Canonical program names, in priority order.

        Returns:
            MatchResult with the winning candidate and its score, or
            ``MatchResult(None, 0)`` when no candidate scores above zero
            (including an empty candidate list).
        """
        key = (value, tuple(candidates))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        best_candidate = None
        best_score = 0

        for candidate in candidates:
            score = similarity(value, candidate)
            if score > best_score:
                best_score = score
                best_candidate = candidate

        result = MatchResult(best_candidate=best_candidate, score=best_score)
        self._cache[key] = result
        return result

    def match(self, value: str, candidates: Sequence[str]) -> Mapping:
        """Find the best candidate for ``value`` and classify it."""
        return classify(self.find_best_match(value, candidates))

    def clear_cache(self) -> None:
        """Forget memoized results."""
        self._cache.clear()
