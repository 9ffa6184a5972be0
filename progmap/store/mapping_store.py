"""Mapping store holding the current classification of every input value.

This module provides the MappingStore class, an insertion-ordered store keyed
by trimmed input value. A matching pass replaces its whole content; manual
overrides then replace single entries until the next pass.

Example:
    >>> from progmap.store import MappingStore
    >>> store = MappingStore()
    >>> store.run_matching_pass(["Law", "MED"], ["Law", "Medicine"])
    >>> store.summary_counts()
    MappingSummary(confident=1, uncertain=0, unmapped=1)
    >>> store.override("MED", target="Medicine")
    True
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from progmap.matching import ProgramMatcher
from progmap.models import (
    Mapping,
    MappingFilter,
    MappingStatus,
    MappingSummary,
)


class MappingStore:
    """Key-value store of Mapping objects keyed by input value.

    Iteration order is the insertion order of the matching pass, which is
    the first-seen order of the input values.

    Args:
        matcher: Optional ProgramMatcher. A new one is created if omitted.
    """

    MANUAL_SCORE = 100

    def __init__(self, matcher: Optional[ProgramMatcher] = None) -> None:
        self._matcher = matcher if matcher is not None else ProgramMatcher()
        self._mappings: Dict[str, Mapping] = {}

    def __len__(self) -> int:
        return len(self._mappings)

    def __contains__(self, value: object) -> bool:
        return value in self._mappings

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)

    def get(self, value: str) -> Optional[Mapping]:
        """Return the mapping for ``value``, or None if it is not stored."""
        return self._mappings.get(value)

    def clear(self) -> None:
        """Drop every mapping and the matcher's memoized results."""
        self._mappings.clear()
        self._matcher.clear_cache()

    def snapshot(self) -> Dict[str, Mapping]:
        """Return a copy of the current content, in iteration order."""
        return dict(self._mappings)

    def run_matching_pass(
        self,
        inputs: Iterable[str],
        candidates: Sequence[str],
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> None:
        """Replace the store content with fresh classifications.

        The new content is built completely before it replaces the old one,
        so an interrupted pass leaves the previous state in place. Memoized
        match results only live for the duration of one pass.

        Args:
            inputs: Distinct input values, in the order they should be stored.
            candidates: Canonical program names.
            progress_callback: Optional function called with the number of
                processed inputs after each one.
        """
        self._matcher.clear_cache()
        fresh: Dict[str, Mapping] = {}
        for processed, value in enumerate(inputs, start=1):
            fresh[value] = self._matcher.match(value, candidates)
            if progress_callback is not None:
                progress_callback(processed)

        self._mappings.clear()
        self._mappings.update(fresh)

    def override(
        self,
        value: str,
        target: Optional[str] = None,
        leave_unmapped: bool = False,
    ) -> bool:
        """Manually set the mapping of one input value.

        ``leave_unmapped`` takes precedence over ``target``. The target is
        not checked against the canonical list.

        Args:
            value: Input value to override.
            target: Canonical program to map to.
            leave_unmapped: Explicitly mark the value as unmapped.

        Returns:
            True if the mapping was replaced, False if nothing was chosen.

        Raises:
            KeyError: If ``value`` is not in the store.
        """
        if value not in self._mappings:
            raise KeyError(value)

        if leave_unmapped:
            self._mappings[value] = Mapping(
                mapped_to=None, score=0, status=MappingStatus.UNMAPPED
            )
            return True

        if target:
            self._mappings[value] = Mapping(
                mapped_to=target,
                score=self.MANUAL_SCORE,
                status=MappingStatus.CONFIDENT,
            )
            return True

        return False

    def query(
        self, mapping_filter: MappingFilter = MappingFilter.ALL
    ) -> List[Tuple[str, Mapping]]:
        """Return (value, mapping) pairs in store order, filtered by status."""
        return [
            (value, mapping)
            for value, mapping in self._mappings.items()
            if mapping_filter.accepts(mapping.status)
        ]

    def summary_counts(self) -> MappingSummary:
        """Count entries per status."""
        summary = MappingSummary()
        for mapping in self._mappings.values():
            if mapping.status is MappingStatus.CONFIDENT:
                summary.confident += 1
            elif mapping.status is MappingStatus.UNCERTAIN:
                summary.uncertain += 1
            else:
                summary.unmapped += 1
        return summary
