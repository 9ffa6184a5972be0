"""
Status enums for the three-band program classification.

Each distinct input value ends up in exactly one band:
1. Confident (score >= 90) - mapped to the best canonical program
2. Uncertain (70 <= score < 90) - best guess kept for operator review
3. Unmapped (score < 70, or left unmapped manually) - no target
"""

from enum import Enum


class MappingStatus(Enum):
    """Classification status of one distinct input value."""
    CONFIDENT = "confident"      # Score >= 90 or manual override to a program
    UNCERTAIN = "uncertain"      # 70 <= score < 90, needs review
    UNMAPPED = "unmapped"        # Score < 70 or explicitly left unmapped


class MappingFilter(Enum):
    """Filter applied when querying the mapping store."""
    ALL = "all"
    CONFIDENT = "confident"
    UNCERTAIN = "uncertain"
    UNMAPPED = "unmapped"

    def accepts(self, status: MappingStatus) -> bool:
        """Return True if a mapping with ``status`` passes this filter."""
        if self is MappingFilter.ALL:
            return True
        return self.value == status.value
