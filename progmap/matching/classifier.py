"""Threshold classification of match results.

The cut points are fixed: 90 and above is confident, 70 up to 89 is
uncertain, anything below 70 is unmapped.
"""

from progmap.models import Mapping, MappingStatus, MatchResult

CONFIDENT_THRESHOLD = 90
UNCERTAIN_THRESHOLD = 70


def score_band(score: int) -> MappingStatus:
    """Return the status band a score falls into."""
    if score >= CONFIDENT_THRESHOLD:
        return MappingStatus.CONFIDENT
    if score >= UNCERTAIN_THRESHOLD:
        return MappingStatus.UNCERTAIN
    return MappingStatus.UNMAPPED


def classify(result: MatchResult) -> Mapping:
    """Turn a MatchResult into a Mapping.

    Uncertain results keep their best candidate so an operator can confirm
    it; unmapped results drop it.

    Args:
        result: Output of the matcher for one input value.

    Returns:
        A new Mapping carrying the result's score.
    """
    status = score_band(result.score)
    if status is MappingStatus.UNMAPPED:
        return Mapping(mapped_to=None, score=result.score, status=status)
    return Mapping(mapped_to=result.best_candidate, score=result.score, status=status)
