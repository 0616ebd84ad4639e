"""
Grouped counts and overall verdict for a set of ingredients.

The verdict uses the mean score with its own thresholds, coarser than the
per-ingredient bands:
  mean <= 2 Safe, <= 4 Moderately Safe, <= 6 Use with Caution, else Potentially Unsafe.
"""
import logging
from typing import Sequence

from safety_core.models.ingredient import (
    AnalysisResult,
    Ingredient,
    OverallVerdict,
    SafetyLevel,
)

logger = logging.getLogger(__name__)

SAFE_MAX_AVERAGE = 2
MODERATELY_SAFE_MAX_AVERAGE = 4
CAUTION_MAX_AVERAGE = 6


def overall_verdict(average_score: float) -> OverallVerdict:
    if average_score <= SAFE_MAX_AVERAGE:
        return OverallVerdict.SAFE
    if average_score <= MODERATELY_SAFE_MAX_AVERAGE:
        return OverallVerdict.MODERATELY_SAFE
    if average_score <= CAUTION_MAX_AVERAGE:
        return OverallVerdict.USE_WITH_CAUTION
    return OverallVerdict.POTENTIALLY_UNSAFE


def aggregate(ingredients: Sequence[Ingredient]) -> AnalysisResult:
    """Raises ValueError on an empty sequence; callers must check for at least one ingredient."""
    if not ingredients:
        raise ValueError("aggregate requires at least one ingredient")
    counts = {level: 0 for level in SafetyLevel}
    for ing in ingredients:
        counts[ing.safety_level] += 1
    average = sum(ing.ewg_score for ing in ingredients) / len(ingredients)
    verdict = overall_verdict(average)
    logger.debug(
        "AGGREGATE total=%d high=%d moderate=%d low=%d avg=%.2f verdict=%s",
        len(ingredients), counts[SafetyLevel.HIGH], counts[SafetyLevel.MODERATE],
        counts[SafetyLevel.LOW], average, verdict.value,
    )
    return AnalysisResult(
        ingredients=tuple(ingredients),
        high_concern_count=counts[SafetyLevel.HIGH],
        moderate_concern_count=counts[SafetyLevel.MODERATE],
        low_concern_count=counts[SafetyLevel.LOW],
        average_score=average,
        verdict=verdict,
    )
