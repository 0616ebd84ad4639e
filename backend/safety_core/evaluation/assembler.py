"""
Build one Ingredient record from a candidate name and optional lookup data.
"""
from typing import Optional

from safety_core.classification.classifier import classify_function, classify_use
from safety_core.models.ingredient import (
    DEFAULT_SCORE,
    LIMITED_DATA_MESSAGE,
    AuthoritativeData,
    Ingredient,
    default_concern_for,
)
from safety_core.normalization.tokenizer import format_display_name


def assemble(name: str, authoritative: Optional[AuthoritativeData]) -> Ingredient:
    """
    With lookup data: its score, and its concerns or the generic band message.
    Without: score 5 and "Limited safety data available".
    Function and common use always come from the keyword classifier.
    """
    if authoritative is not None:
        score = authoritative.score
        reason = authoritative.concerns or default_concern_for(score)
    else:
        score = DEFAULT_SCORE
        reason = LIMITED_DATA_MESSAGE
    return Ingredient(
        name=format_display_name(name),
        function=classify_function(name),
        common_use=classify_use(name),
        ewg_score=score,
        reason_for_concern=reason,
    )
