"""
Keyword classification of ingredient function and common use.

Both tables are scanned top to bottom and the first category with a keyword
found as a substring of the lower-cased name wins, so order matters:
'sodium benzoate' is a Preservative (checked before Surfactant) and
'glycerin' is an Emollient (checked before Humectant).
"""
from typing import Sequence, Tuple, TypeVar

from safety_core.models.ingredient import FunctionCategory, UseCategory

_C = TypeVar("_C")

FUNCTION_KEYWORDS: Tuple[Tuple[FunctionCategory, Tuple[str, ...]], ...] = (
    (FunctionCategory.PRESERVATIVE, ("paraben", "phenoxyethanol", "benzoate", "sorbate")),
    (FunctionCategory.SURFACTANT, ("lauryl", "laureth", "sodium", "cocamide")),
    (FunctionCategory.EMOLLIENT, ("oil", "butter", "glycerin", "lanolin")),
    (FunctionCategory.FRAGRANCE, ("fragrance", "parfum", "aroma")),
    (FunctionCategory.UV_FILTER, ("benzophenone", "avobenzone", "titanium dioxide")),
    (FunctionCategory.ANTIOXIDANT, ("tocopherol", "vitamin", "retinol")),
    (FunctionCategory.HUMECTANT, ("glycerin", "hyaluronic", "urea")),
    (FunctionCategory.EMULSIFIER, ("cetyl", "stearic", "glyceryl")),
)

USE_KEYWORDS: Tuple[Tuple[UseCategory, Tuple[str, ...]], ...] = (
    (UseCategory.MOISTURIZING, ("glycerin", "oil", "butter", "hyaluronic")),
    (UseCategory.CLEANSING, ("lauryl", "laureth", "cocamide")),
    (UseCategory.PRESERVATIVE_SYSTEM, ("paraben", "phenoxyethanol", "benzoate")),
    (UseCategory.FRAGRANCE_COMPONENT, ("fragrance", "parfum", "aroma")),
    (UseCategory.SUN_PROTECTION, ("benzophenone", "avobenzone", "titanium")),
    (UseCategory.ANTIOXIDANT_PROTECTION, ("tocopherol", "vitamin", "retinol")),
)


def _first_match(name: str, table: Sequence[Tuple[_C, Tuple[str, ...]]], default: _C) -> _C:
    lowered = (name or "").lower()
    for category, keywords in table:
        if any(k in lowered for k in keywords):
            return category
    return default


def classify_function(name: str) -> FunctionCategory:
    return _first_match(name, FUNCTION_KEYWORDS, FunctionCategory.OTHER)


def classify_use(name: str) -> UseCategory:
    return _first_match(name, USE_KEYWORDS, UseCategory.VARIOUS)
