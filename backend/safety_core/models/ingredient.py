"""
Value records for ingredient analysis. Safety level is always derived from the score.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

MIN_SCORE = 0
MAX_SCORE = 10
DEFAULT_SCORE = 5

# Per-ingredient bands: score <= LOW_CONCERN_MAX is low, <= MODERATE_CONCERN_MAX is moderate
LOW_CONCERN_MAX = 2
MODERATE_CONCERN_MAX = 6

LIMITED_DATA_MESSAGE = "Limited safety data available"


class FunctionCategory(str, Enum):
    PRESERVATIVE = "Preservative"
    SURFACTANT = "Surfactant"
    EMOLLIENT = "Emollient"
    FRAGRANCE = "Fragrance"
    UV_FILTER = "UV Filter"
    ANTIOXIDANT = "Antioxidant"
    HUMECTANT = "Humectant"
    EMULSIFIER = "Emulsifier"
    OTHER = "Other/Unknown"


class UseCategory(str, Enum):
    MOISTURIZING = "Moisturizing agent"
    CLEANSING = "Cleansing agent"
    PRESERVATIVE_SYSTEM = "Preservative system"
    FRAGRANCE_COMPONENT = "Fragrance component"
    SUN_PROTECTION = "Sun protection"
    ANTIOXIDANT_PROTECTION = "Antioxidant protection"
    VARIOUS = "Various applications"


class SafetyLevel(str, Enum):
    LOW = "Low Concern"
    MODERATE = "Moderate Concern"
    HIGH = "High Concern"


class OverallVerdict(str, Enum):
    SAFE = "Safe"
    MODERATELY_SAFE = "Moderately Safe"
    USE_WITH_CAUTION = "Use with Caution"
    POTENTIALLY_UNSAFE = "Potentially Unsafe"


_DEFAULT_CONCERNS = {
    SafetyLevel.LOW: "Generally recognized as safe",
    SafetyLevel.MODERATE: "Moderate safety concerns, more research needed",
    SafetyLevel.HIGH: "High safety concerns, potential health risks",
}


def _check_score(score: int) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"score must be an int, got {score!r}")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValueError(f"score must be in [{MIN_SCORE}, {MAX_SCORE}], got {score}")


def safety_level_for(score: int) -> SafetyLevel:
    if score <= LOW_CONCERN_MAX:
        return SafetyLevel.LOW
    if score <= MODERATE_CONCERN_MAX:
        return SafetyLevel.MODERATE
    return SafetyLevel.HIGH


def default_concern_for(score: int) -> str:
    """Generic reason text for a score band, used when no hazard phrases are listed."""
    return _DEFAULT_CONCERNS[safety_level_for(score)]


@dataclass(frozen=True)
class AuthoritativeData:
    """Hazard data found by the safety lookup service."""
    score: int
    concerns: str = ""

    def __post_init__(self) -> None:
        _check_score(self.score)


@dataclass(frozen=True)
class Ingredient:
    name: str
    function: FunctionCategory
    common_use: UseCategory
    ewg_score: int = DEFAULT_SCORE
    reason_for_concern: str = LIMITED_DATA_MESSAGE

    def __post_init__(self) -> None:
        _check_score(self.ewg_score)

    @property
    def safety_level(self) -> SafetyLevel:
        return safety_level_for(self.ewg_score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "function": self.function.value,
            "common_use": self.common_use.value,
            "ewg_score": self.ewg_score,
            "safety_level": self.safety_level.value,
            "reason_for_concern": self.reason_for_concern,
        }


@dataclass(frozen=True)
class AnalysisResult:
    ingredients: Tuple[Ingredient, ...]
    high_concern_count: int
    moderate_concern_count: int
    low_concern_count: int
    average_score: float
    verdict: OverallVerdict

    @property
    def total(self) -> int:
        return len(self.ingredients)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "total": self.total,
            "high_concern_count": self.high_concern_count,
            "moderate_concern_count": self.moderate_concern_count,
            "low_concern_count": self.low_concern_count,
            "average_score": round(self.average_score, 2),
            "verdict": self.verdict.value,
        }
