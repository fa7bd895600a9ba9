"""Glucose impact estimation from carbohydrate intake.

The model is linear: every 10 g of carbohydrate raises glucose by the
patient's sensitivity (mg/dL). It is a heuristic, not a glycemic simulation.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from carbcheck.domain.errors import (
    InvalidBaselineGlucose,
    InvalidCarbs,
    InvalidSensitivity,
)
from carbcheck.domain.glucose import (
    SAFE_PEAK_MG_DL,
    GlucoseImpactEstimate,
    PatientGlucoseProfile,
    RiskLevel,
)
from carbcheck.domain.nutrition import ScaledNutrition

DEFAULT_SENSITIVITY = 12.0
LOW_RISK_LIMIT = 40.0
MEDIUM_RISK_LIMIT = 80.0
REFERENCE_SERVING_GRAMS = 158.0

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationRule:
    """Advice emitted when its predicate matches (risk, carbs, rise)."""

    name: str
    applies: Callable[[RiskLevel, float, float], bool]
    message: str


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        "very_high_carbs",
        lambda risk, carbs, rise: carbs > 80,
        "Very high carbs - strongly consider reducing portion by 1/3 "
        "and adding protein/vegetables",
    ),
    RecommendationRule(
        "very_high_rise",
        lambda risk, carbs, rise: rise > 100,
        "High glycemic impact - eat smaller portions and pair with protein",
    ),
    RecommendationRule(
        "low_carb_choice",
        lambda risk, carbs, rise: risk is RiskLevel.LOW and carbs < 15,
        "Low carb content - good choice for blood sugar control",
    ),
    RecommendationRule(
        "low_risk",
        lambda risk, carbs, rise: risk is RiskLevel.LOW,
        "Acceptable portion - monitor effects",
    ),
    RecommendationRule(
        "medium_risk_heavy",
        lambda risk, carbs, rise: risk is RiskLevel.MEDIUM and carbs > 50,
        "Pair with protein or fat to slow absorption",
    ),
    RecommendationRule(
        "medium_risk",
        lambda risk, carbs, rise: risk is RiskLevel.MEDIUM,
        "Moderate carbs - pair with fiber or protein",
    ),
    RecommendationRule(
        "high_risk",
        lambda risk, carbs, rise: risk is RiskLevel.HIGH,
        "Consider skipping or reducing to Small portion",
    ),
)

MANAGEMENT_TIPS: tuple[str, ...] = (
    "Pair carbs with protein or fat to slow absorption",
    "Eat vegetables before carbs to improve glucose response",
    "Stay hydrated - affects glucose metabolism",
    "Walk 10-15 minutes after eating to lower peak glucose",
    "Choose complex carbs over simple sugars",
    "Eat smaller portions more frequently",
    "Maintain consistent meal times",
    "Exercise regularly improves insulin sensitivity",
    "Manage stress - cortisol affects glucose",
    "Get adequate sleep - improves glucose control",
)

_TIME_TO_PEAK_BASE_MINUTES = {"simple": 20, "complex": 35, "mixed": 50}
_TARGET_RANGES = {
    "type1": (100.0, 140.0),
    "type2": (100.0, 150.0),
    "gestational": (95.0, 140.0),
}
_SAFE_THRESHOLDS = {"gestational": 160.0}


def glucose_rise(carbs: float, sensitivity: float) -> float:
    """Return (carbs / 10) x sensitivity, rounded half up to 1 decimal.

    Raises:
        InvalidCarbs: if carbs is negative.
        InvalidSensitivity: if sensitivity is not positive.
    """
    if carbs < 0:
        raise InvalidCarbs(f"Carbs must be >= 0, got {carbs}")
    if sensitivity <= 0:
        raise InvalidSensitivity(f"Glucose sensitivity must be > 0, got {sensitivity}")
    rise = Decimal(repr(carbs / 10 * sensitivity))
    return float(rise.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def risk_level(rise: float) -> RiskLevel:
    """Classify a rise: low below 40, medium 40..80 inclusive, high above."""
    if rise < LOW_RISK_LIMIT:
        return RiskLevel.LOW
    if rise <= MEDIUM_RISK_LIMIT:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def describe_risk(rise: float, carbs: float, level: RiskLevel) -> str:
    if level is RiskLevel.LOW:
        return f"Low rise ({rise:.0f} mg/dL) - Safe for most"
    if level is RiskLevel.MEDIUM:
        return f"Medium rise ({rise:.0f} mg/dL) - Acceptable intake"
    return (
        f"High rise ({rise:.0f} mg/dL) - High carbs ({carbs:.1f} g), "
        "consider smaller portion or pairing with protein"
    )


def recommend(level: RiskLevel, carbs: float, rise: float) -> str | None:
    """Return the message of the first matching recommendation rule."""
    for rule in RECOMMENDATION_RULES:
        if rule.applies(level, carbs, rise):
            return rule.message
    return None


def estimate(
    baseline_glucose: float, carbs: float, sensitivity: float = DEFAULT_SENSITIVITY
) -> GlucoseImpactEstimate:
    """Estimate the glucose peak for a carbohydrate amount.

    Raises:
        InvalidBaselineGlucose: if the baseline is negative.
        InvalidCarbs: if carbs is negative.
        InvalidSensitivity: if sensitivity is not positive.
    """
    if baseline_glucose < 0:
        raise InvalidBaselineGlucose(
            f"Baseline glucose must be >= 0, got {baseline_glucose}"
        )
    rise = glucose_rise(carbs, sensitivity)
    level = risk_level(rise)
    return GlucoseImpactEstimate(
        baseline_glucose=baseline_glucose,
        glucose_rise=rise,
        estimated_peak_glucose=baseline_glucose + rise,
        risk_level=level,
        risk_description=describe_risk(rise, carbs, level),
        recommendations=recommend(level, carbs, rise),
        meal_carbs=carbs,
        glucose_sensitivity=sensitivity,
    )


def no_impact(
    baseline_glucose: float, sensitivity: float = DEFAULT_SENSITIVITY
) -> GlucoseImpactEstimate:
    """Return the estimate for an empty meal."""
    if baseline_glucose < 0:
        raise InvalidBaselineGlucose(
            f"Baseline glucose must be >= 0, got {baseline_glucose}"
        )
    if sensitivity <= 0:
        raise InvalidSensitivity(f"Glucose sensitivity must be > 0, got {sensitivity}")
    return GlucoseImpactEstimate(
        baseline_glucose=baseline_glucose,
        glucose_rise=0.0,
        estimated_peak_glucose=baseline_glucose,
        risk_level=RiskLevel.LOW,
        risk_description="No food - no glucose impact",
        meal_carbs=0.0,
        glucose_sensitivity=sensitivity,
    )


@dataclass
class GlucoseImpactService:
    """Applies the linear glucose model with a configured default sensitivity."""

    default_sensitivity: float = DEFAULT_SENSITIVITY

    def estimate_food(
        self,
        item: ScaledNutrition,
        baseline_glucose: float,
        sensitivity: float | None = None,
    ) -> GlucoseImpactEstimate:
        """Estimate the impact of a single scaled food."""
        result = estimate(baseline_glucose, item.carbs, self._sensitivity(sensitivity))
        _logger.info("Glucose impact for %s: %s", item.food_name, result.summary())
        return result

    def estimate_meal(
        self,
        items: Sequence[ScaledNutrition],
        baseline_glucose: float,
        sensitivity: float | None = None,
    ) -> GlucoseImpactEstimate:
        """Estimate the impact of a meal from the sum of its carbs."""
        resolved = self._sensitivity(sensitivity)
        if not items:
            return no_impact(baseline_glucose, resolved)
        total_carbs = sum(item.carbs for item in items)
        result = estimate(baseline_glucose, total_carbs, resolved)
        _logger.info(
            "Meal glucose impact for %s foods: %s", len(items), result.summary()
        )
        return result

    def estimate_for_profile(
        self, profile: PatientGlucoseProfile, carbs: float
    ) -> GlucoseImpactEstimate:
        return estimate(profile.current_glucose, carbs, profile.carb_sensitivity)

    def compare_portions(
        self,
        carbs: float,
        baseline_glucose: float,
        portions: Sequence[float],
        sensitivity: float | None = None,
        standard_grams: float = REFERENCE_SERVING_GRAMS,
    ) -> dict[float, GlucoseImpactEstimate]:
        """Estimate the impact of ``carbs`` scaled to each portion weight.

        ``carbs`` is the amount in one ``standard_grams`` serving.
        """
        resolved = self._sensitivity(sensitivity)
        return {
            portion: estimate(
                baseline_glucose, carbs * (portion / standard_grams), resolved
            )
            for portion in portions
        }

    def _sensitivity(self, sensitivity: float | None) -> float:
        return self.default_sensitivity if sensitivity is None else sensitivity


def time_to_peak(carbs: float, food_type: str = "complex") -> int:
    """Return the approximate minutes until the glucose peak."""
    base = _TIME_TO_PEAK_BASE_MINUTES.get(food_type.lower(), 45)
    return int(base + carbs / 50 * 10)


def safe_threshold(diabetes_type: str | None) -> float:
    return _SAFE_THRESHOLDS.get((diabetes_type or "").lower(), SAFE_PEAK_MG_DL)


def target_range(diabetes_type: str | None) -> tuple[float, float]:
    return _TARGET_RANGES.get((diabetes_type or "").lower(), (100.0, 140.0))


def is_in_target_range(
    result: GlucoseImpactEstimate, min_target: float, max_target: float
) -> bool:
    return min_target <= result.estimated_peak_glucose <= max_target


def risk_breakdown(estimates: Sequence[GlucoseImpactEstimate]) -> dict[str, int]:
    breakdown = {level.value: 0 for level in RiskLevel}
    for item in estimates:
        breakdown[item.risk_level.value] += 1
    return breakdown


def average_rise(estimates: Sequence[GlucoseImpactEstimate]) -> float:
    if not estimates:
        return 0.0
    return sum(item.glucose_rise for item in estimates) / len(estimates)


def management_tips() -> list[str]:
    return list(MANAGEMENT_TIPS)


def assess_overall_risk(estimates: Sequence[GlucoseImpactEstimate]) -> str:
    """Summarise the risk across several meals."""
    if not estimates:
        return "No data"
    breakdown = risk_breakdown(estimates)
    highs = breakdown[RiskLevel.HIGH.value]
    mediums = breakdown[RiskLevel.MEDIUM.value]
    if highs > len(estimates) / 2:
        return "High risk - multiple meals with high glucose impact"
    if highs > 0:
        return "Moderate risk - some meals with high glucose impact"
    if mediums > len(estimates) / 2:
        return "Low-moderate risk - mostly medium impact meals"
    return "Low risk - good glucose control"
