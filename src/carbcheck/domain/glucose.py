"""Glucose impact domain models."""

from enum import StrEnum

from pydantic import Field, model_validator

from carbcheck.domain.base import ValueModel

SAFE_PEAK_MG_DL = 180.0
DANGER_PEAK_MG_DL = 200.0
NORMAL_RANGE_MG_DL = (70.0, 140.0)


class RiskLevel(StrEnum):
    """Predicted glucose rise tier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_RISK_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "amber",
    RiskLevel.HIGH: "red",
}


class GlucoseImpactEstimate(ValueModel):
    """Predicted post-meal glucose peak for a carbohydrate amount."""

    baseline_glucose: float = Field(ge=0)
    glucose_rise: float = Field(ge=0)
    estimated_peak_glucose: float = Field(ge=0)
    risk_level: RiskLevel
    risk_description: str
    recommendations: str | None = None
    meal_carbs: float = Field(ge=0)
    glucose_sensitivity: float = Field(gt=0)

    @model_validator(mode="after")
    def _peak_not_below_baseline(self) -> "GlucoseImpactEstimate":
        if self.estimated_peak_glucose < self.baseline_glucose:
            raise ValueError("Peak cannot be less than baseline")
        return self

    def summary(self) -> str:
        """Return e.g. ``Peak: 158 mg/dL (+53) - Medium Risk``."""
        return (
            f"Peak: {self.estimated_peak_glucose:.0f} mg/dL "
            f"(+{self.glucose_rise:.0f}) - {self.risk_level.value.capitalize()} Risk"
        )

    def color(self) -> str:
        """Return the indicator color for the risk tier."""
        return _RISK_COLORS[self.risk_level]

    def is_safe_range(self) -> bool:
        return self.estimated_peak_glucose < SAFE_PEAK_MG_DL

    def is_normal_range(self) -> bool:
        low, high = NORMAL_RANGE_MG_DL
        return low <= self.estimated_peak_glucose <= high

    def is_danger_zone(self) -> bool:
        return self.estimated_peak_glucose > DANGER_PEAK_MG_DL


class PatientGlucoseProfile(ValueModel):
    """Patient parameters used to personalise estimates."""

    current_glucose: float = Field(ge=0)
    carb_sensitivity: float = Field(default=12.0, gt=0)
    target_glucose_min: float = 100.0
    target_glucose_max: float = 140.0
    max_glucose_threshold: float = SAFE_PEAK_MG_DL
    diabetes_type: str | None = None
    patient_id: str | None = None
