from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SmokingStatus(str, Enum):
    NEVER = "Never"
    FORMER = "Former"
    LIGHT = "Light"
    HEAVY = "Heavy"


class RespiratoryDisease(str, Enum):
    ASTHMA = "Asthma"
    COPD = "COPD"
    BRONCHITIS = "Chronic Bronchitis"
    EMPHYSEMA = "Emphysema"
    SLEEP_APNEA = "Sleep Apnea"
    FIBROSIS = "Pulmonary Fibrosis"
    CYSTIC_FIBROSIS = "Cystic Fibrosis"
    PNEUMONIA_HISTORY = "Frequent Pneumonia"


class _Snapshot(BaseModel):
    # Immutable once built; accepts both snake_case and camelCase keys
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class HealthData(_Snapshot):
    """
    Vitals submitted by a user. Only structural typing happens here,
    physiological range checks live in src.utils.validation.
    """
    age: int
    systolic_bp: int = Field(..., alias="systolicBP")
    diastolic_bp: int = Field(..., alias="diastolicBP")
    sugar_level: float = Field(..., alias="sugarLevel", description="Blood sugar in mg/dL")
    smoking_status: SmokingStatus = Field(..., alias="smokingStatus")
    has_respiratory_problem: bool = Field(False, alias="hasRespiratoryProblem")
    selected_diseases: Tuple[RespiratoryDisease, ...] = Field((), alias="selectedDiseases")

    @field_validator("selected_diseases")
    @classmethod
    def _collapse_duplicates(cls, diseases):
        # Keep first occurrence so the "first selected disease" stays stable
        return tuple(dict.fromkeys(diseases))


class Coordinates(_Snapshot):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class GroundingSource(_Snapshot):
    title: str = ""
    uri: str


class AQIData(_Snapshot):
    aqi: int = Field(..., ge=0)
    city: str
    dominant_pollutant: str = Field("N/A", alias="dominantPollutant")
    status: str
    source: str
    grounding_sources: Optional[Tuple[GroundingSource, ...]] = Field(None, alias="groundingSources")


class BreathAnalysis(_Snapshot):
    score: int = Field(..., ge=5, le=100)
    summary: str
    recommendations: Tuple[str, ...]
    risk_factors: Tuple[str, ...] = Field((), alias="riskFactors")


class SavedAnalysis(_Snapshot):
    id: str
    timestamp: str = Field(..., description="ISO8601 timestamp of when the analysis was archived")
    health_data: HealthData = Field(..., alias="healthData")
    analysis: BreathAnalysis
    aqi: Optional[AQIData] = None


class NutritionalRequirement(_Snapshot):
    nutrient: str
    reason: str
    sources: Tuple[str, ...]
    impact: Literal["High", "Medium"]


# --- API payloads ---

class BreathAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    health_data: HealthData = Field(..., alias="healthData")
    aqi: Optional[AQIData] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coordinates_come_in_pairs(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be sent together")
        return self


class BreathAnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: BreathAnalysis
    aqi: AQIData
    record: Optional[SavedAnalysis] = None


class TierReport(BaseModel):
    provider: str
    status: Literal["success", "skip", "fail"]
    reason: Optional[str] = None
    detail: Optional[str] = None


class ResolutionTrace(BaseModel):
    aqi: AQIData
    tiers: Tuple[TierReport, ...]


class TokenRequest(BaseModel):
    token: str = Field(..., min_length=1)
