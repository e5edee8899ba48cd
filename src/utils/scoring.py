"""
Respiratory wellness scoring.

The score starts at 100 and loses points through independent penalty terms:

1. Smoking: -15 (Former), -35 (Light), -55 (Heavy).
2. Blood pressure: -5 (systolic 120-129), -10 (systolic 130-139 or diastolic 80-89),
   -20 (systolic 140+ or diastolic 90+).
3. Blood sugar: -15 (141-200 or 60-69 mg/dL), -25 (above 200 or below 60).
4. Respiratory history: -20 when flagged, plus -10 per selected disease (max -30 extra).
5. Environment: above AQI 50 the penalty is (AQI - 50) * 0.2, capped at -30.

The result is rounded and clamped to [5, 100]. Age does not penalize on its own.
"""
import math
from typing import Callable, Dict, Sequence, Tuple

from src.utils.models import AQIData, BreathAnalysis, HealthData, SmokingStatus
from src.utils.narrative import build_narrative
from src.utils.thresholds import (
    is_critical_sugar,
    is_elevated_bp,
    is_mild_sugar,
    is_stage1_hypertension,
    is_stage2_hypertension,
)

BASE_SCORE = 100
MIN_SCORE = 5
MAX_SCORE = 100

SMOKING_PENALTIES = {
    SmokingStatus.NEVER: 0,
    SmokingStatus.FORMER: 15,
    SmokingStatus.LIGHT: 35,
    SmokingStatus.HEAVY: 55,
}

RESPIRATORY_BASE_PENALTY = 20
PER_DISEASE_PENALTY = 10
MAX_DISEASE_PENALTY = 30

AQI_PENALTY_THRESHOLD = 50
AQI_PENALTY_RATE = 0.2
MAX_AQI_PENALTY = 30

PenaltyTerm = Callable[[HealthData, AQIData], float]


def smoking_penalty(health: HealthData, aqi: AQIData) -> float:
    return SMOKING_PENALTIES[health.smoking_status]


def blood_pressure_penalty(health: HealthData, aqi: AQIData) -> float:
    if is_stage2_hypertension(health):
        return 20
    if is_stage1_hypertension(health):
        return 10
    if is_elevated_bp(health):
        return 5
    return 0


def blood_sugar_penalty(health: HealthData, aqi: AQIData) -> float:
    if is_critical_sugar(health):
        return 25
    if is_mild_sugar(health):
        return 15
    return 0


def respiratory_penalty(health: HealthData, aqi: AQIData) -> float:
    if not health.has_respiratory_problem:
        return 0
    extra = min(MAX_DISEASE_PENALTY, len(health.selected_diseases) * PER_DISEASE_PENALTY)
    return RESPIRATORY_BASE_PENALTY + extra


def environmental_penalty(health: HealthData, aqi: AQIData) -> float:
    if aqi.aqi <= AQI_PENALTY_THRESHOLD:
        return 0
    return min(MAX_AQI_PENALTY, (aqi.aqi - AQI_PENALTY_THRESHOLD) * AQI_PENALTY_RATE)


PENALTY_TERMS: Tuple[Tuple[str, PenaltyTerm], ...] = (
    ("smoking", smoking_penalty),
    ("blood_pressure", blood_pressure_penalty),
    ("blood_sugar", blood_sugar_penalty),
    ("respiratory_history", respiratory_penalty),
    ("environment", environmental_penalty),
)


def penalty_breakdown(
    health: HealthData,
    aqi: AQIData,
    terms: Sequence[Tuple[str, PenaltyTerm]] = PENALTY_TERMS,
) -> Dict[str, float]:
    """Evaluates every penalty term on its own, keyed by term name."""
    return {name: term(health, aqi) for name, term in terms}


def calculate_breath_score(
    health: HealthData,
    aqi: AQIData,
    terms: Sequence[Tuple[str, PenaltyTerm]] = PENALTY_TERMS,
) -> int:
    # fsum is exact, so the order of the terms cannot leak into the result
    total_penalty = math.fsum(penalty_breakdown(health, aqi, terms).values())
    raw = BASE_SCORE - total_penalty
    # Round half up, then clamp
    rounded = math.floor(raw + 0.5)
    return max(MIN_SCORE, min(MAX_SCORE, rounded))


def analyze_breath_health(health: HealthData, aqi: AQIData) -> BreathAnalysis:
    """
    Scores already-validated vitals against an AQI reading and attaches the narrative.
    Callers must run src.utils.validation.validate_health_data first.
    """
    score = calculate_breath_score(health, aqi)
    summary, recommendations, risk_factors = build_narrative(score, health, aqi)
    return BreathAnalysis(
        score=score,
        summary=summary,
        recommendations=recommendations,
        risk_factors=risk_factors,
    )
