from typing import Callable, Optional, Tuple

from src.utils.models import AQIData, HealthData
from src.utils.thresholds import (
    is_critical_sugar,
    is_heavy_smoker,
    is_mild_sugar,
    is_poor_air_quality,
    is_stage2_hypertension,
)

# (exclusive lower bound, summary), checked top-down; the last band catches everything else
SUMMARY_BANDS = (
    (85, "Optimal. Your vitals and metabolic markers indicate high respiratory efficiency."),
    (70, "Sub-optimal. Noticeable stressors from habits or environment are present, but breathing capacity remains stable."),
    (50, "Compromised. Inflammation markers and lifestyle stressors are putting moderate strain on oxygen exchange."),
)
HIGH_RISK_SUMMARY = "High Risk. Multiple critical physiological and environmental stressors detected."

BASELINE_RECOMMENDATION = "Perform deep breathing exercises (4-7-8 technique) daily."

Trigger = Callable[[HealthData, AQIData], bool]

RECOMMENDATION_TRIGGERS: Tuple[Tuple[Trigger, str], ...] = (
    (lambda h, a: is_heavy_smoker(h),
     "Heavy smoking detected; a structured cessation program is the single biggest gain for lung function."),
    (lambda h, a: is_stage2_hypertension(h),
     "Hypertension detected; consult a doctor to reduce pulmonary strain."),
    (lambda h, a: is_critical_sugar(h),
     "High/Low sugar: Glycemic control is vital for reducing airway inflammation."),
    (lambda h, a: h.has_respiratory_problem,
     "Stay consistent with prescribed respiratory maintenance therapy."),
    (lambda h, a: is_poor_air_quality(a),
     "Current local air quality is poor; use air filtration indoors."),
)

# Each entry yields a tag or None when its threshold is not crossed
RISK_FACTOR_TRIGGERS: Tuple[Callable[[HealthData, AQIData], Optional[str]], ...] = (
    lambda h, a: "High Smoking Toxicity" if is_heavy_smoker(h) else None,
    lambda h, a: "Pulmonary Vascular Stress" if is_stage2_hypertension(h) else None,
    lambda h, a: "Critical Metabolic Dysfunction" if is_critical_sugar(h) else None,
    lambda h, a: "Mild Glycemic Stress" if is_mild_sugar(h) else None,
    lambda h, a: f"Active {h.selected_diseases[0].value} Management" if h.selected_diseases else None,
    lambda h, a: "High Particulate Matter Exposure" if is_poor_air_quality(a) else None,
)


def summarize(score: int) -> str:
    for lower_bound, summary in SUMMARY_BANDS:
        if score > lower_bound:
            return summary
    return HIGH_RISK_SUMMARY


def recommend(health: HealthData, aqi: AQIData) -> Tuple[str, ...]:
    tips = [BASELINE_RECOMMENDATION]
    tips.extend(text for fired, text in RECOMMENDATION_TRIGGERS if fired(health, aqi))
    return tuple(dict.fromkeys(tips))


def risk_factors(health: HealthData, aqi: AQIData) -> Tuple[str, ...]:
    tags = (trigger(health, aqi) for trigger in RISK_FACTOR_TRIGGERS)
    return tuple(dict.fromkeys(tag for tag in tags if tag))


def build_narrative(score: int, health: HealthData, aqi: AQIData) -> Tuple[str, Tuple[str, ...], Tuple[str, ...]]:
    """Returns (summary, recommendations, risk factors) for a computed score."""
    return summarize(score), recommend(health, aqi), risk_factors(health, aqi)
