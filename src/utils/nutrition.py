"""
Nutrition suggestions derived from a user's saved analyses.

Rules look at the latest record and at averages across the whole history,
so a single bad reading does not dominate the glycemic and AQI rules.
"""
from statistics import mean
from typing import Callable, List, Sequence, Tuple

from src.utils.models import NutritionalRequirement, SavedAnalysis, SmokingStatus

HistoryRule = Callable[[Sequence[SavedAnalysis]], bool]


def average_sugar(history: Sequence[SavedAnalysis]) -> float:
    return mean(record.health_data.sugar_level for record in history)


def average_aqi(history: Sequence[SavedAnalysis]) -> float:
    # Records archived without a reading count as clean air
    return mean(record.aqi.aqi if record.aqi else 0 for record in history)


NUTRITION_RULES: Tuple[Tuple[HistoryRule, NutritionalRequirement], ...] = (
    (
        lambda history: average_sugar(history) > 140,
        NutritionalRequirement(
            nutrient="Magnesium & Fiber",
            reason="Consistently elevated sugar levels increase bronchial inflammation.",
            sources=("Spinach", "Pumpkin Seeds", "Quinoa", "Lentils"),
            impact="High",
        ),
    ),
    (
        lambda history: history[0].health_data.smoking_status != SmokingStatus.NEVER or average_aqi(history) > 100,
        NutritionalRequirement(
            nutrient="Vitamin C & E",
            reason="Neutralizes oxidative stress from particulate matter and tobacco toxicity.",
            sources=("Guava", "Bell Peppers", "Almonds", "Sunflower Seeds"),
            impact="High",
        ),
    ),
    (
        lambda history: history[0].health_data.systolic_bp > 130,
        NutritionalRequirement(
            nutrient="Omega-3 Fatty Acids",
            reason="Reduces pulmonary arterial pressure and improves oxygen diffusion.",
            sources=("Walnuts", "Chia Seeds", "Flaxseeds", "Salmon"),
            impact="Medium",
        ),
    ),
    (
        lambda history: history[0].health_data.has_respiratory_problem,
        NutritionalRequirement(
            nutrient="Beta-Carotene",
            reason="Supports the integrity of the respiratory epithelial lining.",
            sources=("Carrots", "Sweet Potatoes", "Kale"),
            impact="Medium",
        ),
    ),
)


def nutrition_requirements(history: Sequence[SavedAnalysis]) -> List[NutritionalRequirement]:
    """history must be ordered most recent first."""
    if not history:
        return []
    return [requirement for applies, requirement in NUTRITION_RULES if applies(history)]
