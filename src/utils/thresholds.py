from src.utils.models import AQIData, HealthData, SmokingStatus

# (upper bound inclusive, label); anything above the last bound is Hazardous
AQI_STATUS_BREAKPOINTS = (
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
    (200, "Unhealthy"),
)
AQI_STATUS_CEILING = "Hazardous"

POOR_AIR_QUALITY_AQI = 100


def aqi_status(aqi: int) -> str:
    """Maps an AQI value to its category label."""
    for upper_bound, label in AQI_STATUS_BREAKPOINTS:
        if aqi <= upper_bound:
            return label
    return AQI_STATUS_CEILING


def is_heavy_smoker(health: HealthData) -> bool:
    return health.smoking_status == SmokingStatus.HEAVY


def is_stage2_hypertension(health: HealthData) -> bool:
    return health.systolic_bp >= 140 or health.diastolic_bp >= 90


def is_stage1_hypertension(health: HealthData) -> bool:
    return health.systolic_bp >= 130 or health.diastolic_bp >= 80


def is_elevated_bp(health: HealthData) -> bool:
    return health.systolic_bp >= 120


def is_critical_sugar(health: HealthData) -> bool:
    return health.sugar_level > 200 or health.sugar_level < 60


def is_mild_sugar(health: HealthData) -> bool:
    return not is_critical_sugar(health) and (health.sugar_level > 140 or health.sugar_level < 70)


def is_poor_air_quality(aqi: AQIData) -> bool:
    return aqi.aqi > POOR_AIR_QUALITY_AQI
