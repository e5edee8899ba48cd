import math

from src.exceptions import InvalidInputError
from src.logger import get_logger
from src.utils.models import HealthData

logger = get_logger(__name__)

# Each rule returns True when the vitals violate it
VALIDATION_RULES = [
    ("age out of range (1-125)", lambda h: h.age <= 0 or h.age > 125),
    ("systolic BP out of range (40-300)", lambda h: h.systolic_bp < 40 or h.systolic_bp > 300),
    ("diastolic BP out of range (20-200)", lambda h: h.diastolic_bp < 20 or h.diastolic_bp > 200),
    ("systolic BP must exceed diastolic BP", lambda h: h.systolic_bp <= h.diastolic_bp),
    ("sugar level out of range (1-1000 mg/dL)", lambda h: not math.isfinite(h.sugar_level) or h.sugar_level <= 0 or h.sugar_level > 1000),
    ("diseases selected without a respiratory problem", lambda h: bool(h.selected_diseases) and not h.has_respiratory_problem),
]


def validate_health_data(health: HealthData) -> HealthData:
    """
    Rejects physiologically impossible vitals before they reach the scoring engine.
    Returns the input unchanged when every rule passes.
    """
    violations = [message for message, violated in VALIDATION_RULES if violated(health)]
    if violations:
        logger.warning(f"Rejected vitals: {violations}")
        raise InvalidInputError(violations)
    return health
