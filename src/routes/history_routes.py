from typing import List

from fastapi import APIRouter

from src.logger import get_logger
from src.utils.memory import get_user_history
from src.utils.models import NutritionalRequirement, SavedAnalysis
from src.utils.nutrition import nutrition_requirements

logger = get_logger(__name__)

router = APIRouter(tags=["History"])

@router.get("/history/{user_id}", response_model=List[SavedAnalysis])
def get_history(user_id: str):
    """Saved analyses for a user, most recent first."""
    return get_user_history(user_id)

@router.get("/nutrition/{user_id}", response_model=List[NutritionalRequirement])
def get_nutrition(user_id: str):
    history = get_user_history(user_id)
    requirements = nutrition_requirements(history)
    logger.info(f"Derived {len(requirements)} nutrition requirement(s) from {len(history)} record(s) for {user_id}")
    return requirements
