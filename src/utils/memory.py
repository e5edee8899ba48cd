import uuid
from collections import defaultdict, deque
from datetime import datetime, timezone
from typing import List, Optional

from src.config import settings
from src.utils.models import AQIData, BreathAnalysis, HealthData, SavedAnalysis

# Per-user history, oldest first; the deque drops the oldest entry once full
user_memory = defaultdict(lambda: deque(maxlen=settings.HISTORY_LIMIT))

def store_analysis(user_id: str, record: SavedAnalysis):
    user_memory[user_id].append(record)

def archive_analysis(
    user_id: str,
    health: HealthData,
    analysis: BreathAnalysis,
    aqi: Optional[AQIData],
    now: datetime = None,
) -> SavedAnalysis:
    """Wraps a finished analysis into a history record and stores it."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    record = SavedAnalysis(
        id=uuid.uuid4().hex,
        timestamp=timestamp,
        health_data=health,
        analysis=analysis,
        aqi=aqi,
    )
    store_analysis(user_id, record)
    return record

def get_user_history(user_id: str) -> List[SavedAnalysis]:
    """Most recent record first."""
    return list(reversed(user_memory.get(user_id, ())))

def clear_history(user_id: str = None):
    if user_id is None:
        user_memory.clear()
    else:
        user_memory.pop(user_id, None)
