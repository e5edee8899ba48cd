from src.adapters.base_adapter import AQIProvider
from src.credentials import ResolverCredentials
from src.utils.models import AQIData, Coordinates

SOURCE_TAG = "System Fallback"

FALLBACK_READING = AQIData(
    aqi=50,
    city="Fallback Station",
    dominant_pollutant="N/A",
    status="Moderate",
    source=SOURCE_TAG,
)


class SimulatedFallbackAdapter(AQIProvider):
    """Terminal tier: a fixed, clearly labelled placeholder reading."""
    name = SOURCE_TAG

    async def fetch(self, coords: Coordinates, credentials: ResolverCredentials) -> AQIData:
        return FALLBACK_READING
