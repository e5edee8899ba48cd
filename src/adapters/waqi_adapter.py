import requests
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, ValidationError
from typing import Any, Dict, Optional

from src.adapters.base_adapter import AQIProvider
from src.config import settings
from src.credentials import ResolverCredentials
from src.exceptions import FailureReason, ResolverTierFailure
from src.logger import get_logger
from src.utils.models import AQIData, Coordinates
from src.utils.thresholds import aqi_status

logger = get_logger(__name__)

SOURCE_TAG = "WAQI"


class WAQICity(BaseModel):
    name: str


class WAQIStation(BaseModel):
    aqi: int = Field(..., ge=0, description="Station AQI; WAQI sends '-' when the station has no data")
    city: WAQICity
    dominentpol: Optional[str] = None


class WAQIFeed(BaseModel):
    status: str
    data: Any = None


# --- WAQI Adapter Implementation ---
class WAQIAdapter(AQIProvider):
    """
    Adapter for the World Air Quality Index geo feed. Needs a token;
    without one the tier is skipped rather than failed.
    """
    name = SOURCE_TAG

    def __init__(self, base_url: str = None, request_timeout: float = None):
        self.base_url = (base_url or settings.WAQI_BASE_URL).rstrip("/")
        self.request_timeout = request_timeout or settings.AQI_TIER_TIMEOUT_SECONDS

    async def fetch(self, coords: Coordinates, credentials: ResolverCredentials) -> AQIData:
        token = credentials.waqi_token
        if not token:
            raise ResolverTierFailure(FailureReason.NOT_CONFIGURED, "WAQI token is not configured")

        # requests is blocking, so the call runs in the worker thread pool
        raw_data = await run_in_threadpool(self._get_feed, coords, token)
        return self.normalize_data(raw_data)

    def _get_feed(self, coords: Coordinates, token: str) -> Dict[str, Any]:
        url = f"{self.base_url}/feed/geo:{coords.latitude};{coords.longitude}/"
        logger.info(f"Fetching WAQI feed for ({coords.latitude}, {coords.longitude})")
        try:
            response = requests.get(url, params={"token": token}, timeout=self.request_timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ResolverTierFailure(FailureReason.TRANSPORT, f"WAQI request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ResolverTierFailure(FailureReason.MALFORMED_PAYLOAD, "WAQI response is not JSON") from e

    def normalize_data(self, raw_data: Any) -> AQIData:
        """
        Validates the feed payload and transforms it into an AQIData reading.
        """
        try:
            feed = WAQIFeed.model_validate(raw_data)
        except ValidationError as e:
            raise ResolverTierFailure(FailureReason.MALFORMED_PAYLOAD, f"Unexpected WAQI payload: {e}") from e

        if feed.status != "ok":
            raise ResolverTierFailure(FailureReason.UPSTREAM_ERROR, f"WAQI status '{feed.status}': {feed.data}")

        try:
            station = WAQIStation.model_validate(feed.data)
        except ValidationError as e:
            raise ResolverTierFailure(FailureReason.MALFORMED_PAYLOAD, f"Unexpected WAQI station data: {e}") from e

        pollutant = (station.dominentpol or "").strip().upper() or "N/A"
        logger.info(f"WAQI reported AQI {station.aqi} for {station.city.name}")
        return AQIData(
            aqi=station.aqi,
            city=station.city.name,
            dominant_pollutant=pollutant,
            status=aqi_status(station.aqi),
            source=SOURCE_TAG,
        )
