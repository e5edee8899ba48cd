import re
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

import openai

from src.adapters.base_adapter import AQIProvider
from src.agent import search_air_quality
from src.credentials import ResolverCredentials
from src.exceptions import (
    FailureReason,
    ResolverTierFailure,
    UpstreamCredentialInvalid,
    UpstreamRateLimited,
    UpstreamServiceError,
    UpstreamUnavailable,
)
from src.logger import get_logger
from src.utils.models import AQIData, Coordinates, GroundingSource
from src.utils.thresholds import aqi_status

logger = get_logger(__name__)

SOURCE_TAG = "Grounded Search"
DEFAULT_SEARCH_AQI = 50

AQI_LABEL_PATTERN = re.compile(r"\bAQI\b[*\s]*[:=][*\s]*(\d+)", re.IGNORECASE)
# Integers that are not part of a decimal number or a word such as PM2.5
BARE_INTEGER_PATTERN = re.compile(r"(?<![\w.])(\d+)(?!\.\d|\w)")
CITY_LABEL_PATTERN = re.compile(r"\bCity\b[*\s]*:[*\s]*([^\n*]+)", re.IGNORECASE)
POLLUTANT_LABEL_PATTERN = re.compile(r"\bPollutant\b[*\s]*:[*\s]*([A-Za-z0-9.]+)", re.IGNORECASE)

SearchCall = Callable[[float, float, str], Awaitable[Any]]


def classify_inference_error(error: Exception) -> UpstreamServiceError:
    """Maps an inference-client exception onto the upstream error taxonomy."""
    if isinstance(error, openai.RateLimitError):
        return UpstreamRateLimited(str(error))
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return UpstreamCredentialInvalid(str(error))
    return UpstreamUnavailable(str(error))


def parse_aqi_value(text: str) -> int:
    match = AQI_LABEL_PATTERN.search(text) or BARE_INTEGER_PATTERN.search(text)
    return int(match.group(1)) if match else DEFAULT_SEARCH_AQI


def _label(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip().strip(".")
    return value or None


def normalize_citations(entries: Iterable[Dict[str, Any]]) -> Tuple[GroundingSource, ...]:
    """
    Accepts {web: {title, uri}}, {title, url} and {title, uri} shaped entries.
    Entries without a uri are dropped and duplicates collapsed.
    """
    sources = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        if isinstance(entry.get("web"), dict):
            entry = entry["web"]
        uri = entry.get("uri") or entry.get("url")
        if uri and uri not in sources:
            sources[uri] = GroundingSource(title=entry.get("title") or "", uri=uri)
    return tuple(sources.values())


def extract_text_and_citations(message: Any) -> Tuple[str, List[Dict[str, Any]]]:
    """Pulls the answer text and raw citation entries out of a chat model message."""
    content = getattr(message, "content", message)
    citations: List[Dict[str, Any]] = []
    if isinstance(content, str):
        text = content
    else:
        parts = []
        for block in content or []:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") in ("text", "output_text"):
                parts.append(block.get("text", ""))
                citations.extend(block.get("annotations") or [])
        text = "".join(parts)

    metadata = getattr(message, "response_metadata", None) or {}
    grounding = metadata.get("grounding_metadata") or {}
    citations.extend(grounding.get("grounding_chunks") or [])
    return text, citations


# --- Grounded Search Adapter Implementation ---
class GroundedSearchAdapter(AQIProvider):
    """
    Asks a chat model with live web search for the AQI at the coordinates.
    The answer is free text, so only the AQI figure is required to parse.
    """
    name = SOURCE_TAG

    def __init__(self, search: SearchCall = None):
        self.search = search or search_air_quality

    async def fetch(self, coords: Coordinates, credentials: ResolverCredentials) -> AQIData:
        token = credentials.inference_token
        if not token:
            raise ResolverTierFailure(FailureReason.NOT_CONFIGURED, "Inference token is not configured")

        logger.info(f"Asking grounded search for AQI at ({coords.latitude}, {coords.longitude})")
        try:
            message = await self.search(coords.latitude, coords.longitude, token)
        except openai.OpenAIError as e:
            raise classify_inference_error(e) from e

        text, citations = extract_text_and_citations(message)
        if not text or not text.strip():
            raise ResolverTierFailure(FailureReason.EMPTY_RESPONSE, "Grounded search returned no text")

        return self.normalize_data(text, citations, coords)

    def normalize_data(self, text: str, citations: List[Dict[str, Any]], coords: Coordinates) -> AQIData:
        aqi = parse_aqi_value(text)
        city = _label(CITY_LABEL_PATTERN, text) or f"Near {coords.latitude:.2f}, {coords.longitude:.2f}"
        pollutant = _label(POLLUTANT_LABEL_PATTERN, text)
        sources = normalize_citations(citations)
        logger.info(f"Grounded search reported AQI {aqi} for {city} with {len(sources)} citation(s)")
        return AQIData(
            aqi=aqi,
            city=city[:120],
            dominant_pollutant=pollutant.upper() if pollutant else "N/A",
            status=aqi_status(aqi),
            source=SOURCE_TAG,
            grounding_sources=sources,
        )
