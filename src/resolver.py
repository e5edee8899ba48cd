"""
Environmental resolver: asks an ordered chain of air-quality providers for a
reading and stops at the first one that answers. The terminal provider always
answers, so resolve() never raises unless strict mode is requested.
"""
from typing import List, Optional, Sequence, Tuple

from src.adapters.base_adapter import AQIProvider, TierOutcome, TierStatus
from src.adapters.fallback_adapter import FALLBACK_READING, SimulatedFallbackAdapter
from src.adapters.search_adapter import GroundedSearchAdapter
from src.adapters.waqi_adapter import WAQIAdapter
from src.config import settings
from src.credentials import ResolverCredentials
from src.exceptions import FailureReason, ResolverTierFailure
from src.logger import get_logger
from src.utils.models import AQIData, Coordinates

logger = get_logger(__name__)

# Used by callers that score before any location reading is available
DEFAULT_AQI_READING = AQIData(
    aqi=50,
    city="Default Location",
    dominant_pollutant="N/A",
    status="Moderate",
    source="Default",
)


class AQIResolver:
    def __init__(
        self,
        providers: Optional[Sequence[AQIProvider]] = None,
        terminal: Optional[AQIProvider] = None,
        tier_timeout: Optional[float] = None,
    ):
        self.providers = list(providers) if providers is not None else [WAQIAdapter(), GroundedSearchAdapter()]
        self.terminal = terminal or SimulatedFallbackAdapter()
        self.tier_timeout = tier_timeout if tier_timeout is not None else settings.AQI_TIER_TIMEOUT_SECONDS

    async def resolve_with_trace(
        self,
        coords: Coordinates,
        credentials: ResolverCredentials,
        strict: bool = False,
    ) -> Tuple[AQIData, List[TierOutcome]]:
        """
        Tries each provider in order, one at a time, and returns the first reading
        together with the outcome of every tier that was attempted.

        With strict=True the terminal provider is not used. The failure of the last
        tier that actually failed is raised instead, or the not-configured skip
        when every tier was skipped.
        """
        outcomes: List[TierOutcome] = []
        for provider in self.providers:
            outcome = await provider.resolve(coords, credentials, timeout=self.tier_timeout)
            outcomes.append(outcome)
            if outcome.status == TierStatus.SUCCESS:
                logger.info(f"AQI resolved by {provider.name}: {outcome.reading.aqi}")
                return outcome.reading, outcomes
            logger.warning(f"{provider.name} tier {outcome.status.value}: {outcome.failure}")

        if strict:
            # A tier that ran and failed outranks tiers skipped for lack of credentials
            failed = [outcome for outcome in outcomes if outcome.status == TierStatus.FAIL]
            if failed:
                raise failed[-1].failure
            if outcomes:
                raise outcomes[-1].failure
            raise ResolverTierFailure(FailureReason.NOT_CONFIGURED, "No AQI providers configured")

        outcome = await self.terminal.resolve(coords, credentials)
        outcomes.append(outcome)
        if outcome.status != TierStatus.SUCCESS:
            # The terminal provider is not expected to fail; this guards custom ones
            logger.error(f"Terminal provider {self.terminal.name} failed: {outcome.failure}")
            return FALLBACK_READING, outcomes
        logger.warning(f"All live AQI sources unavailable, using {self.terminal.name}")
        return outcome.reading, outcomes

    async def resolve(
        self,
        coords: Coordinates,
        credentials: ResolverCredentials,
        strict: bool = False,
    ) -> AQIData:
        reading, _ = await self.resolve_with_trace(coords, credentials, strict=strict)
        return reading
