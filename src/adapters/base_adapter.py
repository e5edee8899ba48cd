import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.credentials import ResolverCredentials
from src.exceptions import FailureReason, ResolverTierFailure
from src.logger import get_logger
from src.utils.models import AQIData, Coordinates

logger = get_logger(__name__)


class TierStatus(str, Enum):
    SUCCESS = "success"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class TierOutcome:
    """Result of asking one provider for a reading: success, skip or fail."""
    provider: str
    status: TierStatus
    reading: Optional[AQIData] = None
    failure: Optional[ResolverTierFailure] = None

    @property
    def reason(self) -> Optional[FailureReason]:
        return self.failure.reason if self.failure else None


class AQIProvider(ABC):
    """
    An abstract base class that defines the standard interface for every
    air-quality source in the resolver chain.
    """
    name: str = "provider"

    @abstractmethod
    async def fetch(self, coords: Coordinates, credentials: ResolverCredentials) -> AQIData:
        """
        Produces a complete reading for the coordinates.
        Raises ResolverTierFailure when the source cannot be used.
        """
        pass

    async def resolve(
        self,
        coords: Coordinates,
        credentials: ResolverCredentials,
        timeout: Optional[float] = None,
    ) -> TierOutcome:
        """
        Runs fetch() and converts its result into a TierOutcome.
        Never raises, except for cancellation which is left to propagate.
        """
        try:
            if timeout:
                reading = await asyncio.wait_for(self.fetch(coords, credentials), timeout)
            else:
                reading = await self.fetch(coords, credentials)
        except asyncio.TimeoutError:
            failure = ResolverTierFailure(FailureReason.TIMEOUT, f"no answer within {timeout}s")
            return TierOutcome(self.name, TierStatus.FAIL, failure=failure)
        except ResolverTierFailure as e:
            status = TierStatus.SKIP if e.reason == FailureReason.NOT_CONFIGURED else TierStatus.FAIL
            return TierOutcome(self.name, status, failure=e)
        except Exception as e:
            logger.error(f"Unexpected error in {self.name} provider: {e!r}")
            failure = ResolverTierFailure(FailureReason.UNAVAILABLE, repr(e))
            return TierOutcome(self.name, TierStatus.FAIL, failure=failure)
        return TierOutcome(self.name, TierStatus.SUCCESS, reading=reading)
