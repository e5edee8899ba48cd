from dataclasses import dataclass
from typing import Mapping, Optional

from src.config import Settings, settings as default_settings

# Values that front-ends and env files use to mean "not set"
UNSET_MARKERS = {"", "undefined", "null", "none"}

SESSION_WAQI_TOKEN = "waqi_token"
SESSION_INFERENCE_TOKEN = "inference_token"


def pick_credential(*candidates: Optional[str]) -> Optional[str]:
    """Returns the first candidate that is actually set, in precedence order."""
    for candidate in candidates:
        if candidate is None:
            continue
        value = candidate.strip()
        if value.lower() not in UNSET_MARKERS:
            return value
    return None


@dataclass(frozen=True)
class ResolverCredentials:
    """Tokens handed to the AQI resolver for a single resolution call."""
    waqi_token: Optional[str] = None
    inference_token: Optional[str] = None

    @classmethod
    def build(
        cls,
        waqi_override: Optional[str] = None,
        inference_override: Optional[str] = None,
        session: Optional[Mapping[str, str]] = None,
        config: Optional[Settings] = None,
    ) -> "ResolverCredentials":
        """
        Explicit override wins over a session-stored value, which wins over
        the configured default. Anything unset resolves to None.
        """
        session = session or {}
        config = config or default_settings
        return cls(
            waqi_token=pick_credential(
                waqi_override, session.get(SESSION_WAQI_TOKEN), config.WAQI_API_KEY
            ),
            inference_token=pick_credential(
                inference_override, session.get(SESSION_INFERENCE_TOKEN), config.OPENAI_API_KEY
            ),
        )
