from enum import Enum
from typing import List, Optional


class FailureReason(str, Enum):
    """Closed set of reasons a resolver tier can fail or be skipped."""
    NOT_CONFIGURED = "not_configured"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    MALFORMED_PAYLOAD = "malformed_payload"
    UPSTREAM_ERROR = "upstream_error"
    EMPTY_RESPONSE = "empty_response"
    RATE_LIMITED = "rate_limited"
    CREDENTIAL_INVALID = "credential_invalid"
    UNAVAILABLE = "unavailable"


class BreathServiceError(Exception):
    """Base class for all errors raised by the service."""
    pass


class InvalidInputError(BreathServiceError):
    """Vitals are outside physiological range or otherwise inconsistent."""

    def __init__(self, violations: Optional[List[str]] = None):
        super().__init__("invalid input")
        self.violations = violations or []


class ResolverTierFailure(BreathServiceError):
    """
    Raised by an AQI provider when it cannot produce a reading.
    The resolver absorbs it and moves on to the next tier.
    """

    def __init__(self, reason: FailureReason, detail: str = ""):
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


class UpstreamServiceError(ResolverTierFailure):
    """An inference-service failure, classified where it was observed."""
    reason_kind = FailureReason.UNAVAILABLE

    def __init__(self, detail: str = ""):
        super().__init__(self.reason_kind, detail)


class UpstreamRateLimited(UpstreamServiceError):
    reason_kind = FailureReason.RATE_LIMITED


class UpstreamCredentialInvalid(UpstreamServiceError):
    reason_kind = FailureReason.CREDENTIAL_INVALID


class UpstreamUnavailable(UpstreamServiceError):
    reason_kind = FailureReason.UNAVAILABLE
