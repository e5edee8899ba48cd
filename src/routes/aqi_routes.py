from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from src.config import settings
from src.credentials import SESSION_WAQI_TOKEN, ResolverCredentials, pick_credential
from src.exceptions import FailureReason, ResolverTierFailure
from src.logger import get_logger
from src.resolver import AQIResolver
from src.utils.models import AQIData, Coordinates, ResolutionTrace, TierReport, TokenRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/aqi", tags=["Air Quality"])

# Stateless, so one instance serves every request
_resolver = AQIResolver()

# Strict-mode failures map onto HTTP statuses the caller can act on
STRICT_FAILURE_STATUS = {
    FailureReason.RATE_LIMITED: 429,
    FailureReason.CREDENTIAL_INVALID: 401,
    FailureReason.NOT_CONFIGURED: 424,
}

#-------- Dependencies--------
def get_resolver() -> AQIResolver:
    return _resolver

def get_credentials(
    request: Request,
    x_waqi_token: Optional[str] = Header(None),
    x_inference_token: Optional[str] = Header(None),
) -> ResolverCredentials:
    """
    Builds the resolver credentials for this request.
    Header override > session-stored token > configured default.
    """
    return ResolverCredentials.build(
        waqi_override=x_waqi_token,
        inference_override=x_inference_token,
        session=request.session,
    )

#-------- Routes--------
@router.get("", response_model=AQIData)
async def get_aqi(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    strict: bool = False,
    resolver: AQIResolver = Depends(get_resolver),
    credentials: ResolverCredentials = Depends(get_credentials),
):
    """
    Resolves the current AQI for a location. Always answers unless strict=true,
    in which case the placeholder reading is replaced by an explicit error.
    """
    try:
        return await resolver.resolve(Coordinates(latitude=lat, longitude=lon), credentials, strict=strict)
    except ResolverTierFailure as e:
        logger.error(f"Strict AQI resolution failed: {e}")
        status_code = STRICT_FAILURE_STATUS.get(e.reason, 503)
        raise HTTPException(status_code=status_code, detail={"reason": e.reason.value, "message": e.detail})

@router.get("/trace", response_model=ResolutionTrace)
async def get_aqi_trace(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    resolver: AQIResolver = Depends(get_resolver),
    credentials: ResolverCredentials = Depends(get_credentials),
):
    """Resolves the AQI and reports what each tier did along the way."""
    reading, outcomes = await resolver.resolve_with_trace(Coordinates(latitude=lat, longitude=lon), credentials)
    tiers = tuple(
        TierReport(
            provider=outcome.provider,
            status=outcome.status.value,
            reason=outcome.reason.value if outcome.reason else None,
            detail=outcome.failure.detail if outcome.failure else None,
        )
        for outcome in outcomes
    )
    return ResolutionTrace(aqi=reading, tiers=tiers)

@router.post("/token")
def store_waqi_token(request: Request, body: TokenRequest):
    """Keeps a WAQI token in the user's session for later resolutions."""
    request.session[SESSION_WAQI_TOKEN] = body.token.strip()
    logger.info("Stored WAQI token in session.")
    return {"status": "stored"}

@router.delete("/token")
def clear_waqi_token(request: Request):
    request.session.pop(SESSION_WAQI_TOKEN, None)
    return {"status": "cleared"}

@router.get("/status")
def get_waqi_status(request: Request):
    """
    Reports where the WAQI token would come from for this session.
    """
    if pick_credential(request.session.get(SESSION_WAQI_TOKEN)):
        return {"status": "configured", "source": "session"}
    if pick_credential(settings.WAQI_API_KEY):
        return {"status": "configured", "source": "settings"}
    return {"status": "missing", "source": None}
