from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.cors import CORSMiddleware

from src.config import settings
from src.credentials import ResolverCredentials
from src.exceptions import InvalidInputError
from src.resolver import DEFAULT_AQI_READING, AQIResolver
from src.routes import aqi_routes, history_routes
from src.routes.aqi_routes import get_credentials, get_resolver
from src.utils.memory import archive_analysis
from src.utils.models import BreathAnalysisRequest, BreathAnalysisResponse, Coordinates
from src.utils.scoring import analyze_breath_health
from src.utils.validation import validate_health_data
from src.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Breath Score API")

# Session middleware keeps per-user settings such as a stored WAQI token
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.APP_SECRET_KEY,
    https_only=False,
    same_site="lax",
)

#TODO: Will need to change the * to specific domains in production once we have the app deployed
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(aqi_routes.router)
app.include_router(history_routes.router)

@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"detail": "invalid input"})

@app.post("/breath-analysis", response_model=BreathAnalysisResponse)
async def breath_analysis(
    data: BreathAnalysisRequest,
    resolver: AQIResolver = Depends(get_resolver),
    credentials: ResolverCredentials = Depends(get_credentials),
):
    # 1. Reject impossible vitals before scoring
    health = validate_health_data(data.health_data)

    # 2. Pick the environmental reading
    if data.aqi is not None:
        aqi = data.aqi
    elif data.latitude is not None and data.longitude is not None:
        aqi = await resolver.resolve(Coordinates(latitude=data.latitude, longitude=data.longitude), credentials)
    else:
        aqi = DEFAULT_AQI_READING

    # 3. Score and narrate
    analysis = analyze_breath_health(health, aqi)

    # 4. Archive for signed-in users
    record = archive_analysis(data.user_id, health, analysis, aqi) if data.user_id else None

    logger.info(f"Breath score {analysis.score} with AQI {aqi.aqi} from {aqi.source}")
    return BreathAnalysisResponse(analysis=analysis, aqi=aqi, record=record)
