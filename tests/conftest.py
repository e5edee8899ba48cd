import json
from typing import Any, Callable, Dict, List
import httpx
import openai
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
import requests

# Import your FastAPI app
from main import app
from src.config import settings
from src.utils import memory
from src.utils.models import AQIData, HealthData, SmokingStatus

# ----------------------------- Core client ----------------------------------
@pytest.fixture
def client() -> TestClient:
    """Shared FastAPI TestClient."""
    yield TestClient(app)
    app.dependency_overrides.clear()

# ----------------------------- Isolation ------------------------------------
@pytest.fixture(autouse=True)
def no_configured_credentials(monkeypatch):
    """Tests never pick up real tokens from the environment or a .env file."""
    monkeypatch.setattr(settings, "WAQI_API_KEY", None)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)

@pytest.fixture(autouse=True)
def empty_history():
    memory.clear_history()
    yield
    memory.clear_history()

# ----------------------------- Session patch --------------------------------
class _SessionMockFactory:
    @staticmethod
    def build(backing: Dict[str, Any]) -> MagicMock:
        m = MagicMock()
        def _get(k, default=None):
            return backing.get(k, default)
        def _setitem(k, v):
            backing[k] = v
        def _getitem(k):
            return backing[k]
        m.get.side_effect = _get
        m.__setitem__.side_effect = _setitem
        m.__getitem__.side_effect = _getitem
        m.update.side_effect = backing.update
        m.pop.side_effect = backing.pop
        return m

@pytest.fixture
def session_state() -> Dict[str, Any]:
    """Per-test mutable dict that represents the user's session store."""
    return {}

@pytest.fixture(autouse=True)
def patch_request_session(monkeypatch, session_state):
    """Auto-patch fastapi.Request.session for all tests."""
    mock_session = _SessionMockFactory.build(session_state)
    monkeypatch.setattr("fastapi.Request.session", mock_session, raising=False)
    return mock_session

# ----------------------------- Vitals ---------------------------------------
@pytest.fixture
def make_health() -> Callable[..., HealthData]:
    """Builds HealthData from healthy defaults, overridden per test."""
    def _make(**overrides) -> HealthData:
        values = {
            "age": 30,
            "systolic_bp": 110,
            "diastolic_bp": 70,
            "sugar_level": 100,
            "smoking_status": SmokingStatus.NEVER,
            "has_respiratory_problem": False,
            "selected_diseases": (),
        }
        values.update(overrides)
        return HealthData(**values)
    return _make

@pytest.fixture
def make_aqi() -> Callable[..., AQIData]:
    def _make(value: int = 45, **overrides) -> AQIData:
        values = {
            "aqi": value,
            "city": "Test City",
            "dominant_pollutant": "PM2.5",
            "status": "Good",
            "source": "Test",
        }
        values.update(overrides)
        return AQIData(**values)
    return _make

@pytest.fixture
def healthy_vitals_payload() -> Dict[str, Any]:
    return {
        "age": 30,
        "systolicBP": 120,
        "diastolicBP": 80,
        "sugarLevel": 100,
        "smokingStatus": "Never",
        "hasRespiratoryProblem": False,
        "selectedDiseases": [],
    }

@pytest.fixture
def high_risk_vitals_payload() -> Dict[str, Any]:
    return {
        "age": 40,
        "systolicBP": 150,
        "diastolicBP": 95,
        "sugarLevel": 220,
        "smokingStatus": "Heavy",
        "hasRespiratoryProblem": True,
        "selectedDiseases": ["COPD", "Emphysema"],
    }

# ----------------------------- WAQI payloads --------------------------------
@pytest.fixture
def waqi_payload_ok() -> Dict[str, Any]:
    return {"status": "ok", "data": {"aqi": 180, "city": {"name": "Delhi, India"}, "dominentpol": "pm25"}}

@pytest.fixture
def waqi_payload_no_pollutant() -> Dict[str, Any]:
    return {"status": "ok", "data": {"aqi": 42, "city": {"name": "Oslo"}}}

@pytest.fixture
def waqi_payload_error() -> Dict[str, Any]:
    return {"status": "error", "data": "Invalid key"}

@pytest.fixture
def waqi_payload_no_station_data() -> Dict[str, Any]:
    return {"status": "ok", "data": {"aqi": "-", "city": {"name": "Nowhere"}}}

# ----------------------------- Search replies -------------------------------
@pytest.fixture
def search_message() -> AIMessage:
    return AIMessage(content=[
        {
            "type": "text",
            "text": "AQI: 87\nCity: Lyon, France\nPollutant: pm10",
            "annotations": [
                {"type": "url_citation", "url": "https://aqicn.org/city/lyon", "title": "Lyon AQI"},
                {"type": "url_citation", "url": "", "title": "No link"},
            ],
        }
    ])

@pytest.fixture
def make_search() -> Callable[..., Callable]:
    """Builds a fake search call that returns a reply or raises an error."""
    def _make(reply: Any = None, error: Exception = None, calls: List = None):
        async def _search(latitude: float, longitude: float, api_key: str):
            if calls is not None:
                calls.append((latitude, longitude, api_key))
            if error is not None:
                raise error
            return reply
        return _search
    return _make

@pytest.fixture
def make_openai_error() -> Callable[..., Exception]:
    def _make(cls, status_code: int = 500) -> Exception:
        request = httpx.Request("POST", "https://api.openai.com/v1/responses")
        if cls is openai.APIConnectionError:
            return cls(request=request)
        response = httpx.Response(status_code, request=request)
        return cls(f"HTTP {status_code}", response=response, body=None)
    return _make

# ----------------------------- HTTP response shim ----------------------------
class _Resp:
    def __init__(self, status_code: int, json_obj: Any):
        self.status_code = status_code
        self._json = json_obj
        self.text = json.dumps(json_obj)
    def json(self) -> Any: return self._json
    def raise_for_status(self):
        if not (200 <= self.status_code < 300):
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)
@pytest.fixture
def make_response() -> Callable[[int, Any], _Resp]:
    def _make(status: int, body: Any) -> _Resp: return _Resp(status, body)
    return _make
