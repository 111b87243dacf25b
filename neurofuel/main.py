import json
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neurofuel.bot.chain import run_advice, run_chat, run_meal_plan_params
from neurofuel.bot.mock import build_mock_advice
from neurofuel.config import Settings, is_truthy, load_settings
from neurofuel.errors import ProviderError
from neurofuel.log import get_logger, setup_logging

logger = get_logger("main")

FALLBACK_WARNING = "OpenAI request failed; served mock instead"
EMPTY_MEAL_PLAN_PARAMS = {"servings": None, "dailyCalories": None, "dietType": None, "durationDays": None}

router = APIRouter()


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed JSON body")
    return data


def _as_object(body: Any) -> dict:
    return body if isinstance(body, dict) else {}


def _mock_requested(request: Request) -> bool:
    return is_truthy(request.query_params.get("mock"))


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _log_provider_error(route: str, error: ProviderError) -> None:
    logger.error(f"OpenAI error on {route} (type={error.kind}, status={error.status}): {error}")


def _message(body: Any):
    data = _as_object(body)
    return data.get("message") or data.get("prompt")


def _invalid_message(body: Any) -> Optional[JSONResponse]:
    message = _message(body)
    if not message or not isinstance(message, str):
        return JSONResponse(status_code=400, content={
            "error": "Invalid message",
            "message": 'Request must contain either "message" or "prompt" field with a string value',
            "received": body,
        })
    return None


def _not_configured() -> JSONResponse:
    return JSONResponse(status_code=500, content={
        "error": "OpenAI API not configured",
        "message": "Please set OPENAI_API_KEY environment variable",
    })


@router.get("/health")
async def health(request: Request):
    settings = _settings(request)
    key = settings.openai_api_key
    return {
        "ok": True,
        "hasKey": settings.has_key,
        "keyPrefix": key[:7] + "..." if key else None,
        "gptId": settings.gpt_id,
        "usingMock": settings.should_mock(_mock_requested(request)),
        "port": settings.port,
    }


@router.post("/gpt/advice")
async def advice(request: Request):
    settings = _settings(request)
    data = _as_object(await _read_body(request))
    user_profile = data.get("userProfile")
    protocol = data.get("protocol")
    doctor_notes = data.get("doctorNotes")

    if settings.should_mock(_mock_requested(request)):
        return {"result": build_mock_advice(user_profile, protocol, doctor_notes)}

    try:
        content = await run_advice(settings, user_profile, protocol, doctor_notes)
    except ProviderError as e:
        _log_provider_error("/gpt/advice", e)
        return {
            "result": build_mock_advice(user_profile, protocol, doctor_notes),
            "_warning": FALLBACK_WARNING,
        }

    return {"result": content}


@router.post("/gpt/chat")
async def chat(request: Request):
    settings = _settings(request)
    body = await _read_body(request)
    logger.debug(f"Chat request received: {body}")

    invalid = _invalid_message(body)
    if invalid is not None:
        return invalid
    if not settings.has_key:
        logger.warning("Chat requested but OPENAI_API_KEY is not set")
        return _not_configured()

    try:
        content = await run_chat(settings, _message(body))
    except ProviderError as e:
        _log_provider_error("/gpt/chat", e)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return {"text": content or "Sorry, I could not generate a response."}


@router.post("/gpt/meal-plan-params")
async def meal_plan_params(request: Request):
    settings = _settings(request)
    body = await _read_body(request)

    invalid = _invalid_message(body)
    if invalid is not None:
        return invalid
    if not settings.has_key:
        return _not_configured()

    try:
        content = await run_meal_plan_params(settings, _message(body))
    except ProviderError as e:
        _log_provider_error("/gpt/meal-plan-params", e)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    try:
        params = json.loads(content or "{}")
    except ValueError:
        logger.warning("Meal plan parameters were not valid JSON")
        return dict(EMPTY_MEAL_PLAN_PARAMS)
    if not isinstance(params, dict):
        return dict(EMPTY_MEAL_PLAN_PARAMS)
    return params


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="NeuroFuel Advisor API")
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    logger.info(
        f"Advisor configured: hasKey={settings.has_key}, keyLength={len(settings.openai_api_key)}, "
        f"model={settings.model}, mockForced={settings.use_mock}"
    )
    return app
