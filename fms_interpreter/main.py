# fms_interpreter/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings as default_settings
from .llm_agent import InterpretationAgent
from .models import ErrorResponse, InterpretationResult, is_valid_report
from .normalizer import normalize_interpretation, strict_loads

logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger("fms_interpreter")

INTERPRETATION_PATH = "/api/fms-interpretation"


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def create_app(
    agent: Optional[InterpretationAgent] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the application around an interpretation agent.

    When no agent is passed, one is created from settings at startup and
    lives for the whole process.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.agent is None:
            app.state.agent = InterpretationAgent.from_settings(settings)
        yield

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.agent = agent
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        # raised by routing before any handler runs, so the body is never read
        if exc.status_code == 405:
            return _error(405, "Method not allowed", headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "llm": settings.LLM_PROVIDER}

    @app.post(INTERPRETATION_PATH)
    async def fms_interpretation(request: Request):
        raw_body = await request.body()
        try:
            report = strict_loads(raw_body.decode("utf-8") or "{}")
        except (UnicodeDecodeError, ValueError):
            return _error(400, "Invalid JSON body")

        if not is_valid_report(report):
            logger.info("Rejected FMS report without tests/derived")
            return _error(400, "Invalid payload")

        try:
            raw = await request.app.state.agent.interpret(report)
        except Exception:
            logger.exception("FMS interpretation error")
            return _error(500, "Server or OpenAI error")

        result: InterpretationResult = normalize_interpretation(raw)
        return JSONResponse(status_code=200, content=result.model_dump())

    return app


app = create_app()
