from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from askdata.agent import AskAgent, AttemptsExhausted
from askdata.config import Settings
from askdata.db import create_db_engine
from askdata.llm_service import LLMService
from askdata.query_executor import SQLQueryExecutor
from askdata.schema_introspector import DatabaseUnavailable, SchemaIntrospector
from askdata.schemas import AskRequest, AskResponse, ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Ask"])


def build_agent(settings: Settings, engine) -> AskAgent:
    return AskAgent(
        introspector=SchemaIntrospector(engine, schema=settings.db_schema),
        llm=LLMService(settings),
        executor=SQLQueryExecutor(engine, read_only=settings.sql_read_only),
        max_attempts=settings.agent_max_attempts,
        dialect=settings.sql_dialect,
    )


def get_agent(request: Request) -> AskAgent:
    return request.app.state.agent


agent_dep = Annotated[AskAgent, Depends(get_agent)]


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


# sync endpoint: FastAPI runs it in the threadpool, one run per request
@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def ask(body: AskRequest, agent: agent_dep):
    """Translate a question into SQL, run it and return the answer for the chat UI."""
    if not (body.question or "").strip():
        return _error(400, "Question is required")

    try:
        final = agent.answer(body.question)
    except DatabaseUnavailable as exc:
        logger.error("Database unavailable", extra={"stage": "connect", "error": str(exc)})
        return _error(500, "Database connection error", str(exc))
    except AttemptsExhausted as exc:
        return _error(500, str(exc), exc.details)
    except Exception as exc:
        logger.exception("Error in /api/ask")
        return _error(500, "An error occurred while processing your request", str(exc))

    # encode the plain dict so Decimal values come out as JSON numbers
    return JSONResponse(content=jsonable_encoder(final.to_dict()))


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
def health(agent: agent_dep):
    """Database connectivity check."""
    try:
        agent.introspector.check_connection()
    except DatabaseUnavailable as exc:
        return JSONResponse(status_code=503, content={"status": "unavailable", "details": str(exc)})
    return HealthResponse(status="ok")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Invalid request body", "; ".join(str(e.get("msg", e)) for e in exc.errors()))


def create_app(settings: Settings | None = None, agent: AskAgent | None = None) -> FastAPI:
    """App factory. Pass ``agent`` to run against injected collaborators (tests)."""
    engine = None
    if agent is None:
        settings = settings or Settings.load()
        engine = create_db_engine(settings)
        agent = build_agent(settings, engine)

    # Dispose the pool once the server shuts down
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if engine is not None:
            engine.dispose()

    app = FastAPI(title="AskData API", lifespan=lifespan)
    app.state.agent = agent
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins if settings else ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(router)
    return app
