from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    # optional at the model level so a missing question gets our own 400 body
    question: str | None = Field(default=None, description="Natural language analytics question")


class AskResponse(BaseModel):
    answer: str
    sql: str
    chart: str
    data: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    details: str | None = None
