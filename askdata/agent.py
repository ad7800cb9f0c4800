"""Prompt-to-SQL retry loop.

One run per question:

    BUILDING    check the connection, introspect the schema, build the prompt (once)
    ATTEMPTING  model call -> parse reply -> execute SQL
    SUCCEEDED   first attempt whose reply parsed and whose SQL executed
    EXHAUSTED   attempt limit reached; only the last error is kept

Retries are blind: every attempt sends the same prompt, the failing SQL and
database error are never fed back to the model. A retry only helps when the
model happens to answer differently.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Protocol

from askdata.llm_service import ModelCallError
from askdata.prompt_builder import build_prompt
from askdata.query_executor import QueryResult, SqlExecutionError
from askdata.response_parser import ParseFailure, parse_model_reply
from askdata.schema_introspector import ColumnInfo

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
EXHAUSTED_MESSAGE = "Failed to generate a valid SQL query after several attempts."


class RunState(str, Enum):
    BUILDING = "BUILDING"
    ATTEMPTING = "ATTEMPTING"
    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED = "EXHAUSTED"


class Introspector(Protocol):
    def check_connection(self) -> None: ...

    def describe_schema(self) -> list[ColumnInfo]: ...


class ModelClient(Protocol):
    def generate(self, prompt: str) -> str: ...


class Executor(Protocol):
    def run(self, sql: str) -> QueryResult: ...


@dataclass(frozen=True, slots=True)
class FinalAnswer:
    answer: str
    sql: str
    chart: str
    data: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AttemptsExhausted(RuntimeError):
    def __init__(self, details: str):
        super().__init__(EXHAUSTED_MESSAGE)
        self.details = details


class AskAgent:
    def __init__(
        self,
        introspector: Introspector,
        llm: ModelClient,
        executor: Executor,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        dialect: str = "PostgreSQL",
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.introspector = introspector
        self.llm = llm
        self.executor = executor
        self.max_attempts = max_attempts
        self.dialect = dialect

    def answer(self, question: str) -> FinalAnswer:
        state = RunState.BUILDING
        # DatabaseUnavailable propagates from here: no attempt is made
        self.introspector.check_connection()
        schema = self.introspector.describe_schema()
        prompt = build_prompt(schema, question, dialect=self.dialect)
        logger.info(
            "Prompt built",
            extra={"state": state.value, "columns": len(schema), "prompt_chars": len(prompt)},
        )

        last_error = "Model kept generating invalid output."
        for attempt in range(1, self.max_attempts + 1):
            state = RunState.ATTEMPTING
            log_extra = {"state": state.value, "attempt": attempt, "max_attempts": self.max_attempts}

            try:
                reply = self.llm.generate(prompt)
            except ModelCallError as exc:
                last_error = str(exc)
                logger.warning("Attempt failed", extra={**log_extra, "stage": "model", "error": last_error})
                continue

            parsed = parse_model_reply(reply)
            if isinstance(parsed, ParseFailure):
                last_error = parsed.reason
                logger.warning(
                    "Attempt failed",
                    extra={**log_extra, "stage": "parse", "error": last_error, "reply": reply},
                )
                continue

            try:
                result = self.executor.run(parsed.sql)
            except SqlExecutionError as exc:
                last_error = str(exc)
                logger.warning(
                    "Attempt failed",
                    extra={**log_extra, "stage": "execute", "error": last_error, "sql": parsed.sql},
                )
                continue

            state = RunState.SUCCEEDED
            logger.info(
                "Question answered",
                extra={**log_extra, "state": state.value, "row_count": len(result.rows), "chart": parsed.chart},
            )
            return FinalAnswer(
                answer=parsed.explanation,
                sql=parsed.sql,
                chart=parsed.chart,
                data=result.chart_data,
            )

        state = RunState.EXHAUSTED
        logger.error(
            "Attempt limit reached",
            extra={"state": state.value, "max_attempts": self.max_attempts, "error": last_error},
        )
        raise AttemptsExhausted(last_error)
