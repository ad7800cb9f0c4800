from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from askdata.charting import shape_chart_data
from askdata.schema_introspector import driver_message
from askdata.sql_firewall import validate_sql

logger = logging.getLogger(__name__)


class SqlExecutionError(RuntimeError):
    """The SQL was rejected or failed in the database; nothing was applied."""


@dataclass(frozen=True)
class QueryResult:
    columns: list[str]
    rows: list[dict[str, Any]]
    chart_data: list[dict[str, Any]] = field(default_factory=list)


class SQLQueryExecutor:
    """Execute one model-generated statement against the shared pool."""

    def __init__(self, engine: Engine, read_only: bool = True):
        self.engine = engine
        self.read_only = read_only

    def run(self, sql: str) -> QueryResult:
        if self.read_only:
            ok, reason = validate_sql(sql)
            if not ok:
                raise SqlExecutionError(reason or "SQL rejected by firewall")

        try:
            # engine.begin(): commit on success, rollback on any error
            with self.engine.begin() as conn:
                # verbatim: no bind-parameter parsing, "%" and ":name" stay literal
                result = conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
                if result.returns_rows:
                    columns = list(result.keys())
                    rows = [dict(row) for row in result.mappings().all()]
                else:
                    columns, rows = [], []
        except SQLAlchemyError as exc:
            message = driver_message(exc)
            logger.warning("SQL execution failed", extra={"stage": "execute", "error": message})
            raise SqlExecutionError(message) from exc

        logger.debug("SQL executed", extra={"stage": "execute", "row_count": len(rows)})
        return QueryResult(columns=columns, rows=rows, chart_data=shape_chart_data(rows))
