from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

_COLUMNS_SQL = text(
    """
    SELECT table_name, column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = :schema
    ORDER BY table_name, ordinal_position
    """
)


class DatabaseUnavailable(RuntimeError):
    """The database cannot be reached or its catalog cannot be queried."""


@dataclass(frozen=True, slots=True)
class ColumnInfo:
    table_name: str
    column_name: str
    data_type: str
    is_nullable: bool


class SchemaIntrospector:
    """Reads a live snapshot of table/column metadata. Never cached."""

    def __init__(self, engine: Engine, schema: str = "public"):
        self.engine = engine
        self.schema = schema

    def check_connection(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database connection test failed", extra={"stage": "connect", "error": str(exc)})
            raise DatabaseUnavailable(f"Unable to connect to the database: {driver_message(exc)}") from exc

    def describe_schema(self) -> list[ColumnInfo]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_COLUMNS_SQL, {"schema": self.schema}).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Schema introspection failed", extra={"stage": "schema", "error": str(exc)})
            raise DatabaseUnavailable(f"Database connection error: {driver_message(exc)}") from exc

        columns = [
            ColumnInfo(
                table_name=str(row["table_name"]),
                column_name=str(row["column_name"]),
                data_type=str(row["data_type"]),
                is_nullable=str(row["is_nullable"]).upper() == "YES",
            )
            for row in rows
        ]
        logger.debug(
            "Schema introspected",
            extra={"stage": "schema", "tables": len({c.table_name for c in columns}), "columns": len(columns)},
        )
        return columns


def driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc).strip()
