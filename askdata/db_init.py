from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def split_sql_statements(raw_sql: str) -> list[str]:
    """Split a script on ';' outside quotes, dropping whole-line '--' comments."""
    statements: list[str] = []
    current: list[str] = []
    in_single = False
    in_double = False

    lines = [line for line in raw_sql.splitlines() if not line.strip().startswith("--")]
    for char in "\n".join(lines):
        if char == "'" and not in_double:
            in_single = not in_single
        elif char == '"' and not in_single:
            in_double = not in_double

        if char == ";" and not in_single and not in_double:
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            continue

        current.append(char)

    trailing = "".join(current).strip()
    if trailing:
        statements.append(trailing)
    return statements


def run_sql_script(engine: Engine, sql_file: str | Path) -> int:
    """Execute every statement of a SQL file in one transaction; returns the statement count."""
    path = Path(sql_file)
    if not path.exists():
        raise FileNotFoundError(f"SQL file not found: {sql_file}")

    statements = split_sql_statements(path.read_text(encoding="utf-8"))
    if not statements:
        logger.info("SQL file has no executable statements", extra={"path": str(path)})
        return 0

    with engine.begin() as conn:
        for idx, statement in enumerate(statements, start=1):
            conn.exec_driver_sql(statement, execution_options={"no_parameters": True})
            logger.debug("Statement executed", extra={"index": idx, "total": len(statements)})

    logger.info("SQL file executed", extra={"path": str(path), "statements": len(statements)})
    return len(statements)
