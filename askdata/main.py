import argparse
import sys

import uvicorn
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from askdata.agent import AttemptsExhausted
from askdata.api import build_agent, create_app
from askdata.cli_ui import print_answer, print_error, print_startup_ui
from askdata.config import ConfigError, Settings
from askdata.db import create_db_engine
from askdata.db_init import run_sql_script
from askdata.logging_config import configure_logging
from askdata.schema_introspector import DatabaseUnavailable, driver_message

VERSION = "1.0.0"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AskData: natural-language questions over PostgreSQL")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--ask", metavar="QUESTION", default=None, help="answer one question and exit")
    mode.add_argument(
        "--sql-file",
        default=None,
        help="run a SQL script statement by statement (e.g. sql/demo_data.sql) and exit",
    )
    parser.add_argument("--host", default=None, help="bind address for the API server (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="port for the API server (default: PORT or 3000)")
    parser.add_argument("--env-file", default=".env", help="dotenv file to load (default: .env)")
    return parser.parse_args(argv)


def _ask_once(settings: Settings, question: str) -> int:
    engine = create_db_engine(settings)
    try:
        agent = build_agent(settings, engine)
        answer = agent.answer(question)
    except DatabaseUnavailable as exc:
        print_error("Database connection error", str(exc))
        return 1
    except AttemptsExhausted as exc:
        print_error(str(exc), exc.details)
        return 1
    finally:
        engine.dispose()

    print_answer(answer)
    return 0


def _run_sql_file(settings: Settings, sql_file: str) -> int:
    engine = create_db_engine(settings)
    console = Console()
    try:
        count = run_sql_script(engine, sql_file)
    except FileNotFoundError as exc:
        print_error(str(exc))
        return 1
    except SQLAlchemyError as exc:
        print_error(f"SQL script failed: {sql_file}", driver_message(exc))
        return 1
    finally:
        engine.dispose()

    console.print(f"[green][Batch SQL] {count} statement(s) executed from {sql_file}[/green]")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = Settings.load(args.env_file)
    except ConfigError as exc:
        print_error("Configuration error", str(exc))
        return 2

    configure_logging(settings.log_level)

    if args.sql_file:
        return _run_sql_file(settings, args.sql_file)
    if args.ask:
        return _ask_once(settings, args.ask)

    host = args.host or settings.host
    port = args.port or settings.port
    print_startup_ui(
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        listen=f"http://{host}:{port}",
        version=VERSION,
    )
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
