from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised when required environment configuration is invalid."""


@dataclass(slots=True)
class Settings:
    database_url: str
    llm_api_key: str
    llm_base_url: str = GEMINI_OPENAI_BASE_URL
    llm_model: str = "gemini-2.0-flash"
    temperature: float = 0.0
    max_tokens: int = 1024
    llm_timeout: float = 60.0
    db_schema: str = "public"
    db_pool_size: int = 5
    db_max_overflow: int = 5
    db_pool_timeout: int = 30
    db_connect_timeout: int = 10
    db_statement_timeout_ms: int = 30000
    sql_dialect: str = "PostgreSQL"
    sql_read_only: bool = True
    agent_max_attempts: int = 3
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def load(cls, env_file: str | Path = ".env") -> "Settings":
        load_dotenv(dotenv_path=env_file)

        database_url = _first_env("DATABASE_URL", "SUPABASE_DB_URL")
        llm_api_key = _first_env("LLM_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY")

        missing = []
        if not database_url:
            db_user = _first_env("PGUSER", "DB_USER")
            db_name = _first_env("PGDATABASE", "DB_NAME")
            if not db_user:
                missing.append("DATABASE_URL or PGUSER/DB_USER")
            if not db_name:
                missing.append("DATABASE_URL or PGDATABASE/DB_NAME")
            if db_user and db_name:
                database_url = URL.create(
                    "postgresql+psycopg2",
                    username=db_user,
                    password=_first_env("PGPASSWORD", "DB_PASSWORD", default="") or None,
                    host=_first_env("PGHOST", "DB_HOST", default="localhost"),
                    port=_int_env(("PGPORT", "DB_PORT"), default=5432),
                    database=db_name,
                ).render_as_string(hide_password=False)
        if not llm_api_key:
            missing.append("LLM_API_KEY/GEMINI_API_KEY/OPENAI_API_KEY")

        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        agent_max_attempts = _int_env(("AGENT_MAX_ATTEMPTS",), default=3)
        if agent_max_attempts < 1:
            raise ConfigError("Environment variable AGENT_MAX_ATTEMPTS must be at least 1.")

        origins = _first_env("CORS_ORIGINS", default="*") or "*"

        return cls(
            database_url=database_url,
            llm_api_key=llm_api_key,
            llm_base_url=_first_env("LLM_BASE_URL", default=GEMINI_OPENAI_BASE_URL),
            llm_model=_first_env("LLM_MODEL", "GEMINI_MODEL", default="gemini-2.0-flash"),
            temperature=_float_env(("LLM_TEMPERATURE",), default=0.0),
            max_tokens=_int_env(("LLM_MAX_TOKENS",), default=1024),
            llm_timeout=_float_env(("LLM_TIMEOUT",), default=60.0),
            db_schema=_first_env("DB_SCHEMA", default="public"),
            db_pool_size=_int_env(("DB_POOL_SIZE",), default=5),
            db_max_overflow=_int_env(("DB_MAX_OVERFLOW",), default=5),
            db_pool_timeout=_int_env(("DB_POOL_TIMEOUT",), default=30),
            db_connect_timeout=_int_env(("DB_CONNECT_TIMEOUT",), default=10),
            db_statement_timeout_ms=_int_env(("DB_STATEMENT_TIMEOUT_MS",), default=30000),
            sql_dialect=_first_env("SQL_DIALECT", default="PostgreSQL"),
            sql_read_only=_bool_env(("SQL_READ_ONLY",), default=True),
            agent_max_attempts=agent_max_attempts,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=(_first_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
            host=_first_env("HOST", default="0.0.0.0"),
            port=_int_env(("PORT",), default=3000),
        )


def _first_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value != "":
            return value
    return default


def _int_env(keys: tuple[str, ...], default: int) -> int:
    raw = _first_env(*keys)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {keys[0]} must be an integer.") from exc


def _float_env(keys: tuple[str, ...], default: float) -> float:
    raw = _first_env(*keys)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {keys[0]} must be a number.") from exc


def _bool_env(keys: tuple[str, ...], default: bool) -> bool:
    raw = _first_env(*keys)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {keys[0]} must be a boolean (true/false).")
