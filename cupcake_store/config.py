"""
Cupcake Store — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates and normalizes them, and exposes a singleton `settings`.
Who:   Imported by the application factory, the entry point and Alembic.
When:  Loaded once at module import time.

Environment variables:
    PORT, HOST              Server bind address (default 0.0.0.0:8080)
    DB_DIALECT              sqlite | postgres (default sqlite)
    DB_DSN                  Path or DSN for the dialect (default cupcake_store.db)
    LOG_LEVEL               debug | info | warn | error | critical (default info)
    STATIC_DIR              Directory holding the frontend (default web)

An empty variable is treated as unset, so `PORT=` falls back to 8080.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that run the service against a local SQLite
    file. Production deployments override DB_DIALECT and DB_DSN.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # What: Seconds an idle keep-alive connection is held open
    keep_alive_timeout: int = Field(default=60, ge=1, le=600)

    # What: Seconds in-flight requests get to finish on SIGTERM/SIGINT
    shutdown_timeout: int = Field(default=30, ge=1, le=300)

    # ── Database ──────────────────────────────────────────────────────────
    # What: Which relational engine to talk to
    # Values: sqlite (development, aiosqlite driver), postgres (asyncpg driver)
    db_dialect: str = Field(default="sqlite")

    # What: Engine-specific data source
    # sqlite:   a file path, ":memory:", or a sqlite:// URL
    # postgres: a postgres:// URL or a libpq "host=... user=... dbname=..." string
    db_dsn: str = Field(default="cupcake_store.db")

    # Pool sizing, applied to PostgreSQL only (SQLite uses the driver default)
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING (or WARN), ERROR, CRITICAL, case-insensitive
    log_level: str = Field(default="INFO")

    # ── Frontend ──────────────────────────────────────────────────────────
    # What: Directory served at "/" (index.html + app.js)
    static_dir: str = Field(default="web")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        upper = v.strip().upper()
        if upper == "WARN":
            upper = "WARNING"
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("db_dialect")
    @classmethod
    def normalize_db_dialect(cls, v: str) -> str:
        """
        Lower-cases the dialect name and folds `postgresql` into `postgres`.

        Unknown dialects are NOT rejected here: the database layer raises
        UnsupportedDialectError when it builds the connection URL, which is
        the startup failure operators expect to see.
        """
        dialect = v.strip().lower()
        if dialect == "postgresql":
            return "postgres"
        return dialect

    @property
    def sql_echo(self) -> bool:
        """SQL statement logging is only useful at DEBUG level."""
        return self.log_level == "DEBUG"


# Singleton instance: the default configuration for the app factory
settings = Settings()
