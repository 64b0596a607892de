"""
Environment-based configuration for the portfolio admin audit trail.

This module exposes a small, typed configuration surface shared by the
audit recorder, the API service and the migration environment. All values
are sourced from environment variables with sensible, non-secret defaults.

No secrets or credentials are hard-coded here; they must be provided via
the environment (or tooling such as python-dotenv in local development).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Optional

Environment = Literal["local", "dev", "staging", "prod"]

DEFAULT_AUDIT_LIST_LIMIT = 100
MAX_AUDIT_LIST_LIMIT = 500


@dataclass(frozen=True)
class AppConfig:
    """
    Top-level application configuration.

    A missing database URL is a supported state: the site still serves
    content, and the audit recorder degrades to a logged no-op.
    """

    environment: Environment
    log_level: str

    # Optional file path for structured JSON logs; when set, logs are written
    # to file (and stdout if log_stdout).
    log_file: Optional[str]
    # When True, logs go to stdout. When False, only file (if LOG_FILE set). Default True.
    log_stdout: bool

    # Connection URI only; credentials come from the environment.
    database_url: Optional[str]

    # Page size of the audit trail listing
    audit_list_limit: int

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Construct configuration from environment variables.

        All fields have defaults suitable for local development.
        Production deployments are expected to override these via env vars.
        """

        environment = os.getenv("APP_ENV", "local")

        if environment not in {"local", "dev", "staging", "prod"}:
            raise ValueError(f"Unsupported APP_ENV value: {environment!r}")

        log_stdout_raw = (os.getenv("LOG_STDOUT") or "true").strip().lower()
        log_stdout = log_stdout_raw in ("true", "1", "yes")

        def _audit_list_limit() -> int:
            raw = os.getenv("AUDIT_LIST_LIMIT", str(DEFAULT_AUDIT_LIST_LIMIT)).strip()
            try:
                limit = int(raw)
            except ValueError:
                return DEFAULT_AUDIT_LIST_LIMIT
            return max(1, min(MAX_AUDIT_LIST_LIMIT, limit))

        return cls(
            environment=environment,  # type: ignore[arg-type]
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_stdout=log_stdout,
            database_url=(os.getenv("DATABASE_URL") or "").strip() or None,
            audit_list_limit=_audit_list_limit(),
        )


def get_config() -> AppConfig:
    """
    Helper to obtain the current configuration.

    Reads the environment on every call, so tests can monkeypatch variables
    without resetting any cached state.
    """

    return AppConfig.from_env()
