"""
FastAPI application entrypoint for the audit trail API.

This module sets up the FastAPI app, configures logging, and registers
route handlers.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import audit_log
from shared.config import get_config
from shared.logging import configure_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_config()

    configure_logging(
        level=config.log_level,
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )

    app = FastAPI(
        title="Portfolio Audit Trail API",
        description="Read access to the admin back office audit trail",
        version="0.1.0",
    )

    # The admin dashboard is served from the same site; only GET is exposed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(audit_log.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
