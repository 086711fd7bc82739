# design_poker/app/main.py

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import setup_json_logging, settings
from app.api.routes.estimates import router as estimates_router
from app.api.routes.sessions import router as sessions_router
from app.api.routes.tasks import router as tasks_router


def create_app() -> FastAPI:
    setup_json_logging(log_level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    app = FastAPI(
        title="DESIGN POKER - Estimation API",
        version="0.1.0",
    )

    app.include_router(estimates_router)
    app.include_router(sessions_router)
    app.include_router(tasks_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
