from __future__ import annotations  # FastAPI server exposing interview slot scheduling

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as interview_router
from config.settings import settings
from scheduling.clock import SystemClock
from services.expiry import ExpirySweeper, SweepLoop
from storage.interviews import InterviewStore
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # Migrate schema and run the recurring sweep
    migrate(settings.DB_PATH)
    loop: Optional[SweepLoop] = None
    if settings.SWEEP_ENABLED:
        loop = SweepLoop(ExpirySweeper(InterviewStore(), SystemClock()), settings.SWEEP_INTERVAL_SECONDS)
        loop.start()
        logger.info("Expiry sweeper running every %ss", settings.SWEEP_INTERVAL_SECONDS)
    app.state.sweep_loop = loop
    try:
        yield
    finally:
        if loop is not None:
            loop.stop()


def create_app() -> FastAPI:  # Build the API application
    application = FastAPI(title="Interview Scheduling API", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(interview_router)

    @application.get("/health")
    def health() -> dict:  # Liveness probe
        return {"status": "ok"}

    return application


app = create_app()
