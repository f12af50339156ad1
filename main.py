# backend/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.errors import install_error_handlers
from core.logging_config import setup_logging
from core.providers import init_providers
from core.settings import get_settings

# Routers
from health.router import router as health_router
from videos import router as videos_routes
from audio import router as audio_routes

logger = logging.getLogger(__name__)

settings = get_settings()
setup_logging(settings.server.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage client is built once here and shared by every request
    init_providers(app)
    logger.info("Signed-asset gateway ready on port %s", settings.server.port)
    yield


# ---------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------

app = FastAPI(
    title="Signed Asset Gateway",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(
    app,
    upload_labels={
        videos_routes.UPLOAD_PATH: videos_routes.UPLOAD_ERROR_LABEL,
        audio_routes.UPLOAD_PATH: audio_routes.UPLOAD_ERROR_LABEL,
    },
)


# ---------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------

app.include_router(health_router)
app.include_router(videos_routes.router)
app.include_router(audio_routes.router)


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server.host,
        port=settings.server.port,
    )
