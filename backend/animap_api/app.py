"""Application factory for the Animap API."""
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import episodes, health, mappings
from .settings import AnimapSettings
from .state import AppState


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    app.state.app_state.close()


def create_app(
    settings: AnimapSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or AnimapSettings()
    app_state = AppState(settings=resolved_settings, transport=transport)

    app = FastAPI(title="Animap API", version="0.1.0", lifespan=_lifespan)
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (
        health.router,
        episodes.router,
        mappings.router,
    ):
        app.include_router(router)

    return app
