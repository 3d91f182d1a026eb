"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodshare.api.admin import router as admin_router
from foodshare.api.listings import router as listings_router
from foodshare.api.rewards import router as rewards_router
from foodshare.app_logging import configure_logging
from foodshare.config import parse_allowed_origins
from foodshare.containers import AppContainer
from foodshare.exceptions import ReservationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.expiry_sweep_interval_seconds > 0:
            state_container.expiry_sweeper.start()
            logger.info(
                "Expiry sweeper started",
                extra={
                    "interval_seconds": (
                        state_container.settings.expiry_sweep_interval_seconds
                    )
                },
            )
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(listings_router)
    app.include_router(rewards_router)
    app.include_router(admin_router)

    @app.exception_handler(ReservationError)
    async def reservation_error_handler(
        request: Request, exc: ReservationError
    ) -> JSONResponse:
        """Surface workflow errors as rejected actions."""
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "error": exc.code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.code,
                "detail": str(exc),
                "retryable": exc.retryable,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
