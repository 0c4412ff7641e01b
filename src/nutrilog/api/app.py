"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nutrilog.api.routes import router
from nutrilog.app_logging import configure_logging
from nutrilog.containers import AppContainer
from nutrilog.errors import NutrilogError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(router)

    @app.exception_handler(NutrilogError)
    async def nutrilog_error_handler(
        request: Request, exc: NutrilogError
    ) -> JSONResponse:
        """Render service errors as alert payloads."""
        logger.warning(
            "Request failed: %s %s: %s", request.method, request.url.path, exc.message
        )
        state_container: AppContainer = request.app.state.container
        return JSONResponse(
            status_code=exc.status_code,
            content={"title": "Error", "message": _alert_message(state_container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _alert_message(state_container: AppContainer, exc: NutrilogError) -> str:
    """Return the static alert text with the underlying cause in local runs."""
    cause = exc.__cause__
    if state_container.settings.environment == "local" and cause is not None:
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{exc.message} (debug: {detail})"
    return exc.message
