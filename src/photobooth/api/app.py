"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from photobooth.api.gallery import router as gallery_router
from photobooth.api.media import router as media_router
from photobooth.app_logging import configure_logging
from photobooth.containers import AppContainer
from photobooth.domain.errors import NotFound, StoreFailure, ValidationFailure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Photobooth server started",
            extra={"base_url": app.state.container.network_resolver.base_url()},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(media_router)
    app.include_router(gallery_router)

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)}
        )

    @app.exception_handler(ValidationFailure)
    async def invalid_request(
        request: Request, exc: ValidationFailure
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Malformed request"},
        )

    @app.exception_handler(StoreFailure)
    async def store_failure(request: Request, exc: StoreFailure) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.action, "message": exc.detail},
        )

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Simple liveness endpoint."""
        return {
            "status": "Server is running",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.get("/api/config")
    async def config(request: Request) -> dict[str, str]:
        """Report the base URL phones should use for share links."""
        state_container: AppContainer = request.app.state.container
        return {"baseURL": state_container.network_resolver.base_url()}

    return app
