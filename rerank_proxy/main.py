"""Application entrypoint for the rerank proxy FastAPI service."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rerank_proxy.api import api_router
from rerank_proxy.config import Settings, get_settings
from rerank_proxy.errors import ErrorKind, RerankProxyError, status_for
from rerank_proxy.logging_config import configure_logging
from rerank_proxy.models import ErrorEnvelope, HealthResponse

logger = logging.getLogger(__name__)

_HTTP_ERROR_KINDS = {
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.METHOD_NOT_ALLOWED,
}


def _envelope_response(status_code: int, kind: ErrorKind, message: str) -> JSONResponse:
    envelope = ErrorEnvelope(error=kind.value, message=message)
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network layer of the shared upstream client,
    which lets tests put an ``httpx.MockTransport`` in front of the proxy.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the shared upstream connection pool for the app's lifetime."""
        logger.info("Starting rerank proxy server")
        logger.info("TEI endpoint: %s", settings.upstream_rerank_url)
        logger.info("Listening on port: %s", settings.TEI_PROXY_PORT)
        logger.info("Max client batch size: %s", settings.MAX_CLIENT_BATCH_SIZE)

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT),
            transport=transport,
            follow_redirects=False,
        ) as client:
            app.state.http_client = client
            logger.info("Server started successfully")
            yield
            logger.info("Shutting down rerank proxy server")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["content-type", "authorization"],
    )

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Liveness probe; never touches the upstream."""
        return HealthResponse()

    @app.exception_handler(RerankProxyError)
    async def proxy_error_handler(request: Request, exc: RerankProxyError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope().model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        kind = _HTTP_ERROR_KINDS.get(exc.status_code, ErrorKind.INTERNAL_ERROR)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _envelope_response(exc.status_code, kind, message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler for unhandled errors"""
        logger.exception("Unhandled error: %s", exc)
        return _envelope_response(
            status_for(ErrorKind.INTERNAL_ERROR), ErrorKind.INTERNAL_ERROR, "Internal Server Error"
        )

    app.include_router(api_router)

    return app


def run() -> None:
    """Serve the proxy with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(
        "rerank_proxy.main:app",
        host="0.0.0.0",
        port=settings.TEI_PROXY_PORT,
        log_level=settings.LOG_LEVEL,
    )


app = create_app()


if __name__ == "__main__":
    run()
