"""
FastAPI Server for NWN2 Reference Tables
- Shared string resolver and table loader registered at startup
- Background string table loading so the first table request rarely waits
"""

import asyncio
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import ReferenceSettings, settings
from services.resource_fetcher import (
    ChainedResourceFetcher,
    DirectoryResourceFetcher,
    ZipResourceFetcher,
)
from services.shared_services import (
    STRING_RESOLVER,
    TABLE_LOADER,
    clear_shared_services,
    list_shared_services,
    register_shared_service,
)
from services.string_resolver import StringRefResolver
from services.table_loader import ReferenceTableLoader


def build_fetcher(app_settings: ReferenceSettings):
    """Loose data folder first, then the data archive when one is configured"""
    fetchers = [DirectoryResourceFetcher(app_settings.resolved_data_dir())]
    if app_settings.data_zip is not None:
        fetchers.append(ZipResourceFetcher(app_settings.data_zip))
    return ChainedResourceFetcher(fetchers)


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Add request ID and timing for better error tracking"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Request {request_id}: {request.method} {request.url.path} - {response.status_code} ({duration:.3f}s)")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


def create_app(app_settings: Optional[ReferenceSettings] = None, fetcher=None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment settings)
        fetcher: Resource fetcher override, mainly for tests
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Reference table server starting up...")
        source = fetcher or build_fetcher(app_settings)
        resolver = StringRefResolver(
            source,
            standard_name=app_settings.standard_tlk,
            custom_name=app_settings.custom_tlk
        )
        register_shared_service(STRING_RESOLVER, resolver)
        register_shared_service(TABLE_LOADER, ReferenceTableLoader(source, resolver))

        # Start loading string tables right away; requests share the same load
        init_task = asyncio.create_task(resolver.initialize())
        logger.info("Background string table loading scheduled")

        yield

        await init_task
        clear_shared_services()
        logger.info("Reference table server shutting down...")

    app = FastAPI(
        title="NWN2 Reference Tables API",
        description="Decoded 2DA reference tables with TLK string resolution",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(RequestTrackingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors"""
        logger.warning(f"Validation error on {request.url}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "detail": "Invalid request data",
                "errors": exc.errors()
            }
        )

    @app.exception_handler(StarletteHTTPException)
    def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent format"""
        logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "http_error",
                "detail": exc.detail
            }
        )

    @app.exception_handler(Exception)
    def global_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions"""
        logger.exception(f"Unhandled error on {request.url}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "detail": "An unexpected error occurred"
            }
        )

    @app.get("/api/health")
    def health():
        return {"status": "ok", "services": list_shared_services()}

    from fastapi_routers import reference
    app.include_router(reference.router, prefix="/api/reference", tags=["reference"])

    return app


def main():
    """Main entry point for the reference table server"""
    from config.logging_config import configure_logging

    configure_logging()
    logger.info("Starting NWN2 reference table backend...")
    logger.info(f"Server configuration: {settings.host}:{settings.port}")

    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level="info" if settings.log_level == "DEBUG" else "warning"
        )
    except Exception as e:
        logger.error(f"Failed to start FastAPI server: {e}")
        raise


if __name__ == "__main__":
    main()
