"""
Cloud Code Bridge Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cloudcode_proxy.api.deps import get_backend_client
from cloudcode_proxy.api.proxy import messages_router, models_router
from cloudcode_proxy.api.system import router as system_router
from cloudcode_proxy.common.errors import AppError, NotFoundError
from cloudcode_proxy.config import get_settings
from cloudcode_proxy.logging_config import setup_logging
from cloudcode_proxy.middleware import BodyLimitMiddleware, RequestLogMiddleware

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Close the shared backend connection pool on shutdown.
    """
    settings = get_settings()
    logger.info("Cloud Code endpoints: %s", ", ".join(settings.CLOUDCODE_ENDPOINTS))
    yield
    await get_backend_client().close()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Anthropic Messages compatible proxy for Google Cloud Code",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
# Parse ALLOWED_ORIGINS from comma-separated string to list
allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials="*" not in allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions

    Rendered as the Messages API error body.
    """
    if exc.details:
        logger.debug("Error details: path=%s details=%s", request.url.path, exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    Stack traces are logged but never returned to clients.
    """
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )
    message = str(exc) if get_settings().DEBUG else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=AppError(message).to_dict(),
    )


# Register Routers
app.include_router(system_router)
app.include_router(models_router)
app.include_router(messages_router)


# Catch-all for unsupported endpoints (registered last)
@app.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def not_found(request: Request, path: str):
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    raise NotFoundError(f"Endpoint {request.method} {target} not found")


def main() -> None:
    """Run the proxy with uvicorn"""
    uvicorn.run(
        "cloudcode_proxy.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
