"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. CORS configuration
4. Exception handlers
5. Startup/shutdown events

Run with: uvicorn chatbridge.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatbridge import __version__
from chatbridge.core.config import get_settings
from chatbridge.core.exceptions import ChatbridgeException, ValidationError
from chatbridge.core.logging_config import setup_logging, get_logger
from chatbridge.api.routes import chat_router, health_router, users_router


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create the Users table if missing
    - Shutdown: close pooled connections
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"OpenWebUI: {settings.openwebui_base_url} (model={settings.openwebui_model})")
    if not settings.openwebui_api_key:
        logger.warning("OPENWEBUI_API_KEY is not set; /chat will be unavailable")

    from chatbridge.database import init_user_tables
    try:
        init_user_tables()
    except Exception as e:
        logger.error(f"Failed to auto-init tables: {e}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from chatbridge.database import get_database
    from chatbridge.services import chat_service
    try:
        get_database().close()
        if chat_service._chat_service is not None:
            chat_service._chat_service.client.close()
    except Exception as e:
        logger.error(f"Error closing connections: {e}")


app = FastAPI(
    title="chatbridge API",
    description="""
    Users API plus knowledge-base question answering through OpenWebUI.

    - **Users**: list and create users
    - **Chat**: ask questions against a knowledge collection; answers come
      with deduplicated sources
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration
# ============================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "PUT", "POST"],
    allow_headers=["*"],
)


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(ChatbridgeException)
async def chatbridge_exception_handler(request: Request, exc: ChatbridgeException):
    """Handle all application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(users_router)
app.include_router(chat_router)


@app.get("/", include_in_schema=False)
async def root():
    """Main route."""
    return {"message": "Welcome to the app"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatbridge.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development()
    )
