"""FastAPI application factory and configuration."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

from clusterdeck.api import health, external_links, self_registration
from clusterdeck.database import init_db
from clusterdeck.config import settings
from clusterdeck.errors import ApiError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logging.getLogger("sqlalchemy").setLevel(logging.ERROR)
logging.getLogger("uvicorn.access").setLevel(logging.ERROR)  # Suppress HTTP access logs

logger = logging.getLogger(__name__)


def install_error_handlers(app: FastAPI):
    """Render service errors as {code, internalMessage, userMessage}."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Unhandled storage error on {request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "code": "500",
                "internalMessage": str(exc) if settings.DEBUG else "storage failure",
                "userMessage": "Internal server error",
            },
        )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="External linkouts and self-registration roles",
        version=settings.APP_VERSION,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    # Routes
    app.include_router(health.router)
    app.include_router(external_links.router)
    app.include_router(self_registration.router)

    @app.on_event("startup")
    async def startup_event():
        """Initialize database on startup."""
        await init_db()

    return app


if __name__ == "__main__":
    import uvicorn
    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=3000)
