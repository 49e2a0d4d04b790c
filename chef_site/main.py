"""
FastAPI application entry point.
Builds the application with middleware, exception handlers and routes, and
owns the database lifecycle through the lifespan handler.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, List, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from chef_site.config import settings
from chef_site.database import Database
from chef_site.errors import AppError
from chef_site.routes import admin_blog, auth, blog, bookings, categories, forms, gallery, menu_items, site, stats, users
from chef_site.services.notifications import Mailer
from chef_site.services.seed import seed_default_data
from chef_site.utils.image_processor import ensure_upload_dirs
from chef_site.utils.mailer import SmtpMailer, TemplateRenderer
from chef_site.utils.rate_limit import limiter
from chef_site.utils.sessions import SessionStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: connect and prepare the database, then seed first-start data.
    A database that is configured but cannot be initialised aborts startup.
    Without DATABASE_URL the app still starts and database routes answer 500.
    """
    database: Database = app.state.database
    ensure_upload_dirs(app.state.upload_root)
    logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

    if database.configured:
        try:
            await database.connect()
            await database.init_schema()
        except Exception as e:
            logger.critical(f"Database initialization failed, aborting startup: {str(e)}", exc_info=True)
            raise

        await SessionStore(database).prune_expired()
        if settings.SEED_DEFAULT_DATA:
            await seed_default_data(database, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD)
    else:
        logger.warning("DATABASE_URL not configured - database features will be unavailable")

    yield

    await database.dispose()


def _field_errors(errors: List[Any]) -> str:
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(messages) or "Validation error"


def _error_details(errors: List[Any]) -> List[dict]:
    # Raw inputs (uploads, bytes) are not echoed back
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Translate every error into a `{"error": message}` JSON response."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(
                f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
                exc_info=exc.__cause__ is not None,
            )
        else:
            logger.warning(
                f"{type(exc).__name__} on {request.method} {request.url.path}: "
                f"{exc.status_code} {exc.message}"
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"error": "Too many attempts. Please try again later."},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions (404 for unknown routes, 405, etc.)."""
        logger.warning(
            f"HTTPException on {request.method} {request.url.path}: {exc.status_code} {exc.detail}"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": _field_errors(exc.errors()),
                "detail": _error_details(exc.errors()),
            },
        )

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(request: Request, exc: PydanticValidationError):
        """Handle validation of form data parsed inside route handlers."""
        errors = exc.errors(include_url=False)
        logger.warning(f"Form validation error on {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": _field_errors(errors),
                "detail": _error_details(errors),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"  Error: {str(exc)}\n"
            f"  Error type: {type(exc).__name__}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(
    mailer: Optional[Mailer] = None,
    database: Optional[Database] = None,
    upload_root: Optional[Path] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        mailer: Outgoing mail transport; defaults to SMTP from settings
        database: Database handle; defaults to DATABASE_URL
        upload_root: Directory for processed uploads; defaults to UPLOAD_DIR

    Returns:
        FastAPI: Configured application (database connects on startup)
    """
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    app.state.database = database or Database(settings.async_database_url, echo=settings.DB_ECHO)
    app.state.upload_root = upload_root or Path(settings.UPLOAD_DIR)
    app.state.renderer = TemplateRenderer()
    app.state.mailer = mailer or SmtpMailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        user=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        use_tls=settings.SMTP_USE_TLS,
    )
    app.state.limiter = limiter

    # CORS Middleware Configuration
    # The session cookie is sent cross-origin, so origins are listed explicitly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        max_age=3600,  # Cache preflight requests for 1 hour
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its response status."""
        method = request.method
        path = request.url.path
        logger.debug(f"Incoming {method} request to {path} from origin: {request.headers.get('origin', 'No origin header')}")
        response = await call_next(request)
        logger.info(f"Response status: {response.status_code} for {method} {path}")
        return response

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(categories.router, prefix="/api", tags=["categories"])
    app.include_router(menu_items.router, prefix="/api", tags=["menu"])
    app.include_router(gallery.router, prefix="/api", tags=["gallery"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(bookings.router, prefix="/api", tags=["bookings"])
    app.include_router(forms.router, prefix="/api", tags=["forms"])
    app.include_router(blog.router, prefix="/api", tags=["blog"])
    app.include_router(admin_blog.router, prefix="/api", tags=["blog admin"])
    app.include_router(stats.router, prefix="/api", tags=["stats"])
    app.include_router(site.router, tags=["site"])

    # Processed images; directories are created on startup
    app.mount("/uploads", StaticFiles(directory=str(app.state.upload_root), check_dir=False), name="uploads")

    return app


app = create_app()
