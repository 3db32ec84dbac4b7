import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from speculum.config import settings
from speculum.database import check_connection, close_db, db_status, init_db
from speculum.dependencies.database import require_database
from speculum.middleware.csp_nonce import CSPNonceMiddleware
from speculum.middleware.security_headers import SecurityHeadersMiddleware
from speculum.services.csrf_service import CSRFMiddleware
from speculum.services.upload_service import get_upload_dir
from speculum.web.auth_routes import router as auth_router
from speculum.web.card_routes import router as card_router
from speculum.web.comment_routes import router as comments_router
from speculum.web.db_router import create_db_router
from speculum.web.legal_routes import router as legal_router
from speculum.web.post_routes import router as post_router
from speculum.web.sitemap_routes import router as sitemap_router
from speculum.web.static_routes import router as static_router
from speculum.web.upload_routes import router as upload_router
from speculum.web.utility_routes import router as utility_router

_log_dir = Path(settings.LOG_DIR)
_log_dir.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.FileHandler(_log_dir / "app.log"), logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


def connect_database() -> bool:
    """Create the schema and verify a round trip; updates db_status."""
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error(f"[FAIL] Database schema could not be created: {e}")
        db_status.mark_unavailable(str(e))
        return False

    connected, error = check_connection()
    if not connected:
        logger.error(f"[FAIL] Database connection failed: {error}")
        db_status.mark_unavailable(error)
        return False

    db_status.mark_ready()
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown events"""
    logger.info(f"[>>] Starting {settings.APP_NAME} {settings.APP_VERSION}...")
    logger.info(f"Server mode: {'Development' if settings.DEBUG else 'Production'}")

    if connect_database():
        logger.info("[OK] Database initialized")
    elif settings.DB_STARTUP_REQUIRED:
        raise RuntimeError("Database unavailable at startup")
    else:
        logger.warning(
            "[WARN] Database unavailable but continuing (DB_STARTUP_REQUIRED=False)"
        )

    yield
    logger.info(f"[<<] Shutting down {settings.APP_NAME}...")
    db_status.mark_unavailable("shutdown")
    close_db()
    logger.info("[OK] Database connections closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Self-hosted blog",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log every unhandled exception, answer with a generic 500"""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        str(exc),
        exc_info=True,
    )
    return PlainTextResponse(
        "Internal Server Error. Please try again later.",
        status_code=500,
    )


# Sets the base Content-Security-Policy header
app.add_middleware(SecurityHeadersMiddleware)

# Added after SecurityHeadersMiddleware so it wraps it and sees the CSP header
app.add_middleware(
    CSPNonceMiddleware,
    script_hashes=settings.csp_script_hashes_list,
    style_hashes=settings.csp_style_hashes_list,
)

app.add_middleware(CSRFMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-CSRF-Token"],
)


APP_DIR = Path(__file__).parent

static_dir = APP_DIR / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

app.mount("/media", StaticFiles(directory=str(get_upload_dir())), name="media")

# Routes without database dependency
app.include_router(utility_router, prefix="/api")
app.include_router(legal_router)

# Everything else sits behind the database readiness gate
app.include_router(
    create_db_router(
        require_database,
        {
            "static_router": static_router,
            "sitemap_router": sitemap_router,
            "auth_router": auth_router,
            "post_router": post_router,
            "upload_router": upload_router,
            "comments_router": comments_router,
            "card_router": card_router,
        },
    )
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
