from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    SQLAlchemyError,
    OperationalError,
)
from starlette import status
from yello_admin import database
from yello_admin.database import Base, engine
from yello_admin.config import settings
from yello_admin import models
from yello_admin.limits import limiter, RateLimitExceeded, SlowAPIMiddleware
from yello_admin.scheduler import VisibilityScheduler
from slowapi import _rate_limit_exceeded_handler
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
)
logger = logging.getLogger(__name__)


from yello_admin.routers import cron


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        # Resolve the session factory at startup so tests can patch it
        scheduler = VisibilityScheduler(
            session_factory=database.SessionLocal,
            interval_minutes=settings.VISIBILITY_INTERVAL_MINUTES,
            run_on_start=settings.VISIBILITY_RUN_ON_START,
        )
        scheduler.start()
    else:
        logger.info("Visibility scheduler disabled (SCHEDULER_ENABLED=false)")
    app.state.visibility_scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop()
        app.state.visibility_scheduler = None


app = FastAPI(title="Yello Bar admin", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting middleware and handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# Database error handler
@app.exception_handler(OperationalError)
async def database_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database connection/operation errors"""
    logger.error(f"Database operational error: {exc}", exc_info=True)
    error_msg = str(exc)

    if "timeout" in error_msg.lower():
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content={
                "detail": "Database query timeout. Please try again.",
                "error": "database_timeout",
            },
        )
    elif "could not connect" in error_msg.lower() or "connection" in error_msg.lower():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": "Database connection error. Please try again.",
                "error": "database_connection_error",
                "hint": "If using Supabase, ensure you're using the connection pooling URL (port 6543) instead of direct connection (port 5432)",
            },
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error": "database_error"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general SQLAlchemy errors"""
    logger.error(f"Database error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error": "database_error"},
    )


# Only create tables for local SQLite; the hosted database uses Alembic
if settings.DATABASE_URL.startswith("sqlite"):
    Base.metadata.create_all(bind=engine)


@app.get("/healthy", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "Healthy"}


app.include_router(cron.router)
