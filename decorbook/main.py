# decorbook/main.py
# FastAPI entry point. The engine, session factory and gateway client are created in the lifespan.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from decorbook.core.config import Settings, settings as default_settings
from decorbook.core.errors import BookingError, GatewayError
from decorbook.db.base import Base
from decorbook.db.session import build_engine, build_session_factory
from decorbook.services.midtrans import MidtransClient

# Import models so SQLAlchemy sees their definitions
import decorbook.models.user
import decorbook.models.package
import decorbook.models.schedule
import decorbook.models.order

logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def try_create_tables(engine: Engine, retries: int = 5, delay: int = 2) -> bool:
    """
    Try to create the tables, retrying while the database is unreachable.

    Args:
        engine: Engine to create the tables on
        retries: Number of connection attempts
        delay: Delay between attempts in seconds

    Returns:
        True if the tables were created or already exist, False if all attempts failed
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"Waiting {delay}s before retry...")
                time.sleep(delay)
            else:
                logger.error(
                    f"Could not create tables after {retries} retries. "
                    "Database initialization failed."
                )
                return False


def create_app(settings: Settings | None = None, gateway: MidtransClient | None = None) -> FastAPI:
    """Build the application; tests pass their own settings and a stubbed gateway."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("decorbook API starting up...")
        engine = build_engine(settings.DATABASE_URL)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.gateway = gateway or MidtransClient(
            server_key=settings.MIDTRANS_SERVER_KEY,
            snap_url=settings.MIDTRANS_SNAP_URL,
            timeout=settings.MIDTRANS_TIMEOUT,
        )

        if not try_create_tables(engine, retries=5, delay=2):
            logger.error("Failed to create database tables. Application may not work correctly.")
            if settings.is_production:
                raise RuntimeError("Cannot start application: database tables creation failed")

        yield

        logger.info("decorbook API shutting down...")
        app.state.gateway.close()
        engine.dispose()
        logger.info("Database connection closed")

    app = FastAPI(
        title="decorbook API",
        description="Wedding decoration booking and payment API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.ENVIRONMENT == "development":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    from decorbook.api import admin, auth, orders, packages, payments, schedules

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(packages.router, prefix="/api/packages", tags=["packages"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
    app.include_router(schedules.router, prefix="/api/schedules", tags=["schedules"])
    app.include_router(payments.router, prefix="/api/payment", tags=["payment"])
    app.include_router(payments.webhook_router, prefix="/api/midtrans", tags=["midtrans"])

    @app.get("/", tags=["health"])
    async def root():
        """Basic health check."""
        return {
            "status": "ok",
            "service": "decorbook API",
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "version": "1.0.0"}

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or invalid fields are a 400, not FastAPI's default 422."""
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "error": exc.body})

    @app.exception_handler(BookingError)
    async def booking_exception_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Internal server error",
                "detail": str(exc) if settings.ENVIRONMENT == "development" else "An error occurred",
            },
        )

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "decorbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.ENVIRONMENT == "development",
        log_level=default_settings.LOG_LEVEL.lower()
    )
