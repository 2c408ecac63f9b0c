#!/usr/bin/env python3
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from droneplanner.api.api import router as api_router
from droneplanner.api.auth import router as auth_router
from droneplanner.api.timezone import router as timezone_router
from droneplanner.core.config import Settings, get_settings
from droneplanner.core.errors import PlannerError
from droneplanner.core.logging_config import setup_logging
from droneplanner.db.init_db import create_tables
from droneplanner.db.session import Database
from droneplanner.schemas.mission import WAYPOINT_MISSION_ERROR
from droneplanner.services.timezone_service import TimezoneService


logger = logging.getLogger(__name__)

# Decoder errors whose message is meant for the client as-is
DOMAIN_ERROR_TYPES = {WAYPOINT_MISSION_ERROR}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info("Starting drone planner in %s environment", settings.ENV)
    await database.ping()
    if settings.CREATE_TABLES:
        await create_tables(database)
    logger.info("Database connected")
    yield

    # Shutdown
    await database.close()
    logger.info("Application shutdown")


async def planner_error_handler(request: Request, exc: PlannerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    domain = [e["msg"] for e in errors if e.get("type") in DOMAIN_ERROR_TYPES]
    if domain:
        detail = domain[0]
    elif any(e.get("loc", ("",))[0] == "body" for e in errors):
        detail = "Invalid request body"
    else:
        detail = "Invalid request parameters"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(
        status_code=400,
        content={"detail": detail, "errors": jsonable_encoder(errors)},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    timezone_service: TimezoneService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    # Instantiate FastAPI
    app = FastAPI(
        title="Drone Mission Planner",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Explicit handles, replaced by test doubles in tests
    app.state.settings = settings
    app.state.database = database or Database(
        settings.DATABASE_URL, echo=settings.DEBUG, timeout=settings.DB_TIMEOUT_S
    )
    app.state.timezone_service = timezone_service or TimezoneService.from_settings(settings)

    # Error mapping
    app.add_exception_handler(PlannerError, planner_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logger.info("Started %s %s", request.method, request.url.path)
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Completed %s %s %d in %.1fms",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    # Add routers
    app.include_router(auth_router)
    app.include_router(timezone_router)
    app.include_router(api_router)

    # Health endpoint
    @app.get("/health")
    async def health(request: Request):
        """
        Health check that also pings the database asynchronously.
        Returns 200 + {"status": "ok", "db": "up"} if everything is fine.
        """
        try:
            await request.app.state.database.ping()
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return JSONResponse(
                status_code=503,
                content={"status": "unavailable", "db": "down", "env": settings.ENV},
            )
        return {"status": "ok", "db": "up", "env": settings.ENV}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
