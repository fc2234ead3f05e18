from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from aish.config import Settings, get_settings
from aish.database import Database
from aish.exceptions import AppError, format_validation_errors
from aish.observability.logging import configure_logging, get_logger
from aish.routers import auth as auth_router
from aish.routers import cases, stats

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables
    await app.state.db.create_all()
    logger.info("startup", service=app.state.settings.service_name)
    yield
    # Shutdown
    await app.state.db.dispose()


async def app_error_handler(_: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(_: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": format_validation_errors(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"error": f"Route {request.method} {request.url.path} not found"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.service_name,
        description="Health case reporting: doctor accounts, case records and offline sync",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_url, echo=settings.sql_echo)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(cases.router, prefix="/api/cases", tags=["Cases"])
    app.include_router(stats.router, prefix="/api", tags=["Stats"])

    @app.get("/api/health")
    async def health_check(request: Request):
        connected = await request.app.state.db.ping()
        return {
            "status": "ok",
            "message": f"{settings.service_name} is running",
            "mongodb": "connected" if connected else "disconnected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
