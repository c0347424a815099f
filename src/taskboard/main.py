"""FastAPI application entry point."""

import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .db import Database
from .errors import TaskboardError, Unexpected
from .logging_setup import clear_context, configure_logging, get_logger, set_request_id
from .routers import auth, tasks

logger = get_logger("taskboard.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    app.state.db.init_schema()
    logger.info("Database ready", path=str(app.state.db.path))
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around ``settings`` (environment by default)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Taskboard",
        description="Personal task tracking API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_path, timeout=settings.database_timeout)

    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error", path=request.url.path, exc_info=exc)
        body = Unexpected().to_body()
        if settings.is_development:
            body["detail"] = f"{type(exc).__name__}: {exc}"
        return JSONResponse(status_code=500, content=body)

    app.add_exception_handler(sqlite3.Error, unexpected_error_handler)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = set_request_id(request.headers.get("X-Request-ID"))
        try:
            response = await call_next(request)
        except Exception as exc:
            # Rendered while the request id is still bound.
            response = await unexpected_error_handler(request, exc)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/api/health", tags=["health"])
    def health():
        """Liveness probe."""
        return {"status": "ok", "version": __version__}

    app.include_router(auth.router)
    app.include_router(tasks.router)
    return app


app = create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskboard.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
