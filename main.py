# backend/main.py
"""
Main application file for the Forum API.
Builds the store handle, sets up CORS for the browser client, maps the
error taxonomy to JSON responses, wires routers and exposes /api/health.
"""
import logging
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.database import create_db_engine, init_db, make_session_factory
from core.errors import ForumError
from routers import auth, forum
from utils.config import Settings, load_settings

logger = logging.getLogger(__name__)


def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message}


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ForumError)
    async def forum_error_handler(request: Request, exc: ForumError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error, exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            field = ".".join(str(part) for part in errors[0].get("loc", ())[1:])
            message = f"Invalid {field}" if field else errors[0].get("msg", message)
        return JSONResponse(status_code=400, content=_error_body("validation_error", message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error = HTTPStatus(exc.status_code).phrase.lower().replace(" ", "_")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(error, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("[API] Store failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_error_body("internal_error", "Internal server error"))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = create_db_engine(
        settings.database_url,
        echo=settings.sql_echo,
        timeout=settings.db_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables in dev (migration tool recommended for prod)
        init_db(engine)
        logger.info("[API] Store ready at %s", engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            engine.dispose()
            logger.info("[API] Store released")

    app = FastAPI(
        title="Forum API",
        description="Session-authenticated discussion forum: users, posts, comments and votes.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    # Allow the browser client origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # Routers
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(forum.router, prefix="/api", tags=["forum"])

    # Health for dev/proxy/lb checks
    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
