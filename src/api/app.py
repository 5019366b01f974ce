"""FastAPI application factory and the mapping of domain exceptions to HTTP responses."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.core.config import Settings, configure_logging, get_settings
from src.core.exceptions import (
    InvalidRequestError,
    MathlerError,
    PersistenceError,
    PuzzleNotFoundError,
)

logger = logging.getLogger(__name__)

APP_NAME = "mathler-api"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Mathler API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/health")
    def health():
        return {"ok": True, "service": APP_NAME}

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request: " + _first_error(exc)},
        )

    @app.exception_handler(PuzzleNotFoundError)
    async def not_found_handler(request: Request, exc: PuzzleNotFoundError):
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"message": str(exc)})

    @app.exception_handler(MathlerError)
    async def mathler_error_handler(request: Request, exc: MathlerError):
        logger.error("Unhandled game error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": str(exc)})

    return app


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "malformed body."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "invalid value")
