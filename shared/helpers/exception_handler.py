import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from shared.core.exceptions import LabServiceError
from shared.core.schemas import envelope

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return "; ".join(parts) or "Invalid request"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(LabServiceError)
    async def lab_service_exception_handler(request: Request, exc: LabServiceError):
        logger.info("%s %s -> %s: %s", request.method,
                    request.url.path, exc.http_status, exc.message)
        return JSONResponse(
            content=envelope(success=False, message=exc.message),
            status_code=exc.http_status
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already built the envelope
        if isinstance(exc.detail, dict) and "success" in exc.detail:
            content = exc.detail
        else:
            content = envelope(success=False, message=str(exc.detail))
        return JSONResponse(content=content, status_code=exc.status_code or 400,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=envelope(success=False, message=_validation_message(exc)),
            status_code=400
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s",
                         request.method, request.url.path)
        return JSONResponse(
            content=envelope(success=False,
                             message="Database error", error=str(exc)),
            status_code=500
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        return JSONResponse(
            content=envelope(success=False,
                             message="Internal server error", error=str(exc)),
            status_code=500
        )
