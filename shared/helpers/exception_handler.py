import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        errors.append({
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        })
    return errors


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already carries a full envelope
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            wrapped = {**exc.detail, "success": False}
        else:
            wrapped = JsonOutResult(
                success=False,
                data=None,
                status="Failure",
                status_code=str(exc.status_code or AppStatusCode.OPERATION_FAILED),
                message=str(exc.detail)
            ).model_dump()
        return JSONResponse(
            content=jsonable_encoder(wrapped),
            status_code=exc.status_code or 400,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        logger.info("Validation failed on %s %s: %s", request.method, request.url.path, errors)

        wrapped = JsonOutResult(
            success=False,
            data=errors,
            status="Failure",
            status_code=AppStatusCode.INVALID_INPUT,
            message="Validation failed"
        ).model_dump()
        return JSONResponse(content=jsonable_encoder(wrapped), status_code=400)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        wrapped = JsonOutResult(
            success=False,
            data=None,
            status="Failure",
            status_code=AppStatusCode.INTERNAL_SERVER_ERROR,
            message="Internal server error"
        ).model_dump()
        return JSONResponse(content=wrapped, status_code=500)
