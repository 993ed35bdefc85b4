import json
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi import Request

from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = {"success", "status", "status_code", "message"}


def _passthrough_headers(response: Response):
    return {k: v for k, v in response.headers.items() if k.lower() != "content-length"}


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wraps every JSON body into the ``JsonOutResult`` envelope."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

            wrapped_error = JsonOutResult(
                success=False,
                data=None,
                status="Failure",
                status_code=AppStatusCode.INTERNAL_SERVER_ERROR,
                message="Internal server error",
            ).model_dump()
            return JSONResponse(content=wrapped_error, status_code=500)

        content_type = response.headers.get("content-type", "")
        is_json = "application/json" in content_type

        # Read the full body
        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        # Files and other payloads go out untouched
        if not is_json:
            return Response(
                content=body_bytes,
                status_code=response.status_code,
                headers=_passthrough_headers(response),
                media_type=response.media_type,
            )

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            data = None

        # Already wrapped (exception handlers, explicit success_response)
        if isinstance(data, dict) and ENVELOPE_KEYS.issubset(data.keys()):
            return JSONResponse(
                content=data,
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        # Error responses (4xx/5xx)
        if not (200 <= response.status_code < 400):
            message = "An unexpected error occurred"
            if isinstance(data, dict):
                message = str(data.get("detail") or data.get("message") or message)
            elif isinstance(data, str):
                message = data

            wrapped_error = JsonOutResult(
                success=False,
                data=None,
                status="Failure",
                status_code=str(response.status_code),
                message=message,
            ).model_dump()

            return JSONResponse(
                content=wrapped_error,
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        wrapped = JsonOutResult(
            success=True,
            data=data,
            status="Success",
            status_code=str(response.status_code),
            message="Data retrieved successfully"
        ).model_dump()

        return JSONResponse(
            content=wrapped,
            status_code=response.status_code,
            headers=_passthrough_headers(response),
        )
