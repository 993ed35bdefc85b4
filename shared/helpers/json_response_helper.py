from fastapi import HTTPException
from typing import Any

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        success=True,
        data=data,
        status="Success",
        status_code=status_code,
        message=message
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400, data: Any = None):
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            success=False,
            data=data,
            status="Failure",
            status_code=status_code,
            message=message
        ).model_dump()
    )


def not_found_response(entity: str):
    return error_response(
        message=f"{entity} not found",
        status_code=str(AppStatusCode.NOT_FOUND),
        http_status=404
    )
