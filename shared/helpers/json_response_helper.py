# app/utils/response_helper.py
from fastapi import HTTPException
from typing import Any, Optional

from shared.core.schemas import JsonOutResult


def success_response(data: Any = None, message: str = "Success", count: Optional[int] = None):
    return JsonOutResult(
        success=True,
        message=message,
        data=data,
        count=count
    )


def list_response(items: list, message: Optional[str] = None):
    return JsonOutResult(
        success=True,
        message=message,
        data=items,
        count=len(items)
    )


def error_response(message: str, http_status: int = 400, error: Optional[str] = None):
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            success=False,
            message=message,
            error=error
        ).model_dump(exclude_none=True)
    )
