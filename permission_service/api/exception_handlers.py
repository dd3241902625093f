"""
Maps permission store errors to HTTP responses.

Error Response Format:
{
    "error": {
        "status_code": 404,
        "message": "permission not found",
        "type": "Not Found",
        "details": {}
    }
}
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from permission_service.core.exceptions import (
    CancellationError,
    NotFoundError,
    PermissionStoreError,
    StorageError,
    StoreInitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[PermissionStoreError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    CancellationError: status.HTTP_504_GATEWAY_TIMEOUT,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StoreInitError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: PermissionStoreError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def permission_store_exception_handler(request: Request, exc: PermissionStoreError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)

    body = {
        "error": {
            "status_code": status_code,
            "message": exc.message,
            "type": HTTPStatus(status_code).phrase,
            "details": exc.details,
        }
    }
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PermissionStoreError, permission_store_exception_handler)
