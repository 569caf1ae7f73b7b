"""Error handling middleware and decorators for API routes."""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import structlog
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from returns.result import Failure, Success

from application.dtos.errors import AppError
from application.dtos.upload_dtos import UploadErrorDetail, UploadErrorResponse
from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind
from interfaces.api.routes.helpers import _map_app_error_to_http_exception, upload_error_detail

if TYPE_CHECKING:
    from typing import Any

logger = structlog.get_logger()

T = TypeVar("T")
T_co = TypeVar("T_co")


def _raise_mapped_http_error(failure: object) -> None:
    error = _map_app_error_to_http_exception(failure)
    raise error from None


def _raise_unexpected_result_type() -> None:
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=upload_error_detail(UploadErrorKind.UNKNOWN),
    ) from None


def handle_use_case_errors(
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Handle common use case error patterns.

    This decorator centralizes error handling for use case execution:
    - Unwraps Success results
    - Maps Failure results to HTTP exceptions
    - Maps stray UploadError exceptions the same way
    - Catches and logs unexpected errors

    Args:
        func: An async endpoint function that executes a use case

    Returns:
        Wrapped function with centralized error handling

    """

    @functools.wraps(func)
    async def wrapper(*args: "Any", **kwargs: "Any") -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)

            if isinstance(result, Success):
                return result.unwrap()

            if isinstance(result, Failure):
                _raise_mapped_http_error(result.failure())

            _raise_unexpected_result_type()

        except HTTPException:
            raise
        except UploadError as exc:
            logger.warning("upload_error", code=exc.code, error=str(exc), function=func.__name__)
            raise _map_app_error_to_http_exception(AppError.from_upload_error(exc)) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                function=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=upload_error_detail(UploadErrorKind.UNKNOWN),
            ) from exc

    return wrapper


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: ARG001
    """Render upload errors in the ``{"OK": 0, "error": {...}}`` envelope clients expect."""
    detail = exc.detail
    if isinstance(detail, dict) and "code" in detail and "message" in detail:
        body = UploadErrorResponse(error=UploadErrorDetail(code=detail["code"], message=detail["message"]))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True))
    return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=exc.headers)
