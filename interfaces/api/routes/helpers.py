from fastapi import HTTPException, status

from application.dtos.errors import AppError
from domain.value_objects.upload_error_kind import UploadErrorKind

_UPLOAD_ERROR_STATUS = {
    UploadErrorKind.INPUT: status.HTTP_400_BAD_REQUEST,
    UploadErrorKind.TYPE: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    UploadErrorKind.SECURITY: status.HTTP_403_FORBIDDEN,
}


def upload_error_detail(code: int | None) -> dict[str, int | str]:
    kind = UploadErrorKind.from_code(code if code is not None else UploadErrorKind.UNKNOWN)
    return {"code": int(kind), "message": kind.message}


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions."""
    if error.category == "upload":
        kind = UploadErrorKind.from_code(error.code if error.code is not None else UploadErrorKind.UNKNOWN)
        return HTTPException(
            status_code=_UPLOAD_ERROR_STATUS.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=upload_error_detail(kind),
        )
    # Unknown error category
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=upload_error_detail(UploadErrorKind.UNKNOWN),
    )
