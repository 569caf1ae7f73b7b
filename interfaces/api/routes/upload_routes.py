from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from returns.result import Failure
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from application.dtos.errors import AppError
from application.dtos.upload_dtos import UploadConfiguration, UploadParams, UploadResponse
from application.use_cases.upload_use_cases import HandleUploadUseCase
from domain.exceptions import UploadError
from interfaces.api.middleware import handle_use_case_errors
from interfaces.api.upload_sources import UploadFileSource, spool_request_body
from interfaces.dependencies import get_upload_configuration, get_upload_use_case

logger = structlog.get_logger()

router = APIRouter(prefix="/upload", tags=["uploads"])

UPLOAD_PARAM_NAMES = ("name", "chunk", "chunks")


def _is_multipart(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("multipart/form-data")


@router.options("", status_code=status.HTTP_200_OK)
async def upload_preflight() -> Response:
    """Answer CORS preflight requests without touching the upload engine."""
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=UploadResponse,
    response_model_exclude_none=True,
)
@handle_use_case_errors
async def upload(
    request: Request,
    use_case: Annotated[HandleUploadUseCase, Depends(get_upload_use_case)],
    configuration: Annotated[UploadConfiguration, Depends(get_upload_configuration)],
) -> UploadResponse:
    """Receive a whole file or one chunk of it.

    The payload is either the multipart field named by the configured
    ``file_data_name`` or the raw request body. ``name``, ``chunk`` and
    ``chunks`` come from the query string, overridden by form fields.

    Returns:
        200 OK: ``{"OK": 1, "info": {...}}`` for a stored chunk or a committed file
        4xx/5xx: ``{"OK": 0, "error": {"code", "message"}}``

    """
    params = {key: request.query_params.get(key) for key in UPLOAD_PARAM_NAMES}

    form = None
    spooled: UploadFile | None = None
    try:
        if _is_multipart(request):
            form = await request.form()
            for key in UPLOAD_PARAM_NAMES:
                value = form.get(key)
                if isinstance(value, str):
                    params[key] = value
            source = UploadFileSource(form.get(configuration.file_data_name), configuration.file_data_name)
        else:
            spooled = await spool_request_body(request, configuration.tmp_dir)
            source = UploadFileSource(spooled, configuration.file_data_name)

        # The engine does blocking disk I/O
        result = await run_in_threadpool(use_case.execute, source, UploadParams(**params))
        return result.map(lambda info: UploadResponse(info=info))
    except UploadError as e:
        return Failure(AppError.from_upload_error(e))
    finally:
        if form is not None:
            await form.close()
        if spooled is not None:
            await spooled.close()
