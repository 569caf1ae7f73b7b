"""FastAPI dependencies resolved from the Lagom container."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from lagom import Container

from application.dtos.upload_dtos import UploadConfiguration
from application.use_cases.upload_use_cases import HandleUploadUseCase
from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Process-wide container, so every request shares the same path locks."""
    return create_container()


def get_upload_configuration(
    container: Annotated[Container, Depends(get_container)],
) -> UploadConfiguration:
    return container[UploadConfiguration]


def get_upload_use_case(
    container: Annotated[Container, Depends(get_container)],
) -> HandleUploadUseCase:
    return container[HandleUploadUseCase]
