from __future__ import annotations

from datetime import timedelta

from lagom import Container

from application.dtos.upload_dtos import UploadConfiguration
from application.ports.upload_policies import FileSizeProbe
from application.ports.upload_storage import (
    ChunkAssembler,
    ChunkStore,
    CommitEngine,
    PartialUploadJanitor,
    StreamWriter,
    UploadLocks,
)
from application.use_cases.upload_use_cases import HandleUploadUseCase, SweepPartialUploadsUseCase
from infrastructure.config import Settings, settings
from infrastructure.policies.signature_file_checker import SignatureFileChecker
from infrastructure.policies.stat_file_size_probe import StatFileSizeProbe
from infrastructure.upload_engine.chunk_assembler import FilesystemChunkAssembler
from infrastructure.upload_engine.chunk_store import FilesystemChunkStore
from infrastructure.upload_engine.commit_engine import AtomicCommitEngine
from infrastructure.upload_engine.janitor import FilesystemPartialUploadJanitor
from infrastructure.upload_engine.path_locks import PathLockRegistry
from infrastructure.upload_engine.stream_writer import FilesystemStreamWriter


def build_upload_configuration(app_settings: Settings) -> UploadConfiguration:
    """Base upload options every request derives its own configuration from."""
    return UploadConfiguration(
        file_data_name=app_settings.upload_file_data_name,
        target_dir=app_settings.upload_target_dir,
        tmp_dir=app_settings.upload_tmp_dir,
        allowed_extensions=app_settings.upload_allowed_extensions or None,
        append_chunks_to_target=app_settings.upload_append_chunks,
        combine_on_complete=app_settings.upload_combine_on_complete,
        cleanup=app_settings.upload_cleanup,
        max_file_age=timedelta(seconds=app_settings.upload_max_file_age),
        delay=app_settings.upload_delay,
        file_checker=SignatureFileChecker() if app_settings.upload_verify_signatures else None,
    )


def create_container(app_settings: Settings | None = None) -> Container:
    app_settings = app_settings or settings
    container = Container()

    container[Settings] = app_settings
    container[UploadConfiguration] = build_upload_configuration(app_settings)

    # Upload engine
    container[FileSizeProbe] = StatFileSizeProbe()
    container[StreamWriter] = FilesystemStreamWriter()
    container[ChunkAssembler] = FilesystemChunkAssembler()
    container[CommitEngine] = lambda c: AtomicCommitEngine(size_probe=c[FileSizeProbe])
    container[ChunkStore] = lambda c: FilesystemChunkStore(
        stream_writer=c[StreamWriter],
        assembler=c[ChunkAssembler],
        commit_engine=c[CommitEngine],
        size_probe=c[FileSizeProbe],
    )
    container[PartialUploadJanitor] = FilesystemPartialUploadJanitor()

    # One registry per process so every request sees the same locks
    container[UploadLocks] = PathLockRegistry()

    # Register Use Cases
    container[HandleUploadUseCase] = lambda c: HandleUploadUseCase(
        configuration=c[UploadConfiguration],
        stream_writer=c[StreamWriter],
        chunk_store=c[ChunkStore],
        commit_engine=c[CommitEngine],
        janitor=c[PartialUploadJanitor],
        locks=c[UploadLocks],
    )
    container[SweepPartialUploadsUseCase] = lambda c: SweepPartialUploadsUseCase(
        configuration=c[UploadConfiguration],
        janitor=c[PartialUploadJanitor],
    )

    return container
