#!/usr/bin/env python3

from minio import Minio

from .config import BackupConfig, backup_config


def get_s3_client(config: BackupConfig = None) -> Minio:
    """Get MinIO/S3 client"""
    config = config or backup_config
    endpoint = config.MINIO_ENDPOINT
    secure = config.MINIO_SECURE

    # Remove http:// or https:// from endpoint if present
    if endpoint.startswith("http://"):
        endpoint = endpoint[7:]
        secure = False
    elif endpoint.startswith("https://"):
        endpoint = endpoint[8:]
        secure = True

    return Minio(
        endpoint,
        access_key=config.MINIO_ACCESS_KEY,
        secret_key=config.MINIO_SECRET_KEY,
        secure=secure
    )


def get_storage(config: BackupConfig = None):
    """Get the storage client selected by TCX_STORAGE_BACKEND"""
    config = config or backup_config

    if config.STORAGE_BACKEND == "minio":
        from ..clients.storage_client import MinioStorage

        storage = MinioStorage(get_s3_client(config), config.BACKUP_BUCKET)
        storage.ensure_bucket()
        return storage

    from ..clients.storage_client import LocalStorage

    return LocalStorage(config.DATA_DIR)
