#!/usr/bin/env python3
"""
Configuration settings for backup and restore of .tcx model documents.

Every value can be overridden via environment variables so the same code
runs against a local working directory or a MinIO bucket.
"""

import logging

from .env_utils import getenv_bool, getenv_clean, getenv_int

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("local", "minio")


class BackupConfig:
    """Backup/restore configuration.

    Values are read when the instance is created, so tests can patch
    os.environ and build a fresh BackupConfig.
    """

    def __init__(self):
        # Storage
        self.STORAGE_BACKEND = (getenv_clean("TCX_STORAGE_BACKEND", "local") or "local").lower()
        self.DATA_DIR = getenv_clean("TCX_DATA_DIR", ".")
        self.BACKUP_BUCKET = getenv_clean("TCX_BACKUP_BUCKET", "tcx-backups")

        # MinIO connection (only used by the minio backend)
        self.MINIO_ENDPOINT = getenv_clean("MINIO_ENDPOINT", "localhost:9000")
        self.MINIO_ACCESS_KEY = getenv_clean("MINIO_ACCESS_KEY", "minio")
        self.MINIO_SECRET_KEY = getenv_clean("MINIO_SECRET_KEY", "minio123")
        self.MINIO_SECURE = getenv_bool("MINIO_SECURE", False)

        # File naming: <doc>.tcx <-> <doc>_backup.json
        self.DOCUMENT_EXTENSION = (getenv_clean("TCX_DOCUMENT_EXTENSION", "tcx") or "tcx").lstrip(".")
        self.BACKUP_SUFFIX = getenv_clean("TCX_BACKUP_SUFFIX", "_backup")

        # Merge behaviour: empty domains are dropped unless this is set
        self.KEEP_EMPTY_DOMAINS = getenv_bool("TCX_KEEP_EMPTY_DOMAINS", False)

        # 0 writes compact JSON
        self.JSON_INDENT = getenv_int("TCX_JSON_INDENT", 0)

        # Logging
        self.LOG_LEVEL = (getenv_clean("LOG_LEVEL", "INFO") or "INFO").upper()
        self.LOG_FORMAT = (getenv_clean("LOG_FORMAT", "console") or "console").lower()

        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            logger.warning(
                f"Unknown TCX_STORAGE_BACKEND {self.STORAGE_BACKEND!r}, falling back to 'local'"
            )
            self.STORAGE_BACKEND = "local"


# Singleton instance
backup_config = BackupConfig()
