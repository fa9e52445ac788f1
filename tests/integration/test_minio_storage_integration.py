#!/usr/bin/env python3

import os
import uuid

import pytest
from minio import Minio

from tcx_backup.clients.storage_client import MinioStorage
from tcx_backup.services.backup_service import BackupService
from tcx_backup.services.document_codec import DocumentCodec
from tests.fixtures.document_fixtures import SAMPLE_TCX


@pytest.mark.integration
class TestMinioStorageIntegration:
    """Integration tests for backup and restore against MinIO"""

    @pytest.fixture
    def minio_client(self):
        """MinIO client connected to service (GitHub Actions or local)"""
        endpoint = os.getenv("MINIO_ENDPOINT", "localhost:9000")
        access_key = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
        secret_key = os.getenv("MINIO_SECRET_KEY", "minioadmin")
        secure = os.getenv("MINIO_SECURE", "false").lower() == "true"

        return Minio(endpoint, access_key=access_key, secret_key=secret_key, secure=secure)

    @pytest.fixture
    def storage(self, minio_client):
        bucket = f"tcx-test-{uuid.uuid4().hex[:8]}"
        storage = MinioStorage(minio_client, bucket)
        storage.ensure_bucket()

        yield storage

        # Cleanup
        for name in storage.list():
            minio_client.remove_object(bucket, name)
        minio_client.remove_bucket(bucket)

    def test_backup_and_restore_round_trip(self, storage):
        storage.create("project.tcx", SAMPLE_TCX)
        service = BackupService(storage)

        service.create("project.tcx")
        assert service.has_backup("project.tcx")

        service.restore("project.tcx")

        domains = DocumentCodec().extract_domains(storage.read("project.tcx"))
        assert [d["name"]["_text"] for d in domains] == ["Colors", "Sizes"]
