#!/usr/bin/env python3
"""
Document Storage Clients

Low-level wrappers over the places .tcx documents and their JSON backups
live: a local working directory or a MinIO/S3 bucket. Both expose the same
five operations (list, list_files, read, create, delete).

These clients are pure infrastructure - they contain no backup logic.
Errors are logged and re-raised in their native types.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from minio import Minio
from minio.error import S3Error

logger = logging.getLogger(__name__)


def list_files(names: list[str], extension: str) -> list[str]:
    """
    Filter file names by extension.

    Args:
        names: File names as returned by a storage list() call
        extension: Extension with or without the leading dot (e.g. "json")

    Returns:
        Names ending in ".<extension>", in their original order
    """
    suffix = f".{extension.lstrip('.')}"
    return [name for name in names if name.endswith(suffix)]


class LocalStorage:
    """
    Storage backed by a single local directory.

    Only regular files directly inside the directory are listed.
    create() refuses to overwrite: callers delete first.
    """

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        return self.root / name

    def list(self) -> list[str]:
        """List file names in the storage directory, sorted."""
        try:
            return sorted(p.name for p in self.root.iterdir() if p.is_file())
        except OSError as e:
            logger.error(f"Failed to list files in {self.root}: {e}")
            raise

    def list_files(self, names: list[str], extension: str) -> list[str]:
        return list_files(names, extension)

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def read(self, name: str) -> str:
        """Read a file as UTF-8 text."""
        try:
            return self._path(name).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read {name}: {e}")
            raise

    def create(self, name: str, content: str) -> None:
        """
        Create a new file.

        Raises:
            FileExistsError: If the file already exists
            OSError: If the directory is missing or not writable
        """
        try:
            with open(self._path(name), "x", encoding="utf-8") as f:
                f.write(content)
            logger.debug(f"Created {name} in {self.root}")
        except OSError as e:
            logger.error(f"Failed to create {name}: {e}")
            raise

    def delete(self, name: str) -> None:
        try:
            self._path(name).unlink()
            logger.debug(f"Deleted {name} from {self.root}")
        except OSError as e:
            logger.error(f"Failed to delete {name}: {e}")
            raise


class MinioStorage:
    """
    Storage backed by a MinIO/S3 bucket.

    Object names play the role of file names. Listing is non-recursive so
    only top-level objects are seen, the same as the local backend.
    """

    def __init__(self, client: Minio, bucket: str):
        self.client = client
        self.bucket = bucket

    def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist. Idempotent."""
        try:
            if not self.client.bucket_exists(self.bucket):
                self.client.make_bucket(self.bucket)
                logger.info(f"Created bucket: {self.bucket}")
        except S3Error as e:
            logger.error(f"Failed to create bucket {self.bucket}: {e}")
            raise

    def list(self) -> list[str]:
        """List object names in the bucket, sorted. A missing bucket lists as empty."""
        try:
            objects = self.client.list_objects(self.bucket, recursive=False)
            return sorted(obj.object_name for obj in objects if not obj.is_dir)
        except S3Error as e:
            if e.code == "NoSuchBucket":
                logger.info(f"Bucket {self.bucket} does not exist, returning empty file list")
                return []
            logger.error(f"Failed to list files in {self.bucket}: {e}")
            raise

    def list_files(self, names: list[str], extension: str) -> list[str]:
        return list_files(names, extension)

    def exists(self, name: str) -> bool:
        try:
            self.client.stat_object(self.bucket, name)
            return True
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchBucket", "NoSuchObject"):
                return False
            raise

    def read(self, name: str) -> str:
        """Read an object as UTF-8 text, releasing the connection afterwards."""
        try:
            response = self.client.get_object(self.bucket, name)
            try:
                return response.read().decode("utf-8")
            finally:
                response.close()
                response.release_conn()
        except S3Error as e:
            logger.error(f"Failed to read {name} from {self.bucket}: {e}")
            raise

    def create(self, name: str, content: str) -> None:
        """
        Upload a new object.

        Raises:
            FileExistsError: If the object already exists
            S3Error: If the upload fails
        """
        if self.exists(name):
            raise FileExistsError(f"{name} already exists in bucket {self.bucket}")

        data = content.encode("utf-8")
        content_type = "application/json" if name.endswith(".json") else "application/xml"
        try:
            self.client.put_object(self.bucket, name, BytesIO(data), length=len(data), content_type=content_type)
            logger.debug(f"Uploaded {name} to {self.bucket}")
        except S3Error as e:
            logger.error(f"Failed to upload {name} to {self.bucket}: {e}")
            raise

    def delete(self, name: str) -> None:
        try:
            self.client.remove_object(self.bucket, name)
            logger.debug(f"Removed {name} from {self.bucket}")
        except S3Error as e:
            logger.error(f"Failed to delete {name} from {self.bucket}: {e}")
            raise
