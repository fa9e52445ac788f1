"""
Client Layer

Low-level client wrappers for document storage.
Clients handle communication with the filesystem or object storage but
contain no backup logic.

Modules:
- storage_client: local directory and MinIO/S3 bucket storage
"""

from .storage_client import LocalStorage, MinioStorage, list_files

__all__ = [
    "LocalStorage",
    "MinioStorage",
    "list_files",
]
