#!/usr/bin/env python3
"""Exceptions raised by backup, restore and domain merging."""


class BackupError(Exception):
    """
    Base class for backup/restore failures.

    Storage failures are not wrapped: they keep their native types
    (OSError, minio.error.S3Error) and propagate unchanged.
    """
    pass


class MalformedBackupError(BackupError):
    """
    Raised when a backup file cannot be used.

    Used for:
    - Invalid JSON
    - JSON that does not have the backup shape (e.g. a list at the top level)
    """
    pass


class DomainStructureError(MalformedBackupError):
    """Raised when a named domain or one of its elements has no name."""
    pass


class DocumentFormatError(BackupError):
    """
    Raised when a .tcx document cannot be parsed or rebuilt.

    Used for:
    - XML syntax errors and forbidden DTD/entity constructs
    - A root element other than <model-data>, or a missing <model>
    """
    pass
