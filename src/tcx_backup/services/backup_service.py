#!/usr/bin/env python3
"""
Backup Service

Snapshots the mutable sections of .tcx documents into JSON backups and
restores them, reconciling the backed-up named domains with the ones in the
document as it is now.

File naming: "<doc>.tcx" is backed up to "<doc>_backup.json". Exactly one
backup exists per document; creating a backup replaces the previous one.
"""

import json
import logging

from pydantic import ValidationError

from ..core.config import BackupConfig, backup_config
from ..core.logging import STATUS_LOGGER
from ..models.models import Backup
from .document_codec import DECLARATION_KEY, DocumentCodec
from .domain.errors import MalformedBackupError
from .domain.merge import merge_domains

logger = logging.getLogger(__name__)
status_logger = logging.getLogger(STATUS_LOGGER)

BACKUP_EXTENSION = "json"


class BackupService:
    """
    Service for creating and restoring .tcx backups.

    Storage listings are read fresh for every call, so documents and
    backups created earlier in the same process are always seen.
    """

    def __init__(self, storage, codec: DocumentCodec = None, config: BackupConfig = None):
        """
        Initialize backup service.

        Args:
            storage: Storage client (LocalStorage or MinioStorage)
            codec: Document codec, a default DocumentCodec when omitted
            config: Configuration, the module singleton when omitted
        """
        self.storage = storage
        self.codec = codec or DocumentCodec()
        self.config = config or backup_config

    def backup_name(self, file_name: str) -> str:
        """
        Derive the backup file name for a document.

        Raises:
            ValueError: If file_name does not carry the document extension
        """
        extension = f".{self.config.DOCUMENT_EXTENSION}"
        if not file_name.endswith(extension):
            raise ValueError(f"{file_name} is not a .{self.config.DOCUMENT_EXTENSION} document")
        return f"{file_name[:-len(extension)]}{self.config.BACKUP_SUFFIX}.{BACKUP_EXTENSION}"

    def documents(self) -> list[str]:
        """List the documents currently in storage."""
        return self.storage.list_files(self.storage.list(), self.config.DOCUMENT_EXTENSION)

    def has_backup(self, file_name: str) -> bool:
        backups = self.storage.list_files(self.storage.list(), BACKUP_EXTENSION)
        return self.backup_name(file_name) in backups

    def load_backup(self, backup_file_name: str) -> Backup:
        """
        Read and parse a backup file.

        Raises:
            MalformedBackupError: If the content is not JSON or not a backup object
        """
        content = self.storage.read(backup_file_name)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedBackupError(f"{backup_file_name} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedBackupError(
                f"{backup_file_name} must hold a JSON object, got {type(data).__name__}"
            )

        try:
            return Backup.model_validate(data)
        except ValidationError as e:
            raise MalformedBackupError(f"{backup_file_name} has an invalid backup shape: {e}") from e

    def create(self, file_name: str, action: str = "created") -> None:
        """
        Write a backup of a document, replacing any previous backup.

        Args:
            file_name: Document name, e.g. "project.tcx"
            action: Verb used in the status line ("created", "updated")
        """
        backup_file_name = self.backup_name(file_name)

        backup = self.codec.extract_backup(self.storage.read(file_name))
        content = backup.to_json(indent=self.config.JSON_INDENT)

        if self.has_backup(file_name):
            self.storage.delete(backup_file_name)

        self.storage.create(backup_file_name, content)

        status_logger.info(f"{backup_file_name} was {action}")

    def update(self, file_name: str) -> None:
        self.create(file_name, action="updated")

    def restore(self, file_name: str, check: bool = True) -> None:
        """
        Restore a document from its backup.

        Named domains are merged (document domains first, backup domains
        second) and component classes are taken from the document as it is
        now. Every other section comes from the backup.

        The new content is fully built before the document is touched. The
        document is then deleted and created again, so a crash between those
        two steps leaves no document behind.

        Args:
            file_name: Document name, e.g. "project.tcx"
            check: When True, a missing backup is reported and nothing changes

        Raises:
            MalformedBackupError: If the backup cannot be parsed
            DomainStructureError: If a domain or element has no name
            DocumentFormatError: If the document cannot be parsed
        """
        backup_file_name = self.backup_name(file_name)

        if check and not self.has_backup(file_name):
            status_logger.error(f"Error: {backup_file_name} does not exist")
            return

        document = self.codec.parse(self.storage.read(file_name))
        component_classes = self.codec.extract_component_classes(document)
        current_domains = self.codec.extract_domains(document)

        backup = self.load_backup(backup_file_name)

        backup.named_domains = merge_domains(
            current_domains,
            backup.named_domains,
            keep_empty=self.config.KEEP_EMPTY_DOMAINS,
        )
        backup.component_classes = component_classes

        rebuilt = self.codec.build_document(backup, declaration=document.get(DECLARATION_KEY))
        content = self.codec.serialize(rebuilt)

        self.storage.delete(file_name)
        self.storage.create(file_name, content)

        status_logger.info(f"{file_name} was restored")

    def create_all(self, action: str = "created") -> list[str]:
        """Back up every document in storage. Returns the documents processed."""
        names = self.documents()
        logger.debug(f"Backing up {len(names)} documents")
        for name in names:
            self.create(name, action=action)
        return names

    def restore_all(self, check: bool = True) -> list[str]:
        """Restore every document in storage. Returns the documents processed."""
        names = self.documents()
        logger.debug(f"Restoring {len(names)} documents")
        for name in names:
            self.restore(name, check=check)
        return names
