"""
Domain Layer

Pure reconciliation logic for named domains. Nothing here touches storage
or parses documents; the services layer feeds it compact trees.

Modules:
- merge: ordered merge of live and backed-up named domains
- errors: exception types shared by the services layer
"""

from .errors import BackupError, DocumentFormatError, DomainStructureError, MalformedBackupError
from .merge import OrderedIndex, merge_domains

__all__ = [
    # Merge
    "OrderedIndex",
    "merge_domains",
    # Errors
    "BackupError",
    "MalformedBackupError",
    "DomainStructureError",
    "DocumentFormatError",
]
