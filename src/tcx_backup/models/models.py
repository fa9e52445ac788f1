#!/usr/bin/env python3

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Pydantic Models


class Backup(BaseModel):
    """Point-in-time projection of a .tcx document's mutable sections.

    Section values are compact-tree fragments and are carried verbatim.
    JSON keys are camelCase, matching backups written by earlier versions
    of the tool.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: str | None = None  # identification/xml-version of the source document
    named_domains: Any = Field(default=None, alias="namedDomains")
    root_parts: Any = Field(default=None, alias="rootParts")
    collections: Any = None
    applications: Any = None
    includes: Any = None
    component_classes: Any = Field(default=None, alias="componentClasses")  # set on restore only

    def to_json(self, indent: int | None = None) -> str:
        """Serialize with camelCase keys, omitting sections that are absent."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent or None)
