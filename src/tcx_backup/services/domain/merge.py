#!/usr/bin/env python3
"""
Named-domain reconciliation.

Merges the named domains of the live document with the named domains kept
in a backup. Both sides use the compact tree shape produced by the document
codec:

    {"name": {"_text": "Colors"},
     "elements": {"element": [{"name": {"_text": "Red"}, ...}, ...]}}

Ordering rules:
- domains come out in the order their names were first seen, original
  domains before backup domains
- within a domain the first occurrence of an element name fixes its
  position and the last occurrence supplies its value

So an element present on both sides keeps the position it had in the live
document and takes the backup's value. Merging a merged result again with
nothing changes nothing.
"""

import logging
from typing import Any, Iterator, Optional

from .errors import DomainStructureError

logger = logging.getLogger(__name__)


class OrderedIndex:
    """
    Insertion-ordered mapping with first-position, last-value semantics.

    Keys are kept in a separate sequence so the position of a key is fixed by
    its first put() and never moves, while later puts only replace the value.
    """

    def __init__(self):
        self._keys: list[str] = []
        self._values: dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        if key not in self._values:
            self._keys.append(key)
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def keys(self) -> list[str]:
        return list(self._keys)

    def values(self) -> list[Any]:
        return [self._values[key] for key in self._keys]

    def items(self) -> list[tuple[str, Any]]:
        return [(key, self._values[key]) for key in self._keys]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._keys)


def as_sequence(value: Any, what: str = "domain") -> list:
    """
    Normalize a compact-tree child into a list.

    A tag that occurs once is parsed as a bare dict, several occurrences as a
    list, and a missing tag as None.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise DomainStructureError(f"Expected {what} object or list, got {type(value).__name__}")


def name_of(node: Any, what: str = "domain") -> str:
    """Return the name text of a domain or element node."""
    if not isinstance(node, dict):
        raise DomainStructureError(f"Expected {what} object, got {type(node).__name__}")

    name = node.get("name")
    if isinstance(name, dict):
        name = name.get("_text")

    # A repeated <name> tag parses as a list; only a single text value is usable
    if not isinstance(name, str) or not name:
        raise DomainStructureError(f"{what.capitalize()} has no name: {node!r}")

    return name


def elements_of(domain: dict) -> list:
    """Return the elements of a domain as a list (empty when it carries none)."""
    elements = domain.get("elements")
    if not isinstance(elements, dict) or "element" not in elements:
        return []
    return as_sequence(elements["element"], what="element")


def merge_domains(original_domains: Any, backup_domains: Any, keep_empty: bool = False) -> list[dict]:
    """
    Merge the live document's named domains with the backup's.

    Args:
        original_domains: Domains of the current document (dict, list or None)
        backup_domains: Domains from the backup file (dict, list or None)
        keep_empty: Emit domains without elements instead of dropping them

    Returns:
        List of named-domain nodes in compact tree form

    Raises:
        DomainStructureError: If a domain or element has no name, or a
            collection has an unexpected type
    """
    working = as_sequence(original_domains) + as_sequence(backup_domains)

    domains = OrderedIndex()
    for domain in working:
        domain_name = name_of(domain, "domain")
        elements = elements_of(domain)

        if not elements:
            if not keep_empty:
                logger.debug(f"Skipping domain {domain_name}: no elements")
            elif domain_name not in domains:
                domains.put(domain_name, OrderedIndex())
            continue

        merged: Optional[OrderedIndex] = domains.get(domain_name)
        if merged is None:
            merged = OrderedIndex()
            domains.put(domain_name, merged)

        for element in elements:
            merged.put(name_of(element, "element"), element)

    named_domains = []
    for domain_name, merged in domains.items():
        if len(merged):
            elements_node = {"element": merged.values()}
        else:
            elements_node = {}
        named_domains.append({"name": {"_text": domain_name}, "elements": elements_node})

    logger.debug(
        f"Merged {len(working)} domain entries into {len(named_domains)} named domains"
    )
    return named_domains
