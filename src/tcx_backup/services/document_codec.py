#!/usr/bin/env python3
"""
.tcx document codec.

Converts between .tcx XML text and a compact tree of plain Python values:

- every element becomes a dict keyed by child tag
- a tag that occurs once maps to a dict, a repeated tag to a list of dicts
- text content is stored under "_text", attributes under "_attributes"
- the XML declaration is kept under "_declaration"

Example:
    <model-data>
      <identification><xml-version>4.2</xml-version></identification>
    </model-data>

    {"model-data": {"identification": {"xml-version": {"_text": "4.2"}}}}

Whitespace-only text between elements is indentation and is not kept, so
parse(serialize(tree)) returns the same tree. Text of a leaf element is kept
as written, whitespace included. Inside mixed content (an element with both
children and non-whitespace text) the text after each child is kept under
"_tail" on that child, and serialization does not re-indent it.
"""

import logging
import re
import xml.etree.ElementTree as XmlTree
from typing import Any, Optional
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ..models.models import Backup
from .domain.errors import DocumentFormatError

logger = logging.getLogger(__name__)

ROOT_TAG = "model-data"

TEXT_KEY = "_text"
CDATA_KEY = "_cdata"
TAIL_KEY = "_tail"
ATTRIBUTES_KEY = "_attributes"
DECLARATION_KEY = "_declaration"

DEFAULT_DECLARATION = {ATTRIBUTES_KEY: {"version": "1.0", "encoding": "UTF-8"}}

_DECLARATION_RE = re.compile(r"^\s*<\?xml\s+([^?]*)\?>")
_PSEUDO_ATTR_RE = re.compile(r"""([A-Za-z_][\w.-]*)\s*=\s*["']([^"']*)["']""")


def text_of(node: Any) -> Optional[str]:
    """Return the text of a compact-tree node, or None if it has none."""
    if isinstance(node, dict):
        value = node.get(TEXT_KEY, node.get(CDATA_KEY))
        return None if value is None else str(value)
    if isinstance(node, str):
        return node
    return None


def child(node: Any, *path: str) -> Any:
    """Walk a compact tree by tag names, returning None when any step is missing."""
    for tag in path:
        if not isinstance(node, dict):
            return None
        node = node.get(tag)
    return node


def _parse_declaration(content: str) -> dict:
    match = _DECLARATION_RE.match(content)
    if not match:
        return dict(DEFAULT_DECLARATION)
    attributes = dict(_PSEUDO_ATTR_RE.findall(match.group(1)))
    return {ATTRIBUTES_KEY: attributes}


def _has_mixed_content(elem: Element) -> bool:
    """True when an element with children also carries non-whitespace text."""
    if not len(elem):
        return False
    if elem.text is not None and elem.text.strip():
        return True
    return any(sub.tail is not None and sub.tail.strip() for sub in elem)


def _is_grouped(elem: Element) -> bool:
    """True when repeated child tags are adjacent, so grouping by tag keeps their order."""
    seen = []
    for sub in elem:
        if seen and seen[-1] == sub.tag:
            continue
        if sub.tag in seen:
            return False
        seen.append(sub.tag)
    return True


def _element_to_node(elem: Element) -> dict:
    node: dict[str, Any] = {}
    mixed = _has_mixed_content(elem)

    if mixed and not _is_grouped(elem):
        raise DocumentFormatError(
            f"Mixed content in <{elem.tag}> interleaves child tags and cannot be kept in order"
        )

    if elem.attrib:
        node[ATTRIBUTES_KEY] = dict(elem.attrib)

    # Whitespace-only text is indentation, except in leaves and mixed content
    if elem.text is not None and (elem.text.strip() or mixed or not len(elem)):
        node[TEXT_KEY] = elem.text

    for sub in elem:
        value = _element_to_node(sub)
        if mixed and sub.tail is not None:
            value[TAIL_KEY] = sub.tail
        if sub.tag not in node:
            node[sub.tag] = value
        elif isinstance(node[sub.tag], list):
            node[sub.tag].append(value)
        else:
            node[sub.tag] = [node[sub.tag], value]

    return node


def _node_to_element(tag: str, node: Any, parent: Optional[Element] = None) -> Element:
    elem = Element(tag) if parent is None else XmlTree.SubElement(parent, tag)

    if node is None:
        return elem

    if not isinstance(node, dict):
        # Scalar shorthand for a text-only element
        elem.text = str(node)
        return elem

    for key, value in node.items():
        if key == ATTRIBUTES_KEY:
            for name, attr_value in (value or {}).items():
                elem.set(name, "" if attr_value is None else str(attr_value))
        elif key in (TEXT_KEY, CDATA_KEY):
            if value is not None:
                elem.text = str(value)
        elif key == TAIL_KEY:
            if value is not None:
                elem.tail = str(value)
        elif key.startswith("_"):
            logger.debug(f"Ignoring unsupported compact-tree key {key} under <{tag}>")
        elif isinstance(value, list):
            for item in value:
                _node_to_element(key, item, elem)
        else:
            _node_to_element(key, value, elem)

    return elem


def _indent(elem: Element, space: str, level: int = 0) -> None:
    """Pretty-print in place, leaving leaf text and mixed content untouched."""
    if not len(elem) or _has_mixed_content(elem):
        return
    padding = "\n" + space * (level + 1)
    elem.text = padding
    for sub in elem:
        _indent(sub, space, level + 1)
        sub.tail = padding
    sub.tail = "\n" + space * level


def _model_data(document: dict) -> dict:
    model_data = document.get(ROOT_TAG) if isinstance(document, dict) else None
    if not isinstance(model_data, dict):
        raise DocumentFormatError(f"Document has no <{ROOT_TAG}> root element")
    return model_data


def _model(document: dict) -> dict:
    model = _model_data(document).get("model")
    if not isinstance(model, dict):
        raise DocumentFormatError(f"Document has no <{ROOT_TAG}>/<model> element")
    return model


def _wrap(tag: str, value: Any) -> dict:
    """Container node holding value under tag; empty container when value is None."""
    return {} if value is None else {tag: value}


class DocumentCodec:
    """
    Parses .tcx text into compact trees and serializes them back.

    Parsing goes through defusedxml so DTDs and entity expansion in a
    document are rejected rather than resolved.
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def parse(self, content: str) -> dict:
        """
        Parse .tcx text into a compact tree.

        Raises:
            DocumentFormatError: If the XML is malformed or uses forbidden constructs
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise DocumentFormatError(f"Malformed document XML: {e}") from e
        except DefusedXmlException as e:
            raise DocumentFormatError(f"Forbidden construct in document XML: {e}") from e

        return {
            DECLARATION_KEY: _parse_declaration(content),
            root.tag: _element_to_node(root),
        }

    def serialize(self, document: dict) -> str:
        """
        Serialize a compact tree back to XML text, with declaration.

        Raises:
            DocumentFormatError: If the tree does not have exactly one root element
        """
        roots = [key for key in document if not key.startswith("_")]
        if len(roots) != 1:
            raise DocumentFormatError(f"Document must have exactly one root element, found {roots}")

        root = _node_to_element(roots[0], document[roots[0]])
        if self.indent:
            _indent(root, self.indent)
        body = XmlTree.tostring(root, encoding="unicode")

        declaration = document.get(DECLARATION_KEY) or DEFAULT_DECLARATION
        attributes = declaration.get(ATTRIBUTES_KEY) or DEFAULT_DECLARATION[ATTRIBUTES_KEY]
        pseudo_attrs = " ".join(f'{name}="{value}"' for name, value in attributes.items())

        return f"<?xml {pseudo_attrs}?>\n{body}\n"

    def _as_document(self, source: str | dict) -> dict:
        return source if isinstance(source, dict) else self.parse(source)

    def extract_version(self, source: str | dict) -> Optional[str]:
        """Return identification/xml-version text, or None when absent."""
        version = text_of(child(_model_data(self._as_document(source)), "identification", "xml-version"))
        if version is None:
            logger.warning("Document has no identification/xml-version")
        return version

    def extract_domains(self, source: str | dict) -> Any:
        """Return model/named-domains/named-domain: a dict, a list, or None."""
        return child(_model(self._as_document(source)), "named-domains", "named-domain")

    def extract_component_classes(self, source: str | dict) -> Any:
        """Return the model/component-classes subtree of the document as it is now."""
        return child(_model(self._as_document(source)), "component-classes")

    def extract_backup(self, source: str | dict) -> Backup:
        """Project the sections kept in a backup out of a document, verbatim."""
        document = self._as_document(source)
        model = _model(document)

        return Backup(
            version=self.extract_version(document),
            named_domains=child(model, "named-domains", "named-domain"),
            root_parts=child(model, "root-parts"),
            collections=child(model, "collections", "collection"),
            applications=child(model, "applications", "application"),
            includes=child(model, "includes", "module"),
        )

    def build_document(self, backup: Backup, declaration: Optional[dict] = None) -> dict:
        """
        Rebuild a full document tree from backup sections and component classes.

        declaration is the "_declaration" node to write, normally the one of
        the document being restored; the default is version 1.0, UTF-8.
        """
        version = {TEXT_KEY: backup.version} if backup.version is not None else {}

        model = {
            "named-domains": _wrap("named-domain", backup.named_domains),
            "component-classes": backup.component_classes if backup.component_classes is not None else {},
            "root-parts": backup.root_parts if backup.root_parts is not None else {},
            "collections": _wrap("collection", backup.collections),
            "applications": _wrap("application", backup.applications),
            "includes": _wrap("module", backup.includes),
        }

        return {
            DECLARATION_KEY: declaration or dict(DEFAULT_DECLARATION),
            ROOT_TAG: {
                "identification": {"xml-version": version},
                "model": model,
            },
        }
