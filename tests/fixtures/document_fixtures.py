"""Test fixtures for documents, domains and storage."""

from unittest.mock import Mock

from tcx_backup.clients.storage_client import LocalStorage

SAMPLE_TCX = """<?xml version="1.0" encoding="UTF-8"?>
<model-data>
  <identification>
    <xml-version>4.2</xml-version>
  </identification>
  <model>
    <named-domains>
      <named-domain>
        <name>Colors</name>
        <elements>
          <element>
            <name>Red</name>
            <hex>F00</hex>
          </element>
          <element>
            <name>Green</name>
            <hex>0F0</hex>
          </element>
        </elements>
      </named-domain>
      <named-domain>
        <name>Sizes</name>
        <elements>
          <element>
            <name>Small</name>
            <value>S</value>
          </element>
        </elements>
      </named-domain>
    </named-domains>
    <component-classes>
      <component-class>
        <name>Widget</name>
      </component-class>
    </component-classes>
    <root-parts>
      <root-part>
        <name>Main</name>
      </root-part>
    </root-parts>
    <collections>
      <collection>
        <name>Inventory</name>
      </collection>
    </collections>
    <applications>
      <application>
        <name>Shop</name>
      </application>
    </applications>
    <includes>
      <module>
        <name>common</name>
      </module>
    </includes>
  </model>
</model-data>
"""


def make_element(name, **fields):
    """
    Create an element node in compact tree form.

    Example:
        make_element("Red", hex="F00")
        -> {"name": {"_text": "Red"}, "hex": {"_text": "F00"}}
    """
    element = {"name": {"_text": name}}
    for key, value in fields.items():
        element[key] = {"_text": value}
    return element


def make_domain(name, elements):
    """
    Create a named-domain node holding the given elements.

    Args:
        name: Domain name
        elements: List of element nodes; an empty list yields an empty <elements/>
    """
    return {
        "name": {"_text": name},
        "elements": {"element": list(elements)} if elements else {},
    }


def element_names(domain):
    """Element names of a merged domain, in order."""
    return [element["name"]["_text"] for element in domain["elements"]["element"]]


def domain_names(domains):
    return [domain["name"]["_text"] for domain in domains]


def create_mock_storage(files=None):
    """
    Create a mock storage client.

    Args:
        files: Dict of file name -> content served by read() and list()

    Returns:
        Mock with the LocalStorage interface
    """
    files = dict(files or {})
    mock = Mock(spec=LocalStorage)
    mock.list.side_effect = lambda: sorted(files)
    mock.list_files.side_effect = lambda names, ext: [n for n in names if n.endswith(f".{ext}")]
    mock.read.side_effect = lambda name: files[name]
    return mock
