"""XML parsing helpers shared by the converter and the validator."""

import xml.etree.ElementTree as ET

from .exceptions import EmptyInputError, MalformedInputError
from .model import ElementNode


XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Namespaces whose prefixes survive conversion; all others are reduced to local names
KNOWN_PREFIXES = {XSI_NAMESPACE: "xsi", XML_NAMESPACE: "xml"}
PREFIX_NAMESPACES = {prefix: uri for uri, prefix in KNOWN_PREFIXES.items()}


def local_name(tag: str) -> str:
    """Strip the namespace from a Clark-notation name, keeping xsi/xml prefixes."""
    if not tag.startswith("{"):
        return tag
    namespace, name = tag[1:].split("}", 1)
    prefix = KNOWN_PREFIXES.get(namespace)
    return f"{prefix}:{name}" if prefix else name


def parse_element(xml_text: str) -> ET.Element:
    """Parse XML text into an ElementTree element."""
    if xml_text is None or not xml_text.strip():
        raise EmptyInputError("XML input is empty")
    try:
        return ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedInputError(f"Input is not well-formed XML: {e}") from e


def element_to_node(element: ET.Element) -> ElementNode:
    """Convert an ElementTree element into an ElementNode tree."""
    node = ElementNode(local_name(element.tag))
    for name, value in element.attrib.items():
        node.attributes[local_name(name)] = value

    parts = [element.text or ""]
    for child in element:
        node.add_child(element_to_node(child))
        parts.append(child.tail or "")

    text = "".join(part.strip() for part in parts)
    node.text = text or None
    return node


def parse_xml(xml_text: str) -> ElementNode:
    """Parse XML text into an ElementNode tree, whitespace-only text dropped.

    Two documents that differ only in formatting parse to equal trees.
    """
    return element_to_node(parse_element(xml_text))
