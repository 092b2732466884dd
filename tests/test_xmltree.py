"""Tests for the shared XML parsing helpers."""

import pytest

from addressbook.exceptions import EmptyInputError, MalformedInputError
from addressbook.xmltree import local_name, parse_element, parse_xml


class TestLocalName:
    """Tests for namespace name reduction."""

    def test_local_name(self):
        """Test Clark-notation names."""
        assert local_name("plain") == "plain"
        assert local_name("{urn:other}tag") == "tag"
        assert local_name("{http://www.w3.org/XML/1998/namespace}lang") == "xml:lang"
        assert local_name("{http://www.w3.org/2001/XMLSchema-instance}type") == "xsi:type"


class TestParseElement:
    """Tests for parse_element."""

    def test_empty_input(self):
        """Test empty input is rejected."""
        with pytest.raises(EmptyInputError):
            parse_element("")

        with pytest.raises(EmptyInputError):
            parse_element("   \n")

    def test_malformed_input(self):
        """Test unparseable markup is rejected."""
        with pytest.raises(MalformedInputError, match="not well-formed"):
            parse_element("<book><person></book>")

    def test_declared_encoding_in_text(self):
        """Test already-decoded text with an encoding declaration parses."""
        root = parse_element('<?xml version="1.0" encoding="ISO-8859-1"?><owner>Zürich</owner>')

        assert root.text == "Zürich"


class TestParseXml:
    """Tests for parsing XML into ElementNode trees."""

    def test_parse_simple_document(self):
        """Test parsing a small document."""
        node = parse_xml('<book owner="me"><person>A</person></book>')

        assert node.name == "book"
        assert node.attributes == {"owner": "me"}
        assert len(node.children) == 1
        assert node.children[0].name == "person"
        assert node.children[0].text == "A"

    def test_whitespace_between_children_ignored(self):
        """Test formatting whitespace does not become text."""
        node = parse_xml("<book>\n    <person>A</person>\n</book>")

        assert node.text is None

    def test_formatting_does_not_matter(self):
        """Test documents differing only in layout compare equal."""
        compact = '<book><person id="1">A</person><notes/></book>'
        pretty = '<?xml version="1.0"?>\n<book>\n  <person id="1">A</person>\n  <notes></notes>\n</book>\n'

        assert parse_xml(compact) == parse_xml(pretty)

    def test_namespaces_reduced_to_local_names(self):
        """Test namespaced tags keep only their local name."""
        node = parse_xml('<b:book xmlns:b="urn:books"><b:person>A</b:person></b:book>')

        assert node.name == "book"
        assert node.children[0].name == "person"

    def test_xsi_prefix_kept(self):
        """Test xsi attributes keep their prefix."""
        node = parse_xml(
            '<addressBook xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
            'xsi:noNamespaceSchemaLocation="address_book_schema.xsd"/>'
        )

        assert node.attributes == {"xsi:noNamespaceSchemaLocation": "address_book_schema.xsd"}
