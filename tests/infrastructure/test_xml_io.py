"""Unit tests for the secure fragment loader and the XML writer.

Security Impact:
    - Verifies entity declarations (Billion Laughs, external entities) are refused
    - Confirms malformed XML is reported as a ParseFault
"""

import pytest

from health_itemtypes.domain.ports import ParseFault
from health_itemtypes.infrastructure.xml_io import XmlWriter, load_fragment


class TestLoadFragment:
    """Test load_fragment."""

    def test_well_formed(self):
        """Test that a fragment parses to its root element."""
        element = load_fragment("<when><date><y>2024</y></date></when>")

        assert element.tag == "when"
        assert element.find("date/y").text == "2024"

    def test_malformed(self):
        """Test that malformed XML raises ParseFault."""
        with pytest.raises(ParseFault, match="Malformed XML fragment"):
            load_fragment("<when><date></when>")

    def test_entity_expansion_refused(self):
        """Test that entity declarations are refused."""
        xml = (
            '<!DOCTYPE lolz [<!ENTITY lol "lol"><!ENTITY lol2 "&lol;&lol;&lol;">]>'
            "<lolz>&lol2;</lolz>"
        )

        with pytest.raises(ParseFault, match="Forbidden XML construct"):
            load_fragment(xml)

    def test_external_entity_refused(self):
        """Test that external entity references are refused."""
        xml = '<!DOCTYPE r [<!ENTITY ext SYSTEM "file:///etc/passwd">]><r>&ext;</r>'

        with pytest.raises(ParseFault):
            load_fragment(xml)


class TestXmlWriter:
    """Test XmlWriter."""

    def test_nested_elements_and_attributes(self):
        """Test a small document with attributes and text content."""
        writer = XmlWriter()
        writer.write_start_element("value")
        writer.write_element_string("mmolPerL", "5.5")
        writer.write_start_element("display")
        writer.write_attribute_string("units", "mmol/L")
        writer.write_value("5.5")
        writer.write_end_element()
        writer.write_end_element()

        assert writer.to_string() == (
            '<value><mmolPerL>5.5</mmolPerL><display units="mmol/L">5.5</display></value>'
        )
        assert writer.root.tag == "value"

    def test_attribute_escaping(self):
        """Test that attribute values are escaped."""
        writer = XmlWriter()
        writer.write_start_element("zone")
        writer.write_attribute_string("name", 'Zone "A" & B')
        writer.write_end_element()

        assert writer.to_string() == '<zone name="Zone &quot;A&quot; &amp; B"/>'

    def test_pretty_print(self):
        """Test that pretty printing indents children."""
        writer = XmlWriter()
        writer.write_start_element("a")
        writer.write_element_string("b", "1")
        writer.write_end_element()

        assert writer.to_string(pretty_print=True) == "<a>\n  <b>1</b>\n</a>\n"

    def test_empty_writer(self):
        """Test that nothing written serializes to an empty string."""
        writer = XmlWriter()

        assert writer.root is None
        assert writer.to_string() == ""

    def test_second_root_rejected(self):
        """Test that a document has a single root element."""
        writer = XmlWriter()
        writer.write_element_string("a", "1")

        with pytest.raises(ValueError, match="already has a root"):
            writer.write_element_string("b", "2")

    def test_unbalanced_calls(self):
        """Test misuse of the forward-only writer."""
        writer = XmlWriter()

        with pytest.raises(ValueError):
            writer.write_end_element()
        with pytest.raises(ValueError):
            writer.write_attribute_string("units", "kg")
        with pytest.raises(ValueError):
            writer.write_value("1")

        writer.write_start_element("open")

        with pytest.raises(ValueError, match="still open"):
            writer.to_string()
