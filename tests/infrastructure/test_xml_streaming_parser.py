"""Unit tests for the secure streaming XML parser.

Security Impact:
    - Verifies event and depth limits stop oversized or deeply nested files
    - Confirms malformed files raise instead of being silently recovered
"""

import pytest

from health_itemtypes.domain.ports import ParseFault, SourceNotFoundError
from health_itemtypes.infrastructure.settings import settings
from health_itemtypes.infrastructure.xml_streaming_parser import SecurityError, StreamingXMLParser

EXPORT = (
    "<response><group>"
    "<thing><thing-id>1</thing-id></thing>"
    "<thing><thing-id>2</thing-id></thing>"
    "<thing><thing-id>3</thing-id></thing>"
    "</group></response>"
)


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "export.xml"
    path.write_text(EXPORT, encoding="utf-8")
    return path


class TestStreamingXMLParser:
    """Test StreamingXMLParser.iter_records."""

    def test_yields_records_in_order(self, export_file):
        """Test that each record element is yielded complete and in order."""
        parser = StreamingXMLParser()

        ids = [thing.findtext("thing-id") for thing in parser.iter_records(str(export_file), "thing")]

        assert ids == ["1", "2", "3"]

    def test_defaults_from_settings(self):
        """Test that limits default to the configured values."""
        parser = StreamingXMLParser()

        assert parser.max_events == settings.xml_max_events
        assert parser.max_depth == settings.xml_max_depth
        assert parser.huge_tree is False

    def test_no_matching_records(self, export_file):
        """Test a file without the record tag."""
        parser = StreamingXMLParser()

        assert list(parser.iter_records(str(export_file), "item")) == []

    def test_event_limit(self, export_file):
        """Test that exceeding the event limit raises SecurityError."""
        parser = StreamingXMLParser(max_events=5)

        with pytest.raises(SecurityError, match="event limit exceeded"):
            list(parser.iter_records(str(export_file), "thing"))

    def test_depth_limit(self, export_file):
        """Test that exceeding the nesting limit raises SecurityError."""
        parser = StreamingXMLParser(max_depth=3)

        with pytest.raises(SecurityError, match="depth limit exceeded"):
            list(parser.iter_records(str(export_file), "thing"))

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises SourceNotFoundError."""
        parser = StreamingXMLParser()

        with pytest.raises(SourceNotFoundError):
            list(parser.iter_records(str(tmp_path / "missing.xml"), "thing"))

    def test_malformed_file(self, tmp_path):
        """Test that malformed XML raises ParseFault."""
        path = tmp_path / "broken.xml"
        path.write_text("<response><thing></response>", encoding="utf-8")
        parser = StreamingXMLParser()

        with pytest.raises(ParseFault, match="Malformed XML"):
            list(parser.iter_records(str(path), "thing"))

    def test_entities_not_expanded(self, tmp_path):
        """Test that internal entities are left unresolved."""
        path = tmp_path / "entity.xml"
        path.write_text(
            '<!DOCTYPE response [<!ENTITY secret "expanded">]>'
            "<response><thing><thing-id>&secret;</thing-id></thing></response>",
            encoding="utf-8"
        )
        parser = StreamingXMLParser()

        ids = [thing.findtext("thing-id") for thing in parser.iter_records(str(path), "thing")]

        assert ids != ["expanded"]
