"""Unit tests for the optional-field XML codec.

These tests pin down the wire conventions every record relies on: absent
elements decode to None, None writes nothing, repeated elements keep document
order, malformed scalars are ParseFaults and lenient enums keep unrecognized
text for re-emission.
"""

import math
import uuid
from datetime import datetime, timezone

import pytest

from health_itemtypes.domain import codec
from health_itemtypes.domain.base_types import CodableValue
from health_itemtypes.domain.enums import DayOfWeek, Gender, Mood
from health_itemtypes.domain.ports import ParseFault
from health_itemtypes.infrastructure.xml_io import XmlWriter, load_fragment


def _write_inside(write) -> str:
    """Run ``write(writer)`` inside a <r> element and return the XML."""
    writer = XmlWriter()
    writer.write_start_element("r")
    write(writer)
    writer.write_end_element()
    return writer.to_string()


class TestOptionalReads:
    """Test optional scalar reads."""

    def test_missing_element_is_none(self):
        """Test that every optional read returns None for a missing element."""
        element = load_fragment("<r/>")

        assert codec.get_opt_text(element, "a") is None
        assert codec.get_opt_int(element, "a") is None
        assert codec.get_opt_double(element, "a") is None
        assert codec.get_opt_bool(element, "a") is None
        assert codec.get_opt_uuid(element, "a") is None
        assert codec.get_opt_datetime(element, "a") is None
        assert codec.get_opt_day_of_week(element, "a") is None
        assert codec.get_opt_enum(element, "a", Mood, Mood.NONE) is None
        assert codec.get_opt_record(element, "a", CodableValue) is None
        assert codec.get_opt_attribute(element, "a") is None

    def test_present_empty_text_is_empty_string(self):
        """Test that a present but empty string element reads as ''."""
        element = load_fragment("<r><city/></r>")

        assert codec.get_opt_text(element, "city") == ""

    def test_scalar_conversions(self):
        """Test conversion of well-formed scalar text."""
        element = load_fragment(
            "<r><i>-42</i><d>1.5e2</d><b>1</b>"
            "<g>6f9619ff-8b86-d011-b42d-00cf4fc964ff</g>"
            "<t>2024-03-01T08:30:00Z</t></r>"
        )

        assert codec.get_opt_int(element, "i") == -42
        assert codec.get_opt_double(element, "d") == 150.0
        assert codec.get_opt_bool(element, "b") is True
        assert codec.get_opt_uuid(element, "g") == uuid.UUID("6f9619ff-8b86-d011-b42d-00cf4fc964ff")
        assert codec.get_opt_datetime(element, "t") == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_attribute_read(self):
        """Test reading an attribute of the container."""
        element = load_fragment('<r units="mmol/L"/>')

        assert codec.get_opt_attribute(element, "units") == "mmol/L"
        assert codec.get_attribute(element, "units") == "mmol/L"


class TestMalformedScalars:
    """Test that malformed scalar text is a ParseFault, never a default."""

    @pytest.mark.parametrize("text", ["abc", "1.5", "", "1_000"])
    def test_malformed_int(self, text):
        """Test that non-integer text raises ParseFault naming the element."""
        element = load_fragment(f"<r><n>{text}</n></r>")

        with pytest.raises(ParseFault) as exc_info:
            codec.get_opt_int(element, "n")

        assert exc_info.value.element == "n"

    @pytest.mark.parametrize("text", ["abc", "infinity", "1_000", "1.2.3", ""])
    def test_malformed_double(self, text):
        """Test that text outside the xsd:double lexical space raises ParseFault."""
        element = load_fragment(f"<r><v>{text}</v></r>")

        with pytest.raises(ParseFault):
            codec.get_opt_double(element, "v")

    def test_malformed_bool(self):
        """Test that 'yes' is not a boolean."""
        element = load_fragment("<r><b>yes</b></r>")

        with pytest.raises(ParseFault):
            codec.get_opt_bool(element, "b")

    def test_malformed_uuid_and_datetime(self):
        """Test that malformed GUID and date-time text raise ParseFault."""
        element = load_fragment("<r><g>not-a-guid</g><t>yesterday</t></r>")

        with pytest.raises(ParseFault):
            codec.get_opt_uuid(element, "g")
        with pytest.raises(ParseFault):
            codec.get_opt_datetime(element, "t")


class TestDoubles:
    """Test xsd:double special values and formatting."""

    def test_special_values_parse(self):
        """Test INF, -INF and NaN spellings."""
        assert codec.parse_double("INF", "v") == math.inf
        assert codec.parse_double("-INF", "v") == -math.inf
        assert math.isnan(codec.parse_double("NaN", "v"))

    def test_format_double(self):
        """Test that whole numbers drop the trailing .0 and specials use xsd spelling."""
        assert codec.format_double(1.0) == "1"
        assert codec.format_double(0.97) == "0.97"
        assert codec.format_double(-2.5) == "-2.5"
        assert codec.format_double(math.inf) == "INF"
        assert codec.format_double(-math.inf) == "-INF"
        assert codec.format_double(math.nan) == "NaN"

    def test_format_bool(self):
        """Test boolean formatting."""
        assert codec.format_bool(True) == "true"
        assert codec.format_bool(False) == "false"


class TestMandatoryReads:
    """Test mandatory reads."""

    def test_missing_mandatory_element(self):
        """Test that a missing mandatory element names the element."""
        element = load_fragment("<r/>")

        with pytest.raises(ParseFault, match="Required element 'value' is missing") as exc_info:
            codec.get_double(element, "value")

        assert exc_info.value.element == "value"

    def test_missing_mandatory_attribute(self):
        """Test that a missing mandatory attribute raises ParseFault."""
        element = load_fragment("<r/>")

        with pytest.raises(ParseFault) as exc_info:
            codec.get_attribute(element, "units")

        assert exc_info.value.element == "units"

    def test_mandatory_record(self):
        """Test reading a mandatory nested record."""
        element = load_fragment("<r><name><text>Pollen</text></name></r>")

        record = codec.get_record(element, "name", CodableValue)

        assert record.text == "Pollen"
        assert record.codes == []


class TestDayOfWeek:
    """Test the 1-based wire form of the 0-based DayOfWeek enum."""

    @pytest.mark.parametrize("wire, day", [
        ("1", DayOfWeek.SUNDAY),
        ("2", DayOfWeek.MONDAY),
        ("4", DayOfWeek.WEDNESDAY),
        ("7", DayOfWeek.SATURDAY),
    ])
    def test_wire_to_enum(self, wire, day):
        """Test that wire day N is enum value N-1."""
        element = load_fragment(f"<r><dow>{wire}</dow></r>")

        assert codec.get_opt_day_of_week(element, "dow") is day

    @pytest.mark.parametrize("wire", ["0", "8", "-1"])
    def test_out_of_range_wire_day(self, wire):
        """Test that wire days outside 1..7 raise ParseFault."""
        element = load_fragment(f"<r><dow>{wire}</dow></r>")

        with pytest.raises(ParseFault):
            codec.get_opt_day_of_week(element, "dow")

    def test_enum_to_wire(self):
        """Test that enum value N is written as N+1."""
        assert codec.format_day_of_week(DayOfWeek.SUNDAY) == "1"
        assert codec.format_day_of_week(DayOfWeek.SATURDAY) == "7"

        xml = _write_inside(lambda w: codec.write_opt_day_of_week(w, "firstdow", DayOfWeek.MONDAY))

        assert xml == "<r><firstdow>2</firstdow></r>"


class TestRepeatedElements:
    """Test repeated element reads and writes."""

    def test_zero_children_is_empty_list(self):
        """Test that no matching children yield an empty list, not None."""
        element = load_fragment("<r><other/></r>")

        assert codec.get_repeated(element, "code", CodableValue) == []
        assert codec.get_repeated_text(element, "street") == []

    def test_one_child(self):
        """Test a single repeated element."""
        element = load_fragment("<r><street>1 Main St</street></r>")

        assert codec.get_repeated_text(element, "street") == ["1 Main St"]

    def test_many_children_keep_document_order(self):
        """Test that N children come back in document order."""
        element = load_fragment(
            "<r><flag><text>c</text></flag><x/><flag><text>a</text></flag>"
            "<flag><text>b</text></flag></r>"
        )

        flags = codec.get_repeated(element, "flag", CodableValue)

        assert [flag.text for flag in flags] == ["c", "a", "b"]

    def test_repeated_days_of_week(self):
        """Test repeated day-of-week elements."""
        element = load_fragment("<r><dow>2</dow><dow>6</dow></r>")

        assert codec.get_repeated_day_of_week(element, "dow") == [DayOfWeek.MONDAY, DayOfWeek.FRIDAY]

    def test_collection_missing_or_empty_wrapper(self):
        """Test that a missing or empty wrapper yields an empty list."""
        assert codec.get_collection(load_fragment("<r/>"), "tasks", "task", CodableValue) == []
        assert codec.get_collection(load_fragment("<r><tasks/></r>"), "tasks", "task", CodableValue) == []

    def test_write_repeated_in_order(self):
        """Test that repeated records are written in sequence order."""
        records = [CodableValue(text="first"), CodableValue(text="second")]

        xml = _write_inside(lambda w: codec.write_repeated(w, "flag", records))

        assert xml == "<r><flag><text>first</text></flag><flag><text>second</text></flag></r>"

    def test_empty_list_writes_nothing(self):
        """Test that empty lists write no element, not even a wrapper."""
        def write(writer):
            codec.write_repeated(writer, "flag", [])
            codec.write_repeated_text(writer, "street", [])
            codec.write_collection(writer, "tasks", "task", [])

        assert _write_inside(write) == "<r/>"

    def test_write_collection(self):
        """Test that a collection is nested in its wrapper."""
        xml = _write_inside(
            lambda w: codec.write_collection(w, "tasks", "task", [CodableValue(text="walk")])
        )

        assert xml == "<r><tasks><task><text>walk</text></task></tasks></r>"


class TestOptionalWrites:
    """Test optional writes."""

    def test_none_writes_nothing(self):
        """Test that None values write no placeholder elements."""
        def write(writer):
            codec.write_opt_text(writer, "a", None)
            codec.write_opt_int(writer, "b", None)
            codec.write_opt_double(writer, "c", None)
            codec.write_opt_bool(writer, "d", None)
            codec.write_opt_uuid(writer, "e", None)
            codec.write_opt_datetime(writer, "f", None)
            codec.write_opt_day_of_week(writer, "g", None)
            codec.write_opt_enum(writer, "h", None, Mood.NONE)
            codec.write_opt(writer, "i", None)
            codec.write_opt_attribute(writer, "j", None)

        assert _write_inside(write) == "<r/>"

    def test_values_written(self):
        """Test that present values are written with their wire text."""
        def write(writer):
            codec.write_opt_attribute(writer, "name", "zone")
            codec.write_opt_text(writer, "city", "Springfield")
            codec.write_opt_int(writer, "n", 3)
            codec.write_opt_double(writer, "v", 0.5)
            codec.write_opt_bool(writer, "b", False)

        xml = _write_inside(write)

        assert xml == '<r name="zone"><city>Springfield</city><n>3</n><v>0.5</v><b>false</b></r>'

    def test_text_is_escaped(self):
        """Test that markup characters in text are escaped."""
        xml = _write_inside(lambda w: codec.write_opt_text(w, "note", "a < b & c"))

        assert xml == "<r><note>a &lt; b &amp; c</note></r>"


class TestLenientEnums:
    """Test lenient enumeration parsing and re-emission."""

    def test_matches_value_case_insensitively(self):
        """Test matching by wire value regardless of case."""
        assert codec.parse_enum_with_fallback("M", Gender, Gender.UNKNOWN) == (Gender.MALE, None)
        assert codec.parse_enum_with_fallback("4", Mood, Mood.NONE) == (Mood.HAPPY, None)

    def test_matches_member_name(self):
        """Test matching by member name."""
        assert codec.parse_enum_with_fallback("female", Gender, Gender.UNKNOWN).member is Gender.FEMALE

    def test_unrecognized_text_falls_back(self):
        """Test that unknown text maps to the unknown member and is kept."""
        result = codec.parse_enum_with_fallback("x", Gender, Gender.UNKNOWN)

        assert result.member is Gender.UNKNOWN
        assert result.original_text == "x"

    def test_unknown_member_is_not_a_wire_value(self):
        """Test that the unknown member's own value is preserved as unrecognized text."""
        result = codec.parse_enum_with_fallback("0", Mood, Mood.NONE)

        assert result.member is Mood.NONE
        assert result.original_text == "0"

    def test_write_known_member(self):
        """Test writing a recognized member."""
        xml = _write_inside(lambda w: codec.write_opt_enum(w, "mood", Mood.HAPPY, Mood.NONE))

        assert xml == "<r><mood>4</mood></r>"

    def test_write_preserved_text(self):
        """Test that preserved text is written back unchanged."""
        xml = _write_inside(lambda w: codec.write_opt_enum(w, "mood", Mood.NONE, Mood.NONE, "9"))

        assert xml == "<r><mood>9</mood></r>"

    def test_unknown_member_without_text_writes_nothing(self):
        """Test that the unknown member alone has no wire form."""
        xml = _write_inside(lambda w: codec.write_opt_enum(w, "mood", Mood.NONE, Mood.NONE))

        assert xml == "<r/>"
