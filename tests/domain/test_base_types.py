"""Unit tests for coded values, the date/time family and measurement values."""

import datetime

import pytest

from health_itemtypes.domain.base_types import (
    ApproximateDate,
    ApproximateDateTime,
    ApproximateTime,
    CodableValue,
    CodedValue,
    DisplayValue,
    GeneralMeasurement,
    HealthServiceDate,
    HealthServiceDateTime,
    StructuredMeasurement,
)
from health_itemtypes.domain.ports import ParseFault, SerializationFault, ValidationFault
from health_itemtypes.infrastructure.xml_io import XmlWriter, load_fragment


def _to_xml(record, node_name: str) -> str:
    writer = XmlWriter()
    record.write_xml(writer, node_name)
    return writer.to_string()


class TestCodedValues:
    """Test CodedValue and CodableValue."""

    def test_codable_value_with_codes(self):
        """Test parsing text plus repeated codes in order."""
        element = load_fragment(
            "<name><text>Peanut allergy</text>"
            "<code><value>91935009</value><family>SNOMED</family><type>SNOMED-CT</type></code>"
            "<code><value>Z91.010</value><type>ICD10</type><version>2024</version></code></name>"
        )

        value = CodableValue.parse_xml(element)

        assert value.text == "Peanut allergy"
        assert [code.value for code in value.codes] == ["91935009", "Z91.010"]
        assert value.codes[1].version == "2024"
        assert value.codes[1].family is None
        assert str(value) == "Peanut allergy"
        assert str(value.codes[0]) == "SNOMED:SNOMED-CT:91935009"

    def test_codable_value_round_trip(self):
        """Test that writing reproduces the parsed document."""
        xml = "<name><text>Pulse</text><code><value>p</value><type>methods</type></code></name>"

        assert _to_xml(CodableValue.parse_xml(load_fragment(xml)), "name") == xml

    def test_coded_value_missing_type(self):
        """Test that writing a code without its vocabulary raises SerializationFault."""
        with pytest.raises(SerializationFault) as exc_info:
            _to_xml(CodedValue(value="x"), "code")

        assert exc_info.value.field == "type"

    @pytest.mark.parametrize("node_name", [None, ""])
    def test_element_name_required(self, node_name):
        """Test that writing under a missing element name is a ValidationFault."""
        writer = XmlWriter()

        with pytest.raises(ValidationFault) as exc_info:
            CodableValue(text="Pulse").write_xml(writer, node_name)

        assert exc_info.value.field == "node_name"
        assert writer.root is None

    def test_blank_text_rejected(self):
        """Test that blank display text is a ValidationFault."""
        with pytest.raises(ValidationFault) as exc_info:
            CodableValue(text="  ")

        assert exc_info.value.field == "text"

    def test_missing_text_is_parse_fault(self):
        """Test that a codable value without <text> cannot be parsed."""
        with pytest.raises(ParseFault) as exc_info:
            CodableValue.parse_xml(load_fragment("<name><code/></name>"))

        assert exc_info.value.element == "text"
        assert exc_info.value.record_type == "CodableValue"


class TestHealthServiceDate:
    """Test HealthServiceDate."""

    def test_ranges(self):
        """Test month, day and year range checks."""
        with pytest.raises(ValidationFault) as exc_info:
            HealthServiceDate(year=2024, month=13, day=1)
        assert exc_info.value.field == "month"

        with pytest.raises(ValidationFault):
            HealthServiceDate(year=2024, month=1, day=32)
        with pytest.raises(ValidationFault):
            HealthServiceDate(year=999, month=1, day=1)

    def test_failed_assignment_keeps_previous_value(self):
        """Test that an invalid assignment leaves the record unchanged."""
        date = HealthServiceDate(year=2024, month=2, day=29)

        with pytest.raises(ValidationFault):
            date.month = 0

        assert date.month == 2

    def test_mandatory_field_rejects_none(self):
        """Test that assigning None to a mandatory field is a ValidationFault."""
        date = HealthServiceDate(year=2024, month=2, day=29)

        with pytest.raises(ValidationFault) as exc_info:
            date.year = None

        assert exc_info.value.field == "year"
        assert date.year == 2024

    def test_unknown_field_rejected(self):
        """Test that unknown keyword arguments are rejected."""
        with pytest.raises(ValidationFault):
            HealthServiceDate(year=2024, month=1, day=1, hour=3)

    def test_wire_format_and_conversion(self):
        """Test the y/m/d wire form and conversion to datetime.date."""
        date = HealthServiceDate.parse_xml(load_fragment("<date><y>2023</y><m>7</m><d>4</d></date>"))

        assert date.to_date() == datetime.date(2023, 7, 4)
        assert str(date) == "2023-07-04"
        assert _to_xml(date, "date") == "<date><y>2023</y><m>7</m><d>4</d></date>"

    def test_empty_record_cannot_be_written(self):
        """Test that a record built empty is a SerializationFault on write."""
        with pytest.raises(SerializationFault) as exc_info:
            _to_xml(HealthServiceDate(), "date")

        assert exc_info.value.field == "year"


class TestApproximateTime:
    """Test ApproximateTime."""

    def test_from_python_time(self):
        """Test conversion from datetime.time, keeping milliseconds."""
        holder = HealthServiceDateTime(date=datetime.date(2024, 1, 1), time=datetime.time(7, 30, 15, 250000))

        assert holder.time.hour == 7
        assert holder.time.minute == 30
        assert holder.time.second == 15
        assert holder.time.millisecond == 250
        assert str(holder.time) == "07:30:15.250"

    def test_optional_parts(self):
        """Test that seconds and milliseconds are optional on the wire."""
        time = ApproximateTime.parse_xml(load_fragment("<time><h>22</h><m>5</m></time>"))

        assert time.second is None
        assert str(time) == "22:05"
        assert _to_xml(time, "time") == "<time><h>22</h><m>5</m></time>"

    def test_milliseconds_require_seconds(self):
        """Test that milliseconds without seconds cannot be written."""
        with pytest.raises(SerializationFault) as exc_info:
            _to_xml(ApproximateTime(hour=1, minute=2, millisecond=3), "time")

        assert exc_info.value.field == "second"

    def test_hour_range(self):
        """Test the hour range."""
        with pytest.raises(ValidationFault):
            ApproximateTime(hour=24, minute=0)


class TestHealthServiceDateTime:
    """Test HealthServiceDateTime."""

    def test_python_date_and_time_assignment(self):
        """Test that date and time fields accept Python date and time objects."""
        value = HealthServiceDateTime(date=datetime.date(2000, 1, 1))

        assert value.to_datetime() == datetime.datetime(2000, 1, 1)

        value.time = datetime.time(6, 45)

        assert value.to_datetime() == datetime.datetime(2000, 1, 1, 6, 45)

    def test_round_trip_with_time_zone(self):
        """Test the date/time/tz wire form."""
        xml = (
            "<when><date><y>2024</y><m>3</m><d>9</d></date>"
            "<time><h>8</h><m>0</m></time><tz><text>UTC</text></tz></when>"
        )

        value = HealthServiceDateTime.parse_xml(load_fragment(xml))

        assert value.time_zone.text == "UTC"
        assert str(value) == "2024-03-09 08:00 UTC"
        assert _to_xml(value, "when") == xml

    def test_missing_date(self):
        """Test that <when> without <date> is a ParseFault."""
        with pytest.raises(ParseFault) as exc_info:
            HealthServiceDateTime.parse_xml(load_fragment("<when><time><h>1</h><m>0</m></time></when>"))

        assert exc_info.value.element == "date"


class TestApproximateDate:
    """Test ApproximateDate."""

    def test_year_only(self):
        """Test a date where only the year is known."""
        date = ApproximateDate.parse_xml(load_fragment("<date-of-birth><y>1950</y></date-of-birth>"))

        assert date.month is None
        assert str(date) == "1950"

    def test_day_requires_month(self):
        """Test that a day without a month cannot be written."""
        with pytest.raises(SerializationFault) as exc_info:
            _to_xml(ApproximateDate(year=1950, day=3), "date")

        assert exc_info.value.field == "month"


class TestApproximateDateTime:
    """Test ApproximateDateTime."""

    def test_structured_form(self):
        """Test parsing and writing the structured form."""
        xml = "<start-date><structured><date><y>2024</y><m>5</m></date></structured></start-date>"

        value = ApproximateDateTime.parse_xml(load_fragment(xml))

        assert value.date.year == 2024
        assert value.description is None
        assert _to_xml(value, "start-date") == xml

    def test_descriptive_form(self):
        """Test parsing and writing the descriptive form."""
        xml = "<when><descriptive>Early spring</descriptive></when>"

        value = ApproximateDateTime.parse_xml(load_fragment(xml))

        assert value.description == "Early spring"
        assert str(value) == "Early spring"
        assert _to_xml(value, "when") == xml

    def test_from_python_date(self):
        """Test conversion from datetime.date."""
        value = ApproximateDateTime(date=datetime.date(2024, 2, 1))

        assert str(value) == "2024-02-01"

    def test_neither_form_set(self):
        """Test that an empty approximate date/time cannot be written."""
        with pytest.raises(SerializationFault):
            _to_xml(ApproximateDateTime(), "when")


class TestMeasurements:
    """Test DisplayValue, StructuredMeasurement and GeneralMeasurement."""

    def test_display_value_attributes(self):
        """Test that units travel as attributes and the value as text."""
        xml = '<display units="mmol/L" units-code="mmol-per-l">5.5</display>'

        value = DisplayValue.parse_xml(load_fragment(xml))

        assert value.value == 5.5
        assert value.units == "mmol/L"
        assert value.text is None
        assert str(value) == "5.5 mmol/L"
        assert _to_xml(value, "display") == xml

    def test_display_value_missing_units(self):
        """Test that a display value without units is a ParseFault."""
        with pytest.raises(ParseFault) as exc_info:
            DisplayValue.parse_xml(load_fragment("<display>5.5</display>"))

        assert exc_info.value.element == "units"

    def test_general_measurement(self):
        """Test display text with structured interpretations."""
        xml = (
            "<measurement><display>120 mg/dL</display>"
            "<structured><value>120</value><units><text>mg/dL</text></units></structured>"
            "</measurement>"
        )

        value = GeneralMeasurement.parse_xml(load_fragment(xml))

        assert value.display == "120 mg/dL"
        assert len(value.structured) == 1
        assert str(value.structured[0]) == "120 mg/dL"
        assert _to_xml(value, "measurement") == xml

    def test_structured_measurement_requires_units(self):
        """Test that a structured measurement needs units to be written."""
        with pytest.raises(SerializationFault):
            _to_xml(StructuredMeasurement(value=1.0), "structured")
