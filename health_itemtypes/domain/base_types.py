"""Base Value Types.

Coded values, the date/time family and measurement values. These are the
building blocks nested inside every top-level item type; none of them owns a
root element, the enclosing record chooses the element name.

Architecture:
    - Each class reads and writes its children through the codec in the
      documented schema order
    - Date/time values accept the matching Python ``datetime`` objects on
      construction or assignment and convert them field by field
"""

import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, StrictFloat, StrictInt, field_validator, model_validator

from health_itemtypes.domain import codec, validator
from health_itemtypes.domain.item_base import ItemData


# ============================================================================
# Coded values
# ============================================================================

class CodedValue(ItemData):
    """A single code from a named vocabulary.

    Parameters:
        value: The code itself
        family: Vocabulary family (e.g. "wc", "HL7")
        type: Vocabulary name
        version: Vocabulary version
    """

    REQUIRED_FIELDS = ("value", "type")

    value: Optional[str] = Field(None, description="Code value")
    family: Optional[str] = Field(None, description="Vocabulary family")
    type: Optional[str] = Field(None, description="Vocabulary name")
    version: Optional[str] = Field(None, description="Vocabulary version")

    @field_validator("value", "type")
    @classmethod
    def validate_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "value": codec.get_text(element, "value"),
            "family": codec.get_opt_text(element, "family"),
            "type": codec.get_text(element, "type"),
            "version": codec.get_opt_text(element, "version"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "value", self.value)
        codec.write_opt_text(writer, "family", self.family)
        codec.write_opt_text(writer, "type", self.type)
        codec.write_opt_text(writer, "version", self.version)

    def __str__(self) -> str:
        return f"{self.family}:{self.type}:{self.value}" if self.family else f"{self.type}:{self.value}"


class CodableValue(ItemData):
    """Free text with optional codes that give it a coded meaning.

    The vocabulary service that resolves the codes is not modelled here; a
    CodableValue only carries what was recorded.
    """

    REQUIRED_FIELDS = ("text",)

    text: Optional[str] = Field(None, description="Display text")
    codes: List[CodedValue] = Field(default_factory=list, description="Codes for the text")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "text")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "text": codec.get_text(element, "text"),
            "codes": codec.get_repeated(element, "code", CodedValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "text", self.text)
        codec.write_repeated(writer, "code", self.codes)

    def __str__(self) -> str:
        return self.text or ""


# ============================================================================
# Dates and times
# ============================================================================

class HealthServiceDate(ItemData):
    """A complete calendar date (year, month and day all known)."""

    REQUIRED_FIELDS = ("year", "month", "day")

    year: Optional[StrictInt] = None
    month: Optional[StrictInt] = None
    day: Optional[StrictInt] = None

    @model_validator(mode="before")
    @classmethod
    def from_python_date(cls, data: Any) -> Any:
        if isinstance(data, datetime.date):
            return {"year": data.year, "month": data.month, "day": data.day}
        return data

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "year", 1000, 9999)
        return v

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "month", 1, 12)
        return v

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "day", 1, 31)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "year": codec.get_int(element, "y"),
            "month": codec.get_int(element, "m"),
            "day": codec.get_int(element, "d"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_int(writer, "y", self.year)
        codec.write_opt_int(writer, "m", self.month)
        codec.write_opt_int(writer, "d", self.day)

    def to_date(self) -> datetime.date:
        return datetime.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class ApproximateTime(ItemData):
    """A time of day where seconds and milliseconds may be unknown."""

    REQUIRED_FIELDS = ("hour", "minute")

    hour: Optional[StrictInt] = None
    minute: Optional[StrictInt] = None
    second: Optional[StrictInt] = None
    millisecond: Optional[StrictInt] = None

    @model_validator(mode="before")
    @classmethod
    def from_python_time(cls, data: Any) -> Any:
        if isinstance(data, datetime.time):
            return {
                "hour": data.hour,
                "minute": data.minute,
                "second": data.second,
                "millisecond": data.microsecond // 1000,
            }
        return data

    @field_validator("hour")
    @classmethod
    def validate_hour(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "hour", 0, 23)
        return v

    @field_validator("minute", "second")
    @classmethod
    def validate_minute_second(cls, v: Optional[int], info) -> Optional[int]:
        validator.throw_if_out_of_range(v, info.field_name, 0, 59)
        return v

    @field_validator("millisecond")
    @classmethod
    def validate_millisecond(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "millisecond", 0, 999)
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if(
            self.millisecond is not None and self.second is None,
            "second",
            type(self).__name__,
            "ApproximateTime cannot be written: milliseconds require seconds"
        )

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "hour": codec.get_int(element, "h"),
            "minute": codec.get_int(element, "m"),
            "second": codec.get_opt_int(element, "s"),
            "millisecond": codec.get_opt_int(element, "f"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_int(writer, "h", self.hour)
        codec.write_opt_int(writer, "m", self.minute)
        codec.write_opt_int(writer, "s", self.second)
        codec.write_opt_int(writer, "f", self.millisecond)

    def __str__(self) -> str:
        if self.hour is None:
            return ""
        result = f"{self.hour:02d}:{self.minute or 0:02d}"
        if self.second is not None:
            result += f":{self.second:02d}"
            if self.millisecond is not None:
                result += f".{self.millisecond:03d}"
        return result


class HealthServiceDateTime(ItemData):
    """A date with an optional approximate time and time zone.

    Assigning a ``datetime.datetime`` fills both date and time; assigning a
    ``datetime.date`` fills the date only.
    """

    REQUIRED_FIELDS = ("date",)

    date: Optional[HealthServiceDate] = None
    time: Optional[ApproximateTime] = None
    time_zone: Optional[CodableValue] = None

    @model_validator(mode="before")
    @classmethod
    def from_python_datetime(cls, data: Any) -> Any:
        if isinstance(data, datetime.datetime):
            return {"date": data.date(), "time": data.time()}
        if isinstance(data, datetime.date):
            return {"date": data}
        return data

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "date": codec.get_record(element, "date", HealthServiceDate),
            "time": codec.get_opt_record(element, "time", ApproximateTime),
            "time_zone": codec.get_opt_record(element, "tz", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "date", self.date)
        codec.write_opt(writer, "time", self.time)
        codec.write_opt(writer, "tz", self.time_zone)

    def to_datetime(self) -> datetime.datetime:
        """Combine date and time; unknown time parts are taken as zero."""
        time = self.time or ApproximateTime(hour=0, minute=0)
        return datetime.datetime(
            self.date.year,
            self.date.month,
            self.date.day,
            time.hour,
            time.minute,
            time.second or 0,
            (time.millisecond or 0) * 1000,
        )

    def __str__(self) -> str:
        result = str(self.date) if self.date else ""
        if self.time is not None:
            result = f"{result} {self.time}"
        if self.time_zone is not None:
            result = f"{result} {self.time_zone}"
        return result


class ApproximateDate(ItemData):
    """A date where the month and day may be unknown."""

    REQUIRED_FIELDS = ("year",)

    year: Optional[StrictInt] = None
    month: Optional[StrictInt] = None
    day: Optional[StrictInt] = None

    @model_validator(mode="before")
    @classmethod
    def from_python_date(cls, data: Any) -> Any:
        if isinstance(data, datetime.date):
            return {"year": data.year, "month": data.month, "day": data.day}
        return data

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "year", 1000, 9999)
        return v

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "month", 1, 12)
        return v

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "day", 1, 31)
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if(
            self.day is not None and self.month is None,
            "month",
            type(self).__name__,
            "ApproximateDate cannot be written: a day requires a month"
        )

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "year": codec.get_int(element, "y"),
            "month": codec.get_opt_int(element, "m"),
            "day": codec.get_opt_int(element, "d"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_int(writer, "y", self.year)
        codec.write_opt_int(writer, "m", self.month)
        codec.write_opt_int(writer, "d", self.day)

    def __str__(self) -> str:
        result = f"{self.year:04d}" if self.year is not None else ""
        if self.month is not None:
            result += f"-{self.month:02d}"
            if self.day is not None:
                result += f"-{self.day:02d}"
        return result


class ApproximateDateTime(ItemData):
    """Either a structured approximate date/time or a free-text description.

    The wire form is ``<structured>`` (date, time, tz) when a date is set,
    otherwise ``<descriptive>``.
    """

    date: Optional[ApproximateDate] = None
    time: Optional[ApproximateTime] = None
    time_zone: Optional[CodableValue] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def from_python_datetime(cls, data: Any) -> Any:
        if isinstance(data, datetime.datetime):
            return {"date": data.date(), "time": data.time()}
        if isinstance(data, datetime.date):
            return {"date": data}
        return data

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "description")
        return v

    def check_serializable(self) -> None:
        validator.throw_serialization_if(
            self.date is None and self.description is None,
            "date",
            type(self).__name__,
            "ApproximateDateTime cannot be written: set either a structured date or a description"
        )

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        structured = codec.select_single(element, "structured")
        if structured is not None:
            return {
                "date": codec.get_record(structured, "date", ApproximateDate),
                "time": codec.get_opt_record(structured, "time", ApproximateTime),
                "time_zone": codec.get_opt_record(structured, "tz", CodableValue),
            }
        return {"description": codec.get_text(element, "descriptive")}

    def write_fields(self, writer: Any) -> None:
        if self.date is not None:
            writer.write_start_element("structured")
            codec.write_opt(writer, "date", self.date)
            codec.write_opt(writer, "time", self.time)
            codec.write_opt(writer, "tz", self.time_zone)
            writer.write_end_element()
        else:
            codec.write_opt_text(writer, "descriptive", self.description)

    def __str__(self) -> str:
        if self.date is None:
            return self.description or ""
        result = str(self.date)
        if self.time is not None:
            result = f"{result} {self.time}"
        if self.time_zone is not None:
            result = f"{result} {self.time_zone}"
        return result


# ============================================================================
# Measurements
# ============================================================================

class DisplayValue(ItemData):
    """A value as the user entered or saw it, with its display units.

    Serialized as ``<node units="..." units-code="..." text="...">5.5</node>``.
    """

    REQUIRED_FIELDS = ("value", "units")

    value: Optional[StrictFloat] = None
    units: Optional[str] = None
    units_code: Optional[str] = None
    text: Optional[str] = None

    @field_validator("units", "text")
    @classmethod
    def validate_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "value": codec.parse_double(element.text, element.tag),
            "units": codec.get_attribute(element, "units"),
            "units_code": codec.get_opt_attribute(element, "units-code"),
            "text": codec.get_opt_attribute(element, "text"),
        }

    def write_fields(self, writer: Any) -> None:
        writer.write_attribute_string("units", self.units)
        codec.write_opt_attribute(writer, "units-code", self.units_code)
        codec.write_opt_attribute(writer, "text", self.text)
        writer.write_value(codec.format_double(self.value))

    def __str__(self) -> str:
        if self.text:
            return self.text
        return f"{codec.format_double(self.value)} {self.units}" if self.value is not None else ""


class StructuredMeasurement(ItemData):
    """A numeric value with coded units."""

    REQUIRED_FIELDS = ("value", "units")

    value: Optional[StrictFloat] = None
    units: Optional[CodableValue] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "value": codec.get_double(element, "value"),
            "units": codec.get_record(element, "units", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_double(writer, "value", self.value)
        codec.write_opt(writer, "units", self.units)

    def __str__(self) -> str:
        return f"{codec.format_double(self.value)} {self.units}"


class GeneralMeasurement(ItemData):
    """A measurement as displayed, plus any structured interpretations."""

    REQUIRED_FIELDS = ("display",)

    display: Optional[str] = None
    structured: List[StructuredMeasurement] = Field(default_factory=list)

    @field_validator("display")
    @classmethod
    def validate_display(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "display")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "display": codec.get_text(element, "display"),
            "structured": codec.get_repeated(element, "structured", StructuredMeasurement),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "display", self.display)
        codec.write_repeated(writer, "structured", self.structured)

    def __str__(self) -> str:
        return self.display or ""
