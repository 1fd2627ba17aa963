"""Nested clinical values used by the top-level item types."""

from typing import Any, Dict, List, Optional

from pydantic import Field, StrictFloat, StrictInt, field_validator

from health_itemtypes.domain import codec, resources, validator
from health_itemtypes.domain.base_types import (
    ApproximateDate,
    ApproximateTime,
    CodableValue,
    DisplayValue,
)
from health_itemtypes.domain.enums import DayOfWeek
from health_itemtypes.domain.item_base import ItemData


class Assessment(ItemData):
    """One named result inside a health assessment."""

    REQUIRED_FIELDS = ("name", "value")

    name: Optional[CodableValue] = None
    value: Optional[CodableValue] = None
    group: Optional[CodableValue] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "value": codec.get_record(element, "value", CodableValue),
            "group": codec.get_opt_record(element, "group", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt(writer, "value", self.value)
        codec.write_opt(writer, "group", self.group)

    def __str__(self) -> str:
        if self.name is not None and self.value is not None:
            return resources.format_string("AssessmentToStringFormat", self.name, self.value)
        if self.name is not None:
            return str(self.name)
        if self.value is not None:
            return str(self.value)
        return ""


class Alert(ItemData):
    """A reminder that fires on the given days at the given times.

    Days are 0-based in memory (Sunday = 0) and written as 1..7.
    """

    days_of_week: List[DayOfWeek] = Field(default_factory=list)
    times: List[ApproximateTime] = Field(default_factory=list)

    def check_serializable(self) -> None:
        validator.throw_serialization_if_empty(self.days_of_week, "days_of_week", type(self).__name__)
        validator.throw_serialization_if_empty(self.times, "times", type(self).__name__)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "days_of_week": codec.get_repeated_day_of_week(element, "dow"),
            "times": codec.get_repeated(element, "time", ApproximateTime),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_repeated_day_of_week(writer, "dow", self.days_of_week)
        codec.write_repeated(writer, "time", self.times)

    def __str__(self) -> str:
        days = ""
        for index, day in enumerate(self.days_of_week):
            day_name = resources.get_string(day.name.capitalize())
            days += day_name if index == 0 else resources.format_string("ListFormat", day_name)

        times = ""
        for index, time in enumerate(self.times):
            if index == 0:
                times += resources.format_string("AlertTimeFormat", time)
            else:
                times += resources.format_string("ListFormat", time)

        return resources.format_string("AlertToStringFormat", days, times)


class Occurrence(ItemData):
    """A time of day and how long the event lasted."""

    REQUIRED_FIELDS = ("when", "minutes")

    when: Optional[ApproximateTime] = None
    minutes: Optional[StrictInt] = None

    @field_validator("minutes")
    @classmethod
    def validate_minutes(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "minutes", minimum=0)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", ApproximateTime),
            "minutes": codec.get_int(element, "minutes"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_int(writer, "minutes", self.minutes)

    def __str__(self) -> str:
        return resources.format_string("OccurrenceToStringFormat", self.when, self.minutes)


class HeartRateZone(ItemData):
    """A heart rate range, bounded either absolutely (bpm) or relative to max.

    Each bound is written as ``absolute-heartrate`` when the absolute value is
    set, otherwise as ``percent-max-heartrate`` (a fraction of max heart rate).
    """

    name: Optional[str] = None
    lower_absolute: Optional[StrictInt] = None
    lower_percent: Optional[StrictFloat] = None
    upper_absolute: Optional[StrictInt] = None
    upper_percent: Optional[StrictFloat] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_whitespace(v, "name")
        return v

    @field_validator("lower_absolute", "upper_absolute")
    @classmethod
    def validate_absolute(cls, v: Optional[int], info) -> Optional[int]:
        validator.throw_if_out_of_range(v, info.field_name, minimum=0)
        return v

    @field_validator("lower_percent", "upper_percent")
    @classmethod
    def validate_percent(cls, v: Optional[float], info) -> Optional[float]:
        validator.throw_if_out_of_range(v, info.field_name, 0.0, 1.0)
        return v

    def check_serializable(self) -> None:
        record_type = type(self).__name__
        validator.throw_serialization_if(
            self.lower_absolute is None and self.lower_percent is None,
            "lower_absolute",
            record_type,
            "HeartRateZone cannot be written: the lower bound is not set"
        )
        validator.throw_serialization_if(
            self.upper_absolute is None and self.upper_percent is None,
            "upper_absolute",
            record_type,
            "HeartRateZone cannot be written: the upper bound is not set"
        )

    @staticmethod
    def _read_bound(element: Any, name: str) -> Dict[str, Any]:
        bound = codec.select_single(element, name)
        if bound is None:
            return {"absolute": None, "percent": None}
        return {
            "absolute": codec.get_opt_int(bound, "absolute-heartrate"),
            "percent": codec.get_opt_double(bound, "percent-max-heartrate"),
        }

    @staticmethod
    def _write_bound(writer: Any, name: str, absolute: Optional[int], percent: Optional[float]) -> None:
        writer.write_start_element(name)
        if absolute is not None:
            codec.write_opt_int(writer, "absolute-heartrate", absolute)
        else:
            codec.write_opt_double(writer, "percent-max-heartrate", percent)
        writer.write_end_element()

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        lower = cls._read_bound(element, "lower-bound")
        upper = cls._read_bound(element, "upper-bound")
        return {
            "name": codec.get_opt_attribute(element, "name"),
            "lower_absolute": lower["absolute"],
            "lower_percent": lower["percent"],
            "upper_absolute": upper["absolute"],
            "upper_percent": upper["percent"],
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_attribute(writer, "name", self.name)
        self._write_bound(writer, "lower-bound", self.lower_absolute, self.lower_percent)
        self._write_bound(writer, "upper-bound", self.upper_absolute, self.upper_percent)

    def __str__(self) -> str:
        if self.lower_absolute is not None and self.upper_absolute is not None:
            return resources.format_string(
                "HeartRateZoneToStringFormatAbsolute", self.lower_absolute, self.upper_absolute
            )
        lower = codec.format_double((self.lower_percent or 0.0) * 100)
        upper = codec.format_double((self.upper_percent or 0.0) * 100)
        return resources.format_string("HeartRateZoneToStringFormatPercent", lower, upper)


class HeartRateZoneGroup(ItemData):
    """A named set of heart rate zones (for example a training plan)."""

    name: Optional[str] = None
    zones: List[HeartRateZone] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_whitespace(v, "name")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_opt_attribute(element, "name"),
            "zones": codec.get_repeated(element, "heartrate-zone", HeartRateZone),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_attribute(writer, "name", self.name)
        codec.write_repeated(writer, "heartrate-zone", self.zones)


class Language(ItemData):
    REQUIRED_FIELDS = ("language",)

    language: Optional[CodableValue] = None
    is_primary: Optional[bool] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "language": codec.get_record(element, "language", CodableValue),
            "is_primary": codec.get_opt_bool(element, "is-primary"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "language", self.language)
        codec.write_opt_bool(writer, "is-primary", self.is_primary)

    def __str__(self) -> str:
        return str(self.language) if self.language else ""


class ConditionEntry(ItemData):
    """A condition with its onset, resolution and severity."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[CodableValue] = None
    onset_date: Optional[ApproximateDate] = None
    resolution_date: Optional[ApproximateDate] = None
    resolution: Optional[str] = None
    occurrence: Optional[CodableValue] = None
    severity: Optional[CodableValue] = None

    @field_validator("resolution")
    @classmethod
    def validate_resolution(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_whitespace(v, "resolution")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "onset_date": codec.get_opt_record(element, "onset-date", ApproximateDate),
            "resolution_date": codec.get_opt_record(element, "resolution-date", ApproximateDate),
            "resolution": codec.get_opt_text(element, "resolution"),
            "occurrence": codec.get_opt_record(element, "occurrence", CodableValue),
            "severity": codec.get_opt_record(element, "severity", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt(writer, "onset-date", self.onset_date)
        codec.write_opt(writer, "resolution-date", self.resolution_date)
        codec.write_opt_text(writer, "resolution", self.resolution)
        codec.write_opt(writer, "occurrence", self.occurrence)
        codec.write_opt(writer, "severity", self.severity)

    def __str__(self) -> str:
        return str(self.name) if self.name else ""


class BloodGlucoseMeasurement(ItemData):
    """A glucose concentration in mmol/L with its optional display form."""

    REQUIRED_FIELDS = ("mmol_per_l",)

    mmol_per_l: Optional[StrictFloat] = None
    display: Optional[DisplayValue] = None

    @field_validator("mmol_per_l")
    @classmethod
    def validate_mmol_per_l(cls, v: Optional[float]) -> Optional[float]:
        validator.throw_if_out_of_range(v, "mmol_per_l", minimum=0.0)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "mmol_per_l": codec.get_double(element, "mmolPerL"),
            "display": codec.get_opt_record(element, "display", DisplayValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_double(writer, "mmolPerL", self.mmol_per_l)
        codec.write_opt(writer, "display", self.display)

    def __str__(self) -> str:
        if self.display is not None:
            return str(self.display)
        return resources.format_string("BloodGlucoseToStringFormatMmolPerL", codec.format_double(self.mmol_per_l))
