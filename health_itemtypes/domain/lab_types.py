"""Laboratory result values, ranges and result groups."""

from typing import Any, Dict, List, Optional

from pydantic import Field, StrictFloat, field_validator

from health_itemtypes.domain import codec, validator
from health_itemtypes.domain.base_types import ApproximateDateTime, CodableValue, GeneralMeasurement
from health_itemtypes.domain.contact_types import Organization
from health_itemtypes.domain.item_base import ItemData


class TestResultRangeValue(ItemData):
    """Numeric bounds of a reference range; either bound may be open."""

    minimum_range: Optional[StrictFloat] = None
    maximum_range: Optional[StrictFloat] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "minimum_range": codec.get_opt_double(element, "minimum-range"),
            "maximum_range": codec.get_opt_double(element, "maximum-range"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_double(writer, "minimum-range", self.minimum_range)
        codec.write_opt_double(writer, "maximum-range", self.maximum_range)

    def __str__(self) -> str:
        low = "" if self.minimum_range is None else codec.format_double(self.minimum_range)
        high = "" if self.maximum_range is None else codec.format_double(self.maximum_range)
        return f"{low} - {high}"


class TestResultRange(ItemData):
    """A reference range such as "normal" or "therapeutic"."""

    REQUIRED_FIELDS = ("range_type", "text")

    range_type: Optional[CodableValue] = None
    text: Optional[CodableValue] = None
    value: Optional[TestResultRangeValue] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "range_type": codec.get_record(element, "type", CodableValue),
            "text": codec.get_record(element, "text", CodableValue),
            "value": codec.get_opt_record(element, "value", TestResultRangeValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "type", self.range_type)
        codec.write_opt(writer, "text", self.text)
        codec.write_opt(writer, "value", self.value)

    def __str__(self) -> str:
        return f"{self.range_type}: {self.text}"


class LabTestResultValue(ItemData):
    """A measured value with its reference ranges and flags."""

    REQUIRED_FIELDS = ("measurement",)

    measurement: Optional[GeneralMeasurement] = None
    ranges: List[TestResultRange] = Field(default_factory=list)
    flags: List[CodableValue] = Field(default_factory=list)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "measurement": codec.get_record(element, "measurement", GeneralMeasurement),
            "ranges": codec.get_repeated(element, "ranges", TestResultRange),
            "flags": codec.get_repeated(element, "flag", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "measurement", self.measurement)
        codec.write_repeated(writer, "ranges", self.ranges)
        codec.write_repeated(writer, "flag", self.flags)

    def __str__(self) -> str:
        return str(self.measurement) if self.measurement else ""


class LabTestResultDetails(ItemData):
    """A single lab test result; every field is optional."""

    when: Optional[ApproximateDateTime] = None
    name: Optional[str] = None
    substance: Optional[CodableValue] = None
    collection_method: Optional[CodableValue] = None
    clinical_code: Optional[CodableValue] = None
    value: Optional[LabTestResultValue] = None
    status: Optional[CodableValue] = None
    note: Optional[str] = None

    @field_validator("name", "note")
    @classmethod
    def validate_text(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_opt_record(element, "when", ApproximateDateTime),
            "name": codec.get_opt_text(element, "name"),
            "substance": codec.get_opt_record(element, "substance", CodableValue),
            "collection_method": codec.get_opt_record(element, "collection-method", CodableValue),
            "clinical_code": codec.get_opt_record(element, "clinical-code", CodableValue),
            "value": codec.get_opt_record(element, "value", LabTestResultValue),
            "status": codec.get_opt_record(element, "status", CodableValue),
            "note": codec.get_opt_text(element, "note"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_text(writer, "name", self.name)
        codec.write_opt(writer, "substance", self.substance)
        codec.write_opt(writer, "collection-method", self.collection_method)
        codec.write_opt(writer, "clinical-code", self.clinical_code)
        codec.write_opt(writer, "value", self.value)
        codec.write_opt(writer, "status", self.status)
        codec.write_opt_text(writer, "note", self.note)

    def __str__(self) -> str:
        parts = [str(part) for part in (self.name, self.value) if part is not None]
        return " ".join(parts)


class LabTestResultGroup(ItemData):
    """A named group of results, possibly nested in further sub-groups."""

    REQUIRED_FIELDS = ("group_name",)

    group_name: Optional[CodableValue] = None
    laboratory_name: Optional[Organization] = None
    status: Optional[CodableValue] = None
    sub_groups: List["LabTestResultGroup"] = Field(default_factory=list)
    results: List[LabTestResultDetails] = Field(default_factory=list)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "group_name": codec.get_record(element, "group-name", CodableValue),
            "laboratory_name": codec.get_opt_record(element, "laboratory-name", Organization),
            "status": codec.get_opt_record(element, "status", CodableValue),
            "sub_groups": codec.get_repeated(element, "sub-groups", LabTestResultGroup),
            "results": codec.get_repeated(element, "results", LabTestResultDetails),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "group-name", self.group_name)
        codec.write_opt(writer, "laboratory-name", self.laboratory_name)
        codec.write_opt(writer, "status", self.status)
        codec.write_repeated(writer, "sub-groups", self.sub_groups)
        codec.write_repeated(writer, "results", self.results)

    def __str__(self) -> str:
        return str(self.group_name) if self.group_name else ""
