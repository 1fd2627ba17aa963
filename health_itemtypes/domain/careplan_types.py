"""Care plan building blocks: tasks, goals, goal ranges and recurrences."""

import uuid
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, StrictInt, field_validator

from health_itemtypes.domain import codec, resources, validator
from health_itemtypes.domain.base_types import ApproximateDateTime, CodableValue, GeneralMeasurement
from health_itemtypes.domain.item_base import ItemData


def _date_order_key(value: Optional[ApproximateDateTime]) -> Optional[Tuple[int, int, int]]:
    if value is None or value.date is None:
        return None
    date = value.date
    return (date.year, date.month or 0, date.day or 0)


def _check_date_order(start: Optional[ApproximateDateTime], end: Optional[ApproximateDateTime]) -> None:
    start_key = _date_order_key(start)
    end_key = _date_order_key(end)
    validator.throw_argument_out_of_range_if(
        start_key is not None and end_key is not None and start_key > end_key,
        "start_date",
        "start_date must not be after end_date"
    )


class AssociatedTypeInfo(ItemData):
    """Points a task or goal at the item type (and value) that tracks it."""

    REQUIRED_FIELDS = ("thing_type_version_id",)

    thing_type_version_id: Optional[uuid.UUID] = None
    thing_type_value_xpath: Optional[str] = None
    thing_type_display_xpath: Optional[str] = None

    @field_validator("thing_type_version_id")
    @classmethod
    def validate_version_id(cls, v: Optional[uuid.UUID]) -> Optional[uuid.UUID]:
        validator.throw_argument_out_of_range_if(
            v is not None and v.int == 0,
            "thing_type_version_id",
            "thing_type_version_id cannot be the empty GUID"
        )
        return v

    @field_validator("thing_type_value_xpath", "thing_type_display_xpath")
    @classmethod
    def validate_xpath(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "thing_type_version_id": codec.get_uuid(element, "thing-type-version-id"),
            "thing_type_value_xpath": codec.get_opt_text(element, "thing-type-value-xpath"),
            "thing_type_display_xpath": codec.get_opt_text(element, "thing-type-display-xpath"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_uuid(writer, "thing-type-version-id", self.thing_type_version_id)
        codec.write_opt_text(writer, "thing-type-value-xpath", self.thing_type_value_xpath)
        codec.write_opt_text(writer, "thing-type-display-xpath", self.thing_type_display_xpath)

    def __str__(self) -> str:
        return str(self.thing_type_version_id or "")


class GoalRange(ItemData):
    """A named target range, bounded by general measurements."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[CodableValue] = None
    description: Optional[str] = None
    minimum: Optional[GeneralMeasurement] = None
    maximum: Optional[GeneralMeasurement] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "description")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "description": codec.get_opt_text(element, "description"),
            "minimum": codec.get_opt_record(element, "minimum", GeneralMeasurement),
            "maximum": codec.get_opt_record(element, "maximum", GeneralMeasurement),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt(writer, "minimum", self.minimum)
        codec.write_opt(writer, "maximum", self.maximum)

    def __str__(self) -> str:
        return resources.format_string(
            "GoalRangeToStringFormat",
            self.name,
            self.minimum if self.minimum is not None else "",
            self.maximum if self.maximum is not None else "",
        )


class GoalRecurrence(ItemData):
    """How often a goal should be met, e.g. 3 times per week."""

    REQUIRED_FIELDS = ("interval", "times_in_interval")

    interval: Optional[CodableValue] = None
    times_in_interval: Optional[StrictInt] = None

    @field_validator("times_in_interval")
    @classmethod
    def validate_times(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "times_in_interval", minimum=1)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "interval": codec.get_record(element, "interval", CodableValue),
            "times_in_interval": codec.get_int(element, "times-in-interval"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "interval", self.interval)
        codec.write_opt_int(writer, "times-in-interval", self.times_in_interval)

    def __str__(self) -> str:
        return f"{self.times_in_interval} / {self.interval}"


class CarePlanTaskRecurrence(ItemData):
    """Task recurrence as an iCalendar rule or as an interval count."""

    ical_recurrence: Optional[str] = None
    interval: Optional[CodableValue] = None
    times_in_interval: Optional[StrictInt] = None

    @field_validator("ical_recurrence")
    @classmethod
    def validate_ical(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "ical_recurrence")
        return v

    @field_validator("times_in_interval")
    @classmethod
    def validate_times(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "times_in_interval", minimum=1)
        return v

    def check_serializable(self) -> None:
        validator.throw_serialization_if(
            self.ical_recurrence is None and self.interval is None,
            "ical_recurrence",
            type(self).__name__,
            "CarePlanTaskRecurrence cannot be written: set an iCalendar rule or an interval"
        )

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "ical_recurrence": codec.get_opt_text(element, "ical-recurrence"),
            "interval": codec.get_opt_record(element, "interval", CodableValue),
            "times_in_interval": codec.get_opt_int(element, "times-in-interval"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "ical-recurrence", self.ical_recurrence)
        codec.write_opt(writer, "interval", self.interval)
        codec.write_opt_int(writer, "times-in-interval", self.times_in_interval)


class CarePlanTask(ItemData):
    """An activity the care plan asks the person to perform."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[CodableValue] = None
    description: Optional[str] = None
    start_date: Optional[ApproximateDateTime] = None
    end_date: Optional[ApproximateDateTime] = None
    target_completion_date: Optional[ApproximateDateTime] = None
    sequence_number: Optional[StrictInt] = None
    associated_type_info: Optional[AssociatedTypeInfo] = None
    recurrence: Optional[CarePlanTaskRecurrence] = None
    reference_id: Optional[str] = None

    @field_validator("description", "reference_id")
    @classmethod
    def validate_text(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "description": codec.get_opt_text(element, "description"),
            "start_date": codec.get_opt_record(element, "start-date", ApproximateDateTime),
            "end_date": codec.get_opt_record(element, "end-date", ApproximateDateTime),
            "target_completion_date": codec.get_opt_record(element, "target-completion-date", ApproximateDateTime),
            "sequence_number": codec.get_opt_int(element, "sequence-number"),
            "associated_type_info": codec.get_opt_record(element, "associated-type-info", AssociatedTypeInfo),
            "recurrence": codec.get_opt_record(element, "recurrence", CarePlanTaskRecurrence),
            "reference_id": codec.get_opt_text(element, "reference-id"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt(writer, "start-date", self.start_date)
        codec.write_opt(writer, "end-date", self.end_date)
        codec.write_opt(writer, "target-completion-date", self.target_completion_date)
        codec.write_opt_int(writer, "sequence-number", self.sequence_number)
        codec.write_opt(writer, "associated-type-info", self.associated_type_info)
        codec.write_opt(writer, "recurrence", self.recurrence)
        codec.write_opt_text(writer, "reference-id", self.reference_id)

    def __str__(self) -> str:
        return str(self.name) if self.name else ""


class CarePlanGoal(ItemData):
    """A measurable goal, optionally tied to an item type and target range.

    The start date may not be after the end date when both carry a
    structured date.
    """

    REQUIRED_FIELDS = ("name",)

    name: Optional[CodableValue] = None
    description: Optional[str] = None
    start_date: Optional[ApproximateDateTime] = None
    end_date: Optional[ApproximateDateTime] = None
    target_completion_date: Optional[ApproximateDateTime] = None
    associated_type_info: Optional[AssociatedTypeInfo] = None
    target_range: Optional[GoalRange] = None
    goal_additional_ranges: List[GoalRange] = Field(default_factory=list)
    recurrence: Optional[GoalRecurrence] = None
    reference_id: Optional[str] = None

    @field_validator("description", "reference_id")
    @classmethod
    def validate_text(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_date_order(cls, v: Optional[ApproximateDateTime], info) -> Optional[ApproximateDateTime]:
        # info.data only holds fields validated so far (all of them on assignment)
        if info.field_name == "start_date":
            _check_date_order(v, info.data.get("end_date"))
        else:
            _check_date_order(info.data.get("start_date"), v)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "description": codec.get_opt_text(element, "description"),
            "start_date": codec.get_opt_record(element, "start-date", ApproximateDateTime),
            "end_date": codec.get_opt_record(element, "end-date", ApproximateDateTime),
            "target_completion_date": codec.get_opt_record(element, "target-completion-date", ApproximateDateTime),
            "associated_type_info": codec.get_opt_record(element, "associated-type-info", AssociatedTypeInfo),
            "target_range": codec.get_opt_record(element, "target-range", GoalRange),
            "goal_additional_ranges": codec.get_repeated(element, "goal-additional-ranges", GoalRange),
            "recurrence": codec.get_opt_record(element, "recurrence", GoalRecurrence),
            "reference_id": codec.get_opt_text(element, "reference-id"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt(writer, "start-date", self.start_date)
        codec.write_opt(writer, "end-date", self.end_date)
        codec.write_opt(writer, "target-completion-date", self.target_completion_date)
        codec.write_opt(writer, "associated-type-info", self.associated_type_info)
        codec.write_opt(writer, "target-range", self.target_range)
        codec.write_repeated(writer, "goal-additional-ranges", self.goal_additional_ranges)
        codec.write_opt(writer, "recurrence", self.recurrence)
        codec.write_opt_text(writer, "reference-id", self.reference_id)

    def __str__(self) -> str:
        return str(self.name) if self.name else ""


class CarePlanGoalGroup(ItemData):
    """A named group of goals; at least one goal is required to write it."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[CodableValue] = None
    description: Optional[str] = None
    goals: List[CarePlanGoal] = Field(default_factory=list)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "description")
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if_empty(self.goals, "goals", type(self).__name__)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", CodableValue),
            "description": codec.get_opt_text(element, "description"),
            "goals": codec.get_collection(element, "goals", "goal", CarePlanGoal),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt_text(writer, "description", self.description)
        codec.write_collection(writer, "goals", "goal", self.goals)

    def __str__(self) -> str:
        return str(self.name) if self.name else ""
