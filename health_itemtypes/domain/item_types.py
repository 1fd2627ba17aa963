"""Item Type Catalog.

Top-level health record item types. Each class owns a fixed root element name
and platform type id and is registered with the item type registry.

Security Impact:
    - Clinical values are range checked on every assignment
    - Unrecognized coded values are kept verbatim rather than guessed

Architecture:
    - Fields are read and written in schema order through the codec
    - Enumerations follow a per-field strictness policy: demographic and
      mood scales are lenient (unknown text is preserved and re-emitted),
      the sleep journal wake state is strict (unknown values are a ParseFault)
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import Field, StrictFloat, StrictInt, field_validator

from health_itemtypes.domain import codec, resources, validator
from health_itemtypes.domain.base_types import (
    ApproximateDate,
    ApproximateDateTime,
    ApproximateTime,
    CodableValue,
    HealthServiceDateTime,
)
from health_itemtypes.domain.careplan_types import CarePlanGoalGroup, CarePlanTask
from health_itemtypes.domain.clinical_types import (
    Assessment,
    BloodGlucoseMeasurement,
    ConditionEntry,
    HeartRateZoneGroup,
    Language,
    Occurrence,
)
from health_itemtypes.domain.contact_types import Organization, PersonItem
from health_itemtypes.domain.enums import (
    DayOfWeek,
    Gender,
    Mood,
    Normalcy,
    RelativeRating,
    WakeState,
    Wellbeing,
)
from health_itemtypes.domain.item_base import ItemType
from health_itemtypes.domain.lab_types import LabTestResultGroup
from health_itemtypes.domain.ports import ParseFault
from health_itemtypes.domain.registry import register_item_type


@register_item_type
class BloodOxygenSaturation(ItemType):
    """Percentage of hemoglobin saturated with oxygen, stored as a fraction.

    Parameters:
        when: Date and time of the measurement
        value: Saturation as a fraction in [0.0, 1.0] (0.97 means 97%)
        measurement_method: How the value was measured (e.g. pulse oximetry)
        measurement_flags: Conditions that affect the measurement
    """

    ROOT_ELEMENT = "blood-oxygen-saturation"
    TYPE_ID = uuid.UUID("3a54f95f-03d8-4f62-815f-f691fc94a500")
    REQUIRED_FIELDS = ("when", "value")

    when: Optional[HealthServiceDateTime] = Field(None, description="When the measurement was taken")
    value: Optional[StrictFloat] = Field(None, description="Saturation fraction in [0.0, 1.0]")
    measurement_method: Optional[CodableValue] = Field(None, description="Measurement method")
    measurement_flags: Optional[CodableValue] = Field(None, description="Measurement flags")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: Optional[float]) -> Optional[float]:
        validator.throw_if_out_of_range(v, "value", 0.0, 1.0)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "value": codec.get_double(element, "value"),
            "measurement_method": codec.get_opt_record(element, "measurement-method", CodableValue),
            "measurement_flags": codec.get_opt_record(element, "measurement-flags", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_double(writer, "value", self.value)
        codec.write_opt(writer, "measurement-method", self.measurement_method)
        codec.write_opt(writer, "measurement-flags", self.measurement_flags)

    def __str__(self) -> str:
        if self.value is None:
            return ""
        return resources.format_string("Percent", format(self.value * 100, "g"))


@register_item_type
class AllergicEpisode(ItemType):
    """An occurrence of an allergic reaction."""

    ROOT_ELEMENT = "allergic-episode"
    TYPE_ID = uuid.UUID("d65ad514-c492-4b59-bd05-f3f6cb43ceb3")
    REQUIRED_FIELDS = ("when", "name")

    when: Optional[HealthServiceDateTime] = Field(None, description="When the episode occurred")
    name: Optional[CodableValue] = Field(None, description="Name of the allergy")
    reaction: Optional[CodableValue] = Field(None, description="Reaction observed")
    treatment: Optional[CodableValue] = Field(None, description="Treatment given")

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "name": codec.get_record(element, "name", CodableValue),
            "reaction": codec.get_opt_record(element, "reaction", CodableValue),
            "treatment": codec.get_opt_record(element, "treatment", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt(writer, "name", self.name)
        codec.write_opt(writer, "reaction", self.reaction)
        codec.write_opt(writer, "treatment", self.treatment)

    def __str__(self) -> str:
        return self.name.text if self.name else ""


@register_item_type
class HealthAssessment(ItemType):
    """Results of a health assessment (questionnaire, screening, ...).

    At least one result is required to write the assessment.
    """

    ROOT_ELEMENT = "health-assessment"
    TYPE_ID = uuid.UUID("58fd8ac4-6c47-41a3-94b2-478401f0e26c")
    REQUIRED_FIELDS = ("when", "name", "category")

    when: Optional[HealthServiceDateTime] = None
    name: Optional[str] = None
    category: Optional[CodableValue] = None
    results: List[Assessment] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "name")
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if_empty(self.results, "results", type(self).__name__)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "name": codec.get_text(element, "name"),
            "category": codec.get_record(element, "category", CodableValue),
            "results": codec.get_repeated(element, "result", Assessment),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_text(writer, "name", self.name)
        codec.write_opt(writer, "category", self.category)
        codec.write_repeated(writer, "result", self.results)

    def __str__(self) -> str:
        return self.name or ""


@register_item_type
class AerobicProfile(ItemType):
    """A person's aerobic capabilities and heart rate training zones."""

    ROOT_ELEMENT = "aerobic-profile"
    TYPE_ID = uuid.UUID("7b2ea78c-4b78-4f75-a6a7-5396fe38b09a")
    REQUIRED_FIELDS = ("when",)

    when: Optional[HealthServiceDateTime] = None
    max_heart_rate: Optional[StrictInt] = None
    resting_heart_rate: Optional[StrictInt] = None
    anaerobic_threshold: Optional[StrictInt] = None
    vo2_max_absolute: Optional[StrictFloat] = Field(None, description="VO2 max in mL/min")
    vo2_max_relative: Optional[StrictFloat] = Field(None, description="VO2 max in mL/kg/min")
    heart_rate_zone_groups: List[HeartRateZoneGroup] = Field(default_factory=list)

    @field_validator(
        "max_heart_rate",
        "resting_heart_rate",
        "anaerobic_threshold",
        "vo2_max_absolute",
        "vo2_max_relative",
    )
    @classmethod
    def validate_non_negative(cls, v: Optional[float], info) -> Optional[float]:
        validator.throw_if_out_of_range(v, info.field_name, minimum=0)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        vo2_max = codec.select_single(element, "VO2-max")
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "max_heart_rate": codec.get_opt_int(element, "max-heartrate"),
            "resting_heart_rate": codec.get_opt_int(element, "resting-heartrate"),
            "anaerobic_threshold": codec.get_opt_int(element, "anaerobic-threshold"),
            "vo2_max_absolute": None if vo2_max is None else codec.get_opt_double(vo2_max, "absolute"),
            "vo2_max_relative": None if vo2_max is None else codec.get_opt_double(vo2_max, "relative"),
            "heart_rate_zone_groups": codec.get_repeated(element, "heartrate-zone-group", HeartRateZoneGroup),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_int(writer, "max-heartrate", self.max_heart_rate)
        codec.write_opt_int(writer, "resting-heartrate", self.resting_heart_rate)
        codec.write_opt_int(writer, "anaerobic-threshold", self.anaerobic_threshold)
        if self.vo2_max_absolute is not None or self.vo2_max_relative is not None:
            writer.write_start_element("VO2-max")
            codec.write_opt_double(writer, "absolute", self.vo2_max_absolute)
            codec.write_opt_double(writer, "relative", self.vo2_max_relative)
            writer.write_end_element()
        codec.write_repeated(writer, "heartrate-zone-group", self.heart_rate_zone_groups)

    def __str__(self) -> str:
        if self.max_heart_rate is not None:
            return resources.format_string("AerobicProfileToStringFormatMaxHR", self.max_heart_rate)
        return str(self.when) if self.when else ""


@register_item_type
class BasicV2(ItemType):
    """Basic demographic information.

    ``gender`` is lenient: wire values other than ``m``/``f`` decode to
    ``Gender.UNKNOWN`` and the original text is written back unchanged.
    """

    ROOT_ELEMENT = "basic"
    TYPE_ID = uuid.UUID("3b3e6b16-eb69-483c-8d7e-dfe116ae6092")

    gender: Optional[Gender] = None
    birth_year: Optional[StrictInt] = None
    country: Optional[CodableValue] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    state_or_province: Optional[CodableValue] = None
    first_day_of_week: Optional[DayOfWeek] = None
    languages: List[Language] = Field(default_factory=list)

    @field_validator("birth_year")
    @classmethod
    def validate_birth_year(cls, v: Optional[int]) -> Optional[int]:
        validator.throw_if_out_of_range(v, "birth_year", 1000, 3000)
        return v

    @field_validator("postal_code", "city")
    @classmethod
    def validate_text(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_whitespace(v, info.field_name)
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "gender": codec.get_opt_enum(element, "gender", Gender, Gender.UNKNOWN),
            "birth_year": codec.get_opt_int(element, "birthyear"),
            "country": codec.get_opt_record(element, "country", CodableValue),
            "postal_code": codec.get_opt_text(element, "postcode"),
            "city": codec.get_opt_text(element, "city"),
            "state_or_province": codec.get_opt_record(element, "state", CodableValue),
            "first_day_of_week": codec.get_opt_day_of_week(element, "firstdow"),
            "languages": codec.get_repeated(element, "language", Language),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_enum(writer, "gender", self.gender, Gender.UNKNOWN, self.unrecognized_text("gender"))
        codec.write_opt_int(writer, "birthyear", self.birth_year)
        codec.write_opt(writer, "country", self.country)
        codec.write_opt_text(writer, "postcode", self.postal_code)
        codec.write_opt_text(writer, "city", self.city)
        codec.write_opt(writer, "state", self.state_or_province)
        codec.write_opt_day_of_week(writer, "firstdow", self.first_day_of_week)
        codec.write_repeated(writer, "language", self.languages)

    def __str__(self) -> str:
        parts = [part for part in (self.city, str(self.country) if self.country else None) if part]
        return resources.get_string("ListSeparator").join(parts)


@register_item_type
class Emotion(ItemType):
    """A snapshot of mood, stress and wellbeing on 1-5 scales.

    All three scales are lenient: values outside 1-5 decode to the scale's
    NONE member and are written back unchanged.
    """

    ROOT_ELEMENT = "emotion"
    TYPE_ID = uuid.UUID("4b7971d6-e427-427d-bf2c-2fbcf76606b3")
    REQUIRED_FIELDS = ("when",)

    when: Optional[HealthServiceDateTime] = None
    mood: Optional[Mood] = None
    stress: Optional[RelativeRating] = None
    wellbeing: Optional[Wellbeing] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "mood": codec.get_opt_enum(element, "mood", Mood, Mood.NONE),
            "stress": codec.get_opt_enum(element, "stress", RelativeRating, RelativeRating.NONE),
            "wellbeing": codec.get_opt_enum(element, "wellbeing", Wellbeing, Wellbeing.NONE),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt_enum(writer, "mood", self.mood, Mood.NONE, self.unrecognized_text("mood"))
        codec.write_opt_enum(
            writer, "stress", self.stress, RelativeRating.NONE, self.unrecognized_text("stress")
        )
        codec.write_opt_enum(
            writer, "wellbeing", self.wellbeing, Wellbeing.NONE, self.unrecognized_text("wellbeing")
        )

    def __str__(self) -> str:
        result = ""
        if self.mood not in (None, Mood.NONE):
            result += resources.format_string("EmotionToStringFormatMood", int(self.mood))
        if self.stress not in (None, RelativeRating.NONE):
            result += resources.format_string("EmotionToStringFormatStress", int(self.stress))
        if self.wellbeing not in (None, Wellbeing.NONE):
            result += resources.format_string("EmotionToStringFormatWellbeing", int(self.wellbeing))
        return result.strip()


@register_item_type
class SleepJournalAm(ItemType):
    """Morning sleep journal entry.

    ``wake_state`` is strict: a wire value outside 1-3 is a ParseFault, and
    ``WakeState.UNKNOWN`` cannot be written.
    """

    ROOT_ELEMENT = "sleep-am"
    TYPE_ID = uuid.UUID("11c52484-7f1a-11db-aeac-87d355d89593")
    REQUIRED_FIELDS = ("when", "bed_time", "wake_time", "sleep_minutes", "settling_minutes", "wake_state")

    when: Optional[HealthServiceDateTime] = None
    bed_time: Optional[ApproximateTime] = None
    wake_time: Optional[ApproximateTime] = None
    sleep_minutes: Optional[StrictInt] = None
    settling_minutes: Optional[StrictInt] = None
    awakenings: List[Occurrence] = Field(default_factory=list)
    medications: Optional[CodableValue] = None
    wake_state: Optional[WakeState] = None

    @field_validator("sleep_minutes", "settling_minutes")
    @classmethod
    def validate_minutes(cls, v: Optional[int], info) -> Optional[int]:
        validator.throw_if_out_of_range(v, info.field_name, minimum=0)
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if(
            self.wake_state is WakeState.UNKNOWN,
            "wake_state",
            type(self).__name__,
            "SleepJournalAm cannot be written: wake_state is UNKNOWN"
        )

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        values = {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "bed_time": codec.get_record(element, "bed-time", ApproximateTime),
            "wake_time": codec.get_record(element, "wake-time", ApproximateTime),
            "sleep_minutes": codec.get_int(element, "sleep-minutes"),
            "settling_minutes": codec.get_int(element, "settling-minutes"),
            "awakenings": codec.get_repeated(element, "awakening", Occurrence),
            "medications": codec.get_opt_record(element, "medications", CodableValue),
        }
        wake_state = codec.get_int(element, "wake-state")
        known = [member.value for member in WakeState if member is not WakeState.UNKNOWN]
        if wake_state not in known:
            raise ParseFault(f"Unrecognized wake state {wake_state}", element="wake-state")
        values["wake_state"] = WakeState(wake_state)
        return values

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt(writer, "bed-time", self.bed_time)
        codec.write_opt(writer, "wake-time", self.wake_time)
        codec.write_opt_int(writer, "sleep-minutes", self.sleep_minutes)
        codec.write_opt_int(writer, "settling-minutes", self.settling_minutes)
        codec.write_repeated(writer, "awakening", self.awakenings)
        codec.write_opt(writer, "medications", self.medications)
        codec.write_opt_int(writer, "wake-state", self.wake_state)

    def __str__(self) -> str:
        when = str(self.when) if self.when else ""
        if self.sleep_minutes:
            return resources.format_string("SleepJournalAmToStringFormat", when, self.sleep_minutes)
        return when


@register_item_type
class BloodGlucose(ItemType):
    """A blood glucose reading.

    ``normalcy`` is lenient: unrecognized values decode to
    ``Normalcy.UNKNOWN`` and are written back unchanged.
    """

    ROOT_ELEMENT = "blood-glucose"
    TYPE_ID = uuid.UUID("879e7c04-4e8a-4707-9ad3-b054df467ce4")
    REQUIRED_FIELDS = ("when", "value", "glucose_measurement_type")

    when: Optional[HealthServiceDateTime] = None
    value: Optional[BloodGlucoseMeasurement] = None
    glucose_measurement_type: Optional[CodableValue] = Field(None, description="Whole blood, plasma, ...")
    outside_operating_temperature: Optional[bool] = None
    is_control_test: Optional[bool] = None
    normalcy: Optional[Normalcy] = None
    measurement_context: Optional[CodableValue] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_record(element, "when", HealthServiceDateTime),
            "value": codec.get_record(element, "value", BloodGlucoseMeasurement),
            "glucose_measurement_type": codec.get_record(element, "glucose-measurement-type", CodableValue),
            "outside_operating_temperature": codec.get_opt_bool(element, "outside-operating-temp"),
            "is_control_test": codec.get_opt_bool(element, "is-control-test"),
            "normalcy": codec.get_opt_enum(element, "normalcy", Normalcy, Normalcy.UNKNOWN),
            "measurement_context": codec.get_opt_record(element, "measurement-context", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_opt(writer, "value", self.value)
        codec.write_opt(writer, "glucose-measurement-type", self.glucose_measurement_type)
        codec.write_opt_bool(writer, "outside-operating-temp", self.outside_operating_temperature)
        codec.write_opt_bool(writer, "is-control-test", self.is_control_test)
        codec.write_opt_enum(
            writer, "normalcy", self.normalcy, Normalcy.UNKNOWN, self.unrecognized_text("normalcy")
        )
        codec.write_opt(writer, "measurement-context", self.measurement_context)

    def __str__(self) -> str:
        return str(self.value) if self.value else ""


@register_item_type
class FamilyHistoryPerson(ItemType):
    """A relative whose conditions are recorded in the family history."""

    ROOT_ELEMENT = "family-history-person"
    TYPE_ID = uuid.UUID("cc23422c-4fba-4a23-b52a-c01d6cd53fdf")
    REQUIRED_FIELDS = ("relative_name",)

    relative_name: Optional[PersonItem] = None
    relationship: Optional[CodableValue] = None
    date_of_birth: Optional[ApproximateDate] = None
    date_of_death: Optional[ApproximateDate] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "relative_name": codec.get_record(element, "relative-name", PersonItem),
            "relationship": codec.get_opt_record(element, "relationship", CodableValue),
            "date_of_birth": codec.get_opt_record(element, "date-of-birth", ApproximateDate),
            "date_of_death": codec.get_opt_record(element, "date-of-death", ApproximateDate),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "relative-name", self.relative_name)
        codec.write_opt(writer, "relationship", self.relationship)
        codec.write_opt(writer, "date-of-birth", self.date_of_birth)
        codec.write_opt(writer, "date-of-death", self.date_of_death)

    def __str__(self) -> str:
        result = str(self.relative_name) if self.relative_name else ""
        if self.relationship is not None:
            result += resources.format_string("ListFormat", self.relationship)
        return result


@register_item_type
class FamilyHistoryCondition(ItemType):
    """A condition that occurs in the family."""

    ROOT_ELEMENT = "family-history-condition"
    TYPE_ID = uuid.UUID("6705549b-0e3d-474e-bfa7-8197ddd6786a")
    REQUIRED_FIELDS = ("condition",)

    condition: Optional[ConditionEntry] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {"condition": codec.get_record(element, "condition", ConditionEntry)}

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "condition", self.condition)

    def __str__(self) -> str:
        if self.condition is None:
            return ""
        return resources.format_string("FamilyHistoryConditionToStringFormat", self.condition)


@register_item_type
class LabTestResults(ItemType):
    """Results of one or more laboratory tests, organized in groups."""

    ROOT_ELEMENT = "lab-test-results"
    TYPE_ID = uuid.UUID("5800eab5-a8c2-482a-a4d6-f1db25ae08c3")

    when: Optional[ApproximateDateTime] = None
    lab_groups: List[LabTestResultGroup] = Field(default_factory=list)
    ordered_by: Optional[Organization] = None

    def check_serializable(self) -> None:
        validator.throw_serialization_if_empty(self.lab_groups, "lab_groups", type(self).__name__)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "when": codec.get_opt_record(element, "when", ApproximateDateTime),
            "lab_groups": codec.get_repeated(element, "lab-group", LabTestResultGroup),
            "ordered_by": codec.get_opt_record(element, "ordered-by", Organization),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "when", self.when)
        codec.write_repeated(writer, "lab-group", self.lab_groups)
        codec.write_opt(writer, "ordered-by", self.ordered_by)

    def __str__(self) -> str:
        return resources.format_string("LabTestResultsToStringFormat", len(self.lab_groups))


@register_item_type
class CarePlan(ItemType):
    """A care plan with its care team, tasks and goal groups."""

    ROOT_ELEMENT = "care-plan"
    TYPE_ID = uuid.UUID("415c95e0-0533-4d9c-ac73-91dc5031186c")
    REQUIRED_FIELDS = ("name",)

    name: Optional[str] = None
    start_date: Optional[ApproximateDateTime] = None
    end_date: Optional[ApproximateDateTime] = None
    status: Optional[CodableValue] = None
    care_team: List[PersonItem] = Field(default_factory=list)
    care_plan_manager: Optional[PersonItem] = None
    tasks: List[CarePlanTask] = Field(default_factory=list)
    goal_groups: List[CarePlanGoalGroup] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "name")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_text(element, "name"),
            "start_date": codec.get_opt_record(element, "start-date", ApproximateDateTime),
            "end_date": codec.get_opt_record(element, "end-date", ApproximateDateTime),
            "status": codec.get_opt_record(element, "status", CodableValue),
            "care_team": codec.get_collection(element, "care-team", "person", PersonItem),
            "care_plan_manager": codec.get_opt_record(element, "care-plan-manager", PersonItem),
            "tasks": codec.get_collection(element, "tasks", "task", CarePlanTask),
            "goal_groups": codec.get_collection(element, "goal-groups", "goal-group", CarePlanGoalGroup),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "name", self.name)
        codec.write_opt(writer, "start-date", self.start_date)
        codec.write_opt(writer, "end-date", self.end_date)
        codec.write_opt(writer, "status", self.status)
        codec.write_collection(writer, "care-team", "person", self.care_team)
        codec.write_opt(writer, "care-plan-manager", self.care_plan_manager)
        codec.write_collection(writer, "tasks", "task", self.tasks)
        codec.write_collection(writer, "goal-groups", "goal-group", self.goal_groups)

    def __str__(self) -> str:
        return self.name or ""
