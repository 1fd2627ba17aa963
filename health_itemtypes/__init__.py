"""Health record item types.

Typed data models for personal health record items, each able to read itself
from and write itself to its XML wire representation.

Importing the package registers every item type with the registry.
"""

from health_itemtypes.domain import item_types  # noqa: F401  (registers item types)
from health_itemtypes.domain.item_types import (
    AerobicProfile,
    AllergicEpisode,
    BasicV2,
    BloodGlucose,
    BloodOxygenSaturation,
    CarePlan,
    Emotion,
    FamilyHistoryCondition,
    FamilyHistoryPerson,
    HealthAssessment,
    LabTestResults,
    SleepJournalAm,
)
from health_itemtypes.domain.ports import (
    ItemTypeError,
    ParseFault,
    SerializationFault,
    ValidationFault,
)
from health_itemtypes.domain.registry import deserialize_item, get_item_type, registered_item_types

__version__ = "1.0.0"

__all__ = [
    "AerobicProfile",
    "AllergicEpisode",
    "BasicV2",
    "BloodGlucose",
    "BloodOxygenSaturation",
    "CarePlan",
    "Emotion",
    "FamilyHistoryCondition",
    "FamilyHistoryPerson",
    "HealthAssessment",
    "LabTestResults",
    "SleepJournalAm",
    "ItemTypeError",
    "ParseFault",
    "SerializationFault",
    "ValidationFault",
    "deserialize_item",
    "get_item_type",
    "registered_item_types",
]
