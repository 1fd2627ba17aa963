"""Domain layer for health record item types.

This module contains the record models, the optional-field XML codec and the
fault hierarchy. All domain models are pure Python with no external
dependencies beyond Pydantic.
"""

from .base_types import (
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
from .item_base import ItemData, ItemType
from .ports import ParseFault, SerializationFault, ValidationFault

__all__ = [
    "ApproximateDate",
    "ApproximateDateTime",
    "ApproximateTime",
    "CodableValue",
    "CodedValue",
    "DisplayValue",
    "GeneralMeasurement",
    "HealthServiceDate",
    "HealthServiceDateTime",
    "StructuredMeasurement",
    "ItemData",
    "ItemType",
    "ParseFault",
    "SerializationFault",
    "ValidationFault",
]
