"""Precondition checks shared by every item type.

Setters (pydantic field validators) call the ``throw_if_*`` checks, which raise
ValidationFault. Writers call the ``throw_serialization_*`` checks, which raise
SerializationFault. The module holds no state.
"""

import math
from typing import Any, Optional, Sized

from health_itemtypes.domain.ports import SerializationFault, ValidationFault


def throw_if_argument_none(value: Any, field: str) -> None:
    if value is None:
        raise ValidationFault(f"'{field}' is mandatory and cannot be None", field=field)


def throw_if_string_none_or_empty(value: Optional[str], field: str) -> None:
    if value is None or value == "":
        raise ValidationFault(f"'{field}' cannot be None or empty", field=field)


def throw_if_string_is_whitespace(value: Optional[str], field: str) -> None:
    """Reject a non-empty string made only of whitespace. None and "" pass."""
    if value and not value.strip():
        raise ValidationFault(f"'{field}' cannot be whitespace only", field=field)


def throw_if_string_is_empty_or_whitespace(value: Optional[str], field: str) -> None:
    if value is not None and not value.strip():
        raise ValidationFault(f"'{field}' cannot be empty or whitespace only", field=field)


def throw_argument_out_of_range_if(condition: bool, field: str, message: str) -> None:
    if condition:
        raise ValidationFault(message, field=field)


def throw_if_out_of_range(
    value: Optional[float],
    field: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None
) -> None:
    """Check that a numeric value lies in the closed range [minimum, maximum].

    NaN lies outside every bounded range.

    Parameters:
        value: Value to check (None is left to the presence checks)
        field: Field name reported in the fault
        minimum: Inclusive lower bound, or None for unbounded
        maximum: Inclusive upper bound, or None for unbounded

    Raises:
        ValidationFault: If the value falls outside the range
    """
    if value is None:
        return
    bounded = minimum is not None or maximum is not None
    if (
        (bounded and math.isnan(value))
        or (minimum is not None and value < minimum)
        or (maximum is not None and value > maximum)
    ):
        low = "-inf" if minimum is None else minimum
        high = "+inf" if maximum is None else maximum
        raise ValidationFault(
            f"'{field}' must be in the range [{low}, {high}], got {value}",
            field=field
        )


def throw_serialization_if_none(value: Any, field: str, record_type: str) -> None:
    if value is None:
        raise SerializationFault(
            f"{record_type} cannot be written: mandatory field '{field}' is not set",
            field=field,
            record_type=record_type
        )


def throw_serialization_if(condition: bool, field: str, record_type: str, message: str) -> None:
    if condition:
        raise SerializationFault(message, field=field, record_type=record_type)


def throw_serialization_if_empty(items: Optional[Sized], field: str, record_type: str) -> None:
    if not items:
        raise SerializationFault(
            f"{record_type} cannot be written: '{field}' requires at least one entry",
            field=field,
            record_type=record_type
        )
