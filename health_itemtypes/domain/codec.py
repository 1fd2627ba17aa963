"""Optional-Field XML Codec.

Every record reads and writes its fields through the routines in this module,
so the wire representation of presence, absence and repetition is defined
once:

    - An optional element that is missing decodes to None; an optional value
      that is None writes nothing (no empty placeholder elements)
    - A repeated element decodes to a list in document order; an empty list
      writes nothing
    - A present element whose text is not a valid lexical form for its scalar
      type is a ParseFault, never a silent default
    - Lenient enumerations decode unrecognized text to a designated unknown
      member and keep the original text for re-emission

Security Impact:
    - Numeric text is matched against XML Schema lexical forms before
      conversion, so Python-only spellings ("1_000", "infinity") are rejected
    - Only direct child lookups are performed on the container

Architecture:
    - Reads accept any ElementTree-compatible element (xml.etree, defusedxml,
      lxml): only ``find``, ``findall``, ``get``, ``tag`` and ``text`` are used
    - Writes target the writer protocol implemented by
      ``health_itemtypes.infrastructure.xml_io.XmlWriter``
"""

import logging
import math
import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Type, TypeVar

from health_itemtypes.domain.enums import DayOfWeek
from health_itemtypes.domain.ports import ParseFault

logger = logging.getLogger(__name__)

R = TypeVar('R')
E = TypeVar('E', bound=Enum)

_INT_PATTERN = re.compile(r'^[+-]?\d+$')
_DOUBLE_PATTERN = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')
_SPECIAL_DOUBLES = {"INF": math.inf, "+INF": math.inf, "-INF": -math.inf, "NaN": math.nan}
_BOOLEANS = {"true": True, "1": True, "false": False, "0": False}


class EnumValue(NamedTuple):
    """Outcome of a lenient enum parse.

    ``original_text`` is set only when the wire text matched no member and
    ``member`` is the fallback.
    """
    member: Enum
    original_text: Optional[str] = None


# ============================================================================
# Lookup
# ============================================================================

def select_single(container: Any, name: str) -> Optional[Any]:
    """Return the first child element called ``name`` or None."""
    return container.find(name)


def select_all(container: Any, name: str) -> List[Any]:
    """Return every child element called ``name`` in document order."""
    return list(container.findall(name))


# ============================================================================
# Scalar conversion (text -> value)
# ============================================================================

def parse_int(text: Optional[str], name: str) -> int:
    value = (text or "").strip()
    if not _INT_PATTERN.match(value):
        raise ParseFault(f"Element text '{text}' is not a valid integer", element=name)
    return int(value)


def parse_double(text: Optional[str], name: str) -> float:
    """Convert xsd:double text, including INF, -INF and NaN."""
    value = (text or "").strip()
    if value in _SPECIAL_DOUBLES:
        return _SPECIAL_DOUBLES[value]
    if not _DOUBLE_PATTERN.match(value):
        raise ParseFault(f"Element text '{text}' is not a valid double", element=name)
    return float(value)


def parse_bool(text: Optional[str], name: str) -> bool:
    value = (text or "").strip()
    if value not in _BOOLEANS:
        raise ParseFault(f"Element text '{text}' is not a valid boolean", element=name)
    return _BOOLEANS[value]


def parse_uuid(text: Optional[str], name: str) -> uuid.UUID:
    try:
        return uuid.UUID((text or "").strip())
    except ValueError:
        raise ParseFault(f"Element text '{text}' is not a valid GUID", element=name)


def parse_datetime(text: Optional[str], name: str) -> datetime:
    value = (text or "").strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ParseFault(f"Element text '{text}' is not a valid date-time", element=name)


def parse_day_of_week(text: Optional[str], name: str) -> DayOfWeek:
    """Convert a 1-based wire day (1 = Sunday) to the 0-based enum."""
    day = parse_int(text, name)
    if not 1 <= day <= 7:
        raise ParseFault(f"Day of week must be between 1 and 7, got {day}", element=name)
    return DayOfWeek(day - 1)


def parse_enum_with_fallback(text: Optional[str], enum_type: Type[E], unknown: E) -> EnumValue:
    """Match wire text against an enumeration, falling back to ``unknown``.

    The text is compared case-insensitively against each member's value and
    name. ``unknown`` itself is never matched: it is not a wire value. When
    nothing matches, ``unknown`` is returned together with the original text
    so the caller can write it back unchanged.

    Parameters:
        text: Wire text to match
        enum_type: Enumeration to match against
        unknown: Member returned when nothing matches

    Returns:
        EnumValue: Matched member, or ``unknown`` plus the original text
    """
    candidate = (text or "").strip().casefold()
    for member in enum_type:
        if member is unknown:
            continue
        if candidate in (str(member.value).casefold(), member.name.casefold()):
            return EnumValue(member)

    logger.warning(
        f"Unrecognized {enum_type.__name__} value '{text}', using {unknown.name}"
    )
    return EnumValue(unknown, text)


# ============================================================================
# Scalar formatting (value -> text)
# ============================================================================

def format_double(value: float) -> str:
    """Format a float in xsd:double lexical form (``1.0`` becomes ``1``)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_day_of_week(value: DayOfWeek) -> str:
    return str(int(value) + 1)


def format_enum(member: Enum, original_text: Optional[str] = None) -> str:
    if original_text is not None:
        return original_text
    return str(member.value)


# ============================================================================
# Optional reads
# ============================================================================

def _read_optional(container: Any, name: str, convert: Callable[[Optional[str], str], R]) -> Optional[R]:
    element = select_single(container, name)
    if element is None:
        return None
    return convert(element.text, name)


def get_opt_text(container: Any, name: str) -> Optional[str]:
    """Read an optional string element. A present but empty element yields ""."""
    element = select_single(container, name)
    if element is None:
        return None
    return element.text or ""


def get_opt_int(container: Any, name: str) -> Optional[int]:
    return _read_optional(container, name, parse_int)


def get_opt_double(container: Any, name: str) -> Optional[float]:
    return _read_optional(container, name, parse_double)


def get_opt_bool(container: Any, name: str) -> Optional[bool]:
    return _read_optional(container, name, parse_bool)


def get_opt_uuid(container: Any, name: str) -> Optional[uuid.UUID]:
    return _read_optional(container, name, parse_uuid)


def get_opt_datetime(container: Any, name: str) -> Optional[datetime]:
    return _read_optional(container, name, parse_datetime)


def get_opt_day_of_week(container: Any, name: str) -> Optional[DayOfWeek]:
    return _read_optional(container, name, parse_day_of_week)


def get_opt_enum(container: Any, name: str, enum_type: Type[E], unknown: E) -> Optional[EnumValue]:
    element = select_single(container, name)
    if element is None:
        return None
    return parse_enum_with_fallback(element.text, enum_type, unknown)


def get_opt_record(container: Any, name: str, record_type: Type[R]) -> Optional[R]:
    """Parse the child element ``name`` as a nested record if it exists."""
    element = select_single(container, name)
    if element is None:
        return None
    return record_type.parse_xml(element)


def get_opt_attribute(container: Any, name: str) -> Optional[str]:
    return container.get(name)


# ============================================================================
# Mandatory reads
# ============================================================================

def _require(value: Optional[R], name: str) -> R:
    if value is None:
        raise ParseFault(f"Required element '{name}' is missing", element=name)
    return value


def get_text(container: Any, name: str) -> str:
    return _require(get_opt_text(container, name), name)


def get_int(container: Any, name: str) -> int:
    return _require(get_opt_int(container, name), name)


def get_double(container: Any, name: str) -> float:
    return _require(get_opt_double(container, name), name)


def get_uuid(container: Any, name: str) -> uuid.UUID:
    return _require(get_opt_uuid(container, name), name)


def get_record(container: Any, name: str, record_type: Type[R]) -> R:
    return _require(get_opt_record(container, name, record_type), name)


def get_attribute(container: Any, name: str) -> str:
    value = container.get(name)
    if value is None:
        raise ParseFault(f"Required attribute '{name}' is missing", element=name)
    return value


# ============================================================================
# Repeated reads
# ============================================================================

def get_repeated(container: Any, name: str, record_type: Type[R]) -> List[R]:
    """Parse every child element ``name`` as a record, in document order.

    Zero matches yield an empty list, never None.
    """
    return [record_type.parse_xml(element) for element in select_all(container, name)]


def get_repeated_text(container: Any, name: str) -> List[str]:
    return [element.text or "" for element in select_all(container, name)]


def get_repeated_day_of_week(container: Any, name: str) -> List[DayOfWeek]:
    return [parse_day_of_week(element.text, name) for element in select_all(container, name)]


def get_collection(container: Any, wrapper: str, name: str, record_type: Type[R]) -> List[R]:
    """Parse records nested in a wrapper element (``<tasks><task/>...</tasks>``).

    A missing wrapper and an empty wrapper both yield an empty list.
    """
    wrapper_element = select_single(container, wrapper)
    if wrapper_element is None:
        return []
    return get_repeated(wrapper_element, name, record_type)


# ============================================================================
# Optional writes
# ============================================================================

def write_opt_text(writer: Any, name: str, value: Optional[str]) -> None:
    if value is not None:
        writer.write_element_string(name, value)


def write_opt_int(writer: Any, name: str, value: Optional[int]) -> None:
    if value is not None:
        writer.write_element_string(name, str(int(value)))


def write_opt_double(writer: Any, name: str, value: Optional[float]) -> None:
    if value is not None:
        writer.write_element_string(name, format_double(value))


def write_opt_bool(writer: Any, name: str, value: Optional[bool]) -> None:
    if value is not None:
        writer.write_element_string(name, format_bool(value))


def write_opt_uuid(writer: Any, name: str, value: Optional[uuid.UUID]) -> None:
    if value is not None:
        writer.write_element_string(name, str(value))


def write_opt_datetime(writer: Any, name: str, value: Optional[datetime]) -> None:
    if value is not None:
        writer.write_element_string(name, value.isoformat())


def write_opt_day_of_week(writer: Any, name: str, value: Optional[DayOfWeek]) -> None:
    if value is not None:
        writer.write_element_string(name, format_day_of_week(value))


def write_opt_enum(
    writer: Any,
    name: str,
    member: Optional[Enum],
    unknown: Enum,
    original_text: Optional[str] = None
) -> None:
    """Write a lenient enum field.

    Preserved unrecognized text is written back as-is. The ``unknown``
    member without preserved text has no wire form and writes nothing.
    """
    if member is None:
        return
    if original_text is None and member is unknown:
        return
    writer.write_element_string(name, format_enum(member, original_text))


def write_opt(writer: Any, name: str, record: Optional[Any]) -> None:
    """Delegate to the nested record's writer if the record is present."""
    if record is not None:
        record.write_xml(writer, name)


def write_opt_attribute(writer: Any, name: str, value: Optional[str]) -> None:
    if value is not None:
        writer.write_attribute_string(name, value)


# ============================================================================
# Repeated writes
# ============================================================================

def write_repeated(writer: Any, name: str, records: Optional[Iterable[Any]]) -> None:
    """Write one ``name`` element per record, in sequence order."""
    for record in records or ():
        record.write_xml(writer, name)


def write_repeated_text(writer: Any, name: str, values: Optional[Iterable[str]]) -> None:
    for value in values or ():
        writer.write_element_string(name, value)


def write_repeated_day_of_week(writer: Any, name: str, values: Optional[Iterable[DayOfWeek]]) -> None:
    for value in values or ():
        writer.write_element_string(name, format_day_of_week(value))


def write_collection(writer: Any, wrapper: str, name: str, records: Optional[List[Any]]) -> None:
    """Write records inside a wrapper element; an empty list writes nothing."""
    if not records:
        return
    writer.write_start_element(wrapper)
    write_repeated(writer, name, records)
    writer.write_end_element()
