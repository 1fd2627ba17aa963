"""Record Base Classes.

Every record in the catalog derives from ``ItemData`` (nested values written
under a caller-chosen element name) or ``ItemType`` (top-level records that own
a fixed root element name and a platform type id). Concrete classes declare
their fields as pydantic fields and implement two hooks:

    - ``read_fields(element)``: read the fields, in schema order, through the
      codec and return them as a dict
    - ``write_fields(writer)``: write the same fields, in the same order

Security Impact:
    - Assignment is revalidated (validate_assignment=True), so a record can
      never hold a value that violates a field constraint
    - Records are only written once every mandatory field is set

Architecture:
    - One capability base; nested records are held by composition
    - Every field is Optional so a record can be built empty; mandatory
      fields are listed in REQUIRED_FIELDS and reject None on assignment
    - Pydantic's ValidationError never escapes: assignment and construction
      raise ValidationFault, parsing raises ParseFault
"""

import logging
import uuid
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from health_itemtypes.domain import validator
from health_itemtypes.domain.codec import EnumValue, select_single
from health_itemtypes.domain.ports import ParseFault, ValidationFault

logger = logging.getLogger(__name__)


def _to_validation_fault(error: PydanticValidationError, record_type: str) -> ValidationFault:
    """Convert the first pydantic error into a ValidationFault naming the field."""
    first = error.errors()[0]
    original = (first.get("ctx") or {}).get("error")
    if isinstance(original, ValidationFault):
        return original
    field = str(first["loc"][0]) if first.get("loc") else None
    return ValidationFault(f"{record_type}.{field}: {first['msg']}", field=field)


class ItemData(BaseModel):
    """Base for every record that can be parsed from and written to XML.

    Example:
        ```python
        value = CodableValue(text="Pulse oximetry")
        writer = XmlWriter()
        value.write_xml(writer, "measurement-method")
        ```
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ()

    _unrecognized: Dict[str, str] = PrivateAttr(default_factory=dict)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise _to_validation_fault(e, type(self).__name__) from e

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            raise _to_validation_fault(e, type(self).__name__) from e
        if name in self._unrecognized:
            # model_copy shares private dicts with the original; never mutate in place
            self._unrecognized = {
                key: text for key, text in self._unrecognized.items() if key != name
            }

    @field_validator("*")
    @classmethod
    def check_required_fields(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name in cls.REQUIRED_FIELDS:
            validator.throw_if_argument_none(value, info.field_name)
        return value

    def unrecognized_text(self, field: str) -> Optional[str]:
        """Original wire text kept for a lenient enum field that fell back.

        Cleared as soon as the field is assigned a new value.
        """
        return self._unrecognized.get(field)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        raise NotImplementedError(f"{cls.__name__} does not implement read_fields")

    @classmethod
    def parse_xml(cls, element: Any) -> 'ItemData':
        """Build a record from its XML element.

        Parameters:
            element: Element whose children hold this record's fields

        Returns:
            ItemData: Populated, validated record

        Raises:
            ParseFault: If a required element is missing, a scalar is
                malformed, or a value violates a field constraint
        """
        try:
            values = cls.read_fields(element)
            unrecognized = {}
            for key, value in values.items():
                if isinstance(value, EnumValue):
                    values[key] = value.member
                    if value.original_text is not None:
                        unrecognized[key] = value.original_text
            record = cls(**values)
        except ParseFault as fault:
            if fault.record_type is None:
                fault.record_type = cls.__name__
            raise
        except ValidationFault as fault:
            raise ParseFault(str(fault), element=fault.field, record_type=cls.__name__) from fault

        record._unrecognized = unrecognized
        return record

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def check_serializable(self) -> None:
        """Raise SerializationFault if any mandatory field is unset."""
        for field in self.REQUIRED_FIELDS:
            validator.throw_serialization_if_none(getattr(self, field), field, type(self).__name__)

    def check_serializable_tree(self) -> None:
        """Run check_serializable on this record and every nested record."""
        self.check_serializable()
        for field in type(self).model_fields:
            value = getattr(self, field)
            for child in (value if isinstance(value, list) else (value,)):
                if isinstance(child, ItemData):
                    child.check_serializable_tree()

    def write_fields(self, writer: Any) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement write_fields")

    def write_xml(self, writer: Any, node_name: str) -> None:
        """Write this record as ``<node_name>...</node_name>``.

        Parameters:
            writer: Writer exposing write_start_element/write_end_element etc.
            node_name: Element name chosen by the enclosing record

        Raises:
            ValidationFault: If node_name is None or empty
            SerializationFault: If a mandatory field of this record or of any
                nested record is unset (nothing is written in that case)
        """
        validator.throw_if_string_none_or_empty(node_name, "node_name")
        self.check_serializable_tree()
        writer.write_start_element(node_name)
        self.write_fields(writer)
        writer.write_end_element()


class ItemType(ItemData):
    """Base for top-level records with a fixed root element and type id."""

    ROOT_ELEMENT: ClassVar[str] = ""
    TYPE_ID: ClassVar[Optional[uuid.UUID]] = None

    @classmethod
    def from_xml(cls, container: Any) -> 'ItemType':
        """Locate this type's root element in ``container`` and parse it.

        ``container`` may be the root element itself or its parent (for
        example a ``data-xml`` payload element).

        Raises:
            ParseFault: If the root element is missing or the record is invalid
        """
        if container.tag == cls.ROOT_ELEMENT:
            element = container
        else:
            element = select_single(container, cls.ROOT_ELEMENT)
        if element is None:
            raise ParseFault(
                f"Root element '{cls.ROOT_ELEMENT}' not found",
                element=cls.ROOT_ELEMENT,
                record_type=cls.__name__
            )
        record = cls.parse_xml(element)
        logger.debug(f"Parsed {cls.__name__} from <{cls.ROOT_ELEMENT}>")
        return record

    @classmethod
    def from_string(cls, text: str) -> 'ItemType':
        """Parse a record from XML text using the secure fragment loader."""
        from health_itemtypes.infrastructure.xml_io import load_fragment

        return cls.from_xml(load_fragment(text))

    def write(self, writer: Any) -> None:
        self.write_xml(writer, self.ROOT_ELEMENT)

    def to_xml(self, pretty_print: bool = False) -> str:
        """Serialize this record to an XML string."""
        from health_itemtypes.infrastructure.xml_io import XmlWriter

        writer = XmlWriter()
        self.write(writer)
        logger.debug(f"Wrote {type(self).__name__} as <{self.ROOT_ELEMENT}>")
        return writer.to_string(pretty_print=pretty_print)
