"""People, organizations and their contact information."""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from health_itemtypes.domain import codec, resources, validator
from health_itemtypes.domain.base_types import CodableValue
from health_itemtypes.domain.item_base import ItemData


class Name(ItemData):
    """A person's name; only the full form is mandatory."""

    REQUIRED_FIELDS = ("full",)

    full: Optional[str] = None
    title: Optional[CodableValue] = None
    first: Optional[str] = None
    middle: Optional[str] = None
    last: Optional[str] = None
    suffix: Optional[CodableValue] = None

    @field_validator("full")
    @classmethod
    def validate_full(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "full")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "full": codec.get_text(element, "full"),
            "title": codec.get_opt_record(element, "title", CodableValue),
            "first": codec.get_opt_text(element, "first"),
            "middle": codec.get_opt_text(element, "middle"),
            "last": codec.get_opt_text(element, "last"),
            "suffix": codec.get_opt_record(element, "suffix", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "full", self.full)
        codec.write_opt(writer, "title", self.title)
        codec.write_opt_text(writer, "first", self.first)
        codec.write_opt_text(writer, "middle", self.middle)
        codec.write_opt_text(writer, "last", self.last)
        codec.write_opt(writer, "suffix", self.suffix)

    def __str__(self) -> str:
        return self.full or ""


class Address(ItemData):
    """A postal address with at least one street line."""

    REQUIRED_FIELDS = ("city", "postal_code", "country")

    description: Optional[str] = None
    is_primary: Optional[bool] = None
    street: List[str] = Field(default_factory=list)
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    county: Optional[str] = None

    @field_validator("city", "postal_code", "country")
    @classmethod
    def validate_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, info.field_name)
        return v

    def check_serializable(self) -> None:
        super().check_serializable()
        validator.throw_serialization_if_empty(self.street, "street", type(self).__name__)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "description": codec.get_opt_text(element, "description"),
            "is_primary": codec.get_opt_bool(element, "is-primary"),
            "street": codec.get_repeated_text(element, "street"),
            "city": codec.get_text(element, "city"),
            "state": codec.get_opt_text(element, "state"),
            "postal_code": codec.get_text(element, "postcode"),
            "country": codec.get_text(element, "country"),
            "county": codec.get_opt_text(element, "county"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt_bool(writer, "is-primary", self.is_primary)
        codec.write_repeated_text(writer, "street", self.street)
        codec.write_opt_text(writer, "city", self.city)
        codec.write_opt_text(writer, "state", self.state)
        codec.write_opt_text(writer, "postcode", self.postal_code)
        codec.write_opt_text(writer, "country", self.country)
        codec.write_opt_text(writer, "county", self.county)

    def __str__(self) -> str:
        list_format = resources.get_string("ListFormat")
        result = resources.get_string("IsPrimary") if self.is_primary else ""
        for street in self.street:
            result += street + resources.get_string("ListSeparator")
        result += self.city or ""
        for part in (self.county, self.state, self.postal_code, self.country):
            if part:
                result += list_format.format(part)
        return result


class Phone(ItemData):
    REQUIRED_FIELDS = ("number",)

    description: Optional[str] = None
    is_primary: Optional[bool] = None
    number: Optional[str] = None

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "number")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "description": codec.get_opt_text(element, "description"),
            "is_primary": codec.get_opt_bool(element, "is-primary"),
            "number": codec.get_text(element, "number"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt_bool(writer, "is-primary", self.is_primary)
        codec.write_opt_text(writer, "number", self.number)

    def __str__(self) -> str:
        return self.number or ""


class Email(ItemData):
    REQUIRED_FIELDS = ("address",)

    description: Optional[str] = None
    is_primary: Optional[bool] = None
    address: Optional[str] = None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "address")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "description": codec.get_opt_text(element, "description"),
            "is_primary": codec.get_opt_bool(element, "is-primary"),
            "address": codec.get_text(element, "address"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "description", self.description)
        codec.write_opt_bool(writer, "is-primary", self.is_primary)
        codec.write_opt_text(writer, "address", self.address)

    def __str__(self) -> str:
        return self.address or ""


class ContactInfo(ItemData):
    """Addresses, phone numbers and email addresses; all lists may be empty."""

    addresses: List[Address] = Field(default_factory=list)
    phones: List[Phone] = Field(default_factory=list)
    emails: List[Email] = Field(default_factory=list)

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "addresses": codec.get_repeated(element, "address", Address),
            "phones": codec.get_repeated(element, "phone", Phone),
            "emails": codec.get_repeated(element, "email", Email),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_repeated(writer, "address", self.addresses)
        codec.write_repeated(writer, "phone", self.phones)
        codec.write_repeated(writer, "email", self.emails)

    def __str__(self) -> str:
        parts = [str(item) for item in (*self.addresses, *self.phones, *self.emails)]
        return resources.get_string("ListSeparator").join(parts)


class PersonItem(ItemData):
    """A person involved in the care of the record owner."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[Name] = None
    organization: Optional[str] = None
    professional_training: Optional[str] = None
    id: Optional[str] = None
    contact: Optional[ContactInfo] = None
    person_type: Optional[CodableValue] = None

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_record(element, "name", Name),
            "organization": codec.get_opt_text(element, "organization"),
            "professional_training": codec.get_opt_text(element, "professional-training"),
            "id": codec.get_opt_text(element, "id"),
            "contact": codec.get_opt_record(element, "contact", ContactInfo),
            "person_type": codec.get_opt_record(element, "type", CodableValue),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt(writer, "name", self.name)
        codec.write_opt_text(writer, "organization", self.organization)
        codec.write_opt_text(writer, "professional-training", self.professional_training)
        codec.write_opt_text(writer, "id", self.id)
        codec.write_opt(writer, "contact", self.contact)
        codec.write_opt(writer, "type", self.person_type)

    def __str__(self) -> str:
        result = str(self.name) if self.name else ""
        if self.organization:
            result += resources.format_string("ListFormat", self.organization)
        return result


class Organization(ItemData):
    """An organization (clinic, laboratory, employer, ...)."""

    REQUIRED_FIELDS = ("name",)

    name: Optional[str] = None
    contact: Optional[ContactInfo] = None
    organization_type: Optional[CodableValue] = None
    website: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        validator.throw_if_string_is_empty_or_whitespace(v, "name")
        return v

    @classmethod
    def read_fields(cls, element: Any) -> Dict[str, Any]:
        return {
            "name": codec.get_text(element, "name"),
            "contact": codec.get_opt_record(element, "contact", ContactInfo),
            "organization_type": codec.get_opt_record(element, "type", CodableValue),
            "website": codec.get_opt_text(element, "website"),
        }

    def write_fields(self, writer: Any) -> None:
        codec.write_opt_text(writer, "name", self.name)
        codec.write_opt(writer, "contact", self.contact)
        codec.write_opt(writer, "type", self.organization_type)
        codec.write_opt_text(writer, "website", self.website)

    def __str__(self) -> str:
        return self.name or ""
