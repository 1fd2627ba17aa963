"""Item Type Registry.

Maps root element names and platform type ids to item type classes so that a
payload can be deserialized without the caller knowing its type up front.

Example Usage:
    ```python
    @register_item_type
    class BloodOxygenSaturation(ItemType):
        ROOT_ELEMENT = "blood-oxygen-saturation"
        TYPE_ID = uuid.UUID("3a54f95f-03d8-4f62-815f-f691fc94a500")

    get_item_type("blood-oxygen-saturation") is BloodOxygenSaturation
    record = deserialize_item(data_xml_element)
    ```
"""

import logging
import uuid
from typing import Any, Dict, List, Type, Union

from health_itemtypes.domain.item_base import ItemType
from health_itemtypes.domain.ports import ParseFault

logger = logging.getLogger(__name__)

_BY_ROOT: Dict[str, Type[ItemType]] = {}
_BY_ID: Dict[uuid.UUID, Type[ItemType]] = {}


def register_item_type(cls: Type[ItemType]) -> Type[ItemType]:
    """Class decorator adding an item type to the registry.

    Raises:
        ValueError: If the class has no root element, or another class is
            already registered under the same root element or type id
    """
    if not cls.ROOT_ELEMENT:
        raise ValueError(f"{cls.__name__} does not define ROOT_ELEMENT")

    existing = _BY_ROOT.get(cls.ROOT_ELEMENT)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"Root element '{cls.ROOT_ELEMENT}' is already registered to {existing.__name__}"
        )
    if cls.TYPE_ID is not None:
        existing = _BY_ID.get(cls.TYPE_ID)
        if existing is not None and existing is not cls:
            raise ValueError(f"Type id {cls.TYPE_ID} is already registered to {existing.__name__}")
        _BY_ID[cls.TYPE_ID] = cls

    _BY_ROOT[cls.ROOT_ELEMENT] = cls
    logger.debug(f"Registered item type {cls.__name__} (<{cls.ROOT_ELEMENT}>, {cls.TYPE_ID})")
    return cls


def get_item_type(key: Union[str, uuid.UUID]) -> Type[ItemType]:
    """Resolve an item type by root element name or type id.

    Parameters:
        key: Root element name, type id, or type id as a string

    Returns:
        Type[ItemType]: The registered class

    Raises:
        KeyError: If nothing is registered under the key
    """
    if isinstance(key, uuid.UUID):
        return _BY_ID[key]
    if key in _BY_ROOT:
        return _BY_ROOT[key]
    try:
        return _BY_ID[uuid.UUID(key)]
    except ValueError:
        raise KeyError(key)


def registered_item_types() -> List[Type[ItemType]]:
    return sorted(_BY_ROOT.values(), key=lambda cls: cls.ROOT_ELEMENT)


def deserialize_item(container: Any) -> ItemType:
    """Parse whichever registered item type ``container`` holds.

    ``container`` may be the item's root element or an element (such as
    ``data-xml``) whose first registered child is the item.

    Raises:
        ParseFault: If no registered root element is found
    """
    cls = _BY_ROOT.get(container.tag)
    if cls is not None:
        return cls.from_xml(container)

    for child in container:
        cls = _BY_ROOT.get(child.tag)
        if cls is not None:
            return cls.from_xml(child)

    raise ParseFault(
        f"No registered item type found in <{container.tag}>",
        element=container.tag
    )
