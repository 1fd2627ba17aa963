"""Item Export Reader Adapter.

Reads bulk exports of health record items: XML files holding ``<thing>``
envelopes, each with a ``type-id`` and a ``data-xml`` payload that contains
one item type's root element. Every envelope becomes one Result.

Security Impact:
    - Uses the secure streaming parser (event/depth limits, no entity
      expansion, no network access)
    - Each record is parsed inside its own try/except so a malformed item
      cannot stop the rest of the export
    - Payload XML is never logged, only the envelope identity and fault type

Architecture:
    - Implements ThingSourcePort (Hexagonal Architecture)
    - Resolves the item class through the item type registry, by type id
      first and by root element name otherwise
    - Streaming pattern prevents memory exhaustion
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from health_itemtypes.domain.item_base import ItemType
from health_itemtypes.domain.ports import ItemTypeError, ParseFault, Result, ThingSourcePort
from health_itemtypes.domain.registry import deserialize_item, get_item_type
from health_itemtypes.infrastructure.settings import settings
from health_itemtypes.infrastructure.xml_streaming_parser import StreamingXMLParser

logger = logging.getLogger(__name__)


class ThingExportReader(ThingSourcePort):
    """Streams item types out of an XML export file.

    Example Usage:
        ```python
        reader = ThingExportReader()
        for result in reader.read("export.xml"):
            if result.success:
                print(result.value)
            else:
                print(result.error_type, result.error_details)
        ```
    """

    def __init__(
        self,
        record_tag: Optional[str] = None,
        parser: Optional[StreamingXMLParser] = None
    ):
        """Initialize the reader.

        Parameters:
            record_tag: Envelope tag name (defaults to HIT_XML_RECORD_TAG)
            parser: Streaming parser to use (defaults to one built from settings)
        """
        self.adapter_name = "thing_export_reader"
        self.record_tag = record_tag or settings.xml_record_tag
        self.parser = parser or StreamingXMLParser()

    def can_read(self, source: str) -> bool:
        source_path = Path(source)
        return source_path.suffix.lower() == ".xml" and source_path.is_file()

    def read(self, source: str) -> Iterator[Result[ItemType]]:
        """Read an export and yield one Result per envelope.

        Parameters:
            source: Path to the export file

        Yields:
            Result[ItemType]: Parsed item, or failure with fault details

        Raises:
            SourceNotFoundError: If the file does not exist
            SecurityError: If streaming limits are exceeded
            ParseFault: If the file itself is not well-formed XML
        """
        record_count = 0
        rejected_count = 0

        for thing in self.parser.iter_records(source, record_tag=self.record_tag):
            record_count += 1
            envelope = self._envelope_identity(thing)
            try:
                item = self._parse_thing(thing)
            except (ItemTypeError, KeyError) as e:
                rejected_count += 1
                details = {"source": source, "record_index": record_count, **envelope}
                if isinstance(e, ParseFault):
                    details["element"] = e.element
                    details["record_type"] = e.record_type
                logger.warning(
                    f"Record {record_count} from {source} rejected: {type(e).__name__}",
                    extra={"record_index": record_count, "error_type": type(e).__name__, **envelope}
                )
                yield Result.failure_result(e, error_details=details)
                continue

            yield Result.success_result(item)

        if record_count > 0:
            logger.info(
                f"Export read complete: {source} - "
                f"{record_count - rejected_count} accepted, {rejected_count} rejected"
            )
        else:
            logger.warning(f"No <{self.record_tag}> records found in {source}")

    def _envelope_identity(self, thing: Any) -> Dict[str, Optional[str]]:
        return {
            "thing_id": (thing.findtext("thing-id") or "").strip() or None,
            "type_id": (thing.findtext("type-id") or "").strip() or None,
        }

    def _parse_thing(self, thing: Any) -> ItemType:
        """Deserialize the payload of one envelope.

        Raises:
            ParseFault: If the payload is missing or malformed
            KeyError: If the envelope names a type id that is not registered
                and the payload root is not registered either
        """
        data_xml = thing.find("data-xml")
        if data_xml is None:
            raise ParseFault("Envelope has no data-xml payload", element="data-xml")

        type_id = (thing.findtext("type-id") or "").strip()
        if type_id:
            try:
                item_class = get_item_type(type_id)
            except KeyError:
                logger.debug(f"Type id {type_id} is not registered, resolving by root element")
            else:
                return item_class.from_xml(data_xml)

        return deserialize_item(data_xml)
