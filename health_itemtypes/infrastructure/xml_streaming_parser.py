"""Secure Streaming XML Parser.

Bulk item exports can hold hundreds of thousands of ``<thing>`` envelopes, so
they are never loaded whole. This parser walks the file with lxml's iterparse
and hands out one envelope element at a time.

Security Impact:
    - Entities are not resolved and no network access is made, which blocks
      Billion Laughs and external entity tricks
    - Every start/end event is counted against HIT_XML_MAX_EVENTS
    - Nesting deeper than HIT_XML_MAX_DEPTH aborts the read

Architecture:
    - Infrastructure only; adapters turn yielded elements into records
    - A yielded envelope, and everything parsed before it, is released once
      the consumer moves on, so memory stays proportional to one envelope
"""

import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from lxml import etree

from health_itemtypes.domain.ports import ParseFault, SourceNotFoundError
from health_itemtypes.infrastructure.settings import settings

logger = logging.getLogger(__name__)

# Fractions of the event limit at which a warning is logged
_EVENT_WARNING_LEVELS = (0.8, 0.9)


class SecurityError(Exception):
    """An export exceeded the streaming limits."""
    pass


class StreamingXMLParser:
    """Streams record elements out of an XML export under fixed limits.

    Example Usage:
        ```python
        parser = StreamingXMLParser(max_depth=32)
        for thing in parser.iter_records("export.xml", record_tag="thing"):
            handle(thing)  # the element is released afterwards
        ```
    """

    def __init__(
        self,
        max_events: Optional[int] = None,
        max_depth: Optional[int] = None,
        huge_tree: bool = False
    ):
        """Initialize the parser.

        Parameters:
            max_events: Start/end events allowed per file (defaults to
                HIT_XML_MAX_EVENTS)
            max_depth: Deepest element nesting allowed (defaults to
                HIT_XML_MAX_DEPTH)
            huge_tree: Lift libxml2's own size limits (off by default)
        """
        self.max_events = max_events if max_events is not None else settings.xml_max_events
        self.max_depth = max_depth if max_depth is not None else settings.xml_max_depth
        self.huge_tree = huge_tree
        self.event_count = 0
        self._warn_at = {int(self.max_events * level): level for level in _EVENT_WARNING_LEVELS}

    def _count_event(self, depth: int) -> None:
        self.event_count += 1

        level = self._warn_at.get(self.event_count)
        if level is not None:
            logger.warning(
                f"XML event count at {level:.0%} of limit: "
                f"{self.event_count:,} / {self.max_events:,}"
            )

        if self.event_count > self.max_events:
            raise SecurityError(
                f"XML event limit exceeded: {self.event_count:,} > {self.max_events:,}"
            )
        if depth > self.max_depth:
            raise SecurityError(f"XML depth limit exceeded: {depth} > {self.max_depth}")

    def iter_records(self, source: str, record_tag: str) -> Iterator[Any]:
        """Yield every complete ``record_tag`` element of an XML file in order.

        Parameters:
            source: Path to the export file
            record_tag: Tag name of the record elements (e.g. "thing")

        Yields:
            Element: One lxml element per record

        Raises:
            SourceNotFoundError: If the file does not exist
            SecurityError: If the event or depth limit is exceeded
            ParseFault: If the file is not well-formed XML
        """
        source_path = Path(source)
        if not source_path.exists():
            raise SourceNotFoundError(f"XML source not found: {source}", source=source)

        self.event_count = 0
        depth = 0

        with open(source_path, 'rb') as xml_file:
            events = etree.iterparse(
                xml_file,
                events=('start', 'end'),
                huge_tree=self.huge_tree,
                resolve_entities=False,
                no_network=True,
                recover=False,
                remove_blank_text=True
            )

            try:
                for event, element in events:
                    if event == 'start':
                        depth += 1
                        self._count_event(depth)
                        continue

                    self._count_event(depth)
                    depth -= 1
                    if element.tag != record_tag:
                        continue

                    yield element

                    element.clear(keep_tail=False)
                    parent = element.getparent()
                    if parent is not None:
                        while element.getprevious() is not None:
                            del parent[0]
            except etree.XMLSyntaxError as e:
                raise ParseFault(f"Malformed XML in {source}: {e}") from e
