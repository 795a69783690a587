"""
Thing Client

Reads and writes things (typed data items) in one health record.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID
from xml.etree import ElementTree

from ..exceptions import ArgumentError
from ..item_types.base import write_item
from ..models import Thing, ThingKey
from ..utils import sub_element_text
from .base import RecordClient, to_fragment

logger = logging.getLogger(__name__)


def thing_from_item(type_id: UUID, item, node_name: str, key: Optional[ThingKey] = None) -> Thing:
    """
    Wrap an item type model in a Thing ready to be stored.

    Args:
        type_id: Thing type identifier
        item: Item type model implementing write_xml()
        node_name: Root element name of the payload
        key: Key of the stored thing, when updating

    Raises:
        ThingSerializationError: If the item is missing mandatory data
    """
    return Thing(type_id=type_id, key=key, data_xml=write_item(item, node_name))


def _thing_element(thing: Thing, include_key: bool) -> ElementTree.Element:
    element = ElementTree.Element("thing")
    if include_key:
        if thing.key is None:
            raise ArgumentError("Things must have a key to be updated")
        element.append(thing.key.to_xml())
    sub_element_text(element, "type-id", thing.type_id)
    data_xml = ElementTree.SubElement(element, "data-xml")
    try:
        payload = thing.data()
    except ElementTree.ParseError as e:
        raise ArgumentError(f"Thing data is not well-formed XML: {e}")
    if payload is None:
        raise ArgumentError(f"Thing of type {thing.type_id} has no data")
    data_xml.append(payload)
    return element


class ThingClient(RecordClient):
    """Access to the things stored in one record."""

    async def get_things(self, type_id: Optional[UUID] = None, max_full: Optional[int] = None) -> List[Thing]:
        """
        Query things in the record.

        Args:
            type_id: Only return things of this type
            max_full: Upper bound on the things returned with their data

        Raises:
            ArgumentError: If max_full is less than 1
        """
        group = ElementTree.Element("group")
        if max_full is not None:
            if max_full < 1:
                raise ArgumentError("max_full must be at least 1")
            group.set("max-full", str(max_full))

        filter_element = ElementTree.SubElement(group, "filter")
        if type_id is not None:
            sub_element_text(filter_element, "type-id", type_id)

        format_element = ElementTree.SubElement(group, "format")
        sub_element_text(format_element, "section", "core")
        ElementTree.SubElement(format_element, "xml")

        response = await self._execute_for_record("GetThings", 3, to_fragment(group))
        return [Thing.from_xml(t) for t in self._info(response).findall("group/thing")]

    async def create_new_things(self, things: Iterable[Thing]) -> List[ThingKey]:
        """
        Store new things in the record.

        Returns:
            The keys assigned to the things, in order
        """
        return await self._put_things(things, include_key=False)

    async def update_things(self, things: Iterable[Thing]) -> List[ThingKey]:
        """
        Replace stored things; every thing must carry its current key.

        Raises:
            VersionMismatchError: If a thing was changed since it was read
        """
        return await self._put_things(things, include_key=True)

    async def remove_things(self, keys: Iterable[ThingKey]) -> None:
        """Remove things from the record."""
        elements = [key.to_xml() for key in keys]
        if not elements:
            raise ArgumentError("At least one thing key is required")
        await self._execute_for_record("RemoveThings", 1, to_fragment(*elements))
        logger.debug(f"Removed {len(elements)} things from record {self.record.record_id}")

    async def _put_things(self, things: Iterable[Thing], include_key: bool) -> List[ThingKey]:
        elements = [_thing_element(thing, include_key) for thing in things]
        if not elements:
            raise ArgumentError("At least one thing is required")

        response = await self._execute_for_record("PutThings", 2, to_fragment(*elements))
        keys = [ThingKey.from_xml(k) for k in self._info(response).findall("thing-id")]
        logger.debug(f"Stored {len(keys)} things in record {self.record.record_id}")
        return keys
