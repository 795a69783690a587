"""
Platform Client

Wraps the platform information methods:
- GetServiceDefinition
- SelectInstance
- GetThingType
"""

from typing import Dict, Iterable, Optional
from uuid import UUID
from xml.etree import ElementTree

from ..exceptions import ArgumentError, ResponseFormatError
from ..models import ServiceDefinition, ServiceInstance
from ..utils import child_text, parse_uuid, sub_element_text
from .base import BaseClient, to_fragment


class PlatformClient(BaseClient):
    """Access to information about the platform itself."""

    async def get_service_definition(self) -> ServiceDefinition:
        """
        Get the platform URLs, version and known instances.

        This method does not need a session credential.
        """
        response = await self._execute("GetServiceDefinition", 2)
        return ServiceDefinition.from_xml(self._info(response))

    async def select_instance(self, country: str, state_province: Optional[str] = None) -> ServiceInstance:
        """
        Ask the platform which instance serves a location.

        Args:
            country: ISO 3166 country code
            state_province: Optional state or province code

        Raises:
            ArgumentError: If country is empty
            ResponseFormatError: If no instance is returned
        """
        if not country:
            raise ArgumentError("country must not be empty")

        preferred = ElementTree.Element("preferred-location")
        location = ElementTree.SubElement(preferred, "location")
        sub_element_text(location, "country", country)
        if state_province:
            sub_element_text(location, "state-province", state_province)

        response = await self._execute("SelectInstance", 1, to_fragment(preferred))
        selected = self._info(response).find("selected-instance")
        if selected is None:
            raise ResponseFormatError("SelectInstance returned no instance")
        return ServiceInstance.from_xml(selected)

    async def get_thing_type_names(self, type_ids: Iterable[UUID]) -> Dict[UUID, str]:
        """
        Look up thing type names.

        Returns:
            Mapping of type id to type name for every type the platform knows

        Raises:
            ArgumentError: If no type id is given
            ResponseFormatError: If a returned type has no valid id
        """
        ids = []
        for type_id in type_ids:
            element = ElementTree.Element("id")
            element.text = str(type_id)
            ids.append(element)
        if not ids:
            raise ArgumentError("At least one thing type id is required")

        section = ElementTree.Element("section")
        section.text = "core"
        response = await self._execute("GetThingType", 1, to_fragment(*ids, section))

        names = {}
        for thing_type in self._info(response).findall("thing-type"):
            type_id = parse_uuid(child_text(thing_type, "id"), "thing type id")
            names[type_id] = child_text(thing_type, "name", "")
        return names
