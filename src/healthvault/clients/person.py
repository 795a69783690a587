"""
Person Client

Wraps the methods about the authenticated person and the application's
per-person settings.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID
from xml.etree import ElementTree

from ..exceptions import ArgumentError, ResponseFormatError
from ..models import HealthRecordInfo, PersonInfo
from ..utils import element_to_string, parse_fragment
from .base import BaseClient, to_fragment

logger = logging.getLogger(__name__)


class PersonClient(BaseClient):
    """Access to the authenticated person and their records."""

    async def get_person_info(self) -> PersonInfo:
        """
        Get the person and the records the application is authorized for.

        Raises:
            ResponseFormatError: If the response has no <person-info>
        """
        response = await self._execute("GetPersonInfo", 1)
        element = self._info(response).find("person-info")
        if element is None:
            raise ResponseFormatError("GetPersonInfo returned no person-info")
        return PersonInfo.from_xml(element)

    async def get_authorized_records(self, record_ids: Iterable[UUID]) -> List[HealthRecordInfo]:
        """
        Get the records with the given ids that the person can access.

        Raises:
            ArgumentError: If no record id is given
        """
        ids = []
        for record_id in record_ids:
            element = ElementTree.Element("id")
            element.text = str(record_id)
            ids.append(element)
        if not ids:
            raise ArgumentError("At least one record id is required")

        response = await self._execute("GetAuthorizedRecords", 1, to_fragment(*ids))
        return [HealthRecordInfo.from_xml(r) for r in self._info(response).findall("record")]

    async def get_application_settings(self) -> Optional[ElementTree.Element]:
        """
        Get the application settings stored for the person.

        Returns:
            The <app-settings> element, or None if nothing has been stored
        """
        response = await self._execute("GetApplicationSettings", 1)
        return self._info(response).find("app-settings")

    async def set_application_settings(self, settings_xml: str) -> None:
        """
        Store application settings for the person.

        Args:
            settings_xml: XML fragment stored as the content of <app-settings>

        Raises:
            ArgumentError: If the fragment is not well-formed
        """
        app_settings = parse_fragment(settings_xml, "app-settings")
        await self._execute("SetApplicationSettings", 1, element_to_string(app_settings))
        logger.debug("Application settings stored")
