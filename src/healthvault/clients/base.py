"""
Base Sub-Client

Responsibilities:
- Bind a sub-client to its connection (and record, for record clients)
- Route every call through HealthVaultConnection.execute()
- Shared helpers for building parameter fragments and reading payloads

Sub-clients hold no state beyond the binding; they are cheap to create
and safe to discard.
"""

from typing import TYPE_CHECKING, Optional
from uuid import UUID
from xml.etree import ElementTree

from ..exceptions import ArgumentError
from ..models import HealthRecordInfo, HealthServiceResponseData
from ..utils import element_to_string

if TYPE_CHECKING:
    from ..connection import HealthVaultConnection


def to_fragment(*elements: ElementTree.Element) -> str:
    """Serialize sibling elements into one parameter fragment."""
    return "".join(element_to_string(element) for element in elements)


class BaseClient:
    """
    Base class for connection scoped sub-clients.

    Args:
        connection: The connection every call is sent through
    """

    record_scoped = False

    def __init__(self, connection: "HealthVaultConnection"):
        """Initialize sub-client."""
        self.connection = connection

    async def _execute(
        self,
        method_name: str,
        method_version: int,
        parameters: Optional[str] = None,
        record_id: Optional[UUID] = None,
    ) -> HealthServiceResponseData:
        return await self.connection.execute(method_name, method_version, parameters, record_id)

    @staticmethod
    def _info(response: HealthServiceResponseData) -> ElementTree.Element:
        """The <info> payload, or an empty element when there is none."""
        info = response.info()
        if info is None:
            return ElementTree.Element("info")
        return info


class RecordClient(BaseClient):
    """
    Base class for sub-clients scoped to one health record.

    Every call carries the record id.

    Args:
        connection: The connection every call is sent through
        record: The record calls are scoped to

    Raises:
        ArgumentError: If record is None
    """

    record_scoped = True

    def __init__(self, connection: "HealthVaultConnection", record: HealthRecordInfo):
        """Initialize record scoped sub-client."""
        if record is None:
            raise ArgumentError(f"{type(self).__name__} requires a record")
        super().__init__(connection)
        self.record = record

    async def _execute_for_record(
        self,
        method_name: str,
        method_version: int,
        parameters: Optional[str] = None,
    ) -> HealthServiceResponseData:
        return await self._execute(method_name, method_version, parameters, self.record.record_id)
