"""
Data Models

Responsibilities:
- Service instance and session credential values
- Method call request and response values
- Person, record, vocabulary and thing values parsed from responses
- DateRange value object

All models are frozen dataclasses; state changes happen by replacing a
whole value, never by mutating one.
"""

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID
from xml.etree import ElementTree

from .exceptions import ArgumentError, ResponseFormatError
from .utils import child_text, parse_uuid


@dataclass(frozen=True)
class ServiceInstance:
    """
    A resolved service endpoint set.

    Attributes:
        instance_id: Instance identifier (e.g. "1")
        name: Short instance name (e.g. "US")
        description: Human readable description
        health_service_url: URL method calls are posted to
        shell_url: Base URL of the Shell web site, if known
    """
    instance_id: str
    name: str
    description: str
    health_service_url: str
    shell_url: Optional[str] = None

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'ServiceInstance':
        """Create instance from an <instance> element."""
        return cls(
            instance_id=child_text(element, "id", ""),
            name=child_text(element, "name", ""),
            description=child_text(element, "description", ""),
            health_service_url=child_text(element, "url", ""),
            shell_url=child_text(element, "shell-url"),
        )


@dataclass(frozen=True)
class SessionCredential:
    """
    Short-lived token and shared secret authorizing method calls.

    Attributes:
        token: Authenticated session token
        shared_secret: Base64 encoded secret used to sign requests
        issued_at: When the credential was obtained
        expires_at: Expiry reported by the service, if any
    """
    token: str
    shared_secret: str
    issued_at: datetime
    expires_at: Optional[datetime] = None

    @property
    def secret_bytes(self) -> bytes:
        """Decoded shared secret."""
        try:
            return base64.b64decode(self.shared_secret, validate=True)
        except binascii.Error:
            return self.shared_secret.encode("utf-8")

    def __repr__(self) -> str:
        return f"SessionCredential(issued_at={self.issued_at!r}, expires_at={self.expires_at!r})"


@dataclass(frozen=True)
class MethodCallRequest:
    """
    A single method call, built fresh for every call.

    Attributes:
        method_name: Name of the remote method
        method_version: Version of the remote method (>= 1)
        parameters: Serialized XML fragment placed inside <info>
        record_id: Record the call is scoped to
    """
    method_name: str
    method_version: int
    parameters: Optional[str] = None
    record_id: Optional[UUID] = None

    def __post_init__(self):
        if not self.method_name:
            raise ArgumentError("method_name must not be empty")
        if not isinstance(self.method_version, int) or self.method_version < 1:
            raise ArgumentError(f"method_version must be >= 1, got {self.method_version!r}")


@dataclass(frozen=True)
class HealthServiceResponseData:
    """
    Result of a method call.

    Attributes:
        status_code: Raw status code (0 on success)
        info_xml: Serialized <info> payload with namespaces removed, if any
        error_text: Error message returned with a non-zero status
        response_xml: Raw response document
    """
    status_code: int
    info_xml: Optional[str] = None
    error_text: Optional[str] = None
    response_xml: str = ""

    def info(self) -> Optional[ElementTree.Element]:
        """Parse the <info> payload; every call returns a fresh tree."""
        if self.info_xml is None:
            return None
        return ElementTree.fromstring(self.info_xml)

    @property
    def info_text(self) -> str:
        """Text content of <info>, used by the JSON based clients."""
        info = self.info()
        if info is None:
            return ""
        return "".join(info.itertext()).strip()


@dataclass(frozen=True)
class DateRange:
    """
    The range of time between two dates.

    Raises:
        ArgumentError: If start is later than end, or only one of them
            carries a time zone
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ArgumentError(
                "DateRange start and end must both be naive or both be time zone aware",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )
        if self.start > self.end:
            raise ArgumentError(
                "DateRange start must not be later than end",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )


@dataclass(frozen=True)
class HealthRecordInfo:
    """
    A health record the authenticated person can access.

    Attributes:
        record_id: Record identifier
        name: Record name
        relationship: Relationship of the person to the record owner
        display_name: Display name of the record
    """
    record_id: UUID
    name: str = ""
    relationship: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'HealthRecordInfo':
        """Create instance from a <record> element."""
        return cls(
            record_id=parse_uuid(element.get("id"), "record id"),
            name=(element.text or "").strip(),
            relationship=element.get("rel-name"),
            display_name=element.get("display-name"),
        )


@dataclass(frozen=True)
class PersonInfo:
    """
    The authenticated person and the records they can access.

    Attributes:
        person_id: Person identifier
        name: Person name
        selected_record_id: Record selected during authorization
        records: Accessible records
    """
    person_id: UUID
    name: str
    selected_record_id: Optional[UUID] = None
    records: Tuple[HealthRecordInfo, ...] = ()

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'PersonInfo':
        """Create instance from a <person-info> element."""
        selected = child_text(element, "selected-record-id")
        return cls(
            person_id=parse_uuid(child_text(element, "person-id"), "person id"),
            name=child_text(element, "name", ""),
            selected_record_id=parse_uuid(selected, "selected record id") if selected else None,
            records=tuple(HealthRecordInfo.from_xml(r) for r in element.findall("record")),
        )

    @property
    def selected_record(self) -> Optional[HealthRecordInfo]:
        for record in self.records:
            if record.record_id == self.selected_record_id:
                return record
        return None


@dataclass(frozen=True)
class ServiceDefinition:
    """
    Platform information returned by GetServiceDefinition.

    Attributes:
        platform_url: Default health service URL
        platform_version: Platform version string
        shell_url: Default Shell URL
        instances: Known service instances
    """
    platform_url: str
    platform_version: str
    shell_url: Optional[str] = None
    instances: Tuple[ServiceInstance, ...] = ()

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'ServiceDefinition':
        """Create instance from the GetServiceDefinition <info> element."""
        return cls(
            platform_url=child_text(element, "platform/url", ""),
            platform_version=child_text(element, "platform/version", ""),
            shell_url=child_text(element, "shell/url"),
            instances=tuple(
                ServiceInstance.from_xml(i) for i in element.findall("instances/instance")
            ),
        )


@dataclass(frozen=True)
class VocabularyKey:
    """Identifies a vocabulary by name, family and version."""
    name: str
    family: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'VocabularyKey':
        return cls(
            name=child_text(element, "name", ""),
            family=child_text(element, "family"),
            version=child_text(element, "version"),
            description=child_text(element, "description"),
        )


@dataclass(frozen=True)
class VocabularyItem:
    """One coded entry in a vocabulary."""
    code: str
    display_text: str
    abbreviation: Optional[str] = None

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'VocabularyItem':
        return cls(
            code=child_text(element, "code-value", ""),
            display_text=child_text(element, "display-text", ""),
            abbreviation=child_text(element, "abbreviation-text"),
        )


@dataclass(frozen=True)
class Vocabulary:
    """A vocabulary and its items."""
    key: VocabularyKey
    culture: Optional[str] = None
    items: Tuple[VocabularyItem, ...] = ()

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'Vocabulary':
        return cls(
            key=VocabularyKey.from_xml(element),
            culture=child_text(element, "culture"),
            items=tuple(VocabularyItem.from_xml(i) for i in element.findall("code-item")),
        )


@dataclass(frozen=True)
class ThingKey:
    """Identifies one version of a thing."""
    thing_id: UUID
    version_stamp: Optional[UUID] = None

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'ThingKey':
        stamp = element.get("version-stamp")
        return cls(
            thing_id=parse_uuid(element.text, "thing id"),
            version_stamp=parse_uuid(stamp, "version stamp") if stamp else None,
        )

    def to_xml(self, node_name: str = "thing-id") -> ElementTree.Element:
        element = ElementTree.Element(node_name)
        if self.version_stamp is not None:
            element.set("version-stamp", str(self.version_stamp))
        element.text = str(self.thing_id)
        return element


@dataclass(frozen=True)
class Thing:
    """
    A typed clinical data item stored in a record.

    The type specific payload is kept as the serialized children of
    <data-xml>; item type models parse it on demand.

    Attributes:
        type_id: Thing type identifier
        key: Thing key, None until the thing has been stored
        type_name: Thing type name, when returned by the service
        data_xml: Serialized type specific payload
    """
    type_id: UUID
    key: Optional[ThingKey] = None
    type_name: Optional[str] = None
    data_xml: Optional[str] = None
    effective_date: Optional[str] = None

    def data(self) -> Optional[ElementTree.Element]:
        """Parse the type specific payload (the first child of <data-xml>)."""
        if not self.data_xml:
            return None
        return ElementTree.fromstring(self.data_xml)

    @classmethod
    def from_xml(cls, element: ElementTree.Element) -> 'Thing':
        """
        Create instance from a <thing> element.

        Raises:
            ResponseFormatError: If the type id or thing key is missing or invalid
        """
        key_element = element.find("thing-id")
        type_element = element.find("type-id")
        if type_element is None:
            raise ResponseFormatError("Thing has no <type-id>")
        data_element = element.find("data-xml")
        payload = None
        if data_element is not None:
            children = list(data_element)
            if children:
                payload = ElementTree.tostring(children[0], encoding="unicode").strip()
        return cls(
            type_id=parse_uuid(type_element.text, "thing type id"),
            key=ThingKey.from_xml(key_element) if key_element is not None else None,
            type_name=type_element.get("name"),
            data_xml=payload,
            effective_date=child_text(element, "eff-date"),
        )
