"""Tests for value models parsed from responses and DateRange."""

from datetime import datetime, timedelta, timezone
from uuid import UUID
from xml.etree import ElementTree

import pytest

from healthvault.exceptions import ArgumentError
from healthvault.models import (
    DateRange,
    PersonInfo,
    ServiceDefinition,
    SessionCredential,
    Thing,
    ThingKey,
)

from .conftest import RECORD_ID

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_date_range_keeps_bounds():
    date_range = DateRange(START, START + timedelta(days=7))

    assert date_range.start == START
    assert date_range.end - date_range.start == timedelta(days=7)


def test_date_range_allows_empty_range():
    assert DateRange(START, START).start == START


def test_date_range_rejects_inverted_bounds():
    with pytest.raises(ArgumentError):
        DateRange(START, START - timedelta(seconds=1))


def test_date_range_rejects_mixed_time_zone_awareness():
    with pytest.raises(ArgumentError):
        DateRange(datetime(2024, 1, 1), START + timedelta(days=1))
    with pytest.raises(ArgumentError):
        DateRange(START, datetime(2024, 1, 2))


def test_date_range_is_read_only():
    date_range = DateRange(START, START)

    with pytest.raises(AttributeError):
        date_range.start = START - timedelta(days=1)


def test_session_credential_repr_hides_secrets():
    credential = SessionCredential(token="secret-token", shared_secret="c2VjcmV0", issued_at=START)

    assert "secret-token" not in repr(credential)
    assert "c2VjcmV0" not in repr(credential)
    assert credential.secret_bytes == b"secret"


def test_person_info_from_xml():
    element = ElementTree.fromstring(
        "<person-info>"
        "<person-id>aaaaaaaa-0000-0000-0000-000000000001</person-id>"
        "<name>Jane Doe</name>"
        f"<selected-record-id>{RECORD_ID}</selected-record-id>"
        f'<record id="{RECORD_ID}" rel-name="Self" display-name="Jane">Jane Doe</record>'
        "</person-info>"
    )

    person = PersonInfo.from_xml(element)

    assert person.person_id == UUID("aaaaaaaa-0000-0000-0000-000000000001")
    assert person.selected_record.record_id == RECORD_ID
    assert person.selected_record.relationship == "Self"
    assert person.selected_record.name == "Jane Doe"


def test_service_definition_from_xml():
    element = ElementTree.fromstring(
        "<info>"
        "<platform><url>https://platform.test/wildcat.ashx</url><version>1.2.3</version></platform>"
        "<shell><url>https://account.test/</url></shell>"
        "<instances><instance><id>1</id><name>US</name><description>United States</description>"
        "<url>https://platform.test/wildcat.ashx</url></instance></instances>"
        "</info>"
    )

    definition = ServiceDefinition.from_xml(element)

    assert definition.platform_version == "1.2.3"
    assert definition.shell_url == "https://account.test/"
    assert [i.name for i in definition.instances] == ["US"]


def test_thing_from_xml_keeps_payload():
    element = ElementTree.fromstring(
        "<thing>"
        '<thing-id version-stamp="bbbbbbbb-0000-0000-0000-000000000002">'
        "cccccccc-0000-0000-0000-000000000003</thing-id>"
        '<type-id name="Group membership">dddddddd-0000-0000-0000-000000000004</type-id>'
        "<eff-date>2024-01-01T00:00:00Z</eff-date>"
        "<data-xml><group-membership><value>42</value></group-membership><common/></data-xml>"
        "</thing>"
    )

    thing = Thing.from_xml(element)

    assert thing.key == ThingKey(
        UUID("cccccccc-0000-0000-0000-000000000003"),
        UUID("bbbbbbbb-0000-0000-0000-000000000002"),
    )
    assert thing.type_name == "Group membership"
    assert thing.data().findtext("value") == "42"
    assert thing.effective_date == "2024-01-01T00:00:00Z"
