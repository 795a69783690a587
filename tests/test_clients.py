"""Tests for the sub-clients, run against the fake health service."""

import json
from datetime import datetime, timezone
from uuid import UUID
from xml.sax.saxutils import escape

import pytest

from healthvault.clients import thing_from_item
from healthvault.enums import ActionPlanWindowType
from healthvault.exceptions import ArgumentError, ResponseFormatError, VersionMismatchError
from healthvault.item_types import CodableValue, GroupMembership, parse_item
from healthvault.models import DateRange, Thing, ThingKey, VocabularyKey
from healthvault.schema import ActionPlan, ActionPlanTask

from .conftest import RECORD_ID

pytestmark = pytest.mark.asyncio

TYPE_ID = UUID("66d1f2b6-1b0f-4a0e-a3a6-5b3e0d1f9e21")
THING_ID = UUID("0f0f0f0f-1111-2222-3333-444444444444")
STAMP = UUID("abababab-1111-2222-3333-444444444444")


# ============================================================================
# PLATFORM
# ============================================================================


async def test_get_service_definition_is_anonymous(connection, fake_service):
    fake_service.info["GetServiceDefinition"] = (
        "<platform><url>https://platform.test/wildcat.ashx</url><version>1.0</version></platform>"
        "<shell><url>https://account.test/</url></shell>"
    )

    definition = await connection.platform_client.get_service_definition()

    assert definition.platform_version == "1.0"
    assert definition.shell_url == "https://account.test/"
    assert fake_service.auth_calls == 0
    assert fake_service.calls[0]["version"] == "2"


async def test_select_instance(authenticated, fake_service):
    fake_service.info["SelectInstance"] = (
        "<selected-instance><id>2</id><name>EU</name><description>Europe</description>"
        "<url>https://platform.eu.test/wildcat.ashx</url></selected-instance>"
    )

    instance = await authenticated.platform_client.select_instance("DE", "BY")

    assert instance.name == "EU"
    info = fake_service.calls_to("SelectInstance")[0]["root"].find("info")
    assert info.findtext("preferred-location/location/country") == "DE"
    assert info.findtext("preferred-location/location/state-province") == "BY"


async def test_select_instance_without_result(authenticated):
    with pytest.raises(ResponseFormatError):
        await authenticated.platform_client.select_instance("DE")


async def test_get_thing_type_names(authenticated, fake_service):
    fake_service.info["GetThingType"] = f"<thing-type><id>{TYPE_ID}</id><name>Group membership</name></thing-type>"

    names = await authenticated.platform_client.get_thing_type_names([TYPE_ID])

    assert names == {TYPE_ID: "Group membership"}
    info = fake_service.calls_to("GetThingType")[0]["root"].find("info")
    assert info.findtext("id") == str(TYPE_ID)
    assert info.findtext("section") == "core"


async def test_get_thing_type_names_requires_ids(authenticated):
    with pytest.raises(ArgumentError):
        await authenticated.platform_client.get_thing_type_names([])


async def test_get_thing_type_names_without_type_id(authenticated, fake_service):
    fake_service.info["GetThingType"] = "<thing-type><name>Nameless</name></thing-type>"

    with pytest.raises(ResponseFormatError):
        await authenticated.platform_client.get_thing_type_names([TYPE_ID])


# ============================================================================
# PERSON
# ============================================================================


async def test_get_person_info(authenticated, fake_service):
    fake_service.info["GetPersonInfo"] = (
        "<person-info><person-id>aaaaaaaa-0000-0000-0000-000000000001</person-id><name>Jane</name>"
        f"<selected-record-id>{RECORD_ID}</selected-record-id>"
        f'<record id="{RECORD_ID}" rel-name="Self">Jane</record></person-info>'
    )

    person = await authenticated.person_client.get_person_info()

    assert person.name == "Jane"
    assert person.selected_record.record_id == RECORD_ID


async def test_get_person_info_missing(authenticated):
    with pytest.raises(ResponseFormatError):
        await authenticated.person_client.get_person_info()


async def test_get_authorized_records(authenticated, fake_service):
    fake_service.info["GetAuthorizedRecords"] = f'<record id="{RECORD_ID}">Jane</record>'

    records = await authenticated.person_client.get_authorized_records([RECORD_ID])

    assert [r.record_id for r in records] == [RECORD_ID]


async def test_record_without_id_is_response_format_error(authenticated, fake_service):
    fake_service.info["GetAuthorizedRecords"] = "<record>Jane</record>"

    with pytest.raises(ResponseFormatError):
        await authenticated.person_client.get_authorized_records([RECORD_ID])


async def test_person_info_with_invalid_person_id(authenticated, fake_service):
    fake_service.info["GetPersonInfo"] = "<person-info><person-id>not-a-uuid</person-id></person-info>"

    with pytest.raises(ResponseFormatError):
        await authenticated.person_client.get_person_info()


async def test_application_settings(authenticated, fake_service):
    await authenticated.person_client.set_application_settings("<theme>dark</theme>")

    info = fake_service.calls_to("SetApplicationSettings")[0]["root"].find("info")
    assert info.findtext("app-settings/theme") == "dark"

    fake_service.info["GetApplicationSettings"] = "<app-settings><theme>dark</theme></app-settings>"
    settings = await authenticated.person_client.get_application_settings()
    assert settings.findtext("theme") == "dark"


# ============================================================================
# VOCABULARY
# ============================================================================


async def test_get_vocabulary_keys(authenticated, fake_service):
    fake_service.info["GetVocabulary"] = (
        "<vocabulary-key-info><vocabulary-key><name>thing-types</name><family>wc</family>"
        "<version>1</version></vocabulary-key></vocabulary-key-info>"
    )

    keys = await authenticated.vocabulary_client.get_vocabulary_keys()

    assert keys == [VocabularyKey("thing-types", "wc", "1")]


async def test_get_vocabulary(authenticated, fake_service):
    fake_service.info["GetVocabulary"] = (
        "<vocabulary><name>units</name><family>wc</family><culture>en</culture>"
        "<code-item><code-value>kg</code-value><display-text>Kilograms</display-text></code-item>"
        "</vocabulary>"
    )

    vocabulary = await authenticated.vocabulary_client.get_vocabulary(VocabularyKey("units", "wc"))

    assert vocabulary.culture == "en"
    assert [i.code for i in vocabulary.items] == ["kg"]
    info = fake_service.calls_to("GetVocabulary")[0]["root"].find("info")
    assert info.findtext("vocabulary-parameters/vocabulary-key/name") == "units"


async def test_search_vocabulary(authenticated, fake_service):
    fake_service.info["SearchVocabulary"] = (
        "<code-set-result><code-item><code-value>1</code-value>"
        "<display-text>Aspirin</display-text></code-item></code-set-result>"
    )

    items = await authenticated.vocabulary_client.search_vocabulary("asp", max_results=5)

    assert [i.display_text for i in items] == ["Aspirin"]
    search = fake_service.calls_to("SearchVocabulary")[0]["root"].find("info/text-search-parameters")
    assert search.find("search-string").get("search-mode") == "Contains"
    assert search.findtext("max-results") == "5"


@pytest.mark.parametrize("value, max_results", [("", 5), ("  ", 5), ("asp", 0), ("asp", 501)])
async def test_search_vocabulary_validates_arguments(authenticated, fake_service, value, max_results):
    with pytest.raises(ArgumentError):
        await authenticated.vocabulary_client.search_vocabulary(value, max_results=max_results)
    assert fake_service.calls_to("SearchVocabulary") == []


# ============================================================================
# THINGS
# ============================================================================


async def test_get_things_passes_record_and_filter(authenticated, fake_service, record):
    fake_service.info["GetThings"] = (
        f'<group><thing><thing-id version-stamp="{STAMP}">{THING_ID}</thing-id>'
        f"<type-id>{TYPE_ID}</type-id><data-xml><group-membership><name><text>Employer</text></name>"
        "<value>E-1</value></group-membership></data-xml></thing></group>"
    )

    things = await authenticated.get_thing_client(record).get_things(TYPE_ID, max_full=10)

    assert things[0].key == ThingKey(THING_ID, STAMP)
    membership = parse_item("group-membership", things[0].data())
    assert membership.value == "E-1"
    call = fake_service.calls_to("GetThings")[0]
    assert call["record_id"] == str(RECORD_ID)
    assert call["version"] == "3"
    group = call["root"].find("info/group")
    assert group.get("max-full") == "10"
    assert group.findtext("filter/type-id") == str(TYPE_ID)


@pytest.mark.parametrize(
    "payload",
    [
        "<group><thing><data-xml/></thing></group>",
        "<group><thing><type-id>bad</type-id></thing></group>",
        f"<group><thing><thing-id/><type-id>{TYPE_ID}</type-id></thing></group>",
    ],
)
async def test_malformed_things_are_response_format_errors(authenticated, fake_service, record, payload):
    fake_service.info["GetThings"] = payload

    with pytest.raises(ResponseFormatError):
        await authenticated.get_thing_client(record).get_things()


async def test_put_things_with_invalid_key(authenticated, fake_service, record):
    fake_service.info["PutThings"] = "<thing-id>not-a-uuid</thing-id>"
    thing = thing_from_item(TYPE_ID, GroupMembership(CodableValue("Employer"), "E-1"), "group-membership")

    with pytest.raises(ResponseFormatError):
        await authenticated.get_thing_client(record).create_new_things([thing])


async def test_create_new_things(authenticated, fake_service, record):
    fake_service.info["PutThings"] = f'<thing-id version-stamp="{STAMP}">{THING_ID}</thing-id>'
    thing = thing_from_item(TYPE_ID, GroupMembership(CodableValue("Employer"), "E-1"), "group-membership")

    keys = await authenticated.get_thing_client(record).create_new_things([thing])

    assert keys == [ThingKey(THING_ID, STAMP)]
    sent = fake_service.calls_to("PutThings")[0]["root"].find("info/thing")
    assert sent.find("thing-id") is None
    assert sent.findtext("data-xml/group-membership/value") == "E-1"


async def test_update_things_requires_key(authenticated, record):
    thing = Thing(type_id=TYPE_ID, data_xml="<x/>")

    with pytest.raises(ArgumentError):
        await authenticated.get_thing_client(record).update_things([thing])


async def test_update_conflict_is_version_mismatch(authenticated, fake_service, record):
    fake_service.script["PutThings"].append(18)
    thing = Thing(type_id=TYPE_ID, key=ThingKey(THING_ID, STAMP), data_xml="<x/>")

    with pytest.raises(VersionMismatchError):
        await authenticated.get_thing_client(record).update_things([thing])

    sent = fake_service.calls_to("PutThings")[0]["root"].find("info/thing/thing-id")
    assert sent.get("version-stamp") == str(STAMP)


async def test_remove_things(authenticated, fake_service, record):
    await authenticated.get_thing_client(record).remove_things([ThingKey(THING_ID, STAMP)])

    call = fake_service.calls_to("RemoveThings")[0]
    assert call["root"].findtext("info/thing-id") == str(THING_ID)
    assert call["record_id"] == str(RECORD_ID)


# ============================================================================
# ACTION PLANS
# ============================================================================


async def test_get_action_plans(authenticated, fake_service, record):
    payload = {
        "plans": [
            {
                "id": "plan-1",
                "name": "Sleep better",
                "associatedTasks": [
                    {
                        "name": "Bed by 10",
                        "frequencyTaskCompletionMetrics": {"windowType": "Daily", "occurrenceCount": 1},
                    }
                ],
            }
        ]
    }
    fake_service.info["GetActionPlans"] = escape(json.dumps(payload))

    plans = await authenticated.get_action_plan_client(record).get_action_plans()

    metrics = plans[0].associated_tasks[0].frequency_task_completion_metrics
    assert plans[0].name == "Sleep better"
    assert metrics.window_type is ActionPlanWindowType.DAILY
    assert metrics.occurrence_count == 1


async def test_unknown_window_type_reads_as_unknown(authenticated, fake_service, record):
    payload = {"plans": [{"name": "p", "associatedTasks": [
        {"name": "t", "frequencyTaskCompletionMetrics": {"windowType": "Monthly"}}
    ]}]}
    fake_service.info["GetActionPlans"] = escape(json.dumps(payload))

    plans = await authenticated.get_action_plan_client(record).get_action_plans()

    metrics = plans[0].associated_tasks[0].frequency_task_completion_metrics
    assert metrics.window_type is ActionPlanWindowType.UNKNOWN


async def test_create_action_plan_sends_camel_case_json(authenticated, fake_service, record):
    fake_service.info["CreateActionPlan"] = escape(json.dumps({"id": "plan-9", "name": "Walk"}))
    plan = ActionPlan(name="Walk", associated_tasks=[ActionPlanTask(name="Walk 30 minutes", short_description="Daily walk")])

    created = await authenticated.get_action_plan_client(record).create_action_plan(plan)

    assert created.id == "plan-9"
    sent = json.loads(fake_service.calls_to("CreateActionPlan")[0]["root"].findtext("info"))
    assert sent["associatedTasks"][0]["shortDescription"] == "Daily walk"
    assert "id" not in sent


async def test_delete_action_plan(authenticated, fake_service, record):
    await authenticated.get_action_plan_client(record).delete_action_plan("plan-1")

    sent = json.loads(fake_service.calls_to("DeleteActionPlan")[0]["root"].findtext("info"))
    assert sent == {"actionPlanId": "plan-1"}


async def test_get_adherence(authenticated, fake_service, record):
    fake_service.info["GetActionPlanAdherence"] = escape(json.dumps({
        "startTime": "2024-01-01T00:00:00Z",
        "endTime": "2024-01-08T00:00:00Z",
        "taskResults": [{"taskId": "t1", "completedOccurrences": 5}],
    }))
    date_range = DateRange(
        datetime(2024, 1, 1, tzinfo=timezone.utc),
        datetime(2024, 1, 8, tzinfo=timezone.utc),
    )

    adherence = await authenticated.get_action_plan_client(record).get_adherence(date_range, "plan-1")

    assert adherence.task_results[0].completed_occurrences == 5
    sent = json.loads(fake_service.calls_to("GetActionPlanAdherence")[0]["root"].findtext("info"))
    assert sent == {
        "startTime": "2024-01-01T00:00:00.000Z",
        "endTime": "2024-01-08T00:00:00.000Z",
        "actionPlanId": "plan-1",
    }


async def test_invalid_action_plan_document(authenticated, fake_service, record):
    fake_service.info["CreateActionPlan"] = escape(json.dumps({"id": "x"}))

    with pytest.raises(ResponseFormatError):
        await authenticated.get_action_plan_client(record).create_action_plan(ActionPlan(name="Walk"))
