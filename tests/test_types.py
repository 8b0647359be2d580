import json

import pytest

from tagserver.types import (
    ClientInfo,
    Condition,
    CreatedTransformation,
    CreatedVersion,
    Parameter,
    PublishedVersion,
    SetupTagInput,
    TagInput,
    TeardownTagInput,
    TriggerInput,
    VersionInput,
    WorkspaceStatus,
    parse_conditions,
    parse_parameters,
    to_json,
)


def test_parameter_round_trip_nested():
    data = {
        "type": "list",
        "key": "eventParameters",
        "list": [
            {
                "type": "map",
                "key": "",
                "map": [
                    {"type": "template", "key": "name", "value": "currency"},
                    {"type": "template", "key": "value", "value": "EUR"},
                ],
            }
        ],
    }
    param = Parameter.from_dict(data)
    assert param.list_[0].map_[1].value == "EUR"
    assert param.to_dict() == data


def test_parameter_omits_empty_fields():
    param = Parameter(type="boolean", key="sendEcommerceData")
    assert param.to_dict() == {"type": "boolean", "key": "sendEcommerceData"}


def test_parameter_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        Parameter.from_dict([1, 2])


def test_parameter_from_dict_rejects_wrong_field_type():
    with pytest.raises(ValueError):
        Parameter.from_dict({"type": 5, "key": "x"})


def test_condition_keeps_parameter_key_and_negate():
    cond = Condition.from_dict(
        {
            "type": "contains",
            "negate": True,
            "parameter": [
                {"type": "template", "key": "arg0", "value": "{{Page URL}}"},
                {"type": "template", "key": "arg1", "value": "/checkout"},
            ],
        }
    )
    out = cond.to_dict()
    assert out["negate"] is True
    assert out["parameter"][1]["value"] == "/checkout"
    assert Condition.from_dict(out) == cond


def test_condition_without_negate_omits_it_but_keeps_parameter():
    out = Condition(type="equals").to_dict()
    assert "negate" not in out
    assert out["parameter"] == []


def test_setup_and_teardown_from_dict():
    setup = SetupTagInput.from_dict({"tagName": "Base", "stopOnSetupFailure": True})
    teardown = TeardownTagInput.from_dict({"tagName": "Cleanup"})
    assert setup.tag_name == "Base" and setup.stop_on_setup_failure is True
    assert teardown.tag_name == "Cleanup" and teardown.stop_teardown_on_failure is False
    assert to_json(teardown) == {"tagName": "Cleanup"}


def test_tag_input_hides_flag_fields():
    tag = TagInput(
        name="GA4",
        type="gaawe",
        firing_trigger_id=["7"],
        has_parameter=True,
        has_paused=True,
        clear_setup_tag=True,
    )
    out = to_json(tag)
    assert out == {"name": "GA4", "type": "gaawe", "firingTriggerId": ["7"]}


def test_trigger_input_event_name_omitted_when_none():
    trig = TriggerInput(name="t", type="customEvent")
    assert "eventName" not in to_json(trig)
    trig.event_name = Parameter(type="template", key="arg0", value="purchase")
    assert to_json(trig)["eventName"]["value"] == "purchase"


def test_version_json_keys():
    created = CreatedVersion(version_id="12", name="v", path="p")
    published = PublishedVersion(version_id="12", name="v", path="p")
    assert to_json(created)["containerVersionId"] == "12"
    assert to_json(created) == to_json(published)
    assert to_json(VersionInput()) == {}


def test_client_info_priority_omitted_when_zero():
    info = ClientInfo(client_id="3", name="GA4", type="gaaw_client", path="p", fingerprint="f")
    out = to_json(info)
    assert "priority" not in out
    assert "parameter" not in out
    info.priority = 5
    assert to_json(info)["priority"] == 5


def test_created_transformation_type_omitempty():
    out = to_json(CreatedTransformation(transformation_id="1", name="n", path="p"))
    assert "type" not in out
    assert out["transformationId"] == "1"


def test_workspace_status_from_response():
    status = WorkspaceStatus.from_response(
        {"workspaceChange": [{}, {}], "mergeConflict": [{}]}
    )
    assert status.has_changes and status.has_conflicts
    assert status.change_count == 2
    assert status.conflict_count == 1


def test_workspace_status_empty_response():
    status = WorkspaceStatus.from_response({})
    assert status == WorkspaceStatus()
    assert to_json(status) == {
        "hasChanges": False,
        "hasConflicts": False,
        "changeCount": 0,
        "conflictCount": 0,
    }


def test_parse_parameters_round_trip():
    raw = [{"type": "template", "key": "measurementId", "value": "G-TEST"}]
    params = parse_parameters(json.dumps(raw))
    assert [p.to_dict() for p in params] == raw


def test_parse_parameters_null_is_empty():
    assert parse_parameters("null") == []


@pytest.mark.parametrize("text", ["{not json", '{"type": "x"}', "[1]"])
def test_parse_parameters_invalid(text):
    with pytest.raises(ValueError):
        parse_parameters(text)


def test_parse_conditions():
    conds = parse_conditions('[{"type": "equals", "parameter": []}]')
    assert conds == [Condition(type="equals")]
    with pytest.raises(ValueError):
        parse_conditions('"equals"')