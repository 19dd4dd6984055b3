import json

import pytest
import yaml

from sf_ui_automation.errors import ConfigurationFileInvalidError
from sf_ui_automation.orchestration.batch_loader import load_batch, parse_batch, parse_operation
from sf_ui_automation.orchestration.operations import (
    ConfigurationBatch,
    FlowActivation,
    OperationKind,
    SessionSettings,
    SharingSettings,
)


FULL_DOCUMENT = {
    "orgWideEmails": [{"displayName": "Support", "emailAddress": "support@example.com"}],
    "flows": [
        {"flowApiName": "A", "activate": True},
        {"flowApiName": "B", "activate": False},
    ],
    "omniChannel": {"enabled": True},
    "einsteinActivityCapture": {"enabled": False},
    "sharingSettings": [
        {"objectName": "Account", "internalAccess": "Private"},
        {"objectName": "Contact", "internalAccess": "Controlled by Parent"},
    ],
    "sessionSettings": {"sessionTimeout": 60},
}


def test_operations_run_in_fixed_category_order():
    batch = parse_batch(FULL_DOCUMENT)

    assert [op.label for op in batch.ordered_operations()] == [
        "Session Settings",
        "Sharing: Account",
        "Sharing: Contact",
        "Einstein Activity Capture",
        "Omni-Channel",
        "Flow: A",
        "Flow: B",
        "Org-Wide Email: Support",
    ]
    assert len(batch) == 8
    assert batch.continue_on_error is False


def test_unset_options_stay_none():
    batch = parse_batch({"sessionSettings": {"lockSessionsToIp": True}})
    assert batch.session_settings == SessionSettings(lock_sessions_to_ip=True)
    assert batch.session_settings.session_timeout is None
    assert batch.session_settings.require_http_only is None


def test_empty_document_is_an_empty_batch():
    assert len(parse_batch({})) == 0
    assert len(parse_batch(None)) == 0


@pytest.mark.parametrize("document, path", [
    ({"flows": [{"flowApiName": "A", "activate": True}, {"flowApiName": "B"}]}, "flows[1].activate"),
    ({"flows": [{"flowApiName": "A", "activate": "yes"}]}, "flows[0].activate"),
    ({"sessionSettings": {"sessionTimeout": True}}, "sessionSettings.sessionTimeout"),
    ({"sessionSettings": {"sessionTimeout": "60"}}, "sessionSettings.sessionTimeout"),
    ({"sharingSettings": [{"objectName": "Account", "internalAccess": "Everyone"}]}, "sharingSettings[0].internalAccess"),
    ({"sharingSettings": [{"objectName": " "}]}, "sharingSettings[0].objectName"),
    ({"sharingSettings": {"objectName": "Account"}}, "sharingSettings must be a list"),
    ({"omniChannel": {"enabled": True, "enableSkills": True}}, "enableSkills"),
    ({"identityProvider": {"enabled": True}}, "identityProvider"),
    ({"continueOnError": "true"}, "continueOnError"),
])
def test_invalid_documents_name_the_offending_path(document, path):
    with pytest.raises(ConfigurationFileInvalidError) as exc_info:
        parse_batch(document)
    assert path in str(exc_info.value)


def test_non_string_keys_are_rejected(tmp_path):
    path = tmp_path / "setup.yaml"
    path.write_text("sessionSettings: {1: true, bogus: 2}\n", encoding="utf-8")

    with pytest.raises(ConfigurationFileInvalidError) as exc_info:
        load_batch(path)
    assert "sessionSettings keys must be strings" in str(exc_info.value)

    with pytest.raises(ConfigurationFileInvalidError, match="Configuration keys must be strings"):
        parse_batch({404: {}, "flows": []})


def test_document_continue_on_error_flag():
    batch = parse_batch({"continueOnError": True, "flows": []})
    assert batch.continue_on_error is True


def test_parse_operation_accepts_kind_name():
    op = parse_operation("flows", {"flowApiName": "Case_Assignment", "activate": False})
    assert op == FlowActivation("Case_Assignment", False)
    assert op.KIND is OperationKind.FLOW_ACTIVATION

    with pytest.raises(ConfigurationFileInvalidError):
        parse_operation("dataLoader", {})


def test_duplicates_are_kept_in_document_order():
    batch = parse_batch({"sharingSettings": [
        {"objectName": "Account", "internalAccess": "Private"},
        {"objectName": "Account", "internalAccess": "Public Read Only"},
    ]})
    assert [s.internal_access for s in batch.sharing_settings] == ["Private", "Public Read Only"]


def test_load_json_and_yaml_files(tmp_path):
    json_path = tmp_path / "setup.json"
    json_path.write_text(json.dumps(FULL_DOCUMENT), encoding="utf-8")
    yaml_path = tmp_path / "setup.yaml"
    yaml_path.write_text(yaml.dump(FULL_DOCUMENT), encoding="utf-8")

    assert load_batch(json_path) == load_batch(yaml_path) == parse_batch(FULL_DOCUMENT)


def test_load_rejects_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigurationFileInvalidError):
        load_batch(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text('{"flows": [', encoding="utf-8")
    with pytest.raises(ConfigurationFileInvalidError):
        load_batch(broken)

    listing = tmp_path / "list.yaml"
    listing.write_text("- sessionSettings\n", encoding="utf-8")
    with pytest.raises(ConfigurationFileInvalidError):
        load_batch(listing)


def test_batch_from_loose_operations_groups_by_category():
    batch = ConfigurationBatch.from_operations([
        FlowActivation("A", True),
        SharingSettings("Account", internal_access="Private"),
        SessionSettings(session_timeout=30),
    ])
    assert [op.label for op in batch.ordered_operations()] == [
        "Session Settings", "Sharing: Account", "Flow: A",
    ]
