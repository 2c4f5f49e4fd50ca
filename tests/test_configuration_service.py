# tests/test_configuration_service.py

import pytest

from edumanage.errors import ConflictError, NotEditableError, NotFoundError, ValidationError
from edumanage.services.configuration_service import ConfigurationService


@pytest.fixture
def admin_id(app_context, seeded):
    return seeded["_id"]


def test_each_successful_mutation_bumps_version_by_one(admin_id, mongo_db):
    ConfigurationService.update("assignment_late_penalty", {"value": 20}, admin_id)
    ConfigurationService.set_value("assignment_late_penalty", 30, admin_id)
    ConfigurationService.bulk_update([{"key": "assignment_late_penalty", "value": 40}], admin_id)
    ConfigurationService.reset("assignment_late_penalty", admin_id)

    doc = mongo_db.configurations.find_one({"key": "assignment_late_penalty"})
    assert doc["version"] == 5
    assert doc["value"] == 10


def test_rejected_mutation_leaves_entry_untouched(admin_id, mongo_db):
    with pytest.raises(ValidationError) as excinfo:
        ConfigurationService.update("assignment_late_penalty", {"value": 150}, admin_id)

    assert excinfo.value.errors == ["Value must be at most 100"]
    doc = mongo_db.configurations.find_one({"key": "assignment_late_penalty"})
    assert doc["value"] == 10
    assert doc["version"] == 1


def test_update_description_only_still_bumps_version(admin_id):
    updated = ConfigurationService.update("site_name", {"description": "  Brand name  "}, admin_id)

    assert updated["description"] == "Brand name"
    assert updated["value"] == "EduManage"
    assert updated["version"] == 2


def test_update_with_stale_expected_version_conflicts(admin_id):
    ConfigurationService.update("site_name", {"value": "Campus"}, admin_id)

    with pytest.raises(ConflictError):
        ConfigurationService.update("site_name", {"value": "Other", "expectedVersion": 1}, admin_id)

    assert ConfigurationService.update("site_name", {"value": "Other", "expectedVersion": 2}, admin_id)["version"] == 3


def test_set_value_unknown_key(admin_id):
    with pytest.raises(NotFoundError):
        ConfigurationService.set_value("nope", 1, admin_id)


def test_set_value_aggregates_messages(admin_id):
    with pytest.raises(ValidationError) as excinfo:
        ConfigurationService.set_value("theme_primary_color", "blue", admin_id)

    assert "Value does not match required pattern" in str(excinfo.value)


def test_set_value_updates_description_and_tags(admin_id):
    entry = ConfigurationService.set_value("site_name", "Campus", admin_id,
                                           description="Brand", tags=["brand"])

    assert entry.value == "Campus"
    assert entry.description == "Brand"
    assert entry.tags == ["brand"]
    assert entry.version == 2


def test_get_by_category_public_only_unless_asked(admin_id):
    public = ConfigurationService.get_by_category("security")
    everything = ConfigurationService.get_by_category("security", include_private=True)

    assert [e.key for e in public] == ["password_min_length"]
    assert [e.key for e in everything] == ["max_login_attempts", "password_min_length", "session_timeout"]


def test_get_value_returns_formatted_value_or_default(admin_id):
    assert ConfigurationService.get_value("max_course_capacity") == 50
    assert ConfigurationService.get_value("missing_key", "fallback") == "fallback"


def test_duplicate_create_conflicts_and_keeps_original(admin_id, mongo_db):
    with pytest.raises(ConflictError):
        ConfigurationService.create({
            "key": "site_name",
            "value": "Other",
            "type": "string",
            "category": "system",
            "description": "dup",
        }, admin_id)

    doc = mongo_db.configurations.find_one({"key": "site_name"})
    assert doc["value"] == "EduManage"
    assert mongo_db.configurations.count_documents({"key": "site_name"}) == 1


def test_create_reports_every_payload_error(admin_id):
    with pytest.raises(ValidationError) as excinfo:
        ConfigurationService.create({"type": "color", "category": "misc"}, admin_id)

    assert excinfo.value.errors == [
        "Key is required",
        "Value is required",
        "Invalid type",
        "Invalid category",
        "Description is required",
    ]


def test_create_validates_value_against_rules(admin_id):
    with pytest.raises(ValidationError):
        ConfigurationService.create({
            "key": "quiz_max_attempts",
            "value": 0,
            "type": "number",
            "category": "assignment",
            "description": "Attempts per quiz",
            "validation": {"min": 1, "max": 5},
        }, admin_id)


def test_reset_without_default_fails(admin_id):
    ConfigurationService.create({
        "key": "welcome_banner",
        "value": "Hello",
        "type": "string",
        "category": "ui",
        "description": "Banner text",
    }, admin_id)

    with pytest.raises(ValidationError) as excinfo:
        ConfigurationService.reset("welcome_banner", admin_id)

    assert str(excinfo.value) == "No default value available for this configuration"


def test_reset_trusts_default_even_if_rules_changed(admin_id, mongo_db):
    mongo_db.configurations.update_one(
        {"key": "assignment_late_penalty"}, {"$set": {"validation.min": 50}})

    reset = ConfigurationService.reset("assignment_late_penalty", admin_id)

    assert reset["value"] == 10
    assert reset["version"] == 2


def test_not_editable_entries_refuse_update_and_delete(app_context, admin_user, locked_entry):
    with pytest.raises(NotEditableError):
        ConfigurationService.update(locked_entry, {"value": "x"}, admin_user["_id"])
    with pytest.raises(NotEditableError):
        ConfigurationService.delete(locked_entry, admin_user["_id"])


def test_not_editable_entries_can_still_be_reset(app_context, admin_user, locked_entry):
    assert ConfigurationService.reset(locked_entry, admin_user["_id"])["version"] == 2


def test_bulk_update_is_independent_per_item(admin_id, locked_entry):
    result = ConfigurationService.bulk_update([
        {"key": "max_course_capacity", "value": 80},
        {"key": "does_not_exist", "value": 1},
        {"key": "attendance_required_percentage", "value": 120},
        {"key": locked_entry, "value": "other"},
    ], admin_id)

    assert result["successful"] == 1
    assert result["failed"] == 3
    assert result["results"] == [{"key": "max_course_capacity", "success": True, "version": 2}]
    assert [e["key"] for e in result["errors"]] == [
        "does_not_exist", "attendance_required_percentage", locked_entry]
    assert result["errors"][1]["errors"] == ["Value must be at most 100"]
    assert ConfigurationService.get_value("max_course_capacity") == 80


def test_bulk_update_requires_key_and_value(admin_id):
    with pytest.raises(ValidationError) as excinfo:
        ConfigurationService.bulk_update([{"key": "site_name"}, {"value": 1}], admin_id)

    assert len(excinfo.value.errors) == 2


def test_every_mutation_is_recorded_in_history(admin_id):
    ConfigurationService.update("site_name", {"value": "Campus"}, admin_id)
    ConfigurationService.reset("site_name", admin_id)

    history = ConfigurationService.get_history("site_name")

    assert sorted(h["action"] for h in history) == ["reset", "update"]
    assert {h["version"] for h in history} == {2, 3}
    assert all(h["modifiedBy"] == str(admin_id) for h in history)


def test_delete_removes_entry(admin_id, mongo_db):
    ConfigurationService.delete("site_description", admin_id)

    assert mongo_db.configurations.find_one({"key": "site_description"}) is None
    with pytest.raises(NotFoundError):
        ConfigurationService.get_by_key("site_description")


def test_export_rows_flatten_values_and_modifier(admin_id):
    rows = ConfigurationService.export_rows("file_upload")

    allowed = next(r for r in rows if r["key"] == "allowed_file_types")
    assert allowed["value"].startswith('["pdf"')
    assert allowed["lastModifiedBy"] == "Ada Admin"
