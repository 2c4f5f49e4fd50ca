# tests/test_configuration_client.py

from unittest.mock import MagicMock

import pytest
import requests

from edumanage.client.configuration_client import ConfigurationClient, ConfigurationSnapshot
from edumanage.config.defaults import public_defaults


def make_session(payload=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


def test_refresh_fetches_public_projection():
    session = make_session({"site_name": "Campus", "maintenance_mode": True})

    client = ConfigurationClient("http://api.local/", session=session)

    session.get.assert_called_once_with("http://api.local/api/configurations/public", timeout=10)
    assert client.loading is False
    assert client.snapshot.is_fallback is False
    assert client.snapshot.error is None
    assert client.snapshot.get_config("site_name") == "Campus"
    assert client.snapshot.is_maintenance_mode() is True


def test_failure_yields_seed_defaults():
    session = make_session(error=requests.ConnectionError("refused"))

    snapshot = ConfigurationClient("http://api.local", session=session).snapshot

    assert snapshot.is_fallback is True
    assert "refused" in snapshot.error
    assert dict(snapshot.values) == public_defaults()
    assert "session_timeout" not in snapshot.values


def test_http_error_status_yields_fallback():
    session = make_session({})
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("500")

    assert ConfigurationClient("http://api.local", session=session).snapshot.is_fallback


def test_non_object_payload_yields_fallback():
    session = make_session(["not", "a", "map"])

    assert ConfigurationClient("http://api.local", session=session).snapshot.is_fallback


def test_loading_state_before_first_refresh():
    client = ConfigurationClient("http://api.local", session=make_session({}), autoload=False)

    assert client.snapshot.loading is True
    assert dict(client.snapshot.values) == {}


def test_snapshot_is_read_only():
    snapshot = ConfigurationSnapshot({"site_name": "Campus"})

    with pytest.raises(TypeError):
        snapshot.values["site_name"] = "Other"


def test_get_config_fallback_on_missing_or_none():
    snapshot = ConfigurationSnapshot({"a": None, "b": 0})

    assert snapshot.get_config("a", "x") == "x"
    assert snapshot.get_config("missing", "x") == "x"
    assert snapshot.get_config("b", "x") == 0
    assert snapshot.get_configs(["b", "missing"]) == {"b": 0, "missing": None}


def test_grouped_getters_fall_back_per_key():
    snapshot = ConfigurationSnapshot({"max_file_size": 5 * 1024 * 1024 + 600 * 1024,
                                      "student_registration_open": False})

    upload = snapshot.get_file_upload_config()
    assert upload["max_size_mb"] == 6
    assert "pdf" in upload["allowed_types"]
    assert snapshot.is_registration_open("student") is False
    assert snapshot.is_registration_open("instructor") is True
    assert snapshot.is_registration_open("admin") is False
    assert snapshot.get_site_config() == {"name": "EduManage",
                                          "description": "Comprehensive Course Management System"}
    assert snapshot.get_assignment_config() == {"late_penalty": 10, "auto_grade": False}
    assert snapshot.get_security_config() == {"password_min_length": 8}
    assert snapshot.get_theme_config()["primary_color"] == "#3B82F6"


def test_max_size_mb_rounds_half_up():
    snapshot = ConfigurationSnapshot({"max_file_size": int(2.5 * 1024 * 1024)})

    assert snapshot.get_file_upload_config()["max_size_mb"] == 3


def test_unexpected_session_error_yields_fallback():
    session = make_session(error=RuntimeError("adapter exploded"))

    snapshot = ConfigurationClient("http://api.local", session=session).snapshot

    assert snapshot.is_fallback is True
    assert snapshot.error == "adapter exploded"
