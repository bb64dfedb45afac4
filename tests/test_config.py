import json

import pytest
from pydantic import ValidationError

from bucketstore.config import Settings, validate_settings
from bucketstore.models import UserData
from tests.tools import bucketstore_settings


def test_users_from_environment(monkeypatch):
    users = {"user1": {"key": "mysecret", "folder": "user1"}, "other": {"key": "k", "folder": "other-home"}}
    monkeypatch.setenv("BUCKETSTORE_USERS", json.dumps(users))
    monkeypatch.setenv("BUCKETSTORE_STORAGE_FOLDER", "/srv/files")
    monkeypatch.setenv("BUCKETSTORE_PORT", "9000")
    settings = Settings()
    assert settings.users == {
        "user1": UserData(key="mysecret", folder="user1"),
        "other": UserData(key="k", folder="other-home"),
    }
    assert str(settings.storage_folder) == "/srv/files"
    assert settings.port == 9000


def test_folder_names():
    for folder in ["user1", "home_2", "a-b", "a.b"]:
        assert UserData(key="k", folder=folder).folder == folder
    for folder in ["", ".", "..", ".hidden", "a/b", "../a", "a\\b", "/abs"]:
        with pytest.raises(ValidationError):
            UserData(key="k", folder=folder)


def test_empty_key():
    with pytest.raises(ValidationError):
        UserData(key="", folder="user1")


def test_validate_settings():
    assert validate_settings() is None
    with bucketstore_settings(users={}):
        assert "no users" in validate_settings().lower()
    with bucketstore_settings(default_user="someone"):
        assert "someone" in validate_settings()


def test_reserved_username(monkeypatch):
    users = {"delete": {"key": "k", "folder": "delete"}}
    monkeypatch.setenv("BUCKETSTORE_USERS", json.dumps(users))
    with pytest.raises(ValidationError, match="reserved"):
        Settings()
