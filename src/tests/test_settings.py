import json

import pytest
from pydantic import ValidationError

from informarr.settings.manager import SettingsManager
from informarr.settings.models import AppModel, ArrInstanceModel
from informarr.utils import generate_api_key


def test_defaults():
    settings = AppModel()

    assert settings.resync_interval == 1800
    assert settings.sonarr == []
    assert settings.radarr == []
    assert settings.notifications.enabled is False
    assert len(settings.api_key) == 32


def test_api_key_taken_from_prefixed_env(monkeypatch):
    key = "k" * 32
    monkeypatch.setenv("INFORMARR_API_KEY", key)
    monkeypatch.setenv("API_KEY", "x" * 32)

    assert generate_api_key() == key
    assert AppModel().api_key == key


def test_short_env_api_key_is_replaced(monkeypatch):
    monkeypatch.setenv("INFORMARR_API_KEY", "short")

    key = generate_api_key()

    assert key != "short"
    assert len(key) == 32


def test_resync_interval_has_a_floor():
    with pytest.raises(ValidationError):
        AppModel(resync_interval=10)


def test_urls_are_validated_and_trimmed():
    assert ArrInstanceModel(url="http://sonarr:8989/", api_key="k").url == "http://sonarr:8989"

    with pytest.raises(ValidationError):
        ArrInstanceModel(url="sonarr:8989", api_key="k")


def test_environment_overrides_nested_settings(monkeypatch):
    monkeypatch.setenv("INFORMARR_SEERR_URL", "http://seerr.lan:5055")
    monkeypatch.setenv("INFORMARR_RESYNC_INTERVAL", "600")

    manager = SettingsManager()
    checked = manager.check_environment(AppModel().model_dump(), "INFORMARR")

    assert checked["seerr"]["url"] == "http://seerr.lan:5055"
    assert AppModel.model_validate(checked).resync_interval == 600


def test_save_and_load_roundtrip(tmp_path, monkeypatch):
    manager = SettingsManager()
    manager.settings_file = tmp_path / "settings.json"
    manager.settings.sonarr = [ArrInstanceModel(url="http://sonarr:8989", api_key="abc")]

    manager.save()
    stored = json.loads(manager.settings_file.read_text())
    manager.settings = AppModel()
    manager.load()

    assert stored["sonarr"] == [{"url": "http://sonarr:8989", "api_key": "abc"}]
    assert manager.settings.sonarr[0].api_key == "abc"
