# tests/core/test_config_management.py
import json

import pytest

from mirror.core.managers.config_manager import ConfigManager
from mirror.core.utils.path_utils import PathUtils
from mirror.model import ProxySettings

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080
    },
    "session": {
        "time_out": 12
    },
    "debug": {
        "level": "WARNING"
    }
}


@pytest.fixture
def config_env(tmp_path):
    """
    Zet een geïsoleerde testomgeving op voor de ConfigManager:
    een nep 'settings.json' in een tijdelijke map.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    return ConfigManager(settings_file=settings_file), settings_file


def test_config_manager_load(config_env):
    manager, _ = config_env
    assert manager.get_nested("debug.level") == "WARNING"
    assert manager.get_nested("server.port") == 8080


def test_default_location_comes_from_path_utils(tmp_path, monkeypatch):
    """Zonder expliciet pad leest de manager het bestand waar PathUtils naar wijst."""
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    manager = ConfigManager()
    assert manager.settings_file == settings_file
    assert manager.get_nested("session.time_out") == 12


def test_config_manager_get_nested(config_env):
    manager, _ = config_env
    assert manager.get_nested("session.time_out") == 12
    assert manager.get_nested("non.existent.key", "default") == "default"
    assert manager.get_nested("server.port.deeper", "x") == "x"


def test_override_wins_over_file(config_env):
    manager, _ = config_env

    manager.set_nested("debug.level", "INFO")
    assert manager.get_nested("debug.level") == "INFO"

    # Waarden worden opgeslagen zoals gegeven, er wordt niets geconverteerd
    manager.set_nested("server.port", 9000)
    assert manager.get_nested("server.port") == 9000

    # Buren van een overschreven sleutel komen nog steeds uit het bestand
    assert manager.get_nested("server.host") == "0.0.0.0"


def test_override_of_unknown_key(config_env):
    manager, _ = config_env
    manager.set_nested("user_agent.value", "TestAgent/1.0")
    assert manager.get_nested("user_agent.value") == "TestAgent/1.0"


def test_overrides_never_touch_the_file(config_env):
    manager, settings_file = config_env
    manager.set_nested("debug.level", "DEBUG")
    assert json.loads(settings_file.read_text()) == MOCK_SETTINGS_CONTENT


def test_config_manager_reset(config_env):
    manager, settings_file = config_env
    manager.set_nested("debug.level", "DEBUG")

    # reset() gooit de overrides weg en leest het bestand opnieuw in
    settings_file.write_text(json.dumps({"debug": {"level": "ERROR"}}))
    manager.reset()
    assert manager.get_nested("debug.level") == "ERROR"
    assert manager.get_nested("server.port") is None


def test_missing_settings_file_gives_defaults(tmp_path):
    manager = ConfigManager(settings_file=tmp_path / "missing.json")
    assert manager.get_nested("server.port") is None
    assert ProxySettings.from_config(manager) == ProxySettings()


@pytest.mark.parametrize("content", ["{ not json", "[1, 2, 3]"])
def test_unusable_settings_file_gives_defaults(tmp_path, content):
    broken = tmp_path / "settings.json"
    broken.write_text(content)
    manager = ConfigManager(settings_file=broken)
    assert manager.get_nested("debug.level", "INFO") == "INFO"
    assert ProxySettings.from_config(manager) == ProxySettings()


def test_proxy_settings_from_config(config_env):
    manager, _ = config_env
    settings = ProxySettings.from_config(manager)

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.time_out == 12.0
    # Ontbrekende sleutels vallen terug op de standaardwaarde
    assert settings.client_read_timeout == 15.0
    assert settings.log_level == "WARNING"
    assert settings.session_config() == {"session": {"time_out": 12.0, "client_read_timeout": 15.0}}


def test_proxy_settings_follow_cli_overrides(config_env):
    manager, _ = config_env
    manager.set_nested("server.port", 5050)
    manager.set_nested("debug.level", "DEBUG")

    settings = ProxySettings.from_config(manager)
    assert settings.port == 5050
    assert settings.log_level == "DEBUG"
