"""Tests for runtime settings and startup validation."""

import logging
from dataclasses import replace
from pathlib import Path

from rolebot.config.settings import RoleBotSettings
from rolebot.config.validation import validate_and_setup_directories

ENV_VARS = [
    "ROLEBOT_DISCORD_TOKEN",
    "ROLEBOT_TESTING_GUILD_ID",
    "ROLEBOT_MONGODB_URI",
    "ROLEBOT_MONGODB_DATABASE",
    "ROLEBOT_DATA_DIR",
    "ROLEBOT_STATE_FILE",
    "ROLEBOT_LOG_LEVEL",
]


class TestFromEnvironment:
    """Tests for RoleBotSettings.from_environment."""

    def test_defaults(self, monkeypatch):
        for var in ENV_VARS:
            monkeypatch.delenv(var, raising=False)

        settings = RoleBotSettings.from_environment()

        assert settings.discord_token is None
        assert settings.mongodb_uri is None
        assert not settings.uses_mongodb
        assert settings.mongodb_database == "rolebot"
        assert settings.state_file == Path("data/state/role_menus.json")
        assert settings.state_dir == Path("data/state")
        assert settings.log_level == logging.INFO

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ROLEBOT_DISCORD_TOKEN", "token")
        monkeypatch.setenv("ROLEBOT_TESTING_GUILD_ID", "123")
        monkeypatch.setenv("ROLEBOT_MONGODB_URI", "mongodb://db:27017")
        monkeypatch.setenv("ROLEBOT_MONGODB_DATABASE", "roles")
        monkeypatch.setenv("ROLEBOT_STATE_FILE", "/srv/rolebot/menus.json")
        monkeypatch.setenv("ROLEBOT_LOG_LEVEL", "debug")

        settings = RoleBotSettings.from_environment()

        assert settings.discord_token == "token"
        assert settings.testing_guild == "123"
        assert settings.uses_mongodb
        assert settings.mongodb_database == "roles"
        assert settings.state_dir == Path("/srv/rolebot")
        assert settings.log_level == logging.DEBUG

    def test_empty_mongodb_uri_means_json_store(self, monkeypatch):
        monkeypatch.setenv("ROLEBOT_MONGODB_URI", "")
        assert not RoleBotSettings.from_environment().uses_mongodb

    def test_unknown_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("ROLEBOT_LOG_LEVEL", "LOUD")
        assert RoleBotSettings.from_environment().log_level == logging.INFO


class TestValidate:
    """Tests for settings warnings."""

    def test_warns_about_missing_configuration(self, settings, caplog):
        logger = logging.getLogger("test")
        with caplog.at_level(logging.WARNING):
            replace(settings, discord_token=None).validate(logger)

        assert "ROLEBOT_DISCORD_TOKEN" in caplog.text
        assert "ROLEBOT_MONGODB_URI" in caplog.text


class TestValidateDirectories:
    """Tests for validate_and_setup_directories."""

    def test_creates_state_directory(self, settings):
        assert validate_and_setup_directories(settings) == []
        assert settings.state_dir.is_dir()

    def test_state_file_is_a_directory(self, settings):
        settings.state_file.mkdir(parents=True)
        errors = validate_and_setup_directories(settings)
        assert len(errors) == 1
        assert "not a file" in errors[0]

    def test_nothing_to_check_with_mongodb(self, settings):
        mongo_settings = replace(settings, mongodb_uri="mongodb://db:27017")
        assert validate_and_setup_directories(mongo_settings) == []
        assert not settings.state_dir.exists()
