"""Configuration loading tests."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from primavera import FlowConfig, configure, load_config
from primavera.config import ENV_LOG_LEVEL, ENV_PLACEHOLDER_MARKER, ENV_PUBLISH_EVENTS
from primavera.logging import get_logger


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (ENV_LOG_LEVEL, ENV_PLACEHOLDER_MARKER, ENV_PUBLISH_EVENTS):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFlowConfig:
    """Tests for the FlowConfig model."""

    def test_defaults(self):
        config = FlowConfig()

        assert config.placeholder_marker == "$data"
        assert config.log_level == "info"
        assert config.publish_events is True

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            FlowConfig(log_level="verbose")

    def test_empty_marker_rejected(self):
        with pytest.raises(ValidationError):
            FlowConfig(placeholder_marker="")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            FlowConfig(unknown=True)


class TestLoadConfig:
    """Tests for environment-driven loading."""

    def test_defaults_without_env(self, clean_env):
        assert load_config() == FlowConfig()

    def test_reads_env(self, clean_env):
        clean_env.setenv(ENV_PLACEHOLDER_MARKER, "$msg")
        clean_env.setenv(ENV_LOG_LEVEL, "DEBUG")
        clean_env.setenv(ENV_PUBLISH_EVENTS, "no")

        config = load_config()

        assert config.placeholder_marker == "$msg"
        assert config.log_level == "debug"
        assert config.publish_events is False

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_truthy_publish_events(self, clean_env, value):
        clean_env.setenv(ENV_PUBLISH_EVENTS, value)
        assert load_config().publish_events is True

    @pytest.mark.parametrize("value", ["0", "false", "Off"])
    def test_falsy_publish_events(self, clean_env, value):
        clean_env.setenv(ENV_PUBLISH_EVENTS, value)
        assert load_config().publish_events is False

    @pytest.mark.parametrize("value", ["ture", "enabled", ""])
    def test_unreadable_publish_events_rejected(self, clean_env, value):
        clean_env.setenv(ENV_PUBLISH_EVENTS, value)
        with pytest.raises(ValidationError):
            load_config()

    def test_overrides_win(self, clean_env):
        clean_env.setenv(ENV_LOG_LEVEL, "debug")
        assert load_config(log_level="warn").log_level == "warn"

    def test_invalid_env_rejected(self, clean_env):
        clean_env.setenv(ENV_LOG_LEVEL, "loud")
        with pytest.raises(ValidationError):
            load_config()


class TestConfigure:
    """Tests for applying configuration."""

    def test_sets_log_level(self, clean_env):
        configure(FlowConfig(log_level="warn"))
        assert get_logger().level == logging.WARNING

    def test_loads_from_env(self, clean_env):
        clean_env.setenv(ENV_LOG_LEVEL, "error")

        config = configure()

        assert config.log_level == "error"
        assert get_logger().level == logging.ERROR
