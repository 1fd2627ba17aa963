"""Unit tests for environment-driven settings."""

import pytest

from health_itemtypes.infrastructure.settings import Settings


class TestSettings:
    """Test Settings."""

    def test_defaults(self, monkeypatch):
        """Test the development defaults."""
        for name in (
            "HIT_APP_NAME", "HIT_LOG_LEVEL", "HIT_LOG_JSON", "HIT_XML_MAX_EVENTS", "HIT_XML_MAX_DEPTH", "HIT_XML_RECORD_TAG"
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.app_name == "health-itemtypes"
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.xml_max_events == 1000000
        assert settings.xml_max_depth == 100
        assert settings.xml_record_tag == "thing"

    def test_environment_overrides(self, monkeypatch):
        """Test that HIT_ variables override the defaults."""
        monkeypatch.setenv("HIT_LOG_JSON", "TRUE")
        monkeypatch.setenv("HIT_XML_MAX_DEPTH", "20")
        monkeypatch.setenv("HIT_XML_RECORD_TAG", "item")

        settings = Settings()

        assert settings.log_json is True
        assert settings.xml_max_depth == 20
        assert settings.xml_record_tag == "item"

    @pytest.mark.parametrize("name, value", [
        ("HIT_XML_MAX_EVENTS", "0"),
        ("HIT_XML_MAX_DEPTH", "-1"),
        ("HIT_XML_RECORD_TAG", "  "),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        """Test that invalid limits are rejected."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError, match=name):
            Settings()
