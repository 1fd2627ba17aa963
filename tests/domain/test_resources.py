"""Unit tests for display string resources."""

from datetime import datetime

import pytest

from health_itemtypes import BloodOxygenSaturation
from health_itemtypes.domain import resources
from health_itemtypes.domain.clinical_types import Alert
from health_itemtypes.domain.enums import DayOfWeek


@pytest.fixture(autouse=True)
def restore_default_provider():
    yield
    resources.reset_resource_provider()


class TestResources:
    """Test resource lookup and provider replacement."""

    def test_default_strings(self):
        """Test lookup and formatting from the default table."""
        assert resources.get_string("Sunday") == "Sunday"
        assert resources.format_string("Percent", 97) == "97%"

    def test_unknown_key_returns_key(self):
        """Test that an unknown key is returned unchanged."""
        assert resources.get_string("NoSuchKey") == "NoSuchKey"

    def test_custom_provider_with_fallback(self):
        """Test that an installed provider wins and missing keys fall back."""
        resources.set_resource_provider({"Percent": "{0} %", "Sunday": "Sonntag"})

        record = BloodOxygenSaturation(when=datetime(2024, 1, 1), value=0.5)
        alert = Alert(days_of_week=[DayOfWeek.SUNDAY, DayOfWeek.MONDAY])

        assert str(record) == "50 %"
        assert str(alert) == "Sonntag, Monday at "

    def test_reset(self):
        """Test that resetting restores the default table."""
        resources.set_resource_provider({"Percent": "{0} pct"})
        resources.reset_resource_provider()

        assert resources.format_string("Percent", 5) == "5%"

    def test_every_default_key_formats(self):
        """Test that every default string is a valid format string."""
        for key in resources.DEFAULT_RESOURCES:
            resources.format_string(key, "a", "b", "c")
