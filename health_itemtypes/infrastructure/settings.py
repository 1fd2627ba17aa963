"""Application Settings and Configuration.

Settings are read from environment variables (prefix ``HIT_``) with defaults
suitable for development. Only adapters and logging consult settings; the
domain records never do.

Security Impact:
    - XML streaming limits default to conservative values
    - Settings are validated before use
"""

import os

# Application metadata
APP_NAME = "health-itemtypes"
APP_VERSION = "1.0.0"

# Defaults for the secure streaming parser
DEFAULT_XML_MAX_EVENTS = 1000000
DEFAULT_XML_MAX_DEPTH = 100
DEFAULT_XML_RECORD_TAG = "thing"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings loaded from the environment.

    Example:
        ```python
        from health_itemtypes.infrastructure.settings import settings
        parser = StreamingXMLParser(max_events=settings.xml_max_events)
        ```
    """

    def __init__(self):
        """Initialize settings from environment."""
        self.app_name = os.getenv("HIT_APP_NAME", APP_NAME)

        # Logging
        self.log_level = os.getenv("HIT_LOG_LEVEL", "INFO")
        self.log_json = _env_bool("HIT_LOG_JSON", "false")

        # XML streaming settings
        self.xml_max_events = int(os.getenv("HIT_XML_MAX_EVENTS", str(DEFAULT_XML_MAX_EVENTS)))
        self.xml_max_depth = int(os.getenv("HIT_XML_MAX_DEPTH", str(DEFAULT_XML_MAX_DEPTH)))
        self.xml_record_tag = os.getenv("HIT_XML_RECORD_TAG", DEFAULT_XML_RECORD_TAG)

        self.validate()

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a limit is not positive or the record tag is empty
        """
        if self.xml_max_events <= 0:
            raise ValueError(f"HIT_XML_MAX_EVENTS must be positive, got {self.xml_max_events}")
        if self.xml_max_depth <= 0:
            raise ValueError(f"HIT_XML_MAX_DEPTH must be positive, got {self.xml_max_depth}")
        if not self.xml_record_tag.strip():
            raise ValueError("HIT_XML_RECORD_TAG cannot be empty")


# Global settings instance
settings = Settings()
