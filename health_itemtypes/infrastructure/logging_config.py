"""Logging configuration.

Library modules only create loggers (``logging.getLogger(__name__)``); an
application calls ``setup_logging`` once to decide where records go and how
they look. JSON lines are meant for log shippers, the text format for a
terminal.

Security Impact:
    - Record payloads are never logged, only element names and fault types
    - Context passed through ``extra=`` (source, record index, thing id) is
      kept as separate JSON keys instead of being folded into the message
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from health_itemtypes.infrastructure.settings import settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
TEXT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Attributes every LogRecord carries; anything else was passed via ``extra``
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Renders each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in entry
        )

        return json.dumps(entry, default=str)


def _build_formatter(use_json: bool) -> logging.Formatter:
    if use_json:
        return StructuredFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def setup_logging(use_json: Optional[bool] = None, log_level: Optional[str] = None) -> None:
    """Route all logging to stdout with the chosen format.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters:
        use_json: Emit JSON lines (defaults to HIT_LOG_JSON)
        log_level: Level name such as "DEBUG" (defaults to HIT_LOG_LEVEL);
            unknown names fall back to INFO
    """
    if use_json is None:
        use_json = settings.log_json
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(use_json))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
