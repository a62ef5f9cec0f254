"""Logging setup for syndicate-party.

Service log records may carry the party they concern through
``extra=party_context(...)``. The JSON formatter emits it as a nested
``party`` object; the standard formatter appends it as ``[Company#5 v2]``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s%(party_tag)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("psycopg", "faker")


def party_context(entity_type: str, entity_id: Any, version: int | None = None) -> dict[str, Any]:
    """Build the ``extra`` mapping identifying a party in a log record."""
    party: dict[str, Any] = {"type": entity_type, "id": entity_id}
    if version is not None:
        party["version"] = version
    return {"party": party}


class PartyTagFilter(logging.Filter):
    """Set ``record.party_tag`` so the standard format can always reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        party = getattr(record, "party", None)
        if not party:
            record.party_tag = ""
        elif "version" in party:
            record.party_tag = f" [{party['type']}#{party['id']} v{party['version']}]"
        else:
            record.party_tag = f" [{party['type']}#{party['id']}]"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        party = getattr(record, "party", None)
        if party:
            log_data["party"] = party
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
    """Configure the root logger for scripts and services.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` (pipe-delimited) or ``"json"``.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(PartyTagFilter())
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    logging.getLogger("syndicate_party").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
