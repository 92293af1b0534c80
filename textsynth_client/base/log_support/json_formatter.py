"""JSON line formatter for the ``textsynth`` logger."""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

# attributes every LogRecord carries; anything else arrived through ``extra=``
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Messages that are themselves JSON objects (what ``log_event`` writes) are
    merged into the top level instead of being nested as a string.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        text = record.getMessage()
        payload = None
        with contextlib.suppress(ValueError):
            payload = json.loads(text)
        if isinstance(payload, dict):
            line.update(payload)
        else:
            line["msg"] = text
        extras = {
            key: value
            for key, value in vars(record).items()
            if not key.startswith("_") and key not in _RESERVED and key not in line
        }
        line.update(extras)
        return json.dumps(line, ensure_ascii=False, default=repr)


__all__ = ["JsonFormatter", "ISO"]
