"""Single-line JSON logs for the API and the CLI.

Every entry carries the service name and, when the record was logged
with ``extra=``, the pipeline fields listed in ``PIPELINE_FIELDS``.
Records logged with a ``PipelineError`` attached fill in ``kind`` and
``stage`` from the exception itself.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from cvfit.core.errors import PipelineError

SERVICE_NAME = "cvfit"
PIPELINE_FIELDS = ("stage", "kind", "chars", "latency_ms", "status_code")

# httpx logs every request line (job URLs included) at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in PIPELINE_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)

        if record.exc_info and record.exc_info[0] is not None:
            exc = record.exc_info[1]
            if isinstance(exc, PipelineError):
                entry.setdefault("kind", exc.kind.value)
                if exc.stage is not None:
                    entry.setdefault("stage", exc.stage)
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout through :class:`JSONFormatter`."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
