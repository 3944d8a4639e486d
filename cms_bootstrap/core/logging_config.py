"""Log setup for the bootstrap process.

Production writes one JSON object per line, carrying the seed context
(``seed_model``, ``seed_path``) passed through ``extra=``. Development
prints the same context inline.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# Attributes the seed services attach through ``extra=``
SEED_FIELDS = ("seed_model", "seed_path")

_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


def _seed_context(record: logging.LogRecord) -> dict[str, str]:
    return {f: getattr(record, f) for f in SEED_FIELDS if hasattr(record, f)}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_seed_context(record),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """``12:00:01 WARNING  cms_bootstrap.services.entry_importer: ... [seed_model=global]``"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _seed_context(record)
        if not context:
            return line
        tags = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{tags}]{sep}{tail}"


def configure_logging(environment: str = "development", level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Replace whatever uvicorn installed before the lifespan started
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter() if environment == "development" else JSONFormatter())
    root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
