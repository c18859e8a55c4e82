"""
Logging setup: readable console output plus rotating JSON files.

``logs/slotbook.log`` gets everything at DEBUG, ``logs/errors.log`` only
ERROR and above. Scheduling context passed through ``extra`` (customer,
provider, appointment and job ids) is kept as top-level JSON keys.
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from core.config import settings

CONTEXT_FIELDS = (
    "customer_id",
    "provider_id",
    "appointment_id",
    "job_key",
    "job_id",
)

QUIET_LOGGERS = ("asyncio", "sqlalchemy", "arq", "redis")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def _rotating_json_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(log_dir: Path | str = "logs"):
    """Replace root handlers with console, slotbook.log and errors.log."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(console)
    root.addHandler(_rotating_json_handler(log_dir / "slotbook.log", logging.DEBUG))
    root.addHandler(_rotating_json_handler(log_dir / "errors.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging to {log_dir.absolute()} at {settings.log_level}")
