"""Logging setup shared by the CLI and the engine."""
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including any `extra=` fields."""

    # Attributes every LogRecord carries; anything else came in through `extra`.
    _RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in self._RESERVED and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_type: str = "json",
    enabled: bool = True
) -> None:
    """Route root logging to stderr (and optionally a file).

    Diagnostics go to stderr so command output on stdout stays clean.
    """
    if not enabled:
        logging.disable(logging.CRITICAL)
        return
    logging.disable(logging.NOTSET)

    formatter = JsonFormatter() if format_type == "json" else logging.Formatter(TEXT_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
