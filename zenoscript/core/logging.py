"""
Structured logging configuration.

Library modules only create loggers; handlers are installed by the command
line through :func:`setup_logging`. Records logged through a
:class:`StageLoggerAdapter` carry the name of the pipeline stage that
produced them, which the JSON formatter emits as a top-level field.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import settings


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        log_data.update(getattr(record, "extra_data", {}))
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


class TextFormatter(logging.Formatter):
    """Human-readable text log formatter"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure application logging.

    Args:
        level: Level name overriding ``settings.LOG_LEVEL``
        fmt: ``"json"`` or ``"text"``, overriding ``settings.LOG_FORMAT``
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.WARNING)
    formatter: logging.Formatter
    if (fmt or settings.LOG_FORMAT) == "json":
        formatter = StructuredFormatter()
    else:
        formatter = TextFormatter()

    # stdout is reserved for generated TypeScript
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
    logging.basicConfig(level=log_level, handlers=handlers, force=True)


class StageLoggerAdapter(logging.LoggerAdapter):
    """Attach the stage name, plus any per-call ``extra_data``, to each record"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra_data = {**self.extra, **kwargs.pop("extra_data", {})}
        kwargs.setdefault("extra", {})["extra_data"] = extra_data
        return msg, kwargs


def get_stage_logger(name: str, stage: str) -> StageLoggerAdapter:
    """Logger whose records name the pipeline ``stage``."""
    return StageLoggerAdapter(logging.getLogger(name), {"stage": stage})
