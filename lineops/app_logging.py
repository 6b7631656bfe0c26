"""
# path: lineops/app_logging.py

JSON-логи lineops.

ВАЖНО:
- Файл НЕ должен называться logging.py, иначе он перекрывает стандартный модуль `logging`.
- Все логгеры живут под корнем "lineops" (get_logger("lines.lifecycle") -> "lineops.lines.lifecycle"),
  handler ставится один раз на корень.
- Событие пишем dict-ом: log.info({"event": "fault_declared", "fault_id": 1}).
  Строка тоже допустима, она уходит в поле "message".
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Tuple

import orjson


ROOT_LOGGER = "lineops"


class JsonFormatter(logging.Formatter):
    """LogRecord -> одна строка JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }
        payload.update(getattr(record, "context", None) or {})

        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return orjson.dumps(payload, default=str).decode()


class ContextAdapter(logging.LoggerAdapter):
    """Подмешивает постоянный контекст (например, component=...) в каждое событие."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        context = dict(self.extra or {})
        context.update(kwargs.pop("extra", None) or {})
        kwargs["extra"] = {"context": context}
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextAdapter":
        merged = dict(self.extra or {})
        merged.update(context)
        return ContextAdapter(self.logger, merged)


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root


def get_logger(name: str, **context: Any) -> ContextAdapter:
    _configure_root()
    full_name = name if name.startswith(ROOT_LOGGER) else f"{ROOT_LOGGER}.{name}"
    return ContextAdapter(logging.getLogger(full_name), context)
