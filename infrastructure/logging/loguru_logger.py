# infrastructure/logging/loguru_logger.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

from loguru import logger

from application.ports.logger import LoggerPort


@dataclass(frozen=True)
class LoguruLogger(LoggerPort):
    """
    LoggerPort over loguru. Bound fields go to loguru's `extra`, the message is
    `<event> <json fields>` so console output stays greppable.
    """
    bound: Dict[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> "LoguruLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return LoguruLogger(bound=merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("ERROR", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        message = f"{event} {json.dumps(payload, ensure_ascii=False, default=str)}"
        # {} を含むJSONがformat扱いされないよう opt(raw) ではなく引数で渡す
        logger.bind(event=event, **self.bound).log(level, "{}", message)
