# infrastructure/logging/console_logger.py
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, TextIO

from application.ports.logger import LoggerPort
from application.services.redactor import mask_dict

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


@dataclass(frozen=True)
class ConsoleLogger(LoggerPort):
    """
    One JSON line per event: `<event> {"type": ..., "level": ..., ...}`.

    Top-level fields named like credentials (password, otp, csrf headers...) are
    masked before printing. Events below `min_level` are dropped.
    """
    bound: Dict[str, Any] = field(default_factory=dict)
    min_level: str = "debug"
    stream: Optional[TextIO] = None

    def bind(self, **fields: Any) -> "ConsoleLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return replace(self, bound=merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _enabled(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS.get(self.min_level.lower(), LEVELS["debug"])

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        if not self._enabled(level):
            return
        payload = dict(self.bound)
        payload.update(fields)
        payload = mask_dict(payload)
        payload.setdefault("type", event)
        payload.setdefault("level", level)
        # stream未指定時は呼び出し時点の sys.stdout（capsys 差し替えに追従）
        out = self.stream or sys.stdout
        print(f"{event} {json.dumps(payload, ensure_ascii=False, default=str)}", file=out)
