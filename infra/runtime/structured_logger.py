from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

_LEVELS = {"info": 20, "warning": 30, "error": 40}


class StructuredLogger:
    """JSON-lines logger.

    Writes to stderr by default so CLI answers on stdout stay clean. Field
    values that JSON cannot encode (datetimes, enums) are rendered with
    ``str``.
    """

    def __init__(self, *, stream: TextIO | None = None, min_level: str = "info") -> None:
        self._stream = stream
        self._min_level = _LEVELS[min_level]

    def info(self, message: str, **fields: Any) -> None:
        self._emit("info", message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit("warning", message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit("error", message, fields)

    def _emit(self, level: str, message: str, fields: dict[str, Any]) -> None:
        if _LEVELS[level] < self._min_level:
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "message": message,
            "fields": fields,
        }
        print(json.dumps(payload, sort_keys=True, default=str), file=self._stream or sys.stderr)
