"""Lightweight logging helpers for optional structured output."""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Protocol


class Logger(Protocol):
    """Protocol for minimal logger implementations."""

    def debug(self, event: str, **fields: Any) -> None:
        """Emit a ``DEBUG``-level event."""
        ...

    def info(self, event: str, **fields: Any) -> None:
        """Emit an ``INFO``-level event."""
        ...

    def warning(self, event: str, **fields: Any) -> None:
        """Emit a ``WARNING``-level event."""
        ...


class NoopLogger:
    """Logger that discards all events."""

    def debug(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return

    def info(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return

    def warning(self, event: str, **fields: Any) -> None:  # pragma: no cover - noop
        return


class StdLogger:
    """Event logger writing ``level event key=value`` lines or JSON objects."""

    _levels: Dict[str, int] = {"debug": 10, "info": 20, "warning": 30}

    def __init__(
        self,
        level: str = "warning",
        json_fmt: bool = False,
        stream: Any | None = None,
    ) -> None:
        """Initialize the logger.

        Args:
            level: Lowest level that is emitted.
            json_fmt: Emit one JSON object per event instead of plain text.
            stream: Destination stream, ``sys.stderr`` by default.
        """
        self.level = level
        self.json_fmt = json_fmt
        self.stream = stream or sys.stderr

    def _enabled(self, level: str) -> bool:
        return self._levels[level] >= self._levels.get(self.level, 20)

    def log(self, level: str, event: str, **fields: Any) -> None:
        """Emit a log ``event`` at ``level`` with additional ``fields``."""
        if not self._enabled(level):
            return
        if self.json_fmt:
            obj = {"level": level, "event": event}
            obj.update(fields)
            self.stream.write(json.dumps(obj) + "\n")
        else:
            kv = " ".join(f"{k}={v}" for k, v in fields.items())
            msg = f"{level} {event} {kv}".rstrip()
            self.stream.write(msg + "\n")

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)
