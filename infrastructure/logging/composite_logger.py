# infrastructure/logging/composite_logger.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from application.ports.logger import LoggerPort


@dataclass(frozen=True)
class CompositeLogger(LoggerPort):
    """
    Fans every event out to all inner loggers. A failing sink does not keep the
    event from the others; the first failure is re-raised once all were tried.
    """
    loggers: List[LoggerPort]

    def bind(self, **fields: Any) -> "CompositeLogger":
        return CompositeLogger([logger.bind(**fields) for logger in self.loggers])

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _emit(self, level: str, event: str, fields: dict[str, Any]) -> None:
        first_failure: Optional[Exception] = None
        for logger in self.loggers:
            try:
                getattr(logger, level)(event, **fields)
            except Exception as exc:
                if first_failure is None:
                    first_failure = exc
        if first_failure is not None:
            raise first_failure
