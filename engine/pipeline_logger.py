"""
engine/pipeline_logger.py — Component-scoped logging for Lumina.

Every record carries the emitting component plus optional layout context
(slide, element, strategy...). Context is bound once with ``bind()`` and
rendered in front of the message, so call sites never format ids by hand.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from loguru import logger

from config import LOG_DIR

_CONSOLE = (
    "<green>{time:HH:mm:ss}</green> | <level>{level:<8}</level> | "
    "<cyan>{extra[component]:<16}</cyan> | "
)
_FILE = "{time:YYYY-MM-DDTHH:mm:ss.SSS} | {level} | {extra[component]} | "

_configured = False


def _with_scope(prefix: str):
    def fmt(record: Dict[str, Any]) -> str:
        scope = " ".join(f"{k}={v}" for k, v in record["extra"].get("scope", {}).items())
        record["extra"]["scope_text"] = scope
        middle = "<magenta>{extra[scope_text]}</magenta> | " if scope else ""
        return prefix + middle + "{message}\n{exception}"

    return fmt


def configure_logging() -> None:
    """Install the console and daily audit-file sinks once per process."""
    global _configured
    if _configured:
        return
    logger.remove()
    logger.add(sys.stderr, format=_with_scope(_CONSOLE), level="INFO", colorize=True)
    logger.add(
        str(LOG_DIR / "lumina_{time:YYYY-MM-DD}.log"),
        format=_with_scope(_FILE),
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
    )
    _configured = True


class PipelineLogger:
    """Logger for one component, optionally narrowed to a slide or element."""

    def __init__(self, component: str, **scope: Any) -> None:
        configure_logging()
        self.component = component
        self.scope: Dict[str, Any] = dict(scope)
        self._logger = logger.bind(component=component, scope=self.scope)

    def bind(self, **scope: Any) -> PipelineLogger:
        """Child logger with extra context, e.g. ``bind(slide=s.id)``."""
        return PipelineLogger(self.component, **{**self.scope, **scope})

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def action(self, action: str, detail: str = "") -> None:
        self.info(f"ACTION: {action} | {detail}" if detail else f"ACTION: {action}")

    def decision(self, decision: str, reason: str = "") -> None:
        self.info(f"DECISION: {decision} | Reason: {reason}" if reason else f"DECISION: {decision}")

    @contextmanager
    def timed(self, step: str) -> Iterator[PipelineLogger]:
        """Log how long ``step`` took; failures are logged and re-raised."""
        started = time.perf_counter()
        self.debug(f"{step} started")
        try:
            yield self
        except Exception as e:
            self.error(f"{step} failed after {time.perf_counter() - started:.2f}s: {e}")
            raise
        self.info(f"{step} done in {time.perf_counter() - started:.2f}s")
