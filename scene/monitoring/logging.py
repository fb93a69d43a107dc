"""Logging setup with context injection.

Features:
- console handler (stderr, so generated output on stdout stays clean)
- optional log file
- JSON logs optional
- context injection (run_id/source_id/stage) through a LoggerAdapter
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONTEXT_FIELDS = ("run_id", "source_id", "stage")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            base["payload"] = payload

        return json.dumps(base, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]

        ctx = []
        for k in CONTEXT_FIELDS:
            value = getattr(record, k, None)
            if value:
                ctx.append(f"{k.replace('_id', '')}={value}")
        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    """Configure logging behavior for CLI runs."""

    level: str = "INFO"
    json_logs: bool = False
    log_file: Path | None = None
    enable_console: bool = True


def setup_logging(options: LoggingOptions | None = None) -> logging.Logger:
    """
    Configure the root logger once per process.

    Calling it again replaces the handlers it installed earlier, so the
    CLI can be re-entered (tests) without duplicating output.
    """
    options = options or LoggingOptions()
    root = logging.getLogger()
    level = getattr(logging, options.level.upper(), logging.INFO)
    root.setLevel(level)

    for h in list(root.handlers):
        if getattr(h, "_scene_handler", False):
            root.removeHandler(h)
            h.close()

    fmt = JsonFormatter() if options.json_logs else TextFormatter()

    if options.enable_console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(fmt)
        ch._scene_handler = True
        root.addHandler(ch)

    if options.log_file:
        path = Path(options.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        fh._scene_handler = True
        root.addHandler(fh)

    return root


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Inject context fields into log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    run_id: str | None = None,
    source_id: str | None = None,
    stage: str | None = None,
) -> ContextAdapter:
    """Create a context adapter with run, source, and stage info."""
    extra: dict[str, Any] = {}
    if run_id:
        extra["run_id"] = run_id
    if source_id:
        extra["source_id"] = source_id
    if stage:
        extra["stage"] = stage
    return ContextAdapter(logger, extra)
